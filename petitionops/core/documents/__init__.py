# Copyright 2026 PetitionOps
# SPDX-License-Identifier: MIT
"""Document checklist completion."""

from petitionops.core.documents.checklist import DEFAULT_CHECKLIST, DocumentCategory, completion_report

__all__ = ["DEFAULT_CHECKLIST", "DocumentCategory", "completion_report"]
