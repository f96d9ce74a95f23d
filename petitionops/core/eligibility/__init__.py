# Copyright 2026 PetitionOps
# SPDX-License-Identifier: MIT
"""Eligibility gate: progress and verdict for a category selection."""

from petitionops.core.eligibility.evaluator import (
    DEGENERATE_CATEGORY,
    EligibilityResult,
    evaluate,
    selected_criteria,
)

__all__ = ["DEGENERATE_CATEGORY", "EligibilityResult", "evaluate", "selected_criteria"]
