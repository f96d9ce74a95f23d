# Copyright 2026 PetitionOps
# SPDX-License-Identifier: MIT
"""Document checklist and upload-completion metric.

The checklist is static; only the completion ratio is computed. Uses the same
percent() helper as the eligibility progress bar.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Tuple

from petitionops.core.progress import percent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentCategory:
    """A group of supporting documents and how many are expected."""

    name: str
    required: Tuple[str, ...]
    optional: Tuple[str, ...]
    total: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "required": list(self.required),
            "optional": list(self.optional),
            "total": self.total,
        }


DEFAULT_CHECKLIST: Tuple[DocumentCategory, ...] = (
    DocumentCategory("Personal Documents", ("CV/Resume", "Passport Copy"), ("Academic Transcripts",), 3),
    DocumentCategory(
        "Letters of Recommendation",
        ("Expert Opinion Letters (3-5)",),
        ("Additional Reference Letters",),
        5,
    ),
    DocumentCategory("Publications", ("Publication List", "Citation Reports"), ("Full Text of Key Publications",), 4),
    DocumentCategory("Awards & Recognition", ("Award Certificates",), ("Media Coverage", "Recognition Letters"), 3),
    DocumentCategory(
        "Professional Evidence",
        ("Work Portfolio",),
        ("Client Testimonials", "Project Documentation"),
        4,
    ),
)


def completion_report(
    uploaded_counts: Mapping[str, int],
    checklist: Tuple[DocumentCategory, ...] = DEFAULT_CHECKLIST,
) -> Dict[str, Any]:
    """Per-category and overall upload completion.

    Counts above a category's total are capped at the total so one category
    cannot push overall completion past what the checklist expects.
    Names not in the checklist are listed under unknown_categories and not counted.
    """
    known = {c.name for c in checklist}
    unknown = sorted(name for name in uploaded_counts if name not in known)
    if unknown:
        logger.warning("[DOCUMENTS] Ignoring uploads for unknown categories: %s", unknown)

    categories: List[Dict[str, Any]] = []
    overall_uploaded = 0
    overall_total = 0
    for cat in checklist:
        try:
            raw = int(uploaded_counts.get(cat.name, 0) or 0)
        except (TypeError, ValueError):
            raw = 0
        uploaded = max(0, min(raw, cat.total))
        overall_uploaded += uploaded
        overall_total += cat.total
        categories.append({
            "name": cat.name,
            "uploaded": uploaded,
            "total": cat.total,
            "progress_percent": percent(uploaded, cat.total),
        })

    return {
        "uploaded": overall_uploaded,
        "total": overall_total,
        "progress_percent": percent(overall_uploaded, overall_total),
        "categories": categories,
        "unknown_categories": unknown,
    }


__all__ = ["DEFAULT_CHECKLIST", "DocumentCategory", "completion_report"]
