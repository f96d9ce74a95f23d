# Copyright 2026 PetitionOps
# SPDX-License-Identifier: MIT
"""Eligibility evaluator. Pure function of (category definition, selected ids).

Every call recomputes from scratch; nothing is cached or patched incrementally,
so the result depends only on final set membership, never on toggle history.
Ids that are not criteria of the category (stale) are excluded from all counts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from petitionops.core.catalog.models import AllRequiredRule, CategoryDefinition, Criterion, ThresholdRule
from petitionops.core.progress import percent
from petitionops.core.selection.selection_state import SelectionState

logger = logging.getLogger(__name__)

DEGENERATE_CATEGORY = "DEGENERATE_CATEGORY"
THRESHOLD_NOT_MET = "THRESHOLD_NOT_MET"
REQUIRED_MISSING = "REQUIRED_MISSING"

Selection = Union[SelectionState, Iterable[str]]


@dataclass(frozen=True)
class EligibilityResult:
    """Counts, progress and verdict for one (category, selection) pair."""

    category: str
    rule: str
    selected_required_count: int
    selected_optional_count: int
    total_count: int
    total_required_count: int
    min_required: int
    progress_percent: float
    eligible: bool
    shortfall: int
    missing_required: Tuple[str, ...] = ()
    stale_ids: Tuple[str, ...] = ()
    reason_code: Optional[str] = None
    message: str = ""

    @property
    def selected_count(self) -> int:
        return self.selected_required_count + self.selected_optional_count

    def progress_view(self) -> Dict[str, Any]:
        """Progress bar payload."""
        return {
            "selected_count": self.selected_count,
            "total_count": self.total_count,
            "progress_percent": self.progress_percent,
        }

    def gating_view(self) -> Dict[str, Any]:
        """Eligibility gate payload."""
        return {
            "eligible": self.eligible,
            "shortfall": self.shortfall,
            "message": self.message,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "rule": self.rule,
            "selected_required_count": self.selected_required_count,
            "selected_optional_count": self.selected_optional_count,
            "selected_count": self.selected_count,
            "total_count": self.total_count,
            "total_required_count": self.total_required_count,
            "min_required": self.min_required,
            "progress_percent": self.progress_percent,
            "eligible": self.eligible,
            "shortfall": self.shortfall,
            "missing_required": list(self.missing_required),
            "stale_ids": list(self.stale_ids),
            "reason_code": self.reason_code,
            "message": self.message,
        }


def _selected_ids(selection: Selection) -> FrozenSet[str]:
    if isinstance(selection, SelectionState):
        return selection.selected_ids
    return frozenset(selection)


def _message(definition: CategoryDefinition, eligible: bool, shortfall: int, min_required: int) -> str:
    if _is_degenerate(definition):
        return "No criteria are defined for this category"
    if isinstance(definition.rule, AllRequiredRule):
        if eligible:
            return "All required criteria selected"
        return f"Missing {shortfall} required criteria"
    if eligible:
        return f"You meet the minimum requirement ({min_required} criteria)"
    return f"Need {shortfall} more criteria (minimum {min_required} required)"


def _is_degenerate(definition: CategoryDefinition) -> bool:
    # all-required with nothing required would pass on an empty selection
    if not definition.criteria:
        return True
    return isinstance(definition.rule, AllRequiredRule) and not definition.required_criteria


def evaluate(definition: CategoryDefinition, selection: Selection) -> EligibilityResult:
    """Compute counts, progress and eligibility for selection against definition.

    Args:
        definition: Catalog entry of the active category.
        selection: SelectionState or any iterable of criterion ids.

    Returns:
        EligibilityResult. A category with no criteria is never eligible and reports 0% progress.
        An all-required category with no required criteria is never eligible either.
    """
    chosen = _selected_ids(selection)
    required = definition.required_criteria
    optional = definition.optional_criteria
    required_ids = {c.id for c in required}
    optional_ids = {c.id for c in optional}

    selected_required = len(chosen & required_ids)
    selected_optional = len(chosen & optional_ids)
    stale = tuple(sorted(chosen - required_ids - optional_ids))
    total_required = len(required)
    min_required = definition.rule.min_required(total_required)

    progress = percent(selected_optional + selected_required, min_required + total_required)

    rule = definition.rule
    reason_code: Optional[str] = None
    missing = tuple(c.id for c in required if c.id not in chosen)
    if _is_degenerate(definition):
        eligible = False
        shortfall = 0
        reason_code = DEGENERATE_CATEGORY
    elif isinstance(rule, ThresholdRule):
        eligible = rule.is_satisfied(selected_required, total_required, selected_optional)
        shortfall = max(0, min_required - selected_optional)
        if not eligible:
            reason_code = THRESHOLD_NOT_MET
    else:
        eligible = rule.is_satisfied(selected_required, total_required, selected_optional)
        shortfall = len(missing)
        if not eligible:
            reason_code = REQUIRED_MISSING

    if stale:
        logger.debug("[ELIGIBILITY] %s: ignoring stale ids %s", definition.category.value, list(stale))

    result = EligibilityResult(
        category=definition.category.value,
        rule=rule.kind,
        selected_required_count=selected_required,
        selected_optional_count=selected_optional,
        total_count=len(definition.criteria),
        total_required_count=total_required,
        min_required=min_required,
        progress_percent=progress,
        eligible=eligible,
        shortfall=shortfall,
        missing_required=missing,
        stale_ids=stale,
        reason_code=reason_code,
        message=_message(definition, eligible, shortfall, min_required),
    )
    logger.debug(
        "[ELIGIBILITY] %s required=%d/%d optional=%d min=%d progress=%.1f eligible=%s",
        result.category,
        selected_required,
        total_required,
        selected_optional,
        min_required,
        progress,
        eligible,
    )
    return result


def selected_criteria(definition: CategoryDefinition, selection: Selection) -> List[Criterion]:
    """Selected criteria in catalog order, for the review step. Stale ids are skipped."""
    chosen = _selected_ids(selection)
    return [c for c in definition.criteria if c.id in chosen]


__all__ = [
    "DEGENERATE_CATEGORY",
    "EligibilityResult",
    "REQUIRED_MISSING",
    "THRESHOLD_NOT_MET",
    "evaluate",
    "selected_criteria",
]
