# Copyright 2026 PetitionOps
# SPDX-License-Identifier: MIT
"""Selection state: the criterion ids an applicant has marked as supported.

A SelectionState is bound to exactly one CategoryDefinition. Toggles are strict
membership flips and are validated against the bound category; ids that do not
belong to it (e.g. left over after a category switch with clear=False) are
"stale" and are never counted by the evaluator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional, Set, Tuple

from petitionops.core.catalog.models import CategoryDefinition, VisaCategory

logger = logging.getLogger(__name__)

UNKNOWN_CRITERION = "UNKNOWN_CRITERION"


# Pre-selection the application screen opens with for EB-1A
DEFAULT_EB1A_SEED: Tuple[str, ...] = ("major-awards", "media-coverage", "judging")


class UnknownCriterionError(ValueError):
    """Raised when a seed names criteria that are not part of the category."""

    def __init__(self, category: VisaCategory, criterion_ids: Iterable[str]) -> None:
        self.category = category
        self.criterion_ids = tuple(sorted(criterion_ids))
        self.reason_code = UNKNOWN_CRITERION
        super().__init__(f"Unknown criteria for {category.value}: {list(self.criterion_ids)}")


@dataclass(frozen=True)
class ToggleResult:
    """Outcome of SelectionState.toggle. accepted=False means nothing changed."""

    criterion_id: str
    accepted: bool
    selected: bool
    reason_code: Optional[str] = None


class SelectionState:
    """Mutable set of selected criterion ids scoped to one visa category."""

    def __init__(self, definition: CategoryDefinition, selected: Optional[Iterable[str]] = None) -> None:
        self._definition = definition
        self._selected: Set[str] = set(selected or ())

    def __repr__(self) -> str:
        return f"SelectionState(category={self.category.value!r}, selected={sorted(self._selected)!r})"

    def __contains__(self, criterion_id: object) -> bool:
        return criterion_id in self._selected

    def __len__(self) -> int:
        return len(self._selected)

    @property
    def definition(self) -> CategoryDefinition:
        return self._definition

    @property
    def category(self) -> VisaCategory:
        return self._definition.category

    @property
    def selected_ids(self) -> FrozenSet[str]:
        """Snapshot of every id in the set, stale ones included."""
        return frozenset(self._selected)

    def is_selected(self, criterion_id: str) -> bool:
        return criterion_id in self._selected

    def known_ids(self) -> FrozenSet[str]:
        valid = set(self._definition.criterion_ids())
        return frozenset(self._selected & valid)

    def stale_ids(self) -> FrozenSet[str]:
        valid = set(self._definition.criterion_ids())
        return frozenset(self._selected - valid)

    def toggle(self, criterion_id: str) -> ToggleResult:
        """Flip membership of criterion_id. Unknown ids are a reported no-op."""
        if self._definition.get_criterion(criterion_id) is None:
            logger.warning(
                "[SELECTION] Rejected toggle of %r: not a criterion of %s",
                criterion_id,
                self.category.value,
            )
            return ToggleResult(
                criterion_id=criterion_id,
                accepted=False,
                selected=criterion_id in self._selected,
                reason_code=UNKNOWN_CRITERION,
            )
        if criterion_id in self._selected:
            self._selected.discard(criterion_id)
            now_selected = False
        else:
            self._selected.add(criterion_id)
            now_selected = True
        logger.debug("[SELECTION] %s %s -> %s", self.category.value, criterion_id, now_selected)
        return ToggleResult(criterion_id=criterion_id, accepted=True, selected=now_selected)

    def clear(self) -> None:
        self._selected.clear()

    def rescope(self, definition: CategoryDefinition, clear: bool = True) -> FrozenSet[str]:
        """Bind to another category. Returns the ids that are stale after the switch."""
        self._definition = definition
        if clear:
            self._selected.clear()
        stale = self.stale_ids()
        if stale:
            logger.info(
                "[SELECTION] %d stale id(s) kept after switching to %s: %s",
                len(stale),
                definition.category.value,
                sorted(stale),
            )
        return stale


__all__ = [
    "DEFAULT_EB1A_SEED",
    "SelectionState",
    "ToggleResult",
    "UNKNOWN_CRITERION",
    "UnknownCriterionError",
]
