# Copyright 2026 PetitionOps
# SPDX-License-Identifier: MIT
"""Per-session selection isolation for the HTTP API.

One SelectionState per session key. The lock only guards the session map; each
SelectionState is still single-writer (its session). Sessions live in memory and
vanish on restart.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections import OrderedDict
from typing import Iterable, Optional, Union

from petitionops.core.catalog.models import VisaCategory
from petitionops.core.catalog.registry import VisaCatalog, get_catalog
from petitionops.core.selection.selection_state import (
    DEFAULT_EB1A_SEED,
    SelectionState,
    ToggleResult,
    UnknownCriterionError,
)

logger = logging.getLogger(__name__)

UNKNOWN_SESSION = "UNKNOWN_SESSION"


class UnknownSessionError(KeyError):
    """Raised when a session id is not (or no longer) in the store."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        self.reason_code = UNKNOWN_SESSION
        super().__init__(f"Unknown selection session: {session_id!r}")


class SelectionSessionStore:
    """Thread-safe map session_id -> SelectionState, oldest evicted past max_sessions."""

    def __init__(
        self,
        catalog: Optional[VisaCatalog] = None,
        *,
        clear_on_category_switch: bool = True,
        seed_default: bool = False,
        max_sessions: int = 1000,
    ) -> None:
        self._catalog = catalog or get_catalog()
        self.clear_on_category_switch = clear_on_category_switch
        self.seed_default = seed_default
        self.max_sessions = max(1, max_sessions)
        self._sessions: "OrderedDict[str, SelectionState]" = OrderedDict()
        self._lock = threading.Lock()

    @property
    def catalog(self) -> VisaCatalog:
        return self._catalog

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(
        self,
        category_id: Union[VisaCategory, str],
        selected: Optional[Iterable[str]] = None,
    ) -> tuple[str, SelectionState]:
        """Open a session.

        Raises UnknownCategoryError for ids outside the catalog and
        UnknownCriterionError when the seed names criteria of another category.
        Nothing is stored on either error.
        """
        definition = self._catalog.require(category_id)
        seed = list(selected) if selected is not None else None
        if seed is not None:
            unknown = {c for c in seed if definition.get_criterion(c) is None}
            if unknown:
                logger.warning(
                    "[SESSIONS] Rejected seed for %s: unknown criteria %s",
                    definition.category.value,
                    sorted(unknown),
                )
                raise UnknownCriterionError(definition.category, unknown)
        if seed is None and self.seed_default and definition.category == VisaCategory.EB1A:
            seed = DEFAULT_EB1A_SEED
        state = SelectionState(definition, seed)
        session_id = uuid.uuid4().hex
        with self._lock:
            self._sessions[session_id] = state
            while len(self._sessions) > self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info("[SESSIONS] Evicted oldest session %s (max_sessions=%d)", evicted, self.max_sessions)
        logger.debug("[SESSIONS] Created %s for %s", session_id, definition.category.value)
        return session_id, state

    def get(self, session_id: str) -> SelectionState:
        with self._lock:
            state = self._sessions.get(session_id)
        if state is None:
            raise UnknownSessionError(session_id)
        return state

    def toggle(self, session_id: str, criterion_id: str) -> ToggleResult:
        return self.get(session_id).toggle(criterion_id)

    def switch_category(self, session_id: str, category_id: Union[VisaCategory, str]) -> SelectionState:
        """Rebind a session to another category, clearing per clear_on_category_switch."""
        state = self.get(session_id)
        definition = self._catalog.require(category_id)
        if definition.category == state.category:
            return state
        state.rescope(definition, clear=self.clear_on_category_switch)
        return state

    def discard(self, session_id: str) -> None:
        with self._lock:
            removed = self._sessions.pop(session_id, None)
        if removed is None:
            raise UnknownSessionError(session_id)


__all__ = ["SelectionSessionStore", "UNKNOWN_SESSION", "UnknownSessionError"]
