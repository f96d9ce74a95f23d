# Copyright 2026 PetitionOps
# SPDX-License-Identifier: MIT
"""Applicant selection state and per-session isolation."""

from petitionops.core.selection.selection_state import (
    DEFAULT_EB1A_SEED,
    UNKNOWN_CRITERION,
    SelectionState,
    ToggleResult,
    UnknownCriterionError,
)
from petitionops.core.selection.session_store import (
    UNKNOWN_SESSION,
    SelectionSessionStore,
    UnknownSessionError,
)

__all__ = [
    "DEFAULT_EB1A_SEED",
    "SelectionSessionStore",
    "SelectionState",
    "ToggleResult",
    "UNKNOWN_CRITERION",
    "UNKNOWN_SESSION",
    "UnknownCriterionError",
    "UnknownSessionError",
]
