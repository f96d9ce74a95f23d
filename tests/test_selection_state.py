# Copyright 2026 PetitionOps
# SPDX-License-Identifier: MIT
"""Tests for SelectionState toggles and category rescoping."""

import pytest

from petitionops.core.catalog import get_catalog
from petitionops.core.selection import DEFAULT_EB1A_SEED, UNKNOWN_CRITERION, SelectionState


@pytest.fixture
def eb1a():
    return get_catalog().require("EB-1A")


@pytest.fixture
def niw():
    return get_catalog().require("EB-2 NIW")


class TestToggle:
    """toggle() is a strict membership flip, validated against the category."""

    def test_starts_empty(self, eb1a):
        state = SelectionState(eb1a)
        assert len(state) == 0
        assert state.selected_ids == frozenset()

    def test_toggle_adds_then_removes(self, eb1a):
        state = SelectionState(eb1a)
        first = state.toggle("judging")
        assert first.accepted is True
        assert first.selected is True
        assert state.is_selected("judging")
        second = state.toggle("judging")
        assert second.accepted is True
        assert second.selected is False
        assert "judging" not in state

    def test_unknown_criterion_is_reported_no_op(self, eb1a):
        """Unknown ids are rejected with UNKNOWN_CRITERION and leave the set untouched."""
        state = SelectionState(eb1a, ["judging"])
        result = state.toggle("not-a-criterion")
        assert result.accepted is False
        assert result.reason_code == UNKNOWN_CRITERION
        assert result.selected is False
        assert state.selected_ids == frozenset({"judging"})

    def test_criterion_from_other_category_rejected(self, eb1a):
        """O-1 ids are not EB-1A criteria even though titles overlap."""
        state = SelectionState(eb1a)
        assert state.toggle("judging-o1").accepted is False
        assert len(state) == 0

    def test_seed(self, eb1a):
        state = SelectionState(eb1a, DEFAULT_EB1A_SEED)
        assert state.selected_ids == frozenset({"major-awards", "media-coverage", "judging"})

    def test_selected_ids_is_snapshot(self, eb1a):
        state = SelectionState(eb1a, ["judging"])
        snapshot = state.selected_ids
        state.toggle("membership")
        assert snapshot == frozenset({"judging"})

    def test_clear(self, eb1a):
        state = SelectionState(eb1a, DEFAULT_EB1A_SEED)
        state.clear()
        assert len(state) == 0


class TestRescope:
    """Category switch either clears or leaves stale ids behind."""

    def test_rescope_clears_by_default(self, eb1a, niw):
        state = SelectionState(eb1a, DEFAULT_EB1A_SEED)
        stale = state.rescope(niw)
        assert stale == frozenset()
        assert len(state) == 0
        assert state.category.value == "EB-2 NIW"

    def test_rescope_keep_reports_stale(self, eb1a, niw):
        state = SelectionState(eb1a, ["judging", "membership"])
        stale = state.rescope(niw, clear=False)
        assert stale == frozenset({"judging", "membership"})
        assert state.stale_ids() == stale
        assert state.known_ids() == frozenset()

    def test_stale_ids_cannot_be_toggled_off_in_new_category(self, eb1a, niw):
        """A stale id is unknown to the new category, so toggling it is rejected."""
        state = SelectionState(eb1a, ["judging"])
        state.rescope(niw, clear=False)
        assert state.toggle("judging").accepted is False
        assert "judging" in state
