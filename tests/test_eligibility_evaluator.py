# Copyright 2026 PetitionOps
# SPDX-License-Identifier: MIT
"""Tests for the eligibility evaluator."""

import itertools
import random

import pytest

from petitionops.core.catalog import (
    AllRequiredRule,
    CategoryDefinition,
    Criterion,
    ThresholdRule,
    VisaCategory,
    get_catalog,
)
from petitionops.core.eligibility import DEGENERATE_CATEGORY, evaluate, selected_criteria
from petitionops.core.eligibility.evaluator import REQUIRED_MISSING, THRESHOLD_NOT_MET
from petitionops.core.selection import SelectionState

NIW_REQUIRED = ["advanced-degree", "substantial-merit", "well-positioned", "beneficial"]


@pytest.fixture
def eb1a():
    return get_catalog().require("EB-1A")


@pytest.fixture
def o1():
    return get_catalog().require("O-1")


@pytest.fixture
def niw():
    return get_catalog().require("EB-2 NIW")


class TestThresholdRule:
    """EB-1A and O-1: at least 3 optional criteria."""

    def test_eb1a_three_selected_is_eligible(self, eb1a):
        result = evaluate(eb1a, {"major-awards", "media-coverage", "judging"})
        assert result.eligible is True
        assert result.selected_optional_count == 3
        assert result.shortfall == 0
        assert result.progress_percent == 100.0
        assert result.reason_code is None
        assert result.message == "You meet the minimum requirement (3 criteria)"

    @pytest.mark.parametrize(
        "pair", list(itertools.combinations(["major-awards", "media-coverage", "judging", "membership"], 2))
    )
    def test_eb1a_two_selected_is_short_by_one(self, eb1a, pair):
        result = evaluate(eb1a, set(pair))
        assert result.eligible is False
        assert result.shortfall == 1
        assert result.reason_code == THRESHOLD_NOT_MET
        assert result.message == "Need 1 more criteria (minimum 3 required)"
        assert result.progress_percent == pytest.approx(200 / 3)

    def test_eb1a_empty(self, eb1a):
        result = evaluate(eb1a, [])
        assert result.eligible is False
        assert result.shortfall == 3
        assert result.progress_percent == 0.0
        assert result.total_count == 10

    def test_more_evidence_never_disqualifies(self, eb1a):
        """Selecting every criterion stays eligible and progress clamps at 100."""
        result = evaluate(eb1a, eb1a.criterion_ids())
        assert result.eligible is True
        assert result.selected_optional_count == 10
        assert result.progress_percent == 100.0

    def test_o1_threshold(self, o1):
        ok = evaluate(o1, {"major-awards-o1", "judging-o1", "high-remuneration"})
        assert ok.eligible is True
        short = evaluate(o1, {"major-awards-o1", "judging-o1"})
        assert short.eligible is False
        assert short.shortfall == 1
        assert short.total_count == 8

    def test_o1_does_not_count_eb1a_ids(self, o1):
        """EB-1A ids are stale in O-1 and are not counted."""
        result = evaluate(o1, {"major-awards", "media-coverage", "judging"})
        assert result.eligible is False
        assert result.selected_optional_count == 0
        assert result.stale_ids == ("judging", "major-awards", "media-coverage")


class TestAllRequiredRule:
    """EB-2 NIW: all four mandatory criteria."""

    def test_all_required_is_eligible(self, niw):
        result = evaluate(niw, NIW_REQUIRED)
        assert result.eligible is True
        assert result.selected_required_count == 4
        assert result.missing_required == ()
        assert result.min_required == 4
        assert result.rule == "ALL_REQUIRED"

    def test_optional_extra_still_eligible(self, niw):
        result = evaluate(niw, NIW_REQUIRED + ["exceptional-ability"])
        assert result.eligible is True
        assert result.selected_optional_count == 1

    @pytest.mark.parametrize("omitted", NIW_REQUIRED)
    def test_omitting_any_required_fails(self, niw, omitted):
        chosen = [c for c in NIW_REQUIRED if c != omitted] + ["exceptional-ability"]
        result = evaluate(niw, chosen)
        assert result.eligible is False
        assert result.missing_required == (omitted,)
        assert result.shortfall == 1
        assert result.reason_code == REQUIRED_MISSING

    def test_progress_uses_required_plus_min(self, niw):
        """Denominator is min_required + total_required (8 for EB-2 NIW)."""
        assert evaluate(niw, NIW_REQUIRED).progress_percent == 50.0
        assert evaluate(niw, NIW_REQUIRED + ["exceptional-ability"]).progress_percent == 62.5


class TestProgressBound:
    """progress_percent stays within [0, 100] for any selection."""

    @pytest.mark.parametrize("category", list(VisaCategory))
    def test_random_subsets(self, category):
        definition = get_catalog().require(category)
        ids = list(definition.criterion_ids())
        rng = random.Random(7)
        for _ in range(50):
            subset = rng.sample(ids, rng.randint(0, len(ids)))
            result = evaluate(definition, subset)
            assert 0.0 <= result.progress_percent <= 100.0

    @pytest.mark.parametrize("category", list(VisaCategory))
    def test_select_everything(self, category):
        definition = get_catalog().require(category)
        result = evaluate(definition, definition.criterion_ids())
        assert result.progress_percent <= 100.0
        assert result.eligible is True


class TestDegenerateCategory:
    """A category with no criteria: 0% progress, never eligible, no arithmetic fault."""

    def test_empty_threshold_zero(self):
        d = CategoryDefinition(VisaCategory.O1, "Empty", (), ThresholdRule(min_optional=0))
        result = evaluate(d, ["anything"])
        assert result.progress_percent == 0.0
        assert result.eligible is False
        assert result.reason_code == DEGENERATE_CATEGORY
        assert result.stale_ids == ("anything",)

    def test_empty_all_required(self):
        d = CategoryDefinition(VisaCategory.EB2_NIW, "Empty", (), AllRequiredRule())
        result = evaluate(d, [])
        assert result.progress_percent == 0.0
        assert result.eligible is False
        assert result.reason_code == DEGENERATE_CATEGORY

    def test_all_required_without_required_criteria(self):
        """Nothing required under all-required must not pass on an empty selection."""
        criteria = (Criterion("a", "A", "optional a"), Criterion("b", "B", "optional b"))
        d = CategoryDefinition(VisaCategory.EB2_NIW, "Optional only", criteria, AllRequiredRule())
        for chosen in ([], ["a"], ["a", "b"]):
            result = evaluate(d, chosen)
            assert result.eligible is False
            assert result.reason_code == DEGENERATE_CATEGORY
            assert result.shortfall == 0


class TestToggleProperties:
    """Evaluation is a pure function of final set membership."""

    def test_double_toggle_restores_result(self, eb1a):
        state = SelectionState(eb1a, ["major-awards", "judging"])
        before = evaluate(eb1a, state)
        state.toggle("membership")
        assert evaluate(eb1a, state) != before
        state.toggle("membership")
        assert evaluate(eb1a, state) == before

    def test_order_independence(self, niw):
        target = NIW_REQUIRED + ["exceptional-ability"]
        results = set()
        for order in itertools.permutations(target):
            state = SelectionState(niw)
            for criterion_id in order:
                state.toggle(criterion_id)
            results.add(evaluate(niw, state))
        assert len(results) == 1

    def test_detour_toggles_do_not_matter(self, eb1a):
        """Reaching the same set via extra on/off toggles gives the same result."""
        direct = SelectionState(eb1a)
        for cid in ("judging", "membership", "major-awards"):
            direct.toggle(cid)
        detour = SelectionState(eb1a)
        for cid in ("high-salary", "judging", "high-salary", "membership", "leading-role", "major-awards", "leading-role"):
            detour.toggle(cid)
        assert evaluate(eb1a, direct) == evaluate(eb1a, detour)

    def test_unknown_toggle_does_not_change_counts(self, eb1a):
        state = SelectionState(eb1a, ["judging"])
        before = evaluate(eb1a, state)
        assert state.toggle("nope").accepted is False
        assert evaluate(eb1a, state) == before

    def test_rescope_recomputes_against_new_criteria(self, eb1a, niw):
        """After a switch that keeps ids, old ids are stale and uncounted."""
        state = SelectionState(eb1a, ["major-awards", "media-coverage", "judging"])
        assert evaluate(state.definition, state).eligible is True
        state.rescope(niw, clear=False)
        result = evaluate(state.definition, state)
        assert result.eligible is False
        assert result.selected_count == 0
        assert len(result.stale_ids) == 3


class TestViews:
    """Progress, gating and review payloads."""

    def test_progress_view(self, eb1a):
        view = evaluate(eb1a, {"judging", "membership", "gone"}).progress_view()
        assert view == {"selected_count": 2, "total_count": 10, "progress_percent": pytest.approx(200 / 3)}

    def test_gating_view_niw(self, niw):
        view = evaluate(niw, ["advanced-degree"]).gating_view()
        assert view["eligible"] is False
        assert view["shortfall"] == 3
        assert view["message"] == "Missing 3 required criteria"

    def test_selected_criteria_in_catalog_order(self, eb1a):
        """Review list follows catalog order, not selection order, and skips stale ids."""
        state = SelectionState(eb1a)
        for cid in ("high-salary", "judging", "major-awards"):
            state.toggle(cid)
        review = selected_criteria(eb1a, list(state.selected_ids) + ["stale"])
        assert [c.id for c in review] == ["major-awards", "judging", "high-salary"]
        assert all(isinstance(c, Criterion) for c in review)

    def test_to_dict(self, niw):
        data = evaluate(niw, NIW_REQUIRED).to_dict()
        assert data["eligible"] is True
        assert data["selected_count"] == 4
        assert data["missing_required"] == []
        assert data["category"] == "EB-2 NIW"
