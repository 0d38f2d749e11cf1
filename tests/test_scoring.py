"""Tests for score labels, bands and the reference score."""

import pytest

from idealab.scoring import (
    DEFAULT_WEIGHTS,
    criterion_band,
    explain_weights,
    reference_score,
    score_band,
    score_label,
    summarize,
)
from models import Evaluation


def _evaluation(**criteria):
    values = {name: 3 for name in DEFAULT_WEIGHTS}
    values.update(criteria)
    return Evaluation(
        overall_score=70,
        strengths=[],
        weaknesses=[],
        recommendations=[],
        market_analysis="",
        risk_assessment="",
        **values,
    )


@pytest.mark.parametrize(
    "score,label",
    [(100, "Excellent"), (80, "Excellent"), (79, "Good"), (60, "Good"), (59, "Fair"), (40, "Fair"), (39, "Needs Work"), (0, "Needs Work")],
)
def test_score_label(score, label):
    assert score_label(score) == label


def test_bands():
    assert [score_band(s) for s in (85, 65, 20)] == ["high", "medium", "low"]
    assert [criterion_band(v) for v in (5, 4, 3, 2, 1)] == ["high", "high", "medium", "low", "low"]


class TestReferenceScore:
    def test_all_middle_is_fifty(self):
        assert reference_score(_evaluation()) == 50

    def test_best_case(self):
        best = _evaluation(market_size=5, competition=1, feasibility=5, profitability=5, innovation=5, time_to_market=5)
        assert reference_score(best) == 100

    def test_worst_case(self):
        worst = _evaluation(market_size=1, competition=5, feasibility=1, profitability=1, innovation=1, time_to_market=1)
        assert reference_score(worst) == 0

    def test_custom_weights(self):
        assert reference_score(_evaluation(market_size=5), {"market_size": 1.0}) == 100

    def test_zero_weights(self):
        assert reference_score(_evaluation(), {"market_size": 0.0}) == 50


def test_explain_weights():
    assert explain_weights({"market_size": 0.5, "time_to_market": 0.5}) == "50% Market Size + 50% Time To Market"


def test_summarize_keeps_overall_score_authoritative():
    summary = summarize(_evaluation(market_size=5))
    assert summary.label == "Good"
    assert summary.band == "medium"
    assert summary.criteria_bands["market_size"] == "high"
    assert 0 <= summary.reference_score <= 100
