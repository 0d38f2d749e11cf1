# idealab/scoring.py
from typing import Dict

from models import Evaluation, ScoreSummary

# Criteria weights for the reference score. The model's overallScore stays
# authoritative; this is only shown next to it.
DEFAULT_WEIGHTS = {
    "market_size": 0.2,
    "competition": 0.15,
    "feasibility": 0.2,
    "profitability": 0.2,
    "innovation": 0.15,
    "time_to_market": 0.1,
}

# Higher is worse for these criteria (5 = highly competitive).
INVERTED_CRITERIA = {"competition"}


def score_label(overall: int) -> str:
    if overall >= 80:
        return "Excellent"
    if overall >= 60:
        return "Good"
    if overall >= 40:
        return "Fair"
    return "Needs Work"


def score_band(overall: int) -> str:
    if overall >= 80:
        return "high"
    if overall >= 60:
        return "medium"
    return "low"


def criterion_band(value: int) -> str:
    if value >= 4:
        return "high"
    if value >= 3:
        return "medium"
    return "low"


def _criterion_percent(name: str, value: int) -> float:
    """
    Ramène une note 1-5 sur 0-100.
    Ex : 1 -> 0, 3 -> 50, 5 -> 100 (inversé pour la concurrence).
    """
    v = max(1, min(5, int(value)))
    if name in INVERTED_CRITERIA:
        v = 6 - v
    return (v - 1) * 25.0


def reference_score(evaluation: Evaluation, weights: Dict[str, float] = None) -> int:
    """
    Weighted average of the six criteria on a 0-100 scale.
    """
    if weights is None:
        weights = DEFAULT_WEIGHTS

    weighted_sum = 0.0
    total_weight = 0.0

    for key, w in weights.items():
        weighted_sum += _criterion_percent(key, getattr(evaluation, key)) * w
        total_weight += w

    if total_weight == 0:
        return 50

    return round(weighted_sum / total_weight)


def explain_weights(weights: Dict[str, float] = None) -> str:
    """
    Readable form of the weighting, e.g. "20% Market Size + 15% Competition + ...".
    """
    if weights is None:
        weights = DEFAULT_WEIGHTS

    parts = [
        f"{int(round(w * 100))}% {k.replace('_', ' ').title()}"
        for k, w in weights.items()
    ]
    return " + ".join(parts)


def summarize(evaluation: Evaluation) -> ScoreSummary:
    return ScoreSummary(
        label=score_label(evaluation.overall_score),
        band=score_band(evaluation.overall_score),
        reference_score=reference_score(evaluation),
        criteria_bands={
            key: criterion_band(getattr(evaluation, key)) for key in DEFAULT_WEIGHTS
        },
    )
