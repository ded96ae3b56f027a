"""Weighted 0-100 performance score and the labels derived from it."""

import math

WEIGHTS = {
    "occupancy": 0.3,
    "revenue": 0.3,
    "operational": 0.2,
    "market": 0.2,
}

# Benchmarks that map a raw metric onto a 0-100 scale
REVPAR_BENCHMARK = 200
MARGIN_BENCHMARK = 50
REVENUE_PER_ROOM_BENCHMARK = 150
MARKET_SHARE_BENCHMARK = 20


def occupancy_score(metrics: dict) -> float:
    # The RevPAR term has no 100 cap, unlike the revenue-per-room term below.
    revpar_score = metrics["revpar"] / REVPAR_BENCHMARK * 100
    return metrics["utilization_rate"] * 0.6 + revpar_score * 0.4


def revenue_score(metrics: dict) -> float:
    margin_score = metrics["operating_margin"] / MARGIN_BENCHMARK * 100
    per_room_score = min(metrics["revenue_per_room"] / REVENUE_PER_ROOM_BENCHMARK * 100, 100)
    return margin_score * 0.5 + per_room_score * 0.5


def operational_score(metrics: dict) -> float:
    cost_score = max(0, 100 - metrics["cost_per_room"])
    return metrics["conversion_rate"] * 0.5 + cost_score * 0.5


def market_score(metrics: dict) -> float:
    share_score = metrics["market_share"] / MARKET_SHARE_BENCHMARK * 100
    return metrics["competitive_index"] * 0.6 + share_score * 0.4


def component_scores(metrics: dict) -> dict:
    return {
        "occupancy": occupancy_score(metrics),
        "revenue": revenue_score(metrics),
        "operational": operational_score(metrics),
        "market": market_score(metrics),
    }


def calculate_performance_score(metrics: dict) -> int:
    """Weighted blend of the four component scores, rounded half-up.

    Components are uncapped blends, so the result is bounded to 0-100.
    """
    scores = component_scores(metrics)
    weighted = sum(scores[name] * weight for name, weight in WEIGHTS.items())
    return max(0, min(100, math.floor(weighted + 0.5)))


def score_label(score: int) -> str:
    if score >= 80:
        return "Exceptional"
    if score >= 60:
        return "Good"
    if score >= 40:
        return "Average"
    return "Needs Improvement"


def competitive_label(index: float) -> str:
    if index > 110:
        return "Market Leader"
    if index > 90:
        return "Competitive"
    return "Below Market"


def rate_position(index: float) -> str:
    if index > 110:
        return "Premium"
    if index > 90:
        return "Market Rate"
    return "Value Position"
