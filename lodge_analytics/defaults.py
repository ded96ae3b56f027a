"""Benchmark constants and the resolver that fills in missing market/history data."""

# Each default is documented once, here.
BENCHMARKS = {
    # Market average occupancy (%) used by the competitive index.
    "market_average_occupancy": 65,
    # Rooms in the comparison market, used by market share.
    "market_total_rooms": 100,
    # Market average nightly rate, used by the rate index.
    "market_average_rate": 100,
    # Booking lead time (days) when no history is available.
    "average_lead_time": 14,
    # Fixed month length for RevPAR.
    "days_per_month": 30,
    # Assumed cost structure until real cost data is wired in.
    "gross_profit_ratio": 0.65,
    "cost_ratio": 0.35,
}

# Input field -> benchmark key it overrides
_MARKET_FIELDS = {
    "average_occupancy": "market_average_occupancy",
    "total_rooms": "market_total_rooms",
    "average_rate": "market_average_rate",
}


def resolve_benchmarks(data: dict = None, overrides: dict = None) -> dict:
    """Merge the constant table with config overrides and per-report inputs.

    Precedence (lowest first): BENCHMARKS, ``overrides`` (settings.yaml
    ``benchmarks`` section), then values present in ``data["market_metrics"]``
    and ``data["historical_data"]``. Falsy input values fall back.
    """
    resolved = dict(BENCHMARKS)
    for key, value in (overrides or {}).items():
        if key in resolved and value:
            resolved[key] = value

    data = data or {}
    market = data.get("market_metrics") or {}
    for field, key in _MARKET_FIELDS.items():
        if market.get(field):
            resolved[key] = market[field]

    history = data.get("historical_data") or {}
    if history.get("average_lead_time"):
        resolved["average_lead_time"] = history["average_lead_time"]

    return resolved


def safe_divide(numerator, denominator) -> float:
    """Divide, returning 0 for a zero or missing denominator."""
    if not denominator:
        return 0.0
    return numerator / denominator
