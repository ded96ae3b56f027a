"""Current-period vs. historical baseline comparisons."""

from lodge_analytics.defaults import safe_divide


def trend_percentage(current, previous) -> float:
    """Signed change (%) of current over previous; 0 without a baseline."""
    if not previous:
        return 0.0
    return (current - previous) / previous * 100


def revpar_trend(data: dict) -> float:
    """Per-room revenue against the historical per-room revenue.

    A zero historical revenue reports 0 rather than a trend.
    """
    total_rooms = (data.get("occupancy") or {}).get("total") or 0
    history = data.get("historical_data") or {}
    current = safe_divide((data.get("revenue") or {}).get("current_month") or 0, total_rooms)
    historical = safe_divide(history.get("average_revenue") or 0, total_rooms)
    return trend_percentage(current, historical)


def analyze_trends(data: dict) -> dict:
    occupancy = data.get("occupancy") or {}
    revenue = data.get("revenue") or {}
    bookings = data.get("bookings") or {}
    history = data.get("historical_data") or {}

    return {
        "occupancy": trend_percentage(occupancy.get("rate") or 0,
                                      history.get("average_occupancy") or 0),
        "revenue": trend_percentage(revenue.get("current_month") or 0,
                                    history.get("average_revenue") or 0),
        "revpar": revpar_trend(data),
        "booking": trend_percentage(bookings.get("active") or 0,
                                    history.get("average_bookings") or 0),
    }


def trend_direction(current, historical) -> str:
    if current > historical:
        return "increasing"
    if current < historical:
        return "decreasing"
    return "stable"


def trend_indicator(pct: float) -> str:
    """Coarse marker for report lines; moves within +/-5% are flat."""
    if pct > 5:
        return "up"
    if pct < -5:
        return "down"
    return "flat"
