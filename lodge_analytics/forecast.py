"""Next-month occupancy forecast from confirmed bookings and booking pace."""

import calendar
import logging
from datetime import datetime, timedelta

from lodge_analytics.data_prep import CONFIRMED_STATUSES
from lodge_analytics.defaults import safe_divide
from lodge_analytics.trends import trend_direction

logger = logging.getLogger(__name__)

PACE_WINDOW_DAYS = 30


def daily_occupancy(bookings: list[dict], start: datetime, end: datetime) -> list[int]:
    """Rooms in use per day from start to end (inclusive).

    A booking counts on every day from check-in through check-out.
    """
    days = []
    day = start.date()
    while day <= end.date():
        days.append(sum(
            1 for b in bookings
            if b["check_in"] is not None and b["check_out"] is not None
            and b["check_in"].date() <= day <= b["check_out"].date()
        ))
        day += timedelta(days=1)
    return days


def historical_occupancy(bookings: list[dict], start: datetime, end: datetime,
                         total_rooms: int) -> float:
    days = daily_occupancy(bookings, start, end)
    return safe_divide(safe_divide(sum(days), len(days)), total_rooms) * 100


def booking_pace(bookings: list[dict], now: datetime,
                 window_days: int = PACE_WINDOW_DAYS) -> float:
    """Bookings created per day over the trailing window."""
    since = now - timedelta(days=window_days)
    recent = [
        b for b in bookings
        if b.get("created_at") is not None and since <= b["created_at"] <= now
    ]
    return len(recent) / window_days


def predict_additional_bookings(current_pace: float, historical_pace: float,
                                historical_occupancy: float, total_rooms: int,
                                days_until_period: int) -> float:
    """Bookings still expected before the period starts, never negative."""
    pace_ratio = current_pace / (historical_pace or 1)
    expected = min(
        total_rooms * (historical_occupancy / 100) * pace_ratio,
        total_rooms - current_pace * days_until_period,
    )
    return max(0.0, expected)


def forecast_confidence(confirmed_count: int, historical_count: int,
                        total_rooms: int) -> float:
    data_availability = min(confirmed_count / (historical_count or 1), 1)
    coverage = safe_divide(confirmed_count, total_rooms)
    return (data_availability * 0.6 + coverage * 0.4) * 100


def confidence_label(confidence: float) -> str:
    if confidence >= 80:
        return "very high"
    if confidence >= 60:
        return "high"
    if confidence >= 40:
        return "moderate"
    if confidence >= 20:
        return "low"
    return "very low"


def year_over_year_change(current: float, historical: float) -> str:
    if historical == 0:
        return "No historical data available"
    change = (current - historical) / historical * 100
    return f"{change:+.1f}%"


def _month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    last_day = calendar.monthrange(year, month)[1]
    return datetime(year, month, 1), datetime(year, month, last_day, 23, 59, 59)


def _in_range(booking: dict, start: datetime, end: datetime) -> bool:
    return booking["check_in"] is not None and start <= booking["check_in"] <= end


def predict_next_month_occupancy(bookings: list[dict], total_rooms: int,
                                 today: datetime = None) -> dict:
    """Forecast next month's occupancy rate.

    Combines confirmed room-nights already on the books with the bookings
    expected from the current pace relative to the same month last year.
    """
    today = today or datetime.now()
    year, month = (today.year + 1, 1) if today.month == 12 else (today.year, today.month + 1)
    start, end = _month_bounds(year, month)
    last_year_start, last_year_end = _month_bounds(year - 1, month)

    confirmed = [b for b in bookings
                 if b["status"] in CONFIRMED_STATUSES and not b.get("cancelled")]
    upcoming = [b for b in confirmed if _in_range(b, start, end)]
    last_year = [b for b in confirmed if _in_range(b, last_year_start, last_year_end)]

    daily = daily_occupancy(upcoming, start, end)
    hist_occupancy = historical_occupancy(last_year, last_year_start, last_year_end, total_rooms)
    current_pace = booking_pace(upcoming, today)
    historical_pace = booking_pace(last_year, today - timedelta(days=365))

    confirmed_occupancy = sum(daily) / len(daily)
    expected = predict_additional_bookings(
        current_pace, historical_pace, hist_occupancy, total_rooms,
        (start.date() - today.date()).days,
    )
    predicted = min(100.0, safe_divide(confirmed_occupancy + expected, total_rooms) * 100)
    confidence = forecast_confidence(len(upcoming), len(last_year), total_rooms)

    logger.debug(
        f"Forecast {start:%Y-%m}: {len(upcoming)} confirmed, base "
        f"{confirmed_occupancy:.1f} rooms/day, +{expected:.1f} expected, "
        f"{predicted:.1f}%"
    )

    return {
        "month": f"{calendar.month_name[month]} {year}",
        "predicted_rate": round(predicted, 1),
        "confidence": round(confidence, 1),
        "confidence_label": confidence_label(confidence),
        "trend": trend_direction(current_pace, historical_pace),
        "details": {
            "confirmed_bookings": len(upcoming),
            "total_rooms": total_rooms,
            "historical_occupancy": round(hist_occupancy, 1),
            "current_pace": round(current_pace, 2),
            "historical_pace": round(historical_pace, 2),
            "expected_additional": round(expected, 1),
            "daily_occupancy": daily,
        },
    }
