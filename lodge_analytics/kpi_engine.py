"""KPI computation engine: pure functions over report input and booking records."""

import calendar
import math
from collections import defaultdict
from datetime import datetime

from lodge_analytics.defaults import resolve_benchmarks, safe_divide


# ── Booking-level helpers ──────────────────────────────────────────────

def nights_between(check_in: datetime, check_out: datetime) -> int:
    """Whole nights between two dates, rounding partial days up."""
    if check_in is None or check_out is None:
        return 0
    seconds = abs((check_out - check_in).total_seconds())
    return math.ceil(seconds / 86400)


def total_revenue(bookings: list[dict]) -> float:
    return sum(b.get("total_amount") or 0 for b in bookings)


def compute_adr(bookings: list[dict]) -> float:
    """Average Daily Rate: revenue per occupied room-night."""
    room_nights = sum(nights_between(b.get("check_in"), b.get("check_out")) for b in bookings)
    return safe_divide(total_revenue(bookings), room_nights)


def compute_period_revpar(bookings: list[dict], room_count: int, days: int) -> float:
    """RevPAR over an explicit period: revenue / (rooms * days)."""
    return safe_divide(total_revenue(bookings), room_count * days)


def compute_booking_lead_time(bookings: list[dict]) -> float:
    """Mean days between booking creation and check-in."""
    lead_times = [
        (b["check_in"] - b["created_at"]).days
        for b in bookings
        if b.get("check_in") and b.get("created_at") and b["check_in"] >= b["created_at"]
    ]
    return safe_divide(sum(lead_times), len(lead_times))


def revenue_by_room_type(bookings: list[dict]) -> dict:
    by_type = defaultdict(float)
    for b in bookings:
        by_type[b.get("room_type") or "Standard"] += b.get("total_amount") or 0
    return dict(sorted(by_type.items()))


def revenue_for_month(bookings: list[dict], year: int, month: int) -> float:
    return sum(
        b.get("total_amount") or 0 for b in bookings
        if b.get("check_in") and b["check_in"].year == year and b["check_in"].month == month
    )


def revenue_for_year(bookings: list[dict], year: int) -> float:
    return sum(
        b.get("total_amount") or 0 for b in bookings
        if b.get("check_in") and b["check_in"].year == year
    )


def _previous_month(year: int, month: int) -> tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


def month_over_month_growth(bookings: list[dict], today: datetime) -> float:
    """Revenue growth (%) of the current calendar month over the previous one."""
    current = revenue_for_month(bookings, today.year, today.month)
    previous = revenue_for_month(bookings, *_previous_month(today.year, today.month))
    return safe_divide(current - previous, previous) * 100


def year_over_year_growth(bookings: list[dict], today: datetime) -> float:
    current = revenue_for_year(bookings, today.year)
    previous = revenue_for_year(bookings, today.year - 1)
    return safe_divide(current - previous, previous) * 100


def seasonal_patterns(bookings: list[dict]) -> list[dict]:
    """Revenue and booking counts per calendar month (all years combined)."""
    revenue = [0.0] * 12
    counts = [0] * 12
    for b in bookings:
        if b.get("check_in") is None:
            continue
        idx = b["check_in"].month - 1
        revenue[idx] += b.get("total_amount") or 0
        counts[idx] += 1

    return [
        {
            "month": calendar.month_name[i + 1],
            "revenue": revenue[i],
            "bookings": counts[i],
            "average_booking_value": safe_divide(revenue[i], counts[i]),
        }
        for i in range(12)
    ]


def trailing_monthly_revenue(bookings: list[dict], today: datetime,
                             months: int = 12) -> list[tuple[str, float]]:
    """(YYYY-MM, revenue) for the last N months, oldest first, ending this month."""
    year, month = today.year, today.month
    keys = []
    for _ in range(months):
        keys.append((year, month))
        year, month = _previous_month(year, month)
    return [
        (f"{y}-{m:02d}", revenue_for_month(bookings, y, m))
        for y, m in reversed(keys)
    ]


def average_growth_rate(values: list[float]) -> float:
    """Mean period-over-period growth ratio, skipping periods after a zero."""
    rates = [
        (values[i] - values[i - 1]) / values[i - 1]
        for i in range(1, len(values))
        if values[i - 1] > 0
    ]
    return safe_divide(sum(rates), len(rates))


def forecast_revenue(last_value: float, growth_pct: float, periods: int = 3) -> list[float]:
    """Compound the last value forward by a constant growth percentage."""
    forecast = []
    value = last_value
    for _ in range(periods):
        value = value * (1 + growth_pct / 100)
        forecast.append(round(value, 2))
    return forecast


# ── Room-type and revenue analysis ─────────────────────────────────────

def compute_demand_score(occupancy: float, revenue: float, max_revenue: float) -> float:
    """Blend of occupancy (60%) and revenue relative to the best type (40%), 0-100."""
    return (occupancy / 100 * 0.6 + safe_divide(revenue, max_revenue) * 0.4) * 100


def room_type_performance(bookings: list[dict], rooms: list[dict], days: int = 30) -> dict:
    """Revenue, occupancy, ADR, RevPAR and demand score per room type."""
    revenue = revenue_by_room_type(bookings)
    room_types = sorted(set(revenue) | {r["room_type"] for r in rooms})
    max_revenue = max(revenue.values(), default=0)

    performance = {}
    for room_type in room_types:
        type_rooms = [r for r in rooms if r["room_type"] == room_type]
        type_bookings = [b for b in bookings if b.get("room_type") == room_type]
        occupied = sum(1 for r in type_rooms if r["status"] == "occupied")
        occupancy = safe_divide(occupied, len(type_rooms)) * 100
        type_revenue = revenue.get(room_type, 0.0)
        performance[room_type] = {
            "revenue": type_revenue,
            "rooms": len(type_rooms),
            "occupancy": occupancy,
            "adr": compute_adr(type_bookings),
            "revpar": compute_period_revpar(type_bookings, len(type_rooms), days),
            "demand_score": compute_demand_score(occupancy, type_revenue, max_revenue),
        }
    return performance


def prepare_revenue_analysis(bookings: list[dict], rooms: list[dict],
                             today: datetime = None) -> dict:
    """Revenue summary for the current month with growth and forecasts."""
    today = today or datetime.now()
    billable = [b for b in bookings if not b.get("cancelled")]
    days_in_month = calendar.monthrange(today.year, today.month)[1]
    current = revenue_for_month(billable, today.year, today.month)

    monthly = trailing_monthly_revenue(billable, today)
    growth_pct = average_growth_rate([amount for _, amount in monthly]) * 100
    projection = forecast_revenue(current, growth_pct, periods=12)

    return {
        "period": f"{calendar.month_name[today.month]} {today.year}",
        "total": total_revenue(billable),
        "current_month": current,
        "mom_growth": month_over_month_growth(billable, today),
        "yoy_growth": year_over_year_growth(billable, today),
        "room_type_revenue": revenue_by_room_type(billable),
        "adr": compute_adr(billable),
        "revpar": safe_divide(current, len(rooms) * days_in_month),
        "monthly_revenue": monthly,
        "average_growth_rate": growth_pct,
        "forecast": {
            "next_month": projection[0],
            "next_quarter": round(sum(projection[:3]), 2),
            "next_year": round(sum(projection), 2),
        },
    }


# ── Business metrics snapshot ──────────────────────────────────────────

def compute_utilization(occupancy: dict) -> float:
    """Occupied rooms as a share of rooms not under maintenance."""
    sellable = (occupancy.get("total") or 0) - (occupancy.get("maintenance") or 0)
    return safe_divide(occupancy.get("occupied") or 0, sellable) * 100


def compute_revpar(monthly_revenue: float, total_rooms: int, days: int) -> float:
    return safe_divide(monthly_revenue, total_rooms * days)


def compute_conversion_rate(active: int, pending: int) -> float:
    return safe_divide(active, active + pending) * 100


def compute_competitive_index(occupancy_rate: float, market_occupancy: float) -> float:
    return safe_divide(occupancy_rate, market_occupancy) * 100


def compute_rate_index(daily_average: float, occupied: int, market_rate: float) -> float:
    property_rate = safe_divide(daily_average, occupied)
    return safe_divide(property_rate, market_rate) * 100


def compute_business_metrics(data: dict, benchmarks: dict = None) -> dict:
    """Derive the metrics snapshot from a report input.

    Missing market/historical inputs fall back to the benchmark table;
    zero denominators produce 0 for the affected metric.
    """
    bench = resolve_benchmarks(data, benchmarks)
    occupancy = data.get("occupancy") or {}
    revenue = data.get("revenue") or {}
    bookings = data.get("bookings") or {}

    monthly = revenue.get("current_month") or 0
    total_rooms = occupancy.get("total") or 0
    gross_profit = monthly * bench["gross_profit_ratio"]

    return {
        "utilization_rate": compute_utilization(occupancy),
        "revpar": compute_revpar(monthly, total_rooms, bench["days_per_month"]),
        "revenue_per_room": safe_divide(monthly, total_rooms),
        "gross_profit": gross_profit,
        "operating_margin": safe_divide(gross_profit, monthly) * 100,
        "cost_per_room": safe_divide(monthly * bench["cost_ratio"], total_rooms),
        "conversion_rate": compute_conversion_rate(
            bookings.get("active") or 0, bookings.get("pending") or 0),
        "average_lead_time": bench["average_lead_time"],
        "competitive_index": compute_competitive_index(
            occupancy.get("rate") or 0, bench["market_average_occupancy"]),
        "market_share": safe_divide(total_rooms, bench["market_total_rooms"]) * 100,
        "rate_index": compute_rate_index(
            revenue.get("daily_average") or 0,
            occupancy.get("occupied") or 0,
            bench["market_average_rate"]),
        "adr": compute_adr(data.get("booking_records") or []),
    }
