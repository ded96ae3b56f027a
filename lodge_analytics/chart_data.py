"""Chart series for the analytics dashboard, memoized per chart type."""

import logging
import time
from datetime import datetime

import pandas as pd

from lodge_analytics.data_prep import CONFIRMED_STATUSES
from lodge_analytics.defaults import safe_divide

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 5 * 60
HISTORY_MONTHS = 6

CHART_TYPES = ("room_types", "occupancy", "revenue", "bookings")

_BOOKING_COLUMNS = ["check_in", "total_amount", "room_type", "status"]


def _confirmed_frame(bookings: list[dict], today: datetime) -> pd.DataFrame:
    """Confirmed bookings checking in within the last HISTORY_MONTHS months."""
    rows = [
        {col: b.get(col) for col in _BOOKING_COLUMNS}
        for b in bookings
        if b.get("check_in") is not None
        and b.get("status") in CONFIRMED_STATUSES
        and not b.get("cancelled")
    ]
    df = pd.DataFrame(rows, columns=_BOOKING_COLUMNS)
    if df.empty:
        return df

    df["check_in"] = pd.to_datetime(df["check_in"])
    df["total_amount"] = df["total_amount"].fillna(0).astype(float)
    since = pd.Timestamp(today) - pd.DateOffset(months=HISTORY_MONTHS)
    df = df[df["check_in"] >= since].copy()
    df["month"] = df["check_in"].dt.strftime("%Y-%m")
    return df


def room_type_distribution(rooms: list[dict]) -> dict:
    """Room counts, average base rate and occupancy (%) per room type."""
    types = {}
    occupied = {}
    for room in rooms:
        room_type = room["room_type"]
        types[room_type] = types.get(room_type, 0) + 1
        if room["status"] == "occupied":
            occupied[room_type] = occupied.get(room_type, 0) + 1

    return {
        "types": dict(sorted(types.items())),
        "metrics": {
            "total_rooms": len(rooms),
            "average_rate": safe_divide(sum(r["base_rate"] for r in rooms), len(rooms)),
            "occupancy_by_type": {
                t: safe_divide(occupied.get(t, 0), count) * 100
                for t, count in sorted(types.items())
            },
        },
    }


def occupancy_trends(bookings: list[dict], total_rooms: int, today: datetime) -> dict:
    df = _confirmed_frame(bookings, today)
    total_rooms = total_rooms or 1

    metrics = {
        "peak_occupancy": 0.0,
        "low_occupancy": 0.0,
        "average_occupancy": 0.0,
        "weekday_vs_weekend": {"weekday": 0, "weekend": 0},
    }
    if df.empty:
        return {"monthly": [], "metrics": metrics}

    monthly = (
        df.groupby("month")
        .agg(bookings=("total_amount", "size"), revenue=("total_amount", "sum"))
        .sort_index()
    )
    monthly["rate"] = monthly["bookings"] / total_rooms * 100

    weekend = int((df["check_in"].dt.dayofweek >= 5).sum())
    metrics.update({
        "peak_occupancy": float(monthly["rate"].max()),
        "low_occupancy": float(monthly["rate"].min()),
        "average_occupancy": float(monthly["rate"].mean()),
        "weekday_vs_weekend": {"weekday": len(df) - weekend, "weekend": weekend},
    })

    return {
        "monthly": [
            {
                "month": month,
                "rate": float(row["rate"]),
                "revenue": float(row["revenue"]),
                "bookings": int(row["bookings"]),
            }
            for month, row in monthly.iterrows()
        ],
        "metrics": metrics,
    }


def revenue_analysis(bookings: list[dict], today: datetime) -> dict:
    df = _confirmed_frame(bookings, today)
    metrics = {
        "total_revenue": 0.0,
        "average_daily": 0.0,
        "peak_revenue": 0.0,
        "revenue_by_room_type": {},
        "monthly_growth": [],
        "forecast_next_month": 0.0,
    }
    if df.empty:
        return {"monthly": [], "metrics": metrics}

    monthly = df.groupby("month")["total_amount"].sum().sort_index()
    growth = [
        {"month": month, "growth": float(safe_divide(amount - prev, prev) * 100)}
        for (month, amount), prev in zip(list(monthly.items())[1:], monthly.values[:-1])
    ]
    avg_growth = safe_divide(sum(g["growth"] for g in growth), len(growth))
    days = max((df["check_in"].max() - df["check_in"].min()).days + 1, 1)

    metrics.update({
        "total_revenue": float(df["total_amount"].sum()),
        "average_daily": float(df["total_amount"].sum()) / days,
        "peak_revenue": float(df["total_amount"].max()),
        "revenue_by_room_type": {
            room_type: float(amount)
            for room_type, amount in df.groupby("room_type")["total_amount"].sum().sort_index().items()
        },
        "monthly_growth": growth,
        "forecast_next_month": float(monthly.iloc[-1]) * (1 + avg_growth / 100),
    })

    return {
        "monthly": [{"month": m, "amount": float(a)} for m, a in monthly.items()],
        "metrics": metrics,
    }


def booking_trends(bookings: list[dict], today: datetime) -> list[dict]:
    df = _confirmed_frame(bookings, today)
    if df.empty:
        return []
    counts = df.groupby("month").size().sort_index()
    return [{"month": m, "count": int(c)} for m, c in counts.items()]


class ChartDataService:
    """Chart series with a time-boxed in-process cache keyed by chart type.

    Cache misses are not de-duplicated: concurrent callers recompute
    independently, which is harmless since the builders are pure.
    """

    def __init__(self, ttl_seconds: float = CACHE_TTL_SECONDS, clock=time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._cache = {}

    def _build(self, chart_type: str, bookings: list[dict], rooms: list[dict],
               today: datetime):
        if chart_type == "room_types":
            return room_type_distribution(rooms)
        if chart_type == "occupancy":
            return occupancy_trends(bookings, len(rooms), today)
        if chart_type == "revenue":
            return revenue_analysis(bookings, today)
        if chart_type == "bookings":
            return booking_trends(bookings, today)
        raise ValueError(f"Unknown chart type: {chart_type}")

    def get_chart_data(self, chart_type: str, bookings: list[dict], rooms: list[dict],
                       today: datetime = None, force_refresh: bool = False):
        now = self.clock()
        cached = self._cache.get(chart_type)
        if cached and not force_refresh and now - cached[0] <= self.ttl_seconds:
            logger.debug(f"Chart cache hit: {chart_type}")
            return cached[1]

        data = self._build(chart_type, bookings, rooms, today or datetime.now())
        self._cache[chart_type] = (now, data)
        return data

    def get_all(self, bookings: list[dict], rooms: list[dict],
                today: datetime = None, force_refresh: bool = False) -> dict:
        return {
            chart_type: self.get_chart_data(chart_type, bookings, rooms, today, force_refresh)
            for chart_type in CHART_TYPES
        }

    def clear(self):
        self._cache.clear()
