"""Data preparation: normalize exported booking/room documents into records."""

import json
import logging
import re
from collections import Counter
from datetime import date, datetime, timezone

from lodge_analytics.defaults import safe_divide
from lodge_analytics.kpi_engine import (
    compute_booking_lead_time,
    month_over_month_growth,
    nights_between,
    revenue_for_month,
    total_revenue,
)

logger = logging.getLogger(__name__)

DEFAULT_ROOM_TYPE = "Standard"

ACTIVE_STATUSES = {"confirmed", "checked-in", "occupied", "active"}
PENDING_STATUSES = {"pending"}
# Bookings that count towards realized occupancy and revenue charts
CONFIRMED_STATUSES = {"confirmed", "checked-in", "checked-out", "completed"}

ROOM_STATUS_MAP = {
    "occupied": "occupied",
    "checked-in": "occupied",
    "maintenance": "maintenance",
    "under-maintenance": "maintenance",
    "out-of-order": "maintenance",
}


def _from_epoch(seconds: float, raw):
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError, TypeError):
        logger.debug(f"Timestamp out of range: {raw!r}")
        return None


def parse_date(value):
    """Parse a date field as exported from Firestore.

    Accepts datetime/date objects, ISO-8601 strings, timestamp dicts
    ({"seconds": ...} or {"_seconds": ...}) and epoch milliseconds.
    Returns a naive datetime (UTC for zone-aware input) or None.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    elif isinstance(value, dict):
        seconds = value.get("seconds", value.get("_seconds"))
        if seconds is None:
            return None
        dt = _from_epoch(seconds, value)
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        dt = _from_epoch(value / 1000, value)
    elif isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            logger.debug(f"Unparseable date: {value!r}")
            return None
    else:
        return None

    if dt is None:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def _normalize_status(value) -> str:
    return re.sub(r"[\s_]+", "-", str(value or "").strip().lower())


def _pick(raw: dict, *keys):
    """First non-empty value among keys."""
    for key in keys:
        value = raw.get(key)
        if value not in (None, ""):
            return value
    return None


def _to_snake(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def normalize_booking(raw: dict) -> dict:
    """Map a booking document (camelCase or snake_case) to a booking record."""
    details = raw.get("propertyDetails") or {}
    status = _normalize_status(raw.get("status"))
    return {
        "id": raw.get("id"),
        "check_in": parse_date(_pick(raw, "checkIn", "check_in")),
        "check_out": parse_date(_pick(raw, "checkOut", "check_out")),
        "created_at": parse_date(_pick(raw, "createdAt", "created_at")),
        "total_amount": float(_pick(raw, "totalAmount", "totalPrice", "total_amount") or 0),
        "room_type": (details.get("roomType")
                      or _pick(raw, "roomType", "room_type")
                      or DEFAULT_ROOM_TYPE),
        "guest_name": _pick(raw, "guestName", "guest_name") or "",
        "payment_status": _normalize_status(_pick(raw, "paymentStatus", "payment_status")),
        "status": status,
        "cancelled": bool(_pick(raw, "cancellationFlag", "cancelled")) or status == "cancelled",
    }


def normalize_room(raw: dict) -> dict:
    """Map a room document to a room record with a three-state status."""
    details = raw.get("propertyDetails") or {}
    status = _normalize_status(raw.get("status"))
    return {
        "id": raw.get("id"),
        "room_type": (details.get("roomType")
                      or _pick(raw, "roomType", "room_type")
                      or DEFAULT_ROOM_TYPE),
        "status": ROOM_STATUS_MAP.get(status, "available"),
        "base_rate": float(_pick(raw, "baseRate", "base_rate", "price") or 0),
    }


def _normalize_aggregate(raw: dict):
    if not raw:
        return None
    return {_to_snake(k): v for k, v in raw.items()}


def load_export(path: str) -> dict:
    """Load a JSON export with bookings, rooms and optional baselines.

    Raises ValueError when the bookings or rooms list is missing.
    """
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"Export {path} must contain a JSON object")
    for key in ("bookings", "rooms"):
        if not isinstance(raw.get(key), list):
            raise ValueError(f"Export {path} has no '{key}' list")

    bookings = [normalize_booking(b) for b in raw["bookings"]]
    rooms = [normalize_room(r) for r in raw["rooms"]]
    logger.info(f"Loaded {len(bookings)} bookings and {len(rooms)} rooms from {path}")

    return {
        "bookings": bookings,
        "rooms": rooms,
        "historical_data": _normalize_aggregate(
            raw.get("historical_data") or raw.get("historicalData")),
        "market_metrics": _normalize_aggregate(
            raw.get("market_metrics") or raw.get("marketMetrics")),
    }


def find_peak_hours(distribution: list[int]) -> list[int]:
    """Hours whose count is at least 80% of the busiest hour."""
    if not distribution or max(distribution) == 0:
        return []
    threshold = max(distribution) * 0.8
    return [hour for hour, count in enumerate(distribution) if count >= threshold]


def _summarize_occupancy(rooms: list[dict]) -> dict:
    total = len(rooms)
    occupied = sum(1 for r in rooms if r["status"] == "occupied")
    maintenance = sum(1 for r in rooms if r["status"] == "maintenance")
    return {
        "occupied": occupied,
        "available": total - occupied - maintenance,
        "maintenance": maintenance,
        "total": total,
        "rate": safe_divide(occupied, total) * 100,
    }


def _summarize_bookings(bookings: list[dict], today: datetime) -> dict:
    hourly = [0] * 24
    for b in bookings:
        if b["check_in"] is not None:
            hourly[b["check_in"].hour] += 1

    room_counts = Counter(b["room_type"] for b in bookings if not b["cancelled"])
    popular = room_counts.most_common(1)

    return {
        "active": sum(1 for b in bookings
                      if b["status"] in ACTIVE_STATUSES and not b["cancelled"]),
        "pending": sum(1 for b in bookings
                       if b["status"] in PENDING_STATUSES and not b["cancelled"]),
        "today_checkins": sum(
            1 for b in bookings
            if b["check_in"] is not None
            and b["check_in"].date() == today.date()
            and b["status"] in {"pending", "confirmed"}
        ),
        "today_checkouts": sum(
            1 for b in bookings
            if b["check_out"] is not None
            and b["check_out"].date() == today.date()
            and not b["cancelled"]
        ),
        "peak_hours": find_peak_hours(hourly),
        "popular_room": popular[0][0] if popular else "N/A",
    }


def build_report_input(bookings: list[dict], rooms: list[dict],
                       historical_data: dict = None,
                       market_metrics: dict = None,
                       today: datetime = None) -> dict:
    """Assemble the occupancy/revenue/bookings summary the report works on."""
    today = today or datetime.now()
    billable = [b for b in bookings if not b["cancelled"]]
    current_month = revenue_for_month(billable, today.year, today.month)

    return {
        "occupancy": _summarize_occupancy(rooms),
        "revenue": {
            "current_month": current_month,
            "daily_average": safe_divide(current_month, today.day),
            "growth_rate": month_over_month_growth(billable, today),
        },
        "bookings": _summarize_bookings(bookings, today),
        "booking_records": billable,
        "historical_data": historical_data,
        "market_metrics": market_metrics,
    }


def build_historical_aggregate(bookings: list[dict], total_rooms: int,
                               period_days: int) -> dict:
    """Summarize a prior period of bookings into a comparison baseline."""
    billable = [b for b in bookings if not b["cancelled"]]
    room_nights = sum(nights_between(b["check_in"], b["check_out"]) for b in billable)
    return {
        "average_occupancy": safe_divide(room_nights, total_rooms * period_days) * 100,
        "average_revenue": total_revenue(billable),
        "average_bookings": len(billable),
        "average_lead_time": compute_booking_lead_time(billable),
    }
