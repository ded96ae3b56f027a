"""Pytest fixtures for LodgeEase analytics tests."""

import json
import logging
from datetime import datetime

import pytest
import yaml

from lodge_analytics.data_prep import load_export

# Fixed "now" so month windows and today's check-ins are deterministic
TODAY = datetime(2026, 10, 19, 12, 0)


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging() during a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def raw_export():
    """Export as written by the booking system: camelCase, mixed status spelling."""
    return {
        "rooms": [
            {"id": "r1", "roomType": "Deluxe", "status": "occupied", "baseRate": 200},
            {"id": "r2", "roomType": "Deluxe", "status": "available", "baseRate": 200},
            {"id": "r3", "roomType": "Standard", "status": "occupied", "baseRate": 100},
            {"id": "r4", "roomType": "Standard", "status": "Occupied", "price": 100},
            {"id": "r5", "roomType": "Standard", "status": "maintenance", "baseRate": 100},
            {"id": "r6", "propertyDetails": {"roomType": "Suite"}, "status": "Available",
             "baseRate": 350},
        ],
        "bookings": [
            {"id": "b1", "roomType": "Deluxe", "status": "confirmed",
             "checkIn": "2026-10-05T14:00:00Z", "checkOut": "2026-10-08T11:00:00Z",
             "createdAt": "2026-09-20T10:00:00Z", "totalAmount": 600},
            {"id": "b2", "roomType": "Standard", "status": "Confirmed",
             "checkIn": "2026-10-19T15:00:00Z", "checkOut": "2026-10-21T11:00:00Z",
             "createdAt": "2026-10-01T09:00:00Z", "totalPrice": 300},
            {"id": "b3", "roomType": "Standard", "status": "checked_out",
             "checkIn": "2026-09-10T14:00:00Z", "checkOut": "2026-09-12T10:00:00Z",
             "createdAt": "2026-09-01T00:00:00Z", "totalAmount": 400},
            {"id": "b4", "roomType": "Suite", "status": "pending",
             "checkIn": "2026-10-25T14:00:00Z", "checkOut": "2026-10-27T10:00:00Z",
             "createdAt": "2026-10-15T00:00:00Z", "totalAmount": 700},
            {"id": "b5", "roomType": "Deluxe", "status": "cancelled",
             "checkIn": "2026-10-12T14:00:00Z", "checkOut": "2026-10-14T10:00:00Z",
             "createdAt": "2026-10-02T00:00:00Z", "totalAmount": 500},
            {"id": "b6", "propertyDetails": {"roomType": "Deluxe"}, "status": "confirmed",
             "checkIn": "2026-11-06T14:00:00Z", "checkOut": "2026-11-09T10:00:00Z",
             "createdAt": "2026-10-10T08:00:00Z", "totalAmount": 900},
            {"id": "b7", "roomType": "Standard", "status": "completed",
             "checkIn": "2025-11-07T14:00:00Z", "checkOut": "2025-11-09T10:00:00Z",
             "createdAt": "2025-10-05T00:00:00Z", "totalAmount": 350},
        ],
        "historicalData": {
            "averageOccupancy": 40,
            "averageRevenue": 2000,
            "averageBookings": 4,
            "averageLeadTime": 10,
        },
        "marketMetrics": {
            "averageOccupancy": 60,
            "totalRooms": 50,
            "averageRate": 150,
        },
    }


@pytest.fixture
def export_file(tmp_path, raw_export):
    path = tmp_path / "export.json"
    path.write_text(json.dumps(raw_export), encoding="utf-8")
    return str(path)


@pytest.fixture
def export(export_file):
    """Normalized records loaded from the sample export."""
    return load_export(export_file)


@pytest.fixture
def report_input():
    """Hand-built report input: 70 of 100 rooms occupied, 5 in maintenance."""
    return {
        "occupancy": {
            "occupied": 70,
            "available": 25,
            "maintenance": 5,
            "total": 100,
            "rate": 73.7,
        },
        "revenue": {
            "current_month": 150000,
            "daily_average": 5000,
            "growth_rate": 4.2,
        },
        "bookings": {
            "active": 40,
            "pending": 10,
            "today_checkins": 5,
            "today_checkouts": 3,
            "peak_hours": [14, 15],
            "popular_room": "Deluxe",
        },
    }


@pytest.fixture
def sample_config(tmp_path, export_file):
    """Write a temporary YAML config pointing at the sample export."""
    config = {
        "general": {
            "project_name": "Test LodgeEase",
            "log_dir": str(tmp_path / "logs"),
            "log_level": "DEBUG",
        },
        "data": {"export_path": export_file},
        "benchmarks": {},
        "report": {"currency_symbol": "$", "target_adr": 300},
        "chart_cache": {"ttl_seconds": 300},
        "suggestions": {"window_size": 3, "seed": 42},
        "automation": {
            "generate_dashboard": True,
            "generate_forecast": True,
        },
        "dashboard": {
            "output_dir": str(tmp_path / "data"),
            "filename_template": "test_{date}.xlsx",
            "keep_last": 5,
        },
    }

    config_path = tmp_path / "settings.yaml"
    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(config, f, default_flow_style=False)

    return str(config_path), config
