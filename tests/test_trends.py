"""Tests for trend analysis."""

import pytest

from lodge_analytics.trends import (
    analyze_trends,
    revpar_trend,
    trend_direction,
    trend_indicator,
    trend_percentage,
)


def test_trend_percentage():
    assert trend_percentage(110, 100) == pytest.approx(10)
    assert trend_percentage(50, 100) == pytest.approx(-50)


def test_trend_without_baseline_is_zero():
    assert trend_percentage(100, 0) == 0
    assert trend_percentage(100, None) == 0


def test_analyze_trends_without_history(report_input):
    assert analyze_trends(report_input) == {
        "occupancy": 0.0, "revenue": 0.0, "revpar": 0.0, "booking": 0.0,
    }


def test_analyze_trends_against_history(report_input):
    report_input["historical_data"] = {
        "average_occupancy": 67,
        "average_revenue": 120000,
        "average_bookings": 50,
    }
    trends = analyze_trends(report_input)

    assert trends["occupancy"] == pytest.approx(10)
    assert trends["revenue"] == pytest.approx(25)
    assert trends["revpar"] == pytest.approx(25)
    assert trends["booking"] == pytest.approx(-20)


def test_revpar_trend_zero_history_revenue(report_input):
    report_input["historical_data"] = {"average_revenue": 0, "average_occupancy": 50}
    assert revpar_trend(report_input) == 0


def test_revpar_trend_without_rooms():
    data = {"revenue": {"current_month": 1000}, "historical_data": {"average_revenue": 500}}
    assert revpar_trend(data) == 0


def test_trend_direction():
    assert trend_direction(2, 1) == "increasing"
    assert trend_direction(1, 2) == "decreasing"
    assert trend_direction(1, 1) == "stable"


def test_trend_indicator():
    assert trend_indicator(5.1) == "up"
    assert trend_indicator(5) == "flat"
    assert trend_indicator(-5) == "flat"
    assert trend_indicator(-5.1) == "down"
