"""Tests for the KPI engine."""

from datetime import datetime

import pytest

from lodge_analytics.kpi_engine import (
    average_growth_rate,
    compute_adr,
    compute_business_metrics,
    compute_demand_score,
    compute_utilization,
    forecast_revenue,
    month_over_month_growth,
    nights_between,
    prepare_revenue_analysis,
    room_type_performance,
    seasonal_patterns,
    trailing_monthly_revenue,
)


def test_business_metrics_example(report_input):
    """70 occupied of 95 sellable rooms, 150k monthly revenue."""
    m = compute_business_metrics(report_input)

    assert m["utilization_rate"] == pytest.approx(73.68, abs=0.01)
    assert m["revpar"] == pytest.approx(50)
    assert m["revenue_per_room"] == pytest.approx(1500)
    assert m["gross_profit"] == pytest.approx(97500)
    assert m["operating_margin"] == pytest.approx(65)
    assert m["cost_per_room"] == pytest.approx(525)
    assert m["conversion_rate"] == pytest.approx(80)
    assert m["rate_index"] == pytest.approx(5000 / 70)


def test_business_metrics_fall_back_to_benchmarks(report_input):
    """Without market or history data the benchmark table applies."""
    m = compute_business_metrics(report_input)
    assert m["competitive_index"] == pytest.approx(73.7 / 65 * 100)
    assert m["market_share"] == pytest.approx(100)
    assert m["average_lead_time"] == 14
    assert m["adr"] == 0


def test_business_metrics_market_data_wins(report_input):
    report_input["market_metrics"] = {"average_occupancy": 50, "total_rooms": 400}
    report_input["historical_data"] = {"average_lead_time": 21}
    m = compute_business_metrics(report_input, {"market_average_occupancy": 80})

    assert m["competitive_index"] == pytest.approx(73.7 / 50 * 100)
    assert m["market_share"] == pytest.approx(25)
    assert m["average_lead_time"] == 21


def test_business_metrics_config_overrides(report_input):
    m = compute_business_metrics(report_input, {"days_per_month": 25, "market_total_rooms": 200})
    assert m["revpar"] == pytest.approx(60)
    assert m["market_share"] == pytest.approx(50)


def test_business_metrics_empty_input():
    """Zero denominators give 0, nothing raises."""
    m = compute_business_metrics({})
    assert all(value == 0 for key, value in m.items() if key != "average_lead_time")


def test_utilization_all_rooms_in_maintenance():
    assert compute_utilization({"occupied": 0, "total": 4, "maintenance": 4}) == 0


def test_nights_between_rounds_partial_days_up():
    assert nights_between(datetime(2026, 10, 5, 14), datetime(2026, 10, 8, 11)) == 3
    assert nights_between(datetime(2026, 10, 5), datetime(2026, 10, 7)) == 2
    assert nights_between(None, datetime(2026, 10, 7)) == 0


def test_adr_without_bookings_is_zero():
    assert compute_adr([]) == 0


def test_adr_over_room_nights(export):
    billable = [b for b in export["bookings"] if not b["cancelled"]]
    # 3250 revenue over 3+2+2+2+3+2 nights
    assert compute_adr(billable) == pytest.approx(3250 / 14)


def test_month_over_month_growth(export, today):
    billable = [b for b in export["bookings"] if not b["cancelled"]]
    # October 1600 vs. September 400
    assert month_over_month_growth(billable, today) == pytest.approx(300)


def test_month_over_month_growth_in_january():
    bookings = [
        {"check_in": datetime(2025, 12, 10), "total_amount": 100},
        {"check_in": datetime(2026, 1, 10), "total_amount": 150},
    ]
    assert month_over_month_growth(bookings, datetime(2026, 1, 20)) == pytest.approx(50)


def test_trailing_monthly_revenue_order(export, today):
    monthly = trailing_monthly_revenue(export["bookings"], today, months=3)
    assert [month for month, _ in monthly] == ["2026-08", "2026-09", "2026-10"]


def test_average_growth_rate_skips_zero_periods():
    assert average_growth_rate([100, 0, 50, 100]) == pytest.approx((-1 + 1) / 2)
    assert average_growth_rate([]) == 0


def test_forecast_revenue_compounds():
    assert forecast_revenue(100, 10, periods=3) == [110.0, 121.0, 133.1]


def test_seasonal_patterns_cover_all_months(export):
    patterns = seasonal_patterns(export["bookings"])
    assert len(patterns) == 12
    november = patterns[10]
    assert november["month"] == "November"
    assert november["bookings"] == 2
    assert november["average_booking_value"] == pytest.approx(625)


def test_room_type_performance(export):
    billable = [b for b in export["bookings"] if not b["cancelled"]]
    perf = room_type_performance(billable, export["rooms"])

    assert list(perf) == ["Deluxe", "Standard", "Suite"]
    assert perf["Deluxe"]["revenue"] == pytest.approx(1500)
    assert perf["Deluxe"]["occupancy"] == pytest.approx(50)
    assert perf["Deluxe"]["adr"] == pytest.approx(250)
    assert perf["Standard"]["adr"] == pytest.approx(175)
    assert perf["Suite"]["occupancy"] == 0
    assert perf["Deluxe"]["demand_score"] == pytest.approx(70)
    assert perf["Standard"]["demand_score"] == pytest.approx(68)
    assert perf["Suite"]["demand_score"] == pytest.approx(700 / 1500 * 40)


def test_demand_score_without_revenue():
    assert compute_demand_score(50, 0, 0) == pytest.approx(30)
    assert compute_demand_score(100, 500, 500) == pytest.approx(100)


def test_prepare_revenue_analysis(export, today):
    analysis = prepare_revenue_analysis(export["bookings"], export["rooms"], today)

    assert analysis["period"] == "October 2026"
    assert analysis["current_month"] == pytest.approx(1600)
    assert analysis["total"] == pytest.approx(3250)
    assert analysis["mom_growth"] == pytest.approx(300)
    assert analysis["revpar"] == pytest.approx(1600 / (6 * 31))
    assert len(analysis["monthly_revenue"]) == 12
    assert analysis["forecast"]["next_month"] == pytest.approx(3200)
