"""Business analytics for LodgeEase.

Usage:
    from lodge_analytics import run_analytics
    from lodge_analytics.data_prep import load_export

    export = load_export("data/export.json")
    result = run_analytics(export["bookings"], export["rooms"])
"""

from datetime import datetime

from lodge_analytics.data_prep import build_report_input
from lodge_analytics.forecast import predict_next_month_occupancy
from lodge_analytics.kpi_engine import (
    compute_business_metrics,
    prepare_revenue_analysis,
    room_type_performance,
)
from lodge_analytics.recommendations import (
    generate_actions,
    generate_insights,
    optimization_recommendations,
    pricing_opportunities,
)
from lodge_analytics.report import format_performance_report, print_report
from lodge_analytics.scoring import calculate_performance_score, score_label
from lodge_analytics.suggestions import generate_suggestions, get_suggestions_by_response
from lodge_analytics.trends import analyze_trends

__all__ = [
    "run_analytics",
    "format_performance_report",
    "generate_suggestions",
    "get_suggestions_by_response",
]


def run_analytics(bookings: list[dict], rooms: list[dict],
                  historical_data: dict = None,
                  market_metrics: dict = None,
                  today: datetime = None,
                  benchmarks: dict = None,
                  currency: str = "$",
                  target_adr: float = None,
                  include_forecast: bool = True,
                  print_to_console: bool = True) -> dict:
    """Run all analytics over normalized records and return structured results."""
    today = today or datetime.now()

    # Step 1: Summarize raw records
    report_input = build_report_input(
        bookings, rooms,
        historical_data=historical_data,
        market_metrics=market_metrics,
        today=today,
    )

    # Step 2: Compute all KPIs
    metrics = compute_business_metrics(report_input, benchmarks)
    score = calculate_performance_score(metrics)
    trends = analyze_trends(report_input)
    performance = room_type_performance(report_input["booking_records"], rooms)

    forecast = None
    if include_forecast and rooms:
        forecast = predict_next_month_occupancy(bookings, len(rooms), today)

    result = {
        "metadata": {
            "report_date": today.strftime("%Y-%m-%d"),
            "run_timestamp": datetime.now().isoformat(),
            "booking_count": len(bookings),
            "room_count": len(rooms),
            "currency": currency,
            "target_adr": target_adr,
        },
        "report_input": report_input,
        "metrics": metrics,
        "performance_score": score,
        "score_label": score_label(score),
        "trends": trends,
        "insights": generate_insights(metrics, trends),
        "actions": generate_actions(metrics),
        "revenue_analysis": prepare_revenue_analysis(bookings, rooms, today),
        "room_type_performance": performance,
        "pricing_opportunities": pricing_opportunities(performance),
        "optimization_recommendations": optimization_recommendations(performance),
        "forecast": forecast,
        "report": format_performance_report(report_input, benchmarks, currency),
    }

    if print_to_console:
        print_report(result)

    return result
