"""Plain-text report formatter for analytics results."""

import sys

from lodge_analytics.forecast import year_over_year_change
from lodge_analytics.kpi_engine import compute_business_metrics
from lodge_analytics.recommendations import (
    forecast_recommendations,
    generate_actions,
    generate_insights,
    revenue_recommendations,
)
from lodge_analytics.scoring import (
    calculate_performance_score,
    competitive_label,
    rate_position,
    score_label,
)
from lodge_analytics.trends import analyze_trends, trend_indicator

BULLET = "•"


def _money(value: float, currency: str, decimals: int = 2) -> str:
    return f"{currency}{value:,.{decimals}f}"


def _share(part, whole) -> str:
    return f"{part / whole * 100:.1f}%" if whole else "0.0%"


def _bullets(title: str, items: list[str]) -> str:
    if not items:
        return ""
    return f"{title}:\n" + "\n".join(f"{BULLET} {item}" for item in items)


def _format_header(score: int) -> str:
    return (
        "Business Performance Dashboard\n"
        f"Performance Score: {score}/100 ({score_label(score)})"
    )


def _format_occupancy(occupancy: dict, metrics: dict, trends: dict, currency: str) -> str:
    if not occupancy:
        return ""
    total = occupancy.get("total") or 0
    lines = [
        "Occupancy Metrics:",
        f"{BULLET} Current Occupancy Rate: {(occupancy.get('rate') or 0):.1f}% "
        f"({trend_indicator(trends['occupancy'])})",
        f"{BULLET} Room Distribution:",
    ]
    for key in ("occupied", "available", "maintenance"):
        count = occupancy.get(key) or 0
        lines.append(f"  - {key.capitalize()}: {count} rooms ({_share(count, total)})")
    lines.append(f"{BULLET} Utilization Efficiency: {metrics['utilization_rate']:.1f}%")
    lines.append(f"{BULLET} RevPAR: {_money(metrics['revpar'], currency)} "
                 f"({trend_indicator(trends['revpar'])})")
    return "\n".join(lines)


def _format_financial(revenue: dict, metrics: dict, currency: str,
                      include_adr: bool) -> str:
    if not revenue:
        return ""
    lines = [
        "Financial Performance:",
        f"{BULLET} Revenue Metrics:",
        f"  - Monthly Revenue: {_money(revenue.get('current_month') or 0, currency, 0)}",
        f"  - Daily Average: {_money(revenue.get('daily_average') or 0, currency)}",
        f"  - Per Room Revenue: {_money(metrics['revenue_per_room'], currency)}",
        f"  - Growth Rate: {(revenue.get('growth_rate') or 0):+.1f}%",
    ]
    if include_adr:
        lines.append(f"  - Average Daily Rate: {_money(metrics['adr'], currency)}")
    lines += [
        f"{BULLET} Profitability Indicators:",
        f"  - Gross Operating Profit: {_money(metrics['gross_profit'], currency, 0)}",
        f"  - Operating Margin: {metrics['operating_margin']:.1f}%",
        f"  - Cost per Available Room: {_money(metrics['cost_per_room'], currency)}",
    ]
    return "\n".join(lines)


def _format_bookings(bookings: dict, metrics: dict) -> str:
    if not bookings:
        return ""
    checkins = bookings.get("today_checkins") or 0
    checkouts = bookings.get("today_checkouts") or 0
    peak_hours = ", ".join(f"{hour}:00" for hour in bookings.get("peak_hours") or []) or "n/a"
    return "\n".join([
        "Booking Analytics:",
        f"{BULLET} Current Status:",
        f"  - Active Bookings: {bookings.get('active') or 0}",
        f"  - Pending Confirmations: {bookings.get('pending') or 0}",
        f"  - Conversion Rate: {metrics['conversion_rate']:.1f}%",
        f"{BULLET} Today's Operations:",
        f"  - Check-ins: {checkins}",
        f"  - Check-outs: {checkouts}",
        f"  - Net Room Change: {checkins - checkouts}",
        f"{BULLET} Booking Patterns:",
        f"  - Average Lead Time: {metrics['average_lead_time']:.1f} days",
        f"  - Peak Hours: {peak_hours}",
        f"  - Most Popular: {bookings.get('popular_room') or 'n/a'}",
    ])


def _format_market(metrics: dict) -> str:
    return "\n".join([
        "Market Position:",
        f"{BULLET} Competitive Index: {metrics['competitive_index']:.2f} "
        f"({competitive_label(metrics['competitive_index'])})",
        f"{BULLET} Market Share: {metrics['market_share']:.1f}%",
        f"{BULLET} Rate Positioning: {rate_position(metrics['rate_index'])}",
    ])


def format_performance_report(data: dict, benchmarks: dict = None,
                              currency: str = "$") -> str:
    """Render the business performance report.

    Section order is fixed: score, occupancy, financial, booking analytics,
    market position, insights, actions. Blocks without data are left out.
    """
    metrics = compute_business_metrics(data, benchmarks)
    score = calculate_performance_score(metrics)
    trends = analyze_trends(data)

    sections = [
        _format_header(score),
        _format_occupancy(data.get("occupancy"), metrics, trends, currency),
        _format_financial(data.get("revenue"), metrics, currency,
                          include_adr=bool(data.get("booking_records"))),
        _format_bookings(data.get("bookings"), metrics),
        _format_market(metrics),
        _bullets("Key Insights", generate_insights(metrics, trends)),
        _bullets("Recommended Actions", generate_actions(metrics)),
    ]
    return "\n\n".join(s for s in sections if s)


def format_occupancy_forecast(prediction: dict) -> str:
    details = prediction["details"]
    sections = [
        f"Occupancy Forecast for {prediction['month']}",
        "\n".join([
            "Primary Metrics:",
            f"{BULLET} Predicted Occupancy Rate: {prediction['predicted_rate']:.1f}%",
            f"{BULLET} Confidence Level: {prediction['confidence']:.1f}% "
            f"({prediction['confidence_label']})",
            f"{BULLET} Booking Trend: {prediction['trend']}",
        ]),
        "\n".join([
            "Current Booking Status:",
            f"{BULLET} Confirmed Bookings: {details['confirmed_bookings']}",
            f"{BULLET} Total Available Rooms: {details['total_rooms']}",
            f"{BULLET} Current Booking Pace: {details['current_pace']:.2f} bookings/day",
            f"{BULLET} Expected Additional Bookings: {details['expected_additional']:.1f}",
        ]),
        "\n".join([
            "Historical Comparison:",
            f"{BULLET} Last Year's Occupancy: {details['historical_occupancy']:.1f}%",
            f"{BULLET} Year-over-Year Change: "
            f"{year_over_year_change(prediction['predicted_rate'], details['historical_occupancy'])}",
        ]),
        _bullets("Recommendations", forecast_recommendations(prediction)),
    ]
    return "\n\n".join(s for s in sections if s)


def format_revenue_analysis(analysis: dict, currency: str = "$",
                            target_adr: float = None) -> str:
    forecast = analysis["forecast"]
    room_types = [
        f"{room_type}: {_money(amount, currency, 0)}"
        for room_type, amount in analysis["room_type_revenue"].items()
    ]
    sections = [
        "\n".join([
            f"Revenue Analysis - {analysis['period']}",
            f"{BULLET} Current Month: {_money(analysis['current_month'], currency, 0)}",
            f"{BULLET} Month-over-Month: {analysis['mom_growth']:+.1f}%",
            f"{BULLET} Year-over-Year: {analysis['yoy_growth']:+.1f}%",
            f"{BULLET} ADR: {_money(analysis['adr'], currency)}",
            f"{BULLET} RevPAR: {_money(analysis['revpar'], currency)}",
        ]),
        _bullets("Revenue by Room Type", room_types),
        "\n".join([
            "Forecast:",
            f"{BULLET} Next Month: {_money(forecast['next_month'], currency, 0)}",
            f"{BULLET} Next Quarter: {_money(forecast['next_quarter'], currency, 0)}",
            f"{BULLET} Next 12 Months: {_money(forecast['next_year'], currency, 0)}",
        ]),
        _bullets("Recommendations", revenue_recommendations(analysis, target_adr)),
    ]
    return "\n\n".join(s for s in sections if s)


def print_report(result: dict):
    """Print the full analytics report to console."""
    # Ensure UTF-8 output on Windows
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")
        except Exception:
            pass

    meta = result["metadata"]
    print("=" * 72)
    print("  LODGEEASE - BUSINESS ANALYTICS REPORT")
    print(f"  Report date: {meta['report_date']}")
    print(f"  Bookings: {meta['booking_count']}  |  Rooms: {meta['room_count']}")
    print("=" * 72)
    print()
    print(result["report"])

    if result.get("revenue_analysis"):
        print("\n" + "-" * 72)
        print(format_revenue_analysis(result["revenue_analysis"],
                                      currency=meta.get("currency", "$"),
                                      target_adr=meta.get("target_adr")))

    if result.get("pricing_opportunities"):
        print("\n" + "-" * 72)
        print("Pricing Opportunities:")
        for opp in result["pricing_opportunities"]:
            print(f"{BULLET} {opp['room_type']}: {opp['recommendation']} "
                  f"(occupancy {opp['occupancy']:.0f}%, ADR {opp['adr']:.2f})")

    if result.get("optimization_recommendations"):
        print("\n" + "-" * 72)
        print("Optimization Recommendations:")
        for rec in result["optimization_recommendations"]:
            print(f"{BULLET} [{rec['priority']}] {rec['action']} ({rec['category']})")

    if result.get("forecast"):
        print("\n" + "-" * 72)
        print(format_occupancy_forecast(result["forecast"]))

    print("\n" + "=" * 72)
