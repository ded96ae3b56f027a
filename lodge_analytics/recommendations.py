"""Rule-based insights and action items keyed off metric thresholds."""


def generate_insights(metrics: dict, trends: dict) -> list[str]:
    """Key insights, in rule order. Every rule is evaluated independently."""
    insights = []

    # Rule 1: utilization under the 70% target
    if metrics["utilization_rate"] < 70:
        insights.append("Room utilization below target - review pricing strategy")

    # Rule 2: thin operating margin
    if metrics["operating_margin"] < 30:
        insights.append("Operating margin needs attention - analyze cost structure")

    # Rule 3: occupancy trailing the market
    if metrics["competitive_index"] < 90:
        insights.append("Market position trailing - evaluate competitive strategy")

    # Rule 4: RevPAR below the historical baseline
    if trends.get("revpar", 0) < 0:
        insights.append("Declining RevPAR - consider revenue management optimization")

    return insights


def generate_actions(metrics: dict) -> list[str]:
    actions = []

    if metrics["utilization_rate"] < 70:
        actions.append("Implement dynamic pricing strategy")
        actions.append("Review distribution channels")

    if metrics["operating_margin"] < 30:
        actions.append("Conduct cost analysis")
        actions.append("Optimize operational efficiency")

    if metrics["conversion_rate"] < 50:
        actions.append("Improve booking process")
        actions.append("Enhance follow-up procedures")

    return actions


def forecast_recommendations(prediction: dict) -> list[str]:
    """Recommendations for an occupancy forecast."""
    recs = []
    predicted = prediction["predicted_rate"]
    details = prediction["details"]

    if predicted < 40:
        recs.append("Consider running promotional campaigns to boost bookings")
        recs.append("Review pricing strategy for competitive rates")

    if details["current_pace"] < 1:
        recs.append("Investigate booking channels for potential issues")
        recs.append("Evaluate marketing effectiveness")

    if details["historical_occupancy"] > predicted:
        recs.append("Analyze factors causing lower booking rates")
        recs.append("Review current market conditions")

    return recs


def revenue_recommendations(analysis: dict, target_adr: float = None) -> list[str]:
    recs = []
    if analysis["mom_growth"] < 0:
        recs.append("Investigate factors contributing to monthly revenue decline")
    if target_adr and analysis["adr"] < target_adr:
        recs.append("Consider optimizing room rates to improve ADR")
    return recs


def _average_adr(performance: dict) -> float:
    rates = [p["adr"] for p in performance.values() if p["adr"] > 0]
    return sum(rates) / len(rates) if rates else 0.0


def pricing_opportunities(performance: dict) -> list[dict]:
    """Room types whose rate is out of line with their demand."""
    average_adr = _average_adr(performance)
    if not average_adr:
        return []

    opportunities = []
    for room_type, p in performance.items():
        if p["occupancy"] > 80 and p["adr"] < average_adr:
            recommendation = "Increase rates due to high demand"
        elif p["occupancy"] < 50 and p["adr"] > average_adr:
            recommendation = "Consider promotional rates to boost occupancy"
        else:
            continue
        opportunities.append({
            "room_type": room_type,
            "recommendation": recommendation,
            "occupancy": p["occupancy"],
            "adr": p["adr"],
            "average_adr": average_adr,
        })
    return opportunities


def optimization_recommendations(performance: dict) -> list[dict]:
    """Revenue, occupancy and pricing actions per room type.

    Grouped by category in that order; within a category, room types keep
    the order of ``performance``.
    """
    if not performance:
        return []
    average_revpar = sum(p["revpar"] for p in performance.values()) / len(performance)
    average_adr = _average_adr(performance)
    recs = []

    # Rule 1: RevPAR under the average across room types
    for room_type, p in performance.items():
        if p["revpar"] < average_revpar:
            recs.append({
                "category": "revenue",
                "priority": "high",
                "action": f"Optimize RevPAR for {room_type} rooms through dynamic pricing",
            })

    # Rule 2: occupancy under 60%, urgent under 40%
    for room_type, p in performance.items():
        if p["occupancy"] < 60:
            recs.append({
                "category": "occupancy",
                "priority": "high" if p["occupancy"] < 40 else "medium",
                "action": f"Implement targeted marketing for {room_type} rooms",
            })

    # Rule 3: full rooms sold below the average rate
    for room_type, p in performance.items():
        if p["occupancy"] > 80 and p["adr"] < average_adr:
            recs.append({
                "category": "pricing",
                "priority": "high",
                "action": f"Increase rates for {room_type} rooms during high demand",
            })

    return recs
