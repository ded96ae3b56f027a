"""Excel Dashboard generator using xlsxwriter."""

from datetime import datetime

import xlsxwriter

from lodge_analytics.trends import trend_indicator

# Color palette
LE_NAVY = '#1F3A5F'
LE_BLUE = '#2E6DA4'
LE_LIGHT_BLUE = '#E6EFF8'
LE_WHITE = '#FFFFFF'
LE_DARK_GRAY = '#333333'

CF_GREEN = '#C6EFCE'
CF_YELLOW = '#FFEB9C'
CF_RED = '#FFC7CE'

METRIC_LABELS = [
    ("utilization_rate", "Utilization", "pct"),
    ("revpar", "RevPAR", "money"),
    ("adr", "ADR", "money"),
    ("revenue_per_room", "Revenue per room", "money"),
    ("gross_profit", "Gross operating profit", "money"),
    ("operating_margin", "Operating margin", "pct"),
    ("cost_per_room", "Cost per available room", "money"),
    ("conversion_rate", "Conversion rate", "pct"),
    ("average_lead_time", "Average lead time (days)", "number"),
    ("competitive_index", "Competitive index", "number"),
    ("market_share", "Market share", "pct"),
    ("rate_index", "Rate index", "number"),
]

TREND_LABELS = {
    "occupancy": "Occupancy",
    "revenue": "Revenue",
    "revpar": "RevPAR",
    "booking": "Active bookings",
}


class ExcelDashboard:
    """Generate an Excel dashboard from analytics results."""

    def __init__(self, analytics_result: dict, config: dict = None, chart_data: dict = None):
        self.data = analytics_result
        self.config = config or {}
        self.chart_data = chart_data or {}
        self.workbook = None
        self._formats = {}

    def generate(self, output_path: str) -> str:
        """Create the workbook, write all sheets, close, return path."""
        self.workbook = xlsxwriter.Workbook(output_path)
        try:
            self._init_formats()

            self._write_overview()
            self._write_trends()
            self._write_revenue()
            if self.data.get("forecast"):
                self._write_forecast()
        finally:
            self.workbook.close()
        return output_path

    # ── Format initialization ──────────────────────────────────────────

    def _init_formats(self):
        wb = self.workbook
        currency = self.data.get("metadata", {}).get("currency", "$")
        f = {}

        f["title"] = wb.add_format({
            "bold": True, "font_size": 16, "font_color": LE_NAVY,
            "bottom": 2, "bottom_color": LE_BLUE,
        })
        f["subtitle"] = wb.add_format({"bold": True, "font_size": 12, "font_color": LE_BLUE})
        f["info"] = wb.add_format({"font_size": 10, "font_color": "#666666", "italic": True})
        f["header"] = wb.add_format({
            "bold": True, "font_size": 10, "font_color": LE_WHITE,
            "bg_color": LE_NAVY, "border": 1, "border_color": LE_BLUE,
            "text_wrap": True, "valign": "vcenter",
        })

        for suffix, bg in [("", None), ("_alt", LE_LIGHT_BLUE)]:
            props = {"font_size": 10, "font_color": LE_DARK_GRAY, "border": 1, "border_color": "#DDDDDD"}
            if bg:
                props["bg_color"] = bg
            f[f"text{suffix}"] = wb.add_format(props)
            f[f"money{suffix}"] = wb.add_format({**props, "num_format": f'"{currency}"#,##0.00', "align": "right"})
            f[f"number{suffix}"] = wb.add_format({**props, "num_format": "0.00", "align": "right"})
            f[f"pct{suffix}"] = wb.add_format({**props, "num_format": '0.0"%"', "align": "right"})
            f[f"int{suffix}"] = wb.add_format({**props, "num_format": "0", "align": "center"})

        f["kpi_value"] = wb.add_format({
            "bold": True, "font_size": 22, "font_color": LE_NAVY,
            "align": "center", "valign": "vcenter", "border": 2, "border_color": LE_BLUE,
        })
        f["kpi_label"] = wb.add_format({
            "font_size": 9, "font_color": LE_BLUE, "align": "center", "valign": "vcenter",
            "border": 2, "border_color": LE_BLUE, "text_wrap": True,
        })
        f["trend_up"] = wb.add_format({"font_size": 10, "bg_color": CF_GREEN, "border": 1, "align": "center"})
        f["trend_flat"] = wb.add_format({"font_size": 10, "bg_color": CF_YELLOW, "border": 1, "align": "center"})
        f["trend_down"] = wb.add_format({"font_size": 10, "bg_color": CF_RED, "border": 1, "align": "center"})

        self._formats = f

    # ── Helpers ─────────────────────────────────────────────────────────

    def _fmt(self, name: str, alt: bool = False):
        """Get format, using _alt variant if alt=True."""
        key = f"{name}_alt" if alt else name
        return self._formats.get(key, self._formats.get(name))

    def _write_section_header(self, ws, row: int, title: str) -> int:
        ws.write(row, 0, title, self._formats["subtitle"])
        return row + 1

    def _write_headers(self, ws, row: int, headers: list[str]) -> int:
        for c, h in enumerate(headers):
            ws.write(row, c, h, self._formats["header"])
        return row + 1

    def _set_col_widths(self, ws, widths: list):
        for i, w in enumerate(widths):
            ws.set_column(i, i, w)

    def _write_bullets(self, ws, row: int, title: str, items: list[str]) -> int:
        if not items:
            return row
        row = self._write_section_header(ws, row, title)
        for i, item in enumerate(items):
            ws.write(row, 0, item, self._fmt("text", i % 2 == 1))
            row += 1
        return row + 1

    # ── Sheet 1: Overview ──────────────────────────────────────────────

    def _write_overview(self):
        ws = self.workbook.add_worksheet("Overview")
        ws.set_tab_color(LE_NAVY)
        f = self._formats
        meta = self.data["metadata"]
        metrics = self.data["metrics"]

        ws.merge_range("A1:F1", "LODGEEASE BUSINESS PERFORMANCE", f["title"])
        ws.write(1, 0, f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}  |  "
                       f"Report date: {meta['report_date']}  |  "
                       f"{meta['booking_count']} bookings, {meta['room_count']} rooms", f["info"])

        row = 3
        ws.write(row, 0, "KEY FIGURES", f["subtitle"])
        row += 1

        kpis = [
            ("Performance score", f"{self.data['performance_score']}", self.data["score_label"]),
            ("Utilization", f"{metrics['utilization_rate']:.1f}%", "excl. maintenance"),
            ("RevPAR", f"{metrics['revpar']:.2f}", "per available room-night"),
        ]
        for i, (label, value, desc) in enumerate(kpis):
            col = i * 2
            ws.merge_range(row, col, row, col + 1, value, f["kpi_value"])
            ws.merge_range(row + 1, col, row + 1, col + 1, f"{label}\n{desc}", f["kpi_label"])
        row += 3

        row = self._write_section_header(ws, row, "METRICS")
        self._set_col_widths(ws, [34, 16, 14, 14, 14, 14])
        row = self._write_headers(ws, row, ["Metric", "Value"])
        for i, (key, label, kind) in enumerate(METRIC_LABELS):
            alt = i % 2 == 1
            ws.write(row, 0, label, self._fmt("text", alt))
            ws.write(row, 1, metrics[key], self._fmt(kind, alt))
            row += 1
        row += 1

        row = self._write_bullets(ws, row, "KEY INSIGHTS", self.data.get("insights", []))
        self._write_bullets(ws, row, "RECOMMENDED ACTIONS", self.data.get("actions", []))

        ws.set_landscape()
        ws.set_paper(9)  # A4
        ws.fit_to_pages(1, 0)

    # ── Sheet 2: Trends ────────────────────────────────────────────────

    def _write_trends(self):
        ws = self.workbook.add_worksheet("Trends")
        self._set_col_widths(ws, [22, 14, 12])
        row = self._write_section_header(ws, 0, "CHANGE VS. HISTORICAL BASELINE")
        row = self._write_headers(ws, row + 1, ["Metric", "Change", "Direction"])

        for i, (key, label) in enumerate(TREND_LABELS.items()):
            alt = i % 2 == 1
            pct = self.data["trends"][key]
            indicator = trend_indicator(pct)
            ws.write(row, 0, label, self._fmt("text", alt))
            ws.write(row, 1, pct, self._fmt("pct", alt))
            ws.write(row, 2, indicator, self._formats[f"trend_{indicator}"])
            row += 1

        occupancy = self.chart_data.get("occupancy", {}).get("monthly", [])
        if occupancy:
            row = self._write_section_header(ws, row + 1, "MONTHLY OCCUPANCY")
            row = self._write_headers(ws, row, ["Month", "Occupancy", "Bookings"])
            first = row
            for i, point in enumerate(occupancy):
                alt = i % 2 == 1
                ws.write(row, 0, point["month"], self._fmt("text", alt))
                ws.write(row, 1, point["rate"], self._fmt("pct", alt))
                ws.write(row, 2, point["bookings"], self._fmt("int", alt))
                row += 1

            chart = self.workbook.add_chart({"type": "line"})
            chart.add_series({
                "name": "Occupancy %",
                "categories": ["Trends", first, 0, row - 1, 0],
                "values": ["Trends", first, 1, row - 1, 1],
                "line": {"color": LE_BLUE},
            })
            chart.set_legend({"none": True})
            ws.insert_chart(1, 4, chart)

    # ── Sheet 3: Revenue ───────────────────────────────────────────────

    def _write_revenue(self):
        ws = self.workbook.add_worksheet("Revenue")
        analysis = self.data["revenue_analysis"]
        self._set_col_widths(ws, [26, 16, 12, 12, 12, 14])

        row = self._write_section_header(ws, 0, f"REVENUE - {analysis['period'].upper()}")
        row = self._write_headers(ws, row + 1, ["Month", "Revenue"])
        for i, (month, amount) in enumerate(analysis["monthly_revenue"]):
            alt = i % 2 == 1
            ws.write(row, 0, month, self._fmt("text", alt))
            ws.write(row, 1, amount, self._fmt("money", alt))
            row += 1
        row += 1

        row = self._write_section_header(ws, row, "PER ROOM TYPE")
        row = self._write_headers(ws, row, ["Room type", "Revenue", "Occupancy", "ADR", "RevPAR",
                                             "Demand score"])
        for i, (room_type, p) in enumerate(self.data["room_type_performance"].items()):
            alt = i % 2 == 1
            ws.write(row, 0, room_type, self._fmt("text", alt))
            ws.write(row, 1, p["revenue"], self._fmt("money", alt))
            ws.write(row, 2, p["occupancy"], self._fmt("pct", alt))
            ws.write(row, 3, p["adr"], self._fmt("money", alt))
            ws.write(row, 4, p["revpar"], self._fmt("money", alt))
            ws.write(row, 5, p["demand_score"], self._fmt("number", alt))
            row += 1
        row += 1

        recs = self.data.get("optimization_recommendations") or []
        if recs:
            row = self._write_section_header(ws, row, "OPTIMIZATION")
            row = self._write_headers(ws, row, ["Action", "Category", "Priority"])
            for i, rec in enumerate(recs):
                alt = i % 2 == 1
                ws.write(row, 0, rec["action"], self._fmt("text", alt))
                ws.write(row, 1, rec["category"], self._fmt("text", alt))
                ws.write(row, 2, rec["priority"], self._fmt("text", alt))
                row += 1
            row += 1

        row = self._write_section_header(ws, row, "FORECAST")
        for i, (key, label) in enumerate([("next_month", "Next month"),
                                          ("next_quarter", "Next quarter"),
                                          ("next_year", "Next 12 months")]):
            alt = i % 2 == 1
            ws.write(row, 0, label, self._fmt("text", alt))
            ws.write(row, 1, analysis["forecast"][key], self._fmt("money", alt))
            row += 1

    # ── Sheet 4: Forecast ──────────────────────────────────────────────

    def _write_forecast(self):
        ws = self.workbook.add_worksheet("Forecast")
        forecast = self.data["forecast"]
        details = forecast["details"]
        self._set_col_widths(ws, [30, 16])

        row = self._write_section_header(ws, 0, f"OCCUPANCY FORECAST - {forecast['month'].upper()}")
        rows = [
            ("Predicted occupancy", forecast["predicted_rate"], "pct"),
            ("Confidence", forecast["confidence"], "pct"),
            ("Confirmed bookings", details["confirmed_bookings"], "int"),
            ("Total rooms", details["total_rooms"], "int"),
            ("Last year's occupancy", details["historical_occupancy"], "pct"),
            ("Current pace (bookings/day)", details["current_pace"], "number"),
            ("Expected additional bookings", details["expected_additional"], "number"),
        ]
        row += 1
        for i, (label, value, kind) in enumerate(rows):
            alt = i % 2 == 1
            ws.write(row, 0, label, self._fmt("text", alt))
            ws.write(row, 1, value, self._fmt(kind, alt))
            row += 1
        ws.write(row + 1, 0, f"Booking trend: {forecast['trend']} "
                             f"(confidence {forecast['confidence_label']})", self._formats["info"])
