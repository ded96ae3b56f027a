"""Excel workbook for a LodgeEase analytics run.

One file per report date, written from the ``run_analytics()`` result:

    Overview  performance score, KPI cards, insights and actions
    Trends    changes against the export baselines, plus the monthly
              booking/occupancy/revenue series when chart data is given
    Revenue   revenue analysis and the per-room-type table
    Forecast  next-month occupancy forecast (only when one was made)

Files are named from the ``dashboard.filename_template`` setting, whose
``{date}`` placeholder takes the report date. After writing, older
workbooks matching the template in the same directory are pruned down
to ``keep_last``.

Usage:
    from dashboard import generate_dashboard
    path = generate_dashboard(result, config["dashboard"],
                              chart_data=ChartDataService().get_all(bookings, rooms))
"""

import glob
import logging
import os
from datetime import datetime

from dashboard.excel_generator import ExcelDashboard

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "lodgeease_analytics_{date}.xlsx"
DEFAULT_OUTPUT_DIR = "data"
DEFAULT_KEEP_LAST = 30


def dashboard_filename(template: str, report_date: str = None) -> str:
    """File name for the workbook of `report_date` (today when missing)."""
    if "{date}" not in template:
        raise ValueError(f"Dashboard filename template needs a {{date}} field: {template!r}")
    return template.format(date=report_date or datetime.now().strftime("%Y-%m-%d"))


def generate_dashboard(analytics_result: dict, config: dict = None,
                       output_path: str = None, chart_data: dict = None) -> str:
    """Write the analytics workbook and prune old ones.

    Args:
        analytics_result: dict returned by run_analytics()
        config: dashboard section of settings.yaml (optional)
        output_path: explicit file path; skips the template and pruning
        chart_data: ChartDataService.get_all() output (optional)

    Returns:
        Path to the generated Excel file.
    """
    config = config or {}
    template = config.get("filename_template", DEFAULT_TEMPLATE)
    report_date = analytics_result.get("metadata", {}).get("report_date")

    prune = output_path is None
    if output_path is None:
        output_path = os.path.join(config.get("output_dir", DEFAULT_OUTPUT_DIR),
                                   dashboard_filename(template, report_date))

    os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)

    ExcelDashboard(analytics_result, config, chart_data).generate(output_path)
    logger.info(f"Dashboard for {report_date or 'today'} written to {output_path}")

    if prune:
        _cleanup_old_dashboards(output_path, template,
                                config.get("keep_last", DEFAULT_KEEP_LAST))

    return output_path


def _cleanup_old_dashboards(current_path: str, template: str,
                            keep_last: int = DEFAULT_KEEP_LAST) -> list[str]:
    """Remove workbooks beyond the `keep_last` newest; never the current one."""
    if not keep_last or keep_last < 1:
        return []

    pattern = os.path.join(os.path.dirname(current_path) or ".", template.format(date="*"))
    files = sorted(glob.glob(pattern), key=os.path.getmtime, reverse=True)
    current = os.path.abspath(current_path)
    stale = [f for f in files if os.path.abspath(f) != current][max(keep_last - 1, 0):]

    removed = []
    for old_file in stale:
        try:
            os.remove(old_file)
            removed.append(old_file)
        except OSError as e:
            logger.warning(f"Could not remove old dashboard {old_file}: {e}")
    if removed:
        logger.info(f"Pruned {len(removed)} old dashboard(s), keeping {keep_last}")
    return removed
