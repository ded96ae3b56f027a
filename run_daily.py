"""Daily pipeline: load export + analytics + Excel dashboard.

Loads the latest booking/room export, computes analytics and generates
an Excel dashboard in one automated run. Designed for Task Scheduler
or cron.

Exit codes:
    0 = success
    1 = partial (analytics OK, dashboard failed)
    2 = fatal (no data or critical error)

Usage:
    python run_daily.py                    # Full run
    python run_daily.py --skip-dashboard   # Analytics only
    python run_daily.py --data export.json
    python run_daily.py --config alt.yaml
"""

import argparse
import logging
import sys
import time
from datetime import datetime

from run_report import analyze_export, load_config, setup_logging
from lodge_analytics.chart_data import CACHE_TTL_SECONDS, ChartDataService


EXIT_SUCCESS = 0
EXIT_PARTIAL = 1
EXIT_FATAL = 2


def run_pipeline(config: dict, data_path: str = None,
                 skip_dashboard: bool = False) -> int:
    """Run the full daily pipeline.

    Returns exit code (0=success, 1=partial, 2=fatal).
    """
    logger = logging.getLogger("daily")
    start_time = time.time()
    today = datetime.now().strftime("%Y-%m-%d")

    # --- Phase 1: Export + analytics ---
    logger.info("\n--- Analytics ---")
    try:
        export, analytics_result = analyze_export(
            config, data_path=data_path, print_to_console=True,
        )
    except FileNotFoundError as e:
        logger.error(f"  Export not found: {e}")
        return EXIT_FATAL
    except Exception as e:
        logger.error(f"  Analytics failed: {e}", exc_info=True)
        return EXIT_FATAL

    if not export["bookings"] and not export["rooms"]:
        logger.error("  Export contains no bookings and no rooms")
        return EXIT_FATAL

    meta = analytics_result["metadata"]
    logger.info(
        f"  {meta['booking_count']} bookings, {meta['room_count']} rooms, "
        f"score {analytics_result['performance_score']}/100"
    )

    # --- Phase 2: Excel Dashboard ---
    excel_path = None
    dashboard_failed = False
    should_generate_dashboard = config.get("automation", {}).get("generate_dashboard", True)

    if should_generate_dashboard and not skip_dashboard:
        logger.info("\n--- Generating Excel dashboard ---")
        try:
            from dashboard import generate_dashboard
            charts = ChartDataService(
                ttl_seconds=config.get("chart_cache", {}).get("ttl_seconds", CACHE_TTL_SECONDS),
            )
            excel_path = generate_dashboard(
                analytics_result=analytics_result,
                config=config.get("dashboard", {}),
                chart_data=charts.get_all(export["bookings"], export["rooms"]),
            )
            logger.info(f"  Dashboard: {excel_path}")
        except Exception as e:
            dashboard_failed = True
            logger.error(f"  Dashboard generation failed: {e}", exc_info=True)
    else:
        logger.info("Dashboard skipped")

    # --- Summary ---
    total_duration = time.time() - start_time
    forecast = analytics_result.get("forecast")

    logger.info("\n" + "=" * 60)
    logger.info("DAILY RUN COMPLETE")
    logger.info(f"  Date:            {today}")
    logger.info(f"  Duration:        {total_duration:.1f}s")
    logger.info(f"  Score:           {analytics_result['performance_score']}/100 "
                f"({analytics_result['score_label']})")
    logger.info(f"  Insights:        {len(analytics_result['insights'])}")
    logger.info(f"  Pricing advice:  {len(analytics_result['pricing_opportunities'])}")
    if forecast:
        logger.info(f"  Forecast:        {forecast['predicted_rate']:.1f}% "
                    f"for {forecast['month']}")
    if excel_path:
        logger.info(f"  Dashboard:       {excel_path}")
    logger.info("=" * 60)

    if dashboard_failed:
        return EXIT_PARTIAL
    return EXIT_SUCCESS


def main():
    parser = argparse.ArgumentParser(
        description="LodgeEase - Daily Analytics Pipeline"
    )
    parser.add_argument(
        "--skip-dashboard", action="store_true",
        help="Only run analytics, do not write the Excel dashboard",
    )
    parser.add_argument("--data", help="Path to JSON export (overrides config)")
    parser.add_argument(
        "--config", default="config/settings.yaml",
        help="Path to configuration file",
    )
    args = parser.parse_args()

    # Ensure UTF-8 output on Windows
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")
        except Exception:
            pass

    config = load_config(args.config)

    log_file = setup_logging(
        log_dir=config.get("general", {}).get("log_dir", "logs"),
        level=config.get("general", {}).get("log_level", "INFO"),
    )

    logger = logging.getLogger("daily")
    logger.info("=" * 60)
    logger.info("LODGEEASE - DAILY RUN")
    logger.info(f"  Date:       {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    logger.info(f"  Mode:       {'analytics only' if args.skip_dashboard else 'full'}")
    logger.info(f"  Log:        {log_file}")
    logger.info("=" * 60)

    exit_code = run_pipeline(
        config=config,
        data_path=args.data,
        skip_dashboard=args.skip_dashboard,
    )

    status_msg = {
        EXIT_SUCCESS: "SUCCESS",
        EXIT_PARTIAL: "PARTIAL (dashboard failed)",
        EXIT_FATAL: "FAILED",
    }
    logger.info(f"\nFinal status: {status_msg.get(exit_code, '?')} (exit code {exit_code})")
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
