"""Run LodgeEase business analytics on a JSON export.

Usage:
    python run_report.py                          # Full report, default export
    python run_report.py --data export.json       # Specific export file
    python run_report.py --json                   # Output JSON instead of report
    python run_report.py --forecast               # Occupancy forecast only
    python run_report.py --excel -o report.xlsx   # Also write the Excel dashboard
    python run_report.py --suggest "Occupancy is at 82% this week"
"""

import argparse
import json
import logging
import os
import random
import sys
from datetime import datetime

import yaml

from lodge_analytics import run_analytics
from lodge_analytics.chart_data import CACHE_TTL_SECONDS, ChartDataService
from lodge_analytics.data_prep import load_export
from lodge_analytics.report import format_occupancy_forecast
from lodge_analytics.suggestions import RECENT_TOPIC_LIMIT, SuggestionEngine

logger = logging.getLogger("report")


def setup_logging(log_dir: str = "logs", level: str = "INFO"):
    """Configure logging to both console and file."""
    os.makedirs(log_dir, exist_ok=True)

    log_file = os.path.join(
        log_dir,
        f"analytics_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
    )

    # Root logger
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Console handler
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter(
        "%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    ))
    root.addHandler(console)

    # File handler (more verbose)
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(file_handler)

    return log_file


def load_config(config_path: str = "config/settings.yaml") -> dict:
    """Load configuration from YAML file."""
    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def build_suggestion_engine(config: dict) -> SuggestionEngine:
    settings = config.get("suggestions", {})
    seed = settings.get("seed")
    return SuggestionEngine(
        rng=random.Random(seed) if seed is not None else None,
        window_size=settings.get("window_size", RECENT_TOPIC_LIMIT),
    )


def analyze_export(config: dict, data_path: str = None, print_to_console: bool = True,
                   include_forecast: bool = None) -> tuple[dict, dict]:
    """Load the export and run analytics with configured benchmarks.

    Returns (export, analytics_result).
    """
    data_path = data_path or config.get("data", {}).get("export_path", "data/export.json")
    report_cfg = config.get("report", {})
    if include_forecast is None:
        include_forecast = config.get("automation", {}).get("generate_forecast", True)

    export = load_export(data_path)
    result = run_analytics(
        export["bookings"],
        export["rooms"],
        historical_data=export["historical_data"],
        market_metrics=export["market_metrics"],
        benchmarks=config.get("benchmarks"),
        currency=report_cfg.get("currency_symbol", "$"),
        target_adr=report_cfg.get("target_adr"),
        include_forecast=include_forecast,
        print_to_console=print_to_console,
    )
    return export, result


def main():
    parser = argparse.ArgumentParser(
        description="LodgeEase - Business Analytics Report"
    )
    parser.add_argument("--data", "-d", help="Path to JSON export (overrides config)")
    parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")
    parser.add_argument("--forecast", "-f", action="store_true",
                        help="Print only the next-month occupancy forecast")
    parser.add_argument("--excel", "-e", action="store_true", help="Generate Excel dashboard")
    parser.add_argument("--output", "-o", help="Custom output path for Excel")
    parser.add_argument("--suggest", "-s", metavar="TEXT",
                        help="Print follow-up questions for an assistant response")
    parser.add_argument("--config", default="config/settings.yaml")
    args = parser.parse_args()

    # Ensure UTF-8 output on Windows
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")
        except Exception:
            pass

    config = load_config(args.config)
    setup_logging(
        log_dir=config.get("general", {}).get("log_dir", "logs"),
        level=config.get("general", {}).get("log_level", "INFO"),
    )

    if args.suggest is not None:
        engine = build_suggestion_engine(config)
        topic = engine.classify(args.suggest)
        suggestions = engine.get_suggestions_by_response(args.suggest)
        if args.json:
            print(json.dumps({"topic": topic, "suggestions": suggestions},
                             indent=2, ensure_ascii=False))
        else:
            print(f"Topic: {topic}")
            for suggestion in suggestions:
                print(f"  - {suggestion['text']}")
        return

    try:
        export, result = analyze_export(
            config,
            data_path=args.data,
            print_to_console=not (args.json or args.forecast),
            include_forecast=True if args.forecast else None,
        )
    except (OSError, ValueError) as e:
        logger.error(f"Could not load export: {e}", exc_info=True)
        sys.exit(2)

    if args.forecast:
        if result["forecast"]:
            print(format_occupancy_forecast(result["forecast"]))
        else:
            logger.warning("No rooms in export, forecast skipped")

    if args.json:
        print(json.dumps(result, indent=2, ensure_ascii=False, default=str))

    if args.excel:
        from dashboard import generate_dashboard
        charts = ChartDataService(
            ttl_seconds=config.get("chart_cache", {}).get("ttl_seconds", CACHE_TTL_SECONDS),
        )
        excel_path = generate_dashboard(
            analytics_result=result,
            config=config.get("dashboard", {}),
            output_path=args.output,
            chart_data=charts.get_all(export["bookings"], export["rooms"]),
        )
        print(f"\nExcel dashboard generated: {excel_path}")


if __name__ == "__main__":
    main()
