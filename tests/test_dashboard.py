"""Smoke tests for the Excel dashboard."""

import os
import time
import zipfile

import pytest

from dashboard import dashboard_filename, generate_dashboard
from lodge_analytics import run_analytics
from lodge_analytics.chart_data import ChartDataService


@pytest.fixture
def analytics_result(export, today):
    return run_analytics(
        export["bookings"], export["rooms"],
        historical_data=export["historical_data"],
        market_metrics=export["market_metrics"],
        today=today,
        print_to_console=False,
    )


def _sheet_names(path):
    with zipfile.ZipFile(path) as zf:
        return zf.read("xl/workbook.xml").decode("utf-8")


def test_generate_dashboard(tmp_path, analytics_result, export, today):
    charts = ChartDataService().get_all(export["bookings"], export["rooms"], today)
    path = generate_dashboard(
        analytics_result,
        config={"output_dir": str(tmp_path), "filename_template": "dash_{date}.xlsx"},
        chart_data=charts,
    )

    assert path == os.path.join(str(tmp_path), "dash_2026-10-19.xlsx")
    workbook = _sheet_names(path)
    for sheet in ("Overview", "Trends", "Revenue", "Forecast"):
        assert f'name="{sheet}"' in workbook


def test_dashboard_without_forecast(tmp_path, analytics_result):
    analytics_result["forecast"] = None
    path = generate_dashboard(analytics_result, output_path=str(tmp_path / "out" / "x.xlsx"))

    assert os.path.exists(path)
    assert 'name="Forecast"' not in _sheet_names(path)


def test_dashboard_keeps_last_n(tmp_path, analytics_result):
    old_time = time.time() - 3600
    for day in ("2026-10-01", "2026-10-02", "2026-10-03"):
        old = tmp_path / f"dash_{day}.xlsx"
        old.write_bytes(b"")
        os.utime(old, (old_time, old_time))

    path = generate_dashboard(
        analytics_result,
        config={
            "output_dir": str(tmp_path),
            "filename_template": "dash_{date}.xlsx",
            "keep_last": 2,
        },
    )

    remaining = sorted(p.name for p in tmp_path.glob("dash_*.xlsx"))
    assert len(remaining) == 2
    assert os.path.basename(path) in remaining


def test_dashboard_filename():
    assert dashboard_filename("lodge_{date}.xlsx", "2026-10-19") == "lodge_2026-10-19.xlsx"
    with pytest.raises(ValueError, match="date"):
        dashboard_filename("lodge.xlsx", "2026-10-19")


def test_explicit_output_path_skips_pruning(tmp_path, analytics_result):
    old = tmp_path / "dash_2026-10-01.xlsx"
    old.write_bytes(b"")
    config = {"output_dir": str(tmp_path), "filename_template": "dash_{date}.xlsx",
              "keep_last": 1}

    generate_dashboard(analytics_result, config=config,
                       output_path=str(tmp_path / "dash_custom.xlsx"))

    assert old.exists()


def test_pruning_logs_removed_files(tmp_path, analytics_result, caplog):
    old_time = time.time() - 3600
    old = tmp_path / "dash_2026-10-01.xlsx"
    old.write_bytes(b"")
    os.utime(old, (old_time, old_time))

    with caplog.at_level("INFO", logger="dashboard"):
        generate_dashboard(analytics_result, config={
            "output_dir": str(tmp_path), "filename_template": "dash_{date}.xlsx",
            "keep_last": 1,
        })

    assert not old.exists()
    assert "Pruned 1 old dashboard(s), keeping 1" in caplog.text
