"""Unit tests for the scheduled scan callback."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from scanjob.jobs.scan import run_scheduled_scan


@pytest.mark.unit
def test_scan_callback_requests_scan_when_enabled(
    workspace_root: Path, caplog: pytest.LogCaptureFixture
) -> None:
    """Enabled antivirus should request a scan with the configured engine."""
    # Arrange - config enabling antivirus
    config_path = workspace_root / "scanjob.yaml"
    config_path.write_text(
        "antivirus:\n  enabled: true\n  default_engine_name: sophos\n",
        encoding="utf-8",
    )

    # Act - fire callback
    with caplog.at_level(logging.INFO, logger="scanjob.jobs.scan"):
        requested = run_scheduled_scan("Antivirus.AntivirusJob", str(config_path))

    # Assert - requested and logged
    assert requested is True
    assert "sophos" in caplog.text


@pytest.mark.unit
def test_scan_callback_skips_when_disabled() -> None:
    """Default config keeps antivirus disabled."""
    assert run_scheduled_scan("Antivirus.AntivirusJob", None) is False


@pytest.mark.unit
def test_scan_callback_skips_on_invalid_config(workspace_root: Path) -> None:
    """Invalid config should skip the scan instead of crashing the scheduler."""
    config_path = workspace_root / "scanjob.json"
    config_path.write_text("{not json", encoding="utf-8")

    assert run_scheduled_scan("Antivirus.AntivirusJob", str(config_path)) is False
