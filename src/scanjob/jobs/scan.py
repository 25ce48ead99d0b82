"""Scheduled scan callback fired by the job scheduler."""

from __future__ import annotations

import logging
from pathlib import Path

from scanjob.config import (
    ConfigError,
    ScanJobConfig,
    SettingsAntivirusConfiguration,
    load_config,
)

_LOGGER = logging.getLogger(__name__)


def run_scheduled_scan(job_id: str, config_path: str | None) -> bool:
    """Execute one scheduled scan callback in a pickle-safe module function.

    Args:
        job_id: Managed job identity value.
        config_path: Config file path string, or ``None`` for defaults.

    Returns:
        ``True`` when a scan was requested, ``False`` when scanning is off.
    """
    if config_path is None:
        config = ScanJobConfig()
    else:
        try:
            config = load_config(Path(config_path))
        except ConfigError:
            _LOGGER.exception("Scheduled scan %s skipped: config is invalid", job_id)
            return False
    antivirus = SettingsAntivirusConfiguration(config.antivirus)
    if not antivirus.is_enabled():
        _LOGGER.info("Scheduled scan %s skipped: antivirus is disabled", job_id)
        return False
    _LOGGER.info(
        "Scheduled scan %s requested with engine '%s' (always report: %s)",
        job_id,
        antivirus.get_default_engine_name(),
        antivirus.should_always_send_report(),
    )
    return True
