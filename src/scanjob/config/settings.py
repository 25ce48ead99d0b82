"""Antivirus and scan-job config models and loading helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class AntivirusSettings(BaseModel):
    """Antivirus scanning configuration."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = False
    default_engine_name: str = Field(default="clamav", min_length=1)
    always_send_report: bool = False
    max_file_size: int = Field(default=10, ge=0)


class SchedulerSettings(BaseModel):
    """Scheduled scan trigger and job store configuration."""

    model_config = ConfigDict(extra="forbid")

    cron: str = Field(default="0 0 * * *", min_length=1)
    timezone: str = "UTC"
    sqlite_path: str | None = None
    events_path: str | None = None
    misfire_grace_time: int = Field(default=30, ge=1)

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        """Reject unknown IANA timezone names.

        Args:
            value: Timezone name.

        Returns:
            Validated timezone name.

        Raises:
            ValueError: If the timezone is unknown.
        """
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone '{value}'.") from exc
        return value


class ScanJobConfig(BaseModel):
    """Root scanjob configuration model."""

    model_config = ConfigDict(extra="forbid")

    antivirus: AntivirusSettings = AntivirusSettings()
    scheduler: SchedulerSettings = SchedulerSettings()


class ConfigError(RuntimeError):
    """Raised when config cannot be decoded or validated."""


class AntivirusConfiguration(Protocol):
    """Read-only antivirus configuration surface."""

    def is_enabled(self) -> bool:
        """Return whether upload, page and scheduled scans are enabled."""

    def get_default_engine_name(self) -> str:
        """Return the name of the engine used when scanning."""

    def should_always_send_report(self) -> bool:
        """Return whether scheduled scan reports go out with no infection."""

    def get_max_file_size(self) -> int:
        """Return the maximum file size in MB scanned at upload time."""


class SettingsAntivirusConfiguration:
    """Antivirus configuration backed by loaded settings."""

    def __init__(self, settings: AntivirusSettings) -> None:
        """Store loaded settings.

        Args:
            settings: Validated antivirus settings.
        """
        self._settings = settings

    def is_enabled(self) -> bool:
        """Return the `enabled` setting."""
        return self._settings.enabled

    def get_default_engine_name(self) -> str:
        """Return the `default_engine_name` setting."""
        return self._settings.default_engine_name

    def should_always_send_report(self) -> bool:
        """Return the `always_send_report` setting."""
        return self._settings.always_send_report

    def get_max_file_size(self) -> int:
        """Return the `max_file_size` setting in MB."""
        return self._settings.max_file_size


def _decode_config_payload(path: Path) -> dict[str, object]:
    """Decode config payload from JSON or YAML.

    Args:
        path: Config file path.

    Returns:
        Parsed mapping payload.

    Raises:
        ConfigError: If decode fails or payload is not an object.
    """
    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid config JSON: {exc}") from exc
    else:
        try:
            payload = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid config YAML: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigError("Invalid config payload: root must be an object")
    return payload


def load_config(path: Path) -> ScanJobConfig:
    """Load scanjob config from disk, defaulting when missing.

    Args:
        path: Config file path.

    Returns:
        Parsed config payload, or defaults when file does not exist.

    Raises:
        ConfigError: If payload decode or validation fails.
    """
    if not path.exists():
        return ScanJobConfig()
    payload = _decode_config_payload(path)
    try:
        return ScanJobConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config payload: {exc}") from exc
