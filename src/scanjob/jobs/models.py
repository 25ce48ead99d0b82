"""Scan-job identity, trigger state and reconcile models."""

from __future__ import annotations

from enum import StrEnum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator

ANTIVIRUS_API_ID = "com.xwiki.antivirus:application-antivirus-api"


class TriggerState(StrEnum):
    """Observed scheduler state for one job."""

    NORMAL = "normal"
    NONE = "none"
    OTHER = "other"


class EventKind(StrEnum):
    """Lifecycle moments that start a reconciliation."""

    POST_INIT_RECHECK = "post_init_recheck"
    INSTALL_EVENT = "install_event"


class ReconcileDecision(StrEnum):
    """Scheduling action chosen for one reconciliation."""

    NONE = "none"
    SCHEDULE = "schedule"
    RESCHEDULE = "reschedule"


class JobIdentity(BaseModel):
    """Opaque, fixed name of a managed recurring job."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    value: str = Field(min_length=1)

    def __str__(self) -> str:
        """Return the raw identifier."""
        return self.value


SCAN_JOB = JobIdentity(value="Antivirus.AntivirusJob")


class ScanJobDefinition(BaseModel):
    """Trigger definition the scheduler needs to register one job."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    title: str = Field(default="Antivirus scheduled scan", min_length=1)
    cron: str = Field(default="0 0 * * *", min_length=1)
    timezone: str = "UTC"

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


class ComponentInstalled(BaseModel):
    """Lifecycle event emitted when a package is freshly installed."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    package_id: str


class ReconcileOutcome(BaseModel):
    """Record of one completed reconciliation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    job: JobIdentity
    event_kind: EventKind
    observed_state: TriggerState
    decision: ReconcileDecision
