"""Deterministic scan-job scheduling error contracts."""

from __future__ import annotations

from enum import StrEnum


class ScanJobErrorCode(StrEnum):
    """Stable scan-job scheduling error codes."""

    STATE_LOOKUP_FAILED = "state_lookup_failed"
    SCHEDULING_FAILED = "scheduling_failed"
    INITIALIZATION_FAILED = "initialization_failed"
    EVENT_HANDLING_FAILED = "event_handling_failed"


class ScanJobError(RuntimeError):
    """Scan-job failure with stable deterministic code."""

    code: ScanJobErrorCode

    def __init__(
        self,
        message: str,
        *,
        data: dict[str, object] | None = None,
    ) -> None:
        """Create scan-job failure.

        Args:
            message: Human-readable error message.
            data: Optional structured payload for diagnostics.
        """
        super().__init__(message)
        self.data = data or {}


class StateLookupError(ScanJobError):
    """Trigger state cannot be determined, e.g. the job definition is missing."""

    code = ScanJobErrorCode.STATE_LOOKUP_FAILED


class SchedulingError(ScanJobError):
    """Scheduler refused a schedule or unschedule call."""

    code = ScanJobErrorCode.SCHEDULING_FAILED

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        data: dict[str, object] | None = None,
    ) -> None:
        """Create scheduling failure.

        Args:
            message: Human-readable error message.
            cause: Underlying scheduler exception, if any.
            data: Optional structured payload for diagnostics.
        """
        super().__init__(message, data=data)
        self.cause = cause


class InitializationError(ScanJobError):
    """Post-init recheck failed; the owning component must not come up."""

    code = ScanJobErrorCode.INITIALIZATION_FAILED


class EventHandlingError(ScanJobError):
    """Install-event reconciliation failed for one delivered event."""

    code = ScanJobErrorCode.EVENT_HANDLING_FAILED
