"""Scan-job scheduling reconciliation public surface."""

from scanjob.jobs.errors import (
    EventHandlingError,
    InitializationError,
    ScanJobError,
    ScanJobErrorCode,
    SchedulingError,
    StateLookupError,
)
from scanjob.jobs.factory import build_gateway, build_listener
from scanjob.jobs.gateway import APSchedulerGateway, SchedulerGateway
from scanjob.jobs.lifecycle import (
    EventBus,
    ExecutionContext,
    ListenerFailure,
    StaticExecutionContext,
)
from scanjob.jobs.listener import ScanJobSchedulerListener
from scanjob.jobs.models import (
    ANTIVIRUS_API_ID,
    SCAN_JOB,
    ComponentInstalled,
    EventKind,
    JobIdentity,
    ReconcileDecision,
    ReconcileOutcome,
    ScanJobDefinition,
    TriggerState,
)
from scanjob.jobs.reconciler import decide

__all__ = [
    "ANTIVIRUS_API_ID",
    "SCAN_JOB",
    "APSchedulerGateway",
    "ComponentInstalled",
    "EventBus",
    "EventHandlingError",
    "EventKind",
    "ExecutionContext",
    "InitializationError",
    "JobIdentity",
    "ListenerFailure",
    "ReconcileDecision",
    "ReconcileOutcome",
    "ScanJobDefinition",
    "ScanJobError",
    "ScanJobErrorCode",
    "ScanJobSchedulerListener",
    "SchedulerGateway",
    "SchedulingError",
    "StateLookupError",
    "StaticExecutionContext",
    "build_gateway",
    "build_listener",
    "decide",
]
