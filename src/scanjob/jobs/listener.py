"""Keep the antivirus scan job scheduled across install and upgrade."""

from __future__ import annotations

import json
import logging
from collections import defaultdict
from datetime import UTC, datetime
from pathlib import Path
from threading import Lock

from pydantic import BaseModel

from scanjob.jobs.errors import (
    EventHandlingError,
    InitializationError,
    SchedulingError,
    StateLookupError,
)
from scanjob.jobs.gateway import SchedulerGateway
from scanjob.jobs.lifecycle import ExecutionContext
from scanjob.jobs.models import (
    ANTIVIRUS_API_ID,
    SCAN_JOB,
    ComponentInstalled,
    EventKind,
    JobIdentity,
    ReconcileDecision,
    ReconcileOutcome,
)
from scanjob.jobs.reconciler import decide

_LOGGER = logging.getLogger(__name__)


class ScanJobSchedulerListener:
    """Schedule the scan job on install and re-register it after upgrades.

    Re-registration happens at initialization rather than on an upgrade
    event: an upgraded component re-initializes all of its listeners, and a
    trigger carried over from the previous version may stay NORMAL while never
    firing again.
    """

    ROLE_HINT = "ScanJobSchedulerListener"

    def __init__(
        self,
        *,
        gateway: SchedulerGateway,
        job: JobIdentity = SCAN_JOB,
        package_id: str = ANTIVIRUS_API_ID,
        events_path: Path | None = None,
    ) -> None:
        """Create listener.

        Args:
            gateway: Scheduler gateway used to read and mutate trigger state.
            job: Managed job identity.
            package_id: Package id whose installation schedules the job.
            events_path: Optional JSONL stream for reconcile outcomes.
        """
        self._gateway = gateway
        self._job = job
        self._package_id = package_id
        self._events_path = events_path
        self._locks: defaultdict[JobIdentity, Lock] = defaultdict(Lock)
        self._locks_guard = Lock()

    @property
    def name(self) -> str:
        """Return the listener name used for bus subscription."""
        return self.ROLE_HINT

    @property
    def events(self) -> tuple[type[BaseModel], ...]:
        """Return the single event type this listener reacts to."""
        return (ComponentInstalled,)

    def initialize(self, context: ExecutionContext) -> ReconcileOutcome | None:
        """Run the post-init recheck when a request context is available.

        Args:
            context: Host execution context capability.

        Returns:
            Reconcile outcome, or ``None`` when skipped during host boot.

        Raises:
            InitializationError: If trigger state or rescheduling fails.
        """
        if not context.has_request_context():
            _LOGGER.debug("Skipping %s recheck: no request context", self._job)
            return None
        try:
            return self.reconcile(EventKind.POST_INIT_RECHECK)
        except (StateLookupError, SchedulingError) as exc:
            raise InitializationError(
                f"Error while rescheduling {self._job}: {exc}",
                data={"job_id": self._job.value, "cause_code": exc.code.value},
            ) from exc

    def on_event(self, event: BaseModel) -> None:
        """Schedule the job when this application's own package is installed.

        Args:
            event: Delivered lifecycle event.

        Raises:
            EventHandlingError: If trigger state or scheduling fails.
        """
        if not isinstance(event, ComponentInstalled):
            return
        if event.package_id != self._package_id:
            return
        try:
            self.reconcile(EventKind.INSTALL_EVENT)
        except (StateLookupError, SchedulingError) as exc:
            raise EventHandlingError(
                f"Error while scheduling {self._job} after install: {exc}",
                data={
                    "job_id": self._job.value,
                    "package_id": event.package_id,
                    "cause_code": exc.code.value,
                },
            ) from exc

    def reconcile(self, event_kind: EventKind) -> ReconcileOutcome:
        """Read trigger state, decide, and apply the decision once.

        Args:
            event_kind: Lifecycle moment being reconciled.

        Returns:
            Outcome of the applied reconciliation.

        Raises:
            StateLookupError: If trigger state cannot be resolved.
            SchedulingError: If a schedule or unschedule call fails.
        """
        with self._lock_for(self._job):
            state = self._gateway.get_trigger_state(self._job)
            decision = decide(event_kind, state)
            if decision == ReconcileDecision.SCHEDULE:
                self._gateway.schedule(self._job)
            elif decision == ReconcileDecision.RESCHEDULE:
                self._gateway.unschedule(self._job)
                self._gateway.schedule(self._job)
        outcome = ReconcileOutcome(
            job=self._job,
            event_kind=event_kind,
            observed_state=state,
            decision=decision,
        )
        _LOGGER.info(
            "Reconciled %s on %s: state=%s decision=%s",
            self._job,
            event_kind.value,
            state.value,
            decision.value,
        )
        self._append_reconcile_event(outcome)
        return outcome

    def _lock_for(self, job: JobIdentity) -> Lock:
        """Return the lock serializing reconciliation of one job.

        Args:
            job: Managed job identity.

        Returns:
            Per-job lock.
        """
        with self._locks_guard:
            return self._locks[job]

    def _append_reconcile_event(self, outcome: ReconcileOutcome) -> None:
        """Append one reconcile outcome to the JSONL stream when configured.

        Write failures are logged; the scheduler change already happened.

        Args:
            outcome: Completed reconcile outcome.
        """
        if self._events_path is None:
            return
        payload = {
            "timestamp": _utc_now(),
            "event_code": "SCHEDULER_RECONCILED",
            "job_id": outcome.job.value,
            "event_kind": outcome.event_kind.value,
            "observed_state": outcome.observed_state.value,
            "decision": outcome.decision.value,
        }
        try:
            self._events_path.parent.mkdir(parents=True, exist_ok=True)
            with self._events_path.open("a", encoding="utf-8") as handle:
                handle.write(json.dumps(payload, sort_keys=True))
                handle.write("\n")
        except OSError as exc:
            _LOGGER.warning(
                "Could not append reconcile event to %s: %s", self._events_path, exc
            )


def _utc_now() -> str:
    """Return UTC timestamp string for reconcile events.

    Returns:
        Normalized UTC timestamp string.
    """
    return (
        datetime.now(tz=UTC).replace(microsecond=0).isoformat().replace("+00:00", "Z")
    )
