"""Scheduler gateway contract and its APScheduler-backed implementation."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from threading import Lock
from typing import Protocol
from zoneinfo import ZoneInfo

from apscheduler.jobstores.base import ConflictingIdError, JobLookupError
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.jobstores.sqlalchemy import SQLAlchemyJobStore
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.exc import SQLAlchemyError

from scanjob.jobs.errors import SchedulingError, StateLookupError
from scanjob.jobs.models import JobIdentity, ScanJobDefinition, TriggerState
from scanjob.jobs.scan import run_scheduled_scan

_LOGGER = logging.getLogger(__name__)
_APS_JOB_PREFIX = "job:"


class SchedulerGateway(Protocol):
    """Synchronous view over the host job scheduler."""

    def get_trigger_state(self, job: JobIdentity) -> TriggerState:
        """Return current trigger state; raise ``StateLookupError`` if unknown."""

    def schedule(self, job: JobIdentity) -> None:
        """Register the job trigger; raise ``SchedulingError`` on failure."""

    def unschedule(self, job: JobIdentity) -> None:
        """Remove the job trigger; raise ``SchedulingError`` on failure."""


class APSchedulerGateway:
    """Scheduler gateway over an APScheduler background scheduler."""

    def __init__(
        self,
        *,
        definitions: Mapping[JobIdentity, ScanJobDefinition],
        sqlite_path: Path | None = None,
        config_path: Path | None = None,
        misfire_grace_time: int = 30,
    ) -> None:
        """Create gateway and its (not yet started) scheduler.

        Args:
            definitions: Trigger definitions for each managed job.
            sqlite_path: SQLite path for durable triggers; in-memory when ``None``.
            config_path: Config file handed to the scan callback.
            misfire_grace_time: Scheduler job misfire grace time in seconds.
        """
        self._definitions = dict(definitions)
        self._sqlite_path = sqlite_path
        self._config_path = config_path
        if sqlite_path is not None:
            sqlite_path.parent.mkdir(parents=True, exist_ok=True)
            jobstore: MemoryJobStore | SQLAlchemyJobStore = SQLAlchemyJobStore(
                url=f"sqlite:///{sqlite_path}"
            )
        else:
            jobstore = MemoryJobStore()
        self._scheduler = BackgroundScheduler(
            timezone=ZoneInfo("UTC"),
            jobstores={"default": jobstore},
            job_defaults={
                "coalesce": True,
                "max_instances": 1,
                "misfire_grace_time": misfire_grace_time,
            },
        )
        self._lock = Lock()
        self._started = False

    def start(self) -> None:
        """Start the scheduler so stored triggers become visible and fire."""
        with self._lock:
            if self._started:
                return
            self._scheduler.start(paused=False)
            self._started = True

    def shutdown(self) -> None:
        """Shutdown scheduler service if running."""
        with self._lock:
            if not self._started:
                return
            self._scheduler.shutdown(wait=True)
            jobstores = self._scheduler._jobstores.values()
            for store in jobstores:
                if isinstance(store, SQLAlchemyJobStore):
                    store.engine.dispose()
            self._started = False

    def get_trigger_state(self, job: JobIdentity) -> TriggerState:
        """Resolve the trigger state of one managed job.

        Args:
            job: Managed job identity.

        Returns:
            ``NONE`` when absent, ``OTHER`` when paused, else ``NORMAL``.

        Raises:
            StateLookupError: If the job has no definition, the store fails, or
                the stored callback can no longer be resolved.
        """
        self._require_definition(job)
        if not self._started:
            raise StateLookupError(
                f"Error: scheduler is not running; cannot read state of '{job}'.",
                data={"job_id": job.value},
            )
        try:
            aps_job = self._scheduler.get_job(self._aps_job_id(job))
        except (LookupError, ValueError, SQLAlchemyError) as exc:
            raise StateLookupError(
                f"Error: could not read trigger state of '{job}': {exc}",
                data={"job_id": job.value},
            ) from exc
        if aps_job is None:
            return TriggerState.NONE
        if aps_job.next_run_time is None:
            return TriggerState.OTHER
        return TriggerState.NORMAL

    def schedule(self, job: JobIdentity) -> None:
        """Register one job trigger; never replaces an existing one.

        Args:
            job: Managed job identity.

        Raises:
            SchedulingError: If the trigger cannot be registered.
        """
        definition = self._require_schedulable(job)
        try:
            trigger = CronTrigger.from_crontab(
                definition.cron,
                timezone=ZoneInfo(definition.timezone),
            )
            self._scheduler.add_job(
                run_scheduled_scan,
                trigger=trigger,
                args=(job.value, self._callback_config_path()),
                id=self._aps_job_id(job),
                name=definition.title,
                replace_existing=False,
                coalesce=True,
                max_instances=1,
            )
        except (ConflictingIdError, SQLAlchemyError, ValueError) as exc:
            raise SchedulingError(
                f"Error: could not schedule '{job}': {exc}",
                cause=exc,
                data={"job_id": job.value},
            ) from exc
        _LOGGER.info("Scheduled %s with cron '%s'", job, definition.cron)

    def unschedule(self, job: JobIdentity) -> None:
        """Remove one job trigger.

        Args:
            job: Managed job identity.

        Raises:
            SchedulingError: If the trigger cannot be removed.
        """
        self._require_schedulable(job)
        try:
            self._scheduler.remove_job(self._aps_job_id(job))
        except (JobLookupError, SQLAlchemyError) as exc:
            raise SchedulingError(
                f"Error: could not unschedule '{job}': {exc}",
                cause=exc,
                data={"job_id": job.value},
            ) from exc
        _LOGGER.info("Unscheduled %s", job)

    def status(self, job: JobIdentity) -> dict[str, object]:
        """Return scheduler diagnostics payload for one job.

        Args:
            job: Managed job identity.

        Returns:
            Deterministic status payload.
        """
        trigger_state = self.get_trigger_state(job)
        aps_job = self._scheduler.get_job(self._aps_job_id(job))
        next_run = None
        if aps_job is not None and aps_job.next_run_time is not None:
            next_run = aps_job.next_run_time.isoformat()
        return {
            "started": self._started,
            "job_id": job.value,
            "store": "sqlite" if self._sqlite_path is not None else "memory",
            "sqlite_path": str(self._sqlite_path) if self._sqlite_path else None,
            "trigger_state": trigger_state.value,
            "next_run_time": next_run,
        }

    def _require_definition(self, job: JobIdentity) -> ScanJobDefinition:
        """Return the job definition or raise a lookup error.

        Args:
            job: Managed job identity.

        Returns:
            Trigger definition.

        Raises:
            StateLookupError: If no definition is registered for the job.
        """
        definition = self._definitions.get(job)
        if definition is None:
            raise StateLookupError(
                f"Error: job definition '{job}' was not found.",
                data={"job_id": job.value},
            )
        return definition

    def _require_schedulable(self, job: JobIdentity) -> ScanJobDefinition:
        """Return the definition of a job that may be mutated right now.

        Args:
            job: Managed job identity.

        Returns:
            Trigger definition.

        Raises:
            SchedulingError: If the definition is missing or scheduler is stopped.
        """
        try:
            definition = self._require_definition(job)
        except StateLookupError as exc:
            raise SchedulingError(str(exc), cause=exc, data=exc.data) from exc
        if not self._started:
            raise SchedulingError(
                f"Error: scheduler is not running; cannot change '{job}'.",
                data={"job_id": job.value},
            )
        return definition

    def _callback_config_path(self) -> str | None:
        """Return the pickle-safe config path argument for the scan callback.

        Returns:
            Config path string, or ``None`` for default config.
        """
        return str(self._config_path) if self._config_path is not None else None

    @staticmethod
    def _aps_job_id(job: JobIdentity) -> str:
        """Map job identity to APScheduler job id namespace.

        Args:
            job: Managed job identity.

        Returns:
            APScheduler job identifier.
        """
        return f"{_APS_JOB_PREFIX}{job.value}"
