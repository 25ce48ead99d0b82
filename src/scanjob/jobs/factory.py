"""Build scan-job scheduling collaborators from config."""

from __future__ import annotations

from pathlib import Path

from scanjob.config import ScanJobConfig
from scanjob.jobs.gateway import APSchedulerGateway
from scanjob.jobs.listener import ScanJobSchedulerListener
from scanjob.jobs.models import SCAN_JOB, ScanJobDefinition


def build_gateway(
    config: ScanJobConfig, *, config_path: Path | None = None
) -> APSchedulerGateway:
    """Create the APScheduler gateway for the scan job.

    Args:
        config: Loaded scanjob config.
        config_path: Config file handed to the scan callback.

    Returns:
        Gateway that still needs ``start()``.
    """
    settings = config.scheduler
    definition = ScanJobDefinition(cron=settings.cron, timezone=settings.timezone)
    return APSchedulerGateway(
        definitions={SCAN_JOB: definition},
        sqlite_path=Path(settings.sqlite_path) if settings.sqlite_path else None,
        config_path=config_path,
        misfire_grace_time=settings.misfire_grace_time,
    )


def build_listener(
    config: ScanJobConfig, *, gateway: APSchedulerGateway
) -> ScanJobSchedulerListener:
    """Create the scan-job scheduler listener.

    Args:
        config: Loaded scanjob config.
        gateway: Scheduler gateway.

    Returns:
        Listener bound to the scan job.
    """
    events_path = config.scheduler.events_path
    return ScanJobSchedulerListener(
        gateway=gateway,
        events_path=Path(events_path) if events_path else None,
    )
