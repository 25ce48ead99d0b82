"""Test-only helpers for unit tests. Not part of the scanjob API."""

from __future__ import annotations

import time

from scanjob.jobs import JobIdentity, SchedulingError, StateLookupError, TriggerState


class RecordingGateway:
    """Scheduler gateway double that records call order and reflects state.

    ``fail_on`` names gateway calls that raise instead of succeeding. A
    successful ``schedule`` moves state to NORMAL, ``unschedule`` to NONE.
    """

    def __init__(
        self,
        state: TriggerState = TriggerState.NONE,
        *,
        fail_on: frozenset[str] = frozenset(),
        read_delay: float = 0.0,
    ) -> None:
        self.state = state
        self.fail_on = fail_on
        self.read_delay = read_delay
        self.calls: list[tuple[str, str]] = []

    def get_trigger_state(self, job: JobIdentity) -> TriggerState:
        self.calls.append(("get_trigger_state", job.value))
        if "get_trigger_state" in self.fail_on:
            raise StateLookupError(f"Error: job definition '{job}' was not found.")
        if self.read_delay:
            time.sleep(self.read_delay)
        return self.state

    def schedule(self, job: JobIdentity) -> None:
        self.calls.append(("schedule", job.value))
        if "schedule" in self.fail_on:
            cause = RuntimeError("store unavailable")
            raise SchedulingError("Error: could not schedule", cause=cause) from cause
        self.state = TriggerState.NORMAL

    def unschedule(self, job: JobIdentity) -> None:
        self.calls.append(("unschedule", job.value))
        if "unschedule" in self.fail_on:
            cause = RuntimeError("store unavailable")
            raise SchedulingError("Error: could not unschedule", cause=cause) from cause
        self.state = TriggerState.NONE

    @property
    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    @property
    def mutations(self) -> list[str]:
        return [name for name in self.call_names if name != "get_trigger_state"]
