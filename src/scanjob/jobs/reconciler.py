"""Pure scheduling decision for scan-job reconciliation."""

from __future__ import annotations

from scanjob.jobs.models import EventKind, ReconcileDecision, TriggerState

# POST_INIT_RECHECK re-registers a NORMAL trigger because an upgraded job can
# look scheduled while never firing again.
_DECISIONS: dict[tuple[EventKind, TriggerState], ReconcileDecision] = {
    (EventKind.POST_INIT_RECHECK, TriggerState.NORMAL): ReconcileDecision.RESCHEDULE,
    (EventKind.POST_INIT_RECHECK, TriggerState.NONE): ReconcileDecision.NONE,
    (EventKind.POST_INIT_RECHECK, TriggerState.OTHER): ReconcileDecision.NONE,
    (EventKind.INSTALL_EVENT, TriggerState.NORMAL): ReconcileDecision.NONE,
    (EventKind.INSTALL_EVENT, TriggerState.NONE): ReconcileDecision.SCHEDULE,
    (EventKind.INSTALL_EVENT, TriggerState.OTHER): ReconcileDecision.NONE,
}


def decide(event_kind: EventKind, state: TriggerState) -> ReconcileDecision:
    """Map one (event, trigger state) pair to a scheduling decision.

    Args:
        event_kind: Lifecycle moment being reconciled.
        state: Currently observed trigger state.

    Returns:
        Decision to apply through the scheduler gateway.
    """
    return _DECISIONS.get((event_kind, state), ReconcileDecision.NONE)
