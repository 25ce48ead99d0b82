"""Unit tests for the pure scan-job reconcile decision."""

from __future__ import annotations

import pytest

from scanjob.jobs import EventKind, ReconcileDecision, TriggerState, decide


@pytest.mark.unit
@pytest.mark.parametrize(
    ("event_kind", "state", "expected"),
    [
        (
            EventKind.POST_INIT_RECHECK,
            TriggerState.NORMAL,
            ReconcileDecision.RESCHEDULE,
        ),
        (EventKind.POST_INIT_RECHECK, TriggerState.NONE, ReconcileDecision.NONE),
        (EventKind.POST_INIT_RECHECK, TriggerState.OTHER, ReconcileDecision.NONE),
        (EventKind.INSTALL_EVENT, TriggerState.NORMAL, ReconcileDecision.NONE),
        (EventKind.INSTALL_EVENT, TriggerState.NONE, ReconcileDecision.SCHEDULE),
        (EventKind.INSTALL_EVENT, TriggerState.OTHER, ReconcileDecision.NONE),
    ],
)
def test_decide_matches_decision_table(
    event_kind: EventKind,
    state: TriggerState,
    expected: ReconcileDecision,
) -> None:
    """Every (event, state) pair should map to its fixed decision."""
    assert decide(event_kind, state) == expected


@pytest.mark.unit
def test_decide_never_schedules_over_normal_trigger() -> None:
    """No event kind should yield a bare SCHEDULE for a NORMAL trigger."""
    decisions = {decide(kind, TriggerState.NORMAL) for kind in EventKind}

    assert ReconcileDecision.SCHEDULE not in decisions
