"""Unit tests for the in-process lifecycle event bus."""

from __future__ import annotations

import pytest
from pydantic import BaseModel

from scanjob.jobs import ComponentInstalled, EventBus, StaticExecutionContext


class _Uninstalled(BaseModel):
    package_id: str


class _CollectingListener:
    """Listener double collecting delivered events."""

    def __init__(self, name: str, *, error: Exception | None = None) -> None:
        self._name = name
        self._error = error
        self.received: list[BaseModel] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def events(self) -> tuple[type[BaseModel], ...]:
        return (ComponentInstalled,)

    def on_event(self, event: BaseModel) -> None:
        self.received.append(event)
        if self._error is not None:
            raise self._error


@pytest.mark.unit
def test_publish_delivers_only_subscribed_event_types() -> None:
    """Listeners should receive events of their declared types only."""
    # Arrange - bus with one listener
    bus = EventBus()
    listener = _CollectingListener("collector")
    bus.subscribe(listener)

    # Act - publish subscribed and unsubscribed types
    bus.publish(ComponentInstalled(package_id="a"))
    bus.publish(_Uninstalled(package_id="a"))

    # Assert - only install delivered
    assert listener.received == [ComponentInstalled(package_id="a")]


@pytest.mark.unit
def test_publish_isolates_listener_failures() -> None:
    """A failing listener should be reported while others still receive."""
    # Arrange - failing listener registered before healthy one
    bus = EventBus()
    failing = _CollectingListener("failing", error=RuntimeError("boom"))
    healthy = _CollectingListener("healthy")
    bus.subscribe(failing)
    bus.subscribe(healthy)

    # Act - publish
    failures = bus.publish(ComponentInstalled(package_id="a"))

    # Assert - failure reported with listener name, healthy served
    assert [failure.listener for failure in failures] == ["failing"]
    assert str(failures[0].error) == "boom"
    assert len(healthy.received) == 1


@pytest.mark.unit
def test_subscribe_replaces_same_name_and_unsubscribe_removes() -> None:
    """Listener names are unique on the bus."""
    bus = EventBus()
    first = _CollectingListener("listener")
    second = _CollectingListener("listener")
    bus.subscribe(first)
    bus.subscribe(second)

    bus.publish(ComponentInstalled(package_id="a"))
    bus.unsubscribe("listener")
    bus.publish(ComponentInstalled(package_id="b"))

    assert first.received == []
    assert len(second.received) == 1


@pytest.mark.unit
def test_static_execution_context_reports_capability() -> None:
    assert StaticExecutionContext(request_available=True).has_request_context()
    assert not StaticExecutionContext(request_available=False).has_request_context()
