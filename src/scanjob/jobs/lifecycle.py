"""In-process lifecycle event source and execution context capability."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import Lock
from typing import Protocol

from pydantic import BaseModel

_LOGGER = logging.getLogger(__name__)


class ExecutionContext(Protocol):
    """Host capability queried before post-init work runs."""

    def has_request_context(self) -> bool:
        """Return whether a request/operation context is available."""


@dataclass(frozen=True)
class StaticExecutionContext:
    """Execution context with a fixed capability answer."""

    request_available: bool

    def has_request_context(self) -> bool:
        """Return the fixed capability answer."""
        return self.request_available


class EventListener(Protocol):
    """Named subscriber to a fixed set of lifecycle event types."""

    @property
    def name(self) -> str: ...

    @property
    def events(self) -> tuple[type[BaseModel], ...]: ...

    def on_event(self, event: BaseModel) -> None: ...


@dataclass(frozen=True)
class ListenerFailure:
    """One listener failure reported while publishing an event."""

    listener: str
    event: BaseModel
    error: Exception


class EventBus:
    """Dispatch lifecycle events to subscribed listeners.

    A failing listener is reported and never stops delivery to the others or
    crashes the publisher.
    """

    def __init__(self) -> None:
        """Create an empty bus."""
        self._listeners: list[EventListener] = []
        self._lock = Lock()

    def subscribe(self, listener: EventListener) -> None:
        """Register one listener, replacing any listener with the same name.

        Args:
            listener: Listener to register.
        """
        with self._lock:
            self._listeners = [
                item for item in self._listeners if item.name != listener.name
            ]
            self._listeners.append(listener)

    def unsubscribe(self, name: str) -> None:
        """Remove listener by name when present.

        Args:
            name: Listener name.
        """
        with self._lock:
            self._listeners = [item for item in self._listeners if item.name != name]

    def publish(self, event: BaseModel) -> tuple[ListenerFailure, ...]:
        """Deliver one event to every listener subscribed to its type.

        Args:
            event: Lifecycle event payload.

        Returns:
            Failures reported by listeners, in delivery order.
        """
        with self._lock:
            listeners = tuple(self._listeners)
        failures: list[ListenerFailure] = []
        for listener in listeners:
            if not isinstance(event, listener.events):
                continue
            try:
                listener.on_event(event)
            except Exception as exc:  # noqa: BLE001
                _LOGGER.error(
                    "Listener '%s' failed on %s: %s",
                    listener.name,
                    type(event).__name__,
                    exc,
                    exc_info=exc,
                )
                failures.append(
                    ListenerFailure(listener=listener.name, event=event, error=exc)
                )
        return tuple(failures)
