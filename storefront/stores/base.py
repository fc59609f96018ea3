"""
Event-driven state container.

A Store holds one immutable snapshot and a table of transitions keyed by
event type. send() runs the matching transition to completion, replaces
the snapshot wholesale and notifies subscribers in registration order.
"""
from collections.abc import Mapping
from typing import Any, Callable, Generic, TypeVar

from storefront.logging import get_logger, sanitize_string_for_logging

logger = get_logger(__name__)

S = TypeVar("S")

Transition = Callable[[S, Mapping[str, Any]], S]
Listener = Callable[[S], None]


class Subscription:
    """Handle returned by Store.subscribe."""

    def __init__(self, store: "Store", listener: Listener):
        self._store = store
        self._listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._store._remove_listener(self._listener)
            self.active = False


class Store(Generic[S]):
    """Single-writer state container driven by named events."""

    name = "store"

    def __init__(self, initial_state: S, transitions: dict[str, Transition]):
        self._state = initial_state
        self._transitions = dict(transitions)
        self._listeners: list[Listener] = []

    @property
    def state(self) -> S:
        return self._state

    def get_snapshot(self) -> S:
        """Current state object. Never mutated in place."""
        return self._state

    @property
    def event_types(self) -> tuple[str, ...]:
        return tuple(self._transitions)

    def send(self, event: Mapping[str, Any]) -> S:
        """
        Apply an event and return the new snapshot.

        Unknown or malformed events are logged and ignored.
        """
        event_type = event.get("type") if isinstance(event, Mapping) else None
        transition = self._transitions.get(event_type) if isinstance(event_type, str) else None
        if transition is None:
            logger.warning(
                f"{self.name}: ignoring unknown event {sanitize_string_for_logging(str(event_type))}"
            )
            return self._state

        self._state = transition(self._state, event)
        logger.debug(f"{self.name}: applied {event_type}")
        self._notify()
        return self._state

    def subscribe(self, listener: Listener) -> Subscription:
        """Call listener(snapshot) after every applied event."""
        self._listeners.append(listener)
        return Subscription(self, listener)

    def _remove_listener(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def _notify(self) -> None:
        snapshot = self._state
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"{self.name}: subscriber failed: {e}", exc_info=True)
