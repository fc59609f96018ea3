"""
Selector bridge between stores and their consumers.

A Selection watches one projection of a store snapshot and calls its
subscribers only when that projection changes by value. Stores replace
their snapshot on every event, so identity comparison would fire on
every event even when the watched slice is untouched.

Usage:
    count = Selection(cart_store, lambda state: state.item_count)
    count.subscribe(lambda n: logger.info(f"badge: {n}"))
    count.value  # current projection, available before any event
"""
from typing import Any, Callable, Generic, Optional, TypeVar

from .equality import deep_equal
from .logging import get_logger
from .stores.base import Store

logger = get_logger(__name__)

T = TypeVar("T")

Compare = Callable[[Any, Any], bool]


class Selection(Generic[T]):
    """Value-compared view of a store projection."""

    def __init__(
        self,
        store: Store,
        selector: Callable[[Any], T],
        compare: Optional[Compare] = None,
    ):
        self._store = store
        self._selector = selector
        self._compare = compare or deep_equal
        self._callbacks: list[Callable[[T], None]] = []
        # Pull synchronously so consumers never see a placeholder
        self._value: T = selector(store.get_snapshot())
        self._subscription = store.subscribe(self._on_snapshot)

    @property
    def value(self) -> T:
        """Current projection. After close() it is read straight from the store."""
        if not self._subscription.active:
            return self._selector(self._store.get_snapshot())
        return self._value

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register callback(value) for changes; returns an unsubscribe function."""
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def close(self) -> None:
        """Detach from the store and drop all callbacks."""
        self._subscription.unsubscribe()
        self._callbacks.clear()

    def _on_snapshot(self, snapshot: Any) -> None:
        new_value = self._selector(snapshot)
        if self._compare(self._value, new_value):
            return
        self._value = new_value
        for callback in list(self._callbacks):
            try:
                callback(new_value)
            except Exception as e:
                logger.error(f"Selection callback failed: {e}", exc_info=True)


def select(store: Store, selector: Callable[[Any], T]) -> T:
    """One-off projection of the current snapshot."""
    return selector(store.get_snapshot())
