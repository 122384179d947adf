"""
ItemStore — Observable List of Text Records
===========================================
The single owner of an ordered list of strings and of the listeners
that follow it.

Identity is positional: a record is whatever sits at index i. Indices
are always 0..len-1. Calls with an index outside that range change
nothing, notify nobody and raise nothing; use try_update/try_delete
when the caller needs to know whether anything happened.

Listeners are called synchronously, after the change, in the order
they subscribed. They may read the store but must not mutate it
(ReentrantMutationError).
"""

from __future__ import annotations

import logging
from typing import Iterable

from listkeeper.contracts import mutation
from listkeeper.listeners import Listener, ListenerRegistry, Subscription

log = logging.getLogger(__name__)


class ItemStore:
    """In-memory, ordered, observable collection of text records."""

    def __init__(self, items: Iterable[str] = ()):
        self._items: list[str] = list(items)
        self._registry = ListenerRegistry()
        self._busy = False

    # ─── Reads ────────────────────────────────────────────

    def read_all(self) -> tuple[str, ...]:
        """Snapshot of the current records, in order."""
        return tuple(self._items)

    @property
    def items(self) -> tuple[str, ...]:
        return self.read_all()

    def __len__(self) -> int:
        return len(self._items)

    def _in_range(self, index: int) -> bool:
        return 0 <= index < len(self._items)

    # ─── Mutations ────────────────────────────────────────

    @mutation
    def create(self, value: str) -> None:
        """Append a record at the end."""
        self._items.append(value)
        log.debug("Created record at index %d", len(self._items) - 1)

    @mutation
    def try_update(self, index: int, value: str) -> bool:
        """Replace the record at index. Returns False if index is out of range."""
        if not self._in_range(index):
            log.debug("Ignored update at index %d (length %d)", index, len(self._items))
            return False
        self._items[index] = value
        log.debug("Updated record at index %d", index)
        return True

    @mutation
    def try_delete(self, index: int) -> bool:
        """Remove the record at index. Returns False if index is out of range."""
        if not self._in_range(index):
            log.debug("Ignored delete at index %d (length %d)", index, len(self._items))
            return False
        del self._items[index]
        log.debug("Deleted record at index %d", index)
        return True

    def update(self, index: int, value: str) -> None:
        self.try_update(index, value)

    def delete(self, index: int) -> None:
        self.try_delete(index)

    # ─── Listeners ────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Subscription:
        """Call listener after every future successful mutation."""
        return self._registry.subscribe(listener)

    def unsubscribe(self, subscription: Subscription) -> None:
        """Stop notifying a listener. Safe to call more than once."""
        self._registry.unsubscribe(subscription)

    @property
    def listener_count(self) -> int:
        return len(self._registry)

    def _notify(self) -> None:
        count = self._registry.notify()
        log.debug("Notified %d listener(s)", count)
