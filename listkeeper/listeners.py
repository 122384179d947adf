"""
Listener Registry — Change Notification for Stores
===================================================
Holds the listeners a store calls after each successful mutation.

A store owns one registry as an ordinary attribute and forwards
subscribe/unsubscribe/notify to it. Nothing is shared between stores.

Delivery rules:
    1. Listeners are called with no arguments, in registration order
    2. Each pass runs over a snapshot of the registry
    3. A listener removed earlier in the same pass is skipped
    4. A listener that raises is logged and the others still run
    5. A contract violation is re-raised once the whole pass is done
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from listkeeper.contracts import StoreContractError

log = logging.getLogger(__name__)

Listener = Callable[[], None]


@dataclass(frozen=True)
class Subscription:
    """Handle returned by subscribe(). Pass it back to unsubscribe()."""

    token: int
    listener: Listener = field(compare=False, repr=False)


class ListenerRegistry:
    """Ordered set of listeners keyed by subscription token."""

    def __init__(self):
        self._subscriptions: dict[int, Subscription] = {}
        self._tokens = itertools.count(1)

    def subscribe(self, listener: Listener) -> Subscription:
        """Register a listener. Returns its subscription handle."""
        if not callable(listener):
            raise TypeError(f"Listener must be callable, got {type(listener).__name__}")
        subscription = Subscription(token=next(self._tokens), listener=listener)
        self._subscriptions[subscription.token] = subscription
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a listener. Unknown or already-removed handles are ignored."""
        self._subscriptions.pop(subscription.token, None)

    def notify(self) -> int:
        """Call every registered listener once. Returns how many were called."""
        called = 0
        violation: Optional[StoreContractError] = None
        for subscription in list(self._subscriptions.values()):
            if subscription.token not in self._subscriptions:
                continue  # removed by an earlier listener in this pass
            called += 1
            try:
                subscription.listener()
            except StoreContractError as e:
                if violation is None:
                    violation = e
            except Exception:
                log.exception(
                    "Listener %r failed during notification", subscription.listener
                )
        if violation is not None:
            raise violation
        return called

    def clear(self) -> None:
        self._subscriptions.clear()

    def __len__(self) -> int:
        return len(self._subscriptions)

    def __contains__(self, subscription: object) -> bool:
        return (
            isinstance(subscription, Subscription)
            and subscription.token in self._subscriptions
        )
