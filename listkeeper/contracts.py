"""
Store Contracts — Runtime-Enforced Mutation Rules
=================================================
Every mutating store method is wrapped with @mutation, which:
  1. Refuses to run while the same store is mutating or notifying
  2. Runs the method
  3. Notifies the store's listeners once the change is fully applied

A method reports "nothing changed" by returning False; no notification
is sent in that case. Any other return value counts as a change.
"""

from __future__ import annotations

import functools
from typing import Any, Callable, TypeVar

F = TypeVar("F", bound=Callable[..., Any])


class StoreContractError(Exception):
    """Raised when a store contract is violated at runtime."""
    pass


class ReentrantMutationError(StoreContractError):
    """Raised when a listener (or a mutation) calls back into a mutating method."""
    pass


def mutation(func: F) -> F:
    """Mark a store method as a mutation.

    The owning object must provide a ``_busy`` attribute (bool) and a
    ``_notify()`` method.

    Usage:
        class ItemStore:
            @mutation
            def try_delete(self, index):
                ...
                return True
    """
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        if self._busy:
            raise ReentrantMutationError(
                f"'{func.__name__}' called while the store is mutating or "
                f"notifying listeners. Listeners must not mutate the store "
                f"that notified them."
            )
        self._busy = True
        try:
            result = func(self, *args, **kwargs)
            if result is not False:
                self._notify()
        finally:
            self._busy = False
        return result

    wrapper.__listkeeper_mutation__ = True
    return wrapper  # type: ignore
