# listkeeper — Observable List Store
"""
listkeeper: an in-memory, observable list of text records.

Presentation layers hold a reference to one ItemStore, call its
create/read_all/update/delete operations and subscribe a listener to
re-render after each change.
"""
from .listeners import Listener, ListenerRegistry, Subscription
from .contracts import StoreContractError, ReentrantMutationError, mutation
from .store import ItemStore

__version__ = "0.1.0"
__all__ = [
    "ItemStore",
    "Listener", "ListenerRegistry", "Subscription",
    "StoreContractError", "ReentrantMutationError", "mutation",
]
