"""
listdesk — Front Ends for listkeeper
====================================
Presentation layers that read an ItemStore, call its mutations and
re-render when it notifies them.

    ItemListPresenter  — View model: validation, rows, re-render on change
    repl               — Interactive terminal screen
    server             — FastAPI HTTP + WebSocket views
    cli                — Entry point; builds the store and passes it down
"""

__version__ = "0.1.0"

from listdesk.config import DeskConfig
from listdesk.presenter import ItemListPresenter

__all__ = ["DeskConfig", "ItemListPresenter"]
