"""
Item List Presenter — the list screen without widgets
=====================================================
Binds one view to one ItemStore:

    - re-renders after every store notification
    - only submits non-empty text (add and edit dialogs)
    - maps a row gesture (tap to edit, delete button) to an index

The store is passed in; the presenter never creates or looks one up.
"""

from __future__ import annotations

from typing import Callable, Optional

from listkeeper import ItemStore

EMPTY_TEXT = "(no items)"

RenderCallback = Callable[[list[str]], None]


class ItemListPresenter:
    """View model for a numbered list of store records."""

    def __init__(self, store: ItemStore, on_render: Optional[RenderCallback] = None):
        self.store = store
        self.on_render = on_render
        self.rows: tuple[str, ...] = store.read_all()
        self.render_count = 0
        self._subscription = store.subscribe(self._on_change)

    # ─── Gestures ─────────────────────────────────────────

    def add(self, text: str) -> bool:
        """Add dialog submit. Empty text is rejected."""
        if not text:
            return False
        self.store.create(text)
        return True

    def edit(self, index: int, text: str) -> bool:
        """Edit dialog submit for row `index`. Empty text is rejected."""
        if not text:
            return False
        return self.store.try_update(index, text)

    def remove(self, index: int) -> bool:
        """Delete button on row `index`."""
        return self.store.try_delete(index)

    def current_text(self, index: int) -> Optional[str]:
        """Text to prefill the edit dialog with, or None for a missing row."""
        if 0 <= index < len(self.rows):
            return self.rows[index]
        return None

    # ─── Rendering ────────────────────────────────────────

    def render_lines(self) -> list[str]:
        if not self.rows:
            return [EMPTY_TEXT]
        return [f"{i:>3}. {text}" for i, text in enumerate(self.rows)]

    def _on_change(self) -> None:
        self.rows = self.store.read_all()
        self.render_count += 1
        if self.on_render is not None:
            self.on_render(self.render_lines())

    # ─── Lifecycle ────────────────────────────────────────

    @property
    def is_bound(self) -> bool:
        return self._subscription is not None

    def close(self) -> None:
        """Stop following the store. Safe to call twice."""
        if self._subscription is not None:
            self.store.unsubscribe(self._subscription)
            self._subscription = None

    def __enter__(self) -> ItemListPresenter:
        return self

    def __exit__(self, *exc) -> None:
        self.close()
