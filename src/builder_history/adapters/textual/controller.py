"""Minimal Textual adapter that wires a history store into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Union

from builder_history.documents import DocumentHistory
from builder_history.history import HistoryStore

from .timeline import TimelineRow, build_rows, summary

HistoryEditor = Union[HistoryStore[Any], DocumentHistory[Any]]

UNDO_KEYS = frozenset({"ctrl+z"})
REDO_KEYS = frozenset({"ctrl+y", "ctrl+shift+z"})


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_state: Callable[[Any], None]
    update_status: Callable[[str], None] = _noop
    show_timeline: Callable[[Sequence[TimelineRow], str], None] = _noop
    log: Callable[[str], None] = _noop


class TextualHistoryAdapter:
    """Bridges undo/redo/timeline navigation to a Textual-friendly surface.

    ``editor`` may be a bare ``HistoryStore`` or a document adapter; mutations
    go through the editor itself and the host calls ``refresh()`` afterwards.
    """

    def __init__(self, editor: HistoryEditor, hooks: TextualUIHooks) -> None:
        self.editor = editor
        self.store: HistoryStore[Any] = (
            editor.history if isinstance(editor, DocumentHistory) else editor
        )
        self.hooks = hooks
        self.refresh()

    def handle_key(self, key: str) -> bool:
        """Dispatch an undo/redo shortcut; returns ``False`` for other keys."""

        normalized = key.lower()
        self._log_state("key ->", key=normalized)
        if normalized in UNDO_KEYS:
            self.undo()
            return True
        if normalized in REDO_KEYS:
            self.redo()
            return True
        return False

    def undo(self) -> Any:
        # an in-flight edit is the most recent step, so it is what gets undone
        self.store.flush_pending()
        info = self.store.history_info()
        if not info.can_undo:
            self.hooks.update_status("Nothing to undo")
            return self.store.current_state
        state = self.store.undo()
        self._after_navigation(f"Undo: {info.current_action}")
        return state

    def redo(self) -> Any:
        self.store.flush_pending()
        info = self.store.history_info()
        if not info.can_redo:
            self.hooks.update_status("Nothing to redo")
            return self.store.current_state
        state = self.store.redo()
        self._after_navigation(f"Redo: {info.redo_action}")
        return state

    def go_to(self, index: int) -> Any:
        self.store.flush_pending()
        views = self.store.full_history()
        if not 0 <= index < len(views):
            self._log_state("goto ignored", index=index)
            return self.store.current_state
        state = self.store.go_to_state(index)
        self._after_navigation(f"Jumped to: {views[index].action}")
        return state

    def clear(self) -> None:
        self.store.clear_history()
        self._after_navigation("History cleared")

    def process_timers(self) -> bool:
        """Forward the UI tick to the store and repaint if a commit landed."""

        applied = self.store.process_timers()
        if applied:
            info = self.store.history_info()
            self._log_state("timer ->", action=info.current_action)
            self.refresh()
        return applied

    def refresh(self, status: Optional[str] = None) -> None:
        info = self.store.history_info()
        self.hooks.update_state(self.store.latest_state)
        self.hooks.show_timeline(build_rows(self.store.full_history()), summary(info))
        if status:
            self.hooks.update_status(status)

    def _after_navigation(self, status: str) -> None:
        self.refresh(status)
        self._log_state("nav <-", status=status)

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = {
            "store": self.store.name,
            "index": self.store.current_index,
            "length": len(self.store),
            "pending": self.store.has_pending,
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))


__all__ = ["HistoryEditor", "TextualHistoryAdapter", "TextualUIHooks"]
