"""Shared navigation surface for document-level history adapters."""

from __future__ import annotations

from typing import Generic, Iterable, Optional, Tuple, TypeVar

from builder_history.history import (
    HistoryInfo,
    HistoryOptions,
    HistoryStore,
    HistoryView,
)

X = TypeVar("X")

_UNSET: object = object()


class DocumentHistory(Generic[X]):
    """Holds a ``HistoryStore`` over tuples of records and forwards navigation.

    Subclasses add the mutators that compute the next tuple and commit it.
    """

    default_options: HistoryOptions

    def __init__(
        self,
        initial: Iterable[X] = (),
        *,
        options: Optional[HistoryOptions] = None,
        store: Optional[HistoryStore[Tuple[X, ...]]] = None,
        **store_kwargs: object,
    ) -> None:
        self.history: HistoryStore[Tuple[X, ...]] = store or HistoryStore(
            tuple(initial),
            options=options or self.default_options,
            **store_kwargs,  # type: ignore[arg-type]
        )

    @property
    def working(self) -> Tuple[X, ...]:
        """Records including a not-yet-applied debounced edit."""

        return self.history.latest_state

    def undo(self) -> Tuple[X, ...]:
        return self.history.undo()

    def redo(self) -> Tuple[X, ...]:
        return self.history.redo()

    def go_to_state(self, index: int) -> Tuple[X, ...]:
        return self.history.go_to_state(index)

    def clear_history(self, records: Iterable[X] | object = _UNSET) -> None:
        if records is _UNSET:
            self.history.clear_history()
        else:
            self.history.clear_history(tuple(records))  # type: ignore[arg-type]

    def history_info(self) -> HistoryInfo:
        return self.history.history_info()

    def full_history(self) -> list[HistoryView[Tuple[X, ...]]]:
        return self.history.full_history()

    def process_timers(self) -> bool:
        return self.history.process_timers()

    def flush_pending(self) -> bool:
        return self.history.flush_pending()

    def _commit(
        self, records: Iterable[X], action: str, *, immediate: bool = False
    ) -> Tuple[X, ...]:
        snapshot = tuple(records)
        self.history.commit(snapshot, action, immediate=immediate)
        return snapshot


__all__ = ["DocumentHistory"]
