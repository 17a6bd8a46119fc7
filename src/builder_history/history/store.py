"""Bounded linear undo/redo history over immutable snapshots.

A ``HistoryStore`` always holds at least one entry (the seed) and a cursor
pointing at the active one. Committing after an undo drops the redo branch,
and the oldest entries are evicted once ``max_size`` is exceeded.

Rapid edits can be coalesced: a non-immediate commit is parked as the single
pending commit and applied once the debounce window elapses without another
request. The window is driven either by the host polling
``process_timers()`` from its UI tick, or by an ``asyncio`` loop passed at
construction, in which case the store arms ``loop.call_later`` itself.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, TypeVar

from builder_history.runtime import telemetry

from .entry import HistoryEntry, HistoryInfo, HistoryView
from .options import DEFAULT_OPTIONS, HistoryOptions

T = TypeVar("T")

Clock = Callable[[], float]

_UNSET: object = object()


@dataclass(slots=True)
class PendingCommit(Generic[T]):
    snapshot: T
    action: str
    deadline: float
    generation: int
    handle: Optional[asyncio.TimerHandle] = None


class HistoryStore(Generic[T]):
    """Owns the entry list, the cursor, and at most one pending commit."""

    def __init__(
        self,
        initial_state: T,
        *,
        options: Optional[HistoryOptions] = None,
        max_size: Optional[int] = None,
        debounce_ms: Optional[int] = None,
        clock: Clock = time.monotonic,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        name: str = "history",
        logger_name: Optional[str] = None,
    ) -> None:
        self.options = (options or DEFAULT_OPTIONS).with_overrides(
            max_size=max_size, debounce_ms=debounce_ms
        )
        self.name = name
        self._initial_state = initial_state
        self._entries: List[HistoryEntry[T]] = [HistoryEntry.initial(initial_state)]
        self._index = 0
        self._clock = clock
        self._loop = loop
        self._pending: Optional[PendingCommit[T]] = None
        self._generation = 0
        self._logger_name = logger_name
        self.logger = telemetry.get_logger(logger_name or "builder_history.history")

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def current_state(self) -> T:
        return self._entries[self._index].data

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    @property
    def latest_state(self) -> T:
        """The pending snapshot if one is parked, else ``current_state``."""

        if self._pending is not None:
            return self._pending.snapshot
        return self.current_state

    def commit(self, snapshot: T, action: str, *, immediate: bool = False) -> None:
        with telemetry.span(
            "history::commit",
            logger_name=self._logger_name,
            component="history",
            metadata={"store": self.name, "action": action, "immediate": immediate},
        ) as handle:
            if immediate or self.options.debounce_ms == 0:
                if self._pending is not None:
                    # the parked edit happened first; keep it as its own step
                    self._fire(self._pending.generation)
                self._append(snapshot, action)
                handle.add_metadata("index", self._index)
                return

            self._arm(snapshot, action)
            handle.add_metadata("generation", self._generation)

    def undo(self) -> T:
        with self._navigation_span("undo"):
            if self._index > 0:
                self._index -= 1
            return self.current_state

    def redo(self) -> T:
        with self._navigation_span("redo"):
            if self._index < len(self._entries) - 1:
                self._index += 1
            return self.current_state

    def go_to_state(self, index: int) -> T:
        with self._navigation_span("go_to_state") as handle:
            handle.add_metadata("target", index)
            if 0 <= index < len(self._entries):
                self._index = index
            return self.current_state

    def clear_history(self, new_seed: T | object = _UNSET) -> None:
        """Reset to a single entry, dropping any pending commit.

        Without ``new_seed`` the store falls back to its construction seed.
        """

        with self._navigation_span("clear_history"):
            self.cancel_pending()
            seed = self._initial_state if new_seed is _UNSET else new_seed
            self._entries = [HistoryEntry.cleared(seed)]  # type: ignore[arg-type]
            self._index = 0
        telemetry.record_event(
            "history.cleared",
            data={"store": self.name},
            logger_name=self._logger_name,
        )

    def history_info(self) -> HistoryInfo:
        index = self._index
        last = len(self._entries) - 1
        return HistoryInfo(
            can_undo=index > 0,
            can_redo=index < last,
            current_index=index,
            history_length=len(self._entries),
            current_action=self._entries[index].action,
            undo_action=self._entries[index - 1].action if index > 0 else None,
            redo_action=self._entries[index + 1].action if index < last else None,
        )

    def full_history(self) -> list[HistoryView[T]]:
        return [
            HistoryView.of(entry, is_current=position == self._index)
            for position, entry in enumerate(self._entries)
        ]

    def process_timers(self) -> bool:
        """Apply the pending commit if its window has elapsed.

        Returns ``True`` when a commit was applied.
        """

        pending = self._pending
        if pending is None or pending.deadline > self._clock():
            return False
        return self._fire(pending.generation)

    def flush_pending(self) -> bool:
        """Apply the pending commit immediately, ignoring its deadline."""

        if self._pending is None:
            return False
        return self._fire(self._pending.generation)

    def cancel_pending(self) -> None:
        pending = self._pending
        self._pending = None
        if pending is not None and pending.handle is not None:
            pending.handle.cancel()

    def _arm(self, snapshot: T, action: str) -> None:
        self.cancel_pending()
        self._generation += 1
        generation = self._generation
        delay = self.options.debounce_seconds
        timer: Optional[asyncio.TimerHandle] = None
        if self._loop is not None:
            timer = self._loop.call_later(delay, self._fire, generation)
        self._pending = PendingCommit(
            snapshot=snapshot,
            action=action,
            deadline=self._clock() + delay,
            generation=generation,
            handle=timer,
        )

    def _fire(self, generation: int) -> bool:
        pending = self._pending
        if pending is None or pending.generation != generation:
            return False
        self.cancel_pending()
        self._append(pending.snapshot, pending.action)
        telemetry.record_event(
            "history.debounced_commit",
            data={"store": self.name, "action": pending.action, "index": self._index},
            logger_name=self._logger_name,
        )
        return True

    def _append(self, snapshot: T, action: str) -> None:
        entries = self._entries[: self._index + 1]
        entries.append(HistoryEntry.create(snapshot, action))
        overflow = len(entries) - self.options.max_size
        if overflow > 0:
            del entries[:overflow]
            self.logger.debug(f"history::{self.name} evicted {overflow} entries")
        self._entries = entries
        self._index = len(entries) - 1

    def _navigation_span(self, operation: str):
        return telemetry.span(
            f"history::{operation}",
            logger_name=self._logger_name,
            component="history",
            metadata={"store": self.name},
        )


__all__ = ["HistoryStore", "PendingCommit"]
