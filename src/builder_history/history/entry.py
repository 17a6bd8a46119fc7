"""Snapshot records stored by the history engine."""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

INITIAL_ACTION = "Initial state"
CLEARED_ACTION = "History cleared"


def _epoch_ms() -> int:
    return int(time.time() * 1000)


def new_entry_id() -> str:
    return f"{_epoch_ms()}_{secrets.token_hex(5)[:9]}"


@dataclass(frozen=True, slots=True)
class HistoryEntry(Generic[T]):
    """One immutable snapshot plus the label of the action that produced it."""

    data: T
    timestamp: datetime
    action: str
    id: str

    @classmethod
    def create(
        cls, data: T, action: str, *, entry_id: Optional[str] = None
    ) -> "HistoryEntry[T]":
        return cls(
            data=data,
            timestamp=datetime.now(timezone.utc),
            action=action,
            id=entry_id or new_entry_id(),
        )

    @classmethod
    def initial(cls, data: T) -> "HistoryEntry[T]":
        return cls.create(data, INITIAL_ACTION, entry_id="initial")

    @classmethod
    def cleared(cls, data: T) -> "HistoryEntry[T]":
        return cls.create(data, CLEARED_ACTION, entry_id=f"cleared_{_epoch_ms()}")


@dataclass(frozen=True, slots=True)
class HistoryView(Generic[T]):
    """Read-only projection of an entry for timeline UIs."""

    data: T
    timestamp: datetime
    action: str
    id: str
    is_current: bool

    @classmethod
    def of(cls, entry: HistoryEntry[T], *, is_current: bool) -> "HistoryView[T]":
        return cls(
            data=entry.data,
            timestamp=entry.timestamp,
            action=entry.action,
            id=entry.id,
            is_current=is_current,
        )


@dataclass(frozen=True, slots=True)
class HistoryInfo:
    """Navigation summary derived from the cursor and retained entries."""

    can_undo: bool
    can_redo: bool
    current_index: int
    history_length: int
    current_action: str
    undo_action: Optional[str] = None
    redo_action: Optional[str] = None


__all__ = [
    "CLEARED_ACTION",
    "INITIAL_ACTION",
    "HistoryEntry",
    "HistoryInfo",
    "HistoryView",
    "new_entry_id",
]
