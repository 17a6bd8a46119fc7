"""Pure helpers that turn history views into timeline rows for a panel."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Literal, Optional

from builder_history.history import HistoryInfo, HistoryView

ActionKind = Literal["add", "remove", "update", "move", "other"]

_KIND_MARKERS: dict[str, str] = {
    "add": "+",
    "remove": "-",
    "update": "~",
    "move": ">",
    "other": "*",
}


def format_timestamp(timestamp: datetime, now: Optional[datetime] = None) -> str:
    """Relative age for recent entries, calendar date for older ones."""

    current = now or datetime.now(timezone.utc)
    seconds = (current - timestamp).total_seconds()
    if seconds < 60:
        return "Just now"
    if seconds < 3600:
        return f"{int(seconds // 60)}m ago"
    if seconds < 86400:
        return f"{int(seconds // 3600)}h ago"
    return timestamp.date().isoformat()


def classify_action(action: str) -> ActionKind:
    if "Add" in action:
        return "add"
    if "Remove" in action or "Delet" in action:
        return "remove"
    if "Update" in action or "Edit" in action:
        return "update"
    if "Move" in action:
        return "move"
    return "other"


@dataclass(frozen=True, slots=True)
class TimelineRow:
    index: int
    action: str
    kind: ActionKind
    when: str
    is_current: bool

    @property
    def number(self) -> int:
        return self.index + 1

    def render(self) -> str:
        marker = "@" if self.is_current else _KIND_MARKERS[self.kind]
        line = f"{marker} #{self.number} {self.action} ({self.when})"
        if self.is_current:
            line += " [current]"
        return line


def build_rows(
    views: Iterable[HistoryView[object]], now: Optional[datetime] = None
) -> list[TimelineRow]:
    current = now or datetime.now(timezone.utc)
    return [
        TimelineRow(
            index=index,
            action=view.action,
            kind=classify_action(view.action),
            when=format_timestamp(view.timestamp, current),
            is_current=view.is_current,
        )
        for index, view in enumerate(views)
    ]


def summary(info: HistoryInfo) -> str:
    parts = [f"History: {info.current_index + 1} of {info.history_length}"]
    if info.can_undo:
        parts.append(f"{info.current_index} undo available")
    if info.can_redo:
        remaining = info.history_length - info.current_index - 1
        parts.append(f"{remaining} redo available")
    return " | ".join(parts)


__all__ = [
    "ActionKind",
    "TimelineRow",
    "build_rows",
    "classify_action",
    "format_timestamp",
    "summary",
]
