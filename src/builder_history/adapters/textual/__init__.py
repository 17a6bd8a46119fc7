"""Textual bridge: controller, timeline helpers, and the demo app."""

from .controller import HistoryEditor, TextualHistoryAdapter, TextualUIHooks
from .timeline import TimelineRow, build_rows, classify_action, format_timestamp, summary

__all__ = [
    "HistoryEditor",
    "TextualHistoryAdapter",
    "TextualUIHooks",
    "TimelineRow",
    "build_rows",
    "classify_action",
    "format_timestamp",
    "summary",
]
