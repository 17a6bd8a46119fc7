"""Snapshot history engine: entries, options, and the bounded store."""

from .entry import (
    CLEARED_ACTION,
    INITIAL_ACTION,
    HistoryEntry,
    HistoryInfo,
    HistoryView,
)
from .options import CANVAS_OPTIONS, DEFAULT_OPTIONS, SCHEMA_OPTIONS, HistoryOptions
from .store import HistoryStore, PendingCommit

__all__ = [
    "HistoryEntry",
    "HistoryInfo",
    "HistoryView",
    "HistoryOptions",
    "HistoryStore",
    "PendingCommit",
    "DEFAULT_OPTIONS",
    "CANVAS_OPTIONS",
    "SCHEMA_OPTIONS",
    "INITIAL_ACTION",
    "CLEARED_ACTION",
]
