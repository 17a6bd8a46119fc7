"""Construction-time settings for history stores."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from builder_history.runtime.telemetry import env


@dataclass(frozen=True, slots=True)
class HistoryOptions:
    """Capacity and coalescing window, fixed for a store's lifetime."""

    max_size: int = 50
    debounce_ms: int = 500

    def __post_init__(self) -> None:
        if self.max_size <= 0:
            raise ValueError("max_size must be positive")
        if self.debounce_ms < 0:
            raise ValueError("debounce_ms cannot be negative")

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0

    def with_overrides(
        self,
        *,
        max_size: Optional[int] = None,
        debounce_ms: Optional[int] = None,
    ) -> "HistoryOptions":
        changes = {}
        if max_size is not None:
            changes["max_size"] = max_size
        if debounce_ms is not None:
            changes["debounce_ms"] = debounce_ms
        return replace(self, **changes) if changes else self

    @classmethod
    def from_env(cls, name: str, default: "HistoryOptions") -> "HistoryOptions":
        """Apply ``BUILDER_HISTORY_<NAME>_MAX_SIZE`` / ``_DEBOUNCE_MS`` overrides.

        Values that are missing, malformed, or out of range leave the matching
        field of ``default`` untouched.
        """

        key = name.upper()
        max_size = _env_int(f"{key}_MAX_SIZE")
        debounce_ms = _env_int(f"{key}_DEBOUNCE_MS")
        if max_size is not None and max_size <= 0:
            max_size = None
        if debounce_ms is not None and debounce_ms < 0:
            debounce_ms = None
        return default.with_overrides(max_size=max_size, debounce_ms=debounce_ms)


def _env_int(name: str) -> Optional[int]:
    value = env(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


DEFAULT_OPTIONS = HistoryOptions()
CANVAS_OPTIONS = HistoryOptions(max_size=100, debounce_ms=1000)
SCHEMA_OPTIONS = HistoryOptions(max_size=50, debounce_ms=1500)

__all__ = [
    "HistoryOptions",
    "DEFAULT_OPTIONS",
    "CANVAS_OPTIONS",
    "SCHEMA_OPTIONS",
]
