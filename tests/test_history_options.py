from __future__ import annotations

import pytest

from builder_history.history import CANVAS_OPTIONS, SCHEMA_OPTIONS, HistoryOptions


def test_presets_match_editor_defaults() -> None:
    assert (CANVAS_OPTIONS.max_size, CANVAS_OPTIONS.debounce_ms) == (100, 1000)
    assert (SCHEMA_OPTIONS.max_size, SCHEMA_OPTIONS.debounce_ms) == (50, 1500)
    assert HistoryOptions().debounce_seconds == 0.5


def test_from_env_applies_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BUILDER_HISTORY_CANVAS_MAX_SIZE", "25")
    monkeypatch.setenv("BUILDER_HISTORY_CANVAS_DEBOUNCE_MS", "0")

    options = HistoryOptions.from_env("canvas", CANVAS_OPTIONS)

    assert options.max_size == 25
    assert options.debounce_ms == 0


def test_from_env_ignores_malformed_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BUILDER_HISTORY_SCHEMA_MAX_SIZE", "lots")
    monkeypatch.setenv("BUILDER_HISTORY_SCHEMA_DEBOUNCE_MS", "-5")

    options = HistoryOptions.from_env("schema", SCHEMA_OPTIONS)

    assert options == SCHEMA_OPTIONS


def test_from_env_without_variables_returns_default(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv("BUILDER_HISTORY_CANVAS_MAX_SIZE", raising=False)
    monkeypatch.delenv("BUILDER_HISTORY_CANVAS_DEBOUNCE_MS", raising=False)

    assert HistoryOptions.from_env("canvas", CANVAS_OPTIONS) is CANVAS_OPTIONS
