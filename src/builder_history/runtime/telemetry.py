"""Telemetry services built directly on telelog.

History stores and the demo host share this surface:

``configure(preset)`` -- pick a telemetry profile (``library``, ``demo``, ``debug``)
``get_logger(name)`` -- fetch (and cache) a configured logger
``record_event(name, ...)`` -- emit structured events at a chosen level
``span(name, ...)`` -- context manager wrapping profiling + component tracking

An embedded store stays silent: the ``library`` profile writes nothing to the
console and skips profiling. Hosts opt in with ``configure("debug")`` or the
``BUILDER_HISTORY_TELEMETRY`` variable.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "BUILDER_HISTORY_"
DEFAULT_LOGGER_NAME = "builder_history"


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    """Read a ``BUILDER_HISTORY_``-prefixed environment variable."""

    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    raw = env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class TelemetryProfile:
    """Everything ``configure`` needs to build a ``telelog.Config``."""

    name: str
    level: str = "INFO"
    console: bool = False
    colored: bool = False
    json: bool = False
    log_file: str = ""
    buffered: bool = False
    profiling: bool = False


PROFILES: Dict[str, TelemetryProfile] = {
    "library": TelemetryProfile("library"),
    "demo": TelemetryProfile(
        "demo",
        level="DEBUG",
        log_file="builder_history-demo.log",
        buffered=True,
        profiling=True,
    ),
    "debug": TelemetryProfile(
        "debug", level="DEBUG", console=True, colored=True, profiling=True
    ),
}


def resolve_profile(preset: Optional[str] = None) -> TelemetryProfile:
    """Look up ``preset`` (or ``BUILDER_HISTORY_TELEMETRY``) and apply env overrides.

    Raises ``ValueError`` for a name outside ``PROFILES``.
    """

    key = (preset or env("TELEMETRY") or "library").lower()
    if key not in PROFILES:
        raise ValueError(f"Unknown telemetry preset '{key}'.")
    profile = PROFILES[key]

    level = env("LOG_LEVEL")
    log_file = env("LOG_FILE")
    return replace(
        profile,
        level=(level or profile.level).upper(),
        console=env_flag("CONSOLE", profile.console),
        colored=profile.colored and not env_flag("NO_COLOR", False),
        json=env_flag("LOG_JSON", profile.json),
        log_file=profile.log_file if log_file is None else log_file,
        buffered=env_flag("LOG_BUFFERED", profile.buffered),
    )


def _build_config(profile: TelemetryProfile) -> Any:
    config = tl.Config()
    config.with_min_level(profile.level)
    config.with_console_output(profile.console)
    if profile.console:
        config.with_colored_output(profile.colored)
    config.with_json_format(profile.json)
    if profile.log_file:
        config.with_file_output(profile.log_file)
    if profile.buffered:
        config.with_buffering(True)
    config.with_profiling(profile.profiling)
    return config


_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE: Optional[Tuple[TelemetryProfile, Any]] = None


def configure(preset: Optional[str] = None) -> TelemetryProfile:
    """Switch every logger handed out from now on to ``preset``."""

    global _ACTIVE
    profile = resolve_profile(preset)
    _ACTIVE = (profile, _build_config(profile))
    _LOGGER_CACHE.clear()
    return profile


def _ensure_active() -> Tuple[TelemetryProfile, Any]:
    if _ACTIVE is None:
        configure()
    return _ACTIVE  # type: ignore[return-value]


def active_profile() -> TelemetryProfile:
    return _ensure_active()[0]


def get_logger(name: Optional[str] = None) -> Any:
    """Return a cached ``telelog.Logger`` for ``name``."""

    config = _ensure_active()[1]
    logger_name = name or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGER_CACHE:
        _LOGGER_CACHE[logger_name] = tl.Logger.with_config(logger_name, config)
    return _LOGGER_CACHE[logger_name]


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _log(logger: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    name = level.lower()
    with_data = getattr(logger, f"{name}_with", None)
    if with_data is not None:
        with_data(message, [(str(k), _stringify(v)) for k, v in payload.items()])
        return
    method = getattr(logger, name, None)
    if method is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    method(f"{message} {payload}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit an ``event::<name>`` line carrying ``data`` as key/value pairs."""

    payload = {"event": name, **(data or {})}
    _log(get_logger(logger_name), level, f"event::{name}", payload)


@dataclass
class SpanHandle:
    logger: Any
    span_name: str
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def fail(self, reason: str) -> None:
        payload = {"span": self.span_name, **self.metadata, "reason": reason}
        _log(self.logger, "error", "span::fail", payload)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Track ``component`` and profile the block when the profile asks for it.

    ``metadata`` is attached as logger context for the duration of the block.
    An exception escaping the block is logged through ``SpanHandle.fail`` and
    re-raised.
    """

    log = get_logger(logger_name)
    handle = SpanHandle(logger=log, span_name=name)
    for key, value in (metadata or {}).items():
        handle.add_metadata(key, value)

    with ExitStack() as stack:
        if active_profile().profiling:
            for key, value in handle.metadata.items():
                log.add_context(key, value)
                stack.callback(log.remove_context, key)
            if component:
                stack.enter_context(log.track_component(component))
            stack.enter_context(log.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


__all__ = [
    "PROFILES",
    "SpanHandle",
    "TelemetryProfile",
    "active_profile",
    "configure",
    "env",
    "env_flag",
    "get_logger",
    "record_event",
    "resolve_profile",
    "span",
]
