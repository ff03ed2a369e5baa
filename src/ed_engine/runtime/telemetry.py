"""Interpreter telemetry built on telelog.

Everything in ``ed_engine`` logs through this module:

``configure(...)`` -- adopt explicit settings, a telelog config, or a preset
``get_logger(name)`` -- fetch (and cache) a configured logger
``record_event(name, ...)`` -- emit a structured event line
``span(name, ...)`` -- profile a block and optionally track it as a component
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "ED_ENGINE_"
DEFAULT_LOGGER_NAME = os.getenv(f"{ENV_PREFIX}LOGGER", "ed_engine")

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None

_TRUTHY = {"1", "true", "yes", "on"}


def env_value(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    raw = env_value(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(slots=True)
class TelemetrySettings:
    """Logging knobs, read from ``ED_ENGINE_*`` variables by default."""

    level: str = "INFO"
    console: bool = True
    colored: bool = True
    json_format: bool = False
    log_file: str = ""
    buffered: bool = False
    buffer_size: int = 2048

    @classmethod
    def from_env(cls) -> "TelemetrySettings":
        return cls(
            level=(env_value("LOG_LEVEL") or "INFO").upper(),
            console=not env_flag("DISABLE_CONSOLE", False),
            colored=not env_flag("NO_COLOR", False),
            json_format=env_flag("LOG_JSON", False),
            log_file=env_value("LOG_FILE") or "",
            buffered=env_flag("LOG_BUFFERED", False),
            buffer_size=int(env_value("LOG_BUFFER_SIZE") or "2048"),
        )

    def build(self) -> Any:
        config = tl.Config()
        config.with_min_level(self.level)
        config.with_console_output(self.console)
        if self.console:
            config.with_colored_output(self.colored)
        if self.json_format:
            config.with_json_format(True)
        if self.log_file:
            config.with_file_output(self.log_file)
        if self.buffered:
            config.with_buffering(True)
            config.with_buffer_size(self.buffer_size)
        return _with_profiling(config)


def _with_profiling(config: Any) -> Any:
    # spans rely on logger.profile
    config.with_profiling(True)
    return config


def _preset(preset: str) -> Any:
    key = preset.lower()
    if key == "development":
        return TelemetrySettings(level="DEBUG", colored=True).build()
    if key == "production":
        log_file = env_value("LOG_FILE") or "ed_engine.log"
        return TelemetrySettings(
            level="INFO", console=False, log_file=log_file, buffered=True
        ).build()
    if key == "quiet":
        return TelemetrySettings(level="ERROR", console=False).build()
    raise ValueError(f"Unknown preset '{preset}'.")


def configure(
    *,
    settings: Optional[TelemetrySettings] = None,
    config: Optional[Any] = None,
    preset: Optional[str] = None,
) -> None:
    """Replace the active telelog configuration and drop cached loggers.

    Exactly one of ``settings``, ``config`` or ``preset`` may be given; with
    none of them the configuration is rebuilt from the environment.
    """

    global _ACTIVE_CONFIG
    chosen = [item for item in (settings, config, preset) if item is not None]
    if len(chosen) > 1:
        raise ValueError("Provide only one of `settings`, `config` or `preset`.")

    if preset is not None:
        active = _preset(preset)
    elif config is not None:
        active = _with_profiling(config)
    else:
        active = (settings or TelemetrySettings.from_env()).build()

    _ACTIVE_CONFIG = active
    _LOGGER_CACHE.clear()


def _ensure_config() -> Any:
    global _ACTIVE_CONFIG
    if _ACTIVE_CONFIG is None:
        _ACTIVE_CONFIG = TelemetrySettings.from_env().build()
    return _ACTIVE_CONFIG


def get_logger(name: Optional[str] = None) -> Any:
    """Return a cached ``telelog.Logger`` for ``name``."""

    logger_name = name or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGER_CACHE:
        _LOGGER_CACHE[logger_name] = tl.Logger.with_config(
            logger_name, _ensure_config()
        )
    return _LOGGER_CACHE[logger_name]


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _pairs(data: Dict[str, Any]) -> list[tuple[str, str]]:
    return [(str(key), _stringify(value)) for key, value in data.items()]


def _level_method(logger: Any, level: str) -> Tuple[Any, bool]:
    name = level.lower()
    with_data = getattr(logger, f"{name}_with", None)
    if with_data is not None:
        return with_data, True
    method = getattr(logger, name, None)
    if method is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    return method, False


def log_kv(logger: Any, level: str, message: str, /, **kv: Any) -> None:
    """Emit ``message`` with key/value context at ``level``."""

    method, accepts_data = _level_method(logger, level)
    if accepts_data:
        method(message, _pairs(kv))
    elif kv:
        detail = " | ".join(f"{key}={_stringify(val)}" for key, val in kv.items())
        method(f"{message} | {detail}")
    else:
        method(message)


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    log_kv(get_logger(logger_name), level, f"event::{name}", **(data or {}))


@dataclass
class SpanHandle:
    """Handle yielded by ``span`` so callers can attach metadata."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def fail(self, reason: str) -> None:
        payload: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component_name:
            payload["component"] = self.component_name
        payload["reason"] = reason
        log_kv(self.logger, "error", "span::fail", **payload)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile the wrapped block under ``name``.

    ``component=True`` tracks the block as a component of the same name, a
    string names the component explicitly. ``metadata`` is pushed onto the
    logger context for the duration of the block.
    """

    log = get_logger(logger_name)
    component_name: Optional[str] = None
    if component is True:
        component_name = name
    elif isinstance(component, str):
        component_name = component

    pushed: list[str] = []
    serialized = {key: _stringify(value) for key, value in (metadata or {}).items()}
    for key, value in serialized.items():
        log.add_context(key, value)
        pushed.append(key)

    with ExitStack() as stack:
        if component_name:
            stack.enter_context(log.track_component(component_name))
        stack.enter_context(log.profile(name))
        handle = SpanHandle(
            logger=log,
            span_name=name,
            component_name=component_name,
            metadata=dict(serialized),
        )
        try:
            yield handle
        except Exception as exc:
            # interpreter errors are routine; only unexpected failures are logged here
            if not getattr(exc, "expected", False):
                handle.fail(str(exc))
            raise
        finally:
            for key in pushed:
                log.remove_context(key)


__all__ = [
    "ENV_PREFIX",
    "SpanHandle",
    "TelemetrySettings",
    "configure",
    "env_flag",
    "env_value",
    "get_logger",
    "log_kv",
    "record_event",
    "span",
]
