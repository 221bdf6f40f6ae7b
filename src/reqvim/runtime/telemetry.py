"""Logging, events and profiling spans, all routed through telelog.

While the full-screen editor runs, log output goes to a file; console
output is for development and the test suite. Settings come from
``REQVIM_*`` environment variables and can be adjusted by one of the
named presets:

* ``development``: DEBUG level on a coloured console
* ``production``: file only, buffered
* ``quiet``: errors only, no console
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field, replace
from typing import (
    Any,
    Callable,
    Dict,
    Iterator,
    Mapping,
    MutableMapping,
    Optional,
    cast,
)

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "REQVIM_"
DEFAULT_LOGGER_NAME = "reqvim"
DEFAULT_LOG_FILE = "reqvim.log"

_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class TelemetrySettings:
    level: str = "INFO"
    console: bool = True
    color: bool = True
    json: bool = False
    log_file: str = ""
    buffer_size: int = 0
    profile: bool = True

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "TelemetrySettings":
        env = os.environ if environ is None else environ

        def flag(name: str, default: bool) -> bool:
            raw = env.get(ENV_PREFIX + name)
            return default if raw is None else raw.strip().lower() in _TRUE

        try:
            buffer_size = max(0, int(env.get(f"{ENV_PREFIX}LOG_BUFFER_SIZE", "0")))
        except ValueError:
            buffer_size = 0
        return cls(
            level=env.get(f"{ENV_PREFIX}LOG_LEVEL", "INFO").upper(),
            console=not flag("DISABLE_CONSOLE", False),
            color=not flag("NO_COLOR", False),
            json=flag("LOG_JSON", False),
            log_file=env.get(f"{ENV_PREFIX}LOG_FILE", ""),
            buffer_size=buffer_size,
            profile=flag("PROFILE", True),
        )

    def to_config(self) -> Any:
        config = tl.Config()
        config.with_min_level(self.level)
        config.with_console_output(self.console)
        if self.console:
            config.with_colored_output(self.color)
        config.with_json_format(self.json)
        if self.log_file:
            config.with_file_output(self.log_file)
        if self.buffer_size:
            config.with_buffering(True)
            config.with_buffer_size(self.buffer_size)
        config.with_profiling(self.profile)
        return config


PRESETS: Dict[str, Callable[[TelemetrySettings], TelemetrySettings]] = {
    "development": lambda s: replace(s, level="DEBUG", console=True, color=True),
    "production": lambda s: replace(
        s,
        console=False,
        log_file=s.log_file or DEFAULT_LOG_FILE,
        buffer_size=s.buffer_size or 2048,
    ),
    "quiet": lambda s: replace(s, level="ERROR", console=False),
}

_loggers: MutableMapping[str, Any] = {}
_config: Optional[Any] = None


def configure(
    *,
    config: Optional[Any] = None,
    preset: Optional[str] = None,
    settings: Optional[TelemetrySettings] = None,
) -> None:
    """Swap the active telelog configuration and drop cached loggers.

    Pass a ready ``telelog.Config`` as ``config``, or build one from
    ``settings`` (the environment when omitted) adjusted by ``preset``.
    """

    global _config
    if config is not None and (preset or settings):
        raise ValueError("`config` cannot be combined with `preset` or `settings`")
    if config is None:
        base = settings or TelemetrySettings.from_env()
        if preset:
            try:
                base = PRESETS[preset.lower()](base)
            except KeyError:
                raise ValueError(f"unknown telemetry preset '{preset}'") from None
        config = base.to_config()
    _config = config
    _loggers.clear()


def get_logger(name: Optional[str] = None) -> Any:
    logger_name = name or DEFAULT_LOGGER_NAME
    logger = _loggers.get(logger_name)
    if logger is None:
        if _config is None:
            configure()
        logger = _loggers[logger_name] = tl.Logger.with_config(logger_name, _config)
    return logger


def _emit(logger: Any, level: str, message: str, payload: Mapping[str, Any]) -> None:
    level = level.lower()
    structured = getattr(logger, f"{level}_with", None)
    if structured is not None:
        structured(message, [(str(k), str(v)) for k, v in payload.items()])
        return
    plain = getattr(logger, level, None)
    if plain is None:
        raise ValueError(f"unsupported log level '{level}'")
    plain(f"{message} {dict(payload)}")


def record_event(
    name: str,
    *,
    level: str = "debug",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Log ``event::<name>`` with ``data`` attached as key/value pairs."""

    payload = {"event": name, **(data or {})}
    _emit(get_logger(logger_name), level, f"event::{name}", payload)


@dataclass
class SpanHandle:
    logger: Any
    name: str
    component: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = str(value)

    def fail(self, reason: str) -> None:
        payload: Dict[str, Any] = {"span": self.name, **self.metadata}
        payload["reason"] = reason
        if self.component:
            payload["component"] = self.component
        _emit(self.logger, "error", "span::fail", payload)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile the block under ``name``.

    ``component=True`` also tracks the block as a component called
    ``name``; a string picks another component name. ``metadata`` is pushed
    as logger context until the block exits. An exception escaping the
    block is reported through ``SpanHandle.fail`` and re-raised.
    """

    logger = get_logger(logger_name)
    component_name = name if component is True else component or None
    context = {key: str(value) for key, value in (metadata or {}).items()}
    handle = SpanHandle(logger, name, component_name, dict(context))

    with ExitStack() as stack:
        for key, value in context.items():
            logger.add_context(key, value)
            stack.callback(logger.remove_context, key)
        if component_name:
            stack.enter_context(logger.track_component(component_name))
        stack.enter_context(logger.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


__all__ = [
    "PRESETS",
    "SpanHandle",
    "TelemetrySettings",
    "configure",
    "get_logger",
    "record_event",
    "span",
]
