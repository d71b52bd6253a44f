"""Structured logging for playerhub.

Two independent choices, both named in ``ObservabilityConfig``:

- the formatter decides how a record is rendered (``structlog`` or ``stdlib``);
- the destination decides where rendered lines go (``stderr`` or ``jsonl``).

``setup_logging`` builds one handler from the pair and installs it on the
root logger, replacing only the handler it installed before. Modules that
log through ``logging.getLogger(__name__)`` come out in the same shape as
events logged with ``get_logger(name).info("player.ready", unique_id=1)``.

Custom pairs::

    register_destination("syslog", SyslogDestination)
    configure(ObservabilityConfig(log_destination="syslog"))

Destinations are constructed with the active ``ObservabilityConfig``.
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Protocol, runtime_checkable

if TYPE_CHECKING:
    from playerhub.observability.config import ObservabilityConfig

_MANAGED = "_playerhub_managed"


@runtime_checkable
class LogFormatter(Protocol):
    """How records are rendered; also hands out keyword-style loggers."""

    def setup(self, config: ObservabilityConfig) -> logging.Formatter: ...

    def get_logger(self, name: str, **kwargs: Any) -> Any: ...


@runtime_checkable
class LogDestination(Protocol):
    """Where rendered records are written."""

    def create_handler(self, formatter: logging.Formatter) -> logging.Handler: ...

    def shutdown(self) -> None: ...


# -- formatters --------------------------------------------------------------


class StructlogFormatter:
    """structlog rendering, JSON or console.

    Foreign (plain stdlib) records go through the same renderer with the
    logger name, level and timestamp added.
    """

    def setup(self, config: ObservabilityConfig) -> logging.Formatter:
        import structlog

        if config.log_format == "console":
            renderer: Any = structlog.dev.ConsoleRenderer()
        else:
            renderer = structlog.processors.JSONRenderer()

        timestamper = structlog.processors.TimeStamper(fmt="iso")
        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.contextvars.merge_contextvars,
                structlog.processors.add_log_level,
                timestamper,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        return structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[
                structlog.stdlib.add_logger_name,
                structlog.processors.add_log_level,
                timestamper,
                structlog.processors.format_exc_info,
            ],
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )

    def get_logger(self, name: str, **kwargs: Any) -> Any:
        import structlog

        return structlog.get_logger(name, **kwargs)


class StdlibFormatter:
    """Plain ``logging`` output; structlog is not touched."""

    def setup(self, config: ObservabilityConfig) -> logging.Formatter:
        if config.log_format == "console":
            return logging.Formatter(
                "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        return _JsonLineFormatter()

    def get_logger(self, name: str, **kwargs: Any) -> Any:
        return _KeywordLogger(logging.getLogger(name))


class _JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
        }
        line.update(getattr(record, "fields", {}))
        if record.exc_info and record.exc_info[0] is not None:
            line["exception"] = self.formatException(record.exc_info)
        return json.dumps(line, default=str)


class _KeywordLogger:
    """``logger.info("player.ready", unique_id=1)`` on top of a stdlib logger.

    Keyword fields travel on the record as ``record.fields``.
    """

    _LEVELS = {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warning": logging.WARNING,
        "error": logging.ERROR,
        "critical": logging.CRITICAL,
    }

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def __getattr__(self, method: str) -> Callable[..., None]:
        if method == "exception":
            return partial(self._log, logging.ERROR, exc_info=True)
        try:
            return partial(self._log, self._LEVELS[method])
        except KeyError:
            raise AttributeError(method) from None

    def _log(self, level: int, event: str, *, exc_info: Any = None, **fields: Any) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, event, exc_info=exc_info, extra={"fields": fields})


# -- destinations ------------------------------------------------------------


class StderrDestination:
    def __init__(self, config: ObservabilityConfig | None = None) -> None:
        pass

    def create_handler(self, formatter: logging.Formatter) -> logging.Handler:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        return handler

    def shutdown(self) -> None:
        pass


class JsonlFileDestination:
    """Append one line per record to ``jsonl_path`` (default ``playerhub.jsonl``)."""

    def __init__(self, config: ObservabilityConfig) -> None:
        self.path = Path(config.jsonl_path or "playerhub.jsonl")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._handlers: list[logging.Handler] = []

    def create_handler(self, formatter: logging.Formatter) -> logging.Handler:
        handler = logging.FileHandler(self.path, mode="a", encoding="utf-8")
        handler.setFormatter(formatter)
        self._handlers.append(handler)
        return handler

    def shutdown(self) -> None:
        while self._handlers:
            self._handlers.pop().close()


_FORMATTERS: dict[str, type] = {
    "structlog": StructlogFormatter,
    "stdlib": StdlibFormatter,
}

_DESTINATIONS: dict[str, type] = {
    "stderr": StderrDestination,
    "jsonl": JsonlFileDestination,
}


def register_formatter(name: str, cls: type) -> None:
    """Make ``cls`` selectable as ``log_formatter=name``. Call before configure()."""
    _FORMATTERS[name] = cls


def register_destination(name: str, cls: type) -> None:
    """Make ``cls`` selectable as ``log_destination=name``; built as ``cls(config)``."""
    _DESTINATIONS[name] = cls


# -- setup -------------------------------------------------------------------


@dataclass
class _ActiveLogging:
    formatter: LogFormatter
    destination: LogDestination


_active: _ActiveLogging | None = None


def _lookup(registry: dict[str, type], name: str, kind: str, register: str) -> type:
    try:
        return registry[name]
    except KeyError:
        raise ValueError(
            f"Unknown log {kind}: {name!r}. Available: {list(registry)}. "
            f"Register custom ones with {register}()."
        ) from None


def _detach_managed_handlers() -> None:
    root = logging.getLogger()
    for handler in [h for h in root.handlers if getattr(h, _MANAGED, False)]:
        root.removeHandler(handler)


def setup_logging(config: ObservabilityConfig) -> None:
    """Install the configured formatter x destination handler on the root logger.

    Handlers installed by anything else (pytest's caplog, an embedding
    application) are left alone.
    """
    global _active

    formatter_cls = _lookup(_FORMATTERS, config.log_formatter, "formatter", "register_formatter")
    destination_cls = _lookup(
        _DESTINATIONS, config.log_destination, "destination", "register_destination"
    )

    shutdown_logging()
    formatter = formatter_cls()
    destination = destination_cls(config)
    handler = destination.create_handler(formatter.setup(config))
    setattr(handler, _MANAGED, True)

    root = logging.getLogger()
    root.addHandler(handler)
    level = logging.getLevelName(config.log_level.upper())
    root.setLevel(level if isinstance(level, int) else logging.INFO)

    _active = _ActiveLogging(formatter, destination)


def get_logger(name: str = "", **kwargs: Any) -> Any:
    """A logger taking ``event, **fields`` from the active formatter.

    Before ``setup_logging`` it wraps the stdlib logger, so keyword fields
    are accepted either way.
    """
    if _active is None:
        return _KeywordLogger(logging.getLogger(name))
    return _active.formatter.get_logger(name, **kwargs)


def shutdown_logging() -> None:
    """Detach the installed handler and close whatever the destination opened."""
    global _active

    _detach_managed_handlers()
    if _active is not None:
        _active.destination.shutdown()
    _active = None
