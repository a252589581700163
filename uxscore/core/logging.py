"""Structured logging for uxscore.

Library modules keep using ``logging.getLogger(__name__)``; once
``configure_logging`` has run, their records are rendered by structlog with:
- a correlation ID shared by every event of one scoring run
- the version and frame being scored, bound by the engine
- JSON output for machines, pretty console output for terminals

Example usage:
    from uxscore.core.logging import configure_logging, correlation_context

    configure_logging(level="DEBUG")
    with correlation_context():
        VersionScoreAggregator().score_versions(versions)
"""

import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from uxscore import __version__

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> str | None:
    """Get the correlation ID of the current scoring run, if any."""
    return _correlation_id.get()


class correlation_context:
    """Context manager tagging every log event with one correlation ID.

    Example:
        with correlation_context("run-42"):
            logger.info("scoring")  # Includes correlation_id="run-42"
    """

    def __init__(self, correlation_id: str | None = None) -> None:
        """Initialize the correlation context.

        Args:
            correlation_id: Optional correlation ID. If None, generates a UUID4.
        """
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self._token: Any = None

    def __enter__(self) -> str:
        self._token = _correlation_id.set(self.correlation_id)
        return self.correlation_id

    def __exit__(self, *args: Any) -> None:
        _correlation_id.reset(self._token)


@contextmanager
def scoring_context(**fields: Any) -> Iterator[None]:
    """Bind scoring identifiers (version_id, frame_id, ...) to log events.

    None values are skipped so anonymous frames do not log ``frame_id=None``.
    """
    bound = {key: value for key, value in fields.items() if value is not None}
    with structlog.contextvars.bound_contextvars(**bound):
        yield


def add_correlation_id(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add the correlation ID to log events if one is active."""
    correlation_id = get_correlation_id()
    if correlation_id is not None:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def add_package_version(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict.setdefault("uxscore_version", __version__)
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        add_correlation_id,
        add_package_version,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def configure_logging(
    level: str | int = logging.INFO,
    json_output: bool | None = None,
    log_file: str | None = None,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Global log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Use JSON output format. If None, auto-detects:
                     True if stderr is not a TTY, False otherwise
        log_file: Optional file path for log output
    """
    if json_output is None:
        json_output = not sys.stderr.isatty()

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    shared_processors = _shared_processors()

    structlog.configure(
        processors=shared_processors
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=True)
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # stderr keeps stdout free for command output (e.g. --json)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def reset_logging() -> None:
    """Reset logging configuration to defaults.

    Primarily useful for tests that need clean state.
    """
    _correlation_id.set(None)
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.WARNING)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
