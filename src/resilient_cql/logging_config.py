"""structlog setup for applications embedding resilient-cql.

Driven by Settings.LOG_LEVEL and Settings.ENVIRONMENT: JSON lines in
production, colored console output elsewhere. cassandra-driver logs through
stdlib logging and is rendered by the same formatter.
"""

import logging
import sys
from typing import IO, Optional

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from resilient_cql import __version__
from resilient_cql.config import Settings

# Reconnect and host up/down events are logged at INFO by the driver
DRIVER_LOGGERS = ("cassandra", "cassandra.cluster", "cassandra.pool", "cassandra.connection")


def _keyspace_context(keyspace: str) -> Processor:
    def add_keyspace_context(
        logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        event_dict.setdefault("library", "resilient-cql")
        event_dict.setdefault("version", __version__)
        event_dict.setdefault("keyspace", keyspace)
        return event_dict

    return add_keyspace_context


def configure_logging(settings: Optional[Settings] = None, stream: Optional[IO[str]] = None) -> None:
    """Configure structlog and the root stdlib logger.

    Args:
        settings: Source of LOG_LEVEL, ENVIRONMENT and CASSANDRA_KEYSPACE
            (loaded from the environment when omitted)
        stream: Output stream, stdout by default

    An unknown LOG_LEVEL falls back to INFO. Driver loggers are held at
    WARNING unless LOG_LEVEL asks for something stricter.
    """
    settings = settings or Settings()
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO
    json_output = settings.ENVIRONMENT.lower() == "production"

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        _keyspace_context(settings.CASSANDRA_KEYSPACE),
    ]
    if json_output:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream is None)

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared_processors)
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in DRIVER_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    structlog.get_logger(__name__).info(
        "Logging configured",
        log_level=logging.getLevelName(level),
        environment=settings.ENVIRONMENT,
    )
