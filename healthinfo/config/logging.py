"""Root logging configuration rendered through structlog."""

from __future__ import annotations

import logging
import sys

import structlog


def config_configure_logging(level: str = "INFO", json_output: bool = False, force: bool = False) -> None:
    """Install a structlog formatter on the root logger.

    Module loggers keep using `logging.getLogger(__name__)`; their records are
    timestamped and rendered by the shared formatter.

    Args:
        level: Root log level name.
        json_output: Render records as JSON instead of console text.
        force: Replace handlers already installed on the root logger.

    Returns:
        None: Configures logging as side effect.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    renderer: structlog.types.Processor
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    root_logger = logging.getLogger()
    if force:
        root_logger.handlers.clear()
    if not root_logger.handlers:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        root_logger.addHandler(stream_handler)
    root_logger.setLevel(logging.getLevelName(level.upper()))

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
