"""Structured logging setup."""
import logging
import sys

import structlog


def configure_logging(level: int = logging.INFO, json: bool = False) -> None:
    """Route structlog events through stdlib logging.

    Args:
        level: Minimum log level to emit
        json: Render JSON lines instead of console key=value output
    """
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)

    if json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
