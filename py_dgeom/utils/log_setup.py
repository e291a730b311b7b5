"""structlog configuration."""

import logging

import structlog

from ..config import Settings, settings as default_settings


def configure_logging(settings: Settings = None) -> None:
    """
    Configure structlog on top of the standard library logger.

    Args:
        settings: Settings providing ``log_level`` and ``log_format``;
            the module-level settings when omitted
    """
    settings = settings or default_settings
    level = getattr(logging, settings.log_level.upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {settings.log_level}")

    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    elif settings.log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        raise ValueError(f"Unknown log format: {settings.log_format}")

    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
