"""structlog configuration."""

import logging

import structlog

from casedesk.config import Settings

# Libraries that log every statement or request at INFO.
_NOISY_LOGGERS = ("sqlalchemy.engine", "uvicorn.access", "httpx")


def _add_service_info(settings: Settings) -> structlog.types.Processor:
    def processor(_logger: object, _method: str, event_dict: dict) -> dict:
        event_dict.setdefault("service", "casedesk")
        event_dict.setdefault("env", settings.environment)
        return event_dict

    return processor


def setup_logging(settings: Settings) -> None:
    """Route structlog through stdlib logging, rendered as JSON or for the console."""
    if settings.log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=settings.debug)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            _add_service_info(settings),
            structlog.processors.TimeStamper(fmt="iso", utc=False),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(message)s")
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
