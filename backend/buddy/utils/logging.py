# /buddy/utils/logging.py

import logging
import sys
import structlog
from buddy.config.settings import VERSION, settings

# Structured logging for the whole process. Module loggers stay plain
# `logging.getLogger(__name__)`; structlog renders every record, including
# uvicorn's and the oracle SDK's, as console lines in development and test
# and as JSON elsewhere. Request-scoped fields bound with
# `bind_request_context` are merged into every record of that request.

_NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "openai")


def _add_service_fields(logger, method_name, event_dict):
    event_dict.setdefault("service", "daily-buddy")
    event_dict.setdefault("version", VERSION)
    return event_dict


def _renderer():
    if settings.environment in ("development", "test"):
        return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    return structlog.processors.JSONRenderer(ensure_ascii=False)


def setup_logging():
    """Installs one structlog-formatted stdout handler on the root logger."""
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_service_fields,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processor=_renderer(),
        foreign_pre_chain=shared_processors,
    ))

    root_logger = logging.getLogger()
    # The lifespan runs once per TestClient, so replace our handler instead of stacking it.
    root_logger.handlers = [
        h for h in root_logger.handlers if not isinstance(h.formatter, structlog.stdlib.ProcessorFormatter)
    ]
    root_logger.addHandler(handler)
    root_logger.setLevel(settings.log_level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_request_context(**fields):
    """Starts a fresh logging context for one request (request id, path, flow...)."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**fields)
