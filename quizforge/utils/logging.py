"""structlog configuration for quizforge.

One processor chain renders both structlog events and records from the
standard ``logging`` module (redis, httpx, the LLM SDKs), so every line
has the same shape.  Rendering is coloured console output in development
and one JSON object per line when ``APP_ENV=production`` or when
``json_output`` is forced.

quizforge modules log with ``structlog.get_logger(logger_name=__name__)``;
stdlib records get the same ``logger_name`` key from the record name so
log queries work across both sources.
"""

import logging
import os
import sys
from typing import TextIO

import structlog

# Log every HTTP request at INFO; only let them through at DEBUG.
_CHATTY_LOGGERS = ("httpx", "httpcore", "anthropic", "openai")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def _stdlib_logger_name(
    _logger: object, _method: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    record = event_dict.get("_record")
    if record is not None:
        event_dict.setdefault("logger_name", record.name)
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = False,
    stream: TextIO | None = None,
) -> structlog.BoundLogger:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
        json_output: Force JSON lines regardless of ``APP_ENV``.
        stream: Where log lines go; stdout when omitted.  The CLI passes
                stderr so its JSON output on stdout stays parseable.

    Returns:
        A logger bound to the new configuration.
    """
    level = logging.getLevelName(log_level.upper())
    use_json = json_output or os.environ.get("APP_ENV", "development") == "production"
    stream = stream or sys.stdout

    if use_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream.isatty())

    structlog.configure(
        processors=[*_shared_processors(), renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                _stdlib_logger_name,
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_shared_processors(),
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    chatty_level = level if level <= logging.DEBUG else max(level, logging.WARNING)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(chatty_level)

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a logger bound to *name*, configuring defaults on first use."""
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(logger_name=name)
