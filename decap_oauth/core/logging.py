import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import BoundLogger


# Loggers whose records are routed through the structlog formatter
ROUTED_LOGGERS = ("uvicorn", "uvicorn.error", "fastapi", "decap_oauth")


def _shared_processors() -> list[Any]:
    """Processors applied to structlog events and foreign stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def configure_structlog(json_logs: bool = False) -> None:
    """Configure the structlog processor chain.

    JSON output carries exceptions as structured ``exception`` entries; the
    console renderer formats tracebacks itself.
    """
    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        *_shared_processors(),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_logs:
        processors.append(structlog.processors.dict_tracebacks)
    processors += [
        structlog.processors.UnicodeDecoder(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def setup_logging(json_logs: bool = False, log_level: str = "INFO") -> BoundLogger:
    """Route structlog and stdlib logging to stdout at ``log_level``.

    Args:
        json_logs: Render JSON lines instead of console output
        log_level: Level name for the root and relay loggers

    Returns:
        A structlog logger
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    configure_structlog(json_logs=json_logs)

    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            foreign_pre_chain=_shared_processors(),
        )
    )
    root_logger.handlers = [handler]

    for name in ROUTED_LOGGERS:
        routed = logging.getLogger(name)
        routed.handlers = []
        routed.propagate = True
        routed.setLevel(level)

    # Replaced by AccessLogMiddleware, which omits query strings
    logging.getLogger("uvicorn.access").disabled = True

    # httpx logs full request URLs at INFO
    logging.getLogger("httpx").setLevel(
        level if level <= logging.DEBUG else logging.WARNING
    )
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return structlog.get_logger()  # type: ignore[no-any-return]


def get_logger(name: str | None = None) -> BoundLogger:
    """Get a structlog logger instance."""
    return structlog.get_logger(name)  # type: ignore[no-any-return]
