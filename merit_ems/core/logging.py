import logging
import sys

import structlog


def configure_logging(level: str = "INFO", *, service: str = "merit-ems-timeclock") -> None:
    """JSON logs on stderr, leaving stdout to CLI command output."""
    level = level.upper()
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
    ]

    structlog.configure(
        processors=shared_processors
        + [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=service)

    logging.basicConfig(level=level, stream=sys.stderr, format="%(message)s", force=True)
    # SQL echo is noisy at INFO; keep it behind DEBUG.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.DEBUG if level == "DEBUG" else logging.WARNING)


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)
