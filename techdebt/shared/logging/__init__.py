"""Structured logging for the scanner and the HTTP surface."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import structlog

# Loggers that are too chatty at INFO during a scan request
_QUIET_LOGGERS = ("uvicorn.access", "httpx", "multipart")


def _build_formatter(renderer, shared_processors: list) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def _file_handler(file_path: str, max_mb: int, backups: int, formatter: logging.Formatter) -> logging.Handler | None:
    path = Path(file_path).resolve()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            path,
            maxBytes=max_mb * 1024 * 1024,
            backupCount=backups,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"techdebt: file logging disabled, cannot open {path}: {e}\n")
        return None
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str = "INFO",
    file_path: str = "",
    rotation_max_mb: int = 5,
    rotation_backups: int = 3,
) -> None:
    """Route structlog and stdlib logging through one formatter.

    Analyzer modules log via logging.getLogger(__name__); the API layer uses
    structlog.get_logger(). JSON lines are emitted unless level is DEBUG, which
    switches to the console renderer. With file_path set, a rotating file
    handler is attached next to stdout.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if level.upper() == "DEBUG":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()
    formatter = _build_formatter(renderer, shared_processors)

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()

    stdout = logging.StreamHandler(sys.stdout)
    stdout.setFormatter(formatter)
    root.addHandler(stdout)

    if file_path and file_path.strip():
        handler = _file_handler(file_path.strip(), rotation_max_mb, rotation_backups, formatter)
        if handler is not None:
            root.addHandler(handler)

    if log_level > logging.DEBUG:
        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
