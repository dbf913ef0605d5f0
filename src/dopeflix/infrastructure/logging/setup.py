"""structlog on top of stdlib logging, one stderr handler for everything.

stdout is reserved for the CLI's JSON output.
"""

from __future__ import annotations

import logging
import logging.config
from datetime import datetime, timezone
from typing import Any

import structlog

from dopeflix.infrastructure.config.schema import AppConfig

log = structlog.get_logger(__name__)

# Loggers that get the configured level explicitly (they do not inherit root).
_SERVER_LOGGERS: tuple[str, ...] = ("uvicorn", "uvicorn.error", "uvicorn.access")
# Per-request client lines stay quiet unless they are warnings.
_QUIET_LOGGERS: tuple[str, ...] = ("httpx", "httpcore")


def _drop_color_message(_: Any, __: Any, event_dict: dict[str, Any]) -> dict[str, Any]:
    # uvicorn duplicates "event" as "color_message".
    event_dict.pop("color_message", None)
    return event_dict


def _stamp_foreign_record(_: Any, __: Any, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Timestamp stdlib records (uvicorn, httpx) with their creation time, UTC."""
    record = event_dict.get("_record")
    if isinstance(record, logging.LogRecord):
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        event_dict["timestamp"] = created.isoformat().replace("+00:00", "Z")
    return event_dict


def _renderer(config: AppConfig) -> structlog.typing.Processor:
    if config.log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def _formatter(config: AppConfig) -> dict[str, Any]:
    return {
        "()": structlog.stdlib.ProcessorFormatter,
        "foreign_pre_chain": [
            _drop_color_message,
            structlog.contextvars.merge_contextvars,
            _stamp_foreign_record,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
        ],
        "processors": [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(config),
        ],
    }


def build_logging_config(config: AppConfig) -> dict[str, Any]:
    """Return a fresh ``dictConfig`` mapping, also usable as uvicorn's ``log_config``."""
    level = config.log_level
    loggers: dict[str, Any] = {
        name: {"handlers": ["stderr"], "level": level, "propagate": False}
        for name in _SERVER_LOGGERS
        if name != "uvicorn.error"
    }
    # uvicorn.error propagates into "uvicorn".
    loggers["uvicorn.error"] = {"level": level}
    for name in _QUIET_LOGGERS:
        loggers[name] = {"level": "WARNING"}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"structlog": _formatter(config)},
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "structlog",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": loggers,
        "root": {"handlers": ["stderr"], "level": level},
    }


def configure_logging(config: AppConfig) -> dict[str, Any]:
    """Configure structlog and stdlib logging; return the applied dictConfig."""
    structlog.configure(
        processors=[
            _drop_color_message,
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    cfg = build_logging_config(config)
    logging.config.dictConfig(cfg)

    log.info("logging_configured", log_format=config.log_format, log_level=config.log_level)
    return cfg
