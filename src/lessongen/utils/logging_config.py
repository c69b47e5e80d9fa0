"""Logging configuration for the lesson pipeline.

Console output uses a compact human-readable format by default; a JSON
formatter is available for runs whose logs are collected by other tooling.
"""

import json
import logging
import sys
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union

# Attributes present on every LogRecord; anything else came in via `extra=`.
_RECORD_ATTRS = set(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}

# Third-party loggers that log every HTTP request at INFO.
_NOISY_LOGGERS = ("httpx", "httpcore", "openai")


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object per line.

    Keys: timestamp (UTC, ISO 8601), level, logger, message, plus
    `exception` when exc_info is set and `extra` for context fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra_fields = {
            k: v for k, v in record.__dict__.items() if k not in _RECORD_ATTRS
        }
        if extra_fields:
            log_data["extra"] = extra_fields

        # Chinese titles stay readable in log files
        return json.dumps(log_data, ensure_ascii=False, default=str)


def configure_logging(
    level: Union[str, int] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    json_format: bool = False,
    console_output: bool = True,
) -> None:
    """Configure root logging for a pipeline run.

    Args:
        level: Logging level name or number (default: INFO)
        log_file: Optional file to log to in addition to the console
        json_format: Use JsonFormatter instead of the plain text format
        console_output: Log to stderr (default: True)

    Example:
        >>> configure_logging(level="DEBUG", log_file="logs/generate.log")
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if json_format:
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    if console_output:
        # stderr keeps the tqdm bar and diagnostics on the same stream
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.debug(
        f"Logging configured: level={logging.getLevelName(level)}, json_format={json_format}"
    )


@contextmanager
def stage_logger(stage_name: str, **context: Any) -> Iterator[logging.Logger]:
    """Log entry, exit and duration of one pipeline stage.

    Failures are logged with the elapsed time and re-raised unchanged.

    Example:
        >>> with stage_logger("load_outline", path="scripts/outline.json") as log:
        ...     log.info("Reading outline")
    """
    logger = logging.getLogger(f"lessongen.{stage_name}")
    start_time = datetime.now(UTC)
    logger.debug(
        f"Starting stage: {stage_name}",
        extra={"stage": stage_name, "status": "started", **context},
    )

    try:
        yield logger
    except Exception as e:
        duration_ms = (datetime.now(UTC) - start_time).total_seconds() * 1000
        logger.debug(
            f"Failed stage: {stage_name} ({duration_ms:.0f} ms)",
            extra={
                "stage": stage_name,
                "status": "failed",
                "duration_ms": round(duration_ms, 2),
                "error": str(e)[:200],
                **context,
            },
        )
        raise

    duration_ms = (datetime.now(UTC) - start_time).total_seconds() * 1000
    logger.debug(
        f"Completed stage: {stage_name} ({duration_ms:.0f} ms)",
        extra={
            "stage": stage_name,
            "status": "completed",
            "duration_ms": round(duration_ms, 2),
            **context,
        },
    )
