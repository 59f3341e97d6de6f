"""
ONIX Books Sync - Logging Configuration

Import progress is logged per file (discovery, parse, records applied) and
per record at DEBUG. Records that concern one ONIX file or one product carry
the extras `onix_file`, `record_reference` and `notification_type`; the JSON
formatter writes them as top-level keys and the console formatter appends
them in brackets.
"""

import logging
import json
from datetime import datetime, timezone
from typing import Optional

# `filename` is a reserved LogRecord attribute, hence `onix_file`
IMPORT_FIELDS = ("onix_file", "record_reference", "notification_type")


def import_context(record: logging.LogRecord) -> dict:
    """The import extras present on record, in IMPORT_FIELDS order."""
    return {
        field: getattr(record, field)
        for field in IMPORT_FIELDS
        if getattr(record, field, None) is not None
    }


class JSONFormatter(logging.Formatter):
    """
    One JSON object per line for the import log file.

    Every line names the logger and source location; lines emitted while a
    file or record is being imported also carry its file name, record
    reference and notification code, so a failed record can be found with
    a plain grep on its reference.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        log_data.update(import_context(record))

        # Titles and author names are German text
        return json.dumps(log_data, ensure_ascii=False)


class ColoredFormatter(logging.Formatter):
    """Console output: colored level, import extras appended as [key=value]."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        # handlers share the record; color a copy only
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname:7}{self.RESET}"

        line = super().format(record)
        context = import_context(record)
        if context:
            line += " [" + " ".join(f"{k}={v}" for k, v in context.items()) + "]"
        return line


def setup_logging(
    level: str = "INFO",
    json_format: bool = False,
    log_file: Optional[str] = None,
):
    """
    Configure the root logger for an import run.

    Args:
        level: Log level (DEBUG shows every applied record)
        json_format: Write JSON lines to the console instead of colored text
        log_file: Optional path to a rotating import log (always JSON)

    Returns:
        The configured root logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    if json_format:
        console_handler.setFormatter(JSONFormatter())
    else:
        console_handler.setFormatter(ColoredFormatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%H:%M:%S"
        ))
    root_logger.addHandler(console_handler)

    if log_file:
        from logging.handlers import RotatingFileHandler
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding='utf-8',
        )
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    return root_logger
