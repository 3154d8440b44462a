# Area: Shared
"""
mental_poker._shared.logging_formatters - Logging formatters and filters
========================================================================

The file formatter writes one JSON object per record, keeping `extra`
fields such as ledger error blocks. TableModeFilter mutes the terminal
handler while the poker table is drawn.
"""

from __future__ import annotations

import copy
import json
import logging
from datetime import datetime, timezone

# While the table owns the terminal, log lines would tear the frame
_table_mode_enabled = False

# LogRecord attributes that are not user-supplied `extra` fields
_RECORD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class TableModeFilter(logging.Filter):
    """Filter that suppresses terminal logs while the table is displayed.

    The in-game log panel shows the session log instead; the JSON file
    keeps everything.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return not _table_mode_enabled


class TerminalFormatter(logging.Formatter):
    """Level-colored lines for stderr, used before and after the table runs."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        # Color a copy; the file handler formats the same record
        record = copy.copy(record)
        color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


class JSONFormatter(logging.Formatter):
    """JSON-lines formatter for file output, including `extra` fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                log_data[key] = value
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


def enable_table_mode() -> None:
    """Hand the terminal to the table renderer; the log file keeps recording."""
    global _table_mode_enabled
    _table_mode_enabled = True


def disable_table_mode() -> None:
    """Give stderr back to log lines once the runner stops."""
    global _table_mode_enabled
    _table_mode_enabled = False


def is_table_mode_enabled() -> bool:
    return _table_mode_enabled
