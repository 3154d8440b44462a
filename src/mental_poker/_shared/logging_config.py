# Area: Shared
"""
mental_poker._shared.logging_config - Structured logging setup
==============================================================

Every session logs to stderr and to a JSON-lines file. Ledger call
failures go to the file with their full error block, so a rejected
proof or transition can be inspected after the table has cleared.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from .logging_formatters import JSONFormatter, TableModeFilter, TerminalFormatter

if TYPE_CHECKING:
    from ..errors import LedgerCallError

# Package logger
logger = logging.getLogger("mental_poker")

DEFAULT_LOG_FILE = "mental_poker.log"


def log_file_for_index(index: int) -> str:
    """Per-player log file (.logsP1, .logsP2, ...) for shared machines."""
    return f".logsP{index + 1}"


def setup_logging(
    log_file_path: str = DEFAULT_LOG_FILE,
    level: int = logging.INFO,
) -> None:
    """
    Attach the stderr and JSON file handlers to the "mental_poker" logger.

    Parameters
    ----------
    log_file_path : str
        JSON-lines log; `--index` runs write .logsP1, .logsP2 and so on.
    level : int
        Threshold for stderr. The file always records DEBUG.
    """
    pkg_logger = logging.getLogger("mental_poker")
    pkg_logger.setLevel(level)
    pkg_logger.handlers.clear()

    terminal_handler = logging.StreamHandler(sys.stderr)
    terminal_handler.setLevel(level)
    terminal_handler.setFormatter(TerminalFormatter(
        fmt="%(asctime)s │ %(levelname)s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    ))
    terminal_handler.addFilter(TableModeFilter())
    pkg_logger.addHandler(terminal_handler)

    try:
        log_path = Path(log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        # The file always gets debug detail (error blocks, routing)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JSONFormatter())
        pkg_logger.addHandler(file_handler)
        pkg_logger.setLevel(logging.DEBUG)
    except OSError as e:
        pkg_logger.warning(f"Could not create log file: {e}")

    # Keep session records out of an embedding application's root handlers
    pkg_logger.propagate = False


def log_ledger_error(error: "LedgerCallError") -> None:
    """
    Write a ledger call failure to the log file in the structured format.

    Parameters
    ----------
    error : LedgerCallError
        The failed transition, with its operation, game and inputs.
    """
    logger.error(
        f"Ledger call failed: {error.operation}",
        extra={
            "operation": error.operation,
            "game_id": error.game_id,
            "reason": error.reason,
            "error_block": error.format_error_log(),
        },
    )
