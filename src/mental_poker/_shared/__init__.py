# Area: Shared
"""
Shared utilities used by the runners and the core.

This package contains:
- Logging configuration (terminal + JSON file, table mode)
- Text rendering of the game table
"""

from .logging_config import setup_logging, log_ledger_error, log_file_for_index
from .logging_formatters import (
    enable_table_mode,
    disable_table_mode,
    is_table_mode_enabled,
)

__all__ = [
    "setup_logging",
    "log_ledger_error",
    "log_file_for_index",
    "enable_table_mode",
    "disable_table_mode",
    "is_table_mode_enabled",
]
