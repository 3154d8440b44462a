"""
mental_poker.errors - Custom exception classes
==============================================

Defines the exception hierarchy for ledger and session errors.
Ledger call errors store full context for structured logging.
"""

from __future__ import annotations
from typing import Any, Dict, Optional
import json


class MentalPokerError(Exception):
    """Base exception for all mental poker client errors."""
    pass


class LedgerLookupError(MentalPokerError):
    """Raised when the ledger has no game, cards or chips for an id."""

    def __init__(self, what: str, game_id: int):
        self.what = what
        self.game_id = game_id
        super().__init__(f"{what} not found for game {game_id}")


class LedgerCallError(MentalPokerError):
    """Raised when a ledger transition fails (network, proof or contract rejection)."""

    def __init__(
        self,
        operation: str,
        game_id: Optional[int],
        reason: str,
        inputs: Optional[Dict[str, Any]] = None,
    ):
        self.operation = operation
        self.game_id = game_id
        self.reason = reason
        self.inputs = inputs or {}
        super().__init__(f"{operation} failed for game {game_id}: {reason}")

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type="LEDGER_CALL_FAILURE",
            operation=self.operation,
            game_id=self.game_id,
            reason=self.reason,
            inputs=self.inputs,
        )


class SeatResolutionError(MentalPokerError):
    """Raised when the local address is not one of the game's three seats."""

    def __init__(self, address: str, game_id: int):
        self.address = address
        self.game_id = game_id
        super().__init__(f"Address {address} is not seated in game {game_id}")


class KeyCustodyError(MentalPokerError):
    """Raised when secret material would be duplicated or read after hand-off."""
    pass


class CardTableError(MentalPokerError):
    """Raised when a card lookup table cannot be built from a deck."""
    pass


def _format_error_block(
    error_type: str,
    operation: str,
    game_id: Optional[int],
    reason: str,
    inputs: Dict[str, Any],
) -> str:
    """Format a structured error block for the log file."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " LEDGER CALL FAILED - STEP LEFT PENDING",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        f" Operation:    {operation}",
        f" Game:         {game_id if game_id is not None else 'N/A'}",
        f" Reason:       {reason}",
    ]

    if inputs:
        lines.append("")
        lines.append(" -- INPUTS " + "-" * 53)
        lines.append(_indent_json(inputs))

    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def _indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"
