"""
mental_poker - Three-seat mental poker client
=============================================

Client-side orchestration of a mental poker protocol: the contract on a
shared ledger holds the game, and each player's client decodes its
phase, strips its own encryption layer from the cards at the right
moment, bets, and reconciles chips. No one ever sees a card before the
protocol allows it.

Quick Start (local ledger, no network needed):
    from mental_poker import PokerRunner
    PokerRunner(config={"network": "local"}).run()

All three seats in one terminal:
    from mental_poker import HotSeatRunner
    HotSeatRunner(config={}).run()

Embedding the orchestrator:
    from mental_poker import build_dispatcher, Tick
    dispatcher = build_dispatcher(config)
    dispatcher.update(Tick())
    outcome = dispatcher.execute_pending_command()
"""

from .runner import HotSeatRunner, PokerRunner, build_dispatcher, parse_input
from ._core.dispatcher import CommandDispatcher
from ._core.messages import (
    Backspace,
    Call,
    CharInput,
    CommandFailed,
    CommandSucceeded,
    ConfirmGameId,
    FoldHand,
    Quit,
    Raise,
    SearchGames,
    Tick,
)
from ._core.model import GameModel, NetworkType, Screen
from ._core.phases import Phase, decode, describe
from ._ledger import Account, Ledger, LocalLedger, NetworkLedger
from .errors import (
    MentalPokerError,
    LedgerLookupError,
    LedgerCallError,
    SeatResolutionError,
    KeyCustodyError,
    CardTableError,
)

__all__ = [
    # Runners
    "PokerRunner",
    "HotSeatRunner",
    "build_dispatcher",
    "parse_input",
    # Orchestrator
    "CommandDispatcher",
    "GameModel",
    "NetworkType",
    "Screen",
    "Phase",
    "decode",
    "describe",
    # Messages
    "Backspace",
    "Call",
    "CharInput",
    "CommandFailed",
    "CommandSucceeded",
    "ConfirmGameId",
    "FoldHand",
    "Quit",
    "Raise",
    "SearchGames",
    "Tick",
    # Ledgers
    "Account",
    "Ledger",
    "LocalLedger",
    "NetworkLedger",
    # Errors
    "MentalPokerError",
    "LedgerLookupError",
    "LedgerCallError",
    "SeatResolutionError",
    "KeyCustodyError",
    "CardTableError",
]
__version__ = "0.1.0"
