# Area: Core
"""
mental_poker._core.messages - Messages and commands
===================================================

Messages flow into CommandDispatcher.update(). Commands are the only
work that may block; update() parks at most one of them and
execute_pending_command() runs it, turning the outcome into a
CommandSucceeded or CommandFailed message that re-enters update().

Commands that move secret material carry it in their `keys` field, so
a failure message hands the material back with the command.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, Tuple

from .cards import Hand
from .decryption import DecryptStep


# ══════════════════════════════════════════════════════════════
# INPUT MESSAGES
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CharInput:
    char: str


@dataclass(frozen=True)
class Backspace:
    pass


@dataclass(frozen=True)
class ConfirmGameId:
    pass


@dataclass(frozen=True)
class SearchGames:
    """Scan ledger ids for an open game or one we already sit in."""
    pass


@dataclass(frozen=True)
class Call:
    """Check or call the current bet."""
    pass


@dataclass(frozen=True)
class Raise:
    amount: int


@dataclass(frozen=True)
class FoldHand:
    pass


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class Tick:
    pass


# ══════════════════════════════════════════════════════════════
# COMMANDS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Command:
    game_id: int

    @property
    def name(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class InitializeGame(Command):
    buy_in: int = 0
    big_blind: int = 0


@dataclass(frozen=True)
class JoinGame(Command):
    seat: int = 0


@dataclass(frozen=True)
class SearchGame(Command):
    """Look up `candidates`; game_id is the first candidate."""
    candidates: Tuple[int, ...] = ()


@dataclass(frozen=True)
class PollState(Command):
    """Read game, cards and chips; resolve the hand when `resolve_with` is set."""
    resolve_with: Any = None


@dataclass(frozen=True)
class PlaceBet(Command):
    amount: int = 0


@dataclass(frozen=True)
class Fold(Command):
    pass


@dataclass(frozen=True)
class CompareHands(Command):
    pass


@dataclass(frozen=True)
class StartNewHand(Command):
    """Fresh deck (NEW_SHUFFLE) or reshuffle of the current deck (SHUFFLE)."""
    reshuffle: bool = False
    phase: Any = None


@dataclass(frozen=True)
class DecryptCards(Command):
    step: Optional[DecryptStep] = None
    keys: Any = field(default=None, repr=False)


@dataclass(frozen=True)
class ClaimPrize(Command):
    amount: int = 0
    phase: Any = None


# ══════════════════════════════════════════════════════════════
# COMMAND RESULTS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PolledState:
    """Everything one poll read from the ledger."""
    game: Any
    cards: Any = None
    revealed: Any = None
    chips: Any = None
    resolved_hand: Optional[Hand] = None


@dataclass(frozen=True)
class SearchResult:
    game_id: int
    game: Any = None


@dataclass(frozen=True)
class SeatedResult:
    """Create/join/new-hand outcome: fresh keys and the hand secret."""
    keys: Any = field(repr=False)
    secret: Any = field(repr=False)
    game: Any = None


@dataclass(frozen=True)
class DecryptResult:
    keys: Any = field(repr=False)


@dataclass(frozen=True)
class CompareResult:
    before: Any
    after: Any


@dataclass(frozen=True)
class CommandSucceeded:
    command: Command
    result: Any = None


@dataclass(frozen=True)
class CommandFailed:
    command: Command
    error: str
    detail: Optional[Sequence[str]] = None
