# Area: Core
"""
mental_poker._core.model - Session state
========================================

GameModel is the single mutable aggregate of a client session: the
screen and text inputs, what was last read from the ledger, the local
caches (decrypted hand, chip deltas) and the in-game log.

The renderer reads it once per frame and never writes to it.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Iterator, List, Optional, Tuple

from .cards import CardView, Hand
from .chips import ChipSnapshot
from .phases import Phase

session_logger = logging.getLogger("mental_poker.session")

LOG_CAPACITY = 100
PENDING_MARK = "⏳ "
DONE_MARK = "✓ "


class Screen(Enum):
    GAME_ID_INPUT = "game_id_input"
    IN_GAME = "in_game"


class NetworkType(Enum):
    """Backend flavour; decides the polling cadence."""
    LOCAL = "local"
    TESTNET = "testnet"
    MAINNET = "mainnet"

    @property
    def poll_interval(self) -> float:
        return DEFAULT_POLL_INTERVALS[self]

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


DEFAULT_POLL_INTERVALS = {
    NetworkType.LOCAL: 0.5,
    NetworkType.TESTNET: 5.0,
    NetworkType.MAINNET: 10.0,
}


class LogBuffer:
    """Bounded FIFO of session log lines with start/complete markers."""

    def __init__(self, capacity: int = LOG_CAPACITY):
        self._lines: Deque[str] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

    def log(self, message: str) -> None:
        self._lines.append(message)
        session_logger.info(message)

    def action_start(self, message: str) -> None:
        self._lines.append(PENDING_MARK + message)
        session_logger.info("%s...", message)

    def action_complete(self) -> None:
        """Flip the last entry from pending to done, if it is pending."""
        if self._lines and self._lines[-1].startswith(PENDING_MARK):
            line = self._lines.pop()
            self._lines.append(DONE_MARK + line[len(PENDING_MARK):])
            session_logger.info("%s done", line[len(PENDING_MARK):])

    def tail(self, count: int) -> List[str]:
        return list(self._lines)[-count:]


@dataclass
class GameModel:
    """Aggregate mutable state of one player session."""
    network_type: NetworkType = NetworkType.LOCAL
    poll_interval: Optional[float] = None
    screen: Screen = Screen.GAME_ID_INPUT
    game_id_input: str = ""
    game_id: Optional[int] = None
    game_initialized: bool = False
    spectating: bool = False
    should_quit: bool = False

    local_seat: Optional[int] = None
    current_phase: Optional[Phase] = None
    raw_phase: Optional[int] = None
    phase_changed: bool = False
    last_poll_time: Optional[float] = None

    decrypted_hand: Optional[Hand] = None
    cards: Optional[CardView] = None
    chips: Optional[ChipSnapshot] = None
    chip_deltas: Optional[Tuple[int, int, int]] = None
    street_bets: Optional[Tuple[int, int, int]] = None
    last_raise_size: int = 0
    big_blind: int = 0
    dealer_seat: Optional[int] = None
    folded: Tuple[bool, bool, bool] = (False, False, False)
    eliminated: Tuple[bool, bool, bool] = (False, False, False)
    winner: Optional[int] = None

    logs: LogBuffer = field(default_factory=LogBuffer)

    def __post_init__(self) -> None:
        self.log(f"Starting poker with {self.network_type.display_name}")

    # ── Logging ─────────────────────────────────────────────

    def log(self, message: str) -> None:
        self.logs.log(message)

    def log_action_start(self, message: str) -> None:
        self.logs.action_start(message)

    def log_action_complete(self) -> None:
        self.logs.action_complete()

    # ── Polling cadence ─────────────────────────────────────

    @property
    def effective_poll_interval(self) -> float:
        if self.poll_interval is not None:
            return self.poll_interval
        return self.network_type.poll_interval

    def should_poll(self, now: float) -> bool:
        if not self.game_initialized or self.game_id is None:
            return False
        if self.last_poll_time is None:
            return True
        return now - self.last_poll_time >= self.effective_poll_interval

    # ── Winner ──────────────────────────────────────────────

    def set_winner(self, seat: int) -> bool:
        """Set the winner once; returns True only on the first assignment."""
        if self.winner is not None:
            return False
        self.winner = seat
        return True

    def set_local_seat(self, seat: int) -> None:
        if self.local_seat is not None and self.local_seat != seat:
            raise ValueError(
                f"Local seat already resolved to {self.local_seat}, refusing {seat}"
            )
        self.local_seat = seat
