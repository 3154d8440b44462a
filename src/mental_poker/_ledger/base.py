# Area: Ledger
"""
mental_poker._ledger.base - Ledger interface and records
========================================================

The contract is the authority on game state. The orchestrator reads it
through the Ledger interface and submits transitions through it; two
backends implement it (LocalLedger, NetworkLedger) and one is chosen
when the session is built.

Records are pydantic models so both backends validate what they hand
to the orchestrator in one place.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .._core.cards import FACE_DOWN, CardView
from .._core.chips import ChipSnapshot

Point = Any
Keys = Any


@dataclass(frozen=True)
class Account:
    """A ledger account: public address plus the key that signs for it."""
    address: str
    private_key: str = ""


class PendingTx(BaseModel):
    """Handle for a submitted transition."""
    model_config = ConfigDict(frozen=True)

    tx_id: str
    confirmed: bool = False


class GameRecord(BaseModel):
    """Per-game header as stored by the contract."""
    model_config = ConfigDict(frozen=True)

    seat1: str
    seat2: str = ""
    seat3: str = ""
    phase: int
    buy_in: int = Field(ge=0)
    dealer: int = Field(default=0, ge=0, le=7)
    last_raise_size: int = Field(default=0, ge=0)
    big_blind: int = Field(ge=0)
    eliminated: int = Field(default=0, ge=0, le=7)
    folded: int = Field(default=0, ge=0, le=7)

    def seats(self) -> Tuple[str, str, str]:
        return (self.seat1, self.seat2, self.seat3)

    def seat_of(self, address: str) -> Optional[int]:
        for seat, seated in enumerate(self.seats(), start=1):
            if seated and seated == address:
                return seat
        return None

    def dealer_seat(self) -> Optional[int]:
        for seat in (1, 2, 3):
            if self.dealer & (1 << (seat - 1)):
                return seat
        return None


class EncryptedCards(BaseModel):
    """Card points as dealt; each still carries some encryption layers."""
    model_config = ConfigDict(frozen=True)

    seat1: List[Point] = Field(min_length=2, max_length=2)
    seat2: List[Point] = Field(min_length=2, max_length=2)
    seat3: List[Point] = Field(min_length=2, max_length=2)
    flop: List[Point] = Field(min_length=3, max_length=3)
    turn: Point
    river: Point

    def hand(self, seat: int) -> List[Point]:
        return [self.seat1, self.seat2, self.seat3][seat - 1]

    def other_hands(self, seat: int) -> List[Point]:
        """Hole points of the two other seats, lower seat first."""
        points: List[Point] = []
        for other in (1, 2, 3):
            if other != seat:
                points.extend(self.hand(other))
        return points


class RevealedCards(BaseModel):
    """Plaintext indices for cards the contract has revealed; 255 elsewhere."""
    model_config = ConfigDict(frozen=True)

    seat1: List[int] = Field(default=[FACE_DOWN, FACE_DOWN], min_length=2, max_length=2)
    seat2: List[int] = Field(default=[FACE_DOWN, FACE_DOWN], min_length=2, max_length=2)
    seat3: List[int] = Field(default=[FACE_DOWN, FACE_DOWN], min_length=2, max_length=2)
    flop: List[int] = Field(default=[FACE_DOWN] * 3, min_length=3, max_length=3)
    turn: int = FACE_DOWN
    river: int = FACE_DOWN

    def to_view(self) -> CardView:
        return CardView(
            flop=tuple(self.flop),
            turn=self.turn,
            river=self.river,
            seats=(tuple(self.seat1), tuple(self.seat2), tuple(self.seat3)),
        )


class ChipsRecord(BaseModel):
    """Stacks and current-hand bets per seat."""
    model_config = ConfigDict(frozen=True)

    stack1: int = Field(ge=0)
    stack2: int = Field(ge=0)
    stack3: int = Field(ge=0)
    bet1: int = Field(default=0, ge=0)
    bet2: int = Field(default=0, ge=0)
    bet3: int = Field(default=0, ge=0)

    def to_snapshot(self) -> ChipSnapshot:
        return ChipSnapshot(
            stacks=(self.stack1, self.stack2, self.stack3),
            bets=(self.bet1, self.bet2, self.bet3),
        )


class Ledger(ABC):
    """Operations the orchestrator needs from the poker contract."""

    # ── Reads ───────────────────────────────────────────────

    @abstractmethod
    def get_game(self, game_id: int) -> Optional[GameRecord]:
        ...

    @abstractmethod
    def get_cards(self, game_id: int) -> Optional[EncryptedCards]:
        ...

    @abstractmethod
    def get_revealed_cards(self, game_id: int) -> Optional[RevealedCards]:
        ...

    @abstractmethod
    def get_chips(self, game_id: int) -> Optional[ChipsRecord]:
        ...

    @abstractmethod
    def get_deck(self, game_id: int) -> Optional[List[Point]]:
        ...

    @abstractmethod
    def initialize_deck(self) -> List[Point]:
        """The unshuffled deck every game starts from."""
        ...

    # ── Deck transitions (return fresh Keys) ────────────────

    @abstractmethod
    def create_game(
        self, account: Account, game_id: int, deck: List[Point],
        secret: Any, secret_inv: Any, buy_in: int, big_blind: int,
    ) -> Tuple[Keys, PendingTx]:
        ...

    @abstractmethod
    def join_game(
        self, account: Account, game_id: int, deck: List[Point],
        shuffled: List[Point], secret: Any, secret_inv: Any,
    ) -> Tuple[Keys, PendingTx]:
        ...

    @abstractmethod
    def start_new_hand(
        self, account: Account, game_id: int, deck: List[Point],
        secret: Any, secret_inv: Any,
    ) -> Tuple[Keys, PendingTx]:
        ...

    @abstractmethod
    def reshuffle(
        self, account: Account, game_id: int, deck: List[Point],
        shuffled: List[Point], secret: Any, secret_inv: Any,
    ) -> Tuple[Keys, PendingTx]:
        ...

    # ── Decryption transitions (consume Keys, return the next Keys) ──

    @abstractmethod
    def decrypt_hands(
        self, account: Account, game_id: int, points: List[Point], keys: Keys,
    ) -> Tuple[Keys, PendingTx]:
        ...

    @abstractmethod
    def decrypt_flop(
        self, account: Account, game_id: int, points: List[Point], keys: Keys,
    ) -> Tuple[Keys, PendingTx]:
        ...

    @abstractmethod
    def decrypt_turn_or_river(
        self, account: Account, game_id: int, point: Point, keys: Keys,
    ) -> Tuple[Keys, PendingTx]:
        ...

    @abstractmethod
    def showdown(
        self, account: Account, game_id: int, points: List[Point], keys: Keys,
    ) -> Tuple[Keys, PendingTx]:
        ...

    # ── Chip transitions ────────────────────────────────────

    @abstractmethod
    def place_bet(self, account: Account, game_id: int, amount: int) -> PendingTx:
        ...

    @abstractmethod
    def fold(self, account: Account, game_id: int) -> PendingTx:
        ...

    @abstractmethod
    def compare_hands(self, account: Account, game_id: int) -> PendingTx:
        ...

    @abstractmethod
    def claim_prize(self, account: Account, game_id: int, amount: int) -> PendingTx:
        ...
