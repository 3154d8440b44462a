# Area: Core
"""
mental_poker._core.chips - Chip ledger reconciliation
=====================================================

Tracks the last chip snapshot read from the ledger, the snapshot taken
when the current street's betting opened, and the per-seat result of
the last hand. Everything computed here is for display and for sizing
the local player's bets; the contract remains the authority.

Betting bounds:
    call_amount(seat) = highest_bet - bet(seat)
    min_raise_to      = highest_bet + (last_raise_size or big_blind)
    min_raise(seat)   = min_raise_to - bet(seat)
    a raise is clamped to [min_raise, stack] (all-in ceiling)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from .phases import Phase, Street, is_betting, is_hand_over, street_of

logger = logging.getLogger("mental_poker.core.chips")

Deltas = Tuple[int, int, int]


@dataclass(frozen=True)
class ChipSnapshot:
    """Per-seat stacks and bets for the current hand."""
    stacks: Tuple[int, int, int]
    bets: Tuple[int, int, int] = (0, 0, 0)

    @property
    def pot(self) -> int:
        return sum(self.bets)

    @property
    def highest_bet(self) -> int:
        return max(self.bets)

    def stack(self, seat: int) -> int:
        return self.stacks[seat - 1]

    def bet(self, seat: int) -> int:
        return self.bets[seat - 1]

    def holdings(self, seat: int) -> int:
        """Chips the seat owns or has committed this hand."""
        return self.stack(seat) + self.bet(seat)


def _holdings(snapshot: ChipSnapshot) -> Tuple[int, int, int]:
    return tuple(snapshot.holdings(seat) for seat in (1, 2, 3))


def diff_snapshots(before: ChipSnapshot, after: ChipSnapshot) -> Deltas:
    """Signed per-seat change in holdings between two snapshots."""
    return tuple(after.holdings(seat) - before.holdings(seat) for seat in (1, 2, 3))


@dataclass(frozen=True)
class BettingBounds:
    """What the acting seat may do right now."""
    call_amount: int
    min_raise: int
    max_raise: int

    @property
    def can_raise(self) -> bool:
        return self.max_raise >= self.min_raise


def betting_bounds(snapshot: ChipSnapshot, seat: int, last_raise_size: int, big_blind: int) -> BettingBounds:
    stack = snapshot.stack(seat)
    increment = last_raise_size if last_raise_size > 0 else big_blind
    min_raise = snapshot.highest_bet + increment - snapshot.bet(seat)
    return BettingBounds(
        call_amount=min(snapshot.highest_bet - snapshot.bet(seat), stack),
        min_raise=min(min_raise, stack),
        max_raise=stack,
    )


class ChipLedgerTracker:
    """
    Keeps chip snapshots and derives betting bounds and hand deltas.

    Attributes:
        current: Last snapshot observed from the ledger
        round_start: Snapshot at the first betting sub-phase of the street
        deltas: Display-only per-seat result of the last resolved hand
    """

    def __init__(self) -> None:
        self.current: Optional[ChipSnapshot] = None
        self.round_start: Optional[ChipSnapshot] = None
        self.deltas: Optional[Deltas] = None
        self._round_street: Optional[Street] = None
        self._passive_base: Optional[ChipSnapshot] = None
        self._resolved = False

    # ── Observation ─────────────────────────────────────────

    def observe(self, snapshot: ChipSnapshot, phase: Optional[Phase]) -> None:
        """Record a polled snapshot and manage the round-start snapshot."""
        self.current = snapshot
        if phase is None:
            return
        if is_hand_over(phase):
            self.round_start = None
            self._round_street = None
            return
        if is_betting(phase):
            street = street_of(phase)
            if self._round_street is not street:
                self.round_start = snapshot
                self._round_street = street
                logger.debug("Round start captured for %s: %s", street.value, snapshot)
        if phase < Phase.COMPARE and self._resolved:
            # A new hand is under way
            self._resolved = False
            self._passive_base = None

    def observe_passive(self, snapshot: ChipSnapshot, phase: Optional[Phase]) -> Optional[Deltas]:
        """
        Infer the hand result without invoking compare (non-dealer seats).

        The baseline is a snapshot polled once betting is closed (showdown
        or later). Once the hand is over, the first change in per-seat
        holdings against that baseline is the resolution. Returns the
        deltas when they are produced by this call.
        """
        if phase is None or self._resolved:
            return None
        if phase < Phase.SHOWDOWN_P1:
            # Bets still move between stack and bet; no usable baseline
            self._passive_base = None
            return None
        base = self._passive_base
        if base is None or _holdings(base) == _holdings(snapshot):
            self._passive_base = snapshot
            return None
        if not is_hand_over(phase):
            return None
        return self.record_resolution(base, snapshot)

    def record_resolution(self, before: ChipSnapshot, after: ChipSnapshot) -> Optional[Deltas]:
        """Compute the hand's deltas once; later calls in the same hand are ignored."""
        if self._resolved:
            return None
        self.deltas = diff_snapshots(before, after)
        self._resolved = True
        self.current = after
        logger.info("Hand resolved, chip deltas: %s", self.deltas)
        return self.deltas

    @property
    def resolved(self) -> bool:
        return self._resolved

    # ── Betting bounds ──────────────────────────────────────

    def _require_current(self) -> ChipSnapshot:
        if self.current is None:
            raise ValueError("No chip snapshot observed yet")
        return self.current

    def highest_bet(self) -> int:
        return self._require_current().highest_bet

    def call_amount(self, seat: int) -> int:
        snapshot = self._require_current()
        return snapshot.highest_bet - snapshot.bet(seat)

    def min_raise_to(self, last_raise_size: int, big_blind: int) -> int:
        increment = last_raise_size if last_raise_size > 0 else big_blind
        return self.highest_bet() + increment

    def min_raise(self, seat: int, last_raise_size: int, big_blind: int) -> int:
        return self.min_raise_to(last_raise_size, big_blind) - self._require_current().bet(seat)

    def clamp_raise(self, seat: int, amount: int, last_raise_size: int, big_blind: int) -> int:
        """Clamp a raise amount (chips added now) to [min_raise, stack]."""
        stack = self._require_current().stack(seat)
        low = self.min_raise(seat, last_raise_size, big_blind)
        return min(max(amount, low), stack)

    def call_or_all_in(self, seat: int) -> int:
        """Chips needed to call, capped at the seat's stack."""
        return min(self.call_amount(seat), self._require_current().stack(seat))

    def bounds(self, seat: int, last_raise_size: int, big_blind: int) -> BettingBounds:
        return betting_bounds(self._require_current(), seat, last_raise_size, big_blind)

    def street_contribution(self, seat: int) -> int:
        """Chips the seat has put in since this street's betting opened."""
        if self.current is None or self.round_start is None:
            return 0
        return self.current.bet(seat) - self.round_start.bet(seat)

    def street_bets(self) -> Optional[Deltas]:
        """Per-seat street contributions; None until betting opens and after the hand."""
        if self.round_start is None:
            return None
        return tuple(self.street_contribution(seat) for seat in (1, 2, 3))
