# Area: Core
"""
mental_poker._core.decryption - Per-seat decryption pipeline
============================================================

Each seat strips its shuffling layer from the cards in a fixed order:

    HANDS -> FLOP -> TURN -> RIVER -> SHOWDOWN

A stage runs only when the ledger phase is exactly the seat's trigger
phase for it, and at most once per entry into that phase. A step that
fails is not recorded, so the next poll in the same phase retries it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

from .phases import Phase

if TYPE_CHECKING:
    from .._ledger.base import Account, EncryptedCards, Ledger, PendingTx

logger = logging.getLogger("mental_poker.core.decryption")


class DecryptStage(Enum):
    HANDS = "hands"
    FLOP = "flop"
    TURN = "turn"
    RIVER = "river"
    SHOWDOWN = "showdown"


STAGE_ORDER = (
    DecryptStage.HANDS,
    DecryptStage.FLOP,
    DecryptStage.TURN,
    DecryptStage.RIVER,
    DecryptStage.SHOWDOWN,
)

# {stage: (trigger for seat 1, seat 2, seat 3)}
TRIGGERS: Dict[DecryptStage, Tuple[Phase, Phase, Phase]] = {
    DecryptStage.HANDS: (Phase.DECRYPT_HANDS_P1, Phase.DECRYPT_HANDS_P2, Phase.DECRYPT_HANDS_P3),
    DecryptStage.FLOP: (Phase.DECRYPT_FLOP_P1, Phase.DECRYPT_FLOP_P2, Phase.DECRYPT_FLOP_P3),
    DecryptStage.TURN: (Phase.DECRYPT_TURN_P1, Phase.DECRYPT_TURN_P2, Phase.DECRYPT_TURN_P3),
    DecryptStage.RIVER: (Phase.DECRYPT_RIVER_P1, Phase.DECRYPT_RIVER_P2, Phase.DECRYPT_RIVER_P3),
    DecryptStage.SHOWDOWN: (Phase.SHOWDOWN_P1, Phase.SHOWDOWN_P2, Phase.SHOWDOWN_P3),
}

STAGE_LABELS = {
    DecryptStage.HANDS: "Decrypting hand cards",
    DecryptStage.FLOP: "Decrypting flop",
    DecryptStage.TURN: "Decrypting turn",
    DecryptStage.RIVER: "Decrypting river",
    DecryptStage.SHOWDOWN: "Revealing cards for showdown",
}


def trigger_phase(stage: DecryptStage, seat: int) -> Phase:
    return TRIGGERS[stage][seat - 1]


def stage_for(seat: int, phase: Phase) -> Optional[DecryptStage]:
    """The stage this seat must run in this phase, if any."""
    for stage in STAGE_ORDER:
        if trigger_phase(stage, seat) == phase:
            return stage
    return None


@dataclass(frozen=True)
class DecryptStep:
    """One submission: which stage, in which phase, on which points."""
    stage: DecryptStage
    phase: Phase
    points: Tuple[Any, ...]

    @property
    def label(self) -> str:
        return STAGE_LABELS[self.stage]


def select_points(stage: DecryptStage, seat: int, cards: "EncryptedCards") -> Tuple[Any, ...]:
    if stage is DecryptStage.HANDS:
        return tuple(cards.other_hands(seat))
    if stage is DecryptStage.FLOP:
        return tuple(cards.flop)
    if stage is DecryptStage.TURN:
        return (cards.turn,)
    if stage is DecryptStage.RIVER:
        return (cards.river,)
    return tuple(cards.hand(seat))


class DecryptionPipeline:
    """
    Decides when the local seat submits its next decryption step.

    Attributes:
        seat: The local seat (1-3)
        completed_phase: Phase whose step already succeeded, cleared on phase change
    """

    def __init__(self, seat: int):
        self.seat = seat
        self.completed_phase: Optional[Phase] = None

    def on_phase(self, phase: Optional[Phase], changed: bool) -> None:
        """Forget the completed step once the ledger has moved on."""
        if changed and phase != self.completed_phase:
            self.completed_phase = None

    def plan(
        self,
        phase: Optional[Phase],
        cards: Optional["EncryptedCards"],
        keys_present: bool,
    ) -> Optional[DecryptStep]:
        """Return the step to submit now, or None."""
        if phase is None or cards is None or not keys_present:
            return None
        stage = stage_for(self.seat, phase)
        if stage is None or self.completed_phase == phase:
            return None
        return DecryptStep(stage=stage, phase=phase, points=select_points(stage, self.seat, cards))

    def mark_done(self, step: DecryptStep) -> None:
        self.completed_phase = step.phase
        logger.debug("Seat %d completed %s in phase %d", self.seat, step.stage.value, step.phase)


def submit(
    ledger: "Ledger",
    account: "Account",
    game_id: int,
    step: DecryptStep,
    keys: Any,
) -> Tuple[Any, "PendingTx"]:
    """Hand the keys and points to the matching ledger transition."""
    points = list(step.points)
    if step.stage is DecryptStage.HANDS:
        return ledger.decrypt_hands(account, game_id, points, keys)
    if step.stage is DecryptStage.FLOP:
        return ledger.decrypt_flop(account, game_id, points, keys)
    if step.stage in (DecryptStage.TURN, DecryptStage.RIVER):
        return ledger.decrypt_turn_or_river(account, game_id, points[0], keys)
    return ledger.showdown(account, game_id, points, keys)
