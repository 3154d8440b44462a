# Area: Core
"""
mental_poker._core.phases - Ledger phase decoder
================================================

Decodes the raw phase byte reported by the poker contract into a
semantic Phase and classifies it (betting or not, whose turn).

The contract walks through 37 phases in a fixed cyclic order:

    joins -> decrypt hands -> bet preflop -> decrypt flop -> bet flop
          -> decrypt turn -> bet turn -> decrypt river -> bet river
          -> showdown -> compare -> {new shuffle | reshuffle | claim}

Every phase except COMPARE belongs to exactly one seat. Everything
here is a pure lookup over a static table.
"""

from enum import Enum, IntEnum
from typing import Dict, Optional, Tuple


class Phase(IntEnum):
    """Protocol phases in canonical order. The value is the raw ledger byte."""
    WAITING_FOR_SEAT2 = 0
    WAITING_FOR_SEAT3 = 1
    DECRYPT_HANDS_P1 = 2
    DECRYPT_HANDS_P2 = 3
    DECRYPT_HANDS_P3 = 4
    BET_PREFLOP_P1 = 5
    BET_PREFLOP_P2 = 6
    BET_PREFLOP_P3 = 7
    DECRYPT_FLOP_P1 = 8
    DECRYPT_FLOP_P2 = 9
    DECRYPT_FLOP_P3 = 10
    BET_FLOP_P1 = 11
    BET_FLOP_P2 = 12
    BET_FLOP_P3 = 13
    DECRYPT_TURN_P1 = 14
    DECRYPT_TURN_P2 = 15
    DECRYPT_TURN_P3 = 16
    BET_TURN_P1 = 17
    BET_TURN_P2 = 18
    BET_TURN_P3 = 19
    DECRYPT_RIVER_P1 = 20
    DECRYPT_RIVER_P2 = 21
    DECRYPT_RIVER_P3 = 22
    BET_RIVER_P1 = 23
    BET_RIVER_P2 = 24
    BET_RIVER_P3 = 25
    SHOWDOWN_P1 = 26
    SHOWDOWN_P2 = 27
    SHOWDOWN_P3 = 28
    COMPARE = 29
    NEW_SHUFFLE_P1 = 30
    NEW_SHUFFLE_P2 = 31
    SHUFFLE_P2 = 32
    SHUFFLE_P3 = 33
    CLAIM_P1 = 34
    CLAIM_P2 = 35
    CLAIM_P3 = 36


class PhaseKind(Enum):
    """What the acting seat is expected to do in a phase."""
    JOIN = "join"
    DECRYPT_HANDS = "decrypt_hands"
    DECRYPT_FLOP = "decrypt_flop"
    DECRYPT_TURN = "decrypt_turn"
    DECRYPT_RIVER = "decrypt_river"
    SHOWDOWN = "showdown"
    BET = "bet"
    COMPARE = "compare"
    NEW_SHUFFLE = "new_shuffle"
    SHUFFLE = "shuffle"
    CLAIM = "claim"


class Street(Enum):
    """Betting rounds of a hand."""
    PREFLOP = "preflop"
    FLOP = "flop"
    TURN = "turn"
    RIVER = "river"


# {phase: (kind, acting seat, street)}
PHASE_TABLE: Dict[Phase, Tuple[PhaseKind, Optional[int], Optional[Street]]] = {
    Phase.WAITING_FOR_SEAT2: (PhaseKind.JOIN, 2, None),
    Phase.WAITING_FOR_SEAT3: (PhaseKind.JOIN, 3, None),
    Phase.DECRYPT_HANDS_P1: (PhaseKind.DECRYPT_HANDS, 1, None),
    Phase.DECRYPT_HANDS_P2: (PhaseKind.DECRYPT_HANDS, 2, None),
    Phase.DECRYPT_HANDS_P3: (PhaseKind.DECRYPT_HANDS, 3, None),
    Phase.BET_PREFLOP_P1: (PhaseKind.BET, 1, Street.PREFLOP),
    Phase.BET_PREFLOP_P2: (PhaseKind.BET, 2, Street.PREFLOP),
    Phase.BET_PREFLOP_P3: (PhaseKind.BET, 3, Street.PREFLOP),
    Phase.DECRYPT_FLOP_P1: (PhaseKind.DECRYPT_FLOP, 1, Street.FLOP),
    Phase.DECRYPT_FLOP_P2: (PhaseKind.DECRYPT_FLOP, 2, Street.FLOP),
    Phase.DECRYPT_FLOP_P3: (PhaseKind.DECRYPT_FLOP, 3, Street.FLOP),
    Phase.BET_FLOP_P1: (PhaseKind.BET, 1, Street.FLOP),
    Phase.BET_FLOP_P2: (PhaseKind.BET, 2, Street.FLOP),
    Phase.BET_FLOP_P3: (PhaseKind.BET, 3, Street.FLOP),
    Phase.DECRYPT_TURN_P1: (PhaseKind.DECRYPT_TURN, 1, Street.TURN),
    Phase.DECRYPT_TURN_P2: (PhaseKind.DECRYPT_TURN, 2, Street.TURN),
    Phase.DECRYPT_TURN_P3: (PhaseKind.DECRYPT_TURN, 3, Street.TURN),
    Phase.BET_TURN_P1: (PhaseKind.BET, 1, Street.TURN),
    Phase.BET_TURN_P2: (PhaseKind.BET, 2, Street.TURN),
    Phase.BET_TURN_P3: (PhaseKind.BET, 3, Street.TURN),
    Phase.DECRYPT_RIVER_P1: (PhaseKind.DECRYPT_RIVER, 1, Street.RIVER),
    Phase.DECRYPT_RIVER_P2: (PhaseKind.DECRYPT_RIVER, 2, Street.RIVER),
    Phase.DECRYPT_RIVER_P3: (PhaseKind.DECRYPT_RIVER, 3, Street.RIVER),
    Phase.BET_RIVER_P1: (PhaseKind.BET, 1, Street.RIVER),
    Phase.BET_RIVER_P2: (PhaseKind.BET, 2, Street.RIVER),
    Phase.BET_RIVER_P3: (PhaseKind.BET, 3, Street.RIVER),
    Phase.SHOWDOWN_P1: (PhaseKind.SHOWDOWN, 1, None),
    Phase.SHOWDOWN_P2: (PhaseKind.SHOWDOWN, 2, None),
    Phase.SHOWDOWN_P3: (PhaseKind.SHOWDOWN, 3, None),
    Phase.COMPARE: (PhaseKind.COMPARE, None, None),
    Phase.NEW_SHUFFLE_P1: (PhaseKind.NEW_SHUFFLE, 1, None),
    Phase.NEW_SHUFFLE_P2: (PhaseKind.NEW_SHUFFLE, 2, None),
    Phase.SHUFFLE_P2: (PhaseKind.SHUFFLE, 2, None),
    Phase.SHUFFLE_P3: (PhaseKind.SHUFFLE, 3, None),
    Phase.CLAIM_P1: (PhaseKind.CLAIM, 1, None),
    Phase.CLAIM_P2: (PhaseKind.CLAIM, 2, None),
    Phase.CLAIM_P3: (PhaseKind.CLAIM, 3, None),
}

_DESCRIPTIONS: Dict[PhaseKind, str] = {
    PhaseKind.DECRYPT_HANDS: "Player {seat} decrypting hands",
    PhaseKind.DECRYPT_FLOP: "Player {seat} decrypting flop",
    PhaseKind.DECRYPT_TURN: "Player {seat} decrypting turn",
    PhaseKind.DECRYPT_RIVER: "Player {seat} decrypting river",
    PhaseKind.SHOWDOWN: "Player {seat} revealing cards for showdown",
    PhaseKind.COMPARE: "Comparing hands",
    PhaseKind.NEW_SHUFFLE: "Player {seat} shuffling a new deck",
    PhaseKind.SHUFFLE: "Player {seat} reshuffling the deck",
    PhaseKind.CLAIM: "Player {seat} claiming the prize",
}


def decode(raw) -> Optional[Phase]:
    """
    Decode a raw ledger phase byte.

    Returns None for anything that is not a known phase; callers treat
    that as "no action this poll".
    """
    if isinstance(raw, bool) or not isinstance(raw, int):
        return None
    try:
        return Phase(raw)
    except ValueError:
        return None


def phase_kind(phase: Phase) -> PhaseKind:
    return PHASE_TABLE[phase][0]


def acting_seat(phase: Phase) -> Optional[int]:
    """Seat expected to act in this phase, None for COMPARE."""
    return PHASE_TABLE[phase][1]


def street_of(phase: Phase) -> Optional[Street]:
    return PHASE_TABLE[phase][2]


def is_betting(phase: Phase) -> bool:
    return phase_kind(phase) is PhaseKind.BET


def is_hand_over(phase: Phase) -> bool:
    """True from COMPARE until the next hand is dealt."""
    return phase >= Phase.COMPARE


def is_new_hand_phase(phase: Phase) -> bool:
    return phase_kind(phase) in (PhaseKind.NEW_SHUFFLE, PhaseKind.SHUFFLE)


def describe(raw) -> str:
    """Human-readable description of a raw phase value."""
    phase = decode(raw)
    if phase is None:
        return "Unknown state"
    kind, seat, street = PHASE_TABLE[phase]
    if kind is PhaseKind.JOIN:
        return f"Waiting for player {seat} to join"
    if kind is PhaseKind.BET:
        return f"Player {seat} betting ({street.value})"
    return _DESCRIPTIONS[kind].format(seat=seat)
