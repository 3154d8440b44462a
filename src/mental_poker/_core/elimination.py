# Area: Core
"""
mental_poker._core.elimination - Elimination and winner detection
=================================================================

The ledger reports eliminated seats as a 3-bit bitmap (bit i set means
seat i+1 is out). When exactly one seat remains it is the winner, and
that decision is final for the session.
"""

import logging
from typing import Optional, Tuple

logger = logging.getLogger("mental_poker.core.elimination")

Flags = Tuple[bool, bool, bool]


def decode_bitmap(bits: int) -> Flags:
    return tuple(bool(bits & (1 << index)) for index in range(3))


class EliminationTracker:
    """Decodes elimination bitmaps and fixes the winner once."""

    def __init__(self) -> None:
        self.eliminated: Flags = (False, False, False)
        self.winner: Optional[int] = None

    def observe(self, bits: int) -> Optional[int]:
        """Record a bitmap; returns the winner (possibly decided earlier)."""
        self.eliminated = decode_bitmap(bits)
        if self.winner is not None:
            return self.winner
        remaining = [seat for seat, out in enumerate(self.eliminated, start=1) if not out]
        if len(remaining) == 1:
            self.winner = remaining[0]
            logger.info("Seat %d is the last player standing", self.winner)
        return self.winner

    def is_eliminated(self, seat: int) -> bool:
        return self.eliminated[seat - 1]
