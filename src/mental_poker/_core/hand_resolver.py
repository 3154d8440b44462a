# Area: Core
"""
mental_poker._core.hand_resolver - Local hole-card resolution
=============================================================

Once every other seat has stripped its layer from our hole cards, the
only layer left is our own. Applying the secret inverse yields an
unshuffled deck point that the lookup table turns into a card index.
"""

import logging
from typing import Any, Optional, Sequence

from .cards import FACE_DOWN_HAND, CardLookupTable, Hand
from .phases import Phase

logger = logging.getLogger("mental_poker.core.hand_resolver")


class LocalHandResolver:
    """Resolves the local seat's hidden hand with the local secret inverse."""

    def __init__(self, cipher, lookup: CardLookupTable):
        self.cipher = cipher
        self.lookup = lookup

    @staticmethod
    def is_resolvable(phase: Optional[Phase]) -> bool:
        """True while the hand's hole cards carry only the owner's layer."""
        return phase is not None and Phase.BET_PREFLOP_P1 <= phase < Phase.NEW_SHUFFLE_P1

    @staticmethod
    def needs_resolution(cached: Optional[Hand]) -> bool:
        """False once a real pair is cached; the phase gate runs with the fresh poll."""
        return cached is None or tuple(cached) == FACE_DOWN_HAND

    def resolve(self, encrypted_hand: Sequence[Any], secret_inverse: Any) -> Hand:
        """Decrypt both hole points; a lookup miss leaves the face-down pair."""
        indices = tuple(
            self.lookup.index_of(self.cipher.apply(point, secret_inverse))
            for point in encrypted_hand
        )
        if FACE_DOWN_HAND[0] in indices:
            logger.debug("Hand not locally decryptable yet")
            return FACE_DOWN_HAND
        return indices
