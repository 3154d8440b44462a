# Area: Ledger
"""
mental_poker._ledger.cipher - Commutative encryption capability
===============================================================

The orchestrator never does cryptography itself; it is handed a cipher
that can strip or add one layer of commutative encryption on a card
point and that supplies (secret, inverse) pairs.

SraCipher is the in-process implementation used by the local ledger:
Pohlig-Hellman/SRA exponentiation modulo a Mersenne prime, where
applying a secret e and then its inverse d (e*d = 1 mod p-1) returns
the original point, in either order.
"""

from __future__ import annotations

import math
import secrets
from typing import Any, List, Protocol, Tuple

Point = Any
Scalar = Any

# 2**521 - 1 is prime
SRA_PRIME = (1 << 521) - 1
DECK_SIZE = 52


class CommutativeCipher(Protocol):
    """Capability used for local hand resolution and key generation."""

    def generate_secret(self) -> Tuple[Scalar, Scalar]:
        """Return a fresh (secret, secret_inverse) pair."""
        ...

    def apply(self, point: Point, scalar: Scalar) -> Point:
        """Multiply a card point by a scalar (add or strip one layer)."""
        ...


class SraCipher:
    """Commutative exponentiation cipher over GF(p)."""

    def __init__(self, prime: int = SRA_PRIME):
        self.prime = prime
        self._order = prime - 1

    def generate_secret(self) -> Tuple[int, int]:
        while True:
            secret = secrets.randbelow(self._order - 3) + 3
            if math.gcd(secret, self._order) == 1:
                return secret, pow(secret, -1, self._order)

    def apply(self, point: int, scalar: int) -> int:
        return pow(point, scalar, self.prime)

    def initial_deck(self) -> List[int]:
        # Card i is encoded as i + 2 so that no point is 0 or 1
        return [index + 2 for index in range(DECK_SIZE)]
