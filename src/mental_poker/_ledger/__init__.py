# Area: Ledger
"""
Ledger backends for the mental poker client.

This package contains:
- The Ledger interface and its pydantic record models
- LocalLedger, an in-process contract simulation
- NetworkLedger, a node + prover backed implementation
- The commutative cipher capability
"""

from .base import (
    Account,
    ChipsRecord,
    EncryptedCards,
    GameRecord,
    Ledger,
    PendingTx,
    RevealedCards,
)
from .cipher import CommutativeCipher, SraCipher
from .local import LocalKeys, LocalLedger
from .network import NetworkLedger, ProverClient, RemoteCipher, parse_literal

__all__ = [
    "Account",
    "ChipsRecord",
    "EncryptedCards",
    "GameRecord",
    "Ledger",
    "PendingTx",
    "RevealedCards",
    "CommutativeCipher",
    "SraCipher",
    "LocalKeys",
    "LocalLedger",
    "NetworkLedger",
    "ProverClient",
    "RemoteCipher",
    "parse_literal",
]
