# Area: Core
"""
Core protocol orchestration for one player session.

This package handles:
- Phase decoding and the acting-seat table
- Card formatting and the card lookup table
- Decryption ordering, key custody and local hand resolution
- Chip reconciliation and elimination tracking
- The message/command dispatcher that drives all of the above

The dispatcher and command router import the ledger package, which in
turn imports the leaf modules here; import them from their modules.
"""

from .phases import Phase, PhaseKind, Street, decode, describe
from .cards import CardLookupTable, CardView, format_card
from .model import GameModel, LogBuffer, NetworkType, Screen

__all__ = [
    "Phase",
    "PhaseKind",
    "Street",
    "decode",
    "describe",
    "CardLookupTable",
    "CardView",
    "format_card",
    "GameModel",
    "LogBuffer",
    "NetworkType",
    "Screen",
]
