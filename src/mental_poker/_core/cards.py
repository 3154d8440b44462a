# Area: Core
"""
mental_poker._core.cards - Card indices, formatting and point lookup
====================================================================

Cards travel as byte indices: 0-51 are real cards (suit = idx // 13,
rank = idx % 13), 255 is a face-down card and 52-254 are invalid.

The CardLookupTable maps the 52 unshuffled deck points back to their
index once every encryption layer has been stripped.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Optional, Tuple

from ..errors import CardTableError

FACE_DOWN = 255
DECK_SIZE = 52

SUITS = ("♠", "♣", "♥", "♦")
RANKS = (" 2", " 3", " 4", " 5", " 6", " 7", " 8", " 9", "10", " J", " Q", " K", " A")

# Short codes understood by treys: rank char + suit char
RANK_CODES = "23456789TJQKA"
SUIT_CODES = "schd"

Hand = Tuple[int, int]
FACE_DOWN_HAND: Hand = (FACE_DOWN, FACE_DOWN)


def is_valid_card(index: int) -> bool:
    return 0 <= index < DECK_SIZE


def card_suit(index: int) -> int:
    return index // 13


def card_rank(index: int) -> int:
    return index % 13


def format_card(index: int) -> str:
    """Plain-text card label: '♠ 2', '♦ A', '???' or 'Err:N'."""
    if index == FACE_DOWN:
        return "???"
    if not is_valid_card(index):
        return f"Err:{index}"
    return f"{SUITS[card_suit(index)]}{RANKS[card_rank(index)]}"


def card_code(index: int) -> str:
    """Two-character code such as 'As' or 'Td'."""
    if not is_valid_card(index):
        raise ValueError(f"Not a real card: {index}")
    return RANK_CODES[card_rank(index)] + SUIT_CODES[card_suit(index)]


def parse_card(text: str) -> int:
    """Parse labels like 'S9', 'HA', 'D10' into an index."""
    text = text.strip().replace(" ", "").upper()
    suit_offsets = {"S": 0, "C": 13, "H": 26, "D": 39}
    values = ["2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A"]
    if not text or text[0] not in suit_offsets or text[1:] not in values:
        raise ValueError(f"Invalid card: {text!r}")
    return suit_offsets[text[0]] + values.index(text[1:])


class CardLookupTable:
    """
    Immutable bijection from the 52 unshuffled deck points to 0-51.

    Built once per session from the ledger's initial deck.
    """

    def __init__(self, points: Iterable[Any]):
        points = list(points)
        table: Dict[Any, int] = {point: index for index, point in enumerate(points)}
        if len(points) != DECK_SIZE or len(table) != DECK_SIZE:
            raise CardTableError(
                f"Expected {DECK_SIZE} distinct deck points, got "
                f"{len(points)} points ({len(table)} distinct)"
            )
        self._table = table

    def __len__(self) -> int:
        return len(self._table)

    def index_of(self, point: Any) -> int:
        """Card index of a fully decrypted point, FACE_DOWN if unknown."""
        return self._table.get(point, FACE_DOWN)


@dataclass(frozen=True)
class CardView:
    """Plaintext card indices as the renderer sees them."""
    flop: Tuple[int, int, int] = (FACE_DOWN, FACE_DOWN, FACE_DOWN)
    turn: int = FACE_DOWN
    river: int = FACE_DOWN
    seats: Tuple[Hand, Hand, Hand] = field(
        default=(FACE_DOWN_HAND, FACE_DOWN_HAND, FACE_DOWN_HAND)
    )

    def hand(self, seat: int) -> Hand:
        return self.seats[seat - 1]

    def with_hand(self, seat: Optional[int], hand: Optional[Hand]) -> "CardView":
        """Overlay a locally decrypted hand on the seat's slot."""
        if seat is None or hand is None:
            return self
        seats = list(self.seats)
        seats[seat - 1] = tuple(hand)
        return replace(self, seats=tuple(seats))

    def community(self) -> Tuple[int, ...]:
        return self.flop + (self.turn, self.river)
