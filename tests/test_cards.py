# Area: Core Tests
"""Tests for card formatting, parsing and the lookup table."""

import pytest

from mental_poker._core.cards import (
    FACE_DOWN,
    FACE_DOWN_HAND,
    CardLookupTable,
    CardView,
    card_code,
    format_card,
    parse_card,
)
from mental_poker._ledger.cipher import SraCipher
from mental_poker.errors import CardTableError


class TestFormatCard:
    """Tests for format_card()."""

    def test_first_and_last_of_each_suit(self):
        assert format_card(0) == "♠ 2"
        assert format_card(12) == "♠ A"
        assert format_card(13) == "♣ 2"
        assert format_card(26) == "♥ 2"
        assert format_card(51) == "♦ A"

    def test_ten_is_two_characters(self):
        assert format_card(8) == "♠10"

    def test_face_down(self):
        assert format_card(FACE_DOWN) == "???"

    @pytest.mark.parametrize("index", [52, 100, 254])
    def test_invalid_index(self, index):
        assert format_card(index) == f"Err:{index}"


class TestCardCodes:
    """Tests for treys codes and label parsing."""

    def test_card_code(self):
        assert card_code(12) == "As"
        assert card_code(8 + 13) == "Tc"
        assert card_code(26 + 11) == "Kh"
        assert card_code(39) == "2d"

    def test_card_code_rejects_face_down(self):
        with pytest.raises(ValueError):
            card_code(FACE_DOWN)

    def test_parse_card(self):
        assert parse_card("S9") == 7
        assert parse_card("HA") == 38
        assert parse_card("D10") == 47

    def test_parse_card_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_card("X5")


class TestCardLookupTable:
    """Tests for CardLookupTable."""

    def test_round_trip_over_encryption(self):
        """Encrypt then strip the layer: every point maps back to its index."""
        cipher = SraCipher()
        deck = cipher.initial_deck()
        table = CardLookupTable(deck)
        secret, inverse = cipher.generate_secret()

        for index, point in enumerate(deck):
            encrypted = cipher.apply(point, secret)
            assert table.index_of(encrypted) == FACE_DOWN
            assert table.index_of(cipher.apply(encrypted, inverse)) == index

    def test_requires_52_points(self):
        with pytest.raises(CardTableError):
            CardLookupTable(range(51))

    def test_requires_distinct_points(self):
        with pytest.raises(CardTableError):
            CardLookupTable([1] + list(range(1, 52)))

    def test_size(self):
        assert len(CardLookupTable(range(52))) == 52


class TestCardView:
    """Tests for CardView."""

    def test_defaults_are_face_down(self):
        view = CardView()
        assert view.community() == (FACE_DOWN,) * 5
        assert view.hand(2) == FACE_DOWN_HAND

    def test_with_hand_overlays_one_seat(self):
        view = CardView().with_hand(3, (10, 11))
        assert view.hand(3) == (10, 11)
        assert view.hand(1) == FACE_DOWN_HAND

    def test_with_hand_none_is_identity(self):
        view = CardView()
        assert view.with_hand(None, (1, 2)) is view
        assert view.with_hand(1, None) is view
