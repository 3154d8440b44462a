# Area: Core Tests
"""Tests for elimination bitmap decoding and winner detection."""

import pytest

from mental_poker._core.elimination import EliminationTracker, decode_bitmap


class TestDecodeBitmap:
    """Tests for decode_bitmap()."""

    @pytest.mark.parametrize("bits,flags", [
        (0b000, (False, False, False)),
        (0b001, (True, False, False)),
        (0b010, (False, True, False)),
        (0b110, (False, True, True)),
    ])
    def test_bit_i_is_seat_i_plus_one(self, bits, flags):
        assert decode_bitmap(bits) == flags


class TestEliminationTracker:
    """Tests for EliminationTracker."""

    def test_no_winner_while_two_remain(self):
        tracker = EliminationTracker()
        assert tracker.observe(0b001) is None
        assert tracker.is_eliminated(1)
        assert not tracker.is_eliminated(2)

    def test_last_seat_standing_wins(self):
        tracker = EliminationTracker()
        assert tracker.observe(0b011) == 3

    def test_winner_is_stable(self):
        tracker = EliminationTracker()
        tracker.observe(0b011)
        assert tracker.observe(0b000) == 3
        assert tracker.observe(0b101) == 3
        assert tracker.winner == 3
