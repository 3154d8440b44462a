# Area: Core Tests
"""Tests for phase decoding and the acting-seat table."""

import pytest

from mental_poker._core.phases import (
    PHASE_TABLE,
    Phase,
    PhaseKind,
    Street,
    acting_seat,
    decode,
    describe,
    is_betting,
    is_hand_over,
    is_new_hand_phase,
    phase_kind,
    street_of,
)


class TestDecode:
    """Tests for decode()."""

    @pytest.mark.parametrize("raw", range(37))
    def test_known_values_decode(self, raw):
        phase = decode(raw)
        assert phase is not None
        assert int(phase) == raw

    @pytest.mark.parametrize("raw", [37, 38, 100, 255, -1])
    def test_unknown_values_decode_to_none(self, raw):
        assert decode(raw) is None

    def test_non_integers_decode_to_none(self):
        assert decode("5") is None
        assert decode(None) is None
        assert decode(5.0) is None
        assert decode(True) is None

    def test_every_phase_has_a_table_entry(self):
        assert set(PHASE_TABLE) == set(Phase)


class TestActingSeat:
    """Tests for the acting seat of each phase."""

    def test_join_phases(self):
        assert acting_seat(Phase.WAITING_FOR_SEAT2) == 2
        assert acting_seat(Phase.WAITING_FOR_SEAT3) == 3

    @pytest.mark.parametrize("base", [2, 5, 8, 11, 14, 17, 20, 23, 26])
    def test_per_seat_triples(self, base):
        assert [acting_seat(Phase(base + i)) for i in range(3)] == [1, 2, 3]

    def test_compare_has_no_acting_seat(self):
        assert acting_seat(Phase.COMPARE) is None

    def test_shuffle_and_claim_seats(self):
        assert acting_seat(Phase.NEW_SHUFFLE_P1) == 1
        assert acting_seat(Phase.NEW_SHUFFLE_P2) == 2
        assert acting_seat(Phase.SHUFFLE_P2) == 2
        assert acting_seat(Phase.SHUFFLE_P3) == 3
        assert [acting_seat(Phase(34 + i)) for i in range(3)] == [1, 2, 3]


class TestPhaseClassification:
    """Tests for kind, street and hand-boundary helpers."""

    def test_betting_phases(self):
        betting = [p for p in Phase if is_betting(p)]
        assert [int(p) for p in betting] == [5, 6, 7, 11, 12, 13, 17, 18, 19, 23, 24, 25]

    def test_streets(self):
        assert street_of(Phase.BET_PREFLOP_P2) is Street.PREFLOP
        assert street_of(Phase.BET_FLOP_P1) is Street.FLOP
        assert street_of(Phase.BET_TURN_P3) is Street.TURN
        assert street_of(Phase.BET_RIVER_P1) is Street.RIVER
        assert street_of(Phase.DECRYPT_HANDS_P1) is None

    def test_hand_over_from_compare(self):
        assert not is_hand_over(Phase.SHOWDOWN_P3)
        assert is_hand_over(Phase.COMPARE)
        assert is_hand_over(Phase.CLAIM_P3)

    def test_new_hand_phases(self):
        assert [int(p) for p in Phase if is_new_hand_phase(p)] == [30, 31, 32, 33]

    def test_kinds(self):
        assert phase_kind(Phase.DECRYPT_RIVER_P2) is PhaseKind.DECRYPT_RIVER
        assert phase_kind(Phase.SHOWDOWN_P1) is PhaseKind.SHOWDOWN
        assert phase_kind(Phase.CLAIM_P2) is PhaseKind.CLAIM


class TestDescribe:
    """Tests for human-readable phase descriptions."""

    def test_waiting(self):
        assert describe(0) == "Waiting for player 2 to join"

    def test_betting(self):
        assert describe(12) == "Player 2 betting (flop)"

    def test_compare(self):
        assert describe(29) == "Comparing hands"

    def test_unknown(self):
        assert describe(37) == "Unknown state"
