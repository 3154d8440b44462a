# Area: Core Tests
"""Tests for chip reconciliation and betting bounds."""

import pytest

from mental_poker._core.chips import (
    ChipLedgerTracker,
    ChipSnapshot,
    betting_bounds,
    diff_snapshots,
)
from mental_poker._core.phases import Phase


def snap(stacks, bets=(0, 0, 0)):
    return ChipSnapshot(stacks=tuple(stacks), bets=tuple(bets))


class TestChipSnapshot:
    """Tests for ChipSnapshot."""

    def test_pot_and_highest_bet(self):
        s = snap((990, 980, 950), (10, 20, 50))
        assert s.pot == 80
        assert s.highest_bet == 50
        assert s.holdings(1) == 1000

    def test_diff_is_holdings_based(self):
        before = snap((950, 980, 950), (50, 20, 50))
        after = snap((1070, 980, 950), (0, 0, 0))
        deltas = diff_snapshots(before, after)
        assert deltas == (70, -20, -50)
        assert sum(deltas) == 0


class TestBettingBounds:
    """Tests for call and raise sizing."""

    @pytest.mark.parametrize("seat", [1, 2, 3])
    def test_call_plus_bet_equals_highest(self, seat):
        tracker = ChipLedgerTracker()
        tracker.observe(snap((990, 980, 1000), (10, 20, 0)), Phase.BET_PREFLOP_P3)
        assert tracker.call_amount(seat) + tracker.current.bet(seat) == tracker.highest_bet()

    def test_min_raise_without_raise_uses_big_blind(self):
        tracker = ChipLedgerTracker()
        tracker.observe(snap((990, 980, 1000), (10, 20, 0)), Phase.BET_PREFLOP_P3)
        assert tracker.min_raise_to(0, 20) == 40
        assert tracker.min_raise_to(0, 20) >= tracker.highest_bet() + 20
        assert tracker.min_raise(3, 0, 20) == 40

    def test_min_raise_follows_last_raise(self):
        tracker = ChipLedgerTracker()
        tracker.observe(snap((990, 980, 950), (10, 20, 50)), Phase.BET_PREFLOP_P1)
        # seat 3 raised by 30; seat 1 must add 40 to call and 30 more to re-raise
        assert tracker.min_raise(1, 30, 20) == 70

    def test_clamp_raise(self):
        tracker = ChipLedgerTracker()
        tracker.observe(snap((990, 980, 100), (10, 20, 0)), Phase.BET_PREFLOP_P3)
        assert tracker.clamp_raise(3, 5, 0, 20) == 40
        assert tracker.clamp_raise(3, 60, 0, 20) == 60
        assert tracker.clamp_raise(3, 500, 0, 20) == 100

    def test_call_capped_at_stack(self):
        tracker = ChipLedgerTracker()
        tracker.observe(snap((15, 0, 900), (10, 20, 100)), Phase.BET_PREFLOP_P1)
        assert tracker.call_or_all_in(1) == 15

    def test_bounds_function_matches_tracker(self):
        s = snap((990, 980, 1000), (10, 20, 0))
        tracker = ChipLedgerTracker()
        tracker.observe(s, Phase.BET_PREFLOP_P3)
        assert tracker.bounds(3, 0, 20) == betting_bounds(s, 3, 0, 20)
        bounds = betting_bounds(s, 3, 0, 20)
        assert bounds.call_amount == 20
        assert bounds.can_raise

    def test_bounds_without_snapshot_raise(self):
        with pytest.raises(ValueError):
            ChipLedgerTracker().call_amount(1)


class TestRoundStart:
    """Tests for the street round-start snapshot."""

    def test_captured_on_first_betting_phase_of_street(self):
        tracker = ChipLedgerTracker()
        first = snap((990, 980, 1000), (10, 20, 0))
        tracker.observe(first, Phase.BET_PREFLOP_P3)
        tracker.observe(snap((990, 980, 950), (10, 20, 50)), Phase.BET_PREFLOP_P1)
        assert tracker.round_start == first
        assert tracker.street_contribution(3) == 50
        assert tracker.street_bets() == (0, 0, 50)

    def test_new_street_recaptures(self):
        tracker = ChipLedgerTracker()
        tracker.observe(snap((990, 980, 1000), (10, 20, 0)), Phase.BET_PREFLOP_P3)
        flop = snap((950, 980, 950), (50, 20, 50))
        tracker.observe(flop, Phase.BET_FLOP_P1)
        assert tracker.round_start == flop

    def test_cleared_when_hand_over(self):
        tracker = ChipLedgerTracker()
        tracker.observe(snap((990, 980, 1000), (10, 20, 0)), Phase.BET_PREFLOP_P3)
        tracker.observe(snap((990, 980, 1000), (10, 20, 0)), Phase.COMPARE)
        assert tracker.round_start is None
        assert tracker.street_bets() is None


class TestResolution:
    """Tests for hand delta recording."""

    def test_record_resolution_once_per_hand(self):
        tracker = ChipLedgerTracker()
        before = snap((950, 980, 950), (50, 20, 50))
        after = snap((1070, 980, 950))
        assert tracker.record_resolution(before, after) == (70, -20, -50)
        assert tracker.record_resolution(before, snap((0, 0, 0))) is None
        assert tracker.deltas == (70, -20, -50)

    def test_passive_inference_from_consecutive_polls(self):
        tracker = ChipLedgerTracker()
        at_compare = snap((950, 980, 950), (50, 20, 50))
        settled = snap((1070, 980, 950))

        tracker.observe(at_compare, Phase.COMPARE)
        assert tracker.observe_passive(at_compare, Phase.COMPARE) is None
        tracker.observe(settled, Phase.NEW_SHUFFLE_P1)
        assert tracker.observe_passive(settled, Phase.NEW_SHUFFLE_P1) == (70, -20, -50)
        assert tracker.resolved

    def test_passive_needs_a_change(self):
        tracker = ChipLedgerTracker()
        s = snap((1000, 1000, 1000))
        tracker.observe_passive(s, Phase.NEW_SHUFFLE_P1)
        assert tracker.observe_passive(s, Phase.NEW_SHUFFLE_P1) is None
        assert not tracker.resolved

    def test_betting_poll_is_not_a_baseline(self):
        tracker = ChipLedgerTracker()
        river = snap((950, 900, 900), (50, 100, 100))
        called = snap((950, 850, 850), (50, 150, 150))
        settled = snap((1300, 850, 850))

        assert tracker.observe_passive(river, Phase.BET_RIVER_P2) is None
        assert tracker.observe_passive(called, Phase.COMPARE) is None
        assert not tracker.resolved
        assert tracker.observe_passive(settled, Phase.NEW_SHUFFLE_P1) == (300, -150, -150)

    def test_bet_movement_is_not_a_result(self):
        tracker = ChipLedgerTracker()
        tracker.observe_passive(snap((950, 900, 900), (50, 100, 100)), Phase.SHOWDOWN_P2)
        moved = snap((1000, 1000, 1000))
        assert tracker.observe_passive(moved, Phase.COMPARE) is None
        assert not tracker.resolved

    def test_new_hand_rearms_resolution(self):
        tracker = ChipLedgerTracker()
        tracker.record_resolution(snap((1000, 1000, 1000)), snap((1010, 990, 1000)))
        tracker.observe(snap((1000, 970, 1000), (10, 20, 0)), Phase.DECRYPT_HANDS_P1)
        assert not tracker.resolved
