# Area: Shared Tests
"""Tests for table_display rendering."""

import re

from mental_poker._core.cards import FACE_DOWN, CardView, parse_card
from mental_poker._core.chips import ChipSnapshot
from mental_poker._core.model import GameModel, Screen
from mental_poker._core.phases import Phase
from mental_poker._shared.table_display import (
    LOG_TAIL,
    color_card,
    render_in_game,
    render_table,
)

ANSI = re.compile(r"\033\[[0-9;]*[A-Za-z]")


def plain(text):
    return ANSI.sub("", text)


def seated_model(phase=Phase.BET_PREFLOP_P3, seat=3):
    model = GameModel()
    model.screen = Screen.IN_GAME
    model.game_id = 7
    model.game_initialized = True
    model.set_local_seat(seat)
    model.raw_phase = int(phase)
    model.current_phase = phase
    model.dealer_seat = 3
    model.big_blind = 20
    model.last_raise_size = 20
    model.chips = ChipSnapshot(stacks=(990, 980, 1000), bets=(10, 20, 0))
    return model


class TestColorCard:
    """Tests for color_card()."""

    def test_face_down(self):
        assert plain(color_card(FACE_DOWN)) == "???"

    def test_invalid(self):
        assert plain(color_card(99)) == "Err:99"

    def test_real_card_colored(self):
        text = color_card(parse_card("SA"))
        assert text != plain(text)
        assert plain(text) == "♠ A"


class TestGameIdScreen:
    """Tests for the game id entry screen."""

    def test_shows_typed_digits(self):
        model = GameModel()
        model.game_id_input = "42"
        assert " Game id: 42_" in plain(render_table(model)).splitlines()

    def test_log_tail(self):
        model = GameModel()
        for i in range(LOG_TAIL + 3):
            model.log(f"line {i}")
        lines = plain(render_table(model)).splitlines()
        assert lines[-1] == f" line {LOG_TAIL + 2}"
        assert " line 0" not in lines


class TestInGameScreen:
    """Tests for render_in_game()."""

    def test_header_and_pot(self):
        lines = [plain(line) for line in render_in_game(seated_model())]
        assert lines[0].startswith(" Game 7 │ Player 3 │ State 7:")
        board = next(line for line in lines if line.startswith(" Board"))
        assert "??? ??? ??? ??? ???" in board
        assert board.endswith("pot 30")

    def test_seat_lines(self):
        model = seated_model()
        model.folded = (False, True, False)
        lines = [plain(line) for line in render_in_game(model)]
        seat2 = next(line for line in lines if line.startswith(" P2"))
        seat3 = next(line for line in lines if line.startswith(" P3"))
        assert "stack   980" in seat2 and "folded" in seat2
        assert "(D, you)" in seat3 and "◀" in seat3

    def test_street_contribution_shown_when_nonzero(self):
        model = seated_model()
        model.street_bets = (0, 0, 50)
        lines = [plain(line) for line in render_in_game(model)]
        seat1 = next(line for line in lines if line.startswith(" P1"))
        seat3 = next(line for line in lines if line.startswith(" P3"))
        assert "(+50 this street)" in seat3
        assert "this street" not in seat1

    def test_own_hand_shown(self):
        model = seated_model()
        hand = (parse_card("SK"), parse_card("DQ"))
        model.cards = CardView().with_hand(3, hand)
        seat3 = next(plain(line) for line in render_in_game(model) if plain(line).startswith(" P3"))
        assert "♠ K" in seat3

    def test_betting_prompt(self):
        lines = [plain(line) for line in render_in_game(seated_model())]
        assert lines[-1] == " Your turn: call 20 │ raise 40..1000 │ fold"

    def test_check_when_nothing_to_call(self):
        model = seated_model(phase=Phase.BET_FLOP_P1, seat=1)
        model.chips = ChipSnapshot(stacks=(950, 980, 950))
        model.last_raise_size = 0
        assert plain(render_in_game(model)[-1]).startswith(" Your turn: check │ raise 20..950")

    def test_no_prompt_for_other_seat(self):
        model = seated_model(seat=1)
        assert not any("Your turn" in plain(line) for line in render_in_game(model))

    def test_deltas_and_winner(self):
        model = seated_model()
        model.chip_deltas = (70, -20, -50)
        model.winner = 1
        lines = [plain(line) for line in render_in_game(model)]
        assert " Last hand: P1 +70, P2 -20, P3 -50" in lines
        assert " Player 1 wins the game!" in lines
        assert not any("Your turn" in line for line in lines)

    def test_spectator_header(self):
        model = GameModel()
        model.screen = Screen.IN_GAME
        model.game_id = 3
        model.spectating = True
        assert plain(render_in_game(model)[0]) == " Game 3 │ spectating │ Waiting for state"
