# Area: Shared Tests
"""Tests for input parsing, session wiring and the runners."""

import io
import os
from unittest.mock import Mock, patch

import pytest

from mental_poker._core.messages import (
    Backspace,
    Call,
    CharInput,
    ConfirmGameId,
    FoldHand,
    Quit,
    Raise,
    SearchGames,
    Tick,
)
from mental_poker._core.model import NetworkType, Screen
from mental_poker._ledger.local import LocalLedger
from mental_poker._runner_config import with_defaults
from mental_poker.runner import (
    MAX_INPUT_DIGITS,
    HotSeatRunner,
    PokerRunner,
    build_dispatcher,
    parse_input,
    read_line,
    step,
)


@pytest.fixture(autouse=True)
def no_log_file():
    with patch("mental_poker.runner.setup_logging") as mock_setup:
        yield mock_setup


class TestParseInput:
    """Tests for parse_input()."""

    def test_quit_anywhere(self):
        for screen in Screen:
            assert parse_input("q", screen) == [Quit()]

    def test_blank_line(self):
        assert parse_input("   ", Screen.IN_GAME) == []

    def test_game_id_replaces_input(self):
        messages = parse_input("id 42", Screen.GAME_ID_INPUT)
        assert messages[:MAX_INPUT_DIGITS] == [Backspace()] * MAX_INPUT_DIGITS
        assert messages[MAX_INPUT_DIGITS:] == [CharInput("4"), CharInput("2"), ConfirmGameId()]
        assert parse_input("42", Screen.GAME_ID_INPUT) == messages

    def test_search(self):
        assert parse_input("search", Screen.GAME_ID_INPUT) == [SearchGames()]

    def test_betting_words(self):
        assert parse_input("check", Screen.IN_GAME) == [Call()]
        assert parse_input("F", Screen.IN_GAME) == [FoldHand()]
        assert parse_input("raise 60", Screen.IN_GAME) == [Raise(60)]

    def test_unknown(self):
        assert parse_input("raise lots", Screen.IN_GAME) is None
        assert parse_input("call", Screen.GAME_ID_INPUT) is None
        assert parse_input("42", Screen.IN_GAME) is None


class TestReadLine:
    """Tests for read_line() over a pipe."""

    def test_line_timeout_and_eof(self):
        read_fd, write_fd = os.pipe()
        with os.fdopen(read_fd) as reader:
            assert read_line(reader, 0.01) is None
            os.write(write_fd, b"call\n")
            assert read_line(reader, 1.0) == "call\n"
            os.close(write_fd)
            assert read_line(reader, 1.0) == "quit"


class TestBuildDispatcher:
    """Tests for build_dispatcher()."""

    def test_local_defaults(self):
        dispatcher = build_dispatcher(with_defaults({}))
        assert isinstance(dispatcher.context.ledger, LocalLedger)
        assert dispatcher.context.account.address == "local-player"
        assert dispatcher.model.network_type is NetworkType.LOCAL
        assert dispatcher.buy_in == 1000
        assert dispatcher.search_count == 20

    def test_poll_interval_from_config(self):
        dispatcher = build_dispatcher(with_defaults({"poll_interval_seconds": 3}))
        assert dispatcher.model.effective_poll_interval == 3.0

    def test_network_ledger_built_from_config(self):
        config = with_defaults({
            "network": "testnet", "endpoint": "https://node", "prover_url": "https://prover",
            "private_key": "APrivateKey1xyz", "address": "aleo1me",
        })
        with patch("mental_poker.runner.SessionContext.build") as build:
            build_dispatcher(config)
        ledger, account, cipher = build.call_args[0]
        assert ledger.client.endpoint == "https://node"
        assert account.address == "aleo1me"
        assert cipher.client is ledger.client


class TestStep:
    """Tests for step()."""

    def test_runs_one_command_and_feeds_back(self):
        dispatcher = Mock()
        dispatcher.update.return_value = None
        dispatcher.execute_pending_command.return_value = "outcome"
        step(dispatcher, [Tick()])
        assert [c.args[0] for c in dispatcher.update.call_args_list] == [Tick(), "outcome"]

    def test_follow_ups_are_fed_back(self):
        dispatcher = Mock()
        dispatcher.update.side_effect = lambda message: Tick() if message == "outcome" else None
        dispatcher.execute_pending_command.return_value = "outcome"
        step(dispatcher, [])
        assert [c.args[0] for c in dispatcher.update.call_args_list] == ["outcome", Tick()]

    def test_nothing_pending(self):
        dispatcher = Mock()
        dispatcher.update.return_value = None
        dispatcher.execute_pending_command.return_value = None
        step(dispatcher, [])
        dispatcher.update.assert_not_called()


class TestPokerRunner:
    """Tests for PokerRunner."""

    def test_invalid_config_raises(self):
        with pytest.raises(ValueError):
            PokerRunner(config={"big_blind": 1})

    def test_unknown_command_logged(self):
        runner = PokerRunner(config={}, stdout=io.StringIO())
        runner.handle_line("dance\n")
        assert runner.model.logs.tail(1) == ["Unknown command: dance"]

    def test_game_id_creates_game(self):
        ledger = LocalLedger()
        runner = PokerRunner(config={}, ledger=ledger, stdout=io.StringIO())
        runner.handle_line("id 5\n")
        runner.handle_line(None)
        assert ledger.get_game(5).seat1 == "local-player"
        assert runner.model.local_seat == 1

    def test_render_only_on_change(self):
        stdout = io.StringIO()
        runner = PokerRunner(config={}, stdout=stdout)
        runner._render()
        first = stdout.getvalue()
        runner._render()
        assert stdout.getvalue() == first
        assert "Game id:" in first


class TestHotSeatRunner:
    """Tests for HotSeatRunner."""

    def test_three_seats_share_a_ledger(self):
        runner = HotSeatRunner(config={}, stdout=io.StringIO())
        assert len({id(d.context.ledger) for d in runner.dispatchers}) == 1
        assert [d.context.account.address for d in runner.dispatchers] == [
            "hotseat-player-1", "hotseat-player-2", "hotseat-player-3",
        ]

    def test_switching_views(self):
        runner = HotSeatRunner(config={}, stdout=io.StringIO())
        runner.handle_line("prev")
        assert runner.active == 2
        runner.handle_line("next")
        assert runner.active == 0

    def test_input_goes_to_current_seat(self):
        runner = HotSeatRunner(config={}, stdout=io.StringIO())
        runner.handle_line("id 9")
        runner.handle_line(None)
        assert runner.ledger.get_game(9).seat1 == "hotseat-player-1"
        assert runner.dispatchers[1].model.game_id is None
