# Area: Core Tests
"""Tests for CommandRouter and the command executors."""

from unittest.mock import Mock

import pytest

from mental_poker._core.cards import FACE_DOWN_HAND, CardLookupTable
from mental_poker._core.command_router import (
    EXECUTORS,
    CommandRouter,
    CompareHandsExecutor,
    InitializeGameExecutor,
    JoinGameExecutor,
    PollStateExecutor,
    SearchGameExecutor,
    SessionContext,
    StartNewHandExecutor,
    build_router,
)
from mental_poker._core.hand_resolver import LocalHandResolver
from mental_poker._core.messages import (
    CompareHands,
    Fold,
    InitializeGame,
    JoinGame,
    PlaceBet,
    PollState,
    SearchGame,
    StartNewHand,
)
from mental_poker._ledger.base import Account, ChipsRecord, EncryptedCards, GameRecord, PendingTx
from mental_poker._ledger.cipher import SraCipher
from mental_poker.errors import LedgerLookupError


def game(phase=0, seat1="alice", seat2="", seat3=""):
    return GameRecord(seat1=seat1, seat2=seat2, seat3=seat3, phase=phase, buy_in=1000, big_blind=20)


@pytest.fixture
def ledger():
    ledger = Mock()
    ledger.initialize_deck.return_value = list(range(2, 54))
    return ledger


@pytest.fixture
def context(ledger):
    cipher = Mock()
    cipher.generate_secret.return_value = ("sec", "inv")
    return SessionContext.build(ledger, Account(address="alice"), cipher, shuffle=lambda deck: list(reversed(deck)))


class TestCommandRouter:
    """Tests for CommandRouter registration and routing."""

    def test_register_and_route(self):
        router = CommandRouter()
        executor = Mock()
        executor.execute.return_value = "done"
        router.register_executor(Fold, executor)

        command = Fold(game_id=3)
        assert router.route(command) == "done"
        executor.execute.assert_called_once_with(command)
        assert router.get_executor(Fold) is executor

    def test_route_without_executor_raises(self):
        with pytest.raises(LookupError, match="PlaceBet"):
            CommandRouter().route(PlaceBet(game_id=1, amount=5))

    def test_get_executor_unknown_returns_none(self):
        assert CommandRouter().get_executor(Fold) is None

    def test_build_router_registers_every_command(self, context):
        router = build_router(context)
        for command_type in EXECUTORS:
            assert router.get_executor(command_type) is not None


class TestSessionContext:
    """Tests for SessionContext.build."""

    def test_lookup_built_from_initial_deck(self, context, ledger):
        ledger.initialize_deck.assert_called_once()
        assert context.lookup.index_of(2) == 0
        assert context.lookup.index_of(53) == 51


class TestSeatingExecutors:
    """Tests for create, join and new-hand executors."""

    def test_initialize_shuffles_fresh_deck(self, context, ledger):
        ledger.create_game.return_value = ("keys", PendingTx(tx_id="t1"))
        ledger.get_game.return_value = game()

        result = InitializeGameExecutor(context).execute(InitializeGame(game_id=5, buy_in=1000, big_blind=20))

        args = ledger.create_game.call_args[0]
        assert args[2] == list(range(53, 1, -1))
        assert args[3:] == ("sec", "inv", 1000, 20)
        assert result.keys == "keys"
        assert result.secret.inverse == "inv"
        assert result.game.seat1 == "alice"

    def test_join_reshuffles_current_deck(self, context, ledger):
        ledger.get_deck.return_value = ["a", "b", "c"]
        ledger.join_game.return_value = ("keys", PendingTx(tx_id="t2"))
        ledger.get_game.return_value = game(phase=1, seat1="bob", seat2="alice")

        JoinGameExecutor(context).execute(JoinGame(game_id=5, seat=2))

        _, _, deck, shuffled, secret, inverse = ledger.join_game.call_args[0]
        assert deck == ["a", "b", "c"]
        assert shuffled == ["c", "b", "a"]

    def test_join_without_deck_raises(self, context, ledger):
        ledger.get_deck.return_value = None
        with pytest.raises(LedgerLookupError):
            JoinGameExecutor(context).execute(JoinGame(game_id=5, seat=2))

    def test_new_shuffle_uses_fresh_deck(self, context, ledger):
        ledger.start_new_hand.return_value = ("keys", PendingTx(tx_id="t3"))
        result = StartNewHandExecutor(context).execute(StartNewHand(game_id=5, reshuffle=False))
        ledger.start_new_hand.assert_called_once()
        ledger.reshuffle.assert_not_called()
        assert result.game is None

    def test_reshuffle_uses_current_deck(self, context, ledger):
        ledger.get_deck.return_value = ["x", "y"]
        ledger.reshuffle.return_value = ("keys", PendingTx(tx_id="t4"))
        StartNewHandExecutor(context).execute(StartNewHand(game_id=5, reshuffle=True))
        assert ledger.reshuffle.call_args[0][2:4] == (["x", "y"], ["y", "x"])


class TestSearchGameExecutor:
    """Tests for direct lookup and scanning."""

    def test_direct_lookup_of_missing_game(self, context, ledger):
        ledger.get_game.return_value = None
        result = SearchGameExecutor(context).execute(SearchGame(game_id=9, candidates=(9,)))
        assert result.game_id == 9
        assert result.game is None

    def test_scan_returns_first_open_game(self, context, ledger):
        games = {1: game(phase=5, seat1="x", seat2="y", seat3="z"), 2: None, 3: game(phase=1, seat1="x")}
        ledger.get_game.side_effect = games.get
        result = SearchGameExecutor(context).execute(SearchGame(game_id=1, candidates=(1, 2, 3)))
        assert result.game_id == 3

    def test_scan_returns_game_that_seats_us(self, context, ledger):
        ledger.get_game.side_effect = {1: game(phase=12, seat1="x", seat2="alice", seat3="z")}.get
        result = SearchGameExecutor(context).execute(SearchGame(game_id=1, candidates=(1, 2)))
        assert result.game_id == 1

    def test_scan_without_match_raises(self, context, ledger):
        ledger.get_game.return_value = None
        with pytest.raises(LedgerLookupError):
            SearchGameExecutor(context).execute(SearchGame(game_id=1, candidates=(1, 2)))


class TestPollStateExecutor:
    """Tests for polling and local hand resolution."""

    def _cards(self, hand):
        return EncryptedCards(seat1=hand, seat2=[0, 0], seat3=[0, 0], flop=[0, 0, 0], turn=0, river=0)

    def test_missing_game_raises(self, context, ledger):
        ledger.get_game.return_value = None
        with pytest.raises(LedgerLookupError):
            PollStateExecutor(context).execute(PollState(game_id=1))

    def test_resolves_hand_when_resolvable(self, ledger):
        cipher = SraCipher()
        ledger.initialize_deck.return_value = cipher.initial_deck()
        context = SessionContext.build(ledger, Account(address="alice"), cipher)
        secret, inverse = cipher.generate_secret()
        hand = [cipher.apply(14, secret), cipher.apply(2, secret)]
        ledger.get_game.return_value = game(phase=5)
        ledger.get_cards.return_value = self._cards(hand)

        result = PollStateExecutor(context).execute(PollState(game_id=1, resolve_with=(1, inverse)))
        assert result.resolved_hand == (12, 0)

    def test_no_resolution_before_hands_are_decrypted(self, context, ledger):
        ledger.get_game.return_value = game(phase=3)
        ledger.get_cards.return_value = self._cards([5, 6])
        result = PollStateExecutor(context).execute(PollState(game_id=1, resolve_with=(1, "inv")))
        assert result.resolved_hand is None
        context.cipher.apply.assert_not_called()

    def test_lookup_miss_is_face_down(self, ledger):
        cipher = SraCipher()
        ledger.initialize_deck.return_value = cipher.initial_deck()
        context = SessionContext.build(ledger, Account(address="alice"), cipher)
        ledger.get_game.return_value = game(phase=5)
        ledger.get_cards.return_value = self._cards([12345, 67890])

        result = PollStateExecutor(context).execute(PollState(game_id=1, resolve_with=(1, 3)))
        assert result.resolved_hand == FACE_DOWN_HAND


class TestLocalHandResolver:
    """Tests for the resolution gates."""

    def test_needs_resolution_until_a_real_pair_is_cached(self):
        assert LocalHandResolver.needs_resolution(None)
        assert LocalHandResolver.needs_resolution(FACE_DOWN_HAND)
        assert not LocalHandResolver.needs_resolution((12, 38))

    @pytest.mark.parametrize("phase,expected", [(3, False), (5, True), (29, True), (30, False), (None, False)])
    def test_resolvable_window(self, phase, expected):
        assert LocalHandResolver.is_resolvable(phase) is expected


class TestCompareHandsExecutor:
    """Tests for compare bracketed by chip reads."""

    def test_before_and_after_snapshots(self, context, ledger):
        ledger.get_chips.side_effect = [
            ChipsRecord(stack1=950, stack2=980, stack3=950, bet1=50, bet2=20, bet3=50),
            ChipsRecord(stack1=1070, stack2=980, stack3=950),
        ]
        result = CompareHandsExecutor(context).execute(CompareHands(game_id=1))
        ledger.compare_hands.assert_called_once_with(context.account, 1)
        assert result.before.pot == 120
        assert result.after.stacks == (1070, 980, 950)
