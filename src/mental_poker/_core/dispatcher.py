# Area: Core
"""
mental_poker._core.dispatcher - Protocol orchestrator
=====================================================

CommandDispatcher is the session's state machine. It consumes messages
(key presses, ticks, command outcomes), mutates the GameModel, and
parks at most one pending ledger command. Nothing in update() blocks;
all ledger traffic happens in execute_pending_command(), whose outcome
is fed back through update().

update() may return a follow-up message (a successful action chains a
Tick so the state is re-read). Callers feed each follow-up back until
update() returns None before executing the pending command.

Per poll the dispatcher:
1. Decodes the phase (unknown phases mean no action this poll)
2. Tracks eliminations, the winner, chips and card reveals
3. Plans at most one protocol action for the local seat:
   decrypt step, compare (dealer only), new-hand shuffle, or claim
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional, Type

from .._shared.logging_config import log_ledger_error
from ..errors import LedgerCallError, MentalPokerError, SeatResolutionError
from .cards import FACE_DOWN_HAND, CardView, format_card
from .chips import ChipLedgerTracker, Deltas
from .command_router import CommandRouter, SessionContext, build_router
from .decryption import DecryptionPipeline
from .elimination import EliminationTracker, decode_bitmap
from .hand_resolver import LocalHandResolver
from .keys import HandSecret, KeySlot
from .messages import (
    Backspace,
    Call,
    CharInput,
    ClaimPrize,
    Command,
    CommandFailed,
    CommandSucceeded,
    CompareHands,
    ConfirmGameId,
    DecryptCards,
    Fold,
    FoldHand,
    InitializeGame,
    JoinGame,
    PlaceBet,
    PolledState,
    PollState,
    Quit,
    Raise,
    SearchGame,
    SearchGames,
    SearchResult,
    SeatedResult,
    StartNewHand,
    Tick,
)
from .model import GameModel, Screen
from .phases import (
    Phase,
    PhaseKind,
    acting_seat,
    decode,
    describe,
    is_betting,
    is_new_hand_phase,
    phase_kind,
)

logger = logging.getLogger("mental_poker.core.dispatcher")

MAX_GAME_ID_DIGITS = 20

_FAILURE_VERBS = {
    InitializeGame: "creating game",
    JoinGame: "joining game",
    SearchGame: "searching games",
    PollState: "polling game state",
    PlaceBet: "placing bet",
    Fold: "folding",
    CompareHands: "comparing hands",
    StartNewHand: "shuffling new hand",
    DecryptCards: "decrypting",
    ClaimPrize: "claiming prize",
}


def format_deltas(deltas: Deltas) -> str:
    return ", ".join(f"P{seat} {delta:+d}" for seat, delta in enumerate(deltas, start=1))


class CommandDispatcher:
    """
    Message-driven orchestrator for one seat (or a spectator).

    Attributes:
        model: The session's GameModel
        context: Ledger, account and cipher the executors use
        buy_in: Stack each seat starts with when we create a game
        big_blind: Big blind used when we create a game
        search_start: First game id scanned by SearchGames
        search_count: Number of ids scanned by SearchGames
    """

    def __init__(
        self,
        model: GameModel,
        context: SessionContext,
        buy_in: int = 1000,
        big_blind: int = 20,
        search_start: int = 1,
        search_count: int = 20,
        router: Optional[CommandRouter] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.model = model
        self.context = context
        self.buy_in = buy_in
        self.big_blind = big_blind
        self.search_start = search_start
        self.search_count = search_count
        self.router = router or build_router(context)
        self.clock = clock

        self.keys: KeySlot[Any] = KeySlot()
        self.chips = ChipLedgerTracker()
        self.elimination = EliminationTracker()
        self.pipeline: Optional[DecryptionPipeline] = None
        self._hand_secret: Optional[HandSecret] = None
        self._pending: Optional[Command] = None
        self._acted_phase: Optional[Phase] = None
        # Dealer of the hand being played or resolved; the ledger rotates
        # the button inside compare, before the result is visible
        self._hand_dealer: Optional[int] = None

        self._message_handlers: Dict[Type, Callable[[Any], Optional[Any]]] = {
            CharInput: self._on_char,
            Backspace: self._on_backspace,
            ConfirmGameId: self._on_confirm_game_id,
            SearchGames: self._on_search_games,
            Call: self._on_call,
            Raise: self._on_raise,
            FoldHand: self._on_fold,
            Quit: self._on_quit,
            Tick: self._on_tick,
            CommandSucceeded: self._on_succeeded,
            CommandFailed: self._on_failed,
        }
        self._result_handlers: Dict[Type[Command], Callable[[Command, Any], Optional[Any]]] = {
            SearchGame: self._on_search_result,
            InitializeGame: self._on_seated,
            JoinGame: self._on_seated,
            PollState: self._on_polled,
            PlaceBet: self._on_bet_done,
            Fold: self._on_bet_done,
            CompareHands: self._on_compared,
            StartNewHand: self._on_new_hand,
            DecryptCards: self._on_decrypted,
            ClaimPrize: self._on_claimed,
        }

    # ══════════════════════════════════════════════════════════
    # PUBLIC API
    # ══════════════════════════════════════════════════════════

    @property
    def pending_command(self) -> Optional[Command]:
        return self._pending

    def update(self, message: Any) -> Optional[Any]:
        """
        Apply one message to the model; may park one command.

        Returns:
            A follow-up message to feed back into update(), or None.
        """
        handler = self._message_handlers.get(type(message))
        if handler is None:
            logger.warning(f"Ignoring unknown message: {type(message).__name__}")
            return None
        return handler(message)

    def execute_pending_command(self) -> Optional[Any]:
        """
        Run the pending command, if any.

        Returns:
            CommandSucceeded or CommandFailed to feed back into update(),
            or None when nothing was pending.
        """
        command, self._pending = self._pending, None
        if command is None:
            return None
        try:
            result = self.router.route(command)
        except LedgerCallError as e:
            log_ledger_error(e)
            return CommandFailed(command=command, error=e.reason)
        except MentalPokerError as e:
            logger.warning(f"{command.name} failed: {e}")
            return CommandFailed(command=command, error=str(e))
        except Exception as e:
            logger.error(f"Unexpected error executing {command.name}: {e}", exc_info=True)
            return CommandFailed(command=command, error=f"{type(e).__name__}: {e}")
        return CommandSucceeded(command=command, result=result)

    # ══════════════════════════════════════════════════════════
    # COMMAND ISSUANCE
    # ══════════════════════════════════════════════════════════

    def _issue(self, command: Command, label: Optional[str] = None) -> bool:
        if self.model.should_quit:
            logger.debug(f"Quitting, not issuing {command.name}")
            return False
        if self._pending is not None:
            logger.debug(f"{self._pending.name} pending, not issuing {command.name}")
            return False
        self._pending = command
        if label:
            self.model.log_action_start(label)
        return True

    def _issue_poll(self) -> bool:
        resolve_with = None
        seat = self.model.local_seat
        if (
            seat is not None
            and self._hand_secret is not None
            and self.keys.is_held
            and LocalHandResolver.needs_resolution(self.model.decrypted_hand)
        ):
            resolve_with = (seat, self._hand_secret.inverse)
        issued = self._issue(PollState(game_id=self.model.game_id, resolve_with=resolve_with))
        if issued:
            self.model.last_poll_time = self.clock()
        return issued

    def _poll_soon(self) -> None:
        self.model.last_poll_time = None

    def _poll_now(self) -> Tick:
        """Clear the poll timer and chain a Tick so the state is re-read."""
        self._poll_soon()
        return Tick()

    # ══════════════════════════════════════════════════════════
    # INPUT
    # ══════════════════════════════════════════════════════════

    def _on_char(self, message: CharInput) -> None:
        if self.model.screen is not Screen.GAME_ID_INPUT:
            return
        if message.char.isdigit() and len(self.model.game_id_input) < MAX_GAME_ID_DIGITS:
            self.model.game_id_input += message.char

    def _on_backspace(self, message: Backspace) -> None:
        if self.model.screen is Screen.GAME_ID_INPUT:
            self.model.game_id_input = self.model.game_id_input[:-1]

    def _on_confirm_game_id(self, message: ConfirmGameId) -> None:
        if self.model.screen is not Screen.GAME_ID_INPUT or self.model.game_initialized:
            return
        if not self.model.game_id_input:
            self.model.log("Enter a game id first")
            return
        game_id = int(self.model.game_id_input)
        self._issue(SearchGame(game_id=game_id, candidates=(game_id,)),
                    label=f"Looking up game {game_id}")

    def _on_search_games(self, message: SearchGames) -> None:
        if self.model.screen is not Screen.GAME_ID_INPUT or self.model.game_initialized:
            return
        candidates = tuple(range(self.search_start, self.search_start + self.search_count))
        self._issue(SearchGame(game_id=candidates[0], candidates=candidates),
                    label=f"Searching games {candidates[0]}-{candidates[-1]}")

    def _on_quit(self, message: Quit) -> None:
        self.model.should_quit = True
        self.model.log("Quitting")

    def _on_tick(self, message: Tick) -> None:
        if self._pending is None and self.model.should_poll(self.clock()):
            self._issue_poll()

    # ── Betting ─────────────────────────────────────────────

    def _betting_seat(self) -> Optional[int]:
        """The local seat if it may bet right now, else None (with a log line)."""
        model = self.model
        seat = model.local_seat
        phase = model.current_phase
        if seat is None or not model.game_initialized:
            model.log("Not seated in a game")
            return None
        if model.winner is not None:
            model.log("Game is over")
            return None
        if phase is None or not is_betting(phase) or acting_seat(phase) != seat:
            model.log("Not your turn to bet")
            return None
        if self.chips.current is None:
            model.log("Chip counts not loaded yet")
            return None
        if self._pending is not None:
            model.log("Previous action still in progress")
            return None
        return seat

    def _on_call(self, message: Call) -> None:
        seat = self._betting_seat()
        if seat is None:
            return
        amount = self.chips.call_or_all_in(seat)
        label = "Checking" if amount == 0 else f"Calling {amount}"
        self._issue(PlaceBet(game_id=self.model.game_id, amount=amount), label=label)

    def _on_raise(self, message: Raise) -> None:
        seat = self._betting_seat()
        if seat is None:
            return
        amount = self.chips.clamp_raise(
            seat, message.amount, self.model.last_raise_size, self.model.big_blind,
        )
        if amount != message.amount:
            self.model.log(f"Raise adjusted from {message.amount} to {amount}")
        label = "Going all-in" if amount == self.chips.current.stack(seat) else f"Raising {amount}"
        self._issue(PlaceBet(game_id=self.model.game_id, amount=amount), label=label)

    def _on_fold(self, message: FoldHand) -> None:
        if self._betting_seat() is None:
            return
        self._issue(Fold(game_id=self.model.game_id), label="Folding")

    # ══════════════════════════════════════════════════════════
    # COMMAND OUTCOMES
    # ══════════════════════════════════════════════════════════

    def _on_succeeded(self, message: CommandSucceeded) -> Optional[Any]:
        handler = self._result_handlers.get(type(message.command))
        if handler is None:
            logger.warning(f"No result handler for {message.command.name}")
            return None
        return handler(message.command, message.result)

    def _on_failed(self, message: CommandFailed) -> None:
        command = message.command
        if isinstance(command, DecryptCards) and command.keys is not None:
            # Keys travel with the command; take them back so the step can retry
            self.keys.put(command.keys)
        verb = _FAILURE_VERBS.get(type(command), command.name)
        if isinstance(command, PollState):
            logger.warning(f"Error {verb}: {message.error}")
            return
        self.model.log(f"Error {verb}: {message.error}")

    # ── Game setup ──────────────────────────────────────────

    def _on_search_result(self, command: SearchGame, result: SearchResult) -> None:
        self.model.log_action_complete()
        game_id, game = result.game_id, result.game
        if game is None:
            self.model.log(f"Game {game_id} not found, creating it")
            self._issue(
                InitializeGame(game_id=game_id, buy_in=self.buy_in, big_blind=self.big_blind),
                label=f"Creating game {game_id}",
            )
            return

        address = self.context.account.address
        seat = game.seat_of(address)
        if seat is not None:
            self._enter_game(game_id, seat)
            self.model.log(f"Rejoined game {game_id} as Player {seat}")
            self.model.log("Secret material from an earlier session is not available; "
                           "decryption resumes with the next hand")
        elif game.phase == Phase.WAITING_FOR_SEAT2:
            self._issue(JoinGame(game_id=game_id, seat=2), label=f"Joining game {game_id} as Player 2")
        elif game.phase == Phase.WAITING_FOR_SEAT3:
            self._issue(JoinGame(game_id=game_id, seat=3), label=f"Joining game {game_id} as Player 3")
        else:
            self._enter_game(game_id, None)
            self.model.spectating = True
            self.model.log(f"Game {game_id} is full, spectating")

    def _enter_game(self, game_id: int, seat: Optional[int]) -> None:
        model = self.model
        model.game_id = game_id
        model.game_id_input = str(game_id)
        model.screen = Screen.IN_GAME
        model.game_initialized = True
        if seat is not None:
            model.set_local_seat(seat)
            self.pipeline = DecryptionPipeline(seat)
        self._poll_soon()

    def _on_seated(self, command: Command, result: SeatedResult) -> Optional[Tick]:
        address = self.context.account.address
        seat = result.game.seat_of(address) if result.game is not None else None
        if seat is None:
            error = SeatResolutionError(address, command.game_id)
            logger.error(str(error))
            self.model.log(f"Error: {error}")
            return None
        self.model.log_action_complete()
        self.keys.replace(result.keys)
        self._hand_secret = result.secret
        self._enter_game(command.game_id, seat)
        self.model.log(f"Seated in game {command.game_id} as Player {seat}")
        return Tick()

    # ── Polling ─────────────────────────────────────────────

    def _on_polled(self, command: PollState, result: PolledState) -> None:
        model = self.model
        game = result.game
        raw = game.phase
        phase = decode(raw)
        changed = raw != model.raw_phase
        model.raw_phase = raw
        model.current_phase = phase
        model.phase_changed = changed
        if changed:
            model.log(f"State {raw}: {describe(raw)}")
            if self._acted_phase is not None and phase != self._acted_phase:
                self._acted_phase = None
        if phase is None:
            if changed:
                logger.warning(f"Unknown phase {raw} for game {command.game_id}, waiting")
            return

        model.last_raise_size = game.last_raise_size
        model.big_blind = game.big_blind
        model.dealer_seat = game.dealer_seat()
        if phase <= Phase.COMPARE:
            self._hand_dealer = model.dealer_seat
        model.folded = decode_bitmap(game.folded)

        winner = self.elimination.observe(game.eliminated)
        model.eliminated = self.elimination.eliminated
        if winner is not None and model.set_winner(winner):
            model.log(f"Player {winner} wins the game!")

        if changed and is_new_hand_phase(phase):
            model.decrypted_hand = None

        if result.chips is not None:
            snapshot = result.chips.to_snapshot()
            self.chips.observe(snapshot, phase)
            model.chips = snapshot
            model.street_bets = self.chips.street_bets()
            # The dealer learns the result from its own compare
            if self._hand_dealer != model.local_seat or model.local_seat is None:
                deltas = self.chips.observe_passive(snapshot, phase)
                if deltas is not None:
                    self._show_deltas(deltas)

        if result.resolved_hand is not None and tuple(result.resolved_hand) != FACE_DOWN_HAND:
            if model.decrypted_hand is None:
                model.log("Your hand: " + " ".join(format_card(c) for c in result.resolved_hand))
            model.decrypted_hand = tuple(result.resolved_hand)
        view = result.revealed.to_view() if result.revealed is not None else CardView()
        model.cards = view.with_hand(model.local_seat, model.decrypted_hand)

        if self.pipeline is not None:
            self.pipeline.on_phase(phase, changed)
        self._plan_protocol_action(phase, result)

    def _plan_protocol_action(self, phase: Phase, result: PolledState) -> None:
        """Park at most one follow-up command for the local seat."""
        model = self.model
        seat = model.local_seat
        if seat is None or model.game_id is None:
            return
        kind = phase_kind(phase)
        if model.winner is not None and kind is not PhaseKind.CLAIM:
            return

        step = self.pipeline.plan(phase, result.cards, self.keys.is_held)
        if step is not None:
            if self._pending is not None or model.should_quit:
                return
            keys = self.keys.take()
            self._issue(DecryptCards(game_id=model.game_id, step=step, keys=keys), label=step.label)
            return

        if self._acted_phase == phase:
            return
        if kind is PhaseKind.COMPARE:
            if model.dealer_seat == seat and not self.chips.resolved:
                self._issue(CompareHands(game_id=model.game_id), label="Comparing hands")
        elif kind in (PhaseKind.NEW_SHUFFLE, PhaseKind.SHUFFLE) and acting_seat(phase) == seat:
            self._issue(
                StartNewHand(game_id=model.game_id, reshuffle=kind is PhaseKind.SHUFFLE, phase=phase),
                label="Shuffling new deck" if kind is PhaseKind.NEW_SHUFFLE else "Reshuffling deck",
            )
        elif kind is PhaseKind.CLAIM and acting_seat(phase) == seat and model.chips is not None:
            amount = model.chips.stack(seat)
            self._issue(ClaimPrize(game_id=model.game_id, amount=amount, phase=phase),
                        label=f"Claiming prize of {amount}")

    # ── Protocol actions ────────────────────────────────────

    def _on_decrypted(self, command: DecryptCards, result) -> Tick:
        self.keys.put(result.keys)
        self.pipeline.mark_done(command.step)
        self.model.log_action_complete()
        return self._poll_now()

    def _on_bet_done(self, command: Command, result) -> Tick:
        self.model.log_action_complete()
        return self._poll_now()

    def _on_compared(self, command: CompareHands, result) -> Tick:
        self.model.log_action_complete()
        self._acted_phase = Phase.COMPARE
        deltas = self.chips.record_resolution(result.before, result.after)
        if deltas is not None:
            self.model.chips = result.after
            self._show_deltas(deltas)
        return self._poll_now()

    def _on_new_hand(self, command: StartNewHand, result: SeatedResult) -> Tick:
        self.model.log_action_complete()
        self._acted_phase = command.phase
        self.keys.replace(result.keys)
        self._hand_secret = result.secret
        self.model.decrypted_hand = None
        return self._poll_now()

    def _on_claimed(self, command: ClaimPrize, result) -> Tick:
        self.model.log_action_complete()
        self._acted_phase = command.phase
        self.model.log(f"Prize of {command.amount} claimed")
        return self._poll_now()

    def _show_deltas(self, deltas: Deltas) -> None:
        self.model.chip_deltas = deltas
        self.model.log(f"Hand result: {format_deltas(deltas)}")
