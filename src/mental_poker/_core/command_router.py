# Area: Core
"""
mental_poker._core.command_router - Command execution
=====================================================

Routes pending commands to executors. Executors are the only code in
the session that talks to the ledger or the cipher; each one turns a
command into a result object or raises.

Usage:
    router = build_router(context)
    result = router.route(PollState(game_id=7))
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol, Type

from ..errors import LedgerLookupError
from .._ledger.base import Account, Ledger
from .cards import CardLookupTable
from .decryption import submit
from .hand_resolver import LocalHandResolver
from .keys import HandSecret
from .messages import (
    ClaimPrize,
    Command,
    CompareHands,
    CompareResult,
    DecryptCards,
    DecryptResult,
    Fold,
    InitializeGame,
    JoinGame,
    PlaceBet,
    PolledState,
    PollState,
    SearchGame,
    SearchResult,
    SeatedResult,
    StartNewHand,
)
from .phases import decode

logger = logging.getLogger("mental_poker.core.router")


def default_shuffle(deck: List[Any]) -> List[Any]:
    shuffled = list(deck)
    random.SystemRandom().shuffle(shuffled)
    return shuffled


@dataclass
class SessionContext:
    """
    What executors need to reach the outside world.

    Attributes:
        ledger: Backend chosen at session construction
        account: The local player's account
        cipher: Commutative cipher for secrets and local hand resolution
        lookup: Card lookup table built once from the unshuffled deck
        shuffle: Deck permutation used before encrypting
    """
    ledger: Ledger
    account: Account
    cipher: Any
    lookup: CardLookupTable
    shuffle: Callable[[List[Any]], List[Any]] = field(default=default_shuffle)

    @classmethod
    def build(cls, ledger: Ledger, account: Account, cipher: Any, **kwargs) -> "SessionContext":
        """Read the unshuffled deck once and build the lookup table from it."""
        lookup = CardLookupTable(ledger.initialize_deck())
        return cls(ledger=ledger, account=account, cipher=cipher, lookup=lookup, **kwargs)


class CommandExecutor(Protocol):
    """Protocol for command executors."""

    def execute(self, command: Command) -> Any:
        """Run the command against the ledger and return its result."""
        ...


class _Executor:
    def __init__(self, context: SessionContext):
        self.context = context

    @property
    def ledger(self) -> Ledger:
        return self.context.ledger

    @property
    def account(self) -> Account:
        return self.context.account

    def _fresh_secret(self) -> HandSecret:
        secret, inverse = self.context.cipher.generate_secret()
        return HandSecret(secret=secret, inverse=inverse)

    def _require_game(self, game_id: int):
        game = self.ledger.get_game(game_id)
        if game is None:
            raise LedgerLookupError("Game", game_id)
        return game


class InitializeGameExecutor(_Executor):
    """Create a game: shuffle and encrypt a fresh deck, take seat 1."""

    def execute(self, command: InitializeGame) -> SeatedResult:
        deck = self.context.shuffle(self.ledger.initialize_deck())
        hand_secret = self._fresh_secret()
        keys, tx = self.ledger.create_game(
            self.account, command.game_id, deck,
            hand_secret.secret, hand_secret.inverse,
            command.buy_in, command.big_blind,
        )
        logger.info("Game %d created (tx %s)", command.game_id, tx.tx_id)
        return SeatedResult(keys=keys, secret=hand_secret, game=self._require_game(command.game_id))


class JoinGameExecutor(_Executor):
    """Join an open seat: reshuffle and add our layer to the current deck."""

    def execute(self, command: JoinGame) -> SeatedResult:
        deck = self.ledger.get_deck(command.game_id)
        if deck is None:
            raise LedgerLookupError("Deck", command.game_id)
        shuffled = self.context.shuffle(deck)
        hand_secret = self._fresh_secret()
        keys, tx = self.ledger.join_game(
            self.account, command.game_id, deck, shuffled,
            hand_secret.secret, hand_secret.inverse,
        )
        logger.info("Joined game %d as seat %d (tx %s)", command.game_id, command.seat, tx.tx_id)
        return SeatedResult(keys=keys, secret=hand_secret, game=self._require_game(command.game_id))


class SearchGameExecutor(_Executor):
    """
    Look up candidate game ids.

    A single candidate is a direct lookup: a missing game comes back as
    SearchResult(game=None) so the caller can create it. Several
    candidates are a scan for the first game that is open or already
    seats us; finding none is an error.
    """

    def execute(self, command: SearchGame) -> SearchResult:
        candidates = command.candidates or (command.game_id,)
        if len(candidates) == 1:
            game_id = candidates[0]
            return SearchResult(game_id=game_id, game=self.ledger.get_game(game_id))

        for game_id in candidates:
            game = self.ledger.get_game(game_id)
            if game is None:
                continue
            if game.seat_of(self.account.address) is not None or game.phase in (0, 1):
                logger.info("Search matched game %d (phase %d)", game_id, game.phase)
                return SearchResult(game_id=game_id, game=game)
        raise LedgerLookupError("Open game", candidates[0])


class PollStateExecutor(_Executor):
    """Read everything the session mirrors; resolve our hand if asked."""

    def __init__(self, context: SessionContext):
        super().__init__(context)
        self.resolver = LocalHandResolver(context.cipher, context.lookup)

    def execute(self, command: PollState) -> PolledState:
        game = self._require_game(command.game_id)
        cards = self.ledger.get_cards(command.game_id)
        revealed = self.ledger.get_revealed_cards(command.game_id)
        chips = self.ledger.get_chips(command.game_id)

        resolved = None
        if (
            command.resolve_with is not None
            and cards is not None
            and self.resolver.is_resolvable(decode(game.phase))
        ):
            seat, inverse = command.resolve_with
            resolved = self.resolver.resolve(cards.hand(seat), inverse)

        return PolledState(game=game, cards=cards, revealed=revealed, chips=chips,
                           resolved_hand=resolved)


class PlaceBetExecutor(_Executor):
    def execute(self, command: PlaceBet):
        return self.ledger.place_bet(self.account, command.game_id, command.amount)


class FoldExecutor(_Executor):
    def execute(self, command: Fold):
        return self.ledger.fold(self.account, command.game_id)


class CompareHandsExecutor(_Executor):
    """Invoke compare and bracket it with chip reads for the hand deltas."""

    def execute(self, command: CompareHands) -> CompareResult:
        before = self.ledger.get_chips(command.game_id)
        if before is None:
            raise LedgerLookupError("Chips", command.game_id)
        self.ledger.compare_hands(self.account, command.game_id)
        after = self.ledger.get_chips(command.game_id)
        if after is None:
            raise LedgerLookupError("Chips", command.game_id)
        return CompareResult(before=before.to_snapshot(), after=after.to_snapshot())


class StartNewHandExecutor(_Executor):
    """New-shuffle (fresh deck) or shuffle (current deck) with a fresh secret."""

    def execute(self, command: StartNewHand) -> SeatedResult:
        hand_secret = self._fresh_secret()
        if command.reshuffle:
            deck = self.ledger.get_deck(command.game_id)
            if deck is None:
                raise LedgerLookupError("Deck", command.game_id)
            keys, tx = self.ledger.reshuffle(
                self.account, command.game_id, deck, self.context.shuffle(deck),
                hand_secret.secret, hand_secret.inverse,
            )
        else:
            deck = self.context.shuffle(self.ledger.initialize_deck())
            keys, tx = self.ledger.start_new_hand(
                self.account, command.game_id, deck,
                hand_secret.secret, hand_secret.inverse,
            )
        logger.info("New hand shuffle submitted in phase %s (tx %s)", command.phase, tx.tx_id)
        return SeatedResult(keys=keys, secret=hand_secret)


class DecryptCardsExecutor(_Executor):
    def execute(self, command: DecryptCards) -> DecryptResult:
        keys, tx = submit(self.ledger, self.account, command.game_id, command.step, command.keys)
        logger.info("%s submitted (tx %s)", command.step.label, tx.tx_id)
        return DecryptResult(keys=keys)


class ClaimPrizeExecutor(_Executor):
    def execute(self, command: ClaimPrize):
        return self.ledger.claim_prize(self.account, command.game_id, command.amount)


class CommandRouter:
    """
    Routes commands to executors by command type.

    Usage:
        router = CommandRouter()
        router.register_executor(PollState, PollStateExecutor(context))
        result = router.route(PollState(game_id=7))
    """

    def __init__(self):
        self._executors: Dict[Type[Command], CommandExecutor] = {}

    def register_executor(self, command_type: Type[Command], executor: CommandExecutor) -> None:
        self._executors[command_type] = executor
        logger.debug(f"Registered executor for {command_type.__name__}")

    def get_executor(self, command_type: Type[Command]) -> Optional[CommandExecutor]:
        return self._executors.get(command_type)

    def route(self, command: Command) -> Any:
        """
        Run a command through its executor.

        Raises:
            LookupError: If no executor is registered for the command type
        """
        executor = self._executors.get(type(command))
        if executor is None:
            raise LookupError(f"No executor for command: {command.name}")
        logger.debug(f"Routing {command.name} for game {command.game_id}")
        return executor.execute(command)


EXECUTORS = {
    InitializeGame: InitializeGameExecutor,
    JoinGame: JoinGameExecutor,
    SearchGame: SearchGameExecutor,
    PollState: PollStateExecutor,
    PlaceBet: PlaceBetExecutor,
    Fold: FoldExecutor,
    CompareHands: CompareHandsExecutor,
    StartNewHand: StartNewHandExecutor,
    DecryptCards: DecryptCardsExecutor,
    ClaimPrize: ClaimPrizeExecutor,
}


def build_router(context: SessionContext) -> CommandRouter:
    router = CommandRouter()
    for command_type, executor_cls in EXECUTORS.items():
        router.register_executor(command_type, executor_cls(context))
    return router
