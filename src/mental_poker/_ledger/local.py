# Area: Ledger
"""
mental_poker._ledger.local - In-process contract simulation
===========================================================

LocalLedger plays the poker contract's part for the LOCAL network type
and for tests: it keeps every game in memory, enforces the phase rules,
applies the commutative cipher to card points, and settles hands with
treys.

Table rules:
- The creator takes seat 1; seats 2 and 3 join in order
- Seat 3 deals the first hand; the button moves to the next live seat
  after every hand
- Small blind is big_blind // 2, posted left of the dealer
- Bets accumulate over the hand; last_raise_size resets every street
- Eliminated seats are skipped everywhere; folded seats skip showdown
- Keys are versioned: each transition consumes one version and hands
  back the next, so stale keys are rejected
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from treys import Card, Evaluator

from ..errors import LedgerCallError
from .._core.cards import FACE_DOWN, CardLookupTable, card_code
from .._core.phases import Phase, Street, acting_seat
from .base import (
    Account,
    ChipsRecord,
    EncryptedCards,
    GameRecord,
    Ledger,
    PendingTx,
    RevealedCards,
)
from .cipher import SraCipher

logger = logging.getLogger("mental_poker.ledger.local")

SEATS = (1, 2, 3)

_DECRYPT_BASE = {
    "hands": Phase.DECRYPT_HANDS_P1,
    "flop": Phase.DECRYPT_FLOP_P1,
    "turn": Phase.DECRYPT_TURN_P1,
    "river": Phase.DECRYPT_RIVER_P1,
}
_BET_BASE = {
    Street.PREFLOP: Phase.BET_PREFLOP_P1,
    Street.FLOP: Phase.BET_FLOP_P1,
    Street.TURN: Phase.BET_TURN_P1,
    Street.RIVER: Phase.BET_RIVER_P1,
}
# decrypt stage -> street whose betting follows it
_STAGE_STREET = {
    "hands": Street.PREFLOP,
    "flop": Street.FLOP,
    "turn": Street.TURN,
    "river": Street.RIVER,
}
# street -> decrypt stage that follows its betting (None: showdown)
_NEXT_STAGE = {
    Street.PREFLOP: "flop",
    Street.FLOP: "turn",
    Street.TURN: "river",
    Street.RIVER: None,
}


def _seat_phase(base: Phase, seat: int) -> Phase:
    return Phase(int(base) + seat - 1)


def _bitmap(flags: Sequence[bool]) -> int:
    return sum(1 << index for index, flag in enumerate(flags) if flag)


@dataclass(frozen=True)
class LocalKeys:
    """Versioned secret material for one seat of one game."""
    game_id: int
    seat: int
    secret: int = field(repr=False)
    secret_inv: int = field(repr=False)
    nonce: int = 0


@dataclass
class _Table:
    seats: List[str]
    buy_in: int
    big_blind: int
    phase: Phase = Phase.WAITING_FOR_SEAT2
    stacks: List[int] = field(default_factory=lambda: [0, 0, 0])
    bets: List[int] = field(default_factory=lambda: [0, 0, 0])
    dealer: int = 3
    big_blind_seat: int = 2
    last_raise_size: int = 0
    eliminated: List[bool] = field(default_factory=lambda: [False, False, False])
    folded: List[bool] = field(default_factory=lambda: [False, False, False])
    deck: List[int] = field(default_factory=list)
    hands: Optional[List[List[int]]] = None
    flop: List[int] = field(default_factory=list)
    turn: int = 0
    river: int = 0
    revealed_hands: List[List[int]] = field(
        default_factory=lambda: [[FACE_DOWN, FACE_DOWN] for _ in SEATS]
    )
    revealed_board: List[int] = field(default_factory=lambda: [FACE_DOWN] * 5)
    acted: Set[int] = field(default_factory=set)
    street: Optional[Street] = None
    nonces: Dict[int, int] = field(default_factory=dict)
    claimed: bool = False

    def active(self) -> List[int]:
        return [seat for seat in SEATS if not self.eliminated[seat - 1]]

    def in_hand(self) -> List[int]:
        return [seat for seat in self.active() if not self.folded[seat - 1]]

    def can_act(self) -> List[int]:
        return [seat for seat in self.in_hand() if self.stacks[seat - 1] > 0]

    def next_seat(self, after: int, candidates: Sequence[int]) -> Optional[int]:
        """First candidate clockwise after `after` (wrapping)."""
        for offset in (1, 2, 3):
            seat = (after - 1 + offset) % 3 + 1
            if seat in candidates:
                return seat
        return None

    def first_after(self, after: int, candidates: Sequence[int]) -> Optional[int]:
        """First candidate with a higher seat number (no wrapping)."""
        for seat in candidates:
            if seat > after:
                return seat
        return None


class LocalLedger(Ledger):
    """
    In-memory poker contract.

    Usage:
        ledger = LocalLedger()
        ledger.fail_next("decrypt_flop", "proof rejected")
    """

    def __init__(self, cipher: Optional[SraCipher] = None):
        self.cipher = cipher or SraCipher()
        self.lookup = CardLookupTable(self.cipher.initial_deck())
        self.evaluator = Evaluator()
        self._tables: Dict[int, _Table] = {}
        self._failures: Dict[str, str] = {}
        self._tx_counter = itertools.count(1)

    # ══════════════════════════════════════════════════════════
    # TEST HOOKS
    # ══════════════════════════════════════════════════════════

    def fail_next(self, operation: str, reason: str = "injected failure") -> None:
        """Make the next call to `operation` raise LedgerCallError."""
        self._failures[operation] = reason

    # ══════════════════════════════════════════════════════════
    # READS
    # ══════════════════════════════════════════════════════════

    def get_game(self, game_id: int) -> Optional[GameRecord]:
        table = self._tables.get(game_id)
        if table is None:
            return None
        return GameRecord(
            seat1=table.seats[0],
            seat2=table.seats[1],
            seat3=table.seats[2],
            phase=int(table.phase),
            buy_in=table.buy_in,
            dealer=1 << (table.dealer - 1),
            last_raise_size=table.last_raise_size,
            big_blind=table.big_blind,
            eliminated=_bitmap(table.eliminated),
            folded=_bitmap(table.folded),
        )

    def get_cards(self, game_id: int) -> Optional[EncryptedCards]:
        table = self._tables.get(game_id)
        if table is None or table.hands is None:
            return None
        return EncryptedCards(
            seat1=table.hands[0],
            seat2=table.hands[1],
            seat3=table.hands[2],
            flop=table.flop,
            turn=table.turn,
            river=table.river,
        )

    def get_revealed_cards(self, game_id: int) -> Optional[RevealedCards]:
        table = self._tables.get(game_id)
        if table is None:
            return None
        return RevealedCards(
            seat1=table.revealed_hands[0],
            seat2=table.revealed_hands[1],
            seat3=table.revealed_hands[2],
            flop=table.revealed_board[:3],
            turn=table.revealed_board[3],
            river=table.revealed_board[4],
        )

    def get_chips(self, game_id: int) -> Optional[ChipsRecord]:
        table = self._tables.get(game_id)
        if table is None:
            return None
        return ChipsRecord(
            stack1=table.stacks[0], stack2=table.stacks[1], stack3=table.stacks[2],
            bet1=table.bets[0], bet2=table.bets[1], bet3=table.bets[2],
        )

    def get_deck(self, game_id: int) -> Optional[List[int]]:
        table = self._tables.get(game_id)
        if table is None or not table.deck:
            return None
        return list(table.deck)

    def initialize_deck(self) -> List[int]:
        return self.cipher.initial_deck()

    # ══════════════════════════════════════════════════════════
    # DECK TRANSITIONS
    # ══════════════════════════════════════════════════════════

    def create_game(self, account, game_id, deck, secret, secret_inv, buy_in, big_blind):
        op = "create_game"
        self._maybe_fail(op, game_id)
        if game_id in self._tables:
            raise LedgerCallError(op, game_id, "game already exists")
        if big_blind < 2 or buy_in < big_blind:
            raise LedgerCallError(op, game_id, f"invalid stakes buy_in={buy_in} big_blind={big_blind}")
        self._require_permutation(op, game_id, self.initialize_deck(), deck)

        table = _Table(seats=[account.address, "", ""], buy_in=buy_in, big_blind=big_blind)
        table.stacks = [buy_in] * 3
        table.deck = self._encrypt(deck, secret)
        self._tables[game_id] = table
        logger.info(f"Game {game_id} created by {account.address}")
        return self._issue_keys(table, game_id, 1, secret, secret_inv), self._tx(op)

    def join_game(self, account, game_id, deck, shuffled, secret, secret_inv):
        op = "join_game"
        self._maybe_fail(op, game_id)
        table = self._require_table(op, game_id)
        if table.phase not in (Phase.WAITING_FOR_SEAT2, Phase.WAITING_FOR_SEAT3):
            raise LedgerCallError(op, game_id, "game is full")
        if account.address in table.seats:
            raise LedgerCallError(op, game_id, "already seated")
        if list(deck) != table.deck:
            raise LedgerCallError(op, game_id, "deck is stale")
        self._require_permutation(op, game_id, deck, shuffled)

        seat = 2 if table.phase == Phase.WAITING_FOR_SEAT2 else 3
        table.seats[seat - 1] = account.address
        table.deck = self._encrypt(shuffled, secret)
        keys = self._issue_keys(table, game_id, seat, secret, secret_inv)
        if seat == 2:
            table.phase = Phase.WAITING_FOR_SEAT3
        else:
            self._deal(table)
        logger.info(f"{account.address} joined game {game_id} as seat {seat}")
        return keys, self._tx(op)

    def start_new_hand(self, account, game_id, deck, secret, secret_inv):
        op = "start_new_hand"
        self._maybe_fail(op, game_id)
        table = self._require_table(op, game_id)
        seat = self._require_turn(op, game_id, table, account, (Phase.NEW_SHUFFLE_P1, Phase.NEW_SHUFFLE_P2))
        self._require_permutation(op, game_id, self.initialize_deck(), deck)

        table.deck = self._encrypt(deck, secret)
        keys = self._issue_keys(table, game_id, seat, secret, secret_inv)
        self._after_shuffle(table, seat)
        return keys, self._tx(op)

    def reshuffle(self, account, game_id, deck, shuffled, secret, secret_inv):
        op = "reshuffle"
        self._maybe_fail(op, game_id)
        table = self._require_table(op, game_id)
        seat = self._require_turn(op, game_id, table, account, (Phase.SHUFFLE_P2, Phase.SHUFFLE_P3))
        if list(deck) != table.deck:
            raise LedgerCallError(op, game_id, "deck is stale")
        self._require_permutation(op, game_id, deck, shuffled)

        table.deck = self._encrypt(shuffled, secret)
        keys = self._issue_keys(table, game_id, seat, secret, secret_inv)
        self._after_shuffle(table, seat)
        return keys, self._tx(op)

    # ══════════════════════════════════════════════════════════
    # DECRYPTION TRANSITIONS
    # ══════════════════════════════════════════════════════════

    def decrypt_hands(self, account, game_id, points, keys):
        return self._decrypt_stage("decrypt_hands", "hands", account, game_id, points, keys)

    def decrypt_flop(self, account, game_id, points, keys):
        return self._decrypt_stage("decrypt_flop", "flop", account, game_id, points, keys)

    def decrypt_turn_or_river(self, account, game_id, point, keys):
        table = self._require_table("decrypt_turn_or_river", game_id)
        stage = "river" if table.phase >= Phase.DECRYPT_RIVER_P1 else "turn"
        return self._decrypt_stage("decrypt_turn_or_river", stage, account, game_id, [point], keys)

    def showdown(self, account, game_id, points, keys):
        op = "showdown"
        self._maybe_fail(op, game_id)
        table = self._require_table(op, game_id)
        seat = self._require_turn(op, game_id, table, account, _phases(Phase.SHOWDOWN_P1))
        if list(points) != table.hands[seat - 1]:
            raise LedgerCallError(op, game_id, "hand points do not match the table")
        keys = self._consume_keys(op, game_id, table, seat, keys)

        plain = [self.cipher.apply(point, keys.secret_inv) for point in points]
        table.hands[seat - 1] = plain
        table.revealed_hands[seat - 1] = [self.lookup.index_of(point) for point in plain]

        following = table.first_after(seat, table.in_hand())
        if following is not None:
            table.phase = _seat_phase(Phase.SHOWDOWN_P1, following)
        else:
            table.phase = Phase.COMPARE
        return self._next_keys(table, game_id, seat, keys), self._tx(op)

    # ══════════════════════════════════════════════════════════
    # CHIP TRANSITIONS
    # ══════════════════════════════════════════════════════════

    def place_bet(self, account, game_id, amount):
        op = "place_bet"
        self._maybe_fail(op, game_id)
        table = self._require_table(op, game_id)
        seat = self._require_turn(op, game_id, table, account, _betting_phases())
        index = seat - 1
        stack = table.stacks[index]
        if amount < 0 or amount > stack:
            raise LedgerCallError(op, game_id, f"bet {amount} outside [0, {stack}]", {"amount": amount})

        highest = max(table.bets)
        new_bet = table.bets[index] + amount
        all_in = amount == stack
        if new_bet < highest and not all_in:
            raise LedgerCallError(op, game_id, f"bet {amount} does not call {highest - table.bets[index]}",
                                  {"amount": amount})
        increment = table.last_raise_size or table.big_blind
        if new_bet > highest:
            raised_by = new_bet - highest
            if raised_by < increment and not all_in:
                raise LedgerCallError(op, game_id, f"raise of {raised_by} below minimum {increment}",
                                      {"amount": amount})
            if raised_by >= increment:
                table.last_raise_size = raised_by
            table.acted = {seat}
        else:
            table.acted.add(seat)

        table.stacks[index] -= amount
        table.bets[index] = new_bet
        self._advance_betting(table, seat)
        return self._tx(op)

    def fold(self, account, game_id):
        op = "fold"
        self._maybe_fail(op, game_id)
        table = self._require_table(op, game_id)
        seat = self._require_turn(op, game_id, table, account, _betting_phases())
        table.folded[seat - 1] = True
        table.acted.add(seat)
        self._advance_betting(table, seat)
        return self._tx(op)

    def compare_hands(self, account, game_id):
        op = "compare_hands"
        self._maybe_fail(op, game_id)
        table = self._require_table(op, game_id)
        if table.phase != Phase.COMPARE:
            raise LedgerCallError(op, game_id, f"not in compare phase (phase {int(table.phase)})")
        if table.seats[table.dealer - 1] != account.address:
            raise LedgerCallError(op, game_id, "only the dealer may compare hands")

        awards = self._settle(op, game_id, table)
        for seat, amount in awards.items():
            table.stacks[seat - 1] += amount
        table.bets = [0, 0, 0]
        for seat in table.active():
            if table.stacks[seat - 1] == 0:
                table.eliminated[seat - 1] = True
                logger.info(f"Game {game_id}: seat {seat} eliminated")
        table.folded = [False, False, False]
        table.last_raise_size = 0
        table.street = None

        active = table.active()
        if len(active) == 1:
            table.phase = _seat_phase(Phase.CLAIM_P1, active[0])
        else:
            table.dealer = table.next_seat(table.dealer, active)
            starter = next(seat for seat in active if seat in (1, 2))
            table.phase = Phase.NEW_SHUFFLE_P1 if starter == 1 else Phase.NEW_SHUFFLE_P2
        logger.info(f"Game {game_id}: hand settled, awards {awards}")
        return self._tx(op)

    def claim_prize(self, account, game_id, amount):
        op = "claim_prize"
        self._maybe_fail(op, game_id)
        table = self._require_table(op, game_id)
        seat = self._require_turn(op, game_id, table, account, _phases(Phase.CLAIM_P1))
        if table.claimed:
            raise LedgerCallError(op, game_id, "prize already claimed")
        if amount != table.stacks[seat - 1]:
            raise LedgerCallError(op, game_id, f"claim of {amount} does not match stack",
                                  {"amount": amount})
        table.claimed = True
        return self._tx(op)

    # ══════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════

    def _maybe_fail(self, op: str, game_id: int) -> None:
        reason = self._failures.pop(op, None)
        if reason is not None:
            raise LedgerCallError(op, game_id, reason)

    def _tx(self, op: str) -> PendingTx:
        return PendingTx(tx_id=f"local-{op}-{next(self._tx_counter)}", confirmed=True)

    def _require_table(self, op: str, game_id: int) -> _Table:
        table = self._tables.get(game_id)
        if table is None:
            raise LedgerCallError(op, game_id, "game does not exist")
        return table

    def _require_turn(self, op, game_id, table: _Table, account: Account, phases) -> int:
        """Seat of `account`, which must be the seat the current phase waits on."""
        if table.phase not in phases:
            raise LedgerCallError(op, game_id, f"not allowed in phase {int(table.phase)}")
        if account.address not in table.seats:
            raise LedgerCallError(op, game_id, f"{account.address} is not seated")
        seat = table.seats.index(account.address) + 1
        expected = acting_seat(table.phase)
        if seat != expected:
            raise LedgerCallError(op, game_id, f"waiting on seat {expected}, not seat {seat}")
        return seat

    def _require_permutation(self, op, game_id, deck, shuffled) -> None:
        if len(shuffled) != len(deck) or sorted(shuffled) != sorted(deck):
            raise LedgerCallError(op, game_id, "shuffled deck is not a permutation of the deck")

    def _encrypt(self, points: Sequence[int], secret: int) -> List[int]:
        return [self.cipher.apply(point, secret) for point in points]

    def _issue_keys(self, table: _Table, game_id: int, seat: int, secret, secret_inv) -> LocalKeys:
        nonce = table.nonces.get(seat, 0) + 1
        table.nonces[seat] = nonce
        return LocalKeys(game_id=game_id, seat=seat, secret=secret, secret_inv=secret_inv, nonce=nonce)

    def _consume_keys(self, op, game_id, table: _Table, seat: int, keys) -> LocalKeys:
        if not isinstance(keys, LocalKeys):
            raise LedgerCallError(op, game_id, "keys are not local keys")
        if keys.game_id != game_id or keys.seat != seat:
            raise LedgerCallError(op, game_id, "keys belong to another seat or game")
        if keys.nonce != table.nonces.get(seat):
            raise LedgerCallError(op, game_id, "stale keys")
        return keys

    def _next_keys(self, table: _Table, game_id: int, seat: int, keys: LocalKeys) -> LocalKeys:
        return self._issue_keys(table, game_id, seat, keys.secret, keys.secret_inv)

    # ── Hand flow ───────────────────────────────────────────

    def _deal(self, table: _Table) -> None:
        deck = table.deck
        table.hands = [list(deck[0:2]), list(deck[2:4]), list(deck[4:6])]
        table.flop = list(deck[6:9])
        table.turn = deck[9]
        table.river = deck[10]
        table.revealed_hands = [[FACE_DOWN, FACE_DOWN] for _ in SEATS]
        table.revealed_board = [FACE_DOWN] * 5
        table.bets = [0, 0, 0]
        table.folded = [False, False, False]
        table.claimed = False

        active = table.active()
        if len(active) == 2:
            small = table.dealer
        else:
            small = table.next_seat(table.dealer, active)
        big = table.next_seat(small, active)
        self._post(table, small, table.big_blind // 2)
        self._post(table, big, table.big_blind)
        table.big_blind_seat = big
        table.phase = _seat_phase(Phase.DECRYPT_HANDS_P1, active[0])

    def _post(self, table: _Table, seat: int, amount: int) -> None:
        amount = min(amount, table.stacks[seat - 1])
        table.stacks[seat - 1] -= amount
        table.bets[seat - 1] += amount

    def _after_shuffle(self, table: _Table, seat: int) -> None:
        following = table.first_after(seat, table.active())
        if following is None:
            self._deal(table)
        else:
            table.phase = Phase.SHUFFLE_P2 if following == 2 else Phase.SHUFFLE_P3

    def _decrypt_stage(self, op, stage, account, game_id, points, keys):
        self._maybe_fail(op, game_id)
        table = self._require_table(op, game_id)
        seat = self._require_turn(op, game_id, table, account, _phases(_DECRYPT_BASE[stage]))
        targets = self._stage_points(table, stage, seat)
        if list(points) != [point for _, point in targets]:
            raise LedgerCallError(op, game_id, f"{stage} points do not match the table")
        keys = self._consume_keys(op, game_id, table, seat, keys)

        for (slot, _), point in zip(targets, points):
            self._store_point(table, slot, self.cipher.apply(point, keys.secret_inv))

        following = table.first_after(seat, table.active())
        if following is not None:
            table.phase = _seat_phase(_DECRYPT_BASE[stage], following)
        else:
            if stage != "hands":
                self._reveal_board(table, stage)
            self._begin_betting(table, _STAGE_STREET[stage])
        return self._next_keys(table, game_id, seat, keys), self._tx(op)

    def _stage_points(self, table: _Table, stage: str, seat: int) -> List[Tuple[Tuple, int]]:
        """(slot, point) pairs the seat must strip in this stage."""
        if stage == "hands":
            return [
                (("hand", other, card), table.hands[other - 1][card])
                for other in SEATS if other != seat
                for card in (0, 1)
            ]
        if stage == "flop":
            return [(("flop", card), table.flop[card]) for card in range(3)]
        return [((stage,), table.turn if stage == "turn" else table.river)]

    def _store_point(self, table: _Table, slot: Tuple, point: int) -> None:
        if slot[0] == "hand":
            table.hands[slot[1] - 1][slot[2]] = point
        elif slot[0] == "flop":
            table.flop[slot[1]] = point
        elif slot[0] == "turn":
            table.turn = point
        else:
            table.river = point

    def _reveal_board(self, table: _Table, stage: str) -> None:
        if stage == "flop":
            table.revealed_board[:3] = [self.lookup.index_of(point) for point in table.flop]
        elif stage == "turn":
            table.revealed_board[3] = self.lookup.index_of(table.turn)
        else:
            table.revealed_board[4] = self.lookup.index_of(table.river)

    def _begin_betting(self, table: _Table, street: Street) -> None:
        table.street = street
        table.acted = set()
        table.last_raise_size = 0
        if len(table.in_hand()) == 1:
            table.phase = Phase.COMPARE
            return
        if street is Street.PREFLOP:
            first = table.next_seat(table.big_blind_seat, self._pending_actors(table))
        else:
            first = table.next_seat(table.dealer, self._pending_actors(table))
        if first is None:
            self._end_betting(table, street)
        else:
            table.phase = _seat_phase(_BET_BASE[street], first)

    def _pending_actors(self, table: _Table) -> List[int]:
        can_act = table.can_act()
        highest = max(table.bets)
        return [
            seat for seat in can_act
            if table.bets[seat - 1] < highest or (seat not in table.acted and len(can_act) > 1)
        ]

    def _advance_betting(self, table: _Table, seat: int) -> None:
        if len(table.in_hand()) == 1:
            table.phase = Phase.COMPARE
            return
        following = table.next_seat(seat, self._pending_actors(table))
        if following is None:
            self._end_betting(table, table.street)
        else:
            table.phase = _seat_phase(_BET_BASE[table.street], following)

    def _end_betting(self, table: _Table, street: Street) -> None:
        stage = _NEXT_STAGE[street]
        if stage is None:
            table.phase = _seat_phase(Phase.SHOWDOWN_P1, table.in_hand()[0])
        else:
            table.phase = _seat_phase(_DECRYPT_BASE[stage], table.active()[0])

    # ── Settlement ──────────────────────────────────────────

    def _settle(self, op: str, game_id: int, table: _Table) -> Dict[int, int]:
        """Split the bets into pots and award each to its best contender(s)."""
        in_hand = table.in_hand()
        if len(in_hand) == 1:
            return {in_hand[0]: sum(table.bets)}

        scores = {seat: self._score(op, game_id, table, seat) for seat in in_hand}
        remaining = list(table.bets)
        awards: Dict[int, int] = {}
        while any(remaining):
            contenders = [seat for seat in in_hand if remaining[seat - 1] > 0] or in_hand
            level = min(remaining[seat - 1] for seat in contenders) or max(remaining)
            pot = 0
            for index in range(3):
                taken = min(remaining[index], level)
                remaining[index] -= taken
                pot += taken
            best = min(scores[seat] for seat in contenders)
            winners = [seat for seat in contenders if scores[seat] == best]
            share, odd = divmod(pot, len(winners))
            for position, seat in enumerate(winners):
                awards[seat] = awards.get(seat, 0) + share + (odd if position == 0 else 0)
        return awards

    def _score(self, op: str, game_id: int, table: _Table, seat: int) -> int:
        hand = table.revealed_hands[seat - 1]
        cards = list(hand) + list(table.revealed_board)
        if FACE_DOWN in cards:
            raise LedgerCallError(op, game_id, f"cards of seat {seat} are not revealed")
        board = [Card.new(card_code(index)) for index in table.revealed_board]
        return self.evaluator.evaluate(board, [Card.new(card_code(index)) for index in hand])


def _phases(base: Phase) -> Tuple[Phase, Phase, Phase]:
    return tuple(_seat_phase(base, seat) for seat in SEATS)


def _betting_phases() -> Tuple[Phase, ...]:
    return tuple(itertools.chain.from_iterable(_phases(base) for base in _BET_BASE.values()))
