# Area: Ledger
"""
mental_poker._ledger.network - Live-network ledger backend
==========================================================

Reads the poker program's mappings from a node's REST API and submits
transitions through a prover service, which builds the proofs and
broadcasts the transactions.

Mapping values come back as struct literals such as

    {
      player1: aleo1qq...,
      state: 5u8,
      cards: [ 1234group, 5678group ]
    }

parse_literal() turns those into Python values: integer literals lose
their type suffix, everything else (addresses, group and scalar
elements) stays a string so it can be passed back verbatim.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests

from ..errors import LedgerCallError
from .base import (
    Account,
    ChipsRecord,
    EncryptedCards,
    GameRecord,
    Ledger,
    PendingTx,
    RevealedCards,
)

logger = logging.getLogger("mental_poker.ledger.network")

DEFAULT_PROGRAM = "mental_poker.aleo"
DEFAULT_CIPHER_PROGRAM = "commutative_encryption.aleo"
DEFAULT_TIMEOUT_SECONDS = 60

_INTEGER = re.compile(r"^(-?\d+)(u8|u16|u32|u64|u128|i8|i16|i32|i64|i128)$")
_TOKEN = re.compile(r"\s*([{}\[\]:,]|[^\s{}\[\]:,]+)")

# record field -> mapping struct member
GAME_FIELDS = {
    "seat1": "player1",
    "seat2": "player2",
    "seat3": "player3",
    "phase": "state",
    "buy_in": "buy_in",
    "dealer": "dealer_button",
    "last_raise_size": "last_raise_size",
    "big_blind": "big_blind",
    "eliminated": "eliminated",
    "folded": "folded",
}
CARD_FIELDS = {
    "seat1": "player1",
    "seat2": "player2",
    "seat3": "player3",
    "flop": "flop",
    "turn": "turn",
    "river": "river",
}
CHIP_FIELDS = {
    "stack1": "player1",
    "stack2": "player2",
    "stack3": "player3",
    "bet1": "player1_bet",
    "bet2": "player2_bet",
    "bet3": "player3_bet",
}
# empty seats are stored as the zero address
ZERO_ADDRESS = "aleo1qqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqq3ljyzc"


# ══════════════════════════════════════════════════════════════
# LITERAL PARSING
# ══════════════════════════════════════════════════════════════

def _tokenize(text: str) -> List[str]:
    tokens = []
    position = 0
    text = text.strip()
    while position < len(text):
        match = _TOKEN.match(text, position)
        if match is None:
            raise ValueError(f"Cannot tokenize literal at offset {position}: {text!r}")
        tokens.append(match.group(1))
        position = match.end()
        while position < len(text) and text[position].isspace():
            position += 1
    return tokens


def _atom(token: str) -> Any:
    # Strip visibility suffixes such as ".private"
    token = re.sub(r"\.(private|public)$", "", token)
    if token in ("true", "false"):
        return token == "true"
    match = _INTEGER.match(token)
    if match:
        return int(match.group(1))
    return token


def _parse(tokens: List[str], index: int) -> Tuple[Any, int]:
    token = tokens[index]
    if token == "{":
        value: Dict[str, Any] = {}
        index += 1
        while tokens[index] != "}":
            key = tokens[index]
            if tokens[index + 1] != ":":
                raise ValueError(f"Expected ':' after {key!r}")
            value[key], index = _parse(tokens, index + 2)
            if tokens[index] == ",":
                index += 1
        return value, index + 1
    if token == "[":
        items: List[Any] = []
        index += 1
        while tokens[index] != "]":
            item, index = _parse(tokens, index)
            items.append(item)
            if tokens[index] == ",":
                index += 1
        return items, index + 1
    return _atom(token), index + 1


def parse_literal(text: str) -> Any:
    """Parse a struct/array/plain literal as returned by the node."""
    tokens = _tokenize(text)
    if not tokens:
        raise ValueError("Empty literal")
    try:
        value, end = _parse(tokens, 0)
    except IndexError:
        raise ValueError(f"Unterminated literal: {text!r}") from None
    if end != len(tokens):
        raise ValueError(f"Trailing tokens in literal: {tokens[end:]}")
    return value


def format_array(points: Sequence[Any]) -> str:
    return "[" + ", ".join(str(point) for point in points) + "]"


def _remap(value: Dict[str, Any], fields: Dict[str, str]) -> Dict[str, Any]:
    return {ours: value[theirs] for ours, theirs in fields.items() if theirs in value}


# ══════════════════════════════════════════════════════════════
# TRANSPORT
# ══════════════════════════════════════════════════════════════

class ProverClient:
    """
    HTTP access to the node (mapping reads) and the prover (executions).

    Args:
        endpoint: Node base URL, e.g. https://api.explorer.provable.com/v1
        network: Network segment of the REST path (testnet, mainnet)
        prover_url: Base URL of the proving service
        private_key: Signing key forwarded to the prover
    """

    def __init__(
        self,
        endpoint: str,
        network: str,
        prover_url: str,
        private_key: str,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.endpoint = endpoint.rstrip("/")
        self.network = network
        self.prover_url = prover_url.rstrip("/")
        self.private_key = private_key
        self.session = session or requests.Session()
        self.timeout = timeout

    def get_mapping(self, program: str, mapping: str, key: str) -> Optional[Any]:
        url = f"{self.endpoint}/{self.network}/program/{program}/mapping/{mapping}/{key}"
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise LedgerCallError(f"get_mapping:{mapping}", None, str(e), {"key": key}) from e
        if response.status_code == 404:
            return None
        if response.status_code != 200:
            raise LedgerCallError(
                f"get_mapping:{mapping}", None,
                f"HTTP {response.status_code}: {response.text[:200]}", {"key": key},
            )
        body = response.json()
        if body is None:
            return None
        return parse_literal(body) if isinstance(body, str) else body

    def execute(self, program: str, function: str, inputs: List[str], game_id: Optional[int] = None) -> Dict[str, Any]:
        """Run one transition through the prover; returns its JSON reply."""
        payload = {
            "program": program,
            "function": function,
            "inputs": inputs,
            "network": self.network,
            "private_key": self.private_key,
        }
        logger.debug(f"Executing {program}/{function} with {len(inputs)} inputs")
        try:
            response = self.session.post(
                f"{self.prover_url}/execute", json=payload, timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise LedgerCallError(function, game_id, str(e), {"inputs": inputs}) from e
        if response.status_code != 200:
            raise LedgerCallError(
                function, game_id,
                f"prover returned HTTP {response.status_code}: {response.text[:200]}",
                {"inputs": inputs},
            )
        reply = response.json()
        if reply.get("error"):
            raise LedgerCallError(function, game_id, str(reply["error"]), {"inputs": inputs})
        return reply


def _u32(value: int) -> str:
    return f"{value}u32"


def _u16(value: int) -> str:
    return f"{value}u16"


# ══════════════════════════════════════════════════════════════
# LEDGER
# ══════════════════════════════════════════════════════════════

class NetworkLedger(Ledger):
    """Ledger backed by a live network node and a prover service."""

    def __init__(self, client: ProverClient, program: str = DEFAULT_PROGRAM):
        self.client = client
        self.program = program

    # ── Reads ───────────────────────────────────────────────

    def _read(self, mapping: str, game_id: int) -> Optional[Dict[str, Any]]:
        value = self.client.get_mapping(self.program, mapping, _u32(game_id))
        if value is not None and not isinstance(value, dict):
            raise LedgerCallError(f"get_mapping:{mapping}", game_id, f"unexpected value {value!r}")
        return value

    def get_game(self, game_id: int) -> Optional[GameRecord]:
        value = self._read("games", game_id)
        if value is None:
            return None
        fields = _remap(value, GAME_FIELDS)
        for seat in ("seat1", "seat2", "seat3"):
            if fields.get(seat) == ZERO_ADDRESS:
                fields[seat] = ""
        return GameRecord(**fields)

    def get_cards(self, game_id: int) -> Optional[EncryptedCards]:
        value = self._read("cards", game_id)
        return None if value is None else EncryptedCards(**_remap(value, CARD_FIELDS))

    def get_revealed_cards(self, game_id: int) -> Optional[RevealedCards]:
        value = self._read("revealed_cards", game_id)
        return None if value is None else RevealedCards(**_remap(value, CARD_FIELDS))

    def get_chips(self, game_id: int) -> Optional[ChipsRecord]:
        value = self._read("chips", game_id)
        return None if value is None else ChipsRecord(**_remap(value, CHIP_FIELDS))

    def get_deck(self, game_id: int) -> Optional[List[str]]:
        value = self.client.get_mapping(self.program, "decks", _u32(game_id))
        if value is None:
            return None
        if isinstance(value, dict):
            value = value.get("cards")
        return list(value)

    def initialize_deck(self) -> List[str]:
        reply = self.client.execute(DEFAULT_CIPHER_PROGRAM, "initialize_deck", [])
        deck = parse_literal(reply["outputs"][0])
        if len(deck) != 52:
            raise LedgerCallError("initialize_deck", None, f"expected 52 points, got {len(deck)}")
        return deck

    # ── Transitions ─────────────────────────────────────────

    def _transition(self, account: Account, function: str, game_id: int, inputs: List[str]) -> Tuple[Any, PendingTx]:
        reply = self.client.execute(self.program, function, [_u32(game_id)] + inputs, game_id)
        outputs = reply.get("outputs") or []
        tx = PendingTx(tx_id=reply.get("transaction_id", ""), confirmed=bool(reply.get("confirmed")))
        logger.info(f"{function} for game {game_id} by {account.address}: tx {tx.tx_id}")
        return (outputs[0] if outputs else None), tx

    def _keyed(self, account, function, game_id, inputs) -> Tuple[Any, PendingTx]:
        keys, tx = self._transition(account, function, game_id, inputs)
        if keys is None:
            raise LedgerCallError(function, game_id, "prover returned no key record")
        return keys, tx

    def create_game(self, account, game_id, deck, secret, secret_inv, buy_in, big_blind):
        return self._keyed(account, "create_game", game_id, [
            format_array(deck), str(secret), str(secret_inv), _u16(buy_in), _u16(big_blind),
        ])

    def join_game(self, account, game_id, deck, shuffled, secret, secret_inv):
        return self._keyed(account, "join_game", game_id, [
            format_array(deck), format_array(shuffled), str(secret), str(secret_inv),
        ])

    def start_new_hand(self, account, game_id, deck, secret, secret_inv):
        return self._keyed(account, "new_shuffle", game_id, [
            format_array(deck), str(secret), str(secret_inv),
        ])

    def reshuffle(self, account, game_id, deck, shuffled, secret, secret_inv):
        return self._keyed(account, "shuffle", game_id, [
            format_array(deck), format_array(shuffled), str(secret), str(secret_inv),
        ])

    def decrypt_hands(self, account, game_id, points, keys):
        return self._keyed(account, "decrypt_hands", game_id, [format_array(points), str(keys)])

    def decrypt_flop(self, account, game_id, points, keys):
        return self._keyed(account, "decrypt_flop", game_id, [format_array(points), str(keys)])

    def decrypt_turn_or_river(self, account, game_id, point, keys):
        return self._keyed(account, "decrypt_turn_river", game_id, [str(point), str(keys)])

    def showdown(self, account, game_id, points, keys):
        return self._keyed(account, "showdown", game_id, [format_array(points), str(keys)])

    def place_bet(self, account, game_id, amount):
        return self._transition(account, "bet", game_id, [_u16(amount)])[1]

    def fold(self, account, game_id):
        return self._transition(account, "fold", game_id, [])[1]

    def compare_hands(self, account, game_id):
        return self._transition(account, "compare_hands", game_id, [])[1]

    def claim_prize(self, account, game_id, amount):
        return self._transition(account, "claim_prize", game_id, [_u16(amount)])[1]


class RemoteCipher:
    """Commutative cipher evaluated by the prover's encryption program."""

    def __init__(self, client: ProverClient, program: str = DEFAULT_CIPHER_PROGRAM):
        self.client = client
        self.program = program

    def generate_secret(self) -> Tuple[str, str]:
        outputs = self.client.execute(self.program, "generate_secret", [])["outputs"]
        if len(outputs) < 2:
            raise LedgerCallError("generate_secret", None, "prover returned no secret pair")
        return outputs[0], outputs[1]

    def apply(self, point: str, scalar: str) -> str:
        return self.client.execute(self.program, "apply", [str(point), str(scalar)])["outputs"][0]
