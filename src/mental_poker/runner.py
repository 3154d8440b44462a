"""
mental_poker.runner - Main event loop
=====================================

PokerRunner drives one player session in the terminal: render the
table when it changes, read one line of input (or time out into a
Tick), feed the messages to the dispatcher, execute at most one
pending ledger command and feed its outcome back.

HotSeatRunner runs all three seats over one LocalLedger in a single
terminal, for trying the protocol without a network.
"""

from __future__ import annotations

import logging
import select
import signal
import sys
from typing import Any, Dict, List, Optional, TextIO

from ._core.command_router import SessionContext
from ._core.dispatcher import CommandDispatcher
from ._core.messages import (
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
from ._core.model import GameModel, NetworkType, Screen
from ._ledger.base import Account, Ledger
from ._ledger.local import LocalLedger
from ._ledger.network import NetworkLedger, ProverClient, RemoteCipher
from ._runner_config import network_type, poll_interval, validate_config, with_defaults
from ._shared.logging_config import setup_logging
from ._shared.logging_formatters import disable_table_mode, enable_table_mode
from ._shared.table_display import CLEAR, render_table

logger = logging.getLogger("mental_poker.runner")

INPUT_TIMEOUT_SECONDS = 0.1
MAX_INPUT_DIGITS = 20


# ══════════════════════════════════════════════════════════════
# INPUT
# ══════════════════════════════════════════════════════════════

def parse_input(line: str, screen: Screen) -> Optional[List[Any]]:
    """
    Translate one line of text into dispatcher messages.

    Returns None when the line is not a command on this screen.
    """
    words = line.strip().lower().split()
    if not words:
        return []
    verb, args = words[0], words[1:]
    if verb in ("quit", "q", "exit"):
        return [Quit()]

    if screen is Screen.GAME_ID_INPUT:
        if verb == "search":
            return [SearchGames()]
        digits = args[0] if verb == "id" and args else verb
        if digits.isdigit():
            clear = [Backspace() for _ in range(MAX_INPUT_DIGITS)]
            return clear + [CharInput(c) for c in digits] + [ConfirmGameId()]
        return None

    if verb in ("call", "check", "c"):
        return [Call()]
    if verb in ("fold", "f"):
        return [FoldHand()]
    if verb in ("raise", "r", "bet") and args and args[0].isdigit():
        return [Raise(int(args[0]))]
    return None


def read_line(stream: TextIO, timeout: float) -> Optional[str]:
    """One line from stream, or None if nothing arrives within timeout."""
    ready, _, _ = select.select([stream], [], [], timeout)
    if not ready:
        return None
    line = stream.readline()
    if line == "":
        # EOF behaves like quit
        return "quit"
    return line


# ══════════════════════════════════════════════════════════════
# SESSION CONSTRUCTION
# ══════════════════════════════════════════════════════════════

def build_dispatcher(
    config: Dict[str, Any],
    ledger: Optional[Ledger] = None,
    account: Optional[Account] = None,
) -> CommandDispatcher:
    """
    Wire ledger, cipher, account and model for one session.

    A ledger passed in (hot-seat, tests) is used as is; otherwise the
    configured network decides between LocalLedger and NetworkLedger.
    """
    network = network_type(config)
    if ledger is None:
        if network is NetworkType.LOCAL:
            ledger = LocalLedger()
        else:
            client = ProverClient(
                endpoint=config["endpoint"],
                network=network.value,
                prover_url=config["prover_url"],
                private_key=config["private_key"],
            )
            ledger = NetworkLedger(client, program=config.get("program", "mental_poker.aleo"))
    if isinstance(ledger, NetworkLedger):
        cipher = RemoteCipher(ledger.client)
    else:
        cipher = ledger.cipher
    if account is None:
        account = Account(
            address=config.get("address") or "local-player",
            private_key=config.get("private_key", ""),
        )

    model = GameModel(network_type=network, poll_interval=poll_interval(config))
    context = SessionContext.build(ledger, account, cipher)
    return CommandDispatcher(
        model,
        context,
        buy_in=config["buy_in"],
        big_blind=config["big_blind"],
        search_start=config["search_start"],
        search_count=config["search_limit"],
    )


def drain(dispatcher: CommandDispatcher, message: Any) -> None:
    """Feed a message and every follow-up it chains."""
    while message is not None:
        message = dispatcher.update(message)


def step(dispatcher: CommandDispatcher, messages: List[Any]) -> None:
    """Feed messages, run at most one pending command, feed back its outcome."""
    for message in messages:
        drain(dispatcher, message)
    drain(dispatcher, dispatcher.execute_pending_command())


# ══════════════════════════════════════════════════════════════
# RUNNERS
# ══════════════════════════════════════════════════════════════

class PokerRunner:
    """
    Terminal front end for one seat.

    Usage
    -----
        from mental_poker import PokerRunner

        config = {"network": "local", "buy_in": 1000, "big_blind": 20}
        PokerRunner(config=config).run()
    """

    def __init__(
        self,
        config: Dict[str, Any],
        ledger: Optional[Ledger] = None,
        stdin: TextIO = sys.stdin,
        stdout: TextIO = sys.stdout,
    ):
        self.config = with_defaults(config)
        setup_logging(log_file_path=self.config["log_file"])
        validate_config(self.config)

        self.stdin = stdin
        self.stdout = stdout
        self.dispatcher = build_dispatcher(self.config, ledger)
        self._running = False
        self._last_frame: Optional[str] = None

    @property
    def model(self) -> GameModel:
        return self.dispatcher.model

    # ── Main loop ─────────────────────────────────────────────

    def run(self) -> None:
        """Start the session loop. Blocks until quit or Ctrl+C."""
        self._running = True

        def _signal_handler(sig, frame):
            logger.info("Shutting down gracefully...")
            self._running = False
        signal.signal(signal.SIGINT, _signal_handler)

        logger.info("=" * 60)
        logger.info("  Mental Poker - Starting")
        logger.info(f"  Network:  {self.model.network_type.display_name}")
        logger.info(f"  Account:  {self.dispatcher.context.account.address}")
        logger.info(f"  Poll:     every {self.model.effective_poll_interval}s")
        logger.info("=" * 60)

        enable_table_mode()
        try:
            while self._running and not self.model.should_quit:
                self._render()
                try:
                    line = read_line(self.stdin, INPUT_TIMEOUT_SECONDS)
                    self.handle_line(line)
                except KeyboardInterrupt:
                    break
                except Exception as e:
                    logger.error(f"Loop error: {e}", exc_info=True)
        finally:
            disable_table_mode()
        logger.info("Runner stopped.")

    def handle_line(self, line: Optional[str]) -> None:
        """One loop iteration for an input line (None: timeout)."""
        messages: List[Any] = []
        if line is not None:
            parsed = parse_input(line, self.model.screen)
            if parsed is None:
                self.model.log(f"Unknown command: {line.strip()}")
            else:
                messages.extend(parsed)
        messages.append(Tick())
        step(self.dispatcher, messages)

    def _render(self) -> None:
        frame = render_table(self.model)
        if frame != self._last_frame:
            self.stdout.write(CLEAR + frame + "\n> ")
            self.stdout.flush()
            self._last_frame = frame


class HotSeatRunner:
    """
    Three seats, one terminal, one LocalLedger.

    Input goes to the seat on screen (`next`/`prev` to switch); every
    seat receives Tick and executes its own pending command each loop.
    """

    SEATS = 3

    def __init__(
        self,
        config: Dict[str, Any],
        stdin: TextIO = sys.stdin,
        stdout: TextIO = sys.stdout,
    ):
        self.config = with_defaults(dict(config, network="local"))
        setup_logging(log_file_path=self.config["log_file"])
        validate_config(self.config)

        self.ledger = LocalLedger()
        self.dispatchers = [
            build_dispatcher(
                self.config, ledger=self.ledger,
                account=Account(address=f"hotseat-player-{index + 1}"),
            )
            for index in range(self.SEATS)
        ]
        self.active = 0
        self.stdin = stdin
        self.stdout = stdout
        self._running = False
        self._last_frame: Optional[str] = None

    @property
    def current(self) -> CommandDispatcher:
        return self.dispatchers[self.active]

    def run(self) -> None:
        self._running = True

        def _signal_handler(sig, frame):
            self._running = False
        signal.signal(signal.SIGINT, _signal_handler)

        enable_table_mode()
        try:
            while self._running and not self.current.model.should_quit:
                self._render()
                try:
                    self.handle_line(read_line(self.stdin, INPUT_TIMEOUT_SECONDS))
                except KeyboardInterrupt:
                    break
                except Exception as e:
                    logger.error(f"Loop error: {e}", exc_info=True)
        finally:
            disable_table_mode()

    def handle_line(self, line: Optional[str]) -> None:
        command = (line or "").strip().lower()
        if command in ("next", "n"):
            self.active = (self.active + 1) % self.SEATS
        elif command in ("prev", "p"):
            self.active = (self.active - 1) % self.SEATS
        elif line is not None:
            parsed = parse_input(line, self.current.model.screen)
            if parsed is None:
                self.current.model.log(f"Unknown command: {line.strip()}")
            else:
                for message in parsed:
                    drain(self.current, message)

        for dispatcher in self.dispatchers:
            step(dispatcher, [Tick()])

    def _render(self) -> None:
        header = f" Hot seat: view {self.active + 1}/{self.SEATS} (next/prev to switch)\n"
        frame = header + render_table(self.current.model)
        if frame != self._last_frame:
            self.stdout.write(CLEAR + frame + "\n> ")
            self.stdout.flush()
            self._last_frame = frame
