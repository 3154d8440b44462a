# Area: Shared
"""
mental_poker._shared.table_display - Text rendering of a session
================================================================

render_table() turns a GameModel into a colored text frame. It only
reads the model; all state changes go through the dispatcher.
"""

from __future__ import annotations

from typing import List, Optional

from .._core.cards import FACE_DOWN, CardView, card_suit, format_card, is_valid_card
from .._core.chips import betting_bounds
from .._core.dispatcher import format_deltas
from .._core.model import GameModel, Screen
from .._core.phases import acting_seat, describe, is_betting

# ══════════════════════════════════════════════════════════════
# ANSI COLOR CODES
# ══════════════════════════════════════════════════════════════

RED = "\033[31m"
WHITE = "\033[97m"
DIM = "\033[2m"
YELLOW = "\033[33m"
GREEN = "\033[32m"
BOLD = "\033[1m"
RESET = "\033[0m"
CLEAR = "\033[2J\033[H"

LOG_TAIL = 6
RULE = "─" * 56


def color_card(index: int) -> str:
    """Card label colored by suit; face-down dimmed, invalid red."""
    text = format_card(index)
    if index == FACE_DOWN:
        return f"{DIM}{text}{RESET}"
    if not is_valid_card(index):
        return f"{RED}{BOLD}{text}{RESET}"
    color = RED if card_suit(index) in (2, 3) else WHITE
    return f"{color}{text}{RESET}"


def _cards(indices) -> str:
    return " ".join(color_card(index) for index in indices)


def _seat_line(model: GameModel, view: CardView, seat: int) -> str:
    tags = []
    if model.dealer_seat == seat:
        tags.append("D")
    if model.local_seat == seat:
        tags.append("you")
    label = f"P{seat}" + (f" ({', '.join(tags)})" if tags else "")

    line = f" {label:<12} {_cards(view.hand(seat))}"
    if model.chips is not None:
        line += f"   stack {model.chips.stack(seat):>5}   bet {model.chips.bet(seat):>5}"
        if model.street_bets is not None and model.street_bets[seat - 1]:
            line += f" (+{model.street_bets[seat - 1]} this street)"
    if model.eliminated[seat - 1]:
        line += f"  {DIM}out{RESET}"
    elif model.folded[seat - 1]:
        line += f"  {DIM}folded{RESET}"
    phase = model.current_phase
    if phase is not None and acting_seat(phase) == seat:
        line += f"  {YELLOW}◀{RESET}"
    return line


def _betting_prompt(model: GameModel) -> Optional[str]:
    seat, phase = model.local_seat, model.current_phase
    if seat is None or phase is None or model.chips is None or model.winner is not None:
        return None
    if not is_betting(phase) or acting_seat(phase) != seat:
        return None
    bounds = betting_bounds(model.chips, seat, model.last_raise_size, model.big_blind)
    call = "check" if bounds.call_amount == 0 else f"call {bounds.call_amount}"
    parts = [call]
    if bounds.can_raise:
        parts.append(f"raise {bounds.min_raise}..{bounds.max_raise}")
    parts.append("fold")
    return f" {GREEN}{BOLD}Your turn:{RESET} " + " │ ".join(parts)


def render_game_id_input(model: GameModel) -> List[str]:
    return [
        f" {BOLD}Mental Poker{RESET} ({model.network_type.display_name})",
        "",
        f" Game id: {model.game_id_input}_",
        "",
        " id <n>  join or create   │   search  find a game   │   quit",
    ]


def render_in_game(model: GameModel) -> List[str]:
    view = model.cards or CardView()
    who = "spectating" if model.spectating else f"Player {model.local_seat}"
    lines = [
        f" {BOLD}Game {model.game_id}{RESET} │ {who} │ "
        + (f"State {model.raw_phase}: {describe(model.raw_phase)}" if model.raw_phase is not None
           else "Waiting for state"),
        RULE,
    ]
    pot = f"   pot {model.chips.pot}" if model.chips is not None else ""
    lines.append(f" Board        {_cards(view.community())}{pot}")
    lines.append("")
    for seat in (1, 2, 3):
        lines.append(_seat_line(model, view, seat))
    lines.append(RULE)
    if model.chip_deltas is not None:
        lines.append(f" Last hand: {format_deltas(model.chip_deltas)}")
    if model.winner is not None:
        lines.append(f" {GREEN}{BOLD}Player {model.winner} wins the game!{RESET}")
    prompt = _betting_prompt(model)
    if prompt:
        lines.append(prompt)
    return lines


def render_table(model: GameModel) -> str:
    """Full frame: screen body followed by the most recent log entries."""
    if model.screen is Screen.GAME_ID_INPUT:
        lines = render_game_id_input(model)
    else:
        lines = render_in_game(model)
    lines.append(RULE)
    lines.extend(f" {entry}" for entry in model.logs.tail(LOG_TAIL))
    return "\n".join(lines)
