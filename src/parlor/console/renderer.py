"""
Plain-text rendering of round events for the human seat.

The renderer is an event listener: it receives every event the round engine
emits and prints only those the human seat may see. Computer hands are never
shown, only their discards, melds and bonus tiles.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

from parlor.logic.enums import DrawReason, RoundPhase
from parlor.logic.events import (
    BonusTileEvent,
    DiscardEvent,
    DrawEvent,
    ErrorEvent,
    HintEvent,
    MeldEvent,
    PlayedViewEvent,
    RoundEndEvent,
    RoundStartedEvent,
    is_visible_to,
)
from parlor.logic.tiles import tile_name, tiles_to_string
from parlor.logic.types import DrawOutcome, QuitOutcome, RestartOutcome, WinOutcome

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from parlor.logic.events import GameEvent
    from parlor.logic.game import MatchState
    from parlor.logic.types import InputRequest, MeldView, PlayedView, RoundOutcome


def format_hand(tiles: Sequence[int]) -> str:
    """Hand tiles with their 1-based positions, e.g. '1:2m 2:5m 3:7p'."""
    return " ".join(f"{position}:{tile_name(tile)}" for position, tile in enumerate(tiles, start=1))


def format_melds(melds: Sequence[MeldView]) -> str:
    if not melds:
        return "-"
    return " | ".join(f"{meld.meld_type.value} {tiles_to_string(meld.tiles)}" for meld in melds)


class ConsoleRenderer:
    """Event listener printing the human seat's view of the table."""

    def __init__(self, human_seat: int, names: Sequence[str], out: TextIO | None = None) -> None:
        self._human_seat = human_seat
        self._names = tuple(names)
        self._out = out or sys.stdout

    def _write(self, text: str = "") -> None:
        print(text, file=self._out)

    def _who(self, seat: int) -> str:
        if seat == self._human_seat:
            return "You"
        return self._names[seat]

    def __call__(self, event: GameEvent) -> None:
        if not is_visible_to(event, self._human_seat):
            return

        if isinstance(event, RoundStartedEvent):
            self._write()
            self._write(f"New round, house: {self._who(event.house_seat)} ({event.tiles_remaining} tiles in wall)")
            self._write(f"Your hand: {tiles_to_string(event.my_tiles)}")
        elif isinstance(event, DrawEvent):
            kind = "replacement tile" if event.is_replacement else "tile"
            self._write(f"You drew {kind} {tile_name(event.tile_id)} ({event.tiles_remaining} left)")
        elif isinstance(event, BonusTileEvent):
            self._write(f"{self._who(event.seat)} set aside bonus tile {tile_name(event.tile_id)}")
        elif isinstance(event, DiscardEvent):
            self._write(f"{self._who(event.seat)} discarded {tile_name(event.tile_id)}")
        elif isinstance(event, MeldEvent):
            who = self._who(event.caller_seat)
            self._write(f"{who} declared {event.meld_type.value} {tiles_to_string(event.tile_ids)}")
        elif isinstance(event, ErrorEvent):
            self._write(f"Not allowed: {event.message}")
        elif isinstance(event, HintEvent):
            self._render_hint(event)
        elif isinstance(event, PlayedViewEvent):
            self._render_played(event.view)
        elif isinstance(event, RoundEndEvent):
            self._render_round_end(event)

    def _render_hint(self, event: HintEvent) -> None:
        hints: list[str] = []
        if event.can_declare_win:
            hints.append("you can declare mahjong")
        if event.can_declare_kong:
            hints.append("you can declare a kong")
        if event.suggested_discard is not None:
            hints.append(f"consider discarding {tile_name(event.suggested_discard)}")
        if event.shanten == 0:
            hints.append("a good discard leaves you ready")
        elif event.shanten is not None and event.shanten > 0:
            hints.append(f"{event.shanten} tile(s) short of a ready hand")
        claims = [claim.value for claim in event.available_claims]
        if claims:
            hints.append(f"you can claim: {', '.join(claims)}")
        for first, second in event.chow_options:
            hints.append(f"chow with {tile_name(first)} {tile_name(second)}")
        self._write("Hint: " + ("; ".join(hints) if hints else "nothing to claim, continue"))

    def _render_played(self, view: PlayedView) -> None:
        current = tile_name(view.current_discard) if view.current_discard is not None else "-"
        self._write(f"Discards (newest first): {tiles_to_string(view.discard_pile) or '-'}")
        self._write(f"Current discard: {current}, wall: {view.tiles_remaining}")
        for seat in view.seats:
            bonus = tiles_to_string(seat.bonus_tiles) or "-"
            self._write(f"  {self._who(seat.seat)}: melds {format_melds(seat.melds)}; bonus {bonus}")

    def _render_round_end(self, event: RoundEndEvent) -> None:
        self._write(describe_outcome(event.result, self._who))
        if isinstance(event.result, WinOutcome):
            hand = tiles_to_string(event.winner_tiles)
            self._write(f"Winning hand: {hand}  melds: {format_melds(event.winner_melds)}")

    def render_request(self, request: InputRequest) -> None:
        """Show the human what they are deciding before the prompt."""
        self._write()
        if request.phase == RoundPhase.AWAITING_RESPONSES and request.current_discard is not None:
            discarder = self._who(request.discarder_seat) if request.discarder_seat is not None else "?"
            self._write(f"{discarder} discarded {tile_name(request.current_discard)}")
        self._write(f"Hand: {format_hand(request.hand)}")
        if request.melds:
            self._write(f"Melds: {format_melds(request.melds)}")

    def render_standings(self, match: MatchState) -> None:
        self._write()
        self._write(f"Scores after {len(match.history)} round(s), house streak {match.house_streak}:")
        for seat, score in enumerate(match.scores):
            self._write(f"  {self._who(seat)}: {score}")


def describe_outcome(outcome: RoundOutcome, who: Callable[[int], str]) -> str:
    """One-line summary of how a round ended."""
    if isinstance(outcome, WinOutcome):
        how = "self-drawn" if outcome.self_drawn else f"on {who(outcome.loser_seat)}'s discard"
        return f"Mahjong! {who(outcome.winner_seat)} won {how}, score {outcome.score}"
    if isinstance(outcome, DrawOutcome):
        if outcome.reason == DrawReason.FAULT:
            return f"Round abandoned: {outcome.diagnostic}"
        return "Wall exhausted, the round is a draw"
    if isinstance(outcome, QuitOutcome):
        return "You quit the game"
    if isinstance(outcome, RestartOutcome):
        return "Round restarted"
    raise AssertionError(f"unexpected outcome: {outcome!r}")  # pragma: no cover
