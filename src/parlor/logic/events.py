"""Domain event models emitted by the round engine.

Every event carries a routing target: "all" for public table events, or
"seat_N" for information only that seat may see (its own draws, errors and
hints). Listeners such as the console renderer use parse_event_target() to
decide what to show.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict

from parlor.logic.enums import ClaimType, GameErrorCode, MeldType
from parlor.logic.types import MeldView, PlayedView, RoundOutcome

# ---------------------------------------------------------------------------
# Typed routing targets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BroadcastTarget:
    """Event is visible to every seat."""


@dataclass(frozen=True)
class SeatTarget:
    """Event is visible to a specific seat only."""

    seat: int


EventTarget = BroadcastTarget | SeatTarget


def parse_event_target(value: str) -> EventTarget:
    """Parse a string target into a typed EventTarget."""
    if value == "all":
        return BroadcastTarget()
    if value.startswith("seat_"):
        seat = int(value.split("_")[1])
        if seat < 0:
            raise ValueError(f"invalid seat number in target: {value}")
        return SeatTarget(seat=seat)
    raise ValueError(f"invalid target value: {value}")


def seat_target(seat: int) -> str:
    return f"seat_{seat}"


def is_visible_to(event: GameEvent, seat: int) -> bool:
    """Check whether a seat may see an event."""
    target = parse_event_target(event.target)
    return isinstance(target, BroadcastTarget) or target.seat == seat


# ---------------------------------------------------------------------------
# Event type enum
# ---------------------------------------------------------------------------


class EventType(StrEnum):
    """Types of round events."""

    ROUND_STARTED = "round_started"
    DRAW = "draw"
    BONUS_TILE = "bonus_tile"
    DISCARD = "discard"
    MELD = "meld"
    ERROR = "error"
    HINT = "hint"
    PLAYED_VIEW = "played_view"
    ROUND_END = "round_end"


# ---------------------------------------------------------------------------
# Domain event models
# ---------------------------------------------------------------------------


class GameEvent(BaseModel):
    """Base class for all round events."""

    model_config = ConfigDict(frozen=True)

    type: EventType
    target: str


class RoundStartedEvent(GameEvent):
    """Event sent to each seat after the deal, with its own tiles."""

    type: Literal[EventType.ROUND_STARTED] = EventType.ROUND_STARTED
    seat: int
    house_seat: int
    player_names: tuple[str, ...]
    my_tiles: tuple[int, ...]
    my_bonus_tiles: tuple[int, ...] = ()
    tiles_remaining: int


class DrawEvent(GameEvent):
    """Event sent to a seat when it draws a tile into its hand."""

    type: Literal[EventType.DRAW] = EventType.DRAW
    seat: int
    tile_id: int
    is_replacement: bool = False  # drawn after a kong
    tiles_remaining: int


class BonusTileEvent(GameEvent):
    """Event broadcast when a drawn bonus tile is set aside."""

    type: Literal[EventType.BONUS_TILE] = EventType.BONUS_TILE
    target: str = "all"
    seat: int
    tile_id: int


class DiscardEvent(GameEvent):
    """Event broadcast when a seat discards a tile."""

    type: Literal[EventType.DISCARD] = EventType.DISCARD
    target: str = "all"
    seat: int
    tile_id: int


class MeldEvent(GameEvent):
    """Event broadcast when a seat forms a chow, pung or kong."""

    type: Literal[EventType.MELD] = EventType.MELD
    target: str = "all"
    meld_type: MeldType
    caller_seat: int
    from_seat: int | None = None
    tile_ids: tuple[int, ...]
    called_tile_id: int | None = None
    kong_record: int = 0


class ErrorEvent(GameEvent):
    """Event sent to the human seat when a command is rejected."""

    type: Literal[EventType.ERROR] = EventType.ERROR
    code: GameErrorCode
    message: str


class HintEvent(GameEvent):
    """Event sent in answer to a help request."""

    type: Literal[EventType.HINT] = EventType.HINT
    can_declare_win: bool = False
    can_declare_kong: bool = False
    suggested_discard: int | None = None
    shanten: int | None = None  # tiles short of a ready hand after the best discard
    available_claims: tuple[ClaimType, ...] = ()
    chow_options: tuple[tuple[int, int], ...] = ()


class PlayedViewEvent(GameEvent):
    """Event sent in answer to a request to see played tiles and open melds."""

    type: Literal[EventType.PLAYED_VIEW] = EventType.PLAYED_VIEW
    view: PlayedView


class RoundEndEvent(GameEvent):
    """Event broadcast when a round ends."""

    type: Literal[EventType.ROUND_END] = EventType.ROUND_END
    target: str = "all"
    result: RoundOutcome
    winner_tiles: tuple[int, ...] = ()
    winner_melds: tuple[MeldView, ...] = ()
