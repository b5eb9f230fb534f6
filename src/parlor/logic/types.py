"""
Pydantic models for round engine data structures.

Contains the parsed human commands, the round outcomes handed to the score
ledger, computer-seat decisions, input requests and read-only views that
cross component boundaries.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from parlor.logic.enums import ClaimType, CommandType, DrawReason, MeldType, RoundOutcomeType, RoundPhase

# ---------------------------------------------------------------------------
# Commands (already parsed, consumed by the round engine for the human seat)
# ---------------------------------------------------------------------------


class DiscardCommand(BaseModel):
    """Discard the tile at a 1-based position of the sorted hand."""

    model_config = ConfigDict(frozen=True)

    command: Literal[CommandType.DISCARD] = CommandType.DISCARD
    index: int


class ChowCommand(BaseModel):
    """Chow the current discard with two tiles at 1-based hand positions."""

    model_config = ConfigDict(frozen=True)

    command: Literal[CommandType.CHOW] = CommandType.CHOW
    index_1: int
    index_2: int


class SimpleCommand(BaseModel):
    """Commands without arguments."""

    model_config = ConfigDict(frozen=True)

    command: Literal[
        CommandType.CONTINUE,
        CommandType.PUNG,
        CommandType.KONG,
        CommandType.MAHJONG,
        CommandType.QUIT,
        CommandType.RESTART,
        CommandType.HELP,
        CommandType.PLAYED,
    ]


Command = Annotated[
    DiscardCommand | ChowCommand | SimpleCommand,
    Field(discriminator="command"),
]


# ---------------------------------------------------------------------------
# Round outcomes
# ---------------------------------------------------------------------------


class WinOutcome(BaseModel):
    """A seat completed its hand. loser_seat is None for a self-drawn win."""

    model_config = ConfigDict(frozen=True)

    type: Literal[RoundOutcomeType.WIN] = RoundOutcomeType.WIN
    winner_seat: int
    loser_seat: int | None = None
    score: int
    winning_tile: int | None = None
    hand_points: int
    kong_bonus: int

    @property
    def self_drawn(self) -> bool:
        return self.loser_seat is None


class DrawOutcome(BaseModel):
    """The round ended without a winner; diagnostic is set for faults."""

    model_config = ConfigDict(frozen=True)

    type: Literal[RoundOutcomeType.DRAW] = RoundOutcomeType.DRAW
    reason: DrawReason = DrawReason.WALL_EXHAUSTED
    diagnostic: str | None = None

    @property
    def winner_seat(self) -> None:
        return None


class QuitOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal[RoundOutcomeType.QUIT] = RoundOutcomeType.QUIT


class RestartOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal[RoundOutcomeType.RESTART] = RoundOutcomeType.RESTART


RoundOutcome = Annotated[
    WinOutcome | DrawOutcome | QuitOutcome | RestartOutcome,
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Seats, claims and decisions
# ---------------------------------------------------------------------------


class SeatConfig(BaseModel):
    """Configuration for a single seat in a match."""

    model_config = ConfigDict(frozen=True)

    name: str
    is_human: bool = False


class Claim(BaseModel):
    """A seat's claim on the current discard."""

    model_config = ConfigDict(frozen=True)

    seat: int
    claim_type: ClaimType
    chow_tiles: tuple[int, int] | None = None  # the two hand tiles for a chow


class TurnDecision(BaseModel):
    """What a computer seat does on its turn: declare a win or discard a tile."""

    model_config = ConfigDict(frozen=True)

    declare_win: bool = False
    discard_tile: int | None = None


# ---------------------------------------------------------------------------
# Views and input requests
# ---------------------------------------------------------------------------


class MeldView(BaseModel):
    """Meld display information."""

    model_config = ConfigDict(frozen=True)

    meld_type: MeldType
    tiles: tuple[int, ...]
    from_seat: int | None


class SeatView(BaseModel):
    """Publicly visible information about one seat."""

    model_config = ConfigDict(frozen=True)

    seat: int
    name: str
    is_human: bool
    melds: tuple[MeldView, ...]
    bonus_tiles: tuple[int, ...]
    concealed_count: int


class PlayedView(BaseModel):
    """Discard history and every seat's open melds (read-only)."""

    model_config = ConfigDict(frozen=True)

    discard_pile: tuple[int, ...]  # most recent first
    current_discard: int | None
    seats: tuple[SeatView, ...]
    tiles_remaining: int


class InputRequest(BaseModel):
    """
    What the human seat is being asked to decide.

    phase is AWAITING_DISCARD for the human's own turn and
    AWAITING_RESPONSES when another seat's discard can be claimed.
    """

    model_config = ConfigDict(frozen=True)

    seat: int
    phase: RoundPhase
    hand: tuple[int, ...]
    melds: tuple[MeldView, ...] = ()
    drawn_tile: int | None = None
    current_discard: int | None = None
    discarder_seat: int | None = None
    available_claims: tuple[ClaimType, ...] = ()
    chow_options: tuple[tuple[int, int], ...] = ()
    can_declare_win: bool = False
    can_declare_kong: bool = False
