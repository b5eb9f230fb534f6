"""
Round state models.

All models are frozen; state_utils.py holds the named operations that return
updated copies.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from parlor.logic.enums import MeldType, RoundPhase, SkillTier
from parlor.logic.tiles import tile_kind
from parlor.logic.wall import Wall

TILES_PER_SET = 3


class Meld(BaseModel):
    """A declared chow, pung or kong."""

    model_config = ConfigDict(frozen=True)

    meld_type: MeldType
    tiles: tuple[int, ...]
    from_seat: int | None = None  # seat whose discard was claimed, None for self-formed melds
    called_tile: int | None = None

    @property
    def kind(self) -> int:
        """Kind of the lowest tile (the only kind for pungs and kongs)."""
        return tile_kind(min(self.tiles))

    @property
    def is_concealed(self) -> bool:
        return self.meld_type == MeldType.CONCEALED_KONG


class SeatState(BaseModel):
    """One seat of the round: hand, melds, set-aside bonus tiles and kong record."""

    model_config = ConfigDict(frozen=True)

    seat: int
    name: str
    is_human: bool = False
    tiles: tuple[int, ...] = ()  # concealed, kept sorted
    melds: tuple[Meld, ...] = ()
    bonus_tiles: tuple[int, ...] = ()
    kong_record: int = 0

    @property
    def open_tiles(self) -> tuple[int, ...]:
        """Flat multiset of every tile committed to a meld."""
        return tuple(tile for meld in self.melds for tile in meld.tiles)

    @property
    def hand_size(self) -> int:
        """Concealed tiles plus three per meld: 13 off turn, 14 on turn."""
        return len(self.tiles) + TILES_PER_SET * len(self.melds)


class RoundState(BaseModel):
    """
    State of a single round.

    Owned by one RoundEngine for the round's lifetime. The discard pile is
    ordered most recent first; current_discard is the tile open to claims.
    """

    model_config = ConfigDict(frozen=True)

    house_seat: int
    players: tuple[SeatState, ...]
    wall: Wall
    discard_pile: tuple[int, ...] = ()
    current_discard: int | None = None
    discarder_seat: int | None = None
    current_drawer: int = 0
    turn_count: int = 0
    skill_tier: SkillTier = SkillTier.BASIC
    phase: RoundPhase = RoundPhase.AWAITING_DRAW
    total_tiles: int

    @property
    def human_seat(self) -> int | None:
        for player in self.players:
            if player.is_human:
                return player.seat
        return None
