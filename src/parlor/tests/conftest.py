from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from parlor.logic.enums import RoundPhase, SkillTier
from parlor.logic.state import RoundState, SeatState
from parlor.logic.state_utils import count_tiles
from parlor.logic.types import SeatConfig
from parlor.logic.wall import Wall

if TYPE_CHECKING:
    from collections.abc import Sequence

    from parlor.logic.state import Meld


# ============================================================================
# Test State Builder Helpers
# ============================================================================


def create_player(
    seat: int = 0,
    name: str | None = None,
    *,
    is_human: bool = False,
    tiles: Sequence[int] | None = None,
    melds: Sequence[Meld] | None = None,
    bonus_tiles: Sequence[int] | None = None,
    kong_record: int = 0,
) -> SeatState:
    """Create a SeatState with sensible defaults for testing."""
    return SeatState(
        seat=seat,
        name=name if name is not None else f"Player{seat}",
        is_human=is_human,
        tiles=tuple(sorted(tiles)) if tiles is not None else (),
        melds=tuple(melds) if melds is not None else (),
        bonus_tiles=tuple(bonus_tiles) if bonus_tiles is not None else (),
        kong_record=kong_record,
    )


def create_round_state(
    *,
    players: Sequence[SeatState] | None = None,
    wall: Sequence[int] | None = None,
    house_seat: int = 0,
    discard_pile: Sequence[int] | None = None,
    current_discard: int | None = None,
    discarder_seat: int | None = None,
    current_drawer: int = 0,
    turn_count: int = 0,
    skill_tier: SkillTier = SkillTier.BASIC,
    phase: RoundPhase = RoundPhase.AWAITING_DRAW,
    total_tiles: int | None = None,
) -> RoundState:
    """Create a RoundState with sensible defaults for testing.

    total_tiles defaults to the number of tiles actually placed in the
    state, so hand-built states satisfy tile conservation.
    """
    if players is None:
        players = tuple(create_player(seat=i, is_human=i == 0) for i in range(4))
    state = RoundState(
        house_seat=house_seat,
        players=tuple(players),
        wall=Wall(tiles=tuple(wall) if wall is not None else ()),
        discard_pile=tuple(discard_pile) if discard_pile is not None else (),
        current_discard=current_discard,
        discarder_seat=discarder_seat,
        current_drawer=current_drawer,
        turn_count=turn_count,
        skill_tier=skill_tier,
        phase=phase,
        total_tiles=0,
    )
    return state.model_copy(update={"total_tiles": total_tiles if total_tiles is not None else count_tiles(state)})


def create_roster(human_seat: int = 0) -> list[SeatConfig]:
    return [
        SeatConfig(name="Human" if seat == human_seat else f"Bot{seat}", is_human=seat == human_seat)
        for seat in range(4)
    ]


@pytest.fixture
def roster() -> list[SeatConfig]:
    return create_roster()
