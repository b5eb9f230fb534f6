"""
Round initialization and the basic draw/discard operations.

Draws always come from the front of the wall. Bonus tiles drawn at any time
(deal, turn draw, kong replacement) are set aside in the drawing seat's bonus
area and replaced by the next wall tile.
"""

from collections.abc import Sequence

import structlog

from parlor.logic.enums import RoundPhase, SkillTier
from parlor.logic.events import BonusTileEvent, DiscardEvent, DrawEvent, GameEvent, RoundStartedEvent, seat_target
from parlor.logic.exceptions import InvalidDiscardError, RoundInvariantError
from parlor.logic.settings import NUM_PLAYERS, SUPPORTED_HAND_SIZE
from parlor.logic.state import Meld, RoundState, SeatState
from parlor.logic.state_utils import (
    add_tile_to_player,
    advance_turn,
    remove_tiles_from_player,
    set_aside_bonus_tile,
    set_current_discard,
    set_phase,
    update_wall,
)
from parlor.logic.tiles import is_bonus
from parlor.logic.types import MeldView, PlayedView, SeatConfig, SeatView
from parlor.logic.wall import Wall, draw_front, tiles_remaining

logger = structlog.get_logger()


def create_players(roster: Sequence[SeatConfig]) -> tuple[SeatState, ...]:
    """
    Create the four seats from a roster.

    Raises:
        RoundInvariantError: If the roster does not hold four seats with exactly one human

    """
    if len(roster) != NUM_PLAYERS:
        raise RoundInvariantError(f"roster must have {NUM_PLAYERS} seats, got {len(roster)}")
    humans = sum(1 for config in roster if config.is_human)
    if humans != 1:
        raise RoundInvariantError(f"roster must have exactly one human seat, got {humans}")
    return tuple(
        SeatState(seat=seat, name=config.name, is_human=config.is_human) for seat, config in enumerate(roster)
    )


def _draw_into_hand(
    round_state: RoundState,
    seat: int,
    *,
    is_replacement: bool,
) -> tuple[RoundState, list[GameEvent], int | None]:
    """
    Draw the next non-bonus tile into a seat's hand.

    Bonus tiles are set aside and replaced until a suited tile comes up.
    Returns (new_state, events, tile_id), tile_id None when the wall runs out.
    """
    events: list[GameEvent] = []
    while True:
        wall, tile_id = draw_front(round_state.wall)
        if tile_id is None:
            return round_state, events, None
        round_state = update_wall(round_state, wall)
        if is_bonus(tile_id):
            round_state = set_aside_bonus_tile(round_state, seat, tile_id)
            events.append(BonusTileEvent(seat=seat, tile_id=tile_id))
            logger.debug("bonus tile set aside", seat=seat, tile_id=tile_id)
            continue
        round_state = add_tile_to_player(round_state, seat, tile_id)
        events.append(
            DrawEvent(
                target=seat_target(seat),
                seat=seat,
                tile_id=tile_id,
                is_replacement=is_replacement,
                tiles_remaining=tiles_remaining(wall),
            )
        )
        return round_state, events, tile_id


def init_round(
    house_seat: int,
    roster: Sequence[SeatConfig],
    wall: Wall,
    skill_tier: SkillTier,
) -> tuple[RoundState, list[GameEvent]]:
    """
    Deal a new round.

    Starting with the house, seats take one tile at a time in rotation until
    each holds 13 concealed tiles. The house then draws first.
    Returns (round_state, round_started_events).
    """
    players = create_players(roster)
    round_state = RoundState(
        house_seat=house_seat,
        players=players,
        wall=wall,
        current_drawer=house_seat,
        skill_tier=skill_tier,
        total_tiles=len(wall.tiles),
    )

    for _ in range(SUPPORTED_HAND_SIZE):
        for offset in range(NUM_PLAYERS):
            seat = (house_seat + offset) % NUM_PLAYERS
            round_state, _events, tile_id = _draw_into_hand(round_state, seat, is_replacement=False)
            if tile_id is None:
                raise RoundInvariantError("wall exhausted while dealing")

    names = tuple(p.name for p in round_state.players)
    events: list[GameEvent] = [
        RoundStartedEvent(
            target=seat_target(player.seat),
            seat=player.seat,
            house_seat=house_seat,
            player_names=names,
            my_tiles=player.tiles,
            my_bonus_tiles=player.bonus_tiles,
            tiles_remaining=tiles_remaining(round_state.wall),
        )
        for player in round_state.players
    ]
    logger.info(
        "round dealt",
        house_seat=house_seat,
        skill_tier=skill_tier,
        tiles_remaining=tiles_remaining(round_state.wall),
    )
    return set_phase(round_state, RoundPhase.AWAITING_DRAW), events


def draw_tile(round_state: RoundState) -> tuple[RoundState, list[GameEvent], int | None]:
    """
    Normal turn draw for the seat at current_drawer.

    Advances current_drawer to the next seat once a tile enters the hand.
    Returns (new_state, events, tile_id), tile_id None when the wall is exhausted.
    """
    seat = round_state.current_drawer
    round_state, events, tile_id = _draw_into_hand(round_state, seat, is_replacement=False)
    if tile_id is None:
        return round_state, events, None
    round_state = advance_turn(round_state)
    return set_phase(round_state, RoundPhase.AWAITING_DISCARD), events, tile_id


def draw_replacement_tile(round_state: RoundState, seat: int) -> tuple[RoundState, list[GameEvent], int | None]:
    """
    Replacement draw for a seat that just formed a kong.

    Does not move current_drawer: control stays with the konging seat.
    """
    round_state, events, tile_id = _draw_into_hand(round_state, seat, is_replacement=True)
    if tile_id is None:
        return round_state, events, None
    return set_phase(round_state, RoundPhase.AWAITING_DISCARD), events, tile_id


def discard_tile(round_state: RoundState, seat: int, tile_id: int) -> tuple[RoundState, DiscardEvent]:
    """
    Discard a tile from a seat's hand and offer it to the other seats.

    Raises:
        InvalidDiscardError: If the tile is not in the seat's hand

    """
    if tile_id not in round_state.players[seat].tiles:
        raise InvalidDiscardError(f"tile {tile_id} is not in hand")
    new_state = remove_tiles_from_player(round_state, seat, [tile_id])
    new_state = set_current_discard(new_state, seat, tile_id)
    new_state = set_phase(new_state, RoundPhase.AWAITING_RESPONSES)
    return new_state, DiscardEvent(seat=seat, tile_id=tile_id)


def meld_views(melds: Sequence[Meld]) -> tuple[MeldView, ...]:
    return tuple(MeldView(meld_type=m.meld_type, tiles=m.tiles, from_seat=m.from_seat) for m in melds)


def build_played_view(round_state: RoundState) -> PlayedView:
    """Public view of the table: discard history and every seat's open melds."""
    seats = tuple(
        SeatView(
            seat=player.seat,
            name=player.name,
            is_human=player.is_human,
            melds=meld_views(player.melds),
            bonus_tiles=player.bonus_tiles,
            concealed_count=len(player.tiles),
        )
        for player in round_state.players
    )
    return PlayedView(
        discard_pile=round_state.discard_pile,
        current_discard=round_state.current_discard,
        seats=seats,
        tiles_remaining=tiles_remaining(round_state.wall),
    )
