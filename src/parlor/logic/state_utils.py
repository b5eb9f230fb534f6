"""
Immutable state update utilities using Pydantic model_copy.

Every change to a RoundState goes through one of these named operations.
They never mutate the input state - they always return new state objects
with the requested changes applied. check_invariants() verifies the
structural rules (tile conservation, hand sizes) in one place.
"""

from collections.abc import Sequence

from parlor.logic.enums import RoundPhase
from parlor.logic.exceptions import RoundInvariantError
from parlor.logic.settings import NUM_PLAYERS, SUPPORTED_HAND_SIZE
from parlor.logic.state import Meld, RoundState, SeatState
from parlor.logic.tiles import sort_tiles
from parlor.logic.wall import Wall

_PLAYER_FIELDS = set(SeatState.model_fields)


def update_player(
    round_state: RoundState,
    seat: int,
    **updates: object,
) -> RoundState:
    """
    Return new round state with updated seat.

    Args:
        round_state: Current round state
        seat: Seat to update (0-3)
        **updates: Fields to update on the seat

    Returns:
        New RoundState with updated seat

    Raises:
        RoundInvariantError: If seat is out of bounds or update fields are invalid

    """
    if not (0 <= seat < len(round_state.players)):
        raise RoundInvariantError(f"Invalid seat {seat}, expected 0-{len(round_state.players) - 1}")
    invalid_fields = set(updates) - _PLAYER_FIELDS
    if invalid_fields:
        raise RoundInvariantError(f"Invalid seat fields: {invalid_fields}")
    players = list(round_state.players)
    players[seat] = round_state.players[seat].model_copy(update=updates)
    return round_state.model_copy(update={"players": tuple(players)})


def add_tile_to_player(round_state: RoundState, seat: int, tile_id: int) -> RoundState:
    """Return new state with tile added to the seat's concealed hand (kept sorted)."""
    player = round_state.players[seat]
    return update_player(round_state, seat, tiles=sort_tiles((*player.tiles, tile_id)))


def remove_tiles_from_player(round_state: RoundState, seat: int, tile_ids: Sequence[int]) -> RoundState:
    """
    Return new state with the given tiles removed from the seat's concealed hand.

    Raises:
        RoundInvariantError: If any tile is not in the hand

    """
    tiles = list(round_state.players[seat].tiles)
    for tile_id in tile_ids:
        if tile_id not in tiles:
            raise RoundInvariantError(f"tile {tile_id} not in hand of seat {seat}")
        tiles.remove(tile_id)
    return update_player(round_state, seat, tiles=tuple(tiles))


def set_aside_bonus_tile(round_state: RoundState, seat: int, tile_id: int) -> RoundState:
    """Return new state with a drawn bonus tile placed in the seat's bonus area."""
    player = round_state.players[seat]
    return update_player(round_state, seat, bonus_tiles=(*player.bonus_tiles, tile_id))


def add_meld(
    round_state: RoundState,
    seat: int,
    meld: Meld,
    tiles_from_hand: Sequence[int],
) -> RoundState:
    """
    Return new state with a meld formed by the seat.

    The tiles_from_hand move out of the concealed hand atomically with the
    meld being appended.
    """
    new_state = remove_tiles_from_player(round_state, seat, tiles_from_hand)
    player = new_state.players[seat]
    return update_player(new_state, seat, melds=(*player.melds, meld))


def upgrade_meld(
    round_state: RoundState,
    seat: int,
    old_meld: Meld,
    new_meld: Meld,
    tile_from_hand: int,
) -> RoundState:
    """Return new state with an open pung replaced by its kong."""
    new_state = remove_tiles_from_player(round_state, seat, [tile_from_hand])
    player = new_state.players[seat]
    if old_meld not in player.melds:
        raise RoundInvariantError(f"meld {old_meld} not found for seat {seat}")
    melds = tuple(new_meld if m == old_meld else m for m in player.melds)
    return update_player(new_state, seat, melds=melds)


def increment_kong_record(round_state: RoundState, seat: int, amount: int) -> RoundState:
    player = round_state.players[seat]
    return update_player(round_state, seat, kong_record=player.kong_record + amount)


def set_current_discard(round_state: RoundState, seat: int, tile_id: int) -> RoundState:
    """Return new state with tile offered as the current discard from seat."""
    return round_state.model_copy(update={"current_discard": tile_id, "discarder_seat": seat})


def settle_current_discard(round_state: RoundState) -> RoundState:
    """Return new state with the unclaimed current discard moved onto the pile."""
    if round_state.current_discard is None:
        raise RoundInvariantError("no current discard to settle")
    return round_state.model_copy(
        update={
            "discard_pile": (round_state.current_discard, *round_state.discard_pile),
            "current_discard": None,
            "discarder_seat": None,
        }
    )


def clear_current_discard(round_state: RoundState) -> RoundState:
    """Return new state with the current discard slot emptied (the tile was claimed)."""
    return round_state.model_copy(update={"current_discard": None, "discarder_seat": None})


def set_current_drawer(round_state: RoundState, seat: int) -> RoundState:
    return round_state.model_copy(update={"current_drawer": seat % NUM_PLAYERS})


def advance_turn(round_state: RoundState) -> RoundState:
    """
    Return new state with the drawer pointer moved to the next seat.

    Also increments the turn counter.
    """
    return round_state.model_copy(
        update={
            "current_drawer": (round_state.current_drawer + 1) % NUM_PLAYERS,
            "turn_count": round_state.turn_count + 1,
        }
    )


def update_wall(round_state: RoundState, wall: Wall) -> RoundState:
    return round_state.model_copy(update={"wall": wall})


def set_phase(round_state: RoundState, phase: RoundPhase) -> RoundState:
    return round_state.model_copy(update={"phase": phase})


def count_tiles(round_state: RoundState) -> int:
    """Count every tile visible anywhere in the round."""
    total = len(round_state.wall.tiles) + len(round_state.discard_pile)
    if round_state.current_discard is not None:
        total += 1
    for player in round_state.players:
        total += len(player.tiles) + len(player.open_tiles) + len(player.bonus_tiles)
    return total


def check_invariants(round_state: RoundState, on_turn_seat: int | None = None) -> None:
    """
    Verify tile conservation and hand sizes.

    on_turn_seat is the seat about to discard (holding one extra tile), or
    None when every seat should hold a full off-turn hand.

    Raises:
        RoundInvariantError: On the first violation found

    """
    total = count_tiles(round_state)
    if total != round_state.total_tiles:
        raise RoundInvariantError(f"tile conservation broken: counted {total}, expected {round_state.total_tiles}")

    if len(round_state.players) != NUM_PLAYERS:
        raise RoundInvariantError(f"round has {len(round_state.players)} seats, expected {NUM_PLAYERS}")

    for player in round_state.players:
        expected = SUPPORTED_HAND_SIZE + 1 if player.seat == on_turn_seat else SUPPORTED_HAND_SIZE
        if player.hand_size != expected:
            raise RoundInvariantError(
                f"seat {player.seat} holds {len(player.tiles)} concealed tiles "
                f"and {len(player.melds)} melds, expected hand size {expected}"
            )
