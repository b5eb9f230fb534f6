"""
Meld operations (chow, pung, kong).

The can_* / *_options functions are pure legality checks over explicit hand
and meld arguments. The call_* functions apply a meld to the round state and
return (new_round_state, created_meld); they raise InvalidMeldError when the
meld is not legal.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from parlor.logic.enums import KONG_RECORD_WEIGHT, KongType, MeldType
from parlor.logic.exceptions import InvalidIndexError, InvalidMeldError
from parlor.logic.settings import NUM_PLAYERS
from parlor.logic.state import Meld
from parlor.logic.state_utils import add_meld, increment_kong_record, upgrade_meld
from parlor.logic.tiles import NUM_SUITED_KINDS, RANKS_PER_SUIT, is_bonus, kind_suit, tile_kind, tiles_of_kind

if TYPE_CHECKING:
    from collections.abc import Sequence

    from parlor.logic.state import RoundState

logger = structlog.get_logger()

# meld size constants
TILES_FOR_PUNG = 2
TILES_FOR_CLAIMED_KONG = 3
TILES_FOR_CONCEALED_KONG = 4

# chow position limits (0-indexed rank within a suit)
CHOW_LOWEST_MAX_VALUE = 6  # tile can be lowest (e.g., 1 in 123) if value <= 6
CHOW_MIDDLE_MIN_VALUE = 1  # tile can be middle if value >= 1
CHOW_MIDDLE_MAX_VALUE = 7  # tile can be middle if value <= 7
CHOW_HIGHEST_MIN_VALUE = 2  # tile can be highest (e.g., 3 in 123) if value >= 2


def _count_kind(tiles: Sequence[int], kind: int) -> int:
    return sum(1 for t in tiles if tile_kind(t) == kind)


def can_pung(tiles: Sequence[int], tile_id: int) -> bool:
    """Check if the hand holds two tiles matching a discarded tile."""
    if is_bonus(tile_id):
        return False
    return _count_kind(tiles, tile_kind(tile_id)) >= TILES_FOR_PUNG


def can_claim_kong(tiles: Sequence[int], tile_id: int) -> bool:
    """Check if the hand holds three tiles matching a discarded tile."""
    if is_bonus(tile_id):
        return False
    return _count_kind(tiles, tile_kind(tile_id)) >= TILES_FOR_CLAIMED_KONG


def concealed_kong_options(tiles: Sequence[int]) -> list[int]:
    """Return the kinds the hand holds all four copies of."""
    return [kind for kind in range(NUM_SUITED_KINDS) if _count_kind(tiles, kind) >= TILES_FOR_CONCEALED_KONG]


def extend_kong_options(tiles: Sequence[int], melds: Sequence[Meld]) -> list[int]:
    """Return the kinds of open pungs whose fourth tile is in the concealed hand."""
    return [
        meld.kind for meld in melds if meld.meld_type == MeldType.PUNG and _count_kind(tiles, meld.kind) > 0
    ]


def find_self_kong(tiles: Sequence[int], melds: Sequence[Meld]) -> tuple[KongType, int] | None:
    """
    Pick the kong the seat on turn can declare, if any.

    Concealed kongs take precedence over extending a pung; lower kinds first.
    Returns (kong_type, kind) or None.
    """
    concealed = concealed_kong_options(tiles)
    if concealed:
        return KongType.CONCEALED, concealed[0]
    extended = extend_kong_options(tiles, melds)
    if extended:
        return KongType.EXTENDED, min(extended)
    return None


def can_chow(
    tiles: Sequence[int],
    tile_id: int,
    discarder_seat: int,
    caller_seat: int,
) -> list[tuple[int, int]]:
    """
    Check if a seat can chow a discarded tile.

    Requirements:
    - Caller must be the seat immediately after the discarder
    - Hand holds two tiles completing a run of three with the discard

    Returns every completing pair (lowest tile id of each kind), ordered by
    the run's lowest kind. Empty when chow is not possible.
    """
    if caller_seat != (discarder_seat + 1) % NUM_PLAYERS:
        return []
    if is_bonus(tile_id):
        return []

    discarded_kind = tile_kind(tile_id)
    suit = kind_suit(discarded_kind)
    tile_value = discarded_kind % RANKS_PER_SUIT

    def first_of(kind: int) -> int | None:
        if kind_suit(kind) != suit:
            return None
        same = tiles_of_kind(tiles, kind)
        return same[0] if same else None

    candidates: list[tuple[int, int]] = []
    if tile_value >= CHOW_HIGHEST_MIN_VALUE:
        candidates.append((discarded_kind - 2, discarded_kind - 1))
    if CHOW_MIDDLE_MIN_VALUE <= tile_value <= CHOW_MIDDLE_MAX_VALUE:
        candidates.append((discarded_kind - 1, discarded_kind + 1))
    if tile_value <= CHOW_LOWEST_MAX_VALUE:
        candidates.append((discarded_kind + 1, discarded_kind + 2))

    options: list[tuple[int, int]] = []
    for kind_a, kind_b in candidates:
        tile_a, tile_b = first_of(kind_a), first_of(kind_b)
        if tile_a is not None and tile_b is not None:
            options.append((tile_a, tile_b))
    return options


def is_chow_run(tile_id: int, pair: tuple[int, int]) -> bool:
    """Check that a discard and two hand tiles form consecutive ranks in one suit."""
    if any(is_bonus(t) for t in (tile_id, *pair)):
        return False
    kinds = sorted(tile_kind(t) for t in (tile_id, *pair))
    if len({kind_suit(k) for k in kinds}) != 1:
        return False
    return kinds[1] == kinds[0] + 1 and kinds[2] == kinds[0] + 2


def chow_pair_from_indices(tiles: Sequence[int], index_1: int, index_2: int) -> tuple[int, int]:
    """
    Resolve two 1-based positions in the sorted concealed hand into tiles.

    Raises:
        InvalidIndexError: If either index is outside the hand or both are equal

    """
    hand_length = len(tiles)
    for index in (index_1, index_2):
        if not (1 <= index <= hand_length):
            raise InvalidIndexError(f"index must be positive and bounded by hand length ({hand_length})")
    if index_1 == index_2:
        raise InvalidIndexError("chow needs two different tiles")
    return tiles[index_1 - 1], tiles[index_2 - 1]


def _take_kind(tiles: Sequence[int], kind: int, count: int, meld_name: str, seat: int) -> list[int]:
    """
    Pick count tiles of kind from the hand.

    Raise InvalidMeldError if fewer than count matching tiles are held.
    """
    matching = tiles_of_kind(tiles, kind)
    if len(matching) < count:
        logger.warning(
            "cannot form meld",
            meld=meld_name,
            seat=seat,
            needed=count,
            found=len(matching),
        )
        raise InvalidMeldError(f"cannot {meld_name}: need {count} matching tiles, found {len(matching)}")
    return matching[:count]


def call_pung(
    round_state: RoundState,
    caller_seat: int,
    discarder_seat: int,
    tile_id: int,
) -> tuple[RoundState, Meld]:
    """
    Execute a pung call on a discarded tile.

    Moves 2 matching tiles from the caller's hand plus the discard into a new meld.
    Returns (new_round_state, created_meld).
    """
    if caller_seat == discarder_seat:
        raise InvalidMeldError("you can only pung other's tiles")
    caller = round_state.players[caller_seat]
    removed = _take_kind(caller.tiles, tile_kind(tile_id), TILES_FOR_PUNG, "pung", caller_seat)
    meld = Meld(
        meld_type=MeldType.PUNG,
        tiles=tuple(sorted([*removed, tile_id])),
        from_seat=discarder_seat,
        called_tile=tile_id,
    )
    return add_meld(round_state, caller_seat, meld, removed), meld


def call_chow(
    round_state: RoundState,
    caller_seat: int,
    discarder_seat: int,
    tile_id: int,
    pair: tuple[int, int],
) -> tuple[RoundState, Meld]:
    """
    Execute a chow call on a discarded tile with two chosen hand tiles.

    Returns (new_round_state, created_meld).
    """
    if caller_seat != (discarder_seat + 1) % NUM_PLAYERS:
        raise InvalidMeldError("you can only chow your upper hand's tiles")
    caller = round_state.players[caller_seat]
    if not all(t in caller.tiles for t in pair):
        raise InvalidMeldError("chow tiles are not in hand")
    if not is_chow_run(tile_id, pair):
        raise InvalidMeldError("this discard is not valid to chow with the selected tiles")
    meld = Meld(
        meld_type=MeldType.CHOW,
        tiles=tuple(sorted([*pair, tile_id])),
        from_seat=discarder_seat,
        called_tile=tile_id,
    )
    return add_meld(round_state, caller_seat, meld, pair), meld


def call_claimed_kong(
    round_state: RoundState,
    caller_seat: int,
    discarder_seat: int,
    tile_id: int,
) -> tuple[RoundState, Meld]:
    """
    Execute a kong call on a discarded tile (three matching tiles in hand).

    Increments the caller's kong record. The replacement draw is the caller's
    responsibility. Returns (new_round_state, created_meld).
    """
    if caller_seat == discarder_seat:
        raise InvalidMeldError("you can only kong other's tiles")
    caller = round_state.players[caller_seat]
    removed = _take_kind(caller.tiles, tile_kind(tile_id), TILES_FOR_CLAIMED_KONG, "kong", caller_seat)
    meld = Meld(
        meld_type=MeldType.KONG,
        tiles=tuple(sorted([*removed, tile_id])),
        from_seat=discarder_seat,
        called_tile=tile_id,
    )
    new_state = add_meld(round_state, caller_seat, meld, removed)
    new_state = increment_kong_record(new_state, caller_seat, KONG_RECORD_WEIGHT[KongType.CLAIMED])
    return new_state, meld


def call_concealed_kong(round_state: RoundState, seat: int, kind: int) -> tuple[RoundState, Meld]:
    """
    Declare a concealed kong from four matching concealed tiles.

    Increments the seat's kong record by two. Returns (new_round_state, created_meld).
    """
    player = round_state.players[seat]
    removed = _take_kind(player.tiles, kind, TILES_FOR_CONCEALED_KONG, "kong", seat)
    meld = Meld(meld_type=MeldType.CONCEALED_KONG, tiles=tuple(removed))
    new_state = add_meld(round_state, seat, meld, removed)
    new_state = increment_kong_record(new_state, seat, KONG_RECORD_WEIGHT[KongType.CONCEALED])
    return new_state, meld


def call_extended_kong(round_state: RoundState, seat: int, kind: int) -> tuple[RoundState, Meld]:
    """
    Extend an open pung to a kong with the matching concealed tile.

    Increments the seat's kong record by one. Returns (new_round_state, created_meld).
    """
    player = round_state.players[seat]
    pung = next((m for m in player.melds if m.meld_type == MeldType.PUNG and m.kind == kind), None)
    if pung is None:
        raise InvalidMeldError("no open pung to extend")
    (added,) = _take_kind(player.tiles, kind, 1, "kong", seat)
    kong = Meld(
        meld_type=MeldType.KONG,
        tiles=tuple(sorted([*pung.tiles, added])),
        from_seat=pung.from_seat,
        called_tile=pung.called_tile,
    )
    new_state = upgrade_meld(round_state, seat, pung, kong, added)
    new_state = increment_kong_record(new_state, seat, KONG_RECORD_WEIGHT[KongType.EXTENDED])
    return new_state, kong
