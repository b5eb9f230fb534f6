"""
Win detection for parlor hands.

A winning hand is the concealed tiles (plus an optional external tile, either
the self-drawn tile already in hand or a claimed discard) decomposed into
(4 - number of melds) sets of three plus one pair. Sets are pungs of one kind
or chows of three consecutive ranks in one suit. Seven pairs and other
special shapes do not count.
"""

from collections.abc import Sequence
from typing import NamedTuple

from parlor.logic.enums import MeldType
from parlor.logic.state import TILES_PER_SET, Meld
from parlor.logic.tiles import COPIES_PER_KIND, NUM_SUITED_KINDS, hand_to_34_array, is_bonus, kind_rank

SETS_PER_HAND = 4
PAIR_SIZE = 2
CHOW_HIGHEST_START_RANK = 7  # 7-8-9 is the highest run


class HandDecomposition(NamedTuple):
    """One way of splitting concealed tiles into a pair and sets (by kind)."""

    pair_kind: int
    sets: tuple[tuple[MeldType, int], ...]  # (PUNG or CHOW, lowest kind)


def _decompose_sets(counts: list[int]) -> list[list[tuple[MeldType, int]]]:
    """
    Return every way of splitting counts exactly into pungs and chows.

    Always works on the lowest remaining kind, so each decomposition is found once.
    """
    kind = next((k for k in range(NUM_SUITED_KINDS) if counts[k]), None)
    if kind is None:
        return [[]]

    results: list[list[tuple[MeldType, int]]] = []
    if counts[kind] >= TILES_PER_SET:
        counts[kind] -= TILES_PER_SET
        results.extend([(MeldType.PUNG, kind), *rest] for rest in _decompose_sets(counts))
        counts[kind] += TILES_PER_SET

    if kind_rank(kind) <= CHOW_HIGHEST_START_RANK and counts[kind + 1] and counts[kind + 2]:
        for k in (kind, kind + 1, kind + 2):
            counts[k] -= 1
        results.extend([(MeldType.CHOW, kind), *rest] for rest in _decompose_sets(counts))
        for k in (kind, kind + 1, kind + 2):
            counts[k] += 1

    return results


def decompose_hand(tiles: Sequence[int], extra_tile: int | None = None) -> list[HandDecomposition]:
    """
    Find every pair-plus-sets decomposition of the concealed tiles.

    Returns an empty list when the tiles do not form a complete shape.
    """
    all_tiles = [*tiles, extra_tile] if extra_tile is not None else list(tiles)
    if any(is_bonus(t) for t in all_tiles):
        return []
    if len(all_tiles) % TILES_PER_SET != PAIR_SIZE:
        return []

    counts = hand_to_34_array(all_tiles)
    decompositions: list[HandDecomposition] = []
    for pair_kind in range(NUM_SUITED_KINDS):
        if counts[pair_kind] < PAIR_SIZE:
            continue
        counts[pair_kind] -= PAIR_SIZE
        decompositions.extend(HandDecomposition(pair_kind, tuple(sets)) for sets in _decompose_sets(counts))
        counts[pair_kind] += PAIR_SIZE
    return decompositions


def is_winning_hand(
    tiles: Sequence[int],
    melds: Sequence[Meld],
    extra_tile: int | None = None,
) -> bool:
    """
    Check if concealed tiles, open melds and an optional extra tile form a win.

    The concealed part must hold exactly enough tiles for the sets the melds
    leave open plus the pair.
    """
    sets_needed = SETS_PER_HAND - len(melds)
    if sets_needed < 0:
        return False
    tile_count = len(tiles) + (1 if extra_tile is not None else 0)
    if tile_count != sets_needed * TILES_PER_SET + PAIR_SIZE:
        return False
    return bool(decompose_hand(tiles, extra_tile))


def can_win_self_drawn(tiles: Sequence[int], melds: Sequence[Meld]) -> bool:
    """Check a self-drawn win: the drawn tile is already in the concealed hand."""
    return is_winning_hand(tiles, melds)


def can_win_on_discard(tiles: Sequence[int], melds: Sequence[Meld], discarded_tile: int) -> bool:
    """Check whether claiming discarded_tile completes the hand."""
    return is_winning_hand(tiles, melds, discarded_tile)


def get_waiting_tiles(tiles: Sequence[int], melds: Sequence[Meld]) -> set[int]:
    """
    Return the kinds that would complete an off-turn hand.

    A kind already used four times between hand and melds cannot be waited on.
    """
    used = hand_to_34_array([*tiles, *(t for m in melds for t in m.tiles)])
    waiting: set[int] = set()
    for kind in range(NUM_SUITED_KINDS):
        if used[kind] >= COPIES_PER_KIND:
            continue
        if is_winning_hand(tiles, melds, kind * COPIES_PER_KIND):
            waiting.add(kind)
    return waiting
