"""
Wall state and operations.

The wall is an ordered sequence of undrawn tiles. Every draw (normal turn
draws, bonus replacements and kong replacements) takes the front tile, and
the wall is never reshuffled mid-round.
"""

import random
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

from parlor.logic.tiles import NUM_TILES, all_tiles, validate_tile_id


class Wall(BaseModel):
    """Immutable wall state for a round."""

    model_config = ConfigDict(frozen=True)

    tiles: tuple[int, ...] = ()


def shuffled_wall(rng: random.Random) -> list[int]:
    """Return a randomly permuted copy of the full tile catalog."""
    tiles = all_tiles()
    rng.shuffle(tiles)
    return tiles


def create_wall(rng: random.Random) -> Wall:
    """Build a freshly shuffled wall holding every tile of the catalog."""
    return Wall(tiles=tuple(shuffled_wall(rng)))


def create_wall_from_tiles(tiles: Sequence[int]) -> Wall:
    """
    Create a wall from an explicit tile order (for tests and scripted rounds).

    The sequence may be any subset of the catalog, but every id must be valid
    and appear at most once.
    """
    for tile_id in tiles:
        validate_tile_id(tile_id)
    if len(set(tiles)) != len(tiles):
        raise ValueError("wall contains duplicate tile ids")
    if len(tiles) > NUM_TILES:
        raise ValueError(f"wall cannot hold more than {NUM_TILES} tiles")
    return Wall(tiles=tuple(tiles))


def draw_front(wall: Wall) -> tuple[Wall, int | None]:
    """
    Remove the first tile of the wall.

    Returns (new_wall, tile_id), or (wall, None) when the wall is exhausted.
    """
    if not wall.tiles:
        return wall, None
    return wall.model_copy(update={"tiles": wall.tiles[1:]}), wall.tiles[0]


def peek_front(wall: Wall) -> int | None:
    return wall.tiles[0] if wall.tiles else None


def tiles_remaining(wall: Wall) -> int:
    return len(wall.tiles)
