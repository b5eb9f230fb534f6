"""
Tile catalog and tile utilities for the parlor game.
"""

from collections.abc import Iterable

# tile ids (4 copies of each suited tile, one of each bonus tile)
# man (characters): 0-35 (1m-9m, 4 copies each)
# pin (dots): 36-71 (1p-9p, 4 copies each)
# sou (bamboo): 72-107 (1s-9s, 4 copies each)
# bonus: 108-115 (flowers F1-F4, seasons S1-S4)
# suited ids share the mahjong library's 136-format layout

MAN_START = 0
PIN_START = 36
SOU_START = 72
BONUS_START = 108
BONUS_END = 115

TILE_ID_MIN = 0
TILE_ID_MAX = BONUS_END
NUM_TILES = BONUS_END + 1

COPIES_PER_KIND = 4
RANKS_PER_SUIT = 9
NUM_SUITS = 3
NUM_SUITED_KINDS = NUM_SUITS * RANKS_PER_SUIT  # 27
KINDS_34 = 34  # size of the mahjong library's 34-format count array

SUIT_LETTERS = ("m", "p", "s")
BONUS_NAMES = ("F1", "F2", "F3", "F4", "S1", "S2", "S3", "S4")


def validate_tile_id(tile_id: int) -> None:
    """Raise ValueError when tile_id is outside the catalog."""
    if not (TILE_ID_MIN <= tile_id <= TILE_ID_MAX):
        raise ValueError(f"tile_id must be in [{TILE_ID_MIN}, {TILE_ID_MAX}], got {tile_id}")


def all_tiles() -> list[int]:
    """Return every tile of the catalog in catalog order."""
    return list(range(NUM_TILES))


def is_bonus(tile_id: int) -> bool:
    """
    Check if tile is a bonus tile (flower or season).

    Bonus tiles never enter a hand: they are set aside and replaced by another draw.
    """
    return BONUS_START <= tile_id <= BONUS_END


def tile_kind(tile_id: int) -> int:
    """
    Return the kind of a tile.

    Suited kinds are 0-26 (same as the 34-format used by the mahjong library);
    every bonus tile is its own kind starting at 27.
    """
    validate_tile_id(tile_id)
    if is_bonus(tile_id):
        return NUM_SUITED_KINDS + (tile_id - BONUS_START)
    return tile_id // COPIES_PER_KIND


def kind_suit(kind: int) -> int:
    """Suit index (0 man, 1 pin, 2 sou) of a suited kind."""
    return kind // RANKS_PER_SUIT


def kind_rank(kind: int) -> int:
    """Rank (1-9) of a suited kind."""
    return kind % RANKS_PER_SUIT + 1


def tile_name(tile_id: int) -> str:
    """Short display name, e.g. '5m', '9s' or 'F2'."""
    if is_bonus(tile_id):
        return BONUS_NAMES[tile_id - BONUS_START]
    kind = tile_kind(tile_id)
    return f"{kind_rank(kind)}{SUIT_LETTERS[kind_suit(kind)]}"


def tiles_to_string(tiles: Iterable[int]) -> str:
    return " ".join(tile_name(t) for t in tiles)


def sort_tiles(tiles: Iterable[int]) -> tuple[int, ...]:
    """Sorted tuple of tiles (catalog order keeps kinds grouped)."""
    return tuple(sorted(tiles))


def hand_to_34_array(tiles: Iterable[int]) -> list[int]:
    """
    Convert suited tile ids to a 34-element count array.

    Bonus tiles are skipped: they never belong to a hand.
    """
    counts = [0] * KINDS_34
    for tile_id in tiles:
        if not is_bonus(tile_id):
            counts[tile_kind(tile_id)] += 1
    return counts


def tiles_of_kind(tiles: Iterable[int], kind: int) -> list[int]:
    return sorted(t for t in tiles if tile_kind(t) == kind)
