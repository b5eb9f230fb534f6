"""Shanten calculation and discard suggestion using the mahjong library."""

from collections.abc import Sequence

from mahjong.shanten import Shanten

from parlor.logic.tiles import RANKS_PER_SUIT, hand_to_34_array, is_bonus, tile_kind

# hands larger than a full hand have no meaningful shanten
_NOT_TENPAI: int = 8
_MAX_HAND_TILES = 14


def calculate_shanten(tiles: Sequence[int]) -> int:
    """
    Calculate the regular-hand shanten of concealed tiles.

    Only four-sets-plus-a-pair shapes count, so seven pairs and thirteen
    orphans are disabled. Fewer tiles than a full hand are treated as having
    the missing sets already declared as melds.
    """
    tiles_34 = hand_to_34_array(tiles)
    total = sum(tiles_34)
    if total == 0 or total > _MAX_HAND_TILES:
        return _NOT_TENPAI
    return Shanten().calculate_shanten(tiles_34, use_chiitoitsu=False, use_kokushi=False)


def _is_isolated_tile(kind: int, tiles_34: list[int]) -> bool:
    """
    Check if a tile kind is isolated: no other copy and no neighbour within two ranks.

    Isolated tiles are good discard candidates as they don't contribute to sets.
    """
    if tiles_34[kind] > 1:
        return False

    suit_start = (kind // RANKS_PER_SUIT) * RANKS_PER_SUIT
    for offset in (-2, -1, 1, 2):
        neighbour = kind + offset
        if suit_start <= neighbour < suit_start + RANKS_PER_SUIT and tiles_34[neighbour] > 0:
            return False
    return True


def suggest_discard(tiles: Sequence[int]) -> int:
    """
    Select the tile least useful toward a winning hand.

    Tries each distinct kind and picks the one whose removal leaves the lowest
    shanten. Ties prefer isolated tiles, then the lowest tile id, so the
    result is reproducible.
    """
    candidates = sorted(t for t in tiles if not is_bonus(t))
    if not candidates:
        raise ValueError("cannot suggest a discard from an empty hand")

    shanten = Shanten()
    tiles_34 = hand_to_34_array(candidates)

    best_key: tuple[int, int, int] | None = None
    best_tile = candidates[0]
    seen_kinds: set[int] = set()
    for tile_id in candidates:
        kind = tile_kind(tile_id)
        if kind in seen_kinds:
            continue
        seen_kinds.add(kind)

        isolated = _is_isolated_tile(kind, tiles_34)

        # simulate discard
        tiles_34[kind] -= 1
        new_shanten = shanten.calculate_shanten(tiles_34, use_chiitoitsu=False, use_kokushi=False)
        tiles_34[kind] += 1  # restore

        key = (new_shanten, 0 if isolated else 1, tile_id)
        if best_key is None or key < best_key:
            best_key = key
            best_tile = tile_id

    return best_tile
