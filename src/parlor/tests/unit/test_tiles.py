import pytest

from parlor.logic.tiles import (
    BONUS_START,
    NUM_TILES,
    all_tiles,
    hand_to_34_array,
    is_bonus,
    kind_rank,
    kind_suit,
    sort_tiles,
    tile_kind,
    tile_name,
    tiles_of_kind,
    tiles_to_string,
    validate_tile_id,
)
from parlor.tests.helpers.tiles import tiles


class TestCatalog:
    def test_catalog_has_116_tiles(self):
        assert NUM_TILES == 116
        assert all_tiles() == list(range(116))

    def test_four_copies_of_each_suited_kind(self):
        kinds = [tile_kind(t) for t in all_tiles() if not is_bonus(t)]
        assert len(kinds) == 108
        assert all(kinds.count(k) == 4 for k in range(27))

    def test_eight_bonus_tiles(self):
        bonus = [t for t in all_tiles() if is_bonus(t)]
        assert bonus == list(range(BONUS_START, 116))

    def test_validate_rejects_out_of_range(self):
        with pytest.raises(ValueError, match="tile_id must be in"):
            validate_tile_id(116)
        with pytest.raises(ValueError, match="tile_id must be in"):
            validate_tile_id(-1)


class TestKinds:
    def test_suited_ids_match_mahjong_library_layout(self):
        assert tiles(man="1") == [0]
        assert tiles(pin="5") == [52]
        assert tiles(sou="9") == [104]

    def test_kind_suit_and_rank(self):
        five_pin = tile_kind(tiles(pin="5")[0])
        assert kind_suit(five_pin) == 1
        assert kind_rank(five_pin) == 5

    def test_copies_share_kind(self):
        first, second = tiles(sou="77")
        assert first != second
        assert tile_kind(first) == tile_kind(second)

    def test_bonus_tiles_are_distinct_kinds(self):
        assert tile_kind(108) != tile_kind(109)


class TestNames:
    def test_tile_names(self):
        assert tile_name(tiles(man="5")[0]) == "5m"
        assert tile_name(tiles(sou="9")[0]) == "9s"
        assert tile_name(108) == "F1"
        assert tile_name(115) == "S4"

    def test_tiles_to_string(self):
        assert tiles_to_string(tiles(man="12", pin="3")) == "1m 2m 3p"
        assert tiles_to_string([]) == ""


class TestHandHelpers:
    def test_sort_tiles_returns_tuple(self):
        assert sort_tiles([40, 3, 17]) == (3, 17, 40)

    def test_hand_to_34_array_skips_bonus(self):
        counts = hand_to_34_array([*tiles(man="11", sou="9"), 110])
        assert counts[0] == 2
        assert counts[26] == 1
        assert sum(counts) == 3
        assert len(counts) == 34

    def test_tiles_of_kind(self):
        hand = tiles(pin="2225")
        assert tiles_of_kind(hand, 10) == hand[:3]
        assert tiles_of_kind(hand, 13) == [hand[3]]
        assert tiles_of_kind(hand, 0) == []
