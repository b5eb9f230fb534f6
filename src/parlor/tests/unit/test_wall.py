import random

import pytest

from parlor.logic.tiles import NUM_TILES, all_tiles
from parlor.logic.wall import (
    Wall,
    create_wall,
    create_wall_from_tiles,
    draw_front,
    peek_front,
    shuffled_wall,
    tiles_remaining,
)


class TestShuffledWall:
    def test_is_permutation_of_catalog(self):
        tiles = shuffled_wall(random.Random(1))
        assert sorted(tiles) == all_tiles()

    def test_same_rng_seed_same_order(self):
        assert shuffled_wall(random.Random(5)) == shuffled_wall(random.Random(5))

    def test_different_seeds_differ(self):
        assert shuffled_wall(random.Random(5)) != shuffled_wall(random.Random(6))

    def test_create_wall_holds_every_tile(self):
        wall = create_wall(random.Random(3))
        assert tiles_remaining(wall) == NUM_TILES


class TestCreateWallFromTiles:
    def test_keeps_order(self):
        wall = create_wall_from_tiles([5, 1, 9])
        assert wall.tiles == (5, 1, 9)

    def test_rejects_duplicates(self):
        with pytest.raises(ValueError, match="duplicate"):
            create_wall_from_tiles([1, 2, 1])

    def test_rejects_invalid_ids(self):
        with pytest.raises(ValueError, match="tile_id must be in"):
            create_wall_from_tiles([0, 200])


class TestDrawFront:
    def test_draws_from_front(self):
        wall = Wall(tiles=(7, 8, 9))
        new_wall, tile_id = draw_front(wall)

        assert tile_id == 7
        assert new_wall.tiles == (8, 9)
        # original untouched
        assert wall.tiles == (7, 8, 9)

    def test_exhausted_wall_returns_none(self):
        wall = Wall()
        new_wall, tile_id = draw_front(wall)

        assert tile_id is None
        assert new_wall is wall
        assert tiles_remaining(wall) == 0

    def test_peek_does_not_remove(self):
        wall = Wall(tiles=(3, 4))
        assert peek_front(wall) == 3
        assert tiles_remaining(wall) == 2
        assert peek_front(Wall()) is None
