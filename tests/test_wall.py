"""Tests for wall.py"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import random
from collections import Counter

from american_mahjong.core.tile import TileType, make_tiles_from_string
from american_mahjong.core.wall import WALL_SIZE, Wall, build_standard_tiles


class TestStandardTiles:
    def test_composition(self):
        tiles = build_standard_tiles()
        assert len(tiles) == WALL_SIZE == 144
        by_type = Counter(t.type for t in tiles)
        assert by_type[TileType.BAMBOO] == 36
        assert by_type[TileType.CHARACTER] == 36
        assert by_type[TileType.DOT] == 36
        assert by_type[TileType.WIND] == 16
        assert by_type[TileType.DRAGON] == 12
        assert by_type[TileType.JOKER] == 8

    def test_four_of_each_face(self):
        faces = Counter(t.key for t in build_standard_tiles() if not t.is_joker)
        assert set(faces.values()) == {4}

    def test_unique_ids(self):
        tiles = build_standard_tiles()
        assert len({t.id for t in tiles}) == 144

    def test_ids_follow_build_order(self):
        a, b = build_standard_tiles(), build_standard_tiles()
        assert [t.id for t in a] == [t.id for t in b]
        assert a[0].id == "w0"
        assert a[-1].id == "w143"
        assert a[-1].is_joker


class TestWall:
    def test_new_wall(self):
        wall = Wall()
        assert wall.total_tiles == 144
        assert wall.remaining == 144
        assert not wall.is_empty

    def test_draw(self):
        wall = Wall()
        initial = wall.remaining
        tile = wall.draw()
        assert tile is not None
        assert wall.remaining == initial - 1
        assert wall.drawn_count == 1

    def test_draw_until_empty(self):
        wall = Wall()
        count = 0
        while not wall.is_empty:
            tile = wall.draw()
            assert tile is not None
            count += 1
        assert count == 144
        assert wall.remaining == 0
        assert wall.draw() is None
        assert wall.remaining == 0

    def test_draw_multiple(self):
        wall = Wall(make_tiles_from_string("123b"))
        assert [t.name for t in wall.draw_multiple(2)] == ["1b", "2b"]
        assert [t.name for t in wall.draw_multiple(5)] == ["3b"]
        assert wall.draw_multiple(1) == []

    def test_remaining_tiles(self):
        wall = Wall(make_tiles_from_string("123b"))
        wall.draw()
        assert [t.name for t in wall.remaining_tiles] == ["2b", "3b"]
        assert len(wall.all_tiles) == 3

    def test_reset(self):
        wall = Wall(make_tiles_from_string("123b"))
        first = wall.draw()
        wall.draw()
        wall.reset()
        assert wall.remaining == 3
        assert wall.draw() == first

    def test_seeded_shuffle_reproducible(self):
        tiles = build_standard_tiles()
        a = Wall(tiles, rng=random.Random(7))
        b = Wall(tiles, rng=random.Random(7))
        a.shuffle()
        b.shuffle()
        assert [t.id for t in a.all_tiles] == [t.id for t in b.all_tiles]

    def test_shuffle_keeps_tiles(self):
        wall = Wall(rng=random.Random(1))
        before = {t.id for t in wall.all_tiles}
        wall.shuffle()
        assert {t.id for t in wall.all_tiles} == before
