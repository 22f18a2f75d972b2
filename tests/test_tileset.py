"""Tests for tileset.py and player_state.py"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from american_mahjong.core.player_state import PlayerState
from american_mahjong.core.tile import TileType, make_tiles_from_string
from american_mahjong.core.tileset import (
    InvalidTileSet, SetType, TileSet, can_form_chow, can_form_kong, can_form_pung,
)


class TestTileSet:
    def test_pung(self):
        s = TileSet.pung(make_tiles_from_string("555b"))
        assert s.set_type == SetType.PUNG
        assert s.count == 3
        assert s.key == (TileType.BAMBOO, 5)

    def test_kong(self):
        s = TileSet.kong(make_tiles_from_string("NNNN"))
        assert s.count == 4

    def test_chow_any_order(self):
        s = TileSet.chow(make_tiles_from_string("324d"))
        assert s.set_type == SetType.CHOW

    def test_invalid_pung(self):
        with pytest.raises(InvalidTileSet, match="Invalid pung set"):
            TileSet.pung(make_tiles_from_string("556b"))

    def test_wrong_size(self):
        with pytest.raises(InvalidTileSet):
            TileSet.kong(make_tiles_from_string("555b"))

    def test_invalid_chow(self):
        with pytest.raises(InvalidTileSet):
            TileSet.chow(make_tiles_from_string("135b"))
        with pytest.raises(InvalidTileSet):
            TileSet.chow(make_tiles_from_string("12b3c"))
        with pytest.raises(InvalidTileSet):
            TileSet.chow(make_tiles_from_string("NES"))

    def test_predicates(self):
        assert can_form_pung(make_tiles_from_string("RRR"))
        assert not can_form_pung(make_tiles_from_string("RRG"))
        assert can_form_kong(make_tiles_from_string("1111c"))
        assert can_form_chow(make_tiles_from_string("789d"))
        assert not can_form_chow(make_tiles_from_string("89d"))

    def test_frozen(self):
        s = TileSet.pung(make_tiles_from_string("555b"))
        with pytest.raises(Exception):
            s.tiles = ()

    def test_contains_by_id(self):
        tiles = make_tiles_from_string("555b")
        s = TileSet.pung(tiles)
        assert s.contains(tiles[0])
        assert not s.contains(make_tiles_from_string("5b")[0])

    def test_str(self):
        s = TileSet.pung(make_tiles_from_string("555b"))
        assert str(s) == "PUNG: [5b, 5b, 5b]"


class TestPlayerState:
    def test_transfers_rebind_tuples(self):
        p = PlayerState(1)
        p.deal(make_tiles_from_string("123b"))
        before = p.hand
        extra = make_tiles_from_string("9d")[0]
        p.receive(extra)
        assert len(before) == 3
        assert len(p.hand) == 4
        assert p.holds(extra)

    def test_give_up(self):
        p = PlayerState(1)
        tiles = make_tiles_from_string("123b")
        p.deal(tiles)
        p.give_up(tiles[1])
        assert [t.name for t in p.hand] == ["1b", "3b"]

    def test_remove_missing_tile(self):
        p = PlayerState(1)
        p.deal(make_tiles_from_string("123b"))
        with pytest.raises(ValueError):
            p.give_up(make_tiles_from_string("1b")[0])

    def test_expose_counts(self):
        p = PlayerState(2)
        p.deal(make_tiles_from_string("1234567b"))
        p.expose(TileSet.pung(make_tiles_from_string("NNN")))
        assert p.exposed_tile_count == 3
        assert p.total_tiles == 10

    def test_snapshot_is_stable(self):
        p = PlayerState(0, is_human=True)
        p.deal(make_tiles_from_string("123b"))
        snap = p.snapshot()
        p.receive(make_tiles_from_string("4b")[0])
        assert len(snap.hand) == 3
        assert snap.is_human
        assert snap == snap
