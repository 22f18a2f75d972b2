"""Tests for tile_display.py and renderer.py"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import io

from rich.console import Console

from american_mahjong.core.card import CardConfig, HandPattern, TileRequirement
from american_mahjong.core.tile import make_tiles_from_string
from american_mahjong.core.tileset import TileSet
from american_mahjong.engine.event import EventBus
from american_mahjong.engine.game import GameConfig, GameEngine
from american_mahjong.ui.renderer import Renderer, seat_name
from american_mahjong.ui.tile_display import (
    format_discard_pile, numbered_hand, tile_to_rich_text, tile_to_simple_str,
    tiles_to_rich_text, tilesets_to_rich_text,
)


CARD = CardConfig(2024, "test", [
    HandPattern("ap", "All Pungs", "Consecutive Run", 25, [
        TileRequirement("bamboo", 3, specific=[1]), TileRequirement("bamboo", 3, specific=[2]),
        TileRequirement("bamboo", 3, specific=[3]), TileRequirement("bamboo", 3, specific=[4]),
        TileRequirement("bamboo", 2, specific=[5]),
    ]),
])


def make_console():
    return Console(file=io.StringIO(), width=120, color_system=None)


def output(console):
    return console.file.getvalue()


class TestTileDisplay:
    def test_simple_str(self):
        assert tile_to_simple_str(make_tiles_from_string("5b")[0]) == "5b"

    def test_rich_text(self):
        text = tile_to_rich_text(make_tiles_from_string("5b")[0])
        assert text.plain == "[5b]"
        assert "green" in str(text.style)

    def test_highlight(self):
        tiles = make_tiles_from_string("1b 2b")
        text = tiles_to_rich_text(tiles, highlight=tiles[1])
        assert text.plain == "[1b] [2b]"
        assert "reverse" in str(text.spans[-1].style)

    def test_numbered_hand(self):
        assert numbered_hand(make_tiles_from_string("1b N")).plain == "1:[1b] 2:[N]"

    def test_tilesets(self):
        text = tilesets_to_rich_text([TileSet.pung(make_tiles_from_string("555b"))])
        assert text.plain == "pung:[5b][5b][5b]"

    def test_discard_pile_truncated(self):
        tiles = make_tiles_from_string("123456789b")
        assert format_discard_pile(tiles, last=3).plain == "... [7b] [8b] [9b]"
        assert format_discard_pile([]).plain == ""


class TestRenderer:
    def make_engine(self):
        bus = EventBus()
        console = make_console()
        renderer = Renderer(console, bus)
        engine = GameEngine(CARD, GameConfig(seed=3, thinking_delay=(0, 0), call_delay=(0, 0)),
                            event_bus=bus)
        engine.initialize_game()
        return engine, renderer, console

    def test_seat_name(self):
        assert seat_name(0) == "You"
        assert seat_name(2) == "Seat 2 (AI)"
        assert seat_name(0, human_seat=1) == "Seat 0 (AI)"

    def test_render_board(self):
        engine, renderer, console = self.make_engine()
        renderer.render_board(engine.get_state())
        text = output(console)
        assert "Card 2024" in text
        assert "Wall: 92 tiles left" in text
        assert "Your hand:" in text

    def test_human_discard_not_echoed(self):
        engine, renderer, console = self.make_engine()
        engine.draw_tile(0)
        engine.discard_tile(0, engine.human_player.hand[0])
        assert "You discards" not in output(console)

    def test_wall_exhausted_and_result(self):
        engine, renderer, console = self.make_engine()
        engine.wall.draw_multiple(engine.wall.remaining)
        engine.draw_tile(0)
        renderer.show_result(engine.get_state(), engine.get_winner_info())
        text = output(console)
        assert "The wall is exhausted." in text
        assert "No winner" in text

    def test_mahjong_result(self):
        engine, renderer, console = self.make_engine()
        engine.draw_tile(0)
        engine.human_player.replace_hand(make_tiles_from_string("111b 222b 333b 444b 55b"))
        engine.declare_mahjong(0)
        renderer.show_result(engine.get_state(), engine.get_winner_info())
        text = output(console)
        assert "MAHJONG!" in text
        assert "All Pungs: 25 points" in text
