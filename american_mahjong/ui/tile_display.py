"""Tile display formatting with colors for terminal output."""

from typing import Optional, Sequence

from rich.text import Text

from american_mahjong.core.tile import Tile, TileType
from american_mahjong.core.tileset import TileSet


# Color schemes
SUIT_COLORS = {
    TileType.BAMBOO: "green",
    TileType.CHARACTER: "red",
    TileType.DOT: "blue",
    TileType.WIND: "yellow",
    TileType.DRAGON: "magenta",
    TileType.FLOWER: "cyan",
    TileType.JOKER: "bold white on purple",
}


def tile_to_simple_str(tile: Tile) -> str:
    """Simple string representation of a tile (stable, for logging)."""
    return tile.name


def tile_to_rich_text(tile: Tile, highlight: bool = False) -> Text:
    """Convert a tile to a Rich Text object with appropriate colors."""
    color = SUIT_COLORS[tile.type]
    style = color if tile.is_joker else f"bold {color}"
    if highlight:
        style += " reverse"
    return Text(f"[{tile.name}]", style=style)


def tiles_to_rich_text(tiles: Sequence[Tile], separator: str = " ",
                       highlight: Optional[Tile] = None) -> Text:
    """Convert a list of tiles to Rich Text."""
    result = Text()
    for i, tile in enumerate(tiles):
        if i > 0:
            result.append(separator)
        is_highlighted = highlight is not None and tile.id == highlight.id
        result.append_text(tile_to_rich_text(tile, highlight=is_highlighted))
    return result


def numbered_hand(tiles: Sequence[Tile]) -> Text:
    """Hand with 1-based indices under each tile, for discard prompts."""
    result = Text()
    for i, tile in enumerate(tiles, start=1):
        if i > 1:
            result.append(" ")
        result.append(f"{i}:", style="dim")
        result.append_text(tile_to_rich_text(tile))
    return result


def tilesets_to_rich_text(tilesets: Sequence[TileSet]) -> Text:
    """Exposed sets, one bracketed group each."""
    result = Text()
    for i, tileset in enumerate(tilesets):
        if i > 0:
            result.append("  ")
        result.append(f"{tileset.set_type.value}:", style="dim")
        result.append_text(tiles_to_rich_text(tileset.tiles, separator=""))
    return result


def format_discard_pile(tiles: Sequence[Tile], last: int = 20) -> Text:
    """The most recent discards, newest highlighted."""
    shown = list(tiles)[-last:]
    newest = shown[-1] if shown else None
    result = Text()
    if len(tiles) > len(shown):
        result.append("... ", style="dim")
    result.append_text(tiles_to_rich_text(shown, highlight=newest))
    return result
