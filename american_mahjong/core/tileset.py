"""Exposed tile sets (Pung/Kong/Chow)."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from .tile import Tile, TileKey


class SetType(str, Enum):
    PUNG = "pung"   # three identical
    KONG = "kong"   # four identical
    CHOW = "chow"   # three consecutive, same suit


SET_SIZES = {SetType.PUNG: 3, SetType.KONG: 4, SetType.CHOW: 3}


class InvalidTileSet(ValueError):
    """Raised when tiles do not form the requested set."""


def _all_identical(tiles: Sequence[Tile]) -> bool:
    return all(t.matches(tiles[0]) for t in tiles)


def can_form_pung(tiles: Sequence[Tile]) -> bool:
    return len(tiles) == 3 and _all_identical(tiles)


def can_form_kong(tiles: Sequence[Tile]) -> bool:
    return len(tiles) == 4 and _all_identical(tiles)


def can_form_chow(tiles: Sequence[Tile]) -> bool:
    return _chow_error(tiles) is None


def _chow_error(tiles: Sequence[Tile]) -> Optional[str]:
    if len(tiles) != 3:
        return f"Chow requires exactly 3 tiles, got {len(tiles)}"
    if not all(t.can_form_sequence for t in tiles):
        return "Chow requires suited tiles only"
    if any(t.type != tiles[0].type for t in tiles):
        return "Chow requires tiles of the same suit"
    values = sorted(t.numeric_value for t in tiles)
    if values[1] != values[0] + 1 or values[2] != values[1] + 1:
        return "Chow requires three consecutive tiles"
    return None


def _set_error(set_type: SetType, tiles: Sequence[Tile]) -> Optional[str]:
    if set_type == SetType.CHOW:
        return _chow_error(tiles)
    size = SET_SIZES[set_type]
    name = set_type.value.capitalize()
    if len(tiles) != size:
        return f"{name} requires exactly {size} tiles, got {len(tiles)}"
    if not _all_identical(tiles):
        return f"{name} requires {size} identical tiles"
    return None


@dataclass(frozen=True)
class TileSet:
    """A validated, frozen exposed set.

    Build through :meth:`pung`, :meth:`kong` or :meth:`chow`; an invalid
    combination raises :class:`InvalidTileSet` instead of being accepted.

    Attributes:
        set_type: Kind of set
        tiles: Member tiles (the called tile included)
    """
    set_type: SetType
    tiles: Tuple[Tile, ...]

    def __post_init__(self):
        object.__setattr__(self, 'set_type', SetType(self.set_type))
        object.__setattr__(self, 'tiles', tuple(self.tiles))
        error = _set_error(self.set_type, self.tiles)
        if error:
            raise InvalidTileSet(f"Invalid {self.set_type.value} set: {error}")

    @classmethod
    def pung(cls, tiles: Sequence[Tile]) -> 'TileSet':
        return cls(SetType.PUNG, tuple(tiles))

    @classmethod
    def kong(cls, tiles: Sequence[Tile]) -> 'TileSet':
        return cls(SetType.KONG, tuple(tiles))

    @classmethod
    def chow(cls, tiles: Sequence[Tile]) -> 'TileSet':
        return cls(SetType.CHOW, tuple(tiles))

    @property
    def count(self) -> int:
        return len(self.tiles)

    @property
    def key(self) -> TileKey:
        """Face of the set's first tile (the whole set for pung/kong)."""
        return self.tiles[0].key

    def contains(self, tile: Tile) -> bool:
        return any(t.id == tile.id for t in self.tiles)

    def __str__(self):
        return f"{self.set_type.value.upper()}: [{', '.join(t.name for t in self.tiles)}]"
