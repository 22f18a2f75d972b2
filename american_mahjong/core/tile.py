"""Tile definition for American Mahjong (suits, honors, flowers, jokers)."""

import itertools
from collections import Counter
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union


class TileType(str, Enum):
    BAMBOO = "bamboo"
    CHARACTER = "character"
    DOT = "dot"
    WIND = "wind"
    DRAGON = "dragon"
    FLOWER = "flower"
    JOKER = "joker"


SUITED_TYPES = (TileType.BAMBOO, TileType.CHARACTER, TileType.DOT)
HONOR_TYPES = (TileType.WIND, TileType.DRAGON, TileType.FLOWER)

WIND_VALUES = ("N", "E", "S", "W")
DRAGON_VALUES = ("Red", "Green", "White")
FLOWER_VALUE = "Flower"
JOKER_VALUE = "Joker"

TileValue = Union[int, str]
TileKey = Tuple[TileType, TileValue]

SUIT_CHARS = {"b": TileType.BAMBOO, "c": TileType.CHARACTER, "d": TileType.DOT}
HONOR_CHARS = {
    "N": (TileType.WIND, "N"),
    "E": (TileType.WIND, "E"),
    "S": (TileType.WIND, "S"),
    "W": (TileType.WIND, "W"),
    "R": (TileType.DRAGON, "Red"),
    "G": (TileType.DRAGON, "Green"),
    "O": (TileType.DRAGON, "White"),  # soap
    "F": (TileType.FLOWER, FLOWER_VALUE),
    "J": (TileType.JOKER, JOKER_VALUE),
}

# Ids for tiles made outside a wall (tests, hand shorthand)
_id_counter = itertools.count()


def _next_id(tile_type: TileType, value: TileValue) -> str:
    return f"{tile_type.value}-{value}-{next(_id_counter)}"


class Tile:
    """A single physical tile.

    Identity (``id``, ``type``, ``value``) is fixed at creation. A called set
    holds :meth:`exposed_copy` versions, so the ``is_exposed`` flag of a tile
    already seen in a snapshot never changes.
    Equality and hashing follow the unique id, so two bamboo-5 tiles are
    distinct objects; use :meth:`matches` or :attr:`key` to compare faces.
    """
    __slots__ = ('_id', '_type', '_value', 'is_exposed')

    def __init__(self, tile_type: TileType, value: TileValue,
                 is_exposed: bool = False, tile_id: Optional[str] = None):
        tile_type = TileType(tile_type)
        if tile_type in SUITED_TYPES:
            if not isinstance(value, int) or not (1 <= value <= 9):
                raise ValueError(f"suited tile value must be 1..9, got {value!r}")
        elif tile_type == TileType.WIND and value not in WIND_VALUES:
            raise ValueError(f"unknown wind {value!r}")
        elif tile_type == TileType.DRAGON and value not in DRAGON_VALUES:
            raise ValueError(f"unknown dragon {value!r}")
        self._id = tile_id or _next_id(tile_type, value)
        self._type = tile_type
        self._value = value
        self.is_exposed = is_exposed

    @property
    def id(self) -> str:
        return self._id

    @property
    def type(self) -> TileType:
        return self._type

    @property
    def value(self) -> TileValue:
        return self._value

    @property
    def key(self) -> TileKey:
        """Face identity used for grouping and counting."""
        return (self._type, self._value)

    @property
    def is_joker(self) -> bool:
        return self._type == TileType.JOKER

    @property
    def is_suited(self) -> bool:
        return self._type in SUITED_TYPES

    @property
    def is_honor(self) -> bool:
        return self._type in HONOR_TYPES

    @property
    def can_form_sequence(self) -> bool:
        return self.is_suited and isinstance(self._value, int)

    @property
    def numeric_value(self) -> Optional[int]:
        return self._value if isinstance(self._value, int) else None

    @property
    def name(self) -> str:
        if self.is_suited:
            return f"{self._value}{self._type.value[0]}"
        if self.is_joker:
            return "J"
        if self._type == TileType.FLOWER:
            return "F"
        return str(self._value)

    def matches(self, other: 'Tile') -> bool:
        """Same face (type and value), ignoring id and exposure."""
        return self._type == other.type and self._value == other.value

    def clone(self, is_exposed: Optional[bool] = None) -> 'Tile':
        """Copy with a fresh id."""
        return Tile(self._type, self._value,
                    self.is_exposed if is_exposed is None else is_exposed)

    def exposed_copy(self) -> 'Tile':
        """The same tile (same id) flagged exposed. ``self`` is not changed."""
        return Tile(self._type, self._value, True, tile_id=self._id)

    def __repr__(self):
        exposed = ", exposed" if self.is_exposed else ""
        return f"Tile({self.name}{exposed})"

    def __eq__(self, other):
        if isinstance(other, Tile):
            return self._id == other._id
        return NotImplemented

    def __hash__(self):
        return hash(self._id)

    def __lt__(self, other):
        if isinstance(other, Tile):
            return sort_key(self) < sort_key(other)
        return NotImplemented


_TYPE_ORDER = {t: i for i, t in enumerate(TileType)}


def sort_key(tile: Tile) -> Tuple[int, int, str]:
    """Display order: suits by value, then winds, dragons, flowers, jokers."""
    if isinstance(tile.value, int):
        rank = tile.value
    elif tile.type == TileType.WIND:
        rank = WIND_VALUES.index(tile.value)
    elif tile.type == TileType.DRAGON:
        rank = DRAGON_VALUES.index(tile.value)
    else:
        rank = 0
    return (_TYPE_ORDER[tile.type], rank, tile.id)


def tiles_to_counts(tiles: Iterable[Tile]) -> Counter:
    """Count tiles by face key."""
    return Counter(t.key for t in tiles)


def make_tiles_from_string(s: str) -> List[Tile]:
    """Parse shorthand like '111b 22c 5d NESW RGO J' into fresh tiles.

    Digits are buffered until a suit letter (b/c/d) closes them. Winds are
    N/E/S/W, dragons R/G/O (O = white "soap"), F is a flower and J a joker.
    Whitespace is ignored.
    """
    tiles = []
    numbers = []
    for ch in s:
        if ch.isdigit():
            numbers.append(int(ch))
        elif ch in SUIT_CHARS:
            if not numbers:
                raise ValueError(f"suit '{ch}' without values in {s!r}")
            for n in numbers:
                tiles.append(Tile(SUIT_CHARS[ch], n))
            numbers = []
        elif ch in HONOR_CHARS:
            tile_type, value = HONOR_CHARS[ch]
            tiles.append(Tile(tile_type, value))
        elif ch.isspace():
            continue
        else:
            raise ValueError(f"unknown tile character {ch!r} in {s!r}")
    if numbers:
        raise ValueError(f"dangling values {numbers} in {s!r}")
    return tiles
