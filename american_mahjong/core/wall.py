"""Wall (tile pool) management."""

import random
from typing import List, Optional

from .tile import (
    Tile, TileType, SUITED_TYPES, WIND_VALUES, DRAGON_VALUES, JOKER_VALUE,
)

COPIES_PER_TILE = 4
JOKER_COUNT = 8
WALL_SIZE = 144


def build_standard_tiles() -> List[Tile]:
    """Fresh, unshuffled set of the 144 standard tiles.

    108 suited (3 suits x 9 values x 4) + 16 winds + 12 dragons + 8 jokers.
    Ids follow the build order (``w0`` .. ``w143``), so every wall built
    here carries the same ids.
    """
    faces = []
    for suit in SUITED_TYPES:
        for value in range(1, 10):
            faces.extend([(suit, value)] * COPIES_PER_TILE)
    for wind in WIND_VALUES:
        faces.extend([(TileType.WIND, wind)] * COPIES_PER_TILE)
    for dragon in DRAGON_VALUES:
        faces.extend([(TileType.DRAGON, dragon)] * COPIES_PER_TILE)
    faces.extend([(TileType.JOKER, JOKER_VALUE)] * JOKER_COUNT)
    return [Tile(tile_type, value, tile_id=f"w{i}") for i, (tile_type, value) in enumerate(faces)]


class Wall:
    """Manages the tile pool for one game.

    Tiles are never removed: drawing advances a cursor, so the wall can be
    rewound with :meth:`reset` and ``total_tiles`` never changes.

    Args:
        tiles: Explicit tile order (for tests / replays). Defaults to the
            standard 144-tile set.
        rng: Random source used by :meth:`shuffle`. Pass a seeded
            ``random.Random`` for reproducible games.
    """

    def __init__(self, tiles: Optional[List[Tile]] = None,
                 rng: Optional[random.Random] = None):
        self._tiles = list(tiles) if tiles is not None else build_standard_tiles()
        self._rng = rng or random.Random()
        self._drawn = 0

    def shuffle(self):
        """Uniform random permutation of the whole wall."""
        self._rng.shuffle(self._tiles)

    def draw(self) -> Optional[Tile]:
        """Draw the next tile, or None once the wall is exhausted."""
        if self.is_empty:
            return None
        tile = self._tiles[self._drawn]
        self._drawn += 1
        return tile

    def draw_multiple(self, count: int) -> List[Tile]:
        """Draw up to ``count`` tiles; fewer if the wall runs out."""
        drawn = []
        for _ in range(count):
            tile = self.draw()
            if tile is None:
                break
            drawn.append(tile)
        return drawn

    def reset(self):
        """Rewind the cursor. Does not reshuffle."""
        self._drawn = 0

    @property
    def is_empty(self) -> bool:
        return self._drawn >= len(self._tiles)

    @property
    def remaining(self) -> int:
        """Number of undrawn tiles."""
        return max(0, len(self._tiles) - self._drawn)

    @property
    def drawn_count(self) -> int:
        return self._drawn

    @property
    def total_tiles(self) -> int:
        return len(self._tiles)

    @property
    def all_tiles(self) -> List[Tile]:
        return list(self._tiles)

    @property
    def remaining_tiles(self) -> List[Tile]:
        return self._tiles[self._drawn:]
