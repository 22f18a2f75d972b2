"""Per-seat state: concealed hand, exposed sets, discard history."""

from dataclasses import dataclass
from typing import Iterable, Tuple

from .tile import Tile
from .tileset import TileSet

NUM_SEATS = 4
HUMAN_SEAT = 0
HAND_SIZE = 13
WINNING_HAND_SIZE = 14


@dataclass(frozen=True)
class SeatSnapshot:
    """Read-only copy of a seat, as published in GameState."""
    id: int
    is_human: bool
    hand: Tuple[Tile, ...]
    exposed_sets: Tuple[TileSet, ...]
    discarded_tiles: Tuple[Tile, ...]


class PlayerState:
    """State for one seat.

    The three containers are tuples. Every change rebinds them through one of
    the transfer methods below, so a tuple handed out earlier (to a snapshot,
    an AI decision, a validator) never changes underneath its holder.

    Attributes:
        id: Seat index (0-3, fixed). Seat 0 is the human by default.
        is_human: Whether decisions for this seat come from outside
        hand: Concealed tiles
        exposed_sets: Called sets
        discarded_tiles: Tiles this seat has discarded, in order
    """

    def __init__(self, seat: int, is_human: bool = False):
        self.id = seat
        self.is_human = is_human
        self.hand: Tuple[Tile, ...] = ()
        self.exposed_sets: Tuple[TileSet, ...] = ()
        self.discarded_tiles: Tuple[Tile, ...] = ()

    def deal(self, tiles: Iterable[Tile]):
        """Replace the hand with a freshly dealt one."""
        self.hand = tuple(tiles)

    def receive(self, tile: Tile):
        """A tile enters the concealed hand (draw or called mahjong tile)."""
        self.hand = self.hand + (tile,)

    def give_up(self, tile: Tile):
        """Remove one tile (by id) from the concealed hand."""
        self.remove_tiles([tile])

    def remove_tiles(self, tiles: Iterable[Tile]):
        ids = {t.id for t in tiles}
        kept = tuple(t for t in self.hand if t.id not in ids)
        if len(self.hand) - len(kept) != len(ids):
            raise ValueError(f"seat {self.id} does not hold all of {sorted(ids)}")
        self.hand = kept

    def replace_hand(self, tiles: Iterable[Tile]):
        self.hand = tuple(tiles)

    def expose(self, tileset: TileSet):
        self.exposed_sets = self.exposed_sets + (tileset,)

    def record_discard(self, tile: Tile):
        self.discarded_tiles = self.discarded_tiles + (tile,)

    def holds(self, tile: Tile) -> bool:
        return any(t.id == tile.id for t in self.hand)

    @property
    def exposed_tile_count(self) -> int:
        return sum(s.count for s in self.exposed_sets)

    @property
    def total_tiles(self) -> int:
        """Concealed plus exposed tiles."""
        return len(self.hand) + self.exposed_tile_count

    def snapshot(self) -> SeatSnapshot:
        return SeatSnapshot(
            id=self.id,
            is_human=self.is_human,
            hand=self.hand,
            exposed_sets=self.exposed_sets,
            discarded_tiles=self.discarded_tiles,
        )

    def __repr__(self):
        kind = "human" if self.is_human else "ai"
        return f"PlayerState({self.id}, {kind}, {len(self.hand)} tiles)"
