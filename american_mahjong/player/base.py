"""Abstract automated-player interface and typed decision results."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Optional, Sequence, TypeVar

from american_mahjong.core.tile import Tile
from american_mahjong.core.tileset import TileSet
from american_mahjong.rules.rule_engine import CallOpportunity

T = TypeVar("T")


@dataclass(frozen=True)
class Decision(Generic[T]):
    """Outcome of an automated decision.

    Attributes:
        value: What was decided (a tile to discard, a call decision...)
        fallback_used: True when the decision logic failed and the safe
            default was substituted
        error: Description of the failure when ``fallback_used``
        elapsed: Seconds spent deciding, thinking delay excluded
    """
    value: T
    fallback_used: bool = False
    error: Optional[str] = None
    elapsed: float = 0.0


class Player(ABC):
    """Base class for seats whose decisions are computed, not asked for."""

    def __init__(self, player_id: int):
        self.player_id = player_id

    @abstractmethod
    def select_discard(self, hand: Sequence[Tile],
                       exposed_sets: Sequence[TileSet]) -> Decision:
        """Choose a tile to discard from a 14-tile position."""
        ...

    @abstractmethod
    def evaluate_call(self, opportunity: CallOpportunity, hand: Sequence[Tile],
                      exposed_sets: Sequence[TileSet]) -> Decision:
        """Decide whether to claim another seat's discard."""
        ...
