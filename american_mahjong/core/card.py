"""Card configuration: yearly hand patterns and their tile requirements.

Cards are produced by an external loader that has already parsed and
validated the file. The engine only reads these objects; a year change swaps
the whole CardConfig.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple, Union

from .tile import TileType, TileValue

ANY = "any"
SAME_SUIT = "same_suit"

RequirementType = Union[TileType, str]


@dataclass(frozen=True)
class TileRequirement:
    """One slot of a hand pattern.

    Attributes:
        type: A TileType, ``"any"`` (unconstrained) or ``"same_suit"`` (one
            numbered suit, chosen consistently within this requirement)
        count: Number of tiles the slot needs
        sequence: Tiles must be consecutive values rather than identical
        specific: Explicit allowed values
        values: Allowed values / sequence values
        joker_allowed: Whether jokers may fill the slot
    """
    type: RequirementType
    count: int
    sequence: bool = False
    specific: Optional[Tuple[TileValue, ...]] = None
    values: Optional[Tuple[TileValue, ...]] = None
    joker_allowed: bool = False

    def __post_init__(self):
        if self.type not in (ANY, SAME_SUIT):
            object.__setattr__(self, 'type', TileType(self.type))
        for name in ('specific', 'values'):
            val = getattr(self, name)
            if val is not None:
                object.__setattr__(self, name, tuple(val))

    @property
    def value_list(self) -> Tuple[TileValue, ...]:
        return self.specific or self.values or ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'TileRequirement':
        return cls(
            type=data["type"],
            count=data["count"],
            sequence=data.get("sequence", False),
            specific=data.get("specific"),
            values=data.get("values"),
            joker_allowed=data.get("joker_allowed", data.get("jokerAllowed", False)),
        )


@dataclass(frozen=True)
class HandPattern:
    id: str
    name: str
    category: str
    points: int
    tiles: Tuple[TileRequirement, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'tiles', tuple(self.tiles))

    @property
    def total_required(self) -> int:
        """Sum of requirement counts; 14 on a well-formed card."""
        return sum(r.count for r in self.tiles)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'HandPattern':
        return cls(
            id=data["id"],
            name=data["name"],
            category=data.get("category", ""),
            points=data["points"],
            tiles=tuple(TileRequirement.from_dict(r) for r in data["tiles"]),
        )


@dataclass(frozen=True)
class CardConfig:
    year: int
    version: str
    patterns: Tuple[HandPattern, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'patterns', tuple(self.patterns))

    def get_pattern(self, pattern_id: str) -> Optional[HandPattern]:
        return next((p for p in self.patterns if p.id == pattern_id), None)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'CardConfig':
        """Build from an already-parsed mapping (e.g. decoded card JSON)."""
        return cls(
            year=data["year"],
            version=str(data["version"]),
            patterns=tuple(HandPattern.from_dict(p) for p in data["patterns"]),
        )
