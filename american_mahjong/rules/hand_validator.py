"""Winning hand validation against card patterns, with joker substitution.

Matching is a single greedy pass: requirements are processed in the order the
card lists them and earlier choices are never revisited. A hand that only a
different assignment of tiles (or jokers) would satisfy is rejected.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from american_mahjong.core.card import ANY, SAME_SUIT, CardConfig, HandPattern, TileRequirement
from american_mahjong.core.player_state import WINNING_HAND_SIZE
from american_mahjong.core.tile import SUITED_TYPES, Tile, TileKey, TileType
from american_mahjong.core.tileset import TileSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    matched_pattern: Optional[HandPattern] = None
    score: Optional[int] = None
    error: Optional[str] = None


def combine_tiles(concealed: Sequence[Tile], exposed_sets: Sequence[TileSet]) -> List[Tile]:
    """Concealed tiles followed by every exposed set's tiles."""
    tiles = list(concealed)
    for tileset in exposed_sets:
        tiles.extend(tileset.tiles)
    return tiles


def tile_matches_requirement(tile: Tile, requirement: TileRequirement) -> bool:
    """Type and value constraint check. Jokers never match here."""
    if tile.is_joker:
        return False
    if requirement.type == SAME_SUIT:
        if not tile.is_suited:
            return False
    elif requirement.type != ANY and tile.type != requirement.type:
        return False
    values = requirement.value_list
    if values:
        return tile.value in values
    return True


def best_suit(tiles: Sequence[Tile], requirement: TileRequirement,
              distinct: bool = False) -> Optional[TileType]:
    """Numbered suit with the most tiles matching the requirement.

    With ``distinct`` only different values are counted (sequence slots need
    one tile per value). Ties go to the earlier suit in SUITED_TYPES order.
    """
    best, best_count = None, 0
    for suit in SUITED_TYPES:
        matching = [t for t in tiles
                    if t.type == suit and tile_matches_requirement(t, requirement)]
        count = len({t.value for t in matching}) if distinct else len(matching)
        if count > best_count:
            best, best_count = suit, count
    return best


class HandValidator:
    """Validates 14-tile hands against the patterns of one card."""

    def __init__(self, card_config: CardConfig):
        self._card_config = card_config

    @property
    def card_config(self) -> CardConfig:
        return self._card_config

    def update_card_config(self, card_config: CardConfig):
        self._card_config = card_config

    def validate_hand(self, concealed: Sequence[Tile],
                      exposed_sets: Sequence[TileSet] = ()) -> ValidationResult:
        """Check a hand against every pattern, in card order.

        The first matching pattern wins even if a later one would score more.
        """
        all_tiles = combine_tiles(concealed, exposed_sets)

        if len(all_tiles) != WINNING_HAND_SIZE:
            return ValidationResult(
                is_valid=False,
                error=f"Invalid hand size: {len(all_tiles)} tiles "
                      f"(expected {WINNING_HAND_SIZE})",
            )

        for pattern in self._card_config.patterns:
            if self.match_pattern(all_tiles, pattern):
                logger.debug("Hand matched pattern %s", pattern.id)
                return ValidationResult(
                    is_valid=True,
                    matched_pattern=pattern,
                    score=self.calculate_score(pattern),
                )

        return ValidationResult(is_valid=False,
                                error="Hand does not match any valid pattern")

    def match_pattern(self, tiles: Sequence[Tile], pattern: HandPattern) -> bool:
        """Whether the tiles satisfy every requirement with nothing left over."""
        pool = [t for t in tiles if not t.is_joker]
        jokers = [t for t in tiles if t.is_joker]

        for requirement in pattern.tiles:
            if requirement.sequence:
                matched = self._match_sequence(pool, jokers, requirement)
            else:
                matched = self._match_group(pool, jokers, requirement)
            if not matched:
                return False

        return not pool and not jokers

    def calculate_score(self, pattern: HandPattern) -> int:
        return pattern.points

    def _match_group(self, pool: List[Tile], jokers: List[Tile],
                     requirement: TileRequirement) -> bool:
        """Identical-tile slot (pair, pung, kong, quint...).

        Consumes from ``pool``/``jokers`` in place on success only.
        """
        candidates = [t for t in pool if tile_matches_requirement(t, requirement)]
        if requirement.type == SAME_SUIT:
            suit = best_suit(candidates, requirement)
            candidates = [t for t in candidates if t.type == suit]

        groups: Dict[TileKey, List[Tile]] = {}
        for tile in candidates:
            groups.setdefault(tile.key, []).append(tile)

        usable_jokers = len(jokers) if requirement.joker_allowed else 0
        for group in groups.values():
            if len(group) + usable_jokers < requirement.count:
                continue
            for tile in group[:requirement.count]:
                pool.remove(tile)
            shortfall = max(0, requirement.count - len(group))
            del jokers[:shortfall]
            return True

        return False

    def _match_sequence(self, pool: List[Tile], jokers: List[Tile],
                        requirement: TileRequirement) -> bool:
        """Consecutive-value slot: one tile per listed value, jokers for gaps."""
        values = list(dict.fromkeys(requirement.value_list))
        if not values:
            return False

        if requirement.type == SAME_SUIT:
            suit = best_suit(pool, requirement, distinct=True)
            if suit is None:
                suit = SUITED_TYPES[0]
        elif requirement.type == ANY:
            return False
        else:
            suit = requirement.type

        picked = []
        missing = 0
        for value in values:
            tile = next((t for t in pool
                         if t.type == suit and t.value == value), None)
            if tile is None:
                missing += 1
            else:
                picked.append(tile)

        if missing and (not requirement.joker_allowed or len(jokers) < missing):
            return False

        for tile in picked:
            pool.remove(tile)
        del jokers[:missing]
        return True
