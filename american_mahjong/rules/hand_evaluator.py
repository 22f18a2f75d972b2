"""Proximity of a hand to each card pattern, and per-tile usefulness.

This is guidance for the automated players, not a validator. Each
requirement is counted on its own against the whole hand, so one physical
tile may count toward several requirements at once. The numbers are an
optimistic estimate; only HandValidator decides whether a hand wins.
"""

from collections import Counter
from dataclasses import dataclass
from typing import FrozenSet, List, Sequence, Set

from american_mahjong.core.card import ANY, SAME_SUIT, CardConfig, HandPattern, TileRequirement
from american_mahjong.core.tile import (
    SUITED_TYPES, JOKER_VALUE, Tile, TileKey, TileType,
    tiles_to_counts,
)
from american_mahjong.core.tileset import TileSet
from american_mahjong.rules.hand_validator import combine_tiles

JOKER_USEFULNESS = 100
PROXIMITY_WEIGHT = 10
CRITICAL_BONUS = 20
CRITICAL_TILES_NEEDED = 2


@dataclass(frozen=True)
class HandEvaluation:
    """How close a hand is to one pattern.

    Attributes:
        pattern: The pattern evaluated
        tiles_needed: Estimated tiles still missing (0 = possibly complete)
        proximity_score: 0-100, share of required tiles already matched
        useful_tiles: Face keys the pattern asks for
    """
    pattern: HandPattern
    tiles_needed: int
    proximity_score: int
    useful_tiles: FrozenSet[TileKey]


@dataclass(frozen=True)
class TileUsefulness:
    tile: Tile
    score: float
    pattern_count: int
    is_critical: bool


def _count_faces(counts: Counter, tile_type: TileType, values: Sequence) -> int:
    if values:
        return sum(counts.get((tile_type, v), 0) for v in values)
    return sum(n for (t, _), n in counts.items() if t == tile_type)


def count_matching_tiles(counts: Counter, requirement: TileRequirement) -> int:
    """Candidates for one requirement, capped at its count."""
    values = requirement.value_list
    if requirement.sequence and not values:
        return 0

    if requirement.type == ANY:
        if requirement.sequence:
            return 0
        available = sum(n for (t, _), n in counts.items() if t != TileType.JOKER)
    elif requirement.type == SAME_SUIT:
        available = max(_count_faces(counts, suit, values) for suit in SUITED_TYPES)
    else:
        available = _count_faces(counts, requirement.type, values)

    return min(available, requirement.count)


def referenced_faces(requirement: TileRequirement) -> Set[TileKey]:
    """Faces a requirement names explicitly.

    ``any`` slots and requirements without a value list name no face.
    """
    if requirement.type == ANY:
        return set()
    if requirement.type == SAME_SUIT:
        suits = SUITED_TYPES
    else:
        suits = (requirement.type,)
    return {(suit, value) for suit in suits for value in requirement.value_list}


class HandEvaluator:
    """Ranks patterns by proximity and hand tiles by usefulness."""

    def __init__(self, card_config: CardConfig):
        self._card_config = card_config

    def update_card_config(self, card_config: CardConfig):
        self._card_config = card_config

    def evaluate_hand(self, hand: Sequence[Tile],
                      exposed_sets: Sequence[TileSet] = ()) -> List[HandEvaluation]:
        """Evaluate every pattern; closest first.

        Sorted by tiles needed (ascending), then proximity (descending).
        """
        counts = tiles_to_counts(combine_tiles(hand, exposed_sets))
        evaluations = [self.evaluate_pattern(counts, p) for p in self._card_config.patterns]
        evaluations.sort(key=lambda e: (e.tiles_needed, -e.proximity_score))
        return evaluations

    def evaluate_pattern(self, counts: Counter, pattern: HandPattern) -> HandEvaluation:
        joker_count = counts.get((TileType.JOKER, JOKER_VALUE), 0)
        total_required = 0
        total_matched = 0
        useful: Set[TileKey] = set()

        for requirement in pattern.tiles:
            total_required += requirement.count
            total_matched += count_matching_tiles(counts, requirement)
            useful |= referenced_faces(requirement)

        tiles_needed = max(0, total_required - total_matched - joker_count)
        proximity = round(100 * total_matched / total_required) if total_required else 0

        return HandEvaluation(
            pattern=pattern,
            tiles_needed=tiles_needed,
            proximity_score=proximity,
            useful_tiles=frozenset(useful),
        )

    def evaluate_tile_usefulness(self, hand: Sequence[Tile],
                                 exposed_sets: Sequence[TileSet] = ()) -> List[TileUsefulness]:
        """Score each concealed tile; most useful first."""
        evaluations = self.evaluate_hand(hand, exposed_sets)
        results = []

        for tile in hand:
            if tile.is_joker:
                results.append(TileUsefulness(tile, JOKER_USEFULNESS, len(evaluations), True))
                continue

            score = 0.0
            pattern_count = 0
            is_critical = False
            for evaluation in evaluations:
                if tile.key not in evaluation.useful_tiles:
                    continue
                pattern_count += 1
                score += evaluation.proximity_score / 100 * PROXIMITY_WEIGHT
                if evaluation.tiles_needed <= CRITICAL_TILES_NEEDED:
                    is_critical = True
                    score += CRITICAL_BONUS

            results.append(TileUsefulness(tile, score, pattern_count, is_critical))

        results.sort(key=lambda u: -u.score)
        return results

    def find_best_discard(self, hand: Sequence[Tile],
                          exposed_sets: Sequence[TileSet] = ()) -> Tile:
        """Least useful tile; the first hand tile when nothing was scored."""
        usefulness = self.evaluate_tile_usefulness(hand, exposed_sets)
        if not usefulness:
            return hand[0]
        return usefulness[-1].tile
