"""Decision policy for automated opponents, parameterized by difficulty.

Discards:
- Rank hand tiles by HandEvaluator usefulness and take the least useful
- EASY: half the time, a random tile from the least useful half instead
- MEDIUM: one time in five, a random tile among the three least useful
- HARD: always the least useful tile

Calls:
- Mahjong whenever the discard completes a valid hand
- Kong/pung when taking the set does not increase the best pattern's
  tiles-needed estimate; EASY passes on such a call 30% of the time
"""

import logging
import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from american_mahjong.core.card import CardConfig
from american_mahjong.core.tile import Tile
from american_mahjong.core.tileset import TileSet
from american_mahjong.rules.hand_evaluator import HandEvaluation, HandEvaluator
from american_mahjong.rules.hand_validator import HandValidator
from american_mahjong.rules.rule_engine import CALL_TILES_NEEDED, CallOpportunity, CallType, matching_tiles

logger = logging.getLogger(__name__)

EASY_RANDOM_DISCARD_CHANCE = 0.5
MEDIUM_RANDOM_DISCARD_CHANCE = 0.2
MEDIUM_RANDOM_DISCARD_WINDOW = 3
EASY_SKIP_CALL_CHANCE = 0.3


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class CallDecision:
    should_call: bool
    call_type: Optional[CallType] = None
    reason: str = ""


class Strategy:
    """Chooses discards and call responses for one automated seat."""

    def __init__(self, card_config: CardConfig, difficulty: Difficulty = Difficulty.MEDIUM,
                 rng: Optional[random.Random] = None,
                 hand_evaluator: Optional[HandEvaluator] = None,
                 hand_validator: Optional[HandValidator] = None):
        self.hand_evaluator = hand_evaluator or HandEvaluator(card_config)
        self.hand_validator = hand_validator or HandValidator(card_config)
        self.difficulty = Difficulty(difficulty)
        self._rng = rng or random.Random()

    def select_discard(self, hand: Sequence[Tile], exposed_sets: Sequence[TileSet]) -> Tile:
        usefulness = self.hand_evaluator.evaluate_tile_usefulness(hand, exposed_sets)
        if not usefulness:
            return hand[0]

        offset = self._discard_offset(len(usefulness))
        return usefulness[len(usefulness) - 1 - offset].tile

    def _discard_offset(self, n: int) -> int:
        """Distance from the least useful tile, chosen by difficulty."""
        if self.difficulty == Difficulty.EASY:
            if self._rng.random() < EASY_RANDOM_DISCARD_CHANCE:
                return self._rng.randrange(math.ceil(n / 2))
        elif self.difficulty == Difficulty.MEDIUM:
            if self._rng.random() < MEDIUM_RANDOM_DISCARD_CHANCE:
                return self._rng.randrange(min(MEDIUM_RANDOM_DISCARD_WINDOW, n))
        return 0

    def decide_call(self, opportunity: CallOpportunity, hand: Sequence[Tile],
                    exposed_sets: Sequence[TileSet]) -> CallDecision:
        call_type = opportunity.call_type
        if call_type == CallType.MAHJONG:
            return self._decide_mahjong(opportunity.tile, hand, exposed_sets)
        if call_type in CALL_TILES_NEEDED:
            return self._decide_set_call(opportunity.tile, call_type, hand, exposed_sets)
        return CallDecision(False, reason="Unknown call type")

    def _decide_mahjong(self, tile: Tile, hand: Sequence[Tile],
                        exposed_sets: Sequence[TileSet]) -> CallDecision:
        validation = self.hand_validator.validate_hand(list(hand) + [tile], exposed_sets)
        if validation.is_valid:
            return CallDecision(True, CallType.MAHJONG,
                                f"Valid winning hand: {validation.matched_pattern.name}")
        return CallDecision(False, reason="Hand does not form a valid winning pattern")

    def _decide_set_call(self, tile: Tile, call_type: CallType, hand: Sequence[Tile],
                         exposed_sets: Sequence[TileSet]) -> CallDecision:
        name = call_type.value.capitalize()
        taken = matching_tiles(hand, tile)[:CALL_TILES_NEEDED[call_type]]
        if len(taken) < CALL_TILES_NEEDED[call_type]:
            return CallDecision(False, call_type, f"Not enough tiles for {name.lower()}")

        current = self.hand_evaluator.evaluate_hand(hand, exposed_sets)
        taken_ids = {t.id for t in taken}
        simulated_hand = [t for t in hand if t.id not in taken_ids]
        members = [tile] + taken
        simulated_set = TileSet.kong(members) if call_type == CallType.KONG else TileSet.pung(members)
        after = self.hand_evaluator.evaluate_hand(simulated_hand, list(exposed_sets) + [simulated_set])

        if not current or not after:
            return CallDecision(False, call_type, f"Unable to evaluate {name.lower()} benefit")

        keeps_position = after[0].tiles_needed <= current[0].tiles_needed
        should_call = keeps_position
        if self.difficulty == Difficulty.EASY and keeps_position:
            should_call = self._rng.random() >= EASY_SKIP_CALL_CHANCE

        logger.debug("%s on %s: %d -> %d tiles needed, call=%s", name, tile.name,
                     current[0].tiles_needed, after[0].tiles_needed, should_call)

        if should_call:
            reason = f"{name} improves position ({after[0].tiles_needed} tiles needed)"
        elif keeps_position:
            reason = f"{name} skipped"
        else:
            reason = f"{name} does not improve position"
        return CallDecision(should_call, call_type, reason)

    def select_target_pattern(self, hand: Sequence[Tile],
                              exposed_sets: Sequence[TileSet]) -> Optional[HandEvaluation]:
        evaluations = self.hand_evaluator.evaluate_hand(hand, exposed_sets)
        return evaluations[0] if evaluations else None

    def update_card_config(self, card_config: CardConfig):
        self.hand_evaluator.update_card_config(card_config)
        self.hand_validator.update_card_config(card_config)
