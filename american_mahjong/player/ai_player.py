"""Automated opponent: Strategy wrapped in a never-fail decision contract."""

import asyncio
import logging
import random
import time
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple

from american_mahjong.core.card import CardConfig
from american_mahjong.core.tile import Tile
from american_mahjong.core.tileset import TileSet
from american_mahjong.player.base import Decision, Player
from american_mahjong.player.strategy import CallDecision, Difficulty, Strategy
from american_mahjong.rules.hand_evaluator import HandEvaluation, HandEvaluator
from american_mahjong.rules.rule_engine import CallOpportunity

logger = logging.getLogger(__name__)

# Seconds a decision may take before it is reported as slow
DECISION_BUDGET = 2.0

DEFAULT_THINKING_DELAY = (0.5, 1.5)
DEFAULT_CALL_DELAY = (0.2, 0.8)


class AIPlayer(Player):
    """Computer-controlled seat.

    Every decision method returns a :class:`Decision`. If the strategy
    raises, the error is logged, ``fallback_count`` is bumped and a safe
    default is returned (discard the first tile, do not call), so the turn
    loop can never stall on an automated seat.

    The async ``make_*`` variants first wait out a simulated thinking delay.
    It only paces the game; nothing may depend on it for ordering.
    """

    def __init__(self, player_id: int, card_config: CardConfig,
                 difficulty: Difficulty = Difficulty.MEDIUM,
                 rng: Optional[random.Random] = None,
                 thinking_delay: Tuple[float, float] = DEFAULT_THINKING_DELAY,
                 call_delay: Tuple[float, float] = DEFAULT_CALL_DELAY,
                 sleep: Callable[[float], Awaitable] = asyncio.sleep):
        super().__init__(player_id)
        self._rng = rng or random.Random()
        self._difficulty = Difficulty(difficulty)
        self.strategy = Strategy(card_config, self._difficulty, rng=self._rng)
        self.hand_evaluator = HandEvaluator(card_config)
        self.thinking_delay = thinking_delay
        self.call_delay = call_delay
        self._sleep = sleep
        self.fallback_count = 0

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    @difficulty.setter
    def difficulty(self, difficulty: Difficulty):
        self._difficulty = Difficulty(difficulty)
        self.strategy.difficulty = self._difficulty

    def select_discard(self, hand: Sequence[Tile],
                       exposed_sets: Sequence[TileSet]) -> Decision[Tile]:
        start = time.perf_counter()
        try:
            tile = self.strategy.select_discard(hand, exposed_sets)
        except Exception as e:
            self.fallback_count += 1
            logger.error("AI seat %d failed to select a discard, using first tile",
                         self.player_id, exc_info=True)
            return Decision(hand[0], fallback_used=True, error=repr(e),
                            elapsed=time.perf_counter() - start)

        elapsed = self._check_budget("select discard", start)
        return Decision(tile, elapsed=elapsed)

    def evaluate_call(self, opportunity: CallOpportunity, hand: Sequence[Tile],
                      exposed_sets: Sequence[TileSet]) -> Decision[CallDecision]:
        start = time.perf_counter()
        try:
            decision = self.strategy.decide_call(opportunity, hand, exposed_sets)
        except Exception as e:
            self.fallback_count += 1
            logger.error("AI seat %d failed to evaluate %s call, declining",
                         self.player_id, opportunity.call_type.value, exc_info=True)
            return Decision(CallDecision(False, reason="Error during call evaluation"),
                            fallback_used=True, error=repr(e),
                            elapsed=time.perf_counter() - start)

        elapsed = self._check_budget("evaluate call", start)
        logger.debug("AI seat %d %s decision: %s", self.player_id,
                     opportunity.call_type.value, decision.reason)
        return Decision(decision, elapsed=elapsed)

    def _check_budget(self, what: str, start: float) -> float:
        elapsed = time.perf_counter() - start
        if elapsed > DECISION_BUDGET:
            logger.warning("AI seat %d took %.2fs to %s", self.player_id, elapsed, what)
        return elapsed

    async def simulate_thinking_time(self, delay_range: Optional[Tuple[float, float]] = None):
        low, high = delay_range or self.thinking_delay
        delay = low + self._rng.random() * (high - low)
        if delay > 0:
            await self._sleep(delay)

    async def make_turn_decision(self, hand: Sequence[Tile],
                                 exposed_sets: Sequence[TileSet]) -> Decision[Tile]:
        await self.simulate_thinking_time(self.thinking_delay)
        return self.select_discard(hand, exposed_sets)

    async def make_call_decision(self, opportunity: CallOpportunity, hand: Sequence[Tile],
                                 exposed_sets: Sequence[TileSet]) -> Decision[CallDecision]:
        await self.simulate_thinking_time(self.call_delay)
        return self.evaluate_call(opportunity, hand, exposed_sets)

    def select_target_pattern(self, hand: Sequence[Tile],
                              exposed_sets: Sequence[TileSet]) -> Optional[HandEvaluation]:
        try:
            return self.strategy.select_target_pattern(hand, exposed_sets)
        except Exception:
            self.fallback_count += 1
            logger.error("AI seat %d failed to select a target pattern",
                         self.player_id, exc_info=True)
            return None

    def evaluate_hand(self, hand: Sequence[Tile],
                      exposed_sets: Sequence[TileSet]) -> List[HandEvaluation]:
        return self.hand_evaluator.evaluate_hand(hand, exposed_sets)

    def update_card_config(self, card_config: CardConfig):
        self.strategy.update_card_config(card_config)
        self.hand_evaluator.update_card_config(card_config)

    def __repr__(self):
        return f"AIPlayer({self.player_id}, {self._difficulty.value})"
