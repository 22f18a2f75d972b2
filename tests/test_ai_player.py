"""Tests for ai_player.py"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import asyncio
import logging
import random

from american_mahjong.core.card import CardConfig, HandPattern, TileRequirement
from american_mahjong.core.tile import make_tiles_from_string
from american_mahjong.player import ai_player
from american_mahjong.player.ai_player import AIPlayer
from american_mahjong.player.base import Decision
from american_mahjong.player.strategy import Difficulty
from american_mahjong.rules.rule_engine import CallOpportunity, CallType


def req(tile_type, count, *values):
    return TileRequirement(tile_type, count, specific=values or None)


CARD = CardConfig(2024, "test", [
    HandPattern("ap", "All Pungs", "Consecutive Run", 25, [
        req("bamboo", 3, 1), req("bamboo", 3, 2), req("bamboo", 3, 3),
        req("bamboo", 3, 4), req("bamboo", 2, 5),
    ]),
])

HAND = "111b 222b 333b 44b 5b N"


class BrokenEvaluator:
    def evaluate_tile_usefulness(self, hand, exposed_sets=()):
        raise RuntimeError("evaluator exploded")

    def evaluate_hand(self, hand, exposed_sets=()):
        raise RuntimeError("evaluator exploded")

    def update_card_config(self, card_config):
        pass


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


def make_ai(**kwargs):
    kwargs.setdefault("thinking_delay", (0, 0))
    kwargs.setdefault("call_delay", (0, 0))
    return AIPlayer(1, CARD, Difficulty.HARD, rng=random.Random(0), **kwargs)


class TestDecisions:
    def test_select_discard(self):
        ai = make_ai()
        decision = ai.select_discard(make_tiles_from_string(HAND), ())
        assert isinstance(decision, Decision)
        assert decision.value.name == "N"
        assert not decision.fallback_used
        assert decision.error is None
        assert decision.elapsed >= 0

    def test_evaluate_call(self):
        ai = make_ai()
        hand = make_tiles_from_string("111b 222b 333b 444b 5b")
        opp = CallOpportunity(1, CallType.MAHJONG, make_tiles_from_string("5b")[0])
        decision = ai.evaluate_call(opp, hand, ())
        assert decision.value.should_call
        assert not decision.fallback_used


class TestFallback:
    def test_discard_fallback(self, caplog):
        ai = make_ai()
        ai.strategy.hand_evaluator = BrokenEvaluator()
        hand = make_tiles_from_string(HAND)
        with caplog.at_level(logging.ERROR, logger="american_mahjong.player.ai_player"):
            decision = ai.select_discard(hand, ())
        assert decision.fallback_used
        assert decision.value is hand[0]
        assert "evaluator exploded" in decision.error
        assert ai.fallback_count == 1
        assert any(r.levelno == logging.ERROR and r.exc_info for r in caplog.records)

    def test_call_fallback_declines(self, monkeypatch):
        ai = make_ai()

        def boom(*args):
            raise ValueError("bad opportunity")

        monkeypatch.setattr(ai.strategy, "decide_call", boom)
        opp = CallOpportunity(1, CallType.PUNG, make_tiles_from_string("1b")[0])
        decision = ai.evaluate_call(opp, make_tiles_from_string(HAND), ())
        assert decision.fallback_used
        assert not decision.value.should_call
        assert ai.fallback_count == 1

    def test_target_pattern_fallback(self):
        ai = make_ai()
        ai.strategy.hand_evaluator = BrokenEvaluator()
        assert ai.select_target_pattern(make_tiles_from_string(HAND), ()) is None
        assert ai.fallback_count == 1


class FakeClock:
    def __init__(self, *times):
        self._times = iter(times)

    def perf_counter(self):
        return next(self._times)


class TestDecisionBudget:
    def test_slow_decision_warns(self, monkeypatch, caplog):
        ai = make_ai()
        monkeypatch.setattr(ai_player, "time", FakeClock(0.0, 3.0))
        with caplog.at_level(logging.WARNING, logger="american_mahjong.player.ai_player"):
            decision = ai.select_discard(make_tiles_from_string(HAND), ())
        assert decision.elapsed == 3.0
        assert not decision.fallback_used
        assert any(r.levelno == logging.WARNING for r in caplog.records)

    def test_fast_decision_silent(self, monkeypatch, caplog):
        ai = make_ai()
        monkeypatch.setattr(ai_player, "time", FakeClock(0.0, 0.5))
        with caplog.at_level(logging.WARNING, logger="american_mahjong.player.ai_player"):
            ai.select_discard(make_tiles_from_string(HAND), ())
        assert not caplog.records


class TestAsync:
    def test_turn_decision_waits(self):
        sleep = RecordingSleep()
        ai = make_ai(thinking_delay=(1.0, 1.0), sleep=sleep)
        decision = asyncio.run(ai.make_turn_decision(make_tiles_from_string(HAND), ()))
        assert decision.value.name == "N"
        assert sleep.delays == [1.0]

    def test_call_decision_uses_call_delay(self):
        sleep = RecordingSleep()
        ai = make_ai(call_delay=(0.25, 0.25), sleep=sleep)
        opp = CallOpportunity(1, CallType.PUNG, make_tiles_from_string("1b")[0])
        asyncio.run(ai.make_call_decision(opp, make_tiles_from_string("11b 222b 333b 444b 5b N"), ()))
        assert sleep.delays == [0.25]

    def test_zero_delay_does_not_sleep(self):
        sleep = RecordingSleep()
        ai = make_ai(sleep=sleep)
        asyncio.run(ai.make_turn_decision(make_tiles_from_string(HAND), ()))
        assert sleep.delays == []

    def test_delay_within_range(self):
        sleep = RecordingSleep()
        ai = make_ai(thinking_delay=(0.5, 1.5), sleep=sleep)
        for _ in range(5):
            asyncio.run(ai.simulate_thinking_time())
        assert all(0.5 <= d <= 1.5 for d in sleep.delays)


class TestConfiguration:
    def test_difficulty_setter(self):
        ai = make_ai()
        ai.difficulty = Difficulty.EASY
        assert ai.difficulty == Difficulty.EASY
        assert ai.strategy.difficulty == Difficulty.EASY

    def test_update_card_config(self):
        ai = make_ai()
        ai.update_card_config(CardConfig(2025, "empty", ()))
        assert ai.evaluate_hand(make_tiles_from_string(HAND), ()) == []
        assert ai.select_target_pattern(make_tiles_from_string(HAND), ()) is None
        assert ai.fallback_count == 0

    def test_repr(self):
        assert repr(make_ai()) == "AIPlayer(1, hard)"
