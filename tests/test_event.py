"""Tests for event.py"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from american_mahjong.engine.event import EventBus, EventType, GameEvent


class TestEventBus:
    def test_subscribe_and_emit(self):
        bus = EventBus()
        seen = []
        bus.subscribe(EventType.DRAW, seen.append)
        event = GameEvent(EventType.DRAW, {"player": 0})
        bus.emit(event)
        assert seen == [event]

    def test_only_matching_type(self):
        bus = EventBus()
        seen = []
        bus.subscribe(EventType.DRAW, seen.append)
        bus.emit(GameEvent(EventType.DISCARD))
        assert seen == []

    def test_listeners_in_order(self):
        bus = EventBus()
        order = []
        bus.subscribe(EventType.CALL, lambda e: order.append("a"))
        bus.subscribe(EventType.CALL, lambda e: order.append("b"))
        bus.emit(GameEvent(EventType.CALL))
        assert order == ["a", "b"]

    def test_unsubscribe(self):
        bus = EventBus()
        seen = []
        bus.subscribe(EventType.DRAW, seen.append)
        bus.unsubscribe(EventType.DRAW, seen.append)
        bus.unsubscribe(EventType.MAHJONG, seen.append)
        bus.emit(GameEvent(EventType.DRAW))
        assert seen == []

    def test_clear(self):
        bus = EventBus()
        seen = []
        bus.subscribe(EventType.DRAW, seen.append)
        bus.clear()
        bus.emit(GameEvent(EventType.DRAW))
        assert seen == []

    def test_listener_errors_propagate(self):
        bus = EventBus()

        def broken(event):
            raise RuntimeError("listener failed")

        bus.subscribe(EventType.GAME_END, broken)
        with pytest.raises(RuntimeError):
            bus.emit(GameEvent(EventType.GAME_END))
