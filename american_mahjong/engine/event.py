"""Event system for decoupling engine from UI."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List


class EventType(Enum):
    GAME_START = "game_start"
    GAME_END = "game_end"
    TURN_START = "turn_start"
    DRAW = "draw"
    DISCARD = "discard"
    CALL_OPPORTUNITY = "call_opportunity"
    CALL = "call"
    MAHJONG = "mahjong"
    WALL_EXHAUSTED = "wall_exhausted"


@dataclass
class GameEvent:
    """An event emitted by the game engine."""
    event_type: EventType
    data: Dict[str, Any] = field(default_factory=dict)


class EventBus:
    """Simple publish/subscribe event bus.

    Listeners run synchronously, in subscription order, inside ``emit``.
    An exception raised by a listener propagates to the emitter.
    """

    def __init__(self):
        self._listeners: Dict[EventType, List[Callable]] = {}

    def subscribe(self, event_type: EventType, callback: Callable):
        """Register a callback for an event type."""
        if event_type not in self._listeners:
            self._listeners[event_type] = []
        self._listeners[event_type].append(callback)

    def unsubscribe(self, event_type: EventType, callback: Callable):
        """Remove a callback; unknown callbacks are ignored."""
        listeners = self._listeners.get(event_type, [])
        if callback in listeners:
            listeners.remove(callback)

    def emit(self, event: GameEvent):
        """Emit an event to all registered listeners."""
        listeners = list(self._listeners.get(event.event_type, []))
        for callback in listeners:
            callback(event)

    def clear(self):
        """Remove all listeners."""
        self._listeners.clear()
