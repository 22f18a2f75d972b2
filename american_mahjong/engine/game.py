"""Game management - one American Mahjong game, human seat against three AI seats."""

import logging
import random
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from american_mahjong.core.card import CardConfig
from american_mahjong.core.player_state import HAND_SIZE, HUMAN_SEAT, NUM_SEATS, PlayerState, SeatSnapshot
from american_mahjong.core.tile import Tile
from american_mahjong.core.wall import Wall
from american_mahjong.engine.errors import GameStateError, InvalidMove
from american_mahjong.engine.event import EventBus, EventType, GameEvent
from american_mahjong.player.ai_player import DEFAULT_CALL_DELAY, DEFAULT_THINKING_DELAY, AIPlayer
from american_mahjong.player.strategy import Difficulty
from american_mahjong.rules.hand_validator import HandValidator, ValidationResult
from american_mahjong.rules.rule_engine import CALL_TILES_NEEDED, CallOpportunity, CallType, RuleEngine

logger = logging.getLogger(__name__)


class TurnPhase(str, Enum):
    DRAW = "draw"
    DISCARD = "discard"
    CALL_OPPORTUNITY = "call_opportunity"
    GAME_OVER = "game_over"


class GameStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    DRAW = "draw"


class GameConfig:
    """Game configuration."""

    def __init__(
        self,
        human_seat: int = HUMAN_SEAT,
        difficulties: Optional[Dict[int, Difficulty]] = None,
        seed: Optional[int] = None,
        thinking_delay: Tuple[float, float] = DEFAULT_THINKING_DELAY,
        call_delay: Tuple[float, float] = DEFAULT_CALL_DELAY,
        auto_declare_ai_wins: bool = True,
    ):
        if not 0 <= human_seat < NUM_SEATS:
            raise ValueError(f"human_seat must be 0-{NUM_SEATS - 1}, got {human_seat}")
        self.human_seat = human_seat
        self.difficulties = dict(difficulties or {})
        self.seed = seed
        self.thinking_delay = thinking_delay
        self.call_delay = call_delay
        self.auto_declare_ai_wins = auto_declare_ai_wins

    def difficulty_for(self, seat: int) -> Difficulty:
        return Difficulty(self.difficulties.get(seat, Difficulty.MEDIUM))


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of a game, as returned by GameEngine.get_state()."""
    game_id: str
    card_year: int
    current_player: int
    players: Tuple[SeatSnapshot, ...]
    wall_remaining: int
    discard_pile: Tuple[Tile, ...]
    phase: TurnPhase
    status: GameStatus
    winner_id: Optional[int] = None


@dataclass(frozen=True)
class WinnerInfo:
    player: SeatSnapshot
    validation_result: ValidationResult


class GameEngine:
    """Owns all mutable game state and enforces the turn state machine.

    A turn is DRAW -> DISCARD, then either the next seat's DRAW or, when
    some seat may claim the discard, CALL_OPPORTUNITY. Requests that break
    turn, phase or ownership rules raise :class:`InvalidMove` and leave the
    state untouched.

    Every collaborator can be injected; pass a seeded ``random.Random`` (or
    set ``GameConfig.seed``) for a reproducible shuffle and AI play.
    """

    def __init__(self, card_config: CardConfig, config: Optional[GameConfig] = None,
                 rng: Optional[random.Random] = None,
                 event_bus: Optional[EventBus] = None,
                 rule_engine: Optional[RuleEngine] = None,
                 hand_validator: Optional[HandValidator] = None):
        self.card_config = card_config
        self.config = config or GameConfig()
        self.rng = rng or random.Random(self.config.seed)
        self.event_bus = event_bus or EventBus()
        self.rule_engine = rule_engine or RuleEngine()
        self.hand_validator = hand_validator or HandValidator(card_config)

        self.wall = Wall(rng=self.rng)
        self.players: List[PlayerState] = []
        self._ai_players: Dict[int, AIPlayer] = {}

        self.game_id = self._new_game_id()
        self._current = 0
        self._discard_pile: Tuple[Tile, ...] = ()
        self._pending_calls: Tuple[CallOpportunity, ...] = ()
        self.phase = TurnPhase.DRAW
        self.status = GameStatus.IN_PROGRESS
        self.winner_id: Optional[int] = None

    def _new_game_id(self) -> str:
        return f"game-{uuid.UUID(int=self.rng.getrandbits(128)).hex[:12]}"

    # ---- Setup ----

    def initialize_game(self):
        """Shuffle a fresh wall, seat four players and deal 13 tiles each."""
        self.wall = Wall(rng=self.rng)
        self.wall.shuffle()

        human = self.config.human_seat
        self.players = [PlayerState(seat, is_human=(seat == human)) for seat in range(NUM_SEATS)]
        self._ai_players = {
            seat: AIPlayer(
                seat, self.card_config,
                difficulty=self.config.difficulty_for(seat),
                rng=self.rng,
                thinking_delay=self.config.thinking_delay,
                call_delay=self.config.call_delay,
            )
            for seat in range(NUM_SEATS) if seat != human
        }

        for player in self.players:
            player.deal(self.wall.draw_multiple(HAND_SIZE))

        self.game_id = self._new_game_id()
        self._current = 0
        self._discard_pile = ()
        self._pending_calls = ()
        self.phase = TurnPhase.DRAW
        self.status = GameStatus.IN_PROGRESS
        self.winner_id = None

        logger.info("Game %s started with card %s, human at seat %d",
                    self.game_id, self.card_config.year, human)
        self.event_bus.emit(GameEvent(EventType.GAME_START, {
            "game_id": self.game_id,
            "card_year": self.card_config.year,
            "human_seat": human,
        }))
        self.event_bus.emit(GameEvent(EventType.TURN_START, {"player": self._current}))

    # ---- Turn actions ----

    def draw_tile(self, seat: int) -> Optional[Tile]:
        """Draw for ``seat``. Returns None (and ends the game drawn) when the
        wall is exhausted."""
        player = self.get_player(seat)
        self._require_turn(seat, TurnPhase.DRAW, "draw")

        tile = self.wall.draw()
        if tile is None:
            self._end_game()
            return None

        player.receive(tile)
        self.phase = TurnPhase.DISCARD
        logger.debug("Seat %d drew %s (%d left)", seat, tile.name, self.wall.remaining)
        self.event_bus.emit(GameEvent(EventType.DRAW, {
            "player": seat,
            "tile": tile,
            "remaining": self.wall.remaining,
        }))
        return tile

    def discard_tile(self, seat: int, tile: Tile):
        player = self.get_player(seat)
        self._require_turn(seat, TurnPhase.DISCARD, "discard")
        if not self.rule_engine.validate_discard(tile, player.hand):
            raise InvalidMove("Tile not in hand", details={"tile": tile.id})

        player.give_up(tile)
        player.record_discard(tile)
        self._discard_pile = self._discard_pile + (tile,)
        logger.debug("Seat %d discarded %s", seat, tile.name)
        self.event_bus.emit(GameEvent(EventType.DISCARD, {"player": seat, "tile": tile}))

        opportunities = self.evaluate_call_opportunity(tile)
        if opportunities:
            self._pending_calls = tuple(opportunities)
            self.phase = TurnPhase.CALL_OPPORTUNITY
            self.event_bus.emit(GameEvent(EventType.CALL_OPPORTUNITY, {
                "tile": tile,
                "discarder": seat,
                "opportunities": self._pending_calls,
            }))
        else:
            self.advance_turn()

    def advance_turn(self):
        """Pass the turn clockwise, or end the game if the wall is empty."""
        self._pending_calls = ()
        if self.wall.is_empty:
            self._end_game()
            return

        self._current = self.rule_engine.get_next_player(self._current)
        self.phase = TurnPhase.DRAW
        self.event_bus.emit(GameEvent(EventType.TURN_START, {"player": self._current}))

    def _require_turn(self, seat: int, phase: TurnPhase, action: str):
        if not self.rule_engine.is_player_turn(seat, self._current):
            raise InvalidMove(f"Not your turn to {action}",
                              details={"seat": seat, "current": self._current})
        if self.phase != phase:
            raise InvalidMove(f"Cannot {action} in current phase",
                              details={"phase": self.phase.value})

    # ---- Calls ----

    def evaluate_call_opportunity(self, tile: Tile) -> List[CallOpportunity]:
        """Who could claim ``tile`` if the current player discarded it."""
        return self.rule_engine.get_call_opportunities(
            tile, self._current, self.players, self.hand_validator)

    def process_call(self, seat: int, call_type: CallType, tile: Tile):
        """Apply a claim on the latest discard.

        Mahjong ends the game with ``seat`` as winner. Pung/kong expose the
        set and make ``seat`` the current player, who must now discard.
        """
        player = self.get_player(seat)
        self._require_claim(seat, tile)

        call_type = CallType(call_type)
        if call_type == CallType.MAHJONG:
            result = self.hand_validator.validate_hand(list(player.hand) + [tile],
                                                       player.exposed_sets)
            if not result.is_valid:
                raise InvalidMove("Invalid mahjong declaration", details={"error": result.error})
            self._take_discard(tile)
            player.receive(tile)
            self._win(seat, result, called=True)
            return

        check = (self.rule_engine.validate_kong_call if call_type == CallType.KONG
                 else self.rule_engine.validate_pung_call)(player.hand, tile)
        if not check.is_valid:
            raise InvalidMove(check.error)

        tileset, remaining = self.rule_engine.process_call(player.hand, tile, call_type)
        self._take_discard(tile)
        player.replace_hand(remaining)
        player.expose(tileset)

        discarder = self._current
        self._current = seat
        self._pending_calls = ()
        self.phase = TurnPhase.DISCARD
        logger.info("Seat %d called %s on %s from seat %d",
                    seat, call_type.value, tile.name, discarder)
        self.event_bus.emit(GameEvent(EventType.CALL, {
            "player": seat,
            "call_type": call_type,
            "tile": tile,
            "from_player": discarder,
            "tileset": tileset,
        }))

    def _require_claim(self, seat: int, tile: Tile):
        if self.phase != TurnPhase.CALL_OPPORTUNITY:
            raise InvalidMove("No call opportunity available")
        if not self._discard_pile or self._discard_pile[-1].id != tile.id:
            raise InvalidMove("Tile is not the latest discard", details={"tile": tile.id})
        if seat == self._current:
            raise InvalidMove("Cannot call your own discard")

    def _take_discard(self, tile: Tile):
        self._discard_pile = tuple(t for t in self._discard_pile if t.id != tile.id)

    def decline_call_opportunities(self):
        if self.phase != TurnPhase.CALL_OPPORTUNITY:
            logger.warning("Decline ignored: no call opportunity pending (phase %s)",
                           self.phase.value)
            return
        self.advance_turn()

    def get_human_call_opportunities(self) -> List[CallOpportunity]:
        if self.phase != TurnPhase.CALL_OPPORTUNITY:
            return []
        human = self.config.human_seat
        return [o for o in self._pending_calls if o.player_id == human]

    def has_call_opportunities(self) -> bool:
        return self.phase == TurnPhase.CALL_OPPORTUNITY

    # ---- Winning ----

    def check_win_condition(self, seat: int) -> bool:
        player = self.get_player(seat)
        return self.hand_validator.validate_hand(player.hand, player.exposed_sets).is_valid

    def declare_mahjong(self, seat: int, tile: Optional[Tile] = None) -> ValidationResult:
        """Declare a win, self-drawn or on the latest discard (``tile``).

        A self-drawn win belongs to the current seat in DISCARD phase. A win
        on a discard claims the latest discard while its call window is open,
        and the discarder cannot claim its own tile.

        Raises:
            InvalidMove: game already over, wrong turn or phase, ``tile`` not
                the latest discard, or the hand does not match any pattern.
        """
        player = self.get_player(seat)
        if self.is_game_over:
            raise InvalidMove("Game is already over")
        if tile is None:
            self._require_turn(seat, TurnPhase.DISCARD, "declare mahjong")
        else:
            self._require_claim(seat, tile)

        hand = list(player.hand) + ([tile] if tile is not None else [])
        result = self.hand_validator.validate_hand(hand, player.exposed_sets)
        if not result.is_valid:
            raise InvalidMove(result.error or "Invalid mahjong declaration")

        if tile is not None:
            self._take_discard(tile)
            player.receive(tile)
        self._win(seat, result, called=tile is not None)
        return result

    def _win(self, seat: int, result: ValidationResult, called: bool):
        logger.info("Seat %d wins with %s (%d points)",
                    seat, result.matched_pattern.name, result.score)
        self.event_bus.emit(GameEvent(EventType.MAHJONG, {
            "player": seat,
            "pattern": result.matched_pattern,
            "score": result.score,
            "called": called,
        }))
        self._end_game(winner_id=seat)

    def _end_game(self, winner_id: Optional[int] = None):
        if winner_id is not None:
            self.status = GameStatus.WON
            self.winner_id = winner_id
        else:
            self.status = GameStatus.DRAW
            logger.info("Wall exhausted, game %s ends in a draw", self.game_id)
            self.event_bus.emit(GameEvent(EventType.WALL_EXHAUSTED, {}))
        self.phase = TurnPhase.GAME_OVER
        self._pending_calls = ()
        self.event_bus.emit(GameEvent(EventType.GAME_END, {
            "status": self.status,
            "winner": self.winner_id,
        }))

    def get_winner_info(self) -> Optional[WinnerInfo]:
        if self.status != GameStatus.WON or self.winner_id is None:
            return None
        winner = self.get_player(self.winner_id)
        result = self.hand_validator.validate_hand(winner.hand, winner.exposed_sets)
        return WinnerInfo(winner.snapshot(), result)

    # ---- AI driving ----

    async def process_turn(self):
        """Run the current seat's turn if it is an AI seat in DRAW phase.

        Does nothing once the game is over, outside DRAW, or when the human
        seat is to move (its actions come through draw_tile / discard_tile).
        """
        if self.is_game_over or self.phase != TurnPhase.DRAW:
            return
        player = self.current_player
        if player.is_human:
            return

        if self.wall.is_empty:
            self._end_game()
            return
        if self.draw_tile(player.id) is None:
            return
        await self._finish_ai_turn(player)

    async def _finish_ai_turn(self, player: PlayerState):
        """Win check and discard for an AI seat holding 14 tiles."""
        if self.config.auto_declare_ai_wins and self.check_win_condition(player.id):
            self.declare_mahjong(player.id)
            return

        ai = self._get_ai_player(player.id)
        decision = await ai.make_turn_decision(player.hand, player.exposed_sets)
        if decision.fallback_used:
            logger.warning("Seat %d discarding by fallback: %s", player.id, decision.error)
        self.discard_tile(player.id, decision.value)

    async def process_ai_call_decisions(
            self, opportunities: Sequence[CallOpportunity]) -> Optional[CallOpportunity]:
        """Ask the AI seat with the strongest claim whether it calls.

        Only AI seats take part. Returns that seat's opportunity if it calls,
        None otherwise.
        """
        ai_opportunities = [o for o in opportunities
                            if not self.get_player(o.player_id).is_human]
        if not ai_opportunities:
            return None

        priority = self.rule_engine.resolve_call_priority(ai_opportunities, self._current)
        if priority is None:
            return None

        player = self.get_player(priority.player_id)
        ai = self._get_ai_player(priority.player_id)
        decision = await ai.make_call_decision(priority, player.hand, player.exposed_sets)
        logger.debug("Seat %d %s on %s: %s", priority.player_id, priority.call_type.value,
                     priority.tile.name, decision.value.reason)
        return priority if decision.value.should_call else None

    async def resolve_call_phase(self) -> Optional[CallOpportunity]:
        """Settle pending CALL_OPPORTUNITY windows.

        AI seats decide first and an AI call is applied at once. After a
        pung/kong the caller discards, which may open a new window; that one
        goes to the AI seats again before anyone else. The loop stops when
        the AI seats pass: the window is then left open if the human seat has
        an option of its own, and declined otherwise.

        Returns the last AI call applied, or None.
        """
        last_call = None
        while self.phase == TurnPhase.CALL_OPPORTUNITY:
            call = await self.process_ai_call_decisions(self._pending_calls)
            if call is None:
                if not self.get_human_call_opportunities():
                    self.decline_call_opportunities()
                break

            self.process_call(call.player_id, call.call_type, call.tile)
            last_call = call
            if call.call_type in CALL_TILES_NEEDED:
                await self._finish_ai_turn(self.get_player(call.player_id))
        return last_call

    # ---- Queries ----

    def get_state(self) -> GameState:
        return GameState(
            game_id=self.game_id,
            card_year=self.card_config.year,
            current_player=self._current,
            players=tuple(p.snapshot() for p in self.players),
            wall_remaining=self.wall.remaining,
            discard_pile=self._discard_pile,
            phase=self.phase,
            status=self.status,
            winner_id=self.winner_id,
        )

    @property
    def is_game_over(self) -> bool:
        return self.status != GameStatus.IN_PROGRESS

    @property
    def remaining_tile_count(self) -> int:
        return self.wall.remaining

    @property
    def discard_pile(self) -> Tuple[Tile, ...]:
        return self._discard_pile

    def get_player(self, seat: int) -> PlayerState:
        for player in self.players:
            if player.id == seat:
                return player
        raise GameStateError(f"Player {seat} not found")

    def _get_ai_player(self, seat: int) -> AIPlayer:
        ai = self._ai_players.get(seat)
        if ai is None:
            raise GameStateError(f"AI player {seat} not found")
        return ai

    @property
    def current_player(self) -> PlayerState:
        return self.get_player(self._current)

    @property
    def human_player(self) -> PlayerState:
        return self.get_player(self.config.human_seat)

    @property
    def ai_players(self) -> List[AIPlayer]:
        return [self._ai_players[seat] for seat in sorted(self._ai_players)]

    def tile_conservation_total(self) -> int:
        """Hands + exposed sets + discard pile + wall; 144 throughout a game."""
        seated = sum(p.total_tiles for p in self.players)
        return seated + len(self._discard_pile) + self.wall.remaining

    def update_card_config(self, card_config: CardConfig):
        self.card_config = card_config
        self.hand_validator.update_card_config(card_config)
        for ai in self._ai_players.values():
            ai.update_card_config(card_config)
