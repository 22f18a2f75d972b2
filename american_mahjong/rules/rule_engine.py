"""Calling rules, call priority, and turn order."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from american_mahjong.core.player_state import NUM_SEATS, WINNING_HAND_SIZE
from american_mahjong.core.tile import Tile
from american_mahjong.core.tileset import TileSet
from american_mahjong.engine.errors import GameStateError

logger = logging.getLogger(__name__)


class CallType(str, Enum):
    PUNG = "pung"
    KONG = "kong"
    MAHJONG = "mahjong"


# Highest first
CALL_PRIORITY = (CallType.MAHJONG, CallType.KONG, CallType.PUNG)

# Tiles the caller must contribute from hand
CALL_TILES_NEEDED = {CallType.PUNG: 2, CallType.KONG: 3}


@dataclass(frozen=True)
class CallValidationResult:
    is_valid: bool
    call_type: Optional[CallType] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class CallOpportunity:
    """A seat that may claim a discard, and how."""
    player_id: int
    call_type: CallType
    tile: Tile


def matching_tiles(hand: Sequence[Tile], discard: Tile) -> List[Tile]:
    """Real (non-joker) hand tiles with the discard's face."""
    return [t for t in hand if not t.is_joker and t.matches(discard)]


def seat_distance(from_seat: int, to_seat: int) -> int:
    """Clockwise distance in turn order (1-3 for other seats)."""
    return (to_seat - from_seat + NUM_SEATS) % NUM_SEATS


class RuleEngine:
    """Stateless rules: who may call what, who wins a contested call, who is next.

    Works on the sequences it is given and never keeps game state.
    """

    def validate_pung_call(self, hand: Sequence[Tile], discard: Tile) -> CallValidationResult:
        return self._validate_set_call(hand, discard, CallType.PUNG)

    def validate_kong_call(self, hand: Sequence[Tile], discard: Tile) -> CallValidationResult:
        return self._validate_set_call(hand, discard, CallType.KONG)

    def _validate_set_call(self, hand: Sequence[Tile], discard: Tile,
                           call_type: CallType) -> CallValidationResult:
        if discard.is_joker:
            return CallValidationResult(False, error="Cannot call a joker")
        needed = CALL_TILES_NEEDED[call_type]
        if len(matching_tiles(hand, discard)) < needed:
            return CallValidationResult(
                False,
                error=f"Need at least {needed} matching tiles in hand to call {call_type.value}",
            )
        return CallValidationResult(True, call_type=call_type)

    def validate_mahjong_call(self, hand: Sequence[Tile], discard: Optional[Tile] = None,
                              exposed_sets: Sequence[TileSet] = ()) -> CallValidationResult:
        """Tile-count precondition only.

        Exposed sets count toward the 14. Whether the tiles form a winning
        pattern is for HandValidator to decide.
        """
        total = len(hand) + sum(s.count for s in exposed_sets) + (1 if discard else 0)
        if total != WINNING_HAND_SIZE:
            return CallValidationResult(
                False,
                error=f"Invalid tile count for mahjong: {total} (expected {WINNING_HAND_SIZE})",
            )
        return CallValidationResult(True, call_type=CallType.MAHJONG)

    def get_call_opportunities(self, discard: Tile, discarder_id: int, players,
                               hand_validator=None) -> List[CallOpportunity]:
        """Every call each non-discarding seat could make on ``discard``.

        ``players`` is any sequence of objects with ``id``, ``hand`` and
        (optionally) ``exposed_sets``. Seats are checked in the given order
        and each is tested mahjong, kong, then pung, one entry per eligible
        call. When a ``hand_validator`` is supplied, mahjong is only listed
        if the hand plus the discard actually wins.
        """
        opportunities = []

        for player in players:
            if player.id == discarder_id:
                continue
            hand = player.hand
            exposed = getattr(player, "exposed_sets", ())

            if self.validate_mahjong_call(hand, discard, exposed).is_valid:
                confirmed = True
                if hand_validator is not None:
                    result = hand_validator.validate_hand(list(hand) + [discard], exposed)
                    confirmed = result.is_valid
                if confirmed:
                    opportunities.append(CallOpportunity(player.id, CallType.MAHJONG, discard))

            if self.validate_kong_call(hand, discard).is_valid:
                logger.debug("Seat %d can call kong on %s", player.id, discard.name)
                opportunities.append(CallOpportunity(player.id, CallType.KONG, discard))

            if self.validate_pung_call(hand, discard).is_valid:
                logger.debug("Seat %d can call pung on %s", player.id, discard.name)
                opportunities.append(CallOpportunity(player.id, CallType.PUNG, discard))

        return opportunities

    def resolve_call_priority(self, opportunities: Sequence[CallOpportunity],
                              discarder_id: int) -> Optional[CallOpportunity]:
        """Mahjong beats kong beats pung; within a class the seat nearest the
        discarder in turn order wins."""
        for call_type in CALL_PRIORITY:
            candidates = [o for o in opportunities if o.call_type == call_type]
            if candidates:
                return min(candidates,
                           key=lambda o: seat_distance(discarder_id, o.player_id))
        return None

    def get_next_player(self, current: int) -> int:
        return (current + 1) % NUM_SEATS

    def is_player_turn(self, player_id: int, current: int) -> bool:
        return player_id == current

    def process_call(self, hand: Sequence[Tile], discard: Tile,
                     call_type: CallType) -> Tuple[TileSet, Tuple[Tile, ...]]:
        """Build the exposed set for a pung/kong call.

        Takes the first required real matching tiles out of ``hand``. Returns
        the new set, built from exposed copies of those tiles and the called
        tile, and the remaining hand. Neither ``hand`` nor the original tiles
        are changed.

        Raises:
            GameStateError: for mahjong or when the hand lacks matching tiles
                (eligibility should have been checked first).
        """
        if call_type not in CALL_TILES_NEEDED:
            raise GameStateError(f"Cannot process call type: {call_type}")

        needed = CALL_TILES_NEEDED[call_type]
        taken = matching_tiles(hand, discard)[:needed]
        if len(taken) < needed:
            raise GameStateError(f"Insufficient matching tiles for {call_type.value}",
                                 details={"have": len(taken), "need": needed})

        taken_ids = {t.id for t in taken}
        remaining = tuple(t for t in hand if t.id not in taken_ids)

        members = tuple(t.exposed_copy() for t in (discard,) + tuple(taken))

        if call_type == CallType.KONG:
            tileset = TileSet.kong(members)
        else:
            tileset = TileSet.pung(members)
        return tileset, remaining

    def validate_discard(self, tile: Tile, hand: Sequence[Tile]) -> bool:
        return any(t.id == tile.id for t in hand)

    def can_continue_game(self, wall_size: int) -> bool:
        return wall_size > 0
