#!/usr/bin/env python3
"""American Mahjong - Terminal CLI Game"""

import argparse
import asyncio
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.text import Text

from american_mahjong.core.card import CardConfig
from american_mahjong.engine.errors import InvalidMove
from american_mahjong.engine.event import EventBus
from american_mahjong.engine.game import GameConfig, GameEngine, TurnPhase
from american_mahjong.player.strategy import Difficulty
from american_mahjong.rules.rule_engine import CallType
from american_mahjong.ui.renderer import Renderer
from american_mahjong.ui.tile_display import tile_to_rich_text

console = Console()

# Small built-in card so the game runs without an external card file.
DEMO_CARD = {
    "year": 2025,
    "version": "demo",
    "patterns": [
        {
            "id": "2468-1", "name": "Evens Pungs and Kongs", "category": "2468", "points": 25,
            "tiles": [
                {"type": "bamboo", "count": 3, "specific": [2], "joker_allowed": True},
                {"type": "bamboo", "count": 3, "specific": [4], "joker_allowed": True},
                {"type": "bamboo", "count": 4, "specific": [6], "joker_allowed": True},
                {"type": "bamboo", "count": 4, "specific": [8], "joker_allowed": True},
            ],
        },
        {
            "id": "wd-1", "name": "Four Winds", "category": "Winds - Dragons", "points": 25,
            "tiles": [
                {"type": "wind", "count": 4, "specific": ["N"], "joker_allowed": True},
                {"type": "wind", "count": 3, "specific": ["E"], "joker_allowed": True},
                {"type": "wind", "count": 3, "specific": ["W"], "joker_allowed": True},
                {"type": "wind", "count": 4, "specific": ["S"], "joker_allowed": True},
            ],
        },
        {
            "id": "q-1", "name": "Quints and Dragons", "category": "Quints", "points": 40,
            "tiles": [
                {"type": "dot", "count": 5, "specific": [1], "joker_allowed": True},
                {"type": "dot", "count": 5, "specific": [2], "joker_allowed": True},
                {"type": "dragon", "count": 4, "specific": ["Red"], "joker_allowed": True},
            ],
        },
        {
            "id": "cr-1", "name": "Consecutive Pungs", "category": "Consecutive Run", "points": 25,
            "tiles": [
                {"type": "character", "count": 3, "specific": [1], "joker_allowed": True},
                {"type": "character", "count": 3, "specific": [2], "joker_allowed": True},
                {"type": "character", "count": 3, "specific": [3], "joker_allowed": True},
                {"type": "character", "count": 3, "specific": [4], "joker_allowed": True},
                {"type": "character", "count": 2, "specific": [5]},
            ],
        },
        {
            "id": "sp-1", "name": "Seven Pairs", "category": "Singles and Pairs", "points": 50,
            "tiles": [{"type": "any", "count": 2} for _ in range(7)],
        },
    ],
}


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def human_turn(engine: GameEngine, renderer: Renderer):
    """Draw (unless the turn began with a call), offer a win, then discard."""
    seat = engine.human_player.id
    if engine.phase == TurnPhase.DRAW:
        tile = engine.draw_tile(seat)
        if tile is None:
            return
        console.print(Text("\n  You drew ").append_text(tile_to_rich_text(tile, highlight=True)))

    if engine.check_win_condition(seat) and Confirm.ask("  Your hand wins. Declare mahjong?",
                                                         console=console, default=True):
        engine.declare_mahjong(seat)
        return

    renderer.render_board(engine.get_state())
    hand = engine.human_player.hand
    while True:
        choice = IntPrompt.ask(f"  Discard which tile (1-{len(hand)})", console=console)
        if 1 <= choice <= len(hand):
            break
        console.print("  [red]Invalid tile number[/red]")
    engine.discard_tile(seat, hand[choice - 1])


def human_call(engine: GameEngine, renderer: Renderer):
    """Offer the human seat its pending calls on the latest discard."""
    opportunities = engine.get_human_call_opportunities()
    tile = opportunities[0].tile
    renderer.render_board(engine.get_state())
    console.print(Text("  You may call ").append_text(tile_to_rich_text(tile, highlight=True)))

    options = {o.call_type.value[0]: o for o in opportunities}
    labels = " / ".join(f"{k}={o.call_type.value}" for k, o in options.items())
    answer = Prompt.ask(f"  {labels} / x=pass", choices=list(options) + ["x"],
                        default="x", console=console)
    if answer == "x":
        engine.decline_call_opportunities()
        return

    chosen = options[answer]
    try:
        engine.process_call(chosen.player_id, chosen.call_type, chosen.tile)
    except InvalidMove as e:
        console.print(f"  [red]{e.message}[/red]")
        engine.decline_call_opportunities()
        return
    if chosen.call_type != CallType.MAHJONG:
        human_turn(engine, renderer)


async def play_game(engine: GameEngine, renderer: Renderer):
    engine.initialize_game()
    console.print(f"\n  [bold]Game {engine.game_id}[/bold] - card {engine.card_config.year}")

    while not engine.is_game_over:
        if engine.phase == TurnPhase.CALL_OPPORTUNITY:
            await engine.resolve_call_phase()
            if engine.get_human_call_opportunities():
                human_call(engine, renderer)
        elif engine.current_player.is_human:
            human_turn(engine, renderer)
        else:
            await engine.process_turn()

    renderer.show_result(engine.get_state(), engine.get_winner_info())


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="American Mahjong against three AI players")
    parser.add_argument("--seed", type=int, default=None, help="seed for a reproducible game")
    parser.add_argument("--difficulty", choices=[d.value for d in Difficulty],
                        default=Difficulty.MEDIUM.value)
    parser.add_argument("--fast", action="store_true", help="no AI thinking delay")
    parser.add_argument("-v", "--verbose", action="store_true", help="show debug logging")
    args = parser.parse_args()

    setup_logging(args.verbose)
    difficulty = Difficulty(args.difficulty)
    config = GameConfig(
        difficulties={seat: difficulty for seat in (1, 2, 3)},
        seed=args.seed,
    )
    if args.fast:
        config.thinking_delay = config.call_delay = (0.0, 0.0)

    card = CardConfig.from_dict(DEMO_CARD)
    event_bus = EventBus()
    renderer = Renderer(console, event_bus, human_seat=config.human_seat)
    engine = GameEngine(card, config, event_bus=event_bus)

    console.print(Panel(
        "[bold cyan]American Mahjong[/bold cyan]\n"
        f"[dim]{len(card.patterns)} hands on the {card.year} demo card[/dim]",
        border_style="cyan",
        padding=(1, 4),
    ))

    try:
        while True:
            asyncio.run(play_game(engine, renderer))
            if not Confirm.ask("\n  Play again?", console=console, default=False):
                break
    except (KeyboardInterrupt, EOFError):
        console.print("\n\n  [dim]Game exited.[/dim]\n")


if __name__ == "__main__":
    main()
