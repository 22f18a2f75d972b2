"""Rich rendering engine - turns game events and state into terminal output."""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from american_mahjong.engine.event import EventBus, EventType, GameEvent
from american_mahjong.engine.game import GameState, GameStatus, WinnerInfo
from american_mahjong.ui.tile_display import (
    format_discard_pile, numbered_hand, tile_to_rich_text, tilesets_to_rich_text,
)


def seat_name(seat: int, human_seat: int = 0) -> str:
    if seat == human_seat:
        return "You"
    return f"Seat {seat} (AI)"


class Renderer:
    """Main rendering engine that subscribes to game events."""

    def __init__(self, console: Console, event_bus: EventBus, human_seat: int = 0):
        self.console = console
        self.event_bus = event_bus
        self.human_seat = human_seat
        self._subscribe_events()

    def _subscribe_events(self):
        """Subscribe to relevant game events."""
        self.event_bus.subscribe(EventType.DISCARD, self._on_discard)
        self.event_bus.subscribe(EventType.CALL, self._on_call)
        self.event_bus.subscribe(EventType.MAHJONG, self._on_mahjong)
        self.event_bus.subscribe(EventType.WALL_EXHAUSTED, self._on_wall_exhausted)

    def _on_discard(self, event: GameEvent):
        seat = event.data["player"]
        if seat == self.human_seat:
            return
        line = Text(f"  {seat_name(seat, self.human_seat)} discards ")
        line.append_text(tile_to_rich_text(event.data["tile"]))
        self.console.print(line)

    def _on_call(self, event: GameEvent):
        seat = event.data["player"]
        call_type = event.data["call_type"]
        line = Text(f"  {seat_name(seat, self.human_seat)} calls {call_type.value.upper()} ",
                    style="bold yellow")
        line.append_text(tile_to_rich_text(event.data["tile"]))
        self.console.print(line)

    def _on_mahjong(self, event: GameEvent):
        seat = event.data["player"]
        pattern = event.data["pattern"]
        self.console.print(
            f"  [bold green]MAHJONG![/bold green] {seat_name(seat, self.human_seat)} "
            f"wins with {pattern.name} ({event.data['score']} points)"
        )

    def _on_wall_exhausted(self, event: GameEvent):
        self.console.print("  [dim]The wall is exhausted.[/dim]")

    def render_board(self, state: GameState):
        """Render the current board from the human seat's perspective."""
        table = Table(show_header=True, header_style="bold", box=None, padding=(0, 1))
        table.add_column("Seat")
        table.add_column("Tiles", justify="right")
        table.add_column("Exposed")
        for seat in state.players:
            name = seat_name(seat.id, self.human_seat)
            if seat.id == state.current_player:
                name = f"> {name}"
            table.add_row(name, str(len(seat.hand)), tilesets_to_rich_text(seat.exposed_sets))

        body = Table.grid(padding=(0, 1))
        body.add_row(table)
        discards = Text("Discards: ")
        discards.append_text(format_discard_pile(state.discard_pile))
        body.add_row(discards)
        body.add_row(Text(f"Wall: {state.wall_remaining} tiles left", style="dim"))
        self.console.print(Panel(body, title=f"Card {state.card_year}", border_style="cyan"))

        human = state.players[self.human_seat]
        self.console.print(Text("  Your hand: ").append_text(numbered_hand(human.hand)))
        if human.exposed_sets:
            self.console.print(Text("  Exposed:   ").append_text(
                tilesets_to_rich_text(human.exposed_sets)))

    def show_result(self, state: GameState, winner: WinnerInfo = None):
        """Display the end-of-game screen."""
        if state.status == GameStatus.WON and winner is not None:
            result = winner.validation_result
            body = Text(f"{seat_name(winner.player.id, self.human_seat)} won\n", style="bold")
            body.append(f"{result.matched_pattern.name}: {result.score} points\n")
            body.append_text(numbered_hand(winner.player.hand))
            self.console.print(Panel(body, title="Mahjong", border_style="green"))
        else:
            self.console.print(Panel("No winner: the wall ran out.",
                                     title="Draw", border_style="yellow"))
