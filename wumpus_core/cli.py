from __future__ import annotations

import argparse
from typing import Any, Callable, Dict, List, Optional

from .scheduler import ManualScheduler
from .session import GameSession
from .world import DEFAULT_PIT_COUNT, DEFAULT_SIZE, generate_world

COMMANDS = {
    'f': 'forward',
    'l': 'turnLeft',
    'r': 'turnRight',
    'g': 'grab',
    's': 'shoot',
    'c': 'climb',
}

HELP = "Commands: f=forward l=left r=right g=grab s=shoot c=climb n=new game q=quit"


def _symbol(view: Dict[str, Any], cell: Dict[str, Any]) -> str:
    if cell['player']:
        return view['facingIcon']
    if cell['predator']:
        return 'W'
    if cell['pit']:
        return 'P'
    if cell['gold']:
        return 'G'
    if cell['visited'] or view['outcome'] is not None:
        return '.'
    return '?'


def render(view: Dict[str, Any]) -> str:
    """Draws the cave as the view model shows it; unvisited rooms stay '?' while playing."""
    return '\n'.join(' '.join(_symbol(view, cell) for cell in row) for row in view['cells'])


def status_line(view: Dict[str, Any]) -> str:
    x, y = view['position']
    return (
        f"Score {view['score']} | Position [{x},{y}] | Facing {view['facing']} | "
        f"Arrows {view['arrows']} | Gold {'Yes' if view['hasGold'] else 'No'}"
    )


class TerminalDisplay:
    """
    Display subscribed to a GameSession. It keeps the latest pushed view and
    prints it when the prompt loop asks. `layout` optionally supplies the full
    hidden map for --reveal.
    """

    def __init__(self, view: Dict[str, Any], layout: Optional[Callable[[], str]] = None) -> None:
        self.view = view
        self.layout = layout

    def __call__(self, view: Dict[str, Any]) -> None:
        self.view = view

    def show(self) -> None:
        view = self.view
        print()
        print(self.layout() if self.layout else render(view))
        print(status_line(view))
        print('Percepts:', ', '.join(view['percepts']) or 'none')
        if view['message']:
            print(view['message'])
        outcome = view['outcome']
        if outcome is not None:
            print(f"{outcome['title']}: {outcome['message']} Final score: {outcome['finalScore']}")


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description='Wumpus World in the terminal')
    parser.add_argument('--size', type=int, default=DEFAULT_SIZE, help='Grid size (NxN)')
    parser.add_argument('--pits', type=int, default=DEFAULT_PIT_COUNT, help='Number of pits')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for the first world')
    parser.add_argument('--reveal', action='store_true', help='Show the hidden layout while playing')
    args = parser.parse_args(argv)

    seeds = iter([args.seed])

    def factory():
        # Only the first world is seeded; restarts are fresh.
        return generate_world(args.size, args.pits, seed=next(seeds, None))

    # Terminal turns have no wall clock: transient percepts last one turn.
    clock = ManualScheduler()
    session = GameSession(world_factory=factory, scheduler=clock)

    layout = None
    if args.reveal:
        def layout() -> str:
            s = session.state
            return s.world.pretty(s.player.pos, s.player.facing.icon)

    display = TerminalDisplay(session.view(), layout)
    session.subscribe(display)
    print(HELP)

    while True:
        display.show()
        try:
            text = input('> ').strip().lower()
        except EOFError:
            break
        clock.run_all()
        if text in ('q', 'quit', 'exit'):
            break
        if text in ('n', 'new', 'restart'):
            session.restart_game()
            continue
        name = COMMANDS.get(text[:1]) if text else None
        if name is None:
            print(HELP)
            continue
        if display.view['outcome'] is not None:
            print("The game is over. Press n for a new game.")
            continue
        session.perform(name)


if __name__ == '__main__':
    main()
