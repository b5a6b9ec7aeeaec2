from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Set, Tuple

from .percepts import Percept, compute_percepts
from .world import START, Coord, World

# Score changes per event.
MOVE_COST = 1
TURN_COST = 1
ARROW_COST = 10
DEATH_PENALTY = 1000
WIN_BONUS = 1000

STARTING_ARROWS = 1


class Direction(str, Enum):
    UP = 'up'
    RIGHT = 'right'
    DOWN = 'down'
    LEFT = 'left'

    @property
    def vector(self) -> Tuple[int, int]:
        return _VECTORS[self]

    @property
    def icon(self) -> str:
        return _ICONS[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()

    def turned_right(self) -> 'Direction':
        return _CYCLE[(_CYCLE.index(self) + 1) % 4]

    def turned_left(self) -> 'Direction':
        return _CYCLE[(_CYCLE.index(self) + 3) % 4]


_CYCLE = (Direction.UP, Direction.RIGHT, Direction.DOWN, Direction.LEFT)
_VECTORS = {
    Direction.UP: (0, 1),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, -1),
    Direction.LEFT: (-1, 0),
}
_ICONS = {
    Direction.UP: '↑',
    Direction.RIGHT: '→',
    Direction.DOWN: '↓',
    Direction.LEFT: '←',
}


class Phase(str, Enum):
    PLAYING = 'playing'
    WON = 'won'
    LOST = 'lost'


@dataclass
class PlayerState:
    """Where the player is and what they carry."""
    pos: Coord = START
    facing: Direction = Direction.RIGHT
    arrows: int = STARTING_ARROWS
    has_gold: bool = False
    score: int = 0
    visited: Set[Coord] = field(default_factory=lambda: {START})

    def ahead(self) -> Coord:
        dx, dy = self.facing.vector
        return (self.pos[0] + dx, self.pos[1] + dy)


@dataclass
class GameState:
    """The whole game aggregate. Replaced wholesale on restart, never patched back to playing."""
    world: World
    player: PlayerState = field(default_factory=PlayerState)
    predator_alive: bool = True
    percepts: Set[Percept] = field(default_factory=set)
    phase: Phase = Phase.PLAYING
    outcome: Optional[str] = None

    @property
    def is_over(self) -> bool:
        return self.phase is not Phase.PLAYING

    def current_cell(self):
        return self.world.at(self.player.pos)

    def refresh_percepts(self) -> None:
        self.percepts = compute_percepts(
            self.world, self.player.pos, self.predator_alive, self.percepts
        )


def new_game(world: World) -> GameState:
    state = GameState(world=world, predator_alive=world.predator_cell() is not None)
    state.refresh_percepts()
    return state
