from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Set, Tuple

Coord = Tuple[int, int]  # (x, y), 1-based, y grows upward

START: Coord = (1, 1)
DEFAULT_SIZE = 4
DEFAULT_PIT_COUNT = 3

log = logging.getLogger(__name__)


@dataclass
class Cell:
    """Contents of a single room."""
    predator: bool = False
    gold: bool = False
    pit: bool = False

    def is_empty(self) -> bool:
        return not (self.predator or self.gold or self.pit)


@dataclass
class World:
    """The hidden layout of the cave: an N x N grid of cells stored row-major."""
    size: int
    cells: List[Cell] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.cells:
            self.cells = [Cell() for _ in range(self.size * self.size)]
        if len(self.cells) != self.size * self.size:
            raise ValueError(f"expected {self.size * self.size} cells, got {len(self.cells)}")

    def index(self, x: int, y: int) -> int:
        """Calculates the flat index for a 1-based (x, y) coordinate."""
        return (y - 1) * self.size + (x - 1)

    def in_bounds(self, pos: Coord) -> bool:
        x, y = pos
        return 1 <= x <= self.size and 1 <= y <= self.size

    def at(self, pos: Coord) -> Cell:
        if not self.in_bounds(pos):
            raise IndexError(f"{pos} is outside a {self.size}x{self.size} world")
        return self.cells[self.index(*pos)]

    def coords(self) -> Iterable[Coord]:
        """Iterates over all coordinates, bottom row first."""
        for y in range(1, self.size + 1):
            for x in range(1, self.size + 1):
                yield (x, y)

    def neighbors(self, pos: Coord) -> List[Coord]:
        """Gets the in-bounds orthogonal neighbors of a coordinate."""
        x, y = pos
        around = [(x, y + 1), (x + 1, y), (x, y - 1), (x - 1, y)]
        return [p for p in around if self.in_bounds(p)]

    def predator_cell(self) -> Optional[Coord]:
        for pos in self.coords():
            if self.at(pos).predator:
                return pos
        return None

    def gold_cell(self) -> Optional[Coord]:
        for pos in self.coords():
            if self.at(pos).gold:
                return pos
        return None

    def pit_cells(self) -> List[Coord]:
        return [pos for pos in self.coords() if self.at(pos).pit]

    @classmethod
    def from_layout(
        cls,
        size: int,
        predator: Optional[Coord] = None,
        gold: Optional[Coord] = None,
        pits: Sequence[Coord] = (),
    ) -> 'World':
        """Builds a world with features at fixed positions."""
        world = cls(size=size)
        taken: Set[Coord] = set()
        for pos in [p for p in (predator, gold) if p is not None] + list(pits):
            if not world.in_bounds(pos):
                raise ValueError(f"feature position {pos} is out of bounds")
            if pos == START:
                raise ValueError(f"the start cell {START} must stay empty")
            if pos in taken:
                raise ValueError(f"two features share cell {pos}")
            taken.add(pos)
        if predator is not None:
            world.at(predator).predator = True
        if gold is not None:
            world.at(gold).gold = True
        for pos in pits:
            world.at(pos).pit = True
        return world

    def pretty(self, player: Optional[Coord] = None, icon: str = "@") -> str:
        """Generates a human-readable picture of the layout, top row first."""
        lines: List[str] = []
        for y in range(self.size, 0, -1):
            row: List[str] = []
            for x in range(1, self.size + 1):
                cell = self.at((x, y))
                if player == (x, y):
                    row.append(icon)
                elif cell.predator:
                    row.append("W")
                elif cell.pit:
                    row.append("P")
                elif cell.gold:
                    row.append("G")
                else:
                    row.append(".")
            lines.append(" ".join(row))
        return "\n".join(lines)


def generate_world(
    size: int = DEFAULT_SIZE,
    pit_count: int = DEFAULT_PIT_COUNT,
    seed: Optional[int] = None,
) -> World:
    """
    Deals a random world. Predator, gold and pits are drawn without replacement
    from the non-start cells, so every feature lands on its own cell.
    """
    if size < 2:
        raise ValueError('World too small: need at least one cell besides the start')
    rng = random.Random(seed)
    world = World(size=size)
    pool: List[Coord] = [pos for pos in world.coords() if pos != START]

    def draw() -> Coord:
        return pool.pop(rng.randrange(len(pool)))

    predator = draw()
    world.at(predator).predator = True
    log.debug("Predator placed at %s", predator)

    # A 2x2 grid has only three candidates; gold and pits take what is left.
    if pool:
        gold = draw()
        world.at(gold).gold = True
        log.debug("Gold placed at %s", gold)

    for _ in range(pit_count):
        if not pool:
            break
        pit = draw()
        world.at(pit).pit = True
        log.debug("Pit placed at %s", pit)

    return world
