from __future__ import annotations

from enum import Enum
from typing import AbstractSet, Set

from .world import Coord, World


class Percept(str, Enum):
    STENCH = 'stench'
    BREEZE = 'breeze'
    GLITTER = 'glitter'
    BUMP = 'bump'
    SCREAM = 'scream'


# Display order for percept panels.
PERCEPT_ORDER = (Percept.STENCH, Percept.BREEZE, Percept.GLITTER, Percept.BUMP, Percept.SCREAM)

# Percepts that describe an event rather than the room; they expire on a timer.
TRANSIENT = frozenset({Percept.BUMP, Percept.SCREAM})


def compute_percepts(
    world: World,
    pos: Coord,
    predator_alive: bool,
    previous: AbstractSet[Percept] = frozenset(),
) -> Set[Percept]:
    """
    Senses the room at pos and its orthogonal neighbors.
    A scream already in `previous` survives the recompute; everything else is rebuilt.
    """
    out: Set[Percept] = set()
    if Percept.SCREAM in previous:
        out.add(Percept.SCREAM)
    if world.at(pos).gold:
        out.add(Percept.GLITTER)
    for nxt in world.neighbors(pos):
        cell = world.at(nxt)
        if cell.predator and predator_alive:
            out.add(Percept.STENCH)
        if cell.pit:
            out.add(Percept.BREEZE)
    return out


def ordered(percepts: AbstractSet[Percept]) -> list:
    return [p.value for p in PERCEPT_ORDER if p in percepts]
