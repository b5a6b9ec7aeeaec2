from __future__ import annotations

from typing import Any, Dict, List, Optional

from .percepts import ordered
from .state import GameState, Phase

CONTROLS = ('forward', 'turnLeft', 'turnRight', 'grab', 'shoot', 'climb')


def _cell_to_json(state: GameState, x: int, y: int) -> Dict[str, Any]:
    cell = state.world.at((x, y))
    here = state.player.pos == (x, y)
    visited = (x, y) in state.player.visited
    # Contents stay hidden until the room is entered or the game is over.
    revealed = visited or state.is_over
    return {
        "x": x,
        "y": y,
        "player": here,
        "visited": visited,
        "predator": bool(revealed and cell.predator and state.predator_alive),
        "gold": bool(revealed and cell.gold and not state.player.has_gold),
        "pit": bool(revealed and cell.pit),
    }


def _controls(state: GameState) -> Dict[str, bool]:
    playing = state.phase is Phase.PLAYING
    out = {name: playing for name in CONTROLS}
    if playing and state.player.arrows <= 0:
        out["shoot"] = False
    return out


def _outcome(state: GameState) -> Optional[Dict[str, Any]]:
    if not state.is_over:
        return None
    return {
        "title": "Victory" if state.phase is Phase.WON else "Game Over",
        "message": state.outcome or "",
        "finalScore": int(state.player.score),
    }


def build_view(
    state: GameState,
    message: str = "",
    timers: Optional[Dict[str, int]] = None,
) -> Dict[str, Any]:
    """Flattens the aggregate into the JSON view model a display renders."""
    size = state.world.size
    rows: List[List[Dict[str, Any]]] = []
    for y in range(size, 0, -1):
        rows.append([_cell_to_json(state, x, y) for x in range(1, size + 1)])
    p = state.player
    return {
        "size": size,
        "score": int(p.score),
        "position": [int(p.pos[0]), int(p.pos[1])],
        "facing": p.facing.label,
        "facingIcon": p.facing.icon,
        "arrows": int(p.arrows),
        "hasGold": bool(p.has_gold),
        "phase": state.phase.value,
        "percepts": ordered(state.percepts),
        "cells": rows,
        "controls": _controls(state),
        "message": message,
        "outcome": _outcome(state),
        "timers": dict(timers or {}),
    }
