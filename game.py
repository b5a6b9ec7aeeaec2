from __future__ import annotations

# Facade module that re-exports Wumpus World core functionality.
# The Flask app and tests import from here; single-responsibility modules
# live under wumpus_core/*.

from wumpus_core.world import (
    START,
    DEFAULT_SIZE,
    DEFAULT_PIT_COUNT,
    Cell,
    Coord,
    World,
    generate_world,
)
from wumpus_core.percepts import (
    PERCEPT_ORDER,
    TRANSIENT,
    Percept,
    compute_percepts,
)
from wumpus_core.state import (
    ARROW_COST,
    DEATH_PENALTY,
    MOVE_COST,
    STARTING_ARROWS,
    TURN_COST,
    WIN_BONUS,
    Direction,
    GameState,
    Phase,
    PlayerState,
    new_game,
)
from wumpus_core.scheduler import ManualScheduler, Scheduler, TimerScheduler
from wumpus_core.session import ActionResult, GameSession
from wumpus_core.view import CONTROLS, build_view
from wumpus_core.particles import FrameLoop, ParticleField
from wumpus_core.config import Settings, load_settings


def main() -> None:
    # CLI driver delegated to wumpus_core.cli
    from wumpus_core.cli import main as _main
    _main()


if __name__ == '__main__':
    main()
