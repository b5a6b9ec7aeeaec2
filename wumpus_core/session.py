from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .percepts import Percept, ordered
from .scheduler import Scheduler, TimerScheduler
from .state import (
    ARROW_COST,
    DEATH_PENALTY,
    MOVE_COST,
    TURN_COST,
    WIN_BONUS,
    GameState,
    Phase,
    new_game,
)
from .view import build_view
from .world import START, World, generate_world

log = logging.getLogger(__name__)

Display = Callable[[Dict[str, Any]], None]

GOAL_TEXT = f"Find the gold and return to [{START[0]},{START[1]}] to win."


@dataclass(frozen=True)
class ActionResult:
    """Outcome of one action trigger. Rejections are normal results, not errors."""
    accepted: bool
    message: str


class GameSession:
    """
    Owns one GameState and resolves player actions against it.

    Displays subscribe with a callable that receives the view model after
    every change. Delayed percept updates are tagged with the epoch they were
    scheduled in; restarting bumps the epoch so leftovers from an old game
    never touch the new one.
    """

    ACTIONS = {
        'forward': 'move_forward',
        'turnLeft': 'turn_left',
        'turnRight': 'turn_right',
        'grab': 'grab',
        'shoot': 'shoot',
        'climb': 'climb',
    }

    def __init__(
        self,
        world_factory: Optional[Callable[[], World]] = None,
        scheduler: Optional[Scheduler] = None,
        transient_seconds: float = 2.0,
        kill_refresh_seconds: float = 1.0,
    ) -> None:
        self._world_factory = world_factory or generate_world
        self._scheduler = scheduler or TimerScheduler()
        self.transient_seconds = transient_seconds
        self.kill_refresh_seconds = kill_refresh_seconds
        self._lock = threading.RLock()
        self._displays: List[Display] = []
        self._stamps: Dict[Percept, int] = {}
        self._stamp_seq = itertools.count(1)
        self._epoch = 0
        self._state = self._fresh_state()
        self.message = f"Welcome to Wumpus World! {GOAL_TEXT}"
        log.info("Game initialized (%dx%d)", self._state.world.size, self._state.world.size)

    # --- accessors ---

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def epoch(self) -> int:
        return self._epoch

    def view(self) -> Dict[str, Any]:
        with self._lock:
            return self._build_view()

    def subscribe(self, display: Display) -> Callable[[], None]:
        """Registers a display; returns a callable that unsubscribes it."""
        self._displays.append(display)

        def unsubscribe() -> None:
            if display in self._displays:
                self._displays.remove(display)

        return unsubscribe

    def perform(self, name: str) -> ActionResult:
        """Dispatches one of the six action triggers by its web/control name."""
        method = self.ACTIONS.get(name)
        if method is None:
            raise ValueError(f"Unknown action: {name}")
        return getattr(self, method)()

    # --- actions ---

    def move_forward(self) -> ActionResult:
        with self._lock:
            s = self._state
            if s.is_over:
                return self._idle('move_forward')
            p = s.player
            target = p.ahead()
            log.debug("Moving forward from %s facing %s toward %s", p.pos, p.facing.value, target)
            if not s.world.in_bounds(target):
                self._raise_transient(Percept.BUMP)
                return self._reply(False, "Bump! You hit a wall.")

            p.pos = target
            p.score -= MOVE_COST
            p.visited.add(target)
            cell = s.world.at(target)
            if cell.predator and s.predator_alive:
                self._finish(Phase.LOST, -DEATH_PENALTY, "You were eaten by the Wumpus!")
                return self._reply(True, "The Wumpus devoured you! Game Over.")
            if cell.pit:
                self._finish(Phase.LOST, -DEATH_PENALTY, "You fell into a bottomless pit!")
                return self._reply(True, "You fell into a pit! Game Over.")

            s.refresh_percepts()
            return self._reply(True, f"Moved to [{target[0]},{target[1]}]")

    def turn_left(self) -> ActionResult:
        return self._turn('left')

    def turn_right(self) -> ActionResult:
        return self._turn('right')

    def _turn(self, side: str) -> ActionResult:
        with self._lock:
            s = self._state
            if s.is_over:
                return self._idle(f'turn_{side}')
            p = s.player
            p.facing = p.facing.turned_left() if side == 'left' else p.facing.turned_right()
            p.score -= TURN_COST
            return self._reply(True, f"Turned {side}, now facing {p.facing.value}")

    def grab(self) -> ActionResult:
        with self._lock:
            s = self._state
            if s.is_over:
                return self._idle('grab')
            cell = s.current_cell()
            if s.player.has_gold:
                return self._reply(False, "You already have the gold!")
            if not cell.gold:
                return self._reply(False, "There is no gold here to grab.")
            s.player.has_gold = True
            cell.gold = False
            s.percepts.discard(Percept.GLITTER)
            log.debug("Gold grabbed at %s", s.player.pos)
            return self._reply(True, f"You picked up the gold! Now return to [{START[0]},{START[1]}] and climb to win!")

    def shoot(self) -> ActionResult:
        with self._lock:
            s = self._state
            if s.is_over:
                return self._idle('shoot')
            p = s.player
            if p.arrows <= 0:
                return self._reply(False, "You have no arrows left!")

            p.arrows -= 1
            p.score -= ARROW_COST
            x, y = p.pos
            dx, dy = p.facing.vector
            while True:
                x, y = x + dx, y + dy
                if not s.world.in_bounds((x, y)):
                    return self._reply(True, "Your arrow hit the wall and was lost.")
                cell = s.world.at((x, y))
                if cell.predator and s.predator_alive:
                    s.predator_alive = False
                    cell.predator = False
                    log.info("Wumpus killed by arrow at %s", (x, y))
                    self._raise_transient(Percept.SCREAM)
                    self._schedule(self.kill_refresh_seconds, s.refresh_percepts)
                    return self._reply(True, "You hear a terrible scream! The Wumpus is dead!")

    def climb(self) -> ActionResult:
        with self._lock:
            s = self._state
            if s.is_over:
                return self._idle('climb')
            if s.player.pos != START:
                return self._reply(False, f"You can only climb out from the starting position [{START[0]},{START[1]}]!")
            if not s.player.has_gold:
                return self._reply(False, "You need to find the gold before you can escape!")
            self._finish(Phase.WON, WIN_BONUS, "Victory! You escaped with the gold!")
            return self._reply(True, "Congratulations! You escaped with the gold!")

    def restart_game(self) -> ActionResult:
        with self._lock:
            self._epoch += 1
            self._stamps.clear()
            self._state = self._fresh_state()
            log.info("Game restarted (epoch %d)", self._epoch)
            return self._reply(True, f"New game started! {GOAL_TEXT}")

    # --- internals ---

    def _fresh_state(self) -> GameState:
        state = new_game(self._world_factory())
        log.debug("World layout:\n%s", state.world.pretty(state.player.pos))
        return state

    def _build_view(self) -> Dict[str, Any]:
        # Delays travel with the view so clients can re-poll when percepts expire.
        timers = {
            "transientMs": int(round(self.transient_seconds * 1000)),
            "killRefreshMs": int(round(self.kill_refresh_seconds * 1000)),
        }
        return build_view(self._state, self.message, timers)

    def _idle(self, action: str) -> ActionResult:
        log.debug("Ignoring %s: game is %s", action, self._state.phase.value)
        return ActionResult(False, "")

    def _reply(self, accepted: bool, message: str) -> ActionResult:
        self.message = message
        log.debug("Message: %s | percepts=%s", message, ordered(self._state.percepts))
        self._notify()
        return ActionResult(accepted, message)

    def _finish(self, phase: Phase, delta: int, outcome: str) -> None:
        s = self._state
        s.phase = phase
        s.player.score += delta
        s.outcome = outcome
        log.info("Game ended: %s Score: %d", outcome, s.player.score)

    def _raise_transient(self, percept: Percept) -> None:
        self._state.percepts.add(percept)
        stamp = next(self._stamp_seq)
        self._stamps[percept] = stamp

        def clear() -> None:
            if self._stamps.get(percept) != stamp:
                return  # raised again since; the newer timer owns it
            self._state.percepts.discard(percept)

        self._schedule(self.transient_seconds, clear)

    def _schedule(self, delay: float, fn: Callable[[], None]) -> None:
        epoch = self._epoch

        def run() -> None:
            with self._lock:
                if epoch != self._epoch:
                    log.debug("Dropping callback from epoch %d (now %d)", epoch, self._epoch)
                    return
                fn()
                self._notify()

        self._scheduler.call_later(delay, run)

    def _notify(self) -> None:
        if not self._displays:
            return
        view = self._build_view()
        for display in list(self._displays):
            try:
                display(view)
            except Exception:
                log.exception("Display update failed; skipping")
