from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from .world import DEFAULT_PIT_COUNT, DEFAULT_SIZE

log = logging.getLogger(__name__)


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


def _int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        log.warning("Ignoring %s=%r: not an integer", name, raw)
        return default


def _float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        log.warning("Ignoring %s=%r: not a number", name, raw)
        return default


@dataclass(frozen=True)
class Settings:
    grid_size: int = DEFAULT_SIZE
    pit_count: int = DEFAULT_PIT_COUNT
    transient_seconds: float = 2.0
    kill_refresh_seconds: float = 1.0
    particle_count: int = 50
    particle_fps: int = 30
    log_level: str = "INFO"
    port: int = 5000
    debug: bool = False
    seed: Optional[int] = None


def load_settings() -> Settings:
    """Reads WUMPUS_* (and PORT / FLASK_DEBUG) from the environment."""
    seed_raw = os.getenv("WUMPUS_SEED")
    seed = None
    if seed_raw:
        try:
            seed = int(seed_raw)
        except ValueError:
            log.warning("Ignoring WUMPUS_SEED=%r: not an integer", seed_raw)
    return Settings(
        grid_size=max(2, _int("WUMPUS_GRID_SIZE", DEFAULT_SIZE)),
        pit_count=max(0, _int("WUMPUS_PIT_COUNT", DEFAULT_PIT_COUNT)),
        transient_seconds=_float("WUMPUS_TRANSIENT_SECONDS", 2.0),
        kill_refresh_seconds=_float("WUMPUS_KILL_REFRESH_SECONDS", 1.0),
        particle_count=max(0, _int("WUMPUS_PARTICLE_COUNT", 50)),
        particle_fps=max(1, _int("WUMPUS_PARTICLE_FPS", 30)),
        log_level=os.getenv("WUMPUS_LOG_LEVEL", "INFO").upper(),
        port=_int("PORT", 5000),
        debug=_flag("FLASK_DEBUG", os.getenv("DEBUG", "0")),
        seed=seed,
    )
