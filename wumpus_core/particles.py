"""
Decorative background particles.

The field keeps particle state in NumPy arrays and knows nothing about
drawing: callers take a frame() snapshot and render it however they like.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np

log = logging.getLogger(__name__)

DEFAULT_COUNT = 50
LINK_DISTANCE = 120.0
LINK_RGB = (79, 140, 255)
LINK_MAX_ALPHA = 0.1
SPEED = 0.25          # max |velocity| per axis, px per frame
RADIUS_RANGE = (1.0, 3.0)
OPACITY_START = (0.2, 0.7)
OPACITY_CLAMP = (0.1, 0.6)
OPACITY_JITTER = 0.01

# (r, g, b, base alpha)
PALETTE: Tuple[Tuple[int, int, int, float], ...] = (
    (79, 140, 255, 0.4),    # blue
    (112, 193, 179, 0.4),   # mint
    (255, 169, 135, 0.4),   # peach
    (79, 140, 255, 0.2),    # light blue
    (112, 193, 179, 0.2),   # light mint
)


@dataclass(frozen=True)
class Link:
    i: int
    j: int
    alpha: float


class ParticleField:
    """A fixed-size cloud of drifting particles that wraps around the viewport."""

    def __init__(self, width: float, height: float, count: int = DEFAULT_COUNT, seed: Optional[int] = None):
        self.count = int(count)
        self.rng = np.random.default_rng(seed)
        self.width = 0.0
        self.height = 0.0
        self.resize(width, height)

    def resize(self, width: float, height: float) -> None:
        """Adopts a new viewport and respawns every particle inside it."""
        if width <= 0 or height <= 0:
            raise ValueError(f"viewport must be positive, got {width}x{height}")
        self.width = float(width)
        self.height = float(height)
        self._spawn()
        log.debug("Particle field resized to %dx%d", self.width, self.height)

    def _spawn(self) -> None:
        n = self.count
        self.positions = self.rng.uniform(low=[0, 0], high=[self.width, self.height], size=(n, 2))
        self.velocities = self.rng.uniform(-SPEED, SPEED, size=(n, 2))
        self.radii = self.rng.uniform(*RADIUS_RANGE, size=n)
        self.opacities = self.rng.uniform(*OPACITY_START, size=n)
        self.colors = self.rng.integers(0, len(PALETTE), size=n)

    def step(self) -> None:
        """Advances one frame: drift, wrap at the edges, flicker."""
        self.positions += self.velocities

        x = self.positions[:, 0]
        y = self.positions[:, 1]
        x[x < 0] = self.width
        x[x > self.width] = 0.0
        y[y < 0] = self.height
        y[y > self.height] = 0.0

        self.opacities += self.rng.uniform(-OPACITY_JITTER, OPACITY_JITTER, size=self.count)
        np.clip(self.opacities, *OPACITY_CLAMP, out=self.opacities)

    def links(self) -> List[Link]:
        """Every unordered pair closer than LINK_DISTANCE, fading with distance."""
        if self.count < 2:
            return []
        delta = self.positions[:, None, :] - self.positions[None, :, :]
        dist = np.sqrt((delta ** 2).sum(axis=-1))
        ii, jj = np.triu_indices(self.count, k=1)
        near = dist[ii, jj] < LINK_DISTANCE
        out: List[Link] = []
        for i, j, d in zip(ii[near], jj[near], dist[ii, jj][near]):
            out.append(Link(int(i), int(j), float(LINK_MAX_ALPHA * (1.0 - d / LINK_DISTANCE))))
        return out

    def frame(self) -> Dict[str, Any]:
        particles = []
        for k in range(self.count):
            r, g, b, _ = PALETTE[int(self.colors[k])]
            particles.append({
                "x": float(self.positions[k, 0]),
                "y": float(self.positions[k, 1]),
                "radius": float(self.radii[k]),
                "color": f"rgba({r}, {g}, {b}, {float(self.opacities[k]):.3f})",
            })
        lr, lg, lb = LINK_RGB
        links = []
        for link in self.links():
            a = self.positions[link.i]
            b = self.positions[link.j]
            links.append({
                "x1": float(a[0]), "y1": float(a[1]),
                "x2": float(b[0]), "y2": float(b[1]),
                "color": f"rgba({lr}, {lg}, {lb}, {link.alpha:.3f})",
            })
        return {"width": self.width, "height": self.height, "particles": particles, "links": links}


class FrameLoop:
    """Steps a ParticleField at a fixed rate on a daemon thread until stop() is called."""

    def __init__(self, field: ParticleField, fps: int = 30, on_frame: Optional[Callable[[ParticleField], None]] = None):
        self.field = field
        self.interval = 1.0 / max(1, fps)
        self.on_frame = on_frame
        self.frames = 0
        self.lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="particle-frames", daemon=True)
        self._thread.start()
        log.info("Particle frame loop started (%.1f fps)", 1.0 / self.interval)

    def stop(self, timeout: Optional[float] = 1.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        log.info("Particle frame loop stopped after %d frames", self.frames)

    def tick(self) -> None:
        with self.lock:
            self.field.step()
            self.frames += 1
            if self.on_frame is not None:
                self.on_frame(self.field)

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.tick()
