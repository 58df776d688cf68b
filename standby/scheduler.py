from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

from standby.errors import ConfigError
from standby.render import FrameStats, render_into
from standby.timer import RepeatingTimer
from standby.util.logging_setup import get_logger

Point = Tuple[float, float]

def exp_interp(a: float, b: float, t: float) -> float:
    """Constant-ratio interpolation between two positive values; exact at t=0 and t=1."""
    if a <= 0 or b <= 0:
        raise ValueError("Zoom values must be positive.")
    if t <= 0.0:
        return a
    if t >= 1.0:
        return b
    return a * (b / a) ** t

@dataclass(frozen=True)
class ViewState:
    center: Point
    zoom: float
    target_index: int
    cycle_progress: float

class AnimationScheduler:
    """
    Drives the zoom-and-pan path through a fixed list of target points.

    Every cycle zooms exponentially from start_zoom to min_zoom around one target
    while the center orbits it on a small Lissajous curve scaled by the current
    zoom. A completed cycle moves on to the next target, wrapping at the end of
    the list. A rendered frame that is almost entirely interior ends the cycle
    immediately (see observe).
    """

    def __init__(
        self,
        targets: Sequence[Point],
        *,
        cycle_seconds: float,
        start_zoom: float,
        min_zoom: float,
        orbit_radius: float = 0.35,
        orbit_frequencies: Tuple[float, float] = (0.11, 0.13),
        min_iter: int = 80,
        max_iter: int = 1024,
        iter_per_octave: float = 20.0,
        interior_threshold: float = 0.985,
    ):
        if not targets:
            raise ConfigError("At least one target point is required.")
        if not (start_zoom > 0 and min_zoom > 0):
            raise ConfigError("start_zoom and min_zoom must be positive.")
        if min_zoom > start_zoom:
            raise ConfigError("min_zoom must not exceed start_zoom.")
        if not (1 <= min_iter <= max_iter):
            raise ConfigError("Iteration bounds must satisfy 1 <= min_iter <= max_iter.")
        if not (0 < interior_threshold <= 1):
            raise ConfigError("interior_threshold must be in (0, 1].")
        if orbit_frequencies[0] == orbit_frequencies[1]:
            raise ConfigError("orbit_frequencies must differ.")
        try:
            self._cycle = RepeatingTimer(cycle_seconds)
        except ValueError as e:
            raise ConfigError(f"cycle_seconds: {e}") from e

        self.targets: Tuple[Point, ...] = tuple((float(re), float(im)) for re, im in targets)
        self.start_zoom = float(start_zoom)
        self.min_zoom = float(min_zoom)
        self.orbit_radius = float(orbit_radius)
        self.orbit_frequencies = (float(orbit_frequencies[0]), float(orbit_frequencies[1]))
        self.min_iter = int(min_iter)
        self.max_iter = int(max_iter)
        self.iter_per_octave = float(iter_per_octave)
        self.interior_threshold = float(interior_threshold)

        self.elapsed = 0.0
        self.recoveries = 0
        self.view = ViewState(center=self.targets[0], zoom=self.start_zoom, target_index=0, cycle_progress=0.0)

    @classmethod
    def from_config(cls, cfg: dict) -> "AnimationScheduler":
        return cls(
            cfg["targets"],
            cycle_seconds=cfg["cycle_seconds"],
            start_zoom=cfg["start_zoom"],
            min_zoom=cfg["min_zoom"],
            orbit_radius=cfg["orbit_radius"],
            orbit_frequencies=tuple(cfg["orbit_frequencies"]),
            min_iter=cfg["min_iter"],
            max_iter=cfg["max_iter"],
            iter_per_octave=cfg["iter_per_octave"],
            interior_threshold=cfg["interior_threshold"],
        )

    @property
    def cycle_seconds(self) -> float:
        return self._cycle.duration

    def zoom_at(self, progress: float) -> float:
        return exp_interp(self.start_zoom, self.min_zoom, min(max(progress, 0.0), 1.0))

    def orbit_center(self, target: Point, zoom: float, t: float) -> Point:
        w1, w2 = self.orbit_frequencies
        r = self.orbit_radius * zoom
        return (target[0] + math.sin(w1 * t) * r, target[1] + math.cos(w2 * t) * r)

    def iteration_budget(self, zoom: Optional[float] = None) -> int:
        """More iterations as the view deepens: min_iter + iter_per_octave per halving of zoom."""
        zoom = self.view.zoom if zoom is None else zoom
        factor = max(self.start_zoom / zoom, 1.0)
        budget = self.min_iter + self.iter_per_octave * math.log2(factor)
        return int(min(max(budget, self.min_iter), self.max_iter))

    def tick(self, delta: float) -> ViewState:
        logger = get_logger()
        if not math.isfinite(delta) or delta < 0:
            logger.debug("Ignoring scheduler delta %r", delta)
            delta = 0.0

        self.elapsed += delta
        index = self.view.target_index
        completed = self._cycle.tick(delta)
        if completed:
            index = (index + completed) % len(self.targets)
            logger.info("Zoom cycle complete, next target %s %s", index, self.targets[index])

        progress = self._cycle.fraction
        zoom = self.zoom_at(progress)
        center = self.orbit_center(self.targets[index], zoom, self.elapsed)
        self.view = ViewState(center=center, zoom=zoom, target_index=index, cycle_progress=progress)
        return self.view

    def advance_target(self) -> ViewState:
        """Jump to the next target and restart the cycle at start_zoom."""
        index = (self.view.target_index + 1) % len(self.targets)
        self._cycle.reset()
        self.view = ViewState(center=self.targets[index], zoom=self.start_zoom, target_index=index, cycle_progress=0.0)
        return self.view

    def observe(self, stats: Optional[FrameStats]) -> bool:
        if stats is None or stats.interior_fraction < self.interior_threshold:
            return False
        get_logger().info("Frame %.1f%% interior at zoom=%s, skipping to next target",
                          100.0 * stats.interior_fraction, self.view.zoom)
        self.recoveries += 1
        self.advance_target()
        return True

    def render(
        self,
        buffer: Any,
        *,
        width: int,
        height: int,
        aspect_ratio: float,
        renderer: str = "auto",
    ) -> Optional[FrameStats]:
        view = self.view
        stats = render_into(
            buffer,
            width=width,
            height=height,
            center=view.center,
            zoom=view.zoom,
            aspect_ratio=aspect_ratio,
            max_iter=self.iteration_budget(view.zoom),
            renderer=renderer,
        )
        self.observe(stats)
        return stats
