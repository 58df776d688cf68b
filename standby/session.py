from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from standby.clock import CountdownClock, CountdownDisplay
from standby.render import FrameStats, choose_renderer
from standby.scheduler import AnimationScheduler, ViewState
from standby.timer import RepeatingTimer

@dataclass(frozen=True)
class SessionFrame:
    view: ViewState
    stats: Optional[FrameStats]
    rendered: bool
    recovered: bool
    countdown: CountdownDisplay

class StandbySession:
    """
    One standby screen: the zoom scheduler, its renderer and the countdown clock.

    The caller owns the frame loop and the pixel buffer and calls tick() once per
    frame. Scheduler and clock advance on every tick; the fractal is re-rendered
    at most render_fps times per second.
    """

    def __init__(
        self,
        scheduler: AnimationScheduler,
        clock: CountdownClock,
        *,
        width: int,
        height: int,
        render_fps: Optional[float] = None,
        renderer: str = "auto",
        countdown_format: str = "ms",
        countdown_label: str = "{time}",
    ):
        self.scheduler = scheduler
        self.clock = clock
        self.width = width
        self.height = height
        # Resolved once; "auto" would otherwise probe CUDA on every render.
        self.renderer = choose_renderer(renderer)
        self.countdown_format = countdown_format
        self.countdown_label = countdown_label
        self._frame_timer = RepeatingTimer(1.0 / render_fps) if render_fps else None
        self._pending = True

    @classmethod
    def from_config(cls, cfg: dict, *, renderer: str = "auto", **clock_kwargs) -> "StandbySession":
        return cls(
            AnimationScheduler.from_config(cfg),
            CountdownClock.from_config(cfg, **clock_kwargs),
            width=cfg["width"],
            height=cfg["height"],
            render_fps=cfg.get("render_fps"),
            renderer=renderer,
            countdown_format=cfg.get("countdown_format", "ms"),
            countdown_label=cfg.get("countdown_label", "{time}"),
        )

    def _render_due(self, delta: float) -> bool:
        fired = self._frame_timer is None or self._frame_timer.tick(delta) > 0
        return fired or self._pending

    def tick(self, delta: float, buffer: Any, aspect_ratio: float) -> SessionFrame:
        self.scheduler.tick(delta)

        stats = None
        recovered = False
        rendered = self._render_due(delta)
        if rendered:
            before = self.scheduler.recoveries
            stats = self.scheduler.render(
                buffer, width=self.width, height=self.height, aspect_ratio=aspect_ratio, renderer=self.renderer
            )
            recovered = self.scheduler.recoveries != before
            rendered = stats is not None
            self._pending = not rendered

        self.clock.tick(delta)
        return SessionFrame(
            view=self.scheduler.view,
            stats=stats,
            rendered=rendered,
            recovered=recovered,
            countdown=self.clock.display(self.countdown_format, self.countdown_label),
        )
