from __future__ import annotations

import math

class RepeatingTimer:
    """
    Accumulates tick deltas and wraps around every `duration` seconds.

    tick() returns how many periods completed during that tick (usually 0 or 1),
    so a caller reacting to completions sees each period exactly once. The
    elapsed time keeps the remainder after wrapping.
    """

    def __init__(self, duration: float):
        if not (math.isfinite(duration) and duration > 0):
            raise ValueError("Timer duration must be a positive finite number.")
        self.duration = float(duration)
        self.elapsed = 0.0

    def tick(self, delta: float) -> int:
        if not math.isfinite(delta) or delta <= 0:
            return 0
        self.elapsed += delta
        if self.elapsed < self.duration:
            return 0
        finished, self.elapsed = divmod(self.elapsed, self.duration)
        return int(finished)

    def reset(self) -> None:
        self.elapsed = 0.0

    @property
    def fraction(self) -> float:
        return min(max(self.elapsed / self.duration, 0.0), 1.0)
