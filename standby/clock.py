from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional, Tuple

from standby.errors import ConfigError
from standby.util.logging_setup import get_logger

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"
LIVE_TEXT = "LIVE"
NORMAL_COLOR = (255, 255, 255)
LIVE_COLOR = (0, 255, 128)

Color = Tuple[int, int, int]

def parse_local_timestamp(text: str) -> datetime:
    """Parse yyyy-mm-ddTHH:MM:SS as local time. Anything else is a ConfigError."""
    try:
        naive = datetime.strptime(str(text), TIMESTAMP_FORMAT)
    except ValueError as e:
        raise ConfigError(f"Invalid timestamp {text!r}; expected yyyy-mm-ddTHH:MM:SS in local time") from e

    # A wall time skipped or repeated by a DST change has no single instant.
    early = naive.replace(fold=0).astimezone()
    late = naive.replace(fold=1).astimezone()
    if early.utcoffset() != late.utcoffset() or early.replace(tzinfo=None) != naive:
        raise ConfigError(f"Timestamp {text!r} is ambiguous or does not exist in local time")
    return early

def local_now() -> datetime:
    return datetime.now().astimezone()

def format_remaining(remaining: timedelta, fmt: str = "ms") -> str:
    """
    Zero-padded countdown text, whole seconds rounded down.

    "hms" -> HH:MM:SS, "ms" -> the MM:SS fields of the same clock face (hours are not shown).
    A negative duration is never printed; it reads as LIVE_TEXT.
    """
    if fmt not in ("ms", "hms"):
        raise ValueError(f"Unknown countdown format {fmt!r}")
    if remaining < timedelta(0):
        return LIVE_TEXT

    total_secs = remaining // timedelta(seconds=1)
    minutes, seconds = divmod(total_secs, 60)
    hours, minutes = divmod(minutes, 60)
    if fmt == "ms":
        return f"{minutes:02d}:{seconds:02d}"
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"

@dataclass(frozen=True)
class CountdownDisplay:
    text: str
    color: Color
    live: bool

class CountdownClock:
    """
    Current instant measured against a fixed target.

    In simulated mode the instant starts at `start` (default: `lead` before the
    target) and only moves through tick(), scaled by `speed`; `paused` or a zero
    speed freeze it. Otherwise every tick re-reads the wall clock through `now`.
    """

    def __init__(
        self,
        target: datetime,
        *,
        start: Optional[datetime] = None,
        lead: timedelta = timedelta(minutes=10),
        speed: float = 1.0,
        paused: bool = False,
        simulated: bool = True,
        now: Callable[[], datetime] = local_now,
    ):
        self.target = target
        self.speed = float(speed)
        self.paused = paused
        self.simulated = simulated
        self._now = now
        if simulated:
            self.current = start if start is not None else target - lead
        else:
            self.current = now()

    @classmethod
    def from_config(cls, cfg: dict, *, now: Callable[[], datetime] = local_now) -> "CountdownClock":
        start = cfg.get("start_time")
        return cls(
            parse_local_timestamp(cfg["target_time"]),
            start=parse_local_timestamp(start) if start is not None else None,
            lead=timedelta(minutes=float(cfg.get("lead_minutes", 10))),
            speed=float(cfg.get("clock_speed", 1.0)),
            paused=bool(cfg.get("paused", False)),
            simulated=bool(cfg.get("simulated", True)),
            now=now,
        )

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def tick(self, delta: float) -> datetime:
        if not self.simulated:
            self.current = self._now()
            return self.current
        if self.paused or self.speed == 0:
            return self.current

        scaled = delta * self.speed
        if not math.isfinite(scaled) or delta < 0 or scaled < 0:
            get_logger().debug("Ignoring clock delta %r x speed %r", delta, self.speed)
            return self.current

        # Whole microseconds, so long runs do not accumulate float drift.
        try:
            self.current = self.current + timedelta(microseconds=int(scaled * 1_000_000))
        except OverflowError:
            get_logger().warning("Clock advance of %ss overflows the datetime range, ignored", scaled)
        return self.current

    def remaining(self) -> timedelta:
        return self.target - self.current

    def is_live(self) -> bool:
        return self.remaining() < timedelta(0)

    def display(self, fmt: str = "ms", label: str = "{time}") -> CountdownDisplay:
        remaining = self.remaining()
        if remaining < timedelta(0):
            return CountdownDisplay(text=LIVE_TEXT, color=LIVE_COLOR, live=True)
        return CountdownDisplay(text=label.format(time=format_remaining(remaining, fmt)), color=NORMAL_COLOR, live=False)
