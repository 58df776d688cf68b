from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

import numpy as np

from standby.palette import colorize
from standby.renderers.gpu import escape_counts_gpu, probe_cuda
from standby.renderers.numba_cpu import escape_counts_numba
from standby.renderers.numpy_cpu import escape_counts_numpy
from standby.util.logging_setup import get_logger

RENDERERS = ("auto", "numpy", "numba", "gpu")

_BACKENDS: Dict[str, Callable[..., np.ndarray]] = {
    "numpy": escape_counts_numpy,
    "numba": escape_counts_numba,
    "gpu": escape_counts_gpu,
}

@dataclass(frozen=True)
class FrameStats:
    interior_pixels: int
    total_pixels: int
    max_iter: int

    @property
    def interior_fraction(self) -> float:
        return self.interior_pixels / self.total_pixels

def choose_renderer(renderer: str = "auto") -> str:
    if renderer in _BACKENDS:
        return renderer
    if renderer != "auto":
        raise ValueError(f"renderer must be one of: {', '.join(RENDERERS)}")
    if probe_cuda().get("available"):
        return "gpu"
    return "numba"

def renderer_info(resolved: str) -> Dict[str, Any]:
    return {"resolved": resolved, "cuda": probe_cuda()}

def _pixel_view(buffer: Any, width: int, height: int) -> np.ndarray:
    arr = buffer if isinstance(buffer, np.ndarray) else np.frombuffer(buffer, dtype=np.uint8)
    if arr.dtype != np.uint8:
        raise ValueError(f"Pixel buffer must hold uint8 values, got {arr.dtype}.")
    if arr.size != width * height * 4:
        raise ValueError(f"Pixel buffer holds {arr.size} bytes, expected {width * height * 4} for {width}x{height} RGBA.")
    if not arr.flags.writeable:
        raise ValueError("Pixel buffer is read-only.")
    if not arr.flags.c_contiguous:
        raise ValueError("Pixel buffer must be contiguous.")
    return arr.reshape(height, width, 4)

def render_into(
    buffer: Any,
    *,
    width: int,
    height: int,
    center: Tuple[float, float],
    zoom: float,
    aspect_ratio: float,
    max_iter: int,
    renderer: str = "auto",
) -> Optional[FrameStats]:
    """
    Fill `buffer` (width*height*4 bytes, RGBA8, top row first) with one frame.

    The buffer may be a bytearray, a writable memoryview or a uint8 ndarray; it is
    only written once the whole frame has been computed and is not retained.
    Returns None without touching anything when the buffer is not available yet.
    """
    logger = get_logger()
    if buffer is None:
        logger.debug("Pixel buffer not ready, skipping render")
        return None

    if width <= 0 or height <= 0:
        raise ValueError("width/height must be positive.")
    if not (math.isfinite(zoom) and zoom > 0):
        raise ValueError("zoom must be a positive finite number.")
    if not (math.isfinite(aspect_ratio) and aspect_ratio > 0):
        raise ValueError("aspect_ratio must be a positive finite number.")
    if max_iter < 1:
        raise ValueError("max_iter must be at least 1.")

    pixels = _pixel_view(buffer, width, height)
    resolved = choose_renderer(renderer)

    iters = _BACKENDS[resolved](
        center=center, zoom=zoom, aspect_ratio=aspect_ratio, width=width, height=height, max_iter=max_iter
    )
    pixels[...] = colorize(iters, max_iter)

    stats = FrameStats(
        interior_pixels=int(np.count_nonzero(iters >= max_iter)),
        total_pixels=width * height,
        max_iter=max_iter,
    )
    logger.debug("Rendered %sx%s renderer=%s zoom=%s iter=%s interior=%.4f",
                 width, height, resolved, zoom, max_iter, stats.interior_fraction)
    return stats
