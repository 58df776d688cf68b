from __future__ import annotations

from typing import Tuple

import numpy as np

from standby.util.logging_setup import get_logger

def plane_axes(
    *,
    center: Tuple[float, float],
    zoom: float,
    aspect_ratio: float,
    width: int,
    height: int,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    float32 complex-plane coordinates of the pixel centers.

    Returns (re, im) where re has shape (width,) and im has shape (height,):
        u = (x + 0.5) / width        cx = (u - 0.5) * 2 * aspect_ratio
        v = (y + 0.5) / height       cy = (v - 0.5) * 2
        re = cx * zoom + center.x    im = cy * zoom + center.y
    The vertical span is 2*zoom, the horizontal span 2*zoom*aspect_ratio.
    """
    f32 = np.float32
    aspect = f32(aspect_ratio)
    z = f32(zoom)

    u = (np.arange(width, dtype=np.float32) + f32(0.5)) / f32(width)
    v = (np.arange(height, dtype=np.float32) + f32(0.5)) / f32(height)

    cx = (u - f32(0.5)) * f32(2.0) * aspect
    cy = (v - f32(0.5)) * f32(2.0)
    return cx * z + f32(center[0]), cy * z + f32(center[1])

def escape_counts_numpy(
    *,
    center: Tuple[float, float],
    zoom: float,
    aspect_ratio: float,
    width: int,
    height: int,
    max_iter: int,
) -> np.ndarray:
    """(height, width) uint32 escape counts; max_iter marks points that never escaped."""
    logger = get_logger()
    re, im = plane_axes(center=center, zoom=zoom, aspect_ratio=aspect_ratio, width=width, height=height)

    cr = np.broadcast_to(re[np.newaxis, :], (height, width)).ravel()
    ci = np.broadcast_to(im[:, np.newaxis], (height, width)).ravel()

    iters = np.full(width * height, max_iter, dtype=np.uint32)

    # Only still-bounded points are iterated; escaped ones drop out of the arrays.
    active = np.arange(width * height)
    x = np.zeros(active.size, dtype=np.float32)
    y = np.zeros(active.size, dtype=np.float32)
    two = np.float32(2.0)
    four = np.float32(4.0)

    for n in range(max_iter):
        xt = x * x - y * y + cr
        y = two * x * y + ci
        x = xt

        escaped = x * x + y * y > four
        if escaped.any():
            iters[active[escaped]] = n
            keep = ~escaped
            active, x, y, cr, ci = active[keep], x[keep], y[keep], cr[keep], ci[keep]
            if active.size == 0:
                break

    logger.debug("NumPy render %sx%s iter=%s interior=%s", width, height, max_iter, active.size)
    return iters.reshape(height, width)
