from __future__ import annotations

from typing import Tuple

import numpy as np
from numba import njit, prange

from standby.renderers.numpy_cpu import plane_axes
from standby.util.logging_setup import get_logger

# ------------------------------------------------------------
# float32 escape-time kernel, one row per prange iteration.
# All constants are float32 so numba never widens to float64.
# ------------------------------------------------------------
@njit(parallel=True)
def mandelbrot_kernel_single(re_axis, im_axis, max_iter, out_iters):
    height = im_axis.shape[0]
    width = re_axis.shape[0]
    two = np.float32(2.0)
    four = np.float32(4.0)

    for py in prange(height):
        y0 = im_axis[py]
        for px in range(width):
            x0 = re_axis[px]
            x = np.float32(0.0)
            y = np.float32(0.0)
            it = 0
            while it < max_iter:
                xt = x * x - y * y + x0
                y = two * x * y + y0
                x = xt
                if x * x + y * y > four:
                    break
                it += 1
            out_iters[py, px] = it

def escape_counts_numba(
    *,
    center: Tuple[float, float],
    zoom: float,
    aspect_ratio: float,
    width: int,
    height: int,
    max_iter: int,
) -> np.ndarray:
    logger = get_logger()
    re, im = plane_axes(center=center, zoom=zoom, aspect_ratio=aspect_ratio, width=width, height=height)
    iters = np.empty((height, width), dtype=np.uint32)
    mandelbrot_kernel_single(re, im, np.int64(max_iter), iters)
    logger.debug("Numba render %sx%s iter=%s", width, height, max_iter)
    return iters
