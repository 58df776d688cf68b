from __future__ import annotations

import math
from typing import Any, Dict, Tuple

import numpy as np

from standby.renderers.numpy_cpu import plane_axes
from standby.util.logging_setup import get_logger

def probe_cuda() -> Dict[str, Any]:
    info: Dict[str, Any] = {"available": False}
    try:
        from numba import cuda  # type: ignore
        if not cuda.is_available():
            return info
        dev = cuda.get_current_device()
        info.update({
            "available": True,
            "name": getattr(dev, "name", None),
            "compute_capability": getattr(dev, "compute_capability", None),
            "max_threads_per_block": getattr(dev, "MAX_THREADS_PER_BLOCK", None),
            "warp_size": getattr(dev, "WARP_SIZE", None),
        })
        return info
    except Exception as e:
        info["error"] = str(e)
        return info

_KERNEL = None

def _kernel():
    """Compile the CUDA kernel on first use so importing this module never touches the driver."""
    global _KERNEL
    if _KERNEL is not None:
        return _KERNEL

    from numba import cuda  # type: ignore

    # One thread per pixel, float32 only; same loop shape as the CPU kernels.
    @cuda.jit
    def mandelbrot_kernel_single(re_axis, im_axis, max_iter, out_iters):
        px, py = cuda.grid(2)
        if px >= re_axis.shape[0] or py >= im_axis.shape[0]:
            return

        x0 = re_axis[px]
        y0 = im_axis[py]
        x = np.float32(0.0)
        y = np.float32(0.0)
        it = 0
        while it < max_iter:
            xt = x * x - y * y + x0
            y = np.float32(2.0) * x * y + y0
            x = xt
            if x * x + y * y > np.float32(4.0):
                break
            it += 1
        out_iters[py, px] = it

    _KERNEL = mandelbrot_kernel_single
    return _KERNEL

def escape_counts_gpu(
    *,
    center: Tuple[float, float],
    zoom: float,
    aspect_ratio: float,
    width: int,
    height: int,
    max_iter: int,
) -> np.ndarray:
    logger = get_logger()
    try:
        from numba import cuda  # type: ignore
    except Exception as e:
        raise RuntimeError(f"GPU renderer not available: {e}") from e
    if not cuda.is_available():
        raise RuntimeError("GPU renderer not available: no CUDA device.")

    re, im = plane_axes(center=center, zoom=zoom, aspect_ratio=aspect_ratio, width=width, height=height)
    iters_host = np.zeros((height, width), dtype=np.uint32)

    re_device = cuda.to_device(re)
    im_device = cuda.to_device(im)
    iters_device = cuda.device_array_like(iters_host)

    threads_per_block = (16, 16)
    blocks_per_grid = (math.ceil(width / threads_per_block[0]), math.ceil(height / threads_per_block[1]))
    _kernel()[blocks_per_grid, threads_per_block](re_device, im_device, int(max_iter), iters_device)

    iters_device.copy_to_host(iters_host)
    logger.debug("GPU render %sx%s iter=%s", width, height, max_iter)
    return iters_host
