# palette.py

import numpy as np

INTERIOR = (0, 0, 0, 255)
GAMMA = np.float32(0.35)
GREEN_SCALE = np.float32(180.0)
BLUE_SCALE = np.float32(255.0)

def colorize(iters, max_iter):
    """
    Map an array of escape counts to an (..., 4) uint8 RGBA array.

    Points that never escaped (n == max_iter) are opaque black. Escaped points use
    a dark blue/cyan ramp: t = n / max_iter, intensity = t ** 0.35, then
    G = round(180 * intensity), B = round(255 * intensity). Red stays at zero for
    every pixel.
    """
    iters = np.asarray(iters)
    out = np.zeros(iters.shape + (4,), dtype=np.uint8)
    out[..., 3] = 255

    escaped = iters < max_iter
    t = iters[escaped].astype(np.float32) / np.float32(max_iter)
    intensity = np.power(t, GAMMA, dtype=np.float32)

    out[..., 1][escaped] = np.rint(intensity * GREEN_SCALE).astype(np.uint8)
    out[..., 2][escaped] = np.rint(intensity * BLUE_SCALE).astype(np.uint8)
    return out

def mandelbrot_color(n, max_iter):
    """Returns an (R, G, B, A) tuple for a single escape count."""
    if n >= max_iter:
        return INTERIOR
    r, g, b, a = colorize(np.array([n]), max_iter)[0]
    return (int(r), int(g), int(b), int(a))
