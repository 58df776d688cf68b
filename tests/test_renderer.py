import numpy as np
import pytest

from standby.render import FrameStats, choose_renderer, render_into
from standby.renderers.gpu import escape_counts_gpu, probe_cuda
from standby.renderers.numba_cpu import escape_counts_numba
from standby.renderers.numpy_cpu import escape_counts_numpy, plane_axes


def _single_pixel(c, max_iter=50, backend=escape_counts_numpy):
    iters = backend(center=c, zoom=1.0, aspect_ratio=1.0, width=1, height=1, max_iter=max_iter)
    return int(iters[0, 0])


def test_plane_axes_sample_pixel_centers():
    re, im = plane_axes(center=(0.0, 0.0), zoom=1.0, aspect_ratio=2.0, width=4, height=2)
    assert re.dtype == np.float32 and im.dtype == np.float32
    np.testing.assert_allclose(re, [-1.5, -0.5, 0.5, 1.5])
    np.testing.assert_allclose(im, [-0.5, 0.5])


def test_plane_axes_scale_with_zoom_and_center():
    re, im = plane_axes(center=(-0.5, 0.25), zoom=0.5, aspect_ratio=1.0, width=2, height=2)
    np.testing.assert_allclose(re, [-0.75, -0.25])
    np.testing.assert_allclose(im, [0.0, 0.5])


def test_escape_count_excludes_escaping_step():
    # c=1: z=1, 2, 5 -> two bounded steps before escaping.
    assert _single_pixel((1.0, 0.0)) == 2
    # c=2: z=2 (|z|^2 == 4 is still bounded), then 6.
    assert _single_pixel((2.0, 0.0)) == 1
    assert _single_pixel((3.0, 0.0)) == 0


def test_bounded_points_reach_the_cap():
    assert _single_pixel((0.0, 0.0)) == 50
    # c=-2 sits on |z|^2 == 4 forever.
    assert _single_pixel((-2.0, 0.0)) == 50


def test_numba_matches_numpy():
    kwargs = dict(center=(-0.743643887037151, 0.13182590420533), zoom=0.01, aspect_ratio=16 / 9,
                  width=48, height=27, max_iter=300)
    a = escape_counts_numpy(**kwargs)
    b = escape_counts_numba(**kwargs)
    assert a.shape == b.shape == (27, 48)
    assert np.mean(a == b) > 0.99


def test_render_into_bytearray():
    width, height = 24, 16
    buf = bytearray(width * height * 4)
    stats = render_into(buf, width=width, height=height, center=(-0.5, 0.0), zoom=1.2,
                        aspect_ratio=1.5, max_iter=80, renderer="numpy")
    assert isinstance(stats, FrameStats)
    assert stats.total_pixels == width * height
    assert 0 < stats.interior_pixels < stats.total_pixels

    pixels = np.frombuffer(buf, dtype=np.uint8).reshape(height, width, 4)
    assert not pixels[..., 0].any()
    assert (pixels[..., 3] == 255).all()
    assert pixels[..., 2].max() > 0


def test_render_into_counts_interior_as_black():
    buf = np.zeros(8 * 8 * 4, dtype=np.uint8)
    stats = render_into(buf, width=8, height=8, center=(-0.1, 0.0), zoom=1e-3,
                        aspect_ratio=1.0, max_iter=80, renderer="numpy")
    assert stats.interior_fraction == 1.0
    rgba = buf.reshape(8, 8, 4)
    assert (rgba[..., :3] == 0).all()
    assert (rgba[..., 3] == 255).all()


def test_render_into_far_outside_has_no_interior():
    buf = bytearray(4 * 4 * 4)
    stats = render_into(buf, width=4, height=4, center=(10.0, 10.0), zoom=0.1,
                        aspect_ratio=1.0, max_iter=80, renderer="numpy")
    assert stats.interior_pixels == 0


def test_render_into_memoryview_and_2d_array():
    mv = memoryview(bytearray(6 * 4 * 4))
    assert render_into(mv, width=6, height=4, center=(-0.5, 0.0), zoom=1.0,
                       aspect_ratio=1.0, max_iter=40, renderer="numpy") is not None

    arr = np.zeros((4, 6, 4), dtype=np.uint8)
    render_into(arr, width=6, height=4, center=(-0.5, 0.0), zoom=1.0,
                aspect_ratio=1.0, max_iter=40, renderer="numpy")
    assert (arr[..., 3] == 255).all()


def test_missing_buffer_is_a_noop():
    assert render_into(None, width=8, height=8, center=(0.0, 0.0), zoom=1.0,
                       aspect_ratio=1.0, max_iter=80, renderer="numpy") is None


@pytest.mark.parametrize("kwargs", [
    dict(width=8, height=8, zoom=0.0, aspect_ratio=1.0, max_iter=80),
    dict(width=8, height=8, zoom=1.0, aspect_ratio=0.0, max_iter=80),
    dict(width=8, height=8, zoom=1.0, aspect_ratio=1.0, max_iter=0),
    dict(width=0, height=8, zoom=1.0, aspect_ratio=1.0, max_iter=80),
    dict(width=8, height=8, zoom=float("nan"), aspect_ratio=1.0, max_iter=80),
])
def test_render_into_rejects_bad_view(kwargs):
    buf = bytearray(8 * 8 * 4)
    with pytest.raises(ValueError):
        render_into(buf, center=(0.0, 0.0), renderer="numpy", **kwargs)


def test_render_into_rejects_bad_buffers():
    view = dict(width=4, height=4, center=(0.0, 0.0), zoom=1.0, aspect_ratio=1.0, max_iter=10, renderer="numpy")
    with pytest.raises(ValueError):
        render_into(bytearray(10), **view)
    with pytest.raises(ValueError):
        render_into(bytes(64), **view)
    with pytest.raises(ValueError):
        render_into(np.zeros(64, dtype=np.float32), **view)


def test_choose_renderer():
    assert choose_renderer("numpy") == "numpy"
    assert choose_renderer("numba") == "numba"
    assert choose_renderer("auto") in ("numba", "gpu")
    with pytest.raises(ValueError):
        choose_renderer("opengl")


@pytest.mark.skipif(not probe_cuda().get("available"), reason="CUDA not available")
def test_gpu_matches_numpy():
    kwargs = dict(center=(-0.5, 0.0), zoom=1.2, aspect_ratio=1.5, width=64, height=40, max_iter=200)
    a = escape_counts_numpy(**kwargs)
    b = escape_counts_gpu(**kwargs)
    assert np.mean(a == b) > 0.99


@pytest.mark.skipif(probe_cuda().get("available"), reason="CUDA available")
def test_gpu_without_cuda_raises():
    with pytest.raises(RuntimeError):
        escape_counts_gpu(center=(0.0, 0.0), zoom=1.0, aspect_ratio=1.0, width=2, height=2, max_iter=10)
