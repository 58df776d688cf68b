import pytest

from standby.config import normalise_config
from standby.util.logging_setup import reset_logging


@pytest.fixture(autouse=True)
def reset_standby_logger():
    yield
    reset_logging()


@pytest.fixture
def small_cfg(tmp_path):
    """Default configuration shrunk to a tiny buffer, frames written under tmp_path."""
    return normalise_config({
        "width": 16,
        "height": 9,
        "display_width": 32,
        "display_height": 18,
        "total_frames": 3,
        "fps": 30,
        "frames_dir": str(tmp_path / "frames"),
        "output_video": str(tmp_path / "standby.mp4"),
    })
