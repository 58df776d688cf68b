from __future__ import annotations

import os
from typing import Any, Dict, Optional

from PIL import Image, ImageDraw, ImageFont
from tqdm import tqdm

from standby.clock import CountdownDisplay
from standby.session import StandbySession
from standby.util.logging_setup import get_logger

def _ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)

def _save_frame(img: Image.Image, frames_dir: str, frame_index: int) -> str:
    path = os.path.join(frames_dir, f"frame_{frame_index:06d}.png")
    img.save(path, format="PNG")
    return path

def buffer_to_image(buffer: bytearray, width: int, height: int) -> Image.Image:
    return Image.frombytes("RGBA", (width, height), bytes(buffer))

def draw_overlay(img: Image.Image, countdown: CountdownDisplay, font_size: Optional[int] = None) -> Image.Image:
    """Countdown text centered on the frame, white while counting, accent green once live."""
    size = font_size or max(12, img.size[1] // 8)
    font = ImageFont.load_default(size=size)
    draw = ImageDraw.Draw(img)
    draw.multiline_text(
        (img.size[0] / 2, img.size[1] / 2),
        countdown.text,
        fill=countdown.color + (255,),
        font=font,
        anchor="mm",
        align="center",
    )
    return img

def render_frames(
    *,
    cfg: Dict[str, Any],
    renderer: str = "auto",
    total_frames: Optional[int] = None,
    fps: Optional[int] = None,
    overlay: bool = True,
    progress: bool = True,
) -> Dict[str, Any]:
    """
    Play the standby screen headless: fixed 1/fps ticks, one PNG per tick.

    The fractal is rendered into a width x height RGBA buffer and scaled to
    display_width x display_height, the aspect ratio the view is computed for.
    """
    logger = get_logger()

    width = int(cfg["width"])
    height = int(cfg["height"])
    display_size = (int(cfg["display_width"]), int(cfg["display_height"]))
    aspect_ratio = display_size[0] / display_size[1]
    total_frames = int(total_frames or cfg["total_frames"])
    fps = int(fps or cfg["fps"])
    frames_dir = str(cfg["frames_dir"])

    _ensure_dir(frames_dir)
    session = StandbySession.from_config(cfg, renderer=renderer)
    buffer = bytearray(width * height * 4)
    delta = 1.0 / fps

    logger.info("Render start total_frames=%s buffer=%sx%s display=%sx%s fps=%s renderer=%s",
                total_frames, width, height, display_size[0], display_size[1], fps, session.renderer)

    recoveries = 0
    last_text = None
    for i in tqdm(range(total_frames), disable=not progress, unit="frame"):
        frame = session.tick(0.0 if i == 0 else delta, buffer, aspect_ratio)
        if frame.recovered:
            recoveries += 1

        img = buffer_to_image(buffer, width, height)
        if img.size != display_size:
            img = img.resize(display_size, Image.LANCZOS)
        if overlay:
            img = draw_overlay(img, frame.countdown)

        path = _save_frame(img.convert("RGB"), frames_dir, i)
        logger.debug("Saved frame %s -> %s (target=%s zoom=%s)", i, path, frame.view.target_index, frame.view.zoom)
        if frame.countdown.text != last_text and frame.countdown.live:
            logger.info("Countdown reached LIVE at frame %s", i)
        last_text = frame.countdown.text

    logger.info("Render complete frames_dir=%s recoveries=%s", frames_dir, recoveries)
    return {
        "frames_dir": frames_dir,
        "total_frames": total_frames,
        "width": width,
        "height": height,
        "display_width": display_size[0],
        "display_height": display_size[1],
        "recoveries": recoveries,
        "final_target_index": session.scheduler.view.target_index,
        "countdown": session.clock.display(session.countdown_format, session.countdown_label).text,
    }
