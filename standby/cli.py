from __future__ import annotations

import argparse
import os
import subprocess
import sys
from typing import Optional

from standby.clock import CountdownClock
from standby.config import load_config, normalise_config
from standby.errors import ConfigError
from standby.pipeline import render_frames
from standby.render import RENDERERS, choose_renderer, renderer_info
from standby.util.logging_setup import LOG_LEVELS, configure_logging, get_logger, level_from_name
from standby.util.manifest import build_manifest, write_manifest
from standby.video.opencv_writer import encode_with_opencv

MANIFEST_PATH = os.path.join("artifacts", "run.json")

def _git_commit() -> Optional[str]:
    try:
        r = subprocess.run(["git", "rev-parse", "HEAD"], capture_output=True, text=True, check=True)
        return r.stdout.strip()
    except (OSError, subprocess.CalledProcessError):
        return None

def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="standby", description="Mandelbrot standby screen with a countdown overlay.")
    p.add_argument("--config", type=str, default=None, help="Path to config JSON. If omitted, uses standby.defaults.")
    p.add_argument("--renderer", type=str, default="auto", choices=list(RENDERERS), help="Renderer selection.")
    p.add_argument("--log-level", type=str, default="INFO", choices=list(LOG_LEVELS), help="Log level.")
    p.add_argument("--log-file", type=str, default="standby.log", help="Log file path (rotating). Set empty to disable file logging.")
    sub = p.add_subparsers(dest="cmd", required=True)

    r = sub.add_parser("render", help="Play the standby screen headless and write PNG frames.")
    r.add_argument("--frames-dir", type=str, default=None, help="Override frames_dir from config.")
    r.add_argument("--frames", type=int, default=None, help="Number of frames (defaults to config.total_frames).")
    r.add_argument("--fps", type=int, default=None, help="Ticks per second of simulated time (defaults to config.fps).")
    r.add_argument("--no-overlay", action="store_true", help="Do not draw the countdown text.")
    r.add_argument("--no-progress", action="store_true", help="Hide the progress bar.")

    e = sub.add_parser("encode", help="Encode frames into an MP4 video using OpenCV.")
    e.add_argument("--input-dir", type=str, default=None, help="Frames directory (defaults to config.frames_dir).")
    e.add_argument("--output", type=str, default=None, help="Output MP4 file (defaults to config.output_video).")
    e.add_argument("--fps", type=int, default=None, help="Frames per second (defaults to config.fps).")

    sub.add_parser("countdown", help="Print the countdown as shown at the configured clock start.")

    return p

def main(argv: Optional[list] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    log_level = level_from_name(args.log_level)
    log_file = args.log_file if args.log_file and args.log_file.strip() else None
    configure_logging(log_level, console=True, log_file=log_file)
    logger = get_logger()

    try:
        cfg = normalise_config(load_config(args.config))
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    if args.cmd == "render":
        if args.frames_dir:
            cfg["frames_dir"] = args.frames_dir
        resolved = choose_renderer(args.renderer)
        result = render_frames(
            cfg=cfg,
            renderer=resolved,
            total_frames=args.frames,
            fps=args.fps,
            overlay=not args.no_overlay,
            progress=not args.no_progress,
        )
        manifest = build_manifest(config=cfg, result=result, renderer_info=renderer_info(resolved), git_commit=_git_commit())
        write_manifest(MANIFEST_PATH, manifest)
        logger.info("Run manifest written: %s", MANIFEST_PATH)
        return 0

    if args.cmd == "encode":
        input_dir = args.input_dir or cfg["frames_dir"]
        output = args.output or cfg["output_video"]
        fps = args.fps or cfg["fps"]
        encode_with_opencv(input_dir=input_dir, output_file=output, fps=fps)
        return 0

    if args.cmd == "countdown":
        clock = CountdownClock.from_config(cfg)
        shown = clock.display(cfg["countdown_format"], cfg["countdown_label"])
        print(shown.text)
        return 0

    raise RuntimeError("Unknown command.")

if __name__ == "__main__":
    sys.exit(main())
