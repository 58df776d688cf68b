import json
import math
from typing import Any, Dict, Optional

from standby import defaults
from standby.clock import parse_local_timestamp
from standby.errors import ConfigError

COUNTDOWN_FORMATS = ("ms", "hms")

def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    if config_path:
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                cfg = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Config {config_path} is not valid JSON: {e}") from e
        if not isinstance(cfg, dict):
            raise ConfigError("Config JSON must be an object.")
        return cfg

    return {k.lower(): getattr(defaults, k) for k in dir(defaults) if k.isupper()}

def _positive_int(cfg: Dict[str, Any], key: str) -> int:
    try:
        v = int(cfg[key])
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be an integer.") from e
    if v <= 0:
        raise ConfigError(f"{key} must be positive.")
    return v

def _positive_float(cfg: Dict[str, Any], key: str) -> float:
    try:
        v = float(cfg[key])
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be a number.") from e
    if not math.isfinite(v) or v <= 0:
        raise ConfigError(f"{key} must be a positive finite number.")
    return v

def _point(value: Any, key: str) -> tuple:
    if not (isinstance(value, (list, tuple)) and len(value) == 2):
        raise ConfigError(f"{key} entries must be [re, im].")
    try:
        re, im = float(value[0]), float(value[1])
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} entries must be numeric.") from e
    if not (math.isfinite(re) and math.isfinite(im)):
        raise ConfigError(f"{key} entries must be finite.")
    return (re, im)

def normalise_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    base = load_config(None)
    unknown = sorted(set(cfg) - set(base))
    if unknown:
        raise ConfigError(f"Unknown config field(s): {', '.join(unknown)}")

    out = dict(base)
    out.update(cfg)

    for key in ("width", "height", "display_width", "display_height", "min_iter", "max_iter",
                "fps", "total_frames"):
        out[key] = _positive_int(out, key)
    for key in ("cycle_seconds", "start_zoom", "min_zoom", "orbit_radius", "interior_threshold",
                "render_fps", "iter_per_octave"):
        out[key] = _positive_float(out, key)

    if out["min_zoom"] > out["start_zoom"]:
        raise ConfigError("min_zoom must not exceed start_zoom.")
    if out["min_iter"] > out["max_iter"]:
        raise ConfigError("min_iter must not exceed max_iter.")
    if out["interior_threshold"] > 1.0:
        raise ConfigError("interior_threshold must be in (0, 1].")

    targets = out["targets"]
    if not isinstance(targets, (list, tuple)) or not targets:
        raise ConfigError("targets must be a non-empty list of [re, im] points.")
    out["targets"] = [_point(t, "targets") for t in targets]

    freqs = _point(out["orbit_frequencies"], "orbit_frequencies")
    if freqs[0] == freqs[1]:
        raise ConfigError("orbit_frequencies must differ.")
    out["orbit_frequencies"] = freqs

    # Timestamps are parsed here only to fail at startup; the clock re-parses them.
    out["target_time"] = str(out["target_time"])
    parse_local_timestamp(out["target_time"])
    if out["start_time"] is not None:
        out["start_time"] = str(out["start_time"])
        parse_local_timestamp(out["start_time"])

    try:
        out["lead_minutes"] = float(out["lead_minutes"])
        out["clock_speed"] = float(out["clock_speed"])
    except (TypeError, ValueError) as e:
        raise ConfigError("lead_minutes and clock_speed must be numbers.") from e
    if not (math.isfinite(out["lead_minutes"]) and math.isfinite(out["clock_speed"])):
        raise ConfigError("lead_minutes and clock_speed must be finite.")
    out["paused"] = bool(out["paused"])
    out["simulated"] = bool(out["simulated"])

    if out["countdown_format"] not in COUNTDOWN_FORMATS:
        raise ConfigError(f"countdown_format must be one of: {', '.join(COUNTDOWN_FORMATS)}")
    out["countdown_label"] = str(out["countdown_label"])
    if "{time}" not in out["countdown_label"]:
        raise ConfigError("countdown_label must contain a {time} placeholder.")

    out["frames_dir"] = str(out["frames_dir"])
    out["output_video"] = str(out["output_video"])
    return out
