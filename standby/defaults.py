# defaults.py
#
# Built-in standby configuration, used when no --config JSON is given.
# Upper-case names are picked up by standby.config.load_config and mapped to
# the snake_case keys of the config dict.
#
# - Countdown targets New Year's Eve, local time.
# - The simulated clock starts LEAD_MINUTES before the target unless START_TIME is set.
# - One zoom cycle lasts CYCLE_SECONDS, going from START_ZOOM down to MIN_ZOOM.

# -----------------------------------------------------------------------------
# Countdown
# -----------------------------------------------------------------------------
TARGET_TIME  = "2025-12-31T23:59:59"   # yyyy-mm-ddTHH:MM:SS, local time
START_TIME   = None                    # same format; None -> TARGET_TIME - LEAD_MINUTES
LEAD_MINUTES = 10
CLOCK_SPEED  = 1.0                     # 1.0 = real time, 2.0 = twice as fast, 0 = frozen
PAUSED       = False
SIMULATED    = True                    # False -> read the wall clock every tick

COUNTDOWN_FORMAT = "ms"                # "ms" -> MM:SS, "hms" -> HH:MM:SS
COUNTDOWN_LABEL  = "{time}"

# -----------------------------------------------------------------------------
# Offscreen fractal buffer and the display it is scaled onto
# -----------------------------------------------------------------------------
WIDTH          = 1280
HEIGHT         = 720
DISPLAY_WIDTH  = 1920
DISPLAY_HEIGHT = 1080
RENDER_FPS     = 120                   # cap on fractal re-renders per second

# -----------------------------------------------------------------------------
# Zoom cycle
# -----------------------------------------------------------------------------
# Curated centers near the set boundary.
TARGETS = [
    (-0.743643887037151, 0.13182590420533),    # seahorse valley
    (-1.25066, 0.02012),                       # antenna region
    (0.001643721971153, 0.822467633298876),    # spiral filaments
    (-0.101096363845, 0.956286510809),         # boundary filigree
    (-0.8, 0.156),                             # mini-set chain
]

CYCLE_SECONDS      = 490.0
START_ZOOM         = 0.70
MIN_ZOOM           = 0.0006                # stop before float32 precision runs out
ORBIT_RADIUS       = 0.35                  # fraction of the current zoom
ORBIT_FREQUENCIES  = (0.11, 0.13)
INTERIOR_THRESHOLD = 0.985                 # interior fraction that ends a cycle early

MIN_ITER        = 80
MAX_ITER        = 1024
ITER_PER_OCTAVE = 20

# -----------------------------------------------------------------------------
# Headless frame dump
# -----------------------------------------------------------------------------
FPS          = 30
TOTAL_FRAMES = 300
FRAMES_DIR   = "frames"
OUTPUT_VIDEO = "standby.mp4"
