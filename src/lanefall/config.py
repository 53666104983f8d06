"""Global constants and default settings."""

WINDOW_TITLE = "LaneFall"
FPS = 60
WINDOW_SCALE = 2  # screen pixels per canvas unit

# Canvas (logical length units; the renderer scales to screen pixels)
CANVAS_WIDTH = 200
CANVAS_HEIGHT = 400

# Session timing (milliseconds)
LEAD_TIME_MS = 3000  # note appears this long before its start time
SAMPLE_INTERVAL_MS = 10  # per-note position sampling cadence
TICK_RATE_MS = 500  # end-of-session indicator refresh
DEBOUNCE_MS = 150  # per-key anti-bounce window

# Scoring
HIT_STREAK_FOR_MULTIPLIER = 10
MULTIPLIER_STEP = 0.2

# Notes
NOTE_RADIUS = 0.07 * CANVAS_WIDTH
NOTE_DRAW_RADIUS = NOTE_RADIUS * 0.8
TAIL_WIDTH = 10
TAIL_MIN_DURATION = 1000  # ms; shorter notes get no tail
TAIL_LENGTH_DIVISOR = 10  # tail length = tail_duration / 10 canvas units

# Hit window, relative to HIT_LINE_Y (biased toward late presses)
HIT_LINE_Y = CANVAS_HEIGHT - NOTE_RADIUS
HIT_WINDOW_EARLY = 80
HIT_WINDOW_LATE = 120

# Velocity in the input data is a MIDI velocity
MIDI_VELOCITY_MAX = 127

# Random filler note played on a miss (A0..C8)
FILLER_PITCH_MIN = 21
FILLER_PITCH_MAX = 108
FILLER_VELOCITY_MAX = 0.3
FILLER_DURATION_MAX = 0.5  # seconds

# Lanes: key id, color name, x position as a fraction of canvas width
COLUMNS = (
    ("KeyH", "green", 0.2),
    ("KeyJ", "red", 0.4),
    ("KeyK", "blue", 0.6),
    ("KeyL", "yellow", 0.8),
)

INSTRUMENTS = (
    "bass-electric",
    "violin",
    "piano",
    "trumpet",
    "saxophone",
    "trombone",
    "flute",
)
