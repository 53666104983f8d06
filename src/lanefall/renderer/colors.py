"""Color palette."""

# RGB tuples
BG = (18, 18, 24)
LANE_LINE = (48, 48, 60)
HIT_LINE = (90, 90, 110)
HUD_TEXT = (220, 220, 220)
GAME_OVER = (230, 70, 70)

LANE_COLORS = {
    "green": (60, 200, 90),
    "red": (220, 60, 60),
    "blue": (66, 135, 245),
    "yellow": (240, 210, 60),
    "white": (240, 240, 240),
}
