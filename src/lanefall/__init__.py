"""LaneFall: a four-lane rhythm game engine."""
