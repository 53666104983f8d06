"""pygame rendering of the lane canvas and HUD."""
