"""
camo_sim module: render/colors.py

Viewer chrome colors (organism colors come from organism.colors).
"""

HUD_BG = (14, 14, 18)
HUD_TEXT = (235, 235, 235)
HUD_DIM = (150, 150, 160)
OUTLINE = (0, 0, 0)
CAPTURE_RING = (255, 40, 40)
PANEL_BG = (26, 26, 32)

# Environment presets cycled with the B key
ENV_PRESETS = (
    "#8B7D5B",  # sand
    "#38761D",  # forest
    "#0033CC",  # deep water
    "#333333",  # soot
    "#F2F2F2",  # snow
)
