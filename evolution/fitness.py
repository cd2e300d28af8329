"""
camo_sim module: evolution/fitness.py

Capture weight: how visible a color is against the environment.
"""

from __future__ import annotations
import math

import config
from organism.colors import RGB, rgb


def color_distance(code: int, environment_rgb: RGB) -> float:
    r, g, b = rgb(code)
    er, eg, eb = environment_rgb
    return math.sqrt((r - er) ** 2 + (g - eg) ** 2 + (b - eb) ** 2)


def capture_weight(code: int, environment_rgb: RGB, base_weight: float = config.BASE_CATCH_WEIGHT) -> float:
    """
    Relative chance of being caught: base weight plus RGB distance.
    Poorly camouflaged colors (far from the environment) get larger weights.
    """
    return base_weight + color_distance(code, environment_rgb)
