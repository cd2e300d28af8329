"""
camo_sim module: organism/colors.py

The fixed 35-color palette organisms are drawn from.

Codes 1-35 each map to an RGB triple and to a coarse family:
  1-7   -> 1 (reds)
  8-21  -> 2 (yellows and greens)
  22-28 -> 3 (blues)
  29-35 -> 4 (grays)
"""

from __future__ import annotations
import string
from typing import Dict, List, Tuple

import config
from errors import InvalidColorCode

RGB = Tuple[int, int, int]

PALETTE_HEX: Dict[int, str] = {
    1: "#D93131", 2: "#E64A4A", 3: "#B82828", 4: "#FF5C5C", 5: "#CC5151",
    6: "#D98C8C", 7: "#E0A0A0",
    8: "#FF9900", 9: "#FFC033", 10: "#FFCC00",
    11: "#FFCC33", 12: "#FFFF00", 13: "#FFCC00", 14: "#B3B300",
    15: "#38761D", 16: "#2D6317", 17: "#265513", 18: "#1F450E",
    19: "#5CB85C", 20: "#50A850", 21: "#469A46",
    22: "#0033CC", 23: "#002DAA", 24: "#002788", 25: "#0099FF",
    26: "#33CCFF", 27: "#66CCFF", 28: "#99CCFF",
    29: "#333333", 30: "#3D3D3D", 31: "#666666", 32: "#999999",
    33: "#CCCCCC", 34: "#E6E6E6", 35: "#F2F2F2",
}

# (first code, last code, family id)
FAMILY_BANDS = (
    (1, 7, 1),
    (8, 21, 2),
    (22, 28, 3),
    (29, 35, 4),
)


def hex_to_rgb(text: str) -> RGB:
    """
    Parse "#RRGGBB", "RRGGBB" or the short "#RGB" form.
    """
    base = text.strip().lstrip("#")
    if len(base) == 3:
        base = "".join(ch * 2 for ch in base)
    # int(x, 16) alone would accept signs such as "-1"
    if len(base) != 6 or not all(ch in string.hexdigits for ch in base):
        raise ValueError(f"Not a hex color: {text!r}")
    return (int(base[0:2], 16), int(base[2:4], 16), int(base[4:6], 16))


def check_code(code) -> int:
    # bool is an int subclass; True must not pass for color 1
    if isinstance(code, bool) or not isinstance(code, int):
        raise InvalidColorCode(code)
    if code < 1 or code > config.COLOR_COUNT:
        raise InvalidColorCode(code)
    return code


def family(code: int) -> int:
    code = check_code(code)
    for first, last, family_id in FAMILY_BANDS:
        if first <= code <= last:
            return family_id
    raise InvalidColorCode(code)


def rgb(code: int) -> RGB:
    return _RGB[check_code(code)]


def all_codes() -> List[int]:
    return sorted(PALETTE_HEX)


_RGB: Dict[int, RGB] = {code: hex_to_rgb(h) for code, h in PALETTE_HEX.items()}
