"""
camo_sim module: evolution/reproduction.py

Breeding: survivors -> next generation's color counts.

Pure over (survivor colors, parameters, random source). No organisms are
created here; the controller builds the population from the returned config.
"""

from __future__ import annotations
import logging
import math
from typing import Dict, Iterable

import config
from evolution.mutate import RandomSource, mutate_color
from organism.organism import GenerationConfig

logger = logging.getLogger(__name__)


def round_half_up(x: float) -> int:
    # counts are never negative, so half-up == half-away-from-zero
    return int(math.floor(x + 0.5))


def expand_offspring(
    survivor_colors: Iterable[int],
    breed_factor: float,
    mutation_rate: float,
    allow_cross_family: bool,
    rng: RandomSource,
) -> GenerationConfig:
    """
    Every survivor produces round(breed_factor) offspring; each one mutates
    with probability ``mutation_rate``, otherwise it keeps the parent color.
    """
    per_parent = round_half_up(breed_factor)
    raw: GenerationConfig = {}
    for parent in survivor_colors:
        for _ in range(per_parent):
            code = parent
            if rng.random() < mutation_rate:
                code = mutate_color(parent, allow_cross_family, rng)
            raw[code] = raw.get(code, 0) + 1
    return raw


def renormalize(raw: GenerationConfig, target: int = config.TARGET_POP) -> GenerationConfig:
    """
    Scale counts down to exactly ``target`` when the raw total overshoots.

    Each count is scaled and rounded independently, then the rounding error is
    added to the most common color (smallest code wins ties). A raw total at or
    below target is returned unchanged.
    """
    raw_total = sum(raw.values())
    if raw_total <= target:
        return dict(raw)

    scale = target / raw_total
    scaled: Dict[int, int] = {code: round_half_up(count * scale) for code, count in raw.items()}

    difference = target - sum(scaled.values())
    if difference:
        largest = min(scaled, key=lambda code: (-scaled[code], code))
        scaled[largest] += difference
        logger.debug("Renormalized %d -> %d, adjusted color %d by %+d", raw_total, target, largest, difference)
    # rare colors can scale down to nothing
    return {code: n for code, n in scaled.items() if n > 0}


def breed(
    survivor_colors: Iterable[int],
    rng: RandomSource,
    breed_factor: float = config.BREED_FACTOR,
    mutation_rate: float = config.MUTATION_RATE,
    allow_cross_family: bool = False,
    target: int = config.TARGET_POP,
) -> GenerationConfig:
    if breed_factor < 0:
        raise ValueError(f"breed_factor must be non-negative, got {breed_factor}")
    if not 0.0 <= mutation_rate <= 1.0:
        raise ValueError(f"mutation_rate must be within [0, 1], got {mutation_rate}")

    raw = expand_offspring(survivor_colors, breed_factor, mutation_rate, allow_cross_family, rng)
    return renormalize(raw, target)
