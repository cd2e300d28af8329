"""
camo_sim module: evolution/mutate.py

Color mutation: hop to a nearby code on the 35-color ring.
"""

from __future__ import annotations
import math
from typing import List, Optional, Protocol, Sequence, Tuple, TypeVar

import config
from organism.colors import check_code, family

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything with random() -> float in [0, 1). random.Random fits."""

    def random(self) -> float: ...


def weighted_pick(items: Sequence[T], weights: Sequence[float], rng: RandomSource) -> Optional[T]:
    """
    Single weighted draw by cumulative scan.

    Draw u in [0, total), walk the items accumulating weight and return the
    first one whose cumulative weight reaches u. Returns None when there is
    nothing to pick (empty input or zero total weight).
    """
    total = sum(weights)
    if not items or total <= 0:
        return None

    target = rng.random() * total
    cumulative = 0.0
    for item, w in zip(items, weights):
        cumulative += w
        if target <= cumulative:
            return item
    # float rounding can leave target a hair above the final sum
    return items[-1]


def wrap_code(value: int, ring: int = config.COLOR_COUNT) -> int:
    return (value - 1) % ring + 1


def ring_distance(a: int, b: int, ring: int = config.COLOR_COUNT) -> int:
    diff = abs(a - b)
    return max(1, min(diff, ring - diff))


def mutation_candidates(
    parent: int,
    allow_cross_family: bool,
    radius: int = config.MUTATION_RANGE,
) -> List[Tuple[int, float]]:
    """
    Return [(code, weight)] for every reachable neighbor of ``parent``.
    Weights fall off as 1 / log10(distance + 1.1).
    """
    parent = check_code(parent)
    parent_family = family(parent)

    out: List[Tuple[int, float]] = []
    for step in range(-radius, radius + 1):
        if step == 0:
            continue
        code = wrap_code(parent + step)
        # a wide radius laps the ring: skip the parent and repeats
        if code == parent or any(code == c for c, _ in out):
            continue
        if not allow_cross_family and family(code) != parent_family:
            continue
        weight = 1.0 / math.log10(ring_distance(parent, code) + 1.1)
        out.append((code, weight))
    return out


def mutate_color(
    parent: int,
    allow_cross_family: bool,
    rng: RandomSource,
    radius: int = config.MUTATION_RANGE,
) -> int:
    """
    Draw a mutated color for an offspring of ``parent``.
    With no reachable neighbor the parent color is returned unchanged.
    """
    candidates = mutation_candidates(parent, allow_cross_family, radius)
    if not candidates:
        return parent

    codes = [c for c, _ in candidates]
    weights = [w for _, w in candidates]
    picked = weighted_pick(codes, weights, rng)
    return parent if picked is None else picked
