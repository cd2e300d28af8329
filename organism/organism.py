"""
camo_sim module: organism/organism.py

Organisms, populations and generation configs.

A generation config is a plain {color_code: count} mapping describing a
population before it is instantiated.
"""

from __future__ import annotations
from dataclasses import dataclass
import itertools
from typing import Dict, Iterable, List, Mapping, Optional

import config
from errors import InvalidColorCode, InvalidGenerationConfig
from organism.colors import check_code

GenerationConfig = Dict[int, int]

_ids = itertools.count(1)


@dataclass
class Organism:
    id: int
    # fixed for life; read through color_code
    _color_code: int
    eliminated: bool = False
    being_captured: bool = False

    @property
    def color_code(self) -> int:
        return self._color_code

    @property
    def alive(self) -> bool:
        return not self.eliminated


@dataclass(frozen=True)
class OrganismView:
    """Read-only projection handed to renderers and observers."""
    id: int
    color_code: int
    eliminated: bool
    being_captured: bool


def validate_config(counts: Mapping, expected_total: Optional[int] = config.TARGET_POP) -> GenerationConfig:
    """
    Check a {code: count} mapping and return a clean copy without zero entries.

    Raises InvalidGenerationConfig for unknown codes, negative or non-integer
    counts, or (when expected_total is given) a total that does not match.
    """
    clean: GenerationConfig = {}
    total = 0
    for code, count in counts.items():
        try:
            check_code(code)
        except InvalidColorCode as exc:
            raise InvalidGenerationConfig(str(exc)) from exc
        if isinstance(count, bool) or not isinstance(count, int):
            raise InvalidGenerationConfig(f"Count for color {code} must be an integer, got {count!r}")
        if count < 0:
            raise InvalidGenerationConfig(f"Count for color {code} is negative ({count})")
        if count > 0:
            clean[code] = count
            total += count

    if expected_total is not None and total != expected_total:
        raise InvalidGenerationConfig(f"Population total must be {expected_total}, got {total}")
    return clean


def parse_generation_config(text: str) -> GenerationConfig:
    """
    Parse the operator's "code:count,code:count" text form, e.g. "15:40,29:40".
    The total is not checked here; pass the result through validate_config.
    """
    counts: GenerationConfig = {}
    for chunk in text.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        code_txt, sep, count_txt = chunk.partition(":")
        if not sep:
            raise InvalidGenerationConfig(f"Expected code:count, got {chunk!r}")
        try:
            code = int(code_txt)
            count = int(count_txt)
        except ValueError:
            raise InvalidGenerationConfig(f"Expected integers in {chunk!r}") from None
        counts[code] = counts.get(code, 0) + count
    return counts


def build_population(counts: Mapping[int, int]) -> List[Organism]:
    """Instantiate one Organism per unit of count, in ascending color order."""
    population: List[Organism] = []
    for code in sorted(counts):
        for _ in range(counts[code]):
            population.append(Organism(next(_ids), code))
    return population


def living(population: Iterable[Organism]) -> List[Organism]:
    return [o for o in population if not o.eliminated]


def color_counts(organisms: Iterable[Organism]) -> GenerationConfig:
    counts: GenerationConfig = {}
    for o in organisms:
        counts[o.color_code] = counts.get(o.color_code, 0) + 1
    return counts
