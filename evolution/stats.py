"""
camo_sim module: evolution/stats.py

Per-generation records: how many of each color started and survived.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from organism.organism import Organism, color_counts, living


@dataclass(frozen=True)
class ColorTally:
    start: int
    survived: int


@dataclass(frozen=True)
class GenerationRecord:
    generation: int
    total_start: int
    total_survived: int
    colors: Mapping[int, ColorTally] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "colors", MappingProxyType(dict(self.colors)))

    def __hash__(self) -> int:
        # mappingproxy is unhashable; hash its sorted items instead
        return hash((self.generation, self.total_start, self.total_survived, tuple(sorted(self.colors.items()))))

    @staticmethod
    def capture(generation: int, population: Sequence[Organism]) -> "GenerationRecord":
        start = color_counts(population)
        survived = color_counts(living(population))

        colors = {code: ColorTally(start=n, survived=survived.get(code, 0)) for code, n in start.items()}
        return GenerationRecord(
            generation=generation,
            total_start=len(population),
            total_survived=sum(survived.values()),
            colors=colors,
        )

    @property
    def color_order(self) -> Tuple[int, ...]:
        return tuple(sorted(self.colors))

    def start_count(self, code: int) -> int:
        tally = self.colors.get(code)
        return tally.start if tally else 0

    def survived_count(self, code: int) -> int:
        tally = self.colors.get(code)
        return tally.survived if tally else 0


def color_series(history: Sequence[GenerationRecord], code: int) -> List[int]:
    """Start counts of one color across generations (0 where absent)."""
    return [r.start_count(code) for r in history]


def colors_ever_seen(history: Sequence[GenerationRecord]) -> List[int]:
    seen = set()
    for r in history:
        seen.update(r.colors)
    return sorted(seen)


def chart_series(
    history: Sequence[GenerationRecord],
    codes: Optional[Iterable[int]] = None,
) -> Dict[int, List[int]]:
    """
    Start-count line per color, one point per generation. Defaults to every
    color that has ever appeared.
    """
    if codes is None:
        codes = colors_ever_seen(history)
    return {code: color_series(history, code) for code in codes}


def format_config(counts: Optional[Mapping[int, int]]) -> str:
    """One-line summary of a generation config, e.g. "1:20 15:60 (80)"."""
    if not counts:
        return "-"
    parts = [f"{code}:{counts[code]}" for code in sorted(counts)]
    return " ".join(parts) + f" ({sum(counts.values())})"


def format_record(record: GenerationRecord) -> str:
    """
    Text table for one generation:

        gen 1    | 1   15  | total
        start    | 40  40  | 80
        survived | 5   15  | 20
    """
    codes = record.color_order
    head = [f"gen {record.generation}"] + [str(c) for c in codes] + ["total"]
    start = ["start"] + [str(record.colors[c].start) for c in codes] + [str(record.total_start)]
    surv = ["survived"] + [str(record.colors[c].survived) for c in codes] + [str(record.total_survived)]

    widths = [max(len(row[i]) for row in (head, start, surv)) for i in range(len(head))]

    def _line(row: List[str]) -> str:
        cells = [cell.ljust(w) for cell, w in zip(row, widths)]
        return " | ".join([cells[0], " ".join(cells[1:-1]), cells[-1]]).rstrip()

    return "\n".join(_line(row) for row in (head, start, surv))
