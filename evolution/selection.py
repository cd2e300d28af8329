"""
camo_sim module: evolution/selection.py

Predation: manual or automatic elimination of living organisms.

Manual mode only validates and applies the operator's picks. Automatic mode
draws victims one at a time with probability proportional to capture weight,
recomputing weights before every draw, until a fixed target is met or the
population is down to the survivor floor.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import logging
from typing import List, Optional, Sequence

import config
from errors import InvalidElimination
from evolution.fitness import capture_weight
from evolution.mutate import RandomSource, weighted_pick
from organism.colors import RGB
from organism.organism import Organism, living

logger = logging.getLogger(__name__)


class EliminationMode(Enum):
    MANUAL = "manual"
    AUTOMATIC = "auto"


@dataclass
class AutoRun:
    """
    Progress of one automatic elimination phase.

    ``target`` is fixed when the phase starts and never recomputed.
    ``pending_id`` is the organism marked for capture but not yet eliminated.
    """
    target: int
    eliminated: int = 0
    pending_id: Optional[int] = None
    stopped_early: bool = False


def find_organism(population: Sequence[Organism], organism_id: int) -> Optional[Organism]:
    for o in population:
        if o.id == organism_id:
            return o
    return None


class SelectionEngine:
    def __init__(
        self,
        rng: RandomSource,
        min_survivors: int = config.MIN_SURVIVORS,
        base_weight: float = config.BASE_CATCH_WEIGHT,
    ):
        self.rng = rng
        self.min_survivors = min_survivors
        self.base_weight = base_weight

    # ---- manual ----

    def validate_capture(self, population: Sequence[Organism], organism_id: int) -> Organism:
        org = find_organism(population, organism_id)
        if org is None:
            raise InvalidElimination(f"No organism with id {organism_id}")
        if org.eliminated:
            raise InvalidElimination(f"Organism {organism_id} is already eliminated")
        if org.being_captured:
            raise InvalidElimination(f"Organism {organism_id} is already being captured")
        return org

    def begin_capture(self, population: Sequence[Organism], organism_id: int) -> Organism:
        org = self.validate_capture(population, organism_id)
        org.being_captured = True
        return org

    @staticmethod
    def commit_capture(org: Organism) -> bool:
        """Flip a marked organism to eliminated. Returns False if it already was."""
        org.being_captured = False
        if org.eliminated:
            return False
        org.eliminated = True
        return True

    # ---- automatic ----

    def auto_target(self, population: Sequence[Organism]) -> int:
        return len(living(population)) - self.min_survivors

    def start_run(self, population: Sequence[Organism]) -> AutoRun:
        return AutoRun(target=self.auto_target(population))

    def is_done(self, run: AutoRun, population: Sequence[Organism]) -> bool:
        if run.stopped_early or run.eliminated >= run.target:
            return True
        return len(living(population)) <= self.min_survivors

    def draw_capture(self, population: Sequence[Organism], environment_rgb: RGB) -> Optional[Organism]:
        """
        Weighted draw over the living, with weights computed fresh against
        the current environment. None means the total weight was zero.
        """
        candidates: List[Organism] = [o for o in population if not o.eliminated and not o.being_captured]
        weights = [capture_weight(o.color_code, environment_rgb, self.base_weight) for o in candidates]
        return weighted_pick(candidates, weights, self.rng)

    def mark_next(self, run: AutoRun, population: Sequence[Organism], environment_rgb: RGB) -> Optional[Organism]:
        """
        Pick the next victim and mark it as being captured.
        Call commit_pending before the next draw.
        """
        if run.pending_id is not None:
            raise RuntimeError("Previous capture has not been committed")
        victim = self.draw_capture(population, environment_rgb)
        if victim is None:
            logger.warning("Total capture weight is zero; stopping elimination early")
            run.stopped_early = True
            return None
        victim.being_captured = True
        run.pending_id = victim.id
        return victim

    def commit_pending(self, run: AutoRun, population: Sequence[Organism]) -> Optional[Organism]:
        if run.pending_id is None:
            return None
        org = find_organism(population, run.pending_id)
        run.pending_id = None
        if org is None or not self.commit_capture(org):
            return None
        run.eliminated += 1
        logger.debug("Eliminated organism %d (color %d), %d/%d", org.id, org.color_code, run.eliminated, run.target)
        return org

    def step(self, run: AutoRun, population: Sequence[Organism], environment_rgb: RGB) -> bool:
        """
        One complete elimination event. Returns False once the run is done.
        """
        self.commit_pending(run, population)
        if self.is_done(run, population):
            return False
        if self.mark_next(run, population, environment_rgb) is None:
            return False
        self.commit_pending(run, population)
        return True

    def run_automatic(
        self,
        population: Sequence[Organism],
        environment_rgb: RGB,
        target: Optional[int] = None,
    ) -> int:
        """
        Run a whole automatic phase synchronously and return how many were eliminated.
        """
        run = self.start_run(population) if target is None else AutoRun(target=target)
        while self.step(run, population, environment_rgb):
            pass
        return run.eliminated
