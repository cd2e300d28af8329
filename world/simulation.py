"""
camo_sim module: world/simulation.py

SimulationController owns all mutable simulation state and drives the
generation lifecycle:

    AWAITING_CONFIG -> SELECTION(mode) -> BREEDING -> AWAITING_NEXT_GENERATION
        -> SELECTION (next generation) | AWAITING_CONFIG (after reset)

Selection progress is paced by ticks scheduled on a TickScheduler. Every tick
remembers the epoch it was scheduled in and does nothing once that epoch is
gone (new mode, reset, next generation).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from functools import partial
import logging
import random
from typing import Callable, List, Mapping, Optional, Sequence, Tuple, Union

import config
from errors import InvalidTransition
from evolution.reproduction import breed
from evolution.selection import AutoRun, EliminationMode, SelectionEngine, find_organism
from evolution.stats import GenerationRecord
from evolution.mutate import RandomSource
from organism.colors import RGB, hex_to_rgb
from organism.organism import (
    GenerationConfig,
    Organism,
    OrganismView,
    build_population,
    living,
    validate_config,
)
from world.ticks import ScheduledTask, TickScheduler

logger = logging.getLogger(__name__)

TickObserver = Callable[[List[OrganismView]], None]
GenerationObserver = Callable[[GenerationRecord, GenerationConfig], None]


class Phase(Enum):
    AWAITING_CONFIG = "awaiting_config"
    SELECTION = "selection"
    BREEDING = "breeding"
    AWAITING_NEXT_GENERATION = "awaiting_next_generation"


@dataclass
class SimulationState:
    generation: int = 1
    population: List[Organism] = field(default_factory=list)
    history: List[GenerationRecord] = field(default_factory=list)
    pending_config: Optional[GenerationConfig] = None
    phase: Phase = Phase.AWAITING_CONFIG
    mode: Optional[EliminationMode] = None
    auto_run: Optional[AutoRun] = None
    epoch: int = 0


def _as_rgb(color: Union[str, Sequence[int]]) -> RGB:
    if isinstance(color, str):
        return hex_to_rgb(color)
    r, g, b = (int(c) for c in color)
    for c in (r, g, b):
        if not 0 <= c <= 255:
            raise ValueError(f"RGB component out of range: {color!r}")
    return (r, g, b)


class SimulationController:
    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        environment: Union[str, Sequence[int]] = config.DEFAULT_ENV_COLOR,
        allow_cross_family: bool = False,
        tick_interval: float = config.AUTO_TICK_INTERVAL,
        breed_factor: float = config.BREED_FACTOR,
        mutation_rate: float = config.MUTATION_RATE,
        target_pop: int = config.TARGET_POP,
        min_survivors: int = config.MIN_SURVIVORS,
    ):
        self.rng = rng if rng is not None else random.Random()
        self.environment_rgb = _as_rgb(environment)
        self.allow_cross_family = allow_cross_family
        self.breed_factor = breed_factor
        self.mutation_rate = mutation_rate
        self.target_pop = target_pop
        self.tick_interval = 0.0
        self.set_tick_interval(tick_interval)

        self.selection = SelectionEngine(self.rng, min_survivors=min_survivors)
        self.scheduler = TickScheduler()
        self.state = SimulationState(epoch=self.scheduler.epoch)

        self.tick_observers: List[TickObserver] = []
        self.generation_observers: List[GenerationObserver] = []
        self._auto_task: Optional[ScheduledTask] = None

    # ---- read-only views ----

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def generation(self) -> int:
        return self.state.generation

    @property
    def history(self) -> Tuple[GenerationRecord, ...]:
        return tuple(self.state.history)

    @property
    def pending_config(self) -> Optional[GenerationConfig]:
        pending = self.state.pending_config
        return dict(pending) if pending is not None else None

    @property
    def living_count(self) -> int:
        return len(living(self.state.population))

    def snapshot(self) -> List[OrganismView]:
        return [
            OrganismView(id=o.id, color_code=o.color_code, eliminated=o.eliminated, being_captured=o.being_captured)
            for o in self.state.population
        ]

    # ---- settings ----

    def set_environment_color(self, color: Union[str, Sequence[int]]) -> None:
        """Takes effect on the next weight computation; a running target is not recomputed."""
        self.environment_rgb = _as_rgb(color)
        logger.info("Environment color set to %s", self.environment_rgb)

    def set_allow_cross_family(self, allow: bool) -> None:
        self.allow_cross_family = bool(allow)

    def set_tick_interval(self, seconds: float) -> None:
        if seconds <= 0:
            raise ValueError(f"Tick interval must be positive, got {seconds}")
        self.tick_interval = seconds
        task = getattr(self, "_auto_task", None)
        if task is not None and not task.cancelled:
            task.interval = seconds

    # ---- lifecycle ----

    def start_selection(
        self,
        mode: Union[EliminationMode, str],
        counts: Optional[Mapping[int, int]] = None,
    ) -> None:
        """
        Instantiate the generation's population and begin eliminating.

        First generation: ``counts`` is required and must total target_pop.
        Later generations: omit ``counts`` to confirm the bred config as-is,
        or pass a replacement that totals target_pop.
        """
        mode = EliminationMode(mode)
        st = self.state

        if st.phase == Phase.AWAITING_CONFIG:
            if counts is None:
                raise InvalidTransition("A starting config is required for the first generation")
            start = validate_config(counts, self.target_pop)
        elif st.phase == Phase.AWAITING_NEXT_GENERATION:
            if counts is None:
                start = validate_config(st.pending_config or {}, expected_total=None)
            else:
                start = validate_config(counts, self.target_pop)
        else:
            raise InvalidTransition(f"Cannot start selection while in {st.phase.value}")

        self._new_epoch()
        st.population = build_population(start)
        st.pending_config = None
        st.phase = Phase.SELECTION
        st.mode = mode
        st.auto_run = None
        logger.info("Generation %d started: %d organisms, %s mode", st.generation, len(st.population), mode.value)
        self._notify_tick()

        if mode == EliminationMode.AUTOMATIC:
            self._begin_auto()

    def request_elimination(self, organism_id: int) -> None:
        """Manual capture. Validated now; the flag flips after the capture delay."""
        self._require_selection(EliminationMode.MANUAL)
        self.selection.begin_capture(self.state.population, organism_id)
        self._notify_tick()
        self.scheduler.after(
            config.MANUAL_CAPTURE_DELAY,
            partial(self._commit_manual, self.state.epoch, organism_id),
            name="manual-commit",
        )

    def end_selection(self) -> None:
        """
        Finish a manual phase. Anything above the survivor floor is culled
        automatically first; otherwise the generation is recorded right away.
        """
        self._require_selection(EliminationMode.MANUAL)
        st = self.state
        for o in st.population:
            if o.being_captured:
                self.selection.commit_capture(o)
        self._new_epoch()

        if self.living_count > self.selection.min_survivors:
            logger.info("Culling remaining %d organisms down to %d", self.living_count, self.selection.min_survivors)
            st.mode = EliminationMode.AUTOMATIC
            self._begin_auto()
        else:
            self._finish_selection()

    def reset(self) -> None:
        """Drop all history and go back to waiting for a first-generation config."""
        self._new_epoch()
        self.state = SimulationState(epoch=self.state.epoch)
        logger.info("Simulation reset")
        self._notify_tick()

    def update(self, dt: float) -> int:
        return self.scheduler.update(dt)

    def run_until_idle(self, step: Optional[float] = None) -> int:
        """Drive scheduled ticks to completion without waiting on a real clock."""
        return self.scheduler.run_until_idle(step if step is not None else self.tick_interval)

    # ---- internals ----

    def _require_selection(self, mode: EliminationMode) -> None:
        st = self.state
        if st.phase != Phase.SELECTION or st.mode != mode:
            raise InvalidTransition(f"Not in {mode.value} selection (phase={st.phase.value})")

    def _new_epoch(self) -> None:
        self._auto_task = None
        self.state.epoch = self.scheduler.new_epoch()

    def _stale(self, epoch: int) -> bool:
        return epoch != self.state.epoch or self.state.phase != Phase.SELECTION

    def _begin_auto(self) -> None:
        st = self.state
        st.auto_run = self.selection.start_run(st.population)
        if st.auto_run.target <= 0:
            self._finish_selection()
            return
        logger.info("Automatic elimination: target %d", st.auto_run.target)
        self._auto_task = self.scheduler.every(
            self.tick_interval, partial(self._auto_tick, st.epoch), name="auto-tick"
        )

    def _auto_tick(self, epoch: int) -> bool:
        if self._stale(epoch):
            return False
        st = self.state
        run = st.auto_run
        if run is None:
            return False

        self.selection.commit_pending(run, st.population)
        if self.selection.is_done(run, st.population):
            self._finish_selection()
            return False

        victim = self.selection.mark_next(run, st.population, self.environment_rgb)
        if victim is None:
            self._finish_selection()
            return False

        self._notify_tick()
        # an observer may have reset us while handling the tick
        if self._stale(epoch):
            return False
        self.scheduler.after(
            self.tick_interval * config.CAPTURE_COMMIT_FRACTION,
            partial(self._commit_auto, epoch),
            name="auto-commit",
        )
        return True

    def _commit_auto(self, epoch: int) -> None:
        if self._stale(epoch) or self.state.auto_run is None:
            return
        if self.selection.commit_pending(self.state.auto_run, self.state.population) is not None:
            self._notify_tick()

    def _commit_manual(self, epoch: int, organism_id: int) -> None:
        if self._stale(epoch):
            return
        org = find_organism(self.state.population, organism_id)
        if org is not None and self.selection.commit_capture(org):
            logger.debug("Manually eliminated organism %d (color %d)", org.id, org.color_code)
            self._notify_tick()

    def _finish_selection(self) -> None:
        self._auto_task = None
        for o in self.state.population:
            o.being_captured = False
        self._notify_tick()
        self._record_and_breed()

    def _record_and_breed(self) -> None:
        st = self.state
        st.phase = Phase.BREEDING

        record = GenerationRecord.capture(st.generation, st.population)
        st.history.append(record)
        st.generation += 1

        survivors = [o.color_code for o in living(st.population)]
        st.pending_config = breed(
            survivors,
            self.rng,
            breed_factor=self.breed_factor,
            mutation_rate=self.mutation_rate,
            allow_cross_family=self.allow_cross_family,
            target=self.target_pop,
        )
        st.mode = None
        st.auto_run = None
        st.phase = Phase.AWAITING_NEXT_GENERATION

        logger.info(
            "Generation %d recorded: %d/%d survived; next generation has %d",
            record.generation,
            record.total_survived,
            record.total_start,
            sum(st.pending_config.values()),
        )
        for observer in list(self.generation_observers):
            observer(record, dict(st.pending_config))

    def _notify_tick(self) -> None:
        if not self.tick_observers:
            return
        snap = self.snapshot()
        for observer in list(self.tick_observers):
            observer(snap)
