"""
camo_sim module: world/ticks.py

Cancellable timed tasks driven by an external clock.

Nothing runs in the background: the owner calls update(dt) once per frame
(or per test step) and due tasks fire in scheduling order. Every task carries
the epoch it was scheduled in; bumping the epoch cancels everything older, so
a superseded tick can never fire into a newer generation.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class ScheduledTask:
    """
    ``callback`` returns True to keep a repeating task alive, False to stop it.
    One-shot tasks stop after their first run regardless.
    """
    callback: Callable[[], bool]
    interval: float
    epoch: int
    repeat: bool = True
    elapsed: float = 0.0
    cancelled: bool = False
    name: str = ""

    def cancel(self) -> None:
        self.cancelled = True


class TickScheduler:
    def __init__(self) -> None:
        self.epoch = 0
        self._tasks: List[ScheduledTask] = []

    @property
    def pending(self) -> List[ScheduledTask]:
        return [t for t in self._tasks if self._is_live(t)]

    def _is_live(self, task: ScheduledTask) -> bool:
        return not task.cancelled and task.epoch == self.epoch

    def new_epoch(self) -> int:
        """Cancel everything outstanding and start a new epoch."""
        self.cancel_all()
        self.epoch += 1
        return self.epoch

    def cancel_all(self) -> None:
        for t in self._tasks:
            t.cancel()
        self._tasks = []

    def every(self, interval: float, callback: Callable[[], bool], name: str = "") -> ScheduledTask:
        return self._add(ScheduledTask(callback=callback, interval=interval, epoch=self.epoch, repeat=True, name=name))

    def after(self, delay: float, callback: Callable[[], object], name: str = "") -> ScheduledTask:
        def _once() -> bool:
            callback()
            return False

        return self._add(ScheduledTask(callback=_once, interval=delay, epoch=self.epoch, repeat=False, name=name))

    def _add(self, task: ScheduledTask) -> ScheduledTask:
        if task.interval < 0:
            raise ValueError(f"Task interval must be non-negative, got {task.interval}")
        self._tasks.append(task)
        return task

    def update(self, dt: float) -> int:
        """
        Advance the clock by ``dt`` seconds and run due tasks.
        Returns the number of callbacks that ran.
        """
        fired = 0
        for task in list(self._tasks):
            if not self._is_live(task):
                continue
            task.elapsed += dt
            while self._is_live(task) and task.elapsed >= task.interval:
                task.elapsed -= task.interval
                keep = task.callback()
                fired += 1
                if not task.repeat or not keep:
                    task.cancel()
                # zero-interval repeating tasks fire once per update
                if task.interval <= 0:
                    break
        self._tasks = [t for t in self._tasks if self._is_live(t)]
        return fired

    def run_until_idle(self, step: float, max_steps: int = 100_000) -> int:
        """Step the clock until no live task remains."""
        steps = 0
        while self.pending:
            if steps >= max_steps:
                raise RuntimeError(f"Scheduler still busy after {max_steps} steps")
            self.update(step)
            steps += 1
        return steps
