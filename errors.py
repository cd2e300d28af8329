"""
camo_sim errors.

Every error here is raised synchronously to the caller that submitted the
bad input; none of them is raised from inside a scheduled tick.
"""


class SimulationError(Exception):
    """Base class for recoverable simulation errors."""


class InvalidColorCode(SimulationError, ValueError):
    def __init__(self, code):
        super().__init__(f"Color code {code!r} is not in the palette (1-35)")
        self.code = code


class InvalidGenerationConfig(SimulationError, ValueError):
    """A generation config failed validation (bad code, bad count or bad total)."""


class InvalidElimination(SimulationError):
    """A manual capture request named a missing, dead or in-flight organism."""


class InvalidTransition(SimulationError):
    """A lifecycle operation was called in a phase that does not allow it."""
