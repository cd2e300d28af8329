from __future__ import annotations
import random
from typing import Iterable, List

import pytest


class SequenceRandom:
    """Scripted random source: hands out the given floats in order."""

    def __init__(self, values: Iterable[float]):
        self.values: List[float] = list(values)
        self.calls = 0

    def random(self) -> float:
        if self.calls >= len(self.values):
            raise AssertionError("SequenceRandom ran out of values")
        v = self.values[self.calls]
        self.calls += 1
        return v


@pytest.fixture
def scripted():
    return SequenceRandom


@pytest.fixture
def rng():
    return random.Random(1234)
