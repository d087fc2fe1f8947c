"""Shared fixtures for LumenTrace tests."""

import numpy as np
import pytest


class FixedRng:
    """Stand-in generator that always returns the middle of the requested range.

    ``uniform(-0.5, 0.5, 2)`` gives zeros, so camera rays pass through pixel
    centers, and ``random()`` returns a fixed draw.
    """

    def __init__(self, draw: float = 0.5):
        self.draw = draw

    def random(self):
        return self.draw

    def uniform(self, low=0.0, high=1.0, size=None):
        mid = (low + high) / 2
        if size is None:
            return mid
        return np.full(size, mid, dtype=np.float64)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def fixed_rng():
    return FixedRng()
