import numpy as np
import pytest

from gerry_evasion.config import EvasionConfig


class ScriptedRng:
    """Stand-in for np.random.Generator that replays fixed draws."""

    def __init__(self, indices, randoms):
        self._indices = iter(indices)
        self._randoms = iter(randoms)
        self.index_draws = 0

    def integers(self, n):
        self.index_draws += 1
        return next(self._indices)

    def random(self):
        return next(self._randoms)


@pytest.fixture
def cfg():
    return EvasionConfig()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def all_tied(cfg):
    return np.full(cfg.num_districts, 0.5)


@pytest.fixture
def scripted_rng():
    """Factory: scripted_rng(indices=[...], randoms=[...])."""
    return ScriptedRng
