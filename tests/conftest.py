"""Pytest configuration and shared fixtures."""

import pytest
import sys
from pathlib import Path

# Add the src directory to the Python path
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir / "src"))

from neatris.run.config import Config
from neatris.run.task   import TaskSimulation


class CountdownSimulation(TaskSimulation):
    """
    Minimal task: the episode lasts 'length' ticks and scores a constant.
    Every observation is the same vector of 'input_size' values.
    """

    def __init__(self, input_size, length=3, score=0.0):
        self.input_size = input_size
        self.length     = length
        self._score     = score
        self.ticks      = 0
        self.actions    = []
        self.init_calls = 0
        self.term_calls = 0

    def init(self):
        self.ticks   = 0
        self.actions = []
        self.init_calls += 1

    def observe(self):
        return [0.5] * self.input_size

    def step(self, actions):
        self.actions.append(list(actions))
        self.ticks += 1

    def is_active(self):
        return self.ticks < self.length

    def score(self):
        return self._score

    def term(self):
        self.term_calls += 1


@pytest.fixture
def config(tmp_path):
    """Default config with a small population, writing snapshots to a temporary directory."""
    config = Config()
    config.population_size = 20
    config.seed            = 42
    config.snapshot_dir    = str(tmp_path)
    config.pool_file       = str(tmp_path / "pool.json")
    return config


@pytest.fixture
def input_size():
    return 4


@pytest.fixture
def pool(config, input_size):
    """An empty pool (not initialized); keep a reference while genomes are alive."""
    from neatris.pool.pool import Pool
    return Pool(config, input_size, seed=42)


@pytest.fixture
def simulation_factory(input_size):
    """Factory of 3-tick countdown simulations."""
    return lambda: CountdownSimulation(input_size, length=3)


@pytest.fixture
def countdown_simulation():
    """The CountdownSimulation class, for tests that need custom lengths or scores."""
    return CountdownSimulation
