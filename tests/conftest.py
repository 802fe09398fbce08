import matplotlib
import numpy as np
import pytest

from gerrymander.data_loading import (
    grid_precincts,
    load_registry,
    texas_sample_precincts,
)
from gerrymander.precincts import PrecinctRegistry

# Plots are saved, never shown
matplotlib.use("Agg")


@pytest.fixture
def grid_registry():
    """The 10x5 grid: ids 0-49, two Democratic precincts per row of five."""
    return load_registry(grid_precincts())


@pytest.fixture
def texas_registry():
    return load_registry(texas_sample_precincts())


@pytest.fixture
def cracked_plan():
    """Five districts of ten consecutive ids, i.e. two grid rows each."""
    return [set(range(i * 10, (i + 1) * 10)) for i in range(5)]


@pytest.fixture
def path_registry():
    """Four precincts in a line, 0-1-2-3, one person each."""
    registry = PrecinctRegistry()
    for i in range(4):
        neighbors = [j for j in (i - 1, i + 1) if 0 <= j < 4]
        registry.add_precinct(i, 1, 0, 1, neighbors)
    return registry


@pytest.fixture
def rng():
    return np.random.default_rng(12345)
