"""Pytest configuration and shared fixtures."""

import pytest
import sys
import numpy as np
from pathlib import Path

# Add the project root to the path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from skyburst.core.config import FireworkConfig
from skyburst.core.state import SimulationState
from skyburst.core.system import FireworkSystem


@pytest.fixture
def config():
    """Default settings with auto-launch off so tests control every launch."""
    return FireworkConfig(auto_launch=False)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def state():
    """A seeded 1000x1000 viewport."""
    return SimulationState.create(1000, 1000, seed=1234)


@pytest.fixture
def system(config):
    return FireworkSystem(config)


@pytest.fixture
def palette():
    return [(255, 0, 0), (0, 255, 0), (0, 0, 255)]
