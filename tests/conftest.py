"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pysplitstats.split import LEFT, RIGHT


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def four_subject_node():
    """Hand-checkable survival node.

    time=[1,2,3,4], event=[1,0,1,1], membership=[L,R,L,R],
    event times [1,3,4]. Parent at risk [4,2,1], LEFT at risk [2,1,0],
    parent events [1,1,1], LEFT events [1,1,0]; log-rank = sqrt(2).
    """
    return dict(
        n=4,
        membership=np.array([LEFT, RIGHT, LEFT, RIGHT]),
        time=np.array([1.0, 2.0, 3.0, 4.0]),
        event=np.array([1.0, 0.0, 1.0, 1.0]),
        event_type_size=1,
        event_time_size=3,
        event_time=np.array([1.0, 3.0, 4.0]),
    )


@pytest.fixture
def competing_node(rng):
    """Sorted two-cause survival node with random membership."""
    n = 60
    time = np.sort(rng.integers(1, 25, size=n)).astype(np.float64)
    event = rng.choice([0, 1, 2], size=n, p=[0.3, 0.4, 0.3]).astype(np.float64)
    membership = np.where(rng.random(n) < 0.5, LEFT, RIGHT)
    event_time = np.unique(time[event > 0])
    return dict(
        n=n,
        membership=membership,
        time=time,
        event=event,
        event_type_size=2,
        event_time_size=len(event_time),
        event_time=event_time,
    )
