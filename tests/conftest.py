import numpy as np
import pytest


@pytest.fixture
def four_points():
    """Two tight pairs {0, 1} and {2, 3}, far from each other."""
    return np.array([0.1, 0.9, 0.9, 0.9, 0.9, 0.2])


@pytest.fixture
def four_points_Z():
    return np.array([[0., 1., 0.1, 2.],
                     [2., 3., 0.2, 2.],
                     [4., 5., 0.9, 4.]])


@pytest.fixture
def rng():
    return np.random.RandomState(1234)
