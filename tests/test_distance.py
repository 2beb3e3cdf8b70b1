"""
Tests for condensed matrix addressing and pairwise distances.
"""

import numpy as np
import pytest

from hcluster_numba.cluster import condensed_index, normalize_rows, num_obs_y, pdist
from hcluster_numba.errors import InvalidInput


class TestCondensedIndex:

    def test_first_row(self):
        assert condensed_index(4, 0, 1) == 0
        assert condensed_index(4, 0, 3) == 2
        assert condensed_index(4, 1, 2) == 3
        assert condensed_index(4, 2, 3) == 5

    def test_symmetric(self):
        n = 7
        for i in range(n):
            for j in range(n):
                if i != j:
                    assert condensed_index(n, i, j) == condensed_index(n, j, i)

    def test_bijection(self):
        n = 9
        seen = set(condensed_index(n, i, j)
                   for i in range(n) for j in range(i + 1, n))
        assert seen == set(range(n * (n - 1) // 2))

    def test_diagonal_is_zero(self):
        assert condensed_index(5, 3, 3) == 0


class TestPdist:

    @pytest.fixture
    def X(self):
        return np.array([[1., 0.], [0., 1.], [-1., 0.]])

    def test_abs_cosine_default(self, X):
        np.testing.assert_allclose(pdist(X), [1., 0., 1.])

    def test_cosine(self, X):
        np.testing.assert_allclose(pdist(X, 'cosine'), [1., 2., 1.])

    def test_euclidean(self, X):
        np.testing.assert_allclose(pdist(X, 'euclidean'),
                                   [np.sqrt(2), 2., np.sqrt(2)])

    def test_callable_metric(self, X):
        y = pdist(X, lambda u, v: np.abs(u - v).sum())
        np.testing.assert_allclose(y, [2., 2., 2.])

    def test_length(self, rng):
        y = pdist(rng.randn(10, 3))
        assert y.shape == (45, )

    def test_unknown_metric(self, X):
        with pytest.raises(InvalidInput):
            pdist(X, 'manhattan')

    def test_single_observation(self):
        with pytest.raises(InvalidInput):
            pdist([[1., 2.]])

    def test_not_a_matrix(self):
        with pytest.raises(InvalidInput):
            pdist([1., 2., 3.])


class TestHelpers:

    def test_normalize_rows(self):
        X = normalize_rows([[3., 4.], [0., 0.]])
        np.testing.assert_allclose(X, [[0.6, 0.8], [0., 0.]])

    def test_num_obs_y(self):
        assert num_obs_y(np.zeros(1)) == 2
        assert num_obs_y(np.zeros(6)) == 4
        assert num_obs_y(np.zeros(45)) == 10

    def test_num_obs_y_not_triangular(self):
        with pytest.raises(InvalidInput):
            num_obs_y(np.zeros(5))
