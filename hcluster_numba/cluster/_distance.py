"""
Condensed distance matrices.

A condensed matrix stores the distances between the n observations as a flat
array of length n * (n - 1) / 2, row by row over the upper triangle of the
square matrix and without the diagonal.
"""

import logging
import math

import numpy as np

import numba as nb

from ..errors import InvalidInput

logger = logging.getLogger(__name__)

myint = nb.int64


@nb.njit(myint(myint, myint, myint))
def condensed_index(n, i, j):
    """
    Calculate the condensed index of element (i, j) in an n x n condensed
    matrix.
    """
    if i < j:
        return n * i - (i * (i + 1) // 2) + (j - i - 1)
    elif i > j:
        return n * j - (j * (j + 1) // 2) + (i - j - 1)
    else:
        # the diagonal is not stored
        return 0


@nb.njit(nb.double(nb.double[:], nb.double[:]))
def _dot(u, v):
    s = 0.0
    for k in range(u.shape[0]):
        s += u[k] * v[k]
    return s


@nb.njit(nb.void(nb.double[:, :], nb.double[:]))
def _pdist_abs_cosine(X, dm):
    """1 - |u . v|, the cosine distance of unit vectors ignoring orientation."""
    n = X.shape[0]
    for i in range(n):
        for j in range(i + 1, n):
            dm[condensed_index(n, i, j)] = 1.0 - abs(_dot(X[i], X[j]))


@nb.njit(nb.void(nb.double[:, :], nb.double[:]), error_model='numpy')
def _pdist_cosine(X, dm):
    n = X.shape[0]
    norms = np.empty(n, dtype=np.double)
    for i in range(n):
        norms[i] = math.sqrt(_dot(X[i], X[i]))

    for i in range(n):
        for j in range(i + 1, n):
            dm[condensed_index(n, i, j)] = (
                1.0 - _dot(X[i], X[j]) / (norms[i] * norms[j]))


@nb.njit(nb.void(nb.double[:, :], nb.double[:]))
def _pdist_euclidean(X, dm):
    n = X.shape[0]
    m = X.shape[1]
    for i in range(n):
        for j in range(i + 1, n):
            s = 0.0
            for k in range(m):
                diff = X[i, k] - X[j, k]
                s += diff * diff
            dm[condensed_index(n, i, j)] = math.sqrt(s)


distance_metrics = {'abs_cosine': _pdist_abs_cosine,
                    'cosine': _pdist_cosine,
                    'euclidean': _pdist_euclidean}


def _as_observations(X):
    try:
        X = np.asarray(X, dtype=np.double)
    except (TypeError, ValueError) as exc:
        raise InvalidInput('Observations must be a numeric matrix: %s' % exc)

    if X.ndim != 2:
        raise InvalidInput('Observations must be a 2-D matrix of row vectors '
                           '(got %d dimensions).' % X.ndim)
    if X.shape[0] < 2:
        raise InvalidInput('At least two observations are needed '
                           '(got %d).' % X.shape[0])
    return X


def pdist(X, metric='abs_cosine'):
    """
    Pairwise distances between the rows of `X`.

    Parameters
    ----------
    X : array_like
        An n x m matrix of n observation vectors, n >= 2.
    metric : str or callable
        The name of a compiled metric ('abs_cosine', 'cosine', 'euclidean')
        or a function ``metric(u, v) -> float``. The default 'abs_cosine' is
        ``1 - |u . v|`` and expects unit vectors, see `normalize_rows`.

    Returns
    -------
    y : ndarray
        The condensed distance matrix, of length n * (n - 1) / 2.
    """
    X = _as_observations(X)
    n = X.shape[0]
    dm = np.empty(n * (n - 1) // 2, dtype=np.double)

    if callable(metric):
        k = 0
        for i in range(n):
            for j in range(i + 1, n):
                dm[k] = metric(X[i], X[j])
                k += 1
    else:
        try:
            kernel = distance_metrics[metric]
        except KeyError:
            raise InvalidInput('Unknown distance metric %r. Valid metrics '
                               'are %s.' % (metric, sorted(distance_metrics)))
        kernel(np.ascontiguousarray(X), dm)

    logger.debug('pdist: %d observations, metric %r', n, metric)
    return dm


def normalize_rows(X):
    """Scale every row of `X` to unit length. Zero rows are left untouched."""
    X = _as_observations(X)
    norms = np.sqrt((X * X).sum(axis=1))
    norms[norms == 0] = 1.0
    return X / norms[:, np.newaxis]


def num_obs_y(y):
    """
    Number of observations of a condensed distance matrix.

    Raises `InvalidInput` when the length of `y` is not n * (n - 1) / 2 for
    any n.
    """
    k = np.shape(y)[0]
    d = int(np.ceil(np.sqrt(k * 2)))
    if d * (d - 1) != k * 2:
        raise InvalidInput('Incompatible vector size. It must be a binomial '
                           'coefficient n choose 2 for some integer n >= 2 '
                           '(got %d).' % k)
    return d
