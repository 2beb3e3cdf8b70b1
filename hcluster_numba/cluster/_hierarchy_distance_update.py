"""
Lance-Williams distance updates.

Each function below computes the distance from cluster i to the new cluster
xy formed by merging clusters x and y. They all share one signature so that
the generic linkage loop only has to pick one by its method code.

Parameters
----------
d_xi : double
    Distance from cluster x to cluster i
d_yi : double
    Distance from cluster y to cluster i
d_xy : double
    Distance from cluster x to cluster y
size_x : int
    Size of cluster x
size_y : int
    Size of cluster y
size_i : int
    Size of cluster i

Returns
-------
d_xyi : double
    Distance from the new cluster xy to cluster i
"""

import math

import numba as nb

SINGLE = 0
COMPLETE = 1
AVERAGE = 2
CENTROID = 3
MEDIAN = 4
WARD = 5
WEIGHTED = 6

sig = nb.double(nb.double, nb.double, nb.double, nb.int64, nb.int64, nb.int64)


@nb.njit(sig)
def _single(d_xi, d_yi, d_xy, size_x, size_y, size_i):
    return min(d_xi, d_yi)


@nb.njit(sig)
def _complete(d_xi, d_yi, d_xy, size_x, size_y, size_i):
    return max(d_xi, d_yi)


@nb.njit(sig)
def _average(d_xi, d_yi, d_xy, size_x, size_y, size_i):
    # UPGMA: mean over all pairs of original observations
    return (size_x * d_xi + size_y * d_yi) / (size_x + size_y)


@nb.njit(sig)
def _centroid(d_xi, d_yi, d_xy, size_x, size_y, size_i):
    return math.sqrt((((size_x * d_xi * d_xi) + (size_y * d_yi * d_yi)) -
                     (size_x * size_y * d_xy * d_xy) / (size_x + size_y)) /
                     (size_x + size_y))


@nb.njit(sig)
def _median(d_xi, d_yi, d_xy, size_x, size_y, size_i):
    return math.sqrt(0.5 * (d_xi * d_xi + d_yi * d_yi) - 0.25 * d_xy * d_xy)


@nb.njit(sig)
def _ward(d_xi, d_yi, d_xy, size_x, size_y, size_i):
    t = 1.0 / (size_x + size_y + size_i)
    return math.sqrt((size_i + size_x) * t * d_xi * d_xi +
                     (size_i + size_y) * t * d_yi * d_yi -
                     size_i * t * d_xy * d_xy)


@nb.njit(sig)
def _weighted(d_xi, d_yi, d_xy, size_x, size_y, size_i):
    return 0.5 * (d_xi + d_yi)


@nb.njit(nb.double(nb.int64, nb.double, nb.double, nb.double,
                   nb.int64, nb.int64, nb.int64))
def update_distance(method, d_xi, d_yi, d_xy, size_x, size_y, size_i):
    """
    Apply the update formula selected by `method`, one of the module level
    method codes.
    """
    # numba cannot call a function stored in a variable chosen at run time
    if method == SINGLE:
        return _single(d_xi, d_yi, d_xy, size_x, size_y, size_i)
    elif method == COMPLETE:
        return _complete(d_xi, d_yi, d_xy, size_x, size_y, size_i)
    elif method == AVERAGE:
        return _average(d_xi, d_yi, d_xy, size_x, size_y, size_i)
    elif method == CENTROID:
        return _centroid(d_xi, d_yi, d_xy, size_x, size_y, size_i)
    elif method == MEDIAN:
        return _median(d_xi, d_yi, d_xy, size_x, size_y, size_i)
    elif method == WARD:
        return _ward(d_xi, d_yi, d_xy, size_x, size_y, size_i)
    else:
        return _weighted(d_xi, d_yi, d_xy, size_x, size_y, size_i)
