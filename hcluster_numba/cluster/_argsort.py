import numpy as np

import numba as nb


@nb.njit(nb.int64[::1](nb.double[:]))
def argsort1D(values):
    """
    Indices that sort `values` in ascending order. Equal values keep their
    original relative order.
    """
    return np.argsort(values, kind='mergesort')
