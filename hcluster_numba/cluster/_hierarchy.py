"""
Compiled kernels building and walking linkage matrices.

A linkage matrix Z has n - 1 rows for n observations. Row k records the k-th
merge as (left id, right id, distance, size); the cluster it forms gets the
id n + k and leaves keep the ids 0 .. n - 1.

These functions do no validation and raise nothing. The wrappers in
`hierarchy` check their arguments before calling them.
"""

import numpy as np

import numba as nb

from . import _hierarchy_distance_update as hdu
from ._argsort import argsort1D as argsort
from ._distance import condensed_index

linkage_methods = {'single': hdu.SINGLE,
                   'complete': hdu.COMPLETE,
                   'average': hdu.AVERAGE,
                   'centroid': hdu.CENTROID,
                   'median': hdu.MEDIAN,
                   'ward': hdu.WARD,
                   'weighted': hdu.WEIGHTED}


myint = nb.int64


@nb.njit(myint(nb.uint8[:], myint))
def is_visited(bitset, i):
    """
    Check if node i was visited.
    """
    return bitset[i >> 3] & (1 << (i & 7))


@nb.njit(nb.void(nb.uint8[:], myint))
def set_visited(bitset, i):
    """
    Mark node i as visited.
    """
    bitset[i >> 3] |= 1 << (i & 7)


@nb.njit(nb.void(nb.double[:, :], nb.double[:], myint))
def calculate_cluster_sizes(Z, cs, n):
    """
    Calculate the size of each cluster. The result is the fourth column of
    the linkage matrix.

    Parameters
    ----------
    Z : ndarray
        The linkage matrix. The fourth column can be empty.
    cs : ndarray
        The array to store the sizes. Must start zeroed.
    n : int
        The number of observations.
    """

    for i in range(n - 1):
        child_l = int(Z[i, 0])
        child_r = int(Z[i, 1])

        if child_l >= n:
            cs[i] += cs[child_l - n]
        else:
            cs[i] += 1

        if child_r >= n:
            cs[i] += cs[child_r - n]
        else:
            cs[i] += 1


@nb.njit(nb.void(nb.double[:, :], nb.double[:], myint[:], myint))
def from_pointer_representation(Z, Lambda, Pi, n):
    """
    Generate a linkage matrix from its pointer representation.

    Parameters
    ----------
    Z : ndarray
        An array to store the linkage matrix.
    Lambda : ndarray
        The :math:`\\Lambda` array of the pointer representation.
    Pi : ndarray
        The :math:`\\Pi` array of the pointer representation.
    n : int
        The number of observations.
    """

    sorted_idx = argsort(Lambda)
    node_ids = np.empty(n, dtype=np.int64)

    for i in range(n):
        node_ids[i] = i

    for i in range(n - 1):
        current_leaf = sorted_idx[i]
        pi = Pi[current_leaf]
        if node_ids[current_leaf] < node_ids[pi]:
            Z[i, 0] = node_ids[current_leaf]
            Z[i, 1] = node_ids[pi]
        else:
            Z[i, 0] = node_ids[pi]
            Z[i, 1] = node_ids[current_leaf]
        Z[i, 2] = Lambda[current_leaf]
        # pi now stands for the cluster just formed
        node_ids[pi] = n + i

    for ndx in range(Z.shape[0]):
        Z[ndx, 3] = 0

    calculate_cluster_sizes(Z, Z[:, 3], n)


@nb.njit(nb.void(nb.double[:], nb.double[:, :], myint))
def slink(dists, Z, n):
    """
    The SLINK algorithm. Single linkage in O(n^2) time complexity.

    Parameters
    ----------
    dists : ndarray
        A condensed matrix stores the pairwise distances of the observations.
    Z : ndarray
        A (n - 1) x 4 matrix to store the result (i.e. the linkage matrix).
    n : int
        The number of observations.

    References
    ----------
    R. Sibson, "SLINK: An optimally efficient algorithm for the single-link
    cluster method", The Computer Journal 1973 16: 30-34.
    """
    M = np.empty(n, dtype=np.double)
    Lambda = np.empty(n, dtype=np.double)
    Pi = np.empty(n, dtype=myint)

    Pi[0] = 0
    Lambda[0] = np.inf
    for i in range(1, n):
        Pi[i] = i
        Lambda[i] = np.inf

        for j in range(i):
            M[j] = dists[condensed_index(n, i, j)]

        # the order of both passes over j matters
        for j in range(i):
            if Lambda[j] >= M[j]:
                M[Pi[j]] = min(M[Pi[j]], Lambda[j])
                Lambda[j] = M[j]
                Pi[j] = i
            else:
                M[Pi[j]] = min(M[Pi[j]], M[j])

        for j in range(i):
            if Lambda[j] >= Lambda[Pi[j]]:
                Pi[j] = i

    from_pointer_representation(Z, Lambda, Pi, n)


@nb.njit(nb.void(nb.double[:], nb.double[:, :], myint, myint))
def linkage(dists, Z, n, method):
    """
    Perform hierarchy clustering by repeatedly merging the closest pair of
    clusters. O(n^3) time complexity.

    Parameters
    ----------
    dists : ndarray
        A condensed matrix stores the pairwise distances of the observations.
        It is copied, not modified.
    Z : ndarray
        A (n - 1) x 4 matrix to store the result (i.e. the linkage matrix).
    n : int
        The number of observations.
    method : int
        The linkage method. 0: single 1: complete 2: average 3: centroid
        4: median 5: ward 6: weighted
    """

    # inter-cluster dists
    D = np.empty(n * (n - 1) // 2, dtype=np.double)
    # map the indices to node ids
    id_map = np.empty(n, dtype=np.int64)

    for ndx in range(dists.shape[0]):
        D[ndx] = dists[ndx]

    for i in range(n):
        id_map[i] = i

    x = 0
    y = 0
    for k in range(n - 1):
        # find two closest clusters x, y (x < y)
        current_min = np.inf
        for i in range(n - 1):
            if id_map[i] == -1:
                continue

            i_start = condensed_index(n, i, i + 1)
            for j in range(n - i - 1):
                if D[i_start + j] < current_min:
                    current_min = D[i_start + j]
                    x = i
                    y = i + j + 1

        id_x = id_map[x]
        id_y = id_map[y]

        # get the original numbers of points in clusters x and y
        nx = 1 if id_x < n else myint(Z[id_x - n, 3])
        ny = 1 if id_y < n else myint(Z[id_y - n, 3])

        # record the new node
        if id_x < id_y:
            Z[k, 0] = id_x
            Z[k, 1] = id_y
        else:
            Z[k, 0] = id_y
            Z[k, 1] = id_x
        Z[k, 2] = current_min
        Z[k, 3] = nx + ny

        id_map[x] = -1  # cluster x will be dropped
        id_map[y] = n + k  # cluster y will be replaced with the new cluster

        # update the distance matrix
        for i in range(n):
            id_i = id_map[i]
            if id_i == -1 or id_i == n + k:
                continue

            ni = 1 if id_i < n else myint(Z[id_i - n, 3])
            D[condensed_index(n, i, y)] = hdu.update_distance(
                method,
                D[condensed_index(n, i, x)],
                D[condensed_index(n, i, y)],
                current_min, nx, ny, ni)
            if i < x:
                D[condensed_index(n, i, x)] = np.inf


@nb.njit(nb.void(nb.double[:, :], myint[:], myint))
def prelist(Z, members, n):
    """
    Perform a pre-order traversal on the linkage tree and get a list of ids
    of the leaves.

    Parameters
    ----------
    Z : ndarray
        The linkage matrix.
    members : ndarray
        The array to store the result.
    n : int
        The number of observations.
    """

    curr_node = np.empty(n, dtype=myint)

    visited_size = (((n * 2) - 1) >> 3) + 1

    visited = np.zeros(visited_size, dtype=np.uint8)

    mem_idx = 0
    k = 0
    curr_node[0] = 2 * n - 2
    while k >= 0:
        root = curr_node[k] - n

        i_lc = int(Z[root, 0])
        if not is_visited(visited, i_lc):
            set_visited(visited, i_lc)
            if i_lc >= n:
                k += 1
                curr_node[k] = i_lc
                continue
            else:
                members[mem_idx] = i_lc
                mem_idx += 1

        i_rc = int(Z[root, 1])
        if not is_visited(visited, i_rc):
            set_visited(visited, i_rc)
            if i_rc >= n:
                k += 1
                curr_node[k] = i_rc
                continue
            else:
                members[mem_idx] = i_rc
                mem_idx += 1

        k -= 1
