"""
Structural checks shared by everything that rebuilds a dendrogram.

`to_tree` and every exporter fold a linkage matrix through `fold_linkage`, so
a corrupt matrix is rejected the same way whichever view is requested.
"""

import numpy as np

from ..errors import AsymmetricChild, InvalidInput, MalformedLinkage


def check_children(left, right, node_id=None):
    """Raise `AsymmetricChild` unless both or neither child are given."""
    if (left is None) != (right is None):
        raise AsymmetricChild(node_id)


def as_linkage(Z):
    """Return `Z` as a float64 array of shape (n - 1, 4), n >= 2."""
    try:
        Z = np.asarray(Z, dtype=np.double)
    except (TypeError, ValueError) as exc:
        raise InvalidInput('Linkage matrix must be numeric: %s' % exc)

    if Z.ndim != 2 or Z.shape[1] != 4:
        raise InvalidInput('Linkage matrix must have shape (n - 1, 4) '
                           '(got %s).' % (Z.shape, ))
    if Z.shape[0] < 1:
        raise InvalidInput('Linkage matrix must have at least one row.')
    return Z


def check_linkage_row(Z, i, n):
    """
    Child ids of row `i`, checking they refer to nodes formed before it.
    """
    for column in (0, 1):
        value = Z[i, column]
        if not np.isfinite(value) or value != int(value):
            raise MalformedLinkage(
                'Corrupt matrix Z. Node ids must be whole numbers. See row '
                '%d, column %d (%r).' % (i, column, float(value)))
    fi = int(Z[i, 0])
    fj = int(Z[i, 1])
    for column, child in ((0, fi), (1, fj)):
        if child < 0 or child >= n + i:
            raise MalformedLinkage(
                'Corrupt matrix Z. Index to derivative cluster is used '
                'before it is formed. See row %d, column %d (id %d).'
                % (i, column, child))
    return fi, fj


def check_count(node_id, stored, count):
    """Raise `MalformedLinkage` if a stored size is not the children's sum."""
    if stored != count:
        raise MalformedLinkage(
            'Corrupt cluster %d. Its size is %g but its children add up '
            'to %d.' % (node_id, stored, count))


def fold_linkage(Z, make_leaf, make_node, count_of, nodes=None):
    """
    Build one node per id of linkage matrix `Z`, bottom-up.

    Parameters
    ----------
    Z : array_like
        The linkage matrix.
    make_leaf : callable
        ``make_leaf(id)`` returns the node for observation `id`.
    make_node : callable
        ``make_node(id, left, right, dist)`` returns the node for a merge.
    count_of : callable
        ``count_of(node)`` returns the number of observations under `node`,
        compared with the size column of `Z`.
    nodes : list, optional
        The 2n - 1 slots to fill. A new list is used when omitted.

    Returns
    -------
    nodes : list
        All nodes indexed by id. The root is the last one.
    """
    Z = as_linkage(Z)
    n = Z.shape[0] + 1
    if nodes is None:
        nodes = [None] * (2 * n - 1)
    used = np.zeros(2 * n - 1, dtype=np.bool_)

    for i in range(n):
        nodes[i] = make_leaf(i)

    for i in range(n - 1):
        fi, fj = check_linkage_row(Z, i, n)
        for child in (fi, fj):
            if used[child]:
                raise MalformedLinkage(
                    'Corrupt matrix Z. Node %d is merged twice, the second '
                    'time in row %d.' % (child, i))
            used[child] = True

        nd = make_node(n + i, nodes[fi], nodes[fj], float(Z[i, 2]))
        check_count(n + i, Z[i, 3], count_of(nd))
        nodes[n + i] = nd

    return nodes


def validate_linkage(Z):
    """
    Run the checks of `fold_linkage` on `Z` without building nodes.

    Returns `Z` as a float64 array.
    """
    Z = as_linkage(Z)
    fold_linkage(Z, lambda i: 1, lambda id, left, right, dist: left + right,
                 lambda count: count)
    return Z


def is_valid_linkage(Z):
    """True when `Z` passes every check of `fold_linkage`."""
    try:
        validate_linkage(Z)
    except (InvalidInput, MalformedLinkage):
        return False
    return True
