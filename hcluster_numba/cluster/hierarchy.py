"""
Hierarchical clustering.

Build a linkage matrix from a condensed distance matrix or from observation
vectors, then turn it into a tree or a plain data structure.

Linkage
-------
    linkage          -- any supported method, from distances or vectors
    single           -- single linkage with SLINK, O(n^2)
    average          -- average linkage (UPGMA), O(n^3)
    slink            -- single linkage with an explicit n
    average_link     -- average linkage with an explicit n

Trees and views
---------------
    to_tree          -- linkage matrix to ClusterNode objects
    to_map_tree      -- nested OrderedDicts with the ClusterNode fields
    to_json_tree     -- nested dicts and lists of JSON types
    dumps_json_tree  -- the JSON tree as text
    from_map_tree    -- ClusterNode objects from a map tree
    hierarchy_tree   -- vectors to ClusterNode objects
    hierarchy_map    -- vectors to a map tree
    hierarchy_json   -- vectors to a JSON tree

Linkage matrices
----------------
    is_valid_linkage -- check a linkage matrix
    num_obs_linkage  -- number of observations of a linkage matrix
    leaves_list      -- leaf ids from left to right
    save_linkage     -- write the raw matrix
    load_linkage     -- read it back
"""

import logging

import numpy as np

from ..errors import InvalidInput
from . import _hierarchy
from ._distance import condensed_index, normalize_rows, num_obs_y, pdist
from ._export import dumps_json_tree, from_map_tree, to_json_tree, to_map_tree
from ._hierarchy import linkage_methods
from ._io import load_linkage, save_linkage
from ._tree import ClusterNode, to_tree
from ._validation import is_valid_linkage, validate_linkage

__all__ = ['ClusterNode', 'average', 'average_link', 'condensed_index',
           'dumps_json_tree', 'from_map_tree', 'hierarchy_json', 'hierarchy_map',
           'hierarchy_tree', 'is_valid_linkage', 'leaves_list', 'linkage',
           'linkage_methods', 'load_linkage', 'normalize_rows',
           'num_obs_linkage', 'num_obs_y', 'pdist', 'save_linkage', 'single',
           'slink', 'to_json_tree', 'to_map_tree', 'to_tree']

logger = logging.getLogger(__name__)


def _condensed(y, n=None):
    try:
        y = np.asarray(y, dtype=np.double)
    except (TypeError, ValueError) as exc:
        raise InvalidInput('Distances must be numeric: %s' % exc)

    if y.ndim != 1:
        raise InvalidInput('A condensed distance matrix must be 1-D '
                           '(got %d dimensions).' % y.ndim)

    m = num_obs_y(y)
    if n is not None and n != m:
        raise InvalidInput('%d distances do not match %d observations, '
                           'expected %d.' % (y.shape[0], n, n * (n - 1) // 2))
    if m < 2:
        raise InvalidInput('At least two observations are needed.')
    if not np.all(np.isfinite(y)):
        raise InvalidInput('The condensed distance matrix must contain only '
                           'finite values.')
    return np.ascontiguousarray(y), m


def slink(dists, n):
    """
    Single linkage of `n` observations with the SLINK algorithm.

    Parameters
    ----------
    dists : array_like
        The condensed distance matrix, of length n * (n - 1) / 2.
    n : int
        The number of observations.

    Returns
    -------
    Z : ndarray
        The (n - 1) x 4 linkage matrix. Merge distances never decrease.
    """
    dists, n = _condensed(dists, n)
    Z = np.empty((n - 1, 4), dtype=np.double)
    _hierarchy.slink(dists, Z, n)
    return Z


def average_link(dists, n):
    """
    Average linkage (UPGMA) of `n` observations.

    Unlike single linkage, the merge distances are not guaranteed to be
    monotonic from one row to the next.
    """
    dists, n = _condensed(dists, n)
    Z = np.empty((n - 1, 4), dtype=np.double)
    _hierarchy.linkage(dists, Z, n, linkage_methods['average'])
    return Z


def linkage(y, method='single', metric='abs_cosine'):
    """
    Perform hierarchical/agglomerative clustering.

    Parameters
    ----------
    y : array_like
        Either a condensed distance matrix or an n x m matrix of n
        observation vectors, which is turned into distances with `metric`.
    method : str
        One of 'single', 'complete', 'average', 'weighted', 'centroid',
        'median' and 'ward'. 'single' uses SLINK; the others repeatedly merge
        the closest clusters and update the distances with the matching
        Lance-Williams formula. 'centroid', 'median' and 'ward' only make
        sense with Euclidean distances.
    metric : str or callable
        Passed to `pdist` when `y` holds vectors.

    Returns
    -------
    Z : ndarray
        The (n - 1) x 4 linkage matrix.
    """
    if method not in linkage_methods:
        raise InvalidInput('Invalid method: %r. Valid methods are %s.'
                           % (method, sorted(linkage_methods)))

    if np.ndim(y) == 2:
        y = pdist(y, metric)

    y, n = _condensed(y)
    Z = np.empty((n - 1, 4), dtype=np.double)
    if method == 'single':
        _hierarchy.slink(y, Z, n)
    else:
        _hierarchy.linkage(y, Z, n, linkage_methods[method])

    logger.debug('linkage: method %r, %d observations', method, n)
    return Z


def single(y):
    """Single linkage. See `linkage`."""
    return linkage(y, method='single')


def average(y):
    """Average linkage. See `linkage`."""
    return linkage(y, method='average')


def hierarchy_tree(X, method='average', metric='abs_cosine', labels=None):
    """Cluster the rows of `X` and return the root `ClusterNode`."""
    return to_tree(linkage(X, method, metric), labels)


def hierarchy_map(X, method='average', metric='abs_cosine', labels=None):
    """Cluster the rows of `X` and return the map tree."""
    return to_map_tree(linkage(X, method, metric), labels)


def hierarchy_json(X, method='average', metric='abs_cosine', labels=None):
    """Cluster the rows of `X` and return the JSON tree."""
    return to_json_tree(linkage(X, method, metric), labels)


def num_obs_linkage(Z):
    """The number of observations clustered by linkage matrix `Z`."""
    return validate_linkage(Z).shape[0] + 1


def leaves_list(Z):
    """
    Leaf ids in the order they appear from left to right in the dendrogram.
    """
    Z = validate_linkage(Z)
    n = Z.shape[0] + 1
    ML = np.zeros(n, dtype=np.int64)
    _hierarchy.prelist(np.ascontiguousarray(Z), ML, n)
    return ML
