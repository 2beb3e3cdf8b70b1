"""
Tree view of a linkage matrix.

Nodes live in an arena, a sequence indexed by node id. A node owns its two
children; its parent is looked up in the arena by id and is set once, when
the parent is built.
"""

import logging

from ..errors import InvalidInput, MalformedLinkage
from ._validation import as_linkage, check_children, fold_linkage

logger = logging.getLogger(__name__)


class ClusterNode:
    """
    A tree node class for representing a cluster.

    Leaf nodes correspond to original observations, while non-leaf nodes
    correspond to non-singleton clusters.

    Parameters
    ----------
    id : int
        The node id.
    left, right : ClusterNode, optional
        The clusters merged into this one. Give both or neither.
    dist : float
        The merge distance. 0 for leaves.
    count : int
        The number of observations. Ignored when there are children, whose
        counts are added instead.
    label : str, optional
        A name for the observation of a leaf.
    nodes : list or dict, optional
        The arena this node is stored in. `to_tree` shares one list between
        all nodes; otherwise the arena is assembled from the children.
    """

    def __init__(self, id, left=None, right=None, dist=0.0, count=1,
                 label=None, nodes=None):
        check_children(left, right, id)
        if left is not None:
            for child in (left, right):
                if child._parent_id is not None:
                    raise MalformedLinkage(
                        'Node %d already belongs to cluster %d, it cannot '
                        'also join cluster %d.'
                        % (child.id, child._parent_id, id))
            if left is right:
                raise MalformedLinkage('Node %d cannot be merged with '
                                       'itself.' % left.id)

        self.id = id
        self.left = left
        self.right = right
        self.dist = dist
        self.label = label
        self.count = count if left is None else left.count + right.count
        self._parent_id = None

        if nodes is None:
            nodes = {}
            if left is not None:
                for child in (left, right):
                    for node in child.post_order():
                        nodes[node.id] = node
                        node._nodes = nodes
        self._nodes = nodes
        nodes[id] = self

        if left is not None:
            left._parent_id = id
            right._parent_id = id

    def __repr__(self):
        if self.is_leaf():
            return '<ClusterNode %d leaf>' % self.id
        return '<ClusterNode %d (%d, %d) dist=%g count=%d>' % (
            self.id, self.left.id, self.right.id, self.dist, self.count)

    @property
    def parent(self):
        """The cluster this node was merged into, None for the root."""
        if self._parent_id is None:
            return None
        return self._nodes[self._parent_id]

    @property
    def nodes(self):
        """The node arena, indexed by id."""
        return self._nodes

    def get_node(self, id):
        return self._nodes[id]

    def get_id(self):
        return self.id

    def get_count(self):
        return self.count

    def get_left(self):
        return self.left

    def get_right(self):
        return self.right

    def get_dist(self):
        return self.dist

    def is_leaf(self):
        return self.left is None

    def post_order(self):
        """Iterate over the subtree, children before their parent."""
        stack = [(self, False)]
        while stack:
            node, expanded = stack.pop()
            if expanded or node.is_leaf():
                yield node
            else:
                stack.append((node, True))
                stack.append((node.right, False))
                stack.append((node.left, False))

    def pre_order(self, func=(lambda x: x.id)):
        """
        Apply `func` to the leaves of the subtree, from left to right.

        Returns
        -------
        L : list
            The results of `func` for each leaf.
        """
        result = []
        stack = [self]
        while stack:
            node = stack.pop()
            if node.is_leaf():
                result.append(func(node))
            else:
                stack.append(node.right)
                stack.append(node.left)
        return result

    def get_leaves(self):
        return self.pre_order(lambda x: x)


def to_tree(Z, labels=None):
    """
    Convert a linkage matrix into a tree of `ClusterNode`.

    Parameters
    ----------
    Z : array_like
        The linkage matrix.
    labels : sequence of str, optional
        One label per observation, in id order.

    Returns
    -------
    root : ClusterNode
        The last cluster formed. Every node is reachable through
        ``root.nodes``.

    Raises
    ------
    MalformedLinkage
        A row references a cluster formed later (or itself), merges a node
        twice, or stores a size that disagrees with its children.
    """
    Z = as_linkage(Z)
    n = Z.shape[0] + 1
    if labels is not None and len(labels) != n:
        raise InvalidInput('Expected %d labels, got %d.' % (n, len(labels)))

    nodes = [None] * (2 * n - 1)

    def make_leaf(i):
        label = None if labels is None else labels[i]
        return ClusterNode(i, label=label, nodes=nodes)

    def make_node(id, left, right, dist):
        return ClusterNode(id, left, right, dist, nodes=nodes)

    fold_linkage(Z, make_leaf, make_node, lambda nd: nd.count, nodes)
    logger.debug('to_tree: %d observations', n)
    return nodes[-1]
