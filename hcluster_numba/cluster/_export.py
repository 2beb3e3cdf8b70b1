"""
Plain data views of a dendrogram.

Every function accepts either a `ClusterNode` tree or a linkage matrix. A
linkage matrix is folded directly, without building a tree first, and goes
through the same checks as `to_tree`.
"""

import collections
import json
import logging

from ..errors import InvalidInput
from ._tree import ClusterNode
from ._validation import as_linkage, check_children, check_count, fold_linkage

logger = logging.getLogger(__name__)


def _fold_tree(root, make_leaf, make_node, count_of, labels):
    built = {}
    stack = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        check_children(node.left, node.right, node.id)
        if node.left is None:
            label = node.label if labels is None else labels[node.id]
            built[node.id] = make_leaf(node.id, label)
        elif not expanded:
            stack.append((node, True))
            stack.append((node.right, False))
            stack.append((node.left, False))
        else:
            nd = make_node(node.id, built[node.left.id],
                           built[node.right.id], node.dist)
            check_count(node.id, node.count, count_of(nd))
            built[node.id] = nd
    return built[root.id]


def _export(tree, labels, make_leaf, make_node):
    count_of = lambda nd: nd['count']

    if isinstance(tree, ClusterNode):
        if labels is not None and len(labels) != tree.count:
            raise InvalidInput('Expected %d labels, got %d.'
                               % (tree.count, len(labels)))
        return _fold_tree(tree, make_leaf, make_node, count_of, labels)

    tree = as_linkage(tree)
    n = tree.shape[0] + 1
    if labels is not None and len(labels) != n:
        raise InvalidInput('Expected %d labels, got %d.' % (n, len(labels)))

    def leaf(i):
        return make_leaf(i, None if labels is None else labels[i])

    return fold_linkage(tree, leaf, make_node, count_of)[-1]


def _map_leaf(id, label):
    node = collections.OrderedDict([('id', int(id)),
                                    ('left', None),
                                    ('right', None),
                                    ('dist', 0.0),
                                    ('count', 1)])
    if label is not None:
        node['label'] = label
    return node


def _map_node(id, left, right, dist):
    check_children(left, right, id)
    return collections.OrderedDict([('id', int(id)),
                                    ('left', left),
                                    ('right', right),
                                    ('dist', float(dist)),
                                    ('count', left['count'] + right['count'])])


def to_map_tree(tree, labels=None):
    """
    Nested ordered mappings with the fields of `ClusterNode`.

    Each node is an OrderedDict with the keys 'id', 'left', 'right', 'dist'
    and 'count', and 'label' on labelled leaves. Leaves have None children.

    Parameters
    ----------
    tree : ClusterNode or array_like
        A tree from `to_tree` or a linkage matrix.
    labels : sequence of str, optional
        Leaf labels, in id order. They replace the labels of a tree.
    """
    return _export(tree, labels, _map_leaf, _map_node)


def _json_leaf(id, label):
    node = {'id': int(id), 'count': 1}
    if label is not None:
        node['name'] = label
    return node


def _json_node(id, left, right, dist):
    check_children(left, right, id)
    return {'id': int(id),
            'children': [left, right],
            'dist': float(dist),
            'count': left['count'] + right['count']}


def to_json_tree(tree, labels=None):
    """
    Nested dicts and lists holding only JSON types.

    Leaves are ``{"id", "count"}`` with a "name" when labelled. Clusters
    are ``{"id", "children": [left, right], "dist", "count"}``.
    """
    return _export(tree, labels, _json_leaf, _json_node)


def dumps_json_tree(tree, labels=None, **kwargs):
    """`to_json_tree` serialized with `json.dumps`."""
    return json.dumps(to_json_tree(tree, labels), **kwargs)


def from_map_tree(mapping):
    """
    Rebuild a `ClusterNode` tree from the output of `to_map_tree`.

    Counts are recomputed from the leaves; a stored 'count' that disagrees
    raises `MalformedLinkage`.
    """
    arena = {}
    built = {}
    stack = [(mapping, False)]
    while stack:
        item, expanded = stack.pop()
        left = item.get('left')
        right = item.get('right')
        check_children(left, right, item.get('id'))
        if left is None:
            node = ClusterNode(item['id'], label=item.get('label'),
                               nodes=arena)
        elif not expanded:
            stack.append((item, True))
            stack.append((right, False))
            stack.append((left, False))
            continue
        else:
            node = ClusterNode(item['id'], built[id(left)], built[id(right)],
                               item.get('dist', 0.0), nodes=arena)
        if 'count' in item:
            check_count(node.id, item['count'], node.count)
        built[id(item)] = node

    logger.debug('from_map_tree: %d nodes', len(arena))
    return built[id(mapping)]
