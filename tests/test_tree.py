"""
Tests for ClusterNode and to_tree.
"""

import numpy as np
import pytest

from hcluster_numba.cluster import ClusterNode, is_valid_linkage, to_tree
from hcluster_numba.errors import AsymmetricChild, InvalidInput, MalformedLinkage


class TestClusterNode:

    def test_leaf(self):
        leaf = ClusterNode(3, label='x')
        assert leaf.is_leaf()
        assert leaf.count == 1
        assert leaf.dist == 0.0
        assert leaf.parent is None

    def test_merge(self):
        a = ClusterNode(0)
        b = ClusterNode(1)
        c = ClusterNode(2, a, b, dist=1.5)
        assert c.count == 2
        assert c.get_dist() == 1.5
        assert a.parent is c
        assert b.parent is c
        assert c.get_node(0) is a

    def test_one_child(self):
        with pytest.raises(AsymmetricChild):
            ClusterNode(2, ClusterNode(0), None)
        with pytest.raises(AsymmetricChild):
            ClusterNode(2, None, ClusterNode(1))

    def test_asymmetric_is_malformed(self):
        with pytest.raises(MalformedLinkage):
            ClusterNode(2, ClusterNode(0), None)

    def test_parent_set_once(self):
        a = ClusterNode(0)
        ClusterNode(2, a, ClusterNode(1))
        with pytest.raises(MalformedLinkage):
            ClusterNode(4, a, ClusterNode(3))

    def test_asymmetric_message(self):
        with pytest.raises(AsymmetricChild, match='Node 7'):
            ClusterNode(7, ClusterNode(0), None)

    def test_merge_with_itself(self):
        a = ClusterNode(0)
        with pytest.raises(MalformedLinkage):
            ClusterNode(1, a, a)


class TestToTree:

    def test_structure(self, four_points_Z):
        root = to_tree(four_points_Z)
        assert root.id == 6
        assert root.count == 4
        assert root.dist == pytest.approx(0.9)
        assert (root.left.id, root.right.id) == (4, 5)
        assert (root.left.left.id, root.left.right.id) == (0, 1)
        assert root.parent is None

    def test_parents(self, four_points_Z):
        root = to_tree(four_points_Z)
        assert root.get_node(0).parent.id == 4
        assert root.get_node(3).parent.id == 5
        assert root.get_node(5).parent is root

    def test_arena(self, four_points_Z):
        root = to_tree(four_points_Z)
        assert len(root.nodes) == 7
        assert [node.id for node in root.nodes] == list(range(7))
        assert root.nodes[-1] is root

    def test_counts(self, four_points_Z):
        root = to_tree(four_points_Z)
        for node in root.post_order():
            if not node.is_leaf():
                assert node.count == node.left.count + node.right.count

    def test_traversals(self, four_points_Z):
        root = to_tree(four_points_Z)
        assert root.pre_order() == [0, 1, 2, 3]
        assert [node.id for node in root.post_order()] == [0, 1, 4, 2, 3, 5, 6]
        assert [leaf.id for leaf in root.right.get_leaves()] == [2, 3]

    def test_labels(self, four_points_Z):
        root = to_tree(four_points_Z, labels=['a', 'b', 'c', 'd'])
        assert root.pre_order(lambda x: x.label) == ['a', 'b', 'c', 'd']

    def test_wrong_label_count(self, four_points_Z):
        with pytest.raises(InvalidInput):
            to_tree(four_points_Z, labels=['a', 'b'])

    def test_single_pair(self):
        root = to_tree([[0., 1., 5., 2.]])
        assert root.count == 2
        assert root.left.is_leaf() and root.right.is_leaf()

    def test_deep_chain(self):
        n = 3000
        Z = np.empty((n - 1, 4))
        Z[0] = [0, 1, 1.0, 2]
        for k in range(1, n - 1):
            Z[k] = [k + 1, n + k - 1, 1.0 + k, k + 2]
        root = to_tree(Z)
        assert root.count == n
        assert len(root.pre_order()) == n


class TestCorruption:

    def test_size_zeroed(self, four_points_Z):
        Z = four_points_Z.copy()
        Z[1, 3] = 0
        with pytest.raises(MalformedLinkage):
            to_tree(Z)

    def test_self_reference(self, four_points_Z):
        Z = four_points_Z.copy()
        Z[1, 1] = 5
        with pytest.raises(MalformedLinkage):
            to_tree(Z)

    def test_forward_reference(self, four_points_Z):
        Z = four_points_Z.copy()
        Z[0, 1] = 6
        with pytest.raises(MalformedLinkage):
            to_tree(Z)

    def test_negative_id(self, four_points_Z):
        Z = four_points_Z.copy()
        Z[0, 0] = -1
        with pytest.raises(MalformedLinkage):
            to_tree(Z)

    @pytest.mark.parametrize('value', [np.nan, np.inf, 4.7])
    def test_id_not_whole(self, four_points_Z, value):
        Z = four_points_Z.copy()
        Z[2, 0] = value
        with pytest.raises(MalformedLinkage):
            to_tree(Z)

    def test_child_merged_twice(self):
        Z = [[0., 1., 0.1, 2.], [0., 2., 0.2, 2.]]
        with pytest.raises(MalformedLinkage):
            to_tree(Z)

    def test_wrong_shape(self):
        with pytest.raises(InvalidInput):
            to_tree([[0., 1., 0.1]])
        with pytest.raises(InvalidInput):
            to_tree(np.empty((0, 4)))

    def test_is_valid_linkage(self, four_points_Z):
        assert is_valid_linkage(four_points_Z)
        Z = four_points_Z.copy()
        Z[2, 3] = 3
        assert not is_valid_linkage(Z)
        assert not is_valid_linkage([1, 2, 3])

    def test_is_valid_linkage_nan_id(self, four_points_Z):
        Z = four_points_Z.copy()
        Z[1, 0] = np.nan
        assert not is_valid_linkage(Z)
