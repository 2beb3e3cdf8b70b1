"""
Exceptions raised by the clustering wrappers.

`InvalidInput` flags arguments the caller got wrong (too few observations,
a condensed array of the wrong length, an unknown method). `MalformedLinkage`
flags a linkage matrix whose content cannot describe a dendrogram.
"""


class HierarchyError(Exception):
    pass


class InvalidInput(HierarchyError, ValueError):
    pass


class MalformedLinkage(HierarchyError, ValueError):
    pass


class AsymmetricChild(MalformedLinkage):
    """A tree node was given exactly one child."""

    def __init__(self, node_id=None):
        msg = ('Only full or proper binary trees are permitted. '
               'This node has one child.')
        if node_id is not None:
            msg = 'Node %d: %s' % (node_id, msg)
        super().__init__(msg)
        self.node_id = node_id
