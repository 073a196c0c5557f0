"""Exceptions raised by the family tree and its request layer"""


class TreeError(Exception):
    """Base class for structural failures of a FamilyTree operation

    A failed operation leaves the tree exactly as it was before the call."""


class UnknownNode(TreeError):
    def __init__(self, nid):
        TreeError.__init__(self, "no node with id %r" % (nid,))
        self.node_id = nid


class DuplicateId(TreeError):
    def __init__(self, nid):
        TreeError.__init__(self, "a node with id %r already exists" % (nid,))
        self.node_id = nid


class SelfParent(TreeError):
    def __init__(self, nid):
        TreeError.__init__(self, "node %r can't be its own parent" % (nid,))
        self.node_id = nid


class CycleDetected(TreeError):
    def __init__(self, parent_id, child_id):
        TreeError.__init__(self, "cycle detected: %r is a descendant of %r" % (parent_id, child_id))
        self.parent_id = parent_id
        self.child_id = child_id


class CannotDeleteRoot(TreeError):
    def __init__(self, nid):
        TreeError.__init__(self, "the virtual root (%r) can't be deleted" % (nid,))
        self.node_id = nid


class InvariantViolation(TreeError):
    """A loaded tree doesn't have a valid single-rooted shape"""


class StorageError(Exception):
    """The persisted tree can't be read back"""


class RequestError(Exception):
    """A request is malformed: unknown action, bad envelope or missing field"""
