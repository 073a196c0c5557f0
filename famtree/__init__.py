from famtree.errors import (CannotDeleteRoot, CycleDetected, DuplicateId, InvariantViolation, RequestError,
                            SelfParent, StorageError, TreeError, UnknownNode)
from famtree.store import TreeStore
from famtree.tree import DEFAULT_ROOT_NAME, VIRTUAL_ROOT_ID, FamilyTree, Node

__version__ = "0.1.0"
