from collections import OrderedDict, deque

from famtree.errors import (CannotDeleteRoot, CycleDetected, DuplicateId, InvariantViolation,
                            SelfParent, UnknownNode)

VIRTUAL_ROOT_ID = 0
DEFAULT_ROOT_NAME = "ROOT"


class Node:
    """A person in the tree, identified by an opaque ID and carrying a display name

    IDs are compared by equality only, so 1 and "1" are different people.
    Links are stored as IDs: the parent ID (None if detached) and the ordered list
    of child IDs, in the order the children were attached."""

    def __init__(self, nid, name, parent_id=None, children=None):
        self._id = nid
        self.name = name
        self.parent_id = parent_id
        self.children = list(children) if children else []

    def id(self):
        return self._id

    def is_leaf(self):
        return False if self.children else True

    def to_record(self):
        return {'id': self._id, 'name': self.name, 'parentId': self.parent_id, 'children': list(self.children)}

    def __str__(self):
        if self.parent_id is not None:
            return "(%s, %s) => parent %s" % (self._id, self.name, self.parent_id)
        else:
            return "(%s, %s) => root" % (self._id, self.name)


class FamilyTree:
    """Container for the family tree

    Owns every node and enforces the structural constraints: globally unique IDs,
    consistent parent/child links, no cycles and a single virtual root that every
    other person hangs from. Operations either succeed completely or raise a
    TreeError before anything is changed. NOT thread safe."""

    def __init__(self, root_name=DEFAULT_ROOT_NAME):
        self._root_name = root_name
        self._nodes = {}
        self.reset()

    def reset(self):
        """Drops everybody, leaving only the virtual root"""

        self._nodes = {VIRTUAL_ROOT_ID: Node(VIRTUAL_ROOT_ID, self._root_name)}

    def __len__(self):
        return len(self._nodes)

    def __contains__(self, nid):
        return nid in self._nodes

    def root(self):
        return self._nodes[VIRTUAL_ROOT_ID]

    def lookup(self, nid):
        return self._nodes.get(nid)

    def all_nodes(self):
        return list(self._nodes.values())

    def _get(self, nid):
        node = self._nodes.get(nid)

        if node is None:
            raise UnknownNode(nid)

        return node

    def insert(self, nid, name, parent_id=VIRTUAL_ROOT_ID):
        """Adds a new person under an existing parent"""

        if nid in self._nodes:
            raise DuplicateId(nid)

        if parent_id not in self._nodes:
            raise UnknownNode(parent_id)

        self._nodes[nid] = Node(nid, name)
        self.attach(parent_id, nid)

    def rename(self, nid, name):
        self._get(nid).name = name

    def attach(self, parent_id, child_id):
        """Hangs the child (with its whole subtree) under the parent, appending it last

        If the child already has a parent it is detached from it first, which is what
        makes this double as a move. Fails if
         - either ID is not found
         - the child is the parent itself
         - the parent is inside the child's subtree (which would create a loop)"""

        parent = self._get(parent_id)
        child = self._get(child_id)

        if parent_id == child_id:
            raise SelfParent(child_id)

        if self.is_descendant(parent_id, child_id):
            raise CycleDetected(parent_id, child_id)

        if child.parent_id is not None:
            self._detach(child.parent_id, child_id)

        child.parent_id = parent_id
        parent.children.append(child_id)

    def move_subtree(self, nid, new_parent_id):
        self.attach(new_parent_id, nid)

    def delete_subtree(self, nid):
        """Deletes the person with the specified ID together with all of their descendants"""

        if nid == VIRTUAL_ROOT_ID:
            raise CannotDeleteRoot(nid)

        node = self._get(nid)

        if node.parent_id is not None:
            self._detach(node.parent_id, nid)

        queue = deque([nid])

        while queue:
            current = self._nodes.pop(queue.popleft(), None)

            if current is not None:
                queue.extend(current.children)

    def _detach(self, parent_id, child_id):
        parent = self._nodes.get(parent_id)
        child = self._get(child_id)

        if parent is not None and child_id in parent.children:
            parent.children.remove(child_id)

        if child.parent_id == parent_id:
            child.parent_id = None

    def is_descendant(self, nid, ancestor_id):
        """Tells whether nid is in the subtree rooted at ancestor_id (the node itself included)

        Searches downwards from the ancestor, so it only relies on the child lists."""

        self._get(nid)
        queue = deque([self._get(ancestor_id).id()])

        while queue:
            current = queue.popleft()

            if current == nid:
                return True

            queue.extend(self._nodes[current].children)

        return False

    def depth_first_order(self, start_id=VIRTUAL_ROOT_ID):
        """Pre-order IDs of the subtree: a node, then each child's subtree left to right"""

        self._get(start_id)
        result = []
        stack = [start_id]

        while stack:
            nid = stack.pop()
            result.append(nid)
            # reversed so that the leftmost child is popped first
            stack.extend(reversed(self._nodes[nid].children))

        return result

    def breadth_first_order(self, start_id=VIRTUAL_ROOT_ID):
        """Level-order IDs of the subtree, siblings in child order"""

        self._get(start_id)
        result = []
        queue = deque([start_id])

        while queue:
            nid = queue.popleft()
            result.append(nid)
            queue.extend(self._nodes[nid].children)

        return result

    def max_depth(self, start_id=VIRTUAL_ROOT_ID):
        """Number of levels in the subtree, counting the start node as level 1"""

        self._get(start_id)
        deepest = 1
        stack = [(start_id, 1)]

        while stack:
            nid, depth = stack.pop()
            deepest = max(deepest, depth)
            stack.extend((cid, depth + 1) for cid in self._nodes[nid].children)

        return deepest

    def count_descendants(self, nid):
        count = 0
        queue = deque(self._get(nid).children)

        while queue:
            count += 1
            queue.extend(self._nodes[queue.popleft()].children)

        return count

    def path_to_root(self, nid):
        """IDs from the node up to the virtual root, following parent links"""

        path = [self._get(nid).id()]
        node = self._nodes[nid]

        while node.parent_id is not None:
            path.append(node.parent_id)
            node = self._get(node.parent_id)

        return path

    def depth_of(self, nid):
        return len(self.path_to_root(nid))

    def find_by_name(self, name):
        return [nid for nid in self.depth_first_order() if self._nodes[nid].name == name]

    def query(self, ids=None, names=None, roots=None, min_depth=0, max_depth=0):
        """Queries the tree, always returning nodes in pre-order

        Parameters
        ----------
        ids: list of IDs (optional)
            Filter query by the list of IDs. Narrows the criteria if used together with `names`.
            Non-existent IDs are ignored.
            Takes precedence over `roots` if specified.
        names: list of names (optional)
            Behaves similarly to `ids`.
        roots: list of root IDs (optional)
            Query the subtrees of the specified nodes. The resulting lists are merged in the order
            their root IDs were specified. Ignores non-existent IDs (if none exist, the result is empty).
            Takes no effect if `ids` or `names` are specified.
        min_depth: minimum relative depth to include in the query result (optional)
            The subtree root itself is at depth 0. Ignored if `ids` or `names` are set.
        max_depth: maximum relative depth to include in the query result (optional)
            0 (the default) means no limit. Ignored if `ids` or `names` are set."""

        if min_depth and max_depth and max_depth < min_depth:
            return []

        if names:
            names = set(names)

        if ids:
            wanted = set(ids)
            result = [self._nodes[nid] for nid in self.depth_first_order() if nid in wanted]
            return result if not names else [n for n in result if n.name in names]
        elif names:
            return [self._nodes[nid] for nid in self.depth_first_order() if self._nodes[nid].name in names]

        if roots:
            roots = [nid for nid in OrderedDict.fromkeys(roots) if nid in self._nodes]
        else:
            roots = [VIRTUAL_ROOT_ID]

        min_depth = min_depth or 0
        result = []

        for root in roots:
            stack = [(root, 0)]

            while stack:
                nid, depth = stack.pop()

                if depth >= min_depth:
                    result.append(self._nodes[nid])

                if not max_depth or depth < max_depth:
                    stack.extend((cid, depth + 1) for cid in reversed(self._nodes[nid].children))

        return result

    def validate(self):
        """Checks that the links form a single tree hanging from the virtual root

        Raises InvariantViolation describing the first problem found. Safe to call on
        arbitrary (e.g. hand-edited) data: it never loops on cycles and never mutates."""

        root = self._nodes.get(VIRTUAL_ROOT_ID)

        if root is None:
            raise InvariantViolation("the virtual root %r is missing" % (VIRTUAL_ROOT_ID,))

        if root.parent_id is not None:
            raise InvariantViolation("the virtual root has parent %r" % (root.parent_id,))

        for nid, node in self._nodes.items():
            if nid != VIRTUAL_ROOT_ID:
                if node.parent_id is None:
                    raise InvariantViolation("node %r has no parent" % (nid,))

                parent = self._nodes.get(node.parent_id)

                if parent is None:
                    raise InvariantViolation("node %r has unknown parent %r" % (nid, node.parent_id))

                if parent.children.count(nid) != 1:
                    raise InvariantViolation("parent %r doesn't list %r exactly once" % (node.parent_id, nid))

            for cid in node.children:
                child = self._nodes.get(cid)

                if child is None:
                    raise InvariantViolation("node %r has unknown child %r" % (nid, cid))

                if child.parent_id != nid:
                    raise InvariantViolation("child %r of %r points to parent %r" % (cid, nid, child.parent_id))

        # with consistent links, anything unreachable from the root must sit on a cycle
        seen = set()
        queue = deque([VIRTUAL_ROOT_ID])

        while queue:
            nid = queue.popleft()

            if nid in seen:
                raise InvariantViolation("node %r is reachable twice" % (nid,))

            seen.add(nid)
            queue.extend(self._nodes[nid].children)

        unreachable = [nid for nid in self._nodes if nid not in seen]

        if unreachable:
            raise InvariantViolation("nodes not reachable from the root: %r" % (unreachable,))

    def serialize(self):
        return [node.to_record() for node in self._nodes.values()]

    @classmethod
    def deserialize(cls, records, root_name=DEFAULT_ROOT_NAME):
        """Rebuilds a tree from serialized records, trusting them as they are

        No structural checks are made here (see validate()); a virtual root is only
        synthesized if no record provides one."""

        tree = cls(root_name)
        tree._nodes = {}

        for record in records:
            tree._nodes[record['id']] = Node(record['id'], record['name'], record.get('parentId'),
                                             record.get('children'))

        if VIRTUAL_ROOT_ID not in tree._nodes:
            tree._nodes[VIRTUAL_ROOT_ID] = Node(VIRTUAL_ROOT_ID, root_name)

        return tree
