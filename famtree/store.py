import json
import logging
import os
import tempfile

from famtree.errors import InvariantViolation, StorageError
from famtree.tree import DEFAULT_ROOT_NAME, FamilyTree

logger = logging.getLogger(__name__)


class TreeStore:
    """Loads and saves a FamilyTree as a JSON list of node records

    Without a path the tree simply lives in memory between requests. With a path
    every load reads the file back, so callers follow a load, mutate, save cycle.

    In strict mode (the default) a file that can't be parsed, or whose records don't
    form a valid tree, raises. In lenient mode an unparsable file yields a fresh tree
    and a structurally broken one is loaded anyway; both are logged as warnings."""

    def __init__(self, path=None, root_name=DEFAULT_ROOT_NAME, strict=True):
        self.path = path
        self.root_name = root_name
        self.strict = strict
        self._tree = None

    def fresh(self):
        return FamilyTree(self.root_name)

    def load(self):
        if self.path is None:
            if self._tree is None:
                self._tree = self.fresh()
            return self._tree

        if not os.path.exists(self.path):
            logger.debug("%s doesn't exist yet, starting with an empty tree", self.path)
            return self.fresh()

        try:
            with open(self.path, encoding='utf-8') as f:
                records = json.load(f)

            if not isinstance(records, list):
                raise StorageError("%s doesn't hold a list of records" % self.path)

            tree = FamilyTree.deserialize(records, self.root_name)
        except (ValueError, KeyError, TypeError, StorageError) as e:
            if self.strict:
                if isinstance(e, StorageError):
                    raise
                raise StorageError("can't read the tree from %s: %s" % (self.path, e)) from e

            logger.warning("can't read the tree from %s (%s), starting over", self.path, e)
            return self.fresh()

        try:
            try:
                tree.validate()
            except TypeError as e:
                # unhashable IDs in child lists
                raise InvariantViolation("malformed records in %s: %s" % (self.path, e)) from e
        except InvariantViolation as e:
            if self.strict:
                raise
            logger.warning("loaded a broken tree from %s: %s", self.path, e)

        logger.debug("loaded %d nodes from %s", len(tree), self.path)
        return tree

    def save(self, tree):
        if self.path is None:
            self._tree = tree
            return

        directory = os.path.dirname(os.path.abspath(self.path))
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.famtree-', suffix='.json')

        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(tree.serialize(), f, indent=4, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise

        logger.debug("saved %d nodes to %s", len(tree), self.path)
