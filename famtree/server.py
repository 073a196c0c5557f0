"""Line-oriented JSON front end for a FamilyTree

Every line on stdin is one request: a JSON object with a single key naming the
action, mapped to the request body, e.g. {"add": {"id": 1, "name": "Grandma", "parent": 0}}.
Every request gets exactly one JSON line back on stdout, {"ok": true, ...} on success
or {"ok": false, "error": "..."} on failure. Log output goes to stderr."""

import argparse
import json
import logging
import sys

from famtree import settings
from famtree.errors import RequestError, StorageError, TreeError
from famtree.logging_config import setup_logging
from famtree.render import labels, node_options, render_html, render_text
from famtree.store import TreeStore
from famtree.tree import VIRTUAL_ROOT_ID

logger = logging.getLogger(__name__)


def _check_id(attr, value):
    # bool is an int subclass and True == 1 as a dict key
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise RequestError("'%s' must be a string or an integer" % attr)

    return value


def _field(body, attr, default=None, required=True, kind='id'):
    value = body.get(attr)

    if isinstance(value, str):
        value = value.strip()

    if value is None or value == '':
        if required:
            raise RequestError("'%s' is required" % attr)
        return default

    if kind == 'text':
        if not isinstance(value, str):
            raise RequestError("'%s' must be a string" % attr)
        return value

    return _check_id(attr, value)


def _list(body, attr, kind='id'):
    values = body.get(attr)

    if values is None:
        return None

    if not isinstance(values, list):
        raise RequestError("'%s' must be a list" % attr)

    if kind == 'text':
        if not all(isinstance(v, str) for v in values):
            raise RequestError("'%s' must only hold strings" % attr)
        return values

    return [_check_id(attr, v) for v in values]


def _depth(body, attr):
    value = body.get(attr)

    if value is None:
        return 0

    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise RequestError("'%s' must be a non-negative integer" % attr)

    return value


def add_node(tree, body):
    nid, name = _field(body, 'id'), _field(body, 'name', kind='text')
    parent = _field(body, 'parent', VIRTUAL_ROOT_ID, required=False)
    tree.insert(nid, name, parent)
    return {'ok': True, 'message': "added '%s' (ID=%s) under %s" % (name, nid, parent)}


def rename_node(tree, body):
    nid, name = _field(body, 'id'), _field(body, 'name', kind='text')
    tree.rename(nid, name)
    return {'ok': True, 'message': "renamed %s to '%s'" % (nid, name)}


def attach_node(tree, body):
    parent, child = _field(body, 'parent'), _field(body, 'child')
    tree.attach(parent, child)
    return {'ok': True, 'message': "attached %s under %s" % (child, parent)}


def move_node(tree, body):
    child, new_parent = _field(body, 'child'), _field(body, 'newparent')
    tree.move_subtree(child, new_parent)
    return {'ok': True, 'message': "moved the subtree of %s under %s" % (child, new_parent)}


def delete_node(tree, body):
    nid = _field(body, 'id')
    tree.delete_subtree(nid)
    return {'ok': True, 'message': "deleted the subtree of %s" % (nid,)}


def reset_tree(tree, body):
    tree.reset()
    return {'ok': True, 'message': "tree reset"}


def _start(body):
    return _field(body, 'start', VIRTUAL_ROOT_ID, required=False)


def dfs(tree, body):
    ids = tree.depth_first_order(_start(body))
    return {'ok': True, 'ids': ids, 'labels': labels(tree, ids)}


def bfs(tree, body):
    ids = tree.breadth_first_order(_start(body))
    return {'ok': True, 'ids': ids, 'labels': labels(tree, ids)}


def max_depth(tree, body):
    return {'ok': True, 'max_depth': tree.max_depth(_start(body))}


def count_descendants(tree, body):
    return {'ok': True, 'count': tree.count_descendants(_field(body, 'id'))}


def lookup(tree, body):
    node = tree.lookup(_field(body, 'id'))
    return {'ok': True, 'node': node.to_record() if node else None}


def export(tree, body):
    return {'ok': True, 'nodes': tree.serialize()}


def find(tree, body):
    return {'ok': True, 'ids': tree.find_by_name(_field(body, 'name', kind='text'))}


def query(tree, body):
    nodes = tree.query(_list(body, 'ids'), _list(body, 'names', kind='text'), _list(body, 'root_ids'),
                       _depth(body, 'min_depth'), _depth(body, 'max_depth'))
    return {'ok': True, 'nodes': [n.to_record() for n in nodes]}


def path(tree, body):
    nid = _field(body, 'id')
    ids = tree.path_to_root(nid)
    return {'ok': True, 'ids': ids, 'labels': labels(tree, ids), 'depth': tree.depth_of(nid)}


def options(tree, body):
    return {'ok': True, 'options': [{'id': nid, 'label': text} for nid, text in node_options(tree)]}


def render(tree, body):
    fmt = _field(body, 'format', 'text', required=False, kind='text')

    if fmt == 'text':
        output = render_text(tree, _start(body))
    elif fmt == 'html':
        output = render_html(tree, _start(body))
    else:
        raise RequestError("unknown format '%s'" % fmt)

    return {'ok': True, 'output': output}


def summary(tree, body):
    return {
        'ok': True,
        'dfs': labels(tree, tree.depth_first_order()),
        'bfs': labels(tree, tree.breadth_first_order()),
        'max_depth': tree.max_depth(),
        'descendants': tree.count_descendants(VIRTUAL_ROOT_ID),
        'total': len(tree),
    }


MUTATIONS = {
    'add': add_node,
    'rename': rename_node,
    'attach': attach_node,
    'move': move_node,
    'delete': delete_node,
    'reset': reset_tree,
}

QUERIES = {
    'dfs': dfs,
    'bfs': bfs,
    'max_depth': max_depth,
    'count_descendants': count_descendants,
    'lookup': lookup,
    'export': export,
    'find': find,
    'query': query,
    'path': path,
    'options': options,
    'render': render,
    'summary': summary,
}


def handle(store, req):
    """Runs a single decoded request: load the tree, apply the action, save it if it changed"""

    if not isinstance(req, dict) or len(req) != 1:
        raise RequestError("a request must be an object with exactly one action")

    action, body = next(iter(req.items()))
    body = {} if body is None else body

    if not isinstance(body, dict):
        raise RequestError("the body of '%s' must be an object" % action)

    func = MUTATIONS.get(action) or QUERIES.get(action)

    if func is None:
        raise RequestError("unknown action '%s'" % action)

    # a reset must work even when the stored tree can't be loaded
    tree = store.fresh() if action == 'reset' else store.load()
    result = func(tree, body)

    if action in MUTATIONS:
        store.save(tree)

    return result


def serve(store, instream, outstream):
    while True:
        line = instream.readline()

        if not line:
            return

        line = line.strip()

        if not line:
            continue

        logger.info("request: %s", line)

        try:
            req = json.loads(line)
        except ValueError:
            logger.exception("invalid request format")
            continue

        try:
            result = handle(store, req)
        except (TreeError, StorageError, RequestError) as e:
            logger.warning("request failed: %s", e)
            result = {'ok': False, 'error': str(e)}
        except (KeyError, TypeError) as e:
            # e.g. dangling child IDs in a leniently loaded file
            logger.exception("request failed unexpectedly")
            result = {'ok': False, 'error': "can't process request: %r" % (e,)}

        outstream.write(json.dumps(result, ensure_ascii=False) + '\n')
        outstream.flush()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Family tree server speaking JSON lines on stdin/stdout")
    parser.add_argument('--data-file', default=settings.DATA_FILE,
                        help="JSON file holding the tree (default: keep it in memory)")
    parser.add_argument('--root-name', default=settings.ROOT_NAME, help="label of the virtual root")
    parser.add_argument('--lenient', action='store_true', default=not settings.STRICT_LOAD,
                        help="load unreadable or inconsistent data files instead of failing")
    parser.add_argument('--log-level', default=settings.LOG_LEVEL,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.log_level)
    store = TreeStore(args.data_file, args.root_name, strict=not args.lenient)
    serve(store, sys.stdin, sys.stdout)


if __name__ == '__main__':
    main()
