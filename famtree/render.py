"""Text and HTML views of a FamilyTree

All walks use an explicit stack, so arbitrarily deep trees render fine."""

from html import escape

from famtree.tree import VIRTUAL_ROOT_ID

ARROW = ' → '
DASH = ' — '


def label(node):
    return '%s(%s)' % (node.id(), node.name)


def labels(tree, ids):
    """Joins "id(name)" labels for the given IDs, skipping the ones that no longer exist"""

    return ARROW.join(label(node) for node in (tree.lookup(nid) for nid in ids) if node)


def node_options(tree):
    return [(node.id(), '%s%s%s' % (node.id(), DASH, node.name)) for node in tree.all_nodes()]


def _walk(tree, start_id):
    """Yields (node, depth) in pre-order, depth 0 being the start node"""

    stack = [(start_id, 0)]

    while stack:
        nid, depth = stack.pop()
        node = tree.lookup(nid)

        if node is None:
            continue

        yield node, depth
        stack.extend((cid, depth + 1) for cid in reversed(node.children))


def render_text(tree, start_id=VIRTUAL_ROOT_ID, indent='  '):
    return '\n'.join('%s%s%s%s' % (indent * depth, node.id(), DASH, node.name)
                     for node, depth in _walk(tree, start_id))


def render_html(tree, start_id=VIRTUAL_ROOT_ID):
    """Nested <ul> markup: each person is an <li>, followed by a <ul> of their children"""

    parts = []
    open_lists = 0
    previous_depth = 0

    for node, depth in _walk(tree, start_id):
        # close the lists of the subtrees we just left
        while previous_depth > depth:
            parts.append('</ul>')
            open_lists -= 1
            previous_depth -= 1

        parts.append('<li><strong>%s</strong>%s%s</li>' % (escape(str(node.id())), DASH, escape(node.name)))

        if not node.is_leaf():
            parts.append('<ul>')
            open_lists += 1
            previous_depth = depth + 1
        else:
            previous_depth = depth

    parts.extend(['</ul>'] * open_lists)
    return '<ul>%s</ul>' % ''.join(parts)
