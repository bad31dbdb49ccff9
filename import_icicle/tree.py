"""
tree.py

Rebuild the import hierarchy from depth-annotated records.

The interpreter prints a module only once all of its own imports have
finished, so a trace lists children before their parent:

    import time:   100 |   100 | a
    import time:    50 |    50 |   b
    import time:    30 |   180 | c

Here `b` belongs to `c`. Walking the records backwards gives a pre-order
listing, which a stack of open nodes turns into a tree with a single
depth comparison per record.
"""
import logging

from import_icicle.errors import DepthSkipError, EmptyTrace, InconsistentRecord
from import_icicle.models import ROOT_NAME, ImportNode, ImportTree
from import_icicle.parser import INDENT_UNIT, parse_import_time

logger = logging.getLogger(__name__)

POSTORDER = "post"
PREORDER = "pre"

# The interpreter rounds every printed time up to the next microsecond, so
# self time plus the imports can exceed the cumulative time by one per import.
ROUNDING_US = 1


def _line_text(node: ImportNode) -> str:
    return f"{'  ' * node.depth}{node.name}"


def build_tree(records, order: str = POSTORDER) -> ImportTree:
    """
    Build an ImportTree from records in trace order.

    `order` says how the records list parents and children: "post" for
    interpreter output (children first), "pre" for parent-first lists.
    """
    if order not in (POSTORDER, PREORDER):
        raise ValueError(f"unknown record order {order!r}")

    root = ImportNode(ROOT_NAME, 0, 0, -1)
    nodes = [ImportNode.from_record(record, index) for index, record in enumerate(records)]
    walk = reversed(nodes) if order == POSTORDER else nodes

    stack = []
    for node in walk:
        while stack and stack[-1].depth >= node.depth:
            stack.pop()
        expected = stack[-1].depth + 1 if stack else 0
        if node.depth != expected:
            raise DepthSkipError(
                f"depth {node.depth} has no enclosing import at depth {node.depth - 1}",
                node.line_no,
                _line_text(node),
            )
        parent = stack[-1] if stack else root
        parent.children.append(node)
        stack.append(node)

    if order == POSTORDER:
        root.children.reverse()
        for node in nodes:
            node.children.reverse()

    for node in nodes:
        allowed = node.cumulative_time + ROUNDING_US * len(node.children)
        if node.self_time + node.children_time > allowed:
            raise InconsistentRecord(
                f"cumulative time {node.cumulative_time} is below self time {node.self_time} "
                f"plus imports {node.children_time}",
                node.line_no,
                _line_text(node),
            )
    root.cumulative_time = root.children_time

    logger.debug(
        "built import tree: %d nodes, %d top-level, total %dus",
        len(nodes), len(root.children), root.cumulative_time,
    )
    return ImportTree(root=root, nodes=nodes)


def load_tree(text: str, indent_unit: int = INDENT_UNIT, order: str = POSTORDER) -> ImportTree:
    """Parse a trace and build its tree, refusing traces without records."""
    records = parse_import_time(text, indent_unit=indent_unit)
    if not records:
        raise EmptyTrace("no import time records found")
    return build_tree(records, order=order)


def iter_preorder(node: ImportNode):
    """Yield node and its descendants, parents before children."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def iter_postorder(node: ImportNode):
    """Yield node and its descendants, children before parents."""
    stack = [(node, False)]
    while stack:
        current, expanded = stack.pop()
        if expanded:
            yield current
            continue
        stack.append((current, True))
        stack.extend((child, False) for child in reversed(current.children))
