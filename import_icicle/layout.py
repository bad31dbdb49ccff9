"""
layout.py

Icicle layout: every module becomes a box whose width is proportional to
its cumulative time and whose row is its import depth.

    x ─────────────────────────────────────────────▶
    depth 0 │ a          │ c                           │
    depth 1              │ b        │ (slack)          │

Children are packed from the left edge of their parent in trace order.
The parent's self time, and any time not attributed to anything, stays as
empty space to the right of the children.
"""
import logging
from dataclasses import dataclass

from import_icicle.models import ImportTree, LayoutBox

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 1200.0
DEFAULT_ROW_HEIGHT = 20.0
DEFAULT_PRECISION = 3
DEFAULT_MIN_LABEL_WIDTH = 40.0


@dataclass(frozen=True)
class LayoutConfig:
    width: float = DEFAULT_WIDTH
    row_height: float = DEFAULT_ROW_HEIGHT
    precision: int = DEFAULT_PRECISION
    min_label_width: float = DEFAULT_MIN_LABEL_WIDTH

    def __post_init__(self):
        if self.width <= 0:
            raise ValueError("width must be positive")
        if self.row_height <= 0:
            raise ValueError("row_height must be positive")
        if self.precision < 0:
            raise ValueError("precision must not be negative")
        if self.min_label_width < 0:
            raise ValueError("min_label_width must not be negative")


def _fix(value: float, precision: int) -> float:
    # + 0.0 turns -0.0 into 0.0
    return round(value, precision) + 0.0


def _share(units: int, part: int, total: int) -> int:
    """units * part / total, rounded half up, in exact integer arithmetic."""
    return (2 * units * part + total) // (2 * total)


def _pack(children, left: int, right: int, total: int):
    """
    Yield (child, left, right, collapsed) for children laid side by side in
    [left, right], edges taken from prefix sums of cumulative time over total.
    Edges are integer units of the layout precision, so a child's width is
    exactly right - left and the last child of a full parent ends on `right`.
    """
    if total <= 0:
        for child in children:
            yield child, left, left, True
        return
    units = right - left
    before = 0
    for child in children:
        start = left + _share(units, before, total)
        before += child.cumulative_time
        end = left + _share(units, before, total)
        yield child, start, end, False


def layout_tree(tree: ImportTree, config: LayoutConfig = None) -> list[LayoutBox]:
    """
    Lay out every node of the tree (not the synthetic root).

    Boxes come out depth first, parents before children, siblings in trace
    order. Children of a zero-time node are collapsed to zero width and
    height at their parent's left edge, as are all of their descendants.

    Box edges, not widths, are rounded to `config.precision`: children never
    reach past their parent, and fill it exactly when it has no slack.
    """
    config = config or LayoutConfig()
    precision = config.precision
    scale = 10 ** precision
    boxes = []

    root = tree.root
    canvas = round(config.width * scale)
    stack = list(reversed(list(_pack(root.children, 0, canvas, root.children_time))))
    while stack:
        node, left, right, collapsed = stack.pop()
        height = 0.0 if collapsed else config.row_height
        boxes.append(LayoutBox(
            node_index=node.index,
            x=left / scale,
            y=_fix(node.depth * config.row_height, precision),
            width=(right - left) / scale,
            height=_fix(height, precision),
            depth=node.depth,
        ))
        if not node.children:
            continue
        if collapsed:
            placed = [(child, left, left, True) for child in node.children]
        else:
            span = node.span_time if node.cumulative_time > 0 else 0
            placed = list(_pack(node.children, left, right, span))
        stack.extend(reversed(placed))

    logger.debug("laid out %d boxes on a %.1f wide canvas", len(boxes), config.width)
    return boxes


def canvas_height(tree: ImportTree, config: LayoutConfig = None) -> float:
    config = config or LayoutConfig()
    return (tree.max_depth + 1) * config.row_height
