"""Tests for the icicle layout geometry."""
import itertools
import math

import pytest

from import_icicle.layout import LayoutConfig, canvas_height, layout_tree
from import_icicle.models import TimingRecord
from import_icicle.tree import build_tree, load_tree


def _by_name(tree, boxes):
    return {tree.nodes[box.node_index].name: box for box in boxes}


def test_example_geometry(example_tree):
    """Test the three-module example on a 1000 wide canvas

    Expecting widths proportional to cumulative time and trailing slack inside c
    """
    boxes = layout_tree(example_tree, LayoutConfig(width=1000, row_height=20))
    assert [example_tree.nodes[b.node_index].name for b in boxes] == ["a", "c", "b"]
    by_name = _by_name(example_tree, boxes)

    a, c, b = by_name["a"], by_name["c"], by_name["b"]
    assert (a.x, a.y, a.width, a.height) == (0.0, 0.0, 357.143, 20.0)
    assert (c.x, c.y, c.width, c.height) == (357.143, 0.0, 642.857, 20.0)
    assert (b.x, b.y, b.width, b.height) == (357.143, 20.0, 178.571, 20.0)
    slack = c.x + c.width - (b.x + b.width)
    assert example_tree.root.children[1].slack_time == 130
    assert slack == pytest.approx(642.857 * 130 / 180, abs=1e-2)


def test_one_box_per_node(startup_tree):
    boxes = layout_tree(startup_tree)
    assert sorted(b.node_index for b in boxes) == list(range(len(startup_tree.nodes)))


def test_rows_follow_depth(startup_tree):
    config = LayoutConfig(row_height=15)
    for box in layout_tree(startup_tree, config):
        node = startup_tree.nodes[box.node_index]
        assert box.depth == node.depth
        assert box.y == node.depth * 15
        assert box.height == 15


def _units(value, precision=3):
    """A fixed-precision coordinate as an exact integer count of 10**-precision."""
    return round(value * 10 ** precision)


def _full_parent_tree(sizes, sibling=1):
    """A parent with no self time whose imports fill it, next to one more module."""
    records = [TimingRecord(0, sum(sizes), 0, "p", 1)]
    records += [TimingRecord(size, size, 1, f"c{i}", i + 2) for i, size in enumerate(sizes)]
    records.append(TimingRecord(sibling, sibling, 0, "q", len(sizes) + 2))
    return build_tree(records, order="pre")


def test_top_level_fills_canvas(startup_tree):
    config = LayoutConfig(width=800)
    boxes = layout_tree(startup_tree, config)
    top = [b for b in boxes if b.depth == 0]
    assert top[0].x == 0.0
    assert sum(_units(b.width) for b in top) == _units(800)
    assert _units(top[-1].x) + _units(top[-1].width) == _units(800)
    for left, right in zip(top, top[1:]):
        assert _units(right.x) == _units(left.x) + _units(left.width)


def test_width_conservation(startup_tree):
    """Test that children never spill out of their parent

    Expecting the children to end at or before the parent's right edge and
    the remaining space to match width * slack_time / span_time
    """
    boxes = layout_tree(startup_tree, LayoutConfig(width=1000))
    box_of = {b.node_index: b for b in boxes}
    for node in startup_tree.nodes:
        if not node.children:
            continue
        parent = box_of[node.index]
        children = [box_of[child.index] for child in node.children]
        total = sum(_units(b.width) for b in children)
        assert total <= _units(parent.width)
        assert _units(children[-1].x) + _units(children[-1].width) <= _units(parent.x) + _units(parent.width)
        expected_slack = parent.width * node.slack_time / node.span_time
        assert (_units(parent.width) - total) / 1000 == pytest.approx(expected_slack, abs=2e-3)
        assert children[0].x == parent.x
        for left, right in zip(children, children[1:]):
            assert _units(right.x) == _units(left.x) + _units(left.width)


def test_full_parent_is_filled_exactly():
    """Test a parent with no self time on the default canvas

    Expecting its imports to cover it exactly, ending on its right edge
    """
    tree = _full_parent_tree([1, 1, 4])
    config = LayoutConfig(width=1200)
    by_name = _by_name(tree, layout_tree(tree, config))
    parent, q = by_name["p"], by_name["q"]
    children = [by_name[f"c{i}"] for i in range(3)]
    assert parent.width == 1028.571
    assert sum(_units(b.width) for b in children) == _units(parent.width)
    assert round(sum(b.width for b in children), config.precision) == parent.width
    last = children[-1]
    assert _units(last.x) + _units(last.width) == _units(parent.x) + _units(parent.width)
    assert round(last.x + last.width, config.precision) <= parent.x + parent.width
    assert round(q.x + q.width, config.precision) == config.width


@pytest.mark.parametrize("width", [1.0, 997.0, 1200.0])
def test_full_parents_never_overflow(width):
    config = LayoutConfig(width=width)
    for sizes in itertools.product(range(1, 8), repeat=3):
        tree = _full_parent_tree(list(sizes), sibling=sizes[0])
        by_name = _by_name(tree, layout_tree(tree, config))
        parent = by_name["p"]
        children = [by_name[f"c{i}"] for i in range(3)]
        assert sum(_units(b.width) for b in children) == _units(parent.width), sizes
        assert _units(parent.width) + _units(by_name["q"].width) == _units(width), sizes


def test_top_level_never_overflows_canvas():
    config = LayoutConfig(width=1.0)
    for sizes in itertools.product(range(1, 12), repeat=3):
        tree = build_tree([TimingRecord(s, s, 0, f"m{i}", i + 1) for i, s in enumerate(sizes)], order="pre")
        boxes = layout_tree(tree, config)
        assert sum(_units(b.width) for b in boxes) == _units(1.0), sizes
        assert round(sum(b.width for b in boxes), config.precision) == 1.0, sizes


def test_children_in_trace_order(startup_tree):
    boxes = layout_tree(startup_tree)
    by_name = _by_name(startup_tree, boxes)
    assert by_name["codecs"].x < by_name["encodings.aliases"].x
    assert by_name["_io"].x < by_name["marshal"].x < by_name["posix"].x


def test_all_zero_trace():
    """Test a trace where nothing took any time

    Expecting zero-sized boxes with finite coordinates
    """
    tree = load_tree(
        "import time: 0 | 0 |   child\n"
        "import time: 0 | 0 | parent\n"
        "import time: 0 | 0 | other\n"
    )
    boxes = layout_tree(tree)
    assert len(boxes) == 3
    for box in boxes:
        assert box.width == 0.0
        assert box.height == 0.0
        assert not box.visible
        for value in (box.x, box.y, box.width, box.height):
            assert math.isfinite(value)


def test_zero_time_subtree_collapses():
    tree = load_tree(
        "import time: 0 | 0 |     grandchild\n"
        "import time: 0 | 0 |   child\n"
        "import time: 0 | 0 | zero\n"
        "import time: 100 | 100 | real\n"
    )
    boxes = layout_tree(tree, LayoutConfig(width=500, row_height=10))
    by_name = _by_name(tree, boxes)
    zero = by_name["zero"]
    assert (zero.x, zero.width, zero.height) == (0.0, 0.0, 10.0)
    for name in ("child", "grandchild"):
        box = by_name[name]
        assert (box.x, box.width, box.height) == (zero.x, 0.0, 0.0)
        assert math.isfinite(box.y)
    assert (by_name["real"].x, by_name["real"].width) == (0.0, 500.0)


def test_layout_is_deterministic(startup_trace):
    first = layout_tree(load_tree(startup_trace), LayoutConfig(width=997, row_height=13))
    second = layout_tree(load_tree(startup_trace), LayoutConfig(width=997, row_height=13))
    assert first == second
    assert repr(first) == repr(second)


def test_precision(startup_tree):
    boxes = layout_tree(startup_tree, LayoutConfig(width=1000, precision=1))
    for box in boxes:
        for value in (box.x, box.width):
            assert value == round(value, 1)


def test_no_negative_zero():
    tree = load_tree("import time: 0 | 0 | a\n")
    box = layout_tree(tree)[0]
    assert math.copysign(1.0, box.x) == 1.0
    assert math.copysign(1.0, box.width) == 1.0


@pytest.mark.parametrize("kwargs", [
    {"width": 0},
    {"width": -10},
    {"row_height": 0},
    {"precision": -1},
    {"min_label_width": -1},
])
def test_invalid_config(kwargs):
    with pytest.raises(ValueError):
        LayoutConfig(**kwargs)


def test_canvas_height(startup_tree, example_tree):
    config = LayoutConfig(row_height=20)
    assert canvas_height(startup_tree, config) == 60
    assert canvas_height(example_tree, config) == 40


def test_rounding_overflow_stays_inside_parent():
    tree = load_tree(
        "import time: 4 | 4 |   b\n"
        "import time: 3 | 3 |   c\n"
        "import time: 1 | 6 | a\n"
        "import time: 6 | 6 | d\n"
    )
    boxes = layout_tree(tree, LayoutConfig(width=120))
    by_name = _by_name(tree, boxes)
    a, b, c = by_name["a"], by_name["b"], by_name["c"]
    assert a.width == 60.0
    assert b.x == a.x
    assert _units(b.width) + _units(c.width) == _units(a.width)
    assert _units(c.x) + _units(c.width) == _units(a.x) + _units(a.width)
