"""
graph_json.py

Describe a laid-out import tree as plain data, ready for json.dumps.
"""

from import_icicle.layout import LayoutConfig, canvas_height
from import_icicle.models import ImportTree, LayoutBox

DEFAULT_TITLE = "Python import time"


def box_record(tree: ImportTree, box: LayoutBox) -> dict:
    """Everything a renderer needs to know about one box."""
    node = tree.nodes[box.node_index]
    return {
        "name": node.name,
        "self_us": node.self_time,
        "cumulative_us": node.cumulative_time,
        "percent": round(tree.percent_of_total(node), 3),
        "depth": box.depth,
        "x": box.x,
        "y": box.y,
        "width": box.width,
        "height": box.height,
        "visible": box.visible,
    }


def build_graph(tree: ImportTree, boxes, config: LayoutConfig = None, title: str = DEFAULT_TITLE) -> dict:
    config = config or LayoutConfig()
    total = tree.total_time
    return {
        "meta": {
            "title": title,
            "total_us": total,
            "total_ms": total / 1000,
            "width": config.width,
            "height": canvas_height(tree, config),
            "row_height": config.row_height,
        },
        "boxes": [box_record(tree, box) for box in boxes],
    }


def records_json(records) -> dict:
    """Plain-data form of parsed records, for the `parse` command."""
    return {
        "records": [
            {
                "name": record.name,
                "self_us": record.self_time,
                "cumulative_us": record.cumulative_time,
                "depth": record.depth,
                "line": record.line_no,
            }
            for record in records
        ]
    }
