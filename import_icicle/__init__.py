"""
import_icicle

Turn CPython import-time traces into icicle diagrams.
"""

from import_icicle.errors import (
    DepthSkipError,
    EmptyTrace,
    ImportTraceError,
    InconsistentRecord,
    MalformedLine,
)
from import_icicle.layout import LayoutConfig, layout_tree
from import_icicle.models import ImportNode, ImportTree, LayoutBox, TimingRecord
from import_icicle.parser import parse_import_time
from import_icicle.tree import build_tree, load_tree

__version__ = "0.1.0"

__all__ = [
    "DepthSkipError",
    "EmptyTrace",
    "ImportNode",
    "ImportTraceError",
    "ImportTree",
    "InconsistentRecord",
    "LayoutBox",
    "LayoutConfig",
    "MalformedLine",
    "TimingRecord",
    "build_tree",
    "layout_tree",
    "load_tree",
    "parse_import_time",
]
