"""Shared fixtures: captured import-time traces."""
import pytest

from import_icicle.tree import load_tree

# Shaped like `python -X importtime` output, children printed before their parent.
STARTUP_TRACE = """\
import time: self [us] | cumulative | imported package
import time:       318 |        318 |   _io
import time:        54 |         54 |   marshal
import time:       412 |        412 |   posix
import time:      1014 |       1798 | _frozen_importlib_external
import time:       120 |        120 |   time
import time:       305 |        425 | zipimport
import time:        60 |         60 |     _codecs
import time:       623 |        683 |   codecs
import time:       450 |        450 |   encodings.aliases
import time:       900 |       2033 | encodings
"""

EXAMPLE_TRACE = """\
import time:   100 |   100 |   a
import time:    50 |    50 |     b
import time:    30 |   180 |   c
"""


@pytest.fixture
def startup_trace():
    return STARTUP_TRACE


@pytest.fixture
def example_trace():
    return EXAMPLE_TRACE


@pytest.fixture
def startup_tree():
    return load_tree(STARTUP_TRACE)


@pytest.fixture
def example_tree():
    return load_tree(EXAMPLE_TRACE)


@pytest.fixture
def trace_file(tmp_path):
    path = tmp_path / "trace.txt"
    path.write_text(STARTUP_TRACE)
    return path
