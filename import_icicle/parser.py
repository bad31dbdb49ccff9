"""
parser.py

Read the text CPython prints to stderr under `-X importtime`:

    import time: self [us] | cumulative | imported package
    import time:       318 |        318 |   _io
    import time:      1207 |       1525 | io

and turn every timing line into a TimingRecord. Anything that is not a
labelled line (program output, warnings, tracebacks) is skipped.
"""
import logging
import re

from import_icicle.errors import InconsistentRecord, MalformedLine
from import_icicle.models import TimingRecord

logger = logging.getLogger(__name__)

LABEL = "import time:"
HEADER_MARKER = "self [us]"
INDENT_UNIT = 2

_INTEGER = re.compile(r"[0-9]+")
_NEGATIVE = re.compile(r"-[0-9]+")


def _parse_time(field: str, what: str, line_no: int, line: str) -> int:
    value = field.strip()
    if _NEGATIVE.fullmatch(value):
        raise MalformedLine(f"negative {what} time", line_no, line)
    if not _INTEGER.fullmatch(value):
        raise MalformedLine(f"{what} time is not an integer", line_no, line)
    return int(value)


def _split_name(field: str, indent_unit: int, line_no: int, line: str):
    """Return (depth, name) from the module column, keeping the indentation."""
    field = field.rstrip()
    # the first space belongs to the "| " separator
    if field.startswith(" "):
        field = field[1:]
    name = field.lstrip(" ")
    indent = len(field) - len(name)
    if name[:1].isspace():
        raise MalformedLine("indentation must use spaces only", line_no, line)
    if not name:
        raise MalformedLine("empty module name", line_no, line)
    if indent % indent_unit:
        raise MalformedLine(
            f"indentation of {indent} spaces is not a multiple of {indent_unit}", line_no, line
        )
    return indent // indent_unit, name


def parse_line(line: str, line_no: int, indent_unit: int = INDENT_UNIT, label: str = LABEL):
    """
    Parse one line. Returns None for lines that carry no record, raises
    MalformedLine or InconsistentRecord for labelled lines that are broken.
    """
    stripped = line.strip()
    if not stripped.startswith(label):
        return None
    body = line.lstrip()[len(label):]
    if HEADER_MARKER in body:
        return None
    fields = body.split("|", 2)
    if len(fields) != 3:
        raise MalformedLine("expected 'self | cumulative | name'", line_no, stripped)
    self_time = _parse_time(fields[0], "self", line_no, stripped)
    cumulative_time = _parse_time(fields[1], "cumulative", line_no, stripped)
    depth, name = _split_name(fields[2], indent_unit, line_no, stripped)
    if cumulative_time < self_time:
        raise InconsistentRecord(
            f"cumulative time {cumulative_time} is below self time {self_time}", line_no, stripped
        )
    return TimingRecord(self_time, cumulative_time, depth, name, line_no)


def parse_import_time(text: str, indent_unit: int = INDENT_UNIT, label: str = LABEL) -> list[TimingRecord]:
    """
    Parse a whole trace, preserving input order. The first broken line
    aborts the parse.

    Depths are made relative to the shallowest record, so a trace whose
    top level is uniformly indented still starts at depth 0.
    """
    if indent_unit < 1:
        raise ValueError("indent_unit must be a positive integer")
    records = []
    skipped = 0
    for line_no, line in enumerate(text.splitlines(), start=1):
        record = parse_line(line, line_no, indent_unit, label)
        if record is None:
            skipped += 1
            continue
        records.append(record)

    base = min((record.depth for record in records), default=0)
    if base:
        logger.debug("shifting record depths by %d to start at 0", base)
        records = [
            TimingRecord(r.self_time, r.cumulative_time, r.depth - base, r.name, r.line_no)
            for r in records
        ]
    logger.debug("parsed %d import records, skipped %d lines", len(records), skipped)
    return records
