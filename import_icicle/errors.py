"""
errors.py

Structured failures raised while reading an import-time trace.
Every error carries the 1-based line number and the raw line text
so the CLI can point at the offending input.
"""
from typing import Optional


class ImportTraceError(Exception):
    """Base class for parse and tree reconstruction failures."""

    kind = "error"

    def __init__(self, message: str, line_no: Optional[int] = None, text: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.line_no = line_no
        self.text = text

    def __str__(self):
        if self.line_no is None:
            return self.message
        if self.text is None:
            return f"line {self.line_no}: {self.message}"
        return f"line {self.line_no}: {self.message}: {self.text!r}"


class MalformedLine(ImportTraceError):
    """A labelled line does not have the expected field shape."""

    kind = "malformed-line"


class InconsistentRecord(ImportTraceError):
    """Timings contradict each other (cumulative below self, or below children)."""

    kind = "inconsistent-record"


class DepthSkipError(ImportTraceError):
    """A record is nested deeper than any enclosing import allows."""

    kind = "depth-skip"


class EmptyTrace(ImportTraceError):
    """The input holds no import-time records at all."""

    kind = "empty-trace"
