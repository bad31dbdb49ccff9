"""
models.py

Data types shared by the parser, the tree builder and the layout engine.
All times are integer microseconds, as printed by `-X importtime`.
"""
from dataclasses import dataclass, field

ROOT_NAME = "<root>"


@dataclass(frozen=True)
class TimingRecord:
    self_time: int
    cumulative_time: int
    depth: int
    name: str
    line_no: int = 0


@dataclass(eq=False)
class ImportNode:
    """
    One imported module. Children are owned by their parent and stay in the
    order they first appeared in the trace.
    """

    name: str
    self_time: int
    cumulative_time: int
    depth: int
    index: int = -1
    line_no: int = 0
    children: list = field(default_factory=list)

    @classmethod
    def from_record(cls, record: TimingRecord, index: int) -> "ImportNode":
        return cls(
            name=record.name,
            self_time=record.self_time,
            cumulative_time=record.cumulative_time,
            depth=record.depth,
            index=index,
            line_no=record.line_no,
        )

    @property
    def children_time(self) -> int:
        return sum(child.cumulative_time for child in self.children)

    @property
    def span_time(self) -> int:
        """Time the node spans in the layout, never less than its children."""
        return max(self.cumulative_time, self.children_time)

    @property
    def slack_time(self) -> int:
        """Part of the span not covered by children: self time plus any remainder."""
        return self.span_time - self.children_time

    @property
    def remainder(self) -> int:
        """Cumulative time explained neither by self time nor by children."""
        return max(0, self.cumulative_time - self.self_time - self.children_time)


@dataclass(eq=False)
class ImportTree:
    """A synthetic root plus a flat node table indexed by input position."""

    root: ImportNode
    nodes: list

    @property
    def total_time(self) -> int:
        return self.root.cumulative_time

    @property
    def max_depth(self) -> int:
        return max((node.depth for node in self.nodes), default=-1)

    def percent_of_total(self, node: ImportNode) -> float:
        total = self.total_time
        if total <= 0:
            return 0.0
        return node.cumulative_time / total * 100


@dataclass(frozen=True)
class LayoutBox:
    node_index: int
    x: float
    y: float
    width: float
    height: float
    depth: int

    @property
    def visible(self) -> bool:
        return self.width > 0 and self.height > 0
