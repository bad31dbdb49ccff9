"""
view_tree.py

Render an import tree as a collapsible tree in your terminal using Rich,
with human-friendly time units. Modules keep their trace order.
"""

from rich.markup import escape
from rich.tree import Tree

from import_icicle.models import ImportNode, ImportTree


def format_time(us: int) -> str:
    """Convert microseconds to a human-friendly string."""
    if us >= 1_000_000:
        return f"{us / 1_000_000:.2f}s"
    elif us >= 1_000:
        return f"{us / 1_000:.2f}ms"
    else:
        return f"{us}μs"


def render(node: ImportNode, tree: Tree, total_time: int, min_us: int = 0):
    for child in node.children:
        dur = child.cumulative_time
        if dur < min_us:
            continue
        pct = dur / total_time * 100 if total_time else 0.0
        human = format_time(dur)
        label = f"[bold]{escape(child.name)}[/] • {human} ({pct:.1f}%)"
        if child.children:
            label += f" [dim]self {format_time(child.self_time)}[/]"
        branch = tree.add(label)
        render(child, branch, total_time, min_us)


def build_console_tree(import_tree: ImportTree, min_us: int = 0) -> Tree:
    total = import_tree.total_time
    console_tree = Tree(f"[b]root[/] • {format_time(total)} (100%)")
    render(import_tree.root, console_tree, total, min_us)
    return console_tree
