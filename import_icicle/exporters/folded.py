"""
folded.py

Emit an import tree as FlameGraph-style folded stacks:

    encodings;codecs 512

Each line carries the self time of the last module on the stack, in
microseconds. Load the result into Speedscope via "Import" → "Text (FlameGraph)".
"""

from import_icicle.models import ImportNode, ImportTree


def build_path(node: ImportNode, parents: dict):
    path = []
    current = node
    while current is not None:
        path.append(current.name)
        current = parents.get(current.index)
    return list(reversed(path))


def folded_lines(tree: ImportTree, min_us: int = 1):
    """
    For each module, yields:
      top;child;...;module <self_us>
    """
    parents = {}
    for node in tree.nodes:
        for child in node.children:
            parents[child.index] = node
    for node in tree.nodes:
        if node.self_time < min_us:
            continue
        stack = build_path(node, parents)
        yield f"{';'.join(stack)} {node.self_time}"


def export_folded(tree: ImportTree, min_us: int = 1) -> str:
    lines = list(folded_lines(tree, min_us=min_us))
    return "\n".join(lines) + "\n" if lines else ""
