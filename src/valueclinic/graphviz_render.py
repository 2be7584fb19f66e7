from __future__ import annotations

from typing import Dict, Optional, Tuple

from graphviz import Digraph
from graphviz.backend import ExecutableNotFound

from .path_tree import PathTree

USED = "used"
UNUSED = "unused"
SKIPPED = "skipped"

_COLORS = {
    USED: "#4CAF50",  # green
    UNUSED: "#F44336",  # red
    SKIPPED: "#BDBDBD",  # grey
}


def classify_nodes(
    values_tree: PathTree, used_tree: Optional[PathTree], prefix: str
) -> Dict[str, str]:
    """Map every declared dotted path to used / unused / skipped.

    Mirrors the resolver: a parent without a matching reference and everything
    below it is "skipped", a leaf without one is "unused".
    """
    status: Dict[str, str] = {}
    for key, child in values_tree.children.items():
        full_key = f"{prefix}.{key}"
        used_child = used_tree.child(key) if used_tree is not None else None
        if used_child is not None:
            status[full_key] = USED
        elif child.is_leaf and used_tree is not None:
            status[full_key] = UNUSED
        else:
            status[full_key] = SKIPPED
        status.update(classify_nodes(child, used_child, full_key))
    return status


def _get_short_name(path: str) -> str:
    return path.rsplit(".", 1)[-1] if path else "root"


def render_values_tree(
    values_tree: PathTree,
    used_tree: PathTree,
    output_base: str,
    fmt: str = "svg",
    prefix: str = ".Values",
) -> Tuple[str, str]:
    """Render the declared values as a containment tree colored by usage.

    Always saves ``<output_base>.dot``. The image is rendered only when the
    Graphviz ``dot`` executable is installed; otherwise its path is "".
    """
    status = classify_nodes(values_tree, used_tree, prefix)
    counts = {s: sum(1 for v in status.values() if v == s) for s in (USED, UNUSED, SKIPPED)}

    dot = Digraph(
        "values_tree",
        graph_attr={
            "rankdir": "LR",
            "splines": "spline",
            "label": f"Values usage (used {counts[USED]}, unused {counts[UNUSED]}, skipped {counts[SKIPPED]})",
            "labelloc": "t",
        },
        node_attr={"shape": "box", "style": "rounded,filled", "fontname": "Helvetica"},
        edge_attr={"arrowhead": "none"},
    )
    dot.node(prefix, label=prefix, fillcolor="#FFFFFF")

    def walk(node: PathTree, parent: str) -> None:
        for key, child in node.children.items():
            full_key = f"{parent}.{key}"
            dot.node(
                full_key,
                label=_get_short_name(full_key),
                fillcolor=_COLORS[status[full_key]],
                tooltip=full_key,
            )
            dot.edge(parent, full_key, color="#DDDDDD")
            walk(child, full_key)

    walk(values_tree, prefix)

    dot_path = f"{output_base}.dot"
    image_path = f"{output_base}.{fmt}"
    dot.save(dot_path)
    try:
        dot.render(output_base, format=fmt, cleanup=True)
    except ExecutableNotFound:
        image_path = ""
    return dot_path, image_path
