"""
Prefix tree over dotted value paths.

Every node owns its children through a dict keyed by segment name. The root
stands for the empty path. Both the declared values of a chart and the values
referenced by its templates are held in one of these trees; the unused-value
resolver walks the two side by side.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from .node_types import Segments, split_path


@dataclass
class PathTree:
    children: Dict[str, "PathTree"] = field(default_factory=dict)

    def insert(self, path: Segments) -> None:
        """Add ``path`` below this node, creating missing segments.

        Inserting an existing path (or an empty one) leaves the tree unchanged.
        """
        node = self
        for segment in path:
            child = node.children.get(segment)
            if child is None:
                child = PathTree()
                node.children[segment] = child
            node = child

    def has_exact_path(self, path: Segments) -> bool:
        """True if a walk from this node consumes every segment of ``path``.

        The empty path is always present. Says nothing about descendants.
        """
        return self.find(path) is not None

    def find(self, path: Segments) -> Optional["PathTree"]:
        node = self
        for segment in path:
            node = node.children.get(segment)
            if node is None:
                return None
        return node

    def child(self, segment: str) -> Optional["PathTree"]:
        return self.children.get(segment)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def iter_paths(self, prefix: str = "") -> Iterator[str]:
        """Yield the dotted path of every node below this one, pre-order."""
        for segment, child in self.children.items():
            full_key = f"{prefix}.{segment}" if prefix else segment
            yield full_key
            yield from child.iter_paths(full_key)

    def __contains__(self, dotted: object) -> bool:
        if not isinstance(dotted, str):
            return False
        return self.has_exact_path(split_path(dotted))

    def __len__(self) -> int:
        return sum(1 + len(child) for child in self.children.values())

    def __repr__(self) -> str:
        return f"PathTree({list(self.iter_paths())!r})"


def merge_trees(base: PathTree, override: PathTree) -> PathTree:
    """Deep-merge ``override`` into ``base`` and return ``base``.

    Segments only present in the override are attached wholesale (the override
    subtree is moved, not copied, so do not keep using ``override``). Segments
    present in both are merged recursively. Only structure is compared, so a
    leaf in one tree and a parent in the other simply combine.
    """
    for segment, override_child in override.children.items():
        base_child = base.children.get(segment)
        if base_child is None:
            base.children[segment] = override_child
        else:
            merge_trees(base_child, override_child)
    return base

