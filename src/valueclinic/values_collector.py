"""
Turn a parsed values document into a tree of declared value paths.
"""
from __future__ import annotations

import logging
from typing import Optional

from .node_types import Document, Value, split_path
from .path_tree import PathTree

logger = logging.getLogger(__name__)


def is_empty_value(value: Value) -> bool:
    """Empty defaults are never reported: "", False, [] and {}.

    ``0``, ``None`` and ``True`` are real values. bool is checked before any
    numeric handling since ``False == 0``.
    """
    if isinstance(value, bool):
        return value is False
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    if isinstance(value, dict):
        return len(value) == 0
    return False


def collect_declared_paths(
    document: Document, tree: PathTree, prefix: str = ""
) -> PathTree:
    """Insert every non-empty key of ``document`` into ``tree``.

    Intermediate mappings and their leaves both become nodes. Empty values are
    skipped together with everything below them. The document is not modified.
    """
    for key, value in document.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if is_empty_value(value):
            logger.debug("skipping empty value %s", full_key)
            continue
        tree.insert(split_path(full_key))
        if isinstance(value, dict):
            collect_declared_paths(value, tree, full_key)
    return tree


def build_values_tree(document: Optional[Document]) -> PathTree:
    root = PathTree()
    if document:
        collect_declared_paths(document, root)
    return root
