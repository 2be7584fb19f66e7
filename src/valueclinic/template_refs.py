"""
Extract ``.Values`` references from chart template text.

Only the literal ``{{ .Values.a.b }}`` form is recognised. Conditionals,
``range`` blocks, ``toYaml``/``include`` pipelines, ``{{-`` trim markers and
computed keys are not parsed, so values used only through them look unused.
"""
from __future__ import annotations

import re
from typing import Iterable, List

from .node_types import split_path
from .path_tree import PathTree

VALUES_REF_RE = re.compile(r"\{\{\s*\.Values\.([\w.]+)\s*\}\}", re.ASCII)


def extract_value_paths(template_contents: Iterable[str]) -> List[str]:
    """Return every referenced dotted path, in order, duplicates included."""
    paths: List[str] = []
    for content in template_contents:
        paths.extend(VALUES_REF_RE.findall(content))
    return paths


def build_reference_tree(used_values: Iterable[str]) -> PathTree:
    root = PathTree()
    for dotted in used_values:
        root.insert(split_path(dotted))
    return root
