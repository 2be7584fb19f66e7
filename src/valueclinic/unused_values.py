"""
Unused values analysis: compare declared values against template references.

The resolver walks the declared tree and the reference tree together:
 - a declared leaf with no matching reference is unused;
 - a declared parent with no matching reference is skipped with its whole
   subtree, on the assumption that the map is injected as one unit
   (``toYaml .Values.resources``). Unused leaves below such a parent are
   therefore never reported;
 - a declared node with a matching reference is descended into.

``analyze_chart`` runs the full pipeline from files on disk and
``save_unused_report`` writes the result as JSON.
"""
from __future__ import annotations

import fnmatch
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .chart_loader import load_values_document, read_templates, templates_dir
from .path_tree import PathTree, merge_trees
from .template_refs import build_reference_tree, extract_value_paths
from .values_collector import build_values_tree

logger = logging.getLogger(__name__)

VALUES_PREFIX = ".Values"


def find_unused_values(
    values_tree: PathTree, used_values_tree: PathTree, prefix: str = VALUES_PREFIX
) -> List[str]:
    """Return dotted paths (``prefix.a.b``) of declared leaves never referenced."""
    unused: List[str] = []
    for key, child in values_tree.children.items():
        full_key = f"{prefix}.{key}"
        used_child = used_values_tree.child(key)
        if used_child is None:
            if not child.is_leaf:
                continue
            unused.append(full_key)
        else:
            unused.extend(find_unused_values(child, used_child, full_key))
    return unused


def load_values_tree(path: Union[str, Path]) -> PathTree:
    return build_values_tree(load_values_document(path))


def is_white_listed(path: str, patterns: Sequence[str], prefix: str = VALUES_PREFIX) -> bool:
    """Match ``path`` against fnmatch patterns, with or without ``prefix``."""
    if not patterns:
        return False
    bare = path[len(prefix) + 1:] if path.startswith(prefix + ".") else path
    return any(fnmatch.fnmatchcase(path, pat) or fnmatch.fnmatchcase(bare, pat) for pat in patterns)


@dataclass
class ChartAnalysis:
    chart: str
    values_files: List[str]
    unused: List[str] = field(default_factory=list)
    ignored: List[str] = field(default_factory=list)
    referenced: List[str] = field(default_factory=list)
    declared_count: int = 0
    template_count: int = 0
    prefix: str = VALUES_PREFIX
    values_tree: PathTree = field(default_factory=PathTree, repr=False, compare=False)
    used_tree: PathTree = field(default_factory=PathTree, repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        report = {
            "chart": self.chart,
            "values_files": list(self.values_files),
            "prefix": self.prefix,
            "unused": list(self.unused),
            "ignored": list(self.ignored),
            "referenced": list(self.referenced),
        }
        report["summary"] = {
            "unused": len(self.unused),
            "ignored": len(self.ignored),
            "declared": self.declared_count,
            "referenced": len(self.referenced),
            "templates": self.template_count,
        }
        return report


def build_trees(
    chart: Union[str, Path],
    values: Union[str, Path],
    dev_values: Optional[Sequence[Union[str, Path]]] = None,
) -> Tuple[PathTree, PathTree, List[str], int]:
    """Load a chart and return (declared tree, reference tree, references, templates)."""
    contents = read_templates(templates_dir(chart))
    used = extract_value_paths(contents)
    used_tree = build_reference_tree(used)

    values_tree = load_values_tree(values)
    for override in dev_values or []:
        merge_trees(values_tree, load_values_tree(override))
        logger.debug("merged override values from %s", override)
    return values_tree, used_tree, used, len(contents)


def analyze_chart(
    chart: Union[str, Path],
    values: Union[str, Path] = "values.yaml",
    dev_values: Optional[Sequence[Union[str, Path]]] = None,
    prefix: str = VALUES_PREFIX,
    white_list: Optional[Sequence[str]] = None,
) -> ChartAnalysis:
    """Find the declared values of ``chart`` that no template references.

    Raises ``ChartError`` subclasses when any input cannot be read.
    """
    values_tree, used_tree, used, template_count = build_trees(chart, values, dev_values)

    unused: List[str] = []
    ignored: List[str] = []
    for path in find_unused_values(values_tree, used_tree, prefix):
        if is_white_listed(path, white_list or [], prefix):
            ignored.append(path)
        else:
            unused.append(path)

    return ChartAnalysis(
        chart=str(chart),
        values_files=[str(values)] + [str(p) for p in dev_values or []],
        unused=unused,
        ignored=ignored,
        referenced=sorted(set(used)),
        declared_count=len(values_tree),
        template_count=template_count,
        prefix=prefix,
        values_tree=values_tree,
        used_tree=used_tree,
    )


def save_unused_report(analysis: ChartAnalysis, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    out = output_dir / "unused_values.json"
    out.write_text(json.dumps(analysis.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
    return out
