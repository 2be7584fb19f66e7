"""
Read the inputs of an analysis from disk: values documents and templates.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Optional, Set, Union

import yaml

from .node_types import Document

logger = logging.getLogger(__name__)

TEMPLATES_DIR = "templates"


class ChartError(Exception):
    """Base class for failures reading a chart."""


class ValuesFileError(ChartError):
    """A values document could not be read or is not a mapping."""


class TemplatesError(ChartError):
    """The templates directory or one of its files could not be read."""


def load_values_document(path: Union[str, Path]) -> Document:
    """Parse a YAML values file into a mapping. An empty file gives ``{}``."""
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ValuesFileError(f"failed to read values file {p}: {e}") from e
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValuesFileError(f"failed to parse values file {p}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValuesFileError(
            f"failed to parse values file {p}: expected a mapping, got {type(data).__name__}"
        )
    cycle = _find_alias_cycle(data, set(), "")
    if cycle is not None:
        raise ValuesFileError(f"failed to parse values file {p}: anchor at {cycle or '<root>'} contains itself")
    logger.debug("loaded %d top-level keys from %s", len(data), p)
    return data


def _find_alias_cycle(value: Any, on_path: Set[int], key: str) -> Optional[str]:
    """Return the dotted key of a container that contains itself, or None.

    A YAML alias may point at one of its own ancestors; safe_load then builds a
    self-referencing structure. Shared, non-cyclic aliases are fine.
    """
    if not isinstance(value, (dict, list)):
        return None
    if id(value) in on_path:
        return key
    on_path.add(id(value))
    items = value.items() if isinstance(value, dict) else enumerate(value)
    for k, v in items:
        found = _find_alias_cycle(v, on_path, f"{key}.{k}" if key else str(k))
        if found is not None:
            return found
    on_path.discard(id(value))
    return None


def templates_dir(chart: Union[str, Path]) -> Path:
    return Path(chart) / TEMPLATES_DIR


def read_templates(dir_path: Union[str, Path]) -> List[str]:
    """Read every regular file directly inside ``dir_path``.

    Sub-directories are not descended into. Files are read in name order.
    """
    base = Path(dir_path)
    try:
        entries = sorted(base.iterdir(), key=lambda e: e.name)
    except OSError as e:
        raise TemplatesError(f"failed to read templates directory {base}: {e}") from e

    contents: List[str] = []
    for entry in entries:
        if entry.is_dir():
            continue
        try:
            contents.append(entry.read_text(encoding="utf-8", errors="replace"))
        except OSError as e:
            raise TemplatesError(f"failed to read template file {entry.name}: {e}") from e
    logger.debug("read %d templates from %s", len(contents), base)
    return contents
