"""
Shared value types for parsed values documents and dotted paths.
"""
from __future__ import annotations

from typing import Dict, List, Sequence, Union

# A parsed values document is a closed set of YAML shapes.
Scalar = Union[str, bool, int, float, None]
Value = Union[Scalar, List["Value"], Dict[str, "Value"]]
Document = Dict[str, Value]

# ("image", "repository") represents image.repository
Segments = Sequence[str]

PATH_SEPARATOR = "."


def split_path(dotted: str) -> List[str]:
    """Split a dotted path into segments, dropping empty pieces."""
    return [seg for seg in dotted.split(PATH_SEPARATOR) if seg]
