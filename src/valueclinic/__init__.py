"""
valueclinic - find values.yaml entries that no Helm chart template references

Simple API:

    from valueclinic import analyze_chart

    analysis = analyze_chart("mychart", values="mychart/values.yaml",
                             dev_values=["mychart/values-dev.yaml"])
    for path in analysis.unused:
        print(path)  # e.g. .Values.image.pullPolicy

Only literal ``{{ .Values.a.b }}`` references are seen. A declared map with
no reference at all is assumed to be injected whole and is never reported,
so unused leaves below it stay hidden.
"""


def analyze_chart(*args, **kwargs):
    """Lazy import wrapper for analyze_chart to keep package import light."""
    from .unused_values import analyze_chart as _analyze_chart

    return _analyze_chart(*args, **kwargs)


from .path_tree import PathTree, merge_trees

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("valueclinic")
except PackageNotFoundError:
    # Fallback for development/uninstalled package
    __version__ = "unknown"

__all__ = ["analyze_chart", "PathTree", "merge_trees", "__version__"]
