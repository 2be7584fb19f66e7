"""
Configuration loader - valueclinic.yaml or [tool.valueclinic] in pyproject.toml
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

try:  # py3.11+
    import tomllib as tomli
except ImportError:
    import tomli

logger = logging.getLogger(__name__)

CONFIG_CANDIDATES = [
    "valueclinic.yaml",
    "valueclinic.yml",
    ".valueclinic.yaml",
    ".valueclinic.yml",
    "pyproject.toml",  # only with [tool.valueclinic]
]


@dataclass
class ValueClinicConfig:
    """Effective settings for one analysis run."""
    chart: str = ""
    values: str = "values.yaml"
    # Override documents merged over `values`, in order (e.g. values-dev.yaml)
    dev_values: List[str] = field(default_factory=list)
    prefix: str = ".Values"
    # fnmatch patterns of value paths never reported, e.g. "global.*"
    white_list: List[str] = field(default_factory=list)
    output: str = "valueclinic_results"
    format: str = "svg"
    fail_on_unused: bool = False


def load_config(config_path: Optional[Path] = None, cwd: Optional[Path] = None) -> ValueClinicConfig:
    """
    Load configuration.

    Args:
        config_path: explicit config file; when None the working directory is searched
        cwd: directory to search instead of the current one

    Returns:
        ValueClinicConfig: loaded settings, or defaults when no file is found
    """
    if config_path:
        return _load_config_file(Path(config_path))

    found_config = find_config_file(cwd)
    if found_config:
        logger.debug("using config file %s", found_config)
        return _load_config_file(found_config)

    return ValueClinicConfig()


def find_config_file(cwd: Optional[Path] = None) -> Optional[Path]:
    base = Path(cwd) if cwd else Path(".")
    for name in CONFIG_CANDIDATES:
        candidate = base / name
        if candidate.exists():
            if candidate.name == "pyproject.toml":
                if _has_valueclinic_config(candidate):
                    return candidate
                continue
            return candidate
    return None


def _load_config_file(config_path: Path) -> ValueClinicConfig:
    if not config_path.exists():
        raise FileNotFoundError(f"config file not found: {config_path}")

    suffix = config_path.suffix.lower()

    if suffix in [".yaml", ".yml"]:
        return _load_yaml_config(config_path)
    elif suffix == ".toml":
        return _load_toml_config(config_path)
    else:
        raise ValueError(f"unsupported config file format: {suffix}")


def _load_yaml_config(config_path: Path) -> ValueClinicConfig:
    with config_path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"invalid config file {config_path}: {e}") from e

    if not data:
        return ValueClinicConfig()
    if not isinstance(data, dict):
        raise ValueError(f"config file must contain a mapping: {config_path}")

    return _parse_config_data(data)


def _load_toml_config(config_path: Path) -> ValueClinicConfig:
    with config_path.open("rb") as f:
        data = tomli.load(f)

    # pyproject.toml keeps settings under [tool.valueclinic]
    if "tool" in data and "valueclinic" in data["tool"]:
        config_data = data["tool"]["valueclinic"]
    else:
        config_data = data

    return _parse_config_data(config_data)


def _has_valueclinic_config(pyproject_path: Path) -> bool:
    try:
        with pyproject_path.open("rb") as f:
            data = tomli.load(f)
    except (OSError, tomli.TOMLDecodeError):
        return False
    return "tool" in data and "valueclinic" in data["tool"]


def _str_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(x) for x in value]
    return []


def _parse_config_data(data: Dict[str, Any]) -> ValueClinicConfig:
    config = ValueClinicConfig()

    if "chart" in data:
        config.chart = str(data["chart"])
    if "values" in data:
        config.values = str(data["values"])
    # "dev_values" may be a single path or a list
    if "dev_values" in data:
        config.dev_values = _str_list(data["dev_values"])
    if "prefix" in data:
        config.prefix = str(data["prefix"])
    if "white_list" in data:
        config.white_list = _str_list(data["white_list"])
    if "output" in data:
        config.output = str(data["output"])
    if "format" in data:
        config.format = str(data["format"])
    if "fail_on_unused" in data:
        flag = data["fail_on_unused"]
        if not isinstance(flag, bool):
            raise ValueError(f"fail_on_unused must be true or false, got {flag!r}")
        config.fail_on_unused = flag

    return config


def create_example_config() -> str:
    return """# valueclinic configuration
chart: "."
values: "values.yaml"

# Override documents merged over `values` (deep merge, paths only)
dev_values: []
#  - "values-dev.yaml"

# Value paths never reported as unused (fnmatch, with or without .Values)
white_list: []
#  - "global.*"
#  - ".Values.podAnnotations"

# Report artifacts for --output / --graph
output: "valueclinic_results"
format: "svg"

# Exit with status 1 when unused values remain
fail_on_unused: false
"""


def save_example_config(output_path: Optional[Path] = None) -> Path:
    if output_path is None:
        output_path = Path("valueclinic.yaml")

    output_path.write_text(create_example_config(), encoding="utf-8")

    return output_path
