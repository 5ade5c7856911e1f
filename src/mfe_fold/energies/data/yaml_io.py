from __future__ import annotations
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any, Dict

import yaml


def read_yaml(path: str | Path | Traversable) -> Dict[str, Any]:
    """
    Read and parse a YAML parameter file.

    Accepts plain paths as well as `importlib.resources` traversables, so the
    parameter files shipped inside the package can be read without unpacking.

    Raises
    ------
    ValueError
        If the file does not carry a `.yml` / `.yaml` suffix or its top level
        is not a mapping.
    """
    resource = Path(path) if isinstance(path, str) else path
    if Path(resource.name).suffix.lower() not in {".yml", ".yaml"}:
        raise ValueError("Only YAML files are supported.")

    data = yaml.safe_load(resource.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Top level of {resource.name} must be a mapping.")

    return data
