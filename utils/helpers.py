"""YAML data-file helpers for Fellah Weather."""
from pathlib import Path
from typing import Any, Dict, Union

import yaml


def load_yaml_mapping(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a UTF-8 YAML file whose top level is a mapping.

    An empty file reads as an empty mapping.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the YAML cannot be parsed or its top level is not a mapping
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Data file not found: {path}")

    try:
        with path.open('r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping at the top level, got {type(data).__name__}")
    return data


__all__ = ["load_yaml_mapping"]
