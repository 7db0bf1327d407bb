"""
Parameter files.

A parameter file is a JSON object whose keys are ParameterSet fields,
either snake_case or the camelCase names used by web control panels.
An optional top-level "params" object is also accepted, so a file can
carry other sections next to the parameters.
"""

import json
from pathlib import Path
from typing import Union

from radioscope.core.params import ParameterSet


def load_params(path: Union[str, Path]) -> ParameterSet:
    """
    Read a ParameterSet from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the document is not a JSON object or a field
            holds a value of the wrong type.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Parameter file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if isinstance(data, dict) and isinstance(data.get("params"), dict):
        data = data["params"]
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {path}")

    return ParameterSet.from_dict(data)


def save_params(params: ParameterSet, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump({"params": params.to_dict()}, f, indent=2)
    return path
