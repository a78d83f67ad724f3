"""Input parsing utilities for CLI commands."""

import json
from pathlib import Path
from typing import Any


def read_json_file(path: str) -> dict[str, Any]:
    """Read single JSON object from file.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON object

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If the file does not hold a JSON object
        json.JSONDecodeError: If file contains invalid JSON
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with file_path.open("r") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {path}, got {type(data).__name__}")
    return data


def write_json_file(path: str, data: dict[str, Any]) -> None:
    """Write a JSON object to file, pretty-printed."""
    with Path(path).open("w") as f:
        json.dump(data, f, indent=2)
        f.write("\n")
