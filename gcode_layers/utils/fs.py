"""Filesystem helpers for text and YAML handling.

Provides:
    - Text reads with explicit encoding and progress reporting
    - YAML load with actionable errors

All paths use pathlib.Path for cross-platform compatibility.

Usage:
    from gcode_layers.utils import fs
    text = fs.read_text("part.gcode")
    data = fs.load_yaml("viewer.yaml")
"""

from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import yaml


def read_text(
    path: Union[str, Path],
    encoding: str = "utf-8",
    on_progress: Optional[Callable[[int, Optional[int]], None]] = None
) -> str:
    """Read a whole text file.

    Parameters
    ----------
    path : Union[str, Path]
        File path
    encoding : str
        Text encoding, default "utf-8"
    on_progress : Optional[Callable[[int, Optional[int]], None]]
        Called once with (bytes_read, total_bytes) after the read

    Returns
    -------
    str
        File content

    Raises
    ------
    FileNotFoundError
        If file doesn't exist

    Notes
    -----
    Undecodable bytes are replaced with U+FFFD.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {path}")

    data = path.read_bytes()
    if on_progress is not None:
        on_progress(len(data), len(data))
    return data.decode(encoding, errors="replace")


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Load YAML file safely.

    Parameters
    ----------
    path : Union[str, Path]
        YAML file path

    Returns
    -------
    Dict[str, Any]
        Parsed YAML content ({} for an empty file)

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    yaml.YAMLError
        If YAML parsing fails
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e
