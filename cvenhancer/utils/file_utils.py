"""
JSON file helpers for the local state file and resume snapshots.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Union

from .logger import get_logger

logger = get_logger(__name__)

PathLike = Union[Path, str]


def ensure_directory(directory: PathLike) -> Path:
    """Create ``directory`` (and parents) if missing and return it as a Path."""
    path = Path(directory)
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_json(data: Any, filepath: PathLike, indent: int = 2) -> None:
    """
    Write ``data`` as UTF-8 JSON, replacing the file in one step.

    The payload goes to ``<name>.tmp`` next to the target and is then
    renamed over it, so a crash mid-write leaves the previous file intact.

    Args:
        data: JSON-serializable value
        filepath: Destination file
        indent: Indentation passed to ``json.dump``

    Raises:
        TypeError: ``data`` is not JSON-serializable
        OSError: The file could not be written
    """
    target = Path(filepath)
    ensure_directory(target.parent)

    staging = target.with_name(f"{target.name}.tmp")
    try:
        with staging.open('w', encoding='utf-8') as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
        os.replace(staging, target)
    finally:
        if staging.exists():
            staging.unlink()

    logger.debug(f"Wrote {target.name} ({target.stat().st_size} bytes)")


def load_json(filepath: PathLike) -> Any:
    """
    Read a JSON file.

    Raises:
        FileNotFoundError: The file does not exist
        json.JSONDecodeError: The file is not valid JSON
    """
    source = Path(filepath)
    if not source.is_file():
        logger.error(f"JSON file not found: {source}")
        raise FileNotFoundError(f"File not found: {source}")

    with source.open('r', encoding='utf-8') as f:
        return json.load(f)


def load_json_or_default(filepath: PathLike, default: Dict[str, Any]) -> Dict[str, Any]:
    """Read a JSON object, or a copy of ``default`` when the file is not there yet."""
    source = Path(filepath)
    if not source.exists():
        return dict(default)

    data = load_json(source)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {source}, got {type(data).__name__}")
    return data
