"""
Named JSON snapshots of enhanced resumes, stored as files in one directory.
"""

from pathlib import Path
from typing import Any, Dict, List

from cvenhancer.utils.file_utils import ensure_directory, load_json, save_json
from cvenhancer.utils.logger import get_logger

logger = get_logger(__name__)


class SnapshotService:
    """List, read, and save ``*.json`` snapshots."""

    def __init__(self, json_dir: Path):
        self.json_dir = Path(json_dir)

    def _path_for(self, filename: str) -> Path:
        # Only a bare name is accepted; anything path-like is reduced to its last part
        name = Path(filename).name
        if not name or name in (".", ".."):
            raise ValueError(f"Invalid snapshot name: {filename!r}")
        return self.json_dir / name

    def get_file_list(self) -> List[Dict[str, str]]:
        """
        List saved snapshots.

        Returns:
            ``[{"name": "jane.json", "displayName": "jane"}, ...]`` sorted by name
        """
        if not self.json_dir.exists():
            return []
        return [
            {"name": path.name, "displayName": path.stem}
            for path in sorted(self.json_dir.glob("*.json"))
        ]

    def get_file_content(self, filename: str) -> Any:
        """
        Raises:
            FileNotFoundError: No snapshot with that name
        """
        return load_json(self._path_for(filename))

    def save_file(self, filename: str, data: Any) -> str:
        """
        Save ``data`` as ``<filename>.json``.

        Returns:
            Name of the file actually written
        """
        full_filename = filename if filename.endswith(".json") else f"{filename}.json"
        path = self._path_for(full_filename)
        ensure_directory(self.json_dir)
        save_json(data, path, indent=2)
        logger.info(f"💾 Saved snapshot {path.name}")
        return path.name
