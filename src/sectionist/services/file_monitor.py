"""Modification tracking for the editor state file."""

from pathlib import Path
from typing import Dict


class FileMonitor:
    """
    Track file modification times to detect external changes.

    The JSON store records the state file when it loads it, so a second
    editor process writing the same file in between is detected before
    the stale state overwrites it.

    Example:
        >>> monitor = FileMonitor()
        >>> monitor.record(Path("editor.json"))
        >>> # Later, before write:
        >>> if monitor.is_modified(Path("editor.json")):
        ...     raise FileModifiedError(...)
    """

    def __init__(self) -> None:
        self._mtimes: Dict[Path, float] = {}

    def record(self, path: Path) -> None:
        """
        Record current modification time for a file.

        Raises:
            FileNotFoundError: If file doesn't exist
        """
        self._mtimes[path] = path.stat().st_mtime

    def is_modified(self, path: Path) -> bool:
        """
        Check if a tracked file has changed since it was recorded.

        Untracked paths that exist count as modified. A path that is
        neither tracked nor present on disk is not modified.
        """
        if not path.exists():
            return path in self._mtimes
        if path not in self._mtimes:
            return True
        return path.stat().st_mtime != self._mtimes[path]

    def refresh(self, path: Path) -> None:
        """Update the recorded modification time after our own write."""
        self._mtimes[path] = path.stat().st_mtime
