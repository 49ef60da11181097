"""Device-local JSON storage.

Holds annotation state that is not synchronized (tracker baselines, dismissed
alerts). Reads are permissive: absent or corrupt files read as empty, and an
unusable directory turns the store into a no-op.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


class JsonFileStore:
    """One JSON document stored in a file."""

    def __init__(self, path: Path):
        """
        Initialize the store.

        Args:
            path: JSON file path; its directory is created if needed
        """
        self.path = Path(path)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.available = True
        except OSError as e:
            logger.warning(f"Local storage unavailable at {self.path.parent}: {e}")
            self.available = False

    def load(self) -> Optional[Any]:
        """Return the stored document, or None when absent, unreadable or corrupt."""
        if not self.available:
            return None

        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.error(f"Failed to read {self.path}: {e}")
            return None

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Ignoring corrupt local state in {self.path}: {e}")
            return None

    def save(self, data: Any) -> bool:
        """
        Replace the stored document.

        Returns:
            True if written
        """
        if not self.available:
            return False

        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp_path.write_text(json.dumps(data), encoding="utf-8")
            os.replace(tmp_path, self.path)
            return True
        except OSError as e:
            logger.error(f"Failed to write {self.path}: {e}")
            return False

    def clear(self) -> None:
        """Delete the stored document."""
        if not self.available:
            return
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to clear {self.path}: {e}")
