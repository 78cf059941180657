"""Key-value text storage on the local disk."""

import logging
from pathlib import Path
from typing import Optional

from ..errors import PersistenceError

logger = logging.getLogger(__name__)


class LocalStorage:
    """Stores one text document per key under a directory.

    Every write replaces the whole document for its key.
    """

    def __init__(self, root: Path):
        self.root = root

    def _path_for(self, key: str) -> Path:
        # Security: keys are plain names, never paths
        if not key or "/" in key or "\\" in key or ".." in key:
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.root / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        """Read the document for a key, or None if absent or unreadable."""
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"[STORE] Could not read {path.name}: {e}")
            return None

    def write(self, key: str, text: str) -> None:
        """Overwrite the document for a key.

        Raises:
            PersistenceError: if the directory or file cannot be written.
        """
        path = self._path_for(key)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            logger.error(f"[STORE] Write failed for {path.name}: {e}")
            raise PersistenceError(f"Could not write {path}: {e}") from e
        logger.debug(f"[STORE] Wrote {len(text)} chars to {path.name}")
