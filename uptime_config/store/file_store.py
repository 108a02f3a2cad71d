"""
File Store — JSON file backend for the configuration record.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..errors import StoreUnavailable
from .base import ConfigStore

logger = logging.getLogger(__name__)


class FileConfigStore(ConfigStore):
    """Keeps the configuration record in a single local JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    @property
    def name(self) -> str:
        return "file"

    def get(self) -> Optional[str]:
        """
        Load the record from disk.

        Returns:
            The raw JSON blob, or None if the file doesn't exist

        Raises:
            StoreUnavailable: If the file exists but can't be read
        """
        logger.debug(f"Loading config from {self.path}")
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StoreUnavailable(f"Failed to read {self.path}", str(e)) from e

    def put(self, blob: str) -> None:
        """
        Save the record to disk.

        Uses atomic write (write to temp, then rename) to prevent corruption.

        Raises:
            StoreUnavailable: If the file can't be written
        """
        temp_path = self.path.with_suffix(".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with temp_path.open("w", encoding="utf-8") as f:
                f.write(blob)
                f.write("\n")  # Trailing newline
            # Atomic rename
            temp_path.replace(self.path)
        except OSError as e:
            raise StoreUnavailable(f"Failed to write {self.path}", str(e)) from e
        logger.info(f"Config saved → {self.path.name} ({len(blob)} bytes)")
