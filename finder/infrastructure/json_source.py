"""JSON file source shared by the catalog, taxonomy and user group stores.

Reads are fresh by default. With caching enabled the parsed document is
kept and reused until the file's modification time or size changes.
"""

import json
import threading
from pathlib import Path
from typing import Any

from finder.domain.exceptions import DataLoadError


class JsonFileSource:
    """Reads and parses one JSON file.

    Example usage:
        source = JsonFileSource("data/fips.json", cache_enabled=True)
        rows = source.read()
    """

    def __init__(self, path: str | Path, cache_enabled: bool = False) -> None:
        """Initialize source.

        Args:
            path: Path to the JSON file.
            cache_enabled: Reuse the parsed document while the file is unchanged.
        """
        self.path = Path(path)
        self.cache_enabled = cache_enabled
        self._lock = threading.Lock()
        self._cached_key: tuple[int, int] | None = None
        self._cached_value: Any = None

    def read(self) -> Any:
        """Read and parse the file.

        Returns:
            Parsed JSON document.

        Raises:
            DataLoadError: If the file is missing, unreadable or not valid JSON.
        """
        if not self.cache_enabled:
            return self._load()

        key = self._stat_key()
        with self._lock:
            if self._cached_key == key:
                return self._cached_value
            value = self._load()
            # Stat again after reading so a write racing the read is not cached
            if self._stat_key() == key:
                self._cached_key = key
                self._cached_value = value
            return value

    def invalidate(self) -> None:
        """Drop any cached document."""
        with self._lock:
            self._cached_key = None
            self._cached_value = None

    def _stat_key(self) -> tuple[int, int]:
        try:
            stat = self.path.stat()
        except OSError as e:
            raise DataLoadError(self.path, f"cannot stat file: {e}") from e
        return stat.st_mtime_ns, stat.st_size

    def _load(self) -> Any:
        try:
            with open(self.path, encoding="utf-8") as f:
                return json.load(f)
        except OSError as e:
            raise DataLoadError(self.path, f"cannot read file: {e}") from e
        except json.JSONDecodeError as e:
            raise DataLoadError(self.path, f"invalid JSON: {e}") from e
