"""
Device-local key-value storage.

Values live in a single JSON file per namespace. Nothing stored here is
synchronized with the server; the last local write wins.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class Preferences:
    """A namespaced string key-value store backed by a JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._values: Optional[Dict[str, str]] = None

    @classmethod
    def for_namespace(cls, directory: Path, namespace: str) -> "Preferences":
        return cls(Path(directory) / f"{namespace}.json")

    @property
    def namespace(self) -> str:
        return self.path.stem

    def get_string(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._load().get(key, default)

    def put_string(self, key: str, value: str) -> None:
        values = self._load()
        values[key] = value
        self._save(values)

    def remove(self, key: str) -> None:
        values = self._load()
        if key in values:
            del values[key]
            self._save(values)

    def clear(self) -> None:
        """Drop every stored value, as when the app's storage is wiped."""
        self._values = {}
        if self.path.exists():
            self.path.unlink()

    def contains(self, key: str) -> bool:
        return key in self._load()

    def _load(self) -> Dict[str, str]:
        if self._values is not None:
            return self._values

        if not self.path.exists():
            self._values = {}
            return self._values

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Discarding unreadable preferences file {self.path}: {e}")
            data = {}

        if not isinstance(data, dict):
            logger.warning(f"Discarding malformed preferences file {self.path}")
            data = {}

        self._values = {str(k): str(v) for k, v in data.items()}
        return self._values

    def _save(self, values: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(values, f, indent=2, ensure_ascii=False)
        self._values = values
        logger.debug(f"Saved {len(values)} preference(s) to {self.path}")
