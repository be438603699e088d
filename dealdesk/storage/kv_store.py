"""
Key-value storage backends.

The TTL cache and the pipeline store persist through this small
string-keyed interface, so the same scoring code runs against memory in
tests and against a JSON file on disk in the CLI.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

from ..utils.logger import get_logger

logger = get_logger(__name__)


class KeyValueStore(Protocol):
    """Opaque string-keyed persistence."""

    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...

    def clear(self) -> None:
        ...


class InMemoryStore:
    """Process-local store backed by a dict."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def keys(self):
        return list(self._data.keys())

    def __len__(self) -> int:
        return len(self._data)


class JsonFileStore:
    """
    Durable store kept as a single JSON object on disk.

    The whole file is loaded once and rewritten after every mutation
    (write to a temp file, then atomic replace). A missing file starts an
    empty store; an unreadable or corrupt file is logged and also treated
    as empty, and is overwritten by the next successful write.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._data: Dict[str, str] = self._load()
        logger.debug(f"JsonFileStore opened at {self.path} ({len(self._data)} keys)")

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Storage file {self.path} unreadable, starting empty: {e}")
            return {}

        if not isinstance(raw, dict):
            logger.warning(f"Storage file {self.path} is not a JSON object, starting empty")
            return {}

        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=self.path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except Exception:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value
        self._flush()

    def remove_item(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._flush()

    def clear(self) -> None:
        self._data.clear()
        self._flush()

    def keys(self):
        return list(self._data.keys())

    def __len__(self) -> int:
        return len(self._data)
