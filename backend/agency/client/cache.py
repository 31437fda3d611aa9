"""
Durable local cache.

A localStorage-like string key/value store persisted to a JSON file (or kept
in memory when no path is configured). Every entity collection lives in one
namespaced blob; writers replace a single collection inside the blob, so
writers of different collections never clobber each other.
"""

import json
import os
import tempfile
from typing import Any, Dict, List, Optional, Sequence

from agency.core.logging import get_logger

logger = get_logger(__name__)


class LocalCache:
    """Key/value primitive plus the namespaced collection snapshot."""

    def __init__(
        self,
        path: Optional[str] = None,
        namespace: str = "agency_data_v4",
        legacy_namespaces: Sequence[str] = ("agency_data_v3",),
        session_keys: Sequence[str] = ("auth", "client_session"),
    ):
        """
        Initialize the cache.

        Args:
            path: JSON file backing the store; empty or None keeps it in memory
            namespace: Key of the blob holding every collection
            legacy_namespaces: Older blob keys migrated on first read
            session_keys: Keys removed when the session expires
        """
        self.path = path or None
        self.namespace = namespace
        self.legacy_namespaces = list(legacy_namespaces)
        self.session_keys = list(session_keys)
        self._items: Dict[str, str] = self._load_file()
        self._migrated = False

    def _load_file(self) -> Dict[str, str]:
        if not self.path or not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Local cache file unreadable, starting empty", extra={"path": self.path, "error": str(e)})
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _flush(self) -> None:
        if not self.path:
            return
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".cache-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._items, f)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    # localStorage surface

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value
        self._flush()

    def remove(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._flush()

    def keys(self) -> List[str]:
        return list(self._items)

    # Collection snapshot

    def _migrate_legacy(self) -> None:
        """Move the newest legacy blob under the current namespace, once."""
        if self._migrated:
            return
        self._migrated = True
        if self.get(self.namespace) is not None:
            return
        for legacy in self.legacy_namespaces:
            raw = self.get(legacy)
            if raw is None:
                continue
            self._items[self.namespace] = raw
            self._items.pop(legacy, None)
            self._flush()
            logger.info("Migrated local cache namespace", extra={"from": legacy, "to": self.namespace})
            return

    def read_snapshot(self) -> Dict[str, Any]:
        """Return the whole namespaced blob; a corrupt blob reads as empty."""
        self._migrate_legacy()
        raw = self.get(self.namespace)
        if raw is None:
            return {}
        try:
            snapshot = json.loads(raw)
        except ValueError as e:
            logger.warning("Local cache blob is corrupt, ignoring it", extra={"error": str(e)})
            return {}
        if not isinstance(snapshot, dict):
            logger.warning("Local cache blob has unexpected shape, ignoring it")
            return {}
        return snapshot

    def read_collection(self, name: str) -> List[Dict[str, Any]]:
        items = self.read_snapshot().get(name)
        return items if isinstance(items, list) else []

    def write_collection(self, name: str, items: List[Dict[str, Any]]) -> None:
        """Read-merge-write: replace one collection inside the blob."""
        snapshot = self.read_snapshot()
        snapshot[name] = items
        self.set(self.namespace, json.dumps(snapshot))

    def clear_session(self) -> None:
        """Remove the session-related keys."""
        for key in self.session_keys:
            self.remove(key)
