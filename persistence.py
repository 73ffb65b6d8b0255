"""
Persistence - bookmark store snapshots and their QSettings storage
"""

import json
from typing import Any, Dict, Optional

from PyQt6.QtCore import QSettings

from bookmark_store import BookmarkStore


SNAPSHOT_KEY = "bookmarkStore"
SETTINGS_KEY = "bookmarks/snapshot"


def save(store: BookmarkStore) -> Dict[str, Any]:
    """Snapshot of the whole store"""
    return {SNAPSHOT_KEY: store.to_snapshot()}


def load(snapshot: Optional[Dict[str, Any]]) -> BookmarkStore:
    """Store from a snapshot; anything unreadable gives an empty store"""
    if not snapshot or not isinstance(snapshot, dict):
        return BookmarkStore()
    data = snapshot.get(SNAPSHOT_KEY)
    if not isinstance(data, dict):
        if data is not None:
            print(f"Ignoring malformed bookmark snapshot: {type(data).__name__}")
        return BookmarkStore()
    return BookmarkStore.from_snapshot(data)


class SnapshotStorage:
    """Keeps the snapshot as JSON text under one QSettings key"""

    def __init__(self, settings: QSettings, key: str = SETTINGS_KEY):
        self._settings = settings
        self._key = key

    def read(self) -> Optional[Dict[str, Any]]:
        try:
            raw = self._settings.value(self._key)
        except Exception as e:
            print(f"Error reading bookmarks: {e}")
            return None
        if not raw:
            return None
        try:
            snapshot = json.loads(raw)
        except (TypeError, ValueError) as e:
            print(f"Error decoding bookmarks: {e}")
            return None
        return snapshot if isinstance(snapshot, dict) else None

    def write(self, snapshot: Dict[str, Any]):
        try:
            self._settings.setValue(self._key, json.dumps(snapshot, ensure_ascii=False))
            self._settings.sync()
        except Exception as e:
            print(f"Error saving bookmarks: {e}")

    def clear(self):
        self._settings.remove(self._key)
