"""
Bookmark Store - durable mapping from file path to bookmark records
"""

from typing import Dict, List, Tuple, Any

from models import BookmarkRecord


class BookmarkStore:
    """
    Single source of truth for bookmarks.

    Records are kept per absolute file path in insertion order. The store does
    not look at live markers; it survives while no document for a path is open.
    """

    def __init__(self):
        self._records: Dict[str, List[BookmarkRecord]] = {}

    def __len__(self):
        return sum(len(records) for records in self._records.values())

    def __contains__(self, path):
        return bool(self._records.get(path))

    def paths(self) -> List[str]:
        """Paths that currently hold at least one record"""
        return [path for path, records in self._records.items() if records]

    def records_for(self, path: str) -> List[BookmarkRecord]:
        """Records stored for a path, empty list if none"""
        return list(self._records.get(path, []))

    def rows_for(self, path: str) -> List[int]:
        """Start rows of the records stored for a path"""
        return [record.row for record in self._records.get(path, [])]

    def add(self, path: str, record: BookmarkRecord):
        """Append a record; row uniqueness is up to the caller"""
        self._records.setdefault(path, []).append(record)

    def remove_at_row(self, path: str, row: int) -> int:
        """Remove every record of path starting at row, returns how many went"""
        records = self._records.get(path)
        if not records:
            return 0
        kept = [record for record in records if record.row != row]
        removed = len(records) - len(kept)
        if removed:
            self._records[path] = kept
        return removed

    def remove_record(self, path: str, record: BookmarkRecord) -> bool:
        """Remove one exact record object"""
        records = self._records.get(path)
        if not records:
            return False
        for index, existing in enumerate(records):
            if existing is record:
                del records[index]
                return True
        return False

    def clear(self):
        """Empty the whole store"""
        self._records.clear()

    def flatten(self) -> List[Tuple[str, BookmarkRecord]]:
        """All (path, record) pairs, path by path in insertion order"""
        items = []
        for path, records in self._records.items():
            for record in records:
                items.append((path, record))
        return items

    def to_snapshot(self) -> Dict[str, List[Dict[str, Any]]]:
        """Plain-data copy of the whole mapping"""
        return {path: [record.to_dict() for record in records]
                for path, records in self._records.items()}

    @classmethod
    def from_snapshot(cls, data: Dict[str, Any]) -> 'BookmarkStore':
        """
        Rebuild a store from to_snapshot() output.

        Entries that cannot be read are skipped so a damaged snapshot costs
        bookmarks, not the whole store.
        """
        store = cls()
        if not isinstance(data, dict):
            return store
        for path, entries in data.items():
            if not isinstance(path, str) or not isinstance(entries, list):
                print(f"Skipping malformed bookmark entries for {path!r}")
                continue
            for entry in entries:
                try:
                    record = BookmarkRecord.from_dict(entry)
                except (KeyError, TypeError, ValueError, AttributeError) as e:
                    print(f"Skipping malformed bookmark in {path}: {e}")
                    continue
                store.add(path, record)
        return store
