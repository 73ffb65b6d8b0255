"""
Toggle Engine - add or remove bookmarks for the selected ranges of a document
"""

import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from bookmark_store import BookmarkStore
from host_interfaces import INVALIDATE_SURROUND, TextDocument
from marker_tracker import LiveMarkerTracker
from models import BookmarkRecord, BufferRange
from settings import debug


ADDED = "added"
REMOVED = "removed"


@dataclass
class ToggleResult:
    """Outcome of toggling one range"""
    action: str
    row: int
    record: Optional[BookmarkRecord] = None


def _now_ms() -> int:
    return int(time.time() * 1000)


class ToggleEngine:
    """
    Decides per range whether a toggle adds or removes a bookmark.

    Identity is the start row: any live marker intersecting the selected rows
    means "remove", and removal drops every stored record starting at the
    selection's start row regardless of its exact span.
    """

    def __init__(self, store: BookmarkStore, tracker: LiveMarkerTracker,
                 relativize: Optional[Callable[[str], Tuple[Optional[str], str]]] = None,
                 clock: Callable[[], float] = _now_ms):
        self.store = store
        self.tracker = tracker
        self.relativize = relativize
        self.clock = clock
        self._last_created_at = 0

    def _next_timestamp(self):
        # Strictly increasing so list order follows toggle order
        now = self.clock()
        if now <= self._last_created_at:
            now = self._last_created_at + 1
        self._last_created_at = now
        return now

    def _relative_path(self, path: str) -> str:
        if self.relativize is None:
            return path
        try:
            return self.relativize(path)[1]
        except Exception as e:
            print(f"Error relativizing path '{path}': {e}")
            return path

    def toggle(self, document: TextDocument, ranges: List[BufferRange]) -> List[ToggleResult]:
        """Toggle a bookmark for each range; returns what happened per range"""
        if document is None:
            return []
        path = document.get_path()
        if not path:
            return []
        results = []
        for buffer_range in ranges:
            result = self._toggle_range(document, path, buffer_range)
            if result is not None:
                results.append(result)
        return results

    def _toggle_range(self, document: TextDocument, path: str, buffer_range: BufferRange) -> Optional[ToggleResult]:
        layer = self.tracker.ensure_layer(document)
        if layer is None:
            return None
        row = buffer_range.start.row
        markers = self.tracker.markers_intersecting_rows(document, row, buffer_range.end.row)
        if markers:
            self.tracker.destroy_markers(document, markers)
            self.store.remove_at_row(path, row)
            debug(f"Removed bookmark at row {row} in {path}")
            return ToggleResult(REMOVED, row)

        marker = layer.mark_range(buffer_range, invalidate=INVALIDATE_SURROUND, exclusive=True)
        self.tracker.track(document, marker)
        content = document.line_text(row).strip()
        relative_path = self._relative_path(path)
        record = BookmarkRecord(
            range=BufferRange.from_dict(buffer_range.to_dict()),
            content=content,
            relative_path=relative_path,
            filter_text=BookmarkRecord.compose_filter_text(row, relative_path, content),
            created_at=self._next_timestamp(),
        )
        self.tracker.bind_record(document, marker, record)
        # A record whose marker was invalidated may still sit on this row
        self.store.remove_at_row(path, row)
        self.store.add(path, record)
        debug(f"Added bookmark at row {row} in {path}")
        return ToggleResult(ADDED, row, record)
