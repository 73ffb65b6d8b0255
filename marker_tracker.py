"""
Live Marker Tracker - mirrors stored bookmarks into live markers of open documents
"""

from typing import Dict, List, Optional

from bookmark_store import BookmarkStore
from host_interfaces import (INVALIDATE_SURROUND, Decoration, Marker, MarkerLayer,
                             Subscription, TextDocument)
from models import BookmarkRecord
from settings import debug


class LiveMarkerTracker:
    """
    Keeps one marker layer per open document path.

    Markers are a projection of the store: destroying one never touches the
    store unless prune_invalidated is set, in which case a marker invalidated
    by an edit also drops the record it was created for.
    """

    def __init__(self, store: BookmarkStore, prune_invalidated: bool = False):
        self.store = store
        self.prune_invalidated = prune_invalidated
        self._layers: Dict[str, MarkerLayer] = {}
        self._decorations: Dict[str, Decoration] = {}
        self._subscriptions: Dict[str, Dict[Marker, Subscription]] = {}
        self._bindings: Dict[str, Dict[Marker, Optional[BookmarkRecord]]] = {}

    @staticmethod
    def _path_of(document: Optional[TextDocument]) -> Optional[str]:
        if document is None:
            return None
        try:
            return document.get_path() or None
        except AttributeError:
            return None

    def tracked_paths(self) -> List[str]:
        return list(self._layers.keys())

    def ensure_layer(self, document: TextDocument) -> Optional[MarkerLayer]:
        """Create the marker layer and its decoration for the document once"""
        path = self._path_of(document)
        if path is None:
            return None
        layer = self._layers.get(path)
        if layer is not None:
            return layer
        layer = document.add_marker_layer()
        self._layers[path] = layer
        self._decorations[path] = document.decorate_marker_layer(layer)
        self._subscriptions[path] = {}
        self._bindings[path] = {}
        debug(f"Created marker layer for {path}")
        return layer

    def layer_for(self, document: TextDocument) -> Optional[MarkerLayer]:
        path = self._path_of(document)
        if path is None:
            return None
        return self._layers.get(path)

    def rehydrate(self, document: TextDocument) -> int:
        """Create live markers for the stored bookmarks of a freshly opened document"""
        path = self._path_of(document)
        if path is None:
            return 0
        records = self.store.records_for(path)
        if not records:
            return 0
        if path in self._layers:
            # Already live for this path
            return 0
        layer = self.ensure_layer(document)
        for record in records:
            marker = layer.mark_range(record.range, invalidate=INVALIDATE_SURROUND, exclusive=True)
            self.track(document, marker, record)
        debug(f"Restored {len(records)} bookmark(s) in {path}")
        return len(records)

    def track(self, document: TextDocument, marker: Marker, record: Optional[BookmarkRecord] = None):
        """Watch a marker and destroy it once an edit invalidates it"""
        path = self._path_of(document)
        if path is None or path not in self._layers:
            return
        self._bindings[path][marker] = record
        self._subscriptions[path][marker] = marker.on_did_change(
            lambda is_valid: self._on_marker_changed(path, marker, is_valid))

    def _forget(self, path: str, marker: Marker) -> Optional[BookmarkRecord]:
        """Drop the binding and subscription of a marker, returning its record"""
        subscription = self._subscriptions.get(path, {}).pop(marker, None)
        if subscription is not None:
            subscription.dispose()
        return self._bindings.get(path, {}).pop(marker, None)

    def bind_record(self, document: TextDocument, marker: Marker, record: BookmarkRecord):
        """Attach the record a tracked marker stands for"""
        path = self._path_of(document)
        if path is None or path not in self._bindings:
            return
        if marker in self._bindings[path]:
            self._bindings[path][marker] = record

    def record_for(self, document: TextDocument, marker: Marker) -> Optional[BookmarkRecord]:
        path = self._path_of(document)
        if path is None:
            return None
        return self._bindings.get(path, {}).get(marker)

    def _on_marker_changed(self, path: str, marker: Marker, is_valid: bool):
        if is_valid:
            return
        record = self._forget(path, marker)
        if not marker.is_destroyed():
            marker.destroy()
        debug(f"Bookmark marker invalidated in {path}")
        if self.prune_invalidated and record is not None:
            self.store.remove_record(path, record)

    def markers_intersecting_rows(self, document: TextDocument, row_start: int, row_end: int) -> List[Marker]:
        layer = self.layer_for(document)
        if layer is None:
            return []
        return layer.find_markers(intersects_row_range=(row_start, row_end))

    def destroy_markers(self, document: TextDocument, markers: List[Marker]):
        """Destroy markers and forget their records"""
        path = self._path_of(document)
        for marker in markers:
            if path:
                self._forget(path, marker)
            if not marker.is_destroyed():
                marker.destroy()

    def clear_markers(self):
        """Destroy every live marker but keep the layers"""
        for path, layer in self._layers.items():
            for marker in layer.get_markers():
                self._forget(path, marker)
                marker.destroy()

    def _release(self, path: str):
        for subscription in self._subscriptions.pop(path, {}).values():
            subscription.dispose()
        self._bindings.pop(path, None)
        decoration = self._decorations.pop(path, None)
        if decoration is not None:
            decoration.destroy()
        layer = self._layers.pop(path, None)
        if layer is not None and not layer.is_destroyed():
            layer.destroy()
        debug(f"Released marker layer for {path}")

    def teardown(self, document: TextDocument):
        """Release the layer, decoration and subscriptions of a document"""
        path = self._path_of(document)
        if path is None or path not in self._layers:
            return
        self._release(path)

    def teardown_all(self):
        for path in list(self._layers.keys()):
            self._release(path)
