"""
Host interfaces - what the bookmark core needs from the editor

The core only talks to these classes. The Qt editor provides concrete
implementations in qt_document.py and bookmarks_panel.py.
"""

from typing import Callable, List, Optional, Tuple

from models import BufferRange, ViewItem


# Marker invalidation strategy used for every bookmark marker
INVALIDATE_SURROUND = "surround"


class Subscription:
    """Handle returned by a notification registration"""

    def dispose(self):
        raise NotImplementedError


class Marker:
    """A live range that follows edits of its document"""

    def get_range(self) -> BufferRange:
        raise NotImplementedError

    def is_valid(self) -> bool:
        raise NotImplementedError

    def is_destroyed(self) -> bool:
        raise NotImplementedError

    def destroy(self):
        raise NotImplementedError

    def on_did_change(self, callback: Callable[[bool], None]) -> Subscription:
        """Register callback(is_valid), called after each edit touching the marker"""
        raise NotImplementedError


class MarkerLayer:
    """A collection of markers belonging to one document"""

    def mark_range(self, buffer_range: BufferRange, invalidate: str = INVALIDATE_SURROUND,
                   exclusive: bool = True) -> Marker:
        raise NotImplementedError

    def find_markers(self, intersects_row_range: Tuple[int, int]) -> List[Marker]:
        raise NotImplementedError

    def get_markers(self) -> List[Marker]:
        raise NotImplementedError

    def is_destroyed(self) -> bool:
        raise NotImplementedError

    def destroy(self):
        raise NotImplementedError


class Decoration:
    """Visual indicator attached to a marker layer"""

    def destroy(self):
        raise NotImplementedError


class TextDocument:
    """An open text document"""

    def get_path(self) -> Optional[str]:
        """Absolute path on disk, None for unsaved buffers"""
        raise NotImplementedError

    def line_text(self, row: int) -> str:
        raise NotImplementedError

    def line_count(self) -> int:
        raise NotImplementedError

    def selected_ranges(self) -> List[BufferRange]:
        raise NotImplementedError

    def add_marker_layer(self) -> MarkerLayer:
        raise NotImplementedError

    def decorate_marker_layer(self, layer: MarkerLayer) -> Decoration:
        raise NotImplementedError


class ListPanel:
    """
    Searchable list shown by the view-all command.

    Rendering and filtering belong to the panel; it reports confirm and cancel
    back through the callbacks handed to bind().
    """

    def bind(self, on_confirm: Callable[[ViewItem], None], on_cancel: Callable[[], None]):
        raise NotImplementedError

    def set_items(self, items: List[ViewItem]):
        raise NotImplementedError

    def show(self):
        raise NotImplementedError

    def hide(self):
        raise NotImplementedError

    def is_visible(self) -> bool:
        raise NotImplementedError

    def focus_filter(self):
        raise NotImplementedError


class Workspace:
    """The editor window as seen by the bookmark commands"""

    def active_document(self) -> Optional[TextDocument]:
        raise NotImplementedError

    def open_file(self, path: str, line: int):
        """Open path (or focus its tab) and move the cursor to line (0-based)"""
        raise NotImplementedError

    def relativize_path(self, path: str) -> Tuple[Optional[str], str]:
        raise NotImplementedError
