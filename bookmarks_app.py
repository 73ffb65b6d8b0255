"""
Bookmarks Application - owns the bookmark state for one editor session
"""

from typing import Any, Dict, List, Optional

import persistence
from bookmark_store import BookmarkStore
from host_interfaces import ListPanel, TextDocument, Workspace
from list_projection import build_items, resolve_navigation
from marker_tracker import LiveMarkerTracker
from models import NavigationTarget, ViewItem
from settings import debug
from toggle_engine import ToggleEngine, ToggleResult


class BookmarksApplication:
    """
    Application context for bookmarks.

    Built once by the editor, activated with the snapshot saved by the
    previous session, and handed every command and document event.
    """

    def __init__(self, workspace: Workspace, panel: Optional[ListPanel] = None,
                 prune_invalidated: bool = False, clock=None):
        self.workspace = workspace
        self.panel = panel
        self.prune_invalidated = prune_invalidated
        self.clock = clock
        self.store = BookmarkStore()
        self.tracker: Optional[LiveMarkerTracker] = None
        self.toggle_engine: Optional[ToggleEngine] = None
        self.active = False
        if self.panel is not None:
            self.panel.bind(self.confirm, self.cancel)

    def activate(self, previous_snapshot: Optional[Dict[str, Any]] = None):
        """Build the store from the previous session's snapshot"""
        self.store = persistence.load(previous_snapshot)
        self.tracker = LiveMarkerTracker(self.store, prune_invalidated=self.prune_invalidated)
        kwargs = {"relativize": self.workspace.relativize_path}
        if self.clock is not None:
            kwargs["clock"] = self.clock
        self.toggle_engine = ToggleEngine(self.store, self.tracker, **kwargs)
        self.active = True
        debug(f"Bookmarks activated with {len(self.store)} bookmark(s)")

    def deactivate(self):
        """Release every marker layer; the store stays readable for serialize()"""
        if self.panel is not None and self.panel.is_visible():
            self.panel.hide()
        if self.tracker is not None:
            self.tracker.teardown_all()
        self.active = False

    def serialize(self) -> Dict[str, Any]:
        return persistence.save(self.store)

    def set_prune_invalidated(self, enabled: bool):
        self.prune_invalidated = enabled
        if self.tracker is not None:
            self.tracker.prune_invalidated = enabled

    # Document lifecycle

    def document_opened(self, document: TextDocument) -> int:
        """Restore live markers for a document that was just opened"""
        if not self.active or document is None:
            return 0
        return self.tracker.rehydrate(document)

    def document_closed(self, document: TextDocument):
        if not self.active or document is None:
            return
        self.tracker.teardown(document)

    # Commands

    def toggle_bookmark(self) -> List[ToggleResult]:
        """Toggle bookmarks at the selections of the focused document"""
        if not self.active:
            return []
        document = self.workspace.active_document()
        if document is None:
            return []
        return self.toggle_engine.toggle(document, document.selected_ranges())

    def view_all(self):
        """Show the bookmarks list, or hide it when it is already shown"""
        if self.panel is None:
            return
        if self.panel.is_visible():
            self.panel.hide()
            return
        self.panel.set_items(self.items())
        self.panel.show()
        self.panel.focus_filter()

    def clear_all(self):
        """Forget every bookmark, stored and live"""
        self.store.clear()
        if self.tracker is not None:
            self.tracker.clear_markers()
        if self.panel is not None and self.panel.is_visible():
            self.panel.set_items([])

    def items(self) -> List[ViewItem]:
        return build_items(self.store)

    # List panel callbacks

    def confirm(self, item: ViewItem) -> Optional[NavigationTarget]:
        if self.panel is not None:
            self.panel.hide()
        if item is None:
            return None
        target = resolve_navigation(item)
        try:
            self.workspace.open_file(target.file_path, target.line)
        except Exception as e:
            print(f"Error opening bookmark {target}: {e}")
        return target

    def cancel(self):
        if self.panel is not None:
            self.panel.hide()
