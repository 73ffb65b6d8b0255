"""
Bookmarks Panel - searchable list of all bookmarks
"""

from typing import List, Optional

from PyQt6.QtWidgets import (QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit,
                             QListWidget, QListWidgetItem)
from PyQt6.QtCore import Qt, pyqtSignal, QEvent

from host_interfaces import ListPanel
from list_projection import filter_items
from models import ViewItem


EMPTY_MESSAGE = "No bookmarks found"


class BookmarksPanel(QWidget, ListPanel):
    """
    Filter box above a list of bookmarks.

    Enter or double-click confirms the selected bookmark, Escape cancels.
    """
    confirmed = pyqtSignal(object)  # ViewItem
    cancelled = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.items: List[ViewItem] = []
        self.visible_items: List[ViewItem] = []
        self._setup_ui()
        self.hide()

    def _setup_ui(self):
        """Setup the UI"""
        layout = QVBoxLayout()
        layout.setContentsMargins(4, 4, 4, 4)

        filter_layout = QHBoxLayout()
        filter_label = QLabel("Bookmarks:")
        self.filter_input = QLineEdit()
        self.filter_input.setPlaceholderText("Type to filter bookmarks...")
        self.filter_input.textChanged.connect(self._apply_filter)
        self.filter_input.returnPressed.connect(self.confirm_selection)
        self.filter_input.installEventFilter(self)
        filter_layout.addWidget(filter_label)
        filter_layout.addWidget(self.filter_input)
        layout.addLayout(filter_layout)

        self.list_widget = QListWidget()
        self.list_widget.setAlternatingRowColors(True)
        self.list_widget.setMaximumHeight(250)
        self.list_widget.itemDoubleClicked.connect(lambda _item: self.confirm_selection())
        self.list_widget.itemActivated.connect(lambda _item: self.confirm_selection())
        layout.addWidget(self.list_widget)

        self.empty_label = QLabel(EMPTY_MESSAGE)
        self.empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.empty_label.hide()
        layout.addWidget(self.empty_label)

        self.setLayout(layout)

    def bind(self, on_confirm, on_cancel):
        self.confirmed.connect(on_confirm)
        self.cancelled.connect(on_cancel)

    def set_items(self, items: List[ViewItem]):
        self.items = list(items)
        self._apply_filter()

    def is_visible(self) -> bool:
        return not self.isHidden()

    def focus_filter(self):
        self.filter_input.setFocus()
        self.filter_input.selectAll()

    def render_item(self, item: ViewItem) -> QListWidgetItem:
        """List entry: path and line, with the line text below"""
        text = item.primary_text
        if item.content:
            text = f"{text}\n    {item.content}"
        list_item = QListWidgetItem(text)
        list_item.setToolTip(item.file_path)
        list_item.setData(Qt.ItemDataRole.UserRole, item)
        return list_item

    def _apply_filter(self):
        """Rebuild the list for the current filter text"""
        self.visible_items = filter_items(self.items, self.filter_input.text())
        self.list_widget.clear()
        for item in self.visible_items:
            self.list_widget.addItem(self.render_item(item))
        has_items = bool(self.visible_items)
        self.list_widget.setVisible(has_items)
        self.empty_label.setVisible(not has_items)
        if has_items:
            self.list_widget.setCurrentRow(0)

    def selected_item(self) -> Optional[ViewItem]:
        list_item = self.list_widget.currentItem()
        if list_item is None:
            return None
        return list_item.data(Qt.ItemDataRole.UserRole)

    def confirm_selection(self):
        item = self.selected_item()
        if item is None:
            return
        self.confirmed.emit(item)

    def cancel(self):
        self.cancelled.emit()

    def _move_selection(self, step: int):
        count = self.list_widget.count()
        if not count:
            return
        row = (self.list_widget.currentRow() + step) % count
        self.list_widget.setCurrentRow(row)

    def eventFilter(self, obj, event):
        """Arrow keys in the filter box move through the list"""
        if obj is self.filter_input and event.type() == QEvent.Type.KeyPress:
            key = event.key()
            if key == Qt.Key.Key_Down:
                self._move_selection(1)
                return True
            if key == Qt.Key.Key_Up:
                self._move_selection(-1)
                return True
            if key == Qt.Key.Key_Escape:
                self.cancel()
                return True
        return super().eventFilter(obj, event)

    def keyPressEvent(self, event):
        if event.key() == Qt.Key.Key_Escape:
            self.cancel()
            return
        super().keyPressEvent(event)
