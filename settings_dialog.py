"""
Settings Dialog - Grouped key/value table with filter
"""

from PyQt6.QtWidgets import (QDialog, QVBoxLayout, QHBoxLayout, QTableWidget,
                             QTableWidgetItem, QLineEdit, QLabel, QCheckBox, QWidget,
                             QHeaderView, QDialogButtonBox)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor

from settings import BookmarkSettings, set_debug


class SettingsDialog(QDialog):
    """Settings dialog with grouped key/value table and filter"""

    def __init__(self, parent=None, settings: BookmarkSettings = None):
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.setMinimumSize(700, 400)
        self.parent_window = parent
        self.settings = settings or BookmarkSettings()

        # Settings structure: {group: {key: (label, type, description)}}
        self.settings_structure = {
            "Bookmarks": {
                "prune_invalidated": ("Prune Invalidated Bookmarks", "bool",
                                      "Forget a bookmark when an edit deletes the text it marks"),
                "highlight_color": ("Highlight Color", "str", "Background color of bookmarked lines"),
            },
            "Project": {
                "project_root": ("Project Root", "str", "Bookmark paths are shown relative to this folder"),
            },
            "Debug": {
                "debug_mode": ("Debug Mode", "bool", "Enable console debug messages"),
            },
        }

        self.current_values = {}
        self._load_current_values()
        self._setup_ui()
        self._populate_table()

    def _load_current_values(self):
        """Load current values from QSettings"""
        for group, items in self.settings_structure.items():
            for key in items:
                self.current_values[key] = self.settings.value(key)

    def _setup_ui(self):
        """Setup the UI"""
        layout = QVBoxLayout()

        filter_layout = QHBoxLayout()
        filter_label = QLabel("Filter:")
        self.filter_input = QLineEdit()
        self.filter_input.setPlaceholderText("Type to filter settings...")
        self.filter_input.textChanged.connect(self._apply_filter)
        filter_layout.addWidget(filter_label)
        filter_layout.addWidget(self.filter_input)
        layout.addLayout(filter_layout)

        self.table = QTableWidget()
        self.table.setColumnCount(4)
        self.table.setHorizontalHeaderLabels(["Group", "Setting", "Value", "Description"])
        header = self.table.horizontalHeader()
        for column in range(3):
            header.setSectionResizeMode(column, QHeaderView.ResizeMode.ResizeToContents)
        header.setSectionResizeMode(3, QHeaderView.ResizeMode.Stretch)
        self.table.setAlternatingRowColors(True)
        self.table.verticalHeader().setVisible(False)
        layout.addWidget(self.table)

        button_box = QDialogButtonBox(QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel)
        button_box.accepted.connect(self._save_and_close)
        button_box.rejected.connect(self.reject)
        layout.addWidget(button_box)

        self.setLayout(layout)

    def _read_only_item(self, text: str) -> QTableWidgetItem:
        item = QTableWidgetItem(text)
        item.setFlags(item.flags() & ~Qt.ItemFlag.ItemIsEditable)
        return item

    def _populate_table(self):
        """Populate the table with settings"""
        self.table.setRowCount(0)
        row = 0

        for group, items in self.settings_structure.items():
            for key, (label, value_type, desc) in items.items():
                self.table.insertRow(row)

                group_item = self._read_only_item(group)
                group_item.setBackground(QColor(240, 240, 240))
                self.table.setItem(row, 0, group_item)
                self.table.setItem(row, 1, self._read_only_item(label))

                value = self.current_values.get(key)
                if value_type == "bool":
                    checkbox = QCheckBox()
                    checkbox.setChecked(bool(value))
                    checkbox.setProperty("setting_key", key)
                    container = QWidget()
                    container_layout = QHBoxLayout()
                    container_layout.addWidget(checkbox)
                    container_layout.setAlignment(Qt.AlignmentFlag.AlignCenter)
                    container_layout.setContentsMargins(0, 0, 0, 0)
                    container.setLayout(container_layout)
                    self.table.setCellWidget(row, 2, container)
                else:
                    value_item = QTableWidgetItem(str(value or ""))
                    value_item.setData(Qt.ItemDataRole.UserRole, key)
                    self.table.setItem(row, 2, value_item)

                self.table.setItem(row, 3, self._read_only_item(desc))
                row += 1

        self.table.resizeRowsToContents()

    def _apply_filter(self):
        """Apply filter to table rows"""
        filter_text = self.filter_input.text().lower()

        for row in range(self.table.rowCount()):
            show_row = False
            for col in range(self.table.columnCount()):
                item = self.table.item(row, col)
                if item and filter_text in item.text().lower():
                    show_row = True
                    break
            self.table.setRowHidden(row, not show_row)

    def collect_values(self) -> dict:
        """Values currently entered in the table"""
        values = {}
        for row in range(self.table.rowCount()):
            widget = self.table.cellWidget(row, 2)
            if widget is not None and widget.layout():
                checkbox = widget.layout().itemAt(0).widget()
                if isinstance(checkbox, QCheckBox):
                    values[checkbox.property("setting_key")] = checkbox.isChecked()
                continue
            item = self.table.item(row, 2)
            if item:
                values[item.data(Qt.ItemDataRole.UserRole)] = item.text().strip()
        return values

    def _save_and_close(self):
        """Save settings and close dialog"""
        for key, value in self.collect_values().items():
            self.settings.set_value(key, value)
            self.current_values[key] = value

        if self.parent_window:
            self._apply_settings_to_parent()

        self.accept()

    def _apply_settings_to_parent(self):
        """Apply settings to parent window immediately"""
        parent = self.parent_window
        set_debug(self.current_values.get("debug_mode", False))

        if hasattr(parent, "bookmarks"):
            parent.bookmarks.set_prune_invalidated(self.current_values.get("prune_invalidated", False))

        if hasattr(parent, "status_label"):
            parent.status_label.setText("Settings applied")
