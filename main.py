#!/usr/bin/env python3
"""
Lotus Bookmarks - Python Version
A plain text editor with bookmarks that follow edits and survive restarts
"""

import sys
import os
from typing import Dict, List, Optional

from version import __version__, __app_name__
from PyQt6.QtWidgets import (QApplication, QMainWindow, QPlainTextEdit, QTabWidget,
                             QVBoxLayout, QWidget, QLabel, QFileDialog, QMessageBox)
from PyQt6.QtCore import QSettings
from PyQt6.QtGui import QAction, QFont

from about_dialog import AboutDialog
from bookmarks_app import BookmarksApplication
from bookmarks_panel import BookmarksPanel
from host_interfaces import Workspace
from persistence import SnapshotStorage
from qt_document import QtTextDocument
from settings import BookmarkSettings, relativize_path, set_debug, debug
from settings_dialog import SettingsDialog
from toggle_engine import ADDED


class EditorWidget(QPlainTextEdit):
    """Plain text editor for one file"""

    def __init__(self, parent=None):
        super().__init__(parent)
        font = QFont("Consolas", 10)
        font.setStyleHint(QFont.StyleHint.Monospace)
        self.setFont(font)
        self.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)
        self.file_path: Optional[str] = None

    def load(self, file_path: str):
        """Read a file into the editor"""
        with open(file_path, 'r', encoding='utf-8') as f:
            content = f.read()
        self.setPlainText(content)
        self.document().setModified(False)
        self.file_path = os.path.abspath(file_path)

    def save(self, file_path: Optional[str] = None):
        """Write the editor content to file_path or the current file"""
        target = os.path.abspath(file_path) if file_path else self.file_path
        if not target:
            raise ValueError("No file path to save to")
        with open(target, 'w', encoding='utf-8') as f:
            f.write(self.toPlainText())
        self.document().setModified(False)
        self.file_path = target

    def display_name(self) -> str:
        return os.path.basename(self.file_path) if self.file_path else "Untitled"


class MainWindow(QMainWindow, Workspace):
    """Main application window"""

    def __init__(self, file_paths: Optional[List[str]] = None, qsettings: Optional[QSettings] = None):
        super().__init__()
        self.settings = BookmarkSettings(qsettings)
        set_debug(self.settings.debug_mode)
        self._documents: Dict[EditorWidget, QtTextDocument] = {}

        self.setWindowTitle(f"{__app_name__} - Python Version")
        self.setGeometry(100, 100, 1000, 700)

        self._create_central_widget()
        self._create_status_bar()

        self.bookmarks = BookmarksApplication(self, self.bookmarks_panel,
                                              prune_invalidated=self.settings.prune_invalidated)
        self.snapshot_storage = SnapshotStorage(self.settings.qsettings)
        try:
            self.bookmarks.activate(self.snapshot_storage.read())
        except Exception as e:
            print(f"Error restoring bookmarks: {e}")
            self.bookmarks.activate(None)

        self._create_menu_bar()

        for file_path in file_paths or []:
            self.open_path(file_path)

    def _create_central_widget(self):
        """Bookmarks list above the editor tabs"""
        central = QWidget()
        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)

        self.bookmarks_panel = BookmarksPanel(self)
        layout.addWidget(self.bookmarks_panel)

        self.tab_widget = QTabWidget()
        self.tab_widget.setTabsClosable(True)
        self.tab_widget.tabCloseRequested.connect(self.close_tab)
        layout.addWidget(self.tab_widget)

        central.setLayout(layout)
        self.setCentralWidget(central)

    def _create_status_bar(self):
        self.status_label = QLabel("Ready")
        self.statusBar().addWidget(self.status_label)

    def _create_menu_bar(self):
        """Create menu bar"""
        menubar = self.menuBar()

        file_menu = menubar.addMenu("File")
        new_action = QAction("New", self)
        new_action.setShortcut("Ctrl+N")
        new_action.triggered.connect(self.new_file)
        file_menu.addAction(new_action)

        open_action = QAction("Open...", self)
        open_action.setShortcut("Ctrl+O")
        open_action.triggered.connect(lambda: self.open_file_dialog())
        file_menu.addAction(open_action)

        save_action = QAction("Save", self)
        save_action.setShortcut("Ctrl+S")
        save_action.triggered.connect(self.save_file)
        file_menu.addAction(save_action)

        save_as_action = QAction("Save As...", self)
        save_as_action.setShortcut("Ctrl+Shift+S")
        save_as_action.triggered.connect(lambda: self.save_file(save_as=True))
        file_menu.addAction(save_as_action)

        file_menu.addSeparator()
        settings_action = QAction("Settings...", self)
        settings_action.triggered.connect(self.show_settings)
        file_menu.addAction(settings_action)

        exit_action = QAction("Exit", self)
        exit_action.setShortcut("Ctrl+Q")
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        bookmarks_menu = menubar.addMenu("Bookmarks")
        self.toggle_bookmark_action = QAction("Set/Toggle Bookmark", self)
        self.toggle_bookmark_action.setShortcut("Ctrl+Alt+F2")
        self.toggle_bookmark_action.triggered.connect(self.toggle_bookmark)
        bookmarks_menu.addAction(self.toggle_bookmark_action)

        self.view_all_action = QAction("View All Bookmarks", self)
        self.view_all_action.setShortcut("Ctrl+Alt+B")
        self.view_all_action.triggered.connect(self.view_all_bookmarks)
        bookmarks_menu.addAction(self.view_all_action)

        bookmarks_menu.addSeparator()
        clear_action = QAction("Clear All Bookmarks", self)
        clear_action.setShortcut("Ctrl+Shift+B")
        clear_action.triggered.connect(self.clear_bookmarks)
        bookmarks_menu.addAction(clear_action)

        help_menu = menubar.addMenu("Help")
        about_action = QAction("About", self)
        about_action.triggered.connect(self.show_about)
        help_menu.addAction(about_action)

    # Workspace

    def active_document(self) -> Optional[QtTextDocument]:
        editor = self.tab_widget.currentWidget()
        return self._documents.get(editor)

    def open_file(self, path: str, line: int):
        """Open path, or focus its tab, and put the cursor on line"""
        document = self.open_path(path)
        if document is None:
            return
        document.go_to_row(line)
        self.status_label.setText(f"Jumped to bookmark at line {line + 1}")

    def relativize_path(self, path: str):
        return relativize_path(path, self.settings.project_root)

    # Tabs

    def _find_tab(self, path: str) -> int:
        absolute = os.path.abspath(path)
        for index in range(self.tab_widget.count()):
            editor = self.tab_widget.widget(index)
            if getattr(editor, 'file_path', None) == absolute:
                return index
        return -1

    def _add_editor(self, editor: EditorWidget) -> QtTextDocument:
        document = QtTextDocument(editor, editor.file_path, self.settings.highlight_color)
        self._documents[editor] = document
        index = self.tab_widget.addTab(editor, editor.display_name())
        self.tab_widget.setCurrentIndex(index)
        return document

    def open_path(self, file_path: str) -> Optional[QtTextDocument]:
        """Open a file in a new tab unless it is already open"""
        index = self._find_tab(file_path)
        if index >= 0:
            self.tab_widget.setCurrentIndex(index)
            return self._documents.get(self.tab_widget.widget(index))
        editor = EditorWidget()
        try:
            editor.load(file_path)
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error opening file '{file_path}': {e}")
            self.status_label.setText(f"Could not open {os.path.basename(file_path)}")
            editor.deleteLater()
            return None
        document = self._add_editor(editor)
        restored = self.bookmarks.document_opened(document)
        if restored:
            debug(f"Restored {restored} bookmark(s) for {file_path}")
        self.status_label.setText(f"Opened file: {os.path.basename(file_path)}")
        return document

    def open_file_dialog(self):
        file_path, _ = QFileDialog.getOpenFileName(self, "Open File", "", "All Files (*.*)")
        if file_path:
            self.open_path(file_path)

    def new_file(self):
        self._add_editor(EditorWidget())

    def save_file(self, save_as: bool = False):
        editor = self.tab_widget.currentWidget()
        if editor is None:
            return
        document = self._documents.get(editor)
        file_path = None
        if save_as or not editor.file_path:
            file_path, _ = QFileDialog.getSaveFileName(self, "Save File", editor.file_path or "",
                                                       "All Files (*.*)")
            if not file_path:
                return
            other = self._find_tab(file_path)
            if other >= 0 and self.tab_widget.widget(other) is not editor:
                # Bookmark layers are keyed by path, one tab per file
                QMessageBox.warning(self, "Save As",
                                    f"{os.path.basename(file_path)} is already open in another tab.")
                self.tab_widget.setCurrentIndex(other)
                return
        old_path = editor.file_path
        try:
            editor.save(file_path)
        except (OSError, ValueError) as e:
            QMessageBox.critical(self, "Error", f"Failed to save file: {str(e)}")
            return
        if document is not None and editor.file_path != old_path:
            # Bookmarks are keyed by path, so a renamed buffer starts over
            self.bookmarks.document_closed(document)
            document.path = editor.file_path
            self.bookmarks.document_opened(document)
        self.tab_widget.setTabText(self.tab_widget.indexOf(editor), editor.display_name())
        self.status_label.setText(f"Saved {editor.display_name()}")

    def close_tab(self, index: int):
        editor = self.tab_widget.widget(index)
        document = self._documents.pop(editor, None)
        if document is not None:
            self.bookmarks.document_closed(document)
        self.tab_widget.removeTab(index)
        if editor is not None:
            editor.deleteLater()

    # Bookmark commands

    def toggle_bookmark(self):
        """Toggle bookmark at current line"""
        document = self.active_document()
        if document is None or not document.get_path():
            self.status_label.setText("Save the file to bookmark it")
            return
        results = self.bookmarks.toggle_bookmark()
        for result in results:
            if result.action == ADDED:
                self.status_label.setText(f"Bookmark added to line {result.row + 1}")
            else:
                self.status_label.setText(f"Bookmark removed from line {result.row + 1}")

    def view_all_bookmarks(self):
        self.bookmarks.view_all()

    def clear_bookmarks(self):
        """Clear all bookmarks"""
        self.bookmarks.clear_all()
        self.status_label.setText("All bookmarks cleared")

    # Dialogs

    def show_settings(self):
        dialog = SettingsDialog(self, self.settings)
        dialog.exec()

    def show_about(self):
        editor = self.tab_widget.currentWidget()
        current = getattr(editor, 'file_path', None)
        dialog = AboutDialog(self, current, len(self.bookmarks.store))
        dialog.exec()

    def save_bookmarks(self):
        self.snapshot_storage.write(self.bookmarks.serialize())

    def closeEvent(self, event):
        """Handle close event"""
        try:
            self.save_bookmarks()
        except Exception as e:
            print(f"Error saving bookmarks: {e}")
        self.bookmarks.deactivate()
        event.accept()


def main():
    """Main function"""
    app = QApplication(sys.argv)
    app.setApplicationName(__app_name__)
    app.setApplicationVersion(__version__)
    app.setStyle("Fusion")

    file_paths = [os.path.abspath(path) for path in sys.argv[1:]]

    window = MainWindow(file_paths)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
