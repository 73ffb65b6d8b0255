"""
Integration tests for the editor window and bookmark persistence
"""

import os
import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import shutil
import tempfile
import unittest
from unittest import mock

from PyQt6.QtCore import QSettings
from PyQt6.QtWidgets import QApplication

from main import MainWindow
from models import BufferRange
from helpers import get_app, numbered_text, insert_text


class TestMainWindowBookmarks(unittest.TestCase):
    """Bookmarks across tabs and sessions"""

    @classmethod
    def setUpClass(cls):
        cls.app = get_app()

    def setUp(self):
        self.temp_dir = os.path.realpath(tempfile.mkdtemp())
        self.ini_path = os.path.join(self.temp_dir, "settings.ini")
        settings = self._settings()
        settings.setValue("project_root", self.temp_dir)
        settings.sync()
        self.file_a = os.path.join(self.temp_dir, "a.txt")
        self.file_b = os.path.join(self.temp_dir, "sub", "b.txt")
        os.makedirs(os.path.dirname(self.file_b))
        for path in (self.file_a, self.file_b):
            with open(path, 'w', encoding='utf-8') as f:
                f.write(numbered_text())
        self.windows = []

    def tearDown(self):
        for window in self.windows:
            window.bookmarks.deactivate()
            window.deleteLater()
        QApplication.processEvents()
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _settings(self):
        return QSettings(self.ini_path, QSettings.Format.IniFormat)

    def _window(self, files):
        window = MainWindow(files, qsettings=self._settings())
        self.windows.append(window)
        return window

    def _toggle(self, window, row):
        window.active_document().set_selected_range(BufferRange.from_rows(row))
        window.toggle_bookmark()

    def test_toggle_reports_in_status_bar(self):
        window = self._window([self.file_a])
        self._toggle(window, 3)
        self.assertEqual(window.status_label.text(), "Bookmark added to line 4")
        self._toggle(window, 3)
        self.assertEqual(window.status_label.text(), "Bookmark removed from line 4")

    def test_untitled_buffer_cannot_be_bookmarked(self):
        window = self._window([])
        window.new_file()
        window.toggle_bookmark()
        self.assertEqual(window.bookmarks.store.flatten(), [])
        self.assertEqual(window.status_label.text(), "Save the file to bookmark it")

    def test_relative_paths_use_project_root(self):
        window = self._window([self.file_b])
        self._toggle(window, 2)
        item = window.bookmarks.items()[0]
        self.assertEqual(item.relative_path, os.path.join("sub", "b.txt"))
        self.assertEqual(item.file_path, self.file_b)

    def test_bookmarks_survive_restart(self):
        window = self._window([self.file_a])
        self._toggle(window, 6)
        window.save_bookmarks()
        window.bookmarks.deactivate()

        restarted = self._window([self.file_a])
        self.assertEqual(restarted.bookmarks.store.rows_for(self.file_a), [6])
        document = restarted.active_document()
        layer = restarted.bookmarks.tracker.layer_for(document)
        self.assertEqual([m.get_range().start.row for m in layer.get_markers()], [6])

    def test_bookmark_follows_edit_and_navigation_targets_stored_line(self):
        window = self._window([self.file_a])
        self._toggle(window, 6)
        document = window.active_document()
        insert_text(document, 1, 0, "added\n")
        layer = window.bookmarks.tracker.layer_for(document)
        self.assertEqual([m.get_range().start.row for m in layer.get_markers()], [7])

        item = window.bookmarks.items()[0]
        window.bookmarks.confirm(item)
        self.assertEqual(document.editor.textCursor().blockNumber(), 6)

    def test_confirm_opens_closed_file(self):
        window = self._window([self.file_a, self.file_b])
        self._toggle(window, 9)
        window.close_tab(window.tab_widget.currentIndex())
        self.assertEqual(window.tab_widget.count(), 1)

        item = window.bookmarks.items()[0]
        window.bookmarks.confirm(item)
        self.assertEqual(window.tab_widget.count(), 2)
        document = window.active_document()
        self.assertEqual(document.get_path(), self.file_b)
        self.assertEqual(document.editor.textCursor().blockNumber(), 9)
        layer = window.bookmarks.tracker.layer_for(document)
        self.assertEqual(len(layer.get_markers()), 1)

    def test_save_as_onto_open_file_is_refused(self):
        window = self._window([self.file_a, self.file_b])
        self._toggle(window, 9)
        editor_b = window.tab_widget.currentWidget()
        with mock.patch("main.QFileDialog.getSaveFileName", return_value=(self.file_a, "")), \
                mock.patch("main.QMessageBox.warning") as warning:
            window.save_file(save_as=True)

        warning.assert_called_once()
        self.assertEqual(editor_b.file_path, self.file_b)
        self.assertEqual(window.active_document().get_path(), self.file_a)
        with open(self.file_a, encoding="utf-8") as f:
            self.assertEqual(f.read(), numbered_text())
        # The other tab keeps its own layer with its own bookmark
        self.assertEqual(window.bookmarks.store.rows_for(self.file_b), [9])
        self.assertIsNone(window.bookmarks.tracker.layer_for(window.active_document()))

    def test_save_as_to_new_path_renames_tab(self):
        window = self._window([self.file_a])
        target = os.path.join(self.temp_dir, "c.txt")
        with mock.patch("main.QFileDialog.getSaveFileName", return_value=(target, "")):
            window.save_file(save_as=True)
        self.assertEqual(window.active_document().get_path(), target)
        self.assertEqual(window.tab_widget.tabText(0), "c.txt")
        self.assertTrue(os.path.exists(target))

    def test_opening_same_file_reuses_tab(self):
        window = self._window([self.file_a])
        window.open_path(self.file_a)
        self.assertEqual(window.tab_widget.count(), 1)

    def test_missing_file_reports_error(self):
        window = self._window([])
        self.assertIsNone(window.open_path(os.path.join(self.temp_dir, "missing.txt")))
        self.assertEqual(window.tab_widget.count(), 0)

    def test_clear_bookmarks_command(self):
        window = self._window([self.file_a])
        self._toggle(window, 1)
        self._toggle(window, 2)
        window.clear_bookmarks()
        self.assertEqual(window.bookmarks.store.flatten(), [])
        self.assertEqual(window.status_label.text(), "All bookmarks cleared")


if __name__ == '__main__':
    unittest.main()
