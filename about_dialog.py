"""
About Dialog for Lotus Bookmarks
Shows application information with copyable paths
"""

import sys
import os
from PyQt6.QtWidgets import (QDialog, QVBoxLayout, QLabel, QPushButton, QLineEdit,
                             QGroupBox, QApplication)
from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QFont
from version import __version__, __build_date__, __app_name__


class AboutDialog(QDialog):
    """About dialog showing application, file and bookmark information"""

    def __init__(self, parent=None, current_file_path=None, bookmark_count=0):
        super().__init__(parent)
        self.current_file_path = current_file_path
        self.bookmark_count = bookmark_count
        self.setWindowTitle(f"About {__app_name__}")
        self.setMinimumWidth(600)
        self._setup_ui()

    def _setup_ui(self):
        """Setup the user interface"""
        layout = QVBoxLayout()
        layout.setSpacing(15)

        title_label = QLabel(f"{__app_name__}")
        title_font = QFont()
        title_font.setPointSize(16)
        title_font.setBold(True)
        title_label.setFont(title_font)
        title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(title_label)

        version_label = QLabel(f"Version: {__version__}  Build Date: {__build_date__}")
        version_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(version_label)

        self.count_label = QLabel(f"Bookmarks: {self.bookmark_count}")
        self.count_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.count_label)

        layout.addWidget(self._path_group("Application Path", sys.executable))

        if self.current_file_path:
            file_path = os.path.abspath(self.current_file_path)
        else:
            file_path = ""
        layout.addWidget(self._path_group("Current File", file_path))

        layout.addStretch()

        close_btn = QPushButton("Close")
        close_btn.clicked.connect(self.accept)
        close_btn.setDefault(True)
        layout.addWidget(close_btn)

        self.setLayout(layout)

    def _path_group(self, title, path):
        group = QGroupBox(title)
        group_layout = QVBoxLayout()

        path_text = QLineEdit(path or "No file opened")
        path_text.setReadOnly(True)
        group_layout.addWidget(path_text)

        copy_btn = QPushButton("Copy to Clipboard")
        copy_btn.setEnabled(bool(path))
        copy_btn.clicked.connect(lambda: self._copy_to_clipboard(copy_btn, path))
        group_layout.addWidget(copy_btn)

        group.setLayout(group_layout)
        return group

    def _copy_to_clipboard(self, button, text):
        """Copy text to clipboard"""
        QApplication.clipboard().setText(text)
        original_text = button.text()
        button.setText("Copied!")
        button.setEnabled(False)
        QTimer.singleShot(1000, lambda: self._reset_button(button, original_text))

    def _reset_button(self, button, original_text):
        """Reset button text and state"""
        button.setText(original_text)
        button.setEnabled(True)
