"""
Shared helpers for the bookmark tests
"""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication, QPlainTextEdit
from PyQt6.QtGui import QTextCursor

from models import BookmarkRecord, BufferPoint, BufferRange
from qt_document import QtTextDocument, point_to_position


def get_app():
    """Shared QApplication for all Qt tests"""
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    return app


def numbered_text(count=20):
    return "\n".join(f"line {i}" for i in range(count))


def make_document(path="/a.txt", text=None):
    editor = QPlainTextEdit()
    editor.setPlainText(numbered_text() if text is None else text)
    return QtTextDocument(editor, path)


def insert_text(document, row, column, text):
    qdoc = document.document()
    cursor = QTextCursor(qdoc)
    cursor.setPosition(point_to_position(qdoc, BufferPoint(row, column)))
    cursor.insertText(text)


def delete_rows(document, first_row, last_row):
    """Delete whole rows first_row..last_row including their line breaks"""
    qdoc = document.document()
    cursor = QTextCursor(qdoc)
    cursor.setPosition(point_to_position(qdoc, BufferPoint(first_row, 0)))
    cursor.setPosition(point_to_position(qdoc, BufferPoint(last_row + 1, 0)),
                       QTextCursor.MoveMode.KeepAnchor)
    cursor.removeSelectedText()


def make_record(row, created_at=0, end_row=None, path_label="a.txt", content=None):
    content = f"line {row}" if content is None else content
    return BookmarkRecord(
        range=BufferRange.from_rows(row, end_row),
        content=content,
        relative_path=path_label,
        filter_text=BookmarkRecord.compose_filter_text(row, path_label, content),
        created_at=created_at,
    )
