"""
Qt Document - marker layers on top of QTextDocument

Markers keep absolute character positions and update them from
QTextDocument.contentsChange, so bookmarks follow lines as text is
inserted or removed above them.
"""

from typing import List, Optional, Tuple

from PyQt6.QtWidgets import QPlainTextEdit, QTextEdit
from PyQt6.QtCore import QObject, pyqtSignal
from PyQt6.QtGui import QColor, QTextCharFormat, QTextCursor, QTextDocument, QTextFormat

from host_interfaces import (INVALIDATE_SURROUND, Decoration, Marker, MarkerLayer,
                             Subscription, TextDocument)
from models import BufferPoint, BufferRange
from settings import DEFAULT_HIGHLIGHT_COLOR


def point_to_position(document: QTextDocument, point: BufferPoint) -> int:
    """Character position of a (row, column) point, clipped to the document"""
    row = min(max(point.row, 0), max(document.blockCount() - 1, 0))
    block = document.findBlockByNumber(row)
    if not block.isValid():
        return 0
    column = min(max(point.column, 0), block.length() - 1)
    return block.position() + column


def position_to_point(document: QTextDocument, position: int) -> BufferPoint:
    block = document.findBlock(position)
    if not block.isValid():
        block = document.lastBlock()
        return BufferPoint(block.blockNumber(), max(block.length() - 1, 0))
    return BufferPoint(block.blockNumber(), position - block.position())


class QtSubscription(Subscription):
    """Disconnects one signal connection"""

    def __init__(self, signal, connection):
        self._signal = signal
        self._connection = connection

    def dispose(self):
        if self._connection is None:
            return
        try:
            self._signal.disconnect(self._connection)
        except (TypeError, RuntimeError):
            # Already disconnected or the sender is gone
            pass
        self._connection = None


class QtRangeMarker(QObject, Marker):
    """A live range in a QTextDocument"""
    changed = pyqtSignal(bool)  # is_valid

    def __init__(self, layer: 'QtMarkerLayer', start: int, end: int,
                 invalidate: str = INVALIDATE_SURROUND, exclusive: bool = True):
        super().__init__()
        self.layer = layer
        self.invalidate = invalidate
        self.exclusive = exclusive
        self._start = start
        self._end = max(start, end)
        self._valid = True
        self._destroyed = False

    @property
    def start_position(self) -> int:
        return self._start

    @property
    def end_position(self) -> int:
        return self._end

    def get_range(self) -> BufferRange:
        document = self.layer.document
        return BufferRange(position_to_point(document, self._start),
                           position_to_point(document, self._end))

    def is_valid(self) -> bool:
        return self._valid and not self._destroyed

    def is_destroyed(self) -> bool:
        return self._destroyed

    def destroy(self):
        if self._destroyed:
            return
        self._destroyed = True
        self.layer._remove_marker(self)

    def on_did_change(self, callback) -> Subscription:
        connection = self.changed.connect(callback)
        return QtSubscription(self.changed, connection)

    def _is_surrounded(self, position: int, change_end: int) -> bool:
        if self.invalidate != INVALIDATE_SURROUND or change_end == position:
            return False
        if self._start == self._end:
            return position < self._start < change_end
        return position <= self._start and change_end >= self._end

    def _shift(self, offset: int, position: int, removed: int, added: int, is_start: bool) -> int:
        change_end = position + removed
        if offset < position:
            return offset
        if removed == 0 and offset == position:
            # Insertion right at an edge: exclusive markers do not grow
            if is_start:
                return offset + added if self.exclusive else offset
            return offset if self.exclusive else offset + added
        if offset >= change_end:
            return offset + added - removed
        # Inside the replaced text
        if is_start and not self.exclusive:
            return position
        return position + added

    def apply_change(self, position: int, removed: int, added: int) -> bool:
        """Update for one document change; True if listeners should hear about it"""
        if not self.is_valid():
            return False
        change_end = position + removed
        if self._is_surrounded(position, change_end):
            self._valid = False
            return True
        start = self._shift(self._start, position, removed, added, True)
        if self._start == self._end:
            end = start
        else:
            end = max(start, self._shift(self._end, position, removed, added, False))
        moved = (start, end) != (self._start, self._end)
        touched = position <= self._end and change_end >= self._start
        self._start, self._end = start, end
        return moved or touched


class QtMarkerLayer(QObject, MarkerLayer):
    """Marker collection bound to one QTextDocument"""
    markers_changed = pyqtSignal()

    def __init__(self, document: QTextDocument):
        super().__init__()
        self.document = document
        self._markers: List[QtRangeMarker] = []
        self._destroyed = False
        self.document.contentsChange.connect(self._on_contents_change)

    def mark_range(self, buffer_range: BufferRange, invalidate: str = INVALIDATE_SURROUND,
                   exclusive: bool = True) -> QtRangeMarker:
        start = point_to_position(self.document, buffer_range.start)
        end = point_to_position(self.document, buffer_range.end)
        marker = QtRangeMarker(self, start, end, invalidate=invalidate, exclusive=exclusive)
        self._markers.append(marker)
        self.markers_changed.emit()
        return marker

    def get_markers(self) -> List[QtRangeMarker]:
        return list(self._markers)

    def find_markers(self, intersects_row_range: Tuple[int, int]) -> List[QtRangeMarker]:
        """Valid markers whose rows overlap the inclusive row range"""
        row_start, row_end = intersects_row_range
        if row_end < row_start:
            row_start, row_end = row_end, row_start
        found = []
        for marker in self._markers:
            if not marker.is_valid():
                continue
            marker_range = marker.get_range()
            if marker_range.start.row <= row_end and marker_range.end.row >= row_start:
                found.append(marker)
        return found

    def marked_rows(self) -> List[int]:
        return sorted({marker.get_range().start.row for marker in self._markers if marker.is_valid()})

    def is_destroyed(self) -> bool:
        return self._destroyed

    def destroy(self):
        if self._destroyed:
            return
        self._destroyed = True
        try:
            self.document.contentsChange.disconnect(self._on_contents_change)
        except (TypeError, RuntimeError):
            pass
        for marker in list(self._markers):
            marker.destroy()
        self._markers = []

    def _remove_marker(self, marker: QtRangeMarker):
        if marker in self._markers:
            self._markers.remove(marker)
            self.markers_changed.emit()

    def _on_contents_change(self, position: int, removed: int, added: int):
        notify = []
        for marker in list(self._markers):
            if marker.apply_change(position, removed, added):
                notify.append(marker)
        for marker in notify:
            marker.changed.emit(marker.is_valid())
        if notify:
            self.markers_changed.emit()


class LineDecoration(QObject, Decoration):
    """Highlights the bookmarked lines of an editor through extra selections"""

    def __init__(self, editor: QPlainTextEdit, layer: QtMarkerLayer, color: str = DEFAULT_HIGHLIGHT_COLOR):
        super().__init__()
        self.editor = editor
        self.layer = layer
        self.color = QColor(color)
        if not self.color.isValid():
            self.color = QColor(DEFAULT_HIGHLIGHT_COLOR)
        self._destroyed = False
        self.layer.markers_changed.connect(self.refresh)
        self.refresh()

    def refresh(self):
        if self._destroyed:
            return
        try:
            selections = []
            document = self.editor.document()
            for row in self.layer.marked_rows():
                block = document.findBlockByNumber(row)
                if not block.isValid():
                    continue
                fmt = QTextCharFormat()
                fmt.setBackground(self.color)
                fmt.setProperty(QTextFormat.Property.FullWidthSelection, True)
                selection = QTextEdit.ExtraSelection()
                selection.cursor = QTextCursor(block)
                selection.format = fmt
                selections.append(selection)
            self.editor.setExtraSelections(selections)
        except Exception as e:
            print(f"Bookmark highlight error: {e}")

    def destroy(self):
        if self._destroyed:
            return
        self._destroyed = True
        try:
            self.layer.markers_changed.disconnect(self.refresh)
        except (TypeError, RuntimeError):
            pass
        try:
            self.editor.setExtraSelections([])
        except RuntimeError:
            # Editor already deleted by Qt
            pass


class QtTextDocument(TextDocument):
    """A QPlainTextEdit seen as a bookmarkable document"""

    def __init__(self, editor: QPlainTextEdit, path: Optional[str] = None,
                 highlight_color: str = DEFAULT_HIGHLIGHT_COLOR):
        self.editor = editor
        self.path = path
        self.highlight_color = highlight_color

    def document(self) -> QTextDocument:
        return self.editor.document()

    def get_path(self) -> Optional[str]:
        return self.path or None

    def line_text(self, row: int) -> str:
        block = self.document().findBlockByNumber(row)
        return block.text() if block.isValid() else ""

    def line_count(self) -> int:
        return self.document().blockCount()

    def selected_ranges(self) -> List[BufferRange]:
        cursor = self.editor.textCursor()
        document = self.document()
        return [BufferRange(position_to_point(document, cursor.selectionStart()),
                            position_to_point(document, cursor.selectionEnd()))]

    def set_selected_range(self, buffer_range: BufferRange):
        document = self.document()
        cursor = QTextCursor(document)
        cursor.setPosition(point_to_position(document, buffer_range.start))
        cursor.setPosition(point_to_position(document, buffer_range.end),
                           QTextCursor.MoveMode.KeepAnchor)
        self.editor.setTextCursor(cursor)

    def go_to_row(self, row: int):
        """Put the cursor at the start of a row and scroll it into view"""
        self.set_selected_range(BufferRange.from_rows(row))
        self.editor.centerCursor()
        self.editor.setFocus()

    def add_marker_layer(self) -> QtMarkerLayer:
        return QtMarkerLayer(self.document())

    def decorate_marker_layer(self, layer: QtMarkerLayer) -> LineDecoration:
        return LineDecoration(self.editor, layer, self.highlight_color)
