"""
Data models for bookmarks
"""

import math
from dataclasses import dataclass, field
from typing import Dict, Any, Optional


def _number(value, name: str):
    """Snapshot numbers must be finite ints or floats, never bools"""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValueError(f"{name} is not a number: {value!r}")
    return value


@dataclass
class BufferPoint:
    """A (row, column) position inside a text buffer, both 0-based"""
    row: int = 0
    column: int = 0

    def __post_init__(self):
        """Post-initialization processing"""
        self.row = max(0, int(self.row))
        self.column = max(0, int(self.column))

    def to_dict(self) -> Dict[str, int]:
        return {"row": self.row, "column": self.column}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BufferPoint':
        return cls(row=_number(data["row"], "row"), column=_number(data["column"], "column"))


@dataclass
class BufferRange:
    """A start/end pair of buffer points"""
    start: BufferPoint = field(default_factory=BufferPoint)
    end: BufferPoint = field(default_factory=BufferPoint)

    @classmethod
    def from_rows(cls, start_row: int, end_row: Optional[int] = None,
                  start_column: int = 0, end_column: int = 0) -> 'BufferRange':
        """Build a range from plain row/column numbers"""
        if end_row is None:
            end_row = start_row
        return cls(BufferPoint(start_row, start_column), BufferPoint(end_row, end_column))

    @property
    def is_empty(self) -> bool:
        """True when the range is a single point"""
        return self.start == self.end

    def to_dict(self) -> Dict[str, Any]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BufferRange':
        return cls(start=BufferPoint.from_dict(data["start"]),
                   end=BufferPoint.from_dict(data["end"]))


@dataclass
class BookmarkRecord:
    """A bookmarked line as kept in the durable store"""
    range: BufferRange
    content: str = ""
    relative_path: str = ""
    filter_text: str = ""
    created_at: float = 0

    @staticmethod
    def compose_filter_text(row: int, relative_path: str, content: str) -> str:
        """Search key used by the bookmarks list"""
        return f"{row} {relative_path} {content}"

    @property
    def row(self) -> int:
        """Row the bookmark starts at"""
        return self.range.start.row

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the snapshot field names"""
        return {
            "range": self.range.to_dict(),
            "content": self.content,
            "relativePath": self.relative_path,
            "filterText": self.filter_text,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BookmarkRecord':
        """Build a record from a snapshot entry; raises ValueError or KeyError on bad range or time fields"""
        bookmark_range = BufferRange.from_dict(data["range"])
        content = data.get("content")
        if content is None:
            # Older snapshots stored the line text under "bookmarkContent"
            content = data.get("bookmarkContent", "")
        content = str(content or "")
        relative_path = str(data.get("relativePath") or "")
        filter_text = data.get("filterText")
        if filter_text is None:
            filter_text = cls.compose_filter_text(bookmark_range.start.row, relative_path, content)
        created_at = data.get("createdAt")
        if created_at is None:
            created_at = 0
        return cls(
            range=bookmark_range,
            content=content,
            relative_path=relative_path,
            filter_text=str(filter_text),
            created_at=_number(created_at, "createdAt"),
        )


@dataclass
class ViewItem:
    """One row of the bookmarks list"""
    file_path: str
    relative_path: str
    line: int
    content: str = ""
    filter_text: str = ""
    created_at: float = 0

    @property
    def primary_text(self) -> str:
        """First line shown in the list"""
        return f"{self.relative_path} : {self.line}"


@dataclass
class NavigationTarget:
    """Where the editor should go when a list item is confirmed"""
    file_path: str
    line: int

    def __str__(self):
        """String representation of the target"""
        return f"{self.file_path}:{self.line}"
