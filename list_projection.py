"""
List Projection - view model for the bookmarks list
"""

from typing import List

from bookmark_store import BookmarkStore
from models import NavigationTarget, ViewItem


def build_items(store: BookmarkStore) -> List[ViewItem]:
    """Flatten the store into list items, most recently created first"""
    items = []
    for path, record in store.flatten():
        items.append(ViewItem(
            file_path=path,
            relative_path=record.relative_path,
            line=record.row,
            content=record.content,
            filter_text=record.filter_text,
            created_at=record.created_at,
        ))
    # sorted() is stable, ties keep flatten order
    return sorted(items, key=lambda item: item.created_at, reverse=True)


def resolve_navigation(item: ViewItem) -> NavigationTarget:
    return NavigationTarget(file_path=item.file_path, line=item.line)


def fuzzy_match(query: str, text: str) -> bool:
    """True when the query characters appear in text in order (case-insensitive)"""
    position = 0
    text = text.lower()
    for char in query.lower():
        if char.isspace():
            continue
        position = text.find(char, position)
        if position < 0:
            return False
        position += 1
    return True


def filter_items(items: List[ViewItem], query: str) -> List[ViewItem]:
    """Items whose filter text matches the query, in their original order"""
    query = (query or "").strip()
    if not query:
        return list(items)
    return [item for item in items if fuzzy_match(query, item.filter_text)]
