"""
Property-based tests for bookmarks

Covers toggle pairing, snapshot round-trips and list ordering.
"""

import os
import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import unittest
from hypothesis import given, strategies as st, settings, HealthCheck
from hypothesis.strategies import composite

import persistence
from bookmark_store import BookmarkStore
from list_projection import build_items
from marker_tracker import LiveMarkerTracker
from models import BookmarkRecord, BufferPoint, BufferRange
from toggle_engine import ToggleEngine
from helpers import get_app, make_document


@composite
def record_strategy(draw):
    """Generate a random bookmark record"""
    start_row = draw(st.integers(min_value=0, max_value=500))
    end_row = start_row + draw(st.integers(min_value=0, max_value=5))
    start = BufferPoint(start_row, draw(st.integers(min_value=0, max_value=80)))
    end = BufferPoint(end_row, draw(st.integers(min_value=0, max_value=80)))
    content = draw(st.text(max_size=40))
    relative_path = draw(st.text(min_size=1, max_size=20))
    return BookmarkRecord(
        range=BufferRange(start, end),
        content=content,
        relative_path=relative_path,
        filter_text=BookmarkRecord.compose_filter_text(start_row, relative_path, content),
        created_at=draw(st.integers(min_value=0, max_value=2 ** 45)),
    )


@composite
def store_strategy(draw):
    """Generate a store with a few paths"""
    store = BookmarkStore()
    paths = draw(st.lists(st.text(min_size=1, max_size=30).map(lambda p: "/" + p),
                          max_size=4, unique=True))
    for path in paths:
        for record in draw(st.lists(record_strategy(), min_size=1, max_size=6)):
            store.add(path, record)
    return store


class TestSnapshotProperties(unittest.TestCase):

    @given(store_strategy())
    def test_load_of_save_is_identity(self, store):
        """Property: load(save(store)) has the same flattened records"""
        restored = persistence.load(persistence.save(store))
        self.assertEqual(restored.flatten(), store.flatten())


class TestOrderingProperties(unittest.TestCase):

    @given(store_strategy())
    def test_items_never_increase_in_time(self, store):
        """Property: items are ordered by creation time, newest first"""
        times = [item.created_at for item in build_items(store)]
        self.assertEqual(times, sorted(times, reverse=True))
        self.assertEqual(len(times), len(store))

    def test_example_order(self):
        store = BookmarkStore()
        for row, created_at in ((0, 100), (1, 300), (2, 200)):
            store.add("/a.txt", BookmarkRecord(BufferRange.from_rows(row), created_at=created_at))
        self.assertEqual([item.created_at for item in build_items(store)], [300, 200, 100])


class TestToggleProperties(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.app = get_app()

    @settings(max_examples=30, deadline=None, suppress_health_check=[HealthCheck.too_slow])
    @given(st.lists(st.integers(min_value=0, max_value=19), max_size=6, unique=True),
           st.integers(min_value=0, max_value=19))
    def test_toggle_twice_restores_rows(self, existing_rows, row):
        """Property: toggling one row twice leaves the row set unchanged"""
        store = BookmarkStore()
        tracker = LiveMarkerTracker(store)
        engine = ToggleEngine(store, tracker)
        document = make_document("/a.txt")
        try:
            for existing in existing_rows:
                engine.toggle(document, [BufferRange.from_rows(existing)])
            before = sorted(store.rows_for("/a.txt"))
            engine.toggle(document, [BufferRange.from_rows(row)])
            engine.toggle(document, [BufferRange.from_rows(row)])
            self.assertEqual(sorted(store.rows_for("/a.txt")), before)
        finally:
            tracker.teardown_all()


if __name__ == '__main__':
    unittest.main()
