import os
import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import unittest

from bookmark_store import BookmarkStore
from models import BookmarkRecord, BufferRange
from list_projection import build_items
from helpers import make_record


class TestBookmarkStore(unittest.TestCase):
    """BookmarkStore mapping operations"""

    def setUp(self):
        self.store = BookmarkStore()

    def test_records_for_unknown_path_is_empty(self):
        self.assertEqual(self.store.records_for("/missing.txt"), [])
        self.assertNotIn("/missing.txt", self.store)

    def test_add_keeps_insertion_order(self):
        self.store.add("/a.txt", make_record(8))
        self.store.add("/a.txt", make_record(2))
        self.store.add("/a.txt", make_record(5))
        self.assertEqual(self.store.rows_for("/a.txt"), [8, 2, 5])
        self.assertEqual(len(self.store), 3)

    def test_add_does_not_deduplicate(self):
        self.store.add("/a.txt", make_record(3))
        self.store.add("/a.txt", make_record(3))
        self.assertEqual(self.store.rows_for("/a.txt"), [3, 3])

    def test_remove_at_row_matches_start_row_only(self):
        self.store.add("/a.txt", make_record(4, end_row=6))
        self.store.add("/a.txt", make_record(5))
        self.assertEqual(self.store.remove_at_row("/a.txt", 6), 0)
        self.assertEqual(self.store.remove_at_row("/a.txt", 4), 1)
        self.assertEqual(self.store.rows_for("/a.txt"), [5])

    def test_remove_at_row_removes_every_match(self):
        self.store.add("/a.txt", make_record(3))
        self.store.add("/a.txt", make_record(7))
        self.store.add("/a.txt", make_record(3))
        self.assertEqual(self.store.remove_at_row("/a.txt", 3), 2)
        self.assertEqual(self.store.rows_for("/a.txt"), [7])

    def test_remove_at_row_unknown_path_is_noop(self):
        self.assertEqual(self.store.remove_at_row("/nothing.txt", 1), 0)
        self.assertEqual(self.store.flatten(), [])

    def test_remove_record_uses_identity(self):
        first = make_record(3)
        twin = make_record(3)
        self.store.add("/a.txt", first)
        self.store.add("/a.txt", twin)
        self.assertTrue(self.store.remove_record("/a.txt", twin))
        remaining = self.store.records_for("/a.txt")
        self.assertEqual(len(remaining), 1)
        self.assertIs(remaining[0], first)
        self.assertFalse(self.store.remove_record("/a.txt", twin))

    def test_records_for_returns_a_copy(self):
        self.store.add("/a.txt", make_record(1))
        self.store.records_for("/a.txt").clear()
        self.assertEqual(self.store.rows_for("/a.txt"), [1])

    def test_flatten_walks_paths_in_order(self):
        self.store.add("/a.txt", make_record(1))
        self.store.add("/b.txt", make_record(2, path_label="b.txt"))
        self.store.add("/a.txt", make_record(3))
        flattened = [(path, record.row) for path, record in self.store.flatten()]
        self.assertEqual(flattened, [("/a.txt", 1), ("/a.txt", 3), ("/b.txt", 2)])

    def test_clear_empties_everything(self):
        self.store.add("/a.txt", make_record(1))
        self.store.add("/b.txt", make_record(2))
        self.store.clear()
        self.assertEqual(self.store.flatten(), [])
        self.assertEqual(self.store.paths(), [])

    def test_paths_skip_emptied_entries(self):
        self.store.add("/a.txt", make_record(1))
        self.store.add("/b.txt", make_record(2))
        self.store.remove_at_row("/a.txt", 1)
        self.assertEqual(self.store.paths(), ["/b.txt"])

    def test_snapshot_round_trip(self):
        self.store.add("/a.txt", make_record(4, created_at=100, end_row=6))
        self.store.add("/a.txt", make_record(1, created_at=300))
        self.store.add("/b.txt", make_record(9, created_at=200, path_label="b.txt"))
        restored = BookmarkStore.from_snapshot(self.store.to_snapshot())
        self.assertEqual(restored.flatten(), self.store.flatten())

    def test_snapshot_uses_wire_field_names(self):
        self.store.add("/a.txt", make_record(2, created_at=42))
        entry = self.store.to_snapshot()["/a.txt"][0]
        self.assertEqual(entry, {
            "range": {"start": {"row": 2, "column": 0}, "end": {"row": 2, "column": 0}},
            "content": "line 2",
            "relativePath": "a.txt",
            "filterText": "2 a.txt line 2",
            "createdAt": 42,
        })

    def test_from_snapshot_skips_malformed_entries(self):
        good = make_record(2).to_dict()
        data = {
            "/a.txt": [good, {"content": "no range"}, "junk", None],
            "/b.txt": "not a list",
        }
        restored = BookmarkStore.from_snapshot(data)
        self.assertEqual(restored.rows_for("/a.txt"), [2])
        self.assertEqual(restored.records_for("/b.txt"), [])

    def test_from_snapshot_skips_entries_with_non_numeric_fields(self):
        bad_time = make_record(1).to_dict()
        bad_time["createdAt"] = "yesterday"
        bool_time = make_record(3).to_dict()
        bool_time["createdAt"] = True
        bad_row = make_record(4).to_dict()
        bad_row["range"]["start"]["row"] = "4"
        bad_column = make_record(6).to_dict()
        bad_column["range"]["end"]["column"] = float("inf")
        good = make_record(2, created_at=5).to_dict()
        data = {"/a.txt": [bad_time, bool_time, bad_row, bad_column, good]}

        restored = BookmarkStore.from_snapshot(data)
        self.assertEqual(restored.rows_for("/a.txt"), [2])
        items = build_items(restored)
        self.assertEqual([(item.line, item.created_at) for item in items], [(2, 5)])

    def test_from_snapshot_defaults_missing_created_at(self):
        entry = make_record(8).to_dict()
        del entry["createdAt"]
        restored = BookmarkStore.from_snapshot({"/a.txt": [entry]})
        self.assertEqual(restored.records_for("/a.txt")[0].created_at, 0)

    def test_from_snapshot_of_non_mapping_is_empty(self):
        for data in (None, [], "text", 12):
            self.assertEqual(BookmarkStore.from_snapshot(data).flatten(), [])

    def test_from_snapshot_fills_missing_filter_text(self):
        data = {"/a.txt": [{
            "range": {"start": {"row": 7, "column": 0}, "end": {"row": 7, "column": 3}},
            "bookmarkContent": "def main():",
            "relativePath": "a.py",
        }]}
        record = BookmarkStore.from_snapshot(data).records_for("/a.txt")[0]
        self.assertEqual(record.content, "def main():")
        self.assertEqual(record.filter_text, "7 a.py def main():")
        self.assertEqual(record.range, BufferRange.from_rows(7, 7, 0, 3))
        self.assertEqual(record.created_at, 0)

    def test_compose_filter_text(self):
        self.assertEqual(BookmarkRecord.compose_filter_text(12, "src/app.py", "return x"),
                         "12 src/app.py return x")


if __name__ == '__main__':
    unittest.main()
