import unittest

import numpy as np

try:
    import pyarrow as pa  # type: ignore
    have_arrow = True
except Exception:  # pragma: no cover
    have_arrow = False

from linqer import ArrowNotAvailable, Enumerable, InvalidOperationArgumentError

from .helpers import CountingList, CountingSource


class TestToArray(unittest.TestCase):
    def test_seekable_reads_by_position(self):
        src = CountingList([1, 2, 3])
        q = Enumerable(src).select(lambda x: x * x)
        self.assertEqual(q.to_array(), [1, 4, 9])
        self.assertEqual(src.passes, 0)
        self.assertFalse(q.was_iterated)

    def test_scan_iterates_once(self):
        src = CountingSource([3, 2, 1])
        q = Enumerable(src).where(lambda x: x != 2)
        self.assertEqual(q.to_array(), [3, 1])
        self.assertEqual(src.passes, 1)
        self.assertTrue(q.was_iterated)

    def test_length_matches_count(self):
        for q in (Enumerable([1, 2, 3]), Enumerable.range(0, 7).where(lambda x: x > 2), Enumerable.empty()):
            self.assertEqual(len(q.to_array()), q.count())

    def test_list_builtin_uses_length_hint(self):
        self.assertEqual(list(Enumerable.range(0, 3)), [0, 1, 2])
        self.assertEqual(list(Enumerable(CountingSource([1]))), [1])


class TestToList(unittest.TestCase):
    def test_seekable_returns_itself(self):
        q = Enumerable([1, 2])
        self.assertIs(q.to_list(), q)

    def test_materializes_scan_sources(self):
        src = CountingSource([1, 2, 3, 4])
        q = Enumerable(src).where(lambda x: x % 2 == 0).to_list()
        self.assertTrue(q.seekable)
        self.assertEqual(q.count(), 2)
        self.assertEqual(q.element_at(1), 4)
        self.assertEqual(q.last(), 4)
        self.assertEqual(src.passes, 1)


class TestCollections(unittest.TestCase):
    def test_to_set(self):
        self.assertEqual(Enumerable([1, 2, 2]).to_set(), {1, 2})

    def test_to_dict(self):
        rows = [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]
        self.assertEqual(Enumerable(rows).to_dict(lambda r: r["id"], lambda r: r["name"]), {1: "a", 2: "b"})
        self.assertEqual(Enumerable(rows).to_dict(lambda r: r["name"]), {"a": rows[0], "b": rows[1]})

    def test_to_dict_duplicate_key(self):
        with self.assertRaises(ValueError):
            Enumerable([1, 1]).to_dict(lambda x: x)

    def test_to_dict_requires_key_selector(self):
        with self.assertRaises(InvalidOperationArgumentError):
            Enumerable([1]).to_dict(None)


class TestNumpy(unittest.TestCase):
    def test_to_numpy_seekable(self):
        arr = Enumerable.range(0, 4).to_numpy()
        np.testing.assert_array_equal(arr, np.array([0.0, 1.0, 2.0, 3.0]))
        self.assertEqual(arr.dtype, np.float64)

    def test_to_numpy_scan(self):
        arr = Enumerable([5, 6, 7, 8]).where(lambda x: x > 5).to_numpy(dtype=np.int64)
        np.testing.assert_array_equal(arr, np.array([6, 7, 8]))

    def test_numpy_round_through_select(self):
        q = Enumerable(np.arange(5)).select(lambda x: x * 2)
        self.assertTrue(q.seekable)
        np.testing.assert_array_equal(q.to_numpy(dtype=np.int64), np.array([0, 2, 4, 6, 8]))


class TestArrowBridge(unittest.TestCase):
    def test_to_arrow_array(self):
        q = Enumerable([1, 2, 3]).select(lambda x: x + 1)
        if not have_arrow:
            with self.assertRaises(ArrowNotAvailable):
                q.to_arrow_array()
        else:
            arr = q.to_arrow_array()
            self.assertEqual(len(arr), 3)
            self.assertEqual(arr.to_pylist(), [2, 3, 4])

    def test_to_arrow_table(self):
        rows = Enumerable([{"a": 1, "b": "x"}, {"a": 2}])
        if not have_arrow:
            with self.assertRaises(ArrowNotAvailable):
                rows.to_arrow_table()
        else:
            tbl = rows.to_arrow_table()
            self.assertEqual(tbl.num_rows, 2)
            self.assertEqual(tbl.column("b").to_pylist(), ["x", None])
            tbl = rows.to_arrow_table(columns=["a"])
            self.assertEqual(tbl.column_names, ["a"])

    @unittest.skipUnless(have_arrow, "pyarrow not installed")
    def test_arrow_array_source_is_seekable(self):
        q = Enumerable(pa.array([1, 2, 3]))
        self.assertTrue(q.seekable)
        self.assertEqual(q.count(), 3)
        self.assertEqual(q.element_at(1).as_py(), 2)


if __name__ == '__main__':
    unittest.main()
