"""Randomized checks of the laws every chain should satisfy, seekable or not."""
import random
import unittest

from linqer import Enumerable


class TestProperties(unittest.TestCase):
    def setUp(self):
        self.rng = random.Random(1234)

    def _samples(self, rounds=40):
        for _ in range(rounds):
            items = [self.rng.randint(-5, 5) for _ in range(self.rng.randint(0, 12))]
            yield items, Enumerable(items)
            yield items, Enumerable(lambda items=items: iter(items))
            yield items, Enumerable(items).where(lambda x: True)

    def test_element_at_is_idempotent(self):
        for items, q in self._samples():
            for index in range(len(items)):
                self.assertEqual(q.element_at(index), q.element_at(index))
                self.assertEqual(q.element_at(index), items[index])

    def test_to_array_length_is_count(self):
        for items, q in self._samples():
            chain = q.select(lambda x: x * 2).skip(1).take(7)
            self.assertEqual(len(chain.to_array()), chain.count())
            self.assertEqual(chain.to_array(), [x * 2 for x in items[1:8]])

    def test_concat_is_additive(self):
        for items, q in self._samples():
            other = Enumerable.range(100, self.rng.randint(0, 4))
            joined = q.concat(other)
            self.assertEqual(joined.count(), q.count() + other.count())
            if other.count():
                self.assertEqual(joined.element_at(q.count()), other.element_at(0))

    def test_take_skip_reconstructs(self):
        for items, q in self._samples():
            n = self.rng.randint(0, len(items) + 2)
            self.assertEqual(q.take(n).count(), min(n, q.count()))
            self.assertEqual(q.take(n).concat(q.skip(n)).to_array(), items)

    def test_distinct_keeps_first_occurrences(self):
        for items, q in self._samples():
            expected = list(dict.fromkeys(items))
            self.assertEqual(q.distinct().to_array(), expected)
            self.assertEqual(q.distinct(lambda a, b: a == b).to_array(), expected)


if __name__ == '__main__':
    unittest.main()
