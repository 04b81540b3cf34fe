"""Instrumented sources shared by the test modules."""


class CountingSource:
    """Re-iterable source without a length that records how much was pulled."""

    def __init__(self, items):
        self.items = list(items)
        self.passes = 0
        self.pulled = 0

    def __iter__(self):
        self.passes += 1
        for item in self.items:
            self.pulled += 1
            yield item


class CountingList(list):
    """A list that records how many times it was iterated."""
    passes = 0

    def __iter__(self):
        self.passes += 1
        return super().__iter__()


class LegacySequence:
    """Old-style sequence: __len__ and __getitem__, no __iter__."""

    def __init__(self, items):
        self._items = list(items)

    def __len__(self):
        return len(self._items)

    def __getitem__(self, index):
        return self._items[index]


def naturals():
    i = 0
    while True:
        yield i
        i += 1
