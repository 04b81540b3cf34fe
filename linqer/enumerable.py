from __future__ import annotations

import builtins
import dataclasses
import itertools
import logging
import operator
import warnings
from itertools import islice
from typing import Any, Callable, Dict, Generic, Iterable, Iterator, List, Optional, Set as TSet, Tuple, TypeVar

import numpy as np

from . import arrow_bridge
from .capabilities import classify_source, resolve_count, resolve_seek, scan_count, scan_lookup
from .common import (CountStrategy, DEFAULT_POLICY, EqualityComparer, Found, Number, Once, Policy,
                     SeekCapability, SourceKind, Stats, SumAndCount, add_numbers, default_comparer,
                     ensure_function, identity, to_number)
from .exceptions import (EmptySequenceError, IndexOutOfRangeError, InvalidSourceError,
                         UnsupportedEagerAccessError)

T = TypeVar('T')
K = TypeVar('K')
U = TypeVar('U')
V = TypeVar('V')

_logger = logging.getLogger(__name__)


class Enumerable(Generic[T]):
    """
    Lazy wrapper over an iterable, a generator function or another Enumerable.

    Operations return new Enumerables and run nothing until the result is
    consumed. Each Enumerable also knows, lazily, how to count itself and how
    to reach an element by position; operations derive those from their
    parents so that, as long as every step has a closed form, ``count()`` and
    ``element_at()`` never iterate.

    Iterating is re-entrant unless the wrapped source is a single-use iterator
    (a generator object, a file, ``iter(...)``). Such a source is consumed by
    the first pass, and later passes yield only what is left, usually nothing.
    """

    def __init__(self, source: Iterable[T] | Callable[[], Iterable[T]] | Enumerable[T],
                 policy: Optional[Policy] = None):
        if isinstance(source, Enumerable):
            kind = SourceKind.NESTED
            parents: Tuple[Enumerable, ...] = (source,)
            policy = policy or source._policy
        else:
            kind = classify_source(source)
            if kind is None:
                raise InvalidSourceError(
                    message=f'the argument must be iterable or a zero-argument generator function, '
                            f'got {type(source).__name__}')
            parents = ()
        self._source = source
        self._kind = kind
        self._policy: Policy = policy or DEFAULT_POLICY
        self._op = 'from'
        self._parents = parents
        self._was_iterated = False
        self._count_cell: Once[CountStrategy] = Once(lambda: resolve_count(self))
        self._seek_cell: Once[SeekCapability] = Once(lambda: resolve_seek(self))

    @classmethod
    def from_iterable(cls, source: Iterable[T] | Callable[[], Iterable[T]] | Enumerable[T]) -> Enumerable[T]:
        """Wrap a source, returning it unchanged when it already is an Enumerable."""
        if isinstance(source, Enumerable):
            return source
        return cls(source)

    @classmethod
    def _derive(cls, producer: Callable[[], Iterable[U]], op: str, parents: Tuple[Enumerable, ...],
                policy: Policy,
                count: Optional[Callable[[], CountStrategy]] = None,
                seek: Optional[Callable[[], SeekCapability]] = None) -> Enumerable[U]:
        """
        Build the result of an operation.

        count and seek are factories run at most once, on first demand. When
        one is omitted the resolver treats the producer like any generator
        function: counted and indexed by scanning.
        """
        result = cls(producer, policy)
        result._op = op
        result._parents = parents
        if count is not None:
            result._count_cell = Once(count)
        if seek is not None:
            result._seek_cell = Once(seek)
        return result

    # Factories

    @classmethod
    def empty(cls) -> Enumerable:
        return cls._derive(lambda: iter(()), 'empty', (), DEFAULT_POLICY,
                           count=lambda: (lambda: 0),
                           seek=lambda: SeekCapability(True, lambda index: None))

    @classmethod
    def range(cls, start: Number, count: int) -> Enumerable[Number]:
        """Sequence of ``count`` consecutive numbers starting at ``start``."""
        count = max(0, count)

        def try_get_at(index: int) -> Optional[Found]:
            if 0 <= index < count:
                return Found(start + index)
            return None

        return cls._derive(lambda: (start + i for i in builtins.range(count)), 'range', (), DEFAULT_POLICY,
                           count=lambda: (lambda: count),
                           seek=lambda: SeekCapability(True, try_get_at))

    @classmethod
    def repeat(cls, item: T, count: int) -> Enumerable[T]:
        count = max(0, count)

        def try_get_at(index: int) -> Optional[Found]:
            if 0 <= index < count:
                return Found(item)
            return None

        return cls._derive(lambda: itertools.repeat(item, count), 'repeat', (), DEFAULT_POLICY,
                           count=lambda: (lambda: count),
                           seek=lambda: SeekCapability(True, try_get_at))

    # Iteration and capabilities

    def __iter__(self) -> Iterator[T]:
        return self._iterate(self._policy)

    def _iterate(self, policy: Policy) -> Iterator[T]:
        # policy is the outermost handle's, passed down through NESTED wrappers
        if self._was_iterated and self._kind is SourceKind.ITERATOR and policy.warn_on_reiteration:
            _logger.warning(f"{self!r} wraps a single-use iterator that was already iterated; "
                            f"this pass may yield nothing")
        self._was_iterated = True
        if self._kind is SourceKind.NESTED:
            return self._source._iterate(policy)
        if self._kind is SourceKind.PRODUCER:
            produced = self._source()
            try:
                return iter(produced)
            except TypeError as e:
                raise InvalidSourceError(
                    message=f'the source function must return an iterable, got {type(produced).__name__}',
                    exception_type=e.__class__.__name__) from e
        return iter(self._source)

    def __length_hint__(self) -> int:
        if self._seek().seekable:
            return self.count()
        return NotImplemented

    def __repr__(self) -> str:
        return f"Enumerable(op={self._op}, source={self._kind.value})"

    def _count_strategy(self) -> CountStrategy:
        return self._count_cell.get()

    def _seek(self) -> SeekCapability:
        return self._seek_cell.get()

    @property
    def source(self) -> Any:
        return self._source

    @property
    def source_kind(self) -> SourceKind:
        return self._kind

    @property
    def policy(self) -> Policy:
        return self._policy

    @property
    def was_iterated(self) -> bool:
        return self._was_iterated

    @property
    def seekable(self) -> bool:
        """True when count() and element_at() do not iterate."""
        return self._seek().seekable

    @property
    def length(self) -> int:
        """
        Same value as count(), but refuses to iterate.

        :raises UnsupportedEagerAccessError: when the Enumerable is not seekable.
        """
        if not self._seek().seekable:
            raise UnsupportedEagerAccessError(
                message='Calling length on this enumerable will iterate it. Use count()')
        return self.count()

    def with_policy(self, policy: Policy) -> Enumerable[T]:
        q = Enumerable(self, policy)
        q._op = 'with_policy'
        return q

    def on_scan(self, mode: str) -> Enumerable[T]:
        return self.with_policy(dataclasses.replace(self._policy, on_scan=mode))

    def _check_scan(self, op: str, stacklevel: int = 3):
        mode = self._policy.on_scan
        if mode == 'error':
            raise UnsupportedEagerAccessError(
                message=f'{op}() would scan a non-seekable enumerable; call to_list() first or relax the policy')
        elif mode == 'warn':
            warnings.warn(f'{op}() is scanning a non-seekable enumerable', RuntimeWarning, stacklevel=stacklevel)

    def _lookup(self, index: int, op: str) -> Optional[Found]:
        # called straight from a public method: warn at that method's caller
        index = operator.index(index)
        capability = self._seek()
        if not capability.seekable:
            self._check_scan(op, stacklevel=4)
        return capability.try_get_at(index)

    # Intermediate operators (lazy)

    def select(self, selector: Callable[[T], U]) -> Enumerable[U]:
        """
        Projects each element into a new form.

        Count and seekability are the parent's; positional access applies the
        selector to the parent's element only.
        """
        ensure_function(selector, 'selector')
        parent = self

        def seek() -> SeekCapability:
            capability = parent._seek()
            lookup = capability.try_get_at

            def try_get_at(index: int) -> Optional[Found]:
                found = lookup(index)
                if found is None:
                    return None
                return Found(selector(found.value))

            return SeekCapability(capability.seekable, try_get_at)

        return self._derive(lambda: (selector(x) for x in parent), 'select', (self,), self._policy,
                            count=parent._count_strategy, seek=seek)

    def where(self, predicate: Callable[[T], bool]) -> Enumerable[T]:
        """Filters elements; the result can only be counted or indexed by scanning."""
        ensure_function(predicate, 'predicate')
        parent = self
        return self._derive(lambda: (x for x in parent if predicate(x)), 'where', (self,), self._policy)

    def take(self, nr: int) -> Enumerable[T]:
        nr = max(0, nr)
        parent = self

        def count() -> CountStrategy:
            if not parent._seek().seekable:
                # bounded by nr, unlike scanning the parent
                return lambda: scan_count(result)
            parent_count = parent._count_strategy()
            return lambda: min(nr, parent_count())

        def seek() -> SeekCapability:
            capability = parent._seek()
            lookup = capability.try_get_at
            return SeekCapability(capability.seekable, lambda index: lookup(index) if index < nr else None)

        result = self._derive(lambda: islice(parent, nr), 'take', (self,), self._policy, count=count, seek=seek)
        return result

    def skip(self, nr: int) -> Enumerable[T]:
        nr = max(0, nr)
        parent = self

        def count() -> CountStrategy:
            parent_count = parent._count_strategy()
            return lambda: max(0, parent_count() - nr)

        def seek() -> SeekCapability:
            capability = parent._seek()
            lookup = capability.try_get_at
            return SeekCapability(capability.seekable, lambda index: lookup(index + nr) if index >= 0 else None)

        return self._derive(lambda: islice(parent, nr, None), 'skip', (self,), self._policy, count=count, seek=seek)

    def concat(self, iterable: Iterable[T] | Enumerable[T]) -> Enumerable[T]:
        """
        Appends another sequence.

        Seekable when both sides are; positional access reads the left side
        and continues on the right side without iterating either.
        """
        left = self
        right = Enumerable.from_iterable(iterable)

        def produce() -> Iterator[T]:
            yield from left
            yield from right

        def count() -> CountStrategy:
            left_count = left._count_strategy()
            right_count = right._count_strategy()
            return lambda: left_count() + right_count()

        def seek() -> SeekCapability:
            left_capability = left._seek()
            right_capability = right._seek()
            if not left_capability.seekable:
                return SeekCapability(False, scan_lookup(result))
            left_count = left._count_strategy()

            def try_get_at(index: int) -> Optional[Found]:
                found = left_capability.try_get_at(index)
                if found is not None or index < 0:
                    return found
                return right_capability.try_get_at(index - left_count())

            return SeekCapability(right_capability.seekable, try_get_at)

        result = self._derive(produce, 'concat', (self, right), self._policy, count=count, seek=seek)
        return result

    def splice(self, start: int, howmany: Optional[int] = None, *items: T) -> Enumerable[T]:
        """
        Same elements a list would hold after ``Array.prototype.splice(start, howmany, *items)``.

        A negative start counts from the end, which needs the count; that part
        of the composition is deferred until the result is first used.
        """
        if start >= 0:
            composed = self._splice(start, howmany, items)
            return self._derive(lambda: iter(composed), 'splice', (composed,), self._policy,
                                count=composed._count_strategy, seek=composed._seek)
        parent = self
        deferred: Once[Enumerable[T]] = Once(
            lambda: parent._splice(max(0, parent.count() + start), howmany, items))
        return self._derive(lambda: iter(deferred.get()), 'splice', (self,), self._policy,
                            count=lambda: deferred.get()._count_strategy(),
                            seek=lambda: deferred.get()._seek())

    def _splice(self, start: int, howmany: Optional[int], items: Tuple[T, ...]) -> Enumerable[T]:
        head = self.take(start).concat(list(items))
        if howmany is None:
            return head
        return head.concat(self.skip(start + max(0, howmany)))

    def distinct(self, equality_comparer: Callable[[T, T], bool] = EqualityComparer.default) -> Enumerable[T]:
        """
        Returns distinct elements, keeping the first occurrence.

        With the default comparer a set decides distinctness in O(n), so
        elements must be hashable. A custom equality function compares each
        element with every value yielded so far, which is O(n^2).
        """
        ensure_function(equality_comparer, 'equality comparer')
        parent = self
        if equality_comparer is EqualityComparer.default:
            def produce() -> Iterator[T]:
                seen: set = set()
                for item in parent:
                    if item not in seen:
                        seen.add(item)
                        yield item
        else:
            def produce() -> Iterator[T]:
                values: List[T] = []
                for item in parent:
                    if not builtins.any(equality_comparer(item, value) for value in values):
                        values.append(item)
                        yield item
        return self._derive(produce, 'distinct', (self,), self._policy)

    # Terminal operators

    def count(self) -> int:
        return self._count_strategy()()

    def element_at(self, index: int) -> T:
        found = self._lookup(index, 'element_at')
        if found is None:
            raise IndexOutOfRangeError(message=f'Index {index} out of range')
        return found.value

    def element_at_or_default(self, index: int, default: Optional[T] = None) -> Optional[T]:
        found = self._lookup(index, 'element_at_or_default')
        if found is None:
            return default
        return found.value

    def first(self) -> T:
        found = self._lookup(0, 'first')
        if found is None:
            self._raise_empty()
        return found.value

    def first_or_default(self, default: Optional[T] = None) -> Optional[T]:
        found = self._lookup(0, 'first_or_default')
        return default if found is None else found.value

    def last(self) -> T:
        if not self._seek().seekable:
            self._check_scan('last')
            found = None
            for item in self:
                found = Found(item)
            if found is None:
                self._raise_empty()
            return found.value
        return self.element_at(self.count() - 1)

    def last_or_default(self, default: Optional[T] = None) -> Optional[T]:
        if not self._seek().seekable:
            self._check_scan('last_or_default')
            result = default
            for item in self:
                result = item
            return result
        return self.element_at_or_default(self.count() - 1, default)

    def _raise_empty(self):
        if self._seek().seekable:
            raise IndexOutOfRangeError(message='Index 0 out of range')
        raise EmptySequenceError(message='The enumeration is empty')

    def stats(self, comparer: Optional[Callable[[Any, Any], int]] = None) -> Stats:
        """
        Count, minimum and maximum in a single pass.

        comparer(a, b) returns -1, 0 or 1; the default orders with ``<``/``>``
        and treats values Python cannot order as equal.
        """
        if comparer is not None:
            ensure_function(comparer, 'comparer')
        else:
            comparer = default_comparer
        count = 0
        lo = hi = None
        for item in self:
            if count == 0 or comparer(item, lo) < 0:
                lo = item
            if count == 0 or comparer(item, hi) > 0:
                hi = item
            count += 1
        return Stats(count=count, min=lo, max=hi)

    def min(self, comparer: Optional[Callable[[Any, Any], int]] = None) -> Any:
        stats = self.stats(comparer)
        return None if stats.count == 0 else stats.min

    def max(self, comparer: Optional[Callable[[Any, Any], int]] = None) -> Any:
        stats = self.stats(comparer)
        return None if stats.count == 0 else stats.max

    def sum(self) -> Optional[Number]:
        """Sum of the elements, None when empty; non-numbers count as NaN."""
        agg = self.sum_and_count()
        return None if agg.count == 0 else agg.sum

    def sum_and_count(self) -> SumAndCount:
        total: Number = 0
        count = 0
        for item in self:
            total = to_number(item) if count == 0 else add_numbers(total, to_number(item))
            count += 1
        return SumAndCount(sum=total, count=count)

    def average(self) -> Optional[float]:
        agg = self.sum_and_count()
        return None if agg.count == 0 else agg.sum / agg.count

    def any(self, predicate: Optional[Callable[[T], bool]] = None) -> bool:
        it = self.where(predicate) if predicate is not None else self
        for _ in it:
            return True
        return False

    def all(self, predicate: Callable[[T], bool]) -> bool:
        ensure_function(predicate, 'predicate')
        for x in self:
            if not predicate(x):
                return False
        return True

    def to_array(self) -> List[T]:
        """
        Materializes the elements into a list.

        A seekable Enumerable is read by position into a preallocated list,
        anything else is iterated once.
        """
        capability = self._seek()
        if capability.seekable:
            arr: List[Any] = [None] * self.count()
            for i in builtins.range(len(arr)):
                found = capability.try_get_at(i)
                arr[i] = None if found is None else found.value
            return arr
        return list(self)

    def to_list(self) -> Enumerable[T]:
        """Like to_array(), but returns a seekable Enumerable (itself when already seekable)."""
        if self._seek().seekable:
            return self
        _logger.debug(f"Materializing {self!r} to make it seekable")
        q = Enumerable(self.to_array(), self._policy)
        q._op = 'to_list'
        q._parents = (self,)
        return q

    def to_set(self) -> TSet[T]:
        return set(self)

    def to_dict(self, key_selector: Callable[[T], K], value_selector: Callable[[T], V] = identity) -> Dict[K, V]:
        ensure_function(key_selector, 'key selector')
        ensure_function(value_selector, 'value selector')
        out: Dict[K, V] = {}
        for x in self:
            k = key_selector(x)
            if k in out:
                raise ValueError("Duplicate key in to_dict: %r" % (k,))
            out[k] = value_selector(x)
        return out

    def to_numpy(self, dtype: Any = float) -> np.ndarray:
        """
        Materializes into a 1-D numpy array.

        When the Enumerable is seekable the array is allocated once with the
        known count.
        """
        if self._seek().seekable:
            return np.fromiter(self, dtype=dtype, count=self.count())
        return np.fromiter(self, dtype=dtype)

    def to_arrow_array(self, type: Any = None) -> Any:
        return arrow_bridge.to_arrow_array(self, type=type)

    def to_arrow_table(self, columns: Optional[List[str]] = None) -> Any:
        return arrow_bridge.to_arrow(self, columns=columns)

    def explain(self, format: str = "text") -> str | dict:
        """
        Describes the operation chain and where it stops being seekable.

        Resolves capabilities but never iterates. The text form reads left to
        right from the source, e.g. ``from:list[seek] -> where[scan] -> take[scan]``.
        """
        if format == 'json':
            return self._explain_node()
        return self._explain_text()

    def _explain_label(self) -> str:
        mark = 'seek' if self._seek().seekable else 'scan'
        if self._op == 'from' and self._kind is not SourceKind.NESTED:
            return f"from:{type(self._source).__name__}[{mark}]"
        return f"{self._op}[{mark}]"

    def _explain_text(self) -> str:
        label = self._explain_label()
        if not self._parents:
            return label
        extra = [p._explain_text() for p in self._parents[1:]]
        if extra:
            label = f"{self._op}({', '.join(extra)})[{'seek' if self._seek().seekable else 'scan'}]"
        return f"{self._parents[0]._explain_text()} -> {label}"

    def _explain_node(self) -> dict:
        return {
            "op": self._op,
            "source": self._kind.value,
            "seekable": self._seek().seekable,
            "parents": [p._explain_node() for p in self._parents],
        }


def from_iterable(source: Iterable[T] | Callable[[], Iterable[T]] | Enumerable[T]) -> Enumerable[T]:
    """Entry point to build an Enumerable from an iterable, a generator function or an Enumerable."""
    return Enumerable.from_iterable(source)
