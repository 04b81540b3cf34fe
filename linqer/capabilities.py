"""
Capability resolution for Enumerable sources.

An Enumerable answers three questions lazily: how to count it, how to reach
an element by position, and whether that positional access avoids scanning.
The answers are derived here from the source the Enumerable wraps, at most
once per Enumerable, and memoized by the caller in a ``Once`` cell.

Sources are tagged at construction (see ``classify_source``):

* NESTED: another Enumerable; its resolved capabilities are reused as is.
* SEQUENCE: str, bytes, list, tuple, range, numpy arrays, Arrow arrays and
  registered ``collections.abc.Sequence`` types; counted with ``len()`` and
  indexed directly.
* SIZED: has ``len()`` but positional indexing is not guaranteed (sets,
  mappings, deques, views). Counted with ``len()``; seekable only when a probe
  index succeeds on a non-mapping type.
* ITERABLE / ITERATOR / PRODUCER: counted and indexed by scanning.

A PRODUCER is a generator function or another zero-argument callable. What a
plain callable returns is only known once it is called, so a non-iterable
result is rejected with InvalidSourceError on first iteration.
"""
from __future__ import annotations

import inspect
import logging
from collections import deque
from collections.abc import Iterable, Iterator, Mapping, Sequence, Sized
from itertools import islice
from typing import Any, Optional, TYPE_CHECKING

import numpy as np

from .common import CountStrategy, Found, Lookup, SeekCapability, SourceKind

# Optional imports
try:
    import pyarrow as pa  # type: ignore
except ImportError:  # pragma: no cover
    pa = None

if TYPE_CHECKING:
    from .enumerable import Enumerable

_logger = logging.getLogger(__name__)

_INDEXABLE_TYPES: tuple = (str, bytes, bytearray, np.ndarray)
if pa is not None:
    _INDEXABLE_TYPES += (pa.Array, pa.ChunkedArray)


def _accepts_no_arguments(fn: Any) -> bool:
    try:
        inspect.signature(fn).bind()
    except TypeError:
        return False
    except ValueError:
        # No introspectable signature (some builtins); trust the caller
        return True
    return True


def classify_source(source: Any) -> Optional[SourceKind]:
    """
    Tag a raw (non-Enumerable) source, or return None when it can't be iterated.

    Nothing is iterated or indexed here.
    """
    if source is None:
        return None
    if isinstance(source, np.ndarray) and source.ndim == 0:
        return None
    if isinstance(source, deque):
        # deque indexing walks blocks, it is not O(1)
        return SourceKind.SIZED
    if isinstance(source, _INDEXABLE_TYPES) or isinstance(source, Sequence):
        return SourceKind.SEQUENCE
    if isinstance(source, Sized) and (isinstance(source, Iterable) or hasattr(type(source), '__getitem__')):
        return SourceKind.SIZED
    if isinstance(source, Iterator):
        return SourceKind.ITERATOR
    if isinstance(source, Iterable) or hasattr(type(source), '__getitem__'):
        return SourceKind.ITERABLE
    if inspect.isgeneratorfunction(source):
        return SourceKind.PRODUCER
    # Calling a class builds one object, not a sequence
    if callable(source) and not isinstance(source, type) and _accepts_no_arguments(source):
        return SourceKind.PRODUCER
    return None


def index_lookup(source: Any) -> Lookup:
    """Bounds-checked direct indexing; negative positions are misses."""
    def try_get_at(index: int) -> Optional[Found]:
        if 0 <= index < len(source):
            return Found(source[index])
        return None
    return try_get_at


def scan_lookup(iterable: Iterable) -> Lookup:
    """Positional access by iterating up to the target index and no further."""
    def try_get_at(index: int) -> Optional[Found]:
        if index < 0:
            return None
        for item in islice(iterable, index, index + 1):
            return Found(item)
        return None
    return try_get_at


def scan_count(iterable: Iterable) -> int:
    return sum(1 for _ in iterable)


def _probe_indexable(source: Any) -> bool:
    if isinstance(source, (Mapping, deque)) or not hasattr(type(source), '__getitem__'):
        return False
    if len(source) == 0:
        return True
    try:
        source[0]
    except (TypeError, KeyError, IndexError):
        return False
    return True


def resolve_count(enumerable: Enumerable) -> CountStrategy:
    """
    Pick the counting strategy for an Enumerable built straight from a source.

    The strategy is what gets memoized, not its result: a scanning strategy
    iterates again on every call.
    """
    kind = enumerable.source_kind
    source = enumerable.source
    if kind is SourceKind.NESTED:
        inner = source._count_strategy()
        return lambda: inner()
    if kind in (SourceKind.SEQUENCE, SourceKind.SIZED):
        return lambda: len(source)
    _logger.debug(f"Count of {enumerable!r} will scan the source")
    return lambda: scan_count(enumerable)


def resolve_seek(enumerable: Enumerable) -> SeekCapability:
    """
    Pick the positional access strategy and decide seekability.

    Optimistic: anything indexable in O(1) or O(log n) is seekable, everything
    else falls back to a scan that stops at the requested index.
    """
    kind = enumerable.source_kind
    source = enumerable.source
    if kind is SourceKind.NESTED:
        capability = source._seek()
    elif kind is SourceKind.SEQUENCE:
        capability = SeekCapability(True, index_lookup(source))
    elif kind is SourceKind.SIZED and _probe_indexable(source):
        capability = SeekCapability(True, index_lookup(source))
    else:
        capability = SeekCapability(False, scan_lookup(enumerable))
    _logger.debug(f"Resolved seek for {enumerable!r}: seekable={capability.seekable}")
    return capability
