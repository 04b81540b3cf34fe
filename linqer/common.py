"""
Basic definitions shared by the resolver and the operation set
"""
from __future__ import annotations

import enum
import math
import numbers
from dataclasses import dataclass
from typing import Any, Callable, Generic, NamedTuple, Optional, TypeVar

from .exceptions import InvalidOperationArgumentError

T = TypeVar('T')
Number = float | int

SCAN_MODES = ('fallback', 'warn', 'error')


class Found(NamedTuple):
    """
    Result of a positional lookup that hit an element.

    Lookups return ``Found(value)`` or ``None``, so a stored ``None`` element
    is never mistaken for a miss.
    """
    value: Any


Lookup = Callable[[int], Optional[Found]]
CountStrategy = Callable[[], int]


class SourceKind(enum.Enum):
    """Tag of the source an Enumerable wraps, assigned once at construction."""
    NESTED = 'nested'
    SEQUENCE = 'sequence'
    SIZED = 'sized'
    ITERABLE = 'iterable'
    ITERATOR = 'iterator'
    PRODUCER = 'producer'


class Once(Generic[T]):
    """
    A value derived on first demand and kept for the life of its owner.

    The resolved tag is explicit: a factory may legitimately produce ``None``
    or ``False`` and it still counts as resolved.
    """
    __slots__ = ('_factory', '_resolved', '_value')

    def __init__(self, factory: Callable[[], T]):
        self._factory = factory
        self._resolved = False
        self._value: Optional[T] = None

    @property
    def resolved(self) -> bool:
        return self._resolved

    def get(self) -> T:
        if not self._resolved:
            self._value = self._factory()
            self._resolved = True
            self._factory = None
        return self._value


@dataclass(frozen=True)
class SeekCapability:
    """Positional access strategy of an Enumerable and whether it avoids scanning."""
    seekable: bool
    try_get_at: Lookup


@dataclass(frozen=True)
class Policy:
    """Execution policy propagated along Enumerable chains.

    on_scan: 'fallback' | 'warn' | 'error'
    Applies when a positional lookup has to scan a non-seekable sequence.
    warn_on_reiteration logs a warning when a single-use source is iterated twice.
    """
    on_scan: str = "fallback"  # 'fallback' | 'warn' | 'error'
    warn_on_reiteration: bool = True

    def __post_init__(self):
        if self.on_scan not in SCAN_MODES:
            raise InvalidOperationArgumentError(
                message=f"on_scan must be one of {', '.join(SCAN_MODES)}, got {self.on_scan!r}")


DEFAULT_POLICY = Policy()


@dataclass(frozen=True)
class Stats:
    count: int
    min: Any = None
    max: Any = None


@dataclass(frozen=True)
class SumAndCount:
    sum: Number
    count: int


def default_comparer(item1: Any, item2: Any) -> int:
    """
    Three-way comparison used by stats(), min() and max().

    Pairs that Python cannot order behave like NaN: neither lower nor greater.
    """
    try:
        if item1 > item2:
            return 1
        if item1 < item2:
            return -1
    except TypeError:
        return 0
    return 0


class EqualityComparer:
    """
    Predefined equality functions for distinct().

    default compares with ``==``; exact also requires the same type, so
    ``1``, ``1.0`` and ``True`` are told apart.
    """

    @staticmethod
    def default(item1: Any, item2: Any) -> bool:
        return item1 == item2

    @staticmethod
    def exact(item1: Any, item2: Any) -> bool:
        return type(item1) is type(item2) and item1 == item2


def to_number(obj: Any) -> Number:
    # bool is an int subclass but not a number here
    if isinstance(obj, numbers.Number) and not isinstance(obj, bool):
        return obj
    return math.nan


def add_numbers(total: Any, value: Any) -> Number:
    """
    total + value for sum(); numeric types that refuse to mix (Decimal and
    float) are added as floats, and what cannot be added becomes NaN.
    """
    try:
        return total + value
    except TypeError:
        pass
    try:
        return float(total) + float(value)
    except (TypeError, ValueError):
        return math.nan


def ensure_function(fn: Any, name: str = 'argument') -> Callable:
    if fn is None or not callable(fn):
        raise InvalidOperationArgumentError(message=f'the {name} needs to be a function!')
    return fn


def identity(x):
    return x
