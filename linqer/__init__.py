# Lightweight package initializer: exposes the Enumerable API and its exceptions.
# Arrow support stays optional; arrow_bridge only needs pyarrow when called.

__version__ = "0.1.0"

from .exceptions import LinqerException, InvalidSourceError, InvalidOperationArgumentError, \
    IndexOutOfRangeError, EmptySequenceError, UnsupportedEagerAccessError
from . import common
from . import capabilities
from . import exceptions
from .common import Found, Policy, SourceKind, Stats, SumAndCount, EqualityComparer, default_comparer
from .enumerable import Enumerable, from_iterable
from .arrow_bridge import ArrowNotAvailable
