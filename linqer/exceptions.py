"""
Exception hierarchy for linqer.

Every error is a programming-contract violation raised synchronously at the
call that breaks the contract. Each class also derives from the closest
builtin exception so callers can catch them the Python way.
"""


class LinqerException(Exception):
    """
    Base class for all linqer errors.

    :ivar code: numeric error code, stable across releases.
    :ivar exception_type: class name of an underlying exception, when wrapping one.
    :ivar message: human readable description.
    """
    code: int = 1000

    def __init__(self, code: int = None, exception_type: str = None, message: str = None):
        if code is not None:
            self.code = code
        self.exception_type = exception_type
        self.message = message or self.__class__.__name__
        super().__init__(self.message)


class InvalidSourceError(LinqerException, TypeError):
    code = 1001


class InvalidOperationArgumentError(LinqerException, TypeError):
    code = 1002


class IndexOutOfRangeError(LinqerException, IndexError):
    code = 1003


class EmptySequenceError(IndexOutOfRangeError):
    code = 1004


class UnsupportedEagerAccessError(LinqerException, RuntimeError):
    code = 1005
