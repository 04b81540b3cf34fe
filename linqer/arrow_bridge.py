from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence

# Optional imports
try:
    import pyarrow as pa  # type: ignore
except ImportError:  # pragma: no cover
    pa = None


class ArrowNotAvailable(RuntimeError):
    pass


def _require_arrow():
    if pa is None:
        raise ArrowNotAvailable(
            "pyarrow is required for Arrow integration. Install 'linqer[arrow]' to enable this feature.")


def to_arrow_array(values: Iterable[Any], type: Any = None) -> Any:
    """
    Build a pyarrow.Array from an iterable of scalar values.

    The type is inferred by pyarrow unless given.
    """
    _require_arrow()
    return pa.array(list(values), type=type)


def to_arrow(records: Iterable[dict], columns: Optional[Sequence[str]] = None) -> Any:
    """
    Build a pyarrow.Table from an iterable of dict rows. Minimal implementation: collect into columns.
    Rows missing a column contribute a null; with explicit columns, other keys are ignored.
    """
    _require_arrow()
    cols: dict[str, list] = {name: [] for name in columns} if columns is not None else {}
    rows = 0
    for row in records:
        keys = row.keys() if columns is None else columns
        for k in keys:
            if k not in cols:
                # column first seen late: back-fill earlier rows
                cols[k] = [None] * rows
            cols[k].append(row.get(k))
        rows += 1
        for k, col in cols.items():
            if len(col) < rows:
                col.append(None)
    return pa.table({k: pa.array(col) for k, col in cols.items()})
