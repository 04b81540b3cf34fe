"""
Enumerable policies for positional access that would scan.
Run: python examples/policies.py
"""

import logging
import os
import sys
# Ensure project root is on sys.path for direct execution
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from linqer import Enumerable, Policy, UnsupportedEagerAccessError


def readings():
    for value in (0.9, 0.0, None, 0.85):
        yield value


def main():
    logging.basicConfig(level=logging.INFO)

    # Error on scan (will raise)
    try:
        _ = (
            Enumerable(readings)
            .with_policy(Policy(on_scan="error"))
            .where(lambda x: (x or 0) > 0.8)
            .element_at(1)
        )
    except UnsupportedEagerAccessError as ex:
        print("Expected error (on_scan=error):", ex)

    # Warn and fall back to scanning
    res = (
        Enumerable(readings)
        .on_scan("warn")
        .where(lambda x: (x or 0) > 0.8)
        .last()
    )
    print("Warn+fallback result:", res)

    # Seekable chains are never affected by the policy
    res2 = (
        Enumerable([0.9, 0.0, None, 0.85], Policy(on_scan="error"))
        .select(lambda x: x or 0)
        .skip(1)
        .last()
    )
    print("Seekable result:", res2)

    # A single-use iterator yields nothing on a second pass; a warning is logged
    once = Enumerable(iter([1, 2, 3]))
    print("First pass:", once.to_array())
    print("Second pass:", once.to_array())
    quiet = Enumerable(iter([1, 2, 3]), Policy(warn_on_reiteration=False))
    quiet.to_array()
    print("Second pass (quiet):", quiet.to_array())


if __name__ == "__main__":
    main()
