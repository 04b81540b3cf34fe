"""
Enumerable basic usage examples.
Run: python examples/basic.py
"""

import os
import sys
# Ensure project root is on sys.path for direct execution
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from linqer import Enumerable, EqualityComparer, from_iterable


def main():
    users = [
        {"id": 1, "name": "Alice", "age": 30, "country": "ES", "email": "a@example.com"},
        {"id": 2, "name": "Bob", "age": 17, "country": "AR", "email": "b@example.com"},
        {"id": 3, "name": "Carol", "age": 25, "country": "US", "email": "c@example.com"},
        {"id": 4, "name": "Dan", "age": 22, "country": "AR", "email": "a@example.com"},
    ]

    # Projection + pagination stay seekable: nothing is iterated to answer count() or element_at()
    page = from_iterable(users).select(lambda u: u["name"]).skip(1).take(2)
    print("Explain (text):", page.explain())
    print("Page count:", page.count(), "second item:", page.element_at(1))
    print("Page:", page.to_array())

    # Filtering degrades to scanning; to_list() materializes once to get positional access back
    adults = from_iterable(users).where(lambda u: u["age"] >= 18)
    print("Explain (text):", adults.explain())
    adults = adults.to_list()
    print("Adults:", adults.count(), "last:", adults.last()["name"])

    # Distinct, concat and splice
    emails = from_iterable(users).select(lambda u: u["email"]).distinct().to_array()
    print("Distinct emails:", emails)
    numbers = Enumerable.range(1, 5).concat([1, 2.0, True])
    print("Distinct exact:", numbers.distinct(EqualityComparer.exact).to_array())
    print("Splice:", Enumerable.range(0, 6).splice(-3, 2, "x", "y").to_array())

    # Aggregates
    ages = from_iterable(users).select(lambda u: u["age"])
    print("Stats:", ages.stats())
    print("Sum and count:", ages.sum_and_count(), "average:", ages.average())
    print("By id:", from_iterable(users).to_dict(lambda u: u["id"], lambda u: u["name"]))
    print("Ages as numpy:", ages.to_numpy())


if __name__ == "__main__":
    main()
