# utils/filtered_scan.py
import operator
from typing import Callable, Generic, Iterable, Iterator, Optional, Tuple, TypeVar

S = TypeVar("S")
A = TypeVar("A")
B = TypeVar("B")


class FilteredScanIter(Generic[S, A, B]):
    """Lazy scan that may drop items.

    ``func(state, item)`` mutates ``state`` in place and returns either an
    output or ``None``. Each ``next()`` pulls from the source only until the
    first non-``None`` output; once the source runs dry the iterator is done
    for good and the source is never touched again.
    """
    def __init__(self, iterable: Iterable[A], state: S, func: Callable[[S, A], Optional[B]]):
        self.iter: Optional[Iterator[A]] = iter(iterable)
        self.state = state
        self.func = func

    def __iter__(self) -> "FilteredScanIter[S, A, B]":
        return self

    def __next__(self) -> B:
        if self.iter is None:
            raise StopIteration
        for item in self.iter:
            out = self.func(self.state, item)
            if out is not None:
                return out
        self.iter = None
        raise StopIteration

    def size_hint(self) -> Tuple[int, Optional[int]]:
        """(lower, upper) bound on the remaining outputs; upper is advisory."""
        if self.iter is None:
            return 0, 0
        upper = operator.length_hint(self.iter, -1)
        return 0, (upper if upper >= 0 else None)


def filtered_scan(iterable: Iterable[A], initial_state: S,
                  func: Callable[[S, A], Optional[B]]) -> FilteredScanIter[S, A, B]:
    return FilteredScanIter(iterable, initial_state, func)
