# utils/pair_iter.py
from typing import Generic, Iterator, Optional, TypeVar

T = TypeVar("T")

_EMPTY = object()


class PairIter(Generic[T]):
    """Iterator over zero, one or two values, handed out by move.

    Lets a scan step return a variable number of results without building a
    list per input:

        PairIter()        -> nothing
        PairIter(a)       -> a
        PairIter(a, b)    -> a, b

    Once drained it stays drained.
    """
    __slots__ = ("_first", "_second", "_offset")

    def __init__(self, *values: T):
        n = len(values)
        if n > 2:
            raise TypeError(f"PairIter holds at most 2 values, got {n}")
        # slots before _offset are already handed out
        self._offset = 2 - n
        self._first = values[0] if n == 2 else _EMPTY
        self._second = values[-1] if n else _EMPTY

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        if self._offset == 0:
            value, self._first = self._first, _EMPTY
        elif self._offset == 1:
            value, self._second = self._second, _EMPTY
        else:
            raise StopIteration
        self._offset += 1
        return value

    def __len__(self) -> int:
        return 2 - self._offset

    def __length_hint__(self) -> int:
        return 2 - self._offset

    def get(self, i: int) -> Optional[T]:
        """Peek at the i-th remaining value without consuming it."""
        if not 0 <= i < 2 - self._offset:
            return None
        return self._first if self._offset + i == 0 else self._second

    def __repr__(self) -> str:
        rest = [self.get(i) for i in range(len(self))]
        return f"PairIter({', '.join(map(repr, rest))})"
