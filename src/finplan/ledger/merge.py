"""K-way merge of independently sorted, possibly infinite, event sources."""

from __future__ import annotations

import heapq
from collections.abc import Callable, Iterable, Iterator
from typing import Any, Generic, TypeVar

T = TypeVar("T")

_MISSING = object()


class Peekable(Generic[T]):
    """Iterator wrapper with one element of lookahead."""

    def __init__(self, iterable: Iterable[T]):
        self._it = iter(iterable)
        self._head: Any = _MISSING

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        if self._head is not _MISSING:
            head, self._head = self._head, _MISSING
            return head
        return next(self._it)

    def peek(self, default: Any = _MISSING) -> T:
        """Return the next element without consuming it.

        Raises StopIteration when exhausted unless *default* is given.
        """
        if self._head is _MISSING:
            try:
                self._head = next(self._it)
            except StopIteration:
                if default is _MISSING:
                    raise
                return default
        return self._head


class SortedMerge(Generic[T]):
    """Merge sources that are each sorted by *key* into one sorted stream.

    The heap holds one entry per non-empty source, keyed on that source's
    unconsumed head. Each pull pops the smallest head, advances that source by
    one element and pushes it back if it still has one. No source is read more
    than one element ahead, so infinite sources are fine as long as the merge
    itself is pulled a finite number of times.

    Equal keys come out in source order (earlier sources first).
    """

    def __init__(self, sources: Iterable[Iterable[T]], key: Callable[[T], Any] | None = None):
        self._key = key or (lambda item: item)
        self._heap: list[tuple[Any, int, T, Iterator[T]]] = []
        for index, source in enumerate(sources):
            self._push(index, iter(source))

    def _push(self, index: int, source: Iterator[T]) -> None:
        try:
            head = next(source)
        except StopIteration:
            return
        # index breaks ties so heads themselves are never compared
        heapq.heappush(self._heap, (self._key(head), index, head, source))

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        if not self._heap:
            raise StopIteration
        _, index, head, source = heapq.heappop(self._heap)
        self._push(index, source)
        return head
