"""Lazy sequence primitives shared by the sync and async projector APIs.

Every function here is a generator: nothing is pulled from the source until
the consumer asks for the next element, and each source is consumed at most
once.
"""

from collections.abc import AsyncIterable, AsyncIterator, Callable, Iterable, Iterator
from typing import Any, TypeVar

T = TypeVar("T")
U = TypeVar("U")


def scan(applier: Callable[[T, U], T], initial: T, events: Iterable[U]) -> Iterator[T]:
    """Yield the running fold of ``events`` starting from ``initial``.

    The i-th yielded value is ``applier(previous, events[i])`` where
    ``previous`` is the (i-1)-th yielded value, or ``initial`` for i=0.
    ``initial`` itself is never yielded.

    Example:
        >>> list(scan(lambda acc, x: acc + x, 0, [1, 2, 3]))
        [1, 3, 6]
    """
    state = initial
    for event in events:
        state = applier(state, event)
        yield state


async def ascan(
    applier: Callable[[T, U], T], initial: T, events: AsyncIterable[U]
) -> AsyncIterator[T]:
    """Async twin of :func:`scan` for asynchronous event sources."""
    state = initial
    async for event in events:
        state = applier(state, event)
        yield state


class _SeenStates:
    """Membership tracker that copes with unhashable states.

    Hashable values go into a set. Values that refuse to hash (mutable
    pydantic models, lists, dicts) are compared by equality against a list.
    A value is new only if it equals nothing in either container, so a
    hashable value equal to an earlier unhashable one (or the reverse) is
    still a repeat.
    """

    __slots__ = ("_hashable", "_unhashable")

    def __init__(self) -> None:
        self._hashable: set[Any] = set()
        self._unhashable: list[Any] = []

    def add(self, value: Any) -> bool:
        """Record ``value`` and report whether it was new."""
        try:
            if value in self._hashable or value in self._unhashable:
                return False
            self._hashable.add(value)
            return True
        except TypeError:
            if value in self._unhashable or any(value == seen for seen in self._hashable):
                return False
            self._unhashable.append(value)
            return True


def distinct(values: Iterable[T]) -> Iterator[T]:
    """Yield values not equal to any previously yielded value.

    Example:
        >>> list(distinct("AABBA"))
        ['A', 'B']
    """
    seen = _SeenStates()
    for value in values:
        if seen.add(value):
            yield value


async def adistinct(values: AsyncIterable[T]) -> AsyncIterator[T]:
    """Async twin of :func:`distinct`."""
    seen = _SeenStates()
    async for value in values:
        if seen.add(value):
            yield value


_NOTHING: Any = object()


def distinct_adjacent(values: Iterable[T]) -> Iterator[T]:
    """Yield values that differ from their immediate predecessor.

    Example:
        >>> list(distinct_adjacent("AABBA"))
        ['A', 'B', 'A']
    """
    previous = _NOTHING
    for value in values:
        if previous is _NOTHING or value != previous:
            yield value
        previous = value


async def adistinct_adjacent(values: AsyncIterable[T]) -> AsyncIterator[T]:
    """Async twin of :func:`distinct_adjacent`."""
    previous = _NOTHING
    async for value in values:
        if previous is _NOTHING or value != previous:
            yield value
        previous = value
