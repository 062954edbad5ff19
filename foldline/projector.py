"""Generic projector for deriving entity state from an ordered event stream.

A projector pairs a pure applier ``(state, event) -> state`` with a zero
state and answers queries over event sources: the final state, every
intermediate state, the first state matching a predicate, or the distinct
versions the entity passed through.
"""

import logging
from collections.abc import AsyncIterable, AsyncIterator, Callable, Iterable, Iterator
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from .config import ProjectionSettings, VersionsPolicy
from .exceptions import NoMatchingStateError
from .streaming import adistinct, adistinct_adjacent, ascan, distinct, distinct_adjacent, scan

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")
T_co = TypeVar("T_co", covariant=True)
U_contra = TypeVar("U_contra", contravariant=True)

Applier = Callable[[T, U], T]
Predicate = Callable[[T], bool]

_NO_ZERO: Any = object()


@runtime_checkable
class Projection(Protocol[T_co, U_contra]):
    """Structural interface for anything that folds events into a state."""

    def project_last_state(self, events: Iterable[U_contra]) -> T_co: ...

    def match_from_stream(
        self, events: Iterable[U_contra], predicate: Callable[[Any], bool]
    ) -> T_co | None: ...


class _Counted(Generic[U]):
    """Iterator wrapper counting how many events have been pulled."""

    __slots__ = ("_events", "count")

    def __init__(self, events: Iterable[U]):
        self._events = iter(events)
        self.count = 0

    def __iter__(self) -> "_Counted[U]":
        return self

    def __next__(self) -> U:
        event = next(self._events)
        self.count += 1
        return event


class _AsyncCounted(Generic[U]):
    """Async twin of :class:`_Counted`."""

    __slots__ = ("_events", "count")

    def __init__(self, events: AsyncIterable[U]):
        self._events = aiter(events)
        self.count = 0

    def __aiter__(self) -> "_AsyncCounted[U]":
        return self

    async def __anext__(self) -> U:
        event = await anext(self._events)
        self.count += 1
        return event


class Projector(Generic[T, U]):
    """Immutable wrapper around one applier and its zero state.

    The projector holds no accumulated state between calls. Each query
    starts from the zero state, threads it through the applier event by
    event, and pulls from the event source only as far as the query needs.

    The zero state is handed to the applier as-is; appliers are pure and
    never mutate their input. For a mutable zero (a list, a dict, a mutable
    model) pass ``zero_factory`` instead, and every query starts from a
    freshly built value.

    Type Parameters:
        T: Entity state produced by the applier.
        U: Event consumed by the applier. Never inspected by the projector.

    Attributes:
        applier: Pure function ``(state, event) -> state``.
        zero: State before any event has been applied.
        settings: Logging level and default versions policy.

    Examples:
        Track the latest timestamp seen:

        >>> latest = Projector.from_applier(lambda ts, event: max(ts, event), "")
        >>> latest.project_last_state(["ts-3", "ts-8", "ts-1"])
        'ts-8'
        >>> list(latest.stream_entities(["ts-3", "ts-8", "ts-1"]))
        ['ts-3', 'ts-8', 'ts-8']
        >>> latest.match_from_stream(["ts-3", "ts-8", "ts-1"], lambda ts: "8" in ts)
        'ts-8'
        >>> list(latest.versions_from_stream(["ts-3", "ts-8", "ts-1"]))
        ['ts-3', 'ts-8']

        Start every run from a fresh list:

        >>> history = Projector.from_applier(
        ...     lambda seen, event: seen + [event], zero_factory=list
        ... )
    """

    __slots__ = ("_applier", "_zero", "_zero_factory", "_settings")

    def __init__(
        self,
        applier: Applier[T, U],
        zero: T = _NO_ZERO,
        *,
        zero_factory: Callable[[], T] | None = None,
        settings: ProjectionSettings | None = None,
    ):
        if (zero is _NO_ZERO) == (zero_factory is None):
            raise TypeError("Projector needs exactly one of zero or zero_factory")
        self._applier = applier
        self._zero = zero
        self._zero_factory = zero_factory
        self._settings = settings if settings is not None else ProjectionSettings()

    @classmethod
    def from_applier(
        cls,
        applier: Applier[T, U],
        zero: T = _NO_ZERO,
        *,
        zero_factory: Callable[[], T] | None = None,
        settings: ProjectionSettings | None = None,
    ) -> "Projector[T, U]":
        """Build a projector from an applier and the state it starts from.

        The applier itself is not validated; any function of the right
        shape is accepted.

        Args:
            applier: Pure function ``(state, event) -> state``.
            zero: State before any event is applied.
            zero_factory: Builds the zero state afresh for every query.
                Use instead of ``zero`` when the zero state is mutable.
            settings: Optional settings. Defaults to ``ProjectionSettings()``,
                which reads ``FOLDLINE_*`` environment variables.

        Returns:
            A new projector.

        Raises:
            TypeError: If both or neither of ``zero`` and ``zero_factory``
                are given.
        """
        return cls(applier, zero, zero_factory=zero_factory, settings=settings)

    @property
    def applier(self) -> Applier[T, U]:
        return self._applier

    @property
    def zero(self) -> T:
        return self._initial_state()

    @property
    def settings(self) -> ProjectionSettings:
        return self._settings

    def resume_from(self, state: T) -> "Projector[T, U]":
        """Return a projector that starts from ``state`` instead of the zero.

        Used to continue a projection from a previously derived snapshot
        without replaying the events that produced it.
        """
        return type(self)(self._applier, state, settings=self._settings)

    def _initial_state(self) -> T:
        if self._zero_factory is not None:
            return self._zero_factory()
        return self._zero

    def _applier_name(self) -> str:
        return getattr(self._applier, "__qualname__", type(self._applier).__name__)

    def _log(self, message: str, events_applied: int) -> None:
        LOGGER.log(
            self._settings.log_level_number,
            message,
            extra={"applier": self._applier_name(), "events_applied": events_applied},
        )

    def _resolve_policy(self, policy: VersionsPolicy | None) -> VersionsPolicy:
        chosen = policy if policy is not None else self._settings.versions_policy
        if chosen not in ("global", "adjacent"):
            raise ValueError(f"Unknown versions policy: {chosen!r}")
        return chosen

    def _search(self, events: Iterable[U], predicate: Predicate[T]) -> tuple[bool, Any, int]:
        counted = _Counted(events)
        for state in scan(self._applier, self._initial_state(), counted):
            if predicate(state):
                self._log("Projection matched", counted.count)
                return True, state, counted.count
        self._log("Projection exhausted without match", counted.count)
        return False, None, counted.count

    async def _asearch(
        self, events: AsyncIterable[U], predicate: Predicate[T]
    ) -> tuple[bool, Any, int]:
        counted = _AsyncCounted(events)
        async for state in ascan(self._applier, self._initial_state(), counted):
            if predicate(state):
                self._log("Projection matched", counted.count)
                return True, state, counted.count
        self._log("Projection exhausted without match", counted.count)
        return False, None, counted.count

    def _no_match(self, events_applied: int) -> NoMatchingStateError:
        return NoMatchingStateError(
            f"No state matched after applying {events_applied} events "
            f"with {self._applier_name()}"
        )

    # Synchronous event sources

    def stream_entities(self, events: Iterable[U]) -> Iterator[T]:
        """Lazily yield the state after each event, in event order.

        One state is produced per event. An event is pulled from the source
        only when the next state is requested, so stopping early leaves the
        rest of the source untouched. The returned iterator consumes
        ``events`` once and cannot be restarted.

        Args:
            events: Ordered event source.

        Returns:
            Iterator over intermediate states.
        """
        return scan(self._applier, self._initial_state(), events)

    def project_last_state(self, events: Iterable[U]) -> T:
        """Fold every event and return the final state.

        Only the running accumulator is kept in memory.

        Args:
            events: Ordered event source. Drained completely.

        Returns:
            The state after the last event, or the zero state when
            the source is empty.
        """
        counted = _Counted(events)
        state = self._initial_state()
        for state in scan(self._applier, state, counted):
            pass
        self._log("Projection completed", counted.count)
        return state

    def match_from_stream(self, events: Iterable[U], predicate: Predicate[T]) -> T | None:
        """Return the first intermediate state satisfying ``predicate``.

        Pulling stops at the first match: events after it are neither read
        from the source nor applied.

        Args:
            events: Ordered event source.
            predicate: Pure test called once per intermediate state, in order.

        Returns:
            The first matching state, or None if the source ends first.
        """
        found, state, _ = self._search(events, predicate)
        return state if found else None

    def require_match(self, events: Iterable[U], predicate: Predicate[T]) -> T:
        """Like :meth:`match_from_stream` but raise when nothing matches.

        Raises:
            NoMatchingStateError: If the source ends before any state matches.
        """
        found, state, events_applied = self._search(events, predicate)
        if not found:
            raise self._no_match(events_applied)
        return state

    def versions_from_stream(
        self, events: Iterable[U], *, policy: VersionsPolicy | None = None
    ) -> Iterator[T]:
        """Lazily yield the distinct states the entity passes through.

        With the default "global" policy a state equal to any earlier state
        is suppressed, so ``[A, A, B, B, A]`` yields ``[A, B]``. With
        "adjacent" only repeats of the immediate predecessor are suppressed,
        yielding ``[A, B, A]``.

        Args:
            events: Ordered event source.
            policy: "global" or "adjacent". Defaults to
                ``settings.versions_policy``.

        Returns:
            Iterator over distinct states in first-occurrence order.

        Raises:
            ValueError: If ``policy`` is not a known policy.
        """
        if self._resolve_policy(policy) == "adjacent":
            return distinct_adjacent(self.stream_entities(events))
        return distinct(self.stream_entities(events))

    # Asynchronous event sources

    def astream_entities(self, events: AsyncIterable[U]) -> AsyncIterator[T]:
        """Async twin of :meth:`stream_entities`."""
        return ascan(self._applier, self._initial_state(), events)

    async def aproject_last_state(self, events: AsyncIterable[U]) -> T:
        """Async twin of :meth:`project_last_state`."""
        counted = _AsyncCounted(events)
        state = self._initial_state()
        async for state in ascan(self._applier, state, counted):
            pass
        self._log("Projection completed", counted.count)
        return state

    async def amatch_from_stream(
        self, events: AsyncIterable[U], predicate: Predicate[T]
    ) -> T | None:
        """Async twin of :meth:`match_from_stream`."""
        found, state, _ = await self._asearch(events, predicate)
        return state if found else None

    async def arequire_match(self, events: AsyncIterable[U], predicate: Predicate[T]) -> T:
        """Async twin of :meth:`require_match`."""
        found, state, events_applied = await self._asearch(events, predicate)
        if not found:
            raise self._no_match(events_applied)
        return state

    def aversions_from_stream(
        self, events: AsyncIterable[U], *, policy: VersionsPolicy | None = None
    ) -> AsyncIterator[T]:
        """Async twin of :meth:`versions_from_stream`."""
        if self._resolve_policy(policy) == "adjacent":
            return adistinct_adjacent(self.astream_entities(events))
        return adistinct(self.astream_entities(events))

    def __repr__(self) -> str:
        zero = self._zero if self._zero_factory is None else self._zero_factory
        return f"{type(self).__name__}(applier={self._applier_name()}, zero={zero!r})"
