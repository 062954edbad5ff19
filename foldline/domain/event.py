from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator
from datetime import datetime, timezone
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from ulid import ULID

P = TypeVar("P")


def utc_now() -> datetime:
    """Get the current UTC timestamp.

    Returns:
        Current datetime with UTC timezone information

    Note:
        Used as default_factory for Event.timestamp so every logged
        event is timestamped in UTC regardless of system timezone.
    """
    return datetime.now(tz=timezone.utc)


class Event(BaseModel, Generic[P]):
    """Immutable record of one occurrence in an event log.

    The projector never needs this wrapper: appliers can consume bare
    payloads. Event is for callers whose log carries metadata alongside each
    payload. Use :func:`payloads` to feed a log of envelopes to an applier
    written over payloads.

    Type Parameters:
        P: Payload type, the value an applier actually consumes.

    Attributes:
        id: Unique identifier for this specific event instance
        stream_id: Identifier of the entity stream the event belongs to
        data: The payload
        sequence_number: Position in the stream (1-indexed)
        timestamp: When the event occurred (UTC timezone)

    Examples:
        >>> log = [
        ...     Event(stream_id="visit-1", sequence_number=1, data=CheckIn(...)),
        ...     Event(stream_id="visit-1", sequence_number=2, data=CheckOut(...)),
        ... ]
        >>> projector.project_last_state(payloads(log))
    """

    model_config = ConfigDict(frozen=True)

    id: ULID = Field(
        default_factory=ULID,
        description="Unique identifier for this event instance",
    )
    stream_id: str = Field(description="Identifier of the entity stream this event belongs to")
    data: P = Field(description="Event payload consumed by the applier")
    sequence_number: int = Field(
        description="Position in the entity stream (1-indexed, monotonically increasing)"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC timezone)",
    )


def payloads(events: Iterable[Event[P]]) -> Iterator[P]:
    """Lazily unwrap each envelope to its payload, preserving order."""
    for event in events:
        yield event.data


async def apayloads(events: AsyncIterable[Event[P]]) -> AsyncIterator[P]:
    """Async twin of :func:`payloads`."""
    async for event in events:
        yield event.data
