"""Event log primitives.

- Event: Envelope pairing a payload with log metadata
- payloads / apayloads: Lazily unwrap envelopes for an applier
- utc_now: Timestamp factory used for Event.timestamp
"""

from .event import Event, apayloads, payloads, utc_now

__all__ = [
    "Event",
    "apayloads",
    "payloads",
    "utc_now",
]
