"""Exceptions raised by foldline itself.

Failures raised by appliers, predicates or event sources are never wrapped;
they propagate to the caller unchanged.
"""


class ProjectionError(Exception):
    """Base class for errors raised by the projection engine."""

    pass


class NoMatchingStateError(ProjectionError, LookupError):
    """Raised when a required match is not found before the source ends.

    Only ``Projector.require_match`` and ``Projector.arequire_match`` raise
    this; ``match_from_stream`` reports the same outcome as ``None``.
    """

    pass
