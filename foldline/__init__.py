"""foldline - Event projection engine for Python.

This module provides the public API for deriving entity state from an
ordered event stream with a pure applier.
"""

from .config import ProjectionSettings
from .domain import Event, apayloads, payloads
from .exceptions import NoMatchingStateError, ProjectionError
from .projector import Applier, Predicate, Projection, Projector

__all__ = [
    # Projection
    "Applier",
    "Predicate",
    "Projection",
    "Projector",
    # Configuration
    "ProjectionSettings",
    # Event log
    "Event",
    "apayloads",
    "payloads",
    # Errors
    "NoMatchingStateError",
    "ProjectionError",
]
