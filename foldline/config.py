"""Projection configuration using pydantic-settings."""

import logging
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings

VersionsPolicy = Literal["global", "adjacent"]


class ProjectionSettings(BaseSettings):
    """Runtime settings shared by every run of a projector.

    All settings can be configured via environment variables with the
    FOLDLINE_ prefix. For example:
    - FOLDLINE_LOG_LEVEL=INFO
    - FOLDLINE_VERSIONS_POLICY=adjacent

    Attributes:
        log_level: Name of the logging level used for projection outcome
            records (e.g. "DEBUG", "info"). Case-insensitive.
        versions_policy: Default deduplication policy for
            ``Projector.versions_from_stream``. "global" suppresses a state
            equal to any earlier state, "adjacent" only one equal to its
            immediate predecessor.

    Example:
        >>> settings = ProjectionSettings(log_level="INFO")
        >>> projector = Projector.from_applier(apply, zero, settings=settings)
    """

    log_level: str = "DEBUG"
    versions_policy: VersionsPolicy = "global"

    model_config = {"env_prefix": "FOLDLINE_", "frozen": True}

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        if not isinstance(getattr(logging, value.upper(), None), int):
            raise ValueError(f"Unknown logging level: {value!r}")
        return value.upper()

    @property
    def log_level_number(self) -> int:
        """The numeric logging level for ``log_level``."""
        return getattr(logging, self.log_level)
