"""Central test fixtures."""

import pytest

from foldline import Projector, ProjectionSettings
from tests.fixtures.timeline import TimelineEntity, latest_timestamp


@pytest.fixture(autouse=True)
def clean_foldline_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep FOLDLINE_* variables from the outer environment out of tests."""
    monkeypatch.delenv("FOLDLINE_LOG_LEVEL", raising=False)
    monkeypatch.delenv("FOLDLINE_VERSIONS_POLICY", raising=False)


@pytest.fixture
def settings() -> ProjectionSettings:
    return ProjectionSettings()


@pytest.fixture
def timeline_projector(settings: ProjectionSettings) -> Projector[TimelineEntity, object]:
    """Projector tracking the first id and latest timestamp seen."""
    return Projector.from_applier(latest_timestamp, TimelineEntity(), settings=settings)
