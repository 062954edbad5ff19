"""Visit reports folded into encounters.

An example consumer of :class:`~foldline.projector.Projector`. Each visit
report carries check-in and check-out events for caregivers attending a care
recipient. The projection merges them into one encounter: the overall period
spanned by the visit and the period each caregiver was present.

Timestamps are ISO-8601 strings in a single fixed format, so lexicographic
order is chronological order.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict

from .projector import Projector


class EventData(BaseModel):
    """Fields shared by every visit event."""

    model_config = ConfigDict(frozen=True)

    id: str
    event_type: str
    timestamp: str
    care_recipient_id: str
    caregiver_id: str


class CheckIn(EventData):
    event_type: Literal["check_in"] = "check_in"


class CheckOut(EventData):
    event_type: Literal["check_out"] = "check_out"


VisitEvent = CheckIn | CheckOut


class VisitReport(BaseModel):
    """A batch of visit events reported together."""

    model_config = ConfigDict(frozen=True)

    id: str
    visit_events: tuple[VisitEvent, ...] = ()


class Period(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: str | None = None
    end: str | None = None


class Participant(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    start: str | None = None
    end: str | None = None


class Encounter(BaseModel):
    """Projected state: the merged visit period and caregiver roster."""

    model_config = ConfigDict(frozen=True)

    period: Period = Period()
    participant: tuple[Participant, ...] = ()


def _earliest(current: str | None, timestamp: str) -> str:
    return timestamp if current is None else min(current, timestamp)


def _latest(current: str | None, timestamp: str) -> str:
    return timestamp if current is None else max(current, timestamp)


def apply_period(period: Period, event: VisitEvent) -> Period:
    """Widen the period to cover the event.

    A check-in can only move the start earlier and a check-out can only move
    the end later.
    """
    if isinstance(event, CheckIn):
        return Period(start=_earliest(period.start, event.timestamp), end=period.end)
    return Period(start=period.start, end=_latest(period.end, event.timestamp))


def apply_participant(
    participants: tuple[Participant, ...], event: VisitEvent
) -> tuple[Participant, ...]:
    """Merge the event into its caregiver's entry.

    The first event seen for a caregiver opens their entry at the event's
    timestamp, whichever kind it is. The updated entry moves to the end of
    the roster.
    """
    caregiver_id = event.caregiver_id
    existing = next((p for p in participants if p.id == caregiver_id), None)

    if existing is None:
        updated = Participant(id=caregiver_id, start=event.timestamp, end=None)
    elif isinstance(event, CheckIn):
        updated = Participant(
            id=caregiver_id,
            start=_earliest(existing.start, event.timestamp),
            end=existing.end,
        )
    else:
        updated = Participant(
            id=caregiver_id,
            start=existing.start,
            end=_latest(existing.end, event.timestamp),
        )

    return tuple(p for p in participants if p.id != caregiver_id) + (updated,)


def apply_report(encounter: Encounter, report: VisitReport) -> Encounter:
    """Fold every event of a report into the encounter, in report order."""
    for event in report.visit_events:
        encounter = Encounter(
            period=apply_period(encounter.period, event),
            participant=apply_participant(encounter.participant, event),
        )
    return encounter


def encounter_projector() -> Projector[Encounter, VisitReport]:
    """Build the projector deriving an encounter from visit reports."""
    return Projector.from_applier(apply_report, Encounter())
