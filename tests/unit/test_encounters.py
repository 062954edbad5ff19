"""Tests for the visit report encounter projection."""

from foldline.encounters import (
    CheckIn,
    Encounter,
    Participant,
    Period,
    VisitReport,
    apply_participant,
    apply_period,
    encounter_projector,
)
from tests.fixtures.visits import REPORT_0, REPORT_1, check_in, check_out


def test_merges_reports_into_encounter():
    result = encounter_projector().project_last_state([REPORT_0, REPORT_1])

    assert result.period == Period(
        start="2020-12-31T00:00:00.001Z",
        end="2021-01-01T10:00:00.000Z",
    )
    assert result.participant == (
        Participant(
            id="0",
            start="2021-01-01T00:00:00.000Z",
            end="2021-01-01T10:00:00.000Z",
        ),
        Participant(id="1", start="2020-12-31T00:00:00.001Z", end=None),
    )


def test_no_reports_gives_empty_encounter():
    assert encounter_projector().project_last_state([]) == Encounter()


def test_report_without_events_changes_nothing():
    projector = encounter_projector()
    empty = VisitReport(id="2")

    versions = list(projector.versions_from_stream([REPORT_0, empty, REPORT_1]))

    assert len(versions) == 2


def test_period_check_in_only_moves_start_earlier():
    period = Period(start="2021-01-01T00:00:00.000Z", end="2021-01-01T10:00:00.000Z")

    later = apply_period(period, check_in("0", "2021-01-01T05:00:00.000Z"))
    earlier = apply_period(period, check_in("0", "2020-12-31T05:00:00.000Z"))

    assert later == period
    assert earlier.start == "2020-12-31T05:00:00.000Z"
    assert earlier.end == period.end


def test_period_check_out_only_moves_end_later():
    period = Period(start="2021-01-01T00:00:00.000Z", end="2021-01-01T10:00:00.000Z")

    assert apply_period(period, check_out("0", "2021-01-01T09:00:00.000Z")) == period
    assert apply_period(period, check_out("0", "2021-01-01T11:00:00.000Z")).end == (
        "2021-01-01T11:00:00.000Z"
    )


def test_first_event_for_caregiver_opens_entry():
    roster = apply_participant((), check_out("7", "2021-01-01T10:00:00.000Z"))

    assert roster == (Participant(id="7", start="2021-01-01T10:00:00.000Z", end=None),)


def test_updated_participant_moves_to_end_of_roster():
    roster = (
        Participant(id="a", start="2021-01-01T00:00:00.000Z"),
        Participant(id="b", start="2021-01-01T01:00:00.000Z"),
    )

    updated = apply_participant(roster, check_out("a", "2021-01-01T02:00:00.000Z"))

    assert [p.id for p in updated] == ["b", "a"]
    assert updated[-1].end == "2021-01-01T02:00:00.000Z"


def test_match_finds_first_checked_out_encounter():
    result = encounter_projector().match_from_stream(
        [REPORT_1, REPORT_0], lambda e: e.period.end is not None
    )

    assert result is not None
    assert result.period.end == "2021-01-01T10:00:00.000Z"


def test_visit_events_keep_their_kind():
    report = VisitReport(id="3", visit_events=(check_in("0", "2021-01-01T00:00:00.000Z"),))

    assert isinstance(report.visit_events[0], CheckIn)
    assert report.visit_events[0].event_type == "check_in"
