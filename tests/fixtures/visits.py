from foldline.encounters import CheckIn, CheckOut, VisitReport


def check_in(caregiver_id: str, timestamp: str) -> CheckIn:
    return CheckIn(
        id="0",
        timestamp=timestamp,
        care_recipient_id="0",
        caregiver_id=caregiver_id,
    )


def check_out(caregiver_id: str, timestamp: str) -> CheckOut:
    return CheckOut(
        id="0",
        timestamp=timestamp,
        care_recipient_id="0",
        caregiver_id=caregiver_id,
    )


REPORT_0 = VisitReport(
    id="1",
    visit_events=(
        check_in("0", "2021-01-01T00:00:00.000Z"),
        check_out("0", "2021-01-01T10:00:00.000Z"),
    ),
)

REPORT_1 = VisitReport(
    id="1",
    visit_events=(check_in("1", "2020-12-31T00:00:00.001Z"),),
)
