from datetime import time

import pytest

from src.rfid_attendance.rfid_attendance.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    ScheduleParseError,
    ValidationError,
)
from src.rfid_attendance.rfid_attendance.schedule_parser.model import ParsedSchedule, ParsedScheduleEntry
from src.rfid_attendance.rfid_attendance.sections.model import ScheduledPeriod
from src.rfid_attendance.rfid_attendance.sections.service import SectionService, find_overlap


def test_find_overlap():
    a = ScheduledPeriod("a", "Math", time(9, 0), time(10, 0))
    b = ScheduledPeriod("b", "Art", time(10, 0), time(11, 0))
    c = ScheduledPeriod("c", "PE", time(9, 30), time(9, 45))

    assert find_overlap([a, b]) is None
    assert find_overlap([a, b, c]) == (a, c)


def test_list_schedules_sorted_with_faculty_names(container, admin, repos):
    repos.sections.add_period(ScheduledPeriod("sch-early", "Homeroom", time(7, 30), time(8, 0), None, "sec-a"))

    rows = container.section_service.list_schedules(admin, "sec-a")

    assert [r["subject"] for r in rows] == ["Homeroom", "Math", "Literature"]
    assert rows[0]["faculty_name"] == "N/A"
    assert rows[1]["faculty_name"] == "Dr. Eleanor Vance"
    assert rows[1]["start_time"] == "09:00"


def test_add_schedules_saves_valid_rows(container, admin, repos):
    ids = container.section_service.add_schedules(
        admin,
        "sec-a",
        [
            {"subject": "Art", "startTime": "13:00", "endTime": "14:00", "facultyId": "fac-crain"},
            {"subject": "PE", "startTime": "14:00", "endTime": "15:00"},
        ],
    )

    assert len(ids) == 2
    saved = repos.sections.get_schedule(ids[0])
    assert saved.start_time == time(13, 0)
    assert saved.faculty_id == "fac-crain"
    assert repos.sections.get_schedule(ids[1]).faculty_id is None


@pytest.mark.parametrize(
    "rows, message",
    [
        ([{"subject": "Art", "startTime": "13:00"}], "Please fill out"),
        ([{"subject": "Art", "startTime": "14:00", "endTime": "13:00"}], "start time must be before end time"),
        ([{"subject": "Art", "startTime": "1pm", "endTime": "14:00"}], "HH:mm"),
        ([{"subject": "Art", "startTime": "13:00", "endTime": "14:00", "facultyId": "ghost"}], "could not be found"),
        (
            [
                {"subject": "Art", "startTime": "13:00", "endTime": "14:00"},
                {"subject": "PE", "startTime": "13:30", "endTime": "14:30"},
            ],
            "overlap",
        ),
        ([{"subject": "Art", "startTime": "09:30", "endTime": "10:15"}], "overlaps Math"),
        ([], "No schedules to save"),
    ],
)
def test_add_schedules_rejects_invalid_rows(container, admin, repos, rows, message):
    before = dict(repos.sections.schedules)

    with pytest.raises(ValidationError, match=message):
        container.section_service.add_schedules(admin, "sec-a", rows)

    assert repos.sections.schedules == before


def test_add_schedules_requires_admin(container, adviser):
    with pytest.raises(AuthorizationError):
        container.section_service.add_schedules(
            adviser, "sec-a", [{"subject": "Art", "startTime": "13:00", "endTime": "14:00"}]
        )


def test_update_schedule_can_clear_faculty_and_ignores_itself_for_overlap(container, admin, repos):
    container.section_service.update_schedule(
        admin, "sch-math", subject="Algebra", start_time="09:15", end_time="10:15", faculty_id="__none__"
    )

    period = repos.sections.get_schedule("sch-math")
    assert period.subject == "Algebra"
    assert period.faculty_id is None
    assert period.section_id == "sec-a"


def test_update_schedule_rejects_overlap_with_sibling(container, admin):
    with pytest.raises(ValidationError, match="overlap"):
        container.section_service.update_schedule(
            admin, "sch-math", subject="Math", start_time="09:00", end_time="10:45"
        )


def test_delete_missing_schedule(container, admin):
    with pytest.raises(NotFoundError):
        container.section_service.delete_schedule(admin, "nope")


def test_save_section_denormalizes_adviser(container, admin, repos):
    section_id = container.section_service.save_section(admin, name=" BSCS 1-B ", adviser_id="fac-crain")

    section = repos.sections.get_by_id(section_id)
    assert section.name == "BSCS 1-B"
    assert section.adviser_name == "Dr. Theodora Crain"


@pytest.mark.parametrize("adviser_id, message", [("", "Please select an adviser."), ("ghost", "could not be found")])
def test_save_section_requires_existing_adviser(container, admin, adviser_id, message):
    with pytest.raises(ValidationError, match=message):
        container.section_service.save_section(admin, name="BSCS 1-B", adviser_id=adviser_id)


def test_delete_section_removes_its_schedules(container, admin, repos):
    container.section_service.delete_section(admin, "sec-a")

    assert repos.sections.get_by_id("sec-a") is None
    assert repos.sections.list_schedules("sec-a") == []


def test_faculty_sees_only_own_sections_and_periods(container, adviser, repos):
    repos.sections.create(name="Other", adviser_id="fac-crain", adviser_name="Dr. Theodora Crain")

    sections = container.section_service.list_sections(adviser)
    periods = container.section_service.faculty_schedules(adviser, "sec-a")

    assert [s.section_id for s in sections] == ["sec-a"]
    assert [p.period_id for p in periods] == ["sch-math"]


def test_scan_schedule_image_without_parser(container, admin):
    with pytest.raises(ScheduleParseError, match="not configured"):
        container.section_service.scan_schedule_image(admin, b"whatever")


class FakeParser:
    def __init__(self, result: ParsedSchedule):
        self.result = result
        self.received = []

    def parse(self, photo_data_uri: str) -> ParsedSchedule:
        self.received.append(photo_data_uri)
        return self.result


def test_scan_schedule_image_sends_data_uri(repos, admin, png_bytes):
    parsed = ParsedSchedule("Monday", [ParsedScheduleEntry("Art", "13:00", "14:00")])
    parser = FakeParser(parsed)
    service = SectionService(repos.sections, repos.faculty, schedule_parser=parser)

    assert service.scan_schedule_image(admin, png_bytes) is parsed
    assert parser.received[0].startswith("data:image/png;base64,")


def test_import_parsed_schedules_assigns_faculty(container, admin, repos):
    parsed = ParsedSchedule(
        "Monday",
        [ParsedScheduleEntry("Art", "13:00", "14:00"), ParsedScheduleEntry("PE", "14:00", "15:00")],
    )

    ids = container.section_service.import_parsed_schedules(admin, "sec-a", parsed, faculty_ids=["fac-crain"])

    assert repos.sections.get_schedule(ids[0]).faculty_id == "fac-crain"
    assert repos.sections.get_schedule(ids[1]).faculty_id is None


def test_import_empty_parse_is_reported(container, admin):
    with pytest.raises(ValidationError, match="No schedules were found"):
        container.section_service.import_parsed_schedules(admin, "sec-a", ParsedSchedule("Monday", []))
