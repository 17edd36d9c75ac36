from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Mapping, Optional, Sequence

from ..common.datetime_utils import format_hhmm
from ..common.validators import require_non_empty
from ..core.constants import UNASSIGNED_FACULTY
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ScheduleParseError, ValidationError
from ..faculty.repository import FacultyRepository
from ..schedule_parser.client import ScheduleParser, build_data_uri
from ..schedule_parser.model import ParsedSchedule
from ..users.model import CurrentUser, require_role
from .model import ScheduledPeriod, Section
from .repository import SectionRepository


def find_overlap(periods: Sequence[ScheduledPeriod]) -> Optional[tuple]:
    """Return the first pair of overlapping periods, if any."""

    for i in range(len(periods)):
        for j in range(i + 1, len(periods)):
            if periods[i].overlaps(periods[j]):
                return periods[i], periods[j]
    return None


class SectionService:
    """Use cases: sections, their class schedules and schedule-image import."""

    def __init__(
        self,
        sections: SectionRepository,
        faculty: FacultyRepository,
        *,
        schedule_parser: Optional[ScheduleParser] = None,
    ):
        self._sections = sections
        self._faculty = faculty
        self._parser = schedule_parser

    def _get_section(self, section_id: str) -> Section:
        section = self._sections.get_by_id(section_id)
        if not section:
            raise NotFoundError("Section not found")
        return section

    def list_sections(self, current_user: CurrentUser) -> Sequence[Section]:
        if current_user.role == Role.FACULTY:
            return self._sections.list_for_faculty(current_user.user_id)
        require_role(current_user, Role.ADMIN)
        return self._sections.list_all()

    def save_section(
        self,
        current_user: CurrentUser,
        *,
        name: str,
        adviser_id: str,
        section_id: Optional[str] = None,
    ) -> str:
        """Create (section_id is None) or update a section."""

        require_role(current_user, Role.ADMIN)
        name = require_non_empty(name, "Section name")
        if not adviser_id:
            raise ValidationError("Please select an adviser.")
        adviser = self._faculty.get_by_id(adviser_id)
        if not adviser:
            raise ValidationError("The selected adviser could not be found.")

        if section_id is None:
            return self._sections.create(name=name, adviser_id=adviser.faculty_id, adviser_name=adviser.name)

        self._get_section(section_id)
        self._sections.update(section_id, name=name, adviser_id=adviser.faculty_id, adviser_name=adviser.name)
        return section_id

    def delete_section(self, current_user: CurrentUser, section_id: str) -> None:
        require_role(current_user, Role.ADMIN)
        self._get_section(section_id)
        if not self._sections.delete_by_id(section_id):
            raise ValidationError("Delete failed")

    def list_schedules(self, current_user: CurrentUser, section_id: str) -> List[dict]:
        require_role(current_user, Role.ADMIN, Role.FACULTY)
        self._get_section(section_id)
        names = {f.faculty_id: f.name for f in self._faculty.list_all()}
        periods = sorted(self._sections.list_schedules(section_id), key=lambda p: p.start_time)
        return [
            {
                "id": p.period_id,
                "subject": p.subject,
                "start_time": format_hhmm(p.start_time),
                "end_time": format_hhmm(p.end_time),
                "faculty_id": p.faculty_id,
                "faculty_name": names.get(p.faculty_id, UNASSIGNED_FACULTY) if p.faculty_id else UNASSIGNED_FACULTY,
            }
            for p in periods
        ]

    def faculty_schedules(self, current_user: CurrentUser, section_id: str) -> List[ScheduledPeriod]:
        """Periods of the section taught by the current faculty (all of them for admins)."""

        require_role(current_user, Role.ADMIN, Role.FACULTY)
        self._get_section(section_id)
        periods = sorted(self._sections.list_schedules(section_id), key=lambda p: p.start_time)
        if current_user.role == Role.FACULTY:
            periods = [p for p in periods if p.faculty_id == current_user.user_id]
        return periods

    def _coerce_rows(self, rows: Iterable[Mapping]) -> List[ScheduledPeriod]:
        periods: List[ScheduledPeriod] = []
        for row in rows:
            if not (row.get("subject") and row.get("startTime") and row.get("endTime")):
                raise ValidationError(
                    "Please fill out at least subject, start time, and end time for all schedules."
                )
            period = ScheduledPeriod.from_record(row)
            if period.start_time >= period.end_time:
                raise ValidationError(f"{period.subject}: start time must be before end time.")
            faculty_id = period.faculty_id or None
            if faculty_id and not self._faculty.get_by_id(faculty_id):
                raise ValidationError(f"{period.subject}: assigned faculty could not be found.")
            periods.append(replace(period, faculty_id=faculty_id))
        return periods

    def add_schedules(self, current_user: CurrentUser, section_id: str, rows: Iterable[Mapping]) -> Sequence[str]:
        """Validate and save schedule rows ({subject, startTime, endTime, facultyId?})."""

        require_role(current_user, Role.ADMIN)
        self._get_section(section_id)
        periods = self._coerce_rows(rows)
        if not periods:
            raise ValidationError("No schedules to save.")

        overlap = find_overlap(periods)
        if overlap:
            a, b = overlap
            raise ValidationError(f"Schedule overlap: {a.label()} overlaps {b.label()}.")

        for new in periods:
            for existing in self._sections.list_schedules(section_id):
                if new.overlaps(existing):
                    raise ValidationError(f"Schedule overlap: {new.label()} overlaps {existing.label()}.")

        return self._sections.add_schedules(section_id, periods)

    def update_schedule(
        self,
        current_user: CurrentUser,
        schedule_id: str,
        *,
        subject: str,
        start_time: str,
        end_time: str,
        faculty_id: Optional[str] = None,
    ) -> None:
        require_role(current_user, Role.ADMIN)
        current = self._sections.get_schedule(schedule_id)
        if not current:
            raise NotFoundError("Schedule not found")

        # "__none__" is what the faculty picker sends for "unassigned"
        if faculty_id == "__none__":
            faculty_id = None

        (period,) = self._coerce_rows(
            [{"subject": subject, "startTime": start_time, "endTime": end_time, "facultyId": faculty_id}]
        )
        period = replace(period, period_id=current.period_id, section_id=current.section_id)

        for other in self._sections.list_schedules(current.section_id or ""):
            if other.period_id != period.period_id and period.overlaps(other):
                raise ValidationError(f"Schedule overlap: {period.label()} overlaps {other.label()}.")

        self._sections.update_schedule(period)

    def delete_schedule(self, current_user: CurrentUser, schedule_id: str) -> None:
        require_role(current_user, Role.ADMIN)
        if not self._sections.delete_schedule(schedule_id):
            raise NotFoundError("Schedule not found")

    def scan_schedule_image(self, current_user: CurrentUser, image_bytes: bytes) -> ParsedSchedule:
        """Send a photographed timetable to the external parser for review."""

        require_role(current_user, Role.ADMIN)
        if not self._parser:
            raise ScheduleParseError("Schedule parser is not configured.")
        return self._parser.parse(build_data_uri(image_bytes))

    def import_parsed_schedules(
        self,
        current_user: CurrentUser,
        section_id: str,
        parsed: ParsedSchedule,
        *,
        faculty_ids: Optional[Sequence[Optional[str]]] = None,
    ) -> Sequence[str]:
        """Save reviewed parser rows; faculty_ids[i] assigns a faculty member to entries[i]."""

        if not parsed.entries:
            raise ValidationError("No schedules were found in the image.")
        faculty_ids = list(faculty_ids or [])
        rows = []
        for i, entry in enumerate(parsed.entries):
            rows.append(
                {
                    "subject": entry.subject,
                    "startTime": entry.start_time,
                    "endTime": entry.end_time,
                    "facultyId": faculty_ids[i] if i < len(faculty_ids) else None,
                }
            )
        return self.add_schedules(current_user, section_id, rows)
