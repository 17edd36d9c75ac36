from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ScheduledPeriod, Section


class SectionRepository(Protocol):
    def get_by_id(self, section_id: str) -> Optional[Section]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Section]:
        raise NotImplementedError

    def list_for_faculty(self, faculty_id: str) -> Sequence[Section]:
        """Sections the faculty advises or teaches at least one period of."""

        raise NotImplementedError

    def create(self, *, name: str, adviser_id: str, adviser_name: str) -> str:
        raise NotImplementedError

    def update(self, section_id: str, *, name: str, adviser_id: str, adviser_name: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, section_id: str) -> bool:
        """Delete the section and every schedule under it."""

        raise NotImplementedError

    def list_schedules(self, section_id: str) -> Sequence[ScheduledPeriod]:
        raise NotImplementedError

    def get_schedule(self, schedule_id: str) -> Optional[ScheduledPeriod]:
        raise NotImplementedError

    def add_schedules(self, section_id: str, periods: Sequence[ScheduledPeriod]) -> Sequence[str]:
        raise NotImplementedError

    def update_schedule(self, period: ScheduledPeriod) -> bool:
        raise NotImplementedError

    def delete_schedule(self, schedule_id: str) -> bool:
        raise NotImplementedError
