from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    def get_by_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def get_by_rfid(self, rfid: str) -> Optional[Student]:
        raise NotImplementedError

    def get_by_mac(self, mac_address: str) -> Optional[Student]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def list_by_section(self, section_id: str) -> Sequence[Student]:
        raise NotImplementedError

    def update_credentials(self, student_id: str, *, rfid: Optional[str], mac_address: Optional[str]) -> bool:
        raise NotImplementedError

    def update_profile(
        self,
        student_id: str,
        *,
        first_name: str,
        last_name: str,
        address: Optional[str],
        section_id: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, student_id: str) -> bool:
        raise NotImplementedError
