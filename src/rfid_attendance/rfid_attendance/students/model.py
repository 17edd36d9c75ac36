from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: a student and the credentials registered to them."""

    student_id: str
    first_name: str
    last_name: str
    middle_name: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    rfid: Optional[str] = None
    mac_address: Optional[str] = None
    section_id: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def sort_name(self) -> str:
        return f"{self.last_name}, {self.first_name}"

    def credentials(self) -> List[str]:
        return [c for c in (self.rfid, self.mac_address) if c]
