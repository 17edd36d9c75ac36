from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Faculty


class FacultyRepository(Protocol):
    def get_by_id(self, faculty_id: str) -> Optional[Faculty]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Faculty]:
        raise NotImplementedError

    def create(self, *, faculty_id: str, name: str, email: str, department: str) -> str:
        raise NotImplementedError

    def update(self, faculty_id: str, *, name: str, department: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, faculty_id: str) -> bool:
        raise NotImplementedError
