from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Faculty:
    faculty_id: str
    name: str
    email: str
    department: str
