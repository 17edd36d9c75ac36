from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Scanner:
    """A registered scanner device assigned to a section."""

    scanner_id: str
    device_id: str
    section_id: str
