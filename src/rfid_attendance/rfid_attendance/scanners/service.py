from __future__ import annotations

from typing import List, Optional

from ..common.validators import require_non_empty
from ..core.constants import UNASSIGNED_SECTION
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from ..sections.repository import SectionRepository
from ..users.model import CurrentUser, require_role
from .repository import ScannerRepository


class ScannerService:
    """Use case: register scanner devices and assign them to sections (admin)."""

    def __init__(self, scanners: ScannerRepository, sections: SectionRepository):
        self._scanners = scanners
        self._sections = sections

    def list_scanners(self, current_user: CurrentUser) -> List[dict]:
        require_role(current_user, Role.ADMIN)
        names = {s.section_id: s.name for s in self._sections.list_all()}
        return [
            {
                "scanner_id": sc.scanner_id,
                "device_id": sc.device_id,
                "section_id": sc.section_id,
                "section_name": names.get(sc.section_id, UNASSIGNED_SECTION),
            }
            for sc in self._scanners.list_all()
        ]

    def save_scanner(
        self,
        current_user: CurrentUser,
        *,
        device_id: str,
        section_id: str,
        scanner_id: Optional[str] = None,
    ) -> str:
        """Create (scanner_id is None) or update a scanner."""

        require_role(current_user, Role.ADMIN)
        if not (device_id or "").strip() or not (section_id or "").strip():
            raise ValidationError("Please enter a Device ID and select a section.")
        device_id = require_non_empty(device_id, "Device ID")

        if not self._sections.get_by_id(section_id):
            raise ValidationError("Section not found")

        existing = self._scanners.get_by_device_id(device_id)
        if existing and existing.scanner_id != scanner_id:
            raise ValidationError("This Device ID is already registered.")

        if scanner_id is None:
            return self._scanners.create(device_id=device_id, section_id=section_id)

        if not self._scanners.get_by_id(scanner_id):
            raise NotFoundError("Scanner not found")
        self._scanners.update(scanner_id, device_id=device_id, section_id=section_id)
        return scanner_id

    def delete_scanner(self, current_user: CurrentUser, scanner_id: str) -> None:
        require_role(current_user, Role.ADMIN)
        if not self._scanners.delete_by_id(scanner_id):
            raise NotFoundError("Scanner not found")
