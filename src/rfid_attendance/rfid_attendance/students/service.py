from __future__ import annotations

from typing import List, Optional

from ..attendance.repository import AttendanceLogRepository
from ..common.validators import normalize_credential, normalize_mac_address, require_non_empty
from ..core.constants import UNASSIGNED_SECTION
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from ..sections.repository import SectionRepository
from ..users.model import CurrentUser, require_role
from .model import Student
from .repository import StudentRepository


class StudentService:
    """Use cases around student records and their registered credentials."""

    def __init__(self, students: StudentRepository, sections: SectionRepository, logs: AttendanceLogRepository):
        self._students = students
        self._sections = sections
        self._logs = logs

    def get_profile(self, current_user: CurrentUser, student_id: Optional[str] = None) -> Student:
        if current_user.role == Role.STUDENT:
            student_id = current_user.user_id
        else:
            require_role(current_user, Role.ADMIN, Role.FACULTY)

        student = self._students.get_by_id(student_id or "")
        if not student:
            raise NotFoundError("No student profile found for your account.")
        return student

    def update_credentials(self, current_user: CurrentUser, *, rfid: Optional[str], mac_address: Optional[str]) -> Student:
        """A student links their own RFID tag and/or device MAC address."""

        require_role(current_user, Role.STUDENT)
        student = self.get_profile(current_user)

        rfid = normalize_credential(rfid)
        mac_address = normalize_mac_address(mac_address)

        if rfid:
            owner = self._students.get_by_rfid(rfid)
            if owner and owner.student_id != student.student_id:
                raise ValidationError("This RFID is already registered to another student.")
        if mac_address:
            owner = self._students.get_by_mac(mac_address)
            if owner and owner.student_id != student.student_id:
                raise ValidationError("This MAC address is already registered to another student.")

        if not self._students.update_credentials(student.student_id, rfid=rfid, mac_address=mac_address):
            raise ValidationError("Update failed")
        return self.get_profile(current_user)

    def list_admin_view(self, current_user: CurrentUser) -> List[dict]:
        require_role(current_user, Role.ADMIN)
        names = {s.section_id: s.name for s in self._sections.list_all()}
        out: List[dict] = []
        for st in self._students.list_all():
            out.append(
                {
                    "student_id": st.student_id,
                    "name": st.full_name,
                    "email": st.email,
                    "rfid": st.rfid,
                    "mac_address": st.mac_address,
                    "section_id": st.section_id,
                    "section": names.get(st.section_id, UNASSIGNED_SECTION) if st.section_id else UNASSIGNED_SECTION,
                    "registered": bool(st.rfid),
                }
            )
        return out

    def update_student(
        self,
        current_user: CurrentUser,
        student_id: str,
        *,
        first_name: str,
        last_name: str,
        address: Optional[str] = None,
        section_id: Optional[str] = None,
    ) -> None:
        require_role(current_user, Role.ADMIN)
        if not self._students.get_by_id(student_id):
            raise NotFoundError("Student not found")

        section_id = section_id or None
        if section_id and not self._sections.get_by_id(section_id):
            raise ValidationError("Section not found")

        self._students.update_profile(
            student_id,
            first_name=require_non_empty(first_name, "First name"),
            last_name=require_non_empty(last_name, "Last name"),
            address=address.strip() if address else None,
            section_id=section_id,
        )

    def delete_student(self, current_user: CurrentUser, student_id: str) -> None:
        """Delete a student together with their attendance logs."""

        require_role(current_user, Role.ADMIN)
        if not self._students.get_by_id(student_id):
            raise NotFoundError("Student not found")
        self._logs.delete_for_student(student_id)
        if not self._students.delete_by_id(student_id):
            raise ValidationError("Delete failed")

    def list_rfid_registrations(self, current_user: CurrentUser) -> List[dict]:
        require_role(current_user, Role.ADMIN)
        return [
            {"rfid": st.rfid, "student_id": st.student_id, "student_name": st.full_name}
            for st in self._students.list_all()
            if st.rfid
        ]

    def list_for_faculty(self, current_user: CurrentUser) -> List[dict]:
        """Students of every section the faculty advises or teaches."""

        require_role(current_user, Role.FACULTY)
        out: List[dict] = []
        for section in self._sections.list_for_faculty(current_user.user_id):
            for st in sorted(self._students.list_by_section(section.section_id), key=lambda s: s.sort_name):
                out.append(
                    {
                        "student_id": st.student_id,
                        "name": st.full_name,
                        "section_id": section.section_id,
                        "section": section.name,
                        "rfid": st.rfid,
                    }
                )
        return out
