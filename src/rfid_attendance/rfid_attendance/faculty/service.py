from __future__ import annotations

from typing import List

from werkzeug.security import generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from ..users.model import CurrentUser, require_role
from ..users.repository import AccountRepository
from .model import Faculty
from .repository import FacultyRepository


class FacultyService:
    """Use case: manage faculty accounts (admin)."""

    def __init__(self, faculty: FacultyRepository, accounts: AccountRepository):
        self._faculty = faculty
        self._accounts = accounts

    def create_faculty(
        self,
        current_user: CurrentUser,
        *,
        name: str,
        email: str,
        password: str,
        department: str,
    ) -> str:
        require_role(current_user, Role.ADMIN)

        name = require_non_empty(name, "Name")
        department = require_non_empty(department, "Department")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._accounts.get_by_email(email):
            raise ValidationError("An account with this email already exists")

        account_id = self._accounts.create_account(email=email, password_hash=generate_password_hash(password))
        return self._faculty.create(faculty_id=account_id, name=name, email=email, department=department)

    def list_faculty(self, current_user: CurrentUser) -> List[Faculty]:
        require_role(current_user, Role.ADMIN)
        return sorted(self._faculty.list_all(), key=lambda f: f.name.lower())

    def update_faculty(self, current_user: CurrentUser, faculty_id: str, *, name: str, department: str) -> None:
        require_role(current_user, Role.ADMIN)
        if not self._faculty.get_by_id(faculty_id):
            raise NotFoundError("Faculty not found")
        self._faculty.update(
            faculty_id,
            name=require_non_empty(name, "Name"),
            department=require_non_empty(department, "Department"),
        )

    def delete_faculty(self, current_user: CurrentUser, faculty_id: str) -> None:
        require_role(current_user, Role.ADMIN)
        if not self._faculty.get_by_id(faculty_id):
            raise NotFoundError("Faculty not found")
        if not self._faculty.delete_by_id(faculty_id):
            raise ValidationError("Delete failed")
        self._accounts.delete_by_id(faculty_id)
