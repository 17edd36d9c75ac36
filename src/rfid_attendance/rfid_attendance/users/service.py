from __future__ import annotations

import logging
from typing import Optional, Tuple

from werkzeug.security import check_password_hash

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from ..faculty.repository import FacultyRepository
from ..students.repository import StudentRepository
from .model import CurrentUser
from .repository import AccountRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate an account and resolve its role."""

    def __init__(self, accounts: AccountRepository, faculty: FacultyRepository, students: StudentRepository):
        self._accounts = accounts
        self._faculty = faculty
        self._students = students

    def resolve_role(self, account_id: str) -> Optional[Tuple[Role, str]]:
        """Role lookup order: admin, then faculty, then student.

        Returns (role, display name) or None when no profile exists.
        """

        if self._accounts.is_admin(account_id):
            account = self._accounts.get_by_id(account_id)
            return Role.ADMIN, account.email if account else "Administrator"

        faculty = self._faculty.get_by_id(account_id)
        if faculty:
            return Role.FACULTY, faculty.name

        student = self._students.get_by_id(account_id)
        if student:
            return Role.STUDENT, student.full_name

        return None

    def authenticate(self, email: str, password: str, *, expected_role: Optional[Role] = None) -> CurrentUser:
        account = self._accounts.get_by_email((email or "").strip().lower())
        if not account or not account.is_active:
            logger.info("Rejected login for %s: unknown or inactive account", email)
            raise AuthenticationError("Invalid email or password.")

        try:
            ok = check_password_hash(account.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.info("Rejected login for %s: wrong password", email)
            raise AuthenticationError("Invalid email or password.")

        resolved = self.resolve_role(account.account_id)
        if not resolved:
            raise AuthorizationError(
                "Your account does not have a valid role assigned. Please contact an administrator."
            )

        role, display_name = resolved
        if expected_role is not None and role != expected_role:
            raise AuthorizationError(f"You are not registered as a(n) {expected_role.value}.")

        return CurrentUser(user_id=account.account_id, role=role, display_name=display_name)
