from __future__ import annotations

from typing import Optional, Protocol

from .model import Account


class AccountRepository(Protocol):
    """Repository interface for login accounts.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, account_id: str) -> Optional[Account]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Account]:
        raise NotImplementedError

    def create_account(self, *, email: str, password_hash: str) -> str:
        raise NotImplementedError

    def delete_by_id(self, account_id: str) -> bool:
        raise NotImplementedError

    def is_admin(self, account_id: str) -> bool:
        raise NotImplementedError
