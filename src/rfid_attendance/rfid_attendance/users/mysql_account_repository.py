from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, new_id
from .model import Account
from .repository import AccountRepository


def _to_account(row: dict) -> Account:
    return Account(
        account_id=str(row["account_id"]),
        email=row["email"],
        password_hash=row["password_hash"],
        is_active=bool(row.get("is_active", True)),
    )


class MySQLAccountRepository(AccountRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, account_id: str) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT account_id, email, password_hash, is_active FROM accounts WHERE account_id=%s",
                (account_id,),
            )
            row = fetchone(cur)
            return _to_account(row) if row else None

    def get_by_email(self, email: str) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT account_id, email, password_hash, is_active FROM accounts WHERE email=%s",
                (email,),
            )
            row = fetchone(cur)
            return _to_account(row) if row else None

    def create_account(self, *, email: str, password_hash: str) -> str:
        account_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO accounts(account_id, email, password_hash, is_active) VALUES(%s,%s,%s,1)",
                (account_id, email, password_hash),
            )
        return account_id

    def delete_by_id(self, account_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM accounts WHERE account_id=%s", (account_id,))
            return cur.rowcount > 0

    def is_admin(self, account_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS ok FROM admins WHERE admin_id=%s", (account_id,))
            return fetchone(cur) is not None
