from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig
from .mysql_base import new_id

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a SQL script on ';' outside of quotes."""

    buf: list[str] = []
    quote = ""
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = ""
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(conn_factory: DatabaseConnection, sql: str) -> None:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(_strip_comments(_strip_create_db_and_use(sql))):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(config: DBConfig) -> None:
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(config: DBConfig, *, schema_path: str | Path) -> None:
    ensure_database_exists(config)
    _run_script(DatabaseConnection(config), Path(schema_path).read_text(encoding="utf-8"))
    logger.info("Applied schema %s to %s", schema_path, config.describe())


def apply_seed_sql(config: DBConfig, *, seed_path: str | Path) -> None:
    _run_script(DatabaseConnection(config), Path(seed_path).read_text(encoding="utf-8"))
    logger.info("Applied seed %s to %s", seed_path, config.describe())


def ensure_admin(config: DBConfig, *, email: str, password: str) -> str:
    """Create (or reset the password of) an admin account. Returns its id."""

    conn = DatabaseConnection(config).connect()
    try:
        cur = conn.cursor(dictionary=True)
        password_hash = generate_password_hash(password)
        cur.execute("SELECT account_id FROM accounts WHERE email=%s", (email,))
        row = cur.fetchone()
        if row:
            account_id = row["account_id"]
            cur.execute(
                "UPDATE accounts SET password_hash=%s, is_active=1 WHERE account_id=%s",
                (password_hash, account_id),
            )
        else:
            account_id = new_id()
            cur.execute(
                "INSERT INTO accounts (account_id, email, password_hash) VALUES (%s, %s, %s)",
                (account_id, email, password_hash),
            )
        cur.execute("INSERT IGNORE INTO admins (admin_id) VALUES (%s)", (account_id,))
        conn.commit()
        return account_id
    finally:
        conn.close()


def list_tables(config: DBConfig) -> list[str]:
    conn = DatabaseConnection(config).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
