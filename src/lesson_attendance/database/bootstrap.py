from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)


def _without_database_statements(sql: str) -> str:
    # schema.sql must work against whatever database DB_CONFIG names.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    return re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)


def split_statements(sql: str) -> Iterator[str]:
    """Split a script on top-level ';', skipping '--' comment lines.

    Semicolons inside quoted literals do not end a statement.
    """
    lines = [line for line in sql.splitlines() if not line.lstrip().startswith("--")]
    current: list[str] = []
    quote: str | None = None
    escaped = False

    for ch in "\n".join(lines):
        if escaped:
            escaped = False
        elif ch == "\\" and quote:
            escaped = True
        elif ch in ("'", '"') and quote in (None, ch):
            quote = None if quote else ch
        elif ch == ";" and quote is None:
            statement = "".join(current).strip()
            current = []
            if statement:
                yield statement
            continue
        current.append(ch)

    statement = "".join(current).strip()
    if statement:
        yield statement


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> int:
    """Create the database and run schema.sql against it. Idempotent.

    Returns the number of statements executed.
    """
    ensure_database_exists(db_config)
    target = DBConfig.from_dict(db_config)
    sql = _without_database_statements(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(target)
    executed = 0
    try:
        cur = conn.cursor()
        for statement in split_statements(sql):
            cur.execute(statement)
            executed += 1
        conn.commit()
    finally:
        conn.close()

    logger.info("schema applied to %s (%d statements)", target.database, executed)
    return executed


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
