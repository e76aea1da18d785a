#
# SPDX-License-Identifier: AGPL-3.0-only
# Copyright (c) 2026 m2-eng
# Author: m2-eng
# Co-Author: GitHub Copilot
# License: GNU Affero General Public License v3.0 (AGPL-3.0-only)
# Purpose: MySQL/MariaDB backed session store.
#
"""
MySQL/MariaDB backed session store.

The driver is blocking, so every statement runs in a worker thread. Each
call opens its own connection from ``connection_factory`` and closes it.
"""

import asyncio
import json
from typing import Any, Callable, List, Mapping, Optional, Tuple

import mysql.connector

from .base import Result, Store
from .error_handling import handle_repository_errors


SESSION_COLUMNS = ("id", "created_at", "expires", "client", "platform", "login_attempts", "user_id")

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS `{table}` (
    `id` VARCHAR(200) NOT NULL PRIMARY KEY,
    `created_at` DATETIME NULL,
    `expires` INT NULL,
    `client` VARCHAR(100) NOT NULL,
    `platform` TEXT NOT NULL,
    `login_attempts` INT NOT NULL DEFAULT 0,
    `user_id` INT NULL,
    INDEX `idx_user_id` (`user_id`)
)
"""


def connection_factory_from_config(db_config: Mapping[str, Any]) -> Callable:
    """
    Builds a connection factory from the ``database`` config section.

    Args:
        db_config: Dict with host, port, user, password, name

    Returns:
        Callable returning a new mysql.connector connection
    """
    def connect():
        return mysql.connector.connect(
            host=db_config.get("host", "localhost"),
            port=db_config.get("port", 3306),
            user=db_config.get("user", ""),
            password=db_config.get("password", ""),
            database=db_config.get("name", "hookline"),
            connect_timeout=db_config.get("connect_timeout", 5),
        )
    return connect


class MySQLSessionStore(Store):
    def __init__(self, connection_factory: Callable, table: str = "app_session"):
        self.connection_factory = connection_factory
        self.table = table

    def _where(self, criteria: Optional[Mapping[str, Any]]) -> Tuple[str, List[Any]]:
        if not criteria:
            return "", []

        clauses, params = [], []
        for column, expected in criteria.items():
            if column not in SESSION_COLUMNS:
                raise ValueError(f"Unknown session column: {column}")

            if isinstance(expected, Mapping) and "$in" in expected:
                values = list(expected["$in"])
                if not values:
                    clauses.append("1 = 0")
                    continue
                clauses.append(f"`{column}` IN ({', '.join(['%s'] * len(values))})")
                params.extend(values)
            else:
                clauses.append(f"`{column}` = %s")
                params.append(expected)

        return " WHERE " + " AND ".join(clauses), params

    def _to_row(self, record: Mapping[str, Any]) -> dict:
        row = {k: v for k, v in record.items() if k in SESSION_COLUMNS}
        if "platform" in row:
            row["platform"] = json.dumps(row["platform"])
        return row

    def _from_row(self, row: Mapping[str, Any]) -> dict:
        record = dict(row)
        if isinstance(record.get("platform"), str):
            record["platform"] = json.loads(record["platform"])
        return record

    def _execute(self, query: str, params: List[Any], fetch: bool = False):
        connection = self.connection_factory()
        cursor = None
        try:
            cursor = connection.cursor(dictionary=True)
            cursor.execute(query, tuple(params))
            if fetch:
                return cursor.fetchall()
            connection.commit()
            return cursor.rowcount
        finally:
            if cursor is not None:
                cursor.close()
            connection.close()

    async def _run(self, query: str, params: List[Any], fetch: bool = False):
        return await asyncio.to_thread(self._execute, query, params, fetch)

    def create_table(self) -> None:
        self._execute(CREATE_TABLE_SQL.format(table=self.table), [])

    @handle_repository_errors("session.find")
    async def find(self, criteria: Optional[Mapping[str, Any]] = None) -> Result:
        where, params = self._where(criteria)
        rows = await self._run(f"SELECT * FROM `{self.table}`{where}", params, fetch=True)
        return None, [self._from_row(row) for row in rows]

    @handle_repository_errors("session.find_one")
    async def find_one(self, criteria: Mapping[str, Any]) -> Result:
        where, params = self._where(criteria)
        rows = await self._run(f"SELECT * FROM `{self.table}`{where} LIMIT 1", params, fetch=True)
        if not rows:
            return None, None
        return None, self._from_row(rows[0])

    @handle_repository_errors("session.insert")
    async def insert(self, record: Mapping[str, Any]) -> Result:
        row = self._to_row(record)
        columns = ", ".join(f"`{c}`" for c in row)
        placeholders = ", ".join(["%s"] * len(row))
        await self._run(
            f"INSERT INTO `{self.table}` ({columns}) VALUES ({placeholders})",
            list(row.values()),
        )
        return None, dict(record)

    @handle_repository_errors("session.update")
    async def update(self, record: Mapping[str, Any], criteria: Mapping[str, Any]) -> Result:
        row = self._to_row(record)
        row.pop(self.primary_key, None)
        if not row:
            return None, 0

        assignments = ", ".join(f"`{c}` = %s" for c in row)
        where, params = self._where(criteria)
        count = await self._run(
            f"UPDATE `{self.table}` SET {assignments}{where}",
            list(row.values()) + params,
        )
        return None, count

    @handle_repository_errors("session.delete")
    async def delete(self, criteria: Mapping[str, Any]) -> Result:
        where, params = self._where(criteria)
        if not where:
            # Never wipe the table by accident
            return None, 0
        count = await self._run(f"DELETE FROM `{self.table}`{where}", params)
        return None, count
