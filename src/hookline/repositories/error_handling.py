#
# SPDX-License-Identifier: AGPL-3.0-only
# Copyright (c) 2026 m2-eng
# Author: m2-eng
# Co-Author: GitHub Copilot
# License: GNU Affero General Public License v3.0 (AGPL-3.0-only)
# Purpose: Central error handling for the repository layer.
#
"""
Central error handling for the repository layer.

Driver errors never leave a store as exceptions; they are logged and
returned as ``(StoreError, None)``.
"""

from __future__ import annotations

from functools import wraps
from typing import Callable, Any
import logging

from mysql.connector.errors import Error as MySQLError, OperationalError, InterfaceError, DatabaseError

from hookline.auth.errors import StoreError

logger = logging.getLogger("uvicorn.error")


def _build_repository_error_detail(
    operation_name: str,
    base_message: str,
    exc: Exception,
    error_message: str | None = None,
) -> str:
    final_message = error_message or base_message
    return f"{final_message} ({operation_name}): {exc}"


def _store_error(
    operation_name: str,
    base_message: str,
    exc: Exception,
    error_message: str | None = None,
) -> StoreError:
    detail = _build_repository_error_detail(operation_name, base_message, exc, error_message)
    logger.exception(detail)
    return StoreError(detail)


def handle_repository_errors(
    operation_name: str = "database operation",
    error_message: str | None = None,
):
    """Decorator turning driver errors of an async store method into results."""
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            try:
                return await func(*args, **kwargs)
            except (OperationalError, InterfaceError, DatabaseError) as exc:
                return _store_error(operation_name, "Database connection error", exc, error_message), None
            except MySQLError as exc:
                return _store_error(operation_name, "Database error", exc, error_message), None
        return wrapper
    return decorator
