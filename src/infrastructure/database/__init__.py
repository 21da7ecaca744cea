# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for the content network.

A single database holds the global catalog, node registry, node mirrors,
distribution jobs, translation requests and subscriptions.

Example:
    from src.infrastructure.database import init_database, get_session

    await init_database(settings)

    async with get_session() as session:
        result = await session.execute(select(Node))
"""

from src.infrastructure.database.connection import (
    DatabaseError,
    build_engine,
    check_database_connection,
    close_database,
    create_schema,
    get_engine,
    get_session,
    get_sessionmaker,
    is_sqlite_sessionmaker,
    init_database,
    session_scope,
)

__all__ = [
    "DatabaseError",
    "build_engine",
    "check_database_connection",
    "close_database",
    "create_schema",
    "get_engine",
    "get_session",
    "get_sessionmaker",
    "is_sqlite_sessionmaker",
    "init_database",
    "session_scope",
]
