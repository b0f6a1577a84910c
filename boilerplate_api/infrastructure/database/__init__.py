"""Database infrastructure - connection, models, and session management."""

from boilerplate_api.infrastructure.database.connection import (
    Database,
    get_database,
    get_db,
)

__all__ = ["Database", "get_database", "get_db"]
