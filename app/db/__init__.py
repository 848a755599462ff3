"""
Database package: engine handle, base class and session dependency.

This makes `from app.db import Base, Database, get_db` work and keeps imports
consistent across models, services and routes.
"""

from .session import (
    Base,
    Database,
    get_db,
    utcnow,
)

__all__ = [
    "Base",
    "Database",
    "get_db",
    "utcnow",
]
