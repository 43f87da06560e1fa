"""Database module."""
from .models import Base, Group, Student, Homework, UserSession, AccessLevel
from .connection import (
    SessionLocal,
    get_engine,
    dispose_engine,
    get_db,
    get_db_context,
    init_db,
)

__all__ = [
    "Base",
    "Group",
    "Student",
    "Homework",
    "UserSession",
    "AccessLevel",
    "SessionLocal",
    "get_engine",
    "dispose_engine",
    "get_db",
    "get_db_context",
    "init_db",
]
