"""
Authorization module for the Classroom Bot.
Implements tiered access control with enforcement at the tool layer.

CRITICAL RULES:
1. Never trust the request for the access level - always read it fresh from the DB
2. Deactivated students are treated as unauthenticated
3. Only monitors, admins and owners may add or delete homework
4. Only admins and owners may look at other groups
"""
from sqlalchemy.orm import Session

from database import Student, AccessLevel
from .exceptions import (
    StudentNotRegisteredError,
    InactiveStudentError,
    InsufficientAccessError,
)

HOMEWORK_EDITORS = frozenset({AccessLevel.MONITOR, AccessLevel.ADMIN, AccessLevel.OWNER})
CROSS_GROUP_VIEWERS = frozenset({AccessLevel.ADMIN, AccessLevel.OWNER})


def access_level_of(student: Student) -> AccessLevel:
    """Access level of a student, defaulting to STUDENT for unknown values."""
    try:
        return AccessLevel(student.access_level)
    except ValueError:
        return AccessLevel.STUDENT


class AuthorizationService:
    """
    Service for handling authorization checks.
    Every check re-reads the caller's student record from the database.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_student(self, telegram_user_id: int):
        """Student bound to a Telegram identity, or None."""
        return (
            self.db.query(Student)
            .filter(Student.telegram_user_id == telegram_user_id)
            .first()
        )

    def get_student(self, telegram_user_id: int) -> Student:
        """
        Get the student bound to a Telegram identity.

        Raises:
            StudentNotRegisteredError: If no student is bound to the identity
        """
        student = self.find_student(telegram_user_id)
        if not student:
            raise StudentNotRegisteredError(telegram_user_id)
        return student

    def get_active_student(self, telegram_user_id: int) -> Student:
        """
        Get the caller's student record, requiring it to be active.

        Raises:
            StudentNotRegisteredError: If no student is bound to the identity
            InactiveStudentError: If the student is deactivated
        """
        student = self.get_student(telegram_user_id)
        if not student.is_active:
            raise InactiveStudentError(telegram_user_id)
        return student

    def enforce_access(self, telegram_user_id: int, allowed: frozenset, action: str) -> Student:
        """
        Enforce that the caller's current access level is in ``allowed``.

        Returns:
            The caller's active student record

        Raises:
            InsufficientAccessError: If the access level is not allowed
        """
        student = self.get_active_student(telegram_user_id)
        level = access_level_of(student)
        if level not in allowed:
            raise InsufficientAccessError(telegram_user_id, action, level.value)
        return student

    def enforce_homework_editor(self, telegram_user_id: int, action: str) -> Student:
        """Enforce monitor/admin/owner access."""
        return self.enforce_access(telegram_user_id, HOMEWORK_EDITORS, action)

    def can_view_all_groups(self, student: Student) -> bool:
        """Check if the student may view homework of other groups."""
        return access_level_of(student) in CROSS_GROUP_VIEWERS
