"""
Verification tool for the Classroom Bot.
Resolves a Telegram identity to a registered, active student.
"""
import logging
from typing import Dict, Any, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import Student, Group
from .authorization import access_level_of

logger = logging.getLogger(__name__)


def student_projection(student: Student, group_name: Optional[str]) -> Dict[str, Any]:
    """Public view of a student record returned by verification and registration."""
    return {
        "id": student.id,
        "student_id": student.student_id,
        "first_name": student.first_name,
        "last_name": student.last_name,
        "group_id": student.group_id,
        "group_name": group_name,
        "access_level": access_level_of(student).value,
        "is_active": bool(student.is_active),
    }


def verify_student(
    db: Session,
    telegram_user_id: int,
    telegram_username: Optional[str] = None
) -> Dict[str, Any]:
    """
    Verify that a Telegram user is a registered, active student.

    Refreshes the stored username when it has changed. That update is
    best-effort: a failure is logged and does not fail verification.

    Args:
        db: Database session
        telegram_user_id: Telegram ID of the caller
        telegram_username: Current Telegram username, if known

    Returns:
        Dictionary with ``verified``, ``student`` (or None) and ``message``
    """
    logger.info("Verifying telegram_user_id=%s", telegram_user_id)

    row = (
        db.query(Student, Group.group_name)
        .outerjoin(Group, Student.group_id == Group.id)
        .filter(Student.telegram_user_id == telegram_user_id)
        .first()
    )

    if row is None:
        logger.info("Verification failed: telegram_user_id=%s not registered", telegram_user_id)
        return {
            "verified": False,
            "student": None,
            "message": "You are not registered in the class database. Send your student ID to register."
        }

    student, group_name = row

    if not student.is_active:
        logger.info("Verification failed: student %s is deactivated", student.student_id)
        return {
            "verified": False,
            "student": None,
            "message": "Your student account has been deactivated. Please contact an administrator."
        }

    projection = student_projection(student, group_name)

    if telegram_username and telegram_username != student.telegram_username:
        try:
            student.telegram_username = telegram_username
            db.commit()
            logger.info("Updated username for student %s", projection["student_id"])
        except SQLAlchemyError:
            db.rollback()
            logger.warning(
                "Failed to update username for telegram_user_id=%s", telegram_user_id, exc_info=True
            )

    display_name = projection["first_name"] or telegram_username or "student"
    logger.info("Student %s verified", projection["student_id"])

    return {
        "verified": True,
        "student": projection,
        "message": f"Welcome, {display_name}! Your group: {group_name or 'not assigned'}"
    }
