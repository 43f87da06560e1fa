"""
Registration tool for the Classroom Bot.

Binds a Telegram identity to a roster student ID exactly once.
Registration is idempotent for the identity that already holds the ID.

The existence checks and the insert are separate round trips. Concurrent
attempts are settled by the unique constraints on ``student_id`` and
``telegram_user_id``: the losing insert is reported as "already claimed".
"""
import logging
from typing import Dict, Any, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config.roster import Roster, get_roster, normalize_student_id
from database import Student, Group
from .exceptions import (
    RosterAccessDenied,
    StudentIdClaimedError,
    IdentityAlreadyBoundError,
)
from .verification import student_projection

logger = logging.getLogger(__name__)


def _group_name(db: Session, group_id: Optional[int]) -> str:
    if group_id is None:
        return "Unknown"
    group = db.query(Group).filter(Group.id == group_id).first()
    return group.group_name if group else "Unknown"


def _already_registered(db: Session, student: Student) -> Dict[str, Any]:
    logger.info("Student %s already registered with this account", student.student_id)
    return {
        "success": True,
        "student": student_projection(student, _group_name(db, student.group_id)),
        "message": "You are already registered!"
    }


def register_student(
    db: Session,
    telegram_user_id: int,
    student_id: str,
    telegram_username: Optional[str] = None,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    roster: Optional[Roster] = None
) -> Dict[str, Any]:
    """
    Register a Telegram user as the student holding ``student_id``.

    Precedence:
    1. The student ID must be on the roster (no DB access otherwise)
    2. Already bound to this identity -> success, existing record
       Already bound to another identity -> StudentIdClaimedError
    3. Identity already bound to another student ID -> IdentityAlreadyBoundError
    4. Insert with roster group/access level; caller names win over roster names

    Args:
        db: Database session
        telegram_user_id: Telegram ID of the caller
        student_id: Student ID to claim (case-insensitive)
        telegram_username: Telegram username, if available
        first_name: First name given by the user (optional)
        last_name: Last name given by the user (optional)
        roster: Roster to check against (defaults to the process roster)

    Returns:
        Dictionary with ``success``, ``student`` and ``message``

    Raises:
        RosterAccessDenied: If the student ID is not on the roster
        StudentIdClaimedError: If another identity holds the student ID
        IdentityAlreadyBoundError: If the identity holds a different student ID
    """
    logger.info(
        "Registering telegram_user_id=%s username=%s student_id=%s",
        telegram_user_id, telegram_username, student_id
    )

    roster = roster or get_roster()
    canonical_id = normalize_student_id(student_id)
    entry = roster.get(canonical_id)
    if entry is None:
        logger.info("Student ID %s is not on the roster", canonical_id)
        raise RosterAccessDenied(student_id)

    existing = db.query(Student).filter(Student.student_id == canonical_id).first()
    if existing:
        if existing.telegram_user_id == telegram_user_id:
            return _already_registered(db, existing)
        logger.info("Student ID %s already claimed by another account", canonical_id)
        raise StudentIdClaimedError(canonical_id)

    bound = (
        db.query(Student)
        .filter(Student.telegram_user_id == telegram_user_id)
        .first()
    )
    if bound:
        logger.info(
            "telegram_user_id=%s already bound to student ID %s", telegram_user_id, bound.student_id
        )
        raise IdentityAlreadyBoundError(telegram_user_id, bound.student_id)

    student = Student(
        telegram_user_id=telegram_user_id,
        telegram_username=telegram_username or None,
        student_id=canonical_id,
        first_name=first_name or entry.first_name,
        last_name=last_name or entry.last_name,
        group_id=entry.group_id,
        access_level=entry.access_level.value,
        is_active=True,
    )

    try:
        db.add(student)
        db.commit()
    except IntegrityError:
        db.rollback()
        winner = db.query(Student).filter(Student.telegram_user_id == telegram_user_id).first()
        if winner and winner.student_id == canonical_id:
            return _already_registered(db, winner)
        if winner:
            raise IdentityAlreadyBoundError(telegram_user_id, winner.student_id)
        if db.query(Student.id).filter(Student.student_id == canonical_id).first() is None:
            raise
        logger.info("Concurrent registration lost the race for student ID %s", canonical_id)
        raise StudentIdClaimedError(canonical_id)

    db.refresh(student)
    group_name = _group_name(db, student.group_id)
    logger.info("Student %s registered in group %s", canonical_id, group_name)

    return {
        "success": True,
        "student": student_projection(student, group_name),
        "message": (
            f"Welcome! You are registered as {student.first_name or 'a student'} "
            f'in group "{group_name}".'
        )
    }
