"""
Homework tools for the Classroom Bot.

AUTHORIZATION:
- Any active student can view homework of their own group
- Admins and owners can view any group
- Monitors, admins and owners can add and delete homework
"""
import logging
from datetime import datetime
from typing import Dict, Any, Optional
from sqlalchemy.orm import Session, joinedload

from database import Homework, Group
from .authorization import AuthorizationService
from .exceptions import GroupNotFoundError, HomeworkNotFoundError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_VIEW_LIMIT = 10
MAX_VIEW_LIMIT = 50

DUE_DATE_FORMATS = (
    "%d.%m.%Y %H:%M",
    "%d.%m.%Y",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d",
)


def parse_due_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a due date string.

    Accepts ISO 8601 (``2025-03-01``, ``2025-03-01 18:00``) and a few common
    day-first and slash formats. Returns None for empty or unparseable input.
    """
    if not value or not value.strip():
        return None
    value = value.strip()

    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        parsed = None

    if parsed is None:
        for fmt in DUE_DATE_FORMATS:
            try:
                parsed = datetime.strptime(value, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        logger.warning("Invalid due date format: %r", value)
        return None

    # Stored as naive datetimes
    if parsed.tzinfo is not None:
        parsed = parsed.replace(tzinfo=None)
    return parsed


def add_homework(
    db: Session,
    telegram_user_id: int,
    title: str,
    description: Optional[str] = None,
    subject: Optional[str] = None,
    due_date: Optional[str] = None,
    group_id: Optional[int] = None
) -> Dict[str, Any]:
    """
    Add a homework assignment.

    AUTHORIZATION: Monitor, admin or owner.

    Args:
        db: Database session
        telegram_user_id: Telegram ID of the creator
        title: Homework title
        description: Details (optional)
        subject: Subject name (optional)
        due_date: Due date string; unparseable values are stored as no due date
        group_id: Target group (defaults to the creator's group)

    Returns:
        Created homework data and a confirmation message

    Raises:
        InsufficientAccessError: If the creator is below monitor
        GroupNotFoundError: If no target group can be resolved
        ValidationError: If the title is empty
    """
    logger.info(
        "Adding homework by telegram_user_id=%s subject=%s group_id=%s",
        telegram_user_id, subject, group_id
    )

    auth_service = AuthorizationService(db)

    # ENFORCEMENT: Only monitors, admins and owners can add homework
    creator = auth_service.enforce_homework_editor(telegram_user_id, "add homework")

    if not title or not title.strip():
        raise ValidationError("Homework title must not be empty", "title")

    target_group_id = group_id or creator.group_id
    if not target_group_id:
        logger.info("No group specified and creator %s has no group", creator.student_id)
        raise GroupNotFoundError()

    group = db.query(Group).filter(Group.id == target_group_id).first()
    if not group:
        logger.info("Group %s not found", target_group_id)
        raise GroupNotFoundError(target_group_id)

    homework = Homework(
        title=title.strip(),
        description=description or None,
        subject=subject or None,
        due_date=parse_due_date(due_date),
        group_id=group.id,
        created_by=creator.id,
    )

    db.add(homework)
    db.commit()
    db.refresh(homework)

    logger.info("Homework %s created for group %s", homework.id, group.id)

    return {
        "success": True,
        "homework": homework.to_dict(),
        "message": f'Homework "{homework.title}" has been added for group "{group.group_name}".'
    }


def view_homework(
    db: Session,
    telegram_user_id: int,
    group_id: Optional[int] = None,
    limit: int = DEFAULT_VIEW_LIMIT
) -> Dict[str, Any]:
    """
    List homework for a group, newest first.

    AUTHORIZATION:
    - Admins and owners: any group (defaults to their own)
    - Everyone else: always their own group, whatever ``group_id`` says

    Args:
        db: Database session
        telegram_user_id: Telegram ID of the viewer
        group_id: Requested group (honoured for admins and owners only)
        limit: Maximum number of items

    Returns:
        Dictionary with ``homework_list`` and ``message``

    Raises:
        GroupNotFoundError: If no group can be resolved for the viewer
    """
    logger.info(
        "Viewing homework for telegram_user_id=%s group_id=%s limit=%s",
        telegram_user_id, group_id, limit
    )

    auth_service = AuthorizationService(db)
    viewer = auth_service.get_active_student(telegram_user_id)

    if group_id and auth_service.can_view_all_groups(viewer):
        target_group_id = group_id
    else:
        target_group_id = viewer.group_id

    if not target_group_id:
        logger.info("No group to show homework for student %s", viewer.student_id)
        raise GroupNotFoundError()

    limit = max(1, min(limit or DEFAULT_VIEW_LIMIT, MAX_VIEW_LIMIT))

    items = (
        db.query(Homework)
        .options(joinedload(Homework.group), joinedload(Homework.creator))
        .filter(Homework.group_id == target_group_id)
        .order_by(Homework.created_at.desc(), Homework.id.desc())
        .limit(limit)
        .all()
    )

    homework_list = [hw.to_dict() for hw in items]
    logger.info("Retrieved %d homework items for group %s", len(homework_list), target_group_id)

    return {
        "success": True,
        "group_id": target_group_id,
        "homework_list": homework_list,
        "message": (
            f"Found {len(homework_list)} homework assignments"
            if homework_list else "No homework found"
        )
    }


def delete_homework(
    db: Session,
    telegram_user_id: int,
    homework_id: int
) -> Dict[str, Any]:
    """
    Delete a homework assignment.

    AUTHORIZATION: Monitor, admin or owner.

    Raises:
        InsufficientAccessError: If the caller is below monitor
        HomeworkNotFoundError: If the homework does not exist
    """
    logger.info("Deleting homework %s by telegram_user_id=%s", homework_id, telegram_user_id)

    auth_service = AuthorizationService(db)

    # ENFORCEMENT: Only monitors, admins and owners can delete homework
    auth_service.enforce_homework_editor(telegram_user_id, "delete homework")

    homework = db.query(Homework).filter(Homework.id == homework_id).first()
    if not homework:
        logger.info("Homework %s not found", homework_id)
        raise HomeworkNotFoundError(homework_id)

    title = homework.title
    db.delete(homework)
    db.commit()

    logger.info("Homework %s deleted", homework_id)

    return {
        "success": True,
        "message": f'Homework "{title}" has been deleted.'
    }
