"""
Tools module for the Classroom Bot.

This module provides the operations the agent uses to interact with
the database while enforcing access tiers.
"""
from .exceptions import (
    ClassroomError,
    AuthorizationError,
    StudentNotRegisteredError,
    InactiveStudentError,
    InsufficientAccessError,
    RosterAccessDenied,
    ConflictError,
    StudentIdClaimedError,
    IdentityAlreadyBoundError,
    NotFoundError,
    GroupNotFoundError,
    HomeworkNotFoundError,
    ValidationError,
)

from .authorization import (
    AuthorizationService,
    HOMEWORK_EDITORS,
    CROSS_GROUP_VIEWERS,
)

from .verification import verify_student, student_projection

from .registration import register_student

from .sessions import record_session

from .homework import (
    add_homework,
    view_homework,
    delete_homework,
    parse_due_date,
)

__all__ = [
    # Exceptions
    "ClassroomError",
    "AuthorizationError",
    "StudentNotRegisteredError",
    "InactiveStudentError",
    "InsufficientAccessError",
    "RosterAccessDenied",
    "ConflictError",
    "StudentIdClaimedError",
    "IdentityAlreadyBoundError",
    "NotFoundError",
    "GroupNotFoundError",
    "HomeworkNotFoundError",
    "ValidationError",
    # Authorization
    "AuthorizationService",
    "HOMEWORK_EDITORS",
    "CROSS_GROUP_VIEWERS",
    # Verification
    "verify_student",
    "student_projection",
    # Registration
    "register_student",
    # Homework
    "add_homework",
    "view_homework",
    "delete_homework",
    "parse_due_date",
    # Sessions
    "record_session",
]
