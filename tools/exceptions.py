"""
Custom exceptions for the Classroom Bot tools.

Every exception carries a user-facing ``message``; the agent boundary
turns them into structured failure results.
"""


class ClassroomError(Exception):
    """Base class for expected, user-reportable failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class AuthorizationError(ClassroomError):
    """Raised when a caller lacks an active binding or the required tier."""

    def __init__(self, message: str, telegram_user_id: int = None, action: str = None):
        self.telegram_user_id = telegram_user_id
        self.action = action
        super().__init__(message)


class StudentNotRegisteredError(AuthorizationError):
    """Raised when no student is bound to the Telegram identity."""

    def __init__(self, telegram_user_id: int):
        super().__init__(
            "You are not registered in the class database. Send your student ID to register.",
            telegram_user_id=telegram_user_id,
        )


class InactiveStudentError(AuthorizationError):
    """Raised when the student record is deactivated."""

    def __init__(self, telegram_user_id: int):
        super().__init__(
            "Your student account has been deactivated. Please contact an administrator.",
            telegram_user_id=telegram_user_id,
        )


class InsufficientAccessError(AuthorizationError):
    """Raised when the caller's access level does not allow the action."""

    def __init__(self, telegram_user_id: int, action: str, access_level: str):
        self.access_level = access_level
        super().__init__(
            f"You do not have permission to {action}. Please ask your monitor or an administrator.",
            telegram_user_id=telegram_user_id,
            action=action,
        )


class RosterAccessDenied(AuthorizationError):
    """Raised when a student ID is not on the roster."""

    def __init__(self, student_id: str):
        self.student_id = student_id
        super().__init__(f'Student ID "{student_id}" is not on the authorized list. Access denied.')


class ConflictError(ClassroomError):
    """Raised when an identity binding already exists."""


class StudentIdClaimedError(ConflictError):
    """Raised when a student ID is already bound to another Telegram account."""

    def __init__(self, student_id: str):
        self.student_id = student_id
        super().__init__(f'Student ID "{student_id}" is already used by another Telegram account.')


class IdentityAlreadyBoundError(ConflictError):
    """Raised when a Telegram account is already bound to a different student ID."""

    def __init__(self, telegram_user_id: int, bound_student_id: str):
        self.telegram_user_id = telegram_user_id
        self.bound_student_id = bound_student_id
        super().__init__(f'Your Telegram account is already linked to student ID "{bound_student_id}".')


class NotFoundError(ClassroomError):
    """Raised when a referenced record does not exist."""


class GroupNotFoundError(NotFoundError):

    def __init__(self, group_id: int = None):
        self.group_id = group_id
        if group_id is None:
            super().__init__("Could not determine a group for this request.")
        else:
            super().__init__(f"Group {group_id} was not found.")


class HomeworkNotFoundError(NotFoundError):

    def __init__(self, homework_id: int):
        self.homework_id = homework_id
        super().__init__(f"Homework {homework_id} was not found.")


class ValidationError(ClassroomError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message)
