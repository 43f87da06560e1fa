"""
Tool catalogue and dispatcher for the Classroom Bot agent.

Each tool request is a variant of the ``ToolRequest`` tagged union and is
executed by ``dispatch``, which owns the database session and turns every
failure into a structured result. Nothing raises through this boundary.
"""
import logging
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from langchain_core.tools import StructuredTool
from pydantic import BaseModel, Field, TypeAdapter
from sqlalchemy.exc import SQLAlchemyError

from config.settings import ConfigurationError
from database import get_db_context
from tools import (
    ClassroomError,
    verify_student,
    register_student,
    add_homework,
    view_homework,
    delete_homework,
)
from .state import ToolName

logger = logging.getLogger(__name__)

CONFIGURATION_ERROR_MESSAGE = "The service is not configured correctly. Please contact an administrator."
DATABASE_ERROR_MESSAGE = "A database error occurred. Please try again later."
UNEXPECTED_ERROR_MESSAGE = "Something went wrong while running this action. Please try again later."

# Column bounds: Telegram IDs are BigInteger, row IDs are Integer
MAX_TELEGRAM_ID = 2**63 - 1
MAX_ROW_ID = 2**31 - 1


# ============== Tool arguments (what the model fills in) ==============

class VerifyStudentArgs(BaseModel):
    telegram_user_id: int = Field(..., ge=1, le=MAX_TELEGRAM_ID, description="Telegram user ID to verify")
    telegram_username: Optional[str] = Field(None, description="Telegram username (if available)")


class RegisterStudentArgs(BaseModel):
    telegram_user_id: int = Field(..., ge=1, le=MAX_TELEGRAM_ID, description="Telegram user ID")
    telegram_username: Optional[str] = Field(None, description="Telegram username (if available)")
    student_id: str = Field(..., description="Student ID to verify against the authorized list")
    first_name: Optional[str] = Field(None, description="First name (if provided by user)")
    last_name: Optional[str] = Field(None, description="Last name (if provided by user)")


class AddHomeworkArgs(BaseModel):
    created_by_telegram_id: int = Field(..., ge=1, le=MAX_TELEGRAM_ID, description="Telegram ID of the person creating homework")
    title: str = Field(..., description="Homework title")
    description: Optional[str] = Field(None, description="Homework description")
    subject: Optional[str] = Field(None, description="Subject name")
    due_date: Optional[str] = Field(None, description="Due date in format YYYY-MM-DD HH:MM")
    group_id: Optional[int] = Field(None, ge=1, le=MAX_ROW_ID, description="Specific group ID (if not provided, the creator's group is used)")


class ViewHomeworkArgs(BaseModel):
    telegram_user_id: int = Field(..., ge=1, le=MAX_TELEGRAM_ID, description="Telegram ID of the person viewing homework")
    group_id: Optional[int] = Field(None, ge=1, le=MAX_ROW_ID, description="Specific group ID (for admins only)")
    limit: int = Field(10, description="Number of homework items to return (default 10)")


class DeleteHomeworkArgs(BaseModel):
    telegram_user_id: int = Field(..., ge=1, le=MAX_TELEGRAM_ID, description="Telegram ID of the person deleting homework")
    homework_id: int = Field(..., ge=1, le=MAX_ROW_ID, description="ID of homework to delete")


# ============== Tagged union of requests ==============

class VerifyStudentRequest(VerifyStudentArgs):
    tool: Literal["student_verification"] = "student_verification"


class RegisterStudentRequest(RegisterStudentArgs):
    tool: Literal["student_registration"] = "student_registration"


class AddHomeworkRequest(AddHomeworkArgs):
    tool: Literal["add_homework"] = "add_homework"


class ViewHomeworkRequest(ViewHomeworkArgs):
    tool: Literal["view_homework"] = "view_homework"


class DeleteHomeworkRequest(DeleteHomeworkArgs):
    tool: Literal["delete_homework"] = "delete_homework"


ToolRequest = Annotated[
    Union[
        VerifyStudentRequest,
        RegisterStudentRequest,
        AddHomeworkRequest,
        ViewHomeworkRequest,
        DeleteHomeworkRequest,
    ],
    Field(discriminator="tool"),
]

_request_adapter = TypeAdapter(ToolRequest)


def parse_tool_request(data: Dict[str, Any]):
    """Validate a raw ``{"tool": ..., **args}`` mapping into a ToolRequest variant."""
    return _request_adapter.validate_python(data)


def _failure(tool: str, message: str) -> Dict[str, Any]:
    """Failure result shaped like the tool's success result."""
    if tool == ToolName.VERIFY_STUDENT:
        return {"verified": False, "student": None, "message": message}
    if tool == ToolName.REGISTER_STUDENT:
        return {"success": False, "student": None, "message": message}
    if tool == ToolName.ADD_HOMEWORK:
        return {"success": False, "homework": None, "message": message}
    if tool == ToolName.VIEW_HOMEWORK:
        return {"success": False, "homework_list": [], "message": message}
    return {"success": False, "message": message}


def _execute(db, request) -> Dict[str, Any]:
    if request.tool == ToolName.VERIFY_STUDENT:
        return verify_student(
            db=db,
            telegram_user_id=request.telegram_user_id,
            telegram_username=request.telegram_username
        )

    elif request.tool == ToolName.REGISTER_STUDENT:
        return register_student(
            db=db,
            telegram_user_id=request.telegram_user_id,
            telegram_username=request.telegram_username,
            student_id=request.student_id,
            first_name=request.first_name,
            last_name=request.last_name
        )

    elif request.tool == ToolName.ADD_HOMEWORK:
        return add_homework(
            db=db,
            telegram_user_id=request.created_by_telegram_id,
            title=request.title,
            description=request.description,
            subject=request.subject,
            due_date=request.due_date,
            group_id=request.group_id
        )

    elif request.tool == ToolName.VIEW_HOMEWORK:
        return view_homework(
            db=db,
            telegram_user_id=request.telegram_user_id,
            group_id=request.group_id,
            limit=request.limit
        )

    elif request.tool == ToolName.DELETE_HOMEWORK:
        return delete_homework(
            db=db,
            telegram_user_id=request.telegram_user_id,
            homework_id=request.homework_id
        )

    raise ValueError(f"Unknown tool: {request.tool}")


def dispatch(request) -> Dict[str, Any]:
    """
    Execute a tool request in its own database session.

    Returns:
        The tool's result, or a failure result with a user-facing message
    """
    try:
        with get_db_context() as db:
            return _execute(db, request)

    except ClassroomError as e:
        logger.info("Tool %s refused: %s", request.tool, e.message)
        return _failure(request.tool, e.message)

    except ConfigurationError as e:
        logger.error("Tool %s misconfigured: %s", request.tool, e.message)
        return _failure(request.tool, CONFIGURATION_ERROR_MESSAGE)

    except SQLAlchemyError:
        logger.exception("Database error in tool %s", request.tool)
        return _failure(request.tool, DATABASE_ERROR_MESSAGE)

    except Exception:
        logger.exception("Unexpected error in tool %s", request.tool)
        return _failure(request.tool, UNEXPECTED_ERROR_MESSAGE)


def _make_tool(name: ToolName, description: str, args_schema) -> StructuredTool:
    def run(**kwargs) -> Dict[str, Any]:
        return dispatch(parse_tool_request({"tool": name.value, **kwargs}))

    return StructuredTool.from_function(
        func=run,
        name=name.value,
        description=description,
        args_schema=args_schema,
    )


def get_tool_catalogue() -> List[StructuredTool]:
    """The tools offered to the agent."""
    return [
        _make_tool(
            ToolName.VERIFY_STUDENT,
            "Verify if a Telegram user is registered as a student and get their information",
            VerifyStudentArgs,
        ),
        _make_tool(
            ToolName.REGISTER_STUDENT,
            "Register a new student in the system based on their student ID",
            RegisterStudentArgs,
        ),
        _make_tool(
            ToolName.ADD_HOMEWORK,
            "Add new homework assignment (only for monitors, admins, and owners)",
            AddHomeworkArgs,
        ),
        _make_tool(
            ToolName.VIEW_HOMEWORK,
            "View homework assignments for student's group or all groups (for admins)",
            ViewHomeworkArgs,
        ),
        _make_tool(
            ToolName.DELETE_HOMEWORK,
            "Delete homework assignment (only for monitors, admins, and owners)",
            DeleteHomeworkArgs,
        ),
    ]
