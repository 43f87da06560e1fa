"""
API routes for the Classroom Bot.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from config import settings
from database import get_db, Group, Student
from agent import dispatch, run_agent_turn, run_pipeline, thread_id_for_chat
from agent.toolkit import (
    VerifyStudentRequest,
    RegisterStudentRequest,
    AddHomeworkRequest,
    ViewHomeworkRequest,
    DeleteHomeworkRequest,
)
from .schemas import (
    TelegramUpdate,
    WebhookResponse,
    AgentRequest,
    AgentResponse,
    GroupResponse,
    ToolResult,
)

logger = logging.getLogger(__name__)

# Router for the Telegram webhook
telegram_router = APIRouter(prefix="/telegram", tags=["Telegram"])

# Router for agent endpoints
agent_router = APIRouter(prefix="/agent", tags=["Agent"])

# Router for direct tool access
tools_router = APIRouter(prefix="/tools", tags=["Tools"])

# Router for group endpoints
groups_router = APIRouter(prefix="/groups", tags=["Groups"])


# ============== Telegram Webhook ==============

@telegram_router.post("/webhook", response_model=WebhookResponse)
def telegram_webhook(
    update: TelegramUpdate,
    x_telegram_bot_api_secret_token: Optional[str] = Header(None)
):
    """
    Receive a Telegram update and answer it through the message pipeline.

    Only text messages with a known sender are processed; every other
    update is acknowledged so Telegram does not redeliver it.
    """
    if settings.telegram_webhook_secret and x_telegram_bot_api_secret_token != settings.telegram_webhook_secret:
        raise HTTPException(status_code=403, detail="Invalid webhook secret")

    message = update.message
    if message is None or not message.text or message.from_user is None:
        logger.info("Ignoring update %s without a text message", update.update_id)
        return WebhookResponse(handled=False)

    result = run_pipeline(
        message=message.text,
        chat_id=message.chat.id,
        telegram_user_id=message.from_user.id,
        username=message.from_user.username
    )
    return WebhookResponse(handled=True, sent=result["sent"])


# ============== Agent Endpoints ==============

@agent_router.post("/chat", response_model=AgentResponse)
def agent_chat(request: AgentRequest):
    """
    Run one agent turn and return the reply without sending it to Telegram.
    """
    thread_id = thread_id_for_chat(request.chat_id or request.telegram_user_id)
    response = run_agent_turn(
        message=request.message,
        thread_id=thread_id,
        chat_id=request.chat_id or request.telegram_user_id,
        telegram_user_id=request.telegram_user_id,
        username=request.username
    )
    return AgentResponse(response=response, thread_id=thread_id)


# ============== Tool Endpoints ==============

@tools_router.post("/verify", response_model=ToolResult, response_model_exclude_none=True)
def verify_direct(request: VerifyStudentRequest):
    """Verify a Telegram user (direct tool access)."""
    return dispatch(request)


@tools_router.post("/register", response_model=ToolResult, response_model_exclude_none=True)
def register_direct(request: RegisterStudentRequest):
    """Register a student by roster student ID (direct tool access)."""
    return dispatch(request)


@tools_router.post("/homework/add", response_model=ToolResult, response_model_exclude_none=True)
def add_homework_direct(request: AddHomeworkRequest):
    """Add homework (monitors, admins and owners)."""
    return dispatch(request)


@tools_router.post("/homework/view", response_model=ToolResult, response_model_exclude_none=True)
def view_homework_direct(request: ViewHomeworkRequest):
    """View homework of the caller's group (any group for admins and owners)."""
    return dispatch(request)


@tools_router.post("/homework/delete", response_model=ToolResult, response_model_exclude_none=True)
def delete_homework_direct(request: DeleteHomeworkRequest):
    """Delete homework (monitors, admins and owners)."""
    return dispatch(request)


# ============== Group Endpoints ==============

@groups_router.get("/", response_model=list[GroupResponse])
def list_groups(db: Session = Depends(get_db)):
    """List groups with their number of registered students."""
    rows = (
        db.query(Group, func.count(Student.id))
        .outerjoin(Student, Student.group_id == Group.id)
        .group_by(Group.id)
        .order_by(Group.id)
        .all()
    )
    return [
        GroupResponse(
            id=group.id,
            group_name=group.group_name,
            description=group.description,
            student_count=count
        )
        for group, count in rows
    ]
