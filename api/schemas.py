"""
Pydantic schemas for API requests and responses.
"""
from typing import Optional, List, Any, Dict
from pydantic import BaseModel, Field, ConfigDict


# Telegram update schemas (only the fields the bot reads)
class TelegramUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    username: Optional[str] = None
    first_name: Optional[str] = None


class TelegramChat(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int


class TelegramMessage(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    message_id: int
    chat: TelegramChat
    from_user: Optional[TelegramUser] = Field(None, alias="from")
    text: Optional[str] = None


class TelegramUpdate(BaseModel):
    """Incoming webhook update from the Telegram Bot API."""
    model_config = ConfigDict(extra="ignore")

    update_id: int
    message: Optional[TelegramMessage] = None


class WebhookResponse(BaseModel):
    """Acknowledgement returned to Telegram."""
    ok: bool = True
    handled: bool = Field(..., description="Whether the update was processed by the pipeline")
    sent: Optional[bool] = Field(None, description="Whether the reply was delivered")


# Agent schemas
class AgentRequest(BaseModel):
    """Request to the agent endpoint."""
    telegram_user_id: int = Field(..., description="Telegram ID of the sender")
    message: str = Field(..., description="User's message", min_length=1)
    chat_id: Optional[int] = Field(None, description="Chat ID (defaults to the Telegram ID)")
    username: Optional[str] = Field(None, description="Telegram username")


class AgentResponse(BaseModel):
    """Response from the agent."""
    response: str = Field(..., description="Agent's reply text")
    thread_id: str = Field(..., description="Conversation thread used")


# Group schemas
class GroupResponse(BaseModel):
    """Group information response."""
    id: int
    group_name: str
    description: Optional[str]
    student_count: int


# Tool result schemas
class ToolResult(BaseModel):
    """Structured result of a direct tool call."""
    model_config = ConfigDict(extra="allow")

    message: str
    success: Optional[bool] = None
    verified: Optional[bool] = None
    student: Optional[Dict[str, Any]] = None
    homework: Optional[Dict[str, Any]] = None
    homework_list: Optional[List[Dict[str, Any]]] = None


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str
