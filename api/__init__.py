"""API module for the Classroom Bot."""
from .routes import telegram_router, agent_router, tools_router, groups_router
from .schemas import (
    TelegramUpdate,
    WebhookResponse,
    AgentRequest,
    AgentResponse,
    GroupResponse,
    ToolResult,
    ErrorResponse,
)

__all__ = [
    "telegram_router",
    "agent_router",
    "tools_router",
    "groups_router",
    "TelegramUpdate",
    "WebhookResponse",
    "AgentRequest",
    "AgentResponse",
    "GroupResponse",
    "ToolResult",
    "ErrorResponse",
]
