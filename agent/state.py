"""
State definitions for the Classroom Bot LangGraph graphs.
"""
from typing import TypedDict, Optional
from enum import Enum

from langgraph.graph import MessagesState


class ToolName(str, Enum):
    """The closed set of tools the agent can call."""
    VERIFY_STUDENT = "student_verification"
    REGISTER_STUDENT = "student_registration"
    ADD_HOMEWORK = "add_homework"
    VIEW_HOMEWORK = "view_homework"
    DELETE_HOMEWORK = "delete_homework"


class ConversationState(MessagesState):
    """
    State of the agent conversation graph, checkpointed per thread.

    Attributes:
        messages: Conversation history (appended by the add_messages reducer)
        steps: Model calls made in the current turn, reset on every new message
    """
    steps: int


class PipelineState(TypedDict, total=False):
    """
    State of the two-stage message pipeline.

    Attributes:
        message: Text of the inbound message
        thread_id: Conversation thread the agent memory is keyed by
        chat_id: Telegram chat to reply to
        username: Telegram username of the sender, if any
        telegram_user_id: Telegram ID of the sender
        response: Reply produced by the agent turn
        sent: Whether the reply was delivered
        error: Error description if a stage failed
    """
    # Input
    message: str
    thread_id: str
    chat_id: int
    username: Optional[str]
    telegram_user_id: int

    # Stage 1
    response: str

    # Stage 2
    sent: bool
    error: Optional[str]
