"""
Two-stage message pipeline: agent turn, then reply delivery.

One inbound message yields exactly one outbound reply (or none, when
delivery fails). Delivery never undoes what the agent turn stored.
"""
import logging
from typing import Any, Dict

from langgraph.graph import StateGraph, END
from sqlalchemy.exc import SQLAlchemyError

from config import ConfigurationError
from database import get_db_context
from messaging import send_message
from tools import record_session
from .prompts import FALLBACK_REPLY
from .state import PipelineState
from .workflow import run_agent_turn

logger = logging.getLogger(__name__)


def thread_id_for_chat(chat_id: int) -> str:
    """Conversation thread used for a Telegram chat."""
    return f"telegram-{chat_id}"


def _record_session(state: PipelineState) -> None:
    """Best-effort session bookkeeping; failures are logged only."""
    try:
        with get_db_context() as db:
            record_session(
                db,
                telegram_user_id=state["telegram_user_id"],
                thread_id=state["thread_id"],
                chat_id=state["chat_id"]
            )
    except (SQLAlchemyError, ConfigurationError):
        logger.warning(
            "Failed to record session for telegram_user_id=%s", state["telegram_user_id"], exc_info=True
        )


def use_agent(state: PipelineState) -> PipelineState:
    """
    Stage 1: run one agent turn for the inbound message.
    An agent failure still produces a reply, so the user always hears back.
    """
    logger.info(
        "Processing message from telegram_user_id=%s chat_id=%s length=%d",
        state["telegram_user_id"], state["chat_id"], len(state["message"])
    )

    try:
        state["response"] = run_agent_turn(
            message=state["message"],
            thread_id=state["thread_id"],
            chat_id=state["chat_id"],
            telegram_user_id=state["telegram_user_id"],
            username=state.get("username")
        )
    except Exception as e:
        logger.exception("Agent turn failed for thread %s", state["thread_id"])
        state["response"] = FALLBACK_REPLY
        state["error"] = f"Agent error: {e.__class__.__name__}"

    _record_session(state)
    return state


def send_reply(state: PipelineState) -> PipelineState:
    """Stage 2: deliver the reply to the chat."""
    result = send_message(chat_id=state["chat_id"], text=state["response"])

    state["sent"] = result["success"]
    if not result["success"]:
        state["error"] = result.get("error")
        logger.warning("Reply to chat_id=%s not delivered: %s", state["chat_id"], state["error"])

    return state


def create_pipeline_graph() -> StateGraph:
    """
    Create the message pipeline graph.

    Workflow:
    1. use_agent - agent turn, produces the reply text
    2. send_reply - deliver the reply through Telegram
    """
    workflow = StateGraph(PipelineState)

    workflow.add_node("use_agent", use_agent)
    workflow.add_node("send_reply", send_reply)

    workflow.set_entry_point("use_agent")
    workflow.add_edge("use_agent", "send_reply")
    workflow.add_edge("send_reply", END)

    return workflow


_compiled_pipeline = None


def get_compiled_pipeline():
    """Get or create the compiled pipeline graph."""
    global _compiled_pipeline
    if _compiled_pipeline is None:
        _compiled_pipeline = create_pipeline_graph().compile()
    return _compiled_pipeline


def run_pipeline(
    message: str,
    chat_id: int,
    telegram_user_id: int,
    username: str = None,
    thread_id: str = None
) -> Dict[str, Any]:
    """
    Handle one inbound message end to end.

    Returns:
        Dictionary with ``sent``, ``response`` and ``error``
    """
    initial_state: PipelineState = {
        "message": message,
        "thread_id": thread_id or thread_id_for_chat(chat_id),
        "chat_id": chat_id,
        "username": username,
        "telegram_user_id": telegram_user_id,
        "sent": False,
        "error": None,
    }

    final_state = get_compiled_pipeline().invoke(initial_state)

    return {
        "sent": final_state.get("sent", False),
        "response": final_state.get("response", ""),
        "error": final_state.get("error"),
    }
