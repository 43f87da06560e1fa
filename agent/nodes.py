"""
LangGraph nodes for the Classroom Bot agent graph.
"""
import logging
from typing import Any, Dict, List

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage, trim_messages

from config import settings
from .llm import get_chat_model
from .prompts import SYSTEM_PROMPT
from .state import ConversationState
from .toolkit import get_tool_catalogue

logger = logging.getLogger(__name__)


# ============== Agent graph ==============

def recent_history(messages: List[BaseMessage], limit: int) -> List[BaseMessage]:
    """
    Messages replayed to the model: the whole current turn plus at most
    ``limit`` earlier messages, starting on a human message.
    """
    last_human = 0
    for index, message in enumerate(messages):
        if isinstance(message, HumanMessage):
            last_human = index

    earlier = trim_messages(
        messages[:last_human],
        max_tokens=limit,
        token_counter=len,
        strategy="last",
        start_on="human",
    )
    return list(earlier) + list(messages[last_human:])


def call_model(state: ConversationState) -> Dict[str, Any]:
    """
    Node: ask the model for the next step.
    Once the step budget is spent the model is called without tools,
    which forces a final text reply.
    """
    steps = state.get("steps", 0)
    model = get_chat_model()
    if steps < settings.agent_max_steps - 1:
        model = model.bind_tools(get_tool_catalogue())

    history = recent_history(state["messages"], settings.agent_history_limit)
    logger.debug("Calling model: step=%d history=%d", steps, len(history))
    response = model.invoke([SystemMessage(content=SYSTEM_PROMPT)] + history)

    return {"messages": [response], "steps": steps + 1}


def message_text(message: BaseMessage) -> str:
    """Plain text of a message whose content may be a list of blocks."""
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


