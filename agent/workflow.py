"""
LangGraph workflow for the Classroom Bot agent.

The agent loops between the model and the tool node until the model
answers without tool calls. Conversation memory is checkpointed per
thread in the store named by AGENT_MEMORY_URL, so each chat keeps its own
history across restarts and workers.
"""
from langchain_core.messages import HumanMessage
from langgraph.graph import StateGraph, END
from langgraph.prebuilt import ToolNode, tools_condition

from .memory import create_checkpointer, close_checkpointer
from .nodes import call_model, message_text
from .prompts import build_contextual_message, STEP_LIMIT_REPLY
from .state import ConversationState
from .toolkit import get_tool_catalogue


def create_agent_graph() -> StateGraph:
    """
    Create the LangGraph workflow for the agent.

    Workflow:
    1. agent - model decides on tool calls or a final reply
    2. tools - execute the requested tool calls, then back to agent

    Returns:
        Uncompiled StateGraph
    """
    workflow = StateGraph(ConversationState)

    workflow.add_node("agent", call_model)
    workflow.add_node("tools", ToolNode(get_tool_catalogue()))

    workflow.set_entry_point("agent")

    workflow.add_conditional_edges(
        "agent",
        tools_condition,
        {
            "tools": "tools",
            END: END
        }
    )
    workflow.add_edge("tools", "agent")

    return workflow


# Create and compile the graph once
_compiled_agent = None
_checkpointer = None


def get_compiled_agent():
    """Get or create the compiled agent graph with persistent thread checkpoints."""
    global _compiled_agent, _checkpointer
    if _compiled_agent is None:
        _checkpointer = create_checkpointer()
        _compiled_agent = create_agent_graph().compile(checkpointer=_checkpointer)
    return _compiled_agent


def close_agent():
    """Drop the compiled graph and close its checkpoint store."""
    global _compiled_agent, _checkpointer
    if _checkpointer is not None:
        close_checkpointer(_checkpointer)
    _compiled_agent = None
    _checkpointer = None


def run_agent_turn(
    message: str,
    thread_id: str,
    chat_id: int,
    telegram_user_id: int,
    username: str = None
) -> str:
    """
    Run one agent turn on a conversation thread.

    Args:
        message: The user's message
        thread_id: Conversation thread (unit of agent memory)
        chat_id: Telegram chat ID
        telegram_user_id: Telegram ID of the sender
        username: Telegram username of the sender

    Returns:
        The agent's reply text
    """
    graph = get_compiled_agent()

    contextual_message = build_contextual_message(
        message=message,
        telegram_user_id=telegram_user_id,
        chat_id=chat_id,
        username=username
    )

    final_state = graph.invoke(
        {"messages": [HumanMessage(content=contextual_message)], "steps": 0},
        config={"configurable": {"thread_id": thread_id}}
    )

    reply = message_text(final_state["messages"][-1]).strip()
    return reply or STEP_LIMIT_REPLY
