"""Agent module for the Classroom Bot."""
from .state import ConversationState, PipelineState, ToolName
from .toolkit import (
    ToolRequest,
    parse_tool_request,
    dispatch,
    get_tool_catalogue,
)
from .workflow import create_agent_graph, get_compiled_agent, run_agent_turn, close_agent
from .pipeline import (
    create_pipeline_graph,
    get_compiled_pipeline,
    run_pipeline,
    thread_id_for_chat,
)

__all__ = [
    "ConversationState",
    "PipelineState",
    "ToolName",
    "ToolRequest",
    "parse_tool_request",
    "dispatch",
    "get_tool_catalogue",
    "create_agent_graph",
    "get_compiled_agent",
    "run_agent_turn",
    "close_agent",
    "create_pipeline_graph",
    "get_compiled_pipeline",
    "run_pipeline",
    "thread_id_for_chat",
]
