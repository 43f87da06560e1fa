"""
Chat model factory for the Classroom Bot agent.
"""
from langchain_openai import ChatOpenAI

from config import settings

# Singleton instance
_model_instance = None


def get_chat_model():
    """Get or create the chat model used by the agent."""
    global _model_instance
    if _model_instance is None:
        _model_instance = ChatOpenAI(
            model=settings.openai_model,
            temperature=0,
            api_key=settings.require("openai_api_key"),
            base_url=settings.openai_base_url,
        )
    return _model_instance
