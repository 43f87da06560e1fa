"""Chat transport module."""
from .telegram import send_message, build_send_payload

__all__ = ["send_message", "build_send_payload"]
