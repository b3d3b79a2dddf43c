"""Generative model integration."""

from imob_control.ai.chat import ChatMessage, ChatSession
from imob_control.ai.client import GeminiClient
from imob_control.ai.gateway import AIGateway
from imob_control.ai.responses import AIResponse, ResponseStatus

__all__ = [
    "AIGateway",
    "AIResponse",
    "ChatMessage",
    "ChatSession",
    "GeminiClient",
    "ResponseStatus",
]
