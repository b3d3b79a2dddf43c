"""Conversation state for the portfolio assistant."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from imob_control.ai.gateway import AIGateway
from imob_control.models import Property

GREETING = (
    "Olá! Sou o Corretor AI. Posso ajudar com informações sobre seus imóveis, "
    "calcular médias de preços ou sugerir estratégias de venda. Como posso ajudar hoje?"
)


@dataclass
class ChatMessage:
    role: str  # "user" or "model"
    text: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=datetime.now)


class ChatSession:
    """Keeps the message list and sends each turn with its history."""

    def __init__(self, gateway: AIGateway, greeting: str = GREETING) -> None:
        self.gateway = gateway
        self.messages: list[ChatMessage] = [ChatMessage(role="model", text=greeting)]

    def history(self) -> list[tuple[str, str]]:
        return [(m.role, m.text) for m in self.messages]

    def send(self, text: str, properties: Iterable[Property]) -> ChatMessage | None:
        """Send a user message and record the reply. Blank input is ignored."""
        if not text.strip():
            return None
        history = self.history()
        self.messages.append(ChatMessage(role="user", text=text))
        reply = self.gateway.chat(text, properties, history)
        message = ChatMessage(role="model", text=reply)
        self.messages.append(message)
        return message
