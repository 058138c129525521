"""AI assistant: chat, workflow generation and workflow analysis."""

from assistant.client import AssistantClient, AssistantConfig
from assistant.session import AssistantSession, ChatMessage

__all__ = ["AssistantClient", "AssistantConfig", "AssistantSession", "ChatMessage"]
