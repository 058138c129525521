"""Assistant chat session.

Holds the conversation shown in the assistant view. A user message that
asks to create a workflow is routed to graph generation and ingestion;
anything else is answered by a streamed chat reply that accumulates into
a single model message.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

import structlog

from assistant.client import AssistantClient
from assistant.prompts import (
    GENERATION_FAILED_MESSAGE,
    GENERATION_PENDING_MESSAGE,
    GENERATION_SUCCESS_MESSAGE,
    WELCOME_MESSAGE,
)
from core.workflow.errors import IngestionError
from core.workflow.ingestion import ingest
from core.workflow.models import Workflow

logger = structlog.get_logger(__name__)

USER = "user"
MODEL = "model"


@dataclass(frozen=True)
class ChatMessage:
    """One message of the conversation."""
    role: str
    content: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    is_streaming: bool = False


def is_generation_request(text: str) -> bool:
    """Heuristic intent check for "create a workflow/automation" requests."""
    lowered = text.lower()
    return "create" in lowered and ("workflow" in lowered or "automation" in lowered)


class AssistantSession:
    """Conversation state for the assistant view.

    Only one request is in flight at a time; ``send`` returns ``None``
    while busy. Results that arrive for a message no longer in the
    conversation (after ``reset``) are dropped.
    """

    def __init__(
        self,
        client: AssistantClient,
        on_workflow_generated: Optional[Callable[[Workflow], None]] = None
    ):
        self.client = client
        self.on_workflow_generated = on_workflow_generated
        self._messages: Tuple[ChatMessage, ...] = (self._welcome(),)
        self._busy = False
        self._generating = False

    @staticmethod
    def _welcome() -> ChatMessage:
        return ChatMessage(role=MODEL, content=WELCOME_MESSAGE, id="welcome")

    @property
    def messages(self) -> Tuple[ChatMessage, ...]:
        return self._messages

    @property
    def is_busy(self) -> bool:
        return self._busy

    @property
    def is_generating_workflow(self) -> bool:
        return self._generating

    def reset(self) -> None:
        """Start over; results of pending calls will be discarded."""
        self._messages = (self._welcome(),)

    def history(self) -> List[Dict[str, str]]:
        return [{"role": msg.role, "text": msg.content} for msg in self._messages]

    async def send(self, text: str) -> Optional[ChatMessage]:
        """Handle one user message.

        Returns:
            The final model message, or ``None`` if the text was blank, the
            session was busy, or the reply was discarded.
        """
        if not text.strip() or self._busy:
            return None

        history = self.history()
        self._append(ChatMessage(role=USER, content=text))
        self._busy = True
        try:
            if is_generation_request(text):
                return await self._generate(text)
            return await self._chat(history, text)
        finally:
            self._busy = False

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _generate(self, text: str) -> Optional[ChatMessage]:
        self._generating = True
        placeholder = ChatMessage(
            role=MODEL,
            content=GENERATION_PENDING_MESSAGE,
            is_streaming=True,
        )
        self._append(placeholder)

        try:
            raw = await self.client.generate_workflow(text)
            try:
                result = ingest(raw)
            except IngestionError as e:
                logger.warning("workflow_generation_failed", error=str(e))
                return self._update(placeholder.id, content=GENERATION_FAILED_MESSAGE, is_streaming=False)

            if not self._contains(placeholder.id):
                logger.info("generated_workflow_discarded", workflow_id=result.workflow.id)
                return None

            if self.on_workflow_generated is not None:
                self.on_workflow_generated(result.workflow)

            content = GENERATION_SUCCESS_MESSAGE.format(
                name=result.workflow.name,
                node_count=len(result.workflow.nodes),
            )
            for warning in result.warnings:
                content += f" Note: {warning.message}."
            return self._update(placeholder.id, content=content, is_streaming=False)
        finally:
            self._generating = False

    async def _chat(self, history: List[Dict[str, str]], text: str) -> Optional[ChatMessage]:
        reply = ChatMessage(role=MODEL, content="", is_streaming=True)
        self._append(reply)

        async for fragment in self.client.stream_chat(history, text):
            current = self._find(reply.id)
            if current is None:
                continue
            self._update(reply.id, content=current.content + fragment)

        return self._update(reply.id, is_streaming=False)

    def _append(self, message: ChatMessage) -> None:
        self._messages = self._messages + (message,)

    def _find(self, message_id: str) -> Optional[ChatMessage]:
        return next((m for m in self._messages if m.id == message_id), None)

    def _contains(self, message_id: str) -> bool:
        return self._find(message_id) is not None

    def _update(self, message_id: str, **changes) -> Optional[ChatMessage]:
        """Replace a message by id; ``None`` if it is gone."""
        updated: Optional[ChatMessage] = None
        messages = []
        for message in self._messages:
            if message.id == message_id:
                message = updated = replace(message, **changes)
            messages.append(message)
        self._messages = tuple(messages)
        return updated
