"""Client for the assistant's OpenAI-compatible chat completion service."""

import json
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Sequence

import httpx
import structlog

from assistant.prompts import (
    ANALYSIS_EMPTY_MESSAGE,
    ANALYSIS_FALLBACK_MESSAGE,
    ASSISTANT_SYSTEM_PROMPT,
    CHAT_FALLBACK_MESSAGE,
    WORKFLOW_GENERATION_SYSTEM_PROMPT,
    build_analysis_prompt,
    build_generation_prompt,
)
from core.config import Settings, get_settings
from core.workflow.errors import AssistantTransportFailure
from core.workflow.models import Workflow

logger = structlog.get_logger(__name__)

_ROLE_MAP = {"model": "assistant", "assistant": "assistant", "user": "user"}


@dataclass
class AssistantConfig:
    """Assistant service configuration."""
    api_key: Optional[str] = None
    base_url: str = "https://openrouter.ai/api/v1"
    model: str = "google/gemini-2.0-flash-001"
    temperature: float = 0.3
    timeout: float = 60.0
    site_name: str = "Lumina Workflows"

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "AssistantConfig":
        settings = settings or get_settings()
        return cls(
            api_key=settings.assistant_api_key,
            base_url=settings.assistant_base_url,
            model=settings.assistant_model,
            temperature=settings.assistant_temperature,
            timeout=settings.assistant_timeout,
            site_name=settings.app_name,
        )


class AssistantClient:
    """Conversational chat, graph generation and graph analysis.

    Transport problems never escape the public methods: chat yields one
    fallback message, generation returns ``None`` and analysis returns a
    fallback string.
    """

    def __init__(
        self,
        config: Optional[AssistantConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.config = config or AssistantConfig.from_settings()
        headers = {"X-Title": self.config.site_name}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"

        self.client = httpx.AsyncClient(
            base_url=self.config.base_url,
            headers=headers,
            timeout=self.config.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "AssistantClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the client connection."""
        await self.client.aclose()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def stream_chat(
        self,
        history: Sequence[Mapping[str, str]],
        message: str
    ) -> AsyncIterator[str]:
        """Stream the reply to ``message`` given prior turns.

        Args:
            history: Prior turns as ``{"role": "user"|"model", "text": ...}``.
            message: The new user text.

        Yields:
            Text fragments in arrival order.
        """
        messages = [{"role": "system", "content": ASSISTANT_SYSTEM_PROMPT}]
        for turn in history:
            messages.append({
                "role": _ROLE_MAP.get(turn.get("role", "user"), "user"),
                "content": turn.get("text", ""),
            })
        messages.append({"role": "user", "content": message})

        try:
            async for fragment in self._stream(messages):
                yield fragment
        except AssistantTransportFailure:
            yield CHAT_FALLBACK_MESSAGE

    async def generate_workflow(self, prompt: str) -> Optional[Dict[str, Any]]:
        """Ask for a workflow graph; ``None`` when nothing usable came back."""
        messages = [
            {"role": "system", "content": WORKFLOW_GENERATION_SYSTEM_PROMPT},
            {"role": "user", "content": build_generation_prompt(prompt)},
        ]
        try:
            text = await self._complete(messages, response_format={"type": "json_object"})
        except AssistantTransportFailure:
            return None

        data = extract_json(text)
        if not isinstance(data, dict):
            logger.warning("assistant_generation_unparseable", length=len(text))
            return None
        return data

    async def analyze_workflow(self, workflow: Workflow) -> str:
        """Free-text review of a workflow's nodes and connections."""
        messages = [{"role": "user", "content": build_analysis_prompt(workflow)}]
        try:
            text = await self._complete(messages)
        except AssistantTransportFailure:
            return ANALYSIS_FALLBACK_MESSAGE
        return text or ANALYSIS_EMPTY_MESSAGE

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _payload(self, messages: List[Dict[str, str]], **kwargs) -> Dict[str, Any]:
        return {
            "model": self.config.model,
            "messages": messages,
            "temperature": self.config.temperature,
            **kwargs,
        }

    async def _complete(self, messages: List[Dict[str, str]], **kwargs) -> str:
        try:
            response = await self.client.post(
                "/chat/completions",
                json=self._payload(messages, **kwargs),
            )
            response.raise_for_status()
            data = response.json()
            return data["choices"][0]["message"]["content"] or ""
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as e:
            logger.error(
                "assistant_completion_error",
                error=str(e),
                model=self.config.model,
            )
            raise AssistantTransportFailure(str(e)) from e

    async def _stream(self, messages: List[Dict[str, str]]) -> AsyncIterator[str]:
        try:
            async with self.client.stream(
                "POST",
                "/chat/completions",
                json=self._payload(messages, stream=True),
            ) as response:
                response.raise_for_status()

                async for line in response.aiter_lines():
                    if not line.startswith("data: "):
                        continue
                    data = line[6:]
                    if data == "[DONE]":
                        break

                    try:
                        chunk = json.loads(data)
                        content = chunk["choices"][0]["delta"].get("content", "")
                    except (ValueError, KeyError, IndexError, TypeError, AttributeError):
                        continue
                    if content:
                        yield content
        except httpx.HTTPError as e:
            logger.error(
                "assistant_stream_error",
                error=str(e),
                model=self.config.model,
            )
            raise AssistantTransportFailure(str(e)) from e


def extract_json(text: str) -> Optional[Any]:
    """Parse JSON from model output, tolerating markdown code fences."""
    if not text:
        return None

    if "```json" in text:
        text = text.split("```json")[1].split("```")[0]
    elif "```" in text:
        for block in text.split("```"):
            if "{" in block and "}" in block:
                text = block
                break

    try:
        return json.loads(text)
    except ValueError:
        pass

    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        try:
            return json.loads(text[start:end + 1])
        except ValueError:
            return None
    return None
