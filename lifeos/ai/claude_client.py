"""
Anthropic Claude adapter for the agentic loop (the fallback provider).

Tool calls arrive as ``tool_use`` content blocks; results go back in a single
user message of ``tool_result`` blocks keyed by ``tool_use_id``.
"""

from __future__ import annotations

import logging
from typing import Sequence

import anthropic

from ..config import settings
from ..exceptions import ConfigurationError
from ..models import MemoryMessage
from .loop import AdapterResult, AgenticAdapter, FinalText, ToolCall, ToolCalls

logger = logging.getLogger(__name__)


class ClaudeAdapter(AgenticAdapter):
    name = "Claude"
    provider_target = "anthropic"

    def __init__(
        self,
        memory,
        execute_tool,
        *,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        client: anthropic.AsyncAnthropic | None = None,
        **kwargs,
    ) -> None:
        super().__init__(memory, execute_tool, **kwargs)
        self._api_key = api_key if api_key is not None else settings.anthropic_api_key
        self._model = model or settings.claude_model
        self._max_tokens = max_tokens or settings.anthropic_max_tokens
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self._api_key) or self._client is not None

    def _get_client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            if not self._api_key:
                raise ConfigurationError("ANTHROPIC_API_KEY is not set")
            self._client = anthropic.AsyncAnthropic(api_key=self._api_key)
        return self._client

    def build_contents(self, history: Sequence[MemoryMessage], message: str) -> list:
        return [
            *({"role": m.role, "content": m.content} for m in history),
            {"role": "user", "content": message},
        ]

    async def call_model(self, contents: list, tools: list[dict], system: str) -> AdapterResult:
        request: dict = {
            "model": self._model,
            "max_tokens": self._max_tokens,
            "system": system,
            "messages": contents,
        }
        if tools:
            request["tools"] = tools

        response = await self._get_client().messages.create(**request)

        text_parts: list[str] = []
        assistant_blocks: list[dict] = []
        calls: list[ToolCall] = []
        for block in response.content or []:
            if block.type == "text":
                text_parts.append(block.text)
                assistant_blocks.append({"type": "text", "text": block.text})
            elif block.type == "tool_use":
                args = block.input if isinstance(block.input, dict) else {}
                calls.append(ToolCall(id=block.id, name=block.name, args=args))
                assistant_blocks.append({
                    "type": "tool_use",
                    "id": block.id,
                    "name": block.name,
                    "input": args,
                })

        if not calls:
            return FinalText("".join(text_parts))
        logger.debug("Claude requested %d tool(s), stop_reason=%s", len(calls), response.stop_reason)
        return ToolCalls(calls=calls, raw=assistant_blocks)

    def append_tool_round(self, contents: list, result: ToolCalls, outputs: list[str]) -> None:
        contents.append({"role": "assistant", "content": result.raw})
        contents.append({
            "role": "user",
            "content": [
                {"type": "tool_result", "tool_use_id": call.id, "content": output}
                for call, output in zip(result.calls, outputs)
            ],
        })
