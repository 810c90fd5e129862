"""
Google Gemini adapter for the agentic loop (the primary provider).

Function calls arrive as ``function_call`` parts on the first candidate; the
model turn is replayed verbatim and the results follow as one user turn of
``function_response`` parts.
"""

from __future__ import annotations

import json
import logging
from typing import Sequence

from google import genai
from google.genai import types as genai_types

from ..config import settings
from ..exceptions import ConfigurationError
from ..models import MemoryMessage
from .loop import AdapterResult, AgenticAdapter, FinalText, ToolCall, ToolCalls

logger = logging.getLogger(__name__)


def _response_payload(output: str) -> dict:
    """Gemini wants a JSON object back; wrap anything else."""
    try:
        data = json.loads(output)
    except (json.JSONDecodeError, TypeError):
        return {"result": output}
    return data if isinstance(data, dict) else {"result": data}


class GeminiAdapter(AgenticAdapter):
    name = "Gemini"
    provider_target = "gemini"

    def __init__(
        self,
        memory,
        execute_tool,
        *,
        api_key: str | None = None,
        model: str | None = None,
        client: genai.Client | None = None,
        **kwargs,
    ) -> None:
        super().__init__(memory, execute_tool, **kwargs)
        self._api_key = api_key if api_key is not None else settings.google_ai_api_key
        self._model = model or settings.gemini_model
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self._api_key.strip()) or self._client is not None

    def _get_client(self) -> genai.Client:
        if self._client is None:
            if not self._api_key.strip():
                raise ConfigurationError("GOOGLE_AI_API_KEY is not set")
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    def build_contents(self, history: Sequence[MemoryMessage], message: str) -> list:
        contents = [
            genai_types.Content(
                role="user" if m.role == "user" else "model",
                parts=[genai_types.Part(text=m.content)],
            )
            for m in history
        ]
        contents.append(genai_types.Content(role="user", parts=[genai_types.Part(text=message)]))
        return contents

    async def call_model(self, contents: list, tools: list[dict], system: str) -> AdapterResult:
        config = genai_types.GenerateContentConfig(
            system_instruction=system,
            tools=[genai_types.Tool(function_declarations=tools)] if tools else None,
        )
        response = await self._get_client().aio.models.generate_content(
            model=self._model, contents=contents, config=config
        )

        candidates = response.candidates or []
        content = candidates[0].content if candidates else None
        parts = (content.parts if content is not None else None) or []
        if not parts:
            logger.warning("Gemini returned no content parts")
            return FinalText("")

        calls: list[ToolCall] = []
        text_parts: list[str] = []
        for part in parts:
            fc = getattr(part, "function_call", None)
            if fc:
                calls.append(ToolCall(
                    id=fc.id or f"{fc.name}-{len(calls)}",
                    name=fc.name,
                    args=dict(fc.args) if fc.args else {},
                ))
            elif getattr(part, "text", None):
                text_parts.append(part.text)

        if not calls:
            return FinalText("".join(text_parts))
        return ToolCalls(calls=calls, raw=content)

    def append_tool_round(self, contents: list, result: ToolCalls, outputs: list[str]) -> None:
        contents.append(result.raw)
        contents.append(genai_types.Content(
            role="user",
            parts=[
                genai_types.Part.from_function_response(
                    name=call.name, response=_response_payload(output)
                )
                for call, output in zip(result.calls, outputs)
            ],
        ))
