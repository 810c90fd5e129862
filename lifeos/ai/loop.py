"""
Provider-agnostic agentic tool-use loop.

One call to ``AgenticAdapter.run_turn`` drives a full conversational turn:

  Start       history (from memory) + the new user message
  Model-call  contents + tool schema → FinalText | ToolCalls
  FinalText   remember (user, reply) and return the reply
  ToolCalls   execute every call, append the model's call turn and the
              results, count the round, call the model again
  Exhausted   after max_rounds tool rounds, remember and return the canned
              limit message (never raises)

Every terminal path writes memory exactly once. Tool failures become error
payloads fed back to the model; only model-call failures propagate, for the
orchestrator to classify.

Subclasses only build requests and parse responses.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Sequence, Union

from ..constants import (
    DEFAULT_CONVERSATION_ID,
    EMPTY_REPLY,
    LOOP_LIMIT_HISTORY_MESSAGE,
    LOOP_LIMIT_REPLY,
    MAX_TOOL_ROUNDS,
)
from ..memory.conversations import ConversationMemory
from ..models import MemoryMessage
from .prompts import get_system_prompt
from .tools.schemas import ToolDefinition
from .tools.translate import to_provider_schema

logger = logging.getLogger(__name__)

ToolExecutor = Callable[[str, dict], Awaitable[str]]


# --------------------------------------------------------------------------- #
# Per-round model result (tagged union)                                       #
# --------------------------------------------------------------------------- #

@dataclass(frozen=True)
class ToolCall:
    id: str
    name: str
    args: dict = field(default_factory=dict)


@dataclass(frozen=True)
class FinalText:
    """The model answered without requesting tools."""
    text: str


@dataclass(frozen=True)
class ToolCalls:
    """
    The model requested one or more tools.
    ``raw`` is the provider-native assistant turn to replay in the next request.
    """
    calls: list[ToolCall]
    raw: Any = None


AdapterResult = Union[FinalText, ToolCalls]


@dataclass
class AgenticTurn:
    """State of one in-progress turn; discarded when the turn ends."""
    contents: list
    max_rounds: int
    rounds: int = 0

    @property
    def exhausted(self) -> bool:
        return self.rounds >= self.max_rounds


class AgenticAdapter(ABC):
    """Runs the agentic loop against one language-model backend."""

    name: str = "provider"
    provider_target: str = ""

    def __init__(
        self,
        memory: ConversationMemory,
        execute_tool: ToolExecutor,
        *,
        max_rounds: int = MAX_TOOL_ROUNDS,
        system_prompt: Callable[[], str] = get_system_prompt,
    ) -> None:
        self._memory = memory
        self._execute_tool = execute_tool
        self._max_rounds = max_rounds
        self._system_prompt = system_prompt

    # ── Provider hooks ──────────────────────────────────────────────────────────

    @property
    @abstractmethod
    def configured(self) -> bool:
        """True when the backend credential is present."""

    @abstractmethod
    def build_contents(self, history: Sequence[MemoryMessage], message: str) -> list:
        """Provider-native request contents: history followed by the user message."""

    @abstractmethod
    async def call_model(self, contents: list, tools: list[dict], system: str) -> AdapterResult:
        """One model request. Connectivity/authorization errors propagate."""

    @abstractmethod
    def append_tool_round(self, contents: list, result: ToolCalls, outputs: list[str]) -> None:
        """Append the model's tool-call turn and the matching tool results."""

    # ── Loop ────────────────────────────────────────────────────────────────────

    async def run_turn(
        self,
        message: str,
        conversation_id: str | None,
        tools: Sequence[ToolDefinition],
    ) -> str:
        cid = conversation_id or DEFAULT_CONVERSATION_ID
        history = self._memory.get(cid)
        schema = to_provider_schema(tools, self.provider_target)
        system = self._system_prompt()
        turn = AgenticTurn(contents=self.build_contents(history, message), max_rounds=self._max_rounds)

        while not turn.exhausted:
            logger.debug(
                "%s round %d/%d, contents=%d",
                self.name, turn.rounds + 1, turn.max_rounds, len(turn.contents),
            )
            result = await self.call_model(turn.contents, schema, system)

            if isinstance(result, FinalText):
                reply = result.text or EMPTY_REPLY
                self._remember(cid, history, message, reply)
                return reply

            outputs = [await self._run_tool(call) for call in result.calls]
            self.append_tool_round(turn.contents, result, outputs)
            turn.rounds += 1

        logger.warning(
            "%s hit max tool rounds (%d) for conversation %s",
            self.name, turn.max_rounds, cid,
        )
        self._remember(cid, history, message, LOOP_LIMIT_HISTORY_MESSAGE)
        return LOOP_LIMIT_REPLY

    async def _run_tool(self, call: ToolCall) -> str:
        logger.info("%s executing tool %s (id=%s)", self.name, call.name, call.id)
        try:
            return await self._execute_tool(call.name, call.args)
        except Exception as exc:
            logger.error("Tool %s (id=%s) raised: %s", call.name, call.id, exc, exc_info=True)
            return json.dumps({"error": f"{call.name} failed: {exc}"})

    def _remember(self, cid: str, history: list[MemoryMessage], message: str, reply: str) -> None:
        self._memory.save(cid, [
            *history,
            MemoryMessage(role="user", content=message),
            MemoryMessage(role="assistant", content=reply),
        ])
