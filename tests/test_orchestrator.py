"""
Tests for primary/fallback orchestration in lifeos/ai/orchestrator.py
"""

import anthropic
import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock

from lifeos.ai.orchestrator import FallbackOrchestrator
from lifeos.ai.tools.registry import ToolRegistry
from lifeos.exceptions import ConfigurationError, ProviderFailedError


class StatusError(Exception):
    def __init__(self, code, message=""):
        super().__init__(message or f"{code}")
        self.code = code


def make_adapter(name, configured=True, reply=None, error=None):
    adapter = MagicMock()
    adapter.name = name
    adapter.configured = configured
    adapter.run_turn = AsyncMock(return_value=reply, side_effect=error)
    return adapter


@pytest.fixture
def registry():
    return ToolRegistry()


def _tool_names(call):
    return [t.name for t in call.args[2]]


@pytest.mark.asyncio
async def test_primary_success_uses_routed_tools(registry):
    gemini = make_adapter("Gemini", reply="from gemini")
    claude = make_adapter("Claude")
    orch = FallbackOrchestrator(gemini, claude, registry)

    assert await orch.chat("what's on my calendar?", "c1") == "from gemini"
    claude.run_turn.assert_not_called()
    names = _tool_names(gemini.run_turn.await_args)
    assert "calendar_list" in names
    assert len(names) < len(registry.definitions)
    assert orch.last_provider == "Gemini"


@pytest.mark.asyncio
async def test_no_primary_goes_straight_to_secondary_with_full_tools(registry):
    gemini = make_adapter("Gemini", configured=False)
    claude = make_adapter("Claude", reply="from claude")
    orch = FallbackOrchestrator(gemini, claude, registry)

    assert await orch.chat("hello", "c1") == "from claude"
    gemini.run_turn.assert_not_called()
    assert len(_tool_names(claude.run_turn.await_args)) == 30
    assert orch.last_provider == "Claude"


@pytest.mark.asyncio
async def test_rate_limited_primary_falls_back_once_with_full_tools(registry):
    gemini = make_adapter("Gemini", error=StatusError(429, "RESOURCE_EXHAUSTED"))
    claude = make_adapter("Claude", reply="fallback reply")
    orch = FallbackOrchestrator(gemini, claude, registry)

    assert await orch.chat("hello", "c1") == "fallback reply"
    claude.run_turn.assert_awaited_once()
    args = claude.run_turn.await_args.args
    assert args[0] == "hello"
    assert args[1] == "c1"
    assert len(args[2]) == 30
    assert orch.last_provider == "Claude"


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [
    StatusError(500, "INTERNAL"),
    StatusError(503, "UNAVAILABLE"),
    httpx.ConnectError("refused", request=httpx.Request("POST", "https://example.com")),
    RuntimeError("Deadline exceeded"),
    ValueError("something nobody anticipated"),
])
async def test_transient_failures_fall_back(registry, error):
    gemini = make_adapter("Gemini", error=error)
    claude = make_adapter("Claude", reply="ok")
    orch = FallbackOrchestrator(gemini, claude, registry)

    assert await orch.chat("hello") == "ok"
    claude.run_turn.assert_awaited_once()


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [
    StatusError(400, "INVALID_ARGUMENT"),
    StatusError(401, "UNAUTHENTICATED"),
    StatusError(403, "PERMISSION_DENIED"),
    ConfigurationError("GOOGLE_AI_API_KEY is not set"),
])
async def test_fatal_failures_reraise_without_fallback(registry, error):
    gemini = make_adapter("Gemini", error=error)
    claude = make_adapter("Claude", reply="should not be used")
    orch = FallbackOrchestrator(gemini, claude, registry)

    with pytest.raises(type(error)):
        await orch.chat("hello", "c1")
    claude.run_turn.assert_not_called()


@pytest.mark.asyncio
async def test_double_failure_names_both_causes(registry):
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    claude_error = anthropic.APIConnectionError(request=request)
    gemini = make_adapter("Gemini", error=StatusError(503, "model overloaded"))
    claude = make_adapter("Claude", error=claude_error)
    orch = FallbackOrchestrator(gemini, claude, registry)

    with pytest.raises(ProviderFailedError) as exc_info:
        await orch.chat("hello", "c1")

    message = str(exc_info.value)
    assert message.startswith("Gemini: model overloaded\n")
    assert "Claude fallback: Connection error." in message
    assert exc_info.value.secondary_error is claude_error


@pytest.mark.asyncio
async def test_secondary_failure_without_primary_propagates_unwrapped(registry):
    gemini = make_adapter("Gemini", configured=False)
    claude = make_adapter("Claude", error=RuntimeError("claude down"))
    orch = FallbackOrchestrator(gemini, claude, registry)

    with pytest.raises(RuntimeError, match="claude down"):
        await orch.chat("hello")


@pytest.mark.asyncio
async def test_custom_router_is_used(registry):
    router = MagicMock(return_value=registry.definitions[:1])
    gemini = make_adapter("Gemini", reply="ok")
    orch = FallbackOrchestrator(gemini, make_adapter("Claude"), registry, router=router)

    await orch.chat("anything", "c1")

    router.assert_called_once()
    assert router.call_args.args == ("anything",)
    assert len(gemini.run_turn.await_args.args[2]) == 1


@pytest.mark.asyncio
async def test_fallback_log_records_carry_turn_context(registry, caplog):
    gemini = make_adapter("Gemini", error=StatusError(429, "RESOURCE_EXHAUSTED"))
    claude = make_adapter("Claude", reply="ok")
    orch = FallbackOrchestrator(gemini, claude, registry)

    with caplog.at_level("INFO", logger="lifeos.ai.orchestrator"):
        await orch.chat("hello", "conv-42")

    routing = next(r for r in caplog.records if r.getMessage().startswith("Routing to"))
    assert routing.conversation_id == "conv-42"
    assert routing.provider == "Gemini"

    fallback = next(r for r in caplog.records if r.levelname == "WARNING")
    assert fallback.conversation_id == "conv-42"
    assert fallback.provider == "Gemini"
    assert fallback.failure_reason == "rate limited"
