"""Tests for lifeos/ai/claude_client.py with a mocked Anthropic client."""

from types import SimpleNamespace

import pytest
from unittest.mock import AsyncMock, MagicMock

from lifeos.ai.claude_client import ClaudeAdapter
from lifeos.ai.tools.schemas import TOOL_DEFS_BY_NAME
from lifeos.exceptions import ConfigurationError
from lifeos.memory.conversations import ConversationMemory
from lifeos.models import MemoryMessage


def text_block(text):
    return SimpleNamespace(type="text", text=text)


def tool_block(id, name, input):
    return SimpleNamespace(type="tool_use", id=id, name=name, input=input)


def response(*blocks, stop_reason="end_turn"):
    return SimpleNamespace(content=list(blocks), stop_reason=stop_reason)


def make_adapter(responses, execute=None, memory=None):
    client = MagicMock()
    client.messages.create = AsyncMock(side_effect=list(responses))
    adapter = ClaudeAdapter(
        memory or ConversationMemory(None),
        execute or AsyncMock(return_value='{"ok": true}'),
        api_key="test",
        model="claude-test",
        max_tokens=512,
        client=client,
        system_prompt=lambda: "sys",
    )
    return adapter, client


TOOLS = [TOOL_DEFS_BY_NAME["read_note"]]


@pytest.mark.asyncio
async def test_text_reply():
    adapter, client = make_adapter([response(text_block("Hi "), text_block("there"))])
    assert await adapter.run_turn("hello", "c1", TOOLS) == "Hi there"

    kwargs = client.messages.create.await_args.kwargs
    assert kwargs["model"] == "claude-test"
    assert kwargs["max_tokens"] == 512
    assert kwargs["system"] == "sys"
    assert kwargs["tools"][0]["name"] == "read_note"
    assert kwargs["messages"] == [{"role": "user", "content": "hello"}]


@pytest.mark.asyncio
async def test_no_tools_key_when_tool_list_empty():
    adapter, client = make_adapter([response(text_block("ok"))])
    await adapter.run_turn("hello", "c1", [])
    assert "tools" not in client.messages.create.await_args.kwargs


@pytest.mark.asyncio
async def test_history_is_replayed():
    memory = ConversationMemory(None)
    memory.save("c1", [
        MemoryMessage(role="user", content="a"),
        MemoryMessage(role="assistant", content="b"),
    ])
    adapter, client = make_adapter([response(text_block("ok"))], memory=memory)
    await adapter.run_turn("c", "c1", TOOLS)

    assert client.messages.create.await_args.kwargs["messages"] == [
        {"role": "user", "content": "a"},
        {"role": "assistant", "content": "b"},
        {"role": "user", "content": "c"},
    ]


@pytest.mark.asyncio
async def test_tool_use_round_trip():
    execute = AsyncMock(return_value="# note body")
    adapter, client = make_adapter(
        [
            response(
                text_block("Let me check."),
                tool_block("toolu_1", "read_note", {"path": "a.md"}),
                stop_reason="tool_use",
            ),
            response(text_block("It says hello.")),
        ],
        execute=execute,
    )

    reply = await adapter.run_turn("what does a.md say?", "c1", TOOLS)

    assert reply == "It says hello."
    execute.assert_awaited_once_with("read_note", {"path": "a.md"})

    messages = client.messages.create.await_args_list[1].kwargs["messages"]
    assert messages[1] == {
        "role": "assistant",
        "content": [
            {"type": "text", "text": "Let me check."},
            {"type": "tool_use", "id": "toolu_1", "name": "read_note", "input": {"path": "a.md"}},
        ],
    }
    assert messages[2] == {
        "role": "user",
        "content": [{"type": "tool_result", "tool_use_id": "toolu_1", "content": "# note body"}],
    }


@pytest.mark.asyncio
async def test_empty_content_gives_placeholder():
    adapter, _ = make_adapter([response()])
    assert await adapter.run_turn("hello", "c1", TOOLS) == "No response generated."


@pytest.mark.asyncio
async def test_api_error_propagates():
    adapter, _ = make_adapter([RuntimeError("overloaded")])
    with pytest.raises(RuntimeError, match="overloaded"):
        await adapter.run_turn("hello", "c1", TOOLS)


@pytest.mark.asyncio
async def test_missing_key_raises_configuration_error():
    adapter = ClaudeAdapter(ConversationMemory(None), AsyncMock(), api_key="")
    assert adapter.configured is False
    with pytest.raises(ConfigurationError):
        await adapter.run_turn("hello", "c1", TOOLS)
