"""Tests for lifeos/ai/gemini_client.py with a mocked google-genai client."""

from types import SimpleNamespace

import pytest
from google.genai import types as genai_types
from unittest.mock import AsyncMock, MagicMock

from lifeos.ai.gemini_client import GeminiAdapter, _response_payload
from lifeos.ai.tools.schemas import TOOL_DEFS_BY_NAME
from lifeos.exceptions import ConfigurationError
from lifeos.memory.conversations import ConversationMemory
from lifeos.models import MemoryMessage


def model_turn(*parts):
    content = genai_types.Content(role="model", parts=list(parts))
    return SimpleNamespace(candidates=[SimpleNamespace(content=content)])


def text_part(text):
    return genai_types.Part(text=text)


def call_part(name, args, id=None):
    return genai_types.Part(function_call=genai_types.FunctionCall(name=name, args=args, id=id))


def make_adapter(responses, execute=None, memory=None):
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(side_effect=list(responses))
    adapter = GeminiAdapter(
        memory or ConversationMemory(None),
        execute or AsyncMock(return_value='{"ok": true}'),
        api_key="test",
        model="gemini-test",
        client=client,
        system_prompt=lambda: "sys",
    )
    return adapter, client.aio.models.generate_content


TOOLS = [TOOL_DEFS_BY_NAME["read_note"], TOOL_DEFS_BY_NAME["list_projects"]]


@pytest.mark.asyncio
async def test_text_reply_and_request_shape():
    adapter, generate = make_adapter([model_turn(text_part("Hello"), text_part(" there"))])
    assert await adapter.run_turn("hi", "c1", TOOLS) == "Hello there"

    kwargs = generate.await_args.kwargs
    assert kwargs["model"] == "gemini-test"
    config = kwargs["config"]
    assert config.system_instruction == "sys"
    declarations = config.tools[0].function_declarations
    assert [d.name for d in declarations] == ["read_note", "list_projects"]
    assert declarations[1].parameters is None
    assert kwargs["contents"][-1].parts[0].text == "hi"


@pytest.mark.asyncio
async def test_history_maps_assistant_to_model_role():
    memory = ConversationMemory(None)
    memory.save("c1", [
        MemoryMessage(role="user", content="a"),
        MemoryMessage(role="assistant", content="b"),
    ])
    adapter, generate = make_adapter([model_turn(text_part("ok"))], memory=memory)
    await adapter.run_turn("c", "c1", TOOLS)

    contents = generate.await_args.kwargs["contents"]
    assert [c.role for c in contents] == ["user", "model", "user"]


@pytest.mark.asyncio
async def test_function_call_round_trip():
    execute = AsyncMock(return_value='{"projects": [], "count": 0}')
    first = model_turn(call_part("list_projects", {}, id="call-1"))
    adapter, generate = make_adapter([first, model_turn(text_part("No projects yet."))], execute=execute)

    reply = await adapter.run_turn("list my projects", "c1", TOOLS)

    assert reply == "No projects yet."
    execute.assert_awaited_once_with("list_projects", {})

    contents = generate.await_args_list[1].kwargs["contents"]
    assert contents[-2] is first.candidates[0].content
    response_part = contents[-1].parts[0]
    assert contents[-1].role == "user"
    assert response_part.function_response.name == "list_projects"
    assert response_part.function_response.response == {"projects": [], "count": 0}


@pytest.mark.asyncio
async def test_function_call_without_id_gets_synthetic_id():
    execute = AsyncMock(return_value="plain text")
    adapter, _ = make_adapter(
        [model_turn(call_part("read_note", {"path": "a.md"})), model_turn(text_part("ok"))],
        execute=execute,
    )
    seen = []
    original = adapter.append_tool_round

    def spy(contents, result, outputs):
        seen.extend(result.calls)
        original(contents, result, outputs)

    adapter.append_tool_round = spy
    await adapter.run_turn("read a", "c1", TOOLS)

    assert seen[0].id == "read_note-0"
    assert seen[0].args == {"path": "a.md"}


@pytest.mark.asyncio
async def test_no_candidates_gives_placeholder():
    adapter, _ = make_adapter([SimpleNamespace(candidates=[])])
    assert await adapter.run_turn("hi", "c1", TOOLS) == "No response generated."


@pytest.mark.asyncio
async def test_missing_key_raises_configuration_error():
    adapter = GeminiAdapter(ConversationMemory(None), AsyncMock(), api_key="")
    assert adapter.configured is False
    with pytest.raises(ConfigurationError):
        await adapter.run_turn("hi", "c1", TOOLS)


def test_response_payload_wraps_non_objects():
    assert _response_payload('{"a": 1}') == {"a": 1}
    assert _response_payload("# note") == {"result": "# note"}
    assert _response_payload("[1, 2]") == {"result": [1, 2]}
