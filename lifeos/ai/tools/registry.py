"""
Tool registry class and dispatch logic.

ToolRegistry is the single execution boundary between the agentic loop and
every integration: ``execute(name, args) -> str``. The returned string is a
JSON payload (or plain text for note bodies); failures always come back as
``{"error": "..."}`` and never raise, so the model can decide how to recover.

Vault and sub-agent executors ship with this package. The Google integrations
(calendar, Gmail, Tasks, Drive, Contacts) are bound by the deployment with
``register()``; unbound tools answer with a "not configured" error.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Awaitable, Callable, Sequence

import httpx
from pydantic import BaseModel

from ...exceptions import ToolArgumentError
from .schemas import TOOL_DEFS, ToolDefinition
from .validation import build_argument_model, validate_arguments

if TYPE_CHECKING:
    from ...vault.client import VaultClient

logger = logging.getLogger(__name__)

ToolHandler = Callable[[dict], Awaitable[object]]


def error_payload(message: str) -> str:
    return json.dumps({"error": message})


class ToolRegistry:
    """
    Holds the tool catalog, validates model-supplied arguments and dispatches
    tool calls to their executors.

    Dependencies are injected at construction time so executors have access
    to the correct instances (vault client, agent URLs, HTTP client).
    """

    def __init__(
        self,
        *,
        catalog: Sequence[ToolDefinition] = TOOL_DEFS,
        vault: VaultClient | None = None,
        briefing_url: str = "",
        research_url: str = "",
        agent_timeout: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._catalog = list(catalog)
        self._by_name = {t.name: t for t in self._catalog}
        self._arg_models: dict[str, type[BaseModel]] = {}
        self._external: dict[str, ToolHandler] = {}
        self._vault = vault
        self._briefing_url = briefing_url
        self._research_url = research_url
        self._agent_timeout = agent_timeout
        self._http = http_client

    @property
    def definitions(self) -> list[ToolDefinition]:
        """The full catalog, in registry order."""
        return list(self._catalog)

    def register(self, tool_name: str, handler: ToolHandler) -> None:
        """Bind an external executor (e.g. a Google integration) to a catalog tool."""
        if tool_name not in self._by_name:
            raise KeyError(f"Cannot register unknown tool: {tool_name}")
        self._external[tool_name] = handler

    def _arg_model(self, defn: ToolDefinition) -> type[BaseModel]:
        model = self._arg_models.get(defn.name)
        if model is None:
            model = self._arg_models[defn.name] = build_argument_model(defn)
        return model

    async def execute(self, tool_name: str, tool_input: dict | None) -> str:
        """
        Validate and execute the named tool.
        Returns a string result suitable for feeding back as a tool result.
        """
        defn = self._by_name.get(tool_name)
        if defn is None:
            logger.warning("Model requested unknown tool %s", tool_name)
            return error_payload(f"Unknown tool: {tool_name}")

        try:
            args = validate_arguments(self._arg_model(defn), tool_name, tool_input)
        except ToolArgumentError as exc:
            logger.warning("Rejected arguments for %s: %s", tool_name, exc.detail)
            return error_payload(str(exc))

        try:
            result = await self._dispatch(tool_name, args)
        except Exception as exc:
            logger.error("Tool %s failed: %s", tool_name, exc, exc_info=True)
            return error_payload(f"{tool_name} failed: {exc}")

        if isinstance(result, str):
            return result
        return json.dumps(result, default=str)

    async def _dispatch(self, tool_name: str, args: dict) -> object:
        handler = self._external.get(tool_name)
        if handler is not None:
            return await handler(args)

        match tool_name:
            # Vault
            case "read_note":
                from .vault import exec_read_note
                return await exec_read_note(self, args)
            case "write_note":
                from .vault import exec_write_note
                return await exec_write_note(self, args)
            case "search_vault":
                from .vault import exec_search_vault
                return await exec_search_vault(self, args)
            case "list_projects":
                from .vault import exec_list_projects
                return await exec_list_projects(self)
            case "create_project":
                from .vault import exec_create_project
                return await exec_create_project(self, args)
            case "list_files":
                from .vault import exec_list_files
                return await exec_list_files(self, args)
            case "daily_note":
                from .vault import exec_daily_note
                return await exec_daily_note(self, args)
            case "delete_note":
                from .vault import exec_delete_note
                return await exec_delete_note(self, args)
            case "move_note":
                from .vault import exec_move_note
                return await exec_move_note(self, args)

            # Agents
            case "trigger_briefing":
                from .agents import exec_trigger_briefing
                return await exec_trigger_briefing(self, args)
            case "research":
                from .agents import exec_research
                return await exec_research(self, args)

            case _:
                return error_payload(f"{tool_name} is not configured")
