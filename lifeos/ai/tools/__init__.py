"""
Tool catalog and execution boundary shared by every provider.

The package is organised into domain-specific modules:
- schemas.py: canonical tool definitions (provider-neutral)
- translate.py: Anthropic / Gemini schema translation
- router.py: keyword routing of an utterance to tool groups
- validation.py: argument models derived from parameter schemas
- registry.py: ToolRegistry class and dispatch logic
- vault.py: Obsidian vault executors
- agents.py: sub-agent (briefing, research) executors

Re-exports:
    ToolRegistry: Main class for dispatching tool calls
    TOOL_DEFS: The canonical catalog
    route_tools: Narrow the catalog for one utterance
"""

from .registry import ToolRegistry
from .router import route_tools
from .schemas import TOOL_DEFS

__all__ = ["ToolRegistry", "TOOL_DEFS", "route_tools"]
