"""Sub-agent tool executors (daily briefing, research)."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from .registry import ToolRegistry

logger = logging.getLogger(__name__)


async def call_agent(
    registry: ToolRegistry,
    base_url: str,
    path: str,
    body: dict | None = None,
    params: dict | None = None,
) -> str:
    """POST to an agent endpoint; returns pretty JSON or an error payload."""
    url = f"{base_url.rstrip('/')}{path}"
    try:
        if registry._http is not None:
            response = await registry._http.post(url, json=body, params=params)
        else:
            async with httpx.AsyncClient(timeout=registry._agent_timeout) as client:
                response = await client.post(url, json=body, params=params)
    except httpx.HTTPError as e:
        logger.warning("Agent call to %s failed: %s", url, e)
        return json.dumps({"error": f"Agent call failed: {e}"})

    if response.status_code >= 400:
        return json.dumps({"error": f"Agent returned {response.status_code}: {response.text}"})
    try:
        return json.dumps(response.json(), indent=2)
    except ValueError:
        return json.dumps({"result": response.text})


async def exec_trigger_briefing(registry: ToolRegistry, inp: dict) -> str:
    if not registry._briefing_url:
        return json.dumps({"error": "AGENT_BRIEFING_URL not configured"})
    date = inp.get("date")
    return await call_agent(
        registry, registry._briefing_url, "/briefing",
        params={"date": date} if date else None,
    )


async def exec_research(registry: ToolRegistry, inp: dict) -> str:
    if not registry._research_url:
        return json.dumps({"error": "AGENT_RESEARCH_URL not configured"})
    return await call_agent(
        registry, registry._research_url, "/research",
        body={"query": inp["query"], "type": "technology", "depth": "quick"},
    )
