"""Vault tool executors."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .registry import ToolRegistry

logger = logging.getLogger(__name__)

_NOT_CONFIGURED = json.dumps({"error": "Vault not configured. Set GITHUB_PAT, GITHUB_REPO_OWNER and GITHUB_REPO_NAME."})


def _configured(registry: ToolRegistry) -> bool:
    return registry._vault is not None and registry._vault.configured


async def exec_read_note(registry: ToolRegistry, inp: dict) -> str:
    if not _configured(registry):
        return _NOT_CONFIGURED
    path = inp["path"]
    file = await registry._vault.read_file(path)
    if file is None:
        return json.dumps({"error": f"File not found: {path}"})
    return file.content


async def exec_write_note(registry: ToolRegistry, inp: dict) -> str:
    if not _configured(registry):
        return _NOT_CONFIGURED
    path = inp["path"]
    sha = await registry._vault.write_file(
        path, inp["content"], inp.get("message") or "lifeos: update note"
    )
    return json.dumps({"success": True, "path": path, "sha": sha[:7]})


async def exec_search_vault(registry: ToolRegistry, inp: dict) -> str:
    if not _configured(registry):
        return _NOT_CONFIGURED
    results = await registry._vault.search(inp["query"])
    return json.dumps({"results": results, "count": len(results)})


async def exec_list_projects(registry: ToolRegistry) -> str:
    if not _configured(registry):
        return _NOT_CONFIGURED
    projects = await registry._vault.list_projects()
    return json.dumps({
        "projects": [p.model_dump() for p in projects],
        "count": len(projects),
    })


async def exec_create_project(registry: ToolRegistry, inp: dict) -> str:
    if not _configured(registry):
        return _NOT_CONFIGURED
    project = await registry._vault.create_project(
        inp["slug"], inp["title"], inp.get("category")
    )
    return json.dumps({"success": True, "project": project.model_dump()})


async def exec_list_files(registry: ToolRegistry, inp: dict) -> str:
    if not _configured(registry):
        return _NOT_CONFIGURED
    path = inp.get("path") or "Files"
    entries = await registry._vault.list_directory(path)
    return json.dumps({
        "path": path,
        "entries": [e.model_dump() for e in entries],
        "count": len(entries),
    })


def insert_under_section(content: str, text: str, section: str | None) -> str:
    """
    Insert ``text`` at the end of ``## section`` (before the next ``## ``
    heading). Without a section, or if the heading is missing, append at the end.
    """
    if section:
        header = f"## {section}"
        start = content.find(header)
        if start != -1:
            next_heading = content.find("\n## ", start + len(header))
            insert_at = next_heading if next_heading != -1 else len(content)
            return content[:insert_at] + "\n" + text + "\n" + content[insert_at:]
    return content + "\n" + text + "\n"


async def exec_daily_note(registry: ToolRegistry, inp: dict) -> str:
    if not _configured(registry):
        return _NOT_CONFIGURED
    note = await registry._vault.get_daily_note(inp.get("date"))
    append = inp.get("append")
    if not append:
        return note.content

    updated = insert_under_section(note.content, append, inp.get("section"))
    day = note.path.removeprefix("Daily/").removesuffix(".md")
    await registry._vault.write_file(note.path, updated, f"lifeos: update daily note {day}")
    return json.dumps({"success": True, "path": note.path})


async def exec_delete_note(registry: ToolRegistry, inp: dict) -> str:
    if not _configured(registry):
        return _NOT_CONFIGURED
    await registry._vault.delete_file(inp["path"])
    return json.dumps({"success": True, "deleted": inp["path"]})


async def exec_move_note(registry: ToolRegistry, inp: dict) -> str:
    if not _configured(registry):
        return _NOT_CONFIGURED
    src, dst = inp["from"], inp["to"]
    file = await registry._vault.read_file(src)
    if file is None:
        return json.dumps({"error": f"File not found: {src}"})
    await registry._vault.write_file(dst, file.content, f"lifeos: move {src} → {dst}")
    await registry._vault.delete_file(src, f"lifeos: move {src} → {dst} (cleanup)")
    logger.info("Moved vault note %s → %s", src, dst)
    return json.dumps({"success": True, "from": src, "to": dst})
