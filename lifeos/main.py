"""
lifeos entry point.
Initialises all components and runs a console channel: each stdin line is one
turn in the ``console`` conversation.
"""

import asyncio
import logging
import os

from .ai.claude_client import ClaudeAdapter
from .ai.failures import format_user_error
from .ai.gemini_client import GeminiAdapter
from .ai.orchestrator import FallbackOrchestrator
from .ai.tools.registry import ToolRegistry
from .config import settings
from .logging_config import setup_logging
from .memory.conversations import ConversationMemory
from .memory.stores import FileMemoryStore, MemoryStore, VaultMemoryStore
from .vault.client import VaultClient

logger = logging.getLogger(__name__)

CONSOLE_CONVERSATION_ID = "console"
_EXIT_COMMANDS = {"exit", "quit", "/quit"}


def build_memory_store(vault: VaultClient) -> MemoryStore:
    """Vault snapshot when the vault is configured, otherwise a local file."""
    if vault.configured:
        return VaultMemoryStore(vault, settings.vault_memory_path)
    logger.info("Vault not configured; conversation memory persists to %s", settings.memory_file)
    return FileMemoryStore(settings.memory_file)


async def run_console(orchestrator: FallbackOrchestrator) -> None:
    print(f"LifeOS ready ({settings.channel_name}). Type 'exit' to quit.")
    while True:
        try:
            line = await asyncio.to_thread(input, "> ")
        except EOFError:
            break
        message = line.strip()
        if not message:
            continue
        if message.lower() in _EXIT_COMMANDS:
            break
        try:
            reply = await orchestrator.chat(message, CONSOLE_CONVERSATION_ID)
        except Exception as e:
            logger.error("Turn failed: %s", e, exc_info=True)
            reply = format_user_error(e)
        print(reply)


async def _run() -> None:
    vault = VaultClient(
        settings.github_pat,
        settings.github_repo_owner,
        settings.github_repo_name,
        settings.github_branch,
        api_url=settings.github_api_url,
        timeout=settings.vault_timeout,
    )
    memory = ConversationMemory(
        build_memory_store(vault),
        max_history=settings.max_history,
        ttl_seconds=settings.memory_ttl_seconds,
        debounce_seconds=settings.memory_debounce_seconds,
    )
    registry = ToolRegistry(
        vault=vault,
        briefing_url=settings.agent_briefing_url,
        research_url=settings.agent_research_url,
        agent_timeout=settings.agent_timeout,
    )

    # Google integrations (calendar, Gmail, Tasks, Drive, Contacts) are bound
    # here with registry.register() by deployments that provide them.

    gemini = GeminiAdapter(memory, registry.execute, max_rounds=settings.max_tool_rounds)
    claude = ClaudeAdapter(memory, registry.execute, max_rounds=settings.max_tool_rounds)
    orchestrator = FallbackOrchestrator(gemini, claude, registry)

    loaded = await memory.rehydrate()
    logger.info(
        "lifeos ready (primary=%s, vault=%s, conversations=%d)",
        "gemini" if settings.gemini_enabled else "claude",
        "on" if settings.vault_configured else "off",
        loaded,
    )

    try:
        await run_console(orchestrator)
    finally:
        await memory.flush()
        await vault.aclose()


def main() -> None:
    # Ensure data directories exist
    os.makedirs(settings.data_dir, exist_ok=True)
    os.makedirs(settings.logs_dir, exist_ok=True)

    setup_logging(settings.log_level, settings.logs_dir, settings.json_logs)

    logger.info("Starting lifeos (data_dir=%s)", settings.data_dir)

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        logger.info("Interrupted; shutting down")


if __name__ == "__main__":
    main()
