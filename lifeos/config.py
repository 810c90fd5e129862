"""
Central configuration for lifeos.
Uses Pydantic BaseSettings for type-safe configuration from environment variables.
Read once at startup; nothing re-reads settings mid-process.
"""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env relative to this file (lifeos/config.py → project root)
_ENV_FILE = Path(__file__).parent.parent / ".env"


def _load_env_file() -> None:
    """
    Load .env into os.environ, but only for keys that are currently unset
    or set to empty strings. This ensures .env values win over blank shell
    env vars (e.g. GOOGLE_AI_API_KEY='') while still allowing explicit
    non-empty shell overrides.
    """
    if not _ENV_FILE.exists():
        return
    from dotenv import dotenv_values
    for key, value in dotenv_values(_ENV_FILE).items():
        if value and not os.environ.get(key):
            os.environ[key] = value


# Run at import time so Settings() sees the correct values
_load_env_file()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Gemini (primary). An empty key disables the fallback path entirely.
    google_ai_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"

    # Anthropic (secondary, or sole provider without a Gemini key)
    anthropic_api_key: str = ""
    claude_model: str = "claude-opus-4-6"
    anthropic_max_tokens: int = 2048

    # ── Agentic loop / conversation memory ──────────────────────────────────────
    max_tool_rounds: int = 10
    max_history: int = 20
    memory_ttl_seconds: int = 2 * 60 * 60
    memory_debounce_seconds: float = 3.0

    # ── Vault (private GitHub repo holding the Obsidian vault) ──────────────────
    github_pat: str = ""
    github_repo_owner: str = ""
    github_repo_name: str = ""
    github_branch: str = "main"
    github_api_url: str = "https://api.github.com"
    vault_memory_path: str = "Files/.system/conversations.json"
    vault_timeout: float = 30.0

    # ── Sub-agents ──────────────────────────────────────────────────────────────
    agent_briefing_url: str = ""
    agent_research_url: str = ""
    agent_timeout: float = 60.0

    # ── Persona / channel ───────────────────────────────────────────────────────
    channel_name: str = "Telegram"
    user_name: str = "Charles"
    timezone_label: str = "EAT (UTC+3)"
    timezone_offset: str = "+03:00"

    # Storage
    data_dir: str = "./data"

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    @property
    def gemini_enabled(self) -> bool:
        return bool(self.google_ai_api_key.strip())

    @property
    def vault_configured(self) -> bool:
        return bool(self.github_pat and self.github_repo_owner and self.github_repo_name)

    @property
    def logs_dir(self) -> str:
        return os.path.join(self.data_dir, "logs")

    @property
    def memory_file(self) -> str:
        return os.path.join(self.data_dir, "conversations.json")


def get_settings() -> "Settings":
    """Return the application settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached singleton (tests change the environment between cases)."""
    global _settings
    _settings = None


_settings: Settings | None = None


class _SettingsProxy:
    """Lazy proxy so `from lifeos.config import settings` works without eager init."""
    def __getattr__(self, name):
        return getattr(get_settings(), name)


settings = _SettingsProxy()  # type: ignore[assignment]
