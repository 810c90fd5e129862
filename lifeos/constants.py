"""
Shared constants for lifeos.

Centralises values that are used across multiple modules to avoid duplication
and ensure consistency.
"""

# ── Agentic loop ────────────────────────────────────────────────────────────────
MAX_TOOL_ROUNDS = 10

# What the assistant turn in history records when the loop is exhausted
LOOP_LIMIT_HISTORY_MESSAGE = "I ran into a limit processing your request."
# What the caller receives when the loop is exhausted
LOOP_LIMIT_REPLY = "I ran into a limit processing your request. Try a simpler question."

EMPTY_REPLY = "No response generated."


# ── Conversation memory ─────────────────────────────────────────────────────────
MAX_HISTORY = 20
MEMORY_TTL_SECONDS = 2 * 60 * 60
MEMORY_DEBOUNCE_SECONDS = 3.0
DEFAULT_CONVERSATION_ID = "default"
VAULT_MEMORY_PATH = "Files/.system/conversations.json"


# ── Standardised error messages ─────────────────────────────────────────────────
ERROR_MESSAGES = {
    "rate_limited": "Rate limited — too many requests. Try again in a minute.",
    "auth_failed": "Authentication error — an account may need re-authorization.",
    "quota": "API quota exceeded for today. Try again tomorrow or check your quotas.",
    "not_found": "Not found — the requested resource doesn't exist.",
    "service_unavailable": "Service temporarily unavailable. Try again shortly.",
    "timeout": "Connection timed out. Try again.",
    "network": "Network error — check your internet connection.",
    "providers_down": "Both AI providers are unavailable right now. Try again in a minute.",
    "default": "Something went wrong. Try again.",
}


# ── Vault templates ─────────────────────────────────────────────────────────────
DAILY_NOTE_TEMPLATE = """---
date: {date}
---

# {date}

## Calendar

## Tasks

## Emails

## Meeting Notes

## Suggested Actions

## Notes

"""

PROJECT_TEMPLATE = """---
status: active
created: {created}
category: {category}
---

# {title}

## Overview

## Key Contacts

## Notes

## Tasks

## Links

"""
