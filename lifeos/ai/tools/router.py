"""
Keyword router: pick the capability groups relevant to an utterance.

Presenting the whole catalog to the model degrades tool selection and costs
tokens, so the primary provider only sees the groups whose rule matched
(typically 3-8 tools instead of 30). This is a heuristic, not a classifier:
extra groups are harmless, a missed group only degrades the answer.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from .schemas import TOOL_DEFS, ToolDefinition

logger = logging.getLogger(__name__)


TOOL_GROUPS: dict[str, tuple[str, ...]] = {
    "calendar": ("calendar_list", "calendar_create", "calendar_freebusy"),
    "email": ("gmail_search", "gmail_read", "gmail_draft", "gmail_attachments"),
    "tasks": ("tasks_list", "tasks_create", "tasks_update"),
    "drive": (
        "drive_list", "drive_download", "drive_upload", "drive_copy_template",
        "drive_create_folder", "drive_organize", "drive_delete",
    ),
    "contacts": ("contacts_search", "contacts_lookup"),
    "vault": (
        "read_note", "write_note", "search_vault", "list_projects", "create_project",
        "list_files", "daily_note", "delete_note", "move_note",
    ),
    "agents": ("trigger_briefing", "research"),
}

# No rule matched: calendar + tasks + vault covers most everyday queries
DEFAULT_GROUPS: tuple[str, ...] = ("calendar", "tasks", "vault")


@dataclass(frozen=True)
class RouteRule:
    pattern: re.Pattern
    groups: tuple[str, ...]

    def matches(self, utterance: str) -> bool:
        return self.pattern.search(utterance) is not None


def _rule(pattern: str, *groups: str) -> RouteRule:
    return RouteRule(re.compile(pattern, re.IGNORECASE), groups)


ROUTE_RULES: tuple[RouteRule, ...] = (
    # Scheduling pulls in vault for meeting-note context
    _rule(
        r"schedul|calendar|event|meeting|free|busy|block.*time|book|appoint|invite|slot|availab",
        "calendar", "contacts", "vault",
    ),
    # Drive for attachments, tasks for follow-ups
    _rule(
        r"email|e-mail|mail|draft|send|inbox|reply|compose|gmail|forward|cc\b|bcc",
        "email", "contacts", "drive", "tasks",
    ),
    # "move task to 2pm" is ambiguous between task and event
    _rule(
        r"\btask|todo|to.do|to-do|action.?item|remind|checklist|due\b|overdue|complete.*task",
        "tasks", "calendar", "contacts",
    ),
    _rule(
        r"drive|upload|download|folder|document|pdf|sheet|doc\b|slide|presentation|spreadsheet|google.?doc",
        "drive", "vault",
    ),
    _rule(
        r"contact|who is|find.*email|look.*up.*person|attendee|phone|number for",
        "contacts",
    ),
    _rule(
        r"\bnote|vault|obsidian|project|daily|journal|search.*vault|write.*note|read.*note|meeting.?note",
        "vault", "tasks",
    ),
    _rule(
        r"brief|morning|daily brief|what.*today|my day|my plate|agenda|summary.*day",
        "agents", "calendar", "tasks", "email", "vault",
    ),
    _rule(
        r"research|analy[sz]|compar|evaluat|investig|market.*size|competitive",
        "agents",
    ),
    _rule(
        r"create.*project|new.*project|start.*project|project.*status|update.*project",
        "vault", "tasks", "calendar", "email",
    ),
    _rule(
        r"what.*schedul|what.*pending|status|overview|what.*happening|catch.*up",
        "calendar", "tasks", "vault", "email",
    ),
    _rule(
        r"\bfile|attachment|transcript|report\b",
        "vault", "drive", "email",
    ),
    _rule(
        r"review|retrospect|recap|debrief|wrap.?up|last week|this week|progress",
        "vault", "calendar", "tasks", "email",
    ),
    _rule(
        r"\bmove\b|reschedul|postpon|push.*back|bring.*forward|defer",
        "tasks", "calendar",
    ),
)


def match_groups(utterance: str, rules: Iterable[RouteRule] = ROUTE_RULES) -> set[str]:
    """Union of the groups of every rule that matches. Empty when nothing matched."""
    matched: set[str] = set()
    for rule in rules:
        if rule.matches(utterance):
            matched.update(rule.groups)
    return matched


def route_tools(
    utterance: str,
    *,
    rules: Iterable[RouteRule] = ROUTE_RULES,
    groups: Mapping[str, Sequence[str]] = TOOL_GROUPS,
    catalog: Sequence[ToolDefinition] = TOOL_DEFS,
    default_groups: Sequence[str] = DEFAULT_GROUPS,
) -> list[ToolDefinition]:
    """
    Return the tools relevant to ``utterance``, deduplicated, in catalog order.
    Falls back to ``default_groups`` when no rule matches, so never empty.
    """
    selected = match_groups(utterance, rules) or set(default_groups)

    names: set[str] = set()
    for group in selected:
        names.update(groups[group])

    tools = [t for t in catalog if t.name in names]
    logger.debug("Routed to groups=%s (%d tools)", sorted(selected), len(tools))
    return tools
