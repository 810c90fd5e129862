"""
Canonical tool catalog, provider-agnostic.

Each tool is a ToolDefinition whose parameters are a JSON-schema-like object
(``properties`` + ``required``). translate.py turns the catalog into the
Anthropic and Gemini wire shapes; validation.py derives argument models from
the same parameter specs.

Tools available:
  Calendar
    calendar_list         → events across accounts for a date range
    calendar_create       → create an event (optional attendees)
    calendar_freebusy     → free/busy across accounts

  Gmail
    gmail_search          → search mail across accounts
    gmail_read            → full thread content
    gmail_draft           → create a draft
    gmail_attachments     → list attachments of a message

  Tasks
    tasks_list / tasks_create / tasks_update

  Drive
    drive_list / drive_download / drive_upload / drive_copy_template
    drive_create_folder / drive_organize / drive_delete

  Contacts
    contacts_search / contacts_lookup

  Vault (Obsidian, stored in GitHub)
    read_note / write_note / search_vault / list_projects / create_project
    list_files / daily_note / delete_note / move_note

  Agents
    trigger_briefing / research
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ToolParameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    properties: dict[str, dict] = Field(default_factory=dict)
    required: tuple[str, ...] = ()


class ToolDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    parameters: ToolParameters = Field(default_factory=ToolParameters)


def _tool(name: str, description: str, properties: dict | None = None, required=()) -> ToolDefinition:
    return ToolDefinition(
        name=name,
        description=description,
        parameters=ToolParameters(properties=properties or {}, required=tuple(required)),
    )


def _str(description: str) -> dict:
    return {"type": "string", "description": description}


def _num(description: str) -> dict:
    return {"type": "number", "description": description}


def _bool(description: str) -> dict:
    return {"type": "boolean", "description": description}


def _str_list(description: str) -> dict:
    return {"type": "array", "items": {"type": "string"}, "description": description}


TOOL_DEFS: list[ToolDefinition] = [
    # ------------------------------------------------------------------ #
    # Calendar                                                             #
    # ------------------------------------------------------------------ #
    _tool(
        "calendar_list",
        "List calendar events across all accounts for a date range. "
        "Returns events from all connected calendars.",
        {
            "timeMin": _str('Start of range (ISO 8601, e.g. "2026-02-16T00:00:00+03:00")'),
            "timeMax": _str("End of range (ISO 8601)"),
            "account": _str("Account alias (omit to search all)"),
            "query": _str("Free-text search within events"),
            "maxResults": _num("Max results per account (default 25)"),
        },
        ["timeMin", "timeMax"],
    ),
    _tool(
        "calendar_create",
        "Create a calendar event with optional attendees. "
        "Routes to the correct account based on project.",
        {
            "summary": _str("Event title"),
            "start": _str("Start time (ISO 8601 with timezone, e.g. 2026-02-16T11:00:00+03:00)"),
            "end": _str("End time (ISO 8601 with timezone)"),
            "description": _str("Event description/agenda"),
            "location": _str("Event location or video call link"),
            "attendees": _str_list("Attendee email addresses"),
            "account": _str("Account alias (auto-routed if omitted)"),
            "project": _str("Project slug for auto-routing"),
        },
        ["summary", "start", "end"],
    ),
    _tool(
        "calendar_freebusy",
        "Check free/busy availability across accounts. Useful before creating invites.",
        {
            "timeMin": _str("Start of range (ISO 8601)"),
            "timeMax": _str("End of range (ISO 8601)"),
            "accounts": _str_list("Account aliases to check (omit for all)"),
        },
        ["timeMin", "timeMax"],
    ),

    # ------------------------------------------------------------------ #
    # Gmail                                                                #
    # ------------------------------------------------------------------ #
    _tool(
        "gmail_search",
        "Search emails across all Google accounts. Uses Gmail search syntax "
        "(from:, to:, subject:, has:attachment). Returns snippets — use gmail_read "
        "for full content.",
        {
            "query": _str('Gmail search query (e.g. "from:kevin subject:proposal")'),
            "account": _str("Account alias to search (omit for all)"),
            "maxResults": _num("Max results per account (default 10)"),
        },
        ["query"],
    ),
    _tool(
        "gmail_read",
        "Read a full email thread. Returns all messages with full body content.",
        {
            "threadId": _str("Thread ID (from gmail_search results)"),
            "account": _str("Account alias where this thread lives"),
        },
        ["threadId", "account"],
    ),
    _tool(
        "gmail_draft",
        "Create an email draft. Automatically routes to the correct account "
        "based on project context.",
        {
            "to": _str_list("Recipient email addresses"),
            "subject": _str("Email subject"),
            "body": _str("Email body (plain text)"),
            "cc": _str_list("CC recipients"),
            "account": _str("Account alias (auto-detected if omitted)"),
            "project": _str("Project slug for auto-routing"),
            "replyToThreadId": _str("Thread ID to reply to"),
        },
        ["to", "subject", "body"],
    ),
    _tool(
        "gmail_attachments",
        "List attachments from an email message.",
        {
            "messageId": _str("Message ID"),
            "account": _str("Account alias"),
        },
        ["messageId", "account"],
    ),

    # ------------------------------------------------------------------ #
    # Tasks                                                                #
    # ------------------------------------------------------------------ #
    _tool(
        "tasks_list",
        "List tasks across all accounts. Shows title, due date, status, and which account.",
        {
            "account": _str("Account alias (omit for all)"),
            "showCompleted": _bool("Include completed tasks (default false)"),
            "maxResults": _num("Max results per task list (default 50)"),
        },
    ),
    _tool(
        "tasks_create",
        "Create a new Google Task.",
        {
            "title": _str("Task title"),
            "notes": _str("Task description/notes"),
            "due": _str('Due date (ISO 8601, e.g. "2026-02-20T00:00:00Z")'),
            "account": _str("Account alias (defaults to primary tasks account)"),
        },
        ["title"],
    ),
    _tool(
        "tasks_update",
        "Update or complete a task. Can change title, notes, due date, or mark as completed.",
        {
            "taskId": _str("Task ID"),
            "account": _str("Account alias"),
            "title": _str("New title"),
            "notes": _str("New notes"),
            "due": _str("New due date"),
            "completed": _bool("Mark as completed (true) or uncomplete (false)"),
        },
        ["taskId", "account"],
    ),

    # ------------------------------------------------------------------ #
    # Drive                                                                #
    # ------------------------------------------------------------------ #
    _tool(
        "drive_list",
        "List and search files in Google Drive across accounts.",
        {
            "query": _str("Search query (Drive syntax: name contains, fullText contains, etc)"),
            "account": _str("Account alias (omit for all)"),
            "folderId": _str("Folder ID to list contents of"),
            "maxResults": _num("Max results per account (default 20)"),
            "mimeType": _str('Filter by MIME type (e.g. "application/pdf")'),
        },
    ),
    _tool(
        "drive_download",
        "Download a file from Google Drive. For Google Docs/Sheets/Slides, "
        "exports to specified format.",
        {
            "fileId": _str("Drive file ID"),
            "account": _str("Account alias"),
            "exportFormat": _str('Export format for Workspace files (e.g. "text/markdown", "text/csv")'),
        },
        ["fileId", "account"],
    ),
    _tool(
        "drive_upload",
        "Upload a file to Google Drive. Use convertTo to create native Google Docs "
        "or Sheets (provide HTML or CSV content). Google Slides cannot be created "
        "from scratch — use drive_copy_template instead.",
        {
            "name": _str("File name"),
            "content": _str("File content (text, HTML for Docs, CSV for Sheets, or base64 for binary)"),
            "account": _str("Account alias"),
            "mimeType": _str(
                "MIME type of the content (default text/plain). "
                "Use text/html for Docs, text/csv for Sheets."
            ),
            "folderId": _str("Parent folder ID"),
            "convertTo": {
                "type": "string",
                "enum": ["document", "spreadsheet"],
                "description": 'Convert to native Google format: "document" (Google Docs) '
                               'or "spreadsheet" (Google Sheets)',
            },
        },
        ["name", "content", "account"],
    ),
    _tool(
        "drive_copy_template",
        "Create a new Google Docs, Sheets, or Slides file by copying an existing "
        "template. Use this for Google Slides since they cannot be created from scratch.",
        {
            "templateFileId": _str("File ID of the template to copy"),
            "name": _str("Name for the new file"),
            "account": _str("Account alias"),
            "folderId": _str("Parent folder ID for the copy"),
        },
        ["templateFileId", "name", "account"],
    ),
    _tool(
        "drive_create_folder",
        "Create a new folder in Google Drive.",
        {
            "name": _str("Folder name"),
            "account": _str("Account alias"),
            "parentId": _str("Parent folder ID (omit for root)"),
        },
        ["name", "account"],
    ),
    _tool(
        "drive_organize",
        "Move or rename files in Google Drive.",
        {
            "fileId": _str("File ID to move/rename"),
            "account": _str("Account alias"),
            "newName": _str("New file name"),
            "newParentId": _str("New parent folder ID"),
            "removeFromParentId": _str("Current parent folder ID to remove from"),
        },
        ["fileId", "account"],
    ),
    _tool(
        "drive_delete",
        "Move a file/folder to trash in Google Drive (recoverable for 30 days).",
        {
            "fileId": _str("File or folder ID to trash"),
            "account": _str("Account alias"),
        },
        ["fileId", "account"],
    ),

    # ------------------------------------------------------------------ #
    # Contacts                                                             #
    # ------------------------------------------------------------------ #
    _tool(
        "contacts_search",
        "Search for contacts by name across all sources: Google Contacts, Gmail, "
        "vault, calendar. Returns name, email, source, org.",
        {
            "name": _str("Person name to search for"),
            "limit": _num("Max results (default 5)"),
        },
        ["name"],
    ),
    _tool(
        "contacts_lookup",
        "Find a person's email address. Useful before creating calendar invites "
        "or sending emails.",
        {"name": _str("Person name to look up")},
        ["name"],
    ),

    # ------------------------------------------------------------------ #
    # Vault                                                                #
    # ------------------------------------------------------------------ #
    _tool(
        "read_note",
        "Read a file from the Obsidian vault. Use paths relative to vault root.",
        {"path": _str('File path relative to vault root (e.g. "Projects/lifeos.md")')},
        ["path"],
    ),
    _tool(
        "write_note",
        "Create or update a file in the Obsidian vault. Overwrites the entire file.",
        {
            "path": _str("File path relative to vault root"),
            "content": _str("Complete file content (Markdown)"),
            "message": _str("Commit message"),
        },
        ["path", "content"],
    ),
    _tool(
        "search_vault",
        "Search for content across the entire Obsidian vault. "
        "Returns matching files with context snippets.",
        {"query": _str("Search query (searches file contents)")},
        ["query"],
    ),
    _tool(
        "list_projects",
        "List all projects in the vault with status.",
    ),
    _tool(
        "create_project",
        "Create a new project note from the project template.",
        {
            "slug": _str('URL-safe project slug (e.g. "new-product-launch")'),
            "title": _str("Human-readable project title"),
            "category": _str('Project category (e.g. "Consulting", "Open Source")'),
        },
        ["slug", "title"],
    ),
    _tool(
        "list_files",
        "Browse files in the vault. Lists contents of any directory.",
        {"path": _str('Directory path to list (default: "Files")')},
    ),
    _tool(
        "daily_note",
        "Read or append to today's daily note (or a specific date).",
        {
            "date": _str("Date in YYYY-MM-DD format (defaults to today)"),
            "append": _str("Content to append. Omit to just read."),
            "section": _str('Section to append under (e.g. "Notes", "Suggested Actions")'),
        },
    ),
    _tool(
        "delete_note",
        "Delete a file from the Obsidian vault (recoverable via git history).",
        {"path": _str("File path relative to vault root")},
        ["path"],
    ),
    _tool(
        "move_note",
        "Move or rename a file in the Obsidian vault.",
        {
            "from": _str("Current file path"),
            "to": _str("New file path"),
        },
        ["from", "to"],
    ),

    # ------------------------------------------------------------------ #
    # Agents                                                               #
    # ------------------------------------------------------------------ #
    _tool(
        "trigger_briefing",
        "Generate the daily briefing (calendar + tasks + emails + follow-ups)",
        {"date": _str("Date in YYYY-MM-DD format. Defaults to today.")},
    ),
    _tool(
        "research",
        "Research a topic using the LifeOS research agent",
        {"query": _str("The research topic or question")},
        ["query"],
    ),
]

TOOL_DEFS_BY_NAME: dict[str, ToolDefinition] = {t.name: t for t in TOOL_DEFS}
