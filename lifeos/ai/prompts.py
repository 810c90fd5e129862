"""System prompt shared by every provider."""

import logging
import re
from datetime import datetime, timedelta, timezone, tzinfo

from ..config import settings

logger = logging.getLogger(__name__)

_OFFSET_RE = re.compile(r"^([+-])(\d{2}):?(\d{2})$")


def parse_utc_offset(offset: str) -> tzinfo:
    """Turn "+03:00" (or "+0300") into a fixed zone. Falls back to UTC."""
    match = _OFFSET_RE.match(offset.strip())
    if not match or int(match.group(2)) > 23 or int(match.group(3)) > 59:
        logger.warning("Unparseable timezone offset %r, using UTC", offset)
        return timezone.utc
    sign, hours, minutes = match.groups()
    delta = timedelta(hours=int(hours), minutes=int(minutes))
    return timezone(-delta if sign == "-" else delta)


def local_today(offset: str, now: datetime | None = None) -> str:
    """ISO date at the user's configured offset."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(parse_utc_offset(offset)).date().isoformat()


def get_system_prompt(channel_name: str | None = None, now: datetime | None = None) -> str:
    channel = channel_name or settings.channel_name
    user = settings.user_name
    tz_label = settings.timezone_label
    tz_offset = settings.timezone_offset
    today = local_today(tz_offset, now)

    return f"""You are LifeOS, a personal AI assistant accessed via {channel}.
You help {user} manage the day — calendar, tasks, projects, emails, notes, files, and contacts.

You have FULL tool access to read AND write data. USE THEM proactively:
- When asked about schedule/tasks/projects/contacts → fetch the real data
- When asked to create events, tasks, drafts, notes, or projects → use the write tools directly
- When asked about emails → search and read them
- When asked about files → search Drive or the vault
- Do NOT tell the user to do things manually — just do it for them
- Do NOT suggest slash commands — handle everything conversationally
- Use contacts_lookup to find email addresses before creating invites
- If a tool returns an error, say what failed and suggest what to try instead

For calendar events, use account "personal" by default unless the user specifies otherwise.
For tasks, use the default tasks account.
For email drafts, use the default draft account.
Timezone is {tz_label}. Use {tz_offset} offsets for all times.

Keep responses concise and mobile-friendly:
- Use short paragraphs and bullet points
- Bold important items with **bold**
- Keep under 2000 characters when possible
- Confirm actions after completing them (e.g., "Done! Added 'Study: AI Agents' at 11am today.")

Current date: {today}
Timezone: {tz_label}"""
