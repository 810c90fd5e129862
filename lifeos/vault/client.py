"""
Vault access via the GitHub API.

The Obsidian vault lives in a private GitHub repository. Files are read and
written through the Contents API and searched through Code Search. Access is
via a fine-grained PAT scoped to the vault repo with Contents read/write.
"""

from __future__ import annotations

import base64
import logging
import re
from datetime import datetime, timezone
from urllib.parse import quote

import httpx

from ..constants import DAILY_NOTE_TEMPLATE, PROJECT_TEMPLATE
from ..exceptions import ConfigurationError, VaultError
from ..models import VaultEntry, VaultFile, VaultProject

logger = logging.getLogger(__name__)

_FRONTMATTER_RE = re.compile(r"^---\n(.*?)\n---", re.DOTALL)


def parse_frontmatter(content: str) -> dict[str, str]:
    """Key/value pairs from a leading ``---`` delimited block; {} if absent."""
    match = _FRONTMATTER_RE.match(content)
    if not match:
        return {}
    frontmatter: dict[str, str] = {}
    for line in match.group(1).split("\n"):
        key, sep, value = line.partition(":")
        if not sep:
            continue
        frontmatter[key.strip()] = value.strip()
    return frontmatter


def _today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


class VaultClient:
    """Async client for the GitHub-hosted vault."""

    def __init__(
        self,
        token: str = "",
        owner: str = "",
        repo: str = "",
        branch: str = "main",
        *,
        api_url: str = "https://api.github.com",
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._token = token
        self._owner = owner
        self._repo = repo
        self._branch = branch
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._http = http_client
        self._owns_http = http_client is None

    @property
    def configured(self) -> bool:
        return bool(self._token and self._owner and self._repo)

    def _client(self) -> httpx.AsyncClient:
        if not self.configured:
            raise ConfigurationError(
                "GITHUB_PAT, GITHUB_REPO_OWNER and GITHUB_REPO_NAME are required for vault access."
            )
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self._timeout)
        return self._http

    async def aclose(self) -> None:
        if self._http is not None and self._owns_http:
            await self._http.aclose()
            self._http = None

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _contents_url(self, path: str) -> str:
        return f"{self._api_url}/repos/{self._owner}/{self._repo}/contents/{quote(path.strip('/'))}"

    @staticmethod
    def _raise_for_status(response: httpx.Response, action: str) -> None:
        if response.status_code < 400:
            return
        try:
            detail = response.json().get("message", response.text)
        except ValueError:
            detail = response.text
        raise VaultError(
            f"{action} failed ({response.status_code}): {detail}",
            status_code=response.status_code,
        )

    # ── Read operations ─────────────────────────────────────────────────────────

    async def read_file(self, path: str) -> VaultFile | None:
        """Return the file's content and sha, or None when it doesn't exist."""
        response = await self._client().get(
            self._contents_url(path), headers=self._headers, params={"ref": self._branch}
        )
        if response.status_code == 404:
            return None
        self._raise_for_status(response, f"read {path}")

        data = response.json()
        if isinstance(data, list) or data.get("type") != "file":
            return None
        content = base64.b64decode(data.get("content", "")).decode("utf-8")
        return VaultFile(path=path, content=content, sha=data["sha"])

    async def list_directory(self, path: str) -> list[VaultEntry]:
        response = await self._client().get(
            self._contents_url(path), headers=self._headers, params={"ref": self._branch}
        )
        if response.status_code == 404:
            return []
        self._raise_for_status(response, f"list {path}")

        data = response.json()
        if not isinstance(data, list):
            return []
        return [
            VaultEntry(
                name=item["name"],
                type="dir" if item.get("type") == "dir" else "file",
                path=item["path"],
            )
            for item in data
        ]

    async def search(self, query: str) -> list[dict]:
        """Full-text search via GitHub Code Search, with matching fragments."""
        response = await self._client().get(
            f"{self._api_url}/search/code",
            headers={**self._headers, "Accept": "application/vnd.github.text-match+json"},
            params={"q": f"{query} repo:{self._owner}/{self._repo}", "per_page": 20},
        )
        self._raise_for_status(response, f"search {query!r}")
        return [
            {
                "path": item["path"],
                "matches": [m.get("fragment", "") for m in item.get("text_matches") or []],
            }
            for item in response.json().get("items", [])
        ]

    # ── Write operations ────────────────────────────────────────────────────────

    async def write_file(self, path: str, content: str, message: str | None = None) -> str:
        """Create or overwrite a file; returns the new blob sha."""
        existing = await self.read_file(path)
        body = {
            "message": message or f"lifeos: update {path}",
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": self._branch,
        }
        if existing is not None:
            body["sha"] = existing.sha

        response = await self._client().put(
            self._contents_url(path), headers=self._headers, json=body
        )
        self._raise_for_status(response, f"write {path}")
        return (response.json().get("content") or {}).get("sha", "")

    async def append_to_file(self, path: str, text: str, message: str | None = None) -> str:
        existing = await self.read_file(path)
        current = existing.content if existing else ""
        if current and not current.endswith("\n"):
            current += "\n"
        return await self.write_file(path, current + text, message or f"lifeos: append to {path}")

    async def delete_file(self, path: str, message: str | None = None) -> None:
        """Delete a file. Missing files are ignored."""
        existing = await self.read_file(path)
        if existing is None:
            return
        response = await self._client().request(
            "DELETE",
            self._contents_url(path),
            headers=self._headers,
            json={
                "message": message or f"lifeos: delete {path}",
                "sha": existing.sha,
                "branch": self._branch,
            },
        )
        self._raise_for_status(response, f"delete {path}")

    # ── Vault conventions ───────────────────────────────────────────────────────

    async def list_projects(self) -> list[VaultProject]:
        projects: list[VaultProject] = []
        for entry in await self.list_directory("Projects"):
            if entry.type != "file" or not entry.name.endswith(".md"):
                continue
            file = await self.read_file(entry.path)
            if file is None:
                continue
            meta = parse_frontmatter(file.content)
            slug = entry.name[: -len(".md")]
            projects.append(
                VaultProject(
                    slug=slug,
                    title=meta.get("title") or slug.replace("-", " "),
                    status=meta.get("status") or "unknown",
                    category=meta.get("category"),
                    path=entry.path,
                )
            )
        return projects

    async def get_daily_note(self, date: str | None = None) -> VaultFile:
        """Read a daily note, creating it from the template if missing."""
        day = date or _today()
        path = f"Daily/{day}.md"
        existing = await self.read_file(path)
        if existing is not None:
            return existing

        content = DAILY_NOTE_TEMPLATE.format(date=day)
        sha = await self.write_file(path, content, f"lifeos: create daily note {day}")
        return VaultFile(path=path, content=content, sha=sha)

    async def create_project(self, slug: str, title: str, category: str | None = None) -> VaultProject:
        path = f"Projects/{slug}.md"
        if await self.read_file(path) is not None:
            raise VaultError(f'Project "{slug}" already exists at {path}')

        content = PROJECT_TEMPLATE.format(
            created=_today(), category=category or "project", title=title
        )
        await self.write_file(path, content, f"lifeos: create project {slug}")
        await self.write_file(
            f"Files/{title}/README.md",
            f"# {title} — Files\n\nSynced files for this project.\n",
            f"lifeos: create files dir for {slug}",
        )
        logger.info("Created vault project %s", slug)
        return VaultProject(slug=slug, title=title, status="active", category=category, path=path)
