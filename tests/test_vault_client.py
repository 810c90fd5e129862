"""Tests for lifeos/vault/client.py using httpx.MockTransport."""

import base64
import json

import httpx
import pytest

from lifeos.exceptions import ConfigurationError, VaultError
from lifeos.vault.client import VaultClient, parse_frontmatter

API = "https://api.github.test"
CONTENTS = f"{API}/repos/me/vault/contents"


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


class FakeGitHub:
    """Tiny in-memory Contents API."""

    def __init__(self, files=None):
        self.files: dict[str, str] = dict(files or {})
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        if request.url.path == "/search/code":
            return httpx.Response(200, json={"items": [
                {"path": "Projects/a.md", "text_matches": [{"fragment": "solar panels"}]},
            ]})

        path = request.url.path.split("/contents/", 1)[1]
        if request.method == "GET":
            if path in self.files:
                return httpx.Response(200, json={
                    "type": "file", "content": _b64(self.files[path]), "sha": f"sha-{path}",
                })
            children = [p for p in self.files if p.startswith(path + "/")]
            if children:
                return httpx.Response(200, json=[
                    {"name": p.rsplit("/", 1)[1], "path": p, "type": "file"} for p in children
                ])
            return httpx.Response(404, json={"message": "Not Found"})
        if request.method == "PUT":
            body = json.loads(request.content)
            self.files[path] = base64.b64decode(body["content"]).decode("utf-8")
            return httpx.Response(201, json={"content": {"sha": "newsha1234567"}})
        if request.method == "DELETE":
            self.files.pop(path, None)
            return httpx.Response(200, json={})
        return httpx.Response(405, json={"message": url})


@pytest.fixture
def github():
    return FakeGitHub()


@pytest.fixture
def vault(github):
    client = httpx.AsyncClient(transport=httpx.MockTransport(github.handler))
    return VaultClient("pat", "me", "vault", api_url=API, http_client=client)


def test_parse_frontmatter():
    meta = parse_frontmatter("---\nstatus: active\ncategory: Consulting\n---\n# Title\n")
    assert meta == {"status": "active", "category": "Consulting"}
    assert parse_frontmatter("# No frontmatter") == {}


def test_not_configured_raises_configuration_error():
    with pytest.raises(ConfigurationError):
        VaultClient()._client()


@pytest.mark.asyncio
async def test_read_file_decodes_content_and_sends_auth(vault, github):
    github.files["Daily/2026-02-16.md"] = "# hello"
    file = await vault.read_file("Daily/2026-02-16.md")

    assert file.content == "# hello"
    assert file.sha == "sha-Daily/2026-02-16.md"
    request = github.requests[0]
    assert request.headers["Authorization"] == "Bearer pat"
    assert request.url.params["ref"] == "main"


@pytest.mark.asyncio
async def test_read_missing_file_returns_none(vault):
    assert await vault.read_file("nope.md") is None


@pytest.mark.asyncio
async def test_error_status_raises_vault_error():
    client = httpx.AsyncClient(transport=httpx.MockTransport(
        lambda r: httpx.Response(403, json={"message": "Bad credentials"})
    ))
    vault = VaultClient("pat", "me", "vault", api_url=API, http_client=client)
    with pytest.raises(VaultError) as exc_info:
        await vault.read_file("x.md")
    assert exc_info.value.status_code == 403
    assert "Bad credentials" in str(exc_info.value)


@pytest.mark.asyncio
async def test_write_new_file_has_no_sha(vault, github):
    sha = await vault.write_file("Notes/a.md", "content", "msg")
    assert sha == "newsha1234567"
    put = [r for r in github.requests if r.method == "PUT"][0]
    body = json.loads(put.content)
    assert "sha" not in body
    assert body["message"] == "msg"
    assert body["branch"] == "main"
    assert github.files["Notes/a.md"] == "content"


@pytest.mark.asyncio
async def test_overwrite_sends_existing_sha(vault, github):
    github.files["Notes/a.md"] = "old"
    await vault.write_file("Notes/a.md", "new")
    put = [r for r in github.requests if r.method == "PUT"][0]
    assert json.loads(put.content)["sha"] == "sha-Notes/a.md"


@pytest.mark.asyncio
async def test_append_adds_newline(vault, github):
    github.files["Notes/a.md"] = "line one"
    await vault.append_to_file("Notes/a.md", "line two")
    assert github.files["Notes/a.md"] == "line one\nline two"


@pytest.mark.asyncio
async def test_delete_missing_file_is_noop(vault, github):
    await vault.delete_file("ghost.md")
    assert not [r for r in github.requests if r.method == "DELETE"]


@pytest.mark.asyncio
async def test_delete_existing_file(vault, github):
    github.files["Notes/a.md"] = "x"
    await vault.delete_file("Notes/a.md")
    assert "Notes/a.md" not in github.files


@pytest.mark.asyncio
async def test_list_directory_missing_is_empty(vault):
    assert await vault.list_directory("Nowhere") == []


@pytest.mark.asyncio
async def test_search_returns_paths_and_fragments(vault, github):
    results = await vault.search("solar")
    assert results == [{"path": "Projects/a.md", "matches": ["solar panels"]}]
    request = github.requests[0]
    assert request.url.params["q"] == "solar repo:me/vault"
    assert "text-match" in request.headers["Accept"]


@pytest.mark.asyncio
async def test_list_projects_reads_frontmatter(vault, github):
    github.files["Projects/solar-farm.md"] = "---\nstatus: active\ncategory: Energy\n---\n# Solar\n"
    projects = await vault.list_projects()
    assert len(projects) == 1
    assert projects[0].slug == "solar-farm"
    assert projects[0].title == "solar farm"
    assert projects[0].status == "active"
    assert projects[0].category == "Energy"


@pytest.mark.asyncio
async def test_daily_note_created_from_template(vault, github):
    note = await vault.get_daily_note("2026-02-16")
    assert note.path == "Daily/2026-02-16.md"
    assert "## Calendar" in note.content
    assert github.files["Daily/2026-02-16.md"] == note.content


@pytest.mark.asyncio
async def test_create_project_rejects_existing(vault, github):
    github.files["Projects/x.md"] = "exists"
    with pytest.raises(VaultError, match="already exists"):
        await vault.create_project("x", "X")


@pytest.mark.asyncio
async def test_create_project_writes_note_and_files_dir(vault, github):
    project = await vault.create_project("launch", "Launch", "Consulting")
    assert project.path == "Projects/launch.md"
    assert "category: Consulting" in github.files["Projects/launch.md"]
    assert "Files/Launch/README.md" in github.files
