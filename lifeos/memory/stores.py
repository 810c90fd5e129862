"""
Durable stores for the conversation memory snapshot.

A store holds one JSON blob at a fixed logical location: ``read()`` returns
None when nothing was ever written, ``write()`` replaces the whole blob.
"""

from __future__ import annotations

import logging
import os
import tempfile
from typing import Protocol

import aiofiles

from ..constants import VAULT_MEMORY_PATH
from ..exceptions import StorageError
from ..vault.client import VaultClient

logger = logging.getLogger(__name__)


class MemoryStore(Protocol):
    async def read(self) -> str | None: ...

    async def write(self, blob: str) -> None: ...


class VaultMemoryStore:
    """Snapshot stored as a file in the GitHub-hosted vault."""

    def __init__(self, vault: VaultClient, path: str = VAULT_MEMORY_PATH) -> None:
        self._vault = vault
        self.path = path

    async def read(self) -> str | None:
        file = await self._vault.read_file(self.path)
        return file.content if file is not None else None

    async def write(self, blob: str) -> None:
        await self._vault.write_file(self.path, blob, "lifeos: save conversation memory")


class FileMemoryStore:
    """
    Snapshot stored on local disk. Each write goes to its own uniquely named
    temp file beside the snapshot and is then renamed over it, so readers and
    overlapping writers never see a torn file.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    async def read(self) -> str | None:
        if not os.path.exists(self.path):
            return None
        try:
            async with aiofiles.open(self.path, mode="r", encoding="utf-8") as f:
                return await f.read()
        except OSError as e:
            raise StorageError(f"Could not read {self.path}: {e}") from e

    async def write(self, blob: str) -> None:
        directory = os.path.dirname(self.path) or "."
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=directory, prefix=f".{os.path.basename(self.path)}.", suffix=".tmp"
            )
            os.close(fd)
            async with aiofiles.open(tmp_path, mode="w", encoding="utf-8") as f:
                await f.write(blob)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageError(f"Could not write {self.path}: {e}") from e
