"""
Pydantic v2 data models for lifeos.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class MemoryMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ConversationEntry(BaseModel):
    """
    One conversation's bounded history.

    ``last_active`` is epoch milliseconds and serialises as ``lastActive`` so
    snapshots written by earlier deployments load unchanged.
    """

    model_config = ConfigDict(populate_by_name=True)

    messages: list[MemoryMessage] = Field(default_factory=list)
    last_active: int = Field(alias="lastActive")


class VaultFile(BaseModel):
    path: str
    content: str
    sha: str


class VaultEntry(BaseModel):
    name: str
    type: Literal["file", "dir"]
    path: str


class VaultProject(BaseModel):
    slug: str
    title: str
    status: str = "unknown"
    category: str | None = None
    path: str
