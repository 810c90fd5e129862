"""
Translate canonical ToolDefinitions into each provider's function-declaration shape.

Pure and deterministic: the same definitions always produce the same output,
and the canonical catalog is never mutated (property specs are deep-copied).
Every property type, every optional-field description and the full
``required`` list survive translation.
"""

from __future__ import annotations

import copy
from typing import Iterable

from .schemas import ToolDefinition

PROVIDERS = ("anthropic", "gemini")


def to_anthropic_tools(defs: Iterable[ToolDefinition]) -> list[dict]:
    """Convert to Anthropic ToolParam format (``input_schema``)."""
    return [
        {
            "name": d.name,
            "description": d.description,
            "input_schema": {
                "type": "object",
                "properties": copy.deepcopy(d.parameters.properties),
                "required": list(d.parameters.required),
            },
        }
        for d in defs
    ]


def _gemini_schema(spec: dict) -> dict:
    """Gemini spells schema types in upper case; nested items/properties too."""
    out = copy.deepcopy(spec)
    if isinstance(out.get("type"), str):
        out["type"] = out["type"].upper()
    if isinstance(out.get("items"), dict):
        out["items"] = _gemini_schema(out["items"])
    if isinstance(out.get("properties"), dict):
        out["properties"] = {k: _gemini_schema(v) for k, v in out["properties"].items()}
    return out


def to_gemini_tools(defs: Iterable[ToolDefinition]) -> list[dict]:
    """
    Convert to Gemini FunctionDeclaration dicts.

    Gemini rejects an OBJECT schema with no properties, so parameterless tools
    are declared without ``parameters`` (nothing is lost).
    """
    declarations = []
    for d in defs:
        decl: dict = {"name": d.name, "description": d.description}
        if d.parameters.properties:
            decl["parameters"] = {
                "type": "OBJECT",
                "properties": {
                    key: _gemini_schema(spec)
                    for key, spec in d.parameters.properties.items()
                },
                "required": list(d.parameters.required),
            }
        declarations.append(decl)
    return declarations


def to_provider_schema(defs: Iterable[ToolDefinition], provider: str) -> list[dict]:
    """Dispatch to the translator for ``provider``. Unknown targets are a programming error."""
    match provider:
        case "anthropic":
            return to_anthropic_tools(defs)
        case "gemini":
            return to_gemini_tools(defs)
        case _:
            raise ValueError(f"Unknown provider target: {provider!r} (expected one of {PROVIDERS})")
