"""
Argument models derived from tool parameter schemas.

Model output is untrusted: before an executor sees its arguments they are
validated against a pydantic model built from the ToolDefinition, so a
missing required field or a wrongly-typed value is reported back to the
model instead of reaching an integration.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, create_model

from ...exceptions import ToolArgumentError
from .schemas import ToolDefinition

_SCALARS: dict[str, Any] = {
    "string": str,
    "integer": int,
    # int first so whole numbers stay ints in smart-union mode
    "number": int | float,
    "boolean": bool,
}


class _ArgsBase(BaseModel):
    model_config = ConfigDict(extra="ignore")


def annotation_for(spec: dict) -> Any:
    """Map one JSON-schema-like property spec to a Python type annotation."""
    kind = spec.get("type")
    if spec.get("enum"):
        return Literal[tuple(spec["enum"])]
    if kind in _SCALARS:
        return _SCALARS[kind]
    if kind == "array":
        items = spec.get("items")
        return list[annotation_for(items)] if isinstance(items, dict) else list[Any]
    if kind == "object":
        return dict[str, Any]
    return Any


def build_argument_model(defn: ToolDefinition) -> type[BaseModel]:
    """
    Build the argument model for one tool.

    Property names are not always Python identifiers (``from``), so each field
    gets a positional name and the property name as its alias.
    """
    fields: dict[str, Any] = {}
    required = set(defn.parameters.required)
    for i, (key, spec) in enumerate(defn.parameters.properties.items()):
        annotation = annotation_for(spec)
        if key in required:
            fields[f"p{i}"] = (annotation, Field(..., alias=key))
        else:
            fields[f"p{i}"] = (annotation | None, Field(None, alias=key))
    return create_model(f"{defn.name}_args", __base__=_ArgsBase, **fields)


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "arguments"
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def validate_arguments(model: type[BaseModel], tool_name: str, args: Any) -> dict:
    """
    Validate ``args`` and return only the keys the model actually supplied,
    coerced to the declared types. Unknown keys are dropped.
    """
    if args is None:
        args = {}
    if not isinstance(args, dict):
        raise ToolArgumentError(tool_name, f"expected an object, got {type(args).__name__}")
    try:
        parsed = model.model_validate(args)
    except ValidationError as exc:
        raise ToolArgumentError(tool_name, _describe(exc)) from exc
    return parsed.model_dump(by_alias=True, exclude_unset=True)
