from __future__ import annotations
import dataclasses
import json
from typing import Any, Optional

from .errors import MissingAccessorError
from .schema import FieldSpec, Schema


def to_text(value: Any) -> str:
    """
    Text form of a field value, used for identity and equality checks.
    None -> "", booleans -> "true"/"false", sequences -> "[a, b]",
    mappings and nested records -> compact JSON.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(to_text(v) for v in value) + "]"
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = dataclasses.asdict(value)
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
    return str(value)


def accessor(schema: Schema, name: str, operation: Optional[str] = None) -> FieldSpec:
    spec = schema.resolve(name)
    if spec is None:
        raise MissingAccessorError(
            f"class {schema.type_name} has no readable field '{name}'",
            operation=operation,
            key=name,
        )
    return spec


def get_text(schema: Schema, record: Any, name: str, operation: Optional[str] = None) -> str:
    return to_text(accessor(schema, name, operation).get(record))


def matches(schema: Schema, record: Any, name: str, value: Any, operation: Optional[str] = None) -> bool:
    """Case-insensitive match of a field's text form against value. Lists compare as "[a, b]"."""
    current = accessor(schema, name, operation).get(record)
    if current is None:
        return False
    return to_text(current).casefold() == to_text(value).casefold()


def identifier_of(schema: Schema, record: Any, id_key: str) -> str:
    return get_text(schema, record, id_key)
