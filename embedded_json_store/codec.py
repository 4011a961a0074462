from __future__ import annotations
import dataclasses
import json
from typing import Any, Dict, Iterable, List, Optional

from .errors import CodecError
from .fields import to_text
from .schema import Schema, classify_hint

_TRUE_FALSE = {"true": True, "false": False}


class JsonCodec:
    """
    Converts between the on-disk JSON array and records of the declared type.

    Records go through an intermediate "tree" (plain dicts/lists/scalars in
    field declaration order). Update paths edit the tree and bind it back,
    which also coerces text values into the declared field types.
    """

    def __init__(self, schema: Schema, indent: Optional[int] = None) -> None:
        self.schema = schema
        self.indent = indent

    # ----- bytes <-> trees -----

    def decode(self, data: bytes) -> List[Dict[str, Any]]:
        if not data.strip():
            return []
        try:
            obj = json.loads(data.decode("utf-8-sig"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CodecError(f"failed to read or parse the JSON file: {e}") from e
        if not isinstance(obj, list):
            raise CodecError(f"expected a JSON array at top level, got {type(obj).__name__}")
        for i, item in enumerate(obj):
            if not isinstance(item, dict):
                raise CodecError(f"element {i} is not a JSON object", index=i)
        return obj

    def encode(self, trees: Iterable[Dict[str, Any]]) -> bytes:
        separators = None if self.indent is not None else (",", ":")
        try:
            text = json.dumps(list(trees), ensure_ascii=False, indent=self.indent, separators=separators)
        except (TypeError, ValueError) as e:
            raise CodecError(f"failed to serialize records: {e}") from e
        return text.encode("utf-8")

    # ----- records <-> trees -----

    def to_tree(self, record: Any) -> Dict[str, Any]:
        return self._tree_of(Schema.for_type(type(record)), record)

    def from_tree(self, tree: Dict[str, Any]) -> Any:
        return self._bind(self.schema, tree, self.schema.type_name)

    def plain(self, value: Any) -> Any:
        """Plain JSON-compatible form of an arbitrary value (nested records become dicts)."""
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return self.to_tree(value)
        if isinstance(value, (list, tuple, set, frozenset)):
            return [self.plain(v) for v in value]
        if isinstance(value, dict):
            return {str(k): self.plain(v) for k, v in value.items()}
        return value

    # ----- whole collection -----

    def load_records(self, data: bytes) -> List[Any]:
        return [self.from_tree(tree) for tree in self.decode(data)]

    def dump_records(self, records: Iterable[Any]) -> bytes:
        return self.encode(self.to_tree(r) for r in records)

    # ----- internals -----

    def _tree_of(self, schema: Schema, record: Any) -> Dict[str, Any]:
        return {spec.name: self.plain(spec.get(record)) for spec in schema}

    def _bind(self, schema: Schema, tree: Dict[str, Any], where: str) -> Any:
        init_kwargs: Dict[str, Any] = {}
        late = []
        for key, raw in tree.items():
            spec = schema.resolve(key)
            if spec is None:
                raise CodecError(f"unknown field '{key}' for class {schema.type_name}", key=key)
            if spec.name in init_kwargs or any(s.name == spec.name for s, _ in late):
                raise CodecError(f"field '{spec.name}' appears more than once in {where}", key=key)
            value = self._coerce(spec.type, spec.item_hint, spec.nested, raw, f"{where}.{spec.name}")
            if spec.init:
                init_kwargs[spec.name] = value
            else:
                late.append((spec, value))
        for spec in schema:
            if spec.init and spec.name not in init_kwargs and not spec.has_default:
                init_kwargs[spec.name] = None
        try:
            record = schema.record_type(**init_kwargs)
        except (TypeError, ValueError) as e:
            raise CodecError(f"cannot build {schema.type_name} from {where}: {e}") from e
        for spec, value in late:
            spec.set(record, value)
        return record

    def _coerce(self, tag: str, item_hint: Any, nested: Optional[type], value: Any, where: str) -> Any:
        if value is None or tag == "any":
            return value
        if tag == "str":
            if isinstance(value, str):
                return value
            if isinstance(value, (bool, int, float)):
                return to_text(value)
        elif tag == "int":
            if isinstance(value, int) and not isinstance(value, bool):
                return value
            if isinstance(value, float) and value.is_integer():
                return int(value)
            if isinstance(value, str):
                try:
                    return int(value.strip())
                except ValueError:
                    pass
        elif tag == "float":
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return float(value)
            if isinstance(value, str):
                try:
                    return float(value.strip())
                except ValueError:
                    pass
        elif tag == "bool":
            if isinstance(value, bool):
                return value
            if isinstance(value, str) and value.strip().lower() in _TRUE_FALSE:
                return _TRUE_FALSE[value.strip().lower()]
        elif tag == "list":
            if isinstance(value, (list, tuple)):
                i_tag, i_item, i_nested = classify_hint(item_hint)
                return [
                    self._coerce(i_tag, i_item, i_nested, v, f"{where}[{i}]")
                    for i, v in enumerate(value)
                ]
        elif tag == "dict":
            if isinstance(value, dict):
                return dict(value)
        elif tag == "object":
            if isinstance(value, nested):
                return value
            if isinstance(value, dict):
                return self._bind(Schema.for_type(nested), value, where)
        raise CodecError(
            f"cannot convert {value!r} to {tag} at {where}",
            key=where,
            value=value,
        )
