from __future__ import annotations
import dataclasses
import operator
import types
import typing
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from .errors import StoreConfigError, UnknownFieldError

_SCALAR_TAGS = {str: "str", int: "int", float: "float", bool: "bool"}
_SEQUENCE_ORIGINS = (list, tuple, set, frozenset)


def _unwrap_optional(hint: Any) -> Any:
    origin = typing.get_origin(hint)
    if origin is Union or origin is types.UnionType:
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        return args[0] if len(args) == 1 else Any
    return hint


def classify_hint(hint: Any) -> Tuple[str, Any, Optional[type]]:
    """
    Map a type hint to (tag, item_hint, nested_type).
    Tags: str, int, float, bool, list, dict, object, any.
    """
    hint = _unwrap_optional(hint)
    if hint is Any or isinstance(hint, str):
        return "any", None, None
    if hint in _SCALAR_TAGS:
        return _SCALAR_TAGS[hint], None, None
    origin = typing.get_origin(hint)
    if hint in _SEQUENCE_ORIGINS or origin in _SEQUENCE_ORIGINS:
        args = typing.get_args(hint)
        return "list", (args[0] if args else Any), None
    if hint is dict or origin is dict:
        return "dict", None, None
    if isinstance(hint, type) and dataclasses.is_dataclass(hint):
        return "object", None, hint
    return "any", None, None


@dataclass(frozen=True)
class FieldSpec:
    name: str
    type: str
    hint: Any
    item_hint: Any
    nested: Optional[type]
    init: bool
    has_default: bool
    getter: Callable[[Any], Any]
    setter: Callable[[Any, Any], None]

    def get(self, record: Any) -> Any:
        return self.getter(record)

    def set(self, record: Any, value: Any) -> None:
        self.setter(record, value)


def _make_setter(name: str) -> Callable[[Any, Any], None]:
    # object.__setattr__ so frozen dataclasses can be populated too
    def _set(record: Any, value: Any) -> None:
        object.__setattr__(record, name, value)
    return _set


class Schema:
    """
    Field accessor registry for one declared record type.

    Built once per dataclass (see ``for_type``); maps the lower-cased field
    name to a ``FieldSpec`` with typed get/set functions, so the rest of the
    store can read and write fields by name without touching the class again.
    """

    def __init__(self, record_type: type) -> None:
        if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
            raise StoreConfigError(
                f"record type must be a dataclass, got {record_type!r}",
                record_type=record_type,
            )
        self.record_type = record_type
        self._fields: Dict[str, FieldSpec] = {}
        try:
            hints = typing.get_type_hints(record_type)
        except (NameError, TypeError):
            hints = {f.name: f.type for f in dataclasses.fields(record_type)}
        for f in dataclasses.fields(record_type):
            key = f.name.lower()
            if key in self._fields:
                raise StoreConfigError(
                    f"fields '{self._fields[key].name}' and '{f.name}' of {self.type_name} "
                    "differ only in case",
                    key=f.name,
                )
            hint = hints.get(f.name, Any)
            tag, item_hint, nested = classify_hint(hint)
            self._fields[key] = FieldSpec(
                name=f.name,
                type=tag,
                hint=hint,
                item_hint=item_hint,
                nested=nested,
                init=f.init,
                has_default=(
                    f.default is not dataclasses.MISSING
                    or f.default_factory is not dataclasses.MISSING
                ),
                getter=operator.attrgetter(f.name),
                setter=_make_setter(f.name),
            )

    @classmethod
    def for_type(cls, record_type: type) -> "Schema":
        if not isinstance(record_type, type):
            return cls(record_type)  # raises StoreConfigError
        return _schema_for(record_type)

    @property
    def type_name(self) -> str:
        return self.record_type.__name__

    @property
    def fields(self) -> List[FieldSpec]:
        return list(self._fields.values())

    @property
    def names(self) -> List[str]:
        return [spec.name for spec in self._fields.values()]

    def resolve(self, name: Any) -> Optional[FieldSpec]:
        if not isinstance(name, str):
            return None
        return self._fields.get(name.lower())

    def require(self, name: Any, operation: Optional[str] = None) -> FieldSpec:
        spec = self.resolve(name)
        if spec is None:
            raise UnknownFieldError(
                f"the key '{name}' does not exist in class '{self.type_name}'",
                operation=operation,
                key=name,
            )
        return spec

    def __contains__(self, name: object) -> bool:
        return self.resolve(name) is not None

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self._fields.values())

    def __repr__(self) -> str:
        return f"Schema({self.type_name}: {', '.join(self.names)})"


@lru_cache(maxsize=None)
def _schema_for(record_type: type) -> Schema:
    return Schema(record_type)
