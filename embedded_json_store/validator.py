from __future__ import annotations
import os
from typing import Any, Optional

from .errors import (
    IdentifierFieldMissingError,
    IdentifierNotConfiguredError,
    InvalidIdentifierTypeError,
    StoreConfigError,
    StoreNotFoundError,
    TypeMismatchError,
)
from .schema import FieldSpec, Schema
from .storage import FileStorage

# Identifier fields must hold text or numbers
_ID_TAGS = {"str", "int", "float"}


def ensure_collection_readable(storage: FileStorage, operation: Optional[str] = None) -> None:
    if not storage.exists():
        raise StoreNotFoundError(
            f"JSON file {os.path.basename(storage.path)} does not exist in path "
            f"{os.path.abspath(storage.path)}",
            operation=operation,
            path=storage.path,
        )


def ensure_field_exists(schema: Schema, name: str, operation: Optional[str] = None) -> FieldSpec:
    return schema.require(name, operation)


def ensure_identifier_configured(id_key: Optional[str], operation: Optional[str] = None) -> str:
    if id_key is None or not id_key.strip():
        raise IdentifierNotConfiguredError(
            "id_key is not set; pass id_key= when opening the store",
            operation=operation,
        )
    return id_key


def ensure_type_matches(record_type: type, record: Any, operation: Optional[str] = None) -> None:
    if not isinstance(record, record_type):
        raise TypeMismatchError(
            f"invalid type: expected '{record_type.__name__}' but got '{type(record).__name__}'",
            operation=operation,
            expected=record_type,
            actual=type(record),
        )
    if type(record) is not record_type:
        # Extra subclass fields would be written to disk and break every later load
        extra = [n for n in Schema.for_type(type(record)).names if n not in Schema.for_type(record_type)]
        if extra:
            raise TypeMismatchError(
                f"invalid type: '{type(record).__name__}' declares fields {extra} "
                f"not present in '{record_type.__name__}'",
                operation=operation,
                expected=record_type,
                actual=type(record),
                extra=extra,
            )


def ensure_identifier_field_valid(schema: Schema, id_key: str) -> str:
    """Check the identifier field at store construction; returns its canonical name."""
    spec = schema.resolve(id_key)
    if spec is None:
        raise IdentifierFieldMissingError(
            f"the specified id_key '{id_key}' does not exist in the class '{schema.type_name}'",
            operation="open",
            key=id_key,
        )
    if spec.type not in _ID_TAGS:
        raise InvalidIdentifierTypeError(
            f"the id_key '{id_key}' is of type '{spec.type}', but only str or numeric types are allowed",
            operation="open",
            key=id_key,
            field_type=spec.type,
        )
    return spec.name


def ensure_json_path(path: str) -> None:
    if not os.fspath(path).endswith(".json"):
        raise StoreConfigError("the file must be a JSON file (*.json)", operation="open", path=path)
