"""Embedded JSON-file record store: a typed collection in one JSON array on disk."""

import logging

from .config import StoreConfig
from .database import JsonStore
from .errors import (
    AmbiguousIdError,
    CodecError,
    ConflictError,
    DuplicateIdError,
    EmptyIdentifierError,
    IdentifierFieldMissingError,
    IdentifierMismatchError,
    IdentifierNotConfiguredError,
    InvalidIdentifierTypeError,
    JsonStoreError,
    MissingAccessorError,
    StoreConfigError,
    StoreNotFoundError,
    TypeMismatchError,
    UnknownFieldError,
    ValidationError,
)
from .query import compile_query, where
from .schema import FieldSpec, Schema

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "JsonStore",
    "StoreConfig",
    "Schema",
    "FieldSpec",
    "compile_query",
    "where",
    # errors
    "JsonStoreError",
    "StoreConfigError",
    "IdentifierFieldMissingError",
    "InvalidIdentifierTypeError",
    "StoreNotFoundError",
    "ValidationError",
    "UnknownFieldError",
    "MissingAccessorError",
    "TypeMismatchError",
    "IdentifierNotConfiguredError",
    "EmptyIdentifierError",
    "IdentifierMismatchError",
    "ConflictError",
    "DuplicateIdError",
    "AmbiguousIdError",
    "CodecError",
]

__version__ = "0.1.0"
