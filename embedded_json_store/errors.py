from __future__ import annotations
from typing import Any, Optional


class JsonStoreError(Exception):
    """
    Base error of the store. Carries the name of the operation that raised it
    (filled in by the handler when the raising code did not know it) and any
    offending key/id/value as keyword details.
    """

    def __init__(self, message: str, *, operation: Optional[str] = None, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.details = details
        for k, v in details.items():
            setattr(self, k, v)

    def __str__(self) -> str:
        if self.operation:
            return f"[{self.operation}] {self.message}"
        return self.message


class StoreConfigError(JsonStoreError):
    pass


class IdentifierFieldMissingError(StoreConfigError):
    pass


class InvalidIdentifierTypeError(StoreConfigError):
    pass


class StoreNotFoundError(JsonStoreError):
    pass


class ValidationError(JsonStoreError):
    pass


class UnknownFieldError(ValidationError):
    pass


class MissingAccessorError(UnknownFieldError):
    pass


class TypeMismatchError(ValidationError):
    pass


class IdentifierNotConfiguredError(ValidationError):
    pass


class EmptyIdentifierError(ValidationError):
    pass


class IdentifierMismatchError(ValidationError):
    pass


class ConflictError(JsonStoreError):
    pass


class DuplicateIdError(ConflictError):
    pass


class AmbiguousIdError(ConflictError):
    pass


class CodecError(JsonStoreError):
    """Reading, writing, decoding or encoding the backing file failed."""
