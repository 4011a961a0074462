from __future__ import annotations
import functools
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional, TypeVar

from .codec import JsonCodec
from .errors import JsonStoreError
from .fields import identifier_of, to_text
from .progress import Progress
from .query import Condition, compile_query
from .schema import Schema
from .storage import FileStorage
from .validator import ensure_collection_readable, ensure_identifier_configured

log = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


@dataclass
class StoreContext:
    """State shared by the select/insert/update/delete handlers of one store."""
    storage: FileStorage
    schema: Schema
    codec: JsonCodec
    id_key: Optional[str] = None
    progress: Progress = field(default_factory=Progress)
    lock: threading.RLock = field(default_factory=threading.RLock)


def operation(name: str) -> Callable[[F], F]:
    """
    Wrap a public handler method: hold the store lock for the whole
    read-modify-write, report start/done progress, and tag any store error
    with the operation name.
    """
    def deco(fn: F) -> F:
        @functools.wraps(fn)
        def wrapper(self: "BaseHandler", *args: Any, **kwargs: Any) -> Any:
            with self.ctx.lock:
                self.ctx.progress.start(name)
                try:
                    result = fn(self, *args, **kwargs)
                except JsonStoreError as e:
                    if e.operation is None:
                        e.operation = name
                    raise
                self.ctx.progress.done(name)
                return result
        return wrapper  # type: ignore[return-value]
    return deco


class BaseHandler:
    """
    Common plumbing for the operation handlers. ``load`` and ``save`` are the
    only paths to the backing file: one full read before, one full rewrite
    after a mutation.
    """

    def __init__(self, ctx: StoreContext) -> None:
        self.ctx = ctx

    @property
    def schema(self) -> Schema:
        return self.ctx.schema

    @property
    def codec(self) -> JsonCodec:
        return self.ctx.codec

    # ----- persistence gate -----

    def load(self) -> List[Any]:
        ensure_collection_readable(self.ctx.storage)
        data = self.ctx.storage.read_bytes()
        records = self.codec.load_records(data)
        log.debug("loaded %d record(s) from %s", len(records), self.ctx.storage.path)
        return records

    def save(self, records: List[Any]) -> None:
        data = self.codec.dump_records(records)
        self.ctx.storage.write_bytes(data)
        log.debug("saved %d record(s) to %s", len(records), self.ctx.storage.path)

    # ----- identifier helpers -----

    def require_id_key(self) -> str:
        return ensure_identifier_configured(self.ctx.id_key)

    def id_of(self, record: Any) -> str:
        return identifier_of(self.schema, record, self.require_id_key())

    def positions_of(self, records: List[Any], rec_id: Any) -> List[int]:
        wanted = to_text(rec_id)
        return [i for i, r in enumerate(records) if self.id_of(r) == wanted]

    # ----- conditions -----

    @staticmethod
    def as_condition(condition: Any) -> Condition:
        if isinstance(condition, Mapping):
            return compile_query(condition)
        if not callable(condition):
            raise TypeError(f"condition must be callable or a mapping query, got {type(condition).__name__}")
        return condition
