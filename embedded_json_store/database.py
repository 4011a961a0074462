from __future__ import annotations
import logging
import os
from typing import Any, Iterable, List, Mapping, Optional, Union

from .codec import JsonCodec
from .config import StoreConfig
from .deleter import DeleteHandler
from .handler import StoreContext
from .inserter import InsertHandler
from .progress import Progress, ProgressCallback
from .query import Condition
from .schema import Schema
from .selector import SelectHandler
from .storage import FileStorage
from .updater import UpdateHandler, _UNSET
from .validator import ensure_collection_readable, ensure_identifier_field_valid, ensure_json_path

log = logging.getLogger(__name__)

ConditionLike = Union[Condition, Mapping[str, Any]]


class JsonStore:
    """
    A typed collection of records persisted as one JSON array in one file.

    Every call re-reads the file; mutating calls rewrite it completely.
    Conditions are plain callables taking a record (or mapping queries, see
    ``query.compile_query``).

        store = JsonStore("people.json", Person, id_key="id", create_if_missing=True)
        store.insert(Person(id="1", name="John", city="New York"))
        store.select_by_key("city", "new york")
    """

    def __init__(
        self,
        path: Union[str, "os.PathLike[str]"],
        record_type: Optional[type] = None,
        id_key: Optional[str] = None,
        *,
        create_if_missing: bool = False,
        indent: Optional[int] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.config = StoreConfig(
            path=path,
            record_type=record_type,
            id_key=id_key,
            create_if_missing=create_if_missing,
            indent=indent,
        )
        self._progress = Progress(on_progress)
        self._open()

    @classmethod
    def from_config(cls, config: StoreConfig, on_progress: Optional[ProgressCallback] = None) -> "JsonStore":
        return cls(
            config.path,
            config.record_type,
            config.id_key,
            create_if_missing=config.create_if_missing,
            indent=config.indent,
            on_progress=on_progress,
        )

    def _open(self) -> None:
        cfg = self.config
        cfg.validate()
        self._progress.start("open")
        log.info("Building JsonStore with path %s and record type %s.", cfg.path, cfg.record_type)

        self.schema = Schema.for_type(cfg.record_type)
        self.id_key: Optional[str] = None
        if cfg.identifier is not None:
            self.id_key = ensure_identifier_field_valid(self.schema, cfg.identifier)

        self._fs = FileStorage(cfg.path)
        if cfg.create_if_missing and not self._fs.exists():
            ensure_json_path(self._fs.path)
            self._fs.create()
        ensure_collection_readable(self._fs, operation="open")

        ctx = StoreContext(
            storage=self._fs,
            schema=self.schema,
            codec=JsonCodec(self.schema, indent=cfg.indent),
            id_key=self.id_key,
            progress=self._progress,
        )
        self._select = SelectHandler(ctx)
        self._insert = InsertHandler(ctx)
        self._update = UpdateHandler(ctx)
        self._delete = DeleteHandler(ctx)

        log.info("JsonStore building completed!")
        self._progress.done("open")

    @property
    def path(self) -> str:
        return self._fs.path

    @property
    def record_type(self) -> type:
        return self.schema.record_type

    def __repr__(self) -> str:
        return f"JsonStore(path={self.path!r}, record_type={self.schema.type_name}, id_key={self.id_key!r})"

    # ----- select -----

    def select_all(self) -> List[Any]:
        return self._select.select_all()

    def select_by_id(self, rec_id: Any) -> Optional[Any]:
        return self._select.select_by_id(rec_id)

    def select_by_key(self, key: str, value: Any) -> List[Any]:
        return self._select.select_by_key(key, value)

    def select_where(self, condition: ConditionLike) -> List[Any]:
        return self._select.select_where(condition)

    def select_key(self, key: str) -> List[List[str]]:
        return self._select.select_key(key)

    def select_keys(self, *keys: str) -> List[List[str]]:
        return self._select.select_keys(*keys)

    # ----- insert -----

    def insert(self, record: Any) -> None:
        self._insert.insert(record)

    def insert_multiple(self, records: Iterable[Any]) -> None:
        self._insert.insert_multiple(records)

    # ----- update -----

    def update_key(self, key: str, new_value: Any) -> bool:
        return self._update.update_key(key, new_value)

    def update_by_id(self, rec_id: Any, new_record: Any) -> bool:
        return self._update.update_by_id(rec_id, new_record)

    def update_where(self, condition: ConditionLike, key_or_updates: Any, new_value: Any = _UNSET) -> bool:
        return self._update.update_where(condition, key_or_updates, new_value)

    # ----- delete -----

    def delete_all(self) -> bool:
        return self._delete.delete_all()

    def delete_by_id(self, rec_id: Any) -> bool:
        return self._delete.delete_by_id(rec_id)

    def delete_by_key(self, key: str, value: Any) -> bool:
        return self._delete.delete_by_key(key, value)

    def delete_where(self, condition: ConditionLike) -> bool:
        return self._delete.delete_where(condition)
