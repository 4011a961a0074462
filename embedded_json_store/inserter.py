from __future__ import annotations
import logging
from typing import Any, Iterable

from .errors import DuplicateIdError, EmptyIdentifierError
from .handler import BaseHandler, operation
from .validator import ensure_type_matches

log = logging.getLogger(__name__)


class InsertHandler(BaseHandler):

    @operation("insert")
    def insert(self, record: Any) -> None:
        self._insert_one(record)

    @operation("insert_multiple")
    def insert_multiple(self, records: Iterable[Any]) -> None:
        # Each insert commits on its own; a failure stops the batch but keeps earlier inserts
        for record in records:
            self._insert_one(record)

    def _insert_one(self, record: Any) -> None:
        ensure_type_matches(self.schema.record_type, record)
        records = self.load()
        if self.ctx.id_key:
            new_id = self.id_of(record)
            if not new_id.strip():
                raise EmptyIdentifierError("id cannot be empty or None", key=self.ctx.id_key)
            if any(self.id_of(r) == new_id for r in records):
                raise DuplicateIdError(
                    f"duplicate value found for '{new_id}' on key '{self.ctx.id_key}'; each value must be unique",
                    key=self.ctx.id_key,
                    id=new_id,
                )
        records.append(record)
        self.save(records)
        log.info("Object '%s' added successfully.", record)
