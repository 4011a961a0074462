from __future__ import annotations
import logging
from typing import Any, List, Optional

from .errors import AmbiguousIdError
from .fields import matches, to_text
from .handler import BaseHandler, operation
from .query import Condition
from .validator import ensure_field_exists

log = logging.getLogger(__name__)


class SelectHandler(BaseHandler):
    """Read-only queries. Each call loads a fresh snapshot of the file."""

    @operation("select_all")
    def select_all(self) -> List[Any]:
        return self.load()

    @operation("select_by_id")
    def select_by_id(self, rec_id: Any) -> Optional[Any]:
        self.require_id_key()
        records = self.load()
        hits = self.positions_of(records, rec_id)
        if len(hits) > 1:
            raise AmbiguousIdError(
                f"multiple ({len(hits)}) objects with id '{rec_id}' found",
                id=rec_id,
                count=len(hits),
            )
        if not hits:
            log.warning("Object with id %s not found.", rec_id)
            return None
        log.info("Object with ID %s found.", rec_id)
        return records[hits[0]]

    @operation("select_by_key")
    def select_by_key(self, key: str, value: Any) -> List[Any]:
        spec = ensure_field_exists(self.schema, key)
        found = [r for r in self.load() if matches(self.schema, r, spec.name, value)]
        if not found:
            log.warning("Objects where %s = '%s' not found.", key, value)
        return found

    @operation("select_where")
    def select_where(self, condition: Condition) -> List[Any]:
        cond = self.as_condition(condition)
        found = [r for r in self.load() if cond(r)]
        if not found:
            log.warning("No objects found that matched the condition.")
        return found

    @operation("select_key")
    def select_key(self, key: str) -> List[List[str]]:
        spec = ensure_field_exists(self.schema, key)
        values: List[List[str]] = []
        for record in self.load():
            value = spec.get(record)
            if isinstance(value, (list, tuple)):
                values.append([to_text(v) for v in value])
            elif value is not None:
                values.append([to_text(value)])
        return values

    @operation("select_keys")
    def select_keys(self, *keys: str) -> List[List[str]]:
        if not keys:
            raise ValueError("select_keys() needs at least one key")
        if len(keys) == 1:
            return self.select_key(keys[0])
        specs = [ensure_field_exists(self.schema, k) for k in keys]
        grouped: List[List[str]] = []
        for record in self.load():
            row = []
            for spec in specs:
                value = spec.get(record)
                if value is not None:
                    row.append(to_text(value))
            grouped.append(row)
        return grouped
