from __future__ import annotations
import logging
from typing import Any

from .errors import AmbiguousIdError
from .fields import matches
from .handler import BaseHandler, operation
from .query import Condition
from .validator import ensure_collection_readable, ensure_field_exists

log = logging.getLogger(__name__)


class DeleteHandler(BaseHandler):

    @operation("delete_all")
    def delete_all(self) -> bool:
        ensure_collection_readable(self.ctx.storage)
        self.save([])
        log.info("All objects deleted successfully.")
        return True

    @operation("delete_by_id")
    def delete_by_id(self, rec_id: Any) -> bool:
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
            return False
        del records[hits[0]]
        self.save(records)
        log.info("Object with ID %s deleted successfully.", rec_id)
        return True

    @operation("delete_by_key")
    def delete_by_key(self, key: str, value: Any) -> bool:
        spec = ensure_field_exists(self.schema, key)
        records = self.load()
        kept = [r for r in records if not matches(self.schema, r, spec.name, value)]
        removed = len(records) - len(kept)
        if not removed:
            log.warning("Objects where %s = '%s' not found.", key, value)
            return False
        self.save(kept)
        log.info("Deleted %d object(s) where %s = '%s'.", removed, key, value)
        return True

    @operation("delete_where")
    def delete_where(self, condition: Condition) -> bool:
        cond = self.as_condition(condition)
        records = self.load()
        kept = [r for r in records if not cond(r)]
        removed = len(records) - len(kept)
        if not removed:
            log.warning("No objects found that matched the condition.")
            return False
        self.save(kept)
        log.info("Deleted %d objects that matched the condition.", removed)
        return True
