from __future__ import annotations
import dataclasses
import logging
from collections import Counter
from typing import Any, Dict, Iterable, List, Mapping

from .errors import AmbiguousIdError, DuplicateIdError, EmptyIdentifierError, IdentifierMismatchError
from .fields import to_text
from .handler import BaseHandler, operation
from .query import Condition
from .validator import ensure_field_exists, ensure_type_matches

log = logging.getLogger(__name__)

_UNSET = object()


class UpdateHandler(BaseHandler):
    """
    Field-level updates go record -> tree -> edited tree -> record, so the
    codec coerces text values back into the declared field types. Every call
    reads the file once and writes it at most once.
    """

    @operation("update_key")
    def update_key(self, key: str, new_value: Any) -> bool:
        spec = ensure_field_exists(self.schema, key)
        records = self.load()
        changed = self._apply(records, range(len(records)), {spec.name: new_value})
        if not changed:
            return False
        self.save(records)
        log.info("Updated %d object(s) by setting key '%s' to value '%s'.", len(changed), spec.name, new_value)
        return True

    @operation("update_by_id")
    def update_by_id(self, rec_id: Any, new_record: Any) -> bool:
        self.require_id_key()
        ensure_type_matches(self.schema.record_type, new_record)
        wanted = to_text(rec_id)
        new_id = self.id_of(new_record)
        if new_id != wanted:
            raise IdentifierMismatchError(
                f"the id of the updated object does not match the provided id: expected '{wanted}', but got '{new_id}'",
                id=rec_id,
                value=new_id,
            )
        records = self.load()
        hits = self.positions_of(records, rec_id)
        if not hits:
            log.warning("Object with id %s not found.", rec_id)
            return False
        if len(hits) > 1:
            raise AmbiguousIdError(
                f"multiple ({len(hits)}) objects with id '{rec_id}' found",
                id=rec_id,
                count=len(hits),
            )
        records[hits[0]] = new_record
        self.save(records)
        log.info("Object with ID '%s' updated successfully.", rec_id)
        return True

    @operation("update_where")
    def update_where(self, condition: Condition, key_or_updates: Any, new_value: Any = _UNSET) -> bool:
        """
        update_where(condition, key, new_value) sets one field on matching records;
        update_where(condition, {field: value, ...}) sets several.
        """
        if isinstance(key_or_updates, Mapping):
            if new_value is not _UNSET:
                raise TypeError("new_value cannot be combined with a mapping of updates")
            updates = dict(key_or_updates)
        else:
            if new_value is _UNSET:
                raise TypeError("update_where() needs new_value when a single key is given")
            updates = {key_or_updates: new_value}
        # Validate every name before touching any record
        resolved: Dict[str, Any] = {ensure_field_exists(self.schema, k).name: v for k, v in updates.items()}
        cond = self.as_condition(condition)

        records = self.load()
        hits = [i for i, r in enumerate(records) if cond(r)]
        if not hits:
            log.warning("No objects found that matched the condition.")
            return False
        changed = self._apply(records, hits, resolved)
        if not changed:
            return False
        self.save(records)
        log.info("Updated %d object(s) by setting %s where condition matched.", len(changed), resolved)
        return True

    # ----- internals -----

    def _stored(self, value: Any) -> Any:
        # Sequences and structured values replace the field wholesale; scalars are stored as text
        if value is None:
            return None
        if isinstance(value, (list, tuple, set, frozenset, dict)) or (
            dataclasses.is_dataclass(value) and not isinstance(value, type)
        ):
            return self.codec.plain(value)
        return to_text(value)

    def _apply(self, records: List[Any], positions: Iterable[int], updates: Dict[str, Any]) -> List[int]:
        if not updates:
            return []
        changed: List[int] = []
        for i in positions:
            tree = self.codec.to_tree(records[i])
            for name, value in updates.items():
                tree[name] = self._stored(value)
            records[i] = self.codec.from_tree(tree)
            changed.append(i)
        id_key = self.ctx.id_key
        if id_key and changed and id_key in updates:
            self._ensure_unique_ids(records, changed)
        return changed

    def _ensure_unique_ids(self, records: List[Any], changed: List[int]) -> None:
        counts = Counter(self.id_of(r) for r in records)
        for i in changed:
            rec_id = self.id_of(records[i])
            if not rec_id.strip():
                raise EmptyIdentifierError("id cannot be empty or None", key=self.ctx.id_key)
            if counts[rec_id] > 1:
                raise DuplicateIdError(
                    f"duplicate value found for '{rec_id}' on key '{self.ctx.id_key}'; each value must be unique",
                    key=self.ctx.id_key,
                    id=rec_id,
                )
