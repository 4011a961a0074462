from __future__ import annotations
import dataclasses
from typing import Any, Callable, Dict, Mapping

from .schema import Schema

Condition = Callable[[Any], bool]

OPS = {"$eq", "$ne", "$gt", "$gte", "$lt", "$lte", "$in", "$nin", "$contains"}


def _lookup(obj: Any, key: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(key)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        spec = Schema.for_type(type(obj)).resolve(key)
        return spec.get(obj) if spec is not None else None
    return getattr(obj, key, None)


def _is_op_dict(v: Any) -> bool:
    return isinstance(v, Mapping) and bool(v) and all(isinstance(k, str) and k.startswith("$") for k in v)


def _check(query: Mapping[str, Any]) -> None:
    for k, v in query.items():
        if not isinstance(k, str) or k.startswith("$"):
            raise ValueError(f"unsupported top-level operator or key: {k!r}")
        if _is_op_dict(v):
            unknown = set(v) - OPS
            if unknown:
                raise ValueError(f"unsupported operator(s) for '{k}': {', '.join(sorted(unknown))}")
            for op in ("$in", "$nin"):
                if op in v and not isinstance(v[op], (list, tuple, set, frozenset)):
                    raise ValueError(f"{op} for '{k}' needs a list of values")
        elif isinstance(v, Mapping):
            _check(v)


def _compare(op: str, val: Any, arg: Any) -> bool:
    if op == "$eq":
        return val == arg
    if op == "$ne":
        return val != arg
    if op == "$in":
        return val in arg
    if op == "$nin":
        return val not in arg
    if op == "$contains":
        if isinstance(val, (list, tuple)):
            return arg in val
        if isinstance(val, str):
            return str(arg) in val
        return False
    if val is None:
        return False
    try:
        if op == "$gt":
            return val > arg
        if op == "$gte":
            return val >= arg
        if op == "$lt":
            return val < arg
        return val <= arg
    except TypeError:
        return False


def _match(obj: Any, query: Mapping[str, Any]) -> bool:
    for k, v in query.items():
        val = _lookup(obj, k)
        if _is_op_dict(v):
            if not all(_compare(op, val, arg) for op, arg in v.items()):
                return False
        elif isinstance(v, Mapping):
            if val is None or isinstance(val, (str, int, float, bool, list, tuple)):
                return False
            if not _match(val, v):
                return False
        elif val != v:
            return False
    return True


def compile_query(query: Mapping[str, Any]) -> Condition:
    """
    Turn a mapping query into a condition over records.

    Supports:
      - equality on fields: {"city": "New York"}
      - nested records/dicts: {"address": {"city": "Wien"}}
      - operators: $eq/$ne/$gt/$gte/$lt/$lte/$in/$nin/$contains
    An empty query matches every record.
    """
    if not isinstance(query, Mapping):
        raise TypeError(f"query must be a mapping, got {type(query).__name__}")
    frozen: Dict[str, Any] = dict(query)
    _check(frozen)

    def condition(record: Any) -> bool:
        return _match(record, frozen)

    condition.query = frozen  # type: ignore[attr-defined]
    return condition


def where(**criteria: Any) -> Condition:
    """Equality shorthand: where(city="New York", name="John")."""
    return compile_query(criteria)
