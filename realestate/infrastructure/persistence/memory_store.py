"""In-memory document store (one per collection).

Implements IDocumentStore over a dict keyed by record id. Records are
deep-copied on the way in and out so callers never share state with the
store. Used by tests and for running the services without a database.
"""

from __future__ import annotations

import asyncio
import copy
import dataclasses
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar

from realestate.application.interfaces.repositories import (
    Condition,
    ConditionOp,
    DeleteResult,
    InsertResult,
    UpdateResult,
)
from realestate.domain.exceptions import StoreException

RecordT = TypeVar("RecordT")

logger = logging.getLogger(__name__)


def matches(record: Any, condition: Condition) -> bool:
    """Evaluate one condition against a record (None never matches contains/gte/lte)."""
    actual = getattr(record, condition.field)
    if condition.op == ConditionOp.EQ:
        return actual == condition.value
    if actual is None:
        return False
    if condition.op == ConditionOp.CONTAINS:
        return str(condition.value).lower() in str(actual).lower()
    if condition.op == ConditionOp.GTE:
        return actual >= condition.value
    if condition.op == ConditionOp.LTE:
        return actual <= condition.value
    raise ValueError(f"Unsupported condition operator: {condition.op}")


class InMemoryDocumentStore(Generic[RecordT]):
    """Dict-backed IDocumentStore for dataclass records with an ``id`` field."""

    def __init__(self, record_type: type[RecordT], name: str | None = None) -> None:
        self.record_type = record_type
        self.name = name or record_type.__name__
        self._field_names = frozenset(f.name for f in dataclasses.fields(record_type))
        self._records: dict[str, RecordT] = {}
        self._lock = asyncio.Lock()

    def _check_fields(self, operation: str, names: Sequence[str]) -> None:
        unknown = [n for n in names if n not in self._field_names]
        if unknown:
            raise StoreException(operation, f"unknown field(s) on {self.name}: {', '.join(unknown)}")

    def _filter(self, conditions: Sequence[Condition]) -> list[RecordT]:
        self._check_fields("find", [c.field for c in conditions])
        rows = [
            r for r in self._records.values() if all(matches(r, c) for c in conditions)
        ]
        return sorted(rows, key=lambda r: getattr(r, "id"))

    async def find(
        self,
        conditions: Sequence[Condition] = (),
        *,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[RecordT]:
        async with self._lock:
            rows = self._filter(conditions)
        end = None if limit is None else skip + limit
        return [copy.deepcopy(r) for r in rows[skip:end]]

    async def find_one(self, conditions: Sequence[Condition]) -> RecordT | None:
        async with self._lock:
            rows = self._filter(conditions)
        return copy.deepcopy(rows[0]) if rows else None

    async def insert_one(self, record: RecordT) -> InsertResult:
        record_id = getattr(record, "id")
        async with self._lock:
            if record_id in self._records:
                raise StoreException("insert_one", f"duplicate id {record_id!r} in {self.name}")
            self._records[record_id] = copy.deepcopy(record)
        return InsertResult(acknowledged=True, inserted_id=record_id)

    async def replace_one(self, record_id: str, record: RecordT) -> UpdateResult:
        async with self._lock:
            current = self._records.get(record_id)
            if current is None:
                return UpdateResult(acknowledged=True)
            replacement = copy.deepcopy(record)
            replacement.id = record_id  # type: ignore[attr-defined]
            modified = int(replacement != current)
            self._records[record_id] = replacement
        return UpdateResult(acknowledged=True, matched_count=1, modified_count=modified)

    async def update_one(self, record_id: str, fields: Mapping[str, Any]) -> UpdateResult:
        self._check_fields("update_one", list(fields))
        if "id" in fields and fields["id"] != record_id:
            raise StoreException("update_one", "id cannot be changed")
        async with self._lock:
            current = self._records.get(record_id)
            if current is None:
                return UpdateResult(acknowledged=True)
            updated = dataclasses.replace(current, **copy.deepcopy(dict(fields)))
            modified = int(updated != current)
            self._records[record_id] = updated
        return UpdateResult(acknowledged=True, matched_count=1, modified_count=modified)

    async def delete_one(self, record_id: str) -> DeleteResult:
        async with self._lock:
            removed = self._records.pop(record_id, None)
        return DeleteResult(acknowledged=True, deleted_count=0 if removed is None else 1)

    async def delete_many(self, conditions: Sequence[Condition]) -> DeleteResult:
        async with self._lock:
            doomed = [getattr(r, "id") for r in self._filter(conditions)]
            for record_id in doomed:
                del self._records[record_id]
        if doomed:
            logger.debug("Deleted %d record(s) from %s", len(doomed), self.name)
        return DeleteResult(acknowledged=True, deleted_count=len(doomed))
