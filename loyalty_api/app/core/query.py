"""
Fluent query builder over the in-memory store.

``QueryBuilder`` mimics the subset of a SQL query builder used by the
services: selection, equality filters, joins along declared
relationships, ordering and mutations with ``returning``.  A builder
describes a pending operation against one table and is evaluated only
when it is awaited (or passed through ``then``/``first``/``count``)::

    rows = await db("wallet_passes").left_join("companies").where("pass_type", "coupon")
    names = await db("companies").then(lambda rows: [r["name"] for r in rows])

Reads are resolved in a fixed order: joins against the table's current
rows, then the conjunctive filter, then ordering, then projection.

Mutations run as soon as they are called and return a
``MutationResult``; its ``returning`` coroutine yields the affected
records.  ``delete`` only marks the builder, so further filters can be
chained before the builder is awaited; ``del_`` deletes and yields the
removed count directly.

Results are always copies: changing a returned record never changes
the store.
"""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .relations import Relationship, find_relationship, resolve_joins
from .tables import Record, Table

if TYPE_CHECKING:  # pragma: no cover
    from .store import Store


logger = logging.getLogger(__name__)

_MISSING = object()
_ALIAS_RE = re.compile(r"\s+as\s+", re.IGNORECASE)


def new_identifier() -> str:
    """Return a time-based, process-unique row identifier."""
    return str(uuid.uuid1())


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def strict_equals(left: Any, right: Any) -> bool:
    """Equality without type coercion.

    Integers and floats compare by value, but booleans only equal
    booleans and strings never equal numbers.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    return type(left) is type(right) and left == right


@dataclass(frozen=True)
class Predicate:
    field: str
    value: Any


@dataclass(frozen=True)
class JoinDescriptor:
    relationship: Relationship
    kind: str  # "inner" or "left"; both resolve as outer joins


@dataclass(frozen=True)
class SortSpec:
    field: str
    direction: str = "asc"

    @property
    def descending(self) -> bool:
        return self.direction == "desc"


def _sort_key(value: Any) -> Tuple[int, Any]:
    # Numbers before strings before anything else, so mixed columns never raise.
    if isinstance(value, (bool, int, float)):
        return 0, value
    if isinstance(value, str):
        return 1, value
    return 2, str(value)


def sort_rows(rows: List[Record], field: str, descending: bool = False) -> List[Record]:
    """Stable sort on ``field``; rows without a value go last in both directions."""
    present = [row for row in rows if row.get(field) is not None]
    absent = [row for row in rows if row.get(field) is None]
    present.sort(key=lambda row: _sort_key(row[field]), reverse=descending)
    return present + absent


Selection = Optional[Tuple[str, str]]  # None selects every field


def project_rows(rows: List[Record], selections: Sequence[Selection]) -> List[Record]:
    """Apply a parsed selection list to ``rows``.

    Fields named in the selection but absent from a row are left out
    of that row rather than filled with ``None``.
    """
    if not selections:
        return rows
    select_all = any(sel is None for sel in selections)
    explicit = [sel for sel in selections if sel is not None]
    projected = []
    for row in rows:
        out = dict(row) if select_all else {}
        for source, alias in explicit:
            if source in row:
                out[alias] = row[source]
        projected.append(out)
    return projected


class MutationResult:
    """Records affected by an executed mutation.

    ``returning`` is the only accessor; it accepts the same field
    entries as ``QueryBuilder.select``.
    """

    def __init__(self, rows: List[Record], parse: Callable[[Sequence[str]], List[Selection]]) -> None:
        self._rows = rows
        self._parse = parse

    async def returning(self, *fields: Union[str, Sequence[str]]) -> List[Record]:
        return project_rows([dict(row) for row in self._rows], self._parse(_flatten(fields)))


def _flatten(fields: Iterable[Union[str, Sequence[str]]]) -> List[str]:
    flat: List[str] = []
    for item in fields:
        if isinstance(item, str):
            flat.append(item)
        else:
            flat.extend(item)
    return flat


class QueryBuilder:
    """A pending read or write against one table of a ``Store``."""

    def __init__(self, store: "Store", table: Table) -> None:
        self._store = store
        self.table = table
        self._selected: List[str] = ["*"]
        self._predicates: List[Predicate] = []
        self._joins: List[JoinDescriptor] = []
        self._sort: Optional[SortSpec] = None
        self._deleting = False

    def __repr__(self) -> str:
        return (
            f"<QueryBuilder {self.table.value} where={len(self._predicates)} "
            f"joins={[j.relationship.target.value for j in self._joins]}>"
        )

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def select(self, *fields: Union[str, Sequence[str]]) -> "QueryBuilder":
        """Record the fields to return.  ``*`` (the default) keeps all fields."""
        self._selected = _flatten(fields) or ["*"]
        return self

    def where(self, field: str, value: Any) -> "QueryBuilder":
        """Add an equality predicate; repeated calls combine with AND."""
        self._predicates.append(Predicate(field, value))
        return self

    def join(self, table: Union[Table, str], *on: str) -> "QueryBuilder":
        return self._add_join(table, on, "inner")

    def left_join(self, table: Union[Table, str], *on: str) -> "QueryBuilder":
        return self._add_join(table, on, "left")

    def order_by(self, field: str, direction: str = "asc") -> "QueryBuilder":
        """Set the sort field; a later call replaces an earlier one."""
        direction = direction.lower()
        if direction not in ("asc", "desc"):
            raise ValueError(f"Sort direction must be 'asc' or 'desc', got {direction!r}")
        self._sort = SortSpec(field, direction)
        return self

    def _add_join(self, table: Union[Table, str], on: Sequence[str], kind: str) -> "QueryBuilder":
        rel = find_relationship(self.table, Table.parse(table), on)
        self._joins.append(JoinDescriptor(rel, kind))
        return self

    def _column(self, name: str) -> str:
        """Map a possibly qualified column name onto a field of the resolved rows."""
        if "." not in name:
            return name
        qualifier, bare = name.split(".", 1)
        if qualifier == self.table.value:
            return bare
        for descriptor in self._joins:
            rel = descriptor.relationship
            if rel.target.value == qualifier and bare in rel.aliases:
                return rel.aliases[bare]
        return name

    def _parse_selection(self, fields: Sequence[str]) -> List[Selection]:
        parsed: List[Selection] = []
        for entry in fields:
            parts = _ALIAS_RE.split(entry.strip(), maxsplit=1)
            source = parts[0]
            if source == "*" or source.endswith(".*"):
                parsed.append(None)
                continue
            column = self._column(source)
            alias = parts[1] if len(parts) > 1 else column
            parsed.append((column, alias))
        return parsed

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def _matches(self, row: Record) -> bool:
        return all(
            strict_equals(row.get(self._column(p.field), _MISSING), p.value)
            for p in self._predicates
        )

    def _joined(self, rows: List[Record]) -> List[Record]:
        if not self._joins:
            return [dict(row) for row in rows]
        return resolve_joins(rows, [j.relationship for j in self._joins], self._store.rows)

    def _resolve(self) -> List[Record]:
        rows = [row for row in self._joined(self._store.rows(self.table)) if self._matches(row)]
        if self._sort is not None:
            rows = sort_rows(rows, self._column(self._sort.field), self._sort.descending)
        return project_rows(rows, self._parse_selection(self._selected))

    def _matching_storage_rows(self) -> List[Record]:
        storage = self._store.rows(self.table)
        return [row for row, view in zip(storage, self._joined(storage)) if self._matches(view)]

    async def _execute(self) -> Any:
        if self._deleting:
            return self._delete_matching()
        return self._resolve()

    def __await__(self):
        return self._execute().__await__()

    async def then(self, transform: Optional[Callable[[List[Record]], Any]] = None) -> Any:
        """Resolve the builder and pass the rows through ``transform``."""
        result = await self
        return transform(result) if transform is not None else result

    async def first(self) -> Optional[Record]:
        if self._deleting:
            raise ValueError("first() cannot be used on a builder marked for delete")
        rows = await self._execute()
        return rows[0] if rows else None

    async def count(self) -> int:
        """Number of matching rows, or of removed rows on a delete."""
        result = await self._execute()
        return result if self._deleting else len(result)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def insert(self, data: Union[Mapping[str, Any], Iterable[Mapping[str, Any]]]) -> MutationResult:
        """Append one record (or several) and return them.

        A fresh ``id`` is generated unless the caller supplies one.
        """
        items = [data] if isinstance(data, Mapping) else list(data)
        storage = self._store.rows(self.table)
        inserted = []
        for item in items:
            record = {"id": new_identifier(), **item}
            storage.append(record)
            inserted.append(dict(record))
        logger.debug("Inserted %d row(s) into %s", len(inserted), self.table.value)
        return MutationResult(inserted, self._parse_selection)

    def update(self, data: Mapping[str, Any]) -> MutationResult:
        """Merge ``data`` into every matching record and refresh ``updated_at``."""
        changes = {"updated_at": utc_now_iso(), **data}
        targets = self._matching_storage_rows()
        for row in targets:
            row.update(changes)
        logger.debug("Updated %d row(s) in %s", len(targets), self.table.value)
        return MutationResult([dict(row) for row in targets], self._parse_selection)

    def increment(self, field: str, amount: Union[int, float] = 1) -> MutationResult:
        """Add ``amount`` to ``field`` of every matching record.

        Absent, ``None`` and non-numeric values (strings, booleans)
        count as 0 and are replaced by the result.
        """
        targets = self._matching_storage_rows()
        for row in targets:
            current = row.get(field)
            if isinstance(current, bool) or not isinstance(current, (int, float)):
                current = 0
            row[field] = current + amount
        return MutationResult([dict(row) for row in targets], self._parse_selection)

    def decrement(self, field: str, amount: Union[int, float] = 1) -> MutationResult:
        return self.increment(field, -amount)

    def delete(self) -> "QueryBuilder":
        """Mark the builder as a delete; awaiting it removes matching rows."""
        self._deleting = True
        return self

    async def del_(self) -> int:
        """Remove matching rows and return how many were removed."""
        return self._delete_matching()

    def _delete_matching(self) -> int:
        storage = self._store.rows(self.table)
        doomed = {id(row) for row in self._matching_storage_rows()}
        storage[:] = [row for row in storage if id(row) not in doomed]
        logger.debug("Deleted %d row(s) from %s", len(doomed), self.table.value)
        return len(doomed)
