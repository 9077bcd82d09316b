"""
Declarative relationship map and join resolution.

Joins in the in-memory store are not evaluated from arbitrary key
expressions.  Every supported pair of tables is declared once in
``RELATIONSHIPS`` together with the foreign-key field on the source
table, the key field on the target table and the target fields that
are copied into the source row under an alias.  Adding a relationship
only requires a new entry here.

Resolution follows outer-join semantics for both ``join`` and
``left_join``: a source row without a match is kept as is, and only
the aliased companion fields are absent.  Each join looks at the
source row's own foreign key, never at fields added by an earlier
join on the same query.  Keys compare like ``where`` predicates: a
boolean key only matches a boolean, a string never matches a number.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .tables import Record, Table


class UnsupportedJoinError(ValueError):
    """Raised when a join is requested between tables with no declared relationship."""


@dataclass(frozen=True)
class Relationship:
    """A many-to-one link from ``source.foreign_key`` to ``target.target_key``."""

    source: Table
    foreign_key: str
    target: Table
    target_key: str = "id"
    aliases: Mapping[str, str] = field(default_factory=dict)

    def matches_columns(self, on: Sequence[str]) -> bool:
        """Check optional ``on`` column arguments against this relationship.

        Accepts qualified (``wallet_passes.company_id``) or bare
        (``company_id``) column names in either order.
        """
        if not on:
            return True
        if len(on) != 2:
            return False
        expected = [(self.source.value, self.foreign_key), (self.target.value, self.target_key)]
        parsed = [_split_column(column) for column in on]
        return any(
            all(_column_matches(p, e) for p, e in zip(order, expected))
            for order in (parsed, parsed[::-1])
        )


def _split_column(column: str) -> Tuple[Optional[str], str]:
    if "." in column:
        table, name = column.split(".", 1)
        return table, name
    return None, column


def _column_matches(parsed: Tuple[Optional[str], str], expected: Tuple[str, str]) -> bool:
    table, name = parsed
    return name == expected[1] and (table is None or table == expected[0])


RELATIONSHIPS: Dict[Tuple[Table, Table], Relationship] = {
    (rel.source, rel.target): rel
    for rel in (
        Relationship(
            Table.WALLET_PASSES, "company_id", Table.COMPANIES,
            aliases={"name": "company_name"},
        ),
        Relationship(
            Table.WALLET_PASSES, "loyalty_program_id", Table.LOYALTY_PROGRAMS,
            aliases={"name": "loyalty_program_name"},
        ),
        Relationship(
            Table.LOYALTY_PROGRAMS, "company_id", Table.COMPANIES,
            aliases={"name": "company_name"},
        ),
        Relationship(
            Table.LOYALTY_PROGRAM_USERS, "user_id", Table.USERS,
            aliases={"name": "user_name", "email": "user_email", "points": "user_points"},
        ),
        Relationship(
            Table.LOYALTY_PROGRAM_USERS, "loyalty_program_id", Table.LOYALTY_PROGRAMS,
            aliases={"name": "loyalty_program_name", "company_id": "company_id"},
        ),
        Relationship(
            Table.USER_WALLET_PASSES, "wallet_pass_id", Table.WALLET_PASSES,
            aliases={"serial_number": "serial_number", "pass_type": "pass_type"},
        ),
        Relationship(
            Table.USER_WALLET_PASSES, "user_id", Table.USERS,
            aliases={"name": "user_name"},
        ),
    )
}


def find_relationship(source: Table, target: Table, on: Sequence[str] = ()) -> Relationship:
    """Return the declared relationship from ``source`` to ``target``.

    Raises ``UnsupportedJoinError`` if the pair is not declared or if
    ``on`` names columns that disagree with the declaration.
    """
    rel = RELATIONSHIPS.get((source, target))
    if rel is None:
        raise UnsupportedJoinError(f"No relationship from {source.value} to {target.value}")
    if not rel.matches_columns(on):
        raise UnsupportedJoinError(
            f"Join columns {list(on)} do not match {source.value}.{rel.foreign_key} = "
            f"{target.value}.{rel.target_key}"
        )
    return rel


def _join_key(value: Any) -> Tuple[type, Any]:
    # Same classes as strict_equals: bools apart, ints and floats together.
    if isinstance(value, bool):
        return bool, value
    if isinstance(value, (int, float)):
        return float, value
    return type(value), value


def _index(rows: Iterable[Record], key: str) -> Dict[Tuple[type, Any], Record]:
    # First row wins when the target key is not unique.
    index: Dict[Tuple[type, Any], Record] = {}
    for row in rows:
        value = row.get(key)
        if value is None:
            continue
        try:
            index.setdefault(_join_key(value), row)
        except TypeError:
            # Unhashable keys never match.
            continue
    return index


def _lookup(index: Dict[Tuple[type, Any], Record], value: Any) -> Optional[Record]:
    if value is None:
        return None
    try:
        return index.get(_join_key(value))
    except TypeError:
        return None


def resolve_joins(
    rows: Iterable[Record],
    relationships: Sequence[Relationship],
    lookup: Callable[[Table], List[Record]],
) -> List[Record]:
    """Return copies of ``rows`` enriched with aliased fields from related tables.

    ``lookup`` maps a table to its current rows.  Target indexes are
    built once per call, so a resolution sees a consistent snapshot of
    every joined table.
    """
    indexes = [(rel, _index(lookup(rel.target), rel.target_key)) for rel in relationships]
    resolved: List[Record] = []
    for row in rows:
        enriched = dict(row)
        for rel, index in indexes:
            match = _lookup(index, row.get(rel.foreign_key))
            if match is None:
                continue
            for source_field, alias in rel.aliases.items():
                if source_field in match:
                    enriched[alias] = match[source_field]
        resolved.append(enriched)
    return resolved
