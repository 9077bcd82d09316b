"""
Table catalogue for the in-memory data store.

The store only knows a closed set of tables.  Each member of
``Table`` names one of them; the string value is the storage name used
by services and by the relationship map.  Callers may pass either a
``Table`` member or its string value wherever a table is expected.
"""

from enum import Enum
from typing import Any, Dict, Union


# A record is a plain mapping of field name to value.  Values are
# strings, numbers, booleans, ``None`` or JSON-encoded strings for
# nested structures (wallet pass fields and barcodes).
Record = Dict[str, Any]


class UnknownTableError(LookupError):
    """Raised when a table name is not part of the catalogue."""

    def __init__(self, name: Any) -> None:
        super().__init__(f"Unknown table: {name!r}")
        self.name = name


class Table(str, Enum):
    """Known tables of the loyalty backend."""

    COMPANIES = "companies"
    LOYALTY_PROGRAMS = "loyalty_programs"
    USERS = "users"
    WALLET_PASSES = "wallet_passes"
    LOYALTY_PROGRAM_USERS = "loyalty_program_users"
    USER_WALLET_PASSES = "user_wallet_passes"

    @classmethod
    def parse(cls, name: Union["Table", str]) -> "Table":
        """Return the member for ``name`` or raise ``UnknownTableError``."""
        if isinstance(name, cls):
            return name
        try:
            return cls(name)
        except ValueError:
            raise UnknownTableError(name) from None
