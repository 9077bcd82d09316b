"""
Field patterns and helpers shared by the request schemas.

Request bodies use the external camelCase names (``adminEmail``,
``companyId``); every model also accepts the storage snake_case names
so services and tests can build them directly.
"""

from typing import Any

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
URL_PATTERN = r"^[A-Za-z][A-Za-z0-9+.\-]*://\S+$"
UUID_PATTERN = r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
PHONE_PATTERN = r"^\+?[\d\s\-()]+$"
HEX_COLOR_PATTERN = r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$"

MODEL_CONFIG = {"populate_by_name": True}


def blank_to_none(value: Any) -> Any:
    """Treat empty strings as "not provided" for optional fields."""
    if isinstance(value, str) and value == "":
        return None
    return value
