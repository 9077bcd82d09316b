"""
Pydantic schema definitions for API request bodies.

Each domain (companies, loyalty programs, users, wallet passes)
defines its own models.  Field names follow the storage snake_case
names, with camelCase aliases for the external JSON shape.
"""
