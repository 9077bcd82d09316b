"""
Service layer.

Each service translates API-level data into store records for one
domain and runs its queries through the in-memory query builder.
Route handlers only ever talk to services.
"""
