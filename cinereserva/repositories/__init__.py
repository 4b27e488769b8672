"""Data access layer: the only code that touches the stores.

Relational functions take the request's Session first so the handler owns the
transaction boundary (see ``core.database.transaction``). Absent records come
back as None; NotFoundError is reserved for writes that matched nothing.
"""
