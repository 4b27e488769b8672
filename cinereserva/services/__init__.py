"""Request-independent logic: payload validation and startup seeding."""
