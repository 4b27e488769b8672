"""Core app configuration, stores, errors and security."""

from cinereserva.core.config import get_settings, settings
from cinereserva.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
