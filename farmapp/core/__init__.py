"""Core app configuration, database and authorization."""

from farmapp.core.config import get_settings, settings
from farmapp.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
