"""
Database module with abstraction layer.

This module provides:
- DatabaseAdapter interface: Abstract base class for database implementations
- SQLiteAdapter: SQLite-specific implementation (default)
- Models: UrlEntry and Counter tables
- Session management: Database session creation and management
"""

from shorturl.db.interface import DatabaseAdapter
from shorturl.db.models import Counter, UrlEntry

__all__ = [
    "DatabaseAdapter",
    "Counter",
    "UrlEntry",
]
