"""SQLite storage for scanned products."""

from .inventory import ProductDB
from .schema import ensure_schema

__all__ = [
    "ProductDB",
    "ensure_schema",
]
