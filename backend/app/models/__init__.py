"""
Database models for the counseling platform.

Every entity lives in a single wide ``items`` table, one namespace per
entity; the attribute document is stored as JSON.
"""

from .item import StoredItem

__all__ = ["StoredItem"]
