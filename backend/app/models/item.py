# backend/app/models/item.py
"""
StoredItem model.

A row is one item of one logical table: ``namespace`` names the table
(e.g. ``why-designers-bookings``), ``key`` is the item's primary key value and
``data`` holds the full attribute document. The composite primary key makes
conditional creates (slot locks, unique slugs) a plain integrity check.
"""

from sqlalchemy import JSON, BigInteger, Column, String

from ..database import Base


class StoredItem(Base):
    __tablename__ = "items"

    namespace = Column(String(128), primary_key=True)
    key = Column(String(255), primary_key=True)
    # Insertion sequence; scans return items in this order
    seq = Column(BigInteger, nullable=False, default=0, index=True)
    data = Column(JSON, nullable=False)

    def __repr__(self) -> str:
        return f"<StoredItem {self.namespace}/{self.key}>"
