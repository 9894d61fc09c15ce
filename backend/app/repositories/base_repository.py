# backend/app/repositories/base_repository.py
"""
Base Repository Pattern for the counseling platform.

Provides the foundation for all entity repositories with:
- Common CRUD operations over the generic item store
- Timestamps and soft-delete flag on create
- The shared query/filter/sort/paginate pipeline
- Equality lookups, counts and index-scoped queries

Entity repositories only declare an ``EntitySchema`` and add the few
lookups that are specific to them.
"""

from abc import ABC, abstractmethod
import logging
from typing import Any, Callable, ClassVar, Dict, Iterable, List, Mapping, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.timezone_utils import utc_now_iso
from ..core.ulid_helper import generate_ulid
from .item_store import IItemStore, Item, SqlItemStore
from .query_pipeline import EntitySchema, PageResult, PaginationOptions, filter_items, run_query

logger = logging.getLogger(__name__)


class IRepository(ABC):
    """
    Abstract repository interface defining core data access methods.

    All repositories must implement these methods to ensure consistency
    across the application.
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Item]:
        """
        Retrieve an item by its primary key.

        Args:
            id: The primary key value

        Returns:
            The item if found, None otherwise
        """

    @abstractmethod
    def create(self, data: Mapping[str, Any]) -> Item:
        """
        Create a new item.

        Args:
            data: Attribute values (without id/timestamps)

        Returns:
            The created item
        """

    @abstractmethod
    def update(self, id: str, data: Mapping[str, Any]) -> Optional[Item]:
        """
        Merge attributes into an existing item.

        Returns:
            The updated item if found, None otherwise
        """

    @abstractmethod
    def delete(self, id: str) -> None:
        """Physically delete an item (idempotent)."""

    @abstractmethod
    def exists(self, **kwargs: Any) -> bool:
        """Check whether any item matches the equality criteria."""

    @abstractmethod
    def count(self, **kwargs: Any) -> int:
        """Count items matching the equality criteria."""


class BaseRepository(IRepository):
    """
    Generic repository implementation over one item-store namespace.

    Subclasses set ``schema``; everything else is shared.
    """

    schema: ClassVar[EntitySchema]

    def __init__(self, db: Session, store: Optional[IItemStore] = None):
        """
        Initialize repository.

        Args:
            db: Database session
            store: Optional item store override (defaults to the SQL store)
        """
        self.db = db
        self.store: IItemStore = store or SqlItemStore(
            db,
            settings.table_name(self.schema.entity),
            primary_key=self.schema.primary_key,
            indexes=self.schema.indexes,
        )
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def primary_key(self) -> str:
        return self.schema.primary_key

    def new_item(self, data: Mapping[str, Any]) -> Item:
        """Build a fresh item with id, timestamps and the active flag."""
        now = utc_now_iso()
        item: Item = {"isActive": True, **dict(data)}
        item.setdefault(self.primary_key, generate_ulid())
        item["createdAt"] = now
        item["updatedAt"] = now
        return item

    def get_by_id(self, id: str) -> Optional[Item]:
        if not id:
            return None
        return self.store.get(id)

    def get_many(self, ids: Iterable[str]) -> Dict[str, Item]:
        return self.store.batch_get(ids)

    def create(self, data: Mapping[str, Any]) -> Item:
        item = self.new_item(data)
        created = self.store.put(item)
        self.logger.debug(f"Created {self.schema.entity} {created[self.primary_key]}")
        return created

    def save(self, item: Item) -> Item:
        """Store a fully built item (see ``new_item``) as is."""
        return self.store.put(item)

    def update(self, id: str, data: Mapping[str, Any]) -> Optional[Item]:
        return self.store.update(id, data)

    def soft_delete(self, id: str) -> Optional[Item]:
        return self.store.soft_delete(id)

    def delete(self, id: str) -> None:
        self.store.hard_delete(id)

    def find_by(self, **kwargs: Any) -> List[Item]:
        return self.store.scan(kwargs)

    def find_one_by(self, **kwargs: Any) -> Optional[Item]:
        found = self.store.scan(kwargs)
        return found[0] if found else None

    def exists(self, **kwargs: Any) -> bool:
        return self.find_one_by(**kwargs) is not None

    def count(self, **kwargs: Any) -> int:
        return len(self.store.scan(kwargs))

    def query_index(
        self,
        index_name: str,
        partition: Mapping[str, Any],
        predicate: Optional[Mapping[str, Any]] = None,
    ) -> List[Item]:
        return self.store.query(partition, predicate, index_name)

    def find_all(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        options: Optional[PaginationOptions] = None,
        search: Optional[str] = None,
        *,
        partition: Optional[Mapping[str, Any]] = None,
        index_name: Optional[str] = None,
        where: Optional[Callable[[Item], bool]] = None,
    ) -> PageResult:
        """
        Filtered, searched, sorted and paginated listing.

        Args:
            filters: Entity filters (equality/substring/array per schema)
            options: Pagination and sort options
            search: Optional free-text query
            partition: Optional index partition to narrow candidates
            index_name: Index the partition belongs to
            where: Optional extra in-memory predicate

        Returns:
            PageResult envelope
        """
        return run_query(
            self.store,
            self.schema,
            filters,
            options,
            search,
            partition=partition,
            index_name=index_name,
            where=where,
        )

    def filter(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        search: Optional[str] = None,
        *,
        where: Optional[Callable[[Item], bool]] = None,
    ) -> List[Item]:
        """Unpaginated filtered list in scan order."""
        return filter_items(self.store, self.schema, filters, search, where=where)

    def bulk_update(self, ids: Iterable[str], data: Mapping[str, Any]) -> int:
        """Apply the same attribute merge to each id; each write commits on its own."""
        updated = 0
        for item_id in ids:
            if self.store.update(item_id, data) is not None:
                updated += 1
        return updated
