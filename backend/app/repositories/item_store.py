# backend/app/repositories/item_store.py
"""
Generic Item Store.

Abstracts a single wide key-value table with one flat namespace per entity.
Supports upsert, conditional create, get, multi-get, attribute-merge update,
soft/hard delete, predicate scan and index-scoped query.

Failure semantics: storage errors are logged with namespace/key context and
re-raised unchanged. There is no retry at this layer.
"""

from abc import ABC, abstractmethod
import copy
from dataclasses import dataclass
import logging
import threading
import time
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.timezone_utils import utc_now_iso
from ..models.item import StoredItem

Item = Dict[str, Any]
Predicate = Mapping[str, Any]

_seq_lock = threading.Lock()
_last_seq = 0


def _next_seq() -> int:
    """Strictly increasing insertion sequence for scan ordering."""
    global _last_seq
    with _seq_lock:
        candidate = time.time_ns()
        _last_seq = candidate if candidate > _last_seq else _last_seq + 1
        return _last_seq


def matches(item: Mapping[str, Any], predicate: Optional[Predicate]) -> bool:
    """AND-combined attribute equality."""
    if not predicate:
        return True
    return all(item.get(attr) == value for attr, value in predicate.items())


@dataclass(frozen=True)
class IndexSpec:
    """A secondary access path: index name plus the attributes it partitions on."""

    name: str
    partition_keys: Tuple[str, ...]


class IItemStore(ABC):
    """
    Item store contract.

    Keys are the primary key values (strings). Items are plain dicts.
    """

    namespace: str
    primary_key: str

    @abstractmethod
    def put(self, item: Item) -> Item:
        """
        Unconditional upsert.

        Args:
            item: Full item including the primary key attribute

        Returns:
            The stored item
        """

    @abstractmethod
    def put_if_absent(self, item: Item) -> bool:
        """
        Create the item only if its key is not taken.

        Returns:
            True if written, False if the key already existed
        """

    @abstractmethod
    def get(self, key: str) -> Optional[Item]:
        """Return the item or None; absence never raises."""

    @abstractmethod
    def batch_get(self, keys: Iterable[str]) -> Dict[str, Item]:
        """Return the existing items for the given keys, keyed by primary key."""

    @abstractmethod
    def update(self, key: str, attributes: Mapping[str, Any]) -> Optional[Item]:
        """
        Merge attributes into an existing item and refresh ``updatedAt``.

        Returns:
            The full updated item, or None if the key did not exist
        """

    @abstractmethod
    def hard_delete(self, key: str) -> None:
        """Physically remove the item; idempotent."""

    @abstractmethod
    def scan(self, predicate: Optional[Predicate] = None) -> List[Item]:
        """All items in the namespace matching the equality predicate."""

    @abstractmethod
    def query(
        self,
        partition: Predicate,
        predicate: Optional[Predicate] = None,
        index_name: Optional[str] = None,
    ) -> List[Item]:
        """Items scoped to an index partition, further narrowed by the predicate."""

    def soft_delete(self, key: str) -> Optional[Item]:
        """Flip ``isActive`` to False; idempotent."""
        return self.update(key, {"isActive": False})


class SqlItemStore(IItemStore):
    """
    Item store backed by the ``items`` table through SQLAlchemy.

    Each write commits on its own; no transaction spans multiple items.
    """

    def __init__(
        self,
        db: Session,
        namespace: str,
        primary_key: str = "id",
        indexes: Sequence[IndexSpec] = (),
    ):
        self.db = db
        self.namespace = namespace
        self.primary_key = primary_key
        self.indexes: Dict[str, IndexSpec] = {index.name: index for index in indexes}
        self.logger = logging.getLogger(f"{__name__}.{namespace}")

    def _key_of(self, item: Mapping[str, Any]) -> str:
        key = item.get(self.primary_key)
        if key is None or key == "":
            raise ValueError(f"Item for {self.namespace} is missing '{self.primary_key}'")
        return str(key)

    def _load(self, key: str) -> Optional[StoredItem]:
        return self.db.get(StoredItem, (self.namespace, key), populate_existing=True)

    def _commit(self, operation: str, key: Optional[str] = None) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            self.logger.error(f"{operation} failed for {self.namespace}/{key}: {str(e)}")
            raise

    def put(self, item: Item) -> Item:
        key = self._key_of(item)
        document = copy.deepcopy(dict(item))
        try:
            row = self._load(key)
            if row is None:
                self.db.add(
                    StoredItem(namespace=self.namespace, key=key, seq=_next_seq(), data=document)
                )
            else:
                row.data = document
        except SQLAlchemyError as e:
            self.logger.error(f"put failed for {self.namespace}/{key}: {str(e)}")
            raise
        self._commit("put", key)
        return copy.deepcopy(document)

    def put_if_absent(self, item: Item) -> bool:
        key = self._key_of(item)
        if self._load(key) is not None:
            return False
        self.db.add(
            StoredItem(
                namespace=self.namespace,
                key=key,
                seq=_next_seq(),
                data=copy.deepcopy(dict(item)),
            )
        )
        try:
            self.db.commit()
        except IntegrityError:
            # Another writer created the key between our read and our insert
            self.db.rollback()
            self.logger.info(f"Conditional put lost for {self.namespace}/{key}")
            return False
        except SQLAlchemyError as e:
            self.db.rollback()
            self.logger.error(f"put_if_absent failed for {self.namespace}/{key}: {str(e)}")
            raise
        return True

    def get(self, key: str) -> Optional[Item]:
        try:
            row = self._load(str(key))
        except SQLAlchemyError as e:
            self.logger.error(f"get failed for {self.namespace}/{key}: {str(e)}")
            raise
        return copy.deepcopy(row.data) if row is not None else None

    def batch_get(self, keys: Iterable[str]) -> Dict[str, Item]:
        wanted = sorted({str(key) for key in keys if key})
        if not wanted:
            return {}
        try:
            rows = (
                self.db.query(StoredItem)
                .populate_existing()
                .filter(StoredItem.namespace == self.namespace, StoredItem.key.in_(wanted))
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"batch_get failed for {self.namespace}: {str(e)}")
            raise
        return {row.key: copy.deepcopy(row.data) for row in rows}

    def update(self, key: str, attributes: Mapping[str, Any]) -> Optional[Item]:
        key = str(key)
        try:
            row = self._load(key)
        except SQLAlchemyError as e:
            self.logger.error(f"update failed for {self.namespace}/{key}: {str(e)}")
            raise
        if row is None:
            return None
        changes = {k: v for k, v in attributes.items() if k != self.primary_key}
        merged = {**row.data, **copy.deepcopy(changes), "updatedAt": utc_now_iso()}
        # Assign a new dict so the JSON column is flagged dirty
        row.data = merged
        self._commit("update", key)
        return copy.deepcopy(merged)

    def hard_delete(self, key: str) -> None:
        key = str(key)
        try:
            self.db.query(StoredItem).filter(
                StoredItem.namespace == self.namespace, StoredItem.key == key
            ).delete(synchronize_session="fetch")
        except SQLAlchemyError as e:
            self.db.rollback()
            self.logger.error(f"hard_delete failed for {self.namespace}/{key}: {str(e)}")
            raise
        self._commit("hard_delete", key)

    def scan(self, predicate: Optional[Predicate] = None) -> List[Item]:
        try:
            rows = (
                self.db.query(StoredItem)
                .populate_existing()
                .filter(StoredItem.namespace == self.namespace)
                .order_by(StoredItem.seq, StoredItem.key)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"scan failed for {self.namespace}: {str(e)}")
            raise
        return [copy.deepcopy(row.data) for row in rows if matches(row.data, predicate)]

    def query(
        self,
        partition: Predicate,
        predicate: Optional[Predicate] = None,
        index_name: Optional[str] = None,
    ) -> List[Item]:
        if index_name is not None:
            index = self.indexes.get(index_name)
            if index is None:
                raise ValueError(f"Unknown index '{index_name}' for {self.namespace}")
            missing = [attr for attr in partition if attr not in index.partition_keys]
            if missing:
                raise ValueError(f"Index '{index_name}' does not partition on {missing}")
        combined = {**dict(partition), **dict(predicate or {})}
        return self.scan(combined)
