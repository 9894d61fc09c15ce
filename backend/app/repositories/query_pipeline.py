# backend/app/repositories/query_pipeline.py
"""
Query/Filter/Sort/Paginate pipeline.

One engine shared by every entity, parameterised by an ``EntitySchema``:

1. equality filters are pushed down to the item store (scan/query predicate)
2. substring and array-membership filters run in memory on the candidates
3. free-text ``search`` keeps items where any searchable field contains the
   lower-cased query
4. sort with a plain ``<``/``>`` comparator; equal or incomparable values
   compare as 0 and keep scan order, so an unknown ``sortBy`` yields scan order
5. offset pagination; ``total`` is counted after filtering, before slicing
"""

from dataclasses import dataclass, field
from functools import cmp_to_key
import math
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..core.constants import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT
from ..core.exceptions import ValidationException
from .item_store import IItemStore, IndexSpec, Item


@dataclass(frozen=True)
class EntitySchema:
    """Per-entity descriptor driving the generic repository and pipeline."""

    entity: str
    primary_key: str = "id"
    searchable_fields: Tuple[str, ...] = ()
    default_sort_by: str = "createdAt"
    default_sort_order: str = "desc"
    equality_fields: Tuple[str, ...] = ("isActive",)
    substring_fields: Tuple[str, ...] = ()
    array_fields: Tuple[str, ...] = ()
    # Empty means any field may be used for sorting
    allowed_sort_fields: Tuple[str, ...] = ()
    indexes: Tuple[IndexSpec, ...] = ()


@dataclass
class PaginationOptions:
    page: Optional[int] = None
    limit: Optional[int] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None

    def resolve(self, schema: EntitySchema) -> "PaginationOptions":
        """Fill in defaults and reject out-of-range values."""
        page = DEFAULT_PAGE if self.page is None else int(self.page)
        limit = DEFAULT_LIMIT if self.limit is None else int(self.limit)
        if page < 1:
            raise ValidationException("Page must be at least 1", details={"page": page})
        if limit < 1 or limit > MAX_LIMIT:
            raise ValidationException(
                f"Limit must be between 1 and {MAX_LIMIT}", details={"limit": limit}
            )
        sort_order = (self.sort_order or schema.default_sort_order).lower()
        if sort_order not in ("asc", "desc"):
            raise ValidationException(
                "Sort order must be either asc or desc", details={"sortOrder": sort_order}
            )
        return PaginationOptions(
            page=page,
            limit=limit,
            sort_by=self.sort_by or schema.default_sort_by,
            sort_order=sort_order,
        )


@dataclass
class PageResult:
    """Result envelope returned to the HTTP layer."""

    items: List[Item] = field(default_factory=list)
    total: int = 0
    page: int = DEFAULT_PAGE
    total_pages: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": self.items,
            "total": self.total,
            "page": self.page,
            "totalPages": self.total_pages,
        }


def compare_values(a: Any, b: Any) -> int:
    """Generic comparator: -1/1 on strict order, 0 when equal or incomparable."""
    try:
        if a < b:
            return -1
        if a > b:
            return 1
    except TypeError:
        return 0
    return 0


def sort_items(items: Sequence[Item], sort_by: str, sort_order: str = "asc") -> List[Item]:
    """
    Sort by one attribute.

    Python's sort is stable, so items comparing equal (including missing or
    mixed-type values) keep their scan order.
    """
    direction = -1 if sort_order == "desc" else 1
    return sorted(
        items,
        key=cmp_to_key(lambda a, b: direction * compare_values(a.get(sort_by), b.get(sort_by))),
    )


def paginate(items: Sequence[Item], page: int, limit: int) -> PageResult:
    total = len(items)
    skip = (page - 1) * limit
    return PageResult(
        items=list(items[skip : skip + limit]),
        total=total,
        page=page,
        total_pages=math.ceil(total / limit) if limit else 0,
    )


def _contains_text(value: Any, needle: str) -> bool:
    if isinstance(value, str):
        return needle in value.lower()
    if isinstance(value, (list, tuple)):
        return any(isinstance(part, str) and needle in part.lower() for part in value)
    return False


def matches_search(item: Mapping[str, Any], fields: Iterable[str], query: str) -> bool:
    needle = query.lower()
    return any(_contains_text(item.get(name), needle) for name in fields)


def _matches_array(value: Any, wanted: Any) -> bool:
    if not isinstance(value, (list, tuple)):
        return False
    if isinstance(wanted, (list, tuple, set, frozenset)):
        return any(element in value for element in wanted)
    return wanted in value


def split_filters(
    schema: EntitySchema, filters: Optional[Mapping[str, Any]]
) -> Tuple[Dict[str, Any], Dict[str, str], Dict[str, Any]]:
    """Split caller filters into (equality, substring, array) groups, dropping None values."""
    equality: Dict[str, Any] = {}
    substring: Dict[str, str] = {}
    arrays: Dict[str, Any] = {}
    for name, value in (filters or {}).items():
        if value is None or value == "":
            continue
        if name in schema.equality_fields:
            equality[name] = value
        elif name in schema.substring_fields:
            substring[name] = str(value).lower()
        elif name in schema.array_fields:
            arrays[name] = value
    return equality, substring, arrays


def filter_items(
    store: IItemStore,
    schema: EntitySchema,
    filters: Optional[Mapping[str, Any]] = None,
    search: Optional[str] = None,
    *,
    partition: Optional[Mapping[str, Any]] = None,
    index_name: Optional[str] = None,
    where: Optional[Callable[[Item], bool]] = None,
) -> List[Item]:
    """
    Steps 1-3 of the pipeline: candidate fetch plus in-memory narrowing.

    Args:
        store: Item store for the entity namespace
        schema: Entity descriptor
        filters: Caller filters keyed by attribute name
        search: Optional free-text query
        partition: Optional index partition (``{attr: value}``)
        index_name: Optional index the partition belongs to
        where: Optional extra in-memory predicate

    Returns:
        Filtered items in scan order
    """
    equality, substring, arrays = split_filters(schema, filters)

    if partition:
        candidates = store.query(partition, equality, index_name)
    else:
        candidates = store.scan(equality)

    results: List[Item] = []
    for item in candidates:
        if any(
            not _contains_text(item.get(name), needle) for name, needle in substring.items()
        ):
            continue
        if any(not _matches_array(item.get(name), wanted) for name, wanted in arrays.items()):
            continue
        if search and not matches_search(item, schema.searchable_fields, search):
            continue
        if where is not None and not where(item):
            continue
        results.append(item)
    return results


def run_query(
    store: IItemStore,
    schema: EntitySchema,
    filters: Optional[Mapping[str, Any]] = None,
    options: Optional[PaginationOptions] = None,
    search: Optional[str] = None,
    *,
    partition: Optional[Mapping[str, Any]] = None,
    index_name: Optional[str] = None,
    where: Optional[Callable[[Item], bool]] = None,
) -> PageResult:
    """Full pipeline: filter, search, sort, paginate."""
    resolved = (options or PaginationOptions()).resolve(schema)
    filtered = filter_items(
        store,
        schema,
        filters,
        search,
        partition=partition,
        index_name=index_name,
        where=where,
    )
    ordered = sort_items(filtered, resolved.sort_by or schema.default_sort_by, resolved.sort_order or "desc")
    return paginate(ordered, resolved.page or DEFAULT_PAGE, resolved.limit or DEFAULT_LIMIT)
