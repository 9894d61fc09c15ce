# backend/tests/unit/test_query_pipeline.py
"""
Unit tests for the shared filter/search/sort/paginate pipeline.
"""

import pytest

from app.core.exceptions import ValidationException
from app.repositories.lead_repository import LeadRepository
from app.repositories.query_pipeline import (
    EntitySchema,
    PaginationOptions,
    matches_search,
    paginate,
    sort_items,
    split_filters,
)

SCHEMA = EntitySchema(
    entity="things",
    searchable_fields=("name", "tags"),
    equality_fields=("isActive", "status"),
    substring_fields=("city",),
    array_fields=("tags",),
)


class TestPaginationOptions:
    def test_defaults_come_from_schema(self):
        resolved = PaginationOptions().resolve(SCHEMA)

        assert resolved.page == 1
        assert resolved.limit == 10
        assert resolved.sort_by == "createdAt"
        assert resolved.sort_order == "desc"

    @pytest.mark.parametrize(
        "options",
        [
            PaginationOptions(page=0),
            PaginationOptions(limit=0),
            PaginationOptions(limit=101),
            PaginationOptions(sort_order="sideways"),
        ],
    )
    def test_out_of_range_values_are_rejected(self, options):
        with pytest.raises(ValidationException):
            options.resolve(SCHEMA)


class TestSorting:
    def test_unknown_sort_field_keeps_scan_order(self):
        items = [{"id": "c"}, {"id": "a"}, {"id": "b"}]

        assert sort_items(items, "doesNotExist", "asc") == items
        assert sort_items(items, "doesNotExist", "desc") == items

    def test_sorts_descending(self):
        items = [{"n": 1}, {"n": 3}, {"n": 2}]

        assert [i["n"] for i in sort_items(items, "n", "desc")] == [3, 2, 1]

    def test_equal_values_keep_relative_order(self):
        items = [{"id": "x", "n": 1}, {"id": "y", "n": 1}, {"id": "z", "n": 0}]

        assert [i["id"] for i in sort_items(items, "n", "desc")] == ["x", "y", "z"]


class TestPaginate:
    def test_total_is_counted_before_slicing(self):
        items = [{"n": n} for n in range(23)]

        page = paginate(items, page=3, limit=10)

        assert page.total == 23
        assert page.total_pages == 3
        assert [i["n"] for i in page.items] == [20, 21, 22]

    def test_page_past_the_end_is_empty(self):
        page = paginate([{"n": 1}], page=5, limit=10)

        assert page.items == []
        assert page.total == 1
        assert page.to_dict() == {"items": [], "total": 1, "page": 5, "totalPages": 1}


class TestFilterHelpers:
    def test_split_filters_drops_none_and_empty(self):
        equality, substring, arrays = split_filters(
            SCHEMA,
            {"status": "open", "isActive": None, "city": "Pune", "tags": "", "unknown": 1},
        )

        assert equality == {"status": "open"}
        assert substring == {"city": "pune"}
        assert arrays == {}

    def test_search_is_case_insensitive_and_covers_lists(self):
        item = {"name": "Portfolio Review", "tags": ["UX", "Career"]}

        assert matches_search(item, SCHEMA.searchable_fields, "portfolio")
        assert matches_search(item, SCHEMA.searchable_fields, "CAREER")
        assert not matches_search(item, SCHEMA.searchable_fields, "finance")


class TestRepositoryFindAll:
    """End-to-end pipeline over the SQL item store."""

    def _seed(self, unit_db, count):
        repo = LeadRepository(unit_db)
        for n in range(count):
            repo.create(
                {
                    "fullName": f"Lead {n:02d}",
                    "email": f"lead{n}@example.com",
                    "areaOfInterest": "UX Design" if n % 2 else "Graphic Design",
                    "contacted": n % 3 == 0,
                }
            )
        return repo

    def test_pages_partition_the_filtered_list(self, unit_db):
        repo = self._seed(unit_db, 25)
        options = dict(limit=10, sort_by="fullName", sort_order="asc")

        pages = [repo.find_all(None, PaginationOptions(page=p, **options)) for p in (1, 2, 3)]

        names = [item["fullName"] for page in pages for item in page.items]
        assert names == [f"Lead {n:02d}" for n in range(25)]
        assert all(page.total == 25 and page.total_pages == 3 for page in pages)

    def test_equality_substring_and_search_combine(self, unit_db):
        repo = self._seed(unit_db, 12)

        page = repo.find_all(
            {"contacted": False, "areaOfInterest": "ux"},
            PaginationOptions(limit=100),
            search="LEAD 0",
        )

        # Odd n below 10 that are not multiples of 3
        assert sorted(item["fullName"] for item in page.items) == [
            "Lead 01",
            "Lead 05",
            "Lead 07",
        ]
        assert page.total == 3
