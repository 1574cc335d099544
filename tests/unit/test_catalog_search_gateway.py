"""
Unit tests for the Elasticsearch catalog search gateway.
"""
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

from internal.domain.filters import AppliedFilter
from internal.domain.search_criteria import SearchCriteria
from internal.domain.value_objects import SortDataType, SortField, SortSpec
from internal.infrastructure.elasticsearch.catalog_search_gateway import (
    ElasticsearchCatalogSearchGateway,
)
from internal.infrastructure.elasticsearch.query_escape import escape_search_term


def _criteria(filter_catalog, **overrides) -> SearchCriteria:
    criteria = SearchCriteria(catalog="main", currency="USD", pricelists=["gold"])
    for definition in filter_catalog:
        criteria.add_filter(definition)
    for name, value in overrides.items():
        setattr(criteria, name, value)
    return criteria


class TestBuildSearchBody:
    """Tests for search DSL generation."""

    def test_scope_and_paging(self, filter_catalog):
        """Test catalog, outline, start date and paging clauses."""
        criteria = _criteria(
            filter_catalog,
            outlines=["Main/tv*"],
            skip=20,
            take=10,
            start_date_from=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )

        body = ElasticsearchCatalogSearchGateway(MagicMock()).build_search_body(criteria)

        assert body["from"] == 20
        assert body["size"] == 10
        filters = body["query"]["bool"]["filter"]
        assert {"term": {"catalog": "main"}} in filters
        assert {
            "wildcard": {"__outline": {"value": "Main/tv*", "case_insensitive": True}}
        } in filters
        assert {"range": {"startdate": {"gte": "2024-01-01T00:00:00+00:00"}}} in filters
        assert body["query"]["bool"]["must"] == [{"match_all": {}}]

    def test_fuzzy_phrase(self, filter_catalog):
        """Test that fuzzy search marks every term."""
        criteria = _criteria(filter_catalog, search_phrase="smart tv", locale="en-US")

        body = ElasticsearchCatalogSearchGateway(MagicMock()).build_search_body(criteria)

        query = body["query"]["bool"]["must"][0]["query_string"]
        assert query["query"] == "smart~ tv~"
        assert "__content_en-us" in query["fields"]

    def test_applied_filters(self, filter_catalog, color_filter, weight_filter, price_usd_filter):
        """Test attribute, range and price constraints."""
        criteria = _criteria(filter_catalog)
        criteria.apply(AppliedFilter(filter=color_filter, values=("red", "blue")))
        criteria.apply(AppliedFilter(filter=weight_filter, values=("light",)))
        criteria.apply(AppliedFilter(filter=price_usd_filter, values=("100-500",)))

        body = ElasticsearchCatalogSearchGateway(MagicMock()).build_search_body(criteria)

        filters = body["query"]["bool"]["filter"]
        assert {"terms": {"color": ["red", "blue"]}} in filters
        assert {"range": {"weight": {"lt": "1"}}} in filters
        assert {"range": {"price_usd_gold": {"gte": "100", "lt": "500"}}} in filters

    def test_unknown_range_value_adds_no_clause(self, filter_catalog, weight_filter):
        """Test that range values the filter does not advertise are ignored."""
        criteria = _criteria(filter_catalog)
        criteria.apply(AppliedFilter(filter=weight_filter, values=("unknown",)))

        body = ElasticsearchCatalogSearchGateway(MagicMock()).build_search_body(criteria)

        assert body["query"]["bool"]["filter"] == [{"term": {"catalog": "main"}}]

    def test_filter_without_values_adds_no_clause(self, filter_catalog, color_filter):
        """Test that an applied filter with no values does not constrain the search."""
        criteria = _criteria(filter_catalog)
        criteria.apply(AppliedFilter(filter=color_filter, values=()))

        body = ElasticsearchCatalogSearchGateway(MagicMock()).build_search_body(criteria)

        assert body["query"]["bool"]["filter"] == [{"term": {"catalog": "main"}}]

    def test_aggregations_for_request_currency(self, filter_catalog):
        """Test one aggregation per filter of the request currency."""
        criteria = _criteria(filter_catalog)

        body = ElasticsearchCatalogSearchGateway(MagicMock(), facet_size=50).build_search_body(
            criteria
        )

        assert set(body["aggs"]) == {"color", "brand", "weight", "price"}
        assert body["aggs"]["color"] == {"terms": {"field": "color", "size": 50}}
        assert body["aggs"]["price"]["filters"]["filters"]["under-100"] == {
            "range": {"price_usd_gold": {"lt": "100"}}
        }

    def test_sort_clauses(self, filter_catalog):
        """Test sort field translation."""
        criteria = _criteria(
            filter_catalog,
            sort=SortSpec(fields=(
                SortField(
                    name="price_usd_gold",
                    is_descending=True,
                    data_type=SortDataType.DOUBLE,
                    ignore_if_field_missing=True,
                ),
                SortField(name="name"),
            )),
        )

        body = ElasticsearchCatalogSearchGateway(MagicMock()).build_search_body(criteria)

        assert body["sort"] == [
            {"price_usd_gold": {"order": "desc", "missing": "_last", "unmapped_type": "double"}},
            {"name": {"order": "asc", "missing": "_last"}},
        ]

    def test_empty_sort_uses_score(self, filter_catalog):
        """Test relevance ordering when the sort is empty."""
        criteria = _criteria(filter_catalog, sort=SortSpec())

        body = ElasticsearchCatalogSearchGateway(MagicMock()).build_search_body(criteria)

        assert body["sort"] == [{"_score": "desc"}]


class TestSearch:
    """Tests for response mapping."""

    @pytest.mark.asyncio
    async def test_search_maps_hits_and_aggregations(self, filter_catalog):
        """Test products, total and facet counts."""
        client = MagicMock()
        client.search = AsyncMock(return_value={
            "hits": {
                "total": {"value": 42, "relation": "eq"},
                "hits": [{"_id": "p-1", "_source": {"name": "TV"}}],
            },
            "aggregations": {
                "color": {"buckets": [
                    {"key": "red", "doc_count": 5},
                    {"key": "green", "doc_count": 2},
                ]},
                "price": {"buckets": {
                    "under-100": {"doc_count": 3},
                    "100-500": {"doc_count": 0},
                }},
            },
        })
        gateway = ElasticsearchCatalogSearchGateway(client, index_name="products")

        result = await gateway.search(_criteria(filter_catalog))

        assert client.search.call_args.kwargs["index"] == "products"
        assert result.total == 42
        assert result.products == [{"id": "p-1", "name": "TV"}]

        by_key = {a["key"]: a for a in result.aggregations}
        assert by_key["Color"]["values"] == [
            {"id": "red", "label": "Red", "count": 5},
            {"id": "green", "label": "green", "count": 2},
        ]
        assert by_key["Price"]["kind"] == "price_range"
        assert by_key["Price"]["values"] == [
            {"id": "under-100", "label": "under-100", "count": 3},
        ]
        assert "Weight" not in by_key


class TestEscapeSearchTerm:
    """Tests for query-string escaping."""

    def test_reserved_characters_are_escaped(self):
        """Test escaping of operators and grouping characters."""
        assert escape_search_term('a+b-c "d" (e)') == 'a\\+b\\-c \\"d\\" \\(e\\)'
        assert escape_search_term("x && y || z") == "x \\&\\& y \\|\\| z"
        assert escape_search_term("path/to\\file") == "path\\/to\\\\file"

    def test_plain_text_is_unchanged(self):
        """Test that ordinary words pass through."""
        assert escape_search_term("smart tv 55") == "smart tv 55"

    def test_equals_is_escaped_and_angle_brackets_removed(self):
        """Test that "=" is escaped and "<" and ">" are dropped."""
        assert escape_search_term("a=b <c>") == "a\\=b c"
        assert escape_search_term("size>=10") == "size\\=10"
