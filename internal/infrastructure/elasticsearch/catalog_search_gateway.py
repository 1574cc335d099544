"""
Elasticsearch catalog search gateway.

Translates SearchCriteria into Elasticsearch DSL and maps responses back.
"""
import time
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from internal.domain.filters import AppliedFilter, FilterDefinition, FilterKind
from internal.domain.search_criteria import SearchCriteria
from internal.domain.value_objects import FilterValue, SortDataType, SortField
from internal.infrastructure.metrics import SEARCH_ENGINE_DURATION
from pkg.logger.logger import get_logger


logger = get_logger(__name__)


DEFAULT_INDEX_NAME = "catalogitem"
DEFAULT_FACET_SIZE = 100


class SearchClient(Protocol):
    """Search transport used by the gateway."""

    async def search(self, index: str, body: dict[str, Any]) -> dict[str, Any]:
        ...


@dataclass
class CatalogSearchResult:
    """
    Result of a catalog search.

    Attributes:
        products: Indexed product documents.
        total: Total number of matching documents.
        aggregations: Facet counts per registered filter.
    """

    products: list[dict] = field(default_factory=list)
    total: int = 0
    aggregations: list[dict] = field(default_factory=list)


class ElasticsearchCatalogSearchGateway:
    """
    Executes compiled criteria against the catalog index.

    Values inside one applied filter are OR-ed; applied filters are AND-ed.
    Every registered filter of the request currency gets an aggregation.
    """

    def __init__(
        self,
        client: SearchClient,
        index_name: str = DEFAULT_INDEX_NAME,
        facet_size: int = DEFAULT_FACET_SIZE,
    ) -> None:
        """
        Initialize the gateway.

        Args:
            client: Elasticsearch client.
            index_name: Catalog index name.
            facet_size: Maximum buckets per attribute aggregation.
        """
        self._client = client
        self._index_name = index_name
        self._facet_size = facet_size

    async def search(self, criteria: SearchCriteria) -> CatalogSearchResult:
        """
        Search the catalog index.

        Args:
            criteria: Compiled search criteria.

        Returns:
            Products, total count and aggregations.
        """
        body = self.build_search_body(criteria)

        started = time.perf_counter()
        response = await self._client.search(index=self._index_name, body=body)
        SEARCH_ENGINE_DURATION.observe(time.perf_counter() - started)

        hits = response.get("hits", {})
        return CatalogSearchResult(
            products=[self._map_hit(h) for h in hits.get("hits", [])],
            total=self._extract_total(hits),
            aggregations=self._map_aggregations(criteria, response.get("aggregations") or {}),
        )

    def build_search_body(self, criteria: SearchCriteria) -> dict[str, Any]:
        """
        Build the search DSL for criteria.

        Args:
            criteria: Compiled search criteria.

        Returns:
            Elasticsearch request body.
        """
        must: list[dict] = []
        filter_clauses: list[dict] = [{"term": {"catalog": criteria.catalog}}]

        if criteria.search_phrase:
            must.append(self._phrase_query(criteria))

        if criteria.outlines:
            filter_clauses.append(_any_of([
                {"wildcard": {"__outline": {"value": outline, "case_insensitive": True}}}
                for outline in criteria.outlines
            ]))

        if criteria.start_date_from is not None:
            filter_clauses.append(
                {"range": {"startdate": {"gte": criteria.start_date_from.isoformat()}}}
            )

        for applied in criteria.applied_filters:
            clause = self._filter_clause(applied, criteria)
            if clause is not None:
                filter_clauses.append(clause)

        body: dict[str, Any] = {
            "track_total_hits": True,
            "from": criteria.skip,
            "size": criteria.take,
            "query": {
                "bool": {
                    "must": must or [{"match_all": {}}],
                    "filter": filter_clauses,
                }
            },
            "sort": [self._sort_clause(f) for f in criteria.sort.fields] or [{"_score": "desc"}],
        }

        aggs = self._build_aggregations(criteria)
        if aggs:
            body["aggs"] = aggs

        return body

    @staticmethod
    def _phrase_query(criteria: SearchCriteria) -> dict:
        fields = ["name^2", "__content"]
        if criteria.locale:
            fields.append(f"__content_{criteria.locale.lower()}")

        query = criteria.search_phrase
        if criteria.is_fuzzy_search:
            query = " ".join(f"{term}~" for term in query.split())

        return {
            "query_string": {
                "query": query,
                "fields": fields,
                "default_operator": "and",
                "fuzziness": "AUTO",
            }
        }

    def _filter_clause(
        self,
        applied: AppliedFilter,
        criteria: SearchCriteria,
    ) -> Optional[dict]:
        definition = applied.filter

        if not applied.values:
            return None

        if definition.kind is FilterKind.ATTRIBUTE:
            return {"terms": {definition.index_field: list(applied.values)}}

        if definition.kind in (FilterKind.RANGE, FilterKind.PRICE_RANGE):
            fields = self._range_fields(definition, criteria)
            clauses = []
            for value_id in applied.values:
                value = definition.find_value(value_id)
                if value is None or not value.is_range:
                    logger.debug("Ignoring unknown range value", key=definition.key, value=value_id)
                    continue
                clauses.extend(_range_query(f, value) for f in fields)
            return _any_of(clauses) if clauses else None

        raise ValueError(f"Unsupported filter kind: {definition.kind}")

    @staticmethod
    def _range_fields(definition: FilterDefinition, criteria: SearchCriteria) -> list[str]:
        if definition.kind is FilterKind.PRICE_RANGE and criteria.pricelists:
            currency = definition.currency.lower()
            return [f"price_{currency}_{p.lower()}" for p in criteria.pricelists]
        return [definition.index_field]

    def _build_aggregations(self, criteria: SearchCriteria) -> dict[str, Any]:
        aggs: dict[str, Any] = {}

        for definition in criteria.filters:
            if not definition.accepts_currency(criteria.currency):
                continue

            name = definition.key.lower()
            if definition.kind is FilterKind.ATTRIBUTE:
                aggs[name] = {
                    "terms": {"field": definition.index_field, "size": self._facet_size}
                }
                continue

            fields = self._range_fields(definition, criteria)
            buckets = {
                value.id: _any_of([_range_query(f, value) for f in fields])
                for value in definition.values
                if value.is_range
            }
            if buckets:
                aggs[name] = {"filters": {"filters": buckets}}

        return aggs

    @staticmethod
    def _sort_clause(sort_field: SortField) -> dict:
        spec: dict[str, Any] = {
            "order": "desc" if sort_field.is_descending else "asc",
            "missing": "_last",
        }
        is_double = sort_field.data_type is SortDataType.DOUBLE
        if sort_field.ignore_if_field_missing:
            spec["unmapped_type"] = "double" if is_double else "keyword"
        elif is_double:
            spec["numeric_type"] = "double"
        return {sort_field.name: spec}

    @staticmethod
    def _map_aggregations(
        criteria: SearchCriteria,
        raw_aggs: dict[str, Any],
    ) -> list[dict]:
        result = []

        for definition in criteria.filters:
            agg = raw_aggs.get(definition.key.lower())
            if agg is None or not definition.accepts_currency(criteria.currency):
                continue

            buckets = agg.get("buckets", [])
            if isinstance(buckets, dict):
                items = [(value_id, b.get("doc_count", 0)) for value_id, b in buckets.items()]
            else:
                items = [(str(b.get("key")), b.get("doc_count", 0)) for b in buckets]

            values = []
            for value_id, count in items:
                if not count:
                    continue
                known = definition.find_value(value_id)
                values.append({
                    "id": value_id,
                    "label": known.display_value if known and known.display_value else value_id,
                    "count": count,
                })

            result.append({
                "key": definition.key,
                "kind": definition.kind.value,
                "values": values,
            })

        return result

    @staticmethod
    def _extract_total(hits: dict[str, Any]) -> int:
        total = hits.get("total", 0)
        if isinstance(total, dict):
            return int(total.get("value", 0))
        return int(total)

    @staticmethod
    def _map_hit(hit: dict[str, Any]) -> dict[str, Any]:
        source = hit.get("_source") or {}
        return {"id": hit.get("_id"), **source}


def _any_of(clauses: list[dict]) -> dict:
    if len(clauses) == 1:
        return clauses[0]
    return {"bool": {"should": clauses, "minimum_should_match": 1}}


def _range_query(field_name: str, value: FilterValue) -> dict:
    bounds: dict[str, str] = {}
    if value.lower is not None:
        bounds["gte"] = str(value.lower)
    if value.upper is not None:
        bounds["lt"] = str(value.upper)
    return {"range": {field_name: bounds}}
