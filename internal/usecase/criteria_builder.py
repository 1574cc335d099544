"""
Search criteria compilation.

Turns a loosely-typed search request into provider-neutral SearchCriteria.
The builder is pure: the store and the filter catalog are looked up by the
caller and passed in.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, Optional, Sequence

from internal.domain.errors import DomainValidationError
from internal.domain.filters import FilterDefinition
from internal.domain.search_criteria import (
    DEFAULT_TAKE,
    REVIEWS_AVERAGE_FIELD,
    REVIEWS_TOTAL_FIELD,
    SearchCriteria,
)
from internal.domain.store import SearchResponseGroup, Store
from internal.usecase.filter_resolver import FilterResolver
from internal.usecase.key_value_parser import parse_key_values
from internal.usecase.sort_compiler import SortCompiler


@dataclass
class SearchRequest:
    """Input for catalog search, as received from the client."""

    store_id: Optional[str] = None
    keyword: Optional[str] = None
    sort: Optional[str] = None
    sort_order: Optional[str] = None
    outline: Optional[str] = None
    language_code: Optional[str] = None
    currency: Optional[str] = None
    pricelist_ids: list[str] = field(default_factory=list)
    take: int = 0  # <= 0 means default page size
    skip: int = 0
    start_date_from: Optional[datetime] = None
    terms: list[str] = field(default_factory=list)
    facets: list[str] = field(default_factory=list)
    response_group: SearchResponseGroup = SearchResponseGroup.DEFAULT


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value


def normalize_request(
    request: SearchRequest,
    escape: Callable[[str], str],
) -> SearchRequest:
    """
    Normalize textual request fields.

    Blank keyword, sort, sort order and outline become None. A non-blank
    keyword is escaped for the engine query grammar.

    Args:
        request: Raw request.
        escape: Query escaping function.

    Returns:
        A normalized copy of the request.
    """
    keyword = _blank_to_none(request.keyword)
    if keyword is not None:
        keyword = escape(keyword)

    return replace(
        request,
        keyword=keyword,
        sort=_blank_to_none(request.sort),
        sort_order=_blank_to_none(request.sort_order),
        outline=_blank_to_none(request.outline),
    )


def category_id_from_outline(outline: Optional[str]) -> Optional[str]:
    """Category id of an outline path: its last segment."""
    if not outline:
        return None
    return outline.split("/")[-1] or None


def is_descending(sort_order: Optional[str]) -> bool:
    """Whether a sort order string asks for descending order."""
    return sort_order is not None and sort_order.lower() == "desc"


class CriteriaBuilder:
    """
    Builds SearchCriteria from a normalized request.

    Steps: scope (catalog, locale, outline), filter registration, terms,
    facets, pagination, pricing context, sort.
    """

    def __init__(
        self,
        resolver: Optional[FilterResolver] = None,
        sort_compiler: Optional[SortCompiler] = None,
        default_take: int = DEFAULT_TAKE,
        reviews_average_field: str = REVIEWS_AVERAGE_FIELD,
        reviews_total_field: str = REVIEWS_TOTAL_FIELD,
    ) -> None:
        """
        Initialize the builder.

        Args:
            resolver: Filter resolver.
            sort_compiler: Sort compiler.
            default_take: Page size used when the request asks for <= 0.
            reviews_average_field: Index field of the average rating.
            reviews_total_field: Index field of the review count.

        Raises:
            DomainValidationError: If default_take is not positive.
        """
        if default_take <= 0:
            raise DomainValidationError(f"default_take must be positive, got {default_take}")

        self._resolver = resolver or FilterResolver()
        self._sort_compiler = sort_compiler or SortCompiler()
        self._default_take = default_take
        self._reviews_average_field = reviews_average_field
        self._reviews_total_field = reviews_total_field

    def build(
        self,
        request: SearchRequest,
        store: Store,
        filters: Sequence[FilterDefinition],
    ) -> SearchCriteria:
        """
        Build search criteria.

        Args:
            request: Normalized search request.
            store: Store the search runs in.
            filters: Filter catalog for the request context.

        Returns:
            Compiled search criteria.

        Raises:
            AmbiguousFilterError: If a requested key matches several definitions.
        """
        catalog = store.catalog

        criteria = SearchCriteria(
            catalog=catalog.lower(),
            locale=request.language_code,
            is_fuzzy_search=True,
            reviews_average_field=self._reviews_average_field,
            reviews_total_field=self._reviews_total_field,
        )

        if request.outline:
            criteria.outlines.append(f"{catalog}/{request.outline}*")
            criteria.category_id = category_id_from_outline(request.outline)

        # Every definition is aggregated on, constrained or not
        for definition in filters:
            criteria.add_filter(definition)

        self._apply_groups(criteria, filters, request.currency, request.terms, "terms")
        self._apply_groups(criteria, filters, request.currency, request.facets, "facets")

        criteria.take = request.take if request.take > 0 else self._default_take
        criteria.skip = request.skip
        criteria.pricelists = list(request.pricelist_ids or [])
        criteria.currency = request.currency
        criteria.start_date_from = request.start_date_from
        criteria.search_phrase = request.keyword

        criteria.sort = self._sort_compiler.compile(
            request.sort,
            is_descending(request.sort_order),
            criteria,
        )

        return criteria

    def _apply_groups(
        self,
        criteria: SearchCriteria,
        filters: Sequence[FilterDefinition],
        currency: Optional[str],
        raw: Optional[Sequence[str]],
        source: str,
    ) -> None:
        for group in parse_key_values(raw):
            for applied in self._resolver.resolve(filters, currency, group, source):
                criteria.apply(applied)
