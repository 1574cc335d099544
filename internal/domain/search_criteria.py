"""
Domain model for compiled search criteria.

SearchCriteria is what the search engine consumes: scope, pagination,
pricing context, registered and applied filters, and sort.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .errors import DomainValidationError
from .filters import AppliedFilter, FilterDefinition
from .value_objects import SortField, SortSpec


DEFAULT_TAKE = 10

# Engine-side ordering used when no known sort is requested
DEFAULT_SORT_ORDER = SortSpec(fields=(SortField(name="__sort"),))

# Per-category manual ordering fields are named sort{catalog}{category}
POSITION_SORT_PREFIX = "sort"

REVIEWS_AVERAGE_FIELD = "__reviews_avg"
REVIEWS_TOTAL_FIELD = "__reviews_total"


@dataclass
class SearchCriteria:
    """
    Provider-neutral criteria compiled from one search request.

    Attributes:
        catalog: Lower-cased catalog id.
        locale: Request language.
        outlines: Category path patterns ("{catalog}/{outline}*").
        category_id: Last outline segment, if an outline was given.
        search_phrase: Escaped keyword.
        pricelists: Pricelist ids in request order.
        currency: Request currency.
        skip: Number of records to skip.
        take: Number of records to return (always > 0).
        start_date_from: Only items starting at or after this date.
        filters: Every definition of the filter catalog.
        applied_filters: Definitions bound to requested values.
        sort: Sort specification.
        is_fuzzy_search: Allow fuzzy keyword matching.
        reviews_average_field: Index field of the average review rating.
        reviews_total_field: Index field of the review count.
    """

    catalog: str
    locale: Optional[str] = None
    outlines: list[str] = field(default_factory=list)
    category_id: Optional[str] = None
    search_phrase: Optional[str] = None
    pricelists: list[str] = field(default_factory=list)
    currency: Optional[str] = None
    skip: int = 0
    take: int = DEFAULT_TAKE
    start_date_from: Optional[datetime] = None
    filters: list[FilterDefinition] = field(default_factory=list)
    applied_filters: list[AppliedFilter] = field(default_factory=list)
    sort: SortSpec = DEFAULT_SORT_ORDER
    is_fuzzy_search: bool = True
    reviews_average_field: str = REVIEWS_AVERAGE_FIELD
    reviews_total_field: str = REVIEWS_TOTAL_FIELD

    def add_filter(self, definition: FilterDefinition) -> None:
        """Register a filter definition so it is aggregated on."""
        self.filters.append(definition)

    def apply(self, applied: AppliedFilter) -> None:
        """
        Constrain the search by an applied filter.

        Raises:
            DomainValidationError: If the definition was not registered.
        """
        if applied.filter not in self.filters:
            raise DomainValidationError(
                f"Filter '{applied.key}' is not part of the filter catalog"
            )
        self.applied_filters.append(applied)

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "catalog": self.catalog,
            "locale": self.locale,
            "outlines": list(self.outlines),
            "category_id": self.category_id,
            "search_phrase": self.search_phrase,
            "pricelists": list(self.pricelists),
            "currency": self.currency,
            "skip": self.skip,
            "take": self.take,
            "start_date_from": (
                self.start_date_from.isoformat() if self.start_date_from else None
            ),
            "filters": [f.to_dict() for f in self.filters],
            "applied_filters": [a.to_dict() for a in self.applied_filters],
            "sort": self.sort.to_dict(),
            "is_fuzzy_search": self.is_fuzzy_search,
        }
