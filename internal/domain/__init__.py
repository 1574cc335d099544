"""
Domain package for Catalog Search Service.

Contains domain entities, value objects, and domain errors.
"""
from .filters import (
    AppliedFilter,
    FilterContext,
    FilterDefinition,
    FilteredBrowsing,
    FilterKind,
)
from .search_criteria import DEFAULT_SORT_ORDER, DEFAULT_TAKE, SearchCriteria
from .store import (
    CatalogProperty,
    FilterProperty,
    InventoryInfo,
    PropertyDictionaryValue,
    SearchResponseGroup,
    Store,
)
from .value_objects import FilterValue, KeyValues, SortDataType, SortField, SortSpec
from .errors import (
    DomainError,
    DomainValidationError,
    StoreNotFoundError,
    AmbiguousFilterError,
)

__all__ = [
    "AppliedFilter",
    "FilterContext",
    "FilterDefinition",
    "FilteredBrowsing",
    "FilterKind",
    "DEFAULT_SORT_ORDER",
    "DEFAULT_TAKE",
    "SearchCriteria",
    "CatalogProperty",
    "FilterProperty",
    "InventoryInfo",
    "PropertyDictionaryValue",
    "SearchResponseGroup",
    "Store",
    "FilterValue",
    "KeyValues",
    "SortDataType",
    "SortField",
    "SortSpec",
    "DomainError",
    "DomainValidationError",
    "StoreNotFoundError",
    "AmbiguousFilterError",
]
