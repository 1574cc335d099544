"""
Use case package for Catalog Search Service.

Contains criteria compilation and search use cases.
"""
from .criteria_builder import CriteriaBuilder, SearchRequest
from .filter_resolver import FilterResolver
from .key_value_parser import parse_key_values
from .sort_compiler import SortCompiler
from .search_products import SearchProductsUseCase, SearchProductsOutput
from .browse_filters import BrowseFilterService
from .filter_properties import StoreFilterPropertiesService

__all__ = [
    "CriteriaBuilder",
    "SearchRequest",
    "FilterResolver",
    "parse_key_values",
    "SortCompiler",
    "SearchProductsUseCase",
    "SearchProductsOutput",
    "BrowseFilterService",
    "StoreFilterPropertiesService",
]
