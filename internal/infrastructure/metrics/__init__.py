"""
Metrics infrastructure for Catalog Search Service.

Provides Prometheus metrics for monitoring.
"""

from .prometheus import (
    HTTP_REQUESTS_TOTAL,
    HTTP_REQUEST_DURATION,
    SEARCH_REQUESTS,
    APPLIED_FILTERS,
    DROPPED_FILTER_REQUESTS,
    FILTER_CACHE_LOOKUPS,
    SEARCH_ENGINE_DURATION,
)

__all__ = [
    "HTTP_REQUESTS_TOTAL",
    "HTTP_REQUEST_DURATION",
    "SEARCH_REQUESTS",
    "APPLIED_FILTERS",
    "DROPPED_FILTER_REQUESTS",
    "FILTER_CACHE_LOOKUPS",
    "SEARCH_ENGINE_DURATION",
]
