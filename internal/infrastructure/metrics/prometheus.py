"""
Prometheus Metrics for Catalog Search Service.

Defines all metrics for monitoring search compilation and execution.
"""

from prometheus_client import Counter, Histogram

# HTTP
HTTP_REQUESTS_TOTAL = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status_code']
)

HTTP_REQUEST_DURATION = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Criteria compilation
SEARCH_REQUESTS = Counter(
    'catalog_search_requests_total',
    'Catalog search requests by outcome',
    ['outcome']  # success, store_not_found, ambiguous_filter
)

APPLIED_FILTERS = Histogram(
    'catalog_search_applied_filters',
    'Applied filters per compiled search',
    buckets=[0, 1, 2, 3, 5, 8, 13, 21]
)

DROPPED_FILTER_REQUESTS = Counter(
    'catalog_search_dropped_filters_total',
    'Requested filters that did not resolve to a definition',
    ['source', 'reason']  # source: terms, facets; reason: unknown_key, unmatched_tag
)

# Filter catalog provisioning
FILTER_CACHE_LOOKUPS = Counter(
    'filter_catalog_cache_lookups_total',
    'Filter catalog cache lookups',
    ['result']  # hit, miss
)

# Search engine
SEARCH_ENGINE_DURATION = Histogram(
    'search_engine_duration_seconds',
    'Search engine round-trip duration',
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)
