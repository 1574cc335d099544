"""
Elasticsearch infrastructure package.
"""
from .client import ElasticsearchClient, ElasticsearchClientConfig
from .catalog_search_gateway import CatalogSearchResult, ElasticsearchCatalogSearchGateway
from .query_escape import escape_search_term

__all__ = [
    "ElasticsearchClient",
    "ElasticsearchClientConfig",
    "CatalogSearchResult",
    "ElasticsearchCatalogSearchGateway",
    "escape_search_term",
]
