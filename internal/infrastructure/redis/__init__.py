"""
Redis infrastructure package.
"""
from .cache import RedisCache, FilterCatalogCache

__all__ = ["RedisCache", "FilterCatalogCache"]
