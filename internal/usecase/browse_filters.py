"""
Browse Filter Provisioning.

Builds the filter catalog of a search context from store configuration.
"""
from typing import Optional, Protocol

from internal.domain.errors import StoreNotFoundError
from internal.domain.filters import FilterContext, FilterDefinition
from internal.domain.store import Store
from internal.infrastructure.metrics import FILTER_CACHE_LOOKUPS
from internal.infrastructure.redis.cache import FilterCatalogCache
from pkg.logger.logger import get_logger


logger = get_logger(__name__)


class StoreLookup(Protocol):
    """Store lookup collaborator."""

    async def get_by_id(self, store_id: str) -> Optional[Store]:
        ...


class BrowseFilterService:
    """
    Provisions filter catalogs.

    Definitions come from the store's filtered browsing settings in the
    order attributes, ranges, prices. Catalogs are cached per context when
    a cache is configured.
    """

    def __init__(
        self,
        store_lookup: StoreLookup,
        cache: Optional[FilterCatalogCache] = None,
    ) -> None:
        """
        Initialize the service.

        Args:
            store_lookup: Store repository.
            cache: Filter catalog cache (optional).
        """
        self._store_lookup = store_lookup
        self._cache = cache

    async def get_filters(
        self,
        context: FilterContext,
        store: Optional[Store] = None,
    ) -> list[FilterDefinition]:
        """
        Get the filter catalog for a context.

        Args:
            context: Store and optional category the search runs in.
            store: The context store when the caller already loaded it.

        Returns:
            Filter definitions.

        Raises:
            StoreNotFoundError: If the store does not exist.
        """
        if self._cache is not None:
            cached = await self._cache.get_filters(context)
            if cached is not None:
                FILTER_CACHE_LOOKUPS.labels(result="hit").inc()
                return cached
            FILTER_CACHE_LOOKUPS.labels(result="miss").inc()

        if store is None or store.id != context.store_id:
            store = await self._store_lookup.get_by_id(context.store_id)
        if store is None:
            raise StoreNotFoundError(context.store_id)

        browsing = store.filtered_browsing
        filters = browsing.definitions() if browsing is not None else []

        logger.debug(
            "Filter catalog provisioned",
            store_id=context.store_id,
            category_id=context.category_id,
            filters=len(filters),
        )

        if self._cache is not None:
            await self._cache.set_filters(context, filters)

        return filters
