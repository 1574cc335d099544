"""
Store Filter Properties Use Case.

Reads and updates which catalog properties a store offers as filters.
"""
from typing import Optional, Protocol, Sequence

from internal.domain.errors import StoreNotFoundError
from internal.domain.filters import FilterDefinition, FilteredBrowsing, FilterKind
from internal.domain.store import (
    CatalogProperty,
    FilterProperty,
    PropertyDictionaryValue,
    Store,
)
from internal.domain.value_objects import FilterValue
from internal.infrastructure.redis.cache import FilterCatalogCache
from pkg.logger.logger import get_logger


logger = get_logger(__name__)


class StoreRepository(Protocol):
    """Store persistence collaborator."""

    async def get_by_id(self, store_id: str) -> Optional[Store]:
        ...

    async def save_dynamic_properties(self, store: Store) -> None:
        ...


class PropertyRepository(Protocol):
    """Catalog property collaborator."""

    async def get_all_catalog_properties(self, catalog_id: str) -> list[CatalogProperty]:
        ...

    async def search_dictionary_values(self, property_id: str) -> list[PropertyDictionaryValue]:
        ...


class StoreFilterPropertiesService:
    """
    Service for the filter settings of a store.

    Selected properties become attribute filters stored in the store's
    filtered browsing settings. Their order is the order of selection.
    """

    def __init__(
        self,
        store_repository: StoreRepository,
        property_repository: PropertyRepository,
        cache: Optional[FilterCatalogCache] = None,
    ) -> None:
        """
        Initialize the service.

        Args:
            store_repository: Store repository.
            property_repository: Catalog property repository.
            cache: Filter catalog cache to invalidate on update (optional).
        """
        self._stores = store_repository
        self._properties = property_repository
        self._cache = cache

    async def get_filter_properties(self, store_id: str) -> list[FilterProperty]:
        """
        Get all catalog properties of a store with their selection flag.

        Selected properties come first in their stored order, followed by
        unselected properties ordered by name.

        Args:
            store_id: Store identifier.

        Returns:
            Filter properties.

        Raises:
            StoreNotFoundError: If the store does not exist.
        """
        store = await self._get_store(store_id)
        all_properties = await self._get_all_catalog_properties(store.catalog)
        selected_names = store.selected_filter_keys()
        selected_lower = {name.lower() for name in selected_names}

        by_name: dict[str, CatalogProperty] = {}
        for prop in all_properties:
            by_name.setdefault(prop.name.lower(), prop)

        filter_properties = sorted(
            (
                FilterProperty(name=prop.name, is_selected=prop.name.lower() in selected_lower)
                for prop in by_name.values()
            ),
            key=lambda p: p.name,
        )

        ordered = [
            prop
            for name in selected_names
            for prop in filter_properties
            if prop.name.lower() == name.lower()
        ]
        ordered.extend(p for p in filter_properties if p.name.lower() not in selected_lower)

        return list(dict.fromkeys(ordered))

    async def set_filter_properties(
        self,
        store_id: str,
        filter_properties: Sequence[FilterProperty],
    ) -> None:
        """
        Replace the attribute filters of a store.

        Args:
            store_id: Store identifier.
            filter_properties: Properties with their selection flag, in the
                order the selected ones should be offered.

        Raises:
            StoreNotFoundError: If the store does not exist.
        """
        store = await self._get_store(store_id)
        all_properties = await self._get_all_catalog_properties(store.catalog)

        selected_names = list(dict.fromkeys(p.name for p in filter_properties if p.is_selected))

        values_by_key: dict[str, list[PropertyDictionaryValue]] = {}
        for name in selected_names:
            for prop in all_properties:
                if prop.name.lower() != name.lower():
                    continue
                values = await self._properties.search_dictionary_values(prop.id)
                values_by_key.setdefault(prop.name, []).extend(values)

        attributes = [
            FilterDefinition(
                key=key,
                kind=FilterKind.ATTRIBUTE,
                values=tuple(_distinct_values(values)),
            )
            for key, values in values_by_key.items()
        ]

        browsing = store.filtered_browsing or FilteredBrowsing()
        browsing.attributes = attributes
        store.filtered_browsing = browsing
        await self._stores.save_dynamic_properties(store)

        if self._cache is not None:
            await self._cache.invalidate_store(store.id)

        logger.info(
            "Store filter properties updated",
            store_id=store.id,
            selected=[a.key for a in attributes],
        )

    async def _get_store(self, store_id: str) -> Store:
        store = await self._stores.get_by_id(store_id)
        if store is None:
            raise StoreNotFoundError(store_id)
        return store

    async def _get_all_catalog_properties(self, catalog_id: str) -> list[CatalogProperty]:
        """Catalog properties distinct by id, ordered by name."""
        properties = await self._properties.get_all_catalog_properties(catalog_id)

        by_id: dict[str, CatalogProperty] = {}
        for prop in properties:
            by_id.setdefault(prop.id, prop)

        return sorted(by_id.values(), key=lambda p: p.name)


def _distinct_values(values: Sequence[PropertyDictionaryValue]) -> list[FilterValue]:
    """Values with both alias and value, distinct by alias ignoring case, ordered by value."""
    by_alias: dict[str, FilterValue] = {}
    for value in values:
        if not value.alias or not value.value:
            continue
        by_alias.setdefault(
            value.alias.lower(),
            FilterValue(id=value.alias, display_value=value.value),
        )

    return sorted(by_alias.values(), key=lambda v: v.display_value)
