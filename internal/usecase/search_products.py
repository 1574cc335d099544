"""
Search Products Use Case.

Compiles a catalog search request into criteria, runs it on the search
engine and decorates the returned products with inventory.
"""
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, Sequence

from internal.domain.errors import AmbiguousFilterError, StoreNotFoundError
from internal.domain.filters import FilterContext, FilterDefinition
from internal.domain.search_criteria import SearchCriteria
from internal.domain.store import InventoryInfo, SearchResponseGroup, Store
from internal.infrastructure.elasticsearch.catalog_search_gateway import CatalogSearchResult
from internal.infrastructure.elasticsearch.query_escape import escape_search_term
from internal.infrastructure.metrics import APPLIED_FILTERS, SEARCH_REQUESTS
from internal.usecase.criteria_builder import (
    CriteriaBuilder,
    SearchRequest,
    category_id_from_outline,
    normalize_request,
)
from pkg.logger.logger import get_logger


logger = get_logger(__name__)


class StoreLookup(Protocol):
    async def get_by_id(self, store_id: str) -> Optional[Store]:
        ...


class FilterProvider(Protocol):
    async def get_filters(
        self,
        context: FilterContext,
        store: Optional[Store] = None,
    ) -> list[FilterDefinition]:
        ...


class SearchGateway(Protocol):
    async def search(self, criteria: SearchCriteria) -> CatalogSearchResult:
        ...


class InventoryLookup(Protocol):
    async def get_products_inventory_infos(
        self,
        product_ids: Sequence[str],
    ) -> list[InventoryInfo]:
        ...


@dataclass
class SearchProductsOutput:
    """Output for SearchProductsUseCase."""

    products: list[dict]
    total: int
    aggregations: list[dict] = field(default_factory=list)
    criteria: Optional[SearchCriteria] = None


class SearchProductsUseCase:
    """
    Use case for faceted catalog search.

    Compilation is synchronous apart from the store and filter catalog
    lookups; collaborator errors propagate unchanged.
    """

    def __init__(
        self,
        store_lookup: StoreLookup,
        filter_provider: FilterProvider,
        gateway: Optional[SearchGateway] = None,
        inventory: Optional[InventoryLookup] = None,
        builder: Optional[CriteriaBuilder] = None,
        escape: Callable[[str], str] = escape_search_term,
    ) -> None:
        """
        Initialize the use case.

        Args:
            store_lookup: Store repository.
            filter_provider: Filter catalog provisioning service.
            gateway: Search engine gateway (needed by execute).
            inventory: Inventory repository (optional).
            builder: Criteria builder.
            escape: Keyword escaping for the engine query grammar.
        """
        self._store_lookup = store_lookup
        self._filter_provider = filter_provider
        self._gateway = gateway
        self._inventory = inventory
        self._builder = builder or CriteriaBuilder()
        self._escape = escape

    async def compile_criteria(self, request: SearchRequest) -> SearchCriteria:
        """
        Compile a search request into criteria.

        Args:
            request: Raw search request.

        Returns:
            Compiled criteria.

        Raises:
            StoreNotFoundError: If the store does not exist.
            AmbiguousFilterError: If the filter catalog is inconsistent.
        """
        _, criteria = await self._compile(request)
        return criteria

    async def _compile(self, request: SearchRequest) -> tuple[Store, SearchCriteria]:
        request = normalize_request(request, self._escape)

        try:
            store = await self._store_lookup.get_by_id(request.store_id)
            if store is None:
                raise StoreNotFoundError(request.store_id)

            context = FilterContext(
                store_id=request.store_id,
                category_id=category_id_from_outline(request.outline),
            )
            filters = await self._filter_provider.get_filters(context, store=store)
            criteria = self._builder.build(request, store, filters)
        except StoreNotFoundError:
            SEARCH_REQUESTS.labels(outcome="store_not_found").inc()
            raise
        except AmbiguousFilterError as e:
            SEARCH_REQUESTS.labels(outcome="ambiguous_filter").inc()
            logger.error(
                "Ambiguous filter configuration",
                store_id=request.store_id,
                key=e.key,
                currency=e.currency,
                matches=e.matches,
            )
            raise

        SEARCH_REQUESTS.labels(outcome="success").inc()
        APPLIED_FILTERS.observe(len(criteria.applied_filters))

        logger.info(
            "Search criteria compiled",
            store_id=request.store_id,
            catalog=criteria.catalog,
            category_id=criteria.category_id,
            filters=len(criteria.filters),
            applied_filters=len(criteria.applied_filters),
            sort=[f.name for f in criteria.sort.fields],
        )

        return store, criteria

    async def execute(self, request: SearchRequest) -> SearchProductsOutput:
        """
        Execute the search use case.

        Args:
            request: Raw search request.

        Returns:
            Search results.
        """
        if self._gateway is None:
            raise RuntimeError("Search gateway is not configured")

        store, criteria = await self._compile(request)
        result = await self._gateway.search(criteria)

        if request.response_group & SearchResponseGroup.WITH_PROPERTIES:
            await self._populate_inventory(store, result.products)

        logger.info(
            "Search completed",
            store_id=request.store_id,
            total=result.total,
            returned=len(result.products),
        )

        return SearchProductsOutput(
            products=(
                result.products
                if request.response_group & SearchResponseGroup.WITH_PRODUCTS
                else []
            ),
            total=result.total,
            aggregations=(
                result.aggregations
                if request.response_group & SearchResponseGroup.WITH_AGGREGATIONS
                else []
            ),
            criteria=criteria,
        )

    async def _populate_inventory(self, store: Store, products: list[dict]) -> None:
        """Attach the store fulfillment center inventory to each product."""
        if self._inventory is None or not store.fulfillment_center_id or not products:
            return

        infos = await self._inventory.get_products_inventory_infos([p["id"] for p in products])
        by_product = {
            info.product_id: info
            for info in infos
            if info.fulfillment_center_id == store.fulfillment_center_id
        }

        for product in products:
            info = by_product.get(product["id"])
            if info is not None:
                product["inventories"] = [info.to_dict()]
