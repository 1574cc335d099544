"""
FastAPI HTTP Handlers for Catalog Search API v1.

Implements the catalog search and store filter property endpoints.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from internal.domain.errors import AmbiguousFilterError, StoreNotFoundError
from internal.domain.store import FilterProperty, SearchResponseGroup
from internal.transport.http.dto import (
    AggregationDTO,
    ErrorResponse,
    FilterPropertyDTO,
    SearchResultResponse,
)
from internal.usecase.criteria_builder import SearchRequest
from internal.usecase.filter_properties import StoreFilterPropertiesService
from internal.usecase.search_products import SearchProductsUseCase
from pkg.logger.logger import get_logger

logger = get_logger(__name__)


router = APIRouter(prefix="/api/v1/search", tags=["search"])

_ALL_GROUPS = (
    SearchResponseGroup.WITH_PRODUCTS
    | SearchResponseGroup.WITH_AGGREGATIONS
    | SearchResponseGroup.WITH_PROPERTIES
)


# Dependency injection container (simplified)
class Dependencies:
    """Container for handler dependencies."""

    search_use_case: Optional[SearchProductsUseCase] = None
    filter_properties_service: Optional[StoreFilterPropertiesService] = None


_deps = Dependencies()


def get_search_use_case() -> SearchProductsUseCase:
    """Get SearchProductsUseCase instance."""
    if _deps.search_use_case is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return _deps.search_use_case


def get_filter_properties_service() -> StoreFilterPropertiesService:
    """Get StoreFilterPropertiesService instance."""
    if _deps.filter_properties_service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return _deps.filter_properties_service


def set_dependencies(
    search_use_case: Optional[SearchProductsUseCase] = None,
    filter_properties_service: Optional[StoreFilterPropertiesService] = None,
) -> None:
    """
    Set handler dependencies.

    Called during application startup.
    """
    _deps.search_use_case = search_use_case
    _deps.filter_properties_service = filter_properties_service


def _store_not_found(e: StoreNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


# Handlers
@router.get("/health")
async def health_check() -> dict:
    """
    Health check endpoint.

    Returns:
        Health status.
    """
    return {"status": "healthy", "service": "catalog-search-service"}


@router.get("/metrics")
async def metrics():
    """
    Prometheus metrics endpoint.

    Returns:
        Prometheus metrics in text format.
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@router.get(
    "",
    response_model=SearchResultResponse,
    responses={
        200: {"description": "Search results"},
        404: {"model": ErrorResponse, "description": "Store not found"},
        500: {"model": ErrorResponse, "description": "Filter configuration error"},
    },
)
async def search(
    store_id: str = Query(..., description="Store ID"),
    keyword: Optional[str] = Query(None, description="Free-text keyword"),
    sort: Optional[str] = Query(
        None, description="Sort name (price, position, name, rating, reviews)"
    ),
    sort_order: Optional[str] = Query(None, description="Sort order (asc/desc)"),
    outline: Optional[str] = Query(None, description="Category path, e.g. cat1/cat2"),
    language_code: Optional[str] = Query(None, description="Language code"),
    currency: Optional[str] = Query(None, description="Currency code"),
    pricelist_ids: Optional[List[str]] = Query(None, description="Pricelist IDs"),
    take: int = Query(0, description="Page size (<= 0 uses the default)"),
    skip: int = Query(0, ge=0, description="Records to skip"),
    start_date_from: Optional[datetime] = Query(None, description="Minimum start date"),
    terms: Optional[List[str]] = Query(None, description="Terms as key:value1,value2"),
    facets: Optional[List[str]] = Query(None, description="Facets as key:value1,value2"),
    response_group: int = Query(
        int(SearchResponseGroup.DEFAULT), ge=0, description="Response group flags"
    ),
    use_case: SearchProductsUseCase = Depends(get_search_use_case),
) -> SearchResultResponse:
    """
    Search store products.

    Terms and facets narrow the results; every filter configured for the
    store is returned as an aggregation.
    """
    logger.info(
        "Searching catalog",
        store_id=store_id,
        keyword=keyword,
        outline=outline,
        terms=terms,
        facets=facets,
    )

    request = SearchRequest(
        store_id=store_id,
        keyword=keyword,
        sort=sort,
        sort_order=sort_order,
        outline=outline,
        language_code=language_code,
        currency=currency,
        pricelist_ids=pricelist_ids or [],
        take=take,
        skip=skip,
        start_date_from=start_date_from,
        terms=terms or [],
        facets=facets or [],
        response_group=SearchResponseGroup(response_group & int(_ALL_GROUPS)),
    )

    try:
        result = await use_case.execute(request)
    except StoreNotFoundError as e:
        logger.warning("Store not found", store_id=store_id)
        raise _store_not_found(e)
    except AmbiguousFilterError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Filter configuration error: {e.message}",
        )

    return SearchResultResponse(
        products=result.products,
        total_count=result.total,
        aggregations=[AggregationDTO(**a) for a in result.aggregations],
    )


@router.get(
    "/storefilterproperties/{store_id}",
    response_model=List[FilterPropertyDTO],
    responses={
        200: {"description": "Store filter properties"},
        404: {"model": ErrorResponse, "description": "Store not found"},
    },
)
async def get_filter_properties(
    store_id: str = Path(..., description="Store ID"),
    service: StoreFilterPropertiesService = Depends(get_filter_properties_service),
) -> List[FilterPropertyDTO]:
    """
    Get filter properties for a store.

    Selected properties come first in their configured order; unselected
    properties follow, ordered by name.
    """
    logger.info("Getting store filter properties", store_id=store_id)

    try:
        properties = await service.get_filter_properties(store_id)
    except StoreNotFoundError as e:
        raise _store_not_found(e)

    return [FilterPropertyDTO(name=p.name, is_selected=p.is_selected) for p in properties]


@router.put(
    "/storefilterproperties/{store_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        204: {"description": "Filter properties saved"},
        404: {"model": ErrorResponse, "description": "Store not found"},
    },
)
async def set_filter_properties(
    filter_properties: List[FilterPropertyDTO],
    store_id: str = Path(..., description="Store ID"),
    service: StoreFilterPropertiesService = Depends(get_filter_properties_service),
) -> Response:
    """
    Set filter properties for a store.

    Selected properties become the store's attribute filters, in the order
    given.
    """
    logger.info(
        "Setting store filter properties",
        store_id=store_id,
        selected=sum(1 for p in filter_properties if p.is_selected),
    )

    try:
        await service.set_filter_properties(
            store_id,
            [FilterProperty(name=p.name, is_selected=p.is_selected) for p in filter_properties],
        )
    except StoreNotFoundError as e:
        raise _store_not_found(e)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
