"""
FastAPI Application Entry Point.

REST API server for Catalog Search Service.
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


# Load environment variables before settings are read
load_dotenv()

from internal.config.settings import settings  # noqa: E402
from internal.infrastructure.elasticsearch import (  # noqa: E402
    ElasticsearchCatalogSearchGateway,
    ElasticsearchClient,
    ElasticsearchClientConfig,
)
from internal.infrastructure.postgres import (  # noqa: E402
    PostgresInventoryRepository,
    PostgresPropertyRepository,
    PostgresStoreRepository,
    create_pool,
)
from internal.infrastructure.redis import FilterCatalogCache, RedisCache  # noqa: E402
from internal.transport.http.middleware import MetricsMiddleware, RequestIdMiddleware  # noqa: E402
from internal.transport.http.v1.handlers import router, set_dependencies  # noqa: E402
from internal.usecase.browse_filters import BrowseFilterService  # noqa: E402
from internal.usecase.criteria_builder import CriteriaBuilder  # noqa: E402
from internal.usecase.filter_properties import StoreFilterPropertiesService  # noqa: E402
from internal.usecase.search_products import SearchProductsUseCase  # noqa: E402
from pkg.logger.logger import get_logger, setup_logging  # noqa: E402


# Setup logging
setup_logging(
    level=settings.LOG_LEVEL,
    json_format=settings.LOG_FORMAT == "json",
)

logger = get_logger(__name__)


# Global resources
db_pool = None
redis_cache = None
es_client = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown of resources.
    """
    global db_pool, redis_cache, es_client

    logger.info("Starting Catalog Search Service API...")

    # Initialize database pool
    try:
        db_pool = await create_pool(settings.DATABASE_URL)
        logger.info("Database pool created")
    except Exception as e:
        logger.error("Failed to create database pool", error=str(e))
        raise

    # Initialize Redis cache
    try:
        redis_cache = RedisCache(redis_url=settings.REDIS_URL)
        await redis_cache.connect()
        logger.info("Redis cache connected")
    except Exception as e:
        logger.warning("Failed to connect to Redis, caching disabled", error=str(e))
        redis_cache = None

    # Initialize Elasticsearch
    es_client = ElasticsearchClient(
        ElasticsearchClientConfig(
            hosts=settings.get_elasticsearch_hosts(),
            api_key=settings.ELASTICSEARCH_API_KEY or None,
            request_timeout=settings.ELASTICSEARCH_TIMEOUT,
        )
    )
    await es_client.start()

    # Create repositories and services
    store_repository = PostgresStoreRepository(db_pool)
    property_repository = PostgresPropertyRepository(db_pool)
    inventory_repository = PostgresInventoryRepository(db_pool)
    filter_cache = (
        FilterCatalogCache(redis_cache, ttl=settings.FILTER_CACHE_TTL) if redis_cache else None
    )

    browse_filters = BrowseFilterService(store_repository, cache=filter_cache)
    builder = CriteriaBuilder(
        default_take=settings.DEFAULT_TAKE,
        reviews_average_field=settings.REVIEWS_AVERAGE_FIELD,
        reviews_total_field=settings.REVIEWS_TOTAL_FIELD,
    )

    # Create use cases
    search_use_case = SearchProductsUseCase(
        store_lookup=store_repository,
        filter_provider=browse_filters,
        gateway=ElasticsearchCatalogSearchGateway(
            es_client,
            index_name=settings.SEARCH_INDEX_NAME,
        ),
        inventory=inventory_repository,
        builder=builder,
    )
    filter_properties_service = StoreFilterPropertiesService(
        store_repository=store_repository,
        property_repository=property_repository,
        cache=filter_cache,
    )

    # Set dependencies for handlers
    set_dependencies(
        search_use_case=search_use_case,
        filter_properties_service=filter_properties_service,
    )

    logger.info("Catalog Search Service API started successfully")

    yield

    # Shutdown
    logger.info("Shutting down Catalog Search Service API...")

    if es_client:
        await es_client.close()

    if redis_cache:
        await redis_cache.disconnect()

    if db_pool:
        await db_pool.close()

    logger.info("Catalog Search Service API shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="Catalog Search Service API",
    description="Faceted product search for storefronts",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Metrics middleware
app.add_middleware(MetricsMiddleware)

# Request ID middleware
app.add_middleware(RequestIdMiddleware)

# Include routers
app.include_router(router)


# Root endpoint
@app.get("/")
async def root() -> dict:
    """Root endpoint with service information."""
    return {
        "service": settings.APP_NAME,
        "version": "1.0.0",
        "status": "running",
    }


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
    )
