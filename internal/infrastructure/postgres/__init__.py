"""
PostgreSQL infrastructure package.
"""
from .store_repository import PostgresStoreRepository, create_pool
from .property_repository import PostgresPropertyRepository
from .inventory_repository import PostgresInventoryRepository

__all__ = [
    "PostgresStoreRepository",
    "PostgresPropertyRepository",
    "PostgresInventoryRepository",
    "create_pool",
]
