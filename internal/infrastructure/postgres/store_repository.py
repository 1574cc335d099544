"""
PostgreSQL Store Repository.

Reads stores and their dynamic properties with asyncpg.
"""

from typing import Optional

import asyncpg
from asyncpg import Pool

from internal.domain.store import Store


class PostgresStoreRepository:
    """
    PostgreSQL implementation of the Store Repository.

    Stores are owned by the store service; this repository only reads them
    and writes dynamic properties holding search settings.
    """

    def __init__(self, pool: Pool) -> None:
        """
        Initialize the repository.

        Args:
            pool: asyncpg connection pool.
        """
        self._pool = pool

    async def get_by_id(self, store_id: str) -> Optional[Store]:
        """
        Get a store by ID.

        Args:
            store_id: The store identifier.

        Returns:
            Store if found, None otherwise.
        """
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                SELECT id, name, catalog_id, default_language, default_currency,
                       fulfillment_center_id
                FROM stores
                WHERE id = $1
                """,
                store_id,
            )

            if not row:
                return None

            properties = await conn.fetch(
                """
                SELECT name, value
                FROM store_dynamic_properties
                WHERE store_id = $1
                """,
                store_id,
            )

            return self._row_to_entity(row, properties)

    async def save_dynamic_properties(self, store: Store) -> None:
        """
        Upsert all dynamic properties of a store.

        Args:
            store: Store whose dynamic properties are persisted.
        """
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                await conn.executemany(
                    """
                    INSERT INTO store_dynamic_properties (store_id, name, value, updated_at)
                    VALUES ($1, $2, $3, NOW())
                    ON CONFLICT (store_id, name)
                    DO UPDATE SET value = EXCLUDED.value, updated_at = NOW()
                    """,
                    [
                        (store.id, name, value)
                        for name, value in store.dynamic_properties.items()
                    ],
                )

    def _row_to_entity(
        self,
        row: asyncpg.Record,
        properties: list[asyncpg.Record],
    ) -> Store:
        """
        Convert database rows to Store entity.

        Args:
            row: Store row.
            properties: Dynamic property rows.

        Returns:
            Store entity.
        """
        return Store(
            id=row["id"],
            name=row["name"],
            catalog=row["catalog_id"],
            default_language=row["default_language"],
            default_currency=row["default_currency"],
            fulfillment_center_id=row["fulfillment_center_id"],
            dynamic_properties={p["name"]: p["value"] for p in properties},
        )


async def create_pool(dsn: str, min_size: int = 5, max_size: int = 20) -> Pool:
    """
    Create an asyncpg connection pool.

    Args:
        dsn: Database connection string.
        min_size: Minimum pool size.
        max_size: Maximum pool size.

    Returns:
        asyncpg connection pool.
    """
    return await asyncpg.create_pool(
        dsn=dsn,
        min_size=min_size,
        max_size=max_size,
    )
