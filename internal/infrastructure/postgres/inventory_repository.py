"""
PostgreSQL Inventory Repository.

Reads product stock per fulfillment center.
"""

from typing import Sequence

from asyncpg import Pool

from internal.domain.store import InventoryInfo


class PostgresInventoryRepository:
    """Read-only access to inventory records."""

    def __init__(self, pool: Pool) -> None:
        """
        Initialize the repository.

        Args:
            pool: asyncpg connection pool.
        """
        self._pool = pool

    async def get_products_inventory_infos(
        self,
        product_ids: Sequence[str],
    ) -> list[InventoryInfo]:
        """
        Get inventory records of several products in one query.

        Args:
            product_ids: Product identifiers.

        Returns:
            Inventory records for all fulfillment centers.
        """
        if not product_ids:
            return []

        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """
                SELECT product_id, fulfillment_center_id,
                       in_stock_quantity, reserved_quantity
                FROM inventory
                WHERE product_id = ANY($1::text[])
                """,
                list(product_ids),
            )

            return [
                InventoryInfo(
                    product_id=row["product_id"],
                    fulfillment_center_id=row["fulfillment_center_id"],
                    in_stock_quantity=row["in_stock_quantity"],
                    reserved_quantity=row["reserved_quantity"],
                )
                for row in rows
            ]
