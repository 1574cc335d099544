"""
PostgreSQL Catalog Property Repository.

Reads catalog properties and their dictionary values.
"""

from asyncpg import Pool

from internal.domain.store import CatalogProperty, PropertyDictionaryValue


class PostgresPropertyRepository:
    """Read-only access to catalog properties."""

    def __init__(self, pool: Pool) -> None:
        """
        Initialize the repository.

        Args:
            pool: asyncpg connection pool.
        """
        self._pool = pool

    async def get_all_catalog_properties(self, catalog_id: str) -> list[CatalogProperty]:
        """
        Get all properties defined in a catalog and its categories.

        Args:
            catalog_id: Catalog identifier.

        Returns:
            Catalog properties ordered by name.
        """
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """
                SELECT id, name, catalog_id
                FROM catalog_properties
                WHERE catalog_id = $1
                ORDER BY name
                """,
                catalog_id,
            )

            return [
                CatalogProperty(id=row["id"], name=row["name"], catalog_id=row["catalog_id"])
                for row in rows
            ]

    async def search_dictionary_values(self, property_id: str) -> list[PropertyDictionaryValue]:
        """
        Get the dictionary values of a property.

        Args:
            property_id: Property identifier.

        Returns:
            Dictionary values.
        """
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """
                SELECT alias, value
                FROM property_dictionary_values
                WHERE property_id = $1
                ORDER BY id
                """,
                property_id,
            )

            return [PropertyDictionaryValue(alias=row["alias"], value=row["value"]) for row in rows]
