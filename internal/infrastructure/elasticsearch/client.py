"""
Elasticsearch client wrapper.

Owns the AsyncElasticsearch connection used by the catalog search gateway.
"""
from typing import Any, Optional

from elasticsearch import ApiError, AsyncElasticsearch
from pydantic import BaseModel, Field

from pkg.logger.logger import get_logger


logger = get_logger(__name__)


class ElasticsearchClientConfig(BaseModel):
    """Connection settings for Elasticsearch."""

    hosts: list[str] = Field(
        default_factory=lambda: ["http://localhost:9200"],
        description="Elasticsearch host URLs",
    )
    api_key: Optional[str] = Field(None, description="API key for authentication")
    request_timeout: float = Field(5.0, description="Request timeout in seconds")
    verify_certs: bool = Field(True, description="Verify SSL certificates")


class ElasticsearchClient:
    """Lazily connected AsyncElasticsearch wrapper."""

    def __init__(self, config: Optional[ElasticsearchClientConfig] = None) -> None:
        """
        Initialize the client.

        Args:
            config: Connection settings.
        """
        self._config = config or ElasticsearchClientConfig()
        self._es: Optional[AsyncElasticsearch] = None

    async def start(self) -> None:
        """Open the connection and ping the cluster."""
        if self._es is not None:
            return

        logger.info(
            "Connecting to Elasticsearch",
            hosts=self._config.hosts,
            timeout=self._config.request_timeout,
        )
        self._es = AsyncElasticsearch(
            hosts=self._config.hosts,
            api_key=self._config.api_key,
            request_timeout=self._config.request_timeout,
            verify_certs=self._config.verify_certs,
        )

        try:
            ok = await self._es.ping()
        except ApiError as e:
            logger.error("Elasticsearch API error during startup", error=str(e))
            raise ConnectionError(f"Elasticsearch connection error: {e}") from e

        if not ok:
            raise ConnectionError("Elasticsearch ping failed")
        logger.info("Elasticsearch connection established")

    async def close(self) -> None:
        """Close the connection."""
        if self._es is not None:
            await self._es.close()
            self._es = None

    async def search(self, index: str, body: dict[str, Any]) -> dict[str, Any]:
        """
        Run a search request.

        Args:
            index: Index name.
            body: Search DSL.

        Returns:
            Raw response body.
        """
        if self._es is None:
            await self.start()
        response = await self._es.search(index=index, body=body)
        return response.body
