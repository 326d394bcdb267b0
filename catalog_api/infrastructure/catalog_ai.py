"""Embedding generation for catalog items.

Provides the catalog AI used for semantic search: an HTTP client for an
OpenAI-compatible embeddings endpoint, and a disabled stand-in used when
no endpoint is configured.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol

import httpx
import structlog

from catalog_api.infrastructure.config import settings

if TYPE_CHECKING:
    from catalog_api.catalog.models import CatalogItem

logger = structlog.get_logger()


class CatalogAIError(Exception):
    """Error from the embedding service."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def item_embedding_text(item: "CatalogItem") -> str:
    """Get the text embedded for a catalog item."""
    return f"{item.name} {item.description or ''}"


class CatalogAI(Protocol):
    """Embedding provider used by the catalog."""

    @property
    def is_enabled(self) -> bool:
        """Whether embeddings can be generated."""
        ...

    async def get_embedding(self, text: str) -> list[float] | None:
        """Get an embedding for a piece of text."""
        ...

    async def get_embedding_for_item(self, item: "CatalogItem") -> list[float] | None:
        """Get an embedding for a catalog item."""
        ...

    async def get_embeddings(
        self, items: Sequence["CatalogItem"]
    ) -> list[list[float]] | None:
        """Get embeddings for many catalog items in one call."""
        ...


class DisabledCatalogAI:
    """Catalog AI used when no embedding endpoint is configured."""

    @property
    def is_enabled(self) -> bool:
        return False

    async def get_embedding(self, text: str) -> list[float] | None:
        return None

    async def get_embedding_for_item(self, item: "CatalogItem") -> list[float] | None:
        return None

    async def get_embeddings(
        self, items: Sequence["CatalogItem"]
    ) -> list[list[float]] | None:
        return None


class HttpCatalogAI:
    """Catalog AI backed by an OpenAI-compatible ``/embeddings`` endpoint.

    Vectors are truncated to the configured number of dimensions so
    they fit the ``catalog_items.embedding`` column.
    """

    def __init__(
        self,
        endpoint: str,
        model: str,
        dimensions: int,
        api_key: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize catalog AI client.

        Args:
            endpoint: Base URL of the embeddings API.
            model: Embedding model name.
            dimensions: Number of dimensions stored per vector.
            api_key: Optional bearer token.
            timeout: Request timeout in seconds.
        """
        self.endpoint = endpoint.rstrip("/")
        self.model = model
        self.dimensions = dimensions
        self.api_key = api_key
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def is_enabled(self) -> bool:
        return True

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            headers = {}
            if self.api_key:
                headers["Authorization"] = f"Bearer {self.api_key}"
            self._client = httpx.AsyncClient(
                base_url=self.endpoint,
                timeout=self.timeout,
                headers=headers,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _embed(self, inputs: list[str]) -> list[list[float]]:
        """Call the embeddings endpoint.

        Args:
            inputs: Texts to embed.

        Returns:
            One vector per input, in input order.

        Raises:
            CatalogAIError: On API error.
        """
        try:
            client = await self._get_client()

            payload: dict[str, Any] = {
                "model": self.model,
                "input": inputs,
            }
            response = await client.post("/embeddings", json=payload)

            if response.status_code != 200:
                raise CatalogAIError(
                    f"Failed to generate embeddings: {response.text}",
                    response.status_code,
                )

            data = sorted(response.json().get("data", []), key=lambda d: d.get("index", 0))

        except httpx.RequestError as e:
            logger.error(
                "Embedding request failed",
                endpoint=self.endpoint,
                error=str(e),
            )
            raise CatalogAIError(f"Embedding request failed: {str(e)}") from e

        if len(data) != len(inputs):
            raise CatalogAIError(
                f"Expected {len(inputs)} embeddings, got {len(data)}"
            )

        return [list(d["embedding"][: self.dimensions]) for d in data]

    async def get_embedding(self, text: str) -> list[float] | None:
        """Get an embedding for a piece of text.

        Args:
            text: Text to embed.

        Returns:
            Embedding vector.
        """
        vectors = await self._embed([text])
        logger.debug("Generated embedding", text_length=len(text))
        return vectors[0]

    async def get_embedding_for_item(self, item: "CatalogItem") -> list[float] | None:
        """Get an embedding for a catalog item's name and description."""
        return await self.get_embedding(item_embedding_text(item))

    async def get_embeddings(
        self, items: Sequence["CatalogItem"]
    ) -> list[list[float]] | None:
        """Get embeddings for many catalog items in one call.

        Args:
            items: Items to embed.

        Returns:
            One vector per item, in item order.
        """
        if not items:
            return []
        vectors = await self._embed([item_embedding_text(i) for i in items])
        logger.info("Generated item embeddings", count=len(vectors))
        return vectors


# Global catalog AI instance
_catalog_ai: CatalogAI | None = None


def get_catalog_ai() -> CatalogAI:
    """Get the catalog AI singleton.

    Returns:
        HttpCatalogAI when an embedding endpoint is configured,
        DisabledCatalogAI otherwise.
    """
    global _catalog_ai
    if _catalog_ai is None:
        if settings.embedding_endpoint:
            _catalog_ai = HttpCatalogAI(
                endpoint=settings.embedding_endpoint,
                model=settings.embedding_model,
                dimensions=settings.embedding_dimensions,
                api_key=settings.embedding_api_key,
                timeout=settings.embedding_timeout,
            )
        else:
            _catalog_ai = DisabledCatalogAI()
    return _catalog_ai
