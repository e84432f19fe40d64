"""Client for an OpenAI-compatible /embeddings endpoint with asymmetric input types."""

from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence

import httpx

from app.adapters.base import BaseEmbeddingProvider, EmbeddingMode
from app.config import get_settings
from app.exceptions import EmbeddingServiceError
from app.infra.logging_config import get_logger

logger = get_logger("embedding_client")

MAX_ATTEMPTS = 3
RETRY_DELAY_SECONDS = 1.0


class EmbeddingClient(BaseEmbeddingProvider):
    """
    Embeds text in 'passage' mode for documents and 'query' mode for searches.

    Each call is retried up to MAX_ATTEMPTS times with a linearly growing delay.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        model: str,
        dimension: Optional[int] = None,
        timeout_seconds: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/")
        self.api_key = api_key or ""
        self.model = model
        self.dimension = dimension
        self._client = http_client or httpx.AsyncClient(timeout=timeout_seconds)

    async def embed(self, texts: Sequence[str], mode: EmbeddingMode) -> List[List[float]]:
        if not texts:
            return []

        last_error: Optional[Exception] = None
        for attempt in range(1, MAX_ATTEMPTS + 1):
            try:
                return await self._request(list(texts), mode)
            except (httpx.HTTPError, EmbeddingServiceError) as exc:
                last_error = exc
                logger.warning(
                    "Embedding request failed (attempt %d/%d, mode=%s): %s",
                    attempt,
                    MAX_ATTEMPTS,
                    mode,
                    exc,
                )
                if attempt < MAX_ATTEMPTS:
                    await asyncio.sleep(RETRY_DELAY_SECONDS * attempt)

        raise EmbeddingServiceError(
            "Failed to generate embeddings. Please try again.",
            details=str(last_error),
        )

    async def _request(self, texts: List[str], mode: EmbeddingMode) -> List[List[float]]:
        payload: dict = {
            "model": self.model,
            "input": texts,
            "input_type": mode,
            "encoding_format": "float",
            "truncate": "END",
        }
        if self.dimension:
            payload["dimensions"] = self.dimension
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        resp = await self._client.post(
            f"{self.base_url}/embeddings", json=payload, headers=headers
        )
        if resp.status_code >= 400:
            raise EmbeddingServiceError(
                "Embedding service returned an error",
                details=f"status={resp.status_code} body={resp.text[:500]}",
            )

        try:
            body = resp.json()
        except ValueError as exc:
            raise EmbeddingServiceError(
                "Embedding service returned invalid JSON"
            ) from exc

        data = body.get("data")
        if not isinstance(data, list):
            raise EmbeddingServiceError("Embedding response has no data list")

        # Providers may return items out of order; index ties them back to input.
        ordered = sorted(
            (item for item in data if isinstance(item, dict)),
            key=lambda item: int(item.get("index", 0)),
        )
        vectors: List[List[float]] = []
        for item in ordered:
            vec = item.get("embedding")
            if not isinstance(vec, list) or not vec:
                raise EmbeddingServiceError("Embedding vector is empty or malformed")
            vectors.append([float(v) for v in vec])

        if len(vectors) != len(texts):
            raise EmbeddingServiceError(
                "Embedding count mismatch",
                details=f"expected={len(texts)} got={len(vectors)}",
            )
        return vectors

    async def aclose(self) -> None:
        await self._client.aclose()


def build_embedding_client_from_env() -> EmbeddingClient:
    settings = get_settings()
    if not settings.embedding_api_key:
        logger.warning("EMBEDDING_API_KEY is not set; embedding requests will be rejected.")
    return EmbeddingClient(
        base_url=settings.embedding_base_url,
        api_key=settings.embedding_api_key,
        model=settings.embedding_model,
        dimension=settings.embedding_dimension,
        timeout_seconds=settings.embedding_timeout_seconds,
    )
