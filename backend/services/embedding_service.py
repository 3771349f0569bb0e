"""
Embedding client for the OpenAI /v1/embeddings API
"""
from typing import List, Optional
import logging

import requests

from backend.config import Settings
from backend.errors import Misconfigured, UpstreamError

logger = logging.getLogger(__name__)


class EmbeddingClient:
    """
    Converts text into a fixed-length embedding vector.
    One outbound request per call; retries are left to the caller.
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        if not settings.openai_api_key:
            raise Misconfigured("Missing required environment variables: OPENAI_API_KEY")

        self.model = settings.embedding_model
        self.dimensions = settings.embedding_dimensions
        self.timeout = settings.embedding_timeout_seconds
        self.url = f"{settings.openai_base_url.rstrip('/')}/v1/embeddings"
        self._api_key = settings.openai_api_key
        self._http = session or requests

    def embed(self, text: str) -> List[float]:
        """Embed a single text. Raises UpstreamError on any provider failure."""
        try:
            response = self._http.post(
                self.url,
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                },
                json={"input": text, "model": self.model},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise UpstreamError(f"Embedding request failed: {str(e)}") from e

        if not response.ok:
            raise UpstreamError(f"OpenAI API error: {response.status_code} - {response.text[:200]}")

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamError(f"Embedding API returned invalid JSON: {response.text[:200]}") from e

        data = payload.get("data") if isinstance(payload, dict) else None
        if not data or not isinstance(data[0], dict) or data[0].get("embedding") is None:
            raise UpstreamError("Embedding API returned no embedding")

        try:
            embedding = [float(x) for x in data[0]["embedding"]]
        except (TypeError, ValueError) as e:
            raise UpstreamError(f"Embedding contains non-numeric values: {str(e)}") from e

        if len(embedding) != self.dimensions:
            raise UpstreamError(
                f"Embedding has {len(embedding)} dimensions, expected {self.dimensions}"
            )

        logger.debug(f"Embedded {len(text)} chars with {self.model}")
        return embedding
