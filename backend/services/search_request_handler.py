"""
Search request handling: validation, mode dispatch and response shaping.

Two search modes exist, selected by SEARCH_MODE:
  semantic  - embed the query and rank catalog products by vector distance
  substring - legacy case-insensitive name filter over the fixed grocery catalog
"""
import json
import math
import logging
from typing import Any, Optional, Union

from backend.config import Settings, SEARCH_MODE_SUBSTRING
from backend.errors import (
    MalformedRequest,
    MethodNotAllowed,
    Misconfigured,
    QueryTooShort,
    ServiceUnavailable,
    UpstreamError,
)
from backend.models.request_models import SearchRequest
from backend.models.response_models import SearchResponse
from backend.services import substring_search_service
from backend.services.substring_search_service import SubstringSearchService

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2


def coerce_limit(raw: Any, default: int) -> int:
    """
    Coerce a limit given as a number or numeric string to an int.
    Absent, boolean, non-numeric and non-finite values give the default.
    """
    if raw is None or isinstance(raw, bool):
        return default
    if isinstance(raw, (int, float)):
        value = raw
    elif isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            return default
    else:
        return default

    if not math.isfinite(value):
        return default
    return int(value)


def parse_json_object(raw_body: Union[bytes, str, dict, None]) -> dict:
    if isinstance(raw_body, dict):
        return raw_body
    if not raw_body:
        raise MalformedRequest("Empty request body")
    try:
        body = json.loads(raw_body)
    except (ValueError, UnicodeDecodeError) as e:
        raise MalformedRequest(f"Invalid JSON body: {str(e)}") from e
    if not isinstance(body, dict):
        raise MalformedRequest(f"JSON body must be an object, got {type(body).__name__}")
    return body


class SearchRequestHandler:
    """
    Validates inbound search requests and runs the configured search mode.
    """

    def __init__(self, settings: Settings,
                 embedding_client=None,
                 similarity_service=None,
                 substring_service: Optional[SubstringSearchService] = None):
        self.settings = settings
        self.mode = settings.search_mode
        self._embedding_client = embedding_client
        self._similarity_service = similarity_service
        self._substring_service = substring_service
        self._orchestrator = None

    def _semantic_orchestrator(self):
        """Build the semantic pipeline on first use; missing credentials raise Misconfigured."""
        if self._orchestrator is None:
            from backend.pipelines.search_orchestrator import SemanticSearchOrchestrator

            if self._embedding_client is None or self._similarity_service is None:
                self.settings.require_semantic_settings()

            if self._embedding_client is None:
                from backend.services.embedding_service import EmbeddingClient
                self._embedding_client = EmbeddingClient(self.settings)

            if self._similarity_service is None:
                from backend.database.supabase_client import SupabaseCatalogClient
                from backend.services.similarity_search_service import SimilaritySearchService
                self._similarity_service = SimilaritySearchService(
                    SupabaseCatalogClient(self.settings), self.settings
                )

            self._orchestrator = SemanticSearchOrchestrator(self._embedding_client, self._similarity_service)
        return self._orchestrator

    def validate(self, method: str, raw_body) -> SearchRequest:
        if method.upper() != "POST":
            raise MethodNotAllowed(f"Unsupported method {method}")

        body = parse_json_object(raw_body)

        query = body.get("q")
        if not isinstance(query, str) or len(query.strip()) < MIN_QUERY_LENGTH:
            raise QueryTooShort(f"Query rejected: {query!r}")
        query = query.strip()

        if self.mode == SEARCH_MODE_SUBSTRING:
            limit = coerce_limit(body.get("limit"), substring_search_service.DEFAULT_LIMIT)
            limit = max(1, min(limit, substring_search_service.MAX_LIMIT))
        else:
            limit = coerce_limit(body.get("limit"), self.settings.search_default_limit)
            limit = max(self.settings.search_min_limit, min(limit, self.settings.search_max_limit))

        return SearchRequest(q=query, limit=limit)

    def handle(self, method: str, raw_body) -> SearchResponse:
        request = self.validate(method, raw_body)
        logger.info(f"Searching for: \"{request.q}\" with limit: {request.limit} ({self.mode})")

        if self.mode == SEARCH_MODE_SUBSTRING:
            if self._substring_service is None:
                self._substring_service = SubstringSearchService()
            return SearchResponse(results=self._substring_service.search(request.q, request.limit))

        try:
            return self._semantic_orchestrator().run(request.q, request.limit)
        except Misconfigured as e:
            logger.error(f"Search misconfigured: {e.detail}")
            raise
        except UpstreamError as e:
            logger.error(f"Search upstream failure: {str(e)}")
            raise ServiceUnavailable(str(e)) from e
