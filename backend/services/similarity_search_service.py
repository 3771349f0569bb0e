from typing import List
import logging

from backend.config import Settings
from backend.errors import UpstreamError
from backend.models.product_models import SearchResult

logger = logging.getLogger(__name__)


def clamp(value: int, minimum: int, maximum: int) -> int:
    return max(minimum, min(maximum, value))


class SimilaritySearchService:
    """
    Ranks catalog products against a query vector.
    Ranking itself happens in the catalog store's match procedure.
    """

    def __init__(self, catalog_client, settings: Settings):
        self.catalog_client = catalog_client
        self.min_limit = settings.search_min_limit
        self.max_limit = settings.search_max_limit

    def clamp_limit(self, limit: int) -> int:
        return clamp(limit, self.min_limit, self.max_limit)

    def search(self, query_vector: List[float], limit: int) -> List[SearchResult]:
        effective_limit = self.clamp_limit(limit)
        rows = self.catalog_client.match_products(query_vector, effective_limit)

        try:
            results = [
                SearchResult(
                    id=row["id"],
                    name=row["name"],
                    price_cents=row.get("price_cents"),
                    distance=row.get("distance"),
                )
                for row in rows
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamError(f"Unexpected row from similarity search: {str(e)}") from e

        logger.info(f"Similarity search returned {len(results)} results (limit {effective_limit})")
        return results
