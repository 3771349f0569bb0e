"""
Embedding backfill for catalog products that have no embedding yet
"""
import time
import logging
from typing import Any, Callable, Optional

# LangSmith tracing
from langsmith import traceable

from backend.config import Settings
from backend.models.product_models import BackfillBatchResult, ProductRecord
from backend.models.request_models import BackfillRequest
from backend.services.retry import retry_with_backoff
from backend.services.search_request_handler import coerce_limit

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50
MIN_BATCH_SIZE = 1
MAX_BATCH_SIZE = 200
INTER_RECORD_DELAY = 0.1  # seconds
MAX_RETRIES = 3
BASE_RETRY_DELAY = 1.0  # seconds
NO_PRODUCTS_MESSAGE = "No products found without embeddings"


def resolve_batch_size(raw: Any) -> int:
    """Coerce a requested batch size and clamp it to [1, 200]; unusable values give 50."""
    batch_size = coerce_limit(raw, DEFAULT_BATCH_SIZE)
    if batch_size == 0:
        batch_size = DEFAULT_BATCH_SIZE
    return max(MIN_BATCH_SIZE, min(MAX_BATCH_SIZE, batch_size))


class BackfillJob:
    """
    Fills in missing product embeddings, one product at a time.

    Products are processed sequentially with a short fixed delay between them
    to stay under the embedding provider's rate limits. A product whose
    embedding cannot be computed (after retries) or stored is counted as
    skipped and the batch continues.
    """

    def __init__(self, catalog_client, embedding_client,
                 sleep: Callable[[float], None] = time.sleep):
        self.catalog_client = catalog_client
        self.embedding_client = embedding_client
        self.sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings) -> "BackfillJob":
        from backend.database.supabase_client import SupabaseCatalogClient
        from backend.services.embedding_service import EmbeddingClient

        settings.require_semantic_settings()
        return cls(SupabaseCatalogClient(settings), EmbeddingClient(settings))

    def _embed_product(self, product: ProductRecord) -> bool:
        """Embed and store one product. Returns True when the embedding was persisted."""
        logger.info(f"Processing product {product.id}: {product.name}")
        try:
            embedding = retry_with_backoff(
                lambda: self.embedding_client.embed(product.name),
                max_retries=MAX_RETRIES,
                base_delay=BASE_RETRY_DELAY,
                sleep=self.sleep,
            )
        except Exception as e:
            logger.error(f"Failed to process product {product.id}: {str(e)}")
            return False

        if not self.catalog_client.update_product_embedding(product.id, embedding):
            logger.error(f"Failed to update product {product.id}")
            return False

        logger.info(f"Successfully embedded product {product.id}")
        return True

    @traceable(name="embedding_backfill")
    def run(self, batch_size: Optional[int] = None) -> BackfillBatchResult:
        """
        Run one backfill batch

        Args:
            batch_size: Maximum number of products to process, clamped to [1, 200]

        Returns:
            BackfillBatchResult with scanned/embedded/skipped counts
        """
        request = BackfillRequest(batch_size=resolve_batch_size(batch_size))
        logger.info(f"Starting backfill with batch size: {request.batch_size}")

        rows = self.catalog_client.get_products_without_embedding(request.batch_size)

        if not rows:
            logger.info(NO_PRODUCTS_MESSAGE)
            return BackfillBatchResult(batch_size=request.batch_size, message=NO_PRODUCTS_MESSAGE)

        logger.info(f"Found {len(rows)} products without embeddings")

        embedded = 0
        skipped = 0
        for row in rows:
            try:
                product = ProductRecord(**row)
            except (TypeError, ValueError) as e:
                logger.error(f"Skipping invalid product row {row!r}: {str(e)}")
                product = None

            if product is not None and self._embed_product(product):
                embedded += 1
            else:
                skipped += 1

            # Small delay to avoid rate limiting
            self.sleep(INTER_RECORD_DELAY)

        result = BackfillBatchResult(
            scanned=len(rows),
            embedded=embedded,
            skipped=skipped,
            batch_size=request.batch_size,
        )
        logger.info(f"Backfill complete: {result.model_dump(exclude_none=True)}")
        return result
