from supabase import create_client, Client
from typing import List, Dict, Any, Optional
import logging

from backend.config import Settings
from backend.errors import Misconfigured, UpstreamError

logger = logging.getLogger(__name__)


class SupabaseCatalogClient:
    """
    Catalog store backed by a Supabase products table
    Handles the unembedded-product scan, embedding writes and the match_products ranking RPC
    """

    def __init__(self, settings: Settings, client: Optional[Client] = None):
        missing = settings.missing_store_settings()
        if missing and client is None:
            raise Misconfigured(f"Missing required environment variables: {', '.join(missing)}")

        self.table_name = settings.products_table
        self.match_rpc = settings.match_products_rpc
        self.client: Client = client or create_client(settings.supabase_url, settings.supabase_service_key)

    def get_products_without_embedding(self, limit: int) -> List[Dict[str, Any]]:
        """
        Fetch up to `limit` products whose embedding column is null
        Returns list of {id, name} rows
        """
        try:
            response = self.client.table(self.table_name).select("id, name").is_(
                "embedding", "null"
            ).limit(limit).execute()

            rows = response.data or []
            logger.info(f"Retrieved {len(rows)} products without embeddings (limit {limit})")
            return rows

        except Exception as e:
            logger.error(f"Error fetching products without embeddings: {str(e)}")
            raise UpstreamError(f"Failed to fetch products: {str(e)}") from e

    def update_product_embedding(self, product_id: int, embedding: List[float]) -> bool:
        """
        Store the embedding for one product
        Returns False when the write fails or matches no row
        """
        try:
            response = self.client.table(self.table_name).update({
                "embedding": embedding
            }).eq("id", product_id).execute()

            if not response.data:
                logger.error(f"Embedding update for product {product_id} matched no rows")
                return False
            return True

        except Exception as e:
            logger.error(f"Failed to update product {product_id}: {str(e)}")
            return False

    def match_products(self, query_embedding: List[float], match_count: int) -> List[Dict[str, Any]]:
        """
        Rank products by vector distance using the server-side match procedure
        Returns rows with id, name, price_cents and distance ordered closest first
        """
        try:
            response = self.client.rpc(self.match_rpc, {
                "query_embedding": query_embedding,
                "match_count": match_count
            }).execute()

            rows = response.data or []
            logger.info(f"{self.match_rpc} returned {len(rows)} products")
            return rows

        except Exception as e:
            logger.error(f"Error calling {self.match_rpc}: {str(e)}")
            raise UpstreamError(f"Similarity search failed: {str(e)}") from e

