"""
Substring search over a fixed grocery catalog.
Legacy fallback used when SEARCH_MODE=substring; no embeddings involved.
"""
from typing import List
import logging

from backend.models.product_models import SearchResult

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
MAX_LIMIT = 50

GROCERY_CATALOG = [
    {"id": 1, "name": "Whole Milk", "price_cents": 349},
    {"id": 2, "name": "2% Milk", "price_cents": 329},
    {"id": 3, "name": "Almond Milk", "price_cents": 449},
    {"id": 4, "name": "Oat Milk", "price_cents": 499},
    {"id": 5, "name": "Pasta - Penne", "price_cents": 199},
    {"id": 6, "name": "Pasta - Spaghetti", "price_cents": 189},
    {"id": 7, "name": "Pasta - Fusilli", "price_cents": 209},
    {"id": 8, "name": "Pasta Sauce - Marinara", "price_cents": 249},
    {"id": 9, "name": "Fresh Bread", "price_cents": 299},
    {"id": 10, "name": "Whole Wheat Bread", "price_cents": 329},
    {"id": 11, "name": "Bananas", "price_cents": 129},
    {"id": 12, "name": "Apples - Gala", "price_cents": 199},
    {"id": 13, "name": "Orange Juice", "price_cents": 399},
    {"id": 14, "name": "Greek Yogurt", "price_cents": 549},
    {"id": 15, "name": "Cheddar Cheese", "price_cents": 449},
    {"id": 16, "name": "Chicken Breast", "price_cents": 699},
    {"id": 17, "name": "Ground Beef", "price_cents": 599},
    {"id": 18, "name": "Salmon Fillet", "price_cents": 899},
    {"id": 19, "name": "Rice - Jasmine", "price_cents": 329},
    {"id": 20, "name": "Olive Oil", "price_cents": 799},
    {"id": 21, "name": "Eggs - Dozen", "price_cents": 279},
    {"id": 22, "name": "Butter", "price_cents": 429},
    {"id": 23, "name": "Cereal - Cheerios", "price_cents": 549},
    {"id": 24, "name": "Coffee Beans", "price_cents": 1299},
    {"id": 25, "name": "Green Tea", "price_cents": 399},
]


class SubstringSearchService:

    def __init__(self, catalog=None):
        self.catalog = catalog if catalog is not None else GROCERY_CATALOG

    def search(self, query: str, limit: int = DEFAULT_LIMIT) -> List[SearchResult]:
        """
        Case-insensitive substring match in catalog order, capped at MAX_LIMIT
        """
        needle = query.lower()
        effective_limit = max(1, min(limit, MAX_LIMIT))

        matches = [item for item in self.catalog if needle in item["name"].lower()]
        results = [SearchResult(**item) for item in matches[:effective_limit]]

        logger.info(f"Substring search for '{query}' matched {len(matches)}, returning {len(results)}")
        return results
