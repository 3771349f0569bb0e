"""Shared fixtures: fake catalog store and embedding client, no real I/O."""

from unittest.mock import MagicMock

import pytest

from backend.config import Settings
from backend.models.product_models import SearchResult


@pytest.fixture
def settings():
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-role-key",
        openai_api_key="sk-test",
        embedding_dimensions=3,
    )


@pytest.fixture
def embedding_client():
    client = MagicMock()
    client.embed.return_value = [0.1, 0.2, 0.3]
    return client


@pytest.fixture
def ranked_results():
    return [
        SearchResult(id=4, name="Oat Milk", price_cents=499, distance=0.12),
        SearchResult(id=3, name="Almond Milk", price_cents=None, distance=0.34),
        SearchResult(id=1, name="Whole Milk", price_cents=349, distance=None),
    ]


@pytest.fixture
def similarity_service(ranked_results):
    service = MagicMock()
    service.search.return_value = ranked_results
    return service


@pytest.fixture
def catalog_store():
    store = MagicMock()
    store.get_products_without_embedding.return_value = [
        {"id": 1, "name": "Whole Milk"},
        {"id": 2, "name": "2% Milk"},
    ]
    store.update_product_embedding.return_value = True
    return store


@pytest.fixture
def sleep():
    return MagicMock()
