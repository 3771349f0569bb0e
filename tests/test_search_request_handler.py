"""Test search request validation, limit policy, semantic pipeline and error mapping."""

import json

import pytest

from backend.config import Settings, SEARCH_MODE_SUBSTRING
from backend.errors import (
    MalformedRequest,
    MethodNotAllowed,
    Misconfigured,
    QueryTooShort,
    ServiceUnavailable,
    UpstreamError,
)
from backend.pipelines.search_orchestrator import SemanticSearchOrchestrator
from backend.services.search_request_handler import SearchRequestHandler, coerce_limit
from backend.services.substring_search_service import SubstringSearchService


@pytest.fixture
def handler(settings, embedding_client, similarity_service):
    return SearchRequestHandler(
        settings, embedding_client=embedding_client, similarity_service=similarity_service
    )


def _body(**fields):
    return json.dumps(fields).encode()


# ── Validation order ──────────────────────────────────────────


@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "PATCH"])
def test_non_post_is_method_not_allowed(handler, embedding_client, method):
    with pytest.raises(MethodNotAllowed):
        handler.handle(method, _body(q="milk"))
    embedding_client.embed.assert_not_called()


def test_method_checked_before_body(handler):
    with pytest.raises(MethodNotAllowed):
        handler.handle("GET", b"not json")


@pytest.mark.parametrize("raw", [b"", b"not json", b"[1, 2]", b'"milk"', b"null"])
def test_malformed_body(handler, embedding_client, raw):
    with pytest.raises(MalformedRequest):
        handler.handle("POST", raw)
    embedding_client.embed.assert_not_called()


@pytest.mark.parametrize("query", ["", " ", "m", "  m  ", None, 42, ["milk"]])
def test_short_or_missing_query_makes_no_outbound_call(handler, embedding_client, similarity_service, query):
    with pytest.raises(QueryTooShort):
        handler.handle("POST", _body(q=query))
    embedding_client.embed.assert_not_called()
    similarity_service.search.assert_not_called()


def test_query_is_trimmed(handler, embedding_client):
    handler.handle("POST", _body(q="  oat milk  "))
    embedding_client.embed.assert_called_once_with("oat milk")


# ── Limit policy ──────────────────────────────────────────────


@pytest.mark.parametrize("raw,expected", [
    (None, 20),
    (5, 5),
    ("7", 7),
    (" 12 ", 12),
    ("12.9", 12),
    (3.7, 3),
    (0, 1),
    (-4, 1),
    ("-4", 1),
    (51, 50),
    (10_000, 50),
    ("abc", 20),
    ("", 20),
    (True, 20),
    ([5], 20),
    (float("inf"), 20),
    (float("nan"), 20),
    ("Infinity", 20),
])
def test_effective_limit(handler, similarity_service, raw, expected):
    body = {"q": "milk"} if raw is None else {"q": "milk", "limit": raw}

    handler.handle("POST", body)

    assert similarity_service.search.call_args[0][1] == expected


def test_coerce_limit_default():
    assert coerce_limit(None, 10) == 10
    assert coerce_limit("8", 10) == 8


# ── Semantic pipeline ─────────────────────────────────────────


def test_response_preserves_ranking_order_and_nulls(handler, embedding_client, similarity_service):
    response = handler.handle("POST", _body(q="milk", limit=3))

    similarity_service.search.assert_called_once_with([0.1, 0.2, 0.3], 3)
    assert response.model_dump() == {
        "results": [
            {"id": 4, "name": "Oat Milk", "price_cents": 499, "distance": 0.12},
            {"id": 3, "name": "Almond Milk", "price_cents": None, "distance": 0.34},
            {"id": 1, "name": "Whole Milk", "price_cents": 349, "distance": None},
        ]
    }


def test_empty_ranking(handler, similarity_service):
    similarity_service.search.return_value = []
    assert handler.handle("POST", _body(q="caviar")).results == []


def test_embedding_failure_is_service_unavailable(handler, embedding_client, similarity_service):
    embedding_client.embed.side_effect = UpstreamError("OpenAI API error: 500 - secret detail")

    with pytest.raises(ServiceUnavailable) as exc_info:
        handler.handle("POST", _body(q="milk"))

    similarity_service.search.assert_not_called()
    assert "secret detail" not in exc_info.value.client_message


def test_ranking_failure_is_service_unavailable(handler, similarity_service):
    similarity_service.search.side_effect = UpstreamError("rpc failed")

    with pytest.raises(ServiceUnavailable):
        handler.handle("POST", _body(q="milk"))


def test_missing_credentials_is_misconfigured():
    handler = SearchRequestHandler(Settings())

    with pytest.raises(Misconfigured) as exc_info:
        handler.handle("POST", _body(q="milk"))
    assert exc_info.value.status_code == 500


def test_validation_runs_before_configuration_check():
    handler = SearchRequestHandler(Settings())
    with pytest.raises(QueryTooShort):
        handler.handle("POST", _body(q="m"))


def test_orchestrator_sequential_fallback(embedding_client, similarity_service):
    orchestrator = SemanticSearchOrchestrator(embedding_client, similarity_service)
    orchestrator.graph = None

    response = orchestrator.run("milk", 2)

    assert [r.id for r in response.results] == [4, 3, 1]
    similarity_service.search.assert_called_once_with([0.1, 0.2, 0.3], 2)


def test_orchestrator_raises_on_failed_step(embedding_client, similarity_service):
    embedding_client.embed.side_effect = UpstreamError("boom")
    orchestrator = SemanticSearchOrchestrator(embedding_client, similarity_service)

    with pytest.raises(UpstreamError, match="boom"):
        orchestrator.run("milk", 2)


# ── Substring mode ────────────────────────────────────────────


@pytest.fixture
def substring_handler():
    return SearchRequestHandler(Settings(search_mode=SEARCH_MODE_SUBSTRING))


def test_substring_mode_milk(substring_handler):
    response = substring_handler.handle("POST", _body(q="milk"))

    assert [r.model_dump() for r in response.results] == [
        {"id": 1, "name": "Whole Milk", "price_cents": 349, "distance": None},
        {"id": 2, "name": "2% Milk", "price_cents": 329, "distance": None},
        {"id": 3, "name": "Almond Milk", "price_cents": 449, "distance": None},
        {"id": 4, "name": "Oat Milk", "price_cents": 499, "distance": None},
    ]


def test_substring_mode_default_limit_is_ten():
    catalog = [{"id": i, "name": f"Bread {i}", "price_cents": 100 + i} for i in range(1, 16)]
    handler = SearchRequestHandler(
        Settings(search_mode=SEARCH_MODE_SUBSTRING),
        substring_service=SubstringSearchService(catalog=catalog),
    )

    results = handler.handle("POST", _body(q="bread")).results

    assert [r.id for r in results] == list(range(1, 11))


def test_substring_mode_needs_no_credentials(substring_handler):
    assert len(substring_handler.handle("POST", _body(q="pasta", limit="2")).results) == 2


def test_substring_mode_still_validates(substring_handler):
    with pytest.raises(QueryTooShort):
        substring_handler.handle("POST", _body(q="m"))
