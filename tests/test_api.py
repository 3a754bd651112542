"""
Tests for the HTTP surface.
"""
from __future__ import annotations

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

from newslens.api.dependencies import get_aggregation_service, get_synthesis_service
from newslens.core.exceptions import AggregationError, ValidationError
from newslens.domain.models import AggregateResponse, CanonicalArticle, NewsQuery, Pagination, SynthesizedGroup
from newslens.main import app


@pytest.fixture
def aggregation_service():
    service = Mock()
    service.aggregate = AsyncMock()
    app.dependency_overrides[get_aggregation_service] = lambda: service
    yield service
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app)


def sample_response() -> AggregateResponse:
    article = CanonicalArticle(
        id="guardian-1a2b3c4d",
        source="guardian",
        title="Parliament approves climate bill",
        url="https://www.theguardian.com/a",
        image_url="https://media.guim.co.uk/a.jpg",
    )
    group = SynthesizedGroup(
        group_id="group-1",
        group_title="Parliament approves climate bill",
        summary="Parliament approved the bill.",
        detailed_comparison="Detailed.",
        simple_comparison="Simple.",
        differences=["guardian: 1 article(s) - Parliament approves climate bill"],
        articles=[article],
    )
    return AggregateResponse(
        query="climate",
        groups=[group],
        pagination=Pagination(current_page=1, total_pages=1, total_groups=1, groups_per_page=9),
    )


def test_health_endpoint_returns_awake(client):
    """/api/health returns status 'awake' immediately."""
    response = client.get("/api/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "awake"
    assert "message" in data


def test_root_banner(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "System Operational"


def test_aggregate_returns_camel_case_payload(client, aggregation_service):
    aggregation_service.aggregate.return_value = sample_response()

    response = client.get("/api/news/aggregate", params={"query": "climate"})

    assert response.status_code == 200
    assert response.headers["cache-control"] == "no-cache, no-store, must-revalidate"
    data = response.json()
    assert data["pagination"] == {"currentPage": 1, "totalPages": 1, "totalGroups": 1, "groupsPerPage": 9}
    group = data["groups"][0]
    assert group["groupId"] == "group-1"
    assert group["groupTitle"] == "Parliament approves climate bill"
    assert group["articles"][0]["imageUrl"] == "https://media.guim.co.uk/a.jpg"
    assert "warnings" not in data


def test_aggregate_builds_query_from_params(client, aggregation_service):
    aggregation_service.aggregate.return_value = AggregateResponse()

    client.get("/api/news/aggregate", params={"query": " floods ", "country": "gb", "category": "", "page": "3"})

    news_query = aggregation_service.aggregate.call_args.args[0]
    assert news_query == NewsQuery(query="floods", country="gb", category=None, page=3)


def test_aggregate_bad_page_defaults_to_first(client, aggregation_service):
    aggregation_service.aggregate.return_value = AggregateResponse()

    response = client.get("/api/news/aggregate", params={"page": "two"})

    assert response.status_code == 200
    assert aggregation_service.aggregate.call_args.args[0].page == 1


def test_aggregate_pipeline_failure_returns_500(client, aggregation_service):
    aggregation_service.aggregate.side_effect = AggregationError("clustering exploded")

    response = client.get("/api/news/aggregate")

    assert response.status_code == 500
    assert response.json() == {"error": "clustering exploded", "groups": []}
    assert response.headers["cache-control"] == "no-cache, no-store, must-revalidate"


def test_aggregate_with_warnings(client, aggregation_service):
    aggregation_service.aggregate.return_value = AggregateResponse(warnings=["No articles found from any source."])

    data = client.get("/api/news/aggregate").json()

    assert data["groups"] == []
    assert data["warnings"] == ["No articles found from any source."]


@pytest.fixture
def synthesis_service():
    service = Mock()
    service.summarize_article = AsyncMock()
    app.dependency_overrides[get_synthesis_service] = lambda: service
    yield service
    app.dependency_overrides.clear()


def test_summarize_returns_summary(client, synthesis_service):
    synthesis_service.summarize_article.return_value = "Parliament passed the bill on Tuesday."

    response = client.post("/api/summarize", json={"title": "Bill passes", "text": "Full article text."})

    assert response.status_code == 200
    assert response.json() == {"summary": "Parliament passed the bill on Tuesday."}
    synthesis_service.summarize_article.assert_awaited_once_with("Bill passes", "Full article text.")


def test_summarize_missing_fields_returns_400(client, synthesis_service):
    synthesis_service.summarize_article.side_effect = ValidationError("Text and title are required")

    response = client.post("/api/summarize", json={"title": "Bill passes"})

    assert response.status_code == 400
    assert response.json() == {"error": "Text and title are required"}


def test_summarize_unexpected_failure_returns_500(client, synthesis_service):
    synthesis_service.summarize_article.side_effect = RuntimeError("boom")

    response = client.post("/api/summarize", json={"title": "Bill passes", "text": "Text."})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate summary"}
