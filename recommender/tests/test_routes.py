"""
Tests for recommendation API routes

Tests:
- Parameter passing and defaults (mocked service)
- End-to-end responses through the real scorers (mocked ticket store)
- Input validation and upstream failure mapping
"""
import pytest
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient

from recommender.main import app
from recommender.models.schemas import (
    AssigneeRecommendation,
    AssigneeSummary,
    ConfidenceLevel,
    Priority,
    PriorityRecommendation,
    ResponseTimeEstimate,
    SimilarTicketMatch,
)
from recommender.routes.recommendations import get_recommendation_service
from recommender.services.recommendation_service import RecommendationService

WORKSPACE_ID = "123e4567-e89b-12d3-a456-426614174000"
HEADERS = {"X-Workspace-Id": WORKSPACE_ID}


@pytest.fixture
def mock_service():
    """Service double mirroring RecommendationService"""
    service = MagicMock()
    service.recommend_assignees = AsyncMock(return_value=[
        AssigneeRecommendation(
            user_id="user-1",
            user=AssigneeSummary(id="user-1", first_name="Иван", last_name="Иванов", email="ivan@example.com"),
            score=85,
            reasons=["low workload"]
        )
    ])
    service.recommend_priority = AsyncMock(return_value=PriorityRecommendation(
        suggested_priority=Priority.HIGH, confidence=0.85, reasons=['critical keyword detected: "срочно"']
    ))
    service.estimate_response_time = AsyncMock(return_value=ResponseTimeEstimate(
        estimated_minutes=30, confidence_level=ConfidenceLevel.MEDIUM, based_on_samples=15,
        factors=["based on historical data"]
    ))
    service.find_similar = AsyncMock(return_value=[
        SimilarTicketMatch(
            ticket_id="entity-1", custom_id="TICKET-001", title="Похожая проблема с авторизацией",
            status="done", similarity=0.78, matching_terms=["проблема"]
        )
    ])
    return service


@pytest.fixture
def client(mock_service):
    app.dependency_overrides[get_recommendation_service] = lambda: mock_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def store_client(mock_repository):
    """Client wired to the real service over a mocked ticket store"""
    service = RecommendationService(repository=mock_repository)
    app.dependency_overrides[get_recommendation_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestAssigneesEndpoint:
    def test_passes_parameters(self, client, mock_service):
        response = client.get(
            "/api/v1/recommendations/assignees",
            params={"title": "Проблема с авторизацией", "description": "Не могу войти в систему", "limit": "5"},
            headers=HEADERS
        )

        assert response.status_code == 200
        data = response.json()
        assert data[0]["userId"] == "user-1"
        assert data[0]["user"]["firstName"] == "Иван"
        mock_service.recommend_assignees.assert_awaited_once_with(
            WORKSPACE_ID, "Проблема с авторизацией", "Не могу войти в систему", 5
        )

    def test_default_limit(self, client, mock_service):
        client.get("/api/v1/recommendations/assignees", params={"title": "Тест"}, headers=HEADERS)

        mock_service.recommend_assignees.assert_awaited_once_with(WORKSPACE_ID, "Тест", None, 5)

    @pytest.mark.parametrize("limit", ["abc", "0", "-1", "51"])
    def test_invalid_limit(self, client, limit):
        response = client.get(
            "/api/v1/recommendations/assignees",
            params={"title": "Тест", "limit": limit},
            headers=HEADERS
        )

        assert response.status_code == 400

    def test_title_required(self, client):
        response = client.get("/api/v1/recommendations/assignees", headers=HEADERS)
        assert response.status_code == 422

    def test_blank_title_rejected(self, client):
        response = client.get("/api/v1/recommendations/assignees", params={"title": "   "}, headers=HEADERS)
        assert response.status_code == 400


class TestPriorityEndpoint:
    def test_passes_parameters(self, client, mock_service):
        response = client.get(
            "/api/v1/recommendations/priority",
            params={"title": "СРОЧНО! Не работает сервер", "description": "Полное описание проблемы"},
            headers=HEADERS
        )

        assert response.status_code == 200
        assert response.json() == {
            "suggestedPriority": "high",
            "confidence": 0.85,
            "reasons": ['critical keyword detected: "срочно"'],
        }
        mock_service.recommend_priority.assert_awaited_once_with(
            WORKSPACE_ID, "СРОЧНО! Не работает сервер", "Полное описание проблемы"
        )

    def test_without_description(self, client, mock_service):
        client.get("/api/v1/recommendations/priority", params={"title": "Заявка без описания"}, headers=HEADERS)

        mock_service.recommend_priority.assert_awaited_once_with(WORKSPACE_ID, "Заявка без описания", None)


class TestResponseTimeEndpoint:
    def test_passes_parameters(self, client, mock_service):
        response = client.get(
            "/api/v1/recommendations/response-time",
            params={"title": "Проблема с принтером", "assigneeId": "user-1"},
            headers=HEADERS
        )

        assert response.status_code == 200
        assert response.json()["estimatedMinutes"] == 30
        assert response.json()["confidenceLevel"] == "medium"
        assert response.json()["basedOnSamples"] == 15
        mock_service.estimate_response_time.assert_awaited_once_with(
            WORKSPACE_ID, "Проблема с принтером", "user-1"
        )

    def test_workspace_only(self, client, mock_service):
        client.get("/api/v1/recommendations/response-time", headers=HEADERS)

        mock_service.estimate_response_time.assert_awaited_once_with(WORKSPACE_ID, None, None)


class TestSimilarEndpoint:
    def test_passes_parameters(self, client, mock_service):
        response = client.get(
            "/api/v1/recommendations/similar",
            params={
                "title": "Проблема с авторизацией",
                "description": "Описание проблемы",
                "excludeId": "exclude-entity-id",
                "limit": "10",
            },
            headers=HEADERS
        )

        assert response.status_code == 200
        assert response.json()[0]["ticketId"] == "entity-1"
        assert response.json()[0]["matchingTerms"] == ["проблема"]
        mock_service.find_similar.assert_awaited_once_with(
            WORKSPACE_ID, "Проблема с авторизацией", "Описание проблемы", "exclude-entity-id", 10
        )

    def test_defaults(self, client, mock_service):
        client.get("/api/v1/recommendations/similar", params={"title": "Тест"}, headers=HEADERS)

        mock_service.find_similar.assert_awaited_once_with(WORKSPACE_ID, "Тест", None, None, 5)


class TestEndToEnd:
    """Real scorers behind the HTTP layer"""

    def test_urgent_ticket_with_no_history(self, store_client, mock_repository):
        response = store_client.get(
            "/api/v1/recommendations/priority",
            params={"title": "СРОЧНО! Не работает продакшн!"},
            headers=HEADERS
        )

        data = response.json()
        assert data["suggestedPriority"] in ("critical", "high")
        assert data["confidence"] > 0.5
        assert data["reasons"]
        assert mock_repository.list_tickets_async.await_args.args[0] == WORKSPACE_ID

    def test_feature_request_with_no_history(self, store_client):
        response = store_client.get(
            "/api/v1/recommendations/priority",
            params={"title": "Добавить новую функцию в отчёт"},
            headers=HEADERS
        )

        assert response.json()["suggestedPriority"] == "low"

    def test_fast_resolver_recommended(self, store_client, mock_repository, make_ticket, ivan):
        mock_repository.list_tickets_async.return_value = [
            make_ticket("1", "Проблема с авторизацией", "done", ivan, resolved_after=60),
            make_ticket("2", "Ошибка входа в систему", "done", ivan, resolved_after=60),
        ]

        response = store_client.get(
            "/api/v1/recommendations/assignees",
            params={"title": "Проблема с авторизацией"},
            headers=HEADERS
        )

        data = response.json()
        assert data[0]["userId"] == "user-1"
        assert {"low workload", "fast resolution time"} & set(data[0]["reasons"])

    def test_excluded_ticket_never_returned(self, store_client, mock_repository, make_ticket):
        mock_repository.list_tickets_async.return_value = [
            make_ticket("1", "Проблема с сервером", "done"),
            make_ticket("2", "Проблема с сервером повторно", "new"),
        ]

        response = store_client.get(
            "/api/v1/recommendations/similar",
            params={"title": "Проблема с сервером", "excludeId": "1"},
            headers=HEADERS
        )

        assert [m["ticketId"] for m in response.json()] == ["2"]

    def test_empty_history_defaults(self, store_client):
        response = store_client.get("/api/v1/recommendations/response-time", headers=HEADERS)

        data = response.json()
        assert data["estimatedMinutes"] == 60
        assert data["confidenceLevel"] == "low"
        assert data["basedOnSamples"] == 0

    def test_store_failure_is_502(self, store_client, mock_repository):
        mock_repository.list_tickets_async.side_effect = ConnectionError("store unavailable")

        response = store_client.get(
            "/api/v1/recommendations/assignees",
            params={"title": "Тест"},
            headers=HEADERS
        )

        assert response.status_code == 502
        body = response.json()
        assert body["error"] == "upstream_failure"
        assert body["message"] == "Upstream ticket store failure: store unavailable"
        assert body["detail"] == {"operation": "Assignee recommendation"}
        assert "timestamp" in body


class TestRouteLayout:
    """Workspace comes from the header or query parameter, not the path"""

    def test_recommendation_paths(self):
        paths = {route.path for route in app.routes}

        assert {
            "/api/v1/recommendations/assignees",
            "/api/v1/recommendations/priority",
            "/api/v1/recommendations/response-time",
            "/api/v1/recommendations/similar",
        } <= paths

    def test_workspace_in_query(self, store_client, mock_repository):
        response = store_client.get(
            "/api/v1/recommendations/priority",
            params={"title": "urgent", "workspace_id": "ws-1"}
        )

        assert response.status_code == 200
        assert mock_repository.list_tickets_async.await_args.args[0] == "ws-1"

    def test_workspace_path_prefix_not_served(self, store_client):
        response = store_client.get(
            "/api/v1/workspaces/ws-1/recommendations/priority",
            params={"title": "urgent"},
            headers=HEADERS
        )

        assert response.status_code == 404
