"""Integration tests for the assessment API."""

from __future__ import annotations

import asyncio

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy import select

from alliswell.infrastructure.db.models import AssessmentResultModel
from tests.utils import register_user

RESPONSES = [{"questionId": index + 1, "answer": 1} for index in range(8)]


def _saved_results(client: TestClient) -> list[AssessmentResultModel]:
    async def fetch() -> list[AssessmentResultModel]:
        async with client.session_factory() as session:
            return list((await session.execute(select(AssessmentResultModel))).scalars())

    return asyncio.run(fetch())


class TestQuestionsEndpoint:
    def test_list_questions(self, test_client: TestClient) -> None:
        response = test_client.get("/api/assessment/questions")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert len(data["questions"]) == 8
        assert data["max_score"] == 28
        assert data["questions"][0]["options"][0] == {"text": "Not at all", "value": 0}


class TestSubmitEndpoint:
    def test_submit_success(self, test_client: TestClient) -> None:
        register_user(test_client)

        response = test_client.post(
            "/api/assessment",
            json={
                "responses": RESPONSES,
                "score": 8,
                "category": "Mild Distress",
                "timestamp": "2026-10-19T09:30:00Z",
            },
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Assessment saved successfully"
        assert data["resources"]["category"] == "mild"
        assert data["resources"]["suggestions"]

        [saved] = _saved_results(test_client)
        assert saved.score == 8
        assert saved.resource_category == "mild"
        assert saved.question_count == 8

    @pytest.mark.parametrize(
        ("score", "category"),
        [(7, "well"), (15, "mild"), (16, "moderate"), (23, "moderate"), (24, "high")],
    )
    def test_resource_bands(self, test_client: TestClient, score: int, category: str) -> None:
        register_user(test_client)

        response = test_client.post("/api/assessment", json={"responses": RESPONSES, "score": score})

        assert response.json()["resources"]["category"] == category

    @pytest.mark.parametrize(
        "responses",
        [[1, 2, 3, 0, 0, 0, 0, 0], [{"value": 1}, None], []],
    )
    def test_accepts_any_response_list(self, test_client: TestClient, responses: list) -> None:
        register_user(test_client)

        response = test_client.post("/api/assessment", json={"responses": responses, "score": 6})

        assert response.status_code == status.HTTP_200_OK
        [saved] = _saved_results(test_client)
        assert saved.responses == responses
        assert saved.question_count == len(responses)

    @pytest.mark.parametrize(
        "body",
        [
            {"responses": RESPONSES, "score": "8"},
            {"responses": RESPONSES, "score": True},
            {"responses": RESPONSES},
            {"score": 8},
        ],
    )
    def test_invalid_submission(self, test_client: TestClient, body: dict) -> None:
        register_user(test_client)

        response = test_client.post("/api/assessment", json=body)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"success": False, "error": "Invalid assessment data"}
        assert _saved_results(test_client) == []

    def test_requires_login(self, test_client: TestClient) -> None:
        response = test_client.post("/api/assessment", json={"responses": RESPONSES, "score": 8})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["success"] is False
