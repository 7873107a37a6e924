from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text

from app.database import get_db
from app.main import app
from app.services.matching_service import MatchingService, get_matching_service
from factories import TODAY, add_candidate, add_job


@pytest.fixture
def client(catalog, session_factory):
    def override_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    service = MatchingService(session_factory, max_workers=2, clock=lambda: TODAY)
    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_matching_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seeded(catalog):
    add_candidate(catalog, 1, years=6, skills=[(1, 5, 5, date(2026, 9, 18)), (3, 2, 1, None)])
    add_candidate(catalog, 2, years=1, skills=[(2, 4, 3, date(2026, 4, 18))])
    add_job(catalog, 1, years_required=4, required=[(1, 10, 2)], preferred=[(3, 3, 1)])
    add_job(catalog, 2, years_required=0)
    return catalog


def test_health_and_version(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/version").json()["version"] == "1.0.0"


def test_skill_detail_lists_related_skills(client):
    response = client.get("/api/skills/1")

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Python"
    assert body["related"][0]["related_skill_id"] == 2
    assert body["related"][0]["similarity_score"] == 0.8
    assert client.get("/api/skills/404").status_code == 404


def test_candidate_detail_sorts_skills_by_name(client, seeded):
    body = client.get("/api/candidates/1").json()

    assert [skill["skill"]["name"] for skill in body["skills"]] == ["PostgreSQL", "Python"]
    assert client.get("/api/candidates/9").status_code == 404


def test_job_detail_includes_requirements(client, seeded):
    body = client.get("/api/jobs/1").json()

    assert body["required_skills"][0]["importance_weight"] == 10
    assert body["preferred_skills"][0]["skill"]["name"] == "PostgreSQL"


def test_calculate_match_endpoint(client, seeded):
    response = client.post("/api/matches/calculate", json={"candidate_id": 1, "job_id": 2})

    assert response.status_code == 200
    body = response.json()
    assert body["overall_score"] == 100
    assert body["breakdown"]["experience"]["score"] == 100

    detail = client.get(f"/api/matches/{body['id']}").json()
    assert detail["candidate"]["email"] == "candidate1@example.com"
    assert detail["job"]["title"] == "Job 2"


def test_calculate_match_unknown_candidate_is_404(client, seeded):
    response = client.post("/api/matches/calculate", json={"candidate_id": 77, "job_id": 1})

    assert response.status_code == 404
    assert "77" in response.json()["detail"]


def test_batch_endpoint_covers_cross_product(client, seeded):
    response = client.post("/api/matches/batch-calculate", json={"candidate_ids": [1, 2], "job_ids": [1, 2]})

    assert response.status_code == 200
    body = response.json()
    assert len(body["results"]) == 4
    assert body["failures"] == []


def test_batch_endpoint_reports_store_failures_by_kind(client, seeded):
    seeded.execute(text("DROP TABLE match_results"))
    seeded.commit()

    response = client.post("/api/matches/batch-calculate", json={"candidate_ids": [1], "job_ids": [2]})

    assert response.status_code == 200
    assert response.json()["failures"] == [
        {"candidate_id": 1, "job_id": 2, "error": "Match store unavailable", "kind": "persistence"}
    ]


def test_calculate_match_load_failure_is_503_with_pair(client, seeded):
    seeded.execute(text("DROP TABLE candidate_skills"))
    seeded.commit()

    response = client.post("/api/matches/calculate", json={"candidate_id": 1, "job_id": 2})

    assert response.status_code == 503
    assert response.json() == {"detail": "Match store unavailable", "candidate_id": 1, "job_id": 2}


def test_batch_endpoint_rejects_empty_lists(client, seeded):
    response = client.post("/api/matches/batch-calculate", json={"candidate_ids": [], "job_ids": [1]})

    assert response.status_code == 422


def test_matching_candidates_and_jobs(client, seeded):
    client.post("/api/matches/batch-calculate", json={"candidate_ids": [1, 2], "job_ids": [1, 2]})

    candidates = client.get("/api/jobs/1/matching-candidates").json()
    assert [match["candidate_id"] for match in candidates] == [1, 2]
    assert candidates[0]["candidate"]["name"] == "Candidate 1"
    assert candidates[0]["overall_score"] >= candidates[1]["overall_score"]

    jobs = client.get("/api/candidates/2/matching-jobs", params={"limit": 1}).json()
    assert len(jobs) == 1
    assert jobs[0]["job_id"] == 2
    assert jobs[0]["job"]["title"] == "Job 2"

    assert client.get("/api/jobs/99/matching-candidates").status_code == 404
