"""
Tests for the HTTP API.

Runs the FastAPI app against a small temporary corpus and the
bundled demo corpus.
"""

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from api import create_app
from corpus import CorpusLoadError, CorpusStore
from search import LegalSearchEngine

BUNDLED_CORPUS = Path(__file__).resolve().parent.parent / "data" / "legal-cases.json"

DOCUMENT = {
    "cases": [
        {
            "id": 1,
            "problem_statement": "landlord kept my security deposit",
            "keywords": ["security deposit"],
            "simulated_law": {"explanation": "deposits must be returned"},
            "advocate_id": "adv_001",
        },
        {
            "id": 2,
            "problem_statement": "my deposit was used for repairs",
            "keywords": ["repairs"],
            "simulated_law": {"explanation": "tenants pay for damage"},
            "advocate_id": "adv_001",
        },
        {
            "id": 3,
            "problem_statement": "lost my security deposit",
            "keywords": ["tenant"],
            "simulated_law": {"explanation": "n/a"},
            "advocate_id": "adv_404",
        },
        {
            "id": 4,
            "problem_statement": "wrongful termination",
            "keywords": ["employment"],
            "simulated_law": {"explanation": "n/a"},
            "advocate_id": "adv_001",
        },
        {
            "id": 5,
            "problem_statement": "fired without notice",
            "keywords": ["employment"],
            "simulated_law": {"explanation": "n/a"},
            "advocate_id": "adv_001",
        },
    ],
    "advocates": [
        {"id": "adv_001", "name": "Priya Raman", "specialization": "Tenancy"},
        {"id": "adv_002", "name": "Helena Brandt", "specialization": "Employment"},
    ],
}


@pytest.fixture
def client(tmp_path):
    path = tmp_path / "legal-cases.json"
    path.write_text(json.dumps(DOCUMENT), encoding="utf-8")
    with TestClient(create_app(data_path=path)) as test_client:
        yield test_client


# ─── Startup Tests ───────────────────────────────────────────────────────────

class TestStartup:
    """Corpus load failures abort startup."""

    def test_missing_corpus_is_fatal(self, tmp_path):
        app = create_app(data_path=tmp_path / "missing.json")
        with pytest.raises(CorpusLoadError):
            with TestClient(app):
                pass

    def test_malformed_corpus_is_fatal(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('{"cases": "nope", "advocates": []}', encoding="utf-8")
        with pytest.raises(CorpusLoadError):
            with TestClient(create_app(data_path=path)):
                pass


# ─── Health Tests ────────────────────────────────────────────────────────────

class TestHealth:

    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "OK"
        assert data["casesLoaded"] == 5
        assert data["advocatesLoaded"] == 2
        assert data["timestamp"].endswith("Z")


# ─── Search Tests ────────────────────────────────────────────────────────────

class TestSearch:
    """Tests for POST /api/search."""

    def test_ranked_results_with_advocates(self, client):
        response = client.post("/api/search", json={"query": "landlord security deposit"})
        assert response.status_code == 200
        data = response.json()
        assert data["query"] == "landlord security deposit"
        assert [r["id"] for r in data["results"]] == [1, 3, 2]
        assert [r["relevanceScore"] for r in data["results"]] == [37, 10, 5]
        assert data["totalMatches"] == 3
        assert data["results"][0]["advocate"]["name"] == "Priya Raman"

    def test_unresolved_advocate_is_null(self, client):
        data = client.post("/api/search", json={"query": "lost"}).json()
        assert data["results"][0]["id"] == 3
        assert data["results"][0]["advocate"] is None

    def test_ties_keep_corpus_order(self, client):
        data = client.post("/api/search", json={"query": "employment"}).json()
        assert [r["id"] for r in data["results"]] == [4, 5]

    def test_no_matches(self, client):
        data = client.post("/api/search", json={"query": "divorce custody"}).json()
        assert data["results"] == []
        assert data["totalMatches"] == 0

    def test_short_words_only_returns_empty(self, client):
        response = client.post("/api/search", json={"query": "is it ok"})
        assert response.status_code == 200
        assert response.json()["results"] == []

    @pytest.mark.parametrize("body", [None, {}, {"query": ""}, {"query": None}])
    def test_missing_query_is_client_error(self, client, body):
        response = client.post("/api/search", json=body)
        assert response.status_code == 400
        assert response.json()["error"] == "Query parameter is required"
        assert response.json()["message"] == "Please provide a search query"

    def test_malformed_body_is_client_error(self, client):
        response = client.post(
            "/api/search",
            content="not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert "error" in response.json()


# ─── Case Endpoint Tests ─────────────────────────────────────────────────────

class TestCases:

    def test_list_cases(self, client):
        data = client.get("/api/cases").json()
        assert data["total"] == 5
        assert [c["id"] for c in data["cases"]] == [1, 2, 3, 4, 5]

    def test_get_case_with_advocate(self, client):
        response = client.get("/api/cases/1")
        assert response.status_code == 200
        case = response.json()["case"]
        assert case["problem_statement"] == "landlord kept my security deposit"
        assert case["advocate"]["id"] == "adv_001"

    def test_get_case_orphaned_advocate(self, client):
        case = client.get("/api/cases/3").json()["case"]
        assert case["advocate"] is None

    @pytest.mark.parametrize("case_id", ["999", "abc"])
    def test_get_case_not_found(self, client, case_id):
        response = client.get(f"/api/cases/{case_id}")
        assert response.status_code == 404
        assert response.json()["error"] == "Case not found"

    @pytest.mark.parametrize("case_id, expected_id", [("1abc", 1), ("1_0", 1), ("%202", 2), ("+3", 3)])
    def test_get_case_reads_leading_integer(self, client, case_id, expected_id):
        response = client.get(f"/api/cases/{case_id}")
        assert response.status_code == 200
        assert response.json()["case"]["id"] == expected_id


# ─── Advocate Endpoint Tests ─────────────────────────────────────────────────

class TestAdvocates:

    def test_list_advocates(self, client):
        data = client.get("/api/advocates").json()
        assert data["total"] == 2
        assert data["advocates"][0]["name"] == "Priya Raman"

    def test_advocate_profile(self, client):
        response = client.get("/api/advocates/adv_001")
        assert response.status_code == 200
        profile = response.json()["advocate"]
        assert profile["casesHandled"] == 4
        assert [c["id"] for c in profile["recentCases"]] == [1, 2, 4]

    def test_advocate_without_cases(self, client):
        profile = client.get("/api/advocates/adv_002").json()["advocate"]
        assert profile["casesHandled"] == 0
        assert profile["recentCases"] == []

    def test_advocate_not_found(self, client):
        response = client.get("/api/advocates/invalid")
        assert response.status_code == 404
        assert response.json()["error"] == "Advocate not found"


# ─── Misc Endpoint Tests ─────────────────────────────────────────────────────

class TestSuggestions:

    def test_suggestions(self, client):
        data = client.get("/api/suggestions").json()
        assert data["suggestions"] == ["employment", "repairs", "security deposit", "tenant"]
        assert data["total"] == 4


class TestUnknownEndpoint:

    def test_unknown_api_path(self, client):
        response = client.get("/api/nonexistent")
        assert response.status_code == 404
        assert response.json()["error"] == "API endpoint not found"

    @pytest.mark.parametrize("method, path", [("GET", "/api/search"), ("DELETE", "/api/cases/1")])
    def test_wrong_method_on_known_path(self, client, method, path):
        response = client.request(method, path)
        assert response.status_code == 404
        assert response.json()["error"] == "API endpoint not found"


class TestBundledCorpus:
    """Smoke test the shipped demo data through the API."""

    @pytest.mark.parametrize("query, top_id", [
        ("landlord security deposit", 1),
        ("slip fall injury", 2),
        ("wrongful termination", 3),
        ("divorce custody", 4),
        ("DUI breathalyzer", 5),
        ("insurance claim denied", 6),
        ("contractor fraud", 7),
        ("debt collection harassment", 8),
    ])
    def test_top_match(self, query, top_id):
        with TestClient(create_app(data_path=BUNDLED_CORPUS)) as client:
            data = client.post("/api/search", json={"query": query}).json()
        assert data["results"][0]["id"] == top_id
        assert len(data["results"]) <= 5


# ─── Server Error Tests ──────────────────────────────────────────────────────

def _boom(*args, **kwargs):
    raise RuntimeError("boom")


class TestServerErrors:
    """Unexpected handler failures become a generic 500."""

    def test_search_failure(self, client, monkeypatch):
        monkeypatch.setattr(LegalSearchEngine, "search", _boom)
        response = client.post("/api/search", json={"query": "security deposit"})
        assert response.status_code == 500
        assert response.json() == {
            "error": "Internal server error",
            "message": "An error occurred while processing your search",
        }

    def test_case_lookup_failure(self, client, monkeypatch):
        monkeypatch.setattr(CorpusStore, "find_case_by_id", _boom)
        response = client.get("/api/cases/1")
        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error"

    def test_advocate_lookup_failure(self, client, monkeypatch):
        monkeypatch.setattr(CorpusStore, "find_cases_by_advocate_id", _boom)
        response = client.get("/api/advocates/adv_001")
        assert response.status_code == 500
        assert response.json()["message"] == "An error occurred while fetching advocate details"

    def test_suggestions_failure(self, client, monkeypatch):
        monkeypatch.setattr(CorpusStore, "suggestions", _boom)
        response = client.get("/api/suggestions")
        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error"
