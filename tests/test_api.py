"""Tests for the HTTP surface in main.py."""

import inspect

import pytest
from fastapi.testclient import TestClient

from idealab.config import Settings
from idealab.credentials import CredentialStore, MemoryStore
from main import create_app


@pytest.fixture
def build_client(tmp_path):
    def factory(gateway, api_key="AIzaTestKey"):
        store = MemoryStore({"gemini-api-key": api_key} if api_key else {})
        app = create_app(
            settings=Settings(state_path=tmp_path / "state.json"),
            credentials=CredentialStore(store),
            gateway_factory=lambda key: gateway,
        )
        return TestClient(app)

    return factory


def test_root_and_categories(build_client, make_gateway):
    client = build_client(make_gateway())
    assert client.get("/").status_code == 200
    assert "SaaS" in client.get("/categories").json()["categories"]


def test_idea_then_evaluation_round_trip(build_client, make_gateway, idea_reply, evaluation_reply):
    client = build_client(make_gateway(idea_reply, evaluation_reply))

    body = client.post("/idea", json={"category": "AI/ML"}).json()
    assert body["idea"]["targetMarket"] == "Independent grocery stores"
    assert body["evaluation"] is None
    assert body["configured"] is True

    body = client.post("/evaluation").json()
    assert body["evaluation"]["overallScore"] == 72
    assert body["evaluation"]["ideaId"] == body["idea"]["id"]
    assert body["score"]["label"] == "Good"

    assert client.get("/session").json()["evaluation"]["marketSize"] == 4


def test_idea_without_body(build_client, make_gateway, idea_reply):
    client = build_client(make_gateway(idea_reply))
    assert client.post("/idea").json()["idea"]["title"] == "ShelfSense"


def test_round_trip_failure_is_reported_in_session(build_client, make_gateway):
    client = build_client(make_gateway("I cannot help with that."))
    response = client.post("/idea")
    assert response.status_code == 200
    assert response.json()["error"].startswith("Failed to generate idea.")
    assert response.json()["generating"] is False


def test_configuration_required(build_client, make_gateway, idea_reply):
    client = build_client(make_gateway(idea_reply), api_key=None)
    response = client.post("/idea")
    assert response.status_code == 428
    assert response.json()["detail"]["status"] == "configuration_required"
    assert client.get("/session").json()["error"] is None


def test_evaluation_without_idea(build_client, make_gateway):
    client = build_client(make_gateway())
    assert client.post("/evaluation").status_code == 409


def test_credential_lifecycle(build_client, make_gateway):
    client = build_client(make_gateway(), api_key=None)
    assert client.get("/session").json()["configured"] is False

    response = client.put("/credential", json={"apiKey": "AIzaNewKey"})
    assert response.json() == {"configured": True, "warning": None}
    assert client.get("/session").json()["configured"] is True

    assert client.put("/credential", json={"apiKey": "other"}).json()["warning"]
    assert client.put("/credential", json={"apiKey": "  "}).status_code == 422

    assert client.delete("/credential").json()["configured"] is False
    assert client.get("/session").json()["configured"] is False


def test_connection_check(build_client, make_gateway):
    client = build_client(make_gateway("API connection successful"))
    body = client.post("/credential/test").json()
    assert body["success"] is True
    assert body["message"] == "API connection successful"


def test_connection_check_requires_key(build_client, make_gateway):
    client = build_client(make_gateway(), api_key=None)
    assert client.post("/credential/test").status_code == 428


def test_pdf_export(build_client, make_gateway, idea_reply, evaluation_reply):
    client = build_client(make_gateway(idea_reply, evaluation_reply))
    assert client.get("/export/pdf").status_code == 409

    client.post("/idea")
    client.post("/evaluation")
    response = client.get("/export/pdf")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


def test_connection_check_with_unbuildable_gateway(tmp_path):
    def factory(api_key):
        raise ValueError("Unknown model provider: 'openai'")

    app = create_app(
        settings=Settings(state_path=tmp_path / "state.json"),
        credentials=CredentialStore(MemoryStore({"gemini-api-key": "AIzaTestKey"})),
        gateway_factory=factory,
    )
    response = TestClient(app).post("/credential/test")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert "Unknown model provider" in body["message"]
    assert body["details"]["kind"] == "unknown"


def test_state_endpoints_run_on_the_event_loop(build_client, make_gateway):
    client = build_client(make_gateway())
    endpoints = {route.path: route.endpoint for route in client.app.routes if hasattr(route, "endpoint")}
    assert inspect.iscoroutinefunction(endpoints["/session"])
    assert inspect.iscoroutinefunction(endpoints["/export/pdf"])
