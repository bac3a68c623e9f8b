"""
E2E tests for the drug search and catalog endpoints.
"""
from __future__ import annotations

import os
import uuid
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from MEDBOX.server.routes.search import drug_search_service
from MEDBOX.server.utils.constants import SOURCES_PATH


def test_search_returns_ranked_matches(api_client: TestClient):
    response = api_client.get("/drugs/search", params={"query": "amox"})
    assert response.status_code == 200

    payload = response.json()
    assert payload["query"] == "amox"
    assert payload["count"] == len(payload["results"])
    assert payload["results"][0]["name"] == "Amoxicillin"
    scores = [item["score"] for item in payload["results"]]
    assert scores == sorted(scores, reverse=True)
    assert all(0.25 < score <= 1.0 for score in scores)


def test_blank_search_returns_empty_list(api_client: TestClient):
    response = api_client.get("/drugs/search", params={"query": "   "})
    assert response.status_code == 200
    assert response.json() == {"query": "   ", "count": 0, "results": []}


def test_search_without_query_parameter(api_client: TestClient):
    response = api_client.get("/drugs/search")
    assert response.status_code == 200
    assert response.json()["count"] == 0


def test_catalog_status(api_client: TestClient):
    response = api_client.get("/drugs/catalog")
    assert response.status_code == 200

    payload = response.json()
    assert payload["names"] > 0
    assert payload["generation"] >= 1
    assert isinstance(payload["loaded"], bool)


@pytest.fixture
def catalog_source() -> Iterator[str]:
    filename = f"e2e_products_{uuid.uuid4().hex}.csv"
    path = os.path.join(SOURCES_PATH, filename)
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(
            "id,ndc,type,brand,labeler,generic\n"
            "1,0001,HUMAN,Quviviq,Idorsia,daridorexant\n"
        )
    try:
        yield filename
    finally:
        os.remove(path)


def test_catalog_load_from_csv(api_client: TestClient, catalog_source: str):
    drug_search_service.loader.wait(timeout=10)
    response = api_client.post("/drugs/catalog", json={"source_path": catalog_source})
    assert response.status_code == 202
    assert response.json()["started"] is True

    assert drug_search_service.loader.wait(timeout=10)
    status = api_client.get("/drugs/catalog").json()
    assert status["loaded"] is True
    assert status["loading"] is False

    names = [
        item["name"]
        for item in api_client.get(
            "/drugs/search", params={"query": "daridorexant"}
        ).json()["results"]
    ]
    assert "Daridorexant" in names


def test_catalog_load_with_missing_source(api_client: TestClient):
    drug_search_service.loader.wait(timeout=10)
    response = api_client.post(
        "/drugs/catalog", json={"source_path": f"missing_{uuid.uuid4().hex}.csv"}
    )
    assert response.status_code == 202
    assert response.json()["started"] is False
    assert response.json()["names"] > 0


def test_catalog_load_rejects_paths_outside_sources(api_client: TestClient, tmp_path):
    secret = tmp_path / "notes.txt"
    secret.write_text("a,b,c,Hiddenpassword,e,Hiddenpassword\n" * 2, encoding="utf-8")
    drug_search_service.loader.wait(timeout=10)
    generation = api_client.get("/drugs/catalog").json()["generation"]

    for source_path in (str(secret), os.path.join("..", "..", "..", "server", "app.py")):
        response = api_client.post("/drugs/catalog", json={"source_path": source_path})
        assert response.status_code == 400

    assert api_client.get("/drugs/catalog").json()["generation"] == generation
    results = api_client.get(
        "/drugs/search", params={"query": "hiddenpass"}
    ).json()["results"]
    assert all(item["name"] != "Hiddenpassword" for item in results)
