"""
Shared fixtures for HTTP tests against the FastAPI application.
"""
from __future__ import annotations

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from MEDBOX.server.app import app


@pytest.fixture(scope="session")
def api_client() -> Iterator[TestClient]:
    with TestClient(app) as client:
        yield client
