"""Shared fixtures: a fresh ledger and app per test."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from apps.backend.main import create_app
from apps.backend.services.loyalty.points_ledger import PointsLedger


@pytest.fixture()
def ledger() -> PointsLedger:
    return PointsLedger()


@pytest.fixture()
def client(ledger):
    app = create_app(ledger=ledger)
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def add(client):
    """POST /add helper returning the response."""

    def _add(payer, points, timestamp):
        return client.post("/add", json={"payer": payer, "points": points, "timestamp": timestamp})

    return _add
