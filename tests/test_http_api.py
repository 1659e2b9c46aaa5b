"""Tests for the health and stats endpoints."""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from vidimeet.config import Settings
from vidimeet.server.http_api import create_app


@pytest.fixture
def client(mm):
    return TestClient(create_app(mm, Settings()))


class TestStatusEndpoints:
    def test_root(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert "version" in resp.json()

    def test_health_counts(self, client, mm, connect):
        connect("a", "b", "c")
        for cid in "abc":
            mm.join_pool(cid)

        body = client.get("/health").json()
        assert body["status"] == "OK"
        assert body["waitingUsers"] == 1
        assert body["activeRooms"] == 1
        datetime.fromisoformat(body["timestamp"])

    def test_stats(self, client, mm, connect):
        connect("a", "b", "c", "d", "e")
        for cid in "abcde":
            mm.join_pool(cid)

        assert client.get("/stats").json() == {
            "totalUsers": 5,
            "waitingUsers": 1,
            "activeRooms": 2,
            "activeConnections": 4,
        }

    def test_empty_stats(self, client):
        assert client.get("/stats").json() == {
            "totalUsers": 0,
            "waitingUsers": 0,
            "activeRooms": 0,
            "activeConnections": 0,
        }

    def test_debug_flag_reaches_app(self, mm):
        assert create_app(mm, Settings(debug=True)).debug is True
        assert create_app(mm, Settings()).debug is False
