"""Tests for the HTTP API."""

import json

import pytest
from conftest import pool_records
from fastapi.testclient import TestClient

from slate_optimizer.api.main import app
from slate_optimizer.optimization.worker import OptimizerWorker


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_config_exposes_optimizer_defaults(client):
    data = client.get("/api/config").json()
    assert data["salary_cap"] == 50000
    assert data["cap_slack_threshold"] > 0


def test_optimize_lineups(client, player_pool):
    body = {"players": pool_records(player_pool), "config": {"num_lineups": 5, "max_exposure": 60}}

    response = client.post("/api/optimize/lineups", json=body)

    assert response.status_code == 200
    data = response.json()
    assert data["complete"] is True
    assert data["requested"] == 5
    assert len(data["lineups"]) == 5
    assert data["message"] is None
    for lineup in data["lineups"]:
        assert lineup["total_salary"] <= 50000
        assert len(lineup["player_ids"]) == 8
    exposure_counts = sum(row["count"] for row in data["exposures"])
    assert exposure_counts == 5 * 8


def test_optimize_lineups_short_batch_has_message(client):
    players = [
        {"player_id": pid, "position": pos, "salary": salary, "projected_points": 30.0}
        for pid, pos, salary in [
            ("pg", "PG", 6000), ("sg", "SG", 6000), ("sf", "SF", 6000), ("pf", "PF", 6000),
            ("c", "C", 6000), ("pg2", "PG", 7000), ("sf2", "SF", 6500), ("util", "", 6300),
        ]
    ]

    response = client.post("/api/optimize/lineups", json={"players": players, "config": {"num_lineups": 3}})

    data = response.json()
    assert response.status_code == 200
    assert len(data["lineups"]) == 1
    assert data["complete"] is False
    assert "1 of 3" in data["message"]


def test_missing_slot_is_unprocessable(client, player_pool):
    players = [p for p in player_pool if "C" not in p.eligible_slots]

    response = client.post("/api/optimize/lineups", json={"players": pool_records(players)})

    assert response.status_code == 422
    assert "C" in response.json()["detail"]


def test_invalid_config_is_unprocessable(client, player_pool):
    body = {"players": pool_records(player_pool), "config": {"num_lineups": 0}}
    assert client.post("/api/optimize/lineups", json=body).status_code == 422


def test_stream_emits_progress_and_result(client, player_pool):
    body = {"players": pool_records(player_pool), "config": {"num_lineups": 3}}

    with client.stream("POST", "/api/optimize/lineups/stream", json=body) as response:
        assert response.status_code == 200
        text = "".join(response.iter_text())

    events = [
        json.loads(line.removeprefix("data: "))
        for line in text.splitlines()
        if line.startswith("data: ")
    ]
    assert [event["type"] for event in events] == ["progress", "progress", "progress", "result"]
    assert events[-1]["lineups"][-1] == events[-2]["current_best"]
    assert "event: result" in text


def test_stream_reports_validation_error(client, player_pool):
    players = [p for p in player_pool if "C" not in p.eligible_slots]

    with client.stream("POST", "/api/optimize/lineups/stream", json={"players": pool_records(players)}) as response:
        text = "".join(response.iter_text())

    assert "event: error" in text
    assert "No eligible players for C" in text


def test_stream_closes_worker_when_done(client, player_pool, monkeypatch):
    closed = []
    close = OptimizerWorker.close

    def tracking_close(self):
        closed.append(self)
        close(self)

    monkeypatch.setattr(OptimizerWorker, "close", tracking_close)
    body = {"players": pool_records(player_pool), "config": {"num_lineups": 2}}

    with client.stream("POST", "/api/optimize/lineups/stream", json=body) as response:
        text = "".join(response.iter_text())

    assert "event: result" in text
    assert len(closed) == 1
