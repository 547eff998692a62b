"""Tests for the optimizer service, using in-process ASGI TestClients."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from quadopt.service import app as service_module
from quadopt.service.app import ServiceState, create_app

SAMPLE_SRC = """\
(*, A, B, T1)
(/, 6, 2, T2)
(-, T1, T2, T3)
(=, T3, , X)
(=, 5, , C)
(*, A, B, T4)
(=, 2, , C)
(+, 18, C, T5)
(*, T4, T5, T6)
(=, T6, , Y)
"""

SAMPLE_OPTIMIZED = """\
(*, A, B, T1)
(=, T1, , T4)
(=, 3, , T2)
(-, T1, T2, T3)
(=, T3, , X)
(=, 2, , C)
(+, 18, C, T5)
(*, T1, T5, T6)
(=, T6, , Y)"""


@pytest.fixture()
def client():
    """Fresh service app with an empty report store."""
    return TestClient(create_app(ServiceState()))


def test_optimize_source(client):
    resp = client.post("/optimize", json={"source": SAMPLE_SRC})
    assert resp.status_code == 200
    body = resp.json()
    assert body["text"] == SAMPLE_OPTIMIZED
    assert body["input_count"] == 10
    assert body["output_count"] == 9
    assert body["alias_mode"] == "accumulate"


def test_optimize_quadruples(client):
    quads = [
        {"op": "+", "arg1": "A", "arg2": "B", "result": "T1"},
        {"op": "+", "arg1": "A", "arg2": "B", "result": "T2"},
    ]
    resp = client.post("/optimize", json={"quadruples": quads})
    assert resp.status_code == 200
    assert resp.json()["quadruples"] == [
        {"op": "+", "arg1": "A", "arg2": "B", "result": "T1"},
        {"op": "=", "arg1": "T1", "arg2": "", "result": "T2"},
    ]


def test_optimize_alias_mode(client):
    resp = client.post("/optimize", json={"source": SAMPLE_SRC, "alias_mode": "retract"})
    assert resp.status_code == 200
    assert resp.json()["alias_mode"] == "retract"


def test_unknown_alias_mode(client):
    resp = client.post("/optimize", json={"source": SAMPLE_SRC, "alias_mode": "nope"})
    assert resp.status_code == 400


def test_missing_block(client):
    resp = client.post("/optimize", json={})
    assert resp.status_code == 400


def test_no_quadruples(client):
    resp = client.post("/optimize", json={"source": "nothing here"})
    assert resp.status_code == 400
    assert "No valid quadruples" in resp.json()["detail"]


def test_malformed_block(client):
    resp = client.post("/optimize", json={"source": "(+, , B, T1)"})
    assert resp.status_code == 422
    assert "first operand" in resp.json()["detail"]


def test_block_too_large(client, monkeypatch):
    monkeypatch.setattr(service_module, "MAX_BLOCK_QUADRUPLES", 2)
    resp = client.post("/optimize", json={"source": SAMPLE_SRC})
    assert resp.status_code == 413


def test_report_lookup(client):
    block_id = client.post("/optimize", json={"source": SAMPLE_SRC}).json()["block_id"]
    resp = client.get(f"/reports/{block_id}")
    assert resp.status_code == 200
    assert resp.json()["text"] == SAMPLE_OPTIMIZED


def test_report_not_found(client):
    resp = client.get("/reports/deadbeef")
    assert resp.status_code == 404


def test_reports_are_per_app():
    first = TestClient(create_app(ServiceState()))
    second = TestClient(create_app(ServiceState()))
    block_id = first.post("/optimize", json={"source": SAMPLE_SRC}).json()["block_id"]
    assert second.get(f"/reports/{block_id}").status_code == 404


def test_batch_isolates_failures(client):
    resp = client.post(
        "/optimize_batch",
        json={"blocks": {"good": SAMPLE_SRC, "bad": "(*, , B, T)", "empty": ""}},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert list(body["results"]) == ["good"]
    assert body["results"]["good"]["text"] == SAMPLE_OPTIMIZED
    assert set(body["errors"]) == {"bad", "empty"}


def test_dag(client):
    resp = client.post("/dag", json={"source": SAMPLE_SRC})
    assert resp.status_code == 200
    body = resp.json()
    assert len(body["nodes"]) == 10
    assert body["bindings"]["T4"] == body["bindings"]["T1"]
    assert body["nodes"][2]["aliases"] == ["T1", "T4"]


def test_dag_malformed(client):
    resp = client.post("/dag", json={"source": "(+, --1, 2, T)"})
    assert resp.status_code == 422
