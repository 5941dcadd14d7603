from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi.testclient import TestClient

from layout_api.main import create_app
from layout_api.schemas import LayoutRunIn
from layout_api.store import store


FAST = {"maxDims": 4, "outerIterations": 3, "innerIterations": 2, "seed": 6}


@pytest.fixture
def client():
    return TestClient(create_app())


@pytest.fixture
def created(client, pipeline_dot):
    resp = client.post("/api/layouts/", json={"name": "pipeline", "dot": pipeline_dot, "config": FAST})
    assert resp.status_code == 201, resp.text
    body = resp.json()
    yield body
    store.delete_layout(body["id"])


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_run_layout_summary(created):
    assert created["name"] == "pipeline"
    assert created["state"] == "done"
    assert created["node_count"] == 5
    assert created["edge_count"] == 4
    assert created["frame_count"] == 3
    assert created["phase_dims"] == [3]
    assert "parse" in created["labels"]


def test_list_and_get(client, created):
    listed = client.get("/api/layouts/").json()
    assert any(item["id"] == created["id"] for item in listed)
    got = client.get(f"/api/layouts/{created['id']}").json()
    assert got == created


def test_frames_paging(client, created):
    page = client.get(f"/api/layouts/{created['id']}/frames", params={"start": 1, "limit": 1}).json()
    assert page["total"] == 3
    assert page["start"] == 1
    assert len(page["frames"]) == 1
    frame = page["frames"][0]
    assert frame["sequence"] == 1
    assert len(frame["nodes"]) == 5
    assert len(frame["edges"]) == 4
    assert len(frame["nodes"][0]["position"]) == 3


def test_figure(client, created):
    body = client.get(f"/api/layouts/{created['id']}/figure").json()
    assert body["frame"] == 2
    assert len(body["figure"]["frames"]) == 3


def test_delete(client, pipeline_dot):
    resp = client.post("/api/layouts/", json={"dot": pipeline_dot, "config": FAST})
    layout_id = resp.json()["id"]
    assert client.delete(f"/api/layouts/{layout_id}").status_code == 204
    assert client.get(f"/api/layouts/{layout_id}").status_code == 404
    assert client.delete(f"/api/layouts/{layout_id}").status_code == 404


def test_malformed_graph_is_bad_request(client):
    resp = client.post("/api/layouts/", json={
        "dot": "digraph { a; a -> ghost; }", "strict": True, "config": FAST,
    })
    assert resp.status_code == 400
    assert "ghost" in resp.json()["detail"]


def test_invalid_config_is_unprocessable(client, pipeline_dot):
    resp = client.post("/api/layouts/", json={"dot": pipeline_dot, "config": {"maxDims": 2}})
    assert resp.status_code == 422


def test_label_warnings_are_reported(client):
    resp = client.post("/api/layouts/", json={
        "dot": 'digraph { a [label=<a"b/c>]; }', "config": FAST,
    })
    assert resp.status_code == 201
    body = resp.json()
    assert body["labels"] == ["a"]
    assert len(body["warnings"]) == 1
    store.delete_layout(body["id"])


def test_concurrent_runs_keep_their_own_warnings():
    graphs = {
        "clean": ("digraph { a -> b; }", 0),
        "one": ('digraph { a [label=<a"b/c>]; a -> b; }', 1),
        "two": ('digraph { p [label=<p"q/r>]; s [shape=<"oval>]; p -> s; }', 2),
    }
    payloads = [LayoutRunIn(name=f"{key}-{i}", dot=dot, config=FAST)
                for i in range(4) for key, (dot, _) in graphs.items()]
    with ThreadPoolExecutor(max_workers=6) as pool:
        summaries = list(pool.map(store.run_layout, payloads))
    try:
        for summary in summaries:
            expected = graphs[summary.name.split("-")[0]][1]
            assert len(summary.warnings) == expected, summary.name
    finally:
        for summary in summaries:
            store.delete_layout(summary.id)
