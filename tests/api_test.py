import pytest
from fastapi.testclient import TestClient

from citypath.main import app
from citypath.config import settings
from citypath.models import STATE, Algorithm

@pytest.fixture(autouse=True)
def reset_state():
    STATE["events"] = []
    yield
    STATE["events"] = []

@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c

def test_healthz(client):
    assert client.get("/healthz").json() == {"ok": True}

def test_get_graph_uses_from_alias(client):
    body = client.get("/getGraph").json()
    assert len(body["nodes"]) == 8
    assert len(body["edges"]) == 11
    assert body["edges"][0] == {"from": "A", "to": "B", "weight": 1.2, "distance": 1.2, "time": 3}

def test_get_nodes_sorted(client):
    ids = [n["id"] for n in client.get("/getNodes").json()["nodes"]]
    assert ids == sorted(ids)

def test_algorithms_listing(client):
    body = client.get("/algorithms").json()
    assert set(body) == {"dijkstra", "astar"}
    assert body["astar"]["name"] == "A* Algorithm"

def test_shortest_path_default_algorithm(client):
    resp = client.post("/shortestPath", json={"start": "A", "end": "G"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["result"]["path"] == ["A", "H", "G"]
    assert body["result"]["distance"] == pytest.approx(2.2, abs=1e-9)
    assert body["result"]["algorithm"] == "dijkstra"
    assert body["result"]["reachable"] is True
    assert [s["name"] for s in body["summary"]["stops"]] == ["Downtown Plaza", "Business Center", "Airport Terminal"]
    assert body["summary"]["segments"][0]["from"] == "A"

def test_shortest_path_uses_configured_default(client, monkeypatch):
    monkeypatch.setattr(settings, "DEFAULT_ALGORITHM", Algorithm.ASTAR)
    resp = client.post("/shortestPath", json={"start": "A", "end": "G"})
    assert resp.status_code == 200
    assert resp.json()["result"]["algorithm"] == "astar"

def test_shortest_path_astar(client):
    resp = client.post("/shortestPath", json={"start": "A", "end": "G", "algorithm": "astar"})
    body = resp.json()["result"]
    assert body["steps"] == 5
    assert body["visited_order"] == ["A", "H", "D", "B", "E"]

def test_shortest_path_unknown_node(client):
    resp = client.post("/shortestPath", json={"start": "A", "end": "Z"})
    assert resp.status_code == 404
    assert resp.json()["node"] == "Z"

def test_shortest_path_bad_algorithm(client):
    resp = client.post("/shortestPath", json={"start": "A", "end": "G", "algorithm": "bfs"})
    assert resp.status_code == 422

def test_compare_endpoint(client):
    body = client.get("/compare", params={"start": "F", "end": "C"}).json()["results"]
    assert body["dijkstra"]["distance"] == pytest.approx(body["astar"]["distance"], abs=1e-9)
    assert body["astar"]["steps"] <= body["dijkstra"]["steps"]

def test_events_newest_first(client):
    client.post("/shortestPath", json={"start": "A", "end": "G"})
    client.post("/shortestPath", json={"start": "A", "end": "Q"})
    events = client.get("/events").json()
    assert [e["type"] for e in events] == ["node_not_found", "path_computed"]
    assert len(client.get("/events", params={"limit": 1}).json()) == 1
