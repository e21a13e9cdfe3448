import pytest

import main
from simulations import REGISTRY


@pytest.fixture
def client():
    main.app.config["TESTING"] = True
    main._STORE.clear()
    with main.app.test_client() as c:
        yield c
    main._STORE.clear()


def test_index_lists_every_simulation(client):
    resp = client.get("/")
    assert resp.status_code == 200
    body = resp.get_data(as_text=True)
    for key in REGISTRY:
        assert f"/sim/{key}" in body


def test_index_search_filters(client):
    body = client.get("/?q=rle").get_data(as_text=True)
    assert "/sim/compression" in body
    assert "/sim/packet-switching" not in body


def test_simulation_page_renders_first_frame(client):
    resp = client.get("/sim/compression")
    assert resp.status_code == 200
    body = resp.get_data(as_text=True)
    assert "btn-reset" in body
    assert "AAAABBBCCDAA" in body


def test_unknown_simulation_is_json_404(client):
    resp = client.get("/api/nope/state")
    assert resp.status_code == 404
    assert "nope" in resp.get_json()["error"]


def test_reset_and_step(client):
    data = client.post("/api/compression/reset", json={"text": "aaabb"}).get_json()
    assert data["state"] == "ready"
    assert data["length"] == 4
    assert data["position"] == 0

    data = client.post("/api/compression/step").get_json()
    assert data["position"] == 1
    assert "3a" in data["frame"]


def test_play_pause_and_state(client):
    client.post("/api/sorting-algorithms/reset", json={"size": 8})
    assert client.post("/api/sorting-algorithms/play").get_json()["state"] == "running"
    assert client.get("/api/sorting-algorithms/state").get_json()["state"] == "running"
    assert client.post("/api/sorting-algorithms/pause").get_json()["state"] == "paused"


def test_speed_is_clamped(client):
    data = client.post("/api/searching-algorithms/speed", json={"speed": 100}).get_json()
    assert data["speed"] == 4
    data = client.post("/api/searching-algorithms/speed", json={"speed": "x"}).get_json()
    assert data["speed"] == 4


def test_sessions_are_isolated(client):
    client.post("/api/compression/reset", json={"text": "aaaa"})
    client.post("/api/compression/step")
    with main.app.test_client() as other:
        assert other.get("/api/compression/state").get_json()["position"] == 0
    assert client.get("/api/compression/state").get_json()["position"] == 1


def test_resize_accepts_surface_size(client):
    resp = client.post("/api/sorting-algorithms/resize", json={"width": 800, "dpr": 2})
    assert resp.status_code == 200


def test_theme_cookie(client):
    client.post("/api/compression/reset", json={"text": "ab"})
    resp = client.post("/api/theme", json={"theme": "light"})
    assert resp.get_json() == {"theme": "light"}
    assert "gcse-cs-theme=light" in resp.headers["Set-Cookie"]
    frame = client.get("/api/compression/state").get_json()["frame"]
    assert "#0f172a" in frame

    resp = client.post("/api/theme", json={"theme": "neon"})
    assert resp.get_json() == {"theme": "dark"}


def test_export(client):
    client.post("/api/binary-arithmetic/reset", json={"a": "00000001", "b": "11111111"})
    data = client.get("/api/binary-arithmetic/export").get_json()
    assert data["params"]["a"] == "00000001"
    assert data["steps"][-1]["overflow"] is True


def test_store_keeps_only_recent_sessions(client):
    main.app.config["VIS_MAX_SESSIONS"] = 3
    try:
        clients = [main.app.test_client() for _ in range(5)]
        for c in clients:
            c.post("/api/compression/reset", json={"text": "aaa"})
            c.post("/api/compression/step")
        assert len(main._STORE) == 3

        # the newest session survived, the oldest was rebuilt from scratch
        assert clients[-1].get("/api/compression/state").get_json()["position"] == 1
        assert clients[0].get("/api/compression/state").get_json()["position"] == 0
        assert len(main._STORE) == 3
    finally:
        main.app.config["VIS_MAX_SESSIONS"] = 256


def test_evicted_sessions_drop_their_timers(client):
    main.app.config["VIS_MAX_SESSIONS"] = 1
    try:
        first = main.app.test_client()
        first.post("/api/sorting-algorithms/play")
        vis = next(iter(main._STORE.values()))["sorting-algorithms"]
        assert vis.engine.scheduler.pending() == 1

        main.app.test_client().get("/api/compression/state")
        assert len(main._STORE) == 1
        assert vis.engine.scheduler.pending() == 0
    finally:
        main.app.config["VIS_MAX_SESSIONS"] = 256
