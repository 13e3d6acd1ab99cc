import pytest
from fastapi.testclient import TestClient

import boggle.notifier
from boggle.server import create_app
from boggle.settings import settings
from boggle.solver import build_trie

WORDS = ["CAT", "CATS", "ACT", "SCAT", "TACS", "AT"]


@pytest.fixture
def client():
    with TestClient(create_app(build_trie(WORDS))) as c:
        yield c


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "trie_loaded": True, "word_count": 5}


def test_solve_given_grid(client):
    resp = client.post("/solve", json={"grid": [["c", "a"], ["t", "s"]]})
    assert resp.status_code == 200
    data = resp.json()
    assert data["board"] == [["C", "A"], ["T", "S"]]
    assert data["rows"] == 2 and data["cols"] == 2
    assert data["words"] == ["CATS", "SCAT", "TACS", "ACT", "CAT"]
    assert data["total_found"] == 5
    assert data["positions"]["CAT"] == [0, 0]
    assert data["positions"]["SCAT"] == [1, 1]
    assert data["search_stats"]["found"] == 5
    assert "solve" in data["stage_timings"]


def test_solve_max_results(client):
    resp = client.post("/solve", json={"grid": [["C", "A"], ["T", "S"]], "max_results": 2})
    data = resp.json()
    assert data["words"] == ["CATS", "SCAT"]
    assert data["word_count"] == 2
    assert data["total_found"] == 5


def test_solve_random_grid_is_seeded(client):
    first = client.post("/solve", json={"rows": 3, "cols": 5, "seed": 9}).json()
    second = client.post("/solve", json={"rows": 3, "cols": 5, "seed": 9}).json()
    assert first["board"] == second["board"]
    assert first["rows"] == 3 and first["cols"] == 5


def test_solve_default_random_grid(client):
    data = client.post("/solve", json={}).json()
    assert data["rows"] == settings.DEFAULT_ROWS
    assert data["cols"] == settings.DEFAULT_COLS


@pytest.mark.parametrize("body", [
    {"grid": []},
    {"grid": [["A", "B"], ["C"]]},
    {"grid": [["QU"]]},
    {"rows": 0},
    {"rows": "many"},
])
def test_solve_rejects_bad_input(client, body):
    resp = client.post("/solve", json=body)
    assert resp.status_code == 400


def test_solve_rejects_non_json(client):
    resp = client.post("/solve", content=b"not json", headers={"content-type": "application/json"})
    assert resp.status_code == 400


def test_solve_rejects_oversized_grid(client, monkeypatch):
    monkeypatch.setattr(settings, "MAX_GRID_CELLS", 4)
    assert client.post("/solve", json={"rows": 3, "cols": 3}).status_code == 413
    assert client.post("/solve", json={"grid": [["A", "B", "C"]] * 2}).status_code == 413


def test_solve_schedules_notification(client, monkeypatch):
    sent = []
    monkeypatch.setattr(settings, "NOTIFY_ENABLED", True)
    monkeypatch.setattr(boggle.notifier, "send_notification", lambda *args: sent.append(args))
    resp = client.post("/solve", json={"grid": [["C", "A"], ["T", "S"]]})
    assert resp.status_code == 200
    assert len(sent) == 1
    assert sent[0][0] == ["CATS", "SCAT", "TACS", "ACT", "CAT"]


def test_lookup(client):
    assert client.get("/lookup/cat").json() == {"query": "CAT", "result": "WORD"}
    assert client.get("/lookup/CA").json()["result"] == "PREFIX"
    assert client.get("/lookup/dog").json()["result"] == "ABSENT"
    assert client.get("/lookup/c4t").status_code == 400


def test_get_settings(client):
    data = client.get("/api/settings").json()
    assert data["settings"]["MIN_WORD_LENGTH"] == settings.MIN_WORD_LENGTH
    assert data["field_types"]["NOTIFY_ENABLED"] == "bool"


def test_post_settings_errors(client, monkeypatch):
    monkeypatch.setattr(settings, "MAX_RESULTS", settings.MAX_RESULTS)
    resp = client.post("/api/settings", json={"MAX_RESULTS": 5, "PORT": 1})
    assert resp.status_code == 400
    assert "PORT" in resp.json()["errors"]
    assert resp.json()["updated"]["MAX_RESULTS"] == 5


def test_settings_change_reloads_trie(tmp_path, monkeypatch):
    dict_file = tmp_path / "words.txt"
    dict_file.write_text("cat\ncats\nscat\n")
    monkeypatch.setattr(settings, "DICTIONARY_PATH", dict_file)
    monkeypatch.setattr(settings, "MIN_WORD_LENGTH", 3)

    with TestClient(create_app()) as c:
        assert c.get("/health").json()["word_count"] == 3
        resp = c.post("/api/settings", json={"MIN_WORD_LENGTH": 4})
        assert resp.status_code == 200
        assert c.get("/health").json()["word_count"] == 2
        assert c.get("/lookup/cat").json()["result"] == "PREFIX"


def test_settings_reject_min_length_below_three(client, monkeypatch):
    monkeypatch.setattr(settings, "MIN_WORD_LENGTH", 3)
    resp = client.post("/api/settings", json={"MIN_WORD_LENGTH": 2})
    assert resp.status_code == 400
    assert "MIN_WORD_LENGTH" in resp.json()["errors"]
    assert settings.MIN_WORD_LENGTH == 3

    trie = build_trie(["CAT"])
    trie.insert("AT")
    with TestClient(create_app(trie)) as c:
        words = c.post("/solve", json={"grid": [["C", "A"], ["T", "S"]]}).json()["words"]
    assert words == ["CAT"]


def test_settings_rejects_non_json(client):
    resp = client.post("/api/settings", content=b"nope", headers={"content-type": "application/json"})
    assert resp.status_code == 400


def test_failed_reload_leaves_settings_and_trie(client, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "DICTIONARY_PATH", tmp_path / "missing.txt")
    monkeypatch.setattr(settings, "MIN_WORD_LENGTH", 3)
    monkeypatch.setattr(settings, "MAX_RESULTS", settings.MAX_RESULTS)

    resp = client.post("/api/settings", json={"MIN_WORD_LENGTH": 4, "MAX_RESULTS": 9})
    assert resp.status_code == 503
    assert settings.MIN_WORD_LENGTH == 3
    assert settings.MAX_RESULTS != 9
    assert client.get("/health").json()["word_count"] == 5
    assert client.get("/lookup/cat").json()["result"] == "WORD"


def test_debug_setting_controls_log_level(client, monkeypatch):
    import logging

    monkeypatch.setattr(settings, "DEBUG", False)
    logger = logging.getLogger("boggle")
    try:
        assert client.post("/api/settings", json={"DEBUG": True}).status_code == 200
        assert logger.getEffectiveLevel() == logging.DEBUG
    finally:
        client.post("/api/settings", json={"DEBUG": False})
    assert logger.getEffectiveLevel() == logging.INFO
