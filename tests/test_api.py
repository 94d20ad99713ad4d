"""Tests for the FastAPI tic-tac-toe interface."""

from __future__ import annotations

import threading

from fastapi.testclient import TestClient

from tictactoe import ui
from tictactoe.game import GameEngine
from tictactoe.ui import app


client = TestClient(app)


def _new_game() -> str:
    response = client.post("/api/game")
    assert response.status_code == 200
    return response.json()["id"]


def _move(game_id: str, index):
    return client.post(f"/api/game/{game_id}/move", json={"cellIndex": index})


def test_index_serves_page():
    response = client.get("/")
    assert response.status_code == 200
    assert "Tic-Tac-Toe" in response.text


def test_create_game_and_first_move():
    response = client.post("/api/game")
    assert response.status_code == 200
    payload = response.json()
    assert payload["currentPlayer"] == "X"
    assert payload["cells"] == [""] * 9
    assert payload["outcome"] == "in_progress"
    assert payload["status"] == "It's Player X's turn"
    assert "lastMove" not in payload

    move_response = _move(payload["id"], 4)
    assert move_response.status_code == 200
    state = move_response.json()
    assert state["cells"][4] == "X"
    assert state["currentPlayer"] == "O"
    assert state["lastMove"] == {
        "accepted": True,
        "cellIndex": 4,
        "player": "X",
        "reason": None,
    }
    assert state["moves"] == [{"player": "X", "cellIndex": 4}]


def test_occupied_cell_is_rejected_without_error():
    game_id = _new_game()
    assert _move(game_id, 0).status_code == 200

    duplicate = _move(game_id, 0)
    assert duplicate.status_code == 200
    state = duplicate.json()
    assert state["lastMove"]["accepted"] is False
    assert state["lastMove"]["reason"] == "Cell already occupied"
    assert state["cells"][0] == "X"
    assert state["currentPlayer"] == "O"


def test_out_of_range_index_is_rejected():
    game_id = _new_game()
    response = _move(game_id, 12)
    assert response.status_code == 200
    assert response.json()["lastMove"]["accepted"] is False


def test_malformed_move_body():
    game_id = _new_game()
    response = client.post(f"/api/game/{game_id}/move", json={"cell": 1})
    assert response.status_code == 422


def test_win_and_reset():
    game_id = _new_game()
    for index in (0, 1, 3, 2, 6):
        _move(game_id, index)
    state = client.get(f"/api/game/{game_id}").json()
    assert state["outcome"] == "won"
    assert state["winner"] == "X"
    assert state["winningLine"] == [0, 3, 6]
    assert state["status"] == "Player X has won!"

    blocked = _move(game_id, 4).json()
    assert blocked["lastMove"]["reason"] == "Game already finished"

    reset = client.post(f"/api/game/{game_id}/reset")
    assert reset.status_code == 200
    fresh = reset.json()
    assert fresh["cells"] == [""] * 9
    assert fresh["currentPlayer"] == "X"
    assert fresh["outcome"] == "in_progress"
    assert fresh["moves"] == []
    assert "lastMove" not in fresh


def test_missing_game_returns_404():
    assert client.get("/api/game/missing").status_code == 404
    assert _move("missing", 0).status_code == 404
    assert client.post("/api/game/missing/reset").status_code == 404


def test_delete_game():
    game_id = _new_game()
    assert client.delete(f"/api/game/{game_id}").status_code == 204
    assert client.get(f"/api/game/{game_id}").status_code == 404
    assert client.delete(f"/api/game/{game_id}").status_code == 404


def test_oldest_session_evicted(monkeypatch):
    monkeypatch.setattr(ui, "MAX_SESSIONS", 2)
    ui.SESSIONS.clear()
    first = _new_game()
    second = _new_game()
    third = _new_game()
    assert first not in ui.SESSIONS
    assert second in ui.SESSIONS and third in ui.SESSIONS


def test_session_limit_read_when_game_is_created(monkeypatch):
    monkeypatch.setattr(ui, "MAX_SESSIONS", None)
    monkeypatch.setenv("TICTACTOE_MAX_SESSIONS", "1")
    ui.SESSIONS.clear()
    first = _new_game()
    second = _new_game()
    assert list(ui.SESSIONS) == [second]
    assert first not in ui.SESSIONS


def test_boolean_cell_index_refused():
    game_id = _new_game()
    response = _move(game_id, True)
    assert response.status_code == 422
    state = client.get(f"/api/game/{game_id}").json()
    assert state["cells"] == [""] * 9


def test_float_cell_index_refused():
    game_id = _new_game()
    assert _move(game_id, 1.0).status_code == 422


def test_move_response_reports_its_own_move(monkeypatch):
    game_id = _new_game()
    original = GameEngine.play_move
    rivals = []

    def play_then_race(self, index):
        result = original(self, index)
        if not rivals:
            # A second move on the same game arrives while this one is running.
            rival = threading.Thread(
                target=ui.make_move,
                args=(game_id, ui.MoveRequest(cellIndex=4)),
            )
            rivals.append(rival)
            rival.start()
            rival.join(timeout=0.05)
        return result

    monkeypatch.setattr(GameEngine, "play_move", play_then_race)
    state = _move(game_id, 0).json()
    rivals[0].join()

    assert state["lastMove"]["cellIndex"] == 0
    assert state["lastMove"]["player"] == "X"
    assert state["cells"][4] == ""
    assert state["currentPlayer"] == "O"

    final = client.get(f"/api/game/{game_id}").json()
    assert final["cells"][0] == "X"
    assert final["cells"][4] == "O"
