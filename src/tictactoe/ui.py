"""FastAPI-powered web UI for playing tic-tac-toe in the browser."""

from __future__ import annotations

import logging
import threading
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from fastapi import FastAPI, HTTPException, Response
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field, StrictInt

from .config import load_settings
from .game import GameEngine, MoveResult

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Container for one in-memory game and the result of its last move."""

    engine: GameEngine = field(default_factory=GameEngine)
    last_result: Optional[MoveResult] = None
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: "OrderedDict[str, GameSession]" = OrderedDict()
SESSIONS_LOCK = threading.Lock()
# None means "read TICTACTOE_MAX_SESSIONS when the next game is created".
MAX_SESSIONS: Optional[int] = None

app = FastAPI(title="Tic-Tac-Toe", description="Two-player tic-tac-toe in the browser")


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    # Strict so JSON booleans and floats are refused; range is checked by
    # the engine, which rejects instead of failing.
    cell_index: StrictInt = Field(alias="cellIndex")


def _session_limit() -> int:
    if MAX_SESSIONS is not None:
        return MAX_SESSIONS
    return load_settings().max_sessions


def _create_session() -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    limit = _session_limit()
    session = GameSession()
    session_id = uuid.uuid4().hex
    with SESSIONS_LOCK:
        SESSIONS[session_id] = session
        while len(SESSIONS) > limit:
            evicted, _ = SESSIONS.popitem(last=False)
            logger.info("Evicted game %s (limit %d)", evicted, limit)
    logger.info("Created game %s", session_id)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _state_payload(game_id: str, session: GameSession) -> Dict[str, object]:
    """Build the response body. Caller must hold ``session.lock``."""

    state: Dict[str, object] = {"id": game_id}
    state.update(session.engine.snapshot())
    result = session.last_result
    if result is not None:
        state["lastMove"] = {
            "accepted": result.accepted,
            "cellIndex": result.index,
            "player": result.mark.value if result.mark else None,
            "reason": result.reason,
        }
    return state


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        return _state_payload(game_id, session)


@app.post("/api/game")
def create_game() -> Dict[str, object]:
    game_id, session = _create_session()
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(game_id: str, request: MoveRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.last_result = session.engine.play_move(request.cell_index)
        return _state_payload(game_id, session)


@app.post("/api/game/{game_id}/reset")
def reset_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.engine.reset()
        session.last_result = None
        state = _state_payload(game_id, session)
    logger.info("Reset game %s", game_id)
    return state


@app.delete("/api/game/{game_id}", status_code=204)
def delete_game(game_id: str) -> Response:
    with SESSIONS_LOCK:
        if SESSIONS.pop(game_id, None) is None:
            raise HTTPException(status_code=404, detail="Game not found")
    logger.info("Deleted game %s", game_id)
    return Response(status_code=204)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic-Tac-Toe</title>
    <style>
      html {
        font-family: Georgia, 'Times New Roman', serif;
      }
      body {
        margin: 0;
        background: #faf6ee;
        color: #2b2118;
      }
      main {
        max-width: 360px;
        margin: 3rem auto;
        padding: 0 1rem;
      }
      h1 {
        margin: 0 0 1rem;
        text-align: center;
        letter-spacing: 0.06em;
      }
      #status {
        text-align: center;
        font-size: 1.1rem;
        font-weight: 600;
        margin: 0 auto 1rem;
      }
      #board {
        display: grid;
        grid-template-columns: repeat(3, 1fr);
        gap: 0.4rem;
        max-width: 320px;
        margin: 0 auto 1.25rem;
      }
      .cell {
        aspect-ratio: 1;
        display: flex;
        align-items: center;
        justify-content: center;
        font-size: 2.6rem;
        font-weight: 700;
        background: #eef2ff;
        border-radius: 12px;
        cursor: pointer;
        user-select: none;
      }
      .cell.x {
        color: #2d5bff;
      }
      .cell.o {
        color: #e0415c;
      }
      .cell.win {
        background: #ffe9a8;
      }
      .controls {
        display: flex;
        justify-content: center;
      }
      #reset-button {
        font: inherit;
        padding: 0.4rem 1.2rem;
        border: 2px solid #2b2118;
        border-radius: 4px;
        background: transparent;
        cursor: pointer;
      }
      #moves {
        margin: 1rem 0 0;
        padding-left: 1.5rem;
        font-size: 0.9rem;
        color: rgba(19, 32, 58, 0.75);
      }
    </style>
  </head>
  <body>
    <main>
      <h1>Tic-Tac-Toe</h1>
      <div id=\"status\">Setting up your game…</div>
      <div id=\"board\"></div>
      <div class=\"controls\">
        <button id=\"reset-button\" type=\"button\">Restart Game</button>
      </div>
      <ol id=\"moves\"></ol>
    </main>
    <script>
      const statusEl = document.querySelector('#status');
      const boardEl = document.querySelector('#board');
      const resetButton = document.querySelector('#reset-button');
      const movesEl = document.querySelector('#moves');
      let gameId = null;
      let gameState = null;
      let isRequestPending = false;

      for (let i = 0; i < 9; i++) {
        const cell = document.createElement('div');
        cell.classList.add('cell');
        cell.dataset.cellIndex = String(i);
        cell.addEventListener('click', () => sendMove(i));
        boardEl.appendChild(cell);
      }

      function render() {
        if (!gameState) return;
        const winning = gameState.winningLine || [];
        boardEl.querySelectorAll('.cell').forEach((cell, index) => {
          const mark = gameState.cells[index];
          cell.textContent = mark;
          cell.classList.toggle('x', mark === 'X');
          cell.classList.toggle('o', mark === 'O');
          cell.classList.toggle('win', winning.includes(index));
        });
        statusEl.textContent = gameState.status;
        movesEl.innerHTML = '';
        gameState.moves.forEach((move) => {
          const item = document.createElement('li');
          item.textContent = `${move.player} → cell ${move.cellIndex + 1}`;
          movesEl.appendChild(item);
        });
      }

      async function request(path, options = {}) {
        const response = await fetch(path, {
          headers: { 'Content-Type': 'application/json' },
          ...options,
        });
        if (!response.ok) {
          throw new Error('Request failed');
        }
        return response.json();
      }

      async function startGame() {
        try {
          gameState = await request('/api/game', { method: 'POST' });
          gameId = gameState.id;
          render();
        } catch (error) {
          statusEl.textContent = 'Network error. Please reload.';
        }
      }

      async function sendMove(cellIndex) {
        if (!gameId || isRequestPending) return;
        isRequestPending = true;
        try {
          gameState = await request(`/api/game/${gameId}/move`, {
            method: 'POST',
            body: JSON.stringify({ cellIndex }),
          });
          render();
        } catch (error) {
          statusEl.textContent = 'Network error. Please try again.';
        } finally {
          isRequestPending = false;
        }
      }

      async function resetGame() {
        if (!gameId || isRequestPending) return;
        isRequestPending = true;
        try {
          gameState = await request(`/api/game/${gameId}/reset`, { method: 'POST' });
          render();
        } catch (error) {
          statusEl.textContent = 'Network error. Please try again.';
        } finally {
          isRequestPending = false;
        }
      }

      resetButton.addEventListener('click', resetGame);
      startGame();
    </script>
  </body>
</html>
"""
