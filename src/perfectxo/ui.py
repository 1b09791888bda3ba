"""FastAPI-powered web UI for playing PerfectXO in the browser."""

from __future__ import annotations

import logging
import time
import uuid
from typing import Dict, List, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from .game import GameResult, Mark
from .session import GameSession

logger = logging.getLogger(__name__)

SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(
    title="PerfectXO", description="Tic-tac-toe against a perfect computer player"
)

AI_THINK_DELAY: float = 0.5


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


def _create_session() -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    session = GameSession()
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created game %s", session_id)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _run_ai_turn(game_id: str, epoch: int) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, AI_THINK_DELAY))

    with session.lock:
        # A restart while we were sleeping belongs to a new game
        if session.epoch != epoch:
            return
        try:
            if session.is_computer_turn():
                session.compute_computer_move()
        finally:
            session.ai_pending = False


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        board = session.board
        result = session.result
        winner: Optional[str] = None
        if result is GameResult.X_WINS:
            winner = Mark.X.value
        elif result is GameResult.O_WINS:
            winner = Mark.O.value

        cells: List[str] = [
            "" if c is Mark.EMPTY else c.value for c in board.cells
        ]
        state: Dict[str, object] = {
            "id": game_id,
            "cells": cells,
            "currentPlayer": session.current.value,
            "result": result.value,
            "winner": winner,
            "drawn": result is GameResult.DRAW,
            "availableMoves": (
                board.available_moves() if result is GameResult.IN_PROGRESS else []
            ),
            "moveLog": list(session.move_log),
            "aiPending": session.ai_pending,
            "status": session.status_text(),
        }
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


def _apply_player_move(
    game_id: str,
    session: GameSession,
    cell_index: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    with session.lock:
        if session.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")

        try:
            session.on_human_move(cell_index)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        should_schedule_ai = session.is_computer_turn()
        if should_schedule_ai:
            session.ai_pending = True
        epoch = session.epoch

    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id, epoch)


@app.post("/api/game")
def create_game() -> Dict[str, object]:
    game_id, session = _create_session()
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(game_id, session, request.cell_index, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/restart")
def restart_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.reset()
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>PerfectXO</title>
    <style>
      :root {
        color-scheme: light;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif;
        --cell-size: min(28vw, 120px);
      }
      * {
        box-sizing: border-box;
      }
      body {
        margin: 0;
        min-height: 100vh;
        display: flex;
        flex-direction: column;
        align-items: center;
        justify-content: center;
        gap: 1.25rem;
        background: radial-gradient(circle at top, #f2f5ff, #dbe0ff 40%, #cfd8ff 70%);
        color: #13203a;
      }
      h1 {
        margin: 0;
        letter-spacing: 0.06em;
      }
      .status {
        font-size: 1.25rem;
        font-weight: 600;
        min-height: 1.5rem;
      }
      #message {
        min-height: 1.25rem;
        color: #b00020;
        font-weight: 600;
      }
      .board {
        display: grid;
        grid-template-columns: repeat(3, auto);
      }
      .cell {
        width: var(--cell-size);
        height: var(--cell-size);
        border: 2px solid #203050;
        display: flex;
        justify-content: center;
        align-items: center;
        position: relative;
        cursor: pointer;
        background: rgba(255, 255, 255, 0.9);
        font-size: calc(var(--cell-size) * 0.6);
        font-weight: 700;
      }
      .cell:nth-child(-n + 3) {
        border-top: none;
      }
      .cell:nth-child(3n + 1) {
        border-left: none;
      }
      .cell:nth-child(3n + 3) {
        border-right: none;
      }
      .cell:nth-last-child(-n + 3) {
        border-bottom: none;
      }
      .cell.x,
      .cell.o {
        cursor: not-allowed;
      }
      .cell.x {
        color: #f04a6a;
      }
      .cell.o {
        color: #3a66ff;
      }
      .board.locked .cell {
        cursor: not-allowed;
      }
      .board.x .cell:not(.x):not(.o):hover::before {
        content: 'X';
        color: rgba(240, 74, 106, 0.3);
      }
      .board.o .cell:not(.x):not(.o):hover::before {
        content: 'O';
        color: rgba(58, 102, 255, 0.3);
      }
      .restart-btn {
        font-size: 1rem;
        padding: 0.55rem 1.4rem;
        border-radius: 999px;
        border: 1px solid rgba(60, 70, 120, 0.25);
        background: white;
        cursor: pointer;
      }
    </style>
  </head>
  <body>
    <h1>PerfectXO</h1>
    <div class="status" role="status">Setting up your game…</div>
    <div class="board x" id="board">
      <div class="cell" data-cell="0"></div>
      <div class="cell" data-cell="1"></div>
      <div class="cell" data-cell="2"></div>
      <div class="cell" data-cell="3"></div>
      <div class="cell" data-cell="4"></div>
      <div class="cell" data-cell="5"></div>
      <div class="cell" data-cell="6"></div>
      <div class="cell" data-cell="7"></div>
      <div class="cell" data-cell="8"></div>
    </div>
    <div id="message"></div>
    <button class="restart-btn" type="button">Restart</button>
    <script>
      const board = document.getElementById('board');
      const statusEl = document.querySelector('.status');
      const messageEl = document.getElementById('message');
      const restartBtn = document.querySelector('.restart-btn');
      const cells = Array.from(document.querySelectorAll('.cell'));

      let gameId = null;
      let gameState = null;
      let isRequestPending = false;
      let aiPollHandle = null;

      function stopAiPolling() {
        if (aiPollHandle !== null) {
          window.clearTimeout(aiPollHandle);
          aiPollHandle = null;
        }
      }

      function ensureAiPolling() {
        if (aiPollHandle !== null) return;
        aiPollHandle = window.setTimeout(pollAiState, 250);
      }

      function isLocked() {
        return (
          !gameState ||
          isRequestPending ||
          gameState.aiPending ||
          gameState.result !== 'in_progress'
        );
      }

      function render() {
        if (!gameState) return;
        gameState.cells.forEach((value, index) => {
          const cell = cells[index];
          cell.classList.remove('x', 'o');
          cell.textContent = value;
          if (value) {
            cell.classList.add(value.toLowerCase());
          }
        });
        board.classList.remove('x', 'o');
        board.classList.add(gameState.currentPlayer.toLowerCase());
        board.classList.toggle('locked', isLocked());
        statusEl.textContent = gameState.status;
      }

      function setState(data) {
        gameId = data.id;
        gameState = data;
        render();
        if (gameState.aiPending && gameState.result === 'in_progress') {
          ensureAiPolling();
        } else {
          stopAiPolling();
        }
      }

      async function request(url, options = {}) {
        const response = await fetch(url, options);
        if (!response.ok) {
          const payload = await response.json().catch(() => ({}));
          const detail = payload?.detail;
          throw new Error(typeof detail === 'string' ? detail : 'Request failed');
        }
        return response.json();
      }

      async function startGame() {
        stopAiPolling();
        messageEl.textContent = '';
        try {
          const url = gameId ? `/api/game/${gameId}/restart` : '/api/game';
          setState(await request(url, { method: 'POST' }));
        } catch (error) {
          messageEl.textContent = error.message || 'Network error. Please try again.';
        }
      }

      async function pollAiState() {
        aiPollHandle = null;
        if (!gameId) return;
        try {
          setState(await request(`/api/game/${gameId}`));
        } catch (error) {
          console.error('Polling failed', error);
          ensureAiPolling();
        }
      }

      async function handleClick(event) {
        const cellIndex = Number.parseInt(event.target.dataset.cell, 10);
        if (isLocked() || gameState.cells[cellIndex]) return;
        isRequestPending = true;
        messageEl.textContent = '';
        render();
        try {
          const data = await request(`/api/game/${gameId}/move`, {
            method: 'POST',
            headers: { 'Content-Type': 'application/json' },
            body: JSON.stringify({ cellIndex }),
          });
          isRequestPending = false;
          setState(data);
        } catch (error) {
          isRequestPending = false;
          messageEl.textContent = error.message;
          render();
        }
      }

      cells.forEach((cell) => cell.addEventListener('click', handleClick));
      restartBtn.addEventListener('click', startGame);
      startGame();
    </script>
  </body>
</html>
"""
