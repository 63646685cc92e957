"""FastAPI server with WebSocket for tic-tac-toe."""

import argparse
import json
import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from tictactoe.board import CELL_COUNT, Mark
from tictactoe.config import GameConfig, ServerConfig
from tictactoe.orchestrator import GameOrchestrator

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Manages WebSocket connections."""

    def __init__(self):
        self.active_connections: list[WebSocket] = []

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.append(websocket)

    def disconnect(self, websocket: WebSocket):
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)

    async def broadcast(self, message: dict):
        """Broadcast message to all connected clients."""
        dead = []
        for connection in self.active_connections:
            try:
                await connection.send_json(message)
            except (WebSocketDisconnect, RuntimeError):
                dead.append(connection)
        for conn in dead:
            logger.debug("Dropping dead websocket")
            self.disconnect(conn)


class MoveRequest(BaseModel):
    """Request body for placing a mark."""
    cell: int = Field(ge=0, lt=CELL_COUNT, description="Cell index, row-major 0-8")


class JumpRequest(BaseModel):
    """Request body for time travel."""
    step: int = Field(description="History step to view")


class NewGameRequest(BaseModel):
    """Request body for a new game; omitted names keep the current ones."""
    x_name: Optional[str] = None
    o_name: Optional[str] = None


def create_app(config: GameConfig | None = None) -> FastAPI:
    app = FastAPI(title="Tic-tac-toe")
    manager = ConnectionManager()
    orchestrator = GameOrchestrator(config)

    def build_state_message(state: dict) -> dict:
        return {"type": "state", "state": state}

    @app.get("/", response_class=HTMLResponse)
    async def get_index():
        """Serve the board page."""
        return HTML_PAGE

    # ==================== Game Control ====================

    @app.post("/api/new-game")
    async def new_game(request: Optional[NewGameRequest] = None):
        """Start over with an empty board, optionally renaming the players."""
        nonlocal orchestrator
        if request and (request.x_name or request.o_name):
            names = {p.mark: p.name for p in orchestrator.config.players}
            orchestrator = GameOrchestrator(GameConfig.named(
                request.x_name or names[Mark.X],
                request.o_name or names[Mark.O],
            ))
            result = {"status": "ok", "state": orchestrator.get_state()}
        else:
            result = orchestrator.new_game()

        await manager.broadcast({"type": "new_game", "state": result["state"]})
        return result

    @app.post("/api/move")
    async def make_move(request: MoveRequest):
        """Place the next mark from the viewed step."""
        result = orchestrator.apply_move(request.cell)
        if result["status"] == "ok":
            await manager.broadcast(build_state_message(result["state"]))
        return result

    # ==================== History ====================

    @app.post("/api/jump")
    async def jump_to(request: JumpRequest):
        """View an earlier (or later) step of the history."""
        result = orchestrator.jump_to(request.step)
        if result["status"] == "ok":
            await manager.broadcast(build_state_message(result["state"]))
        return result

    @app.get("/api/history")
    async def get_history():
        """Get the jump-to-move list."""
        return {"status": "ok", "moves": orchestrator.get_history()}

    # ==================== State ====================

    @app.get("/api/state")
    async def get_state():
        """Get the state at the viewed step."""
        return {
            "status": "ok",
            "state": orchestrator.get_state(),
            "config": orchestrator.config.to_dict(),
        }

    # ==================== WebSocket ====================

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        await manager.connect(websocket)
        try:
            await websocket.send_json(build_state_message(orchestrator.get_state()))

            while True:
                data = await websocket.receive_text()
                try:
                    cmd = json.loads(data)
                except json.JSONDecodeError:
                    logger.debug("Ignoring non-JSON websocket message")
                    continue
                if cmd.get("type") == "ping":
                    await websocket.send_json({"type": "pong"})
        except WebSocketDisconnect:
            manager.disconnect(websocket)

    return app


HTML_PAGE = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>Tic-tac-toe</title>
    <style>
      body { font: 14px "Century Gothic", Futura, sans-serif; margin: 20px; }
      .game { display: flex; flex-direction: row; }
      .game-info { margin-left: 20px; }
      .board-row { display: flex; }
      .square {
        background: #fff; border: 1px solid #999; font-size: 24px; font-weight: bold;
        height: 34px; width: 34px; margin: -1px -1px 0 0; padding: 0; text-align: center;
      }
      .square.win { background: #ffe58a; }
      ol { padding-left: 30px; }
      li.current button { font-weight: bold; }
    </style>
  </head>
  <body>
    <div class="game">
      <div class="game-board" id="board"></div>
      <div class="game-info">
        <div id="status"></div>
        <ol id="moves"></ol>
        <button id="new-game">New game</button>
      </div>
    </div>
    <script>
      async function post(path, body) {
        const res = await fetch(path, {
          method: "POST",
          headers: { "Content-Type": "application/json" },
          body: JSON.stringify(body || {}),
        });
        return res.json();
      }

      function render(state) {
        const board = document.getElementById("board");
        board.innerHTML = "";
        const line = state.winning_line || [];
        for (let r = 0; r < 3; r++) {
          const row = document.createElement("div");
          row.className = "board-row";
          for (let c = 0; c < 3; c++) {
            const i = r * 3 + c;
            const square = document.createElement("button");
            square.className = "square" + (line.includes(i) ? " win" : "");
            square.textContent = state.board[i] || "";
            square.onclick = () => post("/api/move", { cell: i }).then(update);
            row.appendChild(square);
          }
          board.appendChild(row);
        }
        document.getElementById("status").textContent = state.status_text;
        const moves = document.getElementById("moves");
        moves.innerHTML = "";
        for (const move of state.moves) {
          const li = document.createElement("li");
          if (move.step === state.viewed_step) li.className = "current";
          const button = document.createElement("button");
          button.textContent = move.description;
          button.onclick = () => post("/api/jump", { step: move.step }).then(update);
          li.appendChild(button);
          moves.appendChild(li);
        }
      }

      function update(result) {
        if (result.state) render(result.state);
      }

      document.getElementById("new-game").onclick = () => post("/api/new-game").then(update);

      const ws = new WebSocket(`ws://${location.host}/ws`);
      ws.onmessage = (event) => {
        const msg = JSON.parse(event.data);
        if (msg.state) render(msg.state);
      };
      setInterval(() => ws.readyState === 1 && ws.send(JSON.stringify({ type: "ping" })), 30000);
    </script>
  </body>
</html>
"""


def parse_args(argv: list[str] | None = None) -> tuple[ServerConfig, GameConfig]:
    p = argparse.ArgumentParser(description="Tic-tac-toe web server")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=7000)
    p.add_argument("--log-level", choices=["debug", "info", "warning", "error"], default="info")
    p.add_argument("--players", type=Path, default=None, help="JSON file with player names")
    args = p.parse_args(argv)
    game_config = GameConfig.from_json(args.players.read_text()) if args.players else GameConfig()
    return ServerConfig.from_dict(vars(args)), game_config


app = create_app()


if __name__ == "__main__":
    import uvicorn
    server_config, game_config = parse_args()
    logging.basicConfig(
        level=server_config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting server with %s", server_config.to_dict())
    uvicorn.run(create_app(game_config), host=server_config.host, port=server_config.port,
                log_level=server_config.log_level)
