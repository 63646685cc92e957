import asyncio

import pytest
from fastapi.testclient import TestClient

from tictactoe.board import Mark
from tictactoe.config import GameConfig
from web.server import ConnectionManager, create_app, parse_args


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


def test_index_serves_board_page(client: TestClient) -> None:
    res = client.get("/")
    assert res.status_code == 200
    assert "Tic-tac-toe" in res.text


def test_initial_state(client: TestClient) -> None:
    body = client.get("/api/state").json()
    assert body["status"] == "ok"
    assert body["state"]["board"] == [None] * 9
    assert body["state"]["status_text"] == "Next player: X"


def test_move_and_ignored_move(client: TestClient) -> None:
    body = client.post("/api/move", json={"cell": 4}).json()
    assert body["status"] == "ok"
    assert body["state"]["board"][4] == "X"

    body = client.post("/api/move", json={"cell": 4}).json()
    assert body["status"] == "ignored"
    assert body["state"]["latest_step"] == 1


def test_move_outside_board_is_422(client: TestClient) -> None:
    assert client.post("/api/move", json={"cell": 9}).status_code == 422
    assert client.post("/api/move", json={}).status_code == 422


def test_jump_and_branch(client: TestClient) -> None:
    for cell in (0, 4, 1, 5, 2):
        client.post("/api/move", json={"cell": cell})
    assert client.get("/api/state").json()["state"]["winner"] == "X"

    body = client.post("/api/jump", json={"step": 0}).json()
    assert body["state"]["winner"] is None
    assert body["state"]["board"] == [None] * 9
    assert body["state"]["latest_step"] == 5

    body = client.post("/api/move", json={"cell": 8}).json()
    assert body["state"]["latest_step"] == 1
    assert body["state"]["board"][8] == "X"

    moves = client.get("/api/history").json()["moves"]
    assert [m["description"] for m in moves] == ["Go to game start", "Go to move #1"]


def test_jump_out_of_range(client: TestClient) -> None:
    body = client.post("/api/jump", json={"step": 3}).json()
    assert body["status"] == "error"


def test_new_game_with_names(client: TestClient) -> None:
    client.post("/api/move", json={"cell": 0})
    body = client.post("/api/new-game", json={"x_name": "Ann"}).json()
    assert body["state"]["latest_step"] == 0
    assert body["state"]["status_text"] == "Next player: Ann"
    assert client.get("/api/state").json()["config"]["players"][0]["name"] == "Ann"


def test_new_game_keeps_unset_name_empty(client: TestClient) -> None:
    client.post("/api/new-game", json={"x_name": "Ann"})
    players = client.get("/api/state").json()["config"]["players"]
    assert players == [
        {"mark": "X", "name": "Ann"},
        {"mark": "O", "name": None},
    ]

    client.post("/api/new-game", json={"o_name": "Bob"})
    players = client.get("/api/state").json()["config"]["players"]
    assert [p["name"] for p in players] == ["Ann", "Bob"]


def test_configured_app_uses_names() -> None:
    client = TestClient(create_app(GameConfig.named("Ann", "Bob")))
    client.post("/api/move", json={"cell": 0})
    assert client.get("/api/state").json()["state"]["status_text"] == "Next player: Bob"


def test_websocket_sends_state_and_pong(client: TestClient) -> None:
    with client.websocket_connect("/ws") as ws:
        first = ws.receive_json()
        assert first["type"] == "state"
        assert first["state"]["viewed_step"] == 0

        ws.send_json({"type": "ping"})
        assert ws.receive_json() == {"type": "pong"}


class FakeSocket:
    def __init__(self, fail: bool = False):
        self.sent: list[dict] = []
        self.fail = fail

    async def send_json(self, message: dict) -> None:
        if self.fail:
            raise RuntimeError("closed")
        self.sent.append(message)


def test_broadcast_drops_dead_connections() -> None:
    manager = ConnectionManager()
    alive, dead = FakeSocket(), FakeSocket(fail=True)
    manager.active_connections = [alive, dead]

    asyncio.run(manager.broadcast({"type": "state"}))

    assert alive.sent == [{"type": "state"}]
    assert manager.active_connections == [alive]


def test_parse_args_defaults() -> None:
    server_config, game_config = parse_args([])
    assert server_config.to_dict() == {"host": "127.0.0.1", "port": 7000, "log_level": "info"}
    assert game_config == GameConfig()


def test_parse_args_reads_flags_and_players_file(tmp_path) -> None:
    players = tmp_path / "players.json"
    players.write_text('{"players": [{"mark": "X", "name": "Ann"}, {"mark": "O"}]}')

    server_config, game_config = parse_args(
        ["--host", "0.0.0.0", "--port", "8080", "--log-level", "debug", "--players", str(players)]
    )

    assert server_config.host == "0.0.0.0"
    assert server_config.port == 8080
    assert server_config.log_level == "debug"
    assert game_config.names[Mark.X] == "Ann"
