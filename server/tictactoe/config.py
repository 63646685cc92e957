"""Game and server configuration dataclasses."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Literal
import json

from .board import Mark


@dataclass
class PlayerConfig:
    """Display settings for one side."""
    mark: Mark
    name: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.mark.value

    def to_dict(self) -> dict:
        return {
            "mark": self.mark.value,
            "name": self.name,
        }

    @classmethod
    def from_dict(cls, data: dict) -> PlayerConfig:
        try:
            mark = Mark(data["mark"])
        except ValueError:
            raise ValueError(f"Unknown mark: {data['mark']!r}") from None
        return cls(mark=mark, name=data.get("name"))


def _default_players() -> list[PlayerConfig]:
    return [PlayerConfig(Mark.X), PlayerConfig(Mark.O)]


@dataclass
class GameConfig:
    """Complete game configuration. X always moves first."""
    players: list[PlayerConfig] = field(default_factory=_default_players)

    def __post_init__(self):
        marks = sorted(p.mark.value for p in self.players)
        if marks != ["O", "X"]:
            raise ValueError(f"Need exactly one X and one O player, got {marks}")

    @classmethod
    def named(cls, x_name: str | None = None, o_name: str | None = None) -> GameConfig:
        """Preset: two players with optional display names."""
        return cls(players=[PlayerConfig(Mark.X, x_name), PlayerConfig(Mark.O, o_name)])

    @property
    def names(self) -> dict[Mark, str]:
        return {p.mark: p.display_name for p in self.players}

    def to_dict(self) -> dict:
        return {
            "players": [p.to_dict() for p in self.players],
        }

    @classmethod
    def from_dict(cls, data: dict) -> GameConfig:
        if "players" not in data:
            return cls()
        return cls(players=[PlayerConfig.from_dict(p) for p in data["players"]])

    @classmethod
    def from_json(cls, json_str: str) -> GameConfig:
        return cls.from_dict(json.loads(json_str))


@dataclass
class ServerConfig:
    """Where the web UI listens."""
    host: str = "127.0.0.1"
    port: int = 7000
    log_level: Literal["debug", "info", "warning", "error"] = "info"

    def to_dict(self) -> dict:
        return {
            "host": self.host,
            "port": self.port,
            "log_level": self.log_level,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ServerConfig:
        return cls(
            host=data.get("host", "127.0.0.1"),
            port=data.get("port", 7000),
            log_level=data.get("log_level", "info"),
        )
