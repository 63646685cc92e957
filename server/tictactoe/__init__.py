from .board import Board, Mark, BOARD_SIZE, CELL_COUNT
from .rules import GameStatus, WINNING_LINES, evaluate, winning_line, is_draw, game_status
from .history import GameHistory, HistoryEntry
from .config import GameConfig, PlayerConfig, ServerConfig
from .orchestrator import GameOrchestrator
