"""Type definitions for the Minesweeper chat bot."""
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from enum import StrEnum

from minesweeper_bot.errors import BoardTooLarge, InvalidCustomSettings

# Largest custom board side; keeps every board within a few hundred cells
MAX_BOARD_SIDE = 20


@dataclass
class Cell:
    """Represents a single cell on the minesweeper board."""
    has_mine: bool = False
    revealed: bool = False
    adjacent_mines: int = 0


@dataclass
class Board:
    """Represents the game board."""
    cells: List[List[Cell]]
    rows: int
    cols: int
    mine_count: int

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def cell(self, row: int, col: int) -> Cell:
        return self.cells[row][col]


class GameStatus(StrEnum):
    """Possible game states."""
    IN_PROGRESS = 'in_progress'
    WON = 'won'
    LOST = 'lost'


@dataclass
class Game:
    """A single round of play on one board."""
    board: Board
    status: GameStatus = GameStatus.IN_PROGRESS

    @property
    def is_over(self) -> bool:
        return self.status != GameStatus.IN_PROGRESS


@dataclass(frozen=True)
class Settings:
    """Board dimensions and mine count used for new games."""
    rows: int
    cols: int
    mine_count: int

    def __post_init__(self):
        if self.rows <= 0 or self.cols <= 0 or self.mine_count <= 0:
            raise InvalidCustomSettings("rows, cols and mines must be positive")
        if self.mine_count >= self.rows * self.cols:
            raise InvalidCustomSettings("there must be fewer mines than cells")
        if self.rows > MAX_BOARD_SIDE or self.cols > MAX_BOARD_SIDE:
            raise BoardTooLarge(f"board sides are limited to {MAX_BOARD_SIDE}")


DEFAULT_SETTINGS = Settings(rows=5, cols=5, mine_count=5)

PRESETS: Dict[str, Settings] = {
    'easy': Settings(rows=5, cols=5, mine_count=3),
    'medium': Settings(rows=7, cols=7, mine_count=10),
    'hard': Settings(rows=10, cols=10, mine_count=20),
}


class InputState(StrEnum):
    """What kind of free text the session expects next."""
    IDLE = 'idle'
    AWAITING_CUSTOM_SETTINGS = 'awaiting_custom_settings'


@dataclass
class Session:
    """Per-conversation record: current game, settings and input state."""
    session_id: str
    game: Optional[Game] = None
    settings: Optional[Settings] = None
    input_state: InputState = InputState.IDLE


class CellMarker(StrEnum):
    """How a single cell is drawn by the presentation layer."""
    HIDDEN = 'hidden'
    BLANK = 'blank'
    MINE = 'mine'
    ONE = '1'
    TWO = '2'
    THREE = '3'
    FOUR = '4'
    FIVE = '5'
    SIX = '6'
    SEVEN = '7'
    EIGHT = '8'

    @classmethod
    def for_count(cls, adjacent_mines: int) -> 'CellMarker':
        if adjacent_mines == 0:
            return cls.BLANK
        return cls(str(adjacent_mines))


@dataclass
class BoardView:
    """Render-ready grid of markers."""
    rows: int
    cols: int
    status: GameStatus
    cells: List[List[CellMarker]] = field(default_factory=list)


class ActionType(StrEnum):
    """Inbound actions accepted from the chat transport."""
    START_NEW_GAME = 'start_new_game'
    SELECT_CELL = 'select_cell'
    CHOOSE_PRESET = 'choose_preset'
    REQUEST_CUSTOM_SETTINGS = 'request_custom_settings'
    SUBMIT_CUSTOM_SETTINGS = 'submit_custom_settings'
    OPEN_SETTINGS_MENU = 'open_settings_menu'
    OPEN_HELP = 'open_help'
    OPEN_MAIN_MENU = 'open_main_menu'


@dataclass
class ActionRequest:
    """Request to perform an action in a session."""
    action: ActionType
    row: Optional[int] = None
    col: Optional[int] = None
    preset: Optional[str] = None
    text: Optional[str] = None


class Outcome(StrEnum):
    """Result classification of an action."""
    OK = 'ok'
    ALREADY_OPEN = 'already_open'
    INACTIVE_GAME = 'inactive_game'
    OUT_OF_BOUNDS = 'out_of_bounds'
    INVALID_SETTINGS = 'invalid_settings'
    UNKNOWN_PRESET = 'unknown_preset'
    IGNORED = 'ignored'


class Screen(StrEnum):
    """Which surface the presentation layer should draw."""
    MAIN_MENU = 'main_menu'
    SETTINGS_MENU = 'settings_menu'
    HELP = 'help'
    CUSTOM_SETTINGS_PROMPT = 'custom_settings_prompt'
    BOARD = 'board'
    NONE = 'none'


@dataclass
class ActionResult:
    """Response returned to the transport after each action."""
    session_id: str
    action: Optional[ActionType]
    outcome: Outcome
    screen: Screen
    settings: Settings
    notice: Optional[str] = None  # short acknowledgement
    message: Optional[str] = None
    board: Optional[BoardView] = None
    status: Optional[GameStatus] = None
