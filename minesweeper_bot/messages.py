"""User-facing texts, menu layouts and a plain-text board rendering."""
from typing import Dict, List, Optional

from minesweeper_bot.types import MAX_BOARD_SIDE, ActionType, BoardView, CellMarker, Screen, Settings

WELCOME = 'Welcome to Minesweeper! Choose an option from the menu:'
MAIN_MENU = 'Menu:'
CHOOSE_DIFFICULTY = 'Choose difficulty:'
NEW_GAME = 'New game. Pick a cell:'
HELP = (
    'Minesweeper rules:\n'
    '1. Open cells and try not to hit a mine.\n'
    '2. A number on an open cell tells how many mines are in the neighboring cells.\n'
    '3. You win once every safe cell is open.\n\n'
    'Press "New game" to start playing.'
)

CELL_ALREADY_OPEN = 'This cell is already open.'
GAME_NOT_ACTIVE = 'Game over. Send /new or choose "New game" in the menu.'
OUT_OF_BOUNDS = 'That cell is not on the board.'
LOST_NOTICE = '💥 You lost!'
LOST_MESSAGE = '💥 Game over. Send /new or choose "New game" in the menu.'
WON_NOTICE = '🎉 You won!'
WON_MESSAGE = '🎉 Congratulations, you won! Send /new or choose "New game" in the menu.'

CUSTOM_PROMPT_NOTICE = 'Enter settings as ROWS,COLS,MINES (for example: 8,8,12)'
CUSTOM_PROMPT = 'Enter difficulty settings as ROWS,COLS,MINES\nFor example: 8,8,12'
CUSTOM_BAD_FORMAT = 'Wrong format. Enter settings as ROWS,COLS,MINES (for example: 8,8,12)'
CUSTOM_BAD_VALUES = (
    'Invalid settings. Make sure the sizes are positive numbers '
    'and there are fewer mines than cells.'
)
CUSTOM_TOO_LARGE = f'Board too large. Rows and columns can be at most {MAX_BOARD_SIDE}.'
UNKNOWN_PRESET = 'Unknown difficulty.'

PRESET_LABELS: Dict[str, str] = {
    'easy': 'Easy',
    'medium': 'Medium',
    'hard': 'Hard',
}

MENUS: Dict[Screen, List[Dict[str, Optional[str]]]] = {
    Screen.MAIN_MENU: [
        {'label': 'New game', 'action': ActionType.START_NEW_GAME.value, 'preset': None},
        {'label': 'Settings', 'action': ActionType.OPEN_SETTINGS_MENU.value, 'preset': None},
        {'label': 'Rules', 'action': ActionType.OPEN_HELP.value, 'preset': None},
    ],
    Screen.SETTINGS_MENU: [
        *(
            {'label': label, 'action': ActionType.CHOOSE_PRESET.value, 'preset': name}
            for name, label in PRESET_LABELS.items()
        ),
        {'label': 'Custom', 'action': ActionType.REQUEST_CUSTOM_SETTINGS.value, 'preset': None},
        {'label': 'Back', 'action': ActionType.OPEN_MAIN_MENU.value, 'preset': None},
    ],
}
MENUS[Screen.HELP] = MENUS[Screen.MAIN_MENU]

MARKER_SYMBOLS: Dict[CellMarker, str] = {
    CellMarker.HIDDEN: '❓',
    CellMarker.BLANK: '▫️',
    CellMarker.MINE: '💣',
}


def preset_saved(name: str) -> str:
    return f'Settings saved: {PRESET_LABELS.get(name, name)}'


def custom_saved(settings: Settings) -> str:
    return f'Settings saved: {settings.rows} rows, {settings.cols} columns, {settings.mine_count} mines.'


def menu_for(screen: Screen) -> List[Dict[str, Optional[str]]]:
    """Buttons the presentation layer should offer under ``screen``."""
    return MENUS.get(screen, [])


def marker_symbol(marker: CellMarker) -> str:
    return MARKER_SYMBOLS.get(marker, marker.value)


def format_board(view: BoardView) -> str:
    """Render a board view as one line of symbols per row."""
    return '\n'.join(' '.join(marker_symbol(marker) for marker in row) for row in view.cells)
