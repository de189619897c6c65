"""Game session controller: turns inbound actions into session updates and views."""
import logging
import random
import re
from typing import Optional

from minesweeper_bot import messages
from minesweeper_bot.engine import generate_board, is_won, render_board, reveal
from minesweeper_bot.errors import (
    ActionOnInactiveGame,
    BoardTooLarge,
    CellAlreadyRevealed,
    InvalidCustomSettings,
    OutOfBoundsCellReference,
    UnknownPreset,
)
from minesweeper_bot.session_store import SessionStore
from minesweeper_bot.types import (
    PRESETS,
    ActionRequest,
    ActionResult,
    ActionType,
    Game,
    GameStatus,
    InputState,
    Outcome,
    Screen,
    Settings,
)

logger = logging.getLogger(__name__)

INTEGER = re.compile(r"[+-]?[0-9]+")


def parse_custom_settings(text: str) -> Settings:
    """Parse ``ROWS,COLS,MINES`` into validated settings."""
    parts = (text or '').split(',')
    if len(parts) != 3:
        raise InvalidCustomSettings(messages.CUSTOM_BAD_FORMAT)
    parts = [part.strip() for part in parts]
    if not all(INTEGER.fullmatch(part) for part in parts):
        raise InvalidCustomSettings(messages.CUSTOM_BAD_VALUES)
    rows, cols, mines = (int(part) for part in parts)
    try:
        return Settings(rows=rows, cols=cols, mine_count=mines)
    except BoardTooLarge as error:
        raise InvalidCustomSettings(messages.CUSTOM_TOO_LARGE) from error
    except InvalidCustomSettings as error:
        raise InvalidCustomSettings(messages.CUSTOM_BAD_VALUES) from error


class GameSessionController:
    """Applies actions to sessions held in a :class:`SessionStore`.

    Each public action holds the session's lock for its whole duration and
    returns an :class:`ActionResult` describing what the presentation layer
    should draw. Rejected actions are reported through ``outcome``; nothing
    here raises for user mistakes.
    """

    def __init__(self, store: SessionStore, rng: Optional[random.Random] = None):
        self.store = store
        self.rng = rng

    def dispatch(self, session_id: str, request: ActionRequest) -> ActionResult:
        """Route an inbound request to the matching action."""
        action = request.action
        if action == ActionType.START_NEW_GAME:
            return self.start_new_game(session_id)
        if action == ActionType.SELECT_CELL:
            return self.select_cell(session_id, request.row, request.col)
        if action == ActionType.CHOOSE_PRESET:
            return self.choose_preset(session_id, request.preset)
        if action == ActionType.REQUEST_CUSTOM_SETTINGS:
            return self.request_custom_settings(session_id)
        if action == ActionType.SUBMIT_CUSTOM_SETTINGS:
            return self.submit_custom_settings(session_id, request.text)
        if action == ActionType.OPEN_SETTINGS_MENU:
            return self.open_settings_menu(session_id)
        if action == ActionType.OPEN_HELP:
            return self.open_help(session_id)
        if action == ActionType.OPEN_MAIN_MENU:
            return self.open_main_menu(session_id)
        raise ValueError(f"Unsupported action: {action}")

    def start_new_game(self, session_id: str) -> ActionResult:
        with self.store.lock(session_id):
            settings = self.store.get_settings(session_id)
            board = generate_board(settings.rows, settings.cols, settings.mine_count, rng=self.rng)
            game = Game(board=board)
            self.store.set_game(session_id, game)
            logger.info(
                f"Session {session_id}: new {settings.rows}x{settings.cols} game with {settings.mine_count} mines"
            )
            return self._board_result(session_id, ActionType.START_NEW_GAME, game, message=messages.NEW_GAME)

    def select_cell(self, session_id: str, row: Optional[int], col: Optional[int]) -> ActionResult:
        action = ActionType.SELECT_CELL
        with self.store.lock(session_id):
            game = self.store.get_game(session_id)
            try:
                self._check_selectable(game, row, col)
            except ActionOnInactiveGame:
                return self._result(session_id, action, Outcome.INACTIVE_GAME, Screen.NONE,
                                    notice=messages.GAME_NOT_ACTIVE)
            except OutOfBoundsCellReference as error:
                logger.warning(f"Session {session_id}: {error}")
                return self._board_result(session_id, action, game, outcome=Outcome.OUT_OF_BOUNDS,
                                          notice=messages.OUT_OF_BOUNDS)
            except CellAlreadyRevealed:
                return self._board_result(session_id, action, game, outcome=Outcome.ALREADY_OPEN,
                                          notice=messages.CELL_ALREADY_OPEN)

            reveal(game, row, col)
            if game.board.cell(row, col).has_mine:
                game.status = GameStatus.LOST
                logger.info(f"Session {session_id}: hit a mine at ({row}, {col})")
                return self._board_result(session_id, action, game,
                                          notice=messages.LOST_NOTICE, message=messages.LOST_MESSAGE)
            if is_won(game):
                game.status = GameStatus.WON
                logger.info(f"Session {session_id}: game won")
                return self._board_result(session_id, action, game,
                                          notice=messages.WON_NOTICE, message=messages.WON_MESSAGE)
            return self._board_result(session_id, action, game)

    def choose_preset(self, session_id: str, name: Optional[str]) -> ActionResult:
        """Switch to a named preset.

        Also drops a pending custom-settings prompt, so free text typed after
        picking a preset is ignored. The Telegram bot this replaces kept
        waiting for custom text in that case.
        """
        action = ActionType.CHOOSE_PRESET
        with self.store.lock(session_id):
            try:
                settings = self._preset(name)
            except UnknownPreset:
                return self._result(session_id, action, Outcome.UNKNOWN_PRESET, Screen.SETTINGS_MENU,
                                    notice=messages.UNKNOWN_PRESET, message=messages.CHOOSE_DIFFICULTY)
            self.store.set_settings(session_id, settings)
            self.store.set_input_state(session_id, InputState.IDLE)
            logger.info(f"Session {session_id}: preset {name} selected")
            text = messages.preset_saved(name)
            return self._result(session_id, action, Outcome.OK, Screen.MAIN_MENU, notice=text, message=text)

    def request_custom_settings(self, session_id: str) -> ActionResult:
        with self.store.lock(session_id):
            self.store.set_input_state(session_id, InputState.AWAITING_CUSTOM_SETTINGS)
            return self._result(session_id, ActionType.REQUEST_CUSTOM_SETTINGS, Outcome.OK,
                                Screen.CUSTOM_SETTINGS_PROMPT,
                                notice=messages.CUSTOM_PROMPT_NOTICE, message=messages.CUSTOM_PROMPT)

    def submit_custom_settings(self, session_id: str, text: Optional[str]) -> ActionResult:
        action = ActionType.SUBMIT_CUSTOM_SETTINGS
        with self.store.lock(session_id):
            if not self.store.is_awaiting_custom_input(session_id):
                return self._result(session_id, action, Outcome.IGNORED, Screen.NONE)
            try:
                settings = parse_custom_settings(text)
            except InvalidCustomSettings as error:
                logger.info(f"Session {session_id}: rejected custom settings {text!r}")
                return self._result(session_id, action, Outcome.INVALID_SETTINGS,
                                    Screen.CUSTOM_SETTINGS_PROMPT, message=str(error))
            self.store.set_settings(session_id, settings)
            self.store.set_input_state(session_id, InputState.IDLE)
            logger.info(f"Session {session_id}: custom settings {settings}")
            return self._result(session_id, action, Outcome.OK, Screen.NONE,
                                message=messages.custom_saved(settings))

    def open_settings_menu(self, session_id: str) -> ActionResult:
        return self._navigate(session_id, ActionType.OPEN_SETTINGS_MENU, Screen.SETTINGS_MENU,
                              messages.CHOOSE_DIFFICULTY)

    def open_help(self, session_id: str) -> ActionResult:
        return self._navigate(session_id, ActionType.OPEN_HELP, Screen.HELP, messages.HELP)

    def open_main_menu(self, session_id: str) -> ActionResult:
        return self._navigate(session_id, ActionType.OPEN_MAIN_MENU, Screen.MAIN_MENU, messages.MAIN_MENU)

    def describe(self, session_id: str) -> ActionResult:
        """Current view of a session, without changing it."""
        with self.store.lock(session_id):
            game = self.store.get_game(session_id)
            if game is None:
                return self._result(session_id, None, Outcome.OK, Screen.MAIN_MENU, message=messages.WELCOME)
            return self._board_result(session_id, None, game)

    @staticmethod
    def _check_selectable(game: Optional[Game], row: Optional[int], col: Optional[int]) -> None:
        if game is None or game.is_over:
            raise ActionOnInactiveGame("no game in progress")
        if not isinstance(row, int) or not isinstance(col, int) or not game.board.in_bounds(row, col):
            raise OutOfBoundsCellReference(row, col)
        if game.board.cell(row, col).revealed:
            raise CellAlreadyRevealed(f"cell ({row}, {col}) is already open")

    @staticmethod
    def _preset(name: Optional[str]) -> Settings:
        try:
            return PRESETS[name]
        except KeyError:
            raise UnknownPreset(f"unknown preset {name!r}") from None

    def _navigate(self, session_id: str, action: ActionType, screen: Screen, text: str) -> ActionResult:
        with self.store.lock(session_id):
            return self._result(session_id, action, Outcome.OK, screen, message=text)

    def _result(self, session_id: str, action: Optional[ActionType], outcome: Outcome, screen: Screen,
                notice: Optional[str] = None, message: Optional[str] = None) -> ActionResult:
        game = self.store.get_game(session_id)
        return ActionResult(
            session_id=session_id,
            action=action,
            outcome=outcome,
            screen=screen,
            settings=self.store.get_settings(session_id),
            notice=notice,
            message=message,
            status=game.status if game else None,
        )

    def _board_result(self, session_id: str, action: Optional[ActionType], game: Game,
                      outcome: Outcome = Outcome.OK, notice: Optional[str] = None,
                      message: Optional[str] = None) -> ActionResult:
        result = self._result(session_id, action, outcome, Screen.BOARD, notice=notice, message=message)
        result.board = render_board(game)
        result.status = game.status
        return result

