"""Exceptions raised by the game engine and the session controller."""


class GameError(Exception):
    """Base class for rejected game actions."""


class InvalidCustomSettings(GameError, ValueError):
    """Custom settings text is malformed or describes an impossible board."""


class BoardTooLarge(InvalidCustomSettings):
    """Custom settings ask for a board wider or taller than allowed."""


class CellAlreadyRevealed(GameError):
    """The selected cell is already open."""


class ActionOnInactiveGame(GameError):
    """A cell was selected while no game is running."""


class OutOfBoundsCellReference(GameError):
    """Cell coordinates fall outside the board."""

    def __init__(self, row, col):
        super().__init__(f"cell ({row}, {col}) is outside the board")
        self.row = row
        self.col = col


class UnknownPreset(GameError):
    """The requested difficulty preset does not exist."""


class ConfigurationError(Exception):
    """Required configuration is missing at startup."""
