"""Shared fixtures for the Minesweeper bot tests."""

import random
from typing import Callable, List

import pytest

from minesweeper_bot.controller import GameSessionController
from minesweeper_bot.engine import count_neighbor_mines
from minesweeper_bot.session_store import SessionStore
from minesweeper_bot.types import Board, Cell, Game


def build_game(layout: List[str]) -> Game:
    """Build a game from rows of ``*`` (mine) and ``.`` (safe)."""
    rows, cols = len(layout), len(layout[0])
    cells = [[Cell(has_mine=char == "*") for char in line] for line in layout]
    for r in range(rows):
        for c in range(cols):
            if not cells[r][c].has_mine:
                cells[r][c].adjacent_mines = count_neighbor_mines(cells, r, c, rows, cols)
    mine_count = sum(line.count("*") for line in layout)
    return Game(board=Board(cells=cells, rows=rows, cols=cols, mine_count=mine_count))


@pytest.fixture()
def make_game() -> Callable[[List[str]], Game]:
    """Factory turning a text layout into a fresh game."""
    return build_game


@pytest.fixture()
def store() -> SessionStore:
    store = SessionStore()
    yield store
    store.close()


@pytest.fixture()
def controller(store: SessionStore) -> GameSessionController:
    """Controller with a seeded generator so boards are reproducible."""
    return GameSessionController(store, rng=random.Random(1234))
