"""Board generation, reveal propagation and win detection."""
import random
from typing import Iterator, List, Optional, Tuple

from minesweeper_bot.errors import ActionOnInactiveGame, OutOfBoundsCellReference
from minesweeper_bot.types import Board, BoardView, Cell, CellMarker, Game, GameStatus


def neighbors(row: int, col: int, rows: int, cols: int) -> Iterator[Tuple[int, int]]:
    """Yield the in-bounds coordinates around (row, col)."""
    for dr in [-1, 0, 1]:
        for dc in [-1, 0, 1]:
            if dr == 0 and dc == 0:
                continue
            new_row = row + dr
            new_col = col + dc
            if 0 <= new_row < rows and 0 <= new_col < cols:
                yield new_row, new_col


def count_neighbor_mines(cells: List[List[Cell]], row: int, col: int, rows: int, cols: int) -> int:
    """Count the number of mines in neighboring cells."""
    return sum(1 for r, c in neighbors(row, col, rows, cols) if cells[r][c].has_mine)


def generate_board(rows: int, cols: int, mine_count: int, rng: Optional[random.Random] = None) -> Board:
    """Create a new board with randomly placed mines.

    ``rng`` defaults to the module-level generator; pass a seeded
    ``random.Random`` (or ``workflow.random()``) for reproducible boards.
    """
    if rows <= 0 or cols <= 0:
        raise ValueError(f"board must have at least one row and column, got {rows}x{cols}")
    if not 0 <= mine_count < rows * cols:
        raise ValueError(f"mine count must be in [0, {rows * cols}), got {mine_count}")

    cells = [[Cell() for _ in range(cols)] for _ in range(rows)]

    # Shuffle every position and mine the first mine_count of them
    positions = [(row, col) for row in range(rows) for col in range(cols)]
    (rng or random).shuffle(positions)
    for row, col in positions[:mine_count]:
        cells[row][col].has_mine = True

    for row in range(rows):
        for col in range(cols):
            if not cells[row][col].has_mine:
                cells[row][col].adjacent_mines = count_neighbor_mines(cells, row, col, rows, cols)

    return Board(cells=cells, rows=rows, cols=cols, mine_count=mine_count)


def reveal(game: Game, row: int, col: int) -> None:
    """Open a cell, cascading through connected zero-count cells.

    Leaves ``game.status`` untouched; the caller decides win or loss.
    """
    board = game.board
    if not board.in_bounds(row, col):
        raise OutOfBoundsCellReference(row, col)
    if game.is_over:
        raise ActionOnInactiveGame(f"game already {game.status.value}")

    stack = [(row, col)]
    while stack:
        r, c = stack.pop()
        cell = board.cells[r][c]
        if cell.revealed:
            continue
        cell.revealed = True
        if cell.has_mine or cell.adjacent_mines > 0:
            continue
        for nr, nc in neighbors(r, c, board.rows, board.cols):
            if not board.cells[nr][nc].revealed:
                stack.append((nr, nc))


def is_won(game: Game) -> bool:
    """True when every cell without a mine has been revealed."""
    return all(
        cell.revealed
        for row in game.board.cells
        for cell in row
        if not cell.has_mine
    )


def render_board(game: Game) -> BoardView:
    """Build the view model, exposing the whole board once the game is over."""
    reveal_all = game.is_over
    cells = []
    for row in game.board.cells:
        markers = []
        for cell in row:
            if not (reveal_all or cell.revealed):
                markers.append(CellMarker.HIDDEN)
            elif cell.has_mine:
                markers.append(CellMarker.MINE)
            else:
                markers.append(CellMarker.for_count(cell.adjacent_mines))
        cells.append(markers)
    return BoardView(rows=game.board.rows, cols=game.board.cols, status=game.status, cells=cells)
