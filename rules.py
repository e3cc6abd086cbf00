"""Sudoku constraint checks and the fitness function used by the genetic solver."""
from board import BLOCK_SIZE, CELLS, N, CellPossibility

_CORNERS = {(0, 0), (0, N - 1), (N - 1, 0), (N - 1, N - 1)}


def is_safe(board, row, col, value, check_row_col=True, check_box=True):
    """Return False if `value` already occurs in another cell of the same row/column or 3x3 box."""
    grid = board.values

    # Check row and column
    if check_row_col:
        for i in range(N):
            if i != col and grid[row, i] == value:
                return False
            if i != row and grid[i, col] == value:
                return False

    # Check block
    if check_box:
        r0 = (row // BLOCK_SIZE) * BLOCK_SIZE
        c0 = (col // BLOCK_SIZE) * BLOCK_SIZE
        for rr in range(r0, r0 + BLOCK_SIZE):
            for cc in range(c0, c0 + BLOCK_SIZE):
                if (rr, cc) != (row, col) and grid[rr, cc] == value:
                    return False
    return True


def is_unsafe(board, row, col):
    """
    Return True if the cell's value is duplicated in its row or column.

    Occurrences are counted over the union of the row and column, the cell itself
    included once. Corner cells only conflict once a second duplicate shows up.
    """
    grid = board.values
    value = grid[row, col]
    threshold = 3 if (row, col) in _CORNERS else 2

    counter = 0
    for i in range(N):
        if grid[row, i] == value:
            counter += 1
        if i != row and grid[i, col] == value:
            counter += 1
        if counter >= threshold:
            return True
    return False


def find_possibilities(board):
    """Scan the board and list, for every empty cell, the values no constraint rules out."""
    possibilities = []
    for row in range(N):
        for col in range(N):
            value = board.cell(row, col).value
            if value != 0:
                possibilities.append(CellPossibility(row, col, value, None))
                continue
            candidates = [num for num in range(1, N + 1) if is_safe(board, row, col, num)]
            possibilities.append(CellPossibility(row, col, 0, candidates))
    return possibilities


def count_empty(board):
    return int((board.values == 0).sum())


def calculate_fitness(board):
    """
    Score a board from 0 to 81 and refresh every cell's consistency flag.

    A cell counts towards fitness when it is filled and not in conflict with its
    row or column. 81 means every cell is filled and consistent, which ends the
    search but isn't a full proof of validity (boxes and corners are checked loosely).
    """
    bad = 0
    for row in range(N):
        for col in range(N):
            if board.values[row, col] == 0:
                board.consistent[row, col] = False
            else:
                board.consistent[row, col] = not is_unsafe(board, row, col)

            if not board.consistent[row, col]:
                bad += 1

    board.fitness = CELLS - bad
    return board.fitness
