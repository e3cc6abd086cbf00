import os
from collections import namedtuple

import numpy as np

N = 9
BLOCK_SIZE = 3
CELLS = N * N

Cell = namedtuple('Cell', ['value', 'is_fixed', 'is_consistent'])
CellPossibility = namedtuple('CellPossibility', ['row', 'column', 'value', 'candidates'])


class PuzzleFormatError(ValueError):
    """Raised when a puzzle file or string can't be parsed into a 9x9 board."""


class Board:
    def __init__(self, values, fixed=None, consistent=None, fitness=0):
        """
        A 9x9 candidate board.

        - values: 9x9 int array, 0 for empty cells
        - fixed: 9x9 bool mask of clue cells; defaults to the non-zero cells of `values`
        - consistent: 9x9 bool mask refreshed by every fitness evaluation
        """
        self.values = np.array(values, dtype=int).reshape(N, N)
        if np.any((self.values < 0) | (self.values > N)):
            raise PuzzleFormatError('cell values must be in range 0-9')

        if fixed is None:
            fixed = self.values != 0
        self.fixed = np.array(fixed, dtype=bool).reshape(N, N)

        if consistent is None:
            consistent = self.fixed.copy()
        self.consistent = np.array(consistent, dtype=bool).reshape(N, N)
        self.fitness = fitness

    @classmethod
    def from_string(cls, s):
        """Build a board from 81 digits in row-major order (0 for empty)."""
        s = s.strip()
        if len(s) != CELLS:
            raise PuzzleFormatError(f'expected {CELLS} digits, got {len(s)}')
        if not all(c in '0123456789' for c in s):
            raise PuzzleFormatError('puzzle may only contain digits 0-9')
        return cls(np.fromiter((int(c) for c in s), dtype=int))

    @classmethod
    def empty(cls):
        return cls(np.zeros((N, N), dtype=int))

    def copy(self):
        # Every array is copied; boards never share cell storage.
        return Board(self.values.copy(), self.fixed.copy(), self.consistent.copy(), self.fitness)

    def cell(self, row, col):
        return Cell(int(self.values[row, col]), bool(self.fixed[row, col]), bool(self.consistent[row, col]))

    def __getitem__(self, pos):
        return int(self.values[pos])

    def __setitem__(self, pos, value):
        if self.fixed[pos]:
            raise ValueError(f'cell {pos} is fixed by the puzzle')
        self.values[pos] = value

    def __eq__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return np.array_equal(self.values, other.values) and np.array_equal(self.fixed, other.fixed)

    def __repr__(self):
        return f'Board(fitness={self.fitness}, values={self.to_string()!r})'

    def to_string(self):
        return ''.join(str(v) for v in self.values.ravel())

    def show_fitness(self):
        return f'Fitness: {self.fitness}'


def parse_puzzle(lines):
    """Parse 9 lines of 9 digits into a Board. Trailing blank lines are ignored."""
    rows = [line.rstrip('\r\n') for line in lines]
    while rows and not rows[-1].strip():
        rows.pop()

    if len(rows) != N:
        raise PuzzleFormatError(f'expected {N} lines, got {len(rows)}')

    digits = []
    for idx, row in enumerate(rows, 1):
        if len(row) != N:
            raise PuzzleFormatError(f'line {idx}: expected {N} characters, got {len(row)}')
        bad = [c for c in row if c not in '0123456789']
        if bad:
            raise PuzzleFormatError(f'line {idx}: invalid character {bad[0]!r}')
        digits.append(row)

    return Board.from_string(''.join(digits))


def load_puzzle(path):
    """Load a single puzzle from a text file: 9 lines of 9 digits, 0 for empty."""
    if not os.path.exists(path):
        raise PuzzleFormatError(f'puzzle file not found: {path}')
    try:
        with open(path, encoding='utf-8') as f:
            lines = f.readlines()
    except (OSError, UnicodeDecodeError) as e:
        raise PuzzleFormatError(f'cannot read puzzle file {path}: {e}') from e
    return parse_puzzle(lines)


def format_grid(board):
    """Render the board with extra spacing between 3x3 boxes."""
    lines = []
    for r in range(N):
        chunks = []
        for c0 in range(0, N, BLOCK_SIZE):
            chunks.append(' '.join(str(v) for v in board.values[r, c0:c0 + BLOCK_SIZE]))
        lines.append('  '.join(chunks))
        if r % BLOCK_SIZE == BLOCK_SIZE - 1 and r != N - 1:
            lines.append('')
    return '\n'.join(lines)


def print_grid(board, title=None):
    if title:
        print(title)
    print(format_grid(board))
    print(board.show_fitness())
    print()
