import numpy as np
import pytest

from board import Board, PuzzleFormatError, format_grid, load_puzzle, parse_puzzle

from conftest import PUZZLE


def test_from_string_marks_clues_as_fixed(puzzle):
    assert puzzle[0, 0] == 5
    assert puzzle.cell(0, 0).is_fixed
    assert not puzzle.cell(0, 2).is_fixed
    assert puzzle.cell(0, 2).value == 0
    assert puzzle.to_string() == PUZZLE
    assert int(puzzle.fixed.sum()) == sum(c != '0' for c in PUZZLE)


def test_copy_does_not_share_storage(puzzle):
    copy = puzzle.copy()
    copy.values[0, 2] = 4
    copy.consistent[0, 2] = True
    copy.fitness = 50

    assert puzzle[0, 2] == 0
    assert not puzzle.consistent[0, 2]
    assert puzzle.fitness == 0
    assert copy.fixed is not puzzle.fixed


def test_fixed_cells_cannot_be_assigned(puzzle):
    with pytest.raises(ValueError):
        puzzle[0, 0] = 1
    puzzle[0, 2] = 1
    assert puzzle[0, 2] == 1


@pytest.mark.parametrize('s', ['123', PUZZLE + '1', PUZZLE[:-1] + 'x'])
def test_from_string_rejects_malformed_input(s):
    with pytest.raises(PuzzleFormatError):
        Board.from_string(s)


def test_parse_puzzle_reads_nine_lines():
    lines = [PUZZLE[i:i + 9] + '\n' for i in range(0, 81, 9)] + ['\n']
    assert parse_puzzle(lines).to_string() == PUZZLE


@pytest.mark.parametrize('lines, message', [
    (['530070000'] * 8, 'expected 9 lines'),
    (['530070000'] * 8 + ['53007000'], 'line 9'),
    (['530070000'] * 8 + ['53007000a'], "invalid character 'a'"),
])
def test_parse_puzzle_errors(lines, message):
    with pytest.raises(PuzzleFormatError, match=message):
        parse_puzzle(lines)


def test_load_puzzle(tmp_path):
    path = tmp_path / 'sudoku.txt'
    path.write_text('\n'.join(PUZZLE[i:i + 9] for i in range(0, 81, 9)) + '\n')
    board = load_puzzle(str(path))
    assert board.to_string() == PUZZLE


def test_load_puzzle_missing_file(tmp_path):
    with pytest.raises(PuzzleFormatError, match='not found'):
        load_puzzle(str(tmp_path / 'nope.txt'))


def test_format_grid_separates_boxes(solved):
    lines = format_grid(solved).split('\n')
    assert lines[0] == '5 3 4  6 7 8  9 1 2'
    assert lines[3] == ''
    assert lines[7] == ''
    assert len(lines) == 11


def test_empty_board():
    board = Board.empty()
    assert not board.fixed.any()
    assert np.all(board.values == 0)


def test_load_puzzle_directory(tmp_path):
    with pytest.raises(PuzzleFormatError, match='cannot read puzzle file'):
        load_puzzle(str(tmp_path))


def test_load_puzzle_undecodable_bytes(tmp_path):
    path = tmp_path / 'sudoku.txt'
    path.write_bytes(b'\xff\xfe\x00\x81' * 30)
    with pytest.raises(PuzzleFormatError, match='cannot read puzzle file'):
        load_puzzle(str(path))
