# tests/conftest.py
import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to sys.path so the solver modules can be imported in tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from board import Board  # noqa: E402

PUZZLE = '530070000060195000098000060800060003400803001700020006060000280002419005000080079'
SOLVED = (
    '534678912'
    '672195348'
    '198342567'
    '859761423'
    '426853791'
    '713924856'
    '961537284'
    '287419635'
    '345286179'
)


@pytest.fixture
def puzzle():
    return Board.from_string(PUZZLE)


@pytest.fixture
def solved():
    return Board.from_string(SOLVED)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
