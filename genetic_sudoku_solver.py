#!/usr/bin/env python3
import sys
import time
import argparse
from collections import namedtuple

import numpy as np

from board import CELLS, N, load_puzzle, print_grid, PuzzleFormatError
from rules import calculate_fitness, count_empty, find_possibilities, is_safe

POP_SIZE = 10
MUTATION_RATE = 0.1
NUM_GENERATIONS = 100
MAX_DRAW_ATTEMPTS = 1000  # random draws per cell before giving up on it

SolveResult = namedtuple('SolveResult', ['board', 'fitness', 'generations', 'solved', 'history'])


class SettingsError(ValueError):
    """Raised when solver settings are out of range."""


class Settings:
    def __init__(self, population_size=POP_SIZE, mutation_rate=MUTATION_RATE, max_generations=NUM_GENERATIONS):
        self.population_size = population_size
        self.mutation_rate = mutation_rate
        self.max_generations = max_generations

    def validate(self):
        """Raise SettingsError naming every setting that is out of range."""
        errors = []
        if not isinstance(self.population_size, (int, np.integer)) or not 2 <= self.population_size <= 1000:
            errors.append(f'population_size must be an integer in [2, 1000], got {self.population_size!r}')
        if not isinstance(self.mutation_rate, (int, float)) or not 0.1 <= self.mutation_rate <= 0.5:
            errors.append(f'mutation_rate must be in [0.1, 0.5], got {self.mutation_rate!r}')
        if not isinstance(self.max_generations, (int, np.integer)) or self.max_generations < 10:
            errors.append(f'max_generations must be an integer >= 10, got {self.max_generations!r}')
        if errors:
            raise SettingsError('Settings are not configured well: ' + '; '.join(errors))
        return self

    def __repr__(self):
        return (f'Settings(population_size={self.population_size}, mutation_rate={self.mutation_rate}, '
                f'max_generations={self.max_generations})')


def draw_box_safe_value(board, row, col, rng):
    """Draw random digits until one isn't already in the cell's box. Returns None if none was found."""
    for _ in range(MAX_DRAW_ATTEMPTS):
        num = int(rng.integers(1, N + 1))
        if is_safe(board, row, col, num, check_row_col=False, check_box=True):
            return num
    return None


def fill_empty_cells(board, rng, verbose=False):
    """Fill every empty cell with a random digit that doesn't repeat within its box."""
    for row in range(N):
        for col in range(N):
            if board.values[row, col] != 0:
                continue
            num = draw_box_safe_value(board, row, col, rng)
            if num is None:
                if verbose:
                    print(f'[WARNING] could not fill cell ({row}, {col}), leaving it empty')
                continue
            board[row, col] = num

    calculate_fitness(board)
    return board


def mutate_cell(board, row, col, rng):
    """Replace a non-fixed cell's value with a random digit that doesn't repeat within its box."""
    if board.fixed[row, col]:
        return False
    num = draw_box_safe_value(board, row, col, rng)
    if num is None:
        return False
    board[row, col] = num
    return True


def create_first_population(puzzle, population_size):
    """Duplicate the puzzle `population_size` times, each copy scored on its own."""
    population = []
    for _ in range(population_size):
        board = puzzle.copy()
        calculate_fitness(board)
        population.append(board)
    return population


def select_parents(population):
    """Best half of the population, rounded up to an even count."""
    half = len(population) // 2
    count = half if half % 2 == 0 else half + 1
    return sorted(population, key=lambda b: b.fitness, reverse=True)[:count]


class GeneticSudokuSolver:
    def __init__(self, puzzle, settings=None, rng=None, seed=None, verbose=True):
        """
        Evolve filled-in boards for `puzzle` until one reaches fitness 81.

        - puzzle: the source Board; never modified
        - settings: Settings; validated here, before any solving
        - rng: a numpy Generator shared by every random step; built from `seed` if omitted
        - verbose: print progress to stdout
        """
        self.settings = (settings or Settings()).validate()
        self.puzzle = puzzle.copy()
        calculate_fitness(self.puzzle)
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.verbose = verbose
        self.best_solution = self.puzzle.copy()

    def cross(self, parent1, parent2):
        """Uniform per-cell crossover; returns two children, each mutated cell by cell."""
        return [self._cross_into_child(parent1, parent2) for _ in range(2)]

    def _cross_into_child(self, parent1, parent2):
        child = self.puzzle.copy()
        for row in range(N):
            for col in range(N):
                if child.fixed[row, col]:
                    continue
                source = parent1 if self.rng.random() < 0.5 else parent2
                child[row, col] = source[row, col]

                if self.rng.random() < self.settings.mutation_rate:
                    mutate_cell(child, row, col, self.rng)
        return child

    def reproduce(self, parents):
        """Breed adjacent parent pairs, cycling through them until the population is full."""
        size = self.settings.population_size
        pairs = [(parents[i], parents[i + 1]) for i in range(0, len(parents) - 1, 2)]

        new_population = []
        i = 0
        while len(new_population) < size:
            parent1, parent2 = pairs[i % len(pairs)]
            new_population.extend(self.cross(parent1, parent2))
            i += 1
        return new_population[:size]

    def _log_population(self, population, generation):
        scores = np.array([b.fitness for b in population])
        print(f'Generation {generation + 1}/{self.settings.max_generations}... '
              f'Best fitness: {scores.max()}, Avg: {scores.mean():.2f}')

    def solve(self):
        """Run the genetic algorithm and return a SolveResult with the best board found."""
        start_time = time.time()
        if self.verbose:
            print(f'[INFO] {self.settings}')
            print(f'[INFO] Source puzzle fitness: {self.puzzle.fitness}')

        population = create_first_population(self.puzzle, self.settings.population_size)
        for board in population:
            fill_empty_cells(board, self.rng, verbose=self.verbose)

        history = []
        solved = False
        for generation in range(self.settings.max_generations):
            for board in population:
                calculate_fitness(board)

            scores = np.array([b.fitness for b in population])
            history.append((generation, float(scores.mean()), int(scores.max())))
            if self.verbose:
                self._log_population(population, generation)

            winners = [b for b in population if b.fitness == CELLS]
            if winners:
                self.best_solution = winners[0]
                solved = True
                break

            # Running best of this generation, not best-ever.
            self.best_solution = population[int(np.argmax(scores))]

            parents = select_parents(population)
            population = self.reproduce(parents)

        if self.verbose:
            status = 'Solved' if solved else 'Generation limit reached'
            print(f'[INFO] {status} after {len(history)} generation(s) '
                  f'in {time.time() - start_time:.2f}s, fitness {self.best_solution.fitness}')

        return SolveResult(self.best_solution.copy(), self.best_solution.fitness, len(history), solved, history)


def print_possibilities(board):
    possibilities = [p for p in find_possibilities(board) if p.value == 0]
    print(f'Empty cells: {count_empty(board)}')
    for p in possibilities:
        print(f"Row: {p.row}, Col: {p.column}, Possible: {','.join(str(v) for v in p.candidates)}")
    print()


def main(argv=None):
    parser = argparse.ArgumentParser(description='Solve a 9x9 Sudoku with a genetic algorithm')
    parser.add_argument('puzzle', nargs='?', default='puzzles/sudoku.txt', help='Puzzle file: 9 lines of 9 digits')
    parser.add_argument('--pop', type=int, default=POP_SIZE, help='Population size')
    parser.add_argument('--mutation', type=float, default=MUTATION_RATE, help='Mutation rate')
    parser.add_argument('--gens', type=int, default=NUM_GENERATIONS, help='Maximum generations')
    parser.add_argument('--seed', type=int, help='Random seed')
    parser.add_argument('--candidates', action='store_true', help='Show possible values for empty cells')
    parser.add_argument('--quiet', action='store_true', help='Only print the final board')
    args = parser.parse_args(argv)

    try:
        settings = Settings(args.pop, args.mutation, args.gens).validate()
        puzzle = load_puzzle(args.puzzle)
    except (SettingsError, PuzzleFormatError) as e:
        print(f'[ERROR] {e}', file=sys.stderr)
        return 1

    verbose = not args.quiet
    solver = GeneticSudokuSolver(puzzle, settings, seed=args.seed, verbose=verbose)
    if verbose:
        print_grid(solver.puzzle, 'Initial puzzle:')
        if args.candidates:
            print_possibilities(solver.puzzle)

    result = solver.solve()
    print_grid(result.board, 'Solution:' if result.solved else 'Best board found:')
    return 0


if __name__ == '__main__':
    sys.exit(main())
