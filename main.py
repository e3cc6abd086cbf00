from board import load_puzzle, print_grid
from genetic_sudoku_solver import GeneticSudokuSolver, Settings

puzzle = load_puzzle('puzzles/sudoku.txt')
solver = GeneticSudokuSolver(puzzle, Settings(population_size=100, mutation_rate=0.1, max_generations=500), seed=42)
result = solver.solve()

print_grid(result.board, 'Solution:' if result.solved else 'Best board found:')
