import math
import random
from typing import List, Sequence, Tuple

Grid = List[List[str]]
Coord = Tuple[int, int]  # (row, col)

ALPHABET = 'ABCDEFGHIJKLMNOPQRSTUVWXYZ'

LETTER_POINTS = {
    'a': 1, 'b': 3, 'c': 3, 'd': 2, 'e': 1, 'f': 4, 'g': 2, 'h': 4, 'i': 1, 'j': 8, 'k': 5, 'l': 1, 'm': 3,
    'n': 1, 'o': 1, 'p': 3, 'q': 10, 'r': 1, 's': 1, 't': 1, 'u': 1, 'v': 4, 'w': 4, 'x': 8, 'y': 4, 'z': 10,
}

# share of the summed letter points added on top of the length score
LETTER_BONUS_RATE = 0.25


def generate_grid(size: int, rng=random) -> Grid:
    return [[rng.choice(ALPHABET) for _ in range(size)] for _ in range(size)]


def are_neighbors(a: Coord, b: Coord) -> bool:
    return abs(a[0] - b[0]) <= 1 and abs(a[1] - b[1]) <= 1 and a != b


def is_adjacent(path: Sequence[Coord]) -> bool:
    return all(are_neighbors(path[i - 1], path[i]) for i in range(1, len(path)))


def in_bounds(grid: Grid, coord: Coord) -> bool:
    n = len(grid)
    r, c = coord
    return 0 <= r < n and 0 <= c < n


def has_repeated_cells(path: Sequence[Coord]) -> bool:
    return len(set(path)) != len(path)


def word_from_path(grid: Grid, path: Sequence[Coord]) -> str:
    """Lowercase letters along the path; cells off the board are skipped."""
    return ''.join(grid[r][c].lower() for r, c in path if in_bounds(grid, (r, c)))


def validate_word(grid: Grid, path: Sequence[Coord], dictionary) -> bool:
    """True when the path is a chain of neighbouring in-bounds cells spelling a dictionary word.

    Revisiting a cell is allowed; use has_repeated_cells for the stricter rule.
    """
    if not path:
        return False
    if not is_adjacent(path):
        return False
    if not all(in_bounds(grid, coord) for coord in path):
        return False
    return dictionary.exists(word_from_path(grid, path))


def score_by_length(word: str) -> int:
    n = len(word)
    if n < 3:
        return 0
    if n == 3:
        return 1
    if n == 4:
        return 2
    if n == 5:
        return 4
    if n == 6:
        return 7
    return 11


def score_word(word: str) -> int:
    letters = sum(LETTER_POINTS.get(ch, 0) for ch in word.lower())
    return score_by_length(word) + math.floor(letters * LETTER_BONUS_RATE)
