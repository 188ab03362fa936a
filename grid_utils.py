from __future__ import annotations

import string
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from seeded_random import Seeder, seeded_random, seeded_shuffle

# 8 compass directions for placement (x delta, y delta)
DIR_VECTORS: Dict[str, Tuple[int, int]] = {
    "N":  (0, -1),
    "S":  (0, 1),
    "E":  (1, 0),
    "W":  (-1, 0),
    "NE": (1, -1),
    "NW": (-1, -1),
    "SE": (1, 1),
    "SW": (-1, 1),
}
DIRECTIONS: Tuple[str, ...] = tuple(DIR_VECTORS)
BACKWARD_DIRECTIONS: Tuple[str, ...] = ("N", "W", "NW", "SW")
FORWARD_DIRECTIONS: Tuple[str, ...] = ("S", "E", "NE", "SE")

EMPTY = "."

Grid = List[List[str]]


class Position(NamedTuple):
    x: int  # column
    y: int  # row


class Boundaries(NamedTuple):
    """Inclusive box of cells where a word may start."""
    min_x: int
    max_x: int
    min_y: int
    max_y: int


Path = List[Position]


# -----------------------------------------------------------------------------
# Geometry
# -----------------------------------------------------------------------------
def create_path(x: int, y: int, direction: str, length: int) -> Path:
    """
    Return the `length` cells starting at (x, y) and stepping along `direction`.
    """
    if direction not in DIR_VECTORS:
        raise ValueError(f"unknown direction: {direction!r}")
    dx, dy = DIR_VECTORS[direction]
    return [Position(x + dx * i, y + dy * i) for i in range(length)]


def create_path_from_pair(start: Tuple[int, int], end: Tuple[int, int]) -> Optional[Path]:
    """
    Return the straight path from `start` to `end` (both included),
    or None if the two cells are not on one compass line.
    """
    sx, sy = start
    ex, ey = end
    dx = ex - sx
    dy = ey - sy
    if not (dx == 0 or dy == 0 or abs(dx) == abs(dy)):
        return None
    if dx == 0 and dy == 0:
        return [Position(sx, sy)]

    direction = ("S" if dy > 0 else "N" if dy < 0 else "") + ("E" if dx > 0 else "W" if dx < 0 else "")
    return create_path(sx, sy, direction, max(abs(dx), abs(dy)) + 1)


def get_word_start_boundaries(length: int, direction: str, cols: int, rows: int) -> Optional[Boundaries]:
    """
    Return the box where a word of `length` cells can start when written along
    `direction` without leaving a cols x rows grid. None when it cannot fit at
    all, or when the direction is unknown.
    """
    if direction not in DIR_VECTORS or length < 1:
        return None

    bounds = {"min_x": 0, "max_x": cols - 1, "min_y": 0, "max_y": rows - 1}
    # Each component (N, S, E, W) tightens one axis
    for component in direction:
        if component == "N":
            bounds.update(min_y=length - 1, max_y=rows - 1)
        elif component == "S":
            bounds.update(min_y=0, max_y=rows - length)
        elif component == "E":
            bounds.update(min_x=0, max_x=cols - length)
        elif component == "W":
            bounds.update(min_x=length - 1, max_x=cols - 1)

    res = Boundaries(**bounds)
    if not all(0 <= v <= cols for v in (res.min_x, res.max_x)):
        return None
    if not all(0 <= v <= rows for v in (res.min_y, res.max_y)):
        return None
    if res.min_x > res.max_x or res.min_y > res.max_y:
        return None
    return res


# -----------------------------------------------------------------------------
# Grid primitives
# -----------------------------------------------------------------------------
def create_grid(cols: int, rows: int) -> Grid:
    return [[EMPTY for _ in range(cols)] for _ in range(rows)]


def add_word_to_grid(word: str, path: Sequence[Position], grid: Grid) -> Grid:
    """Return a copy of `grid` with `word` written along `path`."""
    out = [list(row) for row in grid]
    for (x, y), ch in zip(path, word):
        out[y][x] = ch
    return out


def get_random_letter(upper_case: bool, seeder: Optional[Seeder] = None) -> str:
    if seeder is None:
        seeder = seeded_random()
    alphabet = string.ascii_uppercase if upper_case else string.ascii_lowercase
    return alphabet[seeder(len(alphabet) - 1)]


def fill_grid(grid: Grid, upper_case: bool, seeder: Optional[Seeder] = None) -> Grid:
    """
    Return a copy of `grid` where every empty cell holds a random letter.
    """
    if seeder is None:
        seeder = seeded_random()
    return [
        [get_random_letter(upper_case, seeder) if cell == EMPTY else cell for cell in row]
        for row in grid
    ]


# -----------------------------------------------------------------------------
# Placement search
# -----------------------------------------------------------------------------
def _shuffle_directions(allowed_directions: Iterable[str], backwards_first: bool, seeder: Seeder) -> List[str]:
    backward = seeded_shuffle(BACKWARD_DIRECTIONS, seeder)
    forward = seeded_shuffle(FORWARD_DIRECTIONS, seeder)
    ordered = backward + forward if backwards_first else forward + backward
    allowed = set(allowed_directions)
    return [d for d in ordered if d in allowed]


def _fits(word: str, path: Sequence[Position], grid: Grid) -> bool:
    """Every cell is empty or already holds the matching letter."""
    for (x, y), ch in zip(path, word):
        cell = grid[y][x]
        if cell != EMPTY and cell != ch:
            return False
    return True


def find_path_in_grid(
    word: str,
    grid: Grid,
    allowed_directions: Iterable[str],
    backwards_probability: float,
    seeder: Optional[Seeder] = None,
) -> Optional[Path]:
    """
    Find a random spot for `word` in `grid`.

    Directions are tried in shuffled order (backward ones first with
    probability `backwards_probability`), and for each direction every legal
    start cell is tried in shuffled order. The first path that only crosses
    empty cells or identical letters wins. Returns None when nothing fits.
    """
    if seeder is None:
        seeder = seeded_random()
    rows = len(grid)
    cols = len(grid[0]) if rows else 0

    backwards_first = seeder() < backwards_probability
    for direction in _shuffle_directions(allowed_directions, backwards_first, seeder):
        bounds = get_word_start_boundaries(len(word), direction, cols, rows)
        if bounds is None:
            continue  # word cannot fit this direction

        starts = [
            (x, y)
            for x in range(bounds.min_x, bounds.max_x + 1)
            for y in range(bounds.min_y, bounds.max_y + 1)
        ]
        for x, y in seeded_shuffle(starts, seeder):
            path = create_path(x, y, direction, len(word))
            if _fits(word, path, grid):
                return path
    return None


# -----------------------------------------------------------------------------
# Sequence scanner
# -----------------------------------------------------------------------------
def read_path_from_grid(x: int, y: int, direction: str, length: int, grid: Grid) -> str:
    return "".join(grid[py][px] for px, py in create_path(x, y, direction, length))


def get_all_char_sequences_from_grid(grid: Grid) -> str:
    """
    Return every row, column and diagonal of the grid read in the forward
    directions (E, S, SE, NE), joined with "|". Diagonals are anchored on the
    left column and on the top (SE) or bottom (NE) row so each is read once.
    """
    rows = len(grid)
    cols = len(grid[0]) if rows else 0
    if not rows or not cols:
        return ""

    sequences: List[str] = []
    for y in range(rows):
        sequences.append("".join(grid[y]))
        sequences.append(read_path_from_grid(0, y, "SE", min(rows - y, cols), grid))
        sequences.append(read_path_from_grid(0, y, "NE", min(y + 1, cols), grid))
    for x in range(cols):
        sequences.append("".join(row[x] for row in grid))
        if x > 0:
            sequences.append(read_path_from_grid(x, 0, "SE", min(cols - x, rows), grid))
            sequences.append(read_path_from_grid(x, rows - 1, "NE", min(cols - x, rows), grid))
    return "|".join(s for s in sequences if len(s) > 1)


def filter_words_in_grid(words: Iterable[str], grid: Grid) -> List[str]:
    """Keep the words that can be read in the grid, in any of the 8 directions."""
    forward = get_all_char_sequences_from_grid(grid)
    corpus = forward + "|" + forward[::-1]
    return [w for w in words if w in corpus]
