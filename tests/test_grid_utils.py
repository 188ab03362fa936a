"""pytest suite for geometry, grid primitives, placement search and the scanner."""

import pytest

from grid_utils import (
    DIRECTIONS,
    EMPTY,
    Boundaries,
    Position,
    add_word_to_grid,
    create_grid,
    create_path,
    create_path_from_pair,
    fill_grid,
    filter_words_in_grid,
    find_path_in_grid,
    get_all_char_sequences_from_grid,
    get_random_letter,
    get_word_start_boundaries,
)
from seeded_random import seeded_random


# -----------------------------------------------------------------------------
# Geometry
# -----------------------------------------------------------------------------
def test_create_path_steps_along_direction():
    assert create_path(2, 3, "NE", 3) == [(2, 3), (3, 2), (4, 1)]
    assert create_path(4, 0, "W", 3) == [(4, 0), (3, 0), (2, 0)]
    assert create_path(1, 1, "S", 2) == [Position(1, 1), Position(1, 2)]


def test_create_path_single_cell():
    assert create_path(5, 7, "SW", 1) == [(5, 7)]


def test_create_path_rejects_unknown_direction():
    with pytest.raises(ValueError):
        create_path(0, 0, "X", 3)


@pytest.mark.parametrize("direction", DIRECTIONS)
@pytest.mark.parametrize("length", [1, 2, 5])
def test_path_from_pair_round_trips(direction, length):
    path = create_path(6, 6, direction, length)
    assert create_path_from_pair(path[0], path[-1]) == path


def test_path_from_pair_rejects_crooked_lines():
    assert create_path_from_pair((0, 0), (1, 2)) is None
    assert create_path_from_pair((3, 3), (0, 1)) is None


def test_path_from_pair_same_cell():
    assert create_path_from_pair((2, 2), (2, 2)) == [(2, 2)]


def test_boundaries_per_component():
    assert get_word_start_boundaries(3, "E", 10, 8) == Boundaries(0, 7, 0, 7)
    assert get_word_start_boundaries(3, "W", 10, 8) == Boundaries(2, 9, 0, 7)
    assert get_word_start_boundaries(3, "S", 10, 8) == Boundaries(0, 9, 0, 5)
    assert get_word_start_boundaries(3, "N", 10, 8) == Boundaries(0, 9, 2, 7)
    assert get_word_start_boundaries(4, "NW", 5, 6) == Boundaries(3, 4, 3, 5)


def test_boundaries_none_when_word_too_long():
    assert get_word_start_boundaries(6, "E", 5, 10) is None
    assert get_word_start_boundaries(6, "W", 5, 10) is None
    assert get_word_start_boundaries(11, "S", 20, 10) is None
    assert get_word_start_boundaries(6, "SE", 10, 5) is None


def test_boundaries_none_for_unknown_direction():
    assert get_word_start_boundaries(2, "Q", 5, 5) is None
    assert get_word_start_boundaries(2, "NS", 5, 5) is None


@pytest.mark.parametrize("direction", DIRECTIONS)
def test_every_start_in_boundaries_stays_in_grid(direction):
    cols, rows, length = 6, 4, 4
    b = get_word_start_boundaries(length, direction, cols, rows)
    assert b is not None
    for x in range(b.min_x, b.max_x + 1):
        for y in range(b.min_y, b.max_y + 1):
            for px, py in create_path(x, y, direction, length):
                assert 0 <= px < cols and 0 <= py < rows


# -----------------------------------------------------------------------------
# Grid primitives
# -----------------------------------------------------------------------------
def test_create_grid_shape():
    grid = create_grid(4, 2)
    assert grid == [[EMPTY] * 4, [EMPTY] * 4]


def test_add_word_returns_new_grid():
    grid = create_grid(3, 3)
    out = add_word_to_grid("CAT", create_path(0, 0, "SE", 3), grid)
    assert [out[0][0], out[1][1], out[2][2]] == ["C", "A", "T"]
    assert all(cell == EMPTY for row in grid for cell in row)


def test_random_letter_case():
    seeder = seeded_random("letters")
    assert all(get_random_letter(True, seeder).isupper() for _ in range(50))
    assert all(get_random_letter(False, seeder).islower() for _ in range(50))


def test_fill_grid_replaces_only_empty_cells():
    grid = add_word_to_grid("DOG", create_path(0, 1, "E", 3), create_grid(3, 3))
    filled = fill_grid(grid, upper_case=False, seeder=seeded_random("fill"))
    assert filled[1] == ["D", "O", "G"]
    assert all(cell != EMPTY for row in filled for cell in row)
    assert all(cell.islower() for r, row in enumerate(filled) if r != 1 for cell in row)


def test_fill_grid_is_idempotent_on_full_grid():
    full = [["A", "B"], ["C", "D"]]
    assert fill_grid(full, upper_case=True) == full


# -----------------------------------------------------------------------------
# Placement search
# -----------------------------------------------------------------------------
def test_find_path_fits_word_in_bounds():
    grid = create_grid(5, 5)
    path = find_path_in_grid("HELLO", grid, DIRECTIONS, 0.5, seeded_random("place"))
    assert path is not None
    assert len(path) == 5
    assert all(0 <= x < 5 and 0 <= y < 5 for x, y in path)


def test_find_path_returns_none_when_word_cannot_fit():
    grid = create_grid(3, 3)
    assert find_path_in_grid("ABCDE", grid, DIRECTIONS, 0.0, seeded_random("c")) is None


def test_find_path_respects_allowed_directions():
    grid = create_grid(6, 6)
    seeder = seeded_random("dirs")
    for _ in range(20):
        path = find_path_in_grid("ABC", grid, ["S"], 1.0, seeder)
        assert path[1].x == path[0].x and path[1].y == path[0].y + 1


def test_find_path_none_when_no_direction_allowed():
    assert find_path_in_grid("AB", create_grid(4, 4), [], 0.3) is None


def test_find_path_crosses_only_matching_letters():
    # Only free line is the middle row, whose middle cell already holds "A"
    grid = [
        ["X", "X", "X"],
        [".", "A", "."],
        ["X", "X", "X"],
    ]
    path = find_path_in_grid("CAT", grid, ["E", "W"], 0.5, seeded_random("cross"))
    assert path is not None
    assert [grid[y][x] for x, y in path] == [".", "A", "."]
    assert find_path_in_grid("COT", grid, DIRECTIONS, 0.5, seeded_random("cross")) is None


def test_find_path_is_reproducible_with_same_seed():
    grid = create_grid(8, 8)
    p1 = find_path_in_grid("WORD", grid, DIRECTIONS, 0.3, seeded_random("same"))
    p2 = find_path_in_grid("WORD", grid, DIRECTIONS, 0.3, seeded_random("same"))
    assert p1 == p2


def test_backwards_probability_one_prefers_backward_directions():
    grid = create_grid(8, 8)
    seeder = seeded_random("back")
    for _ in range(20):
        path = find_path_in_grid("WORD", grid, DIRECTIONS, 1.0, seeder)
        dx = path[1].x - path[0].x
        dy = path[1].y - path[0].y
        # N, W, NW, SW all step west or north, never east-only or south-only
        assert (dx, dy) in {(0, -1), (-1, 0), (-1, -1), (-1, 1)}


# -----------------------------------------------------------------------------
# Sequence scanner
# -----------------------------------------------------------------------------
def test_all_sequences_of_small_grid():
    grid = [
        ["A", "B"],
        ["C", "D"],
    ]
    sequences = get_all_char_sequences_from_grid(grid).split("|")
    assert sorted(sequences) == sorted(["AB", "AD", "CD", "CB", "AC", "BD"])


def test_sequences_skip_single_cells():
    assert get_all_char_sequences_from_grid([["A"]]) == ""
    assert get_all_char_sequences_from_grid([]) == ""


@pytest.mark.parametrize("direction", DIRECTIONS)
def test_filter_finds_word_in_every_direction(direction):
    b = get_word_start_boundaries(3, direction, 5, 5)
    grid = add_word_to_grid("CAT", create_path(b.min_x, b.min_y, direction, 3), create_grid(5, 5))
    assert filter_words_in_grid(["DOG", "CAT"], grid) == ["CAT"]


def test_filter_finds_word_on_anti_diagonal_off_the_corner():
    grid = add_word_to_grid("CAT", create_path(2, 4, "NE", 3), create_grid(5, 5))
    assert filter_words_in_grid(["CAT"], grid) == ["CAT"]
    grid = add_word_to_grid("CAT", create_path(4, 2, "SW", 3), create_grid(5, 5))
    assert filter_words_in_grid(["CAT"], grid) == ["CAT"]


def test_filter_ignores_broken_lines():
    grid = [
        ["C", "A", "."],
        [".", ".", "T"],
        [".", ".", "."],
    ]
    assert filter_words_in_grid(["CAT"], grid) == []
