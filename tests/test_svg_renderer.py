"""pytest suite for the SVG renderer."""

import re

import pytest

import svg_renderer as svg
import wordsearch_engine as eng
from grid_utils import create_path
from wordsearch_engine import PlacedWord, WordSearchResult, WordSearchSettings


@pytest.fixture(autouse=True)
def quiet_logger():
    svg.set_logger(lambda _msg: None)
    eng.set_logger(lambda _msg: None)
    yield
    svg.set_logger(None)
    eng.set_logger(None)


@pytest.fixture
def result():
    grid = [
        ["C", "X", "Y", "D"],
        ["Z", "A", "Q", "O"],
        ["W", "V", "T", "G"],
    ]
    return WordSearchResult(
        grid=grid,
        words=[
            PlacedWord("cat", "CAT", create_path(0, 0, "SE", 3)),
            PlacedWord("Dog", "DOG", create_path(3, 0, "S", 3)),
        ],
        settings=WordSearchSettings(cols=4, rows=3),
    )


def test_puzzle_svg_has_one_text_per_cell_and_legend(result):
    out = svg.render_puzzle_svg(result, svg.Appearance())
    assert out.startswith("<svg") and out.endswith("</svg>")
    texts = re.findall(r">([^<]*)</text>", out)
    assert texts[:12] == ["C", "X", "Y", "D", "Z", "A", "Q", "O", "W", "V", "T", "G"]
    assert texts[12:] == ["cat", "Dog"]


def test_puzzle_svg_without_legend(result):
    out = svg.render_puzzle_svg(result, svg.Appearance(show_legend=False))
    assert len(re.findall(r"</text>", out)) == 12


def test_solution_highlight_marks_each_used_cell_once(result):
    out = svg.render_solution_svg(result, svg.Appearance(solution_mark_style="highlight"))
    assert out.count('fill-opacity="0.8"') == 6


def test_solution_circle_draws_one_pill_per_word(result):
    out = svg.render_solution_svg(result, svg.Appearance(solution_mark_style="circle"))
    assert out.count("rotate(") == 2
    assert "rotate(45.00" in out  # CAT runs down-right
    assert "rotate(90.00" in out  # DOG runs downwards


def test_letters_are_escaped():
    res = WordSearchResult(grid=[["<", "&"]], words=[], settings=WordSearchSettings(cols=2, rows=1))
    out = svg.render_puzzle_svg(res, svg.Appearance())
    assert "&lt;" in out and "&amp;" in out


def test_save_svg(tmp_path, result):
    target = tmp_path / "puzzle.svg"
    svg.save_svg(svg.render_puzzle_svg(result, svg.Appearance()), str(target))
    assert target.read_text(encoding="utf-8").startswith("<svg")


def test_renders_generated_game():
    res = eng.generate(cols=8, rows=6, dictionary=["CAT", "DOG"], seed="render")
    out = svg.render_solution_svg(res, svg.Appearance(solution_show_legend=True))
    texts = re.findall(r">([^<]*)</text>", out)
    assert len(texts) == 8 * 6 + len(res.words)
