from __future__ import annotations

import unicodedata
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Tuple

from grid_utils import (
    DIRECTIONS,
    Grid,
    Path,
    Position,
    add_word_to_grid,
    create_grid,
    create_path_from_pair,
    fill_grid,
    filter_words_in_grid,
    find_path_in_grid,
)
from seeded_random import Seeder, seeded_random, seeded_shuffle


# -----------------------------------------------------------------------------
# Simple logger hook
# -----------------------------------------------------------------------------
# app.py can call set_logger(my_ui_logger). If you do nothing, we print().
_LOGGER = None  # type: Optional[callable]


def set_logger(fn) -> None:
    """Allow the UI to inject a logger callback: fn(text: str). Pass None to reset."""
    global _LOGGER
    _LOGGER = fn


def _log(msg: str) -> None:
    """Log to UI if available; otherwise (or if the UI logger breaks) print."""
    if _LOGGER:
        try:
            _LOGGER(msg)
            return
        except Exception as e:
            print(f"logger error: {e}")
    print(msg)


class ConfigError(ValueError):
    """Settings that can never produce a puzzle (bad size, unknown direction...)."""


# -----------------------------------------------------------------------------
# Data shapes used across the app
# -----------------------------------------------------------------------------
@dataclass
class WordSearchSettings:
    """
    Everything needed to generate one word search.

    Defaults: 10x10 grid, all 8 directions, up to 20 words, 30% chance to try
    backward directions first, uppercase letters without accents, up to 10
    retries when forbidden words show up in the filled grid.
    """
    cols: int = 10
    rows: int = 10
    allowed_directions: List[str] = field(default_factory=lambda: list(DIRECTIONS))
    disabled_directions: List[str] = field(default_factory=list)
    dictionary: List[str] = field(default_factory=list)
    max_words: int = 20
    backwards_probability: float = 0.3
    upper_case: bool = True
    diacritics: bool = False  # keep accents when True
    forbidden_words: List[str] = field(default_factory=list)
    max_retries: int = 10
    seed: Optional[str] = None
    # An explicit seeder wins over `seed`; share it only within one generation
    seeder: Optional[Seeder] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_dict(cls, options: Dict[str, Any]) -> "WordSearchSettings":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ConfigError(f"unknown setting(s): {', '.join(unknown)}")
        return cls(**options)

    def to_dict(self) -> Dict[str, Any]:
        """Plain copy of the settings, without the seeder."""
        out: Dict[str, Any] = {}
        for f in fields(self):
            if f.name == "seeder":
                continue
            value = getattr(self, f.name)
            out[f.name] = list(value) if isinstance(value, list) else value
        return out

    @property
    def directions(self) -> List[str]:
        """Allowed directions minus the disabled ones."""
        disabled = set(self.disabled_directions)
        return [d for d in self.allowed_directions if d not in disabled]

    @property
    def clean_forbidden_words(self) -> List[str]:
        return [self.clean_word(w) for w in self.forbidden_words]

    def clean_word(self, word: str) -> str:
        return normalize_word(word, self.upper_case, self.diacritics)

    def validate(self) -> None:
        """Raise ConfigError if these settings cannot drive a generation."""
        for name in ("cols", "rows"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        for name in ("allowed_directions", "disabled_directions"):
            unknown = [d for d in getattr(self, name) if d not in DIRECTIONS]
            if unknown:
                raise ConfigError(f"{name}: unknown direction(s) {unknown}; expected some of {list(DIRECTIONS)}")
        if not 0.0 <= float(self.backwards_probability) <= 1.0:
            raise ConfigError(f"backwards_probability must be within [0, 1], got {self.backwards_probability}")
        for name in ("max_words", "max_retries"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigError(f"{name} must be a non-negative integer, got {value!r}")


@dataclass
class PlacedWord:
    """One placed word with its path in the grid."""
    word: str   # as given in the dictionary
    clean: str  # normalized form actually written
    path: Path

    def to_dict(self) -> Dict[str, Any]:
        return {
            "word": self.word,
            "clean": self.clean,
            "path": [{"x": p.x, "y": p.y} for p in self.path],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlacedWord":
        return cls(
            word=data["word"],
            clean=data["clean"],
            path=[Position(p["x"], p["y"]) for p in data["path"]],
        )


@dataclass
class WordSearchResult:
    """
    The outcome of the generator. This is what the renderer needs.
    """
    grid: Grid                          # final grid of letters
    words: List[PlacedWord]             # sorted by normalized form
    settings: WordSearchSettings
    # forbidden words still readable in the grid after all retries
    forbidden_words_found: List[str] = field(default_factory=list)
    attempts: int = 1

    def read(self, start: Tuple[int, int], end: Tuple[int, int]) -> Optional[str]:
        return read_path(self.grid, start, end)

    def dump(self) -> Dict[str, Any]:
        return {
            "settings": self.settings.to_dict(),
            "data": {
                "grid": [list(row) for row in self.grid],
                "words": [pw.to_dict() for pw in self.words],
            },
            "forbidden_words_found": list(self.forbidden_words_found),
            "attempts": self.attempts,
        }

    @classmethod
    def load(cls, data: Dict[str, Any]) -> "WordSearchResult":
        """Rebuild a result from dump() output (no regeneration happens)."""
        return cls(
            grid=[list(row) for row in data["data"]["grid"]],
            words=[PlacedWord.from_dict(w) for w in data["data"]["words"]],
            settings=WordSearchSettings.from_dict(data.get("settings", {})),
            forbidden_words_found=list(data.get("forbidden_words_found", [])),
            attempts=int(data.get("attempts", 1)),
        )

    def __str__(self) -> str:
        return render_preview_ascii(self)


# -----------------------------------------------------------------------------
# Helpers: normalization and reading
# -----------------------------------------------------------------------------
def normalize_word(word: str, upper_case: bool = True, keep_diacritics: bool = False) -> str:
    """
    Uppercase (or lowercase) a word, removing accents unless asked to keep them.
    """
    if not keep_diacritics:
        word = "".join(ch for ch in unicodedata.normalize("NFD", word) if unicodedata.category(ch) != "Mn")
    return word.upper() if upper_case else word.lower()


def read_path(grid: Grid, start: Tuple[int, int], end: Tuple[int, int]) -> Optional[str]:
    """
    Read the letters on the straight line from `start` to `end` (x, y).
    None if the cells are not aligned on a compass line.
    """
    path = create_path_from_pair(start, end)
    if path is None:
        return None
    return "".join(grid[y][x] for x, y in path)


def render_preview_ascii(result: WordSearchResult) -> str:
    """
    Simple ASCII for quick debugging.
    """
    return "\n".join(" ".join(row) for row in result.grid)


# ---------------------------------------------------------------------------
# High-level API
# ---------------------------------------------------------------------------
def _place_words(settings: WordSearchSettings, forbidden: List[str], seeder: Seeder) -> Tuple[Grid, List[PlacedWord]]:
    grid = create_grid(settings.cols, settings.rows)
    directions = settings.directions
    placed: List[PlacedWord] = []

    for word in seeded_shuffle(settings.dictionary, seeder):
        clean = settings.clean_word(word)
        if not clean:
            continue
        if any(fw in clean for fw in forbidden):
            continue
        if len(placed) >= settings.max_words:
            break
        path = find_path_in_grid(clean, grid, directions, settings.backwards_probability, seeder)
        if path is None:
            _log(f"place: could not place '{clean}' in {settings.cols}x{settings.rows}, skipping it")
            continue
        grid = add_word_to_grid(clean, path, grid)
        placed.append(PlacedWord(word=word, clean=clean, path=path))

    placed.sort(key=lambda pw: pw.clean)
    return grid, placed


def build_game(settings: WordSearchSettings) -> WordSearchResult:
    """
    Orchestrator:
      - shuffle the dictionary and place words one by one (best effort)
      - fill empty cells
      - if forbidden words can be read in the grid, start over from scratch,
        at most `max_retries` times; after that keep the grid and report them
    """
    settings.validate()

    # IMPORTANT: one seeder for the whole generation, retries included.
    seeder = settings.seeder if settings.seeder is not None else seeded_random(settings.seed)
    if settings.seeder is not None:
        _log("seed: external seeder")
    elif settings.seed:
        _log(f"seed: {settings.seed}")
    else:
        _log("seed: none (non-deterministic)")

    forbidden = [fw for fw in settings.clean_forbidden_words if fw]
    for attempt in range(settings.max_retries + 1):
        grid, placed = _place_words(settings, forbidden, seeder)
        grid = fill_grid(grid, settings.upper_case, seeder)

        found = filter_words_in_grid(forbidden, grid) if forbidden else []
        if not found:
            return WordSearchResult(grid=grid, words=placed, settings=settings, attempts=attempt + 1)
        if attempt < settings.max_retries:
            _log(f"retry {attempt + 1}/{settings.max_retries}: forbidden words in grid: {', '.join(found)}")

    _log(f"WARNING-forbidden: {len(found)} forbidden word(s) left after {settings.max_retries} retries: {', '.join(found)}")
    return WordSearchResult(
        grid=grid,
        words=placed,
        settings=settings,
        forbidden_words_found=found,
        attempts=settings.max_retries + 1,
    )


def generate(settings: Optional[WordSearchSettings] = None, **overrides: Any) -> WordSearchResult:
    """
    Build a word search. Keyword overrides are applied on top of `settings`
    (or on top of the defaults), e.g. generate(dictionary=["CAT"], seed="x").
    """
    if settings is None:
        settings = WordSearchSettings.from_dict(overrides)
    elif overrides:
        merged = settings.to_dict()
        merged.update(overrides)
        merged.setdefault("seeder", settings.seeder)
        settings = WordSearchSettings.from_dict(merged)
    return build_game(settings)
