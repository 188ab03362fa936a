from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from wordsearch_engine import WordSearchResult


# -----------------------------------------------------------------------------
# Simple logger hook (optional; mirrors wordsearch_engine)
# -----------------------------------------------------------------------------
_LOGGER = None  # type: Optional[callable]


def set_logger(fn) -> None:
    """Allow the UI to inject a logger callback: fn(text: str)."""
    global _LOGGER
    _LOGGER = fn


def _log(msg: str) -> None:
    if _LOGGER:
        try:
            _LOGGER(msg)
            return
        except Exception as e:
            print(f"logger error: {e}")
    print(msg)


@dataclass
class Appearance:
    """
    Visual settings used by the SVG renderer.
    Keep this in sync with your UI fields.
    """
    # Grid
    cell_bg_color: str = "#FFFFFF"
    cell_line_color: str = "#000000"
    cell_line_thickness: float = 1.0

    # Letters
    grid_font_family: str = "Arial"
    grid_font_size: int = 24
    grid_font_bold: bool = False
    grid_font_color: str = "#000000"

    # Legend
    list_font_family: str = "Arial"
    list_font_size: int = 14
    list_font_color: str = "#000000"
    list_align: str = "Left"  # "Left", "Center", "Right"
    list_bold: bool = False
    list_underline_words: bool = False
    legend_columns: int = 2
    show_legend: bool = True
    # Solutions: include legend (True) or grid-only (False)
    solution_show_legend: bool = False

    # --- Solution marking options ---
    solution_mark_style: str = "highlight"     # "highlight" | "circle"
    solution_mark_color: str = "#D94242"       # highlight fill and circle stroke
    solution_circle_width: float = 2.0
    solution_circle_band_frac: float = 0.55    # fraction of cell height
    solution_circle_pad_len: float = 2.0       # extra length at each end (px)

    # Border
    add_border: bool = False
    border_thickness: float = 2.0
    border_color: str = "#000000"
    # Distance of border rectangle to the grid (px)
    border_distance: float = 2.0


# -----------------------------------------------------------------------------
# Tiny helper to build safe SVG text (no external lib, very basic)
# -----------------------------------------------------------------------------
def _esc(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def _text_anchor(align: str) -> str:
    if align.lower().startswith("c"):
        return "middle"
    if align.lower().startswith("r"):
        return "end"
    return "start"


def _legend(result: WordSearchResult) -> List[str]:
    """Words as the user typed them, in the result's (normalized) order."""
    return [pw.word for pw in result.words]


def _layout(result: WordSearchResult, appearance: Appearance, legend: List[str]) -> Tuple[int, int, int, int, int, int]:
    """Return (cell, pad, grid_w, grid_h, total_w, total_h)."""
    rows = len(result.grid)
    cols = len(result.grid[0]) if rows else 0

    # Size math: cell becomes font_size * 1.6, with some padding
    cell = max(12, int(appearance.grid_font_size * 1.6))
    pad = int(cell * 0.4)
    grid_w = cols * cell
    grid_h = rows * cell

    col_count = max(1, int(appearance.legend_columns))
    legend_line_h = max(12, int(appearance.list_font_size * 1.4))
    legend_rows = (len(legend) + col_count - 1) // col_count
    legend_h = legend_rows * legend_line_h + (pad if legend else 0)

    return cell, pad, grid_w, grid_h, grid_w + pad * 2, grid_h + legend_h + pad * 2


def _grid_frame(out: List[str], appearance: Appearance, pad: int, grid_w: int, grid_h: int) -> None:
    # Optional border (around GRID, offset by border_distance)
    if appearance.add_border:
        d = float(appearance.border_distance or 0.0)
        out.append(
            f'<rect x="{pad - d}" y="{pad - d}" width="{grid_w + 2 * d}" height="{grid_h + 2 * d}" '
            f'stroke="{appearance.border_color}" stroke-width="{appearance.border_thickness}" fill="none" />'
        )
    out.append(
        f'<rect x="{pad}" y="{pad}" width="{grid_w}" height="{grid_h}" '
        f'fill="{appearance.cell_bg_color}" stroke="none" />'
    )


def _grid_lines(out: List[str], appearance: Appearance, rows: int, cols: int, cell: int, pad: int) -> None:
    stroke = appearance.cell_line_color
    sw = appearance.cell_line_thickness
    grid_w = cols * cell
    grid_h = rows * cell
    for c in range(cols + 1):
        x = pad + c * cell
        out.append(f'<line x1="{x}" y1="{pad}" x2="{x}" y2="{pad + grid_h}" stroke="{stroke}" stroke-width="{sw}" />')
    for r in range(rows + 1):
        y = pad + r * cell
        out.append(f'<line x1="{pad}" y1="{y}" x2="{pad + grid_w}" y2="{y}" stroke="{stroke}" stroke-width="{sw}" />')


def _letters(out: List[str], result: WordSearchResult, appearance: Appearance, cell: int, pad: int) -> None:
    font_weight = "bold" if appearance.grid_font_bold else "normal"
    out.append(
        f'<g font-family="{_esc(appearance.grid_font_family)}" font-size="{appearance.grid_font_size}" '
        f'font-weight="{font_weight}" fill="{appearance.grid_font_color}">'
    )
    # Center letters in cells
    txt_dy = int(appearance.grid_font_size * 0.35)
    for r, row in enumerate(result.grid):
        for c, ch in enumerate(row):
            x = pad + c * cell + cell // 2
            y = pad + r * cell + cell // 2 + txt_dy
            out.append(f'<text x="{x}" y="{y}" text-anchor="middle">{_esc(ch)}</text>')
    out.append('</g>')


def _legend_block(out: List[str], legend: List[str], appearance: Appearance, pad: int, grid_w: int, grid_h: int) -> None:
    if not legend:
        return
    col_count = max(1, int(appearance.legend_columns))
    legend_line_h = max(12, int(appearance.list_font_size * 1.4))
    lx = pad
    ly = pad + grid_h + pad
    col_w = grid_w // col_count
    anchor = _text_anchor(appearance.list_align)
    font_weight = "bold" if appearance.list_bold else "normal"
    text_decoration = "underline" if appearance.list_underline_words else "none"

    out.append(
        f'<g font-family="{_esc(appearance.list_font_family)}" font-size="{appearance.list_font_size}" '
        f'font-weight="{font_weight}" fill="{appearance.list_font_color}" '
        f'text-decoration="{text_decoration}">'
    )

    # Column-major layout
    per_col = (len(legend) + col_count - 1) // col_count
    for i, word in enumerate(legend):
        col_idx = i // per_col
        row_idx = i % per_col
        tx = lx + col_idx * col_w
        if anchor == "middle":
            tx += col_w // 2
        elif anchor == "end":
            tx += col_w - 4
        else:
            tx += 4
        ty = ly + (row_idx + 1) * legend_line_h
        out.append(f'<text x="{tx}" y="{ty}" text-anchor="{anchor}">{_esc(word)}</text>')
    out.append('</g>')


# -----------------------------------------------------------------------------
# Core renderers
# -----------------------------------------------------------------------------
def render_puzzle_svg(result: WordSearchResult, appearance: Appearance) -> str:
    """
    Draw the filled grid with a legend of the words to find under it.
    """
    legend = _legend(result) if appearance.show_legend else []
    cell, pad, grid_w, grid_h, total_w, total_h = _layout(result, appearance, legend)
    rows = len(result.grid)
    cols = len(result.grid[0]) if rows else 0

    out: List[str] = [
        f'<svg xmlns="http://www.w3.org/2000/svg" '
        f'width="{total_w}" height="{total_h}" '
        f'viewBox="0 0 {total_w} {total_h}">'
    ]
    _grid_frame(out, appearance, pad, grid_w, grid_h)
    _grid_lines(out, appearance, rows, cols, cell, pad)
    _letters(out, result, appearance, cell, pad)
    _legend_block(out, legend, appearance, pad, grid_w, grid_h)
    out.append('</svg>')
    return "\n".join(out)


def render_solution_svg(result: WordSearchResult, appearance: Appearance) -> str:
    """
    Solution SVG:
      - Draw grid + letters like the puzzle.
      - Mark answers with either:
          * "highlight": per-cell rects behind letters
          * "circle": rotated pill per placed word with semicircular endcaps,
            extended to fully include the first & last letters (including diagonals).
    """
    legend = _legend(result) if appearance.solution_show_legend else []
    cell, pad, grid_w, grid_h, total_w, total_h = _layout(result, appearance, legend)
    rows = len(result.grid)
    cols = len(result.grid[0]) if rows else 0

    out: List[str] = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{total_w}" height="{total_h}" viewBox="0 0 {total_w} {total_h}">'
    ]
    _grid_frame(out, appearance, pad, grid_w, grid_h)

    mark_style = (appearance.solution_mark_style or "highlight").lower()
    mark_color = appearance.solution_mark_color or "#D94242"

    # --- Highlights behind letters ---
    if mark_style == "highlight":
        used = {(p.x, p.y) for pw in result.words for p in pw.path}
        for x, y in sorted(used, key=lambda p: (p[1], p[0])):
            out.append(
                f'<rect x="{pad + x * cell + 1}" y="{pad + y * cell + 1}" width="{cell - 2}" height="{cell - 2}" '
                f'fill="{mark_color}" fill-opacity="0.8" stroke="none" />'
            )

    _grid_lines(out, appearance, rows, cols, cell, pad)

    # --- Pill bands (if style == "circle") ---
    if mark_style == "circle":
        sw = float(appearance.solution_circle_width or 2.0)
        rect_h = max(1.0, float(appearance.solution_circle_band_frac or 0.55) * cell)
        pad_len = float(appearance.solution_circle_pad_len or 0.0)
        rx = rect_h * 0.5  # true half-circle endcaps

        for pw in result.words:
            if not pw.path:
                continue
            first, last = pw.path[0], pw.path[-1]
            x0 = pad + first.x * cell + 0.5 * cell
            y0 = pad + first.y * cell + 0.5 * cell
            x1 = pad + last.x * cell + 0.5 * cell
            y1 = pad + last.y * cell + 0.5 * cell

            dx = x1 - x0
            dy = y1 - y0
            dist = math.hypot(dx, dy)
            # single-letter word: pick horizontal
            ux, uy = (dx / dist, dy / dist) if dist > 1e-6 else (1.0, 0.0)

            # 0.5*cell for axis-aligned, ~0.707*cell for 45 degrees
            ext_each = 0.5 * cell * (abs(ux) + abs(uy)) + pad_len
            rect_w = dist + 2.0 * ext_each
            cx = (x0 + x1) * 0.5
            cy = (y0 + y1) * 0.5
            ang = math.degrees(math.atan2(dy, dx)) if dist > 1e-6 else 0.0

            out.append(
                f'<rect x="{cx - rect_w * 0.5:.2f}" y="{cy - rect_h * 0.5:.2f}" '
                f'width="{rect_w:.2f}" height="{rect_h:.2f}" '
                f'fill="none" stroke="{mark_color}" stroke-width="{sw:.2f}" '
                f'rx="{rx:.2f}" ry="{rx:.2f}" transform="rotate({ang:.2f} {cx:.2f} {cy:.2f})" />'
            )

    _letters(out, result, appearance, cell, pad)
    _legend_block(out, legend, appearance, pad, grid_w, grid_h)
    out.append('</svg>')
    return "\n".join(out)


def save_svg(svg_text: str, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(svg_text)
    _log(f"svg: saved {path}")
