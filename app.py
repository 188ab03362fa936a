import io, zipfile, csv
import streamlit as st
import re
from pathlib import Path


DIRECTION_CHOICES = ["N", "NE", "E", "SE", "S", "SW", "W", "NW"]


def load_css(path: str | Path) -> None:
    css_path = Path(path)
    if not css_path.exists():
        return
    css = css_path.read_text(encoding="utf-8")
    st.markdown(f"<style>{css}</style>", unsafe_allow_html=True)


# ---- preview helper: scale an SVG to a target pixel width (keeps aspect) ----

def _scale_svg_for_preview(svg_text: str, target_width_px: int) -> tuple[str, int]:
    """
    Returns (scaled_svg_text, new_height_px).
    Only used for UI preview; original SVGs stay full size for ZIP/PNG/PDF.
    """
    s = svg_text
    m = re.search(r'viewBox="0\s+0\s+([\d.]+)\s+([\d.]+)"', s)
    if not m:
        return s, 600  # renderer always writes a viewBox; keep as-is otherwise
    vw, vh = float(m.group(1)), float(m.group(2))

    scale = max(0.05, float(target_width_px) / max(1.0, vw))
    new_h = max(50, int(round(vh * scale)))

    # rewrite width/height only on the <svg ...> tag
    s = re.sub(r'(<svg\b[^>]*\bwidth=")[^"]+(")',  rf'\g<1>{int(target_width_px)}\g<2>', s, count=1)
    s = re.sub(r'(<svg\b[^>]*\bheight=")[^"]+(")', rf'\g<1>{new_h}\g<2>',            s, count=1)
    if 'preserveAspectRatio' not in s[:400]:
        s = re.sub(r'<svg\b', '<svg preserveAspectRatio="xMidYMid meet"', s, count=1)
    return s, new_h


def _split_words(text: str) -> list[str]:
    """One word per line or comma; blanks dropped, order kept."""
    return [w.strip() for w in re.split(r"[,\n]", text or "") if w.strip()]


def _words_from_csv(upload) -> list[str]:
    """Every non-empty cell of the uploaded CSV, header row skipped."""
    words = []
    for i, r in enumerate(csv.reader(io.TextIOWrapper(upload, encoding="utf-8-sig"))):
        if i == 0:
            continue
        words.extend(c.strip() for c in r if c.strip())
    return words


st.set_page_config(page_title="Word Search Generator", layout="wide")
# If styles.css is next to app.py:
load_css(Path(__file__).with_name("styles.css"))
st.title("Word Search Generator")


# --- Controls in the sidebar (clean + compact) ---
with st.sidebar:
    tab_create, tab_settings = st.tabs(["Create Puzzle", "Settings"])

    # ---------------------------
    # TAB 1: Create Puzzle
    # ---------------------------
    with tab_create:
        # Row 1: Grid width | Grid height
        r1c1, r1c2 = st.columns(2)
        with r1c1:
            grid_w = st.number_input("Grid width", 3, 40, 10, format="%d")
        with r1c2:
            grid_h = st.number_input("Grid height", 3, 40, 10, format="%d")

        # Row 2: # puzzles | max words per puzzle
        r2c1, r2c2 = st.columns(2)
        with r2c1:
            n_puzzles = st.number_input("# puzzles", 1, 100, 1, format="%d")
        with r2c2:
            max_words = st.number_input("Max words per puzzle", 1, 100, 20, format="%d")

        directions = st.multiselect("Directions", DIRECTION_CHOICES, default=DIRECTION_CHOICES)
        backwards = st.slider("Backwards probability", 0.0, 1.0, 0.3, 0.05)

        seed = st.text_input("Seed (optional)", "")

        words_text = st.text_area("Words (one per line or comma separated)", "")
        csv_file = st.file_uploader("...or CSV of words (header row skipped)", type=["csv"])

        go = st.button("Generate", type="primary", use_container_width=True)

    # ---------------------------
    # TAB 2: Settings
    # ---------------------------
    with tab_settings:
        st.caption("Letters")
        upper_case = st.checkbox("Uppercase", value=True)
        keep_accents = st.checkbox("Keep accents", value=False)

        st.caption("Forbidden words")
        forbidden_text = st.text_area("Never show these (one per line or comma separated)", "")
        max_retries = st.number_input("Max retries", 0, 100, 10, format="%d")

        st.caption("Solution")
        mark_style = st.selectbox("Mark style", ["highlight", "circle"])
        show_legend = st.checkbox("Show word list under puzzle", value=True)

        st.caption("Output formats")
        make_png  = st.checkbox("Also make PNG", value=True)
        make_pdf  = st.checkbox("Also make PDF", value=False)
        make_pptx = st.checkbox("Also make PPTX (simple insert)", value=False)

        st.caption("Preview")
        size_label = st.select_slider("Preview size", options=["Small", "Medium", "Large"], value="Medium")
        PREVIEW_W = {"Small": 420, "Medium": 560, "Large": 720}[size_label]


if go:
    # --- Import inside the button, so errors show on page ---
    try:
        import wordsearch_engine as eng
    except Exception as e:
        st.error("Failed to import wordsearch_engine.py")
        st.exception(e)
        st.stop()

    try:
        import svg_renderer as svg
    except Exception as e:
        st.error("Failed to import svg_renderer.py")
        st.exception(e)
        st.stop()

    try:
        from pptx import Presentation
        from pptx.util import Inches
    except Exception as e:
        if make_pptx:
            st.error("python-pptx failed to import")
            st.exception(e)
            st.stop()
        else:
            Presentation = None  # not used

    # --- Words ---
    dictionary = _split_words(words_text)
    if csv_file is not None:
        try:
            dictionary.extend(_words_from_csv(csv_file))
        except Exception as e:
            st.error("Could not read CSV")
            st.exception(e)
            st.stop()

    if not dictionary:
        st.error("No words given.")
        st.stop()

    log_lines: list[str] = []
    eng.set_logger(log_lines.append)
    svg.set_logger(log_lines.append)

    svgs = []
    imgs_for_pptx = []
    first_puz_svg = None
    first_sol_svg = None

    look = svg.Appearance(
        grid_font_family="Arial",
        grid_font_size=24,
        show_legend=show_legend,
        solution_show_legend=False,
        solution_mark_style=mark_style,
        solution_mark_color="#D94242",
    )

    try:
        for idx in range(1, int(n_puzzles) + 1):
            # one seed per puzzle so a batch is reproducible but not repetitive
            puzzle_seed = f"{seed}-{idx}" if seed else None
            settings = eng.WordSearchSettings(
                cols=int(grid_w),
                rows=int(grid_h),
                allowed_directions=list(directions),
                dictionary=dictionary,
                max_words=int(max_words),
                backwards_probability=float(backwards),
                upper_case=upper_case,
                diacritics=keep_accents,
                forbidden_words=_split_words(forbidden_text),
                max_retries=int(max_retries),
                seed=puzzle_seed,
            )
            res = eng.generate(settings)

            if res.forbidden_words_found:
                st.warning(
                    f"Puzzle #{idx}: forbidden words still in grid after {settings.max_retries} retries: "
                    + ", ".join(res.forbidden_words_found)
                )
            if len(res.words) < min(len(dictionary), settings.max_words):
                st.info(f"Puzzle #{idx}: placed {len(res.words)} word(s).")

            puz_svg = svg.render_puzzle_svg(res, look)
            sol_svg = svg.render_solution_svg(res, look)
            svgs.append((f"puzzle_{idx:03d}.svg", puz_svg))
            svgs.append((f"solution_{idx:03d}.svg", sol_svg))

            if first_puz_svg is None:
                first_puz_svg = puz_svg
                first_sol_svg = sol_svg

    except eng.ConfigError as e:
        st.error(f"Invalid settings: {e}")
        st.stop()
    except Exception as e:
        st.error("Puzzle generation/rendering failed")
        st.exception(e)
        st.stop()

    # --- Previews (tabs) ---
    tab_puz, tab_sol, tab_log = st.tabs(["Preview — Puzzle", "Preview — Solution", "Log"])

    with tab_puz:
        if first_puz_svg:
            svgp, hp = _scale_svg_for_preview(first_puz_svg, PREVIEW_W)
            st.components.v1.html(svgp, height=hp + 6, scrolling=False)
        else:
            st.info("No preview available.")

    with tab_sol:
        if first_sol_svg:
            svg_sol_preview, hs = _scale_svg_for_preview(first_sol_svg, PREVIEW_W)
            st.components.v1.html(svg_sol_preview, height=hs + 6, scrolling=False)
        else:
            st.info("No preview available.")

    with tab_log:
        st.code("\n".join(log_lines) or "(empty)")

    # --- ZIP outputs ---
    try:
        mem = io.BytesIO()
        with zipfile.ZipFile(mem, "w", zipfile.ZIP_DEFLATED) as zf:
            for name, s in svgs:
                zf.writestr(name, s)

            if make_png or make_pdf or make_pptx:
                from cairosvg import svg2png, svg2pdf
                for name, s in svgs:
                    try:
                        if make_png:
                            zf.writestr(name.replace(".svg", ".png"),
                                        svg2png(bytestring=s.encode("utf-8")))
                    except Exception as e:
                        zf.writestr(name.replace(".svg", ".PNG_ERROR.txt"),
                                    (f"PNG conversion failed for {name}:\n{e}").encode("utf-8"))

                    try:
                        if make_pdf:
                            zf.writestr(name.replace(".svg", ".pdf"),
                                        svg2pdf(bytestring=s.encode("utf-8")))
                    except Exception as e:
                        zf.writestr(name.replace(".svg", ".PDF_ERROR.txt"),
                                    (f"PDF conversion failed for {name}:\n{e}").encode("utf-8"))

                    try:
                        if make_pptx and name.startswith("puzzle_"):
                            imgs_for_pptx.append(svg2png(bytestring=s.encode("utf-8")))
                    except Exception as e:
                        zf.writestr(name.replace(".svg", ".PPTX_IMAGE_ERROR.txt"),
                                    (f"PPTX image prep failed for {name}:\n{e}").encode("utf-8"))

            if make_pptx and imgs_for_pptx:
                prs = Presentation()
                blank = prs.slide_layouts[6]
                for png in imgs_for_pptx:
                    slide = prs.slides.add_slide(blank)
                    slide.shapes.add_picture(io.BytesIO(png), Inches(0.5), Inches(0.5), height=Inches(6.5))
                out = io.BytesIO()
                prs.save(out)
                zf.writestr("puzzles.pptx", out.getvalue())

        mem.seek(0)
        st.download_button("Download ZIP", data=mem.read(), file_name="wordsearch.zip", mime="application/zip")
    except Exception as e:
        st.error("Failed to package outputs")
        st.exception(e)
        st.stop()
