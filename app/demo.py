"""
Thrill Digger Solver - Interactive Demo

Run with: streamlit run app/demo.py
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import logging

import streamlit as st
from typing import List, Optional, Sequence

from thrill_digger import (
    CellKind,
    DIFFICULTY_CONFIGS,
    ProgressReporter,
    SolvedCell,
    assess_workload,
    probability_band,
    safest_cell,
    solve,
)
from thrill_digger.cells import HAZARD, RUPOOR, TIER_NAMES

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

# Editor choices: label -> solve-mode value
CELL_CHOICES = {
    "?": 0,
    "Green": 1,
    "Blue": 2,
    "Red": 4,
    "Silver": 6,
    "Gold": 8,
    "Bomb": HAZARD,
    "Rupoor": RUPOOR,
}
CELL_LABELS = {value: label for label, value in CELL_CHOICES.items()}

# Background per probability band, green (safe) to red (dangerous)
BAND_COLORS = {
    "prob-0": "#1b5e20",
    "prob-10": "#2e7d32",
    "prob-20": "#66bb6a",
    "prob-30": "#a5d6a7",
    "prob-40": "#d4e157",
    "prob-50": "#fff176",
    "prob-60": "#ffb74d",
    "prob-70": "#fb8c00",
    "prob-80": "#f4511e",
    "prob-90": "#d32f2f",
    "prob-100": "#8e0000",
}

TIER_COLORS = {1: "#2e7d32", 2: "#1565c0", 4: "#c62828", 6: "#9e9e9e", 8: "#f9a825"}


def render_solved_html(
    solved: Sequence[SolvedCell],
    width: int,
    highlight: Optional[int] = None,
) -> str:
    """Render a solved board as an HTML table with probability colors."""
    height = len(solved) // width
    cell_size = 54

    html = '<div style="font-family: monospace; line-height: 1.2;">'
    html += '<table style="border-collapse: collapse; margin: auto;">'

    for y in range(height):
        html += "<tr>"
        for x in range(width):
            idx = y * width + x
            cell = solved[idx]

            if cell.kind is CellKind.PROBABILITY:
                text = f"{cell.value * 100:.0f}%"
                bg = BAND_COLORS[probability_band(cell.value)]
                text_color = "#ffffff"
            elif cell.kind is CellKind.CLEARED:
                text = "safe"
                bg = BAND_COLORS["prob-0"]
                text_color = "#ffffff"
            elif cell.kind is CellKind.UNDETERMINED:
                text = "?"
                bg = "#c0c0c0"
                text_color = "#444444"
            elif cell.value == HAZARD:
                text = "Bomb"
                bg = "#000000"
                text_color = "#ff5252"
            elif cell.value == RUPOOR:
                text = "Rupoor"
                bg = "#4a148c"
                text_color = "#ffffff"
            else:
                tier = int(cell.value)
                text = TIER_NAMES.get(tier, str(tier)).split()[0]
                bg = TIER_COLORS.get(tier, "#ffffff")
                text_color = "#ffffff"

            border = "3px solid #00e5ff" if idx == highlight else "1px solid #999"

            html += f'''<td style="
                width: {cell_size}px; height: {cell_size}px;
                text-align: center;
                background: {bg};
                border: {border};
                color: {text_color};
                font-weight: bold;
                font-size: 13px;
            ">{text}</td>'''
        html += "</tr>"

    html += "</table></div>"
    return html


def main():
    st.set_page_config(
        page_title="Thrill Digger Solver",
        page_icon="💎",
        layout="wide",
    )

    st.title("Thrill Digger Solver")
    st.markdown(
        "Place the rupees and hazards you have dug up, then read off the "
        "chance that each undug cell hides a bomb or rupoor."
    )

    st.sidebar.header("Game Configuration")
    difficulty = st.sidebar.selectbox(
        "Difficulty", list(DIFFICULTY_CONFIGS), index=0
    )
    config = DIFFICULTY_CONFIGS[difficulty]
    bombs = st.sidebar.number_input("Bombs", 0, config.width * config.height, config.bomb_count)
    rupoors = st.sidebar.number_input("Rupoors", 0, config.width * config.height, config.rupoor_count)

    if st.session_state.get("difficulty") != difficulty:
        st.session_state.difficulty = difficulty
        st.session_state.grid = [[0] * config.width for _ in range(config.height)]
        st.session_state.last_changed = None

    grid: List[List[int]] = st.session_state.grid

    col1, col2 = st.columns([1, 1])

    with col1:
        st.subheader("Board")
        for y in range(config.height):
            cols = st.columns(config.width)
            for x in range(config.width):
                current = CELL_LABELS[grid[y][x]]
                choice = cols[x].selectbox(
                    f"{x},{y}",
                    list(CELL_CHOICES),
                    index=list(CELL_CHOICES).index(current),
                    key=f"cell-{difficulty}-{x}-{y}",
                    label_visibility="collapsed",
                )
                if CELL_CHOICES[choice] != grid[y][x]:
                    grid[y][x] = CELL_CHOICES[choice]
                    st.session_state.last_changed = y * config.width + x

        if st.button("Clear Board"):
            st.session_state.grid = [[0] * config.width for _ in range(config.height)]
            st.session_state.last_changed = None
            st.rerun()

    with col2:
        st.subheader("Probabilities")
        workload = assess_workload(grid, config.width, config.height)
        st.caption(
            f"{workload.unknown_count} cells to search "
            f"({workload.combinations:,} combinations)"
        )

        run = True
        if workload.requires_confirmation:
            st.warning(
                f"This board may take about {workload.estimated_seconds}s to solve."
            )
            run = st.button("Solve anyway", type="primary")
        elif workload.is_heavy:
            st.info("Heavy computation, this may take a moment.")

        if run:
            bar = st.progress(0.0)
            reporter = ProgressReporter()

            def on_progress(processed: int, total: int) -> None:
                reporter(processed, total)
                bar.progress(processed / total if total else 1.0)

            with st.spinner("Solving..."):
                solved = solve(
                    grid, config.width, config.height, int(bombs), int(rupoors),
                    progress=on_progress,
                )
            bar.empty()

            if solved is None:
                st.error("This placement is not a valid board.")
            else:
                highlight = safest_cell(
                    solved, config.width, st.session_state.last_changed
                )
                st.markdown(
                    render_solved_html(solved, config.width, highlight),
                    unsafe_allow_html=True,
                )
                if any(c.kind is CellKind.UNDETERMINED for c in solved):
                    st.caption("? = not enough information (search limit reached)")


if __name__ == "__main__":
    main()
