import logging
import re

import streamlit as st
import streamlit.components.v1 as components

import maze_core
import maze_render
import maze_tiles
from logging_config import setup_logging

setup_logging(logging.INFO)

SAMPLE_MAZES = {
    'Square': (
        ".....\n"
        ".S-7.\n"
        ".|.|.\n"
        ".L-J.\n"
        "....."
    ),
    'Winding': (
        "..F7.\n"
        ".FJ|.\n"
        "SJ.L7\n"
        "|F--J\n"
        "LJ..."
    ),
    'Two pockets': (
        "...........\n"
        ".S-------7.\n"
        ".|F-----7|.\n"
        ".||.....||.\n"
        ".||.....||.\n"
        ".|L-7.F-J|.\n"
        ".|..|.|..|.\n"
        ".L--J.L--J.\n"
        "..........."
    ),
    'Scattered junk': (
        "FF7FSF7F7F7F7F7F---7\n"
        "L|LJ||||||||||||F--J\n"
        "FL-7LJLJ||||||LJL-77\n"
        "F--JF--7||LJLJ7F7FJ-\n"
        "L---JF-JLJ.||-FJLJJ7\n"
        "|F|F-JF---7F7-L7L|7|\n"
        "|FFJF7L7F-JF7|JL---7\n"
        "7-L-JL7||F7|L7F-7F7|\n"
        "L.L7LFJ|||||FJL7||LJ\n"
        "L7JLJL-JLJLJL--JLJ.L"
    ),
}

st.set_page_config(page_title="Pipe Maze Solver", layout="wide")
st.title("Pipe Maze Solver")

with st.sidebar:
    st.header("Maze")
    sample_name = st.selectbox("Sample", list(SAMPLE_MAZES.keys()))
    maze_text = st.text_area("Maze text", SAMPLE_MAZES[sample_name], height=240,
                             help="One row per line. Symbols: | - L J 7 F . and one S.")

    st.header("View Settings")
    show_interior = st.checkbox("Fill enclosed tiles", value=True)
    show_outline = st.checkbox("Show loop outline", value=True)
    zoom_level = st.slider("Zoom", 25, 200, 100, 5, help="Zoom level (100% = fit to window)")

    with st.expander("Legend"):
        for shape in maze_tiles.PIPE_SHAPES:
            st.caption("{}  {}".format(shape.value, shape.name.replace('_', ' ').lower()))

try:
    grid = maze_tiles.parse_grid(maze_text)
    solution = maze_core.solve(grid)
except maze_tiles.MalformedGridError as exc:
    st.error("Malformed maze: {}".format(exc))
    st.stop()
except maze_core.NoLoopFoundError as exc:
    st.error("No loop: {}".format(exc))
    st.stop()

col_a, col_b, col_c = st.columns(3)
col_a.metric("Start shape", solution.loop.start_shape.value)
col_b.metric("Farthest point", solution.farthest_point)
col_c.metric("Enclosed tiles", solution.enclosed_area)

progress_bar = st.progress(0, text="Rendering tiles...")


def update_progress(current, total):
    progress_bar.progress(current / total, text="Rendering tile {} / {}".format(current, total))


svg_string = maze_render.render_svg(
    grid, solution,
    render_params={'show_interior': show_interior, 'show_outline': show_outline},
    progress_callback=update_progress,
)
progress_bar.empty()

# Make SVG responsive for display
display_svg = re.sub(r'width="\d+"', 'width="100%"', svg_string, count=1)
display_svg = re.sub(r'height="\d+"', 'height="100%"', display_svg, count=1)

html_content = f'''
<div style="background:#f0f0f0; height:100%; display:flex; align-items:center;
            justify-content:center; overflow:auto; padding:20px; box-sizing:border-box;">
    <div style="background:white; padding:10px; box-shadow: 0 2px 8px rgba(0,0,0,0.1);">
        <div style="width:{zoom_level}vmin; height:{zoom_level}vmin;">
            {display_svg}
        </div>
    </div>
</div>
'''
components.html(html_content, height=700, scrolling=True)

st.download_button(
    "Download SVG",
    svg_string,
    file_name="pipe-maze.svg",
    mime="image/svg+xml"
)
