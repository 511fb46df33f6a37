import pytest

from maze_core import interior_positions, resolve_loop, solve
from maze_render import (
    cell_center,
    loop_polygon,
    pipe_segments,
    polygon_interior_positions,
    render_shape,
    render_svg,
)
from maze_tiles import PIPE_SHAPES, Shape, parse_grid

from test_maze_core import ALL_MAZES, SQUARE, WINDING


def test_cell_center_centers_grid_on_origin():
    assert cell_center(1, 1, 3, 3) == (0.0, 0.0)
    assert cell_center(0, 0, 3, 3) == (-100.0, -100.0)
    assert cell_center(0, 3, 2, 4, cell_size=10) == (15.0, -5.0)


def test_pipe_segments_follow_ports():
    assert pipe_segments(Shape.SOUTH_EAST, 0, 0) == [(0, 0, 50.0, 0), (0, 0, 0, 50.0)]
    assert pipe_segments(Shape.GROUND, 0, 0) == []
    for shape in PIPE_SHAPES:
        assert len(pipe_segments(shape, 10, 10)) == 2


def test_loop_polygon_of_square():
    grid = parse_grid(SQUARE)
    polygon = loop_polygon(grid, resolve_loop(grid))
    assert polygon.is_valid
    assert polygon.area == pytest.approx(40000.0)


@pytest.mark.parametrize('text', ALL_MAZES)
def test_polygon_containment_agrees_with_crossing_parity(text):
    grid = parse_grid(text)
    loop = resolve_loop(grid)
    assert loop_polygon(grid, loop).is_valid
    assert polygon_interior_positions(grid, loop) == interior_positions(grid, loop)


def test_render_svg_with_solution():
    grid = parse_grid(SQUARE)
    solution = solve(grid)
    svg = render_svg(grid, solution)
    assert '<svg' in svg
    assert 'id="interior"' in svg
    assert 'id="outline"' in svg
    assert svg.count('<rect') == solution.enclosed_area


def test_render_svg_params_hide_overlays():
    grid = parse_grid(WINDING)
    svg = render_svg(grid, solve(grid),
                     render_params={'show_interior': False, 'show_outline': False})
    assert 'id="interior"' not in svg
    assert 'id="outline"' not in svg
    assert 'id="loop"' in svg


def test_render_svg_without_solution_reports_progress():
    grid = parse_grid(WINDING)
    calls = []
    svg = render_svg(grid, progress_callback=lambda current, total: calls.append((current, total)))
    assert '<svg' in svg
    assert 'id="outline"' not in svg
    assert len(calls) == 25
    assert calls[-1] == (25, 25)


def test_render_shape():
    assert '<svg' in render_shape(Shape.NORTH_WEST)
