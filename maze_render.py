import logging

import drawsvg as draw
from shapely.geometry import Point, Polygon

from maze_core import trace_loop
from maze_tiles import DIRECTION_OFFSETS, Shape, Tile, connectivity_ports


logger = logging.getLogger('pipemaze.render')

# Default rendering parameters (can be overridden via render_svg)
DEFAULT_RENDER_PARAMS = {
    'cell_size': 100,            # world units per grid cell
    'stroke_width': 6,           # pipes not on the loop
    'loop_stroke_width': 16,     # pipes on the loop
    'pipe_color': '#9e9e9e',
    'loop_color': 'black',
    'interior_color': '#ffd54f',
    'outline_color': '#d32f2f',  # loop polygon through tile centers
    'outline_stroke_width': 2,
    'start_radius': 20,
    'show_interior': True,
    'show_outline': True,
}


# ============================================================================
# GEOMETRY
# ============================================================================

def cell_center(row, col, rows, cols, cell_size=100):
    """Center of a cell in world coords, with the whole grid centered on the origin."""
    xloc = (col - (cols - 1) / 2.0) * cell_size
    yloc = (row - (rows - 1) / 2.0) * cell_size
    return (xloc, yloc)


def loop_polygon(grid, loop, cell_size=100):
    """Return a Shapely Polygon through the loop tile centers in walking order."""
    rows = len(grid)
    cols = len(grid[0])
    path = trace_loop(grid, loop)
    return Polygon([cell_center(row, col, rows, cols, cell_size) for row, col in path])


def polygon_interior_positions(grid, loop, cell_size=100):
    """Non-loop cells whose centers fall strictly inside the loop polygon.

    Loop edges join neighboring tile centers, so no other tile center can sit
    on the boundary.
    """
    rows = len(grid)
    cols = len(grid[0])
    polygon = loop_polygon(grid, loop, cell_size)
    inside = set()
    for tiles in grid:
        for tile in tiles:
            if tile.position in loop.members:
                continue
            if polygon.contains(Point(cell_center(*tile.position, rows, cols, cell_size))):
                inside.add(tile.position)
    return frozenset(inside)


def pipe_segments(shape, xloc, yloc, cell_size=100):
    """Center-to-edge segments (x1, y1, x2, y2) for each port of a shape."""
    half = cell_size / 2.0
    segments = []
    for direction in sorted(connectivity_ports(shape)):
        d_row, d_col = DIRECTION_OFFSETS[direction]
        segments.append((xloc, yloc, xloc + d_col * half, yloc + d_row * half))
    return segments


# ============================================================================
# SVG RENDERING
# ============================================================================

def render_svg(grid, solution=None, render_params=None, progress_callback=None):
    """Render a tile grid, and optionally its solved loop, to an SVG string.

    Args:
        grid: rows of Tiles as returned by parse_grid
        solution: MazeSolution; when given the loop is drawn heavy, the start
                  tile takes its resolved shape, and interior cells are filled
        render_params: dict overriding keys of DEFAULT_RENDER_PARAMS
        progress_callback: called as progress_callback(current, total) per tile
    """
    params = dict(DEFAULT_RENDER_PARAMS)
    if render_params:
        params.update(render_params)

    rows = len(grid)
    cols = len(grid[0]) if rows > 0 else 0
    cs = params['cell_size']
    d = draw.Drawing(cols * cs, rows * cs, origin='center')

    loop = solution.loop if solution is not None else None
    members = loop.members if loop is not None else frozenset()

    if solution is not None and params['show_interior']:
        interior_group = draw.Group(id='interior')
        for row, col in sorted(solution.interior):
            xloc, yloc = cell_center(row, col, rows, cols, cs)
            interior_group.append(draw.Rectangle(
                xloc - cs / 2.0, yloc - cs / 2.0, cs, cs,
                fill=params['interior_color'], stroke='none'))
        d.append(interior_group)

    pipes_group = draw.Group(id='pipes')
    loop_group = draw.Group(id='loop')
    total_tiles = rows * cols
    tile_count = 0
    for tiles in grid:
        for tile in tiles:
            row, col = tile.position
            xloc, yloc = cell_center(row, col, rows, cols, cs)
            on_loop = tile.position in members
            shape = loop.start_shape if (tile.is_start and loop is not None) else tile.shape

            if on_loop:
                target, color, sw = loop_group, params['loop_color'], params['loop_stroke_width']
            else:
                target, color, sw = pipes_group, params['pipe_color'], params['stroke_width']
            for x1, y1, x2, y2 in pipe_segments(shape, xloc, yloc, cs):
                target.append(draw.Line(x1, y1, x2, y2, stroke=color, stroke_width=sw,
                                        stroke_linecap='round', fill='none'))

            if tile.is_start:
                loop_group.append(draw.Circle(xloc, yloc, params['start_radius'],
                                              fill='none', stroke=params['loop_color'],
                                              stroke_width=params['stroke_width']))

            tile_count += 1
            if progress_callback:
                progress_callback(tile_count, total_tiles)

    d.append(pipes_group)
    d.append(loop_group)

    if loop is not None and params['show_outline']:
        polygon = loop_polygon(grid, loop, cs)
        coords = [v for xy in list(polygon.exterior.coords)[:-1] for v in xy]
        d.append(draw.Lines(*coords, close=True, fill='none',
                            stroke=params['outline_color'],
                            stroke_width=params['outline_stroke_width'],
                            id='outline'))

    logger.debug('Rendered %dx%d grid', rows, cols)
    return d.as_svg()


def render_shape(shape, render_params=None):
    """Render a single pipe shape as an isolated 1x1 SVG for legend display."""
    grid = [[Tile(position=(0, 0), shape=shape, is_start=shape is Shape.START)]]
    return render_svg(grid, render_params=render_params)
