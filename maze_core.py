import logging
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from maze_tiles import (
    DIRECTION_OFFSETS,
    PIPE_SHAPES,
    MalformedGridError,
    MazeError,
    Shape,
    has_opening,
)


logger = logging.getLogger('pipemaze.core')

# Leftward ray: a loop tile is one crossing when it opens north
CROSSING_DIRECTION = 'N'

LOOP = 'loop'
INSIDE = 'inside'
OUTSIDE = 'outside'


class NoLoopFoundError(MazeError):
    """No candidate start shape closes a loop through the start tile."""


@dataclass(frozen=True)
class LoopResult:
    """A closed loop found for one start-shape candidate.

    positions keeps traversal (breadth-first) order; members is the same
    cells as a set for membership tests.
    """

    start_shape: Shape
    positions: tuple
    members: frozenset

    @property
    def length(self):
        return len(self.positions)

    @property
    def farthest_point(self):
        # Every loop tile has a mirror halfway around
        return self.length // 2

    def __contains__(self, position):
        return position in self.members


@dataclass(frozen=True)
class MazeSolution:
    loop: LoopResult
    interior: frozenset

    @property
    def farthest_point(self):
        return self.loop.farthest_point

    @property
    def enclosed_area(self):
        return len(self.interior)


# ============================================================================
# GRID ACCESS
# ============================================================================

def validate_grid(grid):
    """Check the grid is rectangular with exactly one start tile.

    Returns the start tile.

    Raises:
        MalformedGridError: empty grid, ragged rows, misplaced tile
            positions, or a start tile count other than one.
    """
    if not grid or not grid[0]:
        raise MalformedGridError('grid is empty')
    width = len(grid[0])
    starts = []
    for row, tiles in enumerate(grid):
        if len(tiles) != width:
            raise MalformedGridError(
                'row {} has length {}, expected {}'.format(row, len(tiles), width))
        for col, tile in enumerate(tiles):
            if tile.position != (row, col):
                raise MalformedGridError(
                    'tile at row {} column {} reports position {}'.format(
                        row, col, tile.position))
            if tile.is_start:
                starts.append(tile)
    if len(starts) != 1:
        raise MalformedGridError(
            'expected exactly one start tile, found {}'.format(len(starts)))
    return starts[0]


def tile_at(grid, position, override=None):
    """Return the tile at position, or None outside the grid.

    override, when given, stands in for the grid tile at its own position.
    """
    row, col = position
    if row < 0 or col < 0 or row >= len(grid) or col >= len(grid[row]):
        return None
    if override is not None and override.position == position:
        return override
    return grid[row][col]


def grid_neighbors(grid, tile, override=None):
    """Up to four orthogonal neighbors; cells past the edge are skipped."""
    row, col = tile.position
    neighbors = []
    for d_row, d_col in DIRECTION_OFFSETS.values():
        other = tile_at(grid, (row + d_row, col + d_col), override)
        if other is not None:
            neighbors.append(other)
    return neighbors


def connected_neighbors(grid, tile, override=None):
    return [other for other in grid_neighbors(grid, tile, override)
            if tile.is_connected(other)]


# ============================================================================
# LOOP DISCOVERY
# ============================================================================

def _trace_candidate(grid, start, start_shape):
    """Breadth-first walk from the start tile with start_shape in place.

    Returns None as soon as a visited tile has other than two connections.
    """
    start_tile = start.with_shape(start_shape)
    queue = deque([start_tile.position])
    seen = {start_tile.position}
    visited = []

    while queue:
        position = queue.popleft()
        tile = tile_at(grid, position, start_tile)
        visited.append(position)

        connected = connected_neighbors(grid, tile, start_tile)
        if len(connected) != 2:
            logger.debug('Start shape %r rejected: %s has %d connections',
                         start_shape.value, position, len(connected))
            return None

        for other in connected:
            if other.position not in seen:
                seen.add(other.position)
                queue.append(other.position)

    return LoopResult(start_shape=start_shape,
                      positions=tuple(visited),
                      members=frozenset(visited))


def find_loop(grid, start_shape):
    """Run a single start-shape trial. Returns a LoopResult or None."""
    start = validate_grid(grid)
    return _trace_candidate(grid, start, start_shape)


def _shape_rank(shape):
    if shape in PIPE_SHAPES:
        return PIPE_SHAPES.index(shape)
    return len(PIPE_SHAPES)


def resolve_loop(grid, candidates=PIPE_SHAPES, max_workers=None):
    """Try every candidate start shape and keep the longest loop.

    Trials never modify the grid, so with max_workers set they run on a
    thread pool. Equal lengths go to the shape earliest in PIPE_SHAPES,
    whatever order candidates arrive in.

    Raises:
        MalformedGridError: grid fails validate_grid().
        NoLoopFoundError: no candidate yields a closed loop.
    """
    start = validate_grid(grid)
    candidates = list(candidates)

    if max_workers:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            results = list(pool.map(
                lambda shape: _trace_candidate(grid, start, shape), candidates))
    else:
        results = [_trace_candidate(grid, start, shape) for shape in candidates]

    survivors = [result for result in results if result is not None]
    if not survivors:
        raise NoLoopFoundError(
            'no start shape among {} closes a loop through {}'.format(
                ''.join(shape.value for shape in candidates), start.position))

    best = min(survivors, key=lambda r: (-r.length, _shape_rank(r.start_shape)))
    logger.info('Start tile %s resolved as %r, loop length %d',
                start.position, best.start_shape.value, best.length)
    return best


def trace_loop(grid, loop):
    """Return the loop positions in walking order, beginning at the start tile."""
    start = validate_grid(grid)
    start_tile = start.with_shape(loop.start_shape)

    path = [start_tile.position]
    previous = None
    tile = start_tile
    while True:
        onward = [other for other in connected_neighbors(grid, tile, start_tile)
                  if other.position != previous]
        previous, tile = tile.position, onward[0]
        if tile.position == start_tile.position:
            break
        path.append(tile.position)
    return tuple(path)


# ============================================================================
# INTERIOR CLASSIFICATION
# ============================================================================

def effective_shape(grid, loop, position):
    tile = tile_at(grid, position)
    if tile.is_start:
        return loop.start_shape
    return tile.shape


def crossing_count(grid, loop, position):
    """Count loop tiles left of position in its row that open north."""
    row, col = position
    count = 0
    for c in range(col):
        if (row, c) not in loop.members:
            continue
        if has_opening(effective_shape(grid, loop, (row, c)), CROSSING_DIRECTION):
            count += 1
    return count


def classify_tiles(grid, loop):
    """Label every cell LOOP, INSIDE or OUTSIDE.

    Sweeps each row left to right with a running crossing count, which gives
    the same parity as casting a leftward ray from each cell.
    """
    classes = {}
    for tiles in grid:
        crossings = 0
        for tile in tiles:
            position = tile.position
            if position in loop.members:
                classes[position] = LOOP
                shape = loop.start_shape if tile.is_start else tile.shape
                if has_opening(shape, CROSSING_DIRECTION):
                    crossings += 1
            elif crossings % 2 == 1:
                classes[position] = INSIDE
            else:
                classes[position] = OUTSIDE
    return classes


def interior_positions(grid, loop):
    return frozenset(position for position, label in classify_tiles(grid, loop).items()
                     if label == INSIDE)


# ============================================================================
# SOLVE
# ============================================================================

def solve(grid, max_workers=None):
    """Resolve the loop once and compute both answers from it."""
    loop = resolve_loop(grid, max_workers=max_workers)
    interior = interior_positions(grid, loop)
    logger.debug('%d tiles enclosed by loop of length %d', len(interior), loop.length)
    return MazeSolution(loop=loop, interior=interior)


def solve_farthest_point(grid):
    """Steps from the start tile to the farthest point along the loop."""
    return resolve_loop(grid).farthest_point


def solve_enclosed_area(grid):
    """Number of tiles strictly inside the loop."""
    return solve(grid).enclosed_area
