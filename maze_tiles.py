import logging
from dataclasses import dataclass, replace
from enum import Enum


logger = logging.getLogger('pipemaze.tiles')


class MazeError(ValueError):
    """Base class for every maze failure surfaced to callers."""


class MalformedGridError(MazeError):
    """Grid text or rows break the shape invariants (rectangular, one start)."""


# ============================================================================
# PIPE SHAPES & PORTS
# ============================================================================

class Shape(Enum):
    VERTICAL = '|'
    HORIZONTAL = '-'
    NORTH_EAST = 'L'
    NORTH_WEST = 'J'
    SOUTH_WEST = '7'
    SOUTH_EAST = 'F'
    GROUND = '.'
    START = 'S'

    @classmethod
    def from_symbol(cls, ch):
        try:
            return cls(ch)
        except ValueError:
            raise MalformedGridError('unknown tile symbol {!r}'.format(ch)) from None


# Row/column offsets: north is row - 1, east is column + 1
DIRECTION_OFFSETS = {
    'N': (-1, 0), 'S': (1, 0), 'E': (0, 1), 'W': (0, -1),
}
OPPOSITE = {'N': 'S', 'S': 'N', 'E': 'W', 'W': 'E'}

PORTS = {
    Shape.VERTICAL: frozenset(['N', 'S']),
    Shape.HORIZONTAL: frozenset(['E', 'W']),
    Shape.SOUTH_EAST: frozenset(['S', 'E']),
    Shape.SOUTH_WEST: frozenset(['S', 'W']),
    Shape.NORTH_EAST: frozenset(['N', 'E']),
    Shape.NORTH_WEST: frozenset(['N', 'W']),
    Shape.GROUND: frozenset(),
    Shape.START: frozenset(),  # placeholder until the loop solver picks a shape
}

# Candidate shapes for the start tile, also the tie-break order
PIPE_SHAPES = (
    Shape.VERTICAL, Shape.HORIZONTAL,
    Shape.SOUTH_EAST, Shape.SOUTH_WEST,
    Shape.NORTH_WEST, Shape.NORTH_EAST,
)


def connectivity_ports(shape):
    """Return the frozenset of directions ('N', 'S', 'E', 'W') a shape opens to."""
    return PORTS[shape]


def has_opening(shape, direction):
    return direction in PORTS[shape]


# ============================================================================
# TILE
# ============================================================================

@dataclass(frozen=True)
class Tile:
    """One grid cell.

    position is (row, column). The start tile keeps Shape.START until a
    trial hands the solver a copy made with with_shape().
    """

    position: tuple
    shape: Shape
    is_start: bool = False

    def with_shape(self, shape):
        return replace(self, shape=shape)

    def neighbor_direction(self, other):
        """Direction from self to other, or None when not orthogonally adjacent."""
        row, col = self.position
        other_row, other_col = other.position
        offset = (other_row - row, other_col - col)
        for direction, delta in DIRECTION_OFFSETS.items():
            if offset == delta:
                return direction
        return None

    def is_neighbor(self, other):
        return self.neighbor_direction(other) is not None

    def is_connected(self, other):
        """True when both tiles open toward each other across a shared edge.

        A port on only one side does not count.
        """
        direction = self.neighbor_direction(other)
        if direction is None:
            return False
        return (has_opening(self.shape, direction)
                and has_opening(other.shape, OPPOSITE[direction]))


# ============================================================================
# GRID PARSING
# ============================================================================

def build_tile(ch, position):
    shape = Shape.from_symbol(ch)
    return Tile(position=position, shape=shape, is_start=shape is Shape.START)


def parse_grid(text):
    """Parse puzzle text into rows of Tiles.

    Leading and trailing blank lines are dropped; every remaining line is
    one grid row.

    Raises:
        MalformedGridError: unknown symbol, ragged rows, or a start tile
            count other than one.
    """
    lines = text.strip('\n').splitlines()
    if not lines or not any(line.strip() for line in lines):
        raise MalformedGridError('grid is empty')

    expected = len(lines[0])
    grid = []
    for row, line in enumerate(lines):
        if len(line) != expected:
            raise MalformedGridError(
                'row {} has length {}, expected {}'.format(row, len(line), expected))
        try:
            grid.append([build_tile(ch, (row, col)) for col, ch in enumerate(line)])
        except MalformedGridError as exc:
            raise MalformedGridError('row {}: {}'.format(row, exc)) from None

    starts = sum(1 for tiles in grid for tile in tiles if tile.is_start)
    if starts != 1:
        raise MalformedGridError(
            'expected exactly one start tile, found {}'.format(starts))

    logger.debug('Parsed %dx%d grid', len(grid), expected)
    return grid
