"""National Grid style lettered grid references.

A grid is made up of 100km squares, each letter of a grid reference picking
a square from a 5x5 grid of letters arranged like so::

    A B C D E
    F G H J K
    L M N O P
    Q R S T U
    V W X Y Z

(Note the missing 'I'.) With two letters the first picks a 500km square and
the second a 100km square within it.
"""

import logging
import re
from collections import namedtuple

import numpy as np

from .config import GRID_SQUARE_SIZE
from .geo import EasNor

__all__ = ['Grid', 'GridRef',
           'eas_nor_to_grid_ref', 'grid_ref_to_eas_nor',
           'format_grid_ref', 'parse_grid_ref']

logger = logging.getLogger(__name__)

_GRID_REF_RE = re.compile(r'^([A-HJ-Z]+)([0-9]*)$')


class Grid(namedtuple('Grid', ['num_digits', 'bottom_left_first_char',
                               'width', 'height'])):
    """Definition of a lettered grid system.

    Parameters
    ----------

    num_digits: int
        Number of letters in a grid square code (1 or 2)
    bottom_left_first_char: str
        First letter of the bottom-left (south west) grid square
    width, height: int
        Extent of the area the grid applies to, in 100km squares
    """
    __slots__ = ()


class GridRef(namedtuple('GridRef', ['code', 'e', 'n', 'h'])):
    """A grid square code plus eastings and northings (m) within the square.

    An empty `code` marks a point not covered by the grid, in which case
    the other fields are meaningless.
    """
    __slots__ = ()

    @property
    def is_valid(self):
        return self.code != ''


def _c2i(c):
    """Index of an upper-case letter within the 5x5 grid (skipping 'I')."""
    return ord(c) - ord('A') - (1 if c > 'I' else 0)


def _i2c(i):
    """Upper-case letter at an index within the 5x5 grid (skipping 'I')."""
    return chr(ord('A') + (1 if i >= 8 else 0) + i)


def _i2x(i):
    return i % 5


def _i2y(i):
    return 4 - (i // 5)


def _xy2i(x, y):
    return x + (4 - y)*5


def _offset(grid, i):
    """Position of the first letter's grid within its 5x5 family."""
    if i != 0:
        return 0, 0
    first = _c2i(grid.bottom_left_first_char)
    return _i2x(first), _i2y(first)


def eas_nor_to_grid_ref(point, grid):
    """Transform eastings and northings into a grid reference.

    Parameters
    ----------

    point: geo.EasNor
        Eastings and northings (m) on the grid's projection
    grid: Grid
        Lettered grid to use

    Returns
    -------

    GridRef
        The grid reference. Points outside the area covered by the grid
        give a reference with an empty code (and NaN fields).
    """
    invalid = GridRef('', np.nan, np.nan, np.nan)
    if not (np.isfinite(point.e) and np.isfinite(point.n)):
        return invalid

    # Quotient and remainder from the same division so that decoding adds
    # back exactly what was taken off.
    sq_x, e = divmod(point.e, GRID_SQUARE_SIZE)
    sq_y, n = divmod(point.n, GRID_SQUARE_SIZE)
    sq_x, sq_y = int(sq_x), int(sq_y)

    if sq_x < 0 or sq_y < 0 or sq_x >= grid.width or sq_y >= grid.height:
        return invalid

    code = [''] * grid.num_digits
    for i in range(grid.num_digits - 1, -1, -1):
        off_x, off_y = _offset(grid, i)
        code[i] = _i2c(_xy2i(off_x + sq_x % 5, off_y + sq_y % 5))

        # "Shift" off the digit
        sq_x //= 5
        sq_y //= 5

    return GridRef(''.join(code), e, n, point.h)


def grid_ref_to_eas_nor(grid_ref, grid):
    """Transform a grid reference into eastings and northings.

    The code is assumed to be upper case, free of 'I' and valid on the given
    grid. It is not checked; use `parse_grid_ref` for untrusted text.
    """
    sq_x = 0
    sq_y = 0
    for i in range(grid.num_digits):
        sq_x *= 5
        sq_y *= 5

        off_x, off_y = _offset(grid, i)
        c = _c2i(grid_ref.code[i])
        sq_x += _i2x(c) - off_x
        sq_y += _i2y(c) - off_y

    return EasNor(grid_ref.e + GRID_SQUARE_SIZE*sq_x,
                  grid_ref.n + GRID_SQUARE_SIZE*sq_y,
                  grid_ref.h)


def format_grid_ref(grid_ref, digits=5):
    """Render a grid reference as text, e.g. ``'TG 51539 13138'``.

    Parameters
    ----------

    grid_ref: GridRef
        Reference to render
    digits: int, optional
        Digits for each of the eastings and northings, from 1 (10km) to 5
        (1m). Values are rounded to the nearest unit but kept inside the
        square.

    Returns
    -------

    str
    """
    if not grid_ref.is_valid:
        raise ValueError("Grid reference is not on the grid")
    if not 1 <= digits <= 5:
        raise ValueError("digits must be between 1 and 5, not %r" % (digits,))

    unit = 10**(5 - digits)
    top = 10**digits - 1
    e = min(int(round(grid_ref.e / unit)), top)
    n = min(int(round(grid_ref.n / unit)), top)

    return '%s %0*d %0*d' % (grid_ref.code, digits, e, digits, n)


def parse_grid_ref(text, grid):
    """Parse a textual grid reference such as ``'TG 51539 13138'``.

    Whitespace and case are ignored. The letters must name a square on the
    grid and the digits must split evenly into eastings and northings, so
    ``'NN 166 712'`` is a 100m reference. The height of the result is zero.

    Raises
    ------

    ValueError
        If the text is not a grid reference on the given grid.
    """
    compact = ''.join(text.split()).upper()
    match = _GRID_REF_RE.match(compact)
    if match is None:
        raise ValueError("Not a grid reference: %r" % (text,))

    code, numbers = match.groups()
    if len(code) != grid.num_digits:
        raise ValueError("Expected %d grid letters in %r"
                         % (grid.num_digits, text))
    if len(numbers) % 2 or len(numbers) > 10:
        raise ValueError("Unbalanced eastings and northings in %r" % (text,))

    half = len(numbers) // 2
    unit = 10**(5 - half)
    e = float(int(numbers[:half]) * unit) if half else 0.0
    n = float(int(numbers[half:]) * unit) if half else 0.0
    grid_ref = GridRef(code, e, n, 0.0)

    # The square itself must lie inside the grid
    corner = grid_ref_to_eas_nor(GridRef(code, 0.0, 0.0, 0.0), grid)
    sq_x = int(corner.e // GRID_SQUARE_SIZE)
    sq_y = int(corner.n // GRID_SQUARE_SIZE)
    if sq_x < 0 or sq_y < 0 or sq_x >= grid.width or sq_y >= grid.height:
        raise ValueError("Square %s is not on the grid" % code)

    logger.debug("Parsed %r as %s", text, grid_ref)
    return grid_ref
