"""**********************************************************************************
 * Title: geometry.py
 *
 * @version 1.0.0
 * -------------------------------------------------------------------------------
 * Description:
 * Pure helpers describing the shape of a board of size N. It computes the
 * default rectangular sub-regions (boxes), validates a custom region map,
 * derives a region id for every cell, clamps keyboard moves to the board,
 * translates pointer coordinates over a rendering rectangle into board cells,
 * and performs the simple row/column/region conflict detection used to flag
 * repeated digits.
 **********************************************************************************"""

# --- IMPORTS ---
import math
from collections import defaultdict

# --- BOX AND REGION HELPERS ---
def compute_default_box(size):
    """
    Computes the default box shape for a board of the given size.

    A 9x9 board always uses 3x3 boxes. Otherwise the box is floor(sqrt(size))
    rows tall when that divides the size, and a single full-height column
    when it does not.

    :param int size: The dimension of the board.
    :returns: A (rows, cols) tuple.
    :rtype: tuple[int, int]
    """
    if size == 9:
        return 3, 3
    r = math.isqrt(size)
    if r > 1 and size % r == 0:
        return r, size // r
    return size, 1

def validate_regions(regions, size):
    """
    Validates an optional custom region map.

    :param list[list[int]] | None regions: The region id of every cell, or None.
    :param int size: The dimension of the board.
    :raises ValueError: If the map is not a size x size matrix.
    """
    if regions is None:
        return
    if len(regions) != size or any(len(row) != size for row in regions):
        raise ValueError('Invalid "regions": expected a size×size matrix.')

def region_id_grid(size, box=None, regions=None):
    """
    Builds the region id of every cell.

    A custom region map wins; otherwise cells are grouped by box, numbered in
    row-major box order.

    :param int size: The dimension of the board.
    :param tuple[int, int] | None box: The (rows, cols) box shape.
    :param list[list[int]] | None regions: An optional custom region map.
    :returns: A size x size grid of region ids.
    :rtype: list[list[int]]
    """
    if regions is not None:
        validate_regions(regions, size)
        return [list(row) for row in regions]
    rows_per_box, cols_per_box = box or compute_default_box(size)
    boxes_per_row = math.ceil(size / cols_per_box)
    return [[(r // rows_per_box) * boxes_per_row + (c // cols_per_box) for c in range(size)]
            for r in range(size)]

# --- COORDINATE HELPERS ---
def clamp(n, low, high):
    return min(high, max(low, n))

def neighbor(cell, dr, dc, size):
    """Returns the cell one step away, clamped to the board edges (no wrapping)."""
    r, c = cell
    return clamp(r + dr, 0, size - 1), clamp(c + dc, 0, size - 1)

def cell_from_point(x, y, rect, size):
    """
    Maps pointer coordinates to a board cell.

    The board is assumed to fill the rendering rectangle uniformly, so the
    mapping is linear. Points outside the rectangle map to no cell.

    :param float x: Horizontal pointer coordinate.
    :param float y: Vertical pointer coordinate.
    :param tuple rect: The (left, top, width, height) of the rendered board.
    :param int size: The dimension of the board.
    :returns: The (row, col) under the pointer, or None.
    :rtype: tuple[int, int] | None
    """
    left, top, width, height = rect
    if width <= 0 or height <= 0:
        return None
    px, py = x - left, y - top
    if px < 0 or py < 0 or px > width or py > height:
        return None
    col = clamp(math.floor(px / width * size), 0, size - 1)
    row = clamp(math.floor(py / height * size), 0, size - 1)
    return row, col

# --- CONFLICT DETECTION ---
def find_conflicts(values, region_ids):
    """
    Finds cells whose digit repeats within a row, a column or a region.

    Empty cells (0) never conflict. This does not check the puzzle against
    any solution.

    :param list[list[int]] values: The displayed value of every cell.
    :param list[list[int]] region_ids: The region id of every cell.
    :returns: The set of conflicting (row, col) cells.
    :rtype: set[tuple[int, int]]
    """
    groups = defaultdict(list)
    size = len(values)
    for r in range(size):
        for c in range(size):
            v = values[r][c]
            if v <= 0:
                continue
            groups[('row', r, v)].append((r, c))
            groups[('col', c, v)].append((r, c))
            groups[('region', region_ids[r][c], v)].append((r, c))
    conflicts = set()
    for cells in groups.values():
        if len(cells) > 1:
            conflicts.update(cells)
    return conflicts
