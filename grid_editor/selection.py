"""**********************************************************************************
 * Title: selection.py
 *
 * @version 1.0.0
 * -------------------------------------------------------------------------------
 * Description:
 * Pure helpers for the selection set. A selection is a size x size matrix of
 * booleans, paired with a "stack" of (row, col) tuples that records the
 * order in which cells were selected. None of these functions mutate their
 * matrix arguments except where noted; the stack helpers return new lists.
 * This module also hosts the target resolver that decides which cells an
 * editing operation applies to.
 **********************************************************************************"""

# --- MATRIX HELPERS ---
def create_empty_selection(size):
    return [[False] * size for _ in range(size)]

def normalize_selection(selection, size):
    """Returns the selection unchanged if it is size x size, or a fresh empty one otherwise."""
    if not selection or len(selection) != size or any(len(row) != size for row in selection):
        return create_empty_selection(size)
    return selection

def has_any_selected(selection):
    return any(any(row) for row in selection)

def build_single_selection(size, r, c):
    selection = create_empty_selection(size)
    selection[r][c] = True
    return selection

def copy_selection(selection):
    return [row[:] for row in selection]

def toggle_cell(selection, cell):
    """Returns a copy of the selection with one cell flipped."""
    r, c = cell
    toggled = copy_selection(selection)
    toggled[r][c] = not toggled[r][c]
    return toggled

def union_selection(selection, other):
    """Returns the cell-wise union of two selections of the same size."""
    return [[a or b for a, b in zip(row_a, row_b)] for row_a, row_b in zip(selection, other)]

def rect_selection(size, start, end):
    """Returns a selection holding exactly the axis-aligned rectangle spanned by two cells."""
    (sr, sc), (er, ec) = start, end
    selection = create_empty_selection(size)
    for r in range(min(sr, er), max(sr, er) + 1):
        for c in range(min(sc, ec), max(sc, ec) + 1):
            selection[r][c] = True
    return selection

# --- STACK HELPERS ---
def same_cell(a, b):
    return a is not None and b is not None and a[0] == b[0] and a[1] == b[1]

def index_in_stack(stack, cell):
    for i, entry in enumerate(stack):
        if same_cell(entry, cell):
            return i
    return -1

def push_if_absent(stack, cell):
    if index_in_stack(stack, cell) == -1:
        return stack + [tuple(cell)]
    return list(stack)

def remove_from_stack(stack, cell):
    return [entry for entry in stack if not same_cell(entry, cell)]

def stack_from_matrix(selection):
    """Lists the selected cells in row-major order."""
    return [(r, c) for r, row in enumerate(selection) for c, is_selected in enumerate(row) if is_selected]

# --- TARGET RESOLUTION ---
def selection_targets(selection, current):
    """
    Resolves the cells an editing operation applies to.

    If any cell is selected, every selected cell is a target, in row-major
    order. Otherwise the current cell is the only target, if there is one.

    :param list[list[bool]] selection: The selection matrix.
    :param tuple[int, int] | None current: The current cell.
    :returns: The target cells; empty when the operation should do nothing.
    :rtype: list[tuple[int, int]]
    """
    if has_any_selected(selection):
        return stack_from_matrix(selection)
    return [tuple(current)] if current is not None else []
