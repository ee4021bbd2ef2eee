"""**********************************************************************************
 * Title: puzzle_state.py
 *
 * @version 1.0.0
 * -------------------------------------------------------------------------------
 * Description:
 * This module defines the PuzzleState class, the board data of one puzzle:
 * the preset values supplied by the puzzle, the values entered by the user,
 * the two independent note cubes (center and corner) and the ordered color
 * tags of every cell. All targeted operations skip locked cells (cells with
 * a preset value) and apply to every other target cell independently.
 **********************************************************************************"""

# --- IMPORTS ---
from grid_editor.constants import COLOR_TO_CODE, MAX_CELL_VALUE, MAX_SIZE, NOTES_CENTER, NOTES_CORNER

# --- GRID FACTORIES ---
def create_number_grid(size):
    return [[0] * size for _ in range(size)]

def create_digit_cube(size):
    """Creates a note cube: one empty set of digits per cell."""
    return [[set() for _ in range(size)] for _ in range(size)]

def create_color_grid(size):
    return [[[] for _ in range(size)] for _ in range(size)]

def validate_size(size):
    if not isinstance(size, int) or isinstance(size, bool) or not 0 < size <= MAX_SIZE:
        raise ValueError(f"Size must be a positive integer no greater than {MAX_SIZE}.")

def validate_value_grid(grid, size, label):
    """
    Checks an optional preset or solution grid before it is stored.

    :param list[list[int]] | None grid: The grid to check, or None.
    :param int size: The dimension of the board.
    :param str label: The grid's name, used in error messages.
    :raises ValueError: If the grid is not size x size or holds a value outside 0..35.
    """
    if grid is None:
        return
    if len(grid) != size or any(len(row) != size for row in grid):
        raise ValueError(f"{label} must be a size×size matrix.")
    for row in grid:
        for v in row:
            if not isinstance(v, int) or isinstance(v, bool) or not 0 <= v <= MAX_CELL_VALUE:
                raise ValueError(f"{label} holds a value outside 0..{MAX_CELL_VALUE}: {v!r}")

# --- PUZZLESTATE CLASS DEFINITION ---
class PuzzleState:
    """
    Holds the mutable board data of a single puzzle instance.
    """
    def __init__(self, size, preset=None, solution=None):
        """
        Initializes empty user data for a board of the given size.

        :param int size: The dimension of the board.
        :param list[list[int]] | None preset: The preset values, or None for an empty board.
        :param list[list[int]] | None solution: An optional intended solution, carried but never enforced.
        """
        validate_size(size)
        self.size = size
        validate_value_grid(preset, size, 'Preset grid')
        validate_value_grid(solution, size, 'Solution grid')
        self.preset = [list(row) for row in preset] if preset is not None else create_number_grid(size)
        self.solution = [list(row) for row in solution] if solution is not None else None
        self.user = create_number_grid(size)
        self.center = create_digit_cube(size)
        self.corner = create_digit_cube(size)
        self.colors = create_color_grid(size)

    # --- QUERIES ---
    def is_locked(self, r, c):
        return self.preset[r][c] > 0

    def display_value(self, r, c):
        """Returns the preset value if set, else the user value, else 0."""
        if self.preset[r][c] > 0:
            return self.preset[r][c]
        return self.user[r][c] if self.user[r][c] > 0 else 0

    def display_grid(self):
        return [[self.display_value(r, c) for c in range(self.size)] for r in range(self.size)]

    def visible_notes(self, r, c, kind):
        """Notes are only shown when the cell has neither a preset nor a user value."""
        if self.display_value(r, c):
            return []
        return sorted(self._cube(kind)[r][c])

    def _cube(self, kind):
        if kind == NOTES_CENTER:
            return self.center
        if kind == NOTES_CORNER:
            return self.corner
        raise ValueError(f"Unknown note kind: {kind!r}")

    def _editable(self, targets):
        return [(r, c) for r, c in targets if not self.is_locked(r, c)]

    # --- TARGETED OPERATIONS ---
    def set_value(self, targets, value):
        """
        Writes a value into every unlocked target cell (0 clears).

        Values outside 0..size are ignored.

        :param list[tuple[int, int]] targets: The target cells.
        :param int value: The value to write.
        """
        if value < 0 or value > self.size:
            return
        for r, c in self._editable(targets):
            self.user[r][c] = value

    def toggle_note(self, kind, targets, digit):
        """Flips one digit in the chosen note cube of every unlocked target cell."""
        if digit < 1 or digit > self.size:
            return
        cube = self._cube(kind)
        for r, c in self._editable(targets):
            cube[r][c] ^= {digit}

    def clear_notes(self, kind, targets):
        cube = self._cube(kind)
        for r, c in self._editable(targets):
            cube[r][c] = set()

    def toggle_color(self, targets, color):
        """
        Toggles a color tag in every unlocked target cell.

        A color already present is removed; otherwise it is appended, so the
        list never holds duplicates and keeps insertion order.

        :param list[tuple[int, int]] targets: The target cells.
        :param str color: A known color name; unknown names are ignored.
        """
        if color not in COLOR_TO_CODE:
            return
        for r, c in self._editable(targets):
            tags = self.colors[r][c]
            if color in tags:
                tags.remove(color)
            else:
                tags.append(color)

    def clear_colors(self, targets):
        for r, c in self._editable(targets):
            self.colors[r][c] = []

    def reset(self):
        """Clears user values, both note cubes and all colors on the whole board."""
        self.user = create_number_grid(self.size)
        self.center = create_digit_cube(self.size)
        self.corner = create_digit_cube(self.size)
        self.colors = create_color_grid(self.size)

    # --- WHOLESALE REPLACEMENT ---
    def replace_user_data(self, user, center, corner, colors):
        """Replaces everything the user can edit, leaving the preset untouched."""
        self.user, self.center, self.corner, self.colors = user, center, corner, colors
