"""**********************************************************************************
 * Title: gesture_controller.py
 *
 * @version 1.1.0
 * -------------------------------------------------------------------------------
 * Description:
 * This module defines the GestureController, which owns the transient
 * selection state of the editor (selection matrix, selection stack and
 * current cell) and interprets pointer and navigation input against it.
 *
 * A pointer-down picks one of three drag modes:
 *   - ctrl-like held:  'paint-erase' if the cell was already selected,
 *                      otherwise 'paint-add', both starting from the
 *                      existing selection;
 *   - shift held:      'rect', recomputed from scratch on every move;
 *   - no modifier:     'paint-add' starting from an empty selection.
 *
 * After every mutation an empty selection forces the current cell to None
 * and the stack to empty.
 **********************************************************************************"""

# --- IMPORTS ---
from grid_editor.constants import DRAG_RECT, DRAG_PAINT_ADD, DRAG_PAINT_ERASE
from grid_editor.geometry import neighbor
from grid_editor.selection import (
    create_empty_selection, copy_selection, has_any_selected, build_single_selection,
    index_in_stack, push_if_absent, remove_from_stack, stack_from_matrix, rect_selection,
    same_cell
)

# --- PER-DRAG STATE ---
class DragState:
    """Short-lived record owned by the active drag; discarded on pointer-up or leave."""
    def __init__(self, mode, start, working):
        self.mode = mode
        self.start = start
        self.working = working
        self.visited = {start}
        self.last = start

# --- GESTURE CONTROLLER ---
class GestureController:
    """
    Interprets pointer and keyboard navigation input into selection changes.
    """
    def __init__(self, size):
        """
        :param int size: The dimension of the board.
        """
        self.size = size
        self.selection = create_empty_selection(size)
        self.stack = []
        self.current = None
        self.drag = None

    @property
    def is_dragging(self):
        return self.drag is not None

    def _in_bounds(self, cell):
        return cell is not None and 0 <= cell[0] < self.size and 0 <= cell[1] < self.size

    def _enforce_invariant(self):
        if not has_any_selected(self.selection):
            self.current = None
            self.stack = []

    # --- POINTER HANDLING ---
    def pointer_down(self, cell, ctrl_like=False, shift=False):
        """
        Starts a drag at the given cell.

        :param tuple[int, int] cell: The (row, col) under the pointer.
        :param bool ctrl_like: Whether Ctrl (or Cmd) is held.
        :param bool shift: Whether Shift is held.
        :returns: The chosen drag mode, or None if the cell is off the board.
        :rtype: str | None
        """
        if not self._in_bounds(cell):
            return None
        cell = tuple(cell)
        r, c = cell
        base = copy_selection(self.selection) if ctrl_like else create_empty_selection(self.size)

        if ctrl_like:
            mode = DRAG_PAINT_ERASE if base[r][c] else DRAG_PAINT_ADD
        elif shift:
            mode = DRAG_RECT
        else:
            mode = DRAG_PAINT_ADD

        if mode == DRAG_RECT:
            working = build_single_selection(self.size, r, c)
            self.stack = [cell]
            self.current = cell
        elif mode == DRAG_PAINT_ADD:
            working = base
            working[r][c] = True
            self.stack = push_if_absent(self.stack, cell) if ctrl_like else [cell]
            self.current = cell
        else:
            working = base
            working[r][c] = False
            self._erase_from_stack(cell)

        self.drag = DragState(mode, cell, working)
        self.selection = copy_selection(working)
        self._enforce_invariant()
        return mode

    def pointer_move(self, cell):
        """
        Extends the active drag to the given cell.

        Paint modes touch each cell at most once per drag; rect mode rebuilds
        the whole selection from the start cell to the pointer.

        :param tuple[int, int] | None cell: The (row, col) under the pointer, or None if outside.
        """
        if self.drag is None or not self._in_bounds(cell):
            return
        cell = tuple(cell)
        r, c = cell
        drag = self.drag

        if drag.mode == DRAG_RECT:
            drag.working = rect_selection(self.size, drag.start, cell)
            drag.last = cell
            self.stack = stack_from_matrix(drag.working)
            self.selection = copy_selection(drag.working)
        elif cell in drag.visited:
            return
        elif drag.mode == DRAG_PAINT_ADD:
            drag.visited.add(cell)
            drag.working[r][c] = True
            drag.last = cell
            self.stack = push_if_absent(self.stack, cell)
            self.selection = copy_selection(drag.working)
        else:
            drag.visited.add(cell)
            if not drag.working[r][c]:
                return
            drag.working[r][c] = False
            drag.last = cell
            self._erase_from_stack(cell)
            self.selection = copy_selection(drag.working)
        self._enforce_invariant()

    def pointer_up(self):
        """Finishes the active drag, settling the current cell."""
        if self.drag is None:
            return
        drag = self.drag
        if drag.mode in (DRAG_RECT, DRAG_PAINT_ADD):
            self.current = drag.last or drag.start
        self.drag = None
        self._enforce_invariant()

    def pointer_leave(self):
        if self.drag is not None:
            self.pointer_up()

    def _erase_from_stack(self, cell):
        """
        Removes a cell from the stack and, if it was the current cell, moves the
        current cell to the entry before it (or the new last entry).
        """
        idx = index_in_stack(self.stack, cell)
        remaining = remove_from_stack(self.stack, cell)
        if same_cell(self.current, cell):
            if idx > 0:
                self.current = self.stack[idx - 1]
            else:
                self.current = remaining[-1] if remaining else None
        self.stack = remaining

    # --- KEYBOARD NAVIGATION ---
    def move_current(self, dr, dc):
        """
        Moves the current cell one step and collapses the selection onto it.

        Without a current cell the move starts from the first selected cell,
        or from the top-left corner when nothing is selected.
        """
        base = self.current
        if base is None:
            base = stack_from_matrix(self.selection)[0] if has_any_selected(self.selection) else (0, 0)
        target = neighbor(base, dr, dc, self.size)
        self.select_single(target)
        return target

    def select_single(self, cell):
        """Selects exactly one cell and ends any drag in progress."""
        cell = tuple(cell)
        self.selection = build_single_selection(self.size, *cell)
        self.stack = [cell]
        self.current = cell
        self.drag = None

    def clear(self):
        """Clears selection, current cell and stack unconditionally."""
        self.selection = create_empty_selection(self.size)
        self.stack = []
        self.current = None
        self.drag = None

    def set_selection(self, selection):
        """
        Replaces the selection from an external matrix.

        Stack entries that are still selected keep their order; newly selected
        cells are appended in row-major order. A current cell that is no longer
        selected moves to the last stack entry. Any drag in progress ends.

        :param list[list[bool]] selection: A size x size matrix of flags.
        :raises ValueError: If the matrix has the wrong shape.
        """
        if not isinstance(selection, list) or len(selection) != self.size or \
                any(not isinstance(row, list) or len(row) != self.size for row in selection):
            raise ValueError("Selection must be a size×size matrix.")
        self.selection = [[bool(v) for v in row] for row in selection]
        kept = [cell for cell in self.stack if self.selection[cell[0]][cell[1]]]
        for cell in stack_from_matrix(self.selection):
            kept = push_if_absent(kept, cell)
        self.stack = kept
        self.drag = None
        if self.current is not None and not self.selection[self.current[0]][self.current[1]]:
            self.current = kept[-1] if kept else None
        self._enforce_invariant()
