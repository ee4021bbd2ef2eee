"""**********************************************************************************
 * Title: editor_session.py
 *
 * @version 1.3.0
 * -------------------------------------------------------------------------------
 * Description:
 * This module defines the EditorSession class, the single source of truth of
 * one editing session. It owns the puzzle grids, the selection state and the
 * undo/redo history, and exposes the editor handle used by every outer
 * surface: targeted edits (digits, notes, colors), reset, SG1 export and
 * import, and undo/redo. Every committed edit is serialized and offered to
 * the history, which ignores repeats; undo, redo and import replace the
 * grids with history recording suppressed.
 **********************************************************************************"""

# --- IMPORTS ---
import logging

from grid_editor.constants import DEFAULT_SIZE, MAX_HISTORY, NOTES_CENTER, NOTES_CORNER
from grid_editor.geometry import cell_from_point, compute_default_box, find_conflicts, region_id_grid, validate_regions
from grid_editor.gesture_controller import GestureController
from grid_editor.history_manager import HistoryManager
from grid_editor.puzzle_state import PuzzleState
from grid_editor.selection import selection_targets
from grid_editor.state_codec import (
    decode_payload, encode_meta, encode_meta_async, encode_state, read_metadata, read_metadata_async
)

# --- EDITORSESSION CLASS DEFINITION ---
class EditorSession:
    """
    Manages the complete state of one editor session and exposes its handle.
    """
    def __init__(self, size=DEFAULT_SIZE, preset=None, regions=None, box=None,
                 solution=None, history_capacity=MAX_HISTORY):
        """
        Initializes a session with an empty board of the given size.

        :param int size: The dimension of the board.
        :param list[list[int]] | None preset: The preset values supplied by the puzzle.
        :param list[list[int]] | None regions: An optional custom region map.
        :param tuple[int, int] | None box: An optional (rows, cols) box shape.
        :param list[list[int]] | None solution: An optional intended solution.
        :param int history_capacity: The maximum number of undo snapshots.
        """
        self.history = HistoryManager(history_capacity)
        self.metadata = None
        self.set_size(size, preset=preset, regions=regions, box=box, solution=solution)

    def set_size(self, size, preset=None, regions=None, box=None, solution=None):
        """
        Resets the session for a board of a (possibly new) size.

        Every grid, the selection and the history are reset. The history
        stays empty until the next edit, which first records the fresh board
        as its baseline.
        """
        validate_regions(regions, size)
        self.state = PuzzleState(size, preset=preset, solution=solution)
        self.gestures = GestureController(size)
        self.box = tuple(box) if box else compute_default_box(size)
        self.regions = [list(row) for row in regions] if regions is not None else None
        self.region_ids = region_id_grid(size, self.box, self.regions)
        self.history.clear()
        self.metadata = None
        logging.info(f"Editor session reset for a {size}x{size} board.")

    # --- READ ACCESS ---
    @property
    def size(self):
        return self.state.size

    @property
    def selection(self):
        return self.gestures.selection

    @property
    def selection_stack(self):
        return self.gestures.stack

    @property
    def current(self):
        return self.gestures.current

    def targets(self):
        return selection_targets(self.gestures.selection, self.gestures.current)

    def conflicts(self):
        return find_conflicts(self.state.display_grid(), self.region_ids)

    def can_undo(self):
        return self.history.can_undo()

    def can_redo(self):
        return self.history.can_redo()

    # --- COMMIT PIPELINE ---
    def snapshot(self):
        return encode_state(self.state)

    def _commit(self, mutate, needs_targets=True):
        """
        Applies one edit and offers the resulting snapshot to the history.

        :param callable mutate: Receives the target cells and mutates the puzzle state.
        :param bool needs_targets: Whether the edit is a no-op without targets.
        :returns: False if the edit had no targets, True otherwise.
        :rtype: bool
        """
        targets = self.targets()
        if needs_targets and not targets:
            return False
        if len(self.history) == 0:
            self.history.record_if_changed(self.snapshot())
        mutate(targets)
        self.history.record_if_changed(self.snapshot())
        return True

    # --- EDITOR HANDLE: EDITS ---
    def set_digit(self, value):
        return self._commit(lambda targets: self.state.set_value(targets, value))

    def toggle_center_note(self, digit):
        if digit < 1 or digit > self.size:
            return False
        return self._commit(lambda targets: self.state.toggle_note(NOTES_CENTER, targets, digit))

    def toggle_corner_note(self, digit):
        if digit < 1 or digit > self.size:
            return False
        return self._commit(lambda targets: self.state.toggle_note(NOTES_CORNER, targets, digit))

    def clear_center_notes(self):
        return self._commit(lambda targets: self.state.clear_notes(NOTES_CENTER, targets))

    def clear_corner_notes(self):
        return self._commit(lambda targets: self.state.clear_notes(NOTES_CORNER, targets))

    def annotate_color(self, color):
        return self._commit(lambda targets: self.state.toggle_color(targets, color))

    def annotate_clear(self):
        return self._commit(lambda targets: self.state.clear_colors(targets))

    def reset(self):
        """Clears every user-entered value, note and color; the reset itself is undoable."""
        return self._commit(lambda targets: self.state.reset(), needs_targets=False)

    # --- EDITOR HANDLE: PERSISTENCE ---
    def export_state(self):
        return self.snapshot()

    def export_with_metadata(self, title, rules, **kwargs):
        return self.export_state() + encode_meta(title, rules, **kwargs)

    async def export_with_metadata_async(self, title, rules, **kwargs):
        payload = self.export_state()
        return payload + await encode_meta_async(title, rules, **kwargs)

    def import_state(self, payload):
        """
        Replaces the board with the contents of an SG1 payload.

        The payload must declare this board's size. Cells with a preset value
        have their user value and notes cleared. The import does not touch the
        history log.

        :param str payload: The SG1 payload.
        :raises StateCodecError: If the payload is malformed or for another size.
        """
        self._apply_payload(payload)
        self.metadata = read_metadata(payload)
        logging.info(f"Imported SG1 state for a {self.size}x{self.size} board.")

    async def import_state_async(self, payload):
        """Same as `import_state`, with the metadata segment decoded off the caller's thread."""
        self._apply_payload(payload)
        self.metadata = await read_metadata_async(payload)
        logging.info(f"Imported SG1 state for a {self.size}x{self.size} board.")

    def _apply_payload(self, payload):
        decoded = decode_payload(payload, self.size)
        user, center, corner = decoded['user'], decoded['center'], decoded['corner']
        preset = decoded['preset']
        for r in range(self.size):
            for c in range(self.size):
                if preset[r][c] > 0:
                    user[r][c] = 0
                    center[r][c] = set()
                    corner[r][c] = set()

        with self.history.suppressed():
            self.state.preset = preset
            self.state.solution = decoded['solution']
            self.state.replace_user_data(user, center, corner, decoded['colors'])

    # --- EDITOR HANDLE: HISTORY ---
    def _restore(self, snapshot):
        decoded = decode_payload(snapshot, self.size)
        with self.history.suppressed():
            self.state.replace_user_data(decoded['user'], decoded['center'],
                                         decoded['corner'], decoded['colors'])

    def undo(self):
        """
        Restores the previous snapshot.

        :returns: True if a step was undone, False at the start of the history.
        :rtype: bool
        """
        snapshot = self.history.peek_back()
        if snapshot is None:
            return False
        self._restore(snapshot)
        self.history.step_back()
        return True

    def redo(self):
        snapshot = self.history.peek_forward()
        if snapshot is None:
            return False
        self._restore(snapshot)
        self.history.step_forward()
        return True

    # --- SELECTION INPUT ---
    def locate(self, x, y, rect):
        """Translates pointer coordinates over the rendered board into a cell."""
        return cell_from_point(x, y, rect, self.size)

    def pointer_down(self, cell, ctrl_like=False, shift=False):
        return self.gestures.pointer_down(cell, ctrl_like=ctrl_like, shift=shift)

    def pointer_move(self, cell):
        self.gestures.pointer_move(cell)

    def pointer_up(self):
        self.gestures.pointer_up()

    def pointer_leave(self):
        self.gestures.pointer_leave()

    def move_current(self, dr, dc):
        return self.gestures.move_current(dr, dc)

    def clear_selection(self):
        self.gestures.clear()

    def set_selection(self, selection):
        self.gestures.set_selection(selection)

    # --- SERIALIZATION FOR OUTER SURFACES ---
    def to_dict(self):
        """Returns a JSON-friendly view of the session for rendering clients."""
        size = self.size
        return {
            'size': size,
            'box': list(self.box),
            'regionIds': self.region_ids,
            'presetGrid': self.state.preset,
            'userGrid': self.state.user,
            'displayGrid': self.state.display_grid(),
            'centerNotes': [[sorted(cell) for cell in row] for row in self.state.center],
            'cornerNotes': [[sorted(cell) for cell in row] for row in self.state.corner],
            'colors': self.state.colors,
            'selection': self.selection,
            'selectionStack': [list(cell) for cell in self.selection_stack],
            'currentCell': list(self.current) if self.current is not None else None,
            'conflicts': sorted([list(cell) for cell in self.conflicts()]),
            'canUndo': self.can_undo(),
            'canRedo': self.can_redo(),
            'metadata': self.metadata,
        }
