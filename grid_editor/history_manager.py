"""**********************************************************************************
 * Title: history_manager.py
 *
 * @version 2.1.0
 * -------------------------------------------------------------------------------
 * Description:
 * This file defines the HistoryManager class, which keeps a bounded list of
 * serialized SG1 snapshots and a pointer into that list for undo/redo.
 * Consecutive identical snapshots are recorded only once, recording after an
 * undo drops the redo tail, and the oldest entries are trimmed once the log
 * grows past its capacity. Recording can be suppressed while the editor
 * replaces its state from a snapshot or an import, so that those replaces do
 * not themselves create history entries.
 **********************************************************************************"""

# --- IMPORTS ---
import logging
from contextlib import contextmanager

from grid_editor.constants import MAX_HISTORY

# --- CLASS DEFINITION ---
class HistoryManager:
    """Manages the history of snapshots for undo/redo functionality."""
    def __init__(self, capacity=MAX_HISTORY):
        """
        Initializes an empty history.

        :param int capacity: The maximum number of snapshots kept.
        """
        self.capacity = capacity
        self.snapshots = []
        self.pointer = -1
        self.suppress_count = 0

    def __len__(self):
        return len(self.snapshots)

    @property
    def is_suppressed(self):
        return self.suppress_count > 0

    @contextmanager
    def suppressed(self):
        """Suspends recording for the duration of the `with` block."""
        self.suppress_count += 1
        try:
            yield self
        finally:
            self.suppress_count -= 1

    def current(self):
        """Returns the snapshot at the pointer, or None for an empty history."""
        if self.pointer < 0:
            return None
        return self.snapshots[self.pointer]

    def record_if_changed(self, snapshot):
        """
        Records a new snapshot unless it repeats the current one.

        If the pointer is not at the end (after an undo), the "redo" tail is
        discarded before appending. When the log exceeds its capacity the
        oldest entries are dropped and the pointer shifts with them.

        :param str snapshot: The serialized state to record.
        :returns: True if the snapshot was appended, False otherwise.
        :rtype: bool
        """
        if self.is_suppressed:
            return False
        if self.pointer >= 0 and self.snapshots[self.pointer] == snapshot:
            return False
        if self.pointer < len(self.snapshots) - 1:
            self.snapshots = self.snapshots[:self.pointer + 1]
        self.snapshots.append(snapshot)
        overflow = len(self.snapshots) - self.capacity
        if overflow > 0:
            del self.snapshots[:overflow]
            logging.debug(f"History trimmed by {overflow} entr{'y' if overflow == 1 else 'ies'}.")
        self.pointer = len(self.snapshots) - 1
        return True

    def can_undo(self):
        return self.pointer > 0

    def can_redo(self):
        return 0 <= self.pointer < len(self.snapshots) - 1

    def step_back(self):
        """
        Moves the pointer back one step.

        :returns: The snapshot now at the pointer, or None if undo is not possible.
        :rtype: str | None
        """
        if not self.can_undo():
            return None
        self.pointer -= 1
        return self.snapshots[self.pointer]

    def step_forward(self):
        if not self.can_redo():
            return None
        self.pointer += 1
        return self.snapshots[self.pointer]

    def peek_back(self):
        """Returns the snapshot an undo would restore, without moving the pointer."""
        return self.snapshots[self.pointer - 1] if self.can_undo() else None

    def peek_forward(self):
        return self.snapshots[self.pointer + 1] if self.can_redo() else None

    def clear(self):
        """Empties the history; the next recorded snapshot becomes the new baseline."""
        self.snapshots, self.pointer = [], -1
