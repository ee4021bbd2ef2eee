"""Interactive Sudoku-style grid editor engine with SG1 serialization and undo/redo."""

from grid_editor.editor_session import EditorSession
from grid_editor.state_codec import StateCodecError

__version__ = '1.0.0'
