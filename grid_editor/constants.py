"""**********************************************************************************
 * Title: constants.py
 *
 * @version 1.0.0
 * -------------------------------------------------------------------------------
 * Description:
 * This file contains all the static data and constants for the grid editor.
 * It centralizes configuration values and definitions such as the base-36
 * alphabet used by the SG1 notation, the segment header, the color-tag codes,
 * the drag modes understood by the gesture controller, the note modes used by
 * the input dispatcher, and the bounds of the undo/redo history.
 **********************************************************************************"""

# --- SG1 (SUDOKU GRID NOTATION) CONSTANTS ---
# These constants are used for encoding and decoding the puzzle state to and from
# the compact SG1 string format.

# Lower-case base-36 alphabet, one character per value 0..35.
SG1_B36_ALPHABET = '0123456789abcdefghijklmnopqrstuvwxyz'

# Pre-computed mapping from SG1 characters to their integer equivalents for fast decoding.
SG1_CHAR_TO_INT = {c: i for i, c in enumerate(SG1_B36_ALPHABET)}

# Pre-computed mapping from integers to their SG1 character equivalents for fast encoding.
SG1_INT_TO_CHAR = {i: c for i, c in enumerate(SG1_B36_ALPHABET)}

SG1_VERSION = 'SG1'
SG1_SEPARATOR = '|'
SG1_HEADER = SG1_VERSION + SG1_SEPARATOR

# Minimum number of segments in a payload: version, size and the five grids.
SG1_MIN_SEGMENTS = 7

# Largest value a single base-36 character can hold.
MAX_CELL_VALUE = len(SG1_B36_ALPHABET) - 1

# Accepted range for the per-cell mask width of a note cube.
MIN_MASK_WIDTH = 1
MAX_MASK_WIDTH = 10

# --- METADATA SEGMENT CONSTANTS ---
META_PREFIX = 'M1'
META_FLAG_COMPRESSED = 1

# --- COLOR TAG CONSTANTS ---
# Maps each color name to its single-character code in the colors segment.
COLOR_TO_CODE = {
    'red': 'r',
    'orange': 'o',
    'yellow': 'y',
    'green': 'g',
    'blue': 'b',
    'cyan': 'c',
    'violet': 'v',
    'pink': 'p',
    'transparent': 't',
}

# The reverse mapping of COLOR_TO_CODE for decoding.
CODE_TO_COLOR = {v: k for k, v in COLOR_TO_CODE.items()}

# Order of the colors on the adaptive input pad; the tenth button clears.
COLOR_ORDER = ['red', 'orange', 'yellow', 'green', 'cyan', 'blue', 'violet', 'pink', 'transparent']

# Digits shown on the adaptive input pad in numeric modes.
PAD_DIGITS = [1, 2, 3, 4, 5, 6, 7, 8, 9, 0]

# --- SELECTION CONSTANTS ---
DRAG_RECT = 'rect'
DRAG_PAINT_ADD = 'paint-add'
DRAG_PAINT_ERASE = 'paint-erase'

# Arrow keys and the (row, col) step they apply to the current cell.
ARROW_KEY_STEPS = {
    'ArrowUp': (-1, 0),
    'ArrowDown': (1, 0),
    'ArrowLeft': (0, -1),
    'ArrowRight': (0, 1),
}

CLEAR_KEYS = ('Backspace', 'Delete', '0')

# --- NOTE MODES ---
NOTES_CENTER = 'center'
NOTES_CORNER = 'corner'
NOTES_COLOR = 'color'
NOTE_MODES = (None, NOTES_CENTER, NOTES_CORNER, NOTES_COLOR)

# --- HISTORY AND BOARD CONSTANTS ---
MAX_HISTORY = 200
DEFAULT_SIZE = 9
MAX_SIZE = MAX_CELL_VALUE
