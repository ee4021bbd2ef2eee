"""**********************************************************************************
 * Title: action_handlers.py
 *
 * @version 1.2.0
 * -------------------------------------------------------------------------------
 * Description:
 * This module is the central hub for discrete input handling. It routes key
 * presses and the ten-button adaptive input pad to the editor session,
 * according to the active notes mode (normal entry, center notes, corner
 * notes or color tags). These handlers bridge the gap between an outer
 * surface (a browser client, the HTTP API) and the EditorSession, acting
 * as the controller of the application.
 **********************************************************************************"""

# --- IMPORTS ---
import logging

from grid_editor.constants import (
    ARROW_KEY_STEPS, CLEAR_KEYS, COLOR_ORDER, NOTE_MODES, NOTES_CENTER, NOTES_CORNER,
    NOTES_COLOR, PAD_DIGITS
)

# --- MODE-AWARE EDIT HANDLERS ---
def handle_digit(session, digit, notes_mode=None):
    """
    Applies a digit according to the notes mode; 0 clears.

    :param EditorSession session: The active session.
    :param int digit: The digit pressed (0 clears).
    :param str | None notes_mode: None, 'center' or 'corner'.
    :returns: True if an edit was committed.
    :rtype: bool
    """
    if notes_mode == NOTES_CENTER:
        return session.clear_center_notes() if digit == 0 else session.toggle_center_note(digit)
    if notes_mode == NOTES_CORNER:
        return session.clear_corner_notes() if digit == 0 else session.toggle_corner_note(digit)
    return session.set_digit(digit)

def handle_pad_button(session, index, notes_mode=None):
    """
    Handles a click on the adaptive input pad.

    In color mode the first nine buttons toggle a color and the tenth clears
    every stripe; in every other mode the buttons are the digits 1-9 and 0.

    :param EditorSession session: The active session.
    :param int index: The button index, 0..9.
    :param str | None notes_mode: The active notes mode.
    :returns: True if an edit was committed.
    :rtype: bool
    """
    if not 0 <= index < len(PAD_DIGITS):
        return False
    if notes_mode == NOTES_COLOR:
        if index < len(COLOR_ORDER):
            return session.annotate_color(COLOR_ORDER[index])
        return session.annotate_clear()
    return handle_digit(session, PAD_DIGITS[index], notes_mode)

# --- KEYBOARD HANDLER ---
def handle_key_down(session, key, notes_mode=None):
    """
    Handles a key press on the board.

    Escape clears the selection, arrow keys move the current cell,
    Backspace/Delete/0 clear according to the notes mode, and the digits
    1..min(9, size) enter a value or toggle a note. Color mode has no key
    bindings for digits and falls back to value entry.

    :param EditorSession session: The active session.
    :param str key: The key name, as reported by a browser KeyboardEvent.
    :param str | None notes_mode: The active notes mode.
    :returns: True if the key was consumed.
    :rtype: bool
    """
    if notes_mode not in NOTE_MODES:
        logging.warning(f"Unknown notes mode {notes_mode!r}; treating it as normal entry.")
        notes_mode = None
    digit_mode = notes_mode if notes_mode in (NOTES_CENTER, NOTES_CORNER) else None

    if key == 'Escape':
        session.clear_selection()
        return True

    if key in ARROW_KEY_STEPS:
        session.move_current(*ARROW_KEY_STEPS[key])
        return True

    if key in CLEAR_KEYS:
        handle_digit(session, 0, digit_mode)
        return True

    if len(key) == 1 and key in '123456789':
        value = int(key)
        if value <= min(9, session.size):
            handle_digit(session, value, digit_mode)
            return True
    return False
