"""**********************************************************************************
 * Title: app.py
 *
 * @version 1.1.0
 * -------------------------------------------------------------------------------
 * Description:
 * The Flask application exposing editor sessions over a small JSON API. Each
 * session lives in memory and is addressed by an id. Clients send pointer,
 * key and pad events or a whole selection, invoke the editor handle (digits,
 * notes, colors, reset, undo/redo) and move SG1 payloads in and out. Every
 * route answers errors as JSON, and every successful response carries the
 * rendered view of the session so a client can redraw without extra calls.
 **********************************************************************************"""

# --- IMPORTS ---
import logging
import uuid

from flask import Flask, jsonify, request
from flask_cors import CORS

from grid_editor import action_handlers as actions
from grid_editor import constants as const
from grid_editor.editor_session import EditorSession
from grid_editor.state_codec import StateCodecError, decode_payload

app = Flask(__name__)
CORS(app)

# In-memory session registry, keyed by session id.
SESSIONS = {}

# --- HELPERS ---
def _get_session(session_id):
    return SESSIONS.get(session_id)

def _not_found():
    return jsonify({'error': 'Unknown session'}), 404

def _internal_error(route, error):
    logging.error(f"Error in /api/sessions/<id>/{route}: {error}")
    return jsonify({'error': 'An internal error occurred'}), 500

def _session_response(session_id, session, **extra):
    body = {'sessionId': session_id, 'state': session.to_dict()}
    body.update(extra)
    return jsonify(body)

def _read_cell(data, session):
    """Reads a cell either from explicit 'row'/'col' or from 'x'/'y' over a 'rect'."""
    if data.get('row') is not None and data.get('col') is not None:
        return int(data['row']), int(data['col'])
    rect = data.get('rect')
    if rect and data.get('x') is not None and data.get('y') is not None:
        return session.locate(float(data['x']), float(data['y']), tuple(float(v) for v in rect))
    return None

# --- SESSION LIFECYCLE ---
@app.route('/api/sessions', methods=['POST'])
def create_session():
    try:
        data = request.get_json(silent=True) or {}
        payload = data.get('payload')
        if payload:
            decoded = decode_payload(payload)
            session = EditorSession(decoded['size'], regions=data.get('regions'), box=data.get('box'))
            session.import_state(payload)
        else:
            session = EditorSession(
                int(data.get('size', const.DEFAULT_SIZE)),
                preset=data.get('presetGrid'),
                regions=data.get('regions'),
                box=data.get('box'),
                solution=data.get('solution'),
            )
        session_id = uuid.uuid4().hex
        SESSIONS[session_id] = session
        logging.info(f"Created session {session_id} ({session.size}x{session.size}).")
        return _session_response(session_id, session), 201
    except (StateCodecError, ValueError, TypeError) as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logging.error(f"Error in /api/sessions: {e}")
        return jsonify({'error': 'An internal error occurred'}), 500

@app.route('/api/sessions/<session_id>', methods=['GET'])
def get_session(session_id):
    session = _get_session(session_id)
    if session is None:
        return _not_found()
    return _session_response(session_id, session)

@app.route('/api/sessions/<session_id>', methods=['DELETE'])
def delete_session(session_id):
    if SESSIONS.pop(session_id, None) is None:
        return _not_found()
    return jsonify({'deleted': session_id})

# --- INPUT EVENTS ---
@app.route('/api/sessions/<session_id>/pointer', methods=['POST'])
def pointer_event(session_id):
    session = _get_session(session_id)
    if session is None:
        return _not_found()
    try:
        data = request.get_json(silent=True) or {}
        kind = data.get('type')
        if kind == 'down':
            mode = session.pointer_down(_read_cell(data, session),
                                        ctrl_like=bool(data.get('ctrl') or data.get('meta')),
                                        shift=bool(data.get('shift')))
            return _session_response(session_id, session, mode=mode)
        if kind == 'move':
            session.pointer_move(_read_cell(data, session))
        elif kind == 'up':
            session.pointer_up()
        elif kind == 'leave':
            session.pointer_leave()
        else:
            return jsonify({'error': f"Unknown pointer event type: {kind!r}"}), 400
        return _session_response(session_id, session)
    except (ValueError, TypeError) as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        return _internal_error('pointer', e)

@app.route('/api/sessions/<session_id>/selection', methods=['POST'])
def replace_selection(session_id):
    session = _get_session(session_id)
    if session is None:
        return _not_found()
    try:
        data = request.get_json(silent=True) or {}
        session.set_selection(data.get('selection'))
        return _session_response(session_id, session)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        return _internal_error('selection', e)

@app.route('/api/sessions/<session_id>/key', methods=['POST'])
def key_event(session_id):
    session = _get_session(session_id)
    if session is None:
        return _not_found()
    try:
        data = request.get_json(silent=True) or {}
        key = data.get('key')
        if not key or not isinstance(key, str):
            return jsonify({'error': 'Missing or invalid key'}), 400
        handled = actions.handle_key_down(session, key, data.get('notesMode'))
        return _session_response(session_id, session, handled=handled)
    except Exception as e:
        return _internal_error('key', e)

@app.route('/api/sessions/<session_id>/input', methods=['POST'])
def pad_event(session_id):
    session = _get_session(session_id)
    if session is None:
        return _not_found()
    try:
        data = request.get_json(silent=True) or {}
        try:
            index = int(data.get('index'))
        except (TypeError, ValueError):
            return jsonify({'error': 'Missing or invalid index'}), 400
        handled = actions.handle_pad_button(session, index, data.get('notesMode'))
        return _session_response(session_id, session, handled=handled)
    except Exception as e:
        return _internal_error('input', e)

# --- EDITOR HANDLE ---
@app.route('/api/sessions/<session_id>/digit', methods=['POST'])
def set_digit(session_id):
    session = _get_session(session_id)
    if session is None:
        return _not_found()
    try:
        data = request.get_json(silent=True) or {}
        try:
            value = int(data.get('value'))
        except (TypeError, ValueError):
            return jsonify({'error': 'Missing or invalid value'}), 400
        return _session_response(session_id, session, applied=session.set_digit(value))
    except Exception as e:
        return _internal_error('digit', e)

@app.route('/api/sessions/<session_id>/notes', methods=['POST'])
def edit_notes(session_id):
    session = _get_session(session_id)
    if session is None:
        return _not_found()
    try:
        data = request.get_json(silent=True) or {}
        kind = data.get('kind')
        if kind not in (const.NOTES_CENTER, const.NOTES_CORNER):
            return jsonify({'error': "Notes kind must be 'center' or 'corner'"}), 400
        if data.get('clear'):
            applied = session.clear_center_notes() if kind == const.NOTES_CENTER else session.clear_corner_notes()
        else:
            try:
                digit = int(data.get('digit'))
            except (TypeError, ValueError):
                return jsonify({'error': 'Missing or invalid digit'}), 400
            toggle = session.toggle_center_note if kind == const.NOTES_CENTER else session.toggle_corner_note
            applied = toggle(digit)
        return _session_response(session_id, session, applied=applied)
    except Exception as e:
        return _internal_error('notes', e)

@app.route('/api/sessions/<session_id>/color', methods=['POST'])
def edit_color(session_id):
    session = _get_session(session_id)
    if session is None:
        return _not_found()
    try:
        data = request.get_json(silent=True) or {}
        if data.get('clear'):
            applied = session.annotate_clear()
        else:
            color = data.get('color')
            if not isinstance(color, str) or color not in const.COLOR_TO_CODE:
                return jsonify({'error': f"Unknown color: {color!r}"}), 400
            applied = session.annotate_color(color)
        return _session_response(session_id, session, applied=applied)
    except Exception as e:
        return _internal_error('color', e)

@app.route('/api/sessions/<session_id>/reset', methods=['POST'])
def reset_session(session_id):
    session = _get_session(session_id)
    if session is None:
        return _not_found()
    try:
        session.reset()
        return _session_response(session_id, session)
    except Exception as e:
        return _internal_error('reset', e)

@app.route('/api/sessions/<session_id>/undo', methods=['POST'])
def undo(session_id):
    session = _get_session(session_id)
    if session is None:
        return _not_found()
    try:
        return _session_response(session_id, session, applied=session.undo())
    except Exception as e:
        return _internal_error('undo', e)

@app.route('/api/sessions/<session_id>/redo', methods=['POST'])
def redo(session_id):
    session = _get_session(session_id)
    if session is None:
        return _not_found()
    try:
        return _session_response(session_id, session, applied=session.redo())
    except Exception as e:
        return _internal_error('redo', e)

# --- IMPORT / EXPORT ---
@app.route('/api/sessions/<session_id>/export', methods=['GET'])
def export_session(session_id):
    session = _get_session(session_id)
    if session is None:
        return _not_found()
    try:
        title, rules = request.args.get('title'), request.args.get('rules')
        if title or rules:
            export_string = session.export_with_metadata(title or '', rules or '')
        else:
            export_string = session.export_state()
        return jsonify({'exportString': export_string})
    except Exception as e:
        return _internal_error('export', e)

@app.route('/api/sessions/<session_id>/import', methods=['POST'])
def import_session(session_id):
    session = _get_session(session_id)
    if session is None:
        return _not_found()
    try:
        data = request.get_json(silent=True) or {}
        import_string = data.get('importString')
        if not isinstance(import_string, str) or not import_string.strip():
            return jsonify({'error': 'No import string provided'}), 400
        session.import_state(import_string.strip())
        return _session_response(session_id, session)
    except StateCodecError as e:
        logging.warning(f"Rejected import for session {session_id}: {e}")
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        return _internal_error('import', e)
