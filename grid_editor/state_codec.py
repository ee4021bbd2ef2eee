"""**********************************************************************************
 * Title: state_codec.py
 *
 * @version 1.2.0
 * -------------------------------------------------------------------------------
 * Description:
 * This module encodes and decodes the complete state of a puzzle to and from
 * the compact SG1 (Sudoku Grid) notation, the only durable format of the
 * editor. A payload is a list of '|'-separated segments:
 *
 *     SG1|<size>|<preset>|<user>|<center>|<corner>|<colors>|[solution]|[M1..]
 *
 * Number grids use one base-36 character per cell. Note cubes start with a
 * width character followed by one zero-padded base-36 bitmask per cell.
 * Colors are stored per cell as a length character followed by one code per
 * color tag. The optional metadata segment carries a title and rules as
 * (optionally gzip-compressed) base64url JSON. Decoding is strict and
 * all-or-nothing: every grid is rebuilt before anything is returned, and each
 * kind of corruption raises its own descriptive error.
 **********************************************************************************"""

# --- IMPORTS ---
import asyncio
import base64
import binascii
import gzip
import json
import logging
import zlib

from grid_editor.constants import (
    SG1_B36_ALPHABET, SG1_CHAR_TO_INT, SG1_INT_TO_CHAR, SG1_VERSION, SG1_SEPARATOR,
    SG1_HEADER, SG1_MIN_SEGMENTS, MAX_CELL_VALUE, MIN_MASK_WIDTH, MAX_MASK_WIDTH,
    META_PREFIX, META_FLAG_COMPRESSED, COLOR_TO_CODE, CODE_TO_COLOR
)
from grid_editor.puzzle_state import create_number_grid, create_digit_cube

# --- ERRORS ---
class StateCodecError(ValueError):
    """Base class of every SG1 encoding or decoding failure."""

class MissingHeaderError(StateCodecError):
    pass

class MissingSegmentsError(StateCodecError):
    pass

class SizeMismatchError(StateCodecError):
    pass

class NumberGridError(StateCodecError):
    pass

class DigitCubeError(StateCodecError):
    pass

class ColorSegmentError(StateCodecError):
    pass

class EncodeRangeError(StateCodecError):
    pass

# --- BASE-36 HELPERS ---
def to36(n):
    """Formats a non-negative integer in lower-case base 36."""
    if n < 0:
        raise EncodeRangeError(f"Cannot encode negative value {n}")
    if n == 0:
        return SG1_B36_ALPHABET[0]
    digits = []
    while n:
        n, rem = divmod(n, 36)
        digits.append(SG1_INT_TO_CHAR[rem])
    return ''.join(reversed(digits))

def from36(s):
    """Parses a lower-case base-36 string; raises ValueError on an empty or invalid string."""
    if not s or any(ch not in SG1_CHAR_TO_INT for ch in s):
        raise ValueError(f"invalid base-36 value {s!r}")
    value = 0
    for ch in s:
        value = value * 36 + SG1_CHAR_TO_INT[ch]
    return value

def mask_width_for_size(size):
    """Number of base-36 characters needed to hold a bitmask of `size` digits."""
    return max(1, len(to36(max(0, 2 ** size - 1))))

# --- NUMBER GRIDS ---
def encode_num_grid(grid, size):
    """
    Encodes a number grid as one base-36 character per cell, row-major.

    :param list[list[int]] grid: The grid to encode.
    :param int size: The dimension of the board.
    :returns: A string of exactly size*size characters.
    :rtype: str
    :raises EncodeRangeError: If a value lies outside 0..35.
    """
    out = []
    for r in range(size):
        for c in range(size):
            v = grid[r][c]
            if v < 0 or v > MAX_CELL_VALUE:
                raise EncodeRangeError(f"Value out of encodable range (0..{MAX_CELL_VALUE}): {v}")
            out.append(SG1_INT_TO_CHAR[v])
    return ''.join(out)

def decode_num_grid(s, size):
    if len(s) != size * size:
        raise NumberGridError("Corrupt state: number grid length mismatch")
    grid = create_number_grid(size)
    for i, ch in enumerate(s):
        value = SG1_CHAR_TO_INT.get(ch)
        if value is None:
            raise NumberGridError(f"Corrupt state: invalid character {ch!r} in number grid")
        grid[i // size][i % size] = value
    return grid

# --- NOTE CUBES ---
def encode_digit_cube(cube, size):
    """
    Encodes a note cube as '<width><body>'.

    Each cell becomes a bitmask with bit d-1 set when digit d is present,
    written as a zero-padded base-36 chunk of the fixed width.

    :param list[list[set[int]]] cube: The note cube.
    :param int size: The dimension of the board.
    :returns: The encoded segment.
    :rtype: str
    """
    width = mask_width_for_size(size)
    parts = [to36(width)]
    for r in range(size):
        for c in range(size):
            mask = 0
            for d in cube[r][c]:
                if 1 <= d <= size:
                    mask |= 1 << (d - 1)
            parts.append(to36(mask).rjust(width, SG1_B36_ALPHABET[0]))
    return ''.join(parts)

def decode_digit_cube(payload, size):
    if not payload:
        raise DigitCubeError("Corrupt state: empty cube payload")
    width = SG1_CHAR_TO_INT.get(payload[0], 0)
    if width < MIN_MASK_WIDTH or width > MAX_MASK_WIDTH:
        raise DigitCubeError("Corrupt state: invalid mask width")
    body = payload[1:]
    if len(body) != size * size * width:
        raise DigitCubeError("Corrupt state: mask length mismatch")
    cube = create_digit_cube(size)
    for i in range(size * size):
        chunk = body[i * width:(i + 1) * width]
        try:
            mask = from36(chunk)
        except ValueError:
            raise DigitCubeError(f"Corrupt state: invalid mask {chunk!r}") from None
        cube[i // size][i % size] = {d for d in range(1, size + 1) if (mask >> (d - 1)) & 1}
    return cube

# --- COLORS ---
def encode_colors(grid, size):
    out = []
    for r in range(size):
        for c in range(size):
            codes = ''.join(COLOR_TO_CODE.get(color, '') for color in grid[r][c])
            if len(codes) > MAX_CELL_VALUE:
                raise EncodeRangeError(f"Too many color stripes in a cell (max {MAX_CELL_VALUE})")
            out.append(SG1_INT_TO_CHAR[len(codes)] + codes)
    return ''.join(out)

def decode_colors(s, size):
    """
    Decodes the colors segment; unknown color codes are dropped.

    :param str s: The colors segment.
    :param int size: The dimension of the board.
    :returns: A size x size grid of color-name lists.
    :rtype: list[list[list[str]]]
    :raises ColorSegmentError: If the segment ends before every cell is read.
    """
    grid = [[[] for _ in range(size)] for _ in range(size)]
    i = 0
    for r in range(size):
        for c in range(size):
            if i >= len(s):
                raise ColorSegmentError("Corrupt state: truncated colors segment")
            length = SG1_CHAR_TO_INT.get(s[i])
            if length is None:
                raise ColorSegmentError(f"Corrupt state: invalid color count {s[i]!r}")
            i += 1
            if i + length > len(s):
                raise ColorSegmentError("Corrupt state: truncated colors segment")
            grid[r][c] = [CODE_TO_COLOR[code] for code in s[i:i + length] if code in CODE_TO_COLOR]
            i += length
    return grid

# --- FULL PAYLOAD ---
def build_payload(size, preset, user, center, corner, colors, solution=None):
    """
    Builds a complete SG1 payload.

    A trailing empty segment is always appended so that later segments,
    such as metadata, can be concatenated directly.

    :returns: The SG1 payload string.
    :rtype: str
    """
    parts = [
        SG1_VERSION,
        to36(size),
        encode_num_grid(preset, size),
        encode_num_grid(user, size),
        encode_digit_cube(center, size),
        encode_digit_cube(corner, size),
        encode_colors(colors, size),
    ]
    if solution is not None:
        parts.append(encode_num_grid(solution, size))
    parts.append('')
    return SG1_SEPARATOR.join(parts)

def encode_state(state):
    """Encodes a PuzzleState into an SG1 payload."""
    return build_payload(state.size, state.preset, state.user, state.center,
                         state.corner, state.colors, state.solution)

def read_payload_size(payload):
    """
    Validates the header and segment count and returns the declared size.

    :param str payload: The SG1 payload.
    :returns: The declared board size.
    :rtype: int
    """
    if not payload or not payload.startswith(SG1_HEADER):
        raise MissingHeaderError("Invalid state payload: missing SG1 header")
    parts = payload.split(SG1_SEPARATOR)
    if len(parts) < SG1_MIN_SEGMENTS:
        raise MissingSegmentsError("Corrupt state: missing segments")
    try:
        declared = from36(parts[1])
    except ValueError:
        raise MissingSegmentsError(f"Corrupt state: invalid size {parts[1]!r}") from None
    if declared <= 0:
        raise MissingSegmentsError(f"Corrupt state: invalid size {parts[1]!r}")
    return declared

def decode_payload(payload, size=None):
    """
    Decodes an SG1 payload into fresh grids.

    The declared size is checked against the expected board size before any
    grid segment is decoded. Metadata is not decoded here; see `read_metadata`.

    :param str payload: The SG1 payload.
    :param int | None size: The expected board size, or None to accept the declared one.
    :returns: A dict with 'size', 'preset', 'user', 'center', 'corner', 'colors' and 'solution'.
    :rtype: dict
    :raises StateCodecError: On any malformed or mismatched payload.
    """
    declared = read_payload_size(payload)
    if size is not None and declared != size:
        raise SizeMismatchError(f"State size {declared} does not match grid size {size}")
    parts = payload.split(SG1_SEPARATOR)
    decoded = {
        'size': declared,
        'preset': decode_num_grid(parts[2], declared),
        'user': decode_num_grid(parts[3], declared),
        'center': decode_digit_cube(parts[4], declared),
        'corner': decode_digit_cube(parts[5], declared),
        'colors': decode_colors(parts[6], declared),
        'solution': None,
    }
    if len(parts) > SG1_MIN_SEGMENTS and parts[7] and not parts[7].startswith(META_PREFIX):
        decoded['solution'] = decode_num_grid(parts[7], declared)
    return decoded

# --- METADATA SEGMENT ---
def _b64url_encode(data):
    return base64.urlsafe_b64encode(data).rstrip(b'=').decode('ascii')

def _b64url_decode(text):
    pad = -len(text) % 4
    return base64.urlsafe_b64decode(text + '=' * pad)

def encode_meta(title, rules, compressor=gzip.compress):
    """
    Encodes a title and rules into an 'M1<flags>|<base64url>' segment.

    The JSON is gzip-compressed only when a compressor is available and the
    result is smaller; a failing compressor falls back to plain bytes.

    :param str title: The puzzle title.
    :param str rules: The puzzle rules.
    :param callable | None compressor: bytes -> bytes, or None when unavailable.
    :returns: The metadata segment.
    :rtype: str
    """
    raw = json.dumps({'t': title or '', 'r': rules or ''}, ensure_ascii=False,
                     separators=(',', ':')).encode('utf-8')
    data, flags = raw, 0
    if compressor is not None:
        try:
            packed = compressor(raw)
            if len(packed) < len(raw):
                data, flags = packed, META_FLAG_COMPRESSED
        except (OSError, ValueError, zlib.error) as e:
            logging.warning(f"Metadata compression failed, storing uncompressed: {e}")
    return f"{META_PREFIX}{chr(flags)}{SG1_SEPARATOR}{_b64url_encode(data)}"

def decode_meta(segment):
    """
    Decodes a metadata segment. Fails closed: any error yields None.

    :param str segment: The 'M1<flags>|<base64url>' segment.
    :returns: A dict with 'title' and 'rules', or None.
    :rtype: dict | None
    """
    if not segment or len(segment) < 4 or not segment.startswith(META_PREFIX):
        return None
    flags = ord(segment[2])
    parts = segment.split(SG1_SEPARATOR)
    encoded = parts[1] if len(parts) > 1 else ''
    if not encoded:
        return None
    try:
        data = _b64url_decode(encoded)
        if flags & META_FLAG_COMPRESSED:
            data = gzip.decompress(data)
        obj = json.loads(data.decode('utf-8'))
    except (binascii.Error, ValueError, OSError, EOFError, zlib.error) as e:
        logging.warning(f"Ignoring unreadable metadata segment: {e}")
        return None
    if not isinstance(obj, dict):
        return None
    return {'title': str(obj.get('t') or ''), 'rules': str(obj.get('r') or '')}

def find_meta_segment(payload):
    """Extracts the metadata segment (prefix and data) from a full payload, if present."""
    parts = (payload or '').split(SG1_SEPARATOR)
    for i in range(SG1_MIN_SEGMENTS, len(parts)):
        if parts[i].startswith(META_PREFIX):
            data = parts[i + 1] if i + 1 < len(parts) else ''
            return parts[i] + SG1_SEPARATOR + data
    return None

def read_metadata(payload):
    segment = find_meta_segment(payload)
    return decode_meta(segment) if segment else None

def strip_metadata(payload):
    """Returns the payload without its metadata segment."""
    segment = find_meta_segment(payload)
    if not segment:
        return payload
    return payload.replace(segment, '', 1)

async def encode_meta_async(title, rules, compressor=gzip.compress):
    """Runs `encode_meta` on a worker thread so compression never blocks the caller."""
    return await asyncio.to_thread(encode_meta, title, rules, compressor)

async def read_metadata_async(payload):
    return await asyncio.to_thread(read_metadata, payload)
