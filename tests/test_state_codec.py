import asyncio
import base64
import random

import pytest

from grid_editor.constants import COLOR_TO_CODE
from grid_editor.puzzle_state import PuzzleState
from grid_editor.state_codec import (
    ColorSegmentError, DigitCubeError, EncodeRangeError, MissingHeaderError,
    MissingSegmentsError, NumberGridError, SizeMismatchError, StateCodecError,
    build_payload, decode_meta, decode_payload, encode_colors, encode_meta,
    encode_meta_async, encode_num_grid, encode_state, find_meta_segment,
    from36, mask_width_for_size, read_metadata, strip_metadata, to36,
)


def random_state(size, seed):
    rng = random.Random(seed)
    state = PuzzleState(size)
    colors = list(COLOR_TO_CODE)
    for r in range(size):
        for c in range(size):
            state.preset[r][c] = rng.choice([0, 0, 0, rng.randint(1, 35)])
            state.user[r][c] = rng.randint(0, 35)
            state.center[r][c] = {d for d in range(1, size + 1) if rng.random() < 0.3}
            state.corner[r][c] = {d for d in range(1, size + 1) if rng.random() < 0.2}
            state.colors[r][c] = rng.sample(colors, rng.randint(0, 4))
    return state


def empty_payload(size):
    state = PuzzleState(size)
    return encode_state(state)


class TestBase36:
    def test_to36_and_from36(self):
        assert to36(0) == '0'
        assert to36(35) == 'z'
        assert to36(36) == '10'
        assert from36('10') == 36
        assert from36(to36(65535)) == 65535

    def test_from36_rejects_foreign_characters(self):
        for bad in ('', 'Z', ' 1', '1_0', '+1'):
            with pytest.raises(ValueError):
                from36(bad)

    @pytest.mark.parametrize("size,width", [(1, 1), (4, 1), (5, 1), (9, 2), (16, 4)])
    def test_mask_width(self, size, width):
        assert mask_width_for_size(size) == width


class TestRoundTrip:
    @pytest.mark.parametrize("size", [4, 9, 16])
    def test_decode_reproduces_every_grid(self, size):
        for seed in range(5):
            state = random_state(size, seed)
            decoded = decode_payload(encode_state(state), size)
            assert decoded['size'] == size
            assert decoded['preset'] == state.preset
            assert decoded['user'] == state.user
            assert decoded['center'] == state.center
            assert decoded['corner'] == state.corner
            assert decoded['colors'] == state.colors
            assert decoded['solution'] is None

    def test_encoding_is_idempotent(self):
        state = random_state(9, 42)
        assert encode_state(state) == encode_state(state)

    def test_decode_builds_fresh_containers(self):
        state = random_state(4, 1)
        decoded = decode_payload(encode_state(state), 4)
        decoded['center'][0][0].add(1)
        decoded['colors'][0][0].append('red')
        assert state.center[0][0] is not decoded['center'][0][0]
        assert state.colors[0][0] is not decoded['colors'][0][0]

    def test_solution_segment_round_trips(self):
        state = PuzzleState(4, solution=[[1, 2, 3, 4], [3, 4, 1, 2], [2, 1, 4, 3], [4, 3, 2, 1]])
        decoded = decode_payload(encode_state(state), 4)
        assert decoded['solution'] == state.solution

    def test_decode_without_expected_size_uses_declared_size(self):
        assert decode_payload(empty_payload(6))['size'] == 6


class TestPayloadLayout:
    def test_empty_9x9_payload(self):
        payload = empty_payload(9)
        parts = payload.split('|')
        assert parts[0] == 'SG1'
        assert parts[1] == '9'
        assert parts[2] == '0' * 81
        assert parts[3] == '0' * 81
        assert parts[4] == '2' + '00' * 81
        assert parts[5] == '2' + '00' * 81
        assert parts[6] == '0' * 81
        assert payload.endswith('|')
        assert len(parts) == 8

    def test_note_masks_and_colors_are_encoded_per_cell(self):
        state = PuzzleState(4)
        state.user[0][1] = 3
        state.center[0][0] = {1, 3}
        state.corner[3][3] = {4}
        state.colors[0][0] = ['blue', 'red']
        parts = encode_state(state).split('|')
        assert parts[3][1] == '3'
        assert parts[4][:2] == '15'
        assert parts[5][-1] == '8'
        assert parts[6].startswith('2br0')

    def test_size_is_base36(self):
        assert empty_payload(16).split('|')[1] == 'g'


class TestEncodeErrors:
    def test_value_of_36_cannot_be_encoded(self):
        grid = [[0, 0], [0, 36]]
        with pytest.raises(EncodeRangeError):
            encode_num_grid(grid, 2)

    def test_negative_value_cannot_be_encoded(self):
        with pytest.raises(EncodeRangeError):
            encode_num_grid([[-1]], 1)

    def test_too_many_color_stripes(self):
        with pytest.raises(EncodeRangeError):
            encode_colors([[['red'] * 36]], 1)

    def test_encode_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            build_payload(1, [[40]], [[0]], [[set()]], [[set()]], [[[]]])


class TestDecodeErrors:
    def test_missing_header(self):
        with pytest.raises(MissingHeaderError):
            decode_payload('SG2|4|', 4)
        with pytest.raises(MissingHeaderError):
            decode_payload('', 4)

    def test_missing_segments(self):
        with pytest.raises(MissingSegmentsError):
            decode_payload('SG1|4|0000', 4)

    def test_invalid_size(self):
        parts = empty_payload(4).split('|')
        parts[1] = '!'
        with pytest.raises(MissingSegmentsError):
            decode_payload('|'.join(parts), 4)

    def test_size_mismatch_is_checked_before_body(self):
        payload = 'SG1|9|garbage|garbage|x|x|x|'
        with pytest.raises(SizeMismatchError):
            decode_payload(payload, 4)

    def test_number_grid_length_mismatch(self):
        parts = empty_payload(4).split('|')
        parts[3] = parts[3][:-1]
        with pytest.raises(NumberGridError):
            decode_payload('|'.join(parts), 4)

    def test_number_grid_invalid_character(self):
        parts = empty_payload(4).split('|')
        parts[2] = 'Z' + parts[2][1:]
        with pytest.raises(NumberGridError):
            decode_payload('|'.join(parts), 4)

    @pytest.mark.parametrize("segment", ['', '0' + '0' * 16, 'b' + '0' * 176])
    def test_invalid_cube_width(self, segment):
        parts = empty_payload(4).split('|')
        parts[4] = segment
        with pytest.raises(DigitCubeError):
            decode_payload('|'.join(parts), 4)

    def test_cube_length_mismatch(self):
        parts = empty_payload(4).split('|')
        parts[5] = parts[5] + '0'
        with pytest.raises(DigitCubeError):
            decode_payload('|'.join(parts), 4)

    def test_truncated_colors(self):
        parts = empty_payload(4).split('|')
        parts[6] = parts[6][:-1]
        with pytest.raises(ColorSegmentError):
            decode_payload('|'.join(parts), 4)

    def test_color_count_beyond_segment_end(self):
        parts = empty_payload(1).split('|')
        parts[6] = '3rg'
        with pytest.raises(ColorSegmentError):
            decode_payload('|'.join(parts), 1)

    def test_unknown_color_codes_are_dropped(self):
        decoded = decode_payload('SG1|1|0|0|10|10|3rxb|', 1)
        assert decoded['colors'] == [[['red', 'blue']]]

    def test_all_decode_errors_share_a_base(self):
        with pytest.raises(StateCodecError):
            decode_payload('nope', 4)


class TestMetadata:
    def test_short_metadata_stays_uncompressed(self):
        segment = encode_meta('T', 'R')
        assert segment.startswith('M1\x00|')
        assert '=' not in segment
        assert decode_meta(segment) == {'title': 'T', 'rules': 'R'}

    def test_long_metadata_is_compressed(self):
        rules = 'Normal sudoku rules apply. ' * 40
        segment = encode_meta('Killer', rules)
        assert segment[2] == '\x01'
        assert decode_meta(segment) == {'title': 'Killer', 'rules': rules}

    def test_unicode_round_trip(self):
        segment = encode_meta('Sudoku ★', 'Règles: aucune')
        assert decode_meta(segment) == {'title': 'Sudoku ★', 'rules': 'Règles: aucune'}

    def test_failing_compressor_falls_back(self):
        def broken(_data):
            raise OSError("no compression available")
        segment = encode_meta('T', 'x' * 500, compressor=broken)
        assert segment[2] == '\x00'
        assert decode_meta(segment)['rules'] == 'x' * 500

    def test_missing_compressor_falls_back(self):
        segment = encode_meta('T', 'x' * 500, compressor=None)
        assert segment[2] == '\x00'
        assert decode_meta(segment)['title'] == 'T'

    def test_decode_fails_closed(self):
        not_gzip = base64.urlsafe_b64encode(b'not gzip at all').rstrip(b'=').decode()
        not_dict = base64.urlsafe_b64encode(b'[1, 2]').rstrip(b'=').decode()
        assert decode_meta('M1\x01|' + not_gzip) is None
        assert decode_meta('M1\x00|' + not_dict) is None
        assert decode_meta('M1\x00|') is None
        assert decode_meta('XX\x00|abcd') is None
        assert decode_meta('') is None

    def test_metadata_travels_after_the_payload(self):
        payload = empty_payload(4)
        full = payload + encode_meta('Title', 'Rules')
        assert decode_payload(full, 4)['solution'] is None
        assert read_metadata(full) == {'title': 'Title', 'rules': 'Rules'}
        assert strip_metadata(full) == payload
        assert find_meta_segment(payload) is None
        assert read_metadata(payload) is None

    def test_async_encoding(self):
        segment = asyncio.run(encode_meta_async('Async', 'Rules'))
        assert decode_meta(segment) == {'title': 'Async', 'rules': 'Rules'}
