import pytest

from aemt.audio import (
    BOTTOM_DELIMITER,
    UPPER_DELIMITER,
    AdpcmState,
    decode_adpcm,
    split_audio_pack,
)
from aemt.errors import InvalidLengthError, OutOfBoundsError

NIBBLES = [1, 2, -1, 7, -8, 0, 3, -3, 5, -5, 4, -4, 6, -6,
           0, 1, -2, 2, 7, -7, 3, 3, -1, 1, 0, 0, 5, -8]


def _pack_nibbles(nibbles):
    out = bytearray()
    for low, high in zip(nibbles[0::2], nibbles[1::2]):
        out.append((low & 0xF) | ((high & 0xF) << 4))
    return bytes(out)


def _frame(header, flag, nibbles):
    return bytes([header, flag]) + _pack_nibbles(nibbles)


def test_silent_frame_decodes_to_zeros():
    state = AdpcmState()
    pcm = decode_adpcm(state, bytes(16))
    assert pcm == [0] * 28
    assert (state.history1, state.history2) == (0, 0)


def test_coef_zero_shift_twelve_yields_raw_nibbles():
    state = AdpcmState()
    pcm = decode_adpcm(state, _frame(0x0C, 0, NIBBLES))
    assert pcm == NIBBLES
    assert state.history1 == NIBBLES[-1]
    assert state.history2 == NIBBLES[-2]


def test_flag_seven_silences_and_resets_history():
    state = AdpcmState(history1=1000, history2=-500)
    pcm = decode_adpcm(state, _frame(0x1C, 7, NIBBLES))
    assert pcm == [0] * 28
    assert (state.history1, state.history2) == (0, 0)


def test_badflags_ignores_flag_byte():
    plain = decode_adpcm(AdpcmState(), _frame(0x0C, 0, NIBBLES))
    bad = decode_adpcm(AdpcmState(), _frame(0x0C, 7, NIBBLES), is_badflags=True)
    assert bad == plain


def test_output_is_clamped_to_16_bits():
    state = AdpcmState(history1=1_000_000, history2=0)
    pcm = decode_adpcm(state, _frame(0x1C, 0, [0] * 28))
    assert pcm[0] == 32767
    assert state.history2 > 32767
    assert all(-32768 <= s <= 32767 for s in pcm)


def test_invalid_coef_index_falls_back_to_zero():
    a = decode_adpcm(AdpcmState(300, -200), _frame(0x6C, 0, NIBBLES))
    b = decode_adpcm(AdpcmState(300, -200), _frame(0x0C, 0, NIBBLES))
    assert a == b


def test_extended_mode_uses_extended_coefs():
    a = decode_adpcm(AdpcmState(3000, -2000), _frame(0x6C, 0, NIBBLES), config=1)
    b = decode_adpcm(AdpcmState(3000, -2000), _frame(0x0C, 0, NIBBLES), config=1)
    assert a != b
    assert a[1:] != b[1:]


def test_invalid_shift_falls_back_to_nine():
    a = decode_adpcm(AdpcmState(), _frame(0x2D, 0, NIBBLES))
    b = decode_adpcm(AdpcmState(), _frame(0x29, 0, NIBBLES))
    assert a == b


def test_history_carries_across_frames():
    frame = _frame(0x1C, 0, NIBBLES)
    state = AdpcmState()
    first = decode_adpcm(state, frame)
    second = decode_adpcm(state, frame)
    fresh = decode_adpcm(AdpcmState(), frame)
    assert first == fresh
    assert second != first


def test_zero_spacing_keeps_last_sample_in_first_slot():
    frame = _frame(0x0C, 0, NIBBLES)
    pcm = decode_adpcm(AdpcmState(), frame, channel_spacing=0)
    assert pcm[0] == NIBBLES[-1]
    assert pcm[1:] == [0] * 27


def test_wide_spacing_overflows():
    with pytest.raises(OutOfBoundsError):
        decode_adpcm(AdpcmState(), _frame(0x0C, 0, NIBBLES), channel_spacing=2)


@pytest.mark.parametrize("size", [0, 15, 17])
def test_wrong_frame_size(size):
    with pytest.raises(InvalidLengthError):
        decode_adpcm(AdpcmState(), bytes(size))


def test_split_empty_pack():
    assert split_audio_pack(b"") == []


def test_split_single_track():
    body = UPPER_DELIMITER + b"\x12\x34" * 16
    assert split_audio_pack(body + BOTTOM_DELIMITER) == [body]


def test_split_two_tracks():
    first = UPPER_DELIMITER + b"\x11" * 32
    second = UPPER_DELIMITER + b"\x22" * 48
    pack = first + BOTTOM_DELIMITER + second + BOTTOM_DELIMITER
    assert split_audio_pack(pack) == [first, second]


def test_split_track_without_end_runs_to_end():
    body = UPPER_DELIMITER + b"\x33" * 20
    tracks = split_audio_pack(body)
    assert tracks == [body]


def test_split_tracks_start_with_upper_delimiter():
    pack = (b"\x55" * 8 + UPPER_DELIMITER + b"\x01" * 40 + BOTTOM_DELIMITER) * 3
    tracks = split_audio_pack(pack)
    assert tracks
    assert all(t.startswith(UPPER_DELIMITER) for t in tracks)
    assert all(BOTTOM_DELIMITER not in t for t in tracks)


def test_split_without_delimiter():
    assert split_audio_pack(b"\x77" * 64) == []