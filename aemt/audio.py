"""PS-ADPCM decoding and splitting of sound packs into tracks."""

import logging
import struct
from dataclasses import dataclass

from aemt.errors import InvalidLengthError, OutOfBoundsError

log = logging.getLogger(__name__)

FRAME_SIZE = 16
SAMPLES_PER_FRAME = 28

UPPER_DELIMITER = b"\x00" * 16
BOTTOM_DELIMITER = b"\x00\x07" + b"\x77" * 14

# PS-ADPCM filter coefficients; entries past the fifth appear only in a few titles.
PS_ADPCM_COEFS = (
    (0.0, 0.0),
    (0.9375, 0.0),
    (1.796875, -0.8125),
    (1.53125, -0.859375),
    (1.90625, -0.9375),
    (0.46875, -0.0),
    (0.8984375, -0.40625),
    (0.765625, -0.4296875),
    (0.953125, -0.46875),
    (0.234375, -0.0),
    (0.44921875, -0.203125),
    (0.3828125, -0.21484375),
    (0.4765625, -0.234375),
    (0.5, -0.9375),
    (0.234375, -0.9375),
    (0.109375, -0.9375),
)

_I16_MIN, _I16_MAX = -(1 << 15), (1 << 15) - 1
_I32_MIN, _I32_MAX = -(1 << 31), (1 << 31) - 1
_F32 = struct.Struct("<f")


@dataclass
class AdpcmState:
    """Decoder history carried from one frame to the next."""

    history1: int = 0
    history2: int = 0


def _f32(value: float) -> float:
    return _F32.unpack(_F32.pack(value))[0]


def _signed_nibble(nibble: int) -> int:
    return nibble - 16 if nibble > 7 else nibble


def _predict(coefs: tuple, hist1: int, hist2: int) -> int:
    total = _f32(
        _f32(_f32(coefs[0]) * _f32(float(hist1)))
        + _f32(_f32(coefs[1]) * _f32(float(hist2)))
    )
    scaled = int(_f32(total * 256.0))
    return max(_I32_MIN, min(_I32_MAX, scaled))


def decode_adpcm(
    state: AdpcmState,
    frame: bytes,
    channel_spacing: int = 1,
    is_badflags: bool = False,
    config: int = 0,
) -> list:
    """Decode one 16-byte frame into 28 PCM samples, updating ``state``."""
    if len(frame) != FRAME_SIZE:
        raise InvalidLengthError(f"ADPCM frame must be {FRAME_SIZE} bytes long")

    extended_mode = config == 1
    coef_index = (frame[0] >> 4) & 0xF
    shift = frame[0] & 0xF
    flag = 0 if is_badflags else frame[1]

    if not extended_mode:
        if coef_index > 5:
            log.warning("PS-ADPCM: incorrect coef_index %d", coef_index)
            coef_index = 0
        if shift > 12:
            log.warning("PS-ADPCM: incorrect shift_factor %d", shift)
            shift = 9
    if flag > 7:
        log.warning("PS-ADPCM: unknown flag %d", flag)

    shift = max(0, 20 - shift)
    coefs = PS_ADPCM_COEFS[coef_index]
    hist1, hist2 = state.history1, state.history2
    pcm = [0] * SAMPLES_PER_FRAME
    position = 0

    for i in range(SAMPLES_PER_FRAME):
        sample = 0
        if flag < 0x07:
            byte = frame[2 + i // 2]
            nibble = (byte >> 4) & 0xF if i & 1 else byte & 0xF
            sample = _signed_nibble(nibble) << shift
            sample += _predict(coefs, hist1, hist2)
            sample >>= 8

        if position >= SAMPLES_PER_FRAME:
            raise OutOfBoundsError()
        pcm[position] = max(_I16_MIN, min(_I16_MAX, sample))
        position += channel_spacing

        hist2, hist1 = hist1, sample

    state.history1, state.history2 = hist1, hist2
    return pcm


def split_audio_pack(pack: bytes) -> list:
    """Split a sound pack into the ADPCM tracks it holds."""
    pack = bytes(pack)
    tracks = []
    cursor = 0

    while (pos := pack.find(UPPER_DELIMITER, cursor)) != -1:
        bottom = pack.find(BOTTOM_DELIMITER, pos)
        end = bottom - pos if bottom != -1 else len(pack) - pos
        chunk = pack[pos:pos + end]
        if len(chunk) >= FRAME_SIZE:
            tracks.append(chunk)
        cursor += end

    return tracks