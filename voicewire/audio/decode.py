from __future__ import annotations

import numpy as np

from .errors import TruncatedData, UnsupportedFormat
from .wav import Codec, DataSpan, FormatDescriptor

# full-scale divisor per PCM bit depth
PCM_SCALE = {
    8: 128.0,
    16: 32768.0,
    24: 8388608.0,
    32: 2147483648.0,
}


def _pcm24_to_int32(raw: np.ndarray) -> np.ndarray:
    """3-byte little-endian groups -> sign-extended int32."""
    b = raw.reshape(-1, 3).astype(np.int32)
    v = b[:, 0] | (b[:, 1] << 8) | (b[:, 2] << 16)
    # two's complement on bit 23
    return np.where(v & 0x800000, v - 0x1000000, v).astype(np.int32)


def _decode_pcm(raw: np.ndarray, bits: int) -> np.ndarray:
    if bits == 8:
        ints = raw.astype(np.int32) - 128
    elif bits == 16:
        ints = raw.view("<i2")
    elif bits == 24:
        ints = _pcm24_to_int32(raw)
    else:
        ints = raw.view("<i4")
    # float64 divide then a single rounding to float32
    return (ints.astype(np.float64) / PCM_SCALE[bits]).astype(np.float32)


def decode_samples(data, fmt: FormatDescriptor, span: DataSpan) -> np.ndarray:
    """
    Turn the data chunk bytes into interleaved float32 samples.

    PCM is normalised to [-1, 1) by bit depth; IEEE float values are passed
    through untouched (no clamping).
    """
    bits = fmt.bits_per_sample
    if fmt.codec == Codec.IEEE_FLOAT:
        if bits != 32:
            raise UnsupportedFormat(f"unsupported float bit depth: {bits}")
    elif bits not in PCM_SCALE:
        raise UnsupportedFormat(f"unsupported bit depth: {bits}")

    if span.length % fmt.block_align:
        raise TruncatedData(
            f"data chunk of {span.length} bytes is not a whole number of "
            f"{fmt.block_align}-byte frames"
        )

    raw = np.frombuffer(span.view(data), dtype=np.uint8)
    if fmt.codec == Codec.IEEE_FLOAT:
        return raw.view("<f4").astype(np.float32)
    return _decode_pcm(raw, bits)
