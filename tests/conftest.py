import struct

import numpy as np
import pytest


def build_wav(payload: bytes, *, fmt_code=1, channels=1, rate=24000, bits=16,
              fmt_extra=b"", chunks_before=(), with_data=True):
    """Assemble a RIFF/WAVE byte string by hand."""
    block = channels * (bits // 8)
    fmt_body = struct.pack("<hhiihh", fmt_code, channels, rate, rate * block, block, bits)
    fmt_body += fmt_extra
    body = b"WAVE" + b"fmt " + struct.pack("<I", len(fmt_body)) + fmt_body
    for cid, cdata in chunks_before:
        body += cid + struct.pack("<I", len(cdata)) + cdata
    if with_data:
        body += b"data" + struct.pack("<I", len(payload)) + payload
    return b"RIFF" + struct.pack("<I", len(body)) + body


def pcm16(values) -> bytes:
    return np.asarray(values, dtype="<i2").tobytes()


@pytest.fixture
def wav_file(tmp_path):
    def _write(data: bytes, name="in.wav"):
        p = tmp_path / name
        p.write_bytes(data)
        return p
    return _write
