"""End-to-end tests for WAV bytes -> 24 kHz mono float32."""

import numpy as np
import pytest

from conftest import build_wav, pcm16
from voicewire.audio.errors import MalformedContainer, MissingDataChunk, UnsupportedFormat, WavReadError
from voicewire.audio.pipeline import decode, read_wav_file


def test_mono_24k_pcm16():
    out = decode(build_wav(pcm16([0, 16384, -16384, 32767])))
    assert out.dtype == np.float32
    np.testing.assert_array_equal(out, np.array([0.0, 0.5, -0.5, 32767 / 32768], dtype=np.float32))


@pytest.mark.parametrize("bits,payload", [
    (8, bytes(range(0, 250, 10))),
    (16, pcm16(range(-500, 500, 40))),
    (24, b"\x01\x02\x03" * 25),
    (32, np.arange(25, dtype="<i4").tobytes()),
])
def test_identity_at_target_rate_keeps_length(bits, payload):
    out = decode(build_wav(payload, bits=bits, rate=24000))
    assert out.size == len(payload) // (bits // 8)


def test_stereo_downmix_at_target_rate():
    out = decode(build_wav(pcm16([1000, -1000, 2000, -2000]), channels=2))
    assert out.tolist() == [0.0, 0.0]


def test_mono_48k_is_halved():
    out = decode(build_wav(pcm16([0, 8000, 16000, 24000]), rate=48000))
    assert out.tolist() == [0.0, np.float32(16000 / 32768)]


def test_mono_non_target_rate_is_resampled():
    # mono input is not exempt from resampling
    out = decode(build_wav(pcm16([0] * 1000), rate=44100))
    # 1000 / (44100 / 24000) = 544.2
    assert out.size == 544


def test_stereo_48k_downmixes_then_resamples():
    frames = [(100, 300), (200, 400), (300, 500), (400, 600)]
    data = build_wav(pcm16([v for f in frames for v in f]), channels=2, rate=48000)
    out = decode(data)
    assert out.size == 2
    np.testing.assert_allclose(out, [200 / 32768, 400 / 32768], rtol=1e-6)


def test_float_wav_passthrough():
    vals = np.array([1.5, -2.0, 0.125], dtype="<f4")
    out = decode(build_wav(vals.tobytes(), fmt_code=3, bits=32))
    np.testing.assert_array_equal(out, vals)


def test_same_bytes_same_output():
    data = build_wav(pcm16(np.arange(-3000, 3000, 6)), channels=2, rate=44100)
    a = decode(data)
    b = decode(data)
    assert a.tobytes() == b.tobytes()


@pytest.mark.parametrize("data,exc", [
    (b"RIFX" + build_wav(pcm16([0]))[4:], MalformedContainer),
    (build_wav(b"", with_data=False), MissingDataChunk),
    (build_wav(b"\x00" * 4, fmt_code=2), UnsupportedFormat),
])
def test_errors_propagate(data, exc):
    with pytest.raises(exc):
        decode(data)


def test_read_wav_file(wav_file):
    path = wav_file(build_wav(pcm16([0, 16384]), rate=12000))
    out = read_wav_file(str(path))
    assert out.tolist() == [0.0, 0.25, 0.5, 0.5]


def test_read_wav_file_missing(tmp_path):
    with pytest.raises(WavReadError) as ei:
        read_wav_file(str(tmp_path / "nope.wav"))
    assert isinstance(ei.value.__cause__, OSError)
