"""Tests for sample/packet output files."""

import json
import os

import numpy as np
import pytest

from voicewire.storage.output import default_output, read_packets, write_packets, write_samples

SAMPLES = np.array([0.0, 0.5, -0.25], dtype=np.float32)


def test_write_npy(tmp_path):
    p = str(tmp_path / "o.npy")
    write_samples(p, SAMPLES, "npy")
    np.testing.assert_array_equal(np.load(p), SAMPLES)
    assert not os.path.exists(p + ".tmp")


def test_write_f32(tmp_path):
    p = tmp_path / "o.f32"
    write_samples(str(p), SAMPLES, "f32")
    assert p.read_bytes() == SAMPLES.astype("<f4").tobytes()


def test_write_json(tmp_path):
    p = tmp_path / "o.json"
    write_samples(str(p), SAMPLES, "json")
    assert json.loads(p.read_text()) == [0.0, 0.5, -0.25]


def test_unknown_format(tmp_path):
    with pytest.raises(ValueError):
        write_samples(str(tmp_path / "o"), SAMPLES, "wav")


def test_packets_file(tmp_path):
    p = str(tmp_path / "p.json")
    write_packets(p, [b"\x00\x01", b""])
    assert read_packets(p) == [b"\x00\x01", b""]


def test_packets_file_must_be_list(tmp_path):
    p = tmp_path / "p.json"
    p.write_text('{"a": 1}')
    with pytest.raises(ValueError):
        read_packets(str(p))


def test_default_output(tmp_path):
    src = str(tmp_path / "voice.wav")
    assert default_output(src, ".24k.npy") == str(tmp_path / "voice.24k.npy")
    assert default_output(src, ".wav", "/out") == os.path.join("/out", "voice.wav")
