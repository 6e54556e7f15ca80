from __future__ import annotations

import logging
import os

import numpy as np

from .decode import decode_samples
from .errors import WavReadError
from .mix import downmix
from .resample import resample_to_24k
from .wav import parse_container

logger = logging.getLogger("voicewire")


def decode(file_bytes: bytes) -> np.ndarray:
    """
    Full WAV -> 24 kHz mono float32 conversion of an in-memory file.

    Pure function of the input bytes; raises a WavError subclass on the
    first problem found.
    """
    fmt, span = parse_container(file_bytes)
    samples = decode_samples(file_bytes, fmt, span)
    mono = downmix(samples, fmt.channels)
    # resample decision depends on the rate only, never on channel count
    return resample_to_24k(mono, fmt.sample_rate)


def read_wav_file(path: str) -> np.ndarray:
    """Read `path` fully into memory and run it through `decode`."""
    try:
        with open(os.fspath(path), "rb") as f:
            data = f.read()
    except OSError as e:
        raise WavReadError(f"failed to read {path}: {e}") from e
    logger.debug("read %d bytes from %s", len(data), path)
    return decode(data)
