from __future__ import annotations

import logging

import numpy as np

logger = logging.getLogger("voicewire")

TARGET_SR = 24000


def resample_to_24k(x: np.ndarray, sr_in: int) -> np.ndarray:
    """
    Linear-interpolation resample of a mono buffer to 24 kHz.

    Output length is floor(len(x) / (sr_in / 24000)). The right-hand
    neighbour is clamped to the last input sample.
    """
    if sr_in == TARGET_SR:
        return x
    ratio = sr_in / float(TARGET_SR)
    n_in = len(x)
    n_out = int(n_in / ratio)
    logger.debug("resample %d Hz -> %d Hz: %d -> %d samples", sr_in, TARGET_SR, n_in, n_out)
    if n_out <= 0:
        return np.zeros(0, dtype=np.float32)

    pos = np.arange(n_out, dtype=np.float64) * ratio
    pos0 = np.floor(pos).astype(np.int64)
    pos1 = np.minimum(pos0 + 1, n_in - 1)
    frac = pos - pos0
    src = x.astype(np.float64, copy=False)
    y = (1.0 - frac) * src[pos0] + frac * src[pos1]
    return y.astype(np.float32)
