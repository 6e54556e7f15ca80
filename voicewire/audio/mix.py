from __future__ import annotations

import numpy as np


def downmix(x: np.ndarray, channels: int) -> np.ndarray:
    """Average interleaved channels down to one sample per frame."""
    if channels == 1:
        return x
    frames = x.reshape(-1, channels)
    return frames.mean(axis=1, dtype=np.float32)
