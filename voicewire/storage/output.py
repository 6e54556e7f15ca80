from __future__ import annotations
import base64, json, os
from typing import Any, Iterable

import numpy as np

FORMATS = ("npy", "f32", "json")

def atomic_write_bytes(path: str, data: bytes):
    tmp = f"{path}.tmp"
    with open(tmp, "wb") as f:
        f.write(data)
    os.replace(tmp, path)

def atomic_write_json(path: str, obj: Any):
    tmp = f"{path}.tmp"
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False)
    os.replace(tmp, path)

def write_samples(path: str, samples: np.ndarray, fmt: str = "npy"):
    """
    Write a float32 sample buffer.
    npy  -> numpy .npy file
    f32  -> raw little-endian float32, no header
    json -> flat JSON list of floats
    """
    samples = np.asarray(samples, dtype=np.float32)
    if fmt == "npy":
        tmp = f"{path}.tmp"
        with open(tmp, "wb") as f:
            np.save(f, samples)
        os.replace(tmp, path)
    elif fmt == "f32":
        atomic_write_bytes(path, samples.astype("<f4").tobytes())
    elif fmt == "json":
        atomic_write_json(path, samples.tolist())
    else:
        raise ValueError(f"unknown output format: {fmt!r} (expected one of {', '.join(FORMATS)})")

def write_packets(path: str, packets: Iterable[bytes]):
    # same shape the service uses on the wire: list of base64 strings
    atomic_write_json(path, [base64.b64encode(p).decode("ascii") for p in packets])

def read_packets(path: str) -> list[bytes]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list of base64 packets")
    return [base64.b64decode(p) for p in data]

def default_output(src: str, suffix: str, out_dir: str = "") -> str:
    stem = os.path.splitext(os.path.basename(src))[0]
    base = out_dir or os.path.dirname(os.path.abspath(src))
    return os.path.join(base, stem + suffix)
