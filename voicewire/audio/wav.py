from __future__ import annotations

import enum
import logging
import struct
from dataclasses import dataclass

from .errors import MalformedContainer, MissingDataChunk, TruncatedData, UnsupportedFormat

logger = logging.getLogger("voicewire")

RIFF = b"RIFF"
WAVE = b"WAVE"
FMT = b"fmt "
DATA = b"data"

_FMT_CODE = struct.Struct("<h")
# channels, sampleRate, byteRate, blockAlign, bitsPerSample
_FMT_BODY = struct.Struct("<hiihh")
_FMT_MIN_SIZE = 16
_U32 = struct.Struct("<I")


class Codec(enum.IntEnum):
    PCM = 1
    IEEE_FLOAT = 3


@dataclass(frozen=True)
class FormatDescriptor:
    codec: Codec
    channels: int
    sample_rate: int
    bits_per_sample: int

    @property
    def bytes_per_sample(self) -> int:
        return self.bits_per_sample // 8

    @property
    def block_align(self) -> int:
        return self.bytes_per_sample * self.channels


@dataclass(frozen=True)
class ChunkHeader:
    id: bytes
    size: int


@dataclass(frozen=True)
class DataSpan:
    """Byte extent of the ``data`` chunk inside the file buffer."""
    offset: int
    length: int

    def view(self, data) -> memoryview:
        return memoryview(data)[self.offset:self.offset + self.length]


class ByteCursor:
    """
    Little-endian reader over an in-memory buffer.

    Every read is checked against the remaining length and raises
    TruncatedData instead of returning short.
    """

    def __init__(self, data):
        self._buf = memoryview(data)
        self.pos = 0

    @property
    def remaining(self) -> int:
        return len(self._buf) - self.pos

    def _need(self, n: int, what: str):
        if n < 0 or n > self.remaining:
            raise TruncatedData(
                f"{what}: need {n} bytes at offset {self.pos}, only {self.remaining} left"
            )

    def read(self, n: int, what: str = "read") -> bytes:
        self._need(n, what)
        out = bytes(self._buf[self.pos:self.pos + n])
        self.pos += n
        return out

    def skip(self, n: int, what: str = "skip"):
        self._need(n, what)
        self.pos += n

    def unpack(self, st: struct.Struct, what: str = "field") -> tuple:
        self._need(st.size, what)
        vals = st.unpack_from(self._buf, self.pos)
        self.pos += st.size
        return vals

    def read_u32(self, what: str = "u32") -> int:
        return self.unpack(_U32, what)[0]

    def read_chunk_header(self) -> ChunkHeader:
        cid = self.read(4, "chunk id")
        return ChunkHeader(id=cid, size=self.read_u32("chunk size"))


def _expect_tag(cur: ByteCursor, tag: bytes):
    got = cur.read(4, f"{tag!r} tag")
    if got != tag:
        raise MalformedContainer(f"expected {tag!r} at offset {cur.pos - 4}, found {got!r}")


def parse_format(cur: ByteCursor) -> FormatDescriptor:
    """Read the ``fmt `` chunk body (cursor sits just after its tag)."""
    fmt_size = cur.read_u32("fmt size")
    if fmt_size < _FMT_MIN_SIZE:
        raise MalformedContainer(f"fmt chunk too small: {fmt_size} bytes")

    audio_format = cur.unpack(_FMT_CODE, "audio format")[0]
    if audio_format not in (Codec.PCM, Codec.IEEE_FLOAT):
        raise UnsupportedFormat(
            f"only PCM (1) or IEEE float (3) WAV is supported, found format {audio_format}"
        )
    channels, sample_rate, _byte_rate, _block_align, bits = cur.unpack(_FMT_BODY, "fmt chunk")
    if channels < 1:
        raise MalformedContainer(f"invalid channel count: {channels}")
    if sample_rate <= 0:
        raise MalformedContainer(f"invalid sample rate: {sample_rate}")

    # extension fields (cbSize etc.) are not interpreted
    if fmt_size > _FMT_MIN_SIZE:
        cur.skip(fmt_size - _FMT_MIN_SIZE, "fmt extension")

    return FormatDescriptor(
        codec=Codec(audio_format),
        channels=channels,
        sample_rate=sample_rate,
        bits_per_sample=bits,
    )


def find_data_chunk(cur: ByteCursor) -> DataSpan:
    while cur.remaining > 0:
        hdr = cur.read_chunk_header()
        if hdr.id == DATA:
            if hdr.size > cur.remaining:
                raise TruncatedData(
                    f"data chunk declares {hdr.size} bytes, only {cur.remaining} present"
                )
            return DataSpan(offset=cur.pos, length=hdr.size)
        if hdr.size >= cur.remaining:
            break
        logger.debug("skipping %r chunk (%d bytes)", hdr.id, hdr.size)
        cur.skip(hdr.size)
    raise MissingDataChunk("data chunk not found in WAV file")


def parse_container(data) -> tuple[FormatDescriptor, DataSpan]:
    """
    Walk the RIFF/WAVE structure of `data`.
    Returns the format descriptor and the extent of the data chunk.
    """
    cur = ByteCursor(data)
    _expect_tag(cur, RIFF)
    cur.skip(4, "RIFF size")  # not checked against the real length
    _expect_tag(cur, WAVE)
    _expect_tag(cur, FMT)
    fmt = parse_format(cur)
    span = find_data_chunk(cur)
    logger.debug(
        "wav: codec=%s ch=%d sr=%d bits=%d data=%d bytes @%d",
        fmt.codec.name, fmt.channels, fmt.sample_rate, fmt.bits_per_sample,
        span.length, span.offset,
    )
    return fmt, span
