from __future__ import annotations


class WavError(Exception):
    """Base class for everything the WAV pipeline raises."""


class MalformedContainer(WavError):
    """RIFF/WAVE/fmt magic missing or the fmt chunk is nonsensical."""


class UnsupportedFormat(WavError):
    """Codec or bit depth we don't decode."""


class MissingDataChunk(WavError):
    """Ran off the end of the file without seeing a ``data`` chunk."""


class TruncatedData(WavError):
    """A field or chunk extends past the end of the buffer."""


class WavReadError(WavError):
    """The file itself couldn't be read (open/permission/short read)."""
