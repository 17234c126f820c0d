"""Convert between 8-bit mono AIFF sounds and GBA sample blobs."""

from __future__ import annotations

import math
import struct
import sys
from dataclasses import dataclass

from agbtools.delta import delta_compress, delta_decompress
from agbtools.extended import read_extended, write_extended
from agbtools.util import (
    ToolError,
    get_file_extension,
    read_whole_file,
    write_whole_file,
)

LOOP_FLAG = 0x40000000
COMPRESSED_FLAG = 1
DEFAULT_BASE_NOTE = 60

USAGE = (
    "Usage: aif2pcm bin_file [aif_file]\n"
    "       aif2pcm aif_file [bin_file] [--compress]"
)

_HEADER = struct.Struct("<IIII")
_U32_MASK = 0xFFFFFFFF


@dataclass
class AifData:
    """The parts of an AIFF file needed to build a GBA sample."""

    samples: bytes = b""
    num_samples: int = 0
    midi_note: int = 0
    has_loop: bool = False
    loop_offset: int = 0
    sample_rate: float = 0.0


class _Cursor:
    """Sequential big-endian reader over a byte string."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.pos = 0

    def take(self, count: int) -> bytes:
        end = self.pos + count
        if count < 0 or end > len(self.data):
            raise ToolError("Unexpected end of .aif data.")
        chunk = self.data[self.pos:end]
        self.pos = end
        return chunk

    def skip(self, count: int) -> None:
        self.pos += count

    def u8(self) -> int:
        return self.take(1)[0]

    def u16(self) -> int:
        return struct.unpack(">H", self.take(2))[0]

    def s16(self) -> int:
        return struct.unpack(">h", self.take(2))[0]

    def u32(self) -> int:
        return struct.unpack(">I", self.take(4))[0]


def _name(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("latin-1")


def _read_comm(cursor: _Cursor, aif: AifData) -> None:
    num_channels = cursor.s16()
    if num_channels != 1:
        raise ToolError(f"numChannels ({num_channels}) in the COMM Chunk must be 1!")
    num_sample_frames = cursor.u32()
    sample_size = cursor.s16()
    if sample_size != 8:
        raise ToolError(f"sampleSize ({sample_size}) in the COMM Chunk must be 8!")
    aif.sample_rate = read_extended(cursor.take(10))
    if aif.num_samples == 0:
        aif.num_samples = num_sample_frames


def _read_mark(cursor: _Cursor, aif: AifData) -> None:
    for _ in range(cursor.u16()):
        cursor.u16()  # marker id
        position = cursor.u32()
        marker_name = _name(cursor.take(cursor.u8()))
        if marker_name == "START":
            aif.loop_offset = position
            aif.has_loop = True
        elif marker_name == "END":
            if not aif.has_loop:
                aif.loop_offset = position
                aif.has_loop = True
            aif.num_samples = position


def read_aif(data: bytes) -> AifData:
    """Parse an 8-bit mono AIFF file."""
    data = bytes(data)
    cursor = _Cursor(data)

    header = _name(cursor.take(4))
    if header != "FORM":
        raise ToolError(f"Input .aif file has invalid header Chunk '{header}'!")

    whole_size = cursor.u32()
    expected_size = len(data) - 8
    if whole_size != expected_size:
        raise ToolError(
            f"FORM Chunk ckSize '{whole_size}' doesn't match actual size '{expected_size}'!"
        )

    form_type = _name(cursor.take(4))
    if form_type != "AIFF":
        raise ToolError(f"FORM Type is '{form_type}', but it must be AIFF!")

    aif = AifData()
    while cursor.pos + 8 < len(data):
        chunk_name = _name(cursor.take(4))
        chunk_size = cursor.u32()
        if cursor.pos + chunk_size > len(data):
            raise ToolError(
                f"{chunk_name} chunk at 0x{cursor.pos:x} reached end of file before finishing"
            )

        if chunk_name == "COMM":
            _read_comm(cursor, aif)
        elif chunk_name == "MARK":
            _read_mark(cursor, aif)
        elif chunk_name == "INST":
            aif.midi_note = cursor.u8()
            cursor.skip(19)
        elif chunk_name == "SSND":
            if chunk_size < 8:
                raise ToolError(f"SSND chunk size ({chunk_size}) is too small.")
            cursor.skip(8)  # offset and blockSize
            aif.samples = cursor.take(chunk_size - 8)
        else:
            cursor.skip(chunk_size)

    return aif


def build_pcm(aif_data: AifData, compress: bool) -> bytes:
    """Build a GBA sample: a 16-byte header followed by the sample data."""
    if not math.isfinite(aif_data.sample_rate):
        raise ToolError(f"Invalid sample rate {aif_data.sample_rate}.")

    body = delta_compress(aif_data.samples) if compress else bytes(aif_data.samples)
    flags = (LOOP_FLAG if aif_data.has_loop else 0) | (COMPRESSED_FLAG if compress else 0)
    header = _HEADER.pack(
        flags,
        int(aif_data.sample_rate * 1024) & _U32_MASK,
        aif_data.loop_offset & _U32_MASK,
        (aif_data.num_samples - 1) & _U32_MASK,
    )
    return header + body


def _chunk(chunk_id: bytes, payload: bytes) -> bytes:
    return chunk_id + struct.pack(">I", len(payload)) + payload


def _pstring(text: bytes) -> bytes:
    return bytes([len(text)]) + text


def build_aif(pcm: bytes, base_note: int = DEFAULT_BASE_NOTE) -> bytes:
    """Build an AIFF file from a GBA sample."""
    pcm = bytes(pcm)
    if len(pcm) < _HEADER.size:
        raise ToolError("Sample data is too short for its 16-byte header.")

    flags, pitch_adjust, loop_offset, last_sample = _HEADER.unpack_from(pcm)
    has_loop = bool(flags & LOOP_FLAG)
    sample_rate = pitch_adjust / 1024.0
    num_samples = last_sample + 1

    body = pcm[_HEADER.size:]
    samples = delta_decompress(body, num_samples) if flags & COMPRESSED_FLAG else body

    chunks = [
        _chunk(
            b"COMM",
            struct.pack(">hIh", 1, num_samples & _U32_MASK, 8) + write_extended(sample_rate),
        )
    ]

    if has_loop:
        markers = (
            struct.pack(">HHI", 2, 1, loop_offset)
            + _pstring(b"START")
            + struct.pack(">HI", 2, num_samples & _U32_MASK)
            + _pstring(b"END")
        )
        chunks.append(_chunk(b"MARK", markers))

    instrument = bytes([base_note & 0xFF, 0, 0, 127, 1, 127, 0, 0])
    # Sustain and release loops: forward looping between markers 1 and 2.
    instrument += struct.pack(">6H", 1, 1, 2, 1, 1, 2)
    chunks.append(_chunk(b"INST", instrument))

    chunks.append(_chunk(b"SSND", struct.pack(">II", 0, 0) + samples))

    form = b"AIFF" + b"".join(chunks)
    return b"FORM" + struct.pack(">I", len(form)) + form


def aif_to_pcm(aif_path, pcm_path, compress: bool = False) -> None:
    """Convert an .aif file into a GBA sample file."""
    aif_data = read_aif(read_whole_file(aif_path))
    write_whole_file(pcm_path, build_pcm(aif_data, compress))


def pcm_to_aif(pcm_path, aif_path, base_note: int = DEFAULT_BASE_NOTE) -> None:
    """Convert a GBA sample file into an .aif file."""
    write_whole_file(aif_path, build_aif(read_whole_file(pcm_path), base_note))


def new_file_extension(filename: str, ext: str) -> str:
    """Replace the extension of ``filename`` with ``ext``, or append it."""
    index = filename.rfind(".")
    if index <= 0:
        index = len(filename)
    return f"{filename[:index]}.{ext}"


def main(argv=None) -> int:
    """Command-line entry point."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print(USAGE, file=sys.stderr)
        return 1

    input_file = args[0]
    extension = get_file_extension(input_file)
    compressed = "--compress" in args[2:]

    try:
        if extension in ("aif", "aiff"):
            output_file = args[1] if len(args) >= 2 else new_file_extension(input_file, "bin")
            aif_to_pcm(input_file, output_file, compressed)
        elif extension == "bin":
            output_file = args[1] if len(args) >= 2 else new_file_extension(input_file, "aif")
            pcm_to_aif(input_file, output_file, DEFAULT_BASE_NOTE)
        else:
            raise ToolError(f"Input file must be .aif or .bin: '{input_file}'")
    except ToolError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())