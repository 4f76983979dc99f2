# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
RIFF (Resource Interchange File Format) reading utilities.
Provides a bounds-checked cursor over an in-memory buffer and helpers to walk
the tagged, length-prefixed chunks stored in it.
"""

import struct
from dataclasses import dataclass
from typing import Iterator

from .errors import UnexpectedEof


class ChunkReader:
    """
    A little-endian cursor over a byte buffer.

    Every read goes through _take(), which raises UnexpectedEof instead of
    returning short data, so nothing built on top of the reader can read out
    of bounds.
    """

    def __init__(self, data: bytes, base_offset: int = 0):
        """
        Args:
            data: The bytes to read.
            base_offset: Absolute offset of data[0] in the original file, used
                only for diagnostics.
        """
        self._data = bytes(data)
        self._pos = 0
        self.base_offset = base_offset

    def __len__(self) -> int:
        return len(self._data)

    def tell(self) -> int:
        return self._pos

    def absolute(self) -> int:
        """
        Current position as an offset in the original file.
        """
        return self.base_offset + self._pos

    def remaining(self) -> int:
        return len(self._data) - self._pos

    def seek(self, offset: int) -> None:
        """
        Moves the cursor to an absolute offset within the buffer.
        """
        if not 0 <= offset <= len(self._data):
            raise UnexpectedEof(self.base_offset + offset, 0, len(self._data))
        self._pos = offset

    def _take(self, size: int) -> bytes:
        if size < 0 or size > self.remaining():
            raise UnexpectedEof(self.absolute(), size, self.remaining())
        chunk = self._data[self._pos:self._pos + size]
        self._pos += size
        return chunk

    def read_bytes(self, size: int) -> bytes:
        return self._take(size)

    def read_tag(self) -> bytes:
        return self._take(4)

    def read_u8(self) -> int:
        return self._take(1)[0]

    def read_i8(self) -> int:
        return struct.unpack("<b", self._take(1))[0]

    def read_u16(self) -> int:
        return struct.unpack("<H", self._take(2))[0]

    def read_u32(self) -> int:
        return struct.unpack("<I", self._take(4))[0]

    def sub_reader(self, size: int) -> "ChunkReader":
        """
        Consumes `size` bytes and returns a new reader bounded to them.
        """
        offset = self.absolute()
        return ChunkReader(self._take(size), base_offset=offset)


@dataclass(frozen=True)
class Chunk:
    """
    One chunk as found in the stream.

    offset is the absolute file offset of the chunk header.
    """
    tag: bytes
    offset: int
    payload: ChunkReader

    @property
    def size(self) -> int:
        return len(self.payload)

    @property
    def name(self) -> str:
        return self.tag.decode("latin-1")


def read_chunk_header(reader: ChunkReader) -> tuple[bytes, int]:
    """
    Reads a RIFF chunk header (ID and size).

    Args:
        reader: The reader positioned at a chunk header.

    Returns:
        A tuple containing the chunk ID (bytes) and payload size (int).
    """
    chunk_id = reader.read_tag()
    chunk_size = reader.read_u32()
    return chunk_id, chunk_size


def iter_chunks(reader: ChunkReader) -> Iterator[Chunk]:
    """
    Yields consecutive chunks until the reader is exhausted.

    The payload of each chunk is cut out by its declared size, so the reader
    always resumes right after the chunk no matter how much of the payload
    the consumer actually looks at. A declared size running past the end of
    the reader raises UnexpectedEof.
    """
    while reader.remaining() > 0:
        offset = reader.absolute()
        chunk_id, chunk_size = read_chunk_header(reader)
        yield Chunk(chunk_id, offset, reader.sub_reader(chunk_size))
