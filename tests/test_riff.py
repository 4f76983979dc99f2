"""
Tests for the bounds-checked chunk reader.
"""

import struct
import unittest

from akpconv.errors import UnexpectedEof
from akpconv.riff import ChunkReader, iter_chunks, read_chunk_header

from akp_builder import make_chunk


class TestChunkReader(unittest.TestCase):
    def test_little_endian_reads(self):
        reader = ChunkReader(b"\x01\xff" + struct.pack("<H", 0x1234) + struct.pack("<I", 0xDEADBEEF))
        self.assertEqual(reader.read_u8(), 1)
        self.assertEqual(reader.read_i8(), -1)
        self.assertEqual(reader.read_u16(), 0x1234)
        self.assertEqual(reader.read_u32(), 0xDEADBEEF)
        self.assertEqual(reader.remaining(), 0)

    def test_short_read_raises(self):
        reader = ChunkReader(b"\x01\x02\x03", base_offset=10)
        reader.read_u8()
        with self.assertRaises(UnexpectedEof) as ctx:
            reader.read_u32()
        self.assertEqual(ctx.exception.offset, 11)
        self.assertEqual(ctx.exception.wanted, 4)
        self.assertEqual(ctx.exception.available, 2)
        # A failed read does not move the cursor
        self.assertEqual(reader.tell(), 1)

    def test_unexpected_eof_is_an_eof_error(self):
        with self.assertRaises(EOFError):
            ChunkReader(b"").read_u8()

    def test_seek_bounds(self):
        reader = ChunkReader(b"abcd")
        reader.seek(4)
        self.assertEqual(reader.remaining(), 0)
        with self.assertRaises(UnexpectedEof):
            reader.seek(5)
        with self.assertRaises(UnexpectedEof):
            reader.seek(-1)

    def test_sub_reader_is_bounded_and_keeps_offsets(self):
        reader = ChunkReader(b"xxabcdyy", base_offset=100)
        reader.read_bytes(2)
        sub = reader.sub_reader(4)
        self.assertEqual(len(sub), 4)
        self.assertEqual(sub.base_offset, 102)
        self.assertEqual(sub.read_tag(), b"abcd")
        with self.assertRaises(UnexpectedEof):
            sub.read_u8()
        self.assertEqual(reader.read_bytes(2), b"yy")


class TestIterChunks(unittest.TestCase):
    def test_read_chunk_header(self):
        tag, size = read_chunk_header(ChunkReader(make_chunk(b"zone", b"\x00" * 5)))
        self.assertEqual(tag, b"zone")
        self.assertEqual(size, 5)

    def test_walks_consecutive_chunks(self):
        data = make_chunk(b"zone", b"\x00\x01\x02") + make_chunk(b"tune", b"") + make_chunk(b"abcd", b"\x09")
        chunks = list(iter_chunks(ChunkReader(data)))
        self.assertEqual([c.tag for c in chunks], [b"zone", b"tune", b"abcd"])
        self.assertEqual([c.offset for c in chunks], [0, 11, 19])
        self.assertEqual([c.size for c in chunks], [3, 0, 1])
        self.assertEqual(chunks[2].name, "abcd")

    def test_consumer_reading_part_of_payload_does_not_desync(self):
        data = make_chunk(b"aaaa", b"\x01\x02\x03\x04") + make_chunk(b"bbbb", b"\x05")
        tags = []
        for chunk in iter_chunks(ChunkReader(data)):
            tags.append(chunk.tag)
            chunk.payload.read_u8()
        self.assertEqual(tags, [b"aaaa", b"bbbb"])

    def test_declared_size_past_end_raises(self):
        data = b"zone" + struct.pack("<I", 50) + b"\x00" * 5
        with self.assertRaises(UnexpectedEof):
            list(iter_chunks(ChunkReader(data)))

    def test_truncated_header_raises(self):
        with self.assertRaises(UnexpectedEof):
            list(iter_chunks(ChunkReader(b"zone\x01\x00")))


if __name__ == "__main__":
    unittest.main()
