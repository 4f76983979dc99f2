"""
Tests for the akpconv command line.
"""

import contextlib
import io
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from akpconv.cli import main
from akpconv.model import Program

from akp_builder import encode_program, full_program, make_chunk, simple_keygroup


def _run(argv):
    out = io.StringIO()
    err = io.StringIO()
    with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
        code = main(argv)
    return code, out.getvalue(), err.getvalue()


class TestCli(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.good = encode_program(Program(keygroups=(simple_keygroup(),)))

    def tearDown(self):
        self._tmp.cleanup()

    def _write(self, name, data):
        path = self.tmp / name
        path.write_bytes(data)
        return path

    def test_convert_default_output(self):
        src = self._write("kick.akp", self.good)
        code, out, _ = _run(["convert", str(src)])
        self.assertEqual(code, 0)
        self.assertIn("Created:", out)
        self.assertIn("sample=kick.wav", (self.tmp / "kick.sfz").read_text(encoding="utf-8"))

    def test_convert_to_decent_sampler(self):
        src = self._write("kick.akp", self.good)
        dst = self.tmp / "presets" / "Kick.dspreset"
        code, _, _ = _run(["convert", str(src), str(dst), "-f", "ds"])
        self.assertEqual(code, 0)
        self.assertTrue(dst.read_text(encoding="utf-8").startswith("<?xml"))

    def test_convert_asks_before_overwriting(self):
        src = self._write("kick.akp", self.good)
        existing = self._write("kick.sfz", b"keep me")
        with mock.patch("builtins.input", return_value="n"):
            code, out, _ = _run(["convert", str(src)])
        self.assertEqual(code, 0)
        self.assertIn("cancelled", out)
        self.assertEqual(existing.read_bytes(), b"keep me")

    def test_convert_force_overwrites(self):
        src = self._write("kick.akp", self.good)
        existing = self._write("kick.sfz", b"old")
        code, _, _ = _run(["convert", str(src), "--force"])
        self.assertEqual(code, 0)
        self.assertNotEqual(existing.read_bytes(), b"old")

    def test_convert_invalid_file(self):
        src = self._write("bad.akp", b"NOPE" + b"\x00" * 20)
        code, _, err = _run(["convert", str(src)])
        self.assertEqual(code, 1)
        self.assertIn("Error:", err)
        self.assertIn("RIFF", err)
        self.assertFalse((self.tmp / "bad.sfz").exists())

    def test_convert_prints_warnings(self):
        data = encode_program(Program(keygroups=(simple_keygroup(),)), extra_chunks=make_chunk(b"xtra", b""))
        src = self._write("odd.akp", data)
        code, out, _ = _run(["convert", str(src)])
        self.assertEqual(code, 0)
        self.assertIn("Warning:", out)
        self.assertIn("xtra", out)

    def test_unknown_format_is_a_usage_error(self):
        src = self._write("kick.akp", self.good)
        with self.assertRaises(SystemExit) as ctx:
            _run(["convert", str(src), "-f", "wav"])
        self.assertEqual(ctx.exception.code, 2)

    def test_batch_directory(self):
        self._write("a.akp", self.good)
        self._write("b.akp", encode_program(full_program()))
        out_dir = self.tmp / "out"
        code, out, _ = _run(["batch", str(self.tmp), "-o", str(out_dir), "-f", "dspreset"])
        self.assertEqual(code, 0)
        self.assertEqual(sorted(p.name for p in out_dir.iterdir()), ["a.dspreset", "b.dspreset"])
        self.assertIn("Successful: 2", out)

    def test_batch_reports_failures(self):
        paths = [
            self._write("one.akp", self.good),
            self._write("two.akp", self.good[:30]),
            self._write("three.akp", self.good),
        ]
        code, out, _ = _run(["batch"] + [str(p) for p in paths] + ["-j", "2"])
        self.assertEqual(code, 1)
        self.assertIn("FAILED", out)
        self.assertIn("two.akp", out)
        self.assertIn("Successful: 2  Failed: 1  Total: 3", out)
        self.assertTrue((self.tmp / "one.sfz").exists())
        self.assertTrue((self.tmp / "three.sfz").exists())
        self.assertFalse((self.tmp / "two.sfz").exists())

    def test_batch_does_not_overwrite_without_force(self):
        src = self._write("a.akp", self.good)
        self._write("a.sfz", b"old")
        code, out, _ = _run(["batch", str(src)])
        self.assertEqual(code, 1)
        self.assertEqual((self.tmp / "a.sfz").read_bytes(), b"old")
        code, _, _ = _run(["batch", str(src), "--force"])
        self.assertEqual(code, 0)
        self.assertNotEqual((self.tmp / "a.sfz").read_bytes(), b"old")

    def test_batch_empty_directory(self):
        empty = self.tmp / "empty"
        empty.mkdir()
        code, out, _ = _run(["batch", str(empty)])
        self.assertEqual(code, 0)
        self.assertIn("No .akp files", out)

    def test_inspect(self):
        src = self._write("full.akp", encode_program(full_program()))
        code, out, _ = _run(["inspect", str(src)])
        self.assertEqual(code, 0)
        self.assertIn("'RIFF' / 'APRG'", out)
        self.assertIn("'kgrp'", out)
        self.assertIn("'zone'", out)
        self.assertIn("'env '", out)

    def test_inspect_rejects_non_akp(self):
        src = self._write("song.wav", b"RIFF\x04\x00\x00\x00WAVE")
        code, _, err = _run(["inspect", str(src)])
        self.assertEqual(code, 1)
        self.assertIn("APRG", err)


if __name__ == "__main__":
    unittest.main()
