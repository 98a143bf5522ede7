"""Tests for sidecar path derivation and file access."""

import tempfile
import unittest
from pathlib import Path

from plainrsa.crypto.errors import InvalidArgument
from plainrsa.crypto.numeric import from_decimal
from plainrsa.files.sidecar import SIGNED_MARKER, SidecarFiles, signed_path


class TestSignedPath(unittest.TestCase):

    def test_marker_before_extension(self):
        self.assertEqual(signed_path("doc.txt"), Path("docSigned.txt"))

    def test_last_dot_wins(self):
        self.assertEqual(signed_path("archive.tar.gz"), Path("archive.tarSigned.gz"))

    def test_directory_untouched(self):
        self.assertEqual(signed_path(Path("data.v1") / "doc.txt"), Path("data.v1") / "docSigned.txt")

    def test_name_without_dot_rejected(self):
        with self.assertRaises(InvalidArgument):
            signed_path("README")
        with self.assertRaises(InvalidArgument):
            signed_path(Path("data.v1") / "README")

    def test_marker_constant(self):
        self.assertEqual(SIGNED_MARKER, "Signed")


class TestSidecarFiles(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.files = SidecarFiles()

    def tearDown(self):
        self._tmp.cleanup()

    def test_write_then_read(self):
        message = self.root / "doc.txt"
        message.write_bytes(b"\x00\x01binary\xff")
        out = self.files.write_signature(message, 12345)
        self.assertEqual(out, self.root / "docSigned.txt")
        self.assertEqual(out.read_bytes(), b"12345")
        self.assertEqual(self.files.read_signature(message), "12345")
        self.assertEqual(self.files.read_message(message), b"\x00\x01binary\xff")

    def test_overwrite_truncates(self):
        message = self.root / "doc.txt"
        self.files.write_signature(message, 10**30)
        self.files.write_signature(message, 7)
        self.assertEqual(self.files.read_signature(message), "7")

    def test_missing_files_propagate(self):
        with self.assertRaises(FileNotFoundError):
            self.files.read_message(self.root / "missing.txt")
        with self.assertRaises(FileNotFoundError):
            self.files.read_signature(self.root / "missing.txt")

    def test_long_signature_round_trip(self):
        message = self.root / "doc.txt"
        value = 7**9000
        out = self.files.write_signature(message, value)
        self.assertGreater(out.stat().st_size, 4300)
        self.assertEqual(from_decimal(self.files.read_signature(message)), value)

    def test_undecodable_sidecar_is_replaced(self):
        message = self.root / "doc.txt"
        (self.root / "docSigned.txt").write_bytes(b"\xff\xfe12")
        text = self.files.read_signature(message)
        self.assertEqual(text, "\ufffd\ufffd12")


if __name__ == "__main__":
    unittest.main()
