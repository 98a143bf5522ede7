"""Tests for the hash selections and their binding to a modulus."""

import hashlib
import unittest

from plainrsa.crypto.hashing import (
    ConfiguredHash,
    DefaultFallback,
    FallbackHash,
    ModularHash,
    bind_hash,
    digest,
)


class TestConfiguredHash(unittest.TestCase):

    def test_reduced_into_modulus(self):
        hf = bind_hash(ConfiguredHash("sha256"), 209)
        self.assertIsInstance(hf, ModularHash)
        for message in [b"", b"a", b"hello world", bytes(range(256))]:
            h = hf.digest(message)
            self.assertTrue(0 <= h < 209)

    def test_value_matches_hashlib(self):
        message = b"plain rsa"
        expected = int.from_bytes(hashlib.sha1(message).digest(), "big") % 1000003
        self.assertEqual(digest(message, 1000003, ConfiguredHash("sha1")), expected)

    def test_default_algorithm_is_sha256(self):
        self.assertEqual(ConfiguredHash().algorithm, "sha256")

    def test_large_modulus_keeps_full_digest(self):
        n = (2**127 - 1) * (2**521 - 1)
        message = b"document"
        expected = int.from_bytes(hashlib.sha256(message).digest(), "big")
        self.assertEqual(bind_hash(ConfiguredHash(), n).digest(message), expected)

    def test_unknown_algorithm_rejected(self):
        with self.assertRaises(ValueError):
            bind_hash(ConfiguredHash("no-such-hash"), 209)

    def test_variable_length_algorithm_rejected(self):
        with self.assertRaises(ValueError):
            bind_hash(ConfiguredHash("shake_128"), 209)

    def test_tiny_modulus_rejected(self):
        with self.assertRaises(ValueError):
            ModularHash("sha256", 1)


class TestDefaultFallback(unittest.TestCase):

    def test_md5_without_reduction(self):
        hf = bind_hash(DefaultFallback(), 209)
        self.assertIsInstance(hf, FallbackHash)
        message = b"hello"
        expected = int.from_bytes(hashlib.md5(message).digest(), "big")
        self.assertEqual(hf.digest(message), expected)
        # 128-bit digest, never reduced
        self.assertLess(hf.digest(message).bit_length(), 129)

    def test_independent_of_modulus(self):
        message = b"same"
        self.assertEqual(
            bind_hash(DefaultFallback(), 209).digest(message),
            bind_hash(DefaultFallback(), 2**521 - 1).digest(message),
        )


class TestBindHash(unittest.TestCase):

    def test_free_function_defaults_to_fallback(self):
        message = b"no selection"
        self.assertEqual(digest(message, 209), bind_hash(DefaultFallback(), 209).digest(message))
        self.assertEqual(digest(message, 209), int.from_bytes(hashlib.md5(message).digest(), "big"))

    def test_unknown_selection(self):
        with self.assertRaises(TypeError):
            bind_hash("sha256", 209)


if __name__ == "__main__":
    unittest.main()
