"""Tests for the base64, hash and UUID helpers."""

import unittest
import uuid

from turbotools import MalformedInput
from turbotools.utilities import HASH_ALGORITHMS, b64_decode, b64_encode, generate_uuid, hash_digest


class TestBase64(unittest.TestCase):
    def test_encode(self):
        assert b64_encode(b"hello") == b"aGVsbG8="
        assert b64_encode(b"") == b""

    def test_decode(self):
        assert b64_decode(b"aGVsbG8=") == b"hello"

    def test_decode_ignores_surrounding_whitespace(self):
        assert b64_decode(b"  aGVsbG8=\n") == b"hello"

    def test_decode_rejects_garbage(self):
        for data in (b"aGVsbG8", b"a*bc", b"aGVs bG8="):
            with self.subTest(data=data):
                with self.assertRaises(MalformedInput) as ctx:
                    b64_decode(data)
                assert ctx.exception.code == "invalid-base64"


class TestHashDigest(unittest.TestCase):
    KNOWN = {
        ("md5", b"hello"): "5d41402abc4b2a76b9719d911017c592",
        ("sha1", b"hello"): "aaf4c61ddcc5e8a2dabede0f3b482cd9aea9434d",
        ("sha256", b"hello"): "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824",
        ("sha512", b"hello"): (
            "9b71d224bd62f3785d96d46ad3ea3d73319bfbc2890caadae2dff72519673ca7"
            "2323c3d99ba5c11d7c7acc6e14b8c5da0c4663475c2e5c3adef46f73bcdec043"
        ),
        ("blake3", b""): "af1349b9f5f9a1a6a0404dea36dcc9499bcb25c9adc112b7cc9a93cae41f3262",
    }

    def test_known_digests(self):
        for (algorithm, data), expected in self.KNOWN.items():
            with self.subTest(algorithm=algorithm):
                assert hash_digest(algorithm, data) == expected

    def test_every_algorithm_is_lower_hex(self):
        lengths = {"md5": 32, "sha1": 40, "sha256": 64, "sha512": 128, "blake3": 64}
        assert set(HASH_ALGORITHMS) == set(lengths)
        for algorithm, length in lengths.items():
            digest = hash_digest(algorithm, b"turbotools")
            assert len(digest) == length
            assert digest == digest.lower()
            int(digest, 16)

    def test_algorithm_name_is_case_insensitive(self):
        assert hash_digest("SHA256", b"hello") == hash_digest("sha256", b"hello")

    def test_unknown_algorithm(self):
        with self.assertRaises(ValueError):
            hash_digest("crc32", b"x")


class TestUuid(unittest.TestCase):
    def test_version_4(self):
        value = generate_uuid()
        assert isinstance(value, uuid.UUID)
        assert value.version == 4

    def test_unique(self):
        assert generate_uuid() != generate_uuid()


if __name__ == "__main__":
    unittest.main()
