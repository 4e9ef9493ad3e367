"""Tests for content+permission fingerprints."""

from __future__ import annotations

import hashlib
import os
import tempfile
import unittest
from pathlib import Path

from dromledger.fingerprint import (
    digest_content,
    digest_file,
    digest_from_hex,
    digest_to_hex,
    owner_permissions,
    perm_equal,
)


class DigestContentTests(unittest.TestCase):
    def test_digest_is_md5_of_content_dot_owner_triad(self) -> None:
        expected = hashlib.md5(b"hello\n.6").digest()
        self.assertEqual(digest_content("README.md", b"hello\n", 0o644), expected)
        self.assertEqual(len(expected), 16)

    def test_repeated_calls_are_identical(self) -> None:
        first = digest_content("a.txt", b"same", 0o600)
        second = digest_content("a.txt", b"same", 0o600)
        self.assertEqual(first, second)

    def test_group_and_other_bits_do_not_change_digest(self) -> None:
        base = digest_content("a.txt", b"data", 0o600)
        for perm in (0o644, 0o666, 0o677, 0o100640, 0o40600):
            self.assertEqual(digest_content("a.txt", b"data", perm), base, oct(perm))

    def test_owner_exec_bit_changes_digest(self) -> None:
        self.assertNotEqual(
            digest_content("run", b"data", 0o644),
            digest_content("run", b"data", 0o744),
        )

    def test_shell_scripts_ignore_carriage_returns(self) -> None:
        self.assertEqual(
            digest_content("build.sh", b"echo hi\r\n\r", 0o755),
            digest_content("build.sh", b"echo hi\n", 0o755),
        )

    def test_other_files_keep_carriage_returns(self) -> None:
        self.assertNotEqual(
            digest_content("notes.txt", b"echo hi\r\n", 0o644),
            digest_content("notes.txt", b"echo hi\n", 0o644),
        )

    def test_str_content_is_hashed_as_utf8(self) -> None:
        self.assertEqual(
            digest_content("a.txt", "café", 0o644),
            digest_content("a.txt", "café".encode("utf-8"), 0o644),
        )

    def test_default_permission_is_0644(self) -> None:
        self.assertEqual(digest_content("a.txt", b"x"), digest_content("a.txt", b"x", 0o644))


class PermissionTests(unittest.TestCase):
    def test_owner_permissions_extracts_bits_6_to_8(self) -> None:
        self.assertEqual(owner_permissions(0o100755), 7)
        self.assertEqual(owner_permissions(0o640), 6)

    def test_perm_equal_compares_only_owner_triad(self) -> None:
        self.assertTrue(perm_equal(0o644, 0o600))
        self.assertTrue(perm_equal(0o100755, 0o700))
        self.assertFalse(perm_equal(0o644, 0o744))


class DigestFileTests(unittest.TestCase):
    def test_digest_file_uses_content_and_mode_on_disk(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "tool.sh"
            target.write_bytes(b"echo hi\r\n")
            os.chmod(target, 0o755)

            self.assertEqual(digest_file(target), digest_content("tool.sh", b"echo hi\n", 0o755))

            os.chmod(target, 0o644)
            self.assertEqual(digest_file(target), digest_content("tool.sh", b"echo hi\n", 0o644))


class HexTests(unittest.TestCase):
    def test_hex_helpers_accept_32_hex_characters(self) -> None:
        digest = digest_content("a", b"a")
        text = digest_to_hex(digest)
        self.assertEqual(len(text), 32)
        self.assertEqual(digest_from_hex(text), digest)
        self.assertEqual(digest_from_hex(text.upper()), digest)

    def test_digest_from_hex_rejects_bad_input(self) -> None:
        for text in ("", "abc", "zz" * 16, "ab " * 10 + "ab", "0" * 34):
            with self.assertRaises(ValueError, msg=text):
                digest_from_hex(text)


if __name__ == "__main__":
    unittest.main()
