"""CLI subcommand behavior tests.

Runs ``dromledger.cli.main`` against temporary project directories with git
staging and user config isolated.
"""

from __future__ import annotations

import io
import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from dromledger import cli
from dromledger.codec import parse_ledger
from dromledger.fingerprint import digest_content, digest_to_hex


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        (self.root / "a.txt").write_bytes(b"a")
        os.chmod(self.root / "a.txt", 0o644)
        (self.root / "b.txt").write_bytes(b"b")
        os.chmod(self.root / "b.txt", 0o644)
        ledger = (
            "version:0.1.0\n"
            f"{digest_to_hex(digest_content('a.txt', b'a'))}:a.txt\n"
            f"{digest_to_hex(digest_content('b.txt', b'original'))}:b.txt\n"
            f"{digest_to_hex(digest_content('.', b'cfg'))}:.\n"
        )
        (self.root / ".drom").write_text(ledger, encoding="utf-8")
        mock.patch("dromledger.cli.load_git_enabled", return_value=True).start()
        mock.patch("dromledger.cli.load_style", return_value="monokai").start()
        self.stage_additions = mock.patch("dromledger.git.stage_additions").start()
        mock.patch("dromledger.git.stage_removals").start()
        self.addCleanup(mock.patch.stopall)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _run(self, *args: str) -> tuple[int, str, str]:
        stdout = io.StringIO()
        stderr = io.StringIO()
        code = 0
        with mock.patch("sys.stdout", stdout), mock.patch("sys.stderr", stderr):
            try:
                cli.main(["--root", str(self.root), "--no-color", *args])
            except SystemExit as exc:
                code = exc.code if isinstance(exc.code, int) else 1
        return code, stdout.getvalue(), stderr.getvalue()

    def _hashes(self) -> dict[str, bytes]:
        return parse_ledger((self.root / ".drom").read_text(encoding="utf-8"))[0]

    def test_show_prints_ledger_text(self) -> None:
        code, out, _err = self._run("show")
        self.assertEqual(code, 0)
        self.assertEqual(out, (self.root / ".drom").read_text(encoding="utf-8"))

    def test_status_reports_each_tracked_path(self) -> None:
        code, out, _err = self._run("status")
        self.assertEqual(code, 1)
        self.assertEqual(out.splitlines(), ["[*] .", "[=] a.txt", "[M] b.txt"])

    def test_status_is_clean_when_nothing_changed(self) -> None:
        (self.root / "b.txt").write_bytes(b"original")
        code, _out, _err = self._run("status")
        self.assertEqual(code, 0)

    def test_forget_removes_entries(self) -> None:
        code, _out, _err = self._run("--no-git", "forget", "a.txt")
        self.assertEqual(code, 0)
        self.assertEqual(set(self._hashes()), {".", "b.txt"})
        self.stage_additions.assert_not_called()

    def test_forget_untracked_path_fails(self) -> None:
        code, _out, err = self._run("--no-git", "forget", "nope.txt")
        self.assertEqual(code, 1)
        self.assertIn("not tracked: nope.txt", err)

    def test_rename_moves_fingerprint(self) -> None:
        (self.root / "a.txt").rename(self.root / "c.txt")
        code, _out, _err = self._run("--no-git", "rename", "a.txt", "c.txt")
        self.assertEqual(code, 0)
        hashes = self._hashes()
        self.assertNotIn("a.txt", hashes)
        self.assertEqual(hashes["c.txt"], digest_content("a.txt", b"a"))

    def test_rename_untracked_path_fails(self) -> None:
        code, _out, err = self._run("rename", "nope.txt", "c.txt")
        self.assertEqual(code, 1)
        self.assertIn("nope.txt", err)

    def test_newer_ledger_version_exits_with_status_2(self) -> None:
        (self.root / ".drom").write_text("version:99.0.0\n", encoding="utf-8")
        code, _out, err = self._run("forget", "a.txt")
        self.assertEqual(code, 2)
        self.assertIn("Minimal version to update files: 99.0.0", err)

    def test_corrupt_ledger_status_exits_with_status_2(self) -> None:
        (self.root / ".drom").write_text("bogus\n", encoding="utf-8")
        code, _out, err = self._run("status")
        self.assertEqual(code, 2)
        self.assertIn("line 1", err)

    def test_missing_root_is_reported(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            cli.main(["--root", str(self.root / "missing"), "status"])
        self.assertIn("Path not found", str(ctx.exception.code))


    def test_show_replaces_undecodable_bytes(self) -> None:
        (self.root / ".drom").write_bytes(b"version:1.0\n# caf\xe9\n")
        code, out, _err = self._run("show")
        self.assertEqual(code, 0)
        self.assertEqual(out, "version:1.0\n# caf\ufffd\n")


class CliConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        self.config_path = self.root / "cfg" / "config.json"
        mock.patch("dromledger.config.CONFIG_PATH", self.config_path).start()
        self.addCleanup(mock.patch.stopall)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _run(self, *args: str) -> str:
        stdout = io.StringIO()
        with mock.patch("sys.stdout", stdout):
            cli.main(["--root", str(self.root), *args])
        return stdout.getvalue()

    def test_config_prints_defaults(self) -> None:
        self.assertEqual(self._run("config"), "git = on\nstyle = monokai\n")
        self.assertFalse(self.config_path.exists())

    def test_config_saves_git_and_style(self) -> None:
        out = self._run("config", "--git", "off", "--set-style", "native")

        self.assertEqual(out, "git = off\nstyle = native\n")
        self.assertEqual(json.loads(self.config_path.read_text(encoding="utf-8")), {"git": False, "style": "native"})

    def test_saved_git_default_disables_staging(self) -> None:
        self._run("config", "--git", "off")
        (self.root / ".git").mkdir()
        (self.root / "a.txt").write_bytes(b"a")
        (self.root / ".drom").write_text(f"{digest_to_hex(digest_content('a.txt', b'a'))}:a.txt\n", encoding="utf-8")
        with mock.patch("dromledger.git.stage_additions") as stage_additions, mock.patch(
            "dromledger.git.stage_removals"
        ) as stage_removals:
            self._run("forget", "a.txt")

        self.assertNotIn("a.txt", parse_ledger((self.root / ".drom").read_bytes())[0])
        stage_additions.assert_not_called()
        stage_removals.assert_not_called()


if __name__ == "__main__":
    unittest.main()
