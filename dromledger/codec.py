"""Reading and writing the ``.drom`` ledger file.

The file is line oriented UTF-8 text. ``#`` lines and blank lines are
comments; ``version:<v>`` records the minimal tool version; every other line
is ``<hex digest>:<path>``. Very old ledgers used a space instead of the
colon, which is still accepted when reading.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from .errors import LedgerCorruptError
from .fingerprint import digest_from_hex, digest_to_hex

logger = logging.getLogger(__name__)

LEDGER_FILENAME = ".drom"
VERSION_KEY = "version"
CONFIG_ENTRY = "."


def _split_line(line: str) -> tuple[str, str] | None:
    if ":" in line:
        key, _sep, value = line.partition(":")
    elif " " in line:
        key, _sep, value = line.partition(" ")
    else:
        return None
    return key, value


def parse_ledger(data: bytes | str) -> tuple[dict[str, bytes], str | None]:
    """Decode ledger contents into ``(hashes, skeleton_version)``.

    Any line that is not a comment, a version line, or a digest entry raises
    ``LedgerCorruptError``; a partially understood ledger is never returned.
    The last ``version`` line wins. Bytes are decoded as UTF-8 line by line
    so an undecodable line is reported with its number.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    hashes: dict[str, bytes] = {}
    version: str | None = None
    for index, raw_line in enumerate(data.split(b"\n")):
        try:
            line = raw_line.decode("utf-8").rstrip("\r")
        except UnicodeDecodeError as exc:
            bad_line = raw_line.decode("utf-8", errors="replace").rstrip("\r")
            raise LedgerCorruptError(index + 1, bad_line, "invalid UTF-8") from exc
        if not line or line.startswith("#"):
            continue

        parts = _split_line(line)
        if parts is None:
            raise LedgerCorruptError(index + 1, line, "missing ':' separator")
        key, value = parts

        if key == VERSION_KEY:
            if not value.strip():
                raise LedgerCorruptError(index + 1, line, "empty version")
            version = value.strip()
            continue

        try:
            digest = digest_from_hex(key)
        except ValueError as exc:
            raise LedgerCorruptError(index + 1, line, str(exc)) from exc
        if not value:
            raise LedgerCorruptError(index + 1, line, "empty file name")
        hashes[value] = digest
    return hashes, version


def _entry_exists(root: Path, path: str) -> bool:
    return path == CONFIG_ENTRY or (root / path).exists()


def format_ledger(hashes: Mapping[str, bytes], version: str, root: Path) -> str:
    """Encode entries for writing, dropping paths no longer present under ``root``."""
    out: list[str] = [
        "# Keep this file in your GIT repo to help drom track generated files\n",
        "# begin version\n",
        f"{VERSION_KEY}:{version}\n",
        "# end version\n",
    ]
    for path in sorted(hashes):
        if not _entry_exists(root, path):
            logger.debug("dropping ledger entry for missing file %s", path)
            continue
        if path == CONFIG_ENTRY:
            out.append("\n# hash of toml configuration files\n")
            out.append("# used for generation of all files\n")
        else:
            out.append(f"\n# begin context for {path}\n")
            out.append(f"# file {path}\n")
        out.append(f"{digest_to_hex(hashes[path])}:{path}\n")
        out.append(f"# end context for {path}\n")
    return "".join(out)


def ledger_path(root: Path) -> Path:
    return root / LEDGER_FILENAME


def read_ledger(root: Path) -> tuple[dict[str, bytes], str | None]:
    """Load ``root/.drom``; a missing file yields no entries and no version."""
    path = ledger_path(root)
    if not path.exists():
        logger.debug("no ledger at %s", path)
        return {}, None
    hashes, version = parse_ledger(path.read_bytes())
    logger.debug("loaded %d ledger entries from %s", len(hashes), path)
    return hashes, version


def write_ledger(root: Path, text: str) -> None:
    path = ledger_path(root)
    path.write_text(text, encoding="utf-8", newline="\n")
    logger.debug("wrote ledger %s", path)
