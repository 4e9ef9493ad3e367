"""Content+permission fingerprints for generated files.

A fingerprint is the MD5 of the file content followed by ``.`` and the
decimal owner permission triad. Only the owner bits take part, so a file
whose group/other bits were changed by a umask still matches. Shell scripts
are hashed with carriage returns removed.
"""

from __future__ import annotations

import hashlib
import os
import string
from pathlib import Path

DIGEST_SIZE = 16
SHELL_SCRIPT_SUFFIX = ".sh"


def owner_permissions(perm: int) -> int:
    """Return the read/write/execute triad of the owning user."""
    return (perm >> 6) & 7


def perm_equal(left: int, right: int) -> bool:
    """Compare only the 3 user permission bits."""
    return owner_permissions(left) == owner_permissions(right)


def _as_bytes(content: bytes | str) -> bytes:
    if isinstance(content, str):
        return content.encode("utf-8")
    return bytes(content)


def digest_content(path: str | os.PathLike[str], content: bytes | str, perm: int = 0o644) -> bytes:
    data = _as_bytes(content)
    if os.fspath(path).endswith(SHELL_SCRIPT_SUFFIX):
        data = data.replace(b"\r", b"")
    digest = hashlib.md5(usedforsecurity=False)
    digest.update(data)
    digest.update(f".{owner_permissions(perm)}".encode("ascii"))
    return digest.digest()


def digest_file(path: str | os.PathLike[str]) -> bytes:
    """Fingerprint a file as it currently exists on disk.

    Permission bits come from ``lstat`` so a symlink is judged by its own
    mode, not its target's.
    """
    target = Path(path)
    content = target.read_bytes()
    perm = target.lstat().st_mode
    return digest_content(path, content, perm)


def digest_to_hex(digest: bytes) -> str:
    return digest.hex()


def digest_from_hex(text: str) -> bytes:
    """Decode a hex fingerprint, rejecting anything but 32 hex characters."""
    if len(text) != DIGEST_SIZE * 2 or any(ch not in string.hexdigits for ch in text):
        raise ValueError(f"invalid hex digest {text!r}")
    return bytes.fromhex(text)
