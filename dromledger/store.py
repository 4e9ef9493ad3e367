"""In-memory ledger state for one transaction.

``LedgerStore`` holds the recorded fingerprints plus everything queued for
the next save: file writes and the paths to stage in git. Mutators only
touch memory; ``dromledger.reconcile.save`` performs the side effects.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .codec import LEDGER_FILENAME, read_ledger
from .errors import LedgerEntryNotFound

logger = logging.getLogger(__name__)

__all__ = ["LEDGER_FILENAME", "LedgerStore", "PendingWrite", "load_ledger", "relative_key"]


def relative_key(path: str | os.PathLike[str]) -> str:
    """Normalize a project-relative path into its ledger key form."""
    text = os.fspath(path).replace(os.sep, "/")
    while text.startswith("./") and len(text) > 2:
        text = text[2:]
    return text


@dataclass(frozen=True)
class PendingWrite:
    """A file write queued until the next save."""

    record: bool
    path: str
    content: bytes
    perm: int


@dataclass
class LedgerStore:
    """Single-owner ledger aggregate for one load/mutate/save cycle.

    Queued writes are not reflected by ``get`` until a save flushes them.
    """

    root: Path
    hashes: dict[str, bytes] = field(default_factory=dict)
    files: list[PendingWrite] = field(default_factory=list)
    to_add: set[str] = field(default_factory=set)
    to_remove: set[str] = field(default_factory=set)
    modified: bool = False
    skel_version: str | None = None

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, os.PathLike)):
            return False
        return relative_key(path) in self.hashes

    def __len__(self) -> int:
        return len(self.hashes)

    def paths(self) -> list[str]:
        return sorted(self.hashes)

    def get(self, path: str | os.PathLike[str]) -> bytes:
        key = relative_key(path)
        try:
            return self.hashes[key]
        except KeyError:
            raise LedgerEntryNotFound(key) from None

    def write(
        self,
        path: str | os.PathLike[str],
        content: bytes | str,
        perm: int = 0o644,
        record: bool = True,
    ) -> None:
        """Queue ``content`` to be written to ``path`` with mode ``perm``.

        When ``record`` is true the fingerprint of the written file is stored
        during save.
        """
        if isinstance(content, str):
            content = content.encode("utf-8")
        self.files.append(PendingWrite(record, relative_key(path), bytes(content), perm))
        self.modified = True

    def update(self, path: str | os.PathLike[str], digest: bytes, git: bool = True) -> None:
        key = relative_key(path)
        self.hashes[key] = digest
        if git:
            self.to_add.add(key)
        self.modified = True

    def remove(self, path: str | os.PathLike[str]) -> None:
        key = relative_key(path)
        self.hashes.pop(key, None)
        self.to_remove.add(key)
        self.modified = True

    def rename(self, src: str | os.PathLike[str], dst: str | os.PathLike[str]) -> None:
        """Move a recorded fingerprint; renaming an untracked path does nothing."""
        try:
            digest = self.get(src)
        except LedgerEntryNotFound:
            return
        self.remove(src)
        self.update(dst, digest)

    def clear_pending(self) -> None:
        self.files.clear()
        self.to_add.clear()
        self.to_remove.clear()
        self.modified = False


def load_ledger(root: str | os.PathLike[str] | None = None) -> LedgerStore:
    """Build a store from ``root/.drom`` (the current directory by default)."""
    project_root = Path(root) if root is not None else Path.cwd()
    hashes, version = read_ledger(project_root)
    return LedgerStore(root=project_root, hashes=hashes, skel_version=version)
