"""Compare recorded fingerprints with the files currently on disk.

A generator uses this to tell files the user edited by hand (``modified``)
from files it can safely regenerate (``unchanged``).
"""

from __future__ import annotations

from dataclasses import dataclass

from .codec import CONFIG_ENTRY
from .fingerprint import digest_file
from .store import LedgerStore

STATUS_UNCHANGED = "unchanged"
STATUS_MODIFIED = "modified"
STATUS_MISSING = "missing"
STATUS_CONFIG = "config"


@dataclass(frozen=True)
class FileStatus:
    path: str
    state: str


def classify(store: LedgerStore, path: str) -> str:
    """Return the state of one tracked path; raises if it is not tracked."""
    recorded = store.get(path)
    if path == CONFIG_ENTRY:
        return STATUS_CONFIG
    target = store.root / path
    if not target.is_file():
        return STATUS_MISSING
    return STATUS_UNCHANGED if digest_file(target) == recorded else STATUS_MODIFIED


def collect_status(store: LedgerStore) -> list[FileStatus]:
    return [FileStatus(path, classify(store, path)) for path in store.paths()]
