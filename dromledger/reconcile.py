"""Flush a ledger store to disk and git.

``save`` is the only place that touches the filesystem on behalf of a
transaction. Steps run in a fixed order: queued writes, ledger file, git
staging, then the pending state is cleared.
"""

from __future__ import annotations

import logging
import os

from . import git
from .codec import CONFIG_ENTRY, LEDGER_FILENAME, format_ledger, write_ledger
from .fingerprint import digest_content
from .store import LedgerStore
from .version import VERSION

logger = logging.getLogger(__name__)


def _flush_writes(store: LedgerStore) -> None:
    for pending in store.files:
        target = store.root / pending.path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(pending.content)
        os.chmod(target, pending.perm)
        logger.debug("wrote %s (mode %o)", pending.path, pending.perm)
        if pending.record:
            store.update(pending.path, digest_content(pending.path, pending.content, pending.perm))


def _stage(store: LedgerStore) -> None:
    root = store.root
    # "." is the configuration fingerprint, not a file: it is never passed to
    # git, where it would stage the whole working tree.
    removed = sorted(path for path in store.to_remove if path != CONFIG_ENTRY and not (root / path).exists())
    if removed:
        git.stage_removals(root, removed)

    added = sorted(path for path in store.to_add if path != CONFIG_ENTRY and (root / path).exists())
    git.stage_additions(root, [LEDGER_FILENAME, *added])


def save(store: LedgerStore, git_enabled: bool = True, tool_version: str = VERSION) -> None:
    """Apply everything queued on ``store``; does nothing when unmodified.

    The ledger is rewritten with ``tool_version`` as its minimal version.
    Filesystem errors propagate and may leave the ledger partially written.
    """
    if not store.modified:
        return

    _flush_writes(store)

    write_ledger(store.root, format_ledger(store.hashes, tool_version, store.root))
    store.skel_version = tool_version

    if git_enabled and git.has_git_root(store.root):
        _stage(store)

    store.clear_pending()
