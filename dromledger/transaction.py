"""Load, gate, mutate, and save a ledger as one transaction.

``ledger_transaction`` is the context-manager form used by library code;
``with_ledger`` wraps a callable and, by default, turns fatal ledger errors
into a diagnostic on stderr and exit status 2.
"""

from __future__ import annotations

import contextlib
import logging
import os
import sys
from collections.abc import Callable, Iterator
from typing import TypeVar

from .errors import LedgerFatalError, VersionIncompatibleError
from .reconcile import save
from .store import LedgerStore, load_ledger
from .version import VERSION, compare_versions

logger = logging.getLogger(__name__)

T = TypeVar("T")


def check_skeleton_version(skel_version: str | None, tool_version: str = VERSION) -> None:
    """Refuse to touch a project last written by a newer tool."""
    if skel_version is None:
        return
    if compare_versions(skel_version, tool_version) > 0:
        raise VersionIncompatibleError(tool_version, skel_version)


@contextlib.contextmanager
def ledger_transaction(
    git: bool = True,
    root: str | os.PathLike[str] | None = None,
    tool_version: str = VERSION,
) -> Iterator[LedgerStore]:
    """Yield a loaded store and save it when the block exits.

    If the block raises, the store is still saved (with git staging) so that
    completed writes are not lost, then the original exception propagates.
    """
    store = load_ledger(root)
    check_skeleton_version(store.skel_version, tool_version)
    try:
        yield store
    except BaseException:
        logger.debug("transaction failed, saving partial ledger state")
        save(store, tool_version=tool_version)
        raise
    save(store, git_enabled=git, tool_version=tool_version)


def report_fatal(exc: LedgerFatalError) -> None:
    for line in exc.diagnostic_lines():
        print(line, file=sys.stderr)


def with_ledger(
    body: Callable[[LedgerStore], T],
    git: bool = True,
    root: str | os.PathLike[str] | None = None,
    tool_version: str = VERSION,
    exit_on_fatal: bool = True,
) -> T:
    """Run ``body`` against the project ledger and return its result.

    Corrupt ledgers and version mismatches end the process with status 2
    unless ``exit_on_fatal`` is false, in which case they are raised.
    """
    try:
        with ledger_transaction(git=git, root=root, tool_version=tool_version) as store:
            return body(store)
    except LedgerFatalError as exc:
        if not exit_on_fatal:
            raise
        report_fatal(exc)
        raise SystemExit(exc.exit_status) from exc
