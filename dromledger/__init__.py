"""Public package surface for dromledger.

Exports the transaction entry points used by code generators plus ``main``
for programmatic CLI invocation. Implementation lives in submodules.
"""

from __future__ import annotations

from .errors import (
    GitCommandError,
    LedgerCorruptError,
    LedgerEntryNotFound,
    LedgerError,
    LedgerFatalError,
    VersionIncompatibleError,
)
from .store import LEDGER_FILENAME, LedgerStore, load_ledger
from .transaction import ledger_transaction, with_ledger
from .version import VERSION


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = [
    "GitCommandError",
    "LEDGER_FILENAME",
    "LedgerCorruptError",
    "LedgerEntryNotFound",
    "LedgerError",
    "LedgerFatalError",
    "LedgerStore",
    "VERSION",
    "VersionIncompatibleError",
    "ledger_transaction",
    "load_ledger",
    "main",
    "with_ledger",
]
