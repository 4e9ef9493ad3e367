"""Exception taxonomy for ledger loading, gating, and reconciliation.

Fatal errors carry an ``exit_status`` so the outermost boundary can decide
whether to terminate the process or hand the exception to its caller.
"""

from __future__ import annotations

from collections.abc import Sequence


class LedgerError(Exception):
    """Base class for all ledger failures."""


class LedgerFatalError(LedgerError):
    """Unrecoverable configuration problem; the transaction cannot start."""

    exit_status = 2

    def diagnostic_lines(self) -> list[str]:
        return [f"Error: {self}"]


class LedgerCorruptError(LedgerFatalError):
    """A line of the ledger file could not be parsed."""

    def __init__(self, line_number: int, line: str, reason: str) -> None:
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(f"Error loading .drom at line {line_number}: {reason}")

    def diagnostic_lines(self) -> list[str]:
        return [str(self), f" on line: {self.line}"]


class VersionIncompatibleError(LedgerFatalError):
    """The ledger was last written by a newer tool than the running one."""

    def __init__(self, tool_version: str, required_version: str) -> None:
        self.tool_version = tool_version
        self.required_version = required_version
        super().__init__(
            f"cannot update project files with version {tool_version} "
            f"(minimal version {required_version})"
        )

    def diagnostic_lines(self) -> list[str]:
        return [
            "Error: you cannot update this project files:",
            f"  Your version: {self.tool_version}",
            f"  Minimal version to update files: {self.required_version}",
            "  (to force acceptance, update the version line in .drom file)",
        ]


class LedgerEntryNotFound(LedgerError, KeyError):
    """Lookup of a path that has no recorded fingerprint."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(path)

    def __str__(self) -> str:
        return f"no fingerprint recorded for {self.path!r}"


class GitCommandError(LedgerError):
    """A git staging command exited with a non-zero status."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.command = list(args)
        self.returncode = returncode
        self.stderr = stderr
        message = f"git {' '.join(self.command)} failed with exit status {returncode}"
        if stderr.strip():
            message += f": {stderr.strip()}"
        super().__init__(message)
