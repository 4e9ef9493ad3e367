"""Git staging for files touched by a ledger save.

Only two commands are ever issued: a batched ``git rm`` for tracked files
that disappeared and a batched ``git add`` for the ledger plus written files.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Iterable
from pathlib import Path

from .errors import GitCommandError

logger = logging.getLogger(__name__)

GIT_MARKER = ".git"


def has_git_root(root: Path) -> bool:
    """Return whether ``root`` itself carries a git repository marker."""
    return (root / GIT_MARKER).exists()


def run_git(root: Path, args: list[str]) -> subprocess.CompletedProcess[str]:
    """Run ``git -C root <args>``, raising ``GitCommandError`` on failure."""
    logger.debug("git %s", " ".join(args))
    try:
        proc = subprocess.run(
            ["git", "-C", str(root), *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError as exc:
        raise GitCommandError(args, -1, str(exc)) from exc
    if proc.returncode != 0:
        raise GitCommandError(args, proc.returncode, proc.stderr)
    return proc


def stage_removals(root: Path, paths: Iterable[str]) -> None:
    run_git(root, ["rm", "-f", "-q", "--ignore-unmatch", "--", *paths])


def stage_additions(root: Path, paths: Iterable[str]) -> None:
    run_git(root, ["add", "--", *paths])
