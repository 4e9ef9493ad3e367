"""Command-line front door for dromledger.

Inspects and adjusts the ``.drom`` ledger of a generated project. Mutating
subcommands run inside a ledger transaction so git staging and the version
gate behave exactly as they do for the generator.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .codec import ledger_path
from .config import load_git_enabled, load_style, save_git_enabled, save_style
from .errors import LedgerEntryNotFound, LedgerFatalError
from .highlight import format_status_line, render_ledger
from .status import STATUS_MISSING, STATUS_MODIFIED, collect_status
from .store import LedgerStore, load_ledger
from .transaction import report_fatal, with_ledger
from .version import VERSION


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dromledger",
        description="Inspect and maintain the .drom file tracking generated project files.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("--root", default=None, help="Project directory. Defaults to current directory.")
    parser.add_argument("--no-git", action="store_true", help="Do not stage changes in git.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument("--style", default=None, help="Pygments style name used by 'show'.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log ledger operations to stderr.")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("show", help="Print the ledger file.")
    subparsers.add_parser("status", help="Compare recorded fingerprints with files on disk.")
    forget = subparsers.add_parser("forget", help="Stop tracking files.")
    forget.add_argument("paths", nargs="+")
    rename = subparsers.add_parser("rename", help="Move a recorded fingerprint to a new path.")
    rename.add_argument("src")
    rename.add_argument("dst")
    config = subparsers.add_parser("config", help="Show or change saved defaults.")
    config.add_argument("--git", choices=["on", "off"], default=None, help="Stage changes in git by default.")
    config.add_argument("--set-style", metavar="NAME", default=None, help="Default Pygments style for 'show'.")
    return parser


def _show(root: Path, colorize: bool, style: str) -> int:
    path = ledger_path(root)
    if not path.exists():
        raise SystemExit(f"No ledger found: {path}")
    sys.stdout.write(render_ledger(path.read_bytes().decode("utf-8", errors="replace"), colorize, style))
    return 0


def _status(store: LedgerStore, colorize: bool) -> int:
    statuses = collect_status(store)
    for status in statuses:
        sys.stdout.write(format_status_line(status, colorize) + "\n")
    changed = any(status.state in {STATUS_MODIFIED, STATUS_MISSING} for status in statuses)
    return 1 if changed else 0


def _config(git: str | None, style: str | None) -> int:
    if git is not None:
        save_git_enabled(git == "on")
    if style is not None:
        save_style(style)
    sys.stdout.write(f"git = {'on' if load_git_enabled() else 'off'}\n")
    sys.stdout.write(f"style = {load_style()}\n")
    return 0


def _forget(store: LedgerStore, paths: list[str]) -> int:
    missing = 0
    for path in paths:
        if path not in store:
            print(f"not tracked: {path}", file=sys.stderr)
            missing += 1
            continue
        store.remove(path)
    return 1 if missing else 0


def _rename(store: LedgerStore, src: str, dst: str) -> int:
    try:
        store.get(src)
    except LedgerEntryNotFound as exc:
        print(exc, file=sys.stderr)
        return 1
    store.rename(src, dst)
    return 0


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run one subcommand.

    Exits with status 2 on a corrupt ledger or a ledger written by a newer
    version, and 1 when ``status`` finds changed files or a path is untracked.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    root = Path(args.root) if args.root is not None else Path.cwd()
    if not root.is_dir():
        raise SystemExit(f"Path not found: {root}")
    colorize = not args.no_color and sys.stdout.isatty()
    git_enabled = load_git_enabled() and not args.no_git

    if args.command == "show":
        code = _show(root, colorize, args.style or load_style())
    elif args.command == "config":
        code = _config(args.git, args.set_style)
    elif args.command == "status":
        try:
            store = load_ledger(root)
        except LedgerFatalError as exc:
            report_fatal(exc)
            raise SystemExit(exc.exit_status) from exc
        code = _status(store, colorize)
    elif args.command == "forget":
        code = with_ledger(lambda store: _forget(store, args.paths), git=git_enabled, root=root)
    else:
        code = with_ledger(lambda store: _rename(store, args.src, args.dst), git=git_enabled, root=root)

    if code:
        raise SystemExit(code)


if __name__ == "__main__":
    main()
