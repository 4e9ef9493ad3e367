"""Terminal rendering for ledger text and status listings.

Ledger files are highlighted with Pygments' properties lexer, which matches
the ``#`` comment and ``key:value`` shape of ``.drom`` lines.
"""

from __future__ import annotations

import re

from pygments import highlight as pygments_highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import PropertiesLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .config import DEFAULT_STYLE
from .status import STATUS_CONFIG, STATUS_MISSING, STATUS_MODIFIED, STATUS_UNCHANGED, FileStatus

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")

_STATUS_BADGES = {
    STATUS_UNCHANGED: ("=", "\033[38;5;42m"),
    STATUS_MODIFIED: ("M", "\033[38;5;214m"),
    STATUS_MISSING: ("!", "\033[38;5;203m"),
    STATUS_CONFIG: ("*", "\033[38;5;111m"),
}


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def _normalize_style(style: str) -> str:
    try:
        get_style_by_name(style)
    except ClassNotFound:
        return DEFAULT_STYLE
    return style


def render_ledger(text: str, colorize: bool = True, style: str = DEFAULT_STYLE) -> str:
    text = sanitize_terminal_text(text)
    if not colorize:
        return text
    formatter = TerminalFormatter(style=_normalize_style(style))
    return pygments_highlight(text, PropertiesLexer(), formatter)


def format_status_line(status: FileStatus, colorize: bool = True) -> str:
    badge, color = _STATUS_BADGES.get(status.state, ("?", ""))
    path = sanitize_terminal_text(status.path)
    if not colorize or not color:
        return f"[{badge}] {path}"
    return f"{color}[{badge}]\033[0m {path}"
