"""Tool version constant and field-wise version comparison.

Versions are compared the way Debian compares upstream versions: alternating
non-digit and digit runs, digits compared numerically, ``~`` sorting before
everything (including the end of the string) so ``1.0~beta`` < ``1.0``.
"""

from __future__ import annotations

VERSION = "0.9.0"


def _char_order(ch: str) -> int:
    """Sort weight of one character inside a non-digit run."""
    if ch == "~":
        return -1
    if ch.isalpha():
        return ord(ch)
    return ord(ch) + 256


def _compare_text(left: str, right: str) -> int:
    for index in range(max(len(left), len(right))):
        # A missing character weighs 0: above "~", below everything else.
        left_order = _char_order(left[index]) if index < len(left) else 0
        right_order = _char_order(right[index]) if index < len(right) else 0
        if left_order != right_order:
            return -1 if left_order < right_order else 1
    return 0


def _take_run(version: str, index: int, digits: bool) -> tuple[str, int]:
    end = index
    while end < len(version) and ("0" <= version[end] <= "9") == digits:
        end += 1
    return version[index:end], end


def compare_versions(left: str, right: str) -> int:
    """Return -1, 0 or 1 as ``left`` is older, equal or newer than ``right``."""
    left = left.strip()
    right = right.strip()
    left_index = right_index = 0
    while left_index < len(left) or right_index < len(right):
        left_text, left_index = _take_run(left, left_index, digits=False)
        right_text, right_index = _take_run(right, right_index, digits=False)
        result = _compare_text(left_text, right_text)
        if result:
            return result

        left_digits, left_index = _take_run(left, left_index, digits=True)
        right_digits, right_index = _take_run(right, right_index, digits=True)
        left_number = int(left_digits) if left_digits else 0
        right_number = int(right_digits) if right_digits else 0
        if left_number != right_number:
            return -1 if left_number < right_number else 1
    return 0
