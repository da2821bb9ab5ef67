"""
Text helpers for embedded expressions.

The parser has no grammar for host-language expressions. Instead it matches a
few known shapes (iteration, guard, ternary) with regular expressions and
locates the interesting substrings by depth counting. These helpers work on
raw text only; re-parsing the substrings is left to the parser.
"""

import re
from typing import Optional, Tuple

ITERATION_PATTERN = re.compile(
    r"^(\w+(?:\.\w+)*)\.map\s*\(\s*\(?\s*(\w+)(?:\s*,\s*(\w+))?\s*\)?\s*=>\s*"
)
ITERATION_PREFIX = re.compile(r"^\w+(?:\.\w+)*\.map\s*\(")
GUARD_PATTERN = re.compile(r"^(.+?)\s*&&\s*")
TERNARY_PATTERN = re.compile(r"^([^?]+)\s*\?\s*")
RETURN_PATTERN = re.compile(r"\breturn\b\s*")

EMPTY_BRANCHES = ("null", "undefined", "")

OPENERS = "([{"
CLOSERS = ")]}"


def find_matching_paren(text: str, start: int) -> int:
    """
    Find the parenthesis closing the one at ``start``.

    Args:
        text: Text to scan
        start: Index of an opening ``(``

    Returns:
        Index of the matching ``)``, or -1 when unbalanced
    """
    depth = 0
    for index in range(start, len(text)):
        ch = text[index]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return index
    return -1


def find_matching_brace(text: str, start: int) -> int:
    """Index of the ``}`` closing the ``{`` at ``start``, or -1."""
    depth = 0
    for index in range(start, len(text)):
        ch = text[index]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return index
    return -1


def strip_outer_parens(text: str) -> str:
    """
    Remove one pair of parentheses when it spans the whole text.

    ``(a) && (b)`` is returned unchanged because the first group closes
    before the end.
    """
    text = text.strip()
    if not text.startswith("("):
        return text

    close = find_matching_paren(text, 0)
    if close == len(text) - 1:
        return text[1:-1].strip()
    return text


def find_ternary_colon(text: str) -> int:
    """
    Find the ``:`` separating consequent from alternate.

    ``text`` is everything after the leading ``condition ?``. Depth goes up on
    openers and on every nested ``?``, down only on closers, so the first
    colon at depth zero wins.

    Returns:
        Index of the colon, or -1 when none is found at depth zero
    """
    depth = 0
    for index, ch in enumerate(text):
        if ch in OPENERS or ch == "?":
            depth += 1
        elif ch in CLOSERS:
            depth -= 1
        elif ch == ":" and depth == 0:
            return index
    return -1


def split_ternary(raw: str) -> Optional[Tuple[str, str, str]]:
    """
    Split ``cond ? a : b`` into its three parts.

    Returns:
        (condition, consequent, alternate) with the branches still holding
        their original text (outer parens included), or None when the text is
        not a ternary
    """
    match = TERNARY_PATTERN.match(raw)
    if not match:
        return None

    rest = raw[match.end():]
    colon = find_ternary_colon(rest)
    if colon <= 0:
        return None

    return match.group(1).strip(), rest[:colon].strip(), rest[colon + 1:].strip()


def is_iteration_expression(text: str) -> bool:
    return bool(ITERATION_PREFIX.match(text.strip()))


def is_empty_branch(text: str) -> bool:
    return text.strip() in EMPTY_BRANCHES


def iteration_body(raw: str, match: "re.Match") -> Tuple[str, int]:
    """
    Locate the body of a ``coll.map(item => body)`` call.

    A parenthesized body yields its interior, a block body ``{ return x; }``
    yields the returned expression, anything else runs up to the parenthesis
    closing the ``map`` call.

    Args:
        raw: Whole expression text
        match: ITERATION_PATTERN match against ``raw``

    Returns:
        (body text, index of the body start in ``raw``)
    """
    start = match.end()
    while start < len(raw) and raw[start].isspace():
        start += 1

    if raw.startswith("(", start):
        close = find_matching_paren(raw, start)
        end = close if close != -1 else len(raw)
        return raw[start + 1:end], start + 1

    if raw.startswith("{", start):
        close = find_matching_brace(raw, start)
        block_end = close if close != -1 else len(raw)
        returned = RETURN_PATTERN.search(raw, start, block_end)
        if returned:
            body = raw[returned.end():block_end].strip().rstrip(";").strip()
            return strip_outer_parens(body), returned.end()
        return "", start

    call_paren = raw.index("(", len(match.group(1)))
    close = find_matching_paren(raw, call_paren)
    if close == -1:
        return raw[start:].rstrip(") \t\r\n"), start
    return raw[start:close].rstrip(), start


def line_of(raw: str, fragment: str, start: int, base_line: int) -> int:
    """Line of ``fragment`` inside ``raw``, searching from ``start``."""
    index = raw.find(fragment, start) if fragment else -1
    if index < 0:
        index = start
    return base_line + raw.count("\n", 0, index)
