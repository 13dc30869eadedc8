"""Whitespace and bullet list normalization.

Slack has no list construct, so markdown lists are rendered with two fixed
visual markers, padded for readability in a fixed-width rendering context.
Only two nesting levels are recognized: no indentation (level 0) and 2-4
spaces (level 1). Deeper lists are left as they are.

This pass must run before the style pass: in markdown a line-leading "*" is a
bullet, not the opening of an italic span.
"""

import re
from typing import List, Optional, Pattern

from .dialects import DialectGrammar

LEVEL_0_MARKER = "  •   "
LEVEL_1_MARKER = "          ◦   "
MARKDOWN_BULLET = "- "
MARKDOWN_NESTED_BULLET = "    - "

_BLANK_LINE = re.compile(r"^[ \t]+$", re.MULTILINE)
_LEADING_TABS = re.compile(r"^\t+", re.MULTILINE)
_LIST_ITEM = re.compile(r"^[ \t]*(?:[-*+]|\d+[.)])[ \t]+\S")
_QUOTE = re.compile(r"^[ \t]*>")


def normalize_whitespace(text: str, grammar: DialectGrammar) -> str:
    """Remove editor artifacts that confuse list nesting detection.

    Line endings are unified, whitespace-only lines are emptied, leading
    tabs become four spaces each, and blank lines between two list items of
    the same list are dropped.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _BLANK_LINE.sub("", text)
    text = _LEADING_TABS.sub(lambda m: "    " * len(m.group(0)), text)

    if grammar.bullet is None:
        return text

    lines = text.split("\n")
    result: List[str] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if line == "" and result and grammar.bullet.match(result[-1]):
            j = i
            while j < len(lines) and lines[j] == "":
                j += 1
            if j < len(lines) and grammar.bullet.match(lines[j]):
                i = j
                continue
        result.append(line)
        i += 1

    return "\n".join(result)


def _indent_width(indent: str) -> int:
    return len(indent.expandtabs(4))


def _convert_block(block: List[str], bullet: Pattern[str]) -> List[str]:
    matches = [bullet.match(line) for line in block]
    widths = {_indent_width(m.group(1)) for m in matches if m}
    if len(widths) > 2 or any(w != 0 and not 2 <= w <= 4 for w in widths):
        return block

    converted = []
    for line, m in zip(block, matches):
        if m is None:
            converted.append(line)
            continue
        marker = LEVEL_0_MARKER if _indent_width(m.group(1)) == 0 else LEVEL_1_MARKER
        converted.append(marker + line[m.end() :])
    return converted


def markdown_lists_to_slack(text: str, grammar: DialectGrammar) -> str:
    """Render markdown bullet lists (up to two levels) with Slack-friendly markers."""
    if grammar.bullet is None:
        return text

    lines = text.split("\n")
    result: List[str] = []
    block: List[str] = []
    for line in lines:
        if grammar.bullet.match(line):
            block.append(line)
            continue
        if block:
            result.extend(_convert_block(block, grammar.bullet))
            block = []
        result.append(line)
    if block:
        result.extend(_convert_block(block, grammar.bullet))

    return "\n".join(result)


def slack_lists_to_markdown(text: str, grammar: DialectGrammar) -> str:
    """Turn Slack's rendered bullets back into markdown list items."""
    if grammar.bullet is None:
        return text

    def _replace(m: re.Match) -> str:  # type: ignore[type-arg]
        return MARKDOWN_BULLET if m.group(2) == "•" else MARKDOWN_NESTED_BULLET

    return grammar.bullet.sub(_replace, text)


def add_hard_line_breaks(text: str, skip: Optional[Pattern[str]] = None) -> str:
    """Make single newlines visible in renderers that need trailing spaces.

    Every non-blank line but the last ends with two spaces. A blank line
    separates list blocks from surrounding text, and ends quote blocks, so
    the next paragraph is not absorbed into them. Lines matching ``skip``
    (e.g. code placeholders) are left untouched.
    """
    lines = text.split("\n")
    result: List[str] = []
    for i, line in enumerate(lines):
        is_last = i == len(lines) - 1
        if is_last or not line.strip() or (skip is not None and skip.search(line)):
            result.append(line)
        else:
            result.append(line.rstrip() + "  ")

        if is_last:
            break
        following = lines[i + 1]
        if not line.strip() or not following.strip():
            continue

        list_boundary = bool(_LIST_ITEM.match(line)) != bool(_LIST_ITEM.match(following))
        quote_end = bool(_QUOTE.match(line)) and not _QUOTE.match(following)
        if list_boundary or quote_end:
            result.append("")

    return "\n".join(result)
