"""Bold, italic, strikethrough and header rewriting.

Markdown and Slack reuse the same marker characters for different styles:
"*" is italic in markdown but bold in Slack. Bold and italic are therefore
rewritten in three ordered passes:

1. Bold spans (including combined bold+italic ones) are rewritten with a
   sentinel in place of the bold marker, which no later pass can match.
2. The remaining source italic spans are rewritten with the target marker.
3. The sentinel is replaced with the target bold marker.

Whichever marker the source used outermost, nested bold and italic end up
with the same canonical nesting in the target.
"""

import re
from typing import Callable

from .dialects import DialectGrammar

BOLD_SENTINEL = "\x00B\x00"


def _wrap(marker: str) -> Callable[[re.Match], str]:  # type: ignore[type-arg]
    def _replace(m: re.Match) -> str:  # type: ignore[type-arg]
        return f"{marker}{m.group(1)}{marker}"

    return _replace


def convert_headers(text: str, source: DialectGrammar, target: DialectGrammar) -> str:
    """Render header lines as bold lines when the target has no headers.

    The "#" run is kept as part of the text: "## Title" -> "*## Title*". The
    whole line is bold, so bold spans inside it are unwrapped.
    """
    if source.header is None or target.header is not None:
        return text

    def _replace(m: re.Match) -> str:  # type: ignore[type-arg]
        header = m.group(1)
        for pattern in source.bold_italic:
            header = pattern.sub(_wrap(source.italic_marker), header)
        for pattern in source.bold:
            header = pattern.sub(lambda inner: inner.group(1), header)
        return f"{BOLD_SENTINEL}{header}{BOLD_SENTINEL}"

    return source.header.sub(_replace, text)


def convert_bold_italic(text: str, source: DialectGrammar, target: DialectGrammar) -> str:
    """Apply the three bold/italic passes described in the module docstring."""
    # 1. Bold (and bold+italic, in either nesting) -> sentinel
    italic = target.italic_marker
    for pattern in source.bold_italic:
        text = pattern.sub(
            lambda m: f"{italic}{BOLD_SENTINEL}{m.group(1)}{BOLD_SENTINEL}{italic}",
            text,
        )
    for pattern in source.bold:
        text = pattern.sub(_wrap(BOLD_SENTINEL), text)

    # 2. Italic -> target italic
    for pattern in source.italic:
        text = pattern.sub(_wrap(target.italic_marker), text)

    # 3. Sentinel -> target bold
    return text.replace(BOLD_SENTINEL, target.bold_marker)


def convert_strikethrough(text: str, source: DialectGrammar, target: DialectGrammar) -> str:
    if source.strike_marker == target.strike_marker:
        return text
    return source.strike.sub(_wrap(target.strike_marker), text)


def convert_styles(text: str, source: DialectGrammar, target: DialectGrammar) -> str:
    """Rewrite all emphasis from one dialect to another.

    Unmatched or partial markers are left as literal text.
    """
    text = convert_headers(text, source, target)
    text = convert_bold_italic(text, source, target)
    return convert_strikethrough(text, source, target)
