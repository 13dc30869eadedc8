"""Markup dialects and their grammars.

Each supported platform renders inline formatting with its own dialect.
The grammars below are pure data: compiled patterns for every construct the
engine rewrites, plus the markers used when a dialect is the target.

GitHub and Bitbucket are close to standard markdown:
- Bold: **bold** or __bold__
- Italic: *italic* or _italic_
- Strikethrough: ~~text~~
- Headers: # Header
- Links: [text](url), images: ![text](url)

Slack mrkdwn differs in:
- Bold: *bold* (single asterisks)
- Strikethrough: ~text~ (single tilde)
- Links: <url|text> (angle-bracket syntax)
- Headers and images: no native support
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Pattern, Tuple

from ..utils.constants import DEFAULT_BITBUCKET_HOST, DEFAULT_GITHUB_HOST


class Dialect(str, Enum):
    """Supported markup dialects."""

    GITHUB = "github"
    BITBUCKET = "bitbucket"
    SLACK = "slack"


class DialectPair(Enum):
    """Supported translation directions."""

    GITHUB_TO_SLACK = (Dialect.GITHUB, Dialect.SLACK)
    SLACK_TO_GITHUB = (Dialect.SLACK, Dialect.GITHUB)
    BITBUCKET_TO_SLACK = (Dialect.BITBUCKET, Dialect.SLACK)
    SLACK_TO_BITBUCKET = (Dialect.SLACK, Dialect.BITBUCKET)

    @property
    def source(self) -> Dialect:
        return self.value[0]

    @property
    def target(self) -> Dialect:
        return self.value[1]

    @classmethod
    def between(cls, source: Dialect, target: Dialect) -> Optional["DialectPair"]:
        """Find the pair for a direction, or None if it is not supported."""
        for pair in cls:
            if pair.value == (source, target):
                return pair
        return None


@dataclass(frozen=True)
class MarkupText:
    """A string tagged with the dialect it is written in."""

    text: str
    dialect: Dialect

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class DialectGrammar:
    """Patterns and markers of a single dialect.

    Span patterns capture the inner text as group 1. Patterns that a dialect
    does not have are None (or empty tuples), and the transforms skip them.
    """

    dialect: Dialect
    bold_marker: str
    italic_marker: str
    strike_marker: str
    bold: Tuple[Pattern[str], ...]
    italic: Tuple[Pattern[str], ...]
    strike: Pattern[str]
    # Combined bold and italic, in every nesting order
    bold_italic: Tuple[Pattern[str], ...] = ()
    header: Optional[Pattern[str]] = None
    bullet: Optional[Pattern[str]] = None
    link: Optional[Pattern[str]] = None
    image: Optional[Pattern[str]] = None
    mention: Optional[Pattern[str]] = None
    default_host: str = ""
    hard_line_breaks: bool = False
    strips_html: bool = False

    @property
    def is_chat(self) -> bool:
        return self.dialect is Dialect.SLACK


# Markdown spans must open and close next to non-space characters and never
# cross a line break, otherwise "a * b * c" would turn into italics.
_MD_BOLD_ITALIC = (
    re.compile(r"\*\*\*(?=\S)(.+?)(?<=\S)\*\*\*"),
    re.compile(r"(?<!\w)___(?=\S)(.+?)(?<=\S)___(?!\w)"),
    re.compile(r"\*\*_(?=\S)([^_\n]+?)(?<=\S)_\*\*"),
    re.compile(r"__\*(?=\S)([^*\n]+?)(?<=\S)\*__"),
)
_MD_BOLD = (
    re.compile(r"\*\*(?=\S)(.+?)(?<=\S)\*\*"),
    re.compile(r"(?<!\w)__(?=\S)(.+?)(?<=\S)__(?!\w)"),
)
_MD_ITALIC = (re.compile(r"(?<![*\w])\*(?=[^\s*])([^*\n]+?)(?<=[^\s*])\*(?![*\w])"),)
_MD_STRIKE = re.compile(r"~~(?=\S)(.+?)(?<=\S)~~")
_MD_HEADER = re.compile(r"^(#+[ \t]+\S.*?)[ \t]*$", re.MULTILINE)

# Leading whitespace, one of the three bullet characters, then the item text.
_MD_BULLET = re.compile(r"^([ \t]*)([-*+])[ \t]+(?=\S)", re.MULTILINE)

# Bitbucket appends attribute blocks to links: [text](url){: data-inline-card='' }
_MD_LINK = re.compile(r"\[([^\]\n]*)\]\(([^)\s]+)(?:[ \t]+\"[^\"]*\")?\)")
_BB_LINK = re.compile(r"\[([^\]\n]*)\]\(([^)\s]+)(?:[ \t]+\"[^\"]*\")?\)(?:\{:[^}]*\})?")
_MD_IMAGE = re.compile(r"!" + _MD_LINK.pattern)
_BB_IMAGE = re.compile(r"!" + _BB_LINK.pattern)

# "@user" and "@org/team", but not e-mail addresses or URL path segments.
_GH_MENTION = re.compile(r"(?<![\w@/.])@([A-Za-z0-9][\w-]*(?:/[\w-]+)?)")
# "@{557058:0a1b2c3d-...}" (account ID) or a plain "@username".
_BB_MENTION = re.compile(r"(?<![\w@/.])@(\{[^}\s]+\}|[A-Za-z0-9][\w-]*)")

# Slack mrkdwn spans are delimited by non-alphanumeric characters, so that
# "_*both*_" is bold inside italic.
_SLACK_BOLD = (
    re.compile(r"(?<![*A-Za-z0-9])\*(?=\S)([^*\n]+?)(?<=\S)\*(?![*A-Za-z0-9])"),
)
_SLACK_BOLD_ITALIC = (
    re.compile(r"(?<![*A-Za-z0-9])\*_(?=\S)([^_\n]+?)(?<=\S)_\*(?![*A-Za-z0-9])"),
)
_SLACK_STRIKE = re.compile(r"(?<![~\w])~(?=\S)([^~\n]+?)(?<=\S)~(?![~\w])")
_SLACK_BULLET = re.compile(r"^([ \t]*)([•◦])[ \t]+", re.MULTILINE)
_SLACK_LINK = re.compile(r"<((?:https?|mailto):[^|<>\s]+)(?:\|([^<>]+))?>")
_SLACK_MENTION = re.compile(r"<([@#!])([^|<>]+)(?:\|([^<>]*))?>")


GITHUB = DialectGrammar(
    dialect=Dialect.GITHUB,
    bold_marker="**",
    italic_marker="_",
    strike_marker="~~",
    bold=_MD_BOLD,
    italic=_MD_ITALIC,
    strike=_MD_STRIKE,
    bold_italic=_MD_BOLD_ITALIC,
    header=_MD_HEADER,
    bullet=_MD_BULLET,
    link=_MD_LINK,
    image=_MD_IMAGE,
    mention=_GH_MENTION,
    default_host=DEFAULT_GITHUB_HOST,
    strips_html=True,
)

BITBUCKET = DialectGrammar(
    dialect=Dialect.BITBUCKET,
    bold_marker="**",
    italic_marker="_",
    strike_marker="~~",
    bold=_MD_BOLD,
    italic=_MD_ITALIC,
    strike=_MD_STRIKE,
    bold_italic=_MD_BOLD_ITALIC,
    header=_MD_HEADER,
    bullet=_MD_BULLET,
    link=_BB_LINK,
    image=_BB_IMAGE,
    mention=_BB_MENTION,
    default_host=DEFAULT_BITBUCKET_HOST,
    hard_line_breaks=True,
)

SLACK = DialectGrammar(
    dialect=Dialect.SLACK,
    bold_marker="*",
    italic_marker="_",
    strike_marker="~",
    bold=_SLACK_BOLD,
    bold_italic=_SLACK_BOLD_ITALIC,
    # Slack and markdown share "_" for italics, so there is nothing to rewrite
    italic=(),
    strike=_SLACK_STRIKE,
    bullet=_SLACK_BULLET,
    link=_SLACK_LINK,
    mention=_SLACK_MENTION,
)

GRAMMARS = {
    Dialect.GITHUB: GITHUB,
    Dialect.BITBUCKET: BITBUCKET,
    Dialect.SLACK: SLACK,
}


def grammar_for(dialect: Dialect) -> DialectGrammar:
    """Return the grammar of a dialect."""
    return GRAMMARS[dialect]
