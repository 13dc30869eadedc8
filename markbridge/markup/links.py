"""Links, images and short thread references.

Markdown links and images become Slack's angle-bracket hyperlinks, and vice
versa. Short references to other pull requests ("#9", "repo#9",
"owner/repo#9") are expanded relative to the current thread's URL.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional

from .context import ThreadURL
from .dialects import DialectGrammar

IMAGE_PREFIX = "Image: "

# Hyperlinks and mentions that were already rendered for Slack
SLACK_TOKEN_PATTERN = re.compile(r"<[^<>\n]*>")

# "[[owner/]repo]#123" but not "&#39;" or URL fragments like "/page#12"
REFERENCE_PATTERN = re.compile(r"(?<![\w/&#])(?:(?:([\w-]+)/)?([\w-]+))?#(\d+)\b")

# A "<" that does not open a markdown autolink would be parsed by Slack
_UNSAFE_ANGLE_BRACKET = re.compile(r"<(?!(?:https?|mailto):[^<>\s]+>)")

# "[text](url)" typed verbatim in Slack must not become a link in markdown
_LITERAL_MARKDOWN_LINK = re.compile(r"(?<!\\)\[([^\]\n]*)\]\(")


@dataclass(frozen=True)
class Reference:
    """A short pointer to another thread, optionally qualified."""

    owner: Optional[str]
    repo: Optional[str]
    number: str

    @classmethod
    def from_match(cls, m: re.Match) -> "Reference":  # type: ignore[type-arg]
        return cls(owner=m.group(1), repo=m.group(2), number=m.group(3))

    def url(self, thread: ThreadURL) -> str:
        """Resolve relative to a thread: missing parts are inherited from it."""
        return thread.link(self.owner or thread.owner, self.repo or thread.repo, self.number)


def outside_slack_tokens(text: str, transform: Callable[[str], str]) -> str:
    """Apply a transform only to text that is not inside a "<...>" token."""
    parts = []
    last = 0
    for m in SLACK_TOKEN_PATTERN.finditer(text):
        parts.append(transform(text[last : m.start()]))
        parts.append(m.group(0))
        last = m.end()
    parts.append(transform(text[last:]))
    return "".join(parts)


def slack_link(url: str, label: str = "") -> str:
    if not label or label == url:
        return f"<{url}>"
    return f"<{url}|{label}>"


def markdown_link(url: str, label: str = "") -> str:
    return f"[{label or url}]({url})"


def escape_angle_brackets(text: str) -> str:
    """Escape "<" so Slack does not treat literal text as a control sequence."""
    return _UNSAFE_ANGLE_BRACKET.sub("&lt;", text)


def unescape_slack_entities(text: str) -> str:
    """Undo the three HTML entities Slack uses in message text."""
    return text.replace("&lt;", "<").replace("&gt;", ">").replace("&amp;", "&")


def markdown_links_to_slack(text: str, grammar: DialectGrammar) -> str:
    """Convert "[text](url)" to "<url|text>" and images to "Image: <url|text>".

    Trailing attribute blocks ("{: ... }") are dropped with the link.
    """
    if grammar.image is not None:
        text = grammar.image.sub(
            lambda m: IMAGE_PREFIX + slack_link(m.group(2), m.group(1)), text
        )
    if grammar.link is not None:
        text = grammar.link.sub(lambda m: slack_link(m.group(2), m.group(1)), text)
    return text


def slack_links_to_markdown(text: str, grammar: DialectGrammar) -> str:
    """Convert "<url|text>" and "<url>" to "[text](url)".

    Markdown link syntax that was typed literally is escaped first.
    """
    text = _LITERAL_MARKDOWN_LINK.sub(r"\\[\1](", text)
    if grammar.link is not None:
        text = grammar.link.sub(lambda m: markdown_link(m.group(1), m.group(2)), text)
    return text


def expand_references(text: str, thread: Optional[ThreadURL]) -> str:
    """Turn "#123" (and qualified forms) into links to the referenced thread.

    Without a well-formed thread URL there is nothing to resolve against, and
    the text is returned unchanged. Existing "<...>" tokens are not touched.
    """
    if thread is None:
        return text

    def _replace(m: re.Match) -> str:  # type: ignore[type-arg]
        ref = Reference.from_match(m)
        return slack_link(ref.url(thread), m.group(0))

    return outside_slack_tokens(text, lambda segment: REFERENCE_PATTERN.sub(_replace, segment))
