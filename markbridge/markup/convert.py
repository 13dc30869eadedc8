"""Translation entry points, one per supported dialect pair.

Order of operations:
1. Extract fenced code blocks and inline code -> placeholders
2. Normalize whitespace
3. Extract URLs -> placeholders (markers in URL paths are not emphasis)
4. Normalize lists (before styles: "*" may be a bullet, not italic)
5. Convert styles (headers, bold, italic, strikethrough), restore URLs
6. Convert links, images and short references
7. Resolve mentions
8. Rename emoji aliases
9. Shorten hyperlinks if the Slack message is over budget
10. Restore code
"""

import re
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Tuple

import structlog

from .context import ConversionContext
from .dialects import SLACK, Dialect, DialectPair, MarkupText, grammar_for
from .emoji import normalize_emoji
from .links import (
    escape_angle_brackets,
    expand_references,
    markdown_links_to_slack,
    slack_links_to_markdown,
    unescape_slack_entities,
)
from .lists import (
    add_hard_line_breaks,
    markdown_lists_to_slack,
    normalize_whitespace,
    slack_lists_to_markdown,
)
from .mentions import MentionResolver
from .shorten import shorten_urls
from .styles import convert_styles
from .titles import linkify_title

logger = structlog.get_logger()

_FENCED_CODE = re.compile(r"```(.*?)```", re.DOTALL)
_INLINE_CODE = re.compile(r"`[^`\n]+`")
_FENCED_PLACEHOLDER = re.compile(r"\x00CODE\d+\x00")

# Trailing emphasis markers belong to the surrounding text: **https://x.com**
_URL = re.compile(r"(?:https?|mailto):[^\s<>|()\[\]]*[^\s<>|()\[\]*_~]")

_HTML_COMMENT = re.compile(r"<!--.*?-->", re.DOTALL)
_HTML_SUB = re.compile(r"<sub>.*?</sub>", re.DOTALL)
_EXTRA_BLANK_LINES = re.compile(r"\n{3,}")


class _Placeholders:
    """Keeps code and URLs out of reach of the rewriting passes."""

    def __init__(self) -> None:
        self._items: List[Tuple[str, str]] = []

    def _make(self, content: str, kind: str) -> str:
        key = f"\x00{kind}{len(self._items)}\x00"
        self._items.append((key, content))
        return key

    def protect(self, text: str, from_chat: bool = False) -> str:
        """Replace code with placeholders.

        Slack escapes "&", "<" and ">" even inside code, and its code blocks
        may share lines with text, so code coming from Slack is unescaped and
        fenced blocks are moved onto their own lines.
        """

        def _replace_fenced(m: re.Match) -> str:  # type: ignore[type-arg]
            if not from_chat:
                return self._make(m.group(0), "CODE")

            code = unescape_slack_entities(m.group(1)).strip("\n")
            before = "\n" if m.start() > 0 and text[m.start() - 1] != "\n" else ""
            after = "\n" if m.end() < len(text) and text[m.end()] != "\n" else ""
            return before + self._make(f"```\n{code}\n```", "CODE") + after

        text = _FENCED_CODE.sub(_replace_fenced, text)

        def _replace_inline(m: re.Match) -> str:  # type: ignore[type-arg]
            code = unescape_slack_entities(m.group(0)) if from_chat else m.group(0)
            return self._make(code, "PH")

        return _INLINE_CODE.sub(_replace_inline, text)

    def protect_urls(self, text: str) -> str:
        """Replace URLs with placeholders, so emphasis markers in paths survive."""
        return _URL.sub(lambda m: self._make(m.group(0), "URL"), text)

    def restore(self, text: str) -> str:
        for key, content in self._items:
            text = text.replace(key, content)
        return text


def strip_html(text: str) -> str:
    """Hide HTML comments and <sub> blocks, which GitHub does not display."""
    text, comments = _HTML_COMMENT.subn("", text)
    text, subs = _HTML_SUB.subn("", text)
    if comments or subs:
        text = _EXTRA_BLANK_LINES.sub("\n\n", text)
    return text


def _host_to_chat(text: str, pair: DialectPair, context: ConversionContext) -> str:
    source = grammar_for(pair.source)
    code = _Placeholders()

    text = code.protect(text)
    if source.strips_html:
        text = strip_html(text)
    text = normalize_whitespace(text, source)
    text = escape_angle_brackets(text)

    urls = _Placeholders()
    text = urls.protect_urls(text)
    text = markdown_lists_to_slack(text, source)
    text = convert_styles(text, source, SLACK)
    text = urls.restore(text)

    text = markdown_links_to_slack(text, source)
    text = expand_references(text, context.thread)
    text = MentionResolver(source, SLACK, context).convert(text)
    text = normalize_emoji(text, pair)

    # Shortened before code is restored, so links inside code are kept
    if context.max_length:
        text = shorten_urls(
            text,
            context.max_length,
            context.canonical_url,
            length=len(code.restore(text)),
        )
    return code.restore(text)


def _chat_to_host(text: str, pair: DialectPair, context: ConversionContext) -> str:
    target = grammar_for(pair.target)
    code = _Placeholders()

    text = code.protect(text, from_chat=True)
    text = normalize_whitespace(text, SLACK)

    urls = _Placeholders()
    text = urls.protect_urls(text)
    text = slack_lists_to_markdown(text, SLACK)
    text = convert_styles(text, SLACK, target)
    text = urls.restore(text)

    text = slack_links_to_markdown(text, SLACK)
    text = MentionResolver(SLACK, target, context).convert(text)
    text = unescape_slack_entities(text)
    text = normalize_emoji(text, pair)

    if target.hard_line_breaks:
        text = add_hard_line_breaks(text, skip=_FENCED_PLACEHOLDER)
    return code.restore(text)


def github_to_slack(text: str, context: Optional[ConversionContext] = None) -> str:
    """Convert a GitHub PR body or comment to Slack mrkdwn.

    Based on:
    - https://docs.github.com/en/get-started/writing-on-github
    - https://docs.slack.dev/messaging/formatting-message-text/
    """
    return _host_to_chat(text, DialectPair.GITHUB_TO_SLACK, context or ConversionContext())


def slack_to_github(text: str, context: Optional[ConversionContext] = None) -> str:
    """Convert a Slack message to GitHub markdown."""
    return _chat_to_host(text, DialectPair.SLACK_TO_GITHUB, context or ConversionContext())


def bitbucket_to_slack(text: str, context: Optional[ConversionContext] = None) -> str:
    """Convert a Bitbucket PR description or comment to Slack mrkdwn."""
    return _host_to_chat(text, DialectPair.BITBUCKET_TO_SLACK, context or ConversionContext())


def slack_to_bitbucket(text: str, context: Optional[ConversionContext] = None) -> str:
    """Convert a Slack message to Bitbucket markdown."""
    return _chat_to_host(text, DialectPair.SLACK_TO_BITBUCKET, context or ConversionContext())


_CONVERTERS: Dict[DialectPair, Callable[[str, Optional[ConversionContext]], str]] = {
    DialectPair.GITHUB_TO_SLACK: github_to_slack,
    DialectPair.SLACK_TO_GITHUB: slack_to_github,
    DialectPair.BITBUCKET_TO_SLACK: bitbucket_to_slack,
    DialectPair.SLACK_TO_BITBUCKET: slack_to_bitbucket,
}


def convert(
    text: str,
    pair: Optional[DialectPair] = None,
    context: Optional[ConversionContext] = None,
) -> str:
    """Convert text in the direction of ``pair`` (default: the context's pair)."""
    pair = pair or (context.pair if context else None)
    if pair is None:
        logger.warning("No dialect pair to convert with")
        return text
    return _CONVERTERS[pair](text, context)


def translate(
    markup: MarkupText, target: Dialect, context: Optional[ConversionContext] = None
) -> MarkupText:
    """Translate tagged text into another dialect.

    Unsupported directions (e.g. between the two source hosts) return the
    input unchanged.
    """
    if markup.dialect is target:
        return markup

    pair = DialectPair.between(markup.dialect, target)
    if pair is None:
        logger.warning(
            "Unsupported dialect pair",
            source=markup.dialect.value,
            target=target.value,
        )
        return markup

    context = replace(context, pair=pair) if context else ConversionContext(pair=pair)
    logger.debug("Translating markup", pair=pair.name, length=len(markup.text))
    return MarkupText(convert(markup.text, pair, context), target)


def convert_title(title: str, context: Optional[ConversionContext] = None) -> str:
    """Linkify a pull request title for Slack."""
    return linkify_title(title, context or ConversionContext())
